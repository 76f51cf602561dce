"""--debug grammar tree dump to stderr."""

from __future__ import annotations

import sys
from typing import TextIO

from lpubmeta.meta import Meta
from lpubmeta.nodes import Branch, Leaf, Node


def dump_tree(meta: Meta, *, file: TextIO = sys.stderr) -> None:
    """Print every keyword with its current value and where it was set."""
    _dump_branch(meta.root, 0, file)


def _indent(depth: int) -> str:
    return "  " * depth


def _dump_branch(branch: Branch, depth: int, f: TextIO) -> None:
    for key in sorted(k for k in branch.children if isinstance(k, str)):
        _dump_node(key, branch.children[key], depth, f)


def _dump_node(key: str, node: Node, depth: int, f: TextIO) -> None:
    if isinstance(node, Branch):
        f.write(f"{_indent(depth)}{key}\n")
        _dump_branch(node, depth + 1, f)
    elif isinstance(node, Leaf):
        _dump_leaf(key, node, depth, f)


def _dump_leaf(key: str, leaf: Leaf, depth: int, f: TextIO) -> None:
    value = leaf.format_value(leaf.value())
    where = leaf.here()
    f.write(f"{_indent(depth)}{key}")
    if value:
        f.write(f" = {value}")
    if where.line:
        f.write(f"  [{where}]")
    if leaf.scope.pushed:
        f.write("  (local)")
    f.write("\n")
