"""Shared test fixtures and helpers."""

from __future__ import annotations

import pytest

from lpubmeta.errors import Diagnostic
from lpubmeta.meta import Meta
from lpubmeta.nodes import Leaf
from lpubmeta.tokens import Rc, Where

WHERE = Where("test.ldr", 1)


@pytest.fixture
def reported() -> list[Diagnostic]:
    return []


@pytest.fixture
def meta(reported: list[Diagnostic]) -> Meta:
    """A fresh interpreter whose diagnostics land in ``reported``."""
    return Meta(reporter=reported.append)


@pytest.fixture
def parse(meta: Meta):
    """Return a helper that runs one line through the shared Meta."""

    def _parse(line: str, lineno: int = 1, report_errors: bool = False) -> Rc:
        return meta.parse(line, Where("test.ldr", lineno), report_errors)

    return _parse


@pytest.fixture
def value(meta: Meta):
    """Return a helper that reads the effective value at a keyword path."""

    def _value(path: str):
        return meta.leaf(path).value()

    return _value


def attached(leaf: Leaf, preamble: str = "0 TEST ") -> Leaf:
    """Give a standalone leaf a preamble so it can format and report."""
    leaf.attach(preamble)
    return leaf


def snapshot(meta: Meta) -> dict[tuple[str, ...], tuple]:
    """Global value, local value and scope of every leaf."""
    return {
        path: (leaf.global_value(), leaf.value(), leaf.scope.pushed, leaf.scope.is_global)
        for path, leaf in meta.walk()
    }
