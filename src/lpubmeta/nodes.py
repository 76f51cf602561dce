"""Grammar tree nodes: branches dispatch on keywords, leaves hold values.

A leaf keeps two value slots. Slot 0 is the global value that persists for
the whole traversal; slot 1 is the local value written while the leaf is
marked ``LOCAL`` and discarded by ``pop()``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterator
from dataclasses import dataclass
from typing import Generic, NoReturn, TypeVar, cast

from lpubmeta.errors import DirectiveError, GrammarError
from lpubmeta.placement import TOKEN_MAP, ScopeKeyword
from lpubmeta.tokens import Rc, Where

V = TypeVar("V")
N = TypeVar("N", bound="Node")

# A child key is a keyword, or a closed set of keywords that the child
# accepts as its own first argument.
Key = str | frozenset[str]


@dataclass(slots=True)
class Scope:
    pushed: bool = False
    is_global: bool = False


def key_text(key: Key) -> str:
    if isinstance(key, str):
        return key
    return "(" + "|".join(sorted(key)) + ")"


def _scope_keyword(token: str) -> ScopeKeyword | None:
    kw = TOKEN_MAP.get(token)
    return kw if isinstance(kw, ScopeKeyword) else None


def _descend(node: Node, scope: Scope, tokens: list[str], index: int, where: Where) -> Rc:
    """Parse into node with scope added to its own; a rejected line keeps node's scope."""
    saved = Scope(node.scope.pushed, node.scope.is_global)
    if scope.pushed:
        node.scope.pushed = True
    if scope.is_global:
        node.scope.is_global = True
    try:
        return node.parse(tokens, index, where)
    except DirectiveError:
        node.scope = saved
        raise


class Node(ABC):
    """Base for every grammar tree node."""

    def __init__(self) -> None:
        self.preamble = ""
        self.scope = Scope()

    @property
    def keyword(self) -> str:
        """Keyword path without the line-type prefix, e.g. ``!LPUB PAGE SIZE``."""
        return self.preamble.strip().removeprefix("0").strip()

    def attach(self, preamble: str) -> None:
        self.preamble = preamble

    @abstractmethod
    def parse(self, tokens: list[str], index: int, where: Where) -> Rc:
        """Consume tokens from index on and return the action code."""

    @abstractmethod
    def preamble_match(self, tokens: list[str], index: int) -> str | None:
        pass

    @abstractmethod
    def pop(self) -> None:
        """Drop local values and scope flags."""

    @abstractmethod
    def doc(self, out: list[str], preamble: str) -> None:
        pass


class Branch(Node):
    """Keyword-keyed interior node.

    With ``lenient`` set, an unrecognized sub-keyword is accepted as a no-op
    instead of being rejected.
    """

    def __init__(self, lenient: bool = False) -> None:
        super().__init__()
        self.children: dict[Key, Node] = {}
        self.lenient = lenient

    def attach(self, preamble: str) -> None:
        self.preamble = preamble
        for key, child in self.children.items():
            if isinstance(key, str):
                child.attach(preamble + key + " ")

    def add(self, key: Key, node: N) -> N:
        if key in self.children:
            raise GrammarError(f"duplicate keyword {key_text(key)} under {self.keyword!r}")
        if isinstance(key, str):
            node.attach(self.preamble + key + " ")
        elif not node.preamble:
            node.attach(self.preamble + key_text(key) + " ")
        self.children[key] = node
        return node

    def branch(self, name: str, lenient: bool = False) -> Branch:
        return self.add(name, Branch(lenient))

    def __getitem__(self, key: str) -> Node:
        return self.children[key]

    def find(self, path: str) -> Node:
        """Return the node at a space-separated keyword path."""
        node: Node = self
        for part in path.split():
            if not isinstance(node, Branch):
                raise KeyError(path)
            node = node.children[part]
        return node

    def walk(self, prefix: tuple[str, ...] = ()) -> Iterator[tuple[tuple[str, ...], Leaf]]:
        """Yield (keyword path, leaf) for every leaf, in keyword order."""
        for key in sorted(k for k in self.children if isinstance(k, str)):
            child = self.children[key]
            path = prefix + (key,)
            if isinstance(child, Branch):
                yield from child.walk(path)
            elif isinstance(child, Leaf):
                yield path, child

    # -- dispatch -----------------------------------------------------------

    def parse(self, tokens: list[str], index: int, where: Where) -> Rc:
        inherited = self.scope
        self.scope = Scope()
        size = len(tokens)

        if index >= size:
            raise DirectiveError(f"incomplete directive, expected a keyword after {self.keyword}")

        child = self.children.get(tokens[index])
        if child is not None:
            offset = 1
            scope = Scope(inherited.pushed, inherited.is_global)
            if size - index > 1:
                kw = _scope_keyword(tokens[index + 1])
                if kw is ScopeKeyword.LOCAL:
                    scope.pushed = True
                    offset += 1
                elif kw is ScopeKeyword.GLOBAL:
                    scope.is_global = True
                    offset += 1
                if index + offset >= size:
                    raise DirectiveError(f"missing arguments after {tokens[index + 1]}")
            return _descend(child, scope, tokens, index + offset, where)

        offset = 0
        scope = Scope(inherited.pushed, inherited.is_global)
        if size - index > 1:
            kw = _scope_keyword(tokens[index])
            if kw is ScopeKeyword.LOCAL:
                scope.pushed = True
                offset = 1
            elif kw is ScopeKeyword.GLOBAL:
                scope.is_global = True
                offset = 1
        token = tokens[index + offset]
        for key, node in self.children.items():
            if isinstance(key, frozenset):
                if token in key:
                    return _descend(node, scope, tokens, index + offset, where)
            elif offset and token == key:
                return _descend(node, scope, tokens, index + offset + 1, where)

        if self.lenient:
            return Rc.OK
        raise DirectiveError(f"unrecognized keyword {tokens[index]!r} after {self.keyword}")

    def preamble_match(self, tokens: list[str], index: int) -> str | None:
        if index >= len(tokens):
            return None
        child = self.children.get(tokens[index])
        if child is None:
            return None
        return child.preamble_match(tokens, index + 1)

    def pop(self) -> None:
        self.scope = Scope()
        for child in self.children.values():
            child.pop()

    def doc(self, out: list[str], preamble: str) -> None:
        for key in sorted(self.children, key=key_text):
            if isinstance(key, frozenset):
                # The matched keyword is the child's own argument
                out.append(f"{preamble} [LOCAL|GLOBAL] {key_text(key)}")
            else:
                self.children[key].doc(out, f"{preamble} {key}")


class Leaf(Node, Generic[V]):
    """Typed value cell with a global and a local slot.

    Subclasses implement ``parse`` (validate everything, then ``commit``) and
    ``format_value``; ``arg_doc`` describes the argument grammar.
    """

    arg_doc = ""

    def __init__(self, default: V, rc: Rc = Rc.OK) -> None:
        super().__init__()
        self.rc = rc
        self._values: list[V | None] = [default, None]
        self._wheres: list[Where] = [Where(), Where()]

    def _local_active(self) -> bool:
        return self.scope.pushed and self._values[1] is not None

    def value(self) -> V:
        """The effective value: local while pushed and set, else global."""
        value = self._values[1] if self._local_active() else self._values[0]
        return cast(V, value)

    def global_value(self) -> V:
        return cast(V, self._values[0])

    def here(self) -> Where:
        """Where the effective value was last set."""
        return self._wheres[1] if self._local_active() else self._wheres[0]

    def commit(self, value: V, where: Where) -> None:
        """Store value for the current line.

        ``GLOBAL`` writes the global slot even on a leaf marked ``LOCAL``,
        and applies to this line only.
        """
        slot = 1 if self.scope.pushed and not self.scope.is_global else 0
        self._values[slot] = value
        self._wheres[slot] = where
        self.scope.is_global = False

    def pop(self) -> None:
        self._values[1] = None
        self._wheres[1] = Where()
        self.scope = Scope()

    def preamble_match(self, tokens: list[str], index: int) -> str | None:
        return self.preamble

    def format(self, local: bool = False, global_: bool = False) -> str:
        """Directive text that re-parses to the current value."""
        scope = "LOCAL " if local else "GLOBAL " if global_ else ""
        return f"{self.preamble}{scope}{self.format_value(self.value())}".rstrip()

    @abstractmethod
    def format_value(self, value: V) -> str:
        pass

    def doc(self, out: list[str], preamble: str) -> None:
        out.append(f"{preamble} {self.arg_doc}".rstrip())

    # -- helpers for subclasses ---------------------------------------------

    def fail(self, message: str, rc: Rc = Rc.FAILURE) -> NoReturn:
        raise DirectiveError(f"{self.keyword}: {message}", rc)

    def args(self, tokens: list[str], index: int, *counts: int) -> list[str]:
        """Tokens from index on, which must number one of counts."""
        rest = tokens[index:]
        if len(rest) not in counts:
            expected = " or ".join(str(c) for c in counts)
            self.fail(f"expected {expected} argument(s), got {len(rest)}")
        return rest
