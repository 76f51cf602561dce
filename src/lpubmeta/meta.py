"""Root meta-command parser."""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Iterator

from lpubmeta.errors import DirectiveError, Diagnostic
from lpubmeta.grammar import build
from lpubmeta.lexer import split
from lpubmeta.nodes import Branch, Leaf, Node
from lpubmeta.placement import TOKEN_MAP, ScopeKeyword
from lpubmeta.tokens import Rc, Where

logger = logging.getLogger(__name__)

Reporter = Callable[[Diagnostic], None]

# MLCad group tags keep the rest of the line, spaces included, as the name.
_GROUP_TAG = re.compile(r"^\s*0\s+(MLCAD)\s+(BTG)\s+(.*)$")


def log_diagnostic(diagnostic: Diagnostic) -> None:
    """Default reporter: log the rejected line."""
    logger.warning("%s: %s: %s", diagnostic.where, diagnostic.reason, diagnostic.line.strip())


class Meta:
    """The complete meta-command grammar, rooted at the ``0`` line type.

    Each instance owns an independent tree of values; use one per
    traversal.
    """

    def __init__(self, reporter: Reporter = log_diagnostic) -> None:
        self.reporter = reporter
        self.root = Branch()
        self.root.attach("0 ")
        self.lpub = build(self.root)

    def __getitem__(self, key: str) -> Node:
        return self.root[key]

    def find(self, path: str) -> Node:
        """Node at a keyword path such as ``"!LPUB PAGE SIZE"``."""
        return self.root.find(path)

    def leaf(self, path: str) -> Leaf:
        node = self.find(path)
        if not isinstance(node, Leaf):
            raise KeyError(f"{path} is not a leaf")
        return node

    def walk(self) -> Iterator[tuple[tuple[str, ...], Leaf]]:
        return self.root.walk()

    def _tokens(self, line: str) -> list[str]:
        match = _GROUP_TAG.match(line)
        if match:
            return [match.group(1), match.group(2), match.group(3)]
        tokens = split(line)
        if not tokens:
            return tokens
        del tokens[0]
        if tokens and tokens[0] == "LPUB":
            tokens[0] = "!LPUB"
        return tokens

    def parse(self, line: str, where: Where, report_errors: bool = False) -> Rc:
        """Interpret one model-file line and return its action code.

        Lines that are not directives return ``Rc.OK``. Rejected directives
        return ``Rc.FAILURE`` or ``Rc.RANGE_ERROR``, leave every value as it
        was, and go to the reporter when ``report_errors`` is set.
        """
        tokens = self._tokens(line)
        try:
            if not tokens:
                return Rc.OK
            if tokens[0] == "PLIST":
                return self.lpub["PLI"].parse(tokens, 1, where)
            if tokens[0] not in self.root.children:
                return Rc.OK
            return self.root.parse(tokens, 0, where)
        except DirectiveError as exc:
            logger.debug("%s rejected (%s): %s", where, exc.rc.name, exc.message)
            if report_errors:
                self.reporter(Diagnostic(where, line, exc.message, exc.rc))
            return exc.rc

    def preamble_match(self, line: str) -> str | None:
        """Preamble of the leaf the line's keywords lead to, if any."""
        tokens = self._tokens(line)
        if not tokens or tokens[0] not in self.root.children:
            return None
        return self.root.preamble_match(tokens, 0)

    def pop(self) -> None:
        """Drop every local value and scope flag."""
        self.root.pop()

    def doc(self) -> list[str]:
        """Sorted reference listing of every directive form."""
        out: list[str] = []
        self.root.doc(out, "0")
        return out

    def complete(self, line: str) -> list[str]:
        """Keywords that may follow a partially typed line."""
        tokens = self._tokens(line)
        partial = ""
        if tokens and not line[-1:].isspace():
            partial = tokens.pop()
        node = self.root
        for tok in tokens:
            if isinstance(TOKEN_MAP.get(tok), ScopeKeyword):
                continue
            child = node.children.get(tok)
            if not isinstance(child, Branch):
                return []
            node = child
        return sorted(k for k in node.children if isinstance(k, str) and k.startswith(partial))
