"""Error types with formatted source context."""

from __future__ import annotations

from dataclasses import dataclass

from lpubmeta.tokens import Rc, Where


class DirectiveError(Exception):
    """Raised inside the grammar tree when a directive is rejected.

    The root parser turns it into the returned ``Rc``; nothing has been
    committed to any leaf by the time it is raised.
    """

    def __init__(self, message: str, rc: Rc = Rc.FAILURE) -> None:
        self.message = message
        self.rc = rc
        super().__init__(message)


class GrammarError(Exception):
    """Raised while building a grammar tree that breaks its own invariants."""


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """A rejected directive line, as handed to the error reporter."""

    where: Where
    line: str
    reason: str
    rc: Rc

    @property
    def severity(self) -> str:
        return "warning" if self.rc == Rc.RANGE_ERROR else "error"

    def format(self) -> str:
        source_line = self.line.rstrip("\n").rstrip("\r")
        # Underline the directive text, skipping leading indentation
        col = len(source_line) - len(source_line.lstrip()) + 1
        underline_len = max(1, len(source_line.strip()))

        pad = " " * (col - 1)
        carets = "^" * underline_len

        line_num = str(self.where.line)
        gutter_width = len(line_num) + 1

        blank_gutter = " " * gutter_width + "|"
        line_gutter = f"{line_num:>{gutter_width - 1}} |"

        source = self.where.source or "<input>"
        return (
            f"{self.severity}: {self.reason}\n"
            f"{' ' * gutter_width}--> {source}:{self.where.line}\n"
            f"{blank_gutter}\n"
            f"{line_gutter} {source_line}\n"
            f"{blank_gutter} {pad}{carets}"
        )
