"""Directive tokenizer: splits a meta-command line into argument tokens."""

from __future__ import annotations


class Lexer:
    """Split one line on whitespace, keeping double-quoted runs as one token.

    Quotes are removed from the token; ``\\"`` and ``\\\\`` inside a quoted
    run are a literal quote and backslash. Any other backslash is kept as
    is. An unterminated quote runs to the end of the line.
    """

    def __init__(self, line: str) -> None:
        self._line = line
        self._pos = 0
        self._tokens: list[str] = []

    def _peek(self) -> str:
        if self._pos < len(self._line):
            return self._line[self._pos]
        return ""

    def _advance(self) -> str:
        ch = self._line[self._pos]
        self._pos += 1
        return ch

    def tokenize(self) -> list[str]:
        while self._pos < len(self._line):
            ch = self._peek()
            if ch.isspace():
                self._advance()
            elif ch == '"':
                self._advance()
                self._tokens.append(self._quoted())
            else:
                self._tokens.append(self._bare())
        return self._tokens

    def _bare(self) -> str:
        start = self._pos
        while self._pos < len(self._line) and not self._peek().isspace():
            if self._peek() == '"':
                break
            self._advance()
        return self._line[start : self._pos]

    def _quoted(self) -> str:
        chars: list[str] = []
        while self._pos < len(self._line):
            ch = self._advance()
            if ch == "\\" and self._peek() in ('"', "\\"):
                chars.append(self._advance())
            elif ch == '"':
                break
            else:
                chars.append(ch)
        return "".join(chars)


def split(line: str) -> list[str]:
    """Tokenize a directive line."""
    return Lexer(line).tokenize()


def quote(text: str, force: bool = False) -> str:
    """Render text as a single token that split() turns back into text."""
    needs = force or not text or '"' in text or any(ch.isspace() for ch in text)
    if not needs:
        return text
    return '"' + text.replace("\\", "\\\\").replace('"', '\\"') + '"'
