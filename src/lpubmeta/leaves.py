"""Scalar leaves: numbers, strings, flags, keyword choices, bare action codes."""

from __future__ import annotations

import math
from collections.abc import Hashable, Mapping
from typing import TypeVar

from lpubmeta.lexer import quote
from lpubmeta.nodes import Leaf
from lpubmeta.tokens import Rc, Where, to_float, to_floats, to_int

C = TypeVar("C", bound=Hashable)


class RcLeaf(Leaf[str]):
    """A bare keyword whose only meaning is the action code it returns.

    Trailing tokens are tolerated and ignored.
    """

    def __init__(self, rc: Rc) -> None:
        super().__init__("", rc)

    def parse(self, tokens: list[str], index: int, where: Where) -> Rc:
        self.commit("", where)
        return self.rc

    def format_value(self, value: str) -> str:
        return ""


class NoStepLeaf(Leaf[str]):
    """A bare keyword that must stand alone on its line."""

    def __init__(self, rc: Rc = Rc.NO_STEP) -> None:
        super().__init__("", rc)

    def parse(self, tokens: list[str], index: int, where: Where) -> Rc:
        self.args(tokens, index, 0)
        self.commit("", where)
        return self.rc

    def format_value(self, value: str) -> str:
        return ""


class BoolLeaf(Leaf[bool]):
    arg_doc = "<TRUE|FALSE>"

    def __init__(self, default: bool = False) -> None:
        super().__init__(default)

    def parse(self, tokens: list[str], index: int, where: Where) -> Rc:
        (tok,) = self.args(tokens, index, 1)
        if tok not in ("TRUE", "FALSE"):
            self.fail(f"expected TRUE or FALSE, got {tok!r}")
        self.commit(tok == "TRUE", where)
        return Rc.OK

    def format_value(self, value: bool) -> str:
        return "TRUE" if value else "FALSE"


class IntLeaf(Leaf[int]):
    arg_doc = "<integer>"

    def __init__(
        self,
        default: int = 0,
        rc: Rc = Rc.OK,
        min_value: int | None = None,
        max_value: int | None = None,
    ) -> None:
        super().__init__(default, rc)
        self.min_value = min_value
        self.max_value = max_value

    def parse(self, tokens: list[str], index: int, where: Where) -> Rc:
        (tok,) = self.args(tokens, index, 1)
        value = to_int(tok)
        if value is None:
            self.fail(f"expected an integer, got {tok!r}")
        if (self.min_value is not None and value < self.min_value) or (
            self.max_value is not None and value > self.max_value
        ):
            self.fail(
                f"{value} is outside {self.min_value}..{self.max_value}", Rc.RANGE_ERROR
            )
        self.commit(value, where)
        return self.rc

    def format_value(self, value: int) -> str:
        return str(value)


class _FloatRange:
    """Shared range handling for float leaves."""

    min_value: float
    max_value: float

    def in_range(self, values: list[float]) -> bool:
        return all(self.min_value <= v <= self.max_value for v in values)

    def range_text(self) -> str:
        return f"{self.min_value:g}..{self.max_value:g}"


class FloatLeaf(_FloatRange, Leaf[float]):
    arg_doc = "<float>"

    def __init__(
        self,
        default: float = 0.0,
        rc: Rc = Rc.OK,
        min_value: float = -math.inf,
        max_value: float = math.inf,
        precision: int = 4,
    ) -> None:
        super().__init__(default, rc)
        self.min_value = min_value
        self.max_value = max_value
        self.precision = precision

    def parse(self, tokens: list[str], index: int, where: Where) -> Rc:
        (tok,) = self.args(tokens, index, 1)
        value = to_float(tok)
        if value is None:
            self.fail(f"expected a number, got {tok!r}")
        if not self.in_range([value]):
            self.fail(f"{tok} is outside {self.range_text()}", Rc.RANGE_ERROR)
        self.commit(value, where)
        return self.rc

    def format_value(self, value: float) -> str:
        return f"{value:.{self.precision}f}"


class FloatPairLeaf(_FloatRange, Leaf[tuple[float, float]]):
    arg_doc = "<float> <float>"

    def __init__(
        self,
        default: tuple[float, float] = (0.0, 0.0),
        rc: Rc = Rc.OK,
        min_value: float = -math.inf,
        max_value: float = math.inf,
        precision: int = 4,
    ) -> None:
        super().__init__(default, rc)
        self.min_value = min_value
        self.max_value = max_value
        self.precision = precision

    def parse(self, tokens: list[str], index: int, where: Where) -> Rc:
        rest = self.args(tokens, index, 2)
        values = to_floats(rest)
        if values is None:
            self.fail(f"expected two numbers, got {' '.join(rest)!r}")
        if not self.in_range(values):
            self.fail(f"{' '.join(rest)} is outside {self.range_text()}", Rc.RANGE_ERROR)
        self.commit((values[0], values[1]), where)
        return self.rc

    def format_value(self, value: tuple[float, float]) -> str:
        p = self.precision
        return f"{value[0]:.{p}f} {value[1]:.{p}f}"


class StringLeaf(Leaf[str]):
    """One string argument.

    ``quoted`` True always writes the value in quotes, False never does, and
    None quotes only when the value would not survive re-tokenizing.
    """

    arg_doc = '<"string">'

    def __init__(
        self, default: str = "", rc: Rc = Rc.OK, quoted: bool | None = None
    ) -> None:
        super().__init__(default, rc)
        self.quoted = quoted

    def parse(self, tokens: list[str], index: int, where: Where) -> Rc:
        (tok,) = self.args(tokens, index, 1)
        self.commit(tok, where)
        return self.rc

    def format_value(self, value: str) -> str:
        if self.quoted is False:
            return value
        return quote(value, force=bool(self.quoted))


class StringListLeaf(Leaf[tuple[str, ...]]):
    arg_doc = '<"string"> ...'

    def __init__(self, default: tuple[str, ...] = (), rc: Rc = Rc.OK) -> None:
        super().__init__(default, rc)

    def parse(self, tokens: list[str], index: int, where: Where) -> Rc:
        self.commit(tuple(tokens[index:]), where)
        return self.rc

    def format_value(self, value: tuple[str, ...]) -> str:
        return " ".join(quote(v) for v in value)


class ChoiceLeaf(Leaf[C]):
    """One keyword out of a fixed set, stored as the value it maps to."""

    def __init__(self, default: C, choices: Mapping[str, C], rc: Rc = Rc.OK) -> None:
        super().__init__(default, rc)
        self.choices = dict(choices)
        self._names = {value: name for name, value in self.choices.items()}
        self.arg_doc = "<" + "|".join(self.choices) + ">"

    def parse(self, tokens: list[str], index: int, where: Where) -> Rc:
        (tok,) = self.args(tokens, index, 1)
        if tok not in self.choices:
            self.fail(f"expected one of {', '.join(self.choices)}, got {tok!r}")
        self.commit(self.choices[tok], where)
        return self.rc

    def format_value(self, value: C) -> str:
        return self._names[value]


class ArrowHeadLeaf(Leaf[tuple[float, float, float, float]]):
    arg_doc = "<float> <float> <float> <float>"

    def __init__(self, default: tuple[float, float, float, float]) -> None:
        super().__init__(default)

    def parse(self, tokens: list[str], index: int, where: Where) -> Rc:
        rest = self.args(tokens, index, 4)
        values = to_floats(rest)
        if values is None:
            self.fail(f"expected four numbers, got {' '.join(rest)!r}")
        self.commit((values[0], values[1], values[2], values[3]), where)
        return Rc.OK

    def format_value(self, value: tuple[float, float, float, float]) -> str:
        return " ".join(f"{v:.4f}" for v in value)
