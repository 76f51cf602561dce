"""Result codes, provenance records, and token classification helpers."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum, auto


class Rc(Enum):
    # Generic results
    OK = auto()
    FAILURE = auto()
    RANGE_ERROR = auto()

    # Steps and buffers
    STEP = auto()
    CLEAR = auto()
    ROT_STEP = auto()
    BUFFER_STORE = auto()
    BUFFER_LOAD = auto()
    NO_STEP = auto()

    # MLCad and LSynth
    MLCAD_SKIP_BEGIN = auto()
    MLCAD_SKIP_END = auto()
    MLCAD_GROUP = auto()
    SYNTH_BEGIN = auto()
    SYNTH_END = auto()

    # Parts lists
    PLI_BEGIN_IGN = auto()
    PLI_BEGIN_SUB1 = auto()  # part
    PLI_BEGIN_SUB2 = auto()  # + color
    PLI_BEGIN_SUB3 = auto()  # + scale
    PLI_BEGIN_SUB4 = auto()  # + field of view
    PLI_BEGIN_SUB5 = auto()  # + camera latitude, longitude
    PLI_BEGIN_SUB6 = auto()  # + target x y z
    PLI_BEGIN_SUB7 = auto()  # + rotation x y z transform
    PLI_END = auto()
    BOM_BEGIN_IGN = auto()
    BOM_END = auto()
    ONE_TO_ONE_END = auto()
    RIGHT_WRONG_END = auto()
    PART_BEGIN_IGN = auto()
    PART_END = auto()

    # Callouts and step groups
    CALLOUT_BEGIN = auto()
    CALLOUT_DIVIDER = auto()
    CALLOUT_END = auto()
    STEP_GROUP_BEGIN = auto()
    STEP_GROUP_DIVIDER = auto()
    STEP_GROUP_END = auto()

    # Pointers
    CALLOUT_POINTER = auto()
    PAGE_POINTER = auto()
    DIVIDER_POINTER = auto()
    ILLUSTRATION_POINTER = auto()

    # Removal
    REMOVE_GROUP = auto()
    REMOVE_PART = auto()
    REMOVE_NAME = auto()

    # Pages
    RESERVE_SPACE = auto()
    INSERT = auto()
    INSERT_PAGE = auto()
    INSERT_COVER_PAGE = auto()
    INSERT_FINAL_MODEL = auto()
    PAGE_SIZE = auto()
    PAGE_ORIENTATION = auto()
    RESOLUTION = auto()
    INCLUDE = auto()

    @property
    def is_error(self) -> bool:
        return self in (Rc.FAILURE, Rc.RANGE_ERROR)


POINTER_RCS = frozenset(
    {Rc.CALLOUT_POINTER, Rc.PAGE_POINTER, Rc.DIVIDER_POINTER, Rc.ILLUSTRATION_POINTER}
)


@dataclass(frozen=True, slots=True)
class Where:
    """Provenance of a directive: model source name and 1-based line number."""

    source: str = ""
    line: int = 0

    def __str__(self) -> str:
        return f"{self.source}:{self.line}"


_INT_RE = re.compile(r"[+-]?\d+")
_FLOAT_RE = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def to_int(token: str) -> int | None:
    """Return token as an int, or None if it is not a plain decimal integer."""
    if _INT_RE.fullmatch(token) is None:
        return None
    return int(token)


def to_float(token: str) -> float | None:
    """Return token as a float, or None if it is not a decimal number."""
    if _FLOAT_RE.fullmatch(token) is None:
        return None
    return float(token)


def to_floats(tokens: list[str]) -> list[float] | None:
    """Convert every token, or return None if any is not a number."""
    result: list[float] = []
    for tok in tokens:
        value = to_float(tok)
        if value is None:
            return None
        result.append(value)
    return result


def fmt_num(value: float) -> str:
    """Shortest decimal text for value (six significant digits)."""
    return f"{value:g}"
