"""Placement enumerations, the rect placement table, and the keyword token map.

Every placeable item sits at one of 25 spots around (or inside) the item it
is placed relative to. The spots form a 5x5 grid; the middle 3x3 are inside
the relative item, the outer ring is outside it::

    TOP_LEFT/OUT   TOP LEFT/OUT    TOP CENTER/OUT    TOP RIGHT/OUT    TOP_RIGHT/OUT
    LEFT TOP/OUT   TOP_LEFT/IN     TOP/IN            TOP_RIGHT/IN     RIGHT TOP/OUT
    LEFT CENTER    LEFT/IN         CENTER/IN         RIGHT/IN         RIGHT CENTER
    LEFT BOTTOM    BOTTOM_LEFT/IN  BOTTOM/IN         BOTTOM_RIGHT/IN  RIGHT BOTTOM
    BOTTOM_LEFT    BOTTOM LEFT     BOTTOM CENTER     BOTTOM RIGHT     BOTTOM_RIGHT

``PLACEMENT_TABLE`` is the only description of that grid; parsing and
formatting both go through it.
"""

from __future__ import annotations

from collections.abc import Mapping
from enum import IntEnum
from types import MappingProxyType
from typing import NamedTuple


class Placement(IntEnum):
    TOP_LEFT = 0
    TOP = 1
    TOP_RIGHT = 2
    RIGHT = 3
    BOTTOM_RIGHT = 4
    BOTTOM = 5
    BOTTOM_LEFT = 6
    LEFT = 7
    CENTER = 8


class Preposition(IntEnum):
    INSIDE = 0
    OUTSIDE = 1


class RectPlacement(IntEnum):
    TOP_LEFT_OUTSIDE_CORNER = 0
    TOP_LEFT_OUTSIDE = 1
    TOP_OUTSIDE = 2
    TOP_RIGHT_OUTSIDE = 3
    TOP_RIGHT_OUTSIDE_CORNER = 4

    LEFT_TOP_OUTSIDE = 5
    TOP_LEFT_INSIDE_CORNER = 6
    TOP_INSIDE = 7
    TOP_RIGHT_INSIDE_CORNER = 8
    RIGHT_TOP_OUTSIDE = 9

    LEFT_OUTSIDE = 10
    LEFT_INSIDE = 11
    CENTER_CENTER = 12
    RIGHT_INSIDE = 13
    RIGHT_OUTSIDE = 14

    LEFT_BOTTOM_OUTSIDE = 15
    BOTTOM_LEFT_INSIDE_CORNER = 16
    BOTTOM_INSIDE = 17
    BOTTOM_RIGHT_INSIDE_CORNER = 18
    RIGHT_BOTTOM_OUTSIDE = 19

    BOTTOM_LEFT_OUTSIDE_CORNER = 20
    BOTTOM_LEFT_OUTSIDE = 21
    BOTTOM_OUTSIDE = 22
    BOTTOM_RIGHT_OUTSIDE = 23
    BOTTOM_RIGHT_OUTSIDE_CORNER = 24


class PlacementType(IntEnum):
    PAGE = 0
    CSI = 1
    STEP_GROUP = 2
    STEP_NUMBER = 3
    PARTS_LIST = 4
    CALLOUT = 5
    PAGE_NUMBER = 6
    PAGE_TITLE = 7
    PAGE_MODEL_NAME = 8
    PAGE_AUTHOR = 9
    PAGE_URL = 10
    PAGE_MODEL_DESC = 11
    PAGE_PUBLISH_DESC = 12
    PAGE_COPYRIGHT = 13
    PAGE_EMAIL = 14
    PAGE_DISCLAIMER = 15
    PAGE_PIECES = 16
    PAGE_PLUG = 17
    PAGE_CATEGORY = 18
    PAGE_DOCUMENT_LOGO = 19
    PAGE_COVER_IMAGE = 20
    PAGE_PLUG_IMAGE = 21
    PAGE_HEADER = 22
    PAGE_FOOTER = 23
    ROTATE_ICON = 24
    PAGE_POINTER = 25
    ONE_TO_ONE = 26
    PART_ID = 27
    SUBMODEL = 28
    ILLUSTRATION = 29
    RIGHT_WRONG = 30
    STICKER = 31
    SINGLE_STEP = 32
    SUBMODEL_INSTANCE_COUNT = 33
    STEP = 34
    RANGE = 35
    RESERVE = 36
    BOM = 37
    COVER_PAGE = 38


class ScopeKeyword(IntEnum):
    LOCAL = 0
    GLOBAL = 1


class Row(NamedTuple):
    """One spot of the placement grid, in keyword terms."""

    placement: Placement
    justification: Placement | None  # None when the keyword form has none
    preposition: Preposition


_P = Placement
_IN = Preposition.INSIDE
_OUT = Preposition.OUTSIDE

# Indexed by RectPlacement.
PLACEMENT_TABLE: tuple[Row, ...] = (
    Row(_P.TOP_LEFT, None, _OUT),
    Row(_P.TOP, _P.LEFT, _OUT),
    Row(_P.TOP, _P.CENTER, _OUT),
    Row(_P.TOP, _P.RIGHT, _OUT),
    Row(_P.TOP_RIGHT, None, _OUT),
    Row(_P.LEFT, _P.TOP, _OUT),
    Row(_P.TOP_LEFT, None, _IN),
    Row(_P.TOP, None, _IN),
    Row(_P.TOP_RIGHT, None, _IN),
    Row(_P.RIGHT, _P.TOP, _OUT),
    Row(_P.LEFT, _P.CENTER, _OUT),
    Row(_P.LEFT, None, _IN),
    Row(_P.CENTER, None, _IN),
    Row(_P.RIGHT, None, _IN),
    Row(_P.RIGHT, _P.CENTER, _OUT),
    Row(_P.LEFT, _P.BOTTOM, _OUT),
    Row(_P.BOTTOM_LEFT, None, _IN),
    Row(_P.BOTTOM, None, _IN),
    Row(_P.BOTTOM_RIGHT, None, _IN),
    Row(_P.RIGHT, _P.BOTTOM, _OUT),
    Row(_P.BOTTOM_LEFT, None, _OUT),
    Row(_P.BOTTOM, _P.LEFT, _OUT),
    Row(_P.BOTTOM, _P.CENTER, _OUT),
    Row(_P.BOTTOM, _P.RIGHT, _OUT),
    Row(_P.BOTTOM_RIGHT, None, _OUT),
)

_ROW_INDEX: Mapping[Row, RectPlacement] = MappingProxyType(
    {row: RectPlacement(i) for i, row in enumerate(PLACEMENT_TABLE)}
)


def lookup_rect(
    placement: Placement, justification: Placement | None, preposition: Preposition
) -> RectPlacement | None:
    """Return the grid spot for a keyword triple, or None if there is none."""
    return _ROW_INDEX.get(Row(placement, justification, preposition))


def stored_justification(row: Row) -> Placement:
    """Justification as recorded in a placement value (CENTER when unspecified)."""
    return row.justification if row.justification is not None else Placement.CENTER


# Keyword for each PlacementType usable as a relative-to target.
RELATIVE_NAMES: tuple[str, ...] = (
    "PAGE",
    "ASSEM",
    "MULTI_STEP",
    "STEP_NUMBER",
    "PLI",
    "CALLOUT",
    "PAGE_NUMBER",
    "DOCUMENT_TITLE",
    "MODEL_ID",
    "DOCUMENT_AUTHOR",
    "PUBLISH_URL",
    "MODEL_DESCRIPTION",
    "PUBLISH_DESCRIPTION",
    "PUBLISH_COPYRIGHT",
    "PUBLISH_EMAIL",
    "LEGO_DISCLAIMER",
    "MODEL_PIECES",
    "APP_PLUG",
    "MODEL_CATEGORY",
    "DOCUMENT_LOGO",
    "DOCUMENT_COVER_IMAGE",
    "APP_PLUG_IMAGE",
    "PAGE_HEADER",
    "PAGE_FOOTER",
    "ROTATE_ICON",
    "PAGE_POINTER",
    "ONETOONE",
    "PARTID",
    "SUBMODEL",
    "ILLUSTRATION",
    "RIGHTWRONG",
    "STICKER",
)

RELATIVE_TO: Mapping[str, PlacementType] = MappingProxyType(
    {
        **{name: PlacementType(i) for i, name in enumerate(RELATIVE_NAMES)},
        "STEP_GROUP": PlacementType.STEP_GROUP,
    }
)

# Page pointer base spots, restricted to the inside of the page.
BASE_RECTS: Mapping[str, RectPlacement] = MappingProxyType(
    {
        "BASE_TOP_LEFT": RectPlacement.TOP_LEFT_INSIDE_CORNER,
        "BASE_TOP": RectPlacement.TOP_INSIDE,
        "BASE_TOP_RIGHT": RectPlacement.TOP_RIGHT_INSIDE_CORNER,
        "BASE_LEFT": RectPlacement.LEFT_INSIDE,
        "BASE_CENTER": RectPlacement.CENTER_CENTER,
        "BASE_RIGHT": RectPlacement.RIGHT_INSIDE,
        "BASE_BOTTOM_LEFT": RectPlacement.BOTTOM_LEFT_INSIDE_CORNER,
        "BASE_BOTTOM": RectPlacement.BOTTOM_INSIDE,
        "BASE_BOTTOM_RIGHT": RectPlacement.BOTTOM_RIGHT_INSIDE_CORNER,
    }
)

BASE_RECT_NAMES: Mapping[RectPlacement, str] = MappingProxyType(
    {rect: name for name, rect in BASE_RECTS.items()}
)


def build_token_map() -> Mapping[str, IntEnum]:
    """Build the keyword -> enum map shared by every parser.

    Called once at import; the result is read-only.
    """
    tokens: dict[str, IntEnum] = {}
    for p in Placement:
        tokens[p.name] = p
    for prep in Preposition:
        tokens[prep.name] = prep
    for scope in ScopeKeyword:
        tokens[scope.name] = scope
    tokens.update(RELATIVE_TO)
    tokens.update(BASE_RECTS)
    return MappingProxyType(tokens)


TOKEN_MAP: Mapping[str, IntEnum] = build_token_map()
