"""Value records stored in grammar leaves."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum, auto

from lpubmeta.placement import (
    PLACEMENT_TABLE,
    Placement,
    PlacementType,
    Preposition,
    RectPlacement,
    stored_justification,
)

# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class BackgroundType(Enum):
    TRANSPARENT = auto()
    SUBMODEL_COLOR = auto()
    COLOR = auto()
    GRADIENT = auto()
    IMAGE = auto()


class GradientMode(IntEnum):
    LOGICAL = 0
    STRETCH_TO_DEVICE = 1
    OBJECT_BOUNDING = 2


class GradientSpread(IntEnum):
    PAD = 0
    REPEAT = 1
    REFLECT = 2


class GradientType(IntEnum):
    LINEAR = 0
    RADIAL = 1
    CONICAL = 2
    NONE = 3


class BorderType(Enum):
    NONE = auto()
    SQUARE = auto()
    ROUND = auto()


class BorderLine(IntEnum):
    NONE = 0
    SOLID = 1
    DASH = 2
    DOT = 3
    DASH_DOT = 4
    DASH_DOT_DOT = 5


class InsertType(Enum):
    PICTURE = auto()
    TEXT = auto()
    ARROW = auto()
    BOM = auto()
    ROTATE_ICON = auto()
    PAGE = auto()
    MODEL = auto()
    COVER_PAGE = auto()


class Alloc(Enum):
    HORIZONTAL = auto()
    VERTICAL = auto()


class Orientation(Enum):
    PORTRAIT = auto()
    LANDSCAPE = auto()


class ConstrainType(Enum):
    AREA = auto()
    SQUARE = auto()
    WIDTH = auto()
    HEIGHT = auto()
    COLS = auto()


class CalloutMode(Enum):
    UNASSEMBLED = auto()
    ASSEMBLED = auto()
    ROTATED = auto()


class ResolutionUnit(Enum):
    DPI = auto()
    DPCM = auto()


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class PlacementData:
    placement: Placement
    justification: Placement
    relative_to: PlacementType
    preposition: Preposition
    rect_placement: RectPlacement
    offsets: tuple[float, float] = (0.0, 0.0)

    @classmethod
    def from_rect(
        cls,
        rect: RectPlacement,
        relative_to: PlacementType = PlacementType.PAGE,
        offsets: tuple[float, float] = (0.0, 0.0),
    ) -> PlacementData:
        """Build the value for one spot of the placement grid."""
        row = PLACEMENT_TABLE[rect]
        return cls(
            placement=row.placement,
            justification=stored_justification(row),
            relative_to=relative_to,
            preposition=row.preposition,
            rect_placement=rect,
            offsets=offsets,
        )


@dataclass(frozen=True, slots=True)
class PointerData:
    placement: Placement = Placement.TOP_LEFT
    loc: float = 0.0
    x1: float = 0.5  # tip
    y1: float = 0.5
    x2: float = 0.5  # base
    y2: float = 0.5
    x3: float = 0.5  # mid-segment
    y3: float = 0.5
    x4: float = 0.5
    y4: float = 0.5
    base: float = 0.125
    segments: int = 1
    rect_placement: RectPlacement = RectPlacement.TOP_LEFT_INSIDE_CORNER

    @property
    def tip(self) -> tuple[float, float]:
        return (self.x1, self.y1)

    @property
    def points(self) -> tuple[float, ...]:
        return (self.x1, self.y1, self.x2, self.y2, self.x3, self.y3, self.x4, self.y4)


DEFAULT_GRADIENT_POINTS: tuple[tuple[float, float], ...] = ((0.0, 0.0), (1.0, 1.0))
DEFAULT_GRADIENT_STOPS: tuple[tuple[float, int], ...] = (
    (0.00, 0xFF000000),
    (0.40, 0xFFF5F5F5),
    (1.00, 0xFF808080),
)


@dataclass(frozen=True, slots=True)
class BackgroundData:
    type: BackgroundType = BackgroundType.TRANSPARENT
    string: str = ""
    stretch: bool = False
    gmode: GradientMode = GradientMode.LOGICAL
    gspread: GradientSpread = GradientSpread.PAD
    gtype: GradientType = GradientType.LINEAR
    gsize: tuple[float, float] = (0.0, 0.0)
    gangle: float = 0.0
    gpoints: tuple[tuple[float, float], ...] = DEFAULT_GRADIENT_POINTS
    gstops: tuple[tuple[float, int], ...] = DEFAULT_GRADIENT_STOPS


@dataclass(frozen=True, slots=True)
class BorderData:
    type: BorderType = BorderType.NONE
    line: BorderLine = BorderLine.NONE
    color: str = "Black"
    thickness: float = 0.125
    radius: float = 15.0
    margins: tuple[float, float] = (0.0, 0.0)


@dataclass(frozen=True, slots=True)
class InsertData:
    type: InsertType = InsertType.PICTURE
    pic_name: str = ""
    pic_scale: float = 1.0
    text: str = ""
    text_font: str = "Arial,48,-1,255,75,0,0,0,0,0"
    text_color: str = "Black"
    arrow_head: tuple[float, float] = (0.0, 0.0)
    arrow_tail: tuple[float, float] = (0.0, 0.0)
    hafting_depth: float = 0.0
    hafting_tip: tuple[float, float] = (0.0, 0.0)
    offsets: tuple[float, float] = (0.5, 0.5)
    cover_side: str = ""


@dataclass(frozen=True, slots=True)
class RotStepData:
    rots: tuple[float, float, float] = (0.0, 0.0, 0.0)
    type: str = ""  # "ABS", "REL", "ADD", or "" when cleared


@dataclass(frozen=True, slots=True)
class BuffExchgData:
    buffer: str = ""
    type: str = ""  # "STORE" or "RETRIEVE"


@dataclass(frozen=True, slots=True)
class PageSizeData:
    width: float
    height: float
    size_id: str = "Custom"


@dataclass(frozen=True, slots=True)
class SubData:
    part: str = ""
    color: str = ""
    attributes: tuple[str, ...] = ()
    level: int = 0


@dataclass(frozen=True, slots=True)
class SepData:
    thickness: float = 1.0 / 64.0
    color: str = "Black"
    margins: tuple[float, float] = (0.05, 0.05)


@dataclass(frozen=True, slots=True)
class ConstrainData:
    type: ConstrainType = ConstrainType.AREA
    constraint: float = 0.0


@dataclass(frozen=True, slots=True)
class FreeFormData:
    mode: bool = False
    base: PlacementType = PlacementType.STEP_NUMBER
    justification: Placement = Placement.CENTER


@dataclass(frozen=True, slots=True)
class ResolutionData:
    value: float = 150.0
    unit: ResolutionUnit = ResolutionUnit.DPI
