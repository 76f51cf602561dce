"""The LPub keyword tree: which keywords exist, their value kinds and defaults.

``build(root)`` populates a root branch; everything below it is plain
``Branch`` and ``Leaf`` instances, addressable by keyword path::

    meta.find("!LPUB PAGE SIZE").value()
"""

from __future__ import annotations

import logging

from lpubmeta.directives import (
    BuffExchgLeaf,
    CalloutBeginLeaf,
    InsertLeaf,
    PageSizeLeaf,
    ResolutionLeaf,
    RotStepLeaf,
    SubLeaf,
)
from lpubmeta.geometry import (
    BackgroundLeaf,
    BorderLeaf,
    ConstrainLeaf,
    FreeFormLeaf,
    PlacementLeaf,
    PointerLeaf,
    SepLeaf,
)
from lpubmeta.leaves import (
    ArrowHeadLeaf,
    BoolLeaf,
    ChoiceLeaf,
    FloatLeaf,
    FloatPairLeaf,
    IntLeaf,
    NoStepLeaf,
    RcLeaf,
    StringLeaf,
    StringListLeaf,
)
from lpubmeta.nodes import Branch
from lpubmeta.placement import Placement, PlacementType, RectPlacement
from lpubmeta.tokens import Rc
from lpubmeta.values import (
    Alloc,
    BackgroundData,
    BackgroundType,
    BorderData,
    BorderLine,
    BorderType,
    Orientation,
    PageSizeData,
    PlacementData,
)

logger = logging.getLogger(__name__)

DEFAULT_MARGINS = (0.05, 0.05)
DEFAULT_THICKNESS = 1.0 / 64.0
DEFAULT_FONT = "Arial,24,-1,255,75,0,0,0,0,0"
DEFAULT_SUBMODEL_COLORS = ("#aaffff", "#ffffaa", "#ffaaff", "#aaaaff")

_R = RectPlacement
_T = PlacementType

_ALLOC = {"HORIZONTAL": Alloc.HORIZONTAL, "VERTICAL": Alloc.VERTICAL}
_ORIENTATION = {"PORTRAIT": Orientation.PORTRAIT, "LANDSCAPE": Orientation.LANDSCAPE}
_ALIGNMENT = {"LEFT": Placement.LEFT, "CENTER": Placement.CENTER, "RIGHT": Placement.RIGHT}
_ARROW_END = {"SQUARE": "SQUARE", "ROUND": "ROUND"}

# Cover page text attributes: (keyword, spot, placed relative to)
_TEXT_ATTRIBUTES = (
    ("DOCUMENT_TITLE_FRONT", _R.TOP_INSIDE, _T.PAGE),
    ("DOCUMENT_TITLE_BACK", _R.TOP_INSIDE, _T.PAGE),
    ("MODEL_ID", _R.BOTTOM_OUTSIDE, _T.PAGE_TITLE),
    ("MODEL_DESCRIPTION", _R.BOTTOM_OUTSIDE, _T.PAGE_MODEL_NAME),
    ("MODEL_PIECES", _R.BOTTOM_OUTSIDE, _T.PAGE_MODEL_DESC),
    ("MODEL_CATEGORY", _R.BOTTOM_OUTSIDE, _T.PAGE_PIECES),
    ("DOCUMENT_AUTHOR_FRONT", _R.BOTTOM_LEFT_OUTSIDE, _T.PAGE_TITLE),
    ("DOCUMENT_AUTHOR_BACK", _R.BOTTOM_OUTSIDE, _T.PAGE_TITLE),
    ("DOCUMENT_AUTHOR", _R.TOP_LEFT_INSIDE_CORNER, _T.PAGE_HEADER),
    ("PUBLISH_DESCRIPTION", _R.BOTTOM_OUTSIDE, _T.PAGE_CATEGORY),
    ("PUBLISH_URL", _R.BOTTOM_LEFT_INSIDE_CORNER, _T.PAGE_FOOTER),
    ("PUBLISH_URL_BACK", _R.BOTTOM_OUTSIDE, _T.PAGE_EMAIL),
    ("PUBLISH_EMAIL", _R.TOP_RIGHT_INSIDE_CORNER, _T.PAGE_HEADER),
    ("PUBLISH_EMAIL_BACK", _R.BOTTOM_OUTSIDE, _T.PAGE_COPYRIGHT),
    ("PUBLISH_COPYRIGHT", _R.BOTTOM_RIGHT_INSIDE_CORNER, _T.PAGE_FOOTER),
    ("PUBLISH_COPYRIGHT_BACK", _R.BOTTOM_OUTSIDE, _T.PAGE_DISCLAIMER),
    ("LEGO_DISCLAIMER", _R.BOTTOM_OUTSIDE, _T.PAGE_URL),
    ("APP_PLUG", _R.BOTTOM_OUTSIDE, _T.PAGE_DISCLAIMER),
)

# Cover page picture attributes
_PICTURE_ATTRIBUTES = (
    ("DOCUMENT_LOGO_FRONT", _R.TOP_LEFT_INSIDE_CORNER, _T.PAGE),
    ("DOCUMENT_LOGO_BACK", _R.TOP_INSIDE, _T.PAGE),
    ("DOCUMENT_COVER_IMAGE", _R.CENTER_CENTER, _T.PAGE),
    ("APP_PLUG_IMAGE", _R.BOTTOM_OUTSIDE, _T.PAGE_PLUG),
)


# ---------------------------------------------------------------------------
# Reusable shapes
# ---------------------------------------------------------------------------


def _margins(branch: Branch, default: tuple[float, float] = DEFAULT_MARGINS) -> None:
    branch.add("MARGINS", FloatPairLeaf(default, min_value=0.0, max_value=100.0))


def _placement(branch: Branch, rect: RectPlacement, relative: PlacementType) -> None:
    branch.add("PLACEMENT", PlacementLeaf(PlacementData.from_rect(rect, relative)))


def _number(
    parent: Branch,
    name: str,
    rect: RectPlacement | None = None,
    relative: PlacementType = _T.PAGE,
    color: str = "Black",
) -> Branch:
    """Text item with font, color and margins, optionally placeable."""
    b = parent.branch(name)
    if rect is not None:
        _placement(b, rect, relative)
    b.add("FONT", StringLeaf(DEFAULT_FONT, quoted=True))
    b.add("FONT_COLOR", StringLeaf(color))
    _margins(b)
    return b


def _framed(
    b: Branch,
    rect: RectPlacement,
    relative: PlacementType,
    border: BorderData | None = None,
    background: BackgroundData | None = None,
) -> None:
    """Placeable box with border, background and margins."""
    _placement(b, rect, relative)
    b.add("BORDER", BorderLeaf(border))
    b.add("BACKGROUND", BackgroundLeaf(background))
    _margins(b)
    b.add("SUBMODEL_BACKGROUND_COLOR", StringListLeaf(DEFAULT_SUBMODEL_COLORS))


def _view(b: Branch, scale: float = 1.0) -> None:
    """Camera settings for a rendered image."""
    b.add("MODEL_SCALE", FloatLeaf(scale, min_value=-10000.0, max_value=10000.0))
    b.add("VIEW_ANGLE", FloatPairLeaf((23.0, 45.0), min_value=-360.0, max_value=360.0))
    b.add("VIEW_DISTANCE", FloatLeaf(0.0, min_value=0.0, max_value=10000.0))
    b.add("VIEW_FOV", FloatLeaf(0.01, min_value=0.0, max_value=180.0))
    b.add("VIEW_ZNEAR", FloatLeaf(10.0, min_value=0.0, max_value=100000.0))
    b.add("VIEW_ZFAR", FloatLeaf(4000.0, min_value=0.0, max_value=100000.0))


def _renderer_parms(b: Branch) -> None:
    for name in ("LDGLITE_PARMS", "LDVIEW_PARMS", "L3P_PARMS", "POVRAY_PARMS"):
        b.add(name, StringLeaf(quoted=True))


def _alloc(b: Branch) -> None:
    # Also reachable as the legacy "<branch> LOCAL VERTICAL" shorthand
    leaf = ChoiceLeaf(Alloc.VERTICAL, _ALLOC)
    b.add("ALLOC", leaf)
    b.add(frozenset(_ALLOC), leaf)


def _step_parts(b: Branch) -> None:
    """Placement of the assembly image and parts list within a step."""
    assem = b.branch("ASSEM")
    _placement(assem, _R.CENTER_CENTER, _T.STEP_NUMBER)
    _margins(assem)
    pli = b.branch("PLI")
    _placement(pli, _R.TOP_LEFT_OUTSIDE, _T.CSI)
    _margins(pli)
    pli.add("PER_STEP", BoolLeaf(True))


def _panel(parent: Branch, name: str, rect: RectPlacement, relative: PlacementType) -> Branch:
    """Framed, rendered item that can be laid out freely."""
    b = parent.branch(name)
    _framed(b, rect, relative)
    _view(b)
    b.add("FREEFORM", FreeFormLeaf())
    _alloc(b)
    return b


# ---------------------------------------------------------------------------
# !LPUB sections
# ---------------------------------------------------------------------------


def _text_attribute(page: Branch, name: str, rect: RectPlacement, relative: PlacementType) -> None:
    b = page.branch(name)
    b.add("FONT", StringLeaf(DEFAULT_FONT, quoted=True))
    b.add("COLOR", StringLeaf("Black"))
    _margins(b)
    _placement(b, rect, relative)
    b.add("CONTENT", StringLeaf(quoted=True))
    b.add("DISPLAY", BoolLeaf(False))


def _picture_attribute(
    page: Branch, name: str, rect: RectPlacement, relative: PlacementType
) -> None:
    b = page.branch(name)
    _placement(b, rect, relative)
    _margins(b)
    b.add("SCALE", FloatLeaf(1.0, min_value=-10000.0, max_value=10000.0))
    b.add("FILE", StringLeaf(quoted=True))
    b.add("DISPLAY", BoolLeaf(False))
    b.add("STRETCH", BoolLeaf(False))
    b.add("TILE", BoolLeaf(False))


def _page(lpub: Branch) -> None:
    page = lpub.branch("PAGE")
    page.add("SIZE", PageSizeLeaf(PageSizeData(8.3, 11.7, "A4")))
    page.add("ORIENTATION", ChoiceLeaf(Orientation.PORTRAIT, _ORIENTATION, Rc.PAGE_ORIENTATION))
    _margins(page)
    page.add("BORDER", BorderLeaf())
    page.add(
        "BACKGROUND", BackgroundLeaf(BackgroundData(type=BackgroundType.COLOR, string="#ffffff"))
    )
    page.add("DISPLAY_PAGE_NUMBER", BoolLeaf(True))
    page.add("TOGGLE_PAGE_NUMBER_PLACEMENT", BoolLeaf(False))
    _number(page, "NUMBER", _R.BOTTOM_RIGHT_INSIDE_CORNER, _T.PAGE)
    _number(page, "SUBMODEL_INSTANCE_COUNT", _R.LEFT_OUTSIDE, _T.PAGE_NUMBER)
    page.add("SUBMODEL_BACKGROUND_COLOR", StringListLeaf(DEFAULT_SUBMODEL_COLORS))
    for name, rect in (("PAGE_HEADER", _R.TOP_INSIDE), ("PAGE_FOOTER", _R.BOTTOM_INSIDE)):
        b = page.branch(name)
        _placement(b, rect, _T.PAGE)
        b.add("SIZE", FloatPairLeaf((8.3, 0.3), min_value=0.0, max_value=1000.0))
    for name, rect, relative in _TEXT_ATTRIBUTES:
        _text_attribute(page, name, rect, relative)
    for name, rect, relative in _PICTURE_ATTRIBUTES:
        _picture_attribute(page, name, rect, relative)


def _assem(lpub: Branch) -> None:
    assem = lpub.branch("ASSEM")
    _margins(assem)
    _placement(assem, _R.CENTER_CENTER, _T.PAGE)
    _view(assem)
    _renderer_parms(assem)
    assem.add("SHOW_STEP_NUMBER", BoolLeaf(True))


def _callout(lpub: Branch) -> None:
    callout = lpub.branch("CALLOUT")
    _framed(
        callout,
        _R.RIGHT_OUTSIDE,
        _T.CSI,
        border=BorderData(BorderType.ROUND, BorderLine.SOLID, "Black", DEFAULT_THICKNESS, 15.0),
        background=BackgroundData(type=BackgroundType.COLOR, string="#cccccc"),
    )
    _number(callout, "STEP_NUMBER", _R.TOP_LEFT_INSIDE_CORNER, _T.CALLOUT)
    _number(callout, "INSTANCE_COUNT", _R.BOTTOM_RIGHT_INSIDE_CORNER, _T.CALLOUT)
    _number(callout, "SUBMODEL_FONT")
    callout.add("SUBMODEL_FONT_COLOR", StringLeaf("Black"))
    callout.add("SEPARATOR", SepLeaf())
    callout.add("FREEFORM", FreeFormLeaf())
    _alloc(callout)
    _step_parts(callout)
    callout.add("POINTER", PointerLeaf(Rc.CALLOUT_POINTER))
    callout.add("DIVIDER_POINTER", PointerLeaf(Rc.DIVIDER_POINTER))
    callout.add("BEGIN", CalloutBeginLeaf())
    callout.add("DIVIDER", RcLeaf(Rc.CALLOUT_DIVIDER))
    callout.add("END", RcLeaf(Rc.CALLOUT_END))


def _page_pointer(lpub: Branch) -> None:
    pp = lpub.branch("PAGE_POINTER")
    _framed(pp, _R.LEFT_INSIDE, _T.PAGE)
    pp.add("POINTER", PointerLeaf(Rc.PAGE_POINTER, page_pointer=True))


def _multi_step(lpub: Branch) -> None:
    ms = lpub.branch("MULTI_STEP")
    _margins(ms)
    _placement(ms, _R.CENTER_CENTER, _T.PAGE)
    _number(ms, "STEP_NUMBER", _R.TOP_LEFT_OUTSIDE, _T.CSI)
    _number(ms, "SUBMODEL_FONT")
    ms.add("SUBMODEL_FONT_COLOR", StringLeaf("Black"))
    ms.add("SEPARATOR", SepLeaf())
    ms.add("FREEFORM", FreeFormLeaf())
    _alloc(ms)
    _step_parts(ms)
    ms.add("DIVIDER_POINTER", PointerLeaf(Rc.DIVIDER_POINTER))
    ms.add("BEGIN", RcLeaf(Rc.STEP_GROUP_BEGIN))
    ms.add("DIVIDER", RcLeaf(Rc.STEP_GROUP_DIVIDER))
    ms.add("END", RcLeaf(Rc.STEP_GROUP_END))


def _parts_list(lpub: Branch, name: str, begin_ign: Rc, end: Rc, scale: float) -> None:
    pli = lpub.branch(name)
    _framed(
        pli,
        _R.TOP_LEFT_INSIDE_CORNER,
        _T.PAGE,
        border=BorderData(BorderType.ROUND, BorderLine.SOLID, "Black", DEFAULT_THICKNESS, 15.0),
        background=BackgroundData(type=BackgroundType.COLOR, string="#ffffff"),
    )
    pli.add("CONSTRAIN", ConstrainLeaf())
    _number(pli, "INSTANCE_COUNT")
    _number(pli, "ANNOTATE")
    _view(pli, scale)
    _renderer_parms(pli)
    pli.add("SHOW", BoolLeaf(True))
    pli.add("INCLUDE_SUBMODELS", BoolLeaf(False))
    pli.add("SORT", BoolLeaf(False))
    pli.add("SORT_BY", StringLeaf("Part Size", quoted=True))
    part = pli.branch("PART")
    _margins(part)
    annotation = pli.branch("ANNOTATION")
    annotation.add("DISPLAY", BoolLeaf(False))
    annotation.add("USE_TITLE", BoolLeaf(True))
    annotation.add("USE_FREE_FORM", BoolLeaf(False))
    annotation.add("USE_TITLE_AND_FREE_FORM", BoolLeaf(False))
    begin = pli.branch("BEGIN")
    begin.add("IGN", RcLeaf(begin_ign))
    begin.add("SUB", SubLeaf())
    pli.add("END", RcLeaf(end))


def _rotate_icon(lpub: Branch) -> None:
    icon = lpub.branch("ROTATE_ICON")
    _framed(
        icon,
        _R.RIGHT_TOP_OUTSIDE,
        _T.CSI,
        border=BorderData(BorderType.ROUND, BorderLine.SOLID, "Black", DEFAULT_THICKNESS, 10.0),
    )
    icon.add("SIZE", FloatPairLeaf((0.52, 0.52), min_value=0.0, max_value=1000.0))
    icon.add("ARROW", BorderLeaf(BorderData(BorderType.SQUARE, BorderLine.SOLID, "Blue", 1.0)))
    icon.add("ARROW_HEAD", ArrowHeadLeaf((0.0, 0.0, 0.25, 0.5)))
    icon.add("ARROW_END", ChoiceLeaf("SQUARE", _ARROW_END))
    icon.add("DISPLAY", BoolLeaf(True))
    icon.add("SCALE", FloatLeaf(1.0, min_value=-10000.0, max_value=10000.0))


def _lpub(root: Branch) -> Branch:
    lpub = root.branch("!LPUB")
    _page(lpub)
    _assem(lpub)
    _number(lpub, "STEP_NUMBER", _R.TOP_LEFT_INSIDE_CORNER, _T.PAGE)
    _callout(lpub)
    _page_pointer(lpub)
    _multi_step(lpub)
    _parts_list(lpub, "PLI", Rc.PLI_BEGIN_IGN, Rc.PLI_END, 0.75)
    _parts_list(lpub, "BOM", Rc.BOM_BEGIN_IGN, Rc.BOM_END, 0.75)
    _rotate_icon(lpub)

    one_to_one = _panel(lpub, "ONETOONE", _R.LEFT_OUTSIDE, _T.CSI)
    one_to_one.add("END", RcLeaf(Rc.ONE_TO_ONE_END))
    right_wrong = _panel(lpub, "RIGHTWRONG", _R.RIGHT_OUTSIDE, _T.CSI)
    right_wrong.add("END", RcLeaf(Rc.RIGHT_WRONG_END))
    illustration = _panel(lpub, "ILLUSTRATION", _R.BOTTOM_OUTSIDE, _T.CSI)
    illustration.add("POINTER", PointerLeaf(Rc.ILLUSTRATION_POINTER))
    submodel = _panel(lpub, "SUBMODEL", _R.TOP_LEFT_INSIDE_CORNER, _T.PAGE)
    _number(submodel, "INSTANCE_COUNT", _R.BOTTOM_RIGHT_OUTSIDE, _T.SUBMODEL)
    submodel.add("SHOW", BoolLeaf(True))
    part_id = lpub.branch("PARTID")
    _framed(part_id, _R.TOP_RIGHT_INSIDE_CORNER, _T.PAGE)
    part_id.add("ALIGNMENT", ChoiceLeaf(Placement.CENTER, _ALIGNMENT))
    sticker = lpub.branch("STICKER")
    _framed(sticker, _R.BOTTOM_RIGHT_INSIDE_CORNER, _T.PAGE)
    sticker.add("FILE", StringLeaf(quoted=True))
    sticker.add("SCALE", FloatLeaf(1.0, min_value=-10000.0, max_value=10000.0))

    remove = lpub.branch("REMOVE")
    remove.add("GROUP", StringLeaf(rc=Rc.REMOVE_GROUP))
    remove.add("PART", StringLeaf(rc=Rc.REMOVE_PART))
    remove.add("NAME", StringLeaf(rc=Rc.REMOVE_NAME))
    lpub.add("RESERVE", FloatLeaf(0.0, Rc.RESERVE_SPACE, min_value=0.0, max_value=1000000.0))
    part = lpub.branch("PART")
    part.branch("BEGIN").add("IGN", RcLeaf(Rc.PART_BEGIN_IGN))
    part.add("END", RcLeaf(Rc.PART_END))
    lpub.add("RESOLUTION", ResolutionLeaf())
    lpub.add("INSERT", InsertLeaf())
    lpub.add("INCLUDE", StringLeaf(rc=Rc.INCLUDE, quoted=True))
    lpub.add("NOSTEP", NoStepLeaf())
    fade = lpub.branch("FADE_STEP")
    fade.add("FADE", BoolLeaf(False))
    fade.add("FADE_COLOR", StringLeaf("Very_Light_Bluish_Gray"))
    fade.add("FADE_OPACITY", IntLeaf(50, min_value=0, max_value=100))
    lpub.add("CONSOLIDATE_INSTANCE_COUNT", BoolLeaf(False))
    lpub.branch("STEP_PLI").add("PER_STEP", BoolLeaf(True))
    return lpub


# ---------------------------------------------------------------------------
# Root
# ---------------------------------------------------------------------------


def build(root: Branch) -> Branch:
    """Populate root with the full keyword tree; returns the !LPUB branch."""
    lpub = _lpub(root)

    root.add("STEP", RcLeaf(Rc.STEP))
    root.add("CLEAR", RcLeaf(Rc.CLEAR))
    root.add("ROTSTEP", RotStepLeaf())
    root.add("BUFEXCHG", BuffExchgLeaf())

    mlcad = root.branch("MLCAD", lenient=True)
    mlcad.add("SKIP_BEGIN", RcLeaf(Rc.MLCAD_SKIP_BEGIN))
    mlcad.add("SKIP_END", RcLeaf(Rc.MLCAD_SKIP_END))
    mlcad.add("BTG", StringLeaf(rc=Rc.MLCAD_GROUP, quoted=False))

    synth = root.branch("SYNTH")
    synth.add("BEGIN", RcLeaf(Rc.SYNTH_BEGIN))
    synth.add("END", RcLeaf(Rc.SYNTH_END))
    for name in ("SHOW", "HIDE", "INSIDE", "OUTSIDE", "CROSS", "SYNTHESIZED"):
        synth.add(name, RcLeaf(Rc.OK))

    logger.debug("grammar built with %d leaves", sum(1 for _ in root.walk()))
    return lpub
