"""Tests for pointers, backgrounds, borders, separators and parts list layout."""

from __future__ import annotations

import pytest

from lpubmeta.errors import GrammarError
from lpubmeta.geometry import PointerLeaf
from lpubmeta.placement import Placement, PlacementType, RectPlacement
from lpubmeta.tokens import Rc
from lpubmeta.values import (
    Alloc,
    BackgroundType,
    BorderLine,
    BorderType,
    ConstrainType,
    GradientMode,
    GradientSpread,
    GradientType,
    SepData,
)

# ---------------------------------------------------------------------------
# Pointers
# ---------------------------------------------------------------------------


class TestPointer:
    def test_short_corner_form(self, parse, value) -> None:
        assert parse("0 !LPUB CALLOUT POINTER TOP_LEFT 0.5 0.5 0.125") == Rc.CALLOUT_POINTER
        v = value("!LPUB CALLOUT POINTER")
        assert v.placement is Placement.TOP_LEFT
        assert v.tip == (0.5, 0.5)
        assert v.base == 0.125
        assert v.segments == 1

    def test_side_form(self, parse, value) -> None:
        assert parse("0 !LPUB CALLOUT POINTER LEFT 0.25 0.1 0.2") == Rc.CALLOUT_POINTER
        v = value("!LPUB CALLOUT POINTER")
        assert v.placement is Placement.LEFT
        assert v.loc == 0.25
        assert v.tip == (0.1, 0.2)
        assert (v.x2, v.y2, v.x4, v.y4) == (0.0, 0.0, 0.0, 0.0)

    def test_side_form_with_base(self, parse, value) -> None:
        parse("0 !LPUB CALLOUT POINTER BOTTOM 0.5 0.1 0.2 0.3")
        assert value("!LPUB CALLOUT POINTER").base == 0.3

    def test_full_form(self, parse, value) -> None:
        line = "0 !LPUB CALLOUT POINTER TOP_RIGHT 0.1 0.2 0.3 0.4 0.5 0.6 0.7 0.8 0.2 2"
        assert parse(line) == Rc.CALLOUT_POINTER
        v = value("!LPUB CALLOUT POINTER")
        assert v.points == (0.1, 0.2, 0.3, 0.4, 0.5, 0.6, 0.7, 0.8)
        assert v.base == 0.2
        assert v.segments == 2

    def test_full_form_without_base(self, parse, value) -> None:
        parse("0 !LPUB CALLOUT POINTER TOP_RIGHT 1 2 3 4 5 6 7 8 3")
        v = value("!LPUB CALLOUT POINTER")
        assert v.segments == 3
        assert v.base == 0.125

    def test_zero_base_keeps_previous(self, parse, value) -> None:
        parse("0 !LPUB CALLOUT POINTER TOP_LEFT 0.5 0.5 0.3")
        parse("0 !LPUB CALLOUT POINTER TOP_LEFT 0.5 0.5 0")
        assert value("!LPUB CALLOUT POINTER").base == 0.3

    def test_page_pointer(self, parse, value) -> None:
        line = (
            "0 !LPUB PAGE_POINTER POINTER TOP_LEFT "
            "0.1 0.2 0.3 0.4 0.5 0.6 0.7 0.8 0.125 1 BASE_RIGHT"
        )
        assert parse(line) == Rc.PAGE_POINTER
        assert value("!LPUB PAGE_POINTER POINTER").rect_placement is RectPlacement.RIGHT_INSIDE

    def test_page_pointer_bad_base_spot(self, parse) -> None:
        line = "0 !LPUB PAGE_POINTER POINTER TOP_LEFT 1 2 3 4 5 6 7 8 0.125 1 BASE_NOWHERE"
        assert parse(line) == Rc.FAILURE

    def test_divider_pointers(self, parse) -> None:
        assert parse("0 !LPUB MULTI_STEP DIVIDER_POINTER TOP_LEFT 0.5 0.5") == Rc.DIVIDER_POINTER
        assert parse("0 !LPUB CALLOUT DIVIDER_POINTER TOP_LEFT 0.5 0.5") == Rc.DIVIDER_POINTER

    def test_illustration_pointer(self, parse) -> None:
        assert parse("0 !LPUB ILLUSTRATION POINTER TOP_LEFT 0.5 0.5") == Rc.ILLUSTRATION_POINTER

    @pytest.mark.parametrize(
        "args",
        [
            "TOP_LEFT 0.5",
            "TOP_LEFT 0.5 x",
            "LEFT x 0.5 0.5",
            "SIDEWAYS 0.5 0.5",
            "TOP_LEFT 1 2 3 4 5",
        ],
    )
    def test_rejected(self, parse, value, args: str) -> None:
        before = value("!LPUB CALLOUT POINTER")
        assert parse(f"0 !LPUB CALLOUT POINTER {args}") == Rc.FAILURE
        assert value("!LPUB CALLOUT POINTER") == before

    def test_non_pointer_code(self) -> None:
        with pytest.raises(GrammarError):
            PointerLeaf(Rc.OK)

    def test_format(self, parse, meta) -> None:
        parse("0 !LPUB CALLOUT POINTER TOP_LEFT 0.5 0.5 0.125")
        assert meta.leaf("!LPUB CALLOUT POINTER").format() == (
            "0 !LPUB CALLOUT POINTER TOP_LEFT 0.500 0.500 0.000 0.000 "
            "0.000 0.000 0.000 0.000 0.125 1"
        )

    def test_page_pointer_format(self, meta) -> None:
        text = meta.leaf("!LPUB PAGE_POINTER POINTER").format()
        assert text.endswith(" 0.125 1 BASE_TOP_LEFT")


# ---------------------------------------------------------------------------
# Backgrounds
# ---------------------------------------------------------------------------


class TestBackground:
    def test_transparent(self, parse, value) -> None:
        assert parse("0 !LPUB PAGE BACKGROUND TRANSPARENT") == Rc.OK
        assert value("!LPUB PAGE BACKGROUND").type is BackgroundType.TRANSPARENT
        parse('0 !LPUB PAGE BACKGROUND COLOR "#ff0000"')
        parse("0 !LPUB PAGE BACKGROUND TRANS")
        assert value("!LPUB PAGE BACKGROUND").type is BackgroundType.TRANSPARENT

    def test_color(self, parse, value) -> None:
        parse('0 !LPUB PAGE BACKGROUND COLOR "#ff0000"')
        v = value("!LPUB PAGE BACKGROUND")
        assert v.type is BackgroundType.COLOR
        assert v.string == "#ff0000"

    def test_submodel_color(self, parse, value) -> None:
        parse("0 !LPUB PAGE BACKGROUND SUBMODEL_BACKGROUND_COLOR")
        assert value("!LPUB PAGE BACKGROUND").type is BackgroundType.SUBMODEL_COLOR

    def test_picture(self, parse, value) -> None:
        parse('0 !LPUB PAGE BACKGROUND PICTURE "bg.png" STRETCH')
        v = value("!LPUB PAGE BACKGROUND")
        assert v.type is BackgroundType.IMAGE
        assert v.string == "bg.png"
        assert v.stretch

    def test_bare_picture_name(self, parse, value) -> None:
        parse('0 !LPUB PAGE BACKGROUND "bg.png"')
        v = value("!LPUB PAGE BACKGROUND")
        assert v.type is BackgroundType.IMAGE
        assert not v.stretch

    def test_gradient(self, parse, value) -> None:
        line = '0 !LPUB PAGE BACKGROUND GRADIENT 0 1 0 10 20 45 "0,0|1,1" "0,0xff000000|1,0xffffffff"'
        assert parse(line) == Rc.OK
        v = value("!LPUB PAGE BACKGROUND")
        assert v.type is BackgroundType.GRADIENT
        assert v.gmode is GradientMode.LOGICAL
        assert v.gspread is GradientSpread.REPEAT
        assert v.gtype is GradientType.LINEAR
        assert v.gsize == (10.0, 20.0)
        assert v.gangle == 45.0
        assert v.gpoints == ((0.0, 0.0), (1.0, 1.0))
        assert v.gstops == ((0.0, 0xFF000000), (1.0, 0xFFFFFFFF))

    def test_gradient_semicolons_and_short_colors(self, parse, value) -> None:
        line = '0 !LPUB PAGE BACKGROUND GRADIENT 2 2 1 0 0 0 "0,0;0.5,0.5" "0,#00ff00;1,#0000ff"'
        assert parse(line) == Rc.OK
        v = value("!LPUB PAGE BACKGROUND")
        assert v.gtype is GradientType.RADIAL
        assert v.gpoints == ((0.0, 0.0), (0.5, 0.5))
        assert v.gstops == ((0.0, 0xFF00FF00), (1.0, 0xFF0000FF))

    @pytest.mark.parametrize(
        "args",
        [
            'GRADIENT 7 0 0 0 0 0 "0,0|1,1" "0,0xff000000"',
            'GRADIENT 0 0 0 0 0 0 "0,0|1" "0,0xff000000"',
            'GRADIENT 0 0 0 0 0 0 "0,0|1,1" "0,red"',
            'PICTURE "bg.png" TILE',
            "COLOR a b",
        ],
    )
    def test_rejected(self, parse, value, args: str) -> None:
        before = value("!LPUB PAGE BACKGROUND")
        assert parse(f"0 !LPUB PAGE BACKGROUND {args}") == Rc.FAILURE
        assert value("!LPUB PAGE BACKGROUND") == before

    def test_gradient_format(self, parse, meta) -> None:
        parse('0 !LPUB PAGE BACKGROUND GRADIENT 0 1 0 0 0 0 "0,0|1,1" "0,0xff000000|1,0xffffffff"')
        assert meta.leaf("!LPUB PAGE BACKGROUND").format() == (
            '0 !LPUB PAGE BACKGROUND GRADIENT 0 1 0 0 0 0 "0,0|1,1" "0,0xff000000|1,0xffffffff"'
        )


# ---------------------------------------------------------------------------
# Borders and separators
# ---------------------------------------------------------------------------


class TestBorder:
    def test_square(self, parse, value) -> None:
        assert parse("0 !LPUB PAGE BORDER SQUARE 1 Black 0.125") == Rc.OK
        v = value("!LPUB PAGE BORDER")
        assert v.type is BorderType.SQUARE
        assert v.line is BorderLine.SOLID
        assert v.color == "Black"
        assert v.thickness == 0.125

    def test_round_with_margins(self, parse, value) -> None:
        parse("0 !LPUB PAGE BORDER ROUND 2 Red 0.1 20 MARGINS 0.5 0.25")
        v = value("!LPUB PAGE BORDER")
        assert v.type is BorderType.ROUND
        assert v.line is BorderLine.DASH
        assert v.radius == 20.0
        assert v.margins == (0.5, 0.25)

    def test_none(self, parse, value) -> None:
        parse("0 !LPUB PAGE BORDER SQUARE 1 Black 0.125")
        assert parse("0 !LPUB PAGE BORDER NONE") == Rc.OK
        v = value("!LPUB PAGE BORDER")
        assert v.type is BorderType.NONE
        assert v.line is BorderLine.NONE

    def test_none_with_line_and_margins(self, parse, value) -> None:
        assert parse("0 !LPUB PAGE BORDER NONE 0 MARGINS 1 1") == Rc.OK
        assert value("!LPUB PAGE BORDER").margins == (1.0, 1.0)

    @pytest.mark.parametrize(
        "args",
        [
            "SQUARE 9 Black 1",
            "SQUARE 1 Black thick",
            "SQUARE 1 Black 1 EXTRA",
            "SQUARE 1 Black 1 MARGINS 1",
            "ROUND 1 Black 1",
            "DOTTED",
        ],
    )
    def test_rejected(self, parse, value, args: str) -> None:
        before = value("!LPUB PAGE BORDER")
        assert parse(f"0 !LPUB PAGE BORDER {args}") == Rc.FAILURE
        assert value("!LPUB PAGE BORDER") == before

    def test_format(self, parse, meta) -> None:
        parse("0 !LPUB CALLOUT BORDER ROUND 2 Red 0.1 20 MARGINS 0.5 0.25")
        assert meta.leaf("!LPUB CALLOUT BORDER").format() == (
            "0 !LPUB CALLOUT BORDER ROUND 2 Red 0.1 20 MARGINS 0.5 0.25"
        )

    def test_separator(self, parse, value) -> None:
        assert parse("0 !LPUB CALLOUT SEPARATOR 0.02 Black 0.1 0.1") == Rc.OK
        assert value("!LPUB CALLOUT SEPARATOR") == SepData(0.02, "Black", (0.1, 0.1))
        assert parse("0 !LPUB CALLOUT SEPARATOR thin Black 0.1 0.1") == Rc.FAILURE


# ---------------------------------------------------------------------------
# Parts list layout and free form
# ---------------------------------------------------------------------------


class TestLayout:
    def test_constrain(self, parse, value) -> None:
        assert parse("0 !LPUB PLI CONSTRAIN COLS 3") == Rc.OK
        v = value("!LPUB PLI CONSTRAIN")
        assert v.type is ConstrainType.COLS
        assert v.constraint == 3.0
        parse("0 !LPUB PLI CONSTRAIN SQUARE")
        assert value("!LPUB PLI CONSTRAIN").type is ConstrainType.SQUARE

    def test_constrain_rejected(self, parse) -> None:
        assert parse("0 !LPUB PLI CONSTRAIN WIDTH") == Rc.FAILURE
        assert parse("0 !LPUB PLI CONSTRAIN AREA 2") == Rc.FAILURE
        assert parse("0 !LPUB PLI CONSTRAIN HEIGHT tall") == Rc.FAILURE

    def test_freeform(self, parse, value) -> None:
        assert parse("0 !LPUB CALLOUT FREEFORM STEP_NUMBER LEFT") == Rc.OK
        v = value("!LPUB CALLOUT FREEFORM")
        assert v.mode
        assert v.base is PlacementType.STEP_NUMBER
        assert v.justification is Placement.LEFT
        parse("0 !LPUB CALLOUT FREEFORM FALSE")
        assert not value("!LPUB CALLOUT FREEFORM").mode

    def test_freeform_rejected(self, parse) -> None:
        assert parse("0 !LPUB CALLOUT FREEFORM PAGE LEFT") == Rc.FAILURE

    def test_alloc(self, parse, value) -> None:
        assert parse("0 !LPUB CALLOUT ALLOC HORIZONTAL") == Rc.OK
        assert value("!LPUB CALLOUT ALLOC") is Alloc.HORIZONTAL

    def test_alloc_shorthand(self, parse, value, meta) -> None:
        assert parse("0 !LPUB MULTI_STEP HORIZONTAL") == Rc.OK
        assert value("!LPUB MULTI_STEP ALLOC") is Alloc.HORIZONTAL
        assert parse("0 !LPUB CALLOUT LOCAL HORIZONTAL") == Rc.OK
        leaf = meta.leaf("!LPUB CALLOUT ALLOC")
        assert leaf.value() is Alloc.HORIZONTAL
        assert leaf.global_value() is Alloc.VERTICAL
