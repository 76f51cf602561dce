"""Tests for the placement grid, the keyword token map and placement leaves."""

from __future__ import annotations

import pytest

from lpubmeta.geometry import PlacementLeaf
from lpubmeta.placement import (
    BASE_RECTS,
    PLACEMENT_TABLE,
    RELATIVE_NAMES,
    RELATIVE_TO,
    TOKEN_MAP,
    Placement,
    PlacementType,
    Preposition,
    RectPlacement,
    ScopeKeyword,
    build_token_map,
    lookup_rect,
)
from lpubmeta.tokens import Rc
from lpubmeta.values import PlacementData
from tests.conftest import WHERE, attached

# ---------------------------------------------------------------------------
# Placement grid
# ---------------------------------------------------------------------------


class TestPlacementTable:
    def test_one_row_per_spot(self) -> None:
        assert len(PLACEMENT_TABLE) == len(RectPlacement) == 25
        assert len(set(PLACEMENT_TABLE)) == 25

    def test_lookup_inverts_table(self) -> None:
        for i, row in enumerate(PLACEMENT_TABLE):
            assert lookup_rect(*row) == RectPlacement(i)

    def test_inner_three_by_three_is_inside(self) -> None:
        for i, row in enumerate(PLACEMENT_TABLE):
            r, c = divmod(i, 5)
            inside = 1 <= r <= 3 and 1 <= c <= 3
            assert (row.preposition is Preposition.INSIDE) == inside, RectPlacement(i).name

    def test_unknown_triple(self) -> None:
        assert lookup_rect(Placement.TOP, Placement.TOP, Preposition.OUTSIDE) is None

    def test_base_rects_are_inside(self) -> None:
        for rect in BASE_RECTS.values():
            assert PLACEMENT_TABLE[rect].preposition is Preposition.INSIDE


class TestTokenMap:
    def test_read_only(self) -> None:
        with pytest.raises(TypeError):
            TOKEN_MAP["NEW"] = Placement.TOP  # type: ignore[index]

    def test_rebuild_is_identical(self) -> None:
        assert dict(build_token_map()) == dict(TOKEN_MAP)

    def test_keyword_classes(self) -> None:
        assert TOKEN_MAP["CENTER"] is Placement.CENTER
        assert TOKEN_MAP["OUTSIDE"] is Preposition.OUTSIDE
        assert TOKEN_MAP["LOCAL"] is ScopeKeyword.LOCAL
        assert TOKEN_MAP["ASSEM"] is PlacementType.CSI
        assert TOKEN_MAP["BASE_RIGHT"] is RectPlacement.RIGHT_INSIDE

    def test_step_group_alias(self) -> None:
        assert RELATIVE_TO["STEP_GROUP"] is PlacementType.STEP_GROUP
        assert RELATIVE_TO["MULTI_STEP"] is PlacementType.STEP_GROUP
        assert len(RELATIVE_TO) == len(RELATIVE_NAMES) + 1


# ---------------------------------------------------------------------------
# Placement directives
# ---------------------------------------------------------------------------


class TestPlacementDirective:
    def test_side_with_justification(self, parse, value) -> None:
        assert parse("0 !LPUB PLI PLACEMENT TOP LEFT PAGE") == Rc.OK
        v = value("!LPUB PLI PLACEMENT")
        assert v.placement is Placement.TOP
        assert v.justification is Placement.LEFT
        assert v.relative_to is PlacementType.PAGE
        assert v.preposition is Preposition.OUTSIDE
        assert v.rect_placement is RectPlacement.TOP_LEFT_OUTSIDE

    def test_corner_inside(self, parse, value) -> None:
        assert parse("0 !LPUB PLI PLACEMENT TOP_LEFT PAGE INSIDE") == Rc.OK
        assert value("!LPUB PLI PLACEMENT").rect_placement is RectPlacement.TOP_LEFT_INSIDE_CORNER

    def test_center_defaults_inside(self, parse, value) -> None:
        assert parse("0 !LPUB ASSEM PLACEMENT CENTER PAGE") == Rc.OK
        assert value("!LPUB ASSEM PLACEMENT").rect_placement is RectPlacement.CENTER_CENTER

    def test_inside_center_drops_justification(self, parse, value) -> None:
        assert parse("0 !LPUB PLI PLACEMENT TOP CENTER PAGE INSIDE") == Rc.OK
        v = value("!LPUB PLI PLACEMENT")
        assert v.rect_placement is RectPlacement.TOP_INSIDE
        assert v.justification is Placement.CENTER

    def test_offsets(self, parse, value) -> None:
        assert parse("0 !LPUB PLI PLACEMENT LEFT BOTTOM ASSEM OUTSIDE 0.1 0.2") == Rc.OK
        v = value("!LPUB PLI PLACEMENT")
        assert v.rect_placement is RectPlacement.LEFT_BOTTOM_OUTSIDE
        assert v.relative_to is PlacementType.CSI
        assert v.offsets == (0.1, 0.2)

    def test_offset_only_keeps_spot(self, parse, value) -> None:
        before = value("!LPUB PLI PLACEMENT")
        assert parse("0 !LPUB PLI PLACEMENT OFFSET 0.3 0.4") == Rc.OK
        after = value("!LPUB PLI PLACEMENT")
        assert after.rect_placement is before.rect_placement
        assert after.offsets == (0.3, 0.4)

    def test_step_group_alias(self, parse, value) -> None:
        assert parse("0 !LPUB CALLOUT PLACEMENT TOP_LEFT STEP_GROUP OUTSIDE") == Rc.OK
        assert value("!LPUB CALLOUT PLACEMENT").relative_to is PlacementType.STEP_GROUP

    @pytest.mark.parametrize(
        "args",
        [
            "TOP PAGE",
            "TOP LEFT",
            "TOP LEFT PAGE OUTSIDE 1",
            "TOP LEFT PAGE OUTSIDE x y",
            "DIAGONAL PAGE",
            "OFFSET 1",
            "",
        ],
    )
    def test_rejected(self, parse, value, args: str) -> None:
        before = value("!LPUB PLI PLACEMENT")
        assert parse(f"0 !LPUB PLI PLACEMENT {args}") == Rc.FAILURE
        assert value("!LPUB PLI PLACEMENT") == before


class TestPlacementFormat:
    def test_format_after_parse(self, parse, meta) -> None:
        parse("0 !LPUB PLI PLACEMENT TOP LEFT PAGE")
        text = meta.leaf("!LPUB PLI PLACEMENT").format()
        assert text == "0 !LPUB PLI PLACEMENT TOP LEFT PAGE OUTSIDE"

    def test_every_spot_reparses(self) -> None:
        for rect in RectPlacement:
            source = attached(PlacementLeaf(PlacementData.from_rect(rect, PlacementType.CSI)))
            target = attached(PlacementLeaf(PlacementData.from_rect(RectPlacement.CENTER_CENTER)))
            text = source.format_value(source.value())
            assert target.parse(text.split(), 0, WHERE) == Rc.OK
            assert target.value().rect_placement is rect, text
            assert target.value() == source.value()
