"""Layout leaves: placement, pointers, backgrounds, borders and friends."""

from __future__ import annotations

import re
from dataclasses import replace

from lpubmeta.errors import GrammarError
from lpubmeta.lexer import quote
from lpubmeta.nodes import Leaf
from lpubmeta.placement import (
    BASE_RECT_NAMES,
    BASE_RECTS,
    PLACEMENT_TABLE,
    RELATIVE_NAMES,
    RELATIVE_TO,
    Placement,
    Preposition,
    lookup_rect,
)
from lpubmeta.tokens import POINTER_RCS, Rc, Where, fmt_num, to_float, to_floats, to_int
from lpubmeta.values import (
    BackgroundData,
    BackgroundType,
    BorderData,
    BorderLine,
    BorderType,
    ConstrainData,
    ConstrainType,
    FreeFormData,
    GradientMode,
    GradientSpread,
    GradientType,
    PlacementData,
    PointerData,
    SepData,
)

_CORNERS = ("TOP_LEFT", "TOP_RIGHT", "BOTTOM_LEFT", "BOTTOM_RIGHT")
_SIDES = ("TOP", "BOTTOM", "LEFT", "RIGHT", "CENTER")


# ---------------------------------------------------------------------------
# Placement
# ---------------------------------------------------------------------------


class PlacementLeaf(Leaf[PlacementData]):
    """Where an item sits relative to another item.

    ``OFFSET x y`` alone moves the item without changing its spot.
    """

    def __init__(self, default: PlacementData) -> None:
        super().__init__(default)

    def parse(self, tokens: list[str], index: int, where: Where) -> Rc:
        rest = tokens[index:]
        if not rest:
            self.fail("missing placement")

        if rest[0] == "OFFSET":
            offsets = to_floats(rest[1:])
            if offsets is None or len(offsets) != 2:
                self.fail("OFFSET expects two numbers")
            self.commit(replace(self.value(), offsets=(offsets[0], offsets[1])), where)
            return Rc.OK

        first = rest[0]
        pos = 1
        justification: Placement | None = None
        if first in ("TOP", "BOTTOM"):
            if pos < len(rest) and rest[pos] in ("LEFT", "CENTER", "RIGHT"):
                justification = Placement[rest[pos]]
                pos += 1
        elif first in ("LEFT", "RIGHT"):
            if pos < len(rest) and rest[pos] in ("TOP", "CENTER", "BOTTOM"):
                justification = Placement[rest[pos]]
                pos += 1
        elif first not in _CORNERS and first != "CENTER":
            self.fail(f"unknown placement {first!r}")
        placement = Placement[first]

        if pos >= len(rest) or rest[pos] not in RELATIVE_TO:
            self.fail("expected the item to place relative to")
        relative_to = RELATIVE_TO[rest[pos]]
        pos += 1

        preposition: Preposition | None = None
        if pos < len(rest) and rest[pos] in ("INSIDE", "OUTSIDE"):
            preposition = Preposition[rest[pos]]
            pos += 1

        offsets = (0.0, 0.0)
        if len(rest) - pos == 2:
            values = to_floats(rest[pos:])
            if values is None:
                self.fail(f"expected two offsets, got {' '.join(rest[pos:])!r}")
            offsets = (values[0], values[1])
            pos += 2
        if pos != len(rest):
            self.fail(f"unexpected {' '.join(rest[pos:])!r}")

        if preposition is None:
            preposition = Preposition.INSIDE if placement is Placement.CENTER else Preposition.OUTSIDE
        if preposition is Preposition.INSIDE and justification is Placement.CENTER:
            justification = None

        rect = lookup_rect(placement, justification, preposition)
        if rect is None:
            self.fail(f"no such placement: {' '.join(rest)}")
        self.commit(PlacementData.from_rect(rect, relative_to, offsets), where)
        return Rc.OK

    def format_value(self, value: PlacementData) -> str:
        row = PLACEMENT_TABLE[value.rect_placement]
        parts = [row.placement.name]
        if row.justification is not None:
            parts.append(row.justification.name)
        parts.append(RELATIVE_NAMES[value.relative_to])
        parts.append(row.preposition.name)
        if value.offsets != (0.0, 0.0):
            parts.extend(fmt_num(v) for v in value.offsets)
        return " ".join(parts)

    def doc(self, out: list[str], preamble: str) -> None:
        tail = "<relative-to> [INSIDE|OUTSIDE] [<float> <float>]"
        out.append(f"{preamble} <TOP|BOTTOM> [LEFT|CENTER|RIGHT] {tail}")
        out.append(f"{preamble} <LEFT|RIGHT> [TOP|CENTER|BOTTOM] {tail}")
        out.append(f"{preamble} <TOP_LEFT|TOP_RIGHT|BOTTOM_LEFT|BOTTOM_RIGHT|CENTER> {tail}")
        out.append(f"{preamble} OFFSET <float> <float>")


# ---------------------------------------------------------------------------
# Pointers
# ---------------------------------------------------------------------------


class PointerLeaf(Leaf[PointerData]):
    """Arrow from an item to the spot it refers to.

    The action code is fixed when the grammar is built and names the kind
    of pointer. Page pointers carry a trailing ``BASE_*`` spot on their
    full forms.
    """

    def __init__(
        self, rc: Rc, page_pointer: bool = False, default: PointerData | None = None
    ) -> None:
        if rc not in POINTER_RCS:
            raise GrammarError(f"pointer leaf bound to non-pointer code {rc.name}")
        super().__init__(default if default is not None else PointerData(), rc)
        self.page_pointer = page_pointer

    def parse(self, tokens: list[str], index: int, where: Where) -> Rc:
        rest = tokens[index:]
        if not rest:
            self.fail("missing pointer placement")
        head = rest[0]
        loc = 0.0
        if head in _CORNERS:
            body = rest[1:]
        elif head in _SIDES:
            if len(rest) < 2 or (value := to_float(rest[1])) is None:
                self.fail(f"{head} pointer needs a location along the edge")
            loc = value
            body = rest[2:]
        else:
            self.fail(f"unknown pointer placement {head!r}")

        extra = 1 if self.page_pointer else 0
        base_tok: str | None = None
        seg_tok: str | None = None
        rect_tok: str | None = None
        n = len(body)
        if n == 2:
            coords = body
        elif n == 3:
            coords, base_tok = body[:2], body[2]
        elif n == 9 + extra:
            coords, seg_tok = body[:8], body[8]
            rect_tok = body[9] if extra else None
        elif n == 10 + extra:
            coords, base_tok, seg_tok = body[:8], body[8], body[9]
            rect_tok = body[10] if extra else None
        else:
            self.fail(f"wrong number of pointer arguments ({len(rest)})")

        points = to_floats(coords)
        if points is None:
            self.fail(f"expected coordinates, got {' '.join(coords)!r}")
        points += [0.0] * (8 - len(points))

        current = self.value()
        base = current.base if current.base > 0 else 0.125
        if base_tok is not None:
            value = to_float(base_tok)
            if value is None:
                self.fail(f"expected a base width, got {base_tok!r}")
            if value > 0:
                base = value

        segments = 1
        if seg_tok is not None:
            count = to_int(seg_tok)
            if count is None or count < 1:
                self.fail(f"expected a segment count, got {seg_tok!r}")
            segments = count

        rect = current.rect_placement
        if rect_tok is not None:
            if rect_tok not in BASE_RECTS:
                self.fail(f"expected a BASE_* position, got {rect_tok!r}")
            rect = BASE_RECTS[rect_tok]

        x1, y1, x2, y2, x3, y3, x4, y4 = points
        self.commit(
            PointerData(
                placement=Placement[head],
                loc=loc,
                x1=x1,
                y1=y1,
                x2=x2,
                y2=y2,
                x3=x3,
                y3=y3,
                x4=x4,
                y4=y4,
                base=base,
                segments=segments,
                rect_placement=rect,
            ),
            where,
        )
        return self.rc

    def format_value(self, value: PointerData) -> str:
        parts = [value.placement.name]
        if value.placement.name in _SIDES:
            parts.append(f"{value.loc:.3f}")
        parts.extend(f"{p:.3f}" for p in value.points)
        parts.append(fmt_num(value.base))
        parts.append(str(value.segments))
        if self.page_pointer:
            parts.append(BASE_RECT_NAMES[value.rect_placement])
        return " ".join(parts)

    def doc(self, out: list[str], preamble: str) -> None:
        rect = " <BASE_*>" if self.page_pointer else ""
        points = " ".join(f"<x{i}> <y{i}>" for i in range(1, 5))
        corners = "|".join(_CORNERS)
        sides = "|".join(_SIDES)
        out.append(f"{preamble} <{corners}> <x> <y> [<base>]")
        out.append(f"{preamble} <{corners}> {points} [<base>] <segments>{rect}")
        out.append(f"{preamble} <{sides}> <loc> <x> <y> [<base>]")
        out.append(f"{preamble} <{sides}> <loc> {points} [<base>] <segments>{rect}")


# ---------------------------------------------------------------------------
# Background
# ---------------------------------------------------------------------------

_LIST_DELIMS = re.compile(r"[|;]")


def _parse_points(text: str) -> tuple[tuple[float, float], ...] | None:
    points: list[tuple[float, float]] = []
    for item in _LIST_DELIMS.split(text):
        values = to_floats(item.split(","))
        if values is None or len(values) != 2:
            return None
        points.append((values[0], values[1]))
    return tuple(points)


def _parse_color(text: str) -> int | None:
    digits = text.removeprefix("0x").removeprefix("0X").removeprefix("#")
    if len(digits) not in (6, 8) or any(ch not in "0123456789abcdefABCDEF" for ch in digits):
        return None
    rgba = int(digits, 16)
    return rgba | 0xFF000000 if len(digits) == 6 else rgba


def _parse_stops(text: str) -> tuple[tuple[float, int], ...] | None:
    stops: list[tuple[float, int]] = []
    for item in _LIST_DELIMS.split(text):
        pos_text, _, color_text = item.partition(",")
        pos = to_float(pos_text)
        color = _parse_color(color_text)
        if pos is None or color is None:
            return None
        stops.append((pos, color))
    return tuple(stops)


class BackgroundLeaf(Leaf[BackgroundData]):
    def __init__(self, default: BackgroundData | None = None) -> None:
        super().__init__(default if default is not None else BackgroundData())

    def parse(self, tokens: list[str], index: int, where: Where) -> Rc:
        rest = tokens[index:]
        current = self.value()
        n = len(rest)
        if n == 1 and rest[0] in ("TRANS", "TRANSPARENT"):
            value = replace(current, type=BackgroundType.TRANSPARENT, string="")
        elif n == 1 and rest[0] == "SUBMODEL_BACKGROUND_COLOR":
            value = replace(current, type=BackgroundType.SUBMODEL_COLOR, string="")
        elif n == 1:
            value = replace(current, type=BackgroundType.IMAGE, string=rest[0], stretch=False)
        elif n == 2 and rest[0] == "COLOR":
            value = replace(current, type=BackgroundType.COLOR, string=rest[1])
        elif n == 2 and rest[0] == "PICTURE":
            value = replace(current, type=BackgroundType.IMAGE, string=rest[1], stretch=False)
        elif n == 3 and rest[0] == "PICTURE" and rest[2] == "STRETCH":
            value = replace(current, type=BackgroundType.IMAGE, string=rest[1], stretch=True)
        elif n == 9 and rest[0] == "GRADIENT":
            value = self._gradient(current, rest[1:])
        else:
            self.fail(f"unrecognized background {' '.join(rest)!r}")
        self.commit(value, where)
        return Rc.OK

    def _gradient(self, current: BackgroundData, args: list[str]) -> BackgroundData:
        mode, spread, gtype = (to_int(t) for t in args[:3])
        if mode not in tuple(GradientMode):
            self.fail(f"bad gradient mode {args[0]!r}")
        if spread not in tuple(GradientSpread):
            self.fail(f"bad gradient spread {args[1]!r}")
        if gtype not in tuple(GradientType):
            self.fail(f"bad gradient type {args[2]!r}")
        numbers = to_floats(args[3:6])
        if numbers is None:
            self.fail(f"bad gradient size or angle {' '.join(args[3:6])!r}")
        points = _parse_points(args[6])
        if points is None:
            self.fail(f"bad gradient points {args[6]!r}")
        stops = _parse_stops(args[7])
        if stops is None:
            self.fail(f"bad gradient stops {args[7]!r}")
        return replace(
            current,
            type=BackgroundType.GRADIENT,
            string="",
            gmode=GradientMode(mode),
            gspread=GradientSpread(spread),
            gtype=GradientType(gtype),
            gsize=(numbers[0], numbers[1]),
            gangle=numbers[2],
            gpoints=points,
            gstops=stops,
        )

    def format_value(self, value: BackgroundData) -> str:
        if value.type is BackgroundType.TRANSPARENT:
            return "TRANSPARENT"
        if value.type is BackgroundType.SUBMODEL_COLOR:
            return "SUBMODEL_BACKGROUND_COLOR"
        if value.type is BackgroundType.COLOR:
            return f"COLOR {quote(value.string, force=True)}"
        if value.type is BackgroundType.GRADIENT:
            points = "|".join(f"{fmt_num(x)},{fmt_num(y)}" for x, y in value.gpoints)
            stops = "|".join(f"{fmt_num(pos)},0x{rgba:08x}" for pos, rgba in value.gstops)
            return " ".join(
                [
                    "GRADIENT",
                    str(int(value.gmode)),
                    str(int(value.gspread)),
                    str(int(value.gtype)),
                    fmt_num(value.gsize[0]),
                    fmt_num(value.gsize[1]),
                    fmt_num(value.gangle),
                    quote(points, force=True),
                    quote(stops, force=True),
                ]
            )
        text = f"PICTURE {quote(value.string, force=True)}"
        return text + " STRETCH" if value.stretch else text

    def doc(self, out: list[str], preamble: str) -> None:
        out.append(f"{preamble} <TRANSPARENT|SUBMODEL_BACKGROUND_COLOR>")
        out.append(f'{preamble} COLOR <"color">')
        out.append(f'{preamble} PICTURE <"picture"> [STRETCH]')
        out.append(
            f"{preamble} GRADIENT <mode> <spread> <type> <width> <height> <angle>"
            ' <"x,y|x,y..."> <"pos,0xAARRGGBB|...">'
        )


# ---------------------------------------------------------------------------
# Border and separator
# ---------------------------------------------------------------------------


class BorderLeaf(Leaf[BorderData]):
    def __init__(self, default: BorderData | None = None) -> None:
        super().__init__(default if default is not None else BorderData())

    def _line(self, token: str) -> BorderLine:
        line = to_int(token)
        if line not in tuple(BorderLine):
            self.fail(f"border line style must be 0..5, got {token!r}")
        return BorderLine(line)

    def _number(self, token: str, what: str) -> float:
        value = to_float(token)
        if value is None:
            self.fail(f"expected a border {what}, got {token!r}")
        return value

    def parse(self, tokens: list[str], index: int, where: Where) -> Rc:
        rest = tokens[index:]
        current = self.value()
        kind = rest[0] if rest else ""
        if kind == "NONE":
            pos = 1
            line = BorderLine.NONE
            if len(rest) > 1 and to_int(rest[1]) is not None:
                line = self._line(rest[1])
                pos = 2
            value = replace(current, type=BorderType.NONE, line=line)
        elif kind == "SQUARE" and len(rest) >= 4:
            value = replace(
                current,
                type=BorderType.SQUARE,
                line=self._line(rest[1]),
                color=rest[2],
                thickness=self._number(rest[3], "thickness"),
            )
            pos = 4
        elif kind == "ROUND" and len(rest) >= 5:
            value = replace(
                current,
                type=BorderType.ROUND,
                line=self._line(rest[1]),
                color=rest[2],
                thickness=self._number(rest[3], "thickness"),
                radius=self._number(rest[4], "radius"),
            )
            pos = 5
        else:
            self.fail(f"unrecognized border {' '.join(rest)!r}")

        trailing = rest[pos:]
        if trailing:
            margins = to_floats(trailing[1:])
            if trailing[0] != "MARGINS" or margins is None or len(margins) != 2:
                self.fail(f"unexpected {' '.join(trailing)!r}")
            value = replace(value, margins=(margins[0], margins[1]))
        self.commit(value, where)
        return Rc.OK

    def format_value(self, value: BorderData) -> str:
        if value.type is BorderType.NONE:
            text = f"NONE {int(value.line)}"
        else:
            text = (
                f"{value.type.name} {int(value.line)} {quote(value.color)} "
                f"{fmt_num(value.thickness)}"
            )
            if value.type is BorderType.ROUND:
                text += f" {fmt_num(value.radius)}"
        return f"{text} MARGINS {fmt_num(value.margins[0])} {fmt_num(value.margins[1])}"

    def doc(self, out: list[str], preamble: str) -> None:
        margins = "[MARGINS <float> <float>]"
        out.append(f"{preamble} NONE [<line>] {margins}")
        out.append(f"{preamble} SQUARE <line> <color> <thickness> {margins}")
        out.append(f"{preamble} ROUND <line> <color> <thickness> <radius> {margins}")


class SepLeaf(Leaf[SepData]):
    arg_doc = "<thickness> <color> <margin x> <margin y>"

    def __init__(self, default: SepData | None = None) -> None:
        super().__init__(default if default is not None else SepData())

    def parse(self, tokens: list[str], index: int, where: Where) -> Rc:
        thickness, color, mx, my = self.args(tokens, index, 4)
        numbers = to_floats([thickness, mx, my])
        if numbers is None:
            self.fail(f"expected thickness and margins, got {' '.join(tokens[index:])!r}")
        self.commit(SepData(numbers[0], color, (numbers[1], numbers[2])), where)
        return Rc.OK

    def format_value(self, value: SepData) -> str:
        return (
            f"{fmt_num(value.thickness)} {quote(value.color)} "
            f"{fmt_num(value.margins[0])} {fmt_num(value.margins[1])}"
        )


# ---------------------------------------------------------------------------
# Parts list layout
# ---------------------------------------------------------------------------


class ConstrainLeaf(Leaf[ConstrainData]):
    def __init__(self, default: ConstrainData | None = None) -> None:
        super().__init__(default if default is not None else ConstrainData())

    def parse(self, tokens: list[str], index: int, where: Where) -> Rc:
        rest = self.args(tokens, index, 1, 2)
        kind = rest[0]
        if len(rest) == 1 and kind in ("AREA", "SQUARE"):
            value = ConstrainData(ConstrainType[kind])
        elif len(rest) == 2 and kind in ("WIDTH", "HEIGHT", "COLS"):
            amount = to_float(rest[1])
            if amount is None:
                self.fail(f"expected a number after {kind}, got {rest[1]!r}")
            value = ConstrainData(ConstrainType[kind], amount)
        else:
            self.fail(f"unrecognized constraint {' '.join(rest)!r}")
        self.commit(value, where)
        return Rc.OK

    def format_value(self, value: ConstrainData) -> str:
        if value.type in (ConstrainType.AREA, ConstrainType.SQUARE):
            return value.type.name
        return f"{value.type.name} {fmt_num(value.constraint)}"

    def doc(self, out: list[str], preamble: str) -> None:
        out.append(f"{preamble} <AREA|SQUARE>")
        out.append(f"{preamble} <WIDTH|HEIGHT|COLS> <float>")


class FreeFormLeaf(Leaf[FreeFormData]):
    _BASES = ("STEP_NUMBER", "ASSEM", "PLI", "ROTATE_ICON")
    _SIDES = ("LEFT", "RIGHT", "TOP", "BOTTOM", "CENTER")

    def __init__(self, default: FreeFormData | None = None) -> None:
        super().__init__(default if default is not None else FreeFormData())

    def parse(self, tokens: list[str], index: int, where: Where) -> Rc:
        rest = self.args(tokens, index, 1, 2)
        if rest == ["FALSE"]:
            value = replace(self.value(), mode=False)
        elif len(rest) == 2 and rest[0] in self._BASES and rest[1] in self._SIDES:
            value = FreeFormData(True, RELATIVE_TO[rest[0]], Placement[rest[1]])
        else:
            self.fail(f"unrecognized free form {' '.join(rest)!r}")
        self.commit(value, where)
        return Rc.OK

    def format_value(self, value: FreeFormData) -> str:
        if not value.mode:
            return "FALSE"
        return f"{RELATIVE_NAMES[value.base]} {value.justification.name}"

    def doc(self, out: list[str], preamble: str) -> None:
        out.append(f"{preamble} FALSE")
        out.append(f"{preamble} <{'|'.join(self._BASES)}> <{'|'.join(self._SIDES)}>")
