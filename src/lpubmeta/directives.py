"""Instruction leaves: directives that mainly drive the traversal."""

from __future__ import annotations

import re
from dataclasses import replace

from lpubmeta.lexer import quote
from lpubmeta.nodes import Leaf
from lpubmeta.tokens import Rc, Where, fmt_num, to_float, to_floats
from lpubmeta.values import (
    BuffExchgData,
    CalloutMode,
    InsertData,
    InsertType,
    PageSizeData,
    ResolutionData,
    ResolutionUnit,
    RotStepData,
    SubData,
)

_TRANSFORMS = ("ABS", "REL", "ADD")


class RotStepLeaf(Leaf[RotStepData]):
    arg_doc = "<rotX> <rotY> <rotZ> <ABS|REL|ADD>"

    def __init__(self) -> None:
        super().__init__(RotStepData(), Rc.ROT_STEP)

    def parse(self, tokens: list[str], index: int, where: Where) -> Rc:
        rest = self.args(tokens, index, 1, 4)
        if rest == ["END"]:
            self.commit(RotStepData(), where)
            return self.rc
        rots = to_floats(rest[:3]) if len(rest) == 4 else None
        if rots is None or rest[3] not in _TRANSFORMS:
            self.fail(f"expected three angles and ABS, REL or ADD, got {' '.join(rest)!r}")
        self.commit(RotStepData((rots[0], rots[1], rots[2]), rest[3]), where)
        return self.rc

    def format_value(self, value: RotStepData) -> str:
        if not value.type:
            return "END"
        x, y, z = value.rots
        return f"{fmt_num(x)} {fmt_num(y)} {fmt_num(z)} {value.type}"

    def doc(self, out: list[str], preamble: str) -> None:
        super().doc(out, preamble)
        out.append(f"{preamble} END")


_BUFFER_NAME = re.compile(r"[A-Z]")


class BuffExchgLeaf(Leaf[BuffExchgData]):
    arg_doc = "<bufferName> <STORE|RETRIEVE>"

    def __init__(self) -> None:
        super().__init__(BuffExchgData(), Rc.BUFFER_STORE)

    def parse(self, tokens: list[str], index: int, where: Where) -> Rc:
        name, action = self.args(tokens, index, 2)
        if _BUFFER_NAME.fullmatch(name) is None:
            self.fail(f"buffer name must be a single letter A-Z, got {name!r}")
        if action == "STORE":
            rc = Rc.BUFFER_STORE
        elif action == "RETRIEVE":
            rc = Rc.BUFFER_LOAD
        else:
            self.fail(f"expected STORE or RETRIEVE, got {action!r}")
        self.commit(BuffExchgData(name, action), where)
        return rc

    def format_value(self, value: BuffExchgData) -> str:
        return f"{value.buffer} {value.type}"


class PageSizeLeaf(Leaf[PageSizeData]):
    arg_doc = "<float> <float> <page size id>"

    def __init__(
        self,
        default: PageSizeData,
        rc: Rc = Rc.PAGE_SIZE,
        min_value: float = 1.0,
        max_value: float = 1000.0,
    ) -> None:
        super().__init__(default, rc)
        self.min_value = min_value
        self.max_value = max_value

    def parse(self, tokens: list[str], index: int, where: Where) -> Rc:
        rest = self.args(tokens, index, 2, 3)
        size = to_floats(rest[:2])
        if size is None:
            self.fail(f"expected width and height, got {' '.join(rest[:2])!r}")
        if not all(self.min_value <= v <= self.max_value for v in size):
            self.fail(
                f"{rest[0]} x {rest[1]} is outside {self.min_value:g}..{self.max_value:g}",
                Rc.RANGE_ERROR,
            )
        size_id = rest[2] if len(rest) == 3 else "Custom"
        self.commit(PageSizeData(size[0], size[1], size_id), where)
        return self.rc

    def format_value(self, value: PageSizeData) -> str:
        return f"{value.width:.4f} {value.height:.4f} {quote(value.size_id)}"


class ResolutionLeaf(Leaf[ResolutionData]):
    arg_doc = "<float> <DPI|DPCM>"

    def __init__(self) -> None:
        super().__init__(ResolutionData(), Rc.RESOLUTION)

    def parse(self, tokens: list[str], index: int, where: Where) -> Rc:
        amount, unit = self.args(tokens, index, 2)
        value = to_float(amount)
        if value is None or value <= 0:
            self.fail(f"expected a positive resolution, got {amount!r}")
        if unit not in ResolutionUnit.__members__:
            self.fail(f"expected DPI or DPCM, got {unit!r}")
        self.commit(ResolutionData(value, ResolutionUnit[unit]), where)
        return self.rc

    def format_value(self, value: ResolutionData) -> str:
        return f"{fmt_num(value.value)} {value.unit.name}"


class CalloutBeginLeaf(Leaf[CalloutMode]):
    arg_doc = "[ASSEMBLED|ROTATED]"

    def __init__(self) -> None:
        super().__init__(CalloutMode.UNASSEMBLED, Rc.CALLOUT_BEGIN)

    def parse(self, tokens: list[str], index: int, where: Where) -> Rc:
        rest = self.args(tokens, index, 0, 1)
        mode = CalloutMode.UNASSEMBLED
        if rest:
            if rest[0] not in ("ASSEMBLED", "ROTATED"):
                self.fail(f"expected ASSEMBLED or ROTATED, got {rest[0]!r}")
            mode = CalloutMode[rest[0]]
        self.commit(mode, where)
        return self.rc

    def format_value(self, value: CalloutMode) -> str:
        return "" if value is CalloutMode.UNASSEMBLED else value.name


# ---------------------------------------------------------------------------
# Parts list substitution
# ---------------------------------------------------------------------------

# Argument count -> substitution level
_SUB_LEVELS = {1: 1, 2: 2, 3: 3, 4: 4, 6: 5, 9: 6, 13: 7}


class SubLeaf(Leaf[SubData]):
    """Substitute part shown in the parts list instead of the real one.

    Each level adds attributes: color, scale, field of view, camera
    latitude/longitude, target x y z, rotation x y z plus transform.
    """

    arg_doc = (
        "<part> [<color> [<scale> [<fov> [<lat> <lon> [<tx> <ty> <tz>"
        " [<rx> <ry> <rz> <ABS|REL|ADD>]]]]]]"
    )

    def __init__(self) -> None:
        super().__init__(SubData(), Rc.PLI_BEGIN_SUB1)

    def parse(self, tokens: list[str], index: int, where: Where) -> Rc:
        rest = self.args(tokens, index, *_SUB_LEVELS)
        level = _SUB_LEVELS[len(rest)]
        numeric = rest[2:12]
        if to_floats(numeric) is None:
            self.fail(f"expected numeric attributes, got {' '.join(numeric)!r}")
        if level == 7 and rest[12] not in _TRANSFORMS:
            self.fail(f"expected ABS, REL or ADD, got {rest[12]!r}")
        color = rest[1] if len(rest) > 1 else ""
        self.commit(SubData(rest[0], color, tuple(rest[2:]), level), where)
        return Rc[f"PLI_BEGIN_SUB{level}"]

    def format_value(self, value: SubData) -> str:
        parts = [quote(value.part)]
        if value.color:
            parts.append(quote(value.color))
        parts.extend(value.attributes)
        return " ".join(parts)


# ---------------------------------------------------------------------------
# Insert
# ---------------------------------------------------------------------------

_PAGE_INSERTS = {
    "PAGE": (InsertType.PAGE, Rc.INSERT_PAGE),
    "MODEL": (InsertType.MODEL, Rc.INSERT_FINAL_MODEL),
}


class InsertLeaf(Leaf[InsertData]):
    """Inserted pages, the final model, pictures, text, arrows and the like."""

    def __init__(self) -> None:
        super().__init__(InsertData(), Rc.INSERT)

    def parse(self, tokens: list[str], index: int, where: Where) -> Rc:
        rest = tokens[index:]
        if not rest:
            self.fail("missing insert kind")
        head = rest[0]

        if head in _PAGE_INSERTS and len(rest) == 1:
            kind, rc = _PAGE_INSERTS[head]
            self.commit(InsertData(type=kind), where)
            return rc
        if head == "COVER_PAGE":
            side = rest[1] if len(rest) == 2 else ""
            if len(rest) > 2 or side not in ("", "FRONT", "BACK"):
                self.fail(f"expected COVER_PAGE [FRONT|BACK], got {' '.join(rest)!r}")
            self.commit(InsertData(type=InsertType.COVER_PAGE, cover_side=side), where)
            return Rc.INSERT_COVER_PAGE

        if head == "PICTURE" and len(rest) >= 2:
            value = InsertData(type=InsertType.PICTURE, pic_name=rest[1])
            pos = 2
            if rest[pos : pos + 1] == ["SCALE"]:
                scale = to_float(rest[pos + 1]) if len(rest) > pos + 1 else None
                if scale is None:
                    self.fail("SCALE expects a number")
                value = replace(value, pic_scale=scale)
                pos += 2
        elif head == "TEXT" and len(rest) >= 4:
            value = InsertData(
                type=InsertType.TEXT, text=rest[1], text_font=rest[2], text_color=rest[3]
            )
            pos = 4
        elif head == "ARROW" and len(rest) >= 8:
            n = to_floats(rest[1:8])
            if n is None:
                self.fail(f"ARROW expects seven numbers, got {' '.join(rest[1:8])!r}")
            value = InsertData(
                type=InsertType.ARROW,
                arrow_head=(n[0], n[1]),
                arrow_tail=(n[2], n[3]),
                hafting_depth=n[4],
                hafting_tip=(n[5], n[6]),
            )
            pos = 8
        elif head in ("BOM", "ROTATE_ICON"):
            value = InsertData(type=InsertType[head])
            pos = 1
        else:
            self.fail(f"unrecognized insert {' '.join(rest)!r}")

        trailing = rest[pos:]
        if trailing:
            offsets = to_floats(trailing[1:])
            if trailing[0] != "OFFSET" or offsets is None or len(offsets) != 2:
                self.fail(f"unexpected {' '.join(trailing)!r}")
            value = replace(value, offsets=(offsets[0], offsets[1]))
        self.commit(value, where)
        return self.rc

    def format_value(self, value: InsertData) -> str:
        kind = value.type
        if kind in (InsertType.PAGE, InsertType.MODEL, InsertType.BOM, InsertType.ROTATE_ICON):
            text = kind.name
        elif kind is InsertType.COVER_PAGE:
            return f"COVER_PAGE {value.cover_side}".rstrip()
        elif kind is InsertType.PICTURE:
            text = f"PICTURE {quote(value.pic_name, force=True)}"
            if value.pic_scale != 1.0:
                text += f" SCALE {fmt_num(value.pic_scale)}"
        elif kind is InsertType.TEXT:
            text = (
                f"TEXT {quote(value.text, force=True)} "
                f"{quote(value.text_font, force=True)} {quote(value.text_color)}"
            )
        else:
            numbers = (*value.arrow_head, *value.arrow_tail, value.hafting_depth, *value.hafting_tip)
            text = "ARROW " + " ".join(fmt_num(v) for v in numbers)
        if kind in (InsertType.PAGE, InsertType.MODEL):
            return text
        if value.offsets != (0.5, 0.5):
            text += f" OFFSET {fmt_num(value.offsets[0])} {fmt_num(value.offsets[1])}"
        return text

    def doc(self, out: list[str], preamble: str) -> None:
        offset = "[OFFSET <float> <float>]"
        out.append(f"{preamble} <PAGE|MODEL>")
        out.append(f"{preamble} COVER_PAGE [FRONT|BACK]")
        out.append(f'{preamble} PICTURE <"name"> [SCALE <float>] {offset}')
        out.append(f'{preamble} TEXT <"text"> <"font"> <color> {offset}')
        out.append(
            f"{preamble} ARROW <headX> <headY> <tailX> <tailY> <depth> <tipX> <tipY> {offset}"
        )
        out.append(f"{preamble} <BOM|ROTATE_ICON> {offset}")
