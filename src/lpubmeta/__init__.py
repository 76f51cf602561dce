"""LPub meta-command interpreter for LDraw model files."""

from __future__ import annotations

from lpubmeta.directives import (
    BuffExchgLeaf,
    CalloutBeginLeaf,
    InsertLeaf,
    PageSizeLeaf,
    ResolutionLeaf,
    RotStepLeaf,
    SubLeaf,
)
from lpubmeta.errors import Diagnostic, DirectiveError, GrammarError
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
from lpubmeta.meta import Meta
from lpubmeta.tokens import Rc, Where

__version__ = "0.1.0"

# Every kind of value leaf the grammar is built from.
LEAF_KINDS = (
    RcLeaf,
    NoStepLeaf,
    BoolLeaf,
    IntLeaf,
    FloatLeaf,
    FloatPairLeaf,
    StringLeaf,
    StringListLeaf,
    ChoiceLeaf,
    ArrowHeadLeaf,
    PlacementLeaf,
    PointerLeaf,
    BackgroundLeaf,
    BorderLeaf,
    SepLeaf,
    ConstrainLeaf,
    FreeFormLeaf,
    RotStepLeaf,
    BuffExchgLeaf,
    PageSizeLeaf,
    ResolutionLeaf,
    CalloutBeginLeaf,
    SubLeaf,
    InsertLeaf,
)

__all__ = [
    "LEAF_KINDS",
    "Diagnostic",
    "DirectiveError",
    "GrammarError",
    "Meta",
    "Rc",
    "Where",
    "parse_lines",
]


def parse_lines(lines: list[str], source: str = "") -> list[Rc]:
    """Run every line through a fresh Meta and return the action codes."""
    meta = Meta()
    return [meta.parse(line, Where(source, n)) for n, line in enumerate(lines, start=1)]
