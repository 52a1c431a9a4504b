"""Flexbox alignment, expressed once in domain terms.

Both generators map ``alignItems`` / ``justifyContent`` through these
functions and only own the final enum -> native name lowering, so the two
targets can differ in syntax but not in which alignment they pick.
"""

from __future__ import annotations

from enum import Enum


class CrossAlignment(Enum):
    """Placement of children across the container's main axis."""

    START = "start"
    CENTER = "center"
    END = "end"
    STRETCH = "stretch"
    BASELINE = "baseline"


class MainArrangement(Enum):
    """Distribution of children along the container's main axis."""

    START = "start"
    CENTER = "center"
    END = "end"
    SPACE_BETWEEN = "space-between"
    SPACE_AROUND = "space-around"
    SPACE_EVENLY = "space-evenly"


_ALIGN_ITEMS = {
    "flex-start": CrossAlignment.START,
    "center": CrossAlignment.CENTER,
    "flex-end": CrossAlignment.END,
    "stretch": CrossAlignment.STRETCH,
    "baseline": CrossAlignment.BASELINE,
}

_JUSTIFY_CONTENT = {
    "flex-start": MainArrangement.START,
    "center": MainArrangement.CENTER,
    "flex-end": MainArrangement.END,
    "space-between": MainArrangement.SPACE_BETWEEN,
    "space-around": MainArrangement.SPACE_AROUND,
    "space-evenly": MainArrangement.SPACE_EVENLY,
}


def cross_alignment(align_items: str | None) -> CrossAlignment:
    """Unset or unrecognised values center, matching the stack primitives' default."""
    return _ALIGN_ITEMS.get(align_items or "", CrossAlignment.CENTER)


def main_arrangement(justify_content: str | None) -> MainArrangement:
    return _JUSTIFY_CONTENT.get(justify_content or "", MainArrangement.START)
