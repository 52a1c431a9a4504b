"""Style normalizer — classify a flat style bag into the five IR buckets.

Classification is a static set lookup. Keys that belong to no bucket are
dropped rather than rejected, so markup written against a newer style
vocabulary still compiles.
"""

from __future__ import annotations

import logging
from typing import Any

logger = logging.getLogger(__name__)

LAYOUT_KEYS = frozenset(
    {
        "flexDirection", "alignItems", "justifyContent", "gap",
        "padding", "paddingHorizontal", "paddingVertical",
        "paddingTop", "paddingRight", "paddingBottom", "paddingLeft",
        "margin", "marginHorizontal", "marginVertical",
        "marginTop", "marginRight", "marginBottom", "marginLeft",
        "width", "height", "minWidth", "minHeight", "maxWidth", "maxHeight",
        "flex", "flexGrow", "flexShrink", "flexBasis",
        "position", "top", "right", "bottom", "left",
        "aspectRatio", "zIndex",
    }
)

TYPOGRAPHY_KEYS = frozenset(
    {
        "fontSize", "fontWeight", "fontFamily", "fontStyle", "color",
        "numberOfLines", "ellipsizeMode", "textAlign", "textTransform",
        "lineHeight", "letterSpacing",
    }
)

COLOR_KEYS = frozenset({"backgroundColor", "opacity", "tintColor"})

BORDER_KEYS = frozenset(
    {
        "borderRadius", "borderTopLeftRadius", "borderTopRightRadius",
        "borderBottomLeftRadius", "borderBottomRightRadius",
        "borderWidth", "borderColor", "borderStyle",
    }
)

SHADOW_KEYS = frozenset(
    {"shadowColor", "shadowOpacity", "shadowRadius", "shadowOffsetX", "shadowOffsetY", "elevation"}
)

# Bucket name -> membership table, in the order buckets appear in the IR.
STYLE_BUCKETS: dict[str, frozenset[str]] = {
    "layout": LAYOUT_KEYS,
    "typography": TYPOGRAPHY_KEYS,
    "colors": COLOR_KEYS,
    "borders": BORDER_KEYS,
    "shadows": SHADOW_KEYS,
}

_KEY_TO_BUCKET = {key: bucket for bucket, keys in STYLE_BUCKETS.items() for key in keys}


def normalize_style(raw: dict[str, Any] | None) -> dict[str, dict[str, Any]]:
    """Classify a flat property bag into ``{bucket: {key: value}}``.

    Empty buckets are omitted; an absent or empty bag yields ``{}``.
    """
    if not raw:
        return {}

    flat = _expand_derived(raw)
    style: dict[str, dict[str, Any]] = {}
    for key, value in flat.items():
        bucket = _KEY_TO_BUCKET.get(key)
        if bucket is None:
            logger.debug("Dropping unknown style key %r", key)
            continue
        if key == "fontWeight" and isinstance(value, (int, float)) and not isinstance(value, bool):
            value = str(int(value))
        style.setdefault(bucket, {})[key] = value
    return style


def flatten_style(style: dict[str, dict[str, Any]] | None) -> dict[str, Any]:
    """Inverse of ``normalize_style`` for already-bucketed styles."""
    flat: dict[str, Any] = {}
    for values in (style or {}).values():
        flat.update(values)
    return flat


def _expand_derived(raw: dict[str, Any]) -> dict[str, Any]:
    """Decompose ``shadowOffset: {width, height}`` into its two scalar keys."""
    if "shadowOffset" not in raw:
        return raw
    flat = {k: v for k, v in raw.items() if k != "shadowOffset"}
    offset = raw["shadowOffset"]
    if isinstance(offset, dict):
        if "width" in offset:
            flat.setdefault("shadowOffsetX", offset["width"])
        if "height" in offset:
            flat.setdefault("shadowOffsetY", offset["height"])
    return flat
