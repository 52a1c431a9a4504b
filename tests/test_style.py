"""Tests for the style normalizer."""

from widgetforge.ir.style import STYLE_BUCKETS, flatten_style, normalize_style


def test_classifies_into_buckets():
    style = normalize_style(
        {
            "padding": 16,
            "fontSize": 14,
            "backgroundColor": "#FFFFFF",
            "borderRadius": 8,
            "shadowRadius": 4,
        }
    )
    assert style == {
        "layout": {"padding": 16},
        "typography": {"fontSize": 14},
        "colors": {"backgroundColor": "#FFFFFF"},
        "borders": {"borderRadius": 8},
        "shadows": {"shadowRadius": 4},
    }


def test_empty_buckets_are_omitted():
    assert normalize_style({"color": "#000"}) == {"typography": {"color": "#000"}}


def test_empty_or_missing_input():
    assert normalize_style(None) == {}
    assert normalize_style({}) == {}


def test_unknown_keys_dropped():
    style = normalize_style({"padding": 4, "transform": [{"rotate": "45deg"}], "cursor": "pointer"})
    assert style == {"layout": {"padding": 4}}


def test_reclassifying_bucketed_style_is_idempotent():
    style = normalize_style(
        {
            "flexDirection": "row",
            "gap": 8,
            "fontWeight": "700",
            "opacity": 0.5,
            "borderWidth": 1,
            "borderColor": "#ccc",
            "elevation": 2,
        }
    )
    assert normalize_style(flatten_style(style)) == style


def test_buckets_are_disjoint():
    seen = set()
    for keys in STYLE_BUCKETS.values():
        assert not (seen & keys)
        seen |= keys


def test_shadow_offset_is_decomposed():
    style = normalize_style({"shadowOffset": {"width": 1, "height": 3}, "shadowOpacity": 0.3})
    assert style == {"shadows": {"shadowOffsetX": 1, "shadowOffsetY": 3, "shadowOpacity": 0.3}}


def test_numeric_font_weight_becomes_string():
    assert normalize_style({"fontWeight": 700}) == {"typography": {"fontWeight": "700"}}
