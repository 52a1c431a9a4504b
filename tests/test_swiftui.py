"""Tests for the SwiftUI / WidgetKit generator."""

import tempfile
from pathlib import Path

import pytest

from widgetforge.errors import DuplicateRootError, UnsupportedVersionError
from widgetforge.generators.swiftui import (
    SwiftUIGenerator,
    generate_swiftui,
    generate_widget_scaffold,
    swift_color,
    swift_modifiers,
    swift_stack_alignment,
    write_swift_files,
)
from widgetforge.ir.models import NodeType, node_from_dict, root_from_dict


def _root(tree: dict, root_id: str = "src_Card.tsx", **extra):
    return root_from_dict({"version": 1, "rootId": root_id, "tree": tree, **extra})


def _emit(tree: dict) -> str:
    return SwiftUIGenerator().emit_node(node_from_dict(tree), 0)


def _modifiers(style: dict) -> str:
    return swift_modifiers(node_from_dict({"type": "Spacer", "style": style}).style)


# --- Colors ---


def test_hex_color_becomes_srgb_components():
    assert swift_color("#FF0000") == "Color(.sRGB, red: 1.000, green: 0.000, blue: 0.000, opacity: 1.000)"
    assert swift_color("#80336699") == "Color(.sRGB, red: 0.200, green: 0.400, blue: 0.600, opacity: 0.502)"


def test_named_color_passes_through():
    assert swift_color("AccentColor") == 'Color("AccentColor")'


def test_unset_color():
    assert swift_color(None) is None
    assert swift_color("") is None


# --- Modifiers ---


def test_uniform_padding_wins():
    assert _modifiers({"layout": {"padding": 16, "paddingTop": 4}}) == ".padding(16)"


def test_directional_padding():
    assert _modifiers({"layout": {"paddingHorizontal": 8, "paddingTop": 2}}) == (
        ".padding(.horizontal, 8).padding(.top, 2)"
    )


def test_frame_is_one_call():
    assert _modifiers({"layout": {"width": 100, "height": 50, "maxWidth": 200}}) == (
        ".frame(width: 100, height: 50, maxWidth: 200)"
    )


def test_modifier_order():
    style = {
        "layout": {"padding": 12, "width": 40, "aspectRatio": 1.5, "zIndex": 2},
        "colors": {"backgroundColor": "#000000", "opacity": 0.5},
        "borders": {"borderRadius": 8, "borderWidth": 1, "borderColor": "#FFFFFF"},
        "shadows": {"shadowRadius": 6},
    }
    s = _modifiers(style)
    order = [".frame(", ".aspectRatio(", ".background(", ".opacity(", ".cornerRadius(",
             ".overlay(", ".shadow(", ".padding(", ".zIndex("]
    positions = [s.index(m) for m in order]
    assert positions == sorted(positions)
    assert ".overlay(RoundedRectangle(cornerRadius: 8).stroke(" in s
    assert "lineWidth: 1))" in s


def test_shadow_defaults():
    assert _modifiers({"shadows": {"shadowColor": "#000"}}) == (
        ".shadow(color: Color(.sRGB, red: 0.000, green: 0.000, blue: 0.000, opacity: 1.000).opacity(0.2), "
        "radius: 4, x: 0, y: 2)"
    )
    assert _modifiers({"shadows": {"elevation": 3}}) == ".shadow(color: Color.black.opacity(0.2), radius: 4, x: 0, y: 2)"


def test_stack_alignment_tables():
    assert swift_stack_alignment(None, horizontal=True) == ".center"
    assert swift_stack_alignment("flex-start", horizontal=True) == ".top"
    assert swift_stack_alignment("flex-start", horizontal=False) == ".leading"
    assert swift_stack_alignment("flex-end", horizontal=False) == ".trailing"
    assert swift_stack_alignment("baseline", horizontal=True) == ".firstTextBaseline"


# --- Nodes ---


def test_view_and_stack_containers():
    code = _emit(
        {
            "type": "View",
            "children": [
                {
                    "type": "Stack",
                    "axis": "horizontal",
                    "style": {"layout": {"gap": 8, "alignItems": "flex-end"}},
                    "children": [{"type": "Text", "text": "a"}],
                }
            ],
        }
    )
    assert code.startswith("VStack(alignment: .center, spacing: 0) {")
    assert "HStack(alignment: .bottom, spacing: 8) {" in code


def test_padding_sits_outside_background_and_shadow():
    code = _emit(
        {
            "type": "View",
            "style": {
                "layout": {"padding": 16},
                "colors": {"backgroundColor": "#FFFFFF"},
                "shadows": {"shadowRadius": 3},
            },
            "children": [{"type": "Text", "text": "a"}],
        }
    )
    tail = code.rsplit("}", 1)[1]
    assert tail.startswith(".background(Color(.sRGB, red: 1.000")
    assert tail.endswith("radius: 3, x: 0, y: 2).padding(16)")


def test_empty_view_is_clear():
    assert _emit({"type": "View", "children": []}) == "Color.clear"


def test_deeplink_stack_is_wrapped_in_link():
    code = _emit(
        {
            "type": "Stack",
            "axis": "vertical",
            "action": {"type": "deeplink", "url": "myapp://detail"},
            "children": [],
        }
    )
    assert code.startswith('Link(destination: URL(string: "myapp://detail")!) {')


def test_other_actions_are_not_wrapped():
    code = _emit({"type": "Stack", "axis": "vertical", "action": {"type": "refresh"}, "children": []})
    assert "Link(" not in code


def test_text_typography():
    code = _emit(
        {
            "type": "Text",
            "text": "Hi",
            "style": {
                "typography": {
                    "fontSize": 18,
                    "fontWeight": "700",
                    "fontStyle": "italic",
                    "color": "#FFFFFF",
                    "numberOfLines": 2,
                    "textAlign": "center",
                    "textTransform": "uppercase",
                }
            },
        }
    )
    assert code.startswith('Text("Hi").font(.system(size: 18)).fontWeight(.bold).italic()')
    assert ".foregroundStyle(Color(.sRGB, red: 1.000" in code
    assert ".lineLimit(2).multilineTextAlignment(.center).textCase(.uppercase)" in code


def test_numeric_text():
    assert _emit({"type": "Text", "text": 72}) == 'Text("72")'


def test_leaf_primitives():
    assert _emit({"type": "Button", "label": "Go"}) == 'Button("Go", action: {})'
    assert _emit({"type": "Spacer"}) == "Spacer()"
    assert _emit({"type": "Spacer", "flex": 1}) == "Spacer().frame(maxWidth: .infinity, maxHeight: .infinity)"
    assert _emit({"type": "ProgressBar", "progress": 0.75}) == "ProgressView(value: 0.75)"
    assert _emit({"type": "ProgressBar", "progress": 0, "indeterminate": True}) == "ProgressView()"
    assert _emit({"type": "Image", "uri": "https://a/b.png"}) == 'AsyncImage(url: URL(string: "https://a/b.png"))'


def test_image_resize_mode_uses_closure():
    code = _emit({"type": "Image", "uri": "https://a/b.png", "resizeMode": "cover"})
    assert "{ image in" in code
    assert "image.resizable().aspectRatio(contentMode: .fill)" in code


def test_list_lowering():
    code = _emit({"type": "List", "items": ["Mon", "Tue", {"x": 1}], "renderItem": "row", "horizontal": True})
    assert code.startswith("ScrollView(.horizontal) {")
    assert 'Text("Mon")' in code and 'Text("Tue")' in code
    assert "HStack(" in code


def test_accessibility_label():
    code = _emit({"type": "Button", "label": "Go", "accessibility": {"accessibilityLabel": "Start"}})
    assert code.endswith('.accessibilityLabel("Start")')


def test_every_node_type_has_an_emitter():
    assert set(SwiftUIGenerator().emitters) == set(NodeType)


def test_missing_emitter_falls_back_to_empty_view():
    generator = SwiftUIGenerator()
    del generator.emitters[NodeType.TEXT]
    assert generator.emit_node(node_from_dict({"type": "Text", "text": "x"}), 0) == "EmptyView()"
    assert generator.primitives == [(NodeType.TEXT, "EmptyView")]


# --- Files ---


def test_generate_struct():
    code = generate_swiftui(_root({"type": "Text", "text": "Hi"}))
    assert code.startswith("import SwiftUI\n\nstruct src_Card_tsx: View {")
    assert '        Text("Hi")' in code


def test_wrong_version_is_rejected():
    root = _root({"type": "Text", "text": "Hi"})
    root.version = 2
    with pytest.raises(UnsupportedVersionError):
        generate_swiftui(root)


def test_widget_scaffold():
    root = _root(
        {"type": "Text", "text": "Hi"},
        widget={"kind": "Card", "families": ["systemSmall", "medium"], "displayName": "Card"},
        dataProvider={"refreshInterval": 900},
    )
    code = generate_widget_scaffold(root)
    assert 'let kind: String = "Card"' in code
    assert ".supportedFamilies([.systemSmall])" in code
    assert '.configurationDisplayName("Card")' in code
    assert "policy: .after(Date().addingTimeInterval(900))" in code
    assert "src_Card_tsx()" in code


def test_widget_scaffold_timeline():
    timeline = {
        "entries": [{"date": "2026-01-01T09:00:00Z", "relevance": 0.5}, {"date": "2026-01-01T10:00:00Z"}],
        "policy": {"type": "custom", "minutes": 30},
    }
    root = _root(
        {"type": "Text", "text": "Hi"},
        widget={"kind": "Card", "families": ["systemSmall"], "timeline": timeline},
        dataProvider={"refreshInterval": 900},
    )
    code = generate_widget_scaffold(root)
    assert (
        'src_Card_tsxEntry(date: ISO8601DateFormatter().date(from: "2026-01-01T09:00:00Z") ?? Date(), '
        "relevance: TimelineEntryRelevance(score: 0.5))"
    ) in code
    assert 'date(from: "2026-01-01T10:00:00Z") ?? Date())]' in code
    assert "policy: .after(Date().addingTimeInterval(1800))" in code


@pytest.mark.parametrize(
    "policy, expected",
    [
        ("atEnd", ".atEnd"),
        ("never", ".never"),
        ("after15Minutes", ".after(Date().addingTimeInterval(900))"),
        ("afterHour", ".after(Date().addingTimeInterval(3600))"),
        ("afterDay", ".after(Date().addingTimeInterval(86400))"),
    ],
)
def test_named_timeline_policy(policy, expected):
    root = _root(
        {"type": "Text", "text": "Hi"},
        widget={"kind": "Card", "families": ["systemSmall"], "timeline": {"entries": [], "policy": policy}},
    )
    code = generate_widget_scaffold(root)
    assert f"Timeline(entries: [src_Card_tsxEntry(date: Date())], policy: {expected})" in code


def test_write_swift_files():
    roots = [
        _root({"type": "Text", "text": "Hi"}),
        _root({"type": "Text", "text": "W"}, root_id="src_W.tsx", widget={"kind": "W", "families": ["systemSmall"]}),
    ]
    with tempfile.TemporaryDirectory() as tmpdir:
        written = write_swift_files(roots, tmpdir)
        names = sorted(p.relative_to(tmpdir).as_posix() for p in written)
        bundle = (Path(tmpdir) / "Widgets" / "GeneratedWidgets.swift").read_text()

    assert names == [
        "Generated/src_Card_tsx.swift",
        "Generated/src_W_tsx.swift",
        "Widgets/GeneratedWidgets.swift",
        "Widgets/src_W_tsxWidget.swift",
    ]
    assert "src_W_tsxWidget()" in bundle
    assert "src_Card_tsx" not in bundle


def test_colliding_type_names_are_rejected():
    roots = [
        _root({"type": "Text", "text": "A"}, root_id="a-b.tsx"),
        _root({"type": "Text", "text": "B"}, root_id="a_b.tsx"),
    ]
    with tempfile.TemporaryDirectory() as tmpdir:
        with pytest.raises(DuplicateRootError) as exc_info:
            write_swift_files(roots, tmpdir)
        assert list(Path(tmpdir).iterdir()) == []
    assert "a-b.tsx" in exc_info.value.message
    assert "'a_b_tsx'" in exc_info.value.message
