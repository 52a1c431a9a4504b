"""Both generators must lay out the same IR the same way.

The two outputs are never textually comparable, so each generator's
``primitives`` trace is reduced to a structural digest (abstract kind per
node, in emission order) and the digests are compared.
"""

import pytest

from widgetforge.compiler import compile_source
from widgetforge.generators.compose import ComposeGenerator, GlanceGenerator
from widgetforge.generators.swiftui import SwiftUIGenerator
from widgetforge.ir.models import NodeType, root_from_dict

_KINDS = {
    "VStack": "column",
    "Column": "column",
    "HStack": "row",
    "Row": "row",
    "Color.clear": "empty",
    "Box": "empty",
    "Text": "text",
    "Button": "button",
    "AsyncImage": "image",
    "Image": "image",
    "Spacer": "spacer",
    "ProgressView": "progress",
    "LinearProgressIndicator": "progress",
    "ScrollView": "list",
    "LazyColumn": "list",
    "LazyRow": "list",
}


def _digest(primitives) -> list[tuple[str, str]]:
    return [(node_type.value, _KINDS[primitive]) for node_type, primitive in primitives]


def _digests(root) -> tuple[list, list]:
    swift = SwiftUIGenerator()
    swift.emit_node(root.tree, 0)
    compose = ComposeGenerator()
    compose.emit_node(root.tree, 0)
    return _digest(swift.primitives), _digest(compose.primitives)


TREES = [
    {"type": "View", "children": []},
    {"type": "Text", "text": "solo"},
    {
        "type": "View",
        "style": {"layout": {"padding": 16, "gap": 4}},
        "children": [
            {"type": "Text", "text": "Title"},
            {
                "type": "Stack",
                "axis": "horizontal",
                "children": [
                    {"type": "Image", "uri": "https://a/b.png"},
                    {"type": "Spacer"},
                    {"type": "Button", "label": "Go"},
                ],
            },
            {"type": "ProgressBar", "progress": 0.75},
            {"type": "List", "items": ["a", "b"], "renderItem": "row"},
            {"type": "View", "children": []},
        ],
    },
    {
        "type": "Stack",
        "axis": "vertical",
        "action": {"type": "deeplink", "url": "myapp://x"},
        "children": [
            {"type": "Stack", "axis": "horizontal", "children": [{"type": "Text", "text": 1}]},
            {"type": "Stack", "axis": "vertical", "children": []},
        ],
    },
]


@pytest.mark.parametrize("tree", TREES)
def test_same_structure_from_both_generators(tree):
    root = root_from_dict({"version": 1, "rootId": "t.tsx", "tree": tree})
    swift, compose = _digests(root)
    assert swift == compose


def test_digest_follows_source_order():
    source = (
        "export function Row() {\n"
        "  return (\n"
        '    <Stack axis="horizontal">\n'
        "      <Text>a</Text>\n"
        "      {['x', 'y'].map(v => <Button label={v} />)}\n"
        "      <ProgressBar progress={0.75} />\n"
        "    </Stack>\n"
        "  );\n"
        "}\n"
    )
    root = compile_source(source, "src/Row.tsx")
    swift, compose = _digests(root)
    expected = [
        ("Stack", "row"),
        ("Text", "text"),
        ("Button", "button"),
        ("Button", "button"),
        ("ProgressBar", "progress"),
    ]
    assert swift == expected
    assert compose == expected


def test_progress_value_survives_both_generators():
    root = root_from_dict({"version": 1, "rootId": "p.tsx", "tree": {"type": "ProgressBar", "progress": 0.75}})
    assert "ProgressView(value: 0.75)" in SwiftUIGenerator().emit_node(root.tree, 0)
    assert "progress = { 0.75f }" in ComposeGenerator().emit_node(root.tree, 0)


def test_glance_keeps_the_same_order():
    tree = TREES[2]
    root = root_from_dict({"version": 1, "rootId": "t.tsx", "tree": tree})
    swift = SwiftUIGenerator()
    swift.emit_node(root.tree, 0)
    glance = GlanceGenerator()
    glance.emit_node(root.tree, 0)
    # Glance lists have no lazy row, but vertical lists keep their kind.
    assert _digest(glance.primitives) == _digest(swift.primitives)


def test_every_kind_is_covered_by_the_digest():
    emitted = set()
    for tree in TREES:
        root = root_from_dict({"version": 1, "rootId": "t.tsx", "tree": tree})
        swift = SwiftUIGenerator()
        swift.emit_node(root.tree, 0)
        emitted |= {node_type for node_type, _ in swift.primitives}
    assert emitted == set(NodeType)
