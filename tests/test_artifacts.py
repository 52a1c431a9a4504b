"""Tests for IR artifact persistence."""

import json
import tempfile
from pathlib import Path

import pytest

from widgetforge.compiler.artifacts import INDEX_FILE, load_artifacts, write_artifacts
from widgetforge.errors import SchemaValidationError
from widgetforge.ir.models import root_from_dict, root_to_dict

ROOTS = [
    {"version": 1, "rootId": "src_A.tsx", "tree": {"type": "Text", "text": "A"}},
    {
        "version": 1,
        "rootId": "src_B.tsx",
        "tree": {"type": "Stack", "axis": "horizontal", "children": [{"type": "Spacer"}]},
        "widget": {"kind": "B", "families": ["systemSmall"]},
    },
]


def test_write_and_load():
    roots = [root_from_dict(d) for d in ROOTS]
    with tempfile.TemporaryDirectory() as tmpdir:
        written = write_artifacts(roots, Path(tmpdir) / "ir")
        assert [p.name for p in written] == ["src_A.tsx.json", "src_B.tsx.json", INDEX_FILE]

        index = json.loads((Path(tmpdir) / "ir" / INDEX_FILE).read_text())
        assert index == {"count": 2, "roots": ["src_A.tsx", "src_B.tsx"]}

        artifact = json.loads((Path(tmpdir) / "ir" / "src_B.tsx.json").read_text())
        assert artifact == ROOTS[1]

        loaded = load_artifacts(Path(tmpdir) / "ir")
    assert [root_to_dict(r) for r in loaded] == ROOTS


def test_empty_batch_still_writes_index():
    with tempfile.TemporaryDirectory() as tmpdir:
        write_artifacts([], tmpdir)
        index = json.loads((Path(tmpdir) / INDEX_FILE).read_text())
    assert index == {"count": 0, "roots": []}


def test_tampered_artifact_fails_validation():
    with tempfile.TemporaryDirectory() as tmpdir:
        write_artifacts([root_from_dict(ROOTS[0])], tmpdir)
        path = Path(tmpdir) / "src_A.tsx.json"
        data = json.loads(path.read_text())
        data["tree"]["type"] = "Carousel"
        path.write_text(json.dumps(data))

        with pytest.raises(SchemaValidationError):
            load_artifacts(tmpdir)


def test_missing_index():
    with tempfile.TemporaryDirectory() as tmpdir:
        with pytest.raises(FileNotFoundError):
            load_artifacts(tmpdir)
