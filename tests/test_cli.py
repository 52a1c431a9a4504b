"""Tests for the widgetforge command line."""

import json
import tempfile
from pathlib import Path

from click.testing import CliRunner

from widgetforge.cli import main

HELLO = """\
export function Hello() {
  return (
    <View style={{ padding: 16 }}>
      <Text>Hello</Text>
    </View>
  );
}
"""


def _project(tmpdir: str, files: dict[str, str]) -> Path:
    root = Path(tmpdir)
    for rel, content in files.items():
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)
    return root


def test_compile_writes_artifacts():
    with tempfile.TemporaryDirectory() as tmpdir:
        root = _project(tmpdir, {"src/Hello.tsx": HELLO})
        result = CliRunner().invoke(main, ["compile", str(root)])

        assert result.exit_code == 0, result.output
        index = json.loads((root / ".widgetforge" / "index.json").read_text())
        assert index == {"count": 1, "roots": ["src_Hello.tsx"]}


def test_compile_reports_failures():
    with tempfile.TemporaryDirectory() as tmpdir:
        root = _project(tmpdir, {"src/Hello.tsx": HELLO, "src/Broken.tsx": "export function ( {"})
        result = CliRunner().invoke(main, ["compile", str(root)])

        assert result.exit_code == 1
        assert "src/Broken.tsx" in result.output
        index = json.loads((root / ".widgetforge" / "index.json").read_text())
        assert index["roots"] == ["src_Hello.tsx"]


def test_compile_reads_config():
    with tempfile.TemporaryDirectory() as tmpdir:
        root = _project(
            tmpdir,
            {"src/Hello.tsx": HELLO, "widgetforge.yaml": "out_dir: build/ir\nas_widget: true\n"},
        )
        result = CliRunner().invoke(main, ["compile", str(root)])

        assert result.exit_code == 0, result.output
        artifact = json.loads((root / "build" / "ir" / "src_Hello.tsx.json").read_text())
        assert artifact["widget"]["kind"] == "src_Hello_tsx"


def test_generate_both_targets():
    with tempfile.TemporaryDirectory() as tmpdir:
        root = _project(tmpdir, {"src/Hello.tsx": HELLO})
        runner = CliRunner()
        assert runner.invoke(main, ["compile", str(root)]).exit_code == 0

        swift = runner.invoke(main, ["swiftui", str(root)])
        assert swift.exit_code == 0, swift.output
        assert ".padding(16)" in (root / "ios" / "Generated" / "src_Hello_tsx.swift").read_text()

        compose = runner.invoke(main, ["compose", str(root), "--android-dir", str(root / "app")])
        assert compose.exit_code == 0, compose.output
        assert ".padding(16.dp)" in (root / "app" / "generated" / "src_Hello_tsx.kt").read_text()


def test_generate_without_artifacts():
    with tempfile.TemporaryDirectory() as tmpdir:
        result = CliRunner().invoke(main, ["swiftui", tmpdir])
        assert result.exit_code == 1
        assert "widgetforge compile" in result.output


def test_validate():
    with tempfile.TemporaryDirectory() as tmpdir:
        good = Path(tmpdir) / "good.json"
        good.write_text(json.dumps({"version": 1, "rootId": "a", "tree": {"type": "Spacer"}}))
        bad = Path(tmpdir) / "bad.json"
        bad.write_text(json.dumps({"version": 1, "rootId": "a", "tree": {"type": "ProgressBar", "progress": 2}}))

        runner = CliRunner()
        assert runner.invoke(main, ["validate", str(good)]).exit_code == 0
        result = runner.invoke(main, ["validate", str(bad)])
        assert result.exit_code == 1
        assert ".tree.progress" in result.output


def test_schema_command():
    result = CliRunner().invoke(main, ["schema"])
    assert result.exit_code == 0
    assert "Widget IR Root" in result.output
