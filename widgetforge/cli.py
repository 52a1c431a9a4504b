"""widgetforge CLI — compile TSX widgets to IR and generate native sources."""

import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from widgetforge import __version__

console = Console()


@click.group()
@click.version_option(version=__version__)
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging")
def main(verbose: bool):
    """widgetforge — one TSX widget definition, native SwiftUI and Compose output.

    Compile markup sources to validated IR artifacts, then generate
    SwiftUI/WidgetKit/ActivityKit and Jetpack Compose/Glance code from them.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )


def _out_dir(project_root: Path, out_dir: str | None, config) -> Path:
    return Path(out_dir) if out_dir else project_root / config.out_dir


# ── Compile ──────────────────────────────────────────────────────────


@main.command(name="compile")
@click.argument("project_root", default=".", type=click.Path(exists=True, file_okay=False))
@click.option("--entry", "-e", "entries", multiple=True, help="Relative source path (repeatable)")
@click.option("--out-dir", "-o", default=None, help="Artifact directory (default: from config)")
@click.option("--as-widget", is_flag=True, help="Mark every root as a home-screen widget")
def compile_cmd(project_root: str, entries: tuple[str, ...], out_dir: str | None, as_widget: bool):
    """Compile TSX sources under PROJECT_ROOT into IR artifacts."""
    from widgetforge.compiler import compile_project
    from widgetforge.compiler.artifacts import write_artifacts
    from widgetforge.config import load_config
    from widgetforge.errors import ConfigError

    root = Path(project_root)
    try:
        config = load_config(root)
    except ConfigError as e:
        console.print(f"[red]{e.formatted()}[/]")
        sys.exit(1)

    console.print(f"\n[bold blue]widgetforge[/] — Compiling: {root}\n")

    result = compile_project(root, entries=list(entries) or None, as_widget=as_widget, config=config)
    target = _out_dir(root, out_dir, config)
    write_artifacts(result.roots, target)

    if result.roots:
        table = Table(title=f"Compiled Roots ({len(result.roots)})")
        table.add_column("Root", style="cyan")
        table.add_column("Kind")
        table.add_column("Top node", style="dim")
        for ir_root in result.roots:
            kind = "live activity" if ir_root.is_live_activity else "widget" if ir_root.is_widget else "view"
            table.add_row(ir_root.root_id, kind, ir_root.tree.node_type.value)
        console.print(table)
    else:
        console.print("[yellow]No roots compiled.[/]")

    for failure in result.failures:
        message = failure.error.formatted() if hasattr(failure.error, "formatted") else str(failure.error)
        console.print(f"  [red]x[/] {failure.path}: {message}")

    console.print(f"\n[green]Artifacts written to:[/] {target}")
    if result.failures:
        sys.exit(1)


# ── Generate ─────────────────────────────────────────────────────────


def _load_roots(project_root: Path, out_dir: str | None):
    from widgetforge.compiler.artifacts import load_artifacts
    from widgetforge.config import load_config
    from widgetforge.errors import WidgetforgeError

    try:
        config = load_config(project_root)
        roots = load_artifacts(_out_dir(project_root, out_dir, config))
    except FileNotFoundError:
        console.print("[red]No IR artifacts found. Run 'widgetforge compile' first.[/]")
        sys.exit(1)
    except WidgetforgeError as e:
        console.print(f"[red]{e.formatted()}[/]")
        sys.exit(1)
    return config, roots


@main.command()
@click.argument("project_root", default=".", type=click.Path(exists=True, file_okay=False))
@click.option("--out-dir", "-o", default=None, help="Artifact directory (default: from config)")
@click.option("--ios-dir", default=None, help="iOS output directory (default: from config)")
def swiftui(project_root: str, out_dir: str | None, ios_dir: str | None):
    """Generate SwiftUI, WidgetKit and ActivityKit sources from IR artifacts."""
    from widgetforge.errors import WidgetforgeError
    from widgetforge.generators import write_swift_files

    root = Path(project_root)
    config, roots = _load_roots(root, out_dir)
    target = Path(ios_dir) if ios_dir else root / config.ios_dir
    try:
        written = write_swift_files(roots, target)
    except WidgetforgeError as e:
        console.print(f"[red]{e.formatted()}[/]")
        sys.exit(1)
    for path in written:
        console.print(f"  [green]v[/] {path}")


@main.command()
@click.argument("project_root", default=".", type=click.Path(exists=True, file_okay=False))
@click.option("--out-dir", "-o", default=None, help="Artifact directory (default: from config)")
@click.option("--android-dir", default=None, help="Android output directory (default: from config)")
def compose(project_root: str, out_dir: str | None, android_dir: str | None):
    """Generate Jetpack Compose / Glance sources from IR artifacts."""
    from widgetforge.errors import WidgetforgeError
    from widgetforge.generators import write_compose_files

    root = Path(project_root)
    config, roots = _load_roots(root, out_dir)
    target = Path(android_dir) if android_dir else root / config.android_dir
    try:
        written = write_compose_files(roots, target, config.android_package)
    except WidgetforgeError as e:
        console.print(f"[red]{e.formatted()}[/]")
        sys.exit(1)
    for path in written:
        console.print(f"  [green]v[/] {path}")


# ── Validate ─────────────────────────────────────────────────────────


@main.command()
@click.argument("artifact_path", type=click.Path(exists=True, dir_okay=False))
def validate(artifact_path: str):
    """Validate one IR artifact against the IR schema."""
    import json

    from widgetforge.ir.schema_validator import validate_schema

    try:
        with open(artifact_path, encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        console.print(f"  [red]Failed to parse:[/] {e}")
        sys.exit(1)

    issues = validate_schema(data)
    if issues:
        console.print("[red]Schema validation FAILED:[/]")
        for issue in issues:
            console.print(f"  [red]x[/] {issue}")
        sys.exit(1)
    console.print("  [green]v[/] Schema validation passed")


# ── Schema ───────────────────────────────────────────────────────────


@main.command(name="schema")
def dump_schema():
    """Print the JSON Schema for IR roots."""
    import json

    from widgetforge.ir.schema import get_schema

    console.print_json(json.dumps(get_schema()))


if __name__ == "__main__":
    main()
