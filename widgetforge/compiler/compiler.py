"""Compile TSX sources into validated IR roots."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path, PurePath

from tree_sitter import Node

from widgetforge.compiler.evaluator import Scope, collect_bindings
from widgetforge.compiler.live_activity import find_live_activity
from widgetforge.compiler.node_builder import NodeBuilder
from widgetforge.compiler.tsx_parser import JSX_ELEMENT_TYPES, named_children, parse_tsx, text_of, walk
from widgetforge.config import ProjectConfig
from widgetforge.errors import DuplicateRootError, SchemaValidationError, WidgetforgeError
from widgetforge.ir import IR_VERSION
from widgetforge.ir.models import IRRoot, NodeType
from widgetforge.ir.schema_validator import validate_root
from widgetforge.utils.file_scanner import scan_source_files

logger = logging.getLogger(__name__)

DEFAULT_WIDGET_FAMILIES = ["systemSmall", "systemMedium", "small", "medium"]


@dataclass
class FileFailure:
    path: str
    error: Exception


@dataclass
class CompileResult:
    roots: list[IRRoot] = field(default_factory=list)
    failures: list[FileFailure] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures


def derive_root_id(rel_path: str | PurePath) -> str:
    """``src/widgets/Weather.tsx`` -> ``src_widgets_Weather.tsx``."""
    return re.sub(r"[\\/]", "_", str(rel_path))


# ── Root candidates ──
# Each candidate returns the root fields it found ({"tree": ..., ...}) or None.
# They are tried in order and the first hit wins.


def _live_activity_candidate(program: Node, builder: NodeBuilder, config: ProjectConfig) -> dict | None:
    activity = find_live_activity(program, builder, config.activity_markers)
    if activity is None:
        return None
    return {"tree": {"type": NodeType.VIEW.value, "children": []}, "liveActivity": activity}


def _widget_tree_candidate(program: Node, builder: NodeBuilder, config: ProjectConfig) -> dict | None:
    for node in walk(program):
        if node.type not in JSX_ELEMENT_TYPES:
            continue
        tree = builder.build(node)
        if tree is not None:
            return {"tree": tree}
    return None


ROOT_CANDIDATES = (_live_activity_candidate, _widget_tree_candidate)


def compile_source(
    source: str,
    rel_path: str | PurePath,
    as_widget: bool = False,
    config: ProjectConfig | None = None,
) -> IRRoot | None:
    """Compile one source file into at most one IR root.

    Returns ``None`` when the file contains nothing that can be built.

    Raises:
        SourceParseError: if the source does not parse.
        SchemaValidationError: if the built root does not conform to the IR schema.
    """
    config = config or ProjectConfig()
    file_path = str(rel_path)
    root_id = derive_root_id(rel_path)

    tree = parse_tsx(source, file_path=file_path)
    program = tree.root_node
    scope = collect_bindings(program)
    builder = NodeBuilder(scope, config.component_prefixes)

    found = None
    for candidate in ROOT_CANDIDATES:
        found = candidate(program, builder, config)
        if found is not None:
            break
    if found is None:
        logger.debug("No buildable root in %s", file_path)
        return None

    data = {"version": IR_VERSION, "rootId": root_id, **found}
    data.update(_exported_metadata(program, scope))
    if (as_widget or config.as_widget) and "widget" not in data:
        data["widget"] = {"kind": _widget_kind(root_id), "families": list(DEFAULT_WIDGET_FAMILIES)}

    try:
        return validate_root(data)
    except SchemaValidationError as e:
        e.file_path = file_path
        raise


def _exported_metadata(program: Node, scope: Scope) -> dict:
    """Pick up ``export const widget = {...}`` and ``export const dataProvider = {...}``."""
    metadata = {}
    for statement in named_children(program):
        if statement.type != "export_statement":
            continue
        declaration = statement.child_by_field_name("declaration")
        if declaration is None or declaration.type != "lexical_declaration":
            continue
        for declarator in named_children(declaration):
            name = declarator.child_by_field_name("name")
            if name is None or text_of(name) not in ("widget", "dataProvider"):
                continue
            value = scope.lookup(text_of(name))
            if isinstance(value, dict):
                metadata[text_of(name)] = value
            else:
                logger.debug("Ignoring non-literal export %r", text_of(name))
    return metadata


def _widget_kind(root_id: str) -> str:
    kind = re.sub(r"[^A-Za-z0-9_]", "_", root_id)
    return kind if not kind[:1].isdigit() else f"_{kind}"


# ── Batch ──


def compile_project(
    project_root: str | Path,
    entries: list[str] | None = None,
    as_widget: bool = False,
    config: ProjectConfig | None = None,
) -> CompileResult:
    """Compile every entry under ``project_root``.

    A file that fails is recorded in ``CompileResult.failures`` and does not
    stop the batch. A root whose rootId was already produced by an earlier
    file is rejected.
    """
    project_root = Path(project_root)
    config = config or ProjectConfig()
    if entries is None:
        entries = config.entries
    if entries is None:
        entries = [p.as_posix() for p in scan_source_files(project_root, set(config.skip_dirs))]

    result = CompileResult()
    producers: dict[str, str] = {}
    for rel in entries:
        rel_path = str(rel)
        try:
            source = (project_root / rel_path).read_text(encoding="utf-8")
            root = compile_source(source, rel_path, as_widget=as_widget, config=config)
        except (WidgetforgeError, OSError, UnicodeDecodeError) as e:
            logger.warning("Failed to compile %s: %s", rel_path, e)
            result.failures.append(FileFailure(rel_path, e))
            continue

        if root is None:
            continue
        if root.root_id in producers:
            error = DuplicateRootError(
                f"rootId '{root.root_id}' already produced by {producers[root.root_id]}",
                file_path=rel_path,
            )
            logger.warning("%s", error.formatted())
            result.failures.append(FileFailure(rel_path, error))
            continue

        producers[root.root_id] = rel_path
        result.roots.append(root)
        logger.info("Compiled %s -> %s", rel_path, root.root_id)
    return result


def compile_files(
    project_root: str | Path,
    entries: list[str] | None = None,
    as_widget: bool = False,
    config: ProjectConfig | None = None,
) -> list[IRRoot]:
    """Like ``compile_project`` but return only the successfully compiled roots."""
    return compile_project(project_root, entries=entries, as_widget=as_widget, config=config).roots
