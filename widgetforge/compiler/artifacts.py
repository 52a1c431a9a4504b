"""IR artifact persistence: one ``<rootId>.json`` per root plus ``index.json``."""

from __future__ import annotations

import json
from pathlib import Path

from widgetforge.ir.models import IRRoot, root_to_dict
from widgetforge.ir.schema_validator import validate_root

INDEX_FILE = "index.json"


def write_artifacts(roots: list[IRRoot], out_dir: str | Path) -> list[Path]:
    """Write every root and the index. Returns the paths written, index last."""
    out_dir = Path(out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)

    written = []
    for root in roots:
        path = out_dir / f"{root.root_id}.json"
        with open(path, "w", encoding="utf-8") as f:
            json.dump(root_to_dict(root), f, indent=2, ensure_ascii=False)
        written.append(path)

    index_path = out_dir / INDEX_FILE
    with open(index_path, "w", encoding="utf-8") as f:
        json.dump({"count": len(roots), "roots": [r.root_id for r in roots]}, f, indent=2)
    written.append(index_path)
    return written


def load_artifacts(out_dir: str | Path) -> list[IRRoot]:
    """Read back the roots listed in ``index.json``, validating each one.

    Raises:
        SchemaValidationError: if an artifact no longer conforms to the schema.
    """
    out_dir = Path(out_dir)
    with open(out_dir / INDEX_FILE, encoding="utf-8") as f:
        index = json.load(f)

    roots = []
    for root_id in index.get("roots", []):
        with open(out_dir / f"{root_id}.json", encoding="utf-8") as f:
            data = json.load(f)
        roots.append(validate_root(data))
    return roots
