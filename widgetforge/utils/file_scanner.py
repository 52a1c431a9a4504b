"""File scanner — discover markup source files in a project."""

from pathlib import Path

# Directories to always skip
SKIP_DIRS = {
    ".git", "__pycache__", "node_modules", ".venv", "venv", ".env",
    "dist", "build", "lib", ".tox", ".mypy_cache", ".pytest_cache",
    "target", "vendor", ".next", ".expo", "coverage", "Pods", ".widgetforge",
}

# Markup file extensions, mapped to the dialect they are parsed as
SOURCE_MAP = {
    ".tsx": "tsx",
    ".jsx": "jsx",
}


def scan_source_files(project_root: Path, extra_skip_dirs: set[str] | None = None) -> list[Path]:
    """Recursively find markup source files under ``project_root``.

    Returns paths relative to ``project_root``, sorted, so compile order
    (and therefore duplicate-root resolution) is stable across platforms.
    """
    skip = SKIP_DIRS | set(extra_skip_dirs or ())
    files = []
    for item in project_root.rglob("*"):
        rel = item.relative_to(project_root)
        if item.is_file() and _should_include(rel, skip):
            files.append(rel)
    return sorted(files, key=lambda p: p.as_posix())


def _should_include(path: Path, skip: set[str]) -> bool:
    """Check if a file should be compiled."""
    # Skip files in excluded directories
    for part in path.parts[:-1]:
        if part in skip:
            return False

    return path.suffix in SOURCE_MAP


def classify_file(path: Path) -> str | None:
    """Return the markup dialect for a file, or None if it is not markup."""
    return SOURCE_MAP.get(path.suffix)
