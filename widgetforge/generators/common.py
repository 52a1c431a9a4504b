"""Helpers shared by both generators: colors, literals and identifiers."""

from __future__ import annotations

import re
from typing import Any

from widgetforge.errors import DuplicateRootError, UnsupportedVersionError
from widgetforge.ir import IR_VERSION
from widgetforge.ir.models import IRRoot

_HEX_RE = re.compile(r"^[0-9A-Fa-f]+$")


def hex_to_argb(value: Any) -> int | None:
    """Parse ``#RGB``, ``#ARGB``, ``#RRGGBB`` or ``#AARRGGBB`` to a 32-bit ARGB int.

    Returns None for anything else (named colors, ``rgb()``, bad lengths).
    """
    if not isinstance(value, str):
        return None
    h = value.strip()
    if not h.startswith("#"):
        return None
    h = h[1:]
    if not _HEX_RE.match(h):
        return None
    if len(h) == 3:
        h = "FF" + "".join(c * 2 for c in h)
    elif len(h) == 4:
        h = "".join(c * 2 for c in h)
    elif len(h) == 6:
        h = "FF" + h
    elif len(h) != 8:
        return None
    return int(h, 16)


def argb_channels(argb: int) -> tuple[int, int, int, int]:
    """Split an ARGB int into ``(alpha, red, green, blue)``."""
    return (argb >> 24) & 0xFF, (argb >> 16) & 0xFF, (argb >> 8) & 0xFF, argb & 0xFF


def format_number(value: int | float) -> str:
    """Render a number without a trailing ``.0`` for integral values."""
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def type_name(root_id: str) -> str:
    """A rootId made safe for use as a Swift/Kotlin type or function name."""
    name = re.sub(r"[^A-Za-z0-9_]", "_", root_id)
    if not name or name[0].isdigit():
        name = "_" + name
    return name


def swift_string(text: Any) -> str:
    """A double-quoted Swift string literal."""
    s = str(text)
    s = s.replace("\\", "\\\\").replace('"', '\\"')
    s = s.replace("\n", "\\n").replace("\r", "\\r").replace("\t", "\\t")
    return f'"{s}"'


def kotlin_string(text: Any) -> str:
    """A double-quoted Kotlin string literal with ``$`` templates disabled."""
    s = str(text)
    s = s.replace("\\", "\\\\").replace('"', '\\"').replace("$", "\\$")
    s = s.replace("\n", "\\n").replace("\r", "\\r").replace("\t", "\\t")
    return f'"{s}"'


def display_text(value: Any) -> str:
    """The string a ``Text`` node shows (numbers without ``.0``)."""
    return format_number(value) if is_number(value) else str(value)


def check_version(root: IRRoot):
    """Raise if ``root`` was produced for a different IR version."""
    if root.version != IR_VERSION:
        raise UnsupportedVersionError(
            f"IR version {root.version} is not supported (expected {IR_VERSION})",
            file_path=root.root_id,
        )


def claim_name(claimed: dict[str, str], name: str, root_id: str):
    """Record that ``root_id`` generates ``name``.

    Distinct rootIds can sanitize to the same identifier (``a-b.tsx`` and
    ``a_b.tsx``); the second one would overwrite the first one's file.

    Raises:
        DuplicateRootError: if another root already generates ``name``.
    """
    owner = claimed.setdefault(name, root_id)
    if owner != root_id:
        raise DuplicateRootError(f"rootIds '{owner}' and '{root_id}' both generate '{name}'", file_path=root_id)
