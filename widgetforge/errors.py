"""Error taxonomy for the compile and code generation pipeline.

Only parse failures, schema validation failures and a handful of project
level conflicts are raised. Everything else (an unbuildable node, an unknown
style key, a live activity whose return value is not an object literal) is
recoverable: the data simply does not make it into the IR and the event is
logged.
"""

from __future__ import annotations

from enum import Enum


class ErrorCode(Enum):
    # Compilation (WF0xx)
    PARSE_ERROR = "WF002"
    DUPLICATE_ROOT = "WF005"
    SCHEMA_VALIDATION_FAILED = "WF008"

    # Code generation (WF1xx)
    UNSUPPORTED_IR_VERSION = "WF102"

    # Configuration (WF3xx)
    INVALID_CONFIG = "WF300"


class WidgetforgeError(Exception):
    """Base class for every error raised by widgetforge."""

    code: ErrorCode = ErrorCode.PARSE_ERROR

    def __init__(self, message: str, file_path: str = ""):
        super().__init__(message)
        self.message = message
        self.file_path = file_path

    def formatted(self) -> str:
        where = f" ({self.file_path})" if self.file_path else ""
        return f"[{self.code.value}] {self.message}{where}"


class SourceParseError(WidgetforgeError):
    """The source text could not be parsed into a syntax tree."""

    code = ErrorCode.PARSE_ERROR

    def __init__(self, message: str, file_path: str = "", line: int = 0, column: int = 0):
        super().__init__(message, file_path)
        self.line = line
        self.column = column

    def formatted(self) -> str:
        base = super().formatted()
        if self.line:
            return f"{base} at {self.line}:{self.column}"
        return base


class SchemaValidationError(WidgetforgeError):
    """A fully built root does not conform to the IR schema.

    ``issues`` lists every violated field path as ``"<path>: <message>"``.
    """

    code = ErrorCode.SCHEMA_VALIDATION_FAILED

    def __init__(self, issues: list[str], root_id: str = "", file_path: str = ""):
        label = f"Invalid IR root '{root_id}'" if root_id else "Invalid IR root"
        super().__init__(f"{label}:\n" + "\n".join(f"  {i}" for i in issues), file_path)
        self.issues = issues
        self.root_id = root_id


class DuplicateRootError(WidgetforgeError):
    code = ErrorCode.DUPLICATE_ROOT


class UnsupportedVersionError(WidgetforgeError):
    """A generator was handed IR produced by a different schema version."""

    code = ErrorCode.UNSUPPORTED_IR_VERSION


class ConfigError(WidgetforgeError):
    code = ErrorCode.INVALID_CONFIG
