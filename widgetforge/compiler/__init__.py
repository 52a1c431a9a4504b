"""TSX -> IR compiler.

Parses one markup source file with tree-sitter, statically resolves every
conditional and ``.map`` repetition it contains, and produces at most one
validated IR root per file.
"""

from widgetforge.compiler.compiler import (
    CompileResult,
    FileFailure,
    compile_files,
    compile_project,
    compile_source,
    derive_root_id,
)

__all__ = [
    "CompileResult",
    "FileFailure",
    "compile_files",
    "compile_project",
    "compile_source",
    "derive_root_id",
]
