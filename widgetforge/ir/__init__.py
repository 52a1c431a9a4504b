"""Versioned Intermediate Representation (IR) for widget UI trees.

The IR sits between the TSX compiler and the two native code generators.
The compiler emits it as plain JSON-shaped dicts, the schema validator
rejects any root that does not conform, and the generators read the typed
dataclasses from ``widgetforge.ir.models``.

Bump ``IR_VERSION`` on any incompatible schema change: generators refuse
roots carrying a version they were not built for.
"""

IR_VERSION = 1
