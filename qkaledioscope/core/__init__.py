"""
qkaledioscope.core: shared source-location and diagnostic types.

Modules:
  - span: SourceSpan offsets and line/column lookup
  - diagnostics: Diagnostic record for driver-facing error reporting
"""

__all__ = [
    "diagnostics",
    "span",
]
