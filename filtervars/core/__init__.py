"""
filtervars.core: shared diagnostic types used across stages.

Modules:
  - span: source position attached to diagnostics
  - diagnostics: Diagnostic/Severity and the `has_errors` checkpoint helper
"""

__all__ = [
    "diagnostics",
    "span",
]
