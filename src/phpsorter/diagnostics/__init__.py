"""
Diagnostics sources for unused-import pruning.
"""

from .oracle import (
    ANY_FILE,
    UNUSED_PATTERNS,
    Diagnostic,
    DiagnosticsProvider,
    StaticDiagnostics,
    diagnostics_for_file,
    is_unused,
    load_diagnostics,
)
from .unused_imports import UnusedImportDetector, import_aliases

__all__ = [
    "ANY_FILE",
    "UNUSED_PATTERNS",
    "Diagnostic",
    "DiagnosticsProvider",
    "StaticDiagnostics",
    "UnusedImportDetector",
    "diagnostics_for_file",
    "import_aliases",
    "is_unused",
    "load_diagnostics",
]
