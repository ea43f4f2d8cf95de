"""
Diagnostics oracle: "is the declaration starting on this row unused?"

Providers answer diagnostics_at(row); is_unused() matches their messages
against the phrases analysers use for unused declarations.
"""

import json
from collections import defaultdict
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from pydantic import ValidationError

from phpsorter.exceptions import DiagnosticsError
from phpsorter.logging_config import logger
from phpsorter.schemas import DiagnosticEntry

UNUSED_PATTERNS = ("is not used", "is declared but not used")

# Key for diagnostics that apply to every file
ANY_FILE = "*"


@dataclass(frozen=True)
class Diagnostic:
    """A diagnostic anchored to a 0-indexed row."""
    row: int
    message: str
    source: str = "phpsorter"


class DiagnosticsProvider:
    """Base class for diagnostics sources."""

    def diagnostics_at(self, row: int) -> List[Diagnostic]:
        raise NotImplementedError


class StaticDiagnostics(DiagnosticsProvider):
    """A fixed set of diagnostics, typically loaded from a report file."""

    def __init__(self, diagnostics: Iterable[Diagnostic] = ()):
        self._by_row: Dict[int, List[Diagnostic]] = defaultdict(list)
        for diagnostic in diagnostics:
            self._by_row[diagnostic.row].append(diagnostic)

    def diagnostics_at(self, row: int) -> List[Diagnostic]:
        return list(self._by_row.get(row, []))

    def __len__(self) -> int:
        return sum(len(items) for items in self._by_row.values())


def is_unused(provider: DiagnosticsProvider, row: int) -> bool:
    """True if any diagnostic on the row reports an unused declaration."""
    for diagnostic in provider.diagnostics_at(row):
        if any(pattern in diagnostic.message for pattern in UNUSED_PATTERNS):
            return True
    return False


def _to_diagnostic(raw: dict, path: str) -> Diagnostic:
    try:
        entry = DiagnosticEntry.model_validate(raw)
    except ValidationError as e:
        raise DiagnosticsError(path, f"invalid diagnostic {raw!r}: {e}") from e

    if entry.row is not None:
        row = entry.row
    elif entry.line is not None:
        row = entry.line - 1
    else:
        raise DiagnosticsError(path, f"diagnostic needs 'line' or 'row': {raw!r}")
    return Diagnostic(row=row, message=entry.message, source=entry.source)


def load_diagnostics(path: str) -> Dict[str, List[Diagnostic]]:
    """
    Load an external analyser's report.

    Accepted shapes:
        [{"line": 3, "message": "..."}]                  applies to every file
        {"diagnostics": [...]}                           same
        {"files": {"src/A.php": [{"row": 2, ...}]}}      per file

    Returns:
        file key -> diagnostics (ANY_FILE for file-independent entries)

    Raises:
        DiagnosticsError: Unreadable file, invalid JSON or malformed entries
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except OSError as e:
        raise DiagnosticsError(path, str(e)) from e
    except json.JSONDecodeError as e:
        raise DiagnosticsError(path, f"invalid JSON: {e}") from e

    if isinstance(data, dict) and "files" in data:
        files = data["files"]
        if not isinstance(files, dict):
            raise DiagnosticsError(path, "'files' must map file paths to diagnostic lists")
        grouped = {}
        for file_key, entries in files.items():
            if not isinstance(entries, list):
                raise DiagnosticsError(path, f"diagnostics for '{file_key}' must be a list")
            grouped[file_key] = [_to_diagnostic(raw, path) for raw in entries]
        logger.debug(f"Loaded diagnostics for {len(grouped)} file(s) from {path}")
        return grouped

    if isinstance(data, dict):
        data = data.get("diagnostics")
    if not isinstance(data, list):
        raise DiagnosticsError(path, "expected a list of diagnostics")

    diagnostics = [_to_diagnostic(raw, path) for raw in data]
    logger.debug(f"Loaded {len(diagnostics)} diagnostic(s) from {path}")
    return {ANY_FILE: diagnostics}


def diagnostics_for_file(
    loaded: Dict[str, List[Diagnostic]],
    file_path: str,
) -> Optional[StaticDiagnostics]:
    """
    Pick the diagnostics of one file from a loaded report.

    File keys match on the resolved path; returns None when the report has
    nothing for the file.
    """
    target = Path(file_path).resolve()
    selected: List[Diagnostic] = list(loaded.get(ANY_FILE, []))
    matched = ANY_FILE in loaded

    for file_key, diagnostics in loaded.items():
        if file_key == ANY_FILE:
            continue
        if Path(file_key).resolve() == target:
            selected.extend(diagnostics)
            matched = True

    if not matched:
        return None
    return StaticDiagnostics(selected)
