# Custom exceptions for phpsorter

class PhpSorterError(Exception):
    """Base exception for all application-specific errors."""
    pass

class MissingParserError(PhpSorterError):
    """Raised when no syntax tree can be produced for a buffer."""
    def __init__(self, source: str, message: str):
        self.source = source
        self.message = message
        super().__init__(f"No syntax tree for {source}: {message}")

class LanguageMismatchError(PhpSorterError):
    """Raised when a buffer's declared language is not PHP."""
    def __init__(self, language: str, expected: str = "php"):
        self.language = language
        self.expected = expected
        super().__init__(
            f"This command is only for {expected.upper()} files (got '{language}')."
        )

class BufferWriteError(PhpSorterError):
    """Raised when the line buffer rejects a range replacement."""
    def __init__(self, start_row: int, end_row: int, reason: str):
        self.start_row = start_row
        self.end_row = end_row
        self.reason = reason
        super().__init__(f"Failed to update buffer rows {start_row}-{end_row}: {reason}")

class ConfigError(PhpSorterError):
    """Raised for configuration-related problems."""
    pass

class DiagnosticsError(PhpSorterError):
    """Raised when external diagnostics cannot be loaded."""
    def __init__(self, path: str, message: str):
        self.path = path
        self.message = message
        super().__init__(f"Failed to load diagnostics from {path}: {message}")
