from pathlib import Path
from typing import Optional

from phpsorter.exceptions import ConfigError

# Mapping of file extensions to language names used in this module.
# Only "php" has a grammar; the rest exist so that a wrong file is reported
# as a language mismatch instead of being parsed as PHP.
SUPPORTED_LANGUAGES = {
    ".php": "php",
    ".phtml": "php",
    ".inc": "php",
    ".py": "python",
    ".js": "javascript",
    ".ts": "typescript",
    ".go": "go",
    ".rs": "rust",
    ".md": "markdown",
}

TARGET_LANGUAGE = "php"


def detect_language(file_path: str) -> Optional[str]:
    """
    Detect file language from extension.

    Returns:
        Language identifier, or None for unknown extensions
    """
    return SUPPORTED_LANGUAGES.get(Path(file_path).suffix.lower())


def validate_extension(extension: str) -> str:
    """
    Validate a file extension and return its language.

    Args:
        extension: File extension (e.g., '.php')

    Returns:
        The language name for the extension.

    Raises:
        ConfigError: If the extension is not supported.
    """
    if extension not in SUPPORTED_LANGUAGES:
        supported = ", ".join(SUPPORTED_LANGUAGES.keys())
        raise ConfigError(
            f"File extension '{extension}' is not supported. Supported extensions: {supported}"
        )

    return SUPPORTED_LANGUAGES[extension]
