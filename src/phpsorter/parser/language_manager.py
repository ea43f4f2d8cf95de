from typing import Callable, Dict, Optional

import tree_sitter_php as tsphp
from tree_sitter import Language, Parser

from phpsorter.logging_config import logger

# Grammar entry points shipped by the tree-sitter-php wheel.
# "php" understands inline HTML around <?php tags, "php_only" does not.
GRAMMARS: Dict[str, Callable[[], object]] = {
    "php": tsphp.language_php,
    "php_only": tsphp.language_php_only,
}

# Global cache for loaded languages to avoid repeated loading
_language_cache: Dict[str, Language] = {}


def get_language(language_name: str) -> Optional[Language]:
    """
    Loads a tree-sitter language from the installed grammar wheel.

    Caches the loaded language object for efficiency.
    """
    if language_name in _language_cache:
        return _language_cache[language_name]

    factory = GRAMMARS.get(language_name)
    if factory is None:
        logger.error(f"No tree-sitter grammar registered for '{language_name}'.")
        return None

    try:
        lang = Language(factory())
    except Exception as e:
        logger.error(f"Failed to load language '{language_name}'. Error: {e}")
        return None

    _language_cache[language_name] = lang
    logger.debug(f"Successfully loaded language '{language_name}'")
    return lang


def get_parser(language_name: str) -> Optional[Parser]:
    """Build a parser for a registered grammar, or None if it cannot load."""
    lang = get_language(language_name)
    if lang is None:
        return None
    parser = Parser()
    parser.language = lang
    return parser
