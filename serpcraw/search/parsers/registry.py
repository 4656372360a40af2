"""
Parser Registry and Factory Functions.

Manages registration and retrieval of SERP parsers.
"""

from __future__ import annotations

from serpcraw.search.parser_config import get_parser_config_manager
from serpcraw.search.parsers.base import BaseSerpParser
from serpcraw.utils.logging import get_logger

logger = get_logger(__name__)

# Populated by serpcraw.search.parsers.__init__
_parser_registry: dict[str, type[BaseSerpParser]] = {}


def get_parser(engine_name: str) -> BaseSerpParser | None:
    """
    Get parser instance for an engine.

    Args:
        engine_name: Engine name (case-insensitive).

    Returns:
        Parser instance or None if not available.
    """
    name_lower = engine_name.lower()
    parser_class = _parser_registry.get(name_lower)

    if parser_class is None:
        logger.warning(f"No parser available for engine: {engine_name}")
        return None

    manager = get_parser_config_manager()
    if not manager.is_engine_configured(name_lower):
        logger.warning(f"Engine {engine_name} not configured in search_parsers.yaml")
        return None

    # Parser subclasses hardcode their engine name in __init__
    return parser_class()  # type: ignore[call-arg]


def get_available_parsers() -> list[str]:
    """Get list of available parser engine names."""
    configured = set(get_parser_config_manager().get_available_engines())
    return sorted(configured & set(_parser_registry))


def register_parser(engine_name: str, parser_class: type[BaseSerpParser]) -> None:
    """
    Register a parser for an engine.

    Args:
        engine_name: Engine name.
        parser_class: Parser class (must inherit BaseSerpParser).
    """
    if not issubclass(parser_class, BaseSerpParser):
        raise TypeError("Parser must inherit from BaseSerpParser")

    _parser_registry[engine_name.lower()] = parser_class
    logger.debug(f"Registered parser for engine: {engine_name}")
