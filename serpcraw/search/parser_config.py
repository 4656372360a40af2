"""
Search Parser Configuration Manager.

Loads and validates SERP selector configurations from config/search_parsers.yaml.

Design:
- Selectors are externalized so markup changes can be fixed without code changes
- Built-in defaults cover both engines; YAML entries override them per key
- Each selector carries an index (first/last/nth or all matches) and an optional
  attribute, so field extraction is fully data-driven
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from serpcraw.utils.config import get_config_dir, get_settings
from serpcraw.utils.logging import get_logger

logger = get_logger(__name__)


DEFAULT_PARSER_CONFIG: dict[str, Any] = {
    "baidu_mobile": {
        "search_url": "https://m.baidu.com/s?word={query}",
        "rank_base": 1,
        "result_json_attribute": "data-log",
        "result_json_link_field": "mu",
        "keyword_selectors": ["related_keywords", "other_keywords"],
        "selectors": {
            "results_container": {
                "selector": "#results>.c-result",
                "diagnostic_message": "One element per organic result inside #results.",
            },
            "related_keywords": {
                "selector": ".rw-list-container span",
                "diagnostic_message": "Related searches block.",
            },
            "other_keywords": {
                "selector": ".span-item span",
                "diagnostic_message": "'Others also searched' block.",
            },
            "title": {"selector": ":scope .c-result-content h3"},
            "timestamp": {
                "selector": ":scope .c-result-content .c-line-clamp3>.c-gap-right-small",
            },
            "description": {
                "selector": ":scope .c-result-content .c-line-clamp3>span",
                "index": -1,
            },
            "display_link": {"selector": ":scope .c-result-content .c-line-clamp1>span"},
        },
    },
    "shenma_mobile": {
        "search_url": "https://m.sm.cn/s?q={query}",
        "rank_base": 0,
        "keyword_selectors": ["related_keywords", "other_keywords"],
        "selectors": {
            "results_container": {
                "selector": "#results>.sc",
                "diagnostic_message": "One element per result card inside #results.",
            },
            "related_keywords": {
                "selector": ".news-title",
                "diagnostic_message": "Related searches block.",
            },
            "other_keywords": {
                "selector": ".c-e-btn-text",
                "diagnostic_message": "'Others also searched' buttons.",
            },
            "title": {"selector": ".c-header-title>span", "index": 0},
            "description": {"selector": ".js-c-paragraph-text", "index": 0},
            "display_link": {"selector": ".c-e-source-l>span", "index": 0},
            "timestamp": {"selector": ".c-e-source-l>span", "index": -1},
            "real_link": {"selector": ".c-header-inner[href]", "index": 0, "attribute": "href"},
        },
    },
}


# =============================================================================
# Pydantic Schema Models
# =============================================================================


class SelectorSchema(BaseModel):
    """Schema for a single CSS selector configuration."""

    selector: str = Field(..., description="CSS selector string")
    index: int | None = Field(
        default=None,
        description="Match to use: 0 first, -1 last, n nth; None joins all matches",
    )
    attribute: str | None = Field(default=None, description="Attribute to read instead of text")
    diagnostic_message: str = Field(default="", description="Hint for fixing a broken selector")

    @field_validator("selector")
    @classmethod
    def validate_selector(cls, v: str) -> str:
        """Ensure selector is not empty."""
        if not v.strip():
            raise ValueError("Selector cannot be empty")
        return v.strip()


class EngineParserSchema(BaseModel):
    """Schema for a search engine parser configuration."""

    search_url: str = Field(..., description="URL template for search")
    rank_base: int = Field(default=1, ge=0, le=1)
    result_json_attribute: str | None = Field(default=None)
    result_json_link_field: str = Field(default="mu")
    keyword_selectors: list[str] = Field(default_factory=list)
    selectors: dict[str, SelectorSchema] = Field(default_factory=dict)


class SearchParsersConfigSchema(BaseModel):
    """Root schema for search_parsers.yaml configuration."""

    baidu_mobile: EngineParserSchema | None = None
    shenma_mobile: EngineParserSchema | None = None

    def get_engine(self, name: str) -> EngineParserSchema | None:
        """Get parser config for an engine by name."""
        return getattr(self, name.lower(), None)

    def get_available_engines(self) -> list[str]:
        """Get list of configured engine names."""
        return [name for name in ("baidu_mobile", "shenma_mobile") if getattr(self, name) is not None]


# =============================================================================
# Data Classes
# =============================================================================


@dataclass
class SelectorConfig:
    """Resolved selector configuration for runtime use."""

    name: str
    selector: str
    index: int | None = None
    attribute: str | None = None
    diagnostic_message: str = ""


@dataclass
class EngineParserConfig:
    """Resolved parser configuration for a search engine."""

    name: str
    search_url: str
    rank_base: int = 1
    result_json_attribute: str | None = None
    result_json_link_field: str = "mu"
    keyword_selectors: list[str] = field(default_factory=list)
    selectors: dict[str, SelectorConfig] = field(default_factory=dict)

    def get_selector(self, name: str) -> SelectorConfig | None:
        """Get selector config by name."""
        return self.selectors.get(name)

    def build_search_url(self, query: str) -> str:
        """Build search URL from template. The query must already be encoded."""
        return self.search_url.replace("{query}", query)


# =============================================================================
# Parser Config Manager
# =============================================================================


def _merge_engine_data(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Overlay one engine's YAML section onto its defaults (selectors merged per name)."""
    merged = {**base, **{k: v for k, v in override.items() if k != "selectors"}}
    selectors = dict(base.get("selectors", {}))
    for name, sel in (override.get("selectors") or {}).items():
        if isinstance(sel, dict) and isinstance(selectors.get(name), dict):
            selectors[name] = {**selectors[name], **sel}
        else:
            selectors[name] = sel
    merged["selectors"] = selectors
    return merged


class ParserConfigManager:
    """
    Centralized manager for SERP parser configurations.

    Usage:
        manager = get_parser_config_manager()
        config = manager.get_engine_config("baidu_mobile")
        selector = config.get_selector("results_container")
    """

    def __init__(self, config_path: Path | str | None = None):
        """
        Initialize parser config manager.

        Args:
            config_path: Path to search_parsers.yaml. Uses settings if None.
        """
        if config_path is None:
            config_path = get_settings().parser.config_path
        if config_path is None:
            config_path = get_config_dir() / "search_parsers.yaml"
        self._config_path = Path(config_path)
        self._config: SearchParsersConfigSchema | None = None
        self._engine_cache: dict[str, EngineParserConfig] = {}
        self._cache_lock = threading.RLock()

        self._load_config()

    def _read_yaml(self) -> dict[str, Any]:
        if not self._config_path.exists():
            logger.info(
                "Parser config not found, using built-in selectors",
                path=str(self._config_path),
            )
            return {}

        try:
            with open(self._config_path, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            logger.error(
                "Failed to parse parser config YAML, using built-in selectors",
                error=str(e),
                path=str(self._config_path),
            )
            return {}

        if not isinstance(data, dict):
            logger.error("Parser config root must be a mapping", path=str(self._config_path))
            return {}
        return data

    def _load_config(self) -> None:
        """Load configuration from defaults and YAML file."""
        data = self._read_yaml()

        merged: dict[str, Any] = {}
        for engine_name, defaults in DEFAULT_PARSER_CONFIG.items():
            override = data.get(engine_name)
            if isinstance(override, dict):
                merged[engine_name] = _merge_engine_data(defaults, override)
            else:
                merged[engine_name] = defaults

        try:
            config = SearchParsersConfigSchema(**merged)
        except ValidationError as e:
            logger.error(
                "Invalid parser config, using built-in selectors",
                error=str(e),
                path=str(self._config_path),
            )
            config = SearchParsersConfigSchema(**DEFAULT_PARSER_CONFIG)

        with self._cache_lock:
            self._config = config
            self._engine_cache.clear()

        logger.debug(
            "Parser config loaded",
            path=str(self._config_path),
            engines=config.get_available_engines(),
        )

    def reload(self) -> None:
        """Force reload configuration."""
        self._load_config()

    @property
    def config(self) -> SearchParsersConfigSchema:
        """Get current configuration."""
        if self._config is None:
            self._load_config()
        return self._config  # type: ignore[return-value]

    def get_engine_config(self, name: str) -> EngineParserConfig | None:
        """
        Get parser configuration for a search engine.

        Args:
            name: Engine name (case-insensitive).

        Returns:
            EngineParserConfig or None if not configured.
        """
        name_lower = name.lower()

        with self._cache_lock:
            if name_lower in self._engine_cache:
                return self._engine_cache[name_lower]

        engine_schema = self.config.get_engine(name_lower)
        if engine_schema is None:
            return None

        selectors = {
            sel_name: SelectorConfig(
                name=sel_name,
                selector=sel_schema.selector,
                index=sel_schema.index,
                attribute=sel_schema.attribute,
                diagnostic_message=sel_schema.diagnostic_message,
            )
            for sel_name, sel_schema in engine_schema.selectors.items()
        }

        engine_config = EngineParserConfig(
            name=name_lower,
            search_url=engine_schema.search_url,
            rank_base=engine_schema.rank_base,
            result_json_attribute=engine_schema.result_json_attribute,
            result_json_link_field=engine_schema.result_json_link_field,
            keyword_selectors=list(engine_schema.keyword_selectors),
            selectors=selectors,
        )

        with self._cache_lock:
            self._engine_cache[name_lower] = engine_config

        return engine_config

    def get_available_engines(self) -> list[str]:
        """Get list of configured engine names."""
        return self.config.get_available_engines()

    def is_engine_configured(self, name: str) -> bool:
        """Check if an engine has parser configuration."""
        return self.get_engine_config(name) is not None


# =============================================================================
# Module-level singleton access
# =============================================================================

_manager_instance: ParserConfigManager | None = None
_manager_lock = threading.Lock()


def get_parser_config_manager(**kwargs: Any) -> ParserConfigManager:
    """
    Get the singleton ParserConfigManager instance.

    Usage:
        manager = get_parser_config_manager()
        config = manager.get_engine_config("shenma_mobile")
    """
    global _manager_instance

    if _manager_instance is None:
        with _manager_lock:
            if _manager_instance is None:
                _manager_instance = ParserConfigManager(**kwargs)

    return _manager_instance


def reset_parser_config_manager() -> None:
    """Reset the singleton instance (for testing)."""
    global _manager_instance

    with _manager_lock:
        _manager_instance = None


def get_engine_parser_config(name: str) -> EngineParserConfig | None:
    """Get parser configuration for an engine (convenience function)."""
    return get_parser_config_manager().get_engine_config(name)
