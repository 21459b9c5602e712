"""Configuration classes for schema-driven completion.

This module provides configuration objects for the context resolver, the
completion item builder and the suggestion caches.
"""

import json
import re
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional, Tuple

DEFAULT_TRIGGER_CHARACTERS: Tuple[str, ...] = ("<", " ", "/")
DEFAULT_RESERVED_PREFIXES: Tuple[str, ...] = ("xsi", "html")
DEFAULT_WORD_PATTERN = r"[\w.\-]+"  # XML name characters, ':' excluded
VALID_LOGGING_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


@dataclass
class ContextConfig:
    """Configuration for completion context resolution."""

    trigger_characters: Tuple[str, ...] = DEFAULT_TRIGGER_CHARACTERS
    reserved_prefixes: Tuple[str, ...] = DEFAULT_RESERVED_PREFIXES
    word_pattern: str = DEFAULT_WORD_PATTERN

    def __post_init__(self) -> None:
        """Validate context configuration."""
        self.trigger_characters = tuple(self.trigger_characters)
        self.reserved_prefixes = tuple(self.reserved_prefixes)
        if any(len(char) != 1 for char in self.trigger_characters):
            raise ValueError("trigger_characters must be single characters")
        if not self.word_pattern:
            raise ValueError("word_pattern cannot be empty")
        try:
            compiled = re.compile(self.word_pattern)
        except re.error as e:
            raise ValueError(f"word_pattern is not a valid regex: {e}") from e
        if compiled.match(":"):
            raise ValueError("word_pattern must not match the namespace separator")


@dataclass
class SuggestionConfig:
    """Configuration for building completion items from schema suggestions."""

    snippet_indent: str = "\t"
    element_snippet_detail: str = "Insert as snippet"
    close_tag_detail: str = "Close tag"
    format_documentation: bool = True

    def __post_init__(self) -> None:
        """Validate suggestion configuration."""
        if self.snippet_indent.strip():
            raise ValueError("snippet_indent must contain only whitespace")


@dataclass
class CacheConfig:
    """Configuration for per-schema suggestion caches."""

    thread_safe: bool = True
    cache_failed_fetches: bool = False


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigValidationError(ConfigError):
    """Exception raised when configuration validation fails."""

    def __init__(self, message: str, field_name: Optional[str] = None,
                 suggestions: Optional[List[str]] = None):
        super().__init__(message)
        self.field_name = field_name
        self.suggestions = suggestions or []


_COMPONENTS = ["context", "suggestions", "cache"]


@dataclass(frozen=True)
class CompletionConfig:
    """Configuration for all completion components.

    Immutable, so one instance can be shared between the engine, the
    registry and every schema worker it creates.
    """

    context: ContextConfig = field(default_factory=ContextConfig)
    suggestions: SuggestionConfig = field(default_factory=SuggestionConfig)
    cache: CacheConfig = field(default_factory=CacheConfig)

    correlation_id: Optional[str] = None
    logging_level: str = "INFO"
    enable_incremental_index: bool = True

    name: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate the complete completion configuration."""
        try:
            self.context.__post_init__()
            self.suggestions.__post_init__()
        except ValueError as e:
            raise ConfigValidationError(str(e)) from e

        if self.logging_level not in VALID_LOGGING_LEVELS:
            raise ConfigValidationError(
                f"logging_level must be one of {VALID_LOGGING_LEVELS}",
                field_name="logging_level",
                suggestions=VALID_LOGGING_LEVELS,
            )
        if "<" not in self.context.trigger_characters:
            raise ConfigValidationError(
                "trigger_characters must include '<'",
                field_name="context.trigger_characters",
                suggestions=["Add '<' to context.trigger_characters"],
            )

    def override(self, **kwargs: Any) -> "CompletionConfig":
        """Create a new configuration with specific overrides.

        Args:
            **kwargs: Keyword arguments for configuration fields to override

        Returns:
            New CompletionConfig instance with overrides applied

        Example:
            >>> config = CompletionConfig()
            >>> new_config = config.override(
            ...     cache__thread_safe=False,
            ...     suggestions__snippet_indent="    "
            ... )
        """
        nested_overrides: Dict[str, Any] = {}
        for key, value in kwargs.items():
            if "__" in key:
                component, field_name = key.split("__", 1)
                nested_overrides.setdefault(component, {})[field_name] = value
            else:
                nested_overrides[key] = value

        new_fields: Dict[str, Any] = {}
        for field_name in _COMPONENTS:
            current_config = getattr(self, field_name)
            if field_name in nested_overrides:
                new_fields[field_name] = replace(
                    current_config, **nested_overrides[field_name]
                )

        for key, value in nested_overrides.items():
            if key not in _COMPONENTS:
                new_fields[key] = value

        return replace(self, **new_fields)

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary format."""
        def _dataclass_to_dict(obj: Any) -> Any:
            if hasattr(obj, "__dataclass_fields__"):
                return {
                    name: _dataclass_to_dict(getattr(obj, name))
                    for name in obj.__dataclass_fields__
                }
            if isinstance(obj, (list, tuple)):
                return [_dataclass_to_dict(item) for item in obj]
            return obj

        result = _dataclass_to_dict(self)
        if not isinstance(result, dict):
            raise ConfigValidationError("Configuration serialization failed")
        return result

    def to_json(self, indent: int = 2) -> str:
        """Convert configuration to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CompletionConfig":
        """Create configuration from dictionary.

        Unknown keys are rejected so that typos in host configuration files
        surface immediately.
        """
        component_types = {
            "context": ContextConfig,
            "suggestions": SuggestionConfig,
            "cache": CacheConfig,
        }
        field_values: Dict[str, Any] = {}
        for key, value in data.items():
            if key not in cls.__dataclass_fields__:
                raise ConfigValidationError(
                    f"Unknown configuration field: {key}",
                    field_name=key,
                    suggestions=sorted(cls.__dataclass_fields__),
                )
            component_type = component_types.get(key)
            if component_type is not None and isinstance(value, dict):
                try:
                    field_values[key] = component_type(**value)
                except (TypeError, ValueError) as e:
                    raise ConfigValidationError(str(e), field_name=key) from e
            else:
                field_values[key] = value
        return cls(**field_values)

    @classmethod
    def from_json(cls, json_str: str) -> "CompletionConfig":
        """Create configuration from JSON string."""
        return cls.from_dict(json.loads(json_str))

    # Preset factory methods
    @classmethod
    def default(cls) -> "CompletionConfig":
        """Create the default configuration."""
        return cls(name="default")

    @classmethod
    def strict(cls) -> "CompletionConfig":
        """Create a preset that never caches failed fetches and logs verbosely."""
        return cls(
            cache=CacheConfig(thread_safe=True, cache_failed_fetches=False),
            logging_level="DEBUG",
            name="strict",
        )

    @classmethod
    def performance_optimized(cls) -> "CompletionConfig":
        """Create a preset for single-threaded hosts with large documents."""
        return cls(
            suggestions=SuggestionConfig(format_documentation=False),
            cache=CacheConfig(thread_safe=False, cache_failed_fetches=True),
            enable_incremental_index=True,
            name="performance_optimized",
        )
