"""Configuration helpers for the autolink engine."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, FrozenSet, Mapping, Tuple

import yaml


class ConfigError(ValueError):
    """Raised when an engine option holds an unusable value."""


@dataclass(frozen=True)
class EngineConfig:
    """Typed wrapper around the engine configuration dictionary."""

    raw: Dict[str, Any] = field(default_factory=dict)

    def get(self, key: str, default: Any = None) -> Any:
        return self.raw.get(key, default)

    @property
    def enabled(self) -> bool:
        return bool(self.raw.get("enabled", True))

    @property
    def case_sensitive(self) -> bool:
        return bool(self.raw.get("case_sensitive", False))

    @property
    def max_links_per_post(self) -> int:
        return int(self.raw.get("max_links_per_post", 5))

    @property
    def min_keyword_length(self) -> int:
        return int(self.raw.get("min_keyword_length", 3))

    @property
    def max_keyword_length(self) -> int:
        return int(self.raw.get("max_keyword_length", 50))

    @property
    def min_post_length(self) -> int:
        return int(self.raw.get("min_post_length", 100))

    @property
    def post_types(self) -> Tuple[str, ...]:
        return tuple(str(value) for value in self.raw.get("post_types", ["post"]))

    @property
    def exclude_posts(self) -> FrozenSet[Any]:
        return frozenset(self.raw.get("exclude_posts", []))

    @property
    def cache_expiration(self) -> int:
        return int(self.raw.get("cache_expiration", 3600))

    @property
    def scoring_phrase_words(self) -> Tuple[int, int]:
        return _window(self.raw.get("scoring_phrase_words", (3, 5)))

    @property
    def anchor_phrase_words(self) -> Tuple[int, int]:
        return _window(self.raw.get("anchor_phrase_words", (1, 3)))

    @property
    def skip_tags(self) -> Tuple[str, ...]:
        return tuple(str(tag).lower() for tag in self.raw.get("skip_tags", ()))

    def validate(self) -> "EngineConfig":
        """Return self, raising ConfigError when bounds are inconsistent."""

        if self.max_links_per_post < 0:
            raise ConfigError("max_links_per_post must not be negative")
        if self.min_keyword_length > self.max_keyword_length:
            raise ConfigError(
                f"min_keyword_length ({self.min_keyword_length}) exceeds "
                f"max_keyword_length ({self.max_keyword_length})"
            )
        for name in ("scoring_phrase_words", "anchor_phrase_words"):
            low, high = getattr(self, name)
            if low < 1 or low > high:
                raise ConfigError(f"{name} must be an increasing window of positive word counts, got {low}..{high}")
        if int(self.raw.get("max_workers", 4)) < 1:
            raise ConfigError("max_workers must be at least 1")
        return self


DEFAULTS: Dict[str, Any] = {
    "enabled": True,
    "max_links_per_post": 5,
    "min_keyword_length": 3,
    "max_keyword_length": 50,
    "min_post_length": 100,
    "post_types": ["post"],
    "link_to_newer_posts": True,
    "link_to_older_posts": True,
    "case_sensitive": False,
    "exclude_posts": [],
    "same_category_boost": True,
    "same_tag_boost": True,
    "category_boost": 50,
    "tag_boost": 30,
    "title_phrase_boost": 5,
    "whole_title_boost": 10,
    "scoring_phrase_words": [3, 5],
    "anchor_phrase_words": [1, 3],
    "cache_expiration": 3600,
    "max_workers": 4,
    "parallel_threshold": 50,
    "skip_tags": ["a", "script", "style", "code", "pre", "textarea"],
    "anchor_class": "auto-interlink",
}


def load_config(
    path: str | Path | None = None,
    overrides: Mapping[str, Any] | None = None,
) -> EngineConfig:
    """Load configuration from YAML and overrides, merging with defaults."""

    data: Dict[str, Any] = copy.deepcopy(DEFAULTS)

    if path is not None and Path(path).exists():
        with Path(path).open("r", encoding="utf-8") as stream:
            user = yaml.safe_load(stream) or {}
        if not isinstance(user, dict):
            raise ConfigError(f"{path} must contain a mapping of options")
        merge_into(data, user)

    if overrides:
        merge_into(data, dict(overrides))

    return EngineConfig(data).validate()


def merge_into(base: Dict[str, Any], override: Dict[str, Any]) -> None:
    """Recursively merge override into base dict."""

    for key, value in override.items():
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            merge_into(base[key], value)
        else:
            base[key] = value


def _window(value: Any) -> Tuple[int, int]:
    try:
        low, high = value
        return int(low), int(high)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"expected a [min, max] pair of word counts, got {value!r}") from exc
