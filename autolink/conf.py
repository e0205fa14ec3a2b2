"""Engine configuration sourced from Django settings.

``AUTOLINK_CONFIG_PATH`` may point at a YAML file and ``AUTOLINK`` may hold
a dict of option overrides; both are merged over the engine defaults, the
dict last.
"""

from __future__ import annotations

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured

from .engine.config import ConfigError, EngineConfig, load_config


def get_engine_config() -> EngineConfig:
    """Build the engine configuration from the current settings."""

    path = getattr(settings, 'AUTOLINK_CONFIG_PATH', None)
    overrides = getattr(settings, 'AUTOLINK', None) or {}
    if not isinstance(overrides, dict):
        raise ImproperlyConfigured('AUTOLINK must be a dict of engine options.')
    try:
        return load_config(path, overrides)
    except ConfigError as exc:
        raise ImproperlyConfigured(f'Invalid autolink configuration: {exc}') from exc
