"""Relevance scoring and link injection, independent of the host framework."""

from .config import ConfigError, EngineConfig, load_config
from .injector import inject
from .phrases import extract_phrases
from .relevance import DocumentStore, RelevanceEngine
from .types import Document, InjectionResult, LinkInsertion, ScoredCandidate

__all__ = [
    "ConfigError",
    "Document",
    "DocumentStore",
    "EngineConfig",
    "InjectionResult",
    "LinkInsertion",
    "RelevanceEngine",
    "ScoredCandidate",
    "extract_phrases",
    "inject",
    "load_config",
]
