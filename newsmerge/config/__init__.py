"""Configuration management for newsmerge."""

from .loader import Config, load_config, load_sources, save_config, save_sources
from .models import (
    BreakingNewsConfig,
    ConfigModel,
    DedupConfig,
    EnrichmentConfig,
    LLMConfig,
    PostgresConfig,
    SourceConfig,
    SweepConfig,
    SynthesisConfig,
)
from .reliability import ReliabilityTable

__all__ = [
    "BreakingNewsConfig",
    "Config",
    "ConfigModel",
    "DedupConfig",
    "EnrichmentConfig",
    "LLMConfig",
    "PostgresConfig",
    "ReliabilityTable",
    "SourceConfig",
    "SweepConfig",
    "SynthesisConfig",
    "load_config",
    "load_sources",
    "save_config",
    "save_sources",
]
