"""Configuration loader."""

import os
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import yaml
from pydantic import ValidationError
from rich.console import Console

from .models import ConfigModel, SourceConfig
from .reliability import ReliabilityTable

console = Console(stderr=True)


class Config:
    """Configuration manager."""

    def __init__(self, config_path: Optional[Path] = None) -> None:
        """Initialize config manager."""
        if config_path is None:
            config_path = Path.home() / ".config" / "newsmerge" / "config.yaml"
        self.config_path = config_path
        self._config: Optional[ConfigModel] = None
        self._sources: Optional[List[SourceConfig]] = None
        self._reliability: Optional[ReliabilityTable] = None

    @property
    def config(self) -> ConfigModel:
        """Get loaded config."""
        if self._config is None:
            self._config = load_config(self.config_path)
        return self._config

    @property
    def sources_path(self) -> Path:
        """Path of the sources file next to the config file."""
        return self.config_path.parent / "sources.yaml"

    @property
    def sources(self) -> List[SourceConfig]:
        """Configured sources, loaded once."""
        if self._sources is None:
            try:
                self._sources = load_sources(self.sources_path)
            except FileNotFoundError:
                console.print(f"[yellow]Sources file not found: {self.sources_path}[/yellow]")
                self._sources = []
        return self._sources

    @property
    def reliability(self) -> ReliabilityTable:
        """Reliability table built from the sources file."""
        if self._reliability is None:
            self._reliability = ReliabilityTable.from_sources(self.sources)
        return self._reliability

    @property
    def breaking_keywords(self) -> Tuple[str, ...]:
        """Breaking-news title keywords, frozen."""
        return tuple(self.config.breaking.keywords)

    def get_db_config(self) -> Dict[str, Any]:
        """Get database configuration dict."""
        db_config = self.config.postgres.model_dump()

        # Handle password from environment if specified
        if db_config.get("password_env"):
            password = os.environ.get(db_config["password_env"])
            if password:
                db_config["password"] = password

        return db_config

    def get_llm_config(self) -> Dict[str, Any]:
        """Get LLM configuration dict."""
        llm_config = self.config.llm.model_dump()

        # Handle API key from environment if specified
        if llm_config.get("api_key_env"):
            api_key = os.environ.get(llm_config["api_key_env"])
            if api_key:
                llm_config["api_key"] = api_key

        return llm_config


def load_config(config_path: Path) -> ConfigModel:
    """Load configuration from YAML file."""
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    try:
        with open(config_path, encoding="utf-8") as f:
            config_data = yaml.safe_load(f)

        if config_data is None:
            config_data = {}

        return ConfigModel(**config_data)
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in config file: {e}")
    except ValidationError as e:
        raise ValueError(f"Invalid configuration: {e}")


def load_sources(sources_path: Path) -> List[SourceConfig]:
    """Load sources from YAML file."""
    if not sources_path.exists():
        raise FileNotFoundError(f"Sources file not found: {sources_path}")

    try:
        with open(sources_path, encoding="utf-8") as f:
            sources_data = yaml.safe_load(f)

        if sources_data is None or "sources" not in sources_data:
            return []

        sources = []
        for source_data in sources_data["sources"]:
            try:
                sources.append(SourceConfig(**source_data))
            except ValidationError as e:
                console.print(f"[yellow]Skipping invalid source {source_data.get('name', 'unknown')}: {e}[/yellow]")

        return sources
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in sources file: {e}")


def save_config(config: ConfigModel, config_path: Path) -> None:
    """Save configuration to YAML file."""
    config_path.parent.mkdir(parents=True, exist_ok=True)

    with open(config_path, "w", encoding="utf-8") as f:
        yaml.safe_dump(config.model_dump(mode="json"), f, default_flow_style=False, sort_keys=False, allow_unicode=True)


def save_sources(sources: List[SourceConfig], sources_path: Path) -> None:
    """Save sources to YAML file."""
    sources_path.parent.mkdir(parents=True, exist_ok=True)

    sources_data = {"sources": [s.model_dump(mode="json") for s in sources]}

    with open(sources_path, "w", encoding="utf-8") as f:
        yaml.safe_dump(sources_data, f, default_flow_style=False, sort_keys=False, allow_unicode=True)
