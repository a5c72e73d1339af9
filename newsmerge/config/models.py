"""Configuration models."""

from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from ..models.taxonomy import ReliabilityTier


class PostgresConfig(BaseModel):
    """Postgres configuration."""

    host: str = Field("localhost", description="Database host")
    port: int = Field(5432, description="Database port")
    database: str = Field("newsmerge", description="Database name")
    user: str = Field("newsmerge", description="Database user")
    password: Optional[str] = Field(None, description="Database password")
    password_env: Optional[str] = Field(None, description="Environment variable for password")
    pool_max_size: int = Field(10, ge=1, description="Connections kept by the pool")


class LLMConfig(BaseModel):
    """LLM provider configuration."""

    provider: str = Field("openai", description="LLM provider (openai, mock)")
    model: str = Field("gpt-4o-mini", description="Model for quick tasks (categorization, entities, duplicates)")
    synthesis_model: Optional[str] = Field(None, description="Model for rewrite and synthesis, defaults to model")
    api_key_env: Optional[str] = Field("OPENAI_API_KEY", description="Environment variable for API key")
    api_key: Optional[str] = Field(None, description="API key (prefer api_key_env)")
    base_url: Optional[str] = Field(None, description="Base URL for API (e.g., for Ollama)")
    timeout_seconds: float = Field(30.0, description="Per-call timeout", gt=0)


class DedupConfig(BaseModel):
    """Duplicate detection parameters."""

    hash_prefix_chars: int = Field(200, ge=0, description="Content characters folded into the hash")
    lookback_hours: int = Field(48, ge=1, description="Window for hash and title matches")
    candidate_pool: int = Field(100, ge=1, description="Recent articles compared by title")
    candidate_threshold: float = Field(0.5, ge=0.0, le=1.0, description="Minimum Jaccard to keep a candidate")
    max_candidates: int = Field(5, ge=1, description="Candidates passed to duplicate judgment")
    fallback_merge_threshold: float = Field(0.7, ge=0.0, le=1.0, description="Jaccard that merges when judgment fails")


class SynthesisConfig(BaseModel):
    """Cluster synthesis parameters."""

    min_members: int = Field(3, ge=2, description="Members required before synthesis")
    content_chars: int = Field(1000, ge=100, description="Per-source content passed to synthesis")


class EnrichmentConfig(BaseModel):
    """Categorization and rewrite parameters."""

    max_article_length: int = Field(5000, ge=200, description="Content characters sent to the capability")
    short_fallback_chars: int = Field(200, ge=1)
    medium_fallback_chars: int = Field(800, ge=1)


class BreakingNewsConfig(BaseModel):
    """Breaking-news gate and signal parameters."""

    keywords: List[str] = Field(
        default_factory=lambda: [
            "urgent",
            "breaking",
            "alerte",
            "décès",
            "mort",
            "démission",
            "exclusif",
        ],
        description="Title keywords that make an article eligible for urgency scoring",
    )
    signal_window_minutes: int = Field(30, ge=1, description="Age under which a breaking article is dispatched")

    @field_validator("keywords")
    @classmethod
    def lowercase_keywords(cls, v: List[str]) -> List[str]:
        """Store keywords lower-cased and without blanks."""
        return [k.strip().lower() for k in v if k.strip()]


class SweepConfig(BaseModel):
    """Backstop sweep over unprocessed articles."""

    batch_size: int = Field(20, ge=1, le=500)
    pace_seconds: float = Field(1.0, ge=0.0, description="Pause between items")


class ConfigModel(BaseModel):
    """Main configuration model."""

    postgres: PostgresConfig = Field(default_factory=PostgresConfig)
    llm: LLMConfig = Field(default_factory=LLMConfig)
    dedup: DedupConfig = Field(default_factory=DedupConfig)
    synthesis: SynthesisConfig = Field(default_factory=SynthesisConfig)
    enrichment: EnrichmentConfig = Field(default_factory=EnrichmentConfig)
    breaking: BreakingNewsConfig = Field(default_factory=BreakingNewsConfig)
    sweep: SweepConfig = Field(default_factory=SweepConfig)


class SourceConfig(BaseModel):
    """Source configuration from sources.yaml."""

    name: str = Field(..., description="Source name")
    url: str = Field(..., description="Homepage URL")
    kind: str = Field("website", description="Source kind (rss, website)")
    feed_url: Optional[str] = Field(None, description="RSS feed URL")
    reliability: ReliabilityTier = Field(ReliabilityTier.LOW, description="Reliability tier")
    priority: int = Field(2, ge=1, le=3, description="Scheduling priority (1 = highest)")
    enabled: bool = Field(True, description="Whether source is enabled")

    @field_validator("kind")
    @classmethod
    def validate_kind(cls, v: str) -> str:
        """Only rss and website sources are known."""
        v = v.strip().lower()
        if v not in ("rss", "website"):
            raise ValueError(f"Unknown source kind: {v}")
        return v
