"""Database initialization and schema management."""

from typing import Any, Dict

from psycopg.errors import DatabaseError
from rich.console import Console

from .connection import get_connection

console = Console(stderr=True)


SCHEMA_SQL = """
-- Sources table
CREATE TABLE IF NOT EXISTS sources (
    id SERIAL PRIMARY KEY,
    name TEXT NOT NULL UNIQUE,
    url TEXT NOT NULL,
    kind TEXT NOT NULL DEFAULT 'website' CHECK (kind IN ('rss', 'website')),
    feed_url TEXT,
    reliability TEXT NOT NULL DEFAULT 'low' CHECK (reliability IN ('high', 'medium', 'low')),
    priority INTEGER NOT NULL DEFAULT 2,
    enabled BOOLEAN NOT NULL DEFAULT TRUE,
    created_at TIMESTAMPTZ NOT NULL DEFAULT CURRENT_TIMESTAMP,
    updated_at TIMESTAMPTZ NOT NULL DEFAULT CURRENT_TIMESTAMP
);

-- Raw articles table
CREATE TABLE IF NOT EXISTS raw_articles (
    id SERIAL PRIMARY KEY,
    source_id INTEGER REFERENCES sources(id),
    source_name TEXT NOT NULL,
    title TEXT NOT NULL,
    content TEXT NOT NULL DEFAULT '',
    url TEXT NOT NULL,
    published_at TIMESTAMPTZ,
    ingested_at TIMESTAMPTZ NOT NULL DEFAULT CURRENT_TIMESTAMP,
    image_url TEXT,
    author TEXT,
    content_hash TEXT NOT NULL,
    processed BOOLEAN NOT NULL DEFAULT FALSE,
    skipped BOOLEAN NOT NULL DEFAULT FALSE,
    processed_at TIMESTAMPTZ,
    created_at TIMESTAMPTZ NOT NULL DEFAULT CURRENT_TIMESTAMP,
    updated_at TIMESTAMPTZ NOT NULL DEFAULT CURRENT_TIMESTAMP,
    UNIQUE(url)
);

-- Article clusters table
CREATE TABLE IF NOT EXISTS article_clusters (
    id SERIAL PRIMARY KEY,
    member_ids INTEGER[] NOT NULL,
    canonical_member_id INTEGER NOT NULL UNIQUE,
    primary_category TEXT NOT NULL DEFAULT 'society',
    synthesized_article_id INTEGER,
    created_at TIMESTAMPTZ NOT NULL DEFAULT CURRENT_TIMESTAMP,
    updated_at TIMESTAMPTZ NOT NULL DEFAULT CURRENT_TIMESTAMP
);

-- Processed articles table
CREATE TABLE IF NOT EXISTS processed_articles (
    id SERIAL PRIMARY KEY,
    title TEXT NOT NULL,
    short_summary TEXT NOT NULL DEFAULT '',
    medium_summary TEXT NOT NULL DEFAULT '',
    long_content TEXT NOT NULL DEFAULT '',
    categories TEXT[] NOT NULL DEFAULT '{}',
    category_confidence REAL,
    entities JSONB NOT NULL DEFAULT '{}',
    source_article_ids INTEGER[] NOT NULL,
    sources JSONB NOT NULL DEFAULT '[]',
    tags TEXT[] NOT NULL DEFAULT '{}',
    published_at TIMESTAMPTZ NOT NULL,
    processed_at TIMESTAMPTZ NOT NULL,
    image_url TEXT,
    trending BOOLEAN NOT NULL DEFAULT FALSE,
    view_count INTEGER NOT NULL DEFAULT 0,
    is_breaking_news BOOLEAN NOT NULL DEFAULT FALSE,
    breaking_news_level TEXT NOT NULL DEFAULT 'NORMAL'
        CHECK (breaking_news_level IN ('CRITICAL', 'HIGH', 'NORMAL', 'LOW')),
    is_synthesis BOOLEAN NOT NULL DEFAULT FALSE,
    synthesis_metadata JSONB,
    raw_article_id INTEGER UNIQUE REFERENCES raw_articles(id),
    cluster_id INTEGER UNIQUE REFERENCES article_clusters(id),
    created_at TIMESTAMPTZ NOT NULL DEFAULT CURRENT_TIMESTAMP,
    updated_at TIMESTAMPTZ NOT NULL DEFAULT CURRENT_TIMESTAMP,
    CHECK (cardinality(source_article_ids) >= 1),
    CHECK (NOT is_synthesis OR cardinality(source_article_ids) >= 2)
);

-- Create indexes
CREATE INDEX IF NOT EXISTS idx_raw_articles_hash ON raw_articles(content_hash, ingested_at);
CREATE INDEX IF NOT EXISTS idx_raw_articles_ingested_at ON raw_articles(ingested_at DESC);
CREATE INDEX IF NOT EXISTS idx_raw_articles_unprocessed ON raw_articles(ingested_at) WHERE NOT processed;
CREATE INDEX IF NOT EXISTS idx_clusters_members ON article_clusters USING GIN (member_ids);
CREATE INDEX IF NOT EXISTS idx_processed_published_at ON processed_articles(published_at DESC);
CREATE INDEX IF NOT EXISTS idx_processed_breaking ON processed_articles(published_at) WHERE is_breaking_news;

-- Update trigger function
CREATE OR REPLACE FUNCTION update_updated_at_column()
RETURNS TRIGGER AS $$
BEGIN
    NEW.updated_at = CURRENT_TIMESTAMP;
    RETURN NEW;
END;
$$ language 'plpgsql';

-- Create update triggers
CREATE OR REPLACE TRIGGER update_sources_updated_at BEFORE UPDATE ON sources
    FOR EACH ROW EXECUTE FUNCTION update_updated_at_column();

CREATE OR REPLACE TRIGGER update_raw_articles_updated_at BEFORE UPDATE ON raw_articles
    FOR EACH ROW EXECUTE FUNCTION update_updated_at_column();

CREATE OR REPLACE TRIGGER update_article_clusters_updated_at BEFORE UPDATE ON article_clusters
    FOR EACH ROW EXECUTE FUNCTION update_updated_at_column();
"""


def validate_connection(config: Dict[str, Any]) -> bool:
    """Validate database connection."""
    try:
        with get_connection(config) as conn:
            with conn.cursor() as cur:
                cur.execute("SELECT 1 AS ok")
                result = cur.fetchone()
                return result is not None and result["ok"] == 1
    except Exception as e:
        console.print(f"[red]Database connection failed: {e}[/red]")
        return False


def init_database(config: Dict[str, Any]) -> None:
    """Initialize database schema."""
    try:
        with get_connection(config) as conn:
            with conn.cursor() as cur:
                cur.execute(SCHEMA_SQL)
            conn.commit()
            console.print("Database schema initialized successfully")
    except DatabaseError as e:
        console.print(f"[red]Failed to initialize database schema: {e}[/red]")
        raise
