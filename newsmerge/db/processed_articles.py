"""Processed article storage."""

from typing import List, Optional

import pendulum
from psycopg.types.json import Jsonb

from ..models import ProcessedArticle
from .base import BaseStorage


class ProcessedArticleStorage(BaseStorage):
    """Persist reader-facing articles."""

    def insert(self, article: ProcessedArticle) -> int:
        """
        Insert a processed article at most once per raw article or cluster.

        A replay after a crash hits the unique ``raw_article_id`` or
        ``cluster_id`` column and gets the existing row back.

        Returns:
            Processed article ID
        """
        with self._guard("insert processed article"):
            with self.conn.cursor() as cur:
                cur.execute(
                    """
                    INSERT INTO processed_articles (
                        title, short_summary, medium_summary, long_content,
                        categories, category_confidence, entities,
                        source_article_ids, sources, tags,
                        published_at, processed_at, image_url,
                        trending, view_count, is_breaking_news, breaking_news_level,
                        is_synthesis, synthesis_metadata, raw_article_id, cluster_id
                    ) VALUES (
                        %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s,
                        %s, %s, %s, %s, %s, %s, %s, %s, %s, %s
                    )
                    ON CONFLICT DO NOTHING
                    RETURNING id
                    """,
                    (
                        article.title,
                        article.short_summary,
                        article.medium_summary,
                        article.long_content,
                        [c.value for c in article.categories],
                        article.category_confidence,
                        Jsonb(article.entities.model_dump()),
                        article.source_article_ids,
                        Jsonb([s.model_dump(mode="json") for s in article.sources]),
                        article.tags,
                        article.published_at,
                        article.processed_at,
                        article.image_url,
                        article.trending,
                        article.view_count,
                        article.is_breaking_news,
                        article.breaking_news_level.value,
                        article.is_synthesis,
                        Jsonb(article.synthesis_metadata.model_dump(mode="json"))
                        if article.synthesis_metadata
                        else None,
                        article.raw_article_id,
                        article.cluster_id,
                    ),
                )
                row = cur.fetchone()
                if row is None:
                    cur.execute(
                        """
                        SELECT id
                        FROM processed_articles
                        WHERE raw_article_id = %s OR cluster_id = %s
                        LIMIT 1
                        """,
                        (article.raw_article_id, article.cluster_id),
                    )
                    row = cur.fetchone()
            self.conn.commit()
        return row["id"]

    def get(self, article_id: int) -> Optional[ProcessedArticle]:
        """Load a processed article by ID."""
        with self._guard("load processed article"):
            with self.conn.cursor() as cur:
                cur.execute("SELECT * FROM processed_articles WHERE id = %s", (article_id,))
                row = cur.fetchone()
        return ProcessedArticle.model_validate(row) if row else None

    def recent_breaking(self, max_age_minutes: int = 30, limit: int = 20) -> List[ProcessedArticle]:
        """Breaking articles published in the last ``max_age_minutes``, newest first."""
        since = pendulum.now("UTC").subtract(minutes=max_age_minutes)
        with self._guard("load breaking articles"):
            with self.conn.cursor() as cur:
                cur.execute(
                    """
                    SELECT *
                    FROM processed_articles
                    WHERE is_breaking_news AND published_at >= %s
                    ORDER BY published_at DESC
                    LIMIT %s
                    """,
                    (since, limit),
                )
                rows = cur.fetchall()
        return [ProcessedArticle.model_validate(row) for row in rows]
