"""Raw article storage."""

from datetime import datetime
from typing import List, Optional, Sequence

import pendulum

from ..models import RawArticle
from .base import BaseStorage


class RawArticleStorage(BaseStorage):
    """Read and update raw articles."""

    def get(self, article_id: int) -> Optional[RawArticle]:
        """Load one raw article by ID."""
        with self._guard("load raw article"):
            with self.conn.cursor() as cur:
                cur.execute("SELECT * FROM raw_articles WHERE id = %s", (article_id,))
                row = cur.fetchone()
        return RawArticle.model_validate(row) if row else None

    def get_many(self, article_ids: Sequence[int]) -> List[RawArticle]:
        """Load the raw articles that still exist among the given IDs."""
        if not article_ids:
            return []
        with self._guard("load raw articles"):
            with self.conn.cursor() as cur:
                cur.execute(
                    "SELECT * FROM raw_articles WHERE id = ANY(%s) ORDER BY id",
                    (list(article_ids),),
                )
                rows = cur.fetchall()
        return [RawArticle.model_validate(row) for row in rows]

    def find_by_hash(
        self,
        content_hash: str,
        since: datetime,
        earlier_than: RawArticle,
        limit: int = 5,
    ) -> List[int]:
        """
        IDs of articles with the same content hash, ingested since ``since``
        and before ``earlier_than``.

        Only earlier articles count, so of two copies ingested in one batch
        the first is kept and the second is the duplicate.
        """
        with self._guard("look up content hash"):
            with self.conn.cursor() as cur:
                cur.execute(
                    """
                    SELECT id
                    FROM raw_articles
                    WHERE content_hash = %s
                      AND ingested_at >= %s
                      AND (ingested_at, id) < (%s, %s)
                    ORDER BY ingested_at DESC, id DESC
                    LIMIT %s
                    """,
                    (content_hash, since, earlier_than.ingested_at, earlier_than.id, limit),
                )
                rows = cur.fetchall()
        return [row["id"] for row in rows]

    def recent(
        self,
        since: datetime,
        earlier_than: RawArticle,
        limit: int = 100,
    ) -> List[RawArticle]:
        """Articles ingested since ``since`` and before ``earlier_than``, newest first."""
        with self._guard("load recent raw articles"):
            with self.conn.cursor() as cur:
                cur.execute(
                    """
                    SELECT *
                    FROM raw_articles
                    WHERE ingested_at >= %s
                      AND (ingested_at, id) < (%s, %s)
                    ORDER BY ingested_at DESC, id DESC
                    LIMIT %s
                    """,
                    (since, earlier_than.ingested_at, earlier_than.id, limit),
                )
                rows = cur.fetchall()
        return [RawArticle.model_validate(row) for row in rows]

    def list_unprocessed(self, limit: int = 20) -> List[RawArticle]:
        """Unprocessed articles, oldest first."""
        with self._guard("list unprocessed raw articles"):
            with self.conn.cursor() as cur:
                cur.execute(
                    """
                    SELECT *
                    FROM raw_articles
                    WHERE NOT processed
                    ORDER BY ingested_at ASC, id ASC
                    LIMIT %s
                    """,
                    (limit,),
                )
                rows = cur.fetchall()
        return [RawArticle.model_validate(row) for row in rows]

    def mark_processed(self, article_id: int, skipped: bool = False) -> bool:
        """
        Flip ``processed`` from false to true.

        Returns:
            False when another run already marked the article
        """
        with self._guard("mark raw article processed"):
            with self.conn.cursor() as cur:
                cur.execute(
                    """
                    UPDATE raw_articles
                    SET processed = TRUE,
                        skipped = %s,
                        processed_at = %s
                    WHERE id = %s AND NOT processed
                    """,
                    (skipped, pendulum.now("UTC"), article_id),
                )
                updated = cur.rowcount == 1
            self.conn.commit()
        return updated

    def insert(self, article: RawArticle) -> Optional[int]:
        """
        Insert a newly ingested article.

        Returns:
            New ID, or None when the URL is already stored
        """
        with self._guard("insert raw article"):
            with self.conn.cursor() as cur:
                cur.execute(
                    """
                    INSERT INTO raw_articles (
                        source_id, source_name, title, content, url,
                        published_at, ingested_at, image_url, author, content_hash
                    ) VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s)
                    ON CONFLICT (url) DO NOTHING
                    RETURNING id
                    """,
                    (
                        article.source_id,
                        article.source_name,
                        article.title,
                        article.content,
                        article.url,
                        article.published_at,
                        article.ingested_at,
                        article.image_url,
                        article.author,
                        article.content_hash,
                    ),
                )
                row = cur.fetchone()
            self.conn.commit()
        return row["id"] if row else None
