"""Article cluster storage."""

from typing import Optional, Sequence, Tuple

from ..models import ArticleCategory, ArticleCluster
from .base import BaseStorage


class ClusterStorage(BaseStorage):
    """Persist cluster membership and synthesis references."""

    def get(self, cluster_id: int) -> Optional[ArticleCluster]:
        """Load a cluster by ID."""
        with self._guard("load cluster"):
            with self.conn.cursor() as cur:
                cur.execute("SELECT * FROM article_clusters WHERE id = %s", (cluster_id,))
                row = cur.fetchone()
        return ArticleCluster.model_validate(row) if row else None

    def attach_or_create(
        self,
        new_article_id: int,
        matching_ids: Sequence[int],
        category: ArticleCategory,
    ) -> Tuple[int, bool]:
        """
        Add an article to the cluster overlapping ``matching_ids``, or create one.

        The lookup locks the matched row, and creation is keyed by the smallest
        matching ID so that two runs seeding the same pair converge on one
        cluster instead of racing into two.

        Returns:
            Tuple of (cluster_id, created)
        """
        matching = [m for m in dict.fromkeys(matching_ids) if m != new_article_id]
        canonical_id = min(matching) if matching else new_article_id

        with self._guard("attach article to cluster"):
            with self.conn.cursor() as cur:
                existing = None
                if matching:
                    cur.execute(
                        """
                        SELECT id
                        FROM article_clusters
                        WHERE member_ids && %s::integer[]
                        ORDER BY id
                        LIMIT 1
                        FOR UPDATE
                        """,
                        (matching,),
                    )
                    existing = cur.fetchone()

                if existing:
                    cur.execute(
                        """
                        UPDATE article_clusters
                        SET member_ids = CASE
                                WHEN %s = ANY(member_ids) THEN member_ids
                                ELSE array_append(member_ids, %s)
                            END,
                            updated_at = CURRENT_TIMESTAMP
                        WHERE id = %s
                        RETURNING id
                        """,
                        (new_article_id, new_article_id, existing["id"]),
                    )
                    cluster_id, created = cur.fetchone()["id"], False
                else:
                    cur.execute(
                        """
                        INSERT INTO article_clusters (member_ids, canonical_member_id, primary_category)
                        VALUES (%s, %s, %s)
                        ON CONFLICT (canonical_member_id) DO UPDATE SET
                            member_ids = ARRAY(
                                SELECT DISTINCT m
                                FROM unnest(article_clusters.member_ids || EXCLUDED.member_ids) AS m
                                ORDER BY m
                            ),
                            updated_at = CURRENT_TIMESTAMP
                        RETURNING id, (xmax = 0) AS inserted
                        """,
                        ([new_article_id, *matching], canonical_id, category.value),
                    )
                    row = cur.fetchone()
                    cluster_id, created = row["id"], bool(row["inserted"])
            self.conn.commit()
        return cluster_id, created

    def set_synthesized(self, cluster_id: int, article_id: int) -> bool:
        """Record the processed article produced for a cluster, once."""
        with self._guard("record cluster synthesis"):
            with self.conn.cursor() as cur:
                cur.execute(
                    """
                    UPDATE article_clusters
                    SET synthesized_article_id = %s,
                        updated_at = CURRENT_TIMESTAMP
                    WHERE id = %s AND synthesized_article_id IS NULL
                    """,
                    (article_id, cluster_id),
                )
                updated = cur.rowcount == 1
            self.conn.commit()
        return updated
