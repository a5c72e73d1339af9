"""Source management in database."""

from typing import Dict, List

from ..config import SourceConfig
from ..models import Source
from .base import BaseStorage


class SourceStorage(BaseStorage):
    """Mirror configured sources into the database."""

    def sync_sources(self, sources: List[SourceConfig]) -> Dict[str, int]:
        """
        Sync sources from config to database.

        Returns:
            Mapping of source name to database ID
        """
        source_map = {}

        with self._guard("sync sources"):
            with self.conn.cursor() as cur:
                for source in sources:
                    cur.execute(
                        """
                        INSERT INTO sources (name, url, kind, feed_url, reliability, priority, enabled)
                        VALUES (%s, %s, %s, %s, %s, %s, %s)
                        ON CONFLICT (name) DO UPDATE SET
                            url = EXCLUDED.url,
                            kind = EXCLUDED.kind,
                            feed_url = EXCLUDED.feed_url,
                            reliability = EXCLUDED.reliability,
                            priority = EXCLUDED.priority,
                            enabled = EXCLUDED.enabled,
                            updated_at = CURRENT_TIMESTAMP
                        RETURNING id
                        """,
                        (
                            source.name,
                            source.url,
                            source.kind,
                            source.feed_url,
                            source.reliability.value,
                            source.priority,
                            source.enabled,
                        ),
                    )
                    source_map[source.name] = cur.fetchone()["id"]
            self.conn.commit()

        return source_map

    def get_sources(self) -> List[Source]:
        """Get all sources from database."""
        with self._guard("load sources"):
            with self.conn.cursor() as cur:
                cur.execute("SELECT * FROM sources ORDER BY priority, name")
                rows = cur.fetchall()
        return [Source.model_validate(row) for row in rows]
