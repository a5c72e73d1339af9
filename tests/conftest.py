"""Shared fixtures: in-memory stand-ins for the storage classes."""

from datetime import datetime
from typing import Dict, List, Optional, Sequence, Tuple

import pendulum
import pytest

from newsmerge.config import ReliabilityTable
from newsmerge.dedup import content_hash
from newsmerge.llm import MockLLMProvider
from newsmerge.models import (
    ArticleCategory,
    ArticleCluster,
    ProcessedArticle,
    RawArticle,
    ReliabilityTier,
)

NOW = pendulum.datetime(2026, 3, 10, 12, 0, tz="UTC")

BREAKING_KEYWORDS = ("urgent", "breaking", "alerte", "décès", "mort", "démission", "exclusif")


class FakeRawArticleStorage:
    def __init__(self) -> None:
        self.rows: Dict[int, RawArticle] = {}
        self._next_id = 1

    def add(self, article: RawArticle) -> RawArticle:
        if article.id is None:
            article = article.model_copy(update={"id": self._next_id})
        self._next_id = max(self._next_id, article.id) + 1
        self.rows[article.id] = article
        return article

    def get(self, article_id: int) -> Optional[RawArticle]:
        row = self.rows.get(article_id)
        return row.model_copy() if row else None

    def get_many(self, article_ids: Sequence[int]) -> List[RawArticle]:
        return [self.rows[i].model_copy() for i in sorted(set(article_ids)) if i in self.rows]

    def find_by_hash(
        self,
        content_hash: str,
        since: datetime,
        earlier_than: RawArticle,
        limit: int = 5,
    ) -> List[int]:
        matches = [
            a for a in self._earlier(since, earlier_than)
            if a.content_hash == content_hash
        ]
        return [a.id for a in matches[:limit]]

    def recent(self, since: datetime, earlier_than: RawArticle, limit: int = 100) -> List[RawArticle]:
        return [a.model_copy() for a in self._earlier(since, earlier_than)[:limit]]

    def _earlier(self, since: datetime, earlier_than: RawArticle) -> List[RawArticle]:
        """Rows in the window that sort before ``earlier_than``, newest first."""
        cutoff = (earlier_than.ingested_at, earlier_than.id)
        rows = [a for a in self.rows.values() if a.ingested_at >= since and (a.ingested_at, a.id) < cutoff]
        rows.sort(key=lambda a: (a.ingested_at, a.id), reverse=True)
        return rows

    def list_unprocessed(self, limit: int = 20) -> List[RawArticle]:
        rows = [a for a in self.rows.values() if not a.processed]
        rows.sort(key=lambda a: (a.ingested_at, a.id))
        return [a.model_copy() for a in rows[:limit]]

    def mark_processed(self, article_id: int, skipped: bool = False) -> bool:
        row = self.rows[article_id]
        if row.processed:
            return False
        self.rows[article_id] = row.model_copy(update={"processed": True, "skipped": skipped, "processed_at": NOW})
        return True

    def insert(self, article: RawArticle) -> Optional[int]:
        if any(a.url == article.url for a in self.rows.values()):
            return None
        return self.add(article).id


class FakeClusterStorage:
    def __init__(self) -> None:
        self.rows: Dict[int, ArticleCluster] = {}
        self._next_id = 1

    def get(self, cluster_id: int) -> Optional[ArticleCluster]:
        row = self.rows.get(cluster_id)
        return row.model_copy(deep=True) if row else None

    def attach_or_create(
        self,
        new_article_id: int,
        matching_ids: Sequence[int],
        category: ArticleCategory,
    ) -> Tuple[int, bool]:
        matching = [m for m in dict.fromkeys(matching_ids) if m != new_article_id]
        canonical_id = min(matching) if matching else new_article_id

        for cluster_id in sorted(self.rows):
            cluster = self.rows[cluster_id]
            if set(cluster.member_ids) & set(matching):
                if new_article_id not in cluster.member_ids:
                    cluster.member_ids.append(new_article_id)
                return cluster_id, False

        for cluster_id, cluster in self.rows.items():
            if cluster.canonical_member_id == canonical_id:
                cluster.member_ids = sorted(set(cluster.member_ids) | {new_article_id, *matching})
                return cluster_id, False

        cluster_id = self._next_id
        self._next_id += 1
        self.rows[cluster_id] = ArticleCluster(
            id=cluster_id,
            member_ids=[new_article_id, *matching],
            canonical_member_id=canonical_id,
            primary_category=category,
        )
        return cluster_id, True

    def set_synthesized(self, cluster_id: int, article_id: int) -> bool:
        cluster = self.rows[cluster_id]
        if cluster.synthesized_article_id is not None:
            return False
        cluster.synthesized_article_id = article_id
        return True


class FakeProcessedArticleStorage:
    def __init__(self) -> None:
        self.rows: Dict[int, ProcessedArticle] = {}
        self._next_id = 100

    def insert(self, article: ProcessedArticle) -> int:
        for existing in self.rows.values():
            if article.raw_article_id is not None and existing.raw_article_id == article.raw_article_id:
                return existing.id
            if article.cluster_id is not None and existing.cluster_id == article.cluster_id:
                return existing.id
        article_id = self._next_id
        self._next_id += 1
        self.rows[article_id] = article.model_copy(update={"id": article_id})
        return article_id

    def get(self, article_id: int) -> Optional[ProcessedArticle]:
        return self.rows.get(article_id)

    def recent_breaking(self, max_age_minutes: int = 30, limit: int = 20) -> List[ProcessedArticle]:
        since = NOW.subtract(minutes=max_age_minutes)
        rows = [a for a in self.rows.values() if a.is_breaking_news and a.published_at >= since]
        return sorted(rows, key=lambda a: a.published_at, reverse=True)[:limit]


class FakeContentStore:
    def __init__(self) -> None:
        self.raw_articles = FakeRawArticleStorage()
        self.clusters = FakeClusterStorage()
        self.processed_articles = FakeProcessedArticleStorage()


def make_raw_article(
    title: str,
    content: str = "",
    source_name: str = "Info241",
    url: Optional[str] = None,
    ingested_minutes_ago: int = 60,
    **overrides,
) -> RawArticle:
    """Build an unsaved raw article with a consistent content hash."""
    content = content or f"{title}. Details follow for readers in Libreville and beyond."
    fields = dict(
        source_name=source_name,
        title=title,
        content=content,
        url=url or f"https://example.ga/{abs(hash((title, source_name, content)))}",
        published_at=NOW.subtract(minutes=ingested_minutes_ago + 5),
        ingested_at=NOW.subtract(minutes=ingested_minutes_ago),
        content_hash=content_hash(title, content),
    )
    fields.update(overrides)
    return RawArticle(**fields)


@pytest.fixture
def store() -> FakeContentStore:
    return FakeContentStore()


@pytest.fixture
def clock():
    return lambda: NOW


@pytest.fixture
def reliability() -> ReliabilityTable:
    return ReliabilityTable(
        {
            "AGP - Agence Gabonaise de Presse": ReliabilityTier.HIGH,
            "Gabon Review": ReliabilityTier.HIGH,
            "L'Union": ReliabilityTier.HIGH,
            "Info241": ReliabilityTier.MEDIUM,
            "Gabonactu": ReliabilityTier.MEDIUM,
        }
    )


@pytest.fixture
def llm() -> MockLLMProvider:
    return MockLLMProvider()
