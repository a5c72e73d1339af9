"""Cluster lifecycle."""

from typing import List, Optional, Sequence

from rich.console import Console

from ..db.clusters import ClusterStorage
from ..db.raw_articles import RawArticleStorage
from ..models import ArticleCategory, ArticleCluster, RawArticle

console = Console(stderr=True)


class ClusterManager:
    """Create clusters, attach articles to them and resolve their members."""

    def __init__(self, clusters: ClusterStorage, raw_articles: RawArticleStorage) -> None:
        self.clusters = clusters
        self.raw_articles = raw_articles

    def attach_or_create(
        self,
        new_article_id: int,
        matching_ids: Sequence[int],
        category: ArticleCategory,
    ) -> int:
        """
        Put ``new_article_id`` in the cluster of its matches.

        Attaching an article that is already a member changes nothing, so a
        replayed run converges on the same cluster.

        Returns:
            Cluster ID
        """
        cluster_id, created = self.clusters.attach_or_create(new_article_id, matching_ids, category)
        if created:
            console.print(f"[dim]Created cluster {cluster_id} for article {new_article_id}[/dim]")
        else:
            console.print(f"[dim]Attached article {new_article_id} to cluster {cluster_id}[/dim]")
        return cluster_id

    def get(self, cluster_id: int) -> Optional[ArticleCluster]:
        return self.clusters.get(cluster_id)

    def members_of(self, cluster_id: int) -> List[RawArticle]:
        """Raw articles of a cluster in membership order, skipping vanished ones."""
        cluster = self.clusters.get(cluster_id)
        if cluster is None:
            console.print(f"[yellow]Cluster not found: {cluster_id}[/yellow]")
            return []

        by_id = {a.id: a for a in self.raw_articles.get_many(cluster.member_ids)}
        return [by_id[member_id] for member_id in cluster.member_ids if member_id in by_id]
