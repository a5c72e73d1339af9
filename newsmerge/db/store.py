"""Content store bundling the per-collection storages."""

from psycopg import Connection

from .clusters import ClusterStorage
from .processed_articles import ProcessedArticleStorage
from .raw_articles import RawArticleStorage


class ContentStore:
    """Raw articles, clusters and processed articles over one connection."""

    def __init__(self, conn: Connection) -> None:
        self.raw_articles = RawArticleStorage(conn)
        self.clusters = ClusterStorage(conn)
        self.processed_articles = ProcessedArticleStorage(conn)
