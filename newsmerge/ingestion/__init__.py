"""Source ingestion."""

from .article_fetcher import ArticleFetcher
from .ingestor import RawArticleIngestor
from .models import ArticleContent, IngestReport, RawItem
from .rss_fetcher import ItemFetcher, RSSFetcher, clean_summary

__all__ = [
    "ArticleContent",
    "ArticleFetcher",
    "IngestReport",
    "ItemFetcher",
    "RSSFetcher",
    "RawArticleIngestor",
    "RawItem",
    "clean_summary",
]
