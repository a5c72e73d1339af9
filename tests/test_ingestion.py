from unittest.mock import MagicMock, Mock, patch

import httpx
import pytest

from newsmerge.config import SourceConfig
from newsmerge.dedup import content_hash
from newsmerge.errors import IngestionError
from newsmerge.ingestion import ArticleContent, RawArticleIngestor, RawItem, RSSFetcher, clean_summary
from newsmerge.ingestion.rss_fetcher import ItemFetcher
from newsmerge.models import ReliabilityTier

from tests.conftest import NOW

SAMPLE_FEED = """<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0" xmlns:media="http://search.yahoo.com/mrss/">
  <channel>
    <title>Gabon Review</title>
    <link>https://www.gabonreview.com</link>
    <item>
      <title>Le Parlement adopte le budget 2026</title>
      <link>https://www.gabonreview.com/budget-2026</link>
      <pubDate>Tue, 10 Mar 2026 09:30:00 +0100</pubDate>
      <description><![CDATA[<p>Les députés ont <b>voté</b> le texte.</p>]]></description>
      <media:content url="https://www.gabonreview.com/img/budget.jpg" medium="image" />
    </item>
    <item>
      <title></title>
      <link>https://www.gabonreview.com/untitled</link>
    </item>
    <item>
      <title>Panthères : la liste des convoqués</title>
      <link>https://www.gabonreview.com/pantheres</link>
      <enclosure url="https://www.gabonreview.com/img/pantheres.png" type="image/png" length="100" />
    </item>
  </channel>
</rss>
"""

REVIEW = SourceConfig(
    name="Gabon Review",
    url="https://www.gabonreview.com",
    kind="rss",
    feed_url="https://www.gabonreview.com/feed/",
    reliability=ReliabilityTier.HIGH,
    priority=1,
)


class StaticFetcher(ItemFetcher):
    def __init__(self, items_by_source):
        self.items_by_source = items_by_source
        self.fetched = []

    def fetch_raw_items(self, source):
        self.fetched.append(source.name)
        items = self.items_by_source[source.name]
        if isinstance(items, Exception):
            raise items
        return [item.model_copy() for item in items]


def item(title, url, summary="", source_name="Gabon Review"):
    return RawItem(title=title, url=url, summary=summary, source_name=source_name)


# ---------------------------------------------------------------------------
# RSS parsing
# ---------------------------------------------------------------------------

class TestCleanSummary:
    def test_strips_tags_and_entities(self):
        assert clean_summary("<p>Budget <b>adopt&eacute;</b></p>\n<br/>") == "Budget adopté"

    def test_empty(self):
        assert clean_summary(None) == ""


class TestParseFeed:
    def test_parses_entries(self):
        items = RSSFetcher().parse_feed(SAMPLE_FEED, REVIEW)

        assert [i.title for i in items] == ["Le Parlement adopte le budget 2026", "Panthères : la liste des convoqués"]
        first = items[0]
        assert first.url == "https://www.gabonreview.com/budget-2026"
        assert first.source_name == "Gabon Review"
        assert first.summary == "Les députés ont voté le texte."
        assert first.image_url == "https://www.gabonreview.com/img/budget.jpg"
        assert first.published_at.isoformat() == "2026-03-10T08:30:00+00:00"

    def test_image_enclosure(self):
        items = RSSFetcher().parse_feed(SAMPLE_FEED, REVIEW)
        assert items[1].image_url == "https://www.gabonreview.com/img/pantheres.png"
        assert items[1].published_at is None

    def test_garbage_raises(self):
        with pytest.raises(IngestionError):
            RSSFetcher().parse_feed("this is not xml <<<", REVIEW)


class TestFetchRawItems:
    def test_http_error_becomes_ingestion_error(self):
        client = MagicMock()
        client.__enter__.return_value = client
        client.get.side_effect = httpx.ConnectError("refused")

        with patch("newsmerge.ingestion.rss_fetcher.httpx.Client", return_value=client):
            with pytest.raises(IngestionError, match="Gabon Review"):
                RSSFetcher().fetch_raw_items(REVIEW)

        client.get.assert_called_once_with("https://www.gabonreview.com/feed/")


# ---------------------------------------------------------------------------
# RawArticleIngestor
# ---------------------------------------------------------------------------

class TestIngestor:
    def test_inserts_new_items_once(self, store, clock):
        fetcher = StaticFetcher(
            {"Gabon Review": [item("Budget adopte", "https://gr.ga/1", "Texte"), item("Panthers", "https://gr.ga/2")]}
        )
        ingestor = RawArticleIngestor(store.raw_articles, fetcher, now=clock)

        first = ingestor.ingest_source(REVIEW, source_id=7)
        second = ingestor.ingest_source(REVIEW, source_id=7)

        assert first.inserted == 2 and first.inserted_ids == [1, 2]
        assert second.inserted == 0 and second.already_stored == 2
        stored = store.raw_articles.get(1)
        assert stored.source_id == 7
        assert stored.ingested_at == NOW
        assert stored.processed is False
        assert stored.content_hash == content_hash("Budget adopte", "Texte")

    def test_title_stands_in_for_missing_content(self, store, clock):
        ingestor = RawArticleIngestor(store.raw_articles, StaticFetcher({}), now=clock)

        article = ingestor.to_raw_article(item("Panthers qualifies", "https://gr.ga/3"))

        assert article.content == "Panthers qualifies"

    def test_fetch_error_is_reported(self, store, clock):
        fetcher = StaticFetcher({"Gabon Review": IngestionError("HTTP error for Gabon Review: 503")})

        report = RawArticleIngestor(store.raw_articles, fetcher, now=clock).ingest_source(REVIEW)

        assert report.success is False
        assert "503" in report.error
        assert store.raw_articles.rows == {}

    def test_short_summaries_completed_from_page(self, store, clock):
        fetcher = StaticFetcher({"Gabon Review": [item("Budget adopte", "https://gr.ga/1", "Court")]})
        article_fetcher = Mock()
        article_fetcher.fetch_articles_sync.return_value = [
            ArticleContent(
                url="https://gr.ga/1",
                canonical_url="https://gr.ga/1",
                title="Budget adopte",
                text="Texte complet de l'article. " * 20,
                image_url="https://gr.ga/img.jpg",
            )
        ]
        ingestor = RawArticleIngestor(store.raw_articles, fetcher, article_fetcher, now=clock)

        report = ingestor.ingest_source(REVIEW)

        assert report.completed_from_page == 1
        stored = store.raw_articles.get(report.inserted_ids[0])
        assert stored.content.startswith("Texte complet")
        assert stored.image_url == "https://gr.ga/img.jpg"

    def test_ingest_all_orders_and_filters_sources(self, store, clock):
        sources = [
            SourceConfig(name="Low", url="https://low.ga", kind="rss", feed_url="https://low.ga/feed", priority=3),
            SourceConfig(name="Scraped", url="https://scraped.ga", kind="website", priority=1),
            SourceConfig(name="Off", url="https://off.ga", kind="rss", enabled=False, priority=1),
            SourceConfig(name="High", url="https://high.ga", kind="rss", feed_url="https://high.ga/feed", priority=1),
        ]
        fetcher = StaticFetcher(
            {
                "Low": [item("Low news item", "https://low.ga/1", source_name="Low")],
                "High": [item("High news item", "https://high.ga/1", source_name="High")],
            }
        )

        reports = RawArticleIngestor(store.raw_articles, fetcher, now=clock).ingest_all(sources, {"High": 3})

        assert fetcher.fetched == ["High", "Low"]
        assert [r.source_name for r in reports] == ["High", "Low"]
        assert store.raw_articles.get(reports[0].inserted_ids[0]).source_id == 3
