"""RSS feed fetcher."""

import calendar
import html
import re
from abc import ABC, abstractmethod
from typing import Any, List, Optional

import feedparser
import httpx
import pendulum
from rich.console import Console

from ..config import SourceConfig
from ..errors import IngestionError
from .models import RawItem

console = Console(stderr=True)

_TAG = re.compile(r"<[^>]+>")
_SPACES = re.compile(r"\s+")


def clean_summary(text: Optional[str]) -> str:
    """Plain text from an HTML feed summary."""
    if not text:
        return ""
    return _SPACES.sub(" ", html.unescape(_TAG.sub(" ", text))).strip()


class ItemFetcher(ABC):
    """Reads the current items of one configured source."""

    @abstractmethod
    def fetch_raw_items(self, source: SourceConfig) -> List[RawItem]:
        """
        Fetch the items a source currently publishes.

        Raises:
            IngestionError: If the source cannot be read
        """
        pass


class RSSFetcher(ItemFetcher):
    """Fetch and parse RSS feeds."""

    def __init__(self, timeout: float = 30.0, user_agent: str = "newsmerge/0.1 (news aggregator)") -> None:
        """Initialize RSS fetcher."""
        self.timeout = timeout
        self.user_agent = user_agent

    def _published(self, entry: Any) -> Optional[pendulum.DateTime]:
        # feedparser normalizes dates to UTC struct_time
        for key in ("published_parsed", "updated_parsed"):
            parsed = entry.get(key)
            if parsed:
                return pendulum.from_timestamp(calendar.timegm(parsed), tz="UTC")
        return None

    def _image(self, entry: Any) -> Optional[str]:
        for media in entry.get("media_content", []) + entry.get("media_thumbnail", []):
            if media.get("url"):
                return media["url"]
        for enclosure in entry.get("enclosures", []):
            if enclosure.get("href") and enclosure.get("type", "image/").startswith("image/"):
                return enclosure["href"]
        return None

    def parse_feed(self, text: str, source: SourceConfig) -> List[RawItem]:
        """Turn feed XML into raw items, skipping entries without title or link."""
        feed = feedparser.parse(text)
        if feed.bozo and not feed.entries:
            raise IngestionError(f"Invalid RSS feed for {source.name}: {feed.bozo_exception}")

        items = []
        for entry in feed.entries:
            title = (entry.get("title") or "").strip()
            link = (entry.get("link") or "").strip()
            if not title or not link:
                continue

            summary = entry.get("summary") or entry.get("description")
            if not summary and entry.get("content"):
                summary = entry.content[0].get("value")

            items.append(
                RawItem(
                    title=title,
                    url=link,
                    published_at=self._published(entry),
                    summary=clean_summary(summary),
                    image_url=self._image(entry),
                    author=entry.get("author"),
                    source_name=source.name,
                )
            )
        return items

    def fetch_raw_items(self, source: SourceConfig) -> List[RawItem]:
        """Fetch and parse the source's feed."""
        feed_url = source.feed_url or source.url
        try:
            with httpx.Client(
                timeout=self.timeout,
                follow_redirects=True,
                headers={"User-Agent": self.user_agent},
            ) as client:
                response = client.get(feed_url)
                response.raise_for_status()
        except httpx.HTTPError as e:
            raise IngestionError(f"HTTP error for {source.name}: {e}") from e

        items = self.parse_feed(response.text, source)
        console.print(f"[dim]{source.name}: {len(items)} feed items[/dim]")
        return items
