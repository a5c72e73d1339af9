"""Article fetcher and text extractor."""

import asyncio
from typing import List, Optional

import httpx
import trafilatura
from rich.console import Console

from .models import ArticleContent, RawItem

console = Console(stderr=True)


class ArticleFetcher:
    """Fetch HTML and extract article text."""

    def __init__(
        self,
        timeout: float = 30.0,
        max_concurrent: int = 3,
        user_agent: str = "newsmerge/0.1 (news aggregator)",
    ) -> None:
        """Initialize article fetcher."""
        self.timeout = timeout
        self.max_concurrent = max_concurrent
        self.user_agent = user_agent

    def _failed(self, item: RawItem, error: str, canonical_url: Optional[str] = None) -> ArticleContent:
        return ArticleContent(
            url=item.url,
            canonical_url=canonical_url or item.url,
            title=item.title,
            published_at=item.published_at,
            fetch_success=False,
            error=error,
        )

    def extract(self, page: str, item: RawItem, canonical_url: str) -> ArticleContent:
        """Extract main text and metadata from a fetched page."""
        extracted = trafilatura.extract(
            page,
            include_comments=False,
            include_tables=False,
            deduplicate=True,
            favor_precision=True,
            url=canonical_url,
        )
        if not extracted:
            return self._failed(item, "Failed to extract article content", canonical_url)

        metadata = trafilatura.extract_metadata(page)
        image_url = item.image_url
        if not image_url and metadata is not None and metadata.image:
            image_url = metadata.image

        return ArticleContent(
            url=item.url,
            canonical_url=canonical_url,
            title=item.title,
            text=extracted,
            published_at=item.published_at,
            image_url=image_url,
            fetch_success=True,
        )

    async def fetch_article(self, item: RawItem) -> ArticleContent:
        """Fetch and extract a single article."""
        headers = {
            "User-Agent": self.user_agent,
            "Accept": "text/html,application/xhtml+xml",
        }
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout,
                follow_redirects=True,
                headers=headers,
            ) as client:
                response = await client.get(item.url)
                response.raise_for_status()
        except httpx.HTTPStatusError as e:
            return self._failed(item, f"HTTP {e.response.status_code}")
        except httpx.TimeoutException:
            return self._failed(item, "Request timed out")
        except httpx.HTTPError as e:
            return self._failed(item, f"HTTP error: {e}")

        return self.extract(response.text, item, str(response.url))

    async def fetch_all_articles(self, items: List[RawItem]) -> List[ArticleContent]:
        """Fetch all articles concurrently."""
        if not items:
            return []

        semaphore = asyncio.Semaphore(self.max_concurrent)

        async def fetch_with_semaphore(item: RawItem) -> ArticleContent:
            async with semaphore:
                return await self.fetch_article(item)

        return await asyncio.gather(*(fetch_with_semaphore(item) for item in items))

    def fetch_articles_sync(self, items: List[RawItem]) -> List[ArticleContent]:
        """Synchronous wrapper for fetch_all_articles."""
        return asyncio.run(self.fetch_all_articles(items))
