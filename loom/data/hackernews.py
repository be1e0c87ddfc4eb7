"""Hacker News front page titles for the tech mood."""
import asyncio
from typing import List, Optional

import httpx

from ..config import settings
from ..core.logger import get_logger
from .base import HeadlineSource

logger = get_logger(__name__)


class HackerNewsSource(HeadlineSource):
    """Scores the top Hacker News stories with the tech lexicon."""

    name = "hackernews"
    category = "tech"
    fallback_scores = (0.4, 0.6, 0.5)
    headers = {"User-Agent": "LoomOfSociety/1.0", "Accept": "application/json"}

    def __init__(self, limit: int = 30, base_url: str = None, **kwargs):
        super().__init__(**kwargs)
        self.limit = limit
        self.base_url = (base_url or settings.HACKERNEWS_API_URL).rstrip("/")

    async def _fetch_title(self, client: httpx.AsyncClient, story_id: int) -> Optional[str]:
        """Title of one story, None if it cannot be fetched."""
        try:
            resp = await self._get(client, f"{self.base_url}/item/{story_id}.json")
            story = resp.json() or {}
            return story.get("title") or None
        except (httpx.HTTPError, ValueError, AttributeError) as e:
            logger.debug("hackernews_item_failed", story_id=story_id, error=str(e))
            return None

    async def fetch_titles(self) -> List[str]:
        """
        Fetch titles of the current top stories.

        Story details are requested concurrently; stories that fail are dropped.
        """
        async with self._session() as client:
            resp = await self._get(client, f"{self.base_url}/topstories.json")
            story_ids = resp.json()[:self.limit]

            titles = await asyncio.gather(
                *(self._fetch_title(client, story_id) for story_id in story_ids)
            )

        return [title for title in titles if title]
