"""Reddit hot posts across news subreddits for the society mood."""
import asyncio
from typing import Any, Dict, List

import httpx

from ..config import settings
from ..core.logger import get_logger
from .base import HeadlineSource

logger = get_logger(__name__)

# Mixed so that uplifting news balances the world news feed
SUBREDDITS = ["worldnews", "news", "upliftingnews"]


class RedditSource(HeadlineSource):
    """Scores hot Reddit news titles with the society lexicon."""

    name = "reddit"
    category = "society"
    fallback_scores = (0.4, 0.6, 0.4)
    headers = {
        "User-Agent": "LoomOfSociety/1.0 (Social Sentiment Art Installation)",
        "Accept": "application/json",
    }

    def __init__(self, subreddits: List[str] = None, limit: int = 15, **kwargs):
        super().__init__(**kwargs)
        self.subreddits = subreddits or list(SUBREDDITS)
        self.limit = limit

    @property
    def details(self) -> Dict[str, Any]:
        return {"subreddits": list(self.subreddits)}

    async def _fetch_subreddit(self, client: httpx.AsyncClient, subreddit: str) -> List[str]:
        """Hot post titles of one subreddit; [] when it fails."""
        url = settings.REDDIT_URL.format(subreddit=subreddit)
        try:
            resp = await self._get(client, url, params={"limit": self.limit})
            posts = resp.json().get("data", {}).get("children", [])
        except (httpx.HTTPError, ValueError, AttributeError) as e:
            logger.warning("reddit_fetch_failed", subreddit=subreddit, error=str(e))
            return []
        return [post.get("data", {}).get("title") for post in posts if post.get("data", {}).get("title")]

    async def fetch_titles(self) -> List[str]:
        async with self._session() as client:
            results = await asyncio.gather(
                *(self._fetch_subreddit(client, sub) for sub in self.subreddits)
            )
        return [title for titles in results for title in titles]
