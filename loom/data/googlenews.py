"""Google News Taiwan top stories (RSS) for the society mood."""
import re
from typing import Any, Dict, List

import feedparser

from ..config import settings
from .base import HeadlineSource

# Feed-level titles that are not news items
FEED_TITLE_MARKERS = ("Google 新聞", "焦點新聞")

# " - 聯合新聞網" style publisher suffix
PUBLISHER_SUFFIX = re.compile(r"\s*-\s*[^-]+$")


def clean_title(title: str) -> str:
    """Strip whitespace and the trailing publisher name."""
    return PUBLISHER_SUFFIX.sub("", title.strip()).strip()


def parse_feed_titles(xml: str) -> List[str]:
    """Headline titles from an RSS document, publisher suffixes removed."""
    feed = feedparser.parse(xml)
    titles = []
    for entry in feed.entries:
        title = getattr(entry, "title", "") or ""
        if not title or any(marker in title for marker in FEED_TITLE_MARKERS):
            continue
        cleaned = clean_title(title)
        if cleaned:
            titles.append(cleaned)
    return titles


class GoogleNewsSource(HeadlineSource):
    """Scores Taiwanese headline news with the society lexicon."""

    name = "googlenews"
    category = "society"
    fallback_scores = (0.4, 0.6, 0.4)
    headers = {"User-Agent": "Mozilla/5.0 (compatible; LoomOfSociety/1.0)"}

    def __init__(self, url: str = None, region: str = "TW", **kwargs):
        super().__init__(**kwargs)
        self.url = url or settings.GOOGLE_NEWS_RSS_URL
        self.region = region

    @property
    def details(self) -> Dict[str, Any]:
        return {"region": self.region}

    async def fetch_titles(self) -> List[str]:
        async with self._session() as client:
            resp = await self._get(client, self.url)
        return parse_feed_titles(resp.text)
