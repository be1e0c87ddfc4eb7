"""PTT Gossiping board index page for the society mood."""
import html
import re
from typing import Any, Dict, List

from ..config import settings
from .base import HeadlineSource

TITLE_PATTERN = re.compile(r'<div class="title">\s*<a[^>]*>([^<]+)</a>')

# Board housekeeping posts
SKIPPED_PREFIXES = ("[公告]", "[協尋]")


def parse_board_titles(page: str) -> List[str]:
    """Post titles from a board index page, announcements removed."""
    titles = []
    for match in TITLE_PATTERN.finditer(page):
        title = html.unescape(match.group(1)).strip()
        if title and not title.startswith(SKIPPED_PREFIXES):
            titles.append(title)
    return titles


class PttSource(HeadlineSource):
    """Scores the latest Gossiping board posts with the society lexicon."""

    name = "ptt"
    category = "society"
    fallback_scores = (0.4, 0.6, 0.4)
    headers = {
        # Gossiping is behind the over-18 gate
        "Cookie": "over18=1",
        "User-Agent": (
            "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
            "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
        ),
    }

    def __init__(self, url: str = None, board: str = "Gossiping", **kwargs):
        super().__init__(**kwargs)
        self.url = url or settings.PTT_GOSSIPING_URL
        self.board = board

    @property
    def details(self) -> Dict[str, Any]:
        return {"board": self.board}

    async def fetch_titles(self) -> List[str]:
        async with self._session() as client:
            resp = await self._get(client, self.url)
        return parse_board_titles(resp.text)
