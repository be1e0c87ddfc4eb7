"""Shared plumbing for upstream sources: HTTP sessions and headline scoring."""
import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict, List, Optional, Any
import httpx

from ..analysis.sentiment import analyze_text
from ..config import settings
from ..core.logger import get_logger
from ..models import FALLBACK, LIVE, Sentiment

logger = get_logger(__name__)


class HttpSource:
    """Base for anything that talks to an upstream over HTTP."""

    name: str = "upstream"
    headers: Dict[str, str] = {}

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        timeout: Optional[float] = None
    ):
        """
        Args:
            client: Shared client to use instead of opening one per fetch
            timeout: Upper bound in seconds for one whole fetch
        """
        self._client = client
        self.timeout = timeout if timeout is not None else settings.UPSTREAM_TIMEOUT

    @asynccontextmanager
    async def _session(self) -> AsyncIterator[httpx.AsyncClient]:
        """Yield the injected client, or a short-lived one for this fetch."""
        if self._client is not None:
            yield self._client
            return
        async with httpx.AsyncClient(timeout=self.timeout, follow_redirects=True) as client:
            yield client

    async def _get(self, client: httpx.AsyncClient, url: str, **kwargs) -> httpx.Response:
        """GET with this source's headers; raises on non-2xx."""
        resp = await client.get(url, headers=self.headers, **kwargs)
        resp.raise_for_status()
        return resp


class HeadlineSource(HttpSource):
    """
    Scores one domain from a feed of headlines.

    Subclasses implement ``fetch_titles``; ``analyze`` never raises and
    degrades to the source's fallback reading when nothing could be fetched.
    """

    category: str = "society"
    # (tension, buoyancy, activity) served when the feed is unavailable
    fallback_scores = (0.4, 0.6, 0.4)

    @property
    def details(self) -> Dict[str, Any]:
        """Source-specific fields attached to every reading."""
        return {}

    async def fetch_titles(self) -> List[str]:
        raise NotImplementedError

    def fallback(self) -> Sentiment:
        tension, buoyancy, activity = self.fallback_scores
        return Sentiment(
            tension=tension,
            buoyancy=buoyancy,
            activity=activity,
            source=self.name,
            status=FALLBACK,
            item_count=0,
            details=self.details,
        )

    async def analyze(self) -> Sentiment:
        """Fetch headlines and score them; fallback reading on any failure."""
        try:
            titles = await asyncio.wait_for(self.fetch_titles(), timeout=self.timeout)
        except asyncio.TimeoutError:
            logger.warning("source_fetch_timeout", source=self.name, timeout=self.timeout)
            titles = []
        except Exception as e:
            logger.warning("source_fetch_failed", source=self.name, error=str(e))
            titles = []

        if not titles:
            return self.fallback()

        result = analyze_text(" ".join(titles), self.category)
        return Sentiment(
            tension=result.tension,
            buoyancy=result.buoyancy,
            activity=result.activity,
            source=self.name,
            status=LIVE,
            item_count=len(titles),
            details=self.details,
        )
