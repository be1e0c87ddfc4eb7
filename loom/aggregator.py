"""Fan out to every upstream source and merge the results into one snapshot."""
import asyncio
from typing import Optional

import httpx

from .analysis.market import market_to_sentiment
from .config import settings
from .core.logger import get_logger
from .data import SOCIETY_SOURCES, HackerNewsSource, HeadlineSource, MarketIndexFetcher
from .models import SentimentSnapshot, default_market_data, utcnow

logger = get_logger(__name__)


class SnapshotAggregator:
    """
    Builds fresh SentimentSnapshots.

    The market index, the tech source and the society source are fetched
    concurrently. Sources already degrade to fallback readings on their own;
    anything that still raises is logged and replaced by that source's
    fallback, so one bad upstream never aborts the others.
    """

    def __init__(
        self,
        market: Optional[MarketIndexFetcher] = None,
        tech: Optional[HeadlineSource] = None,
        society: Optional[HeadlineSource] = None,
    ):
        self.market = market or MarketIndexFetcher()
        self.tech = tech or HackerNewsSource()
        self.society = society or build_society_source(settings.SOCIETY_SOURCE)

    async def fetch_fresh_snapshot(self) -> SentimentSnapshot:
        """Fetch every source and assemble a new snapshot."""
        market, tech, society = await asyncio.gather(
            self.market.fetch_index(),
            self.tech.analyze(),
            self.society.analyze(),
            return_exceptions=True,
        )

        if isinstance(market, BaseException):
            logger.error("market_source_raised", error=str(market))
            market = default_market_data(note="index unavailable")
        if isinstance(tech, BaseException):
            logger.error("source_raised", source=self.tech.name, error=str(tech))
            tech = self.tech.fallback()
        if isinstance(society, BaseException):
            logger.error("source_raised", source=self.society.name, error=str(society))
            society = self.society.fallback()

        snapshot = SentimentSnapshot(
            generated_at=utcnow(),
            market=market,
            tech=tech,
            finance=market_to_sentiment(market),
            society=society,
        )

        logger.info(
            "snapshot_assembled",
            tech=tech.status,
            finance=snapshot.finance.status,
            society=society.status,
        )
        return snapshot


def build_society_source(name: str, client: Optional[httpx.AsyncClient] = None) -> HeadlineSource:
    """Instantiate the configured society source; unknown names use Google News."""
    source_cls = SOCIETY_SOURCES.get(name)
    if source_cls is None:
        logger.warning("unknown_society_source", name=name, using="googlenews")
        source_cls = SOCIETY_SOURCES["googlenews"]
    return source_cls(client=client)
