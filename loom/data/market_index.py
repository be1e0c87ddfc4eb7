"""TAIEX market index fetcher (Taiwan Stock Exchange MIS endpoint)."""
import asyncio
from typing import Any, Dict

from ..config import settings
from ..core.logger import get_logger
from ..models import MarketData, default_market_data, utcnow
from ..utils import safe_float
from .base import HttpSource

logger = get_logger(__name__)

INDEX_NAME = "TAIEX"


def parse_index_payload(payload: Dict[str, Any]) -> MarketData:
    """
    Build MarketData from a getStockInfo.jsp response.

    Fields of ``msgArray[0]``: z current, y previous close, v volume,
    o open, h high, l low. ``z`` is "-" when the market is not trading.
    """
    rows = payload.get("msgArray") or []
    if not rows:
        return default_market_data()

    info = rows[0]
    previous_close = safe_float(info.get("y"))
    current = safe_float(info.get("z")) or previous_close
    if not current:
        return default_market_data(note="no quote")

    change = current - previous_close
    change_percent = round(change / previous_close * 100, 2) if previous_close else 0.0

    return MarketData(
        name=INDEX_NAME,
        price=current,
        change=round(change, 2),
        change_percent=change_percent,
        volume=safe_float(info.get("v")),
        open=safe_float(info.get("o")) or previous_close,
        high=safe_float(info.get("h")) or current,
        low=safe_float(info.get("l")) or current,
        fetched_at=utcnow(),
        is_trading=info.get("z") not in (None, "", "-"),
    )


class MarketIndexFetcher(HttpSource):
    """Fetches the weighted index; never raises, falls back to closed-market data."""

    name = "twse"
    headers = {
        "User-Agent": "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7)",
        "Accept": "application/json",
    }

    def __init__(self, url: str = None, **kwargs):
        super().__init__(**kwargs)
        self.url = url or settings.TWSE_INDEX_URL

    async def _fetch(self) -> MarketData:
        async with self._session() as client:
            resp = await self._get(client, self.url)
            return parse_index_payload(resp.json())

    async def fetch_index(self) -> MarketData:
        """Fetch the current index reading."""
        try:
            return await asyncio.wait_for(self._fetch(), timeout=self.timeout)
        except asyncio.TimeoutError:
            logger.warning("market_index_timeout", timeout=self.timeout)
        except Exception as e:
            logger.warning("market_index_fetch_failed", error=str(e))
        return default_market_data(note="index unavailable")
