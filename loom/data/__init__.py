"""Upstream sources for market, tech and society readings."""
from .base import HeadlineSource, HttpSource
from .market_index import MarketIndexFetcher
from .hackernews import HackerNewsSource
from .googlenews import GoogleNewsSource
from .ptt import PttSource
from .reddit import RedditSource

SOCIETY_SOURCES = {
    "googlenews": GoogleNewsSource,
    "ptt": PttSource,
    "reddit": RedditSource,
}

__all__ = [
    "HeadlineSource", "HttpSource", "MarketIndexFetcher", "HackerNewsSource",
    "GoogleNewsSource", "PttSource", "RedditSource", "SOCIETY_SOURCES",
]
