"""Data structures shared by the sources, the aggregator and the cache."""
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from .utils import safe_normalize

LIVE = "live"
FALLBACK = "fallback"

NEUTRAL_TENSION = 0.5
NEUTRAL_BUOYANCY = 0.5
NEUTRAL_ACTIVITY = 0.3


@dataclass(frozen=True)
class Sentiment:
    """One domain's emotional reading, every score in [0, 1]."""
    tension: float
    buoyancy: float
    activity: float
    source: str
    status: str = LIVE  # 'live' or 'fallback'
    item_count: int = 0
    details: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if self.status not in (LIVE, FALLBACK):
            raise ValueError(f"Unknown sentiment status: {self.status!r}")
        # Frozen, so clamp through object.__setattr__
        object.__setattr__(self, "tension", safe_normalize(self.tension, 0.0, 1.0, NEUTRAL_TENSION))
        object.__setattr__(self, "buoyancy", safe_normalize(self.buoyancy, 0.0, 1.0, NEUTRAL_BUOYANCY))
        object.__setattr__(self, "activity", safe_normalize(self.activity, 0.0, 1.0, NEUTRAL_ACTIVITY))

    @property
    def is_live(self) -> bool:
        return self.status == LIVE

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "tension": self.tension,
            "buoyancy": self.buoyancy,
            "activity": self.activity,
            "source": self.source,
            "status": self.status,
            "item_count": self.item_count,
        }
        data.update(self.details)
        return data


@dataclass(frozen=True)
class MarketData:
    """Raw index readings for the finance domain."""
    name: str
    price: float
    change: float
    change_percent: float
    volume: float
    open: float
    high: float
    low: float
    fetched_at: datetime
    is_trading: bool
    note: str = ""

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "name": self.name,
            "price": self.price,
            "change": self.change,
            "change_percent": self.change_percent,
            "volume": self.volume,
            "open": self.open,
            "high": self.high,
            "low": self.low,
            "timestamp": self.fetched_at.isoformat(),
            "is_trading": self.is_trading,
        }
        if self.note:
            data["note"] = self.note
        return data


@dataclass(frozen=True)
class SentimentSnapshot:
    """Fully assembled reading of every tracked domain at one point in time."""
    generated_at: datetime
    market: MarketData
    tech: Sentiment
    finance: Sentiment
    society: Sentiment

    @property
    def sentiment(self) -> Dict[str, Sentiment]:
        return {"tech": self.tech, "finance": self.finance, "society": self.society}

    def to_dict(self) -> Dict[str, Any]:
        return {
            "timestamp": self.generated_at.isoformat(),
            "market": self.market.to_dict(),
            "sentiment": {
                domain: reading.to_dict()
                for domain, reading in self.sentiment.items()
            },
        }


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def default_market_data(note: str = "market closed") -> MarketData:
    """Placeholder used outside trading hours or when the index feed fails."""
    return MarketData(
        name="TAIEX",
        price=0.0,
        change=0.0,
        change_percent=0.0,
        volume=0.0,
        open=0.0,
        high=0.0,
        low=0.0,
        fetched_at=utcnow(),
        is_trading=False,
        note=note,
    )


def neutral_sentiment(source: str = "default") -> Sentiment:
    return Sentiment(
        tension=NEUTRAL_TENSION,
        buoyancy=NEUTRAL_BUOYANCY,
        activity=NEUTRAL_ACTIVITY,
        source=source,
        status=FALLBACK,
    )


def default_snapshot(generated_at: Optional[datetime] = None) -> SentimentSnapshot:
    """Neutral snapshot served when no real data has ever been obtained."""
    return SentimentSnapshot(
        generated_at=generated_at or utcnow(),
        market=default_market_data(note="no data"),
        tech=neutral_sentiment(),
        finance=neutral_sentiment(),
        society=neutral_sentiment(),
    )
