"""Map raw index readings onto the finance sentiment triple."""
from ..models import (
    FALLBACK,
    LIVE,
    NEUTRAL_ACTIVITY,
    NEUTRAL_BUOYANCY,
    NEUTRAL_TENSION,
    MarketData,
    Sentiment,
)
from ..utils import safe_normalize

FINANCE_SOURCE = "twse"

# A 3% move in either direction saturates tension/buoyancy
PERCENT_SPAN = 6.0
# Typical session turnover, same unit as the feed's volume field
AVERAGE_VOLUME = 3000.0
MIN_ACTIVITY = 0.2


def market_to_sentiment(market: MarketData) -> Sentiment:
    """
    Convert index data into a finance Sentiment.

    Outside trading hours (or when the feed failed) the reading is neutral and
    marked as fallback. Otherwise a falling index raises tension, a rising one
    raises buoyancy, and turnover relative to an average day drives activity.
    """
    if not market.is_trading:
        return Sentiment(
            tension=NEUTRAL_TENSION,
            buoyancy=NEUTRAL_BUOYANCY,
            activity=NEUTRAL_ACTIVITY,
            source=FINANCE_SOURCE,
            status=FALLBACK,
            details={"note": market.note} if market.note else {},
        )

    change = market.change_percent

    tension = safe_normalize(0.5 - change / PERCENT_SPAN, 0.0, 1.0, NEUTRAL_TENSION)
    buoyancy = safe_normalize(0.5 + change / PERCENT_SPAN, 0.0, 1.0, NEUTRAL_BUOYANCY)
    activity = safe_normalize(market.volume / AVERAGE_VOLUME, MIN_ACTIVITY, 1.0, NEUTRAL_ACTIVITY)

    return Sentiment(
        tension=round(tension, 3),
        buoyancy=round(buoyancy, 3),
        activity=round(activity, 3),
        source=FINANCE_SOURCE,
        status=LIVE,
    )
