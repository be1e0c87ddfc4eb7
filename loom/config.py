"""Configuration settings for the sentiment backend."""
import os
from typing import List
from dotenv import load_dotenv

load_dotenv()


def _split_origins(raw: str) -> List[str]:
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


class Settings:
    """Application settings loaded from environment variables."""

    # Upstream endpoints
    TWSE_INDEX_URL: str = "https://mis.twse.com.tw/stock/api/getStockInfo.jsp?ex_ch=tse_t00.tw"
    HACKERNEWS_API_URL: str = "https://hacker-news.firebaseio.com/v0"
    GOOGLE_NEWS_RSS_URL: str = "https://news.google.com/rss?hl=zh-TW&gl=TW&ceid=TW:zh-Hant"
    PTT_GOSSIPING_URL: str = "https://www.ptt.cc/bbs/Gossiping/index.html"
    REDDIT_URL: str = "https://www.reddit.com/r/{subreddit}/hot.json"

    # Which feed drives the society reading: googlenews, ptt or reddit
    SOCIETY_SOURCE: str = os.getenv("SOCIETY_SOURCE", "googlenews").lower()

    # Per-source timeout (seconds)
    UPSTREAM_TIMEOUT: float = float(os.getenv("UPSTREAM_TIMEOUT", 5.0))

    # Cache settings (in seconds)
    CACHE_TTL_SECONDS: float = float(os.getenv("CACHE_TTL_SECONDS", 30))
    CACHE_STALE_MULTIPLIER: float = float(os.getenv("CACHE_STALE_MULTIPLIER", 2.0))
    CACHE_WAIT_TIMEOUT: float = float(os.getenv("CACHE_WAIT_TIMEOUT", 5.0))
    CACHE_POLL_INTERVAL: float = float(os.getenv("CACHE_POLL_INTERVAL", 0.1))

    # Requests per client per minute
    RATE_LIMIT_API: int = int(os.getenv("RATE_LIMIT_API", 60))
    RATE_LIMIT_ANALYZE: int = int(os.getenv("RATE_LIMIT_ANALYZE", 10))

    # /api/analyze input limits
    MAX_TEXT_LENGTH: int = 10000
    VALID_CATEGORIES: list = ["tech", "finance", "society"]

    # CORS
    ALLOWED_ORIGINS: list = _split_origins(
        os.getenv("ALLOWED_ORIGINS", "http://localhost:5173,http://localhost:3000")
    )

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    LOG_JSON: bool = os.getenv("LOG_JSON", "false").lower() == "true"

    # Server settings
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development").lower()
    HOST: str = os.getenv("HOST", "0.0.0.0")
    PORT: int = int(os.getenv("PORT", 3001))
    DEBUG: bool = os.getenv("DEBUG", "false").lower() == "true"

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT == "production"


settings = Settings()
