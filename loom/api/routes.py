"""API routes for the sentiment backend."""
from typing import Any, Dict
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from ..analysis.sentiment import analyze_text
from ..cache import SentimentCache
from ..config import settings
from ..core.logger import get_logger
from .rate_limit import enforce_analyze_limit, enforce_api_limit

logger = get_logger(__name__)

router = APIRouter(prefix="/api", dependencies=[Depends(enforce_api_limit)])


class AnalyzeRequest(BaseModel):
    """Ad-hoc text to score; types are checked by the route for clearer errors."""
    text: Any = Field(None, description="Text to analyze")
    category: Any = Field("society", description="tech, finance or society")


def get_cache(request: Request) -> SentimentCache:
    return request.app.state.sentiment_cache


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code)


@router.get("/sentiment")
async def get_sentiment(cache: SentimentCache = Depends(get_cache)) -> Dict[str, Any]:
    """Current sentiment snapshot for every domain."""
    try:
        snapshot = await cache.get_snapshot()
        return snapshot.to_dict()
    except Exception as e:
        logger.error("sentiment_api_error", error=str(e), exc_info=True)
        return _error(500, "Failed to fetch sentiment data")


@router.post("/analyze", dependencies=[Depends(enforce_analyze_limit)])
async def analyze(body: AnalyzeRequest) -> Dict[str, Any]:
    """Score a piece of text with the keyword lexicon of one category."""
    text, category = body.text, body.category

    if not text or not isinstance(text, str):
        return _error(400, "Text must be a non-empty string")

    if len(text) > settings.MAX_TEXT_LENGTH:
        return _error(400, f"Text too long (max {settings.MAX_TEXT_LENGTH} characters)")

    if category not in settings.VALID_CATEGORIES:
        return _error(
            400,
            f"Invalid category. Must be one of: {', '.join(settings.VALID_CATEGORIES)}"
        )

    try:
        return analyze_text(text, category).to_dict()
    except Exception as e:
        logger.error("analyze_api_error", error=str(e), exc_info=True)
        return _error(500, "Failed to analyze text")
