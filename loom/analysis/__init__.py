"""Scoring: keyword text sentiment and market mood mapping."""
from .sentiment import KeywordSentimentAnalyzer, TextSentiment, analyze_text
from .market import market_to_sentiment

__all__ = ["KeywordSentimentAnalyzer", "TextSentiment", "analyze_text", "market_to_sentiment"]
