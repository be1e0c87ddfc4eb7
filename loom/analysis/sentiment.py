"""Keyword-count sentiment scoring for headline text."""
from typing import Dict, List, Optional, Any, Pattern
from dataclasses import dataclass
import re

from ..models import NEUTRAL_ACTIVITY, NEUTRAL_BUOYANCY, NEUTRAL_TENSION
from ..utils import safe_normalize

DEFAULT_CATEGORY = "society"


@dataclass
class TextSentiment:
    """Result of scoring one block of text."""
    tension: float    # 0.1 - 0.9, rises with negative keywords
    buoyancy: float   # 0.1 - 0.9, rises with positive keywords
    activity: float   # 0.0 - 1.0, keyword density
    positive_count: int = 0
    negative_count: int = 0
    polarity: Optional[float] = None  # -1.0 to 1.0, None when nothing matched

    @property
    def total_keywords(self) -> int:
        return self.positive_count + self.negative_count

    def to_dict(self, debug: bool = True) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "tension": self.tension,
            "buoyancy": self.buoyancy,
            "activity": self.activity,
        }
        if debug:
            data["debug"] = {
                "positive_count": self.positive_count,
                "negative_count": self.negative_count,
                "total_keywords": self.total_keywords,
                "sentiment": self.polarity,
            }
        return data


class KeywordSentimentAnalyzer:
    """
    Scores headline text by counting domain keywords.

    Each category has its own positive and negative lexicon, mixing Chinese
    terms (Taiwanese news and forums) with English ones (Hacker News, Reddit).
    Keywords match as case-insensitive literal substrings, every occurrence
    counts.
    """

    POSITIVE_KEYWORDS: Dict[str, List[str]] = {
        "tech": [
            "突破", "創新", "成長", "領先", "合作", "投資", "擴張", "升級",
            "量產", "訂單", "獲利", "營收", "新高", "看好", "利多", "加碼",
            "AI", "半導體", "晶片", "5G", "電動車", "綠能", "雲端",
            "breakthrough", "innovation", "launch", "released", "announcing",
            "open source", "faster", "better", "improved", "success", "growth",
            "funding", "acquired", "partnership", "record", "milestone",
            "revolutionary", "game-changer", "excited", "amazing", "awesome",
        ],
        "finance": [
            "上漲", "走高", "反彈", "突破", "買超", "加碼", "看多", "利多",
            "獲利", "成長", "穩健", "回升", "強勢", "多頭", "紅盤", "創高",
            "降息", "寬鬆", "資金", "外資", "法人",
        ],
        "society": [
            # Mood words
            "希望", "改善", "進步", "成功", "突破", "合作", "支持", "幫助",
            "感謝", "開心", "期待", "祝福", "正向", "溫暖", "團結", "共好",
            # News events
            "通過", "批准", "和解", "釋放", "勝出", "當選", "連任",
            "奪冠", "破紀錄", "創新高", "獲獎", "榮獲", "奪金", "摘金",
            "加碼", "補助", "減稅", "利多", "回升", "反彈",
            "捐款", "救援", "康復", "出院", "平安", "獲救", "脫困",
            "hope", "peace", "progress", "success", "unity", "support", "helped",
            "celebrate", "victory", "breakthrough", "happy", "joy", "love",
            "hero", "saved", "rescued", "recovered", "uplifting", "inspiring",
        ],
    }

    NEGATIVE_KEYWORDS: Dict[str, List[str]] = {
        "tech": [
            "衰退", "下滑", "砍單", "裁員", "虧損", "衰減", "停工", "延遲",
            "缺貨", "斷鏈", "制裁", "禁令", "風險", "利空", "減產", "下修",
            "駭客", "資安", "漏洞", "召回",
            "layoff", "layoffs", "fired", "shutdown", "bankrupt", "failed",
            "breach", "hacked", "vulnerability", "exploit", "scam", "fraud",
            "lawsuit", "sued", "investigation", "controversy", "backlash",
            "deprecated", "broken", "bug", "outage", "down", "struggling",
            "disappointing", "concerned", "worried", "warning", "danger",
        ],
        "finance": [
            "下跌", "重挫", "崩盤", "賣超", "減碼", "看空", "利空", "虧損",
            "衰退", "跌停", "暴跌", "空頭", "綠盤", "套牢", "斷頭", "爆倉",
            "升息", "緊縮", "通膨", "違約", "倒閉",
        ],
        "society": [
            # Mood words
            "擔憂", "失望", "憤怒", "抗議", "衝突", "危機", "問題", "災難",
            "悲傷", "恐慌", "焦慮", "不滿", "批評", "爭議", "對立", "分裂",
            # Politics and courts
            "彈劾", "戒嚴", "內亂", "罷免", "貪污", "弊案", "起訴", "判刑",
            "羈押", "收押", "遭逮", "落網", "通緝",
            # Disasters and weather
            "颱風", "地震", "暴風", "洪水", "土石流", "停電", "豪雨", "寒流",
            "暴雨", "淹水", "坍塌", "崩塌",
            # Crime and accidents
            "死刑", "殺人", "詐騙", "洗錢", "車禍", "墜機", "傷亡", "罹難",
            "失蹤", "溺斃", "身亡", "喪命", "重傷", "搶劫", "竊盜", "性侵",
            # Economy
            "裁員", "倒閉", "虧損", "下滑", "暴跌", "重挫",
            # International conflict
            "戰爭", "轟炸", "空襲", "入侵", "砲擊", "飛彈", "襲擊",
            "war", "death", "killed", "died", "attack", "crisis", "disaster",
            "tragedy", "violence", "conflict", "protest", "riot", "shooting",
            "crash", "collapse", "fear", "threat", "danger", "warning", "emergency",
        ],
    }

    def __init__(self):
        # Compiled once; keywords are escaped so they match literally
        self._positive = self._compile(self.POSITIVE_KEYWORDS)
        self._negative = self._compile(self.NEGATIVE_KEYWORDS)

    @staticmethod
    def _compile(lexicon: Dict[str, List[str]]) -> Dict[str, List[Pattern]]:
        return {
            category: [re.compile(re.escape(word), re.IGNORECASE) for word in words]
            for category, words in lexicon.items()
        }

    @property
    def categories(self) -> List[str]:
        return list(self.POSITIVE_KEYWORDS)

    @staticmethod
    def _count(text: str, patterns: List[Pattern]) -> int:
        return sum(len(pattern.findall(text)) for pattern in patterns)

    def analyze_text(self, text: Any, category: str = DEFAULT_CATEGORY) -> TextSentiment:
        """
        Score a block of text.

        Args:
            text: Text to analyze; anything but a non-empty string scores neutral
            category: 'tech', 'finance' or 'society' (unknown falls back to society)

        Returns:
            TextSentiment with scores rounded to 3 decimals
        """
        if not text or not isinstance(text, str):
            return TextSentiment(
                tension=NEUTRAL_TENSION,
                buoyancy=NEUTRAL_BUOYANCY,
                activity=NEUTRAL_ACTIVITY,
            )

        positive = self._positive.get(category, self._positive[DEFAULT_CATEGORY])
        negative = self._negative.get(category, self._negative[DEFAULT_CATEGORY])

        positive_count = self._count(text, positive)
        negative_count = self._count(text, negative)
        total = positive_count + negative_count

        density = total / max(len(text) / 100, 1)
        activity = round(safe_normalize(density * 0.5 + 0.3, 0.0, 1.0, NEUTRAL_ACTIVITY), 3)

        if total == 0:
            return TextSentiment(
                tension=NEUTRAL_TENSION,
                buoyancy=NEUTRAL_BUOYANCY,
                activity=activity,
            )

        polarity = (positive_count - negative_count) / total
        tension = safe_normalize(0.5 - polarity * 0.4, 0.1, 0.9, NEUTRAL_TENSION)
        buoyancy = safe_normalize(0.5 + polarity * 0.4, 0.1, 0.9, NEUTRAL_BUOYANCY)

        return TextSentiment(
            tension=round(tension, 3),
            buoyancy=round(buoyancy, 3),
            activity=activity,
            positive_count=positive_count,
            negative_count=negative_count,
            polarity=polarity,
        )


analyzer = KeywordSentimentAnalyzer()


def analyze_text(text: Any, category: str = DEFAULT_CATEGORY) -> TextSentiment:
    """Score text with the shared analyzer."""
    return analyzer.analyze_text(text, category)
