"""Tests for upstream sources, with HTTP served by httpx.MockTransport."""
import asyncio
import httpx
import pytest

from loom.data.googlenews import GoogleNewsSource, clean_title, parse_feed_titles
from loom.data.hackernews import HackerNewsSource
from loom.data.market_index import MarketIndexFetcher
from loom.data.ptt import PttSource, parse_board_titles
from loom.data.reddit import RedditSource
from loom.models import FALLBACK, LIVE

HN_BASE = "https://hn.test/v0"

RSS_FEED = """<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0">
  <channel>
    <title>焦點新聞 - Google 新聞</title>
    <item><title>救援行動成功 全員平安獲救 - 聯合新聞網</title></item>
    <item><title>颱風逼近 多地停電 - 中央社</title></item>
    <item><title>經濟部宣布補助計畫</title></item>
  </channel>
</rss>
"""

PTT_PAGE = """
<div class="r-ent">
  <div class="title">
    <a href="/bbs/Gossiping/M.1.html">[問卦] 今天地震好大</a>
  </div>
</div>
<div class="r-ent">
  <div class="title">
    <a href="/bbs/Gossiping/M.2.html">[公告] 八卦板板規</a>
  </div>
</div>
<div class="r-ent">
  <div class="title">
    <a href="/bbs/Gossiping/M.3.html">[新聞] 國手奪金 破紀錄</a>
  </div>
</div>
<div class="r-ent">
  <div class="title">
    (本文已被刪除)
  </div>
</div>
"""


def mock_client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def failing_handler(request: httpx.Request) -> httpx.Response:
    return httpx.Response(503, text="unavailable")


class TestMarketIndexFetcher:
    """Tests for the TWSE fetcher."""

    @pytest.mark.asyncio
    async def test_fetch_index(self, twse_payload):
        """Test a successful response is parsed."""
        async with mock_client(lambda request: httpx.Response(200, json=twse_payload)) as client:
            market = await MarketIndexFetcher(client=client).fetch_index()

        assert market.is_trading is True
        assert market.price == 23100.5

    @pytest.mark.asyncio
    async def test_http_error_returns_default(self):
        """Test a failing upstream yields closed-market data."""
        async with mock_client(failing_handler) as client:
            market = await MarketIndexFetcher(client=client).fetch_index()

        assert market.is_trading is False
        assert market.price == 0.0

    @pytest.mark.asyncio
    async def test_invalid_json_returns_default(self):
        """Test a non-JSON body is handled."""
        async with mock_client(lambda request: httpx.Response(200, text="<html>")) as client:
            market = await MarketIndexFetcher(client=client).fetch_index()

        assert market.is_trading is False


class TestHackerNewsSource:
    """Tests for the Hacker News source."""

    @pytest.mark.asyncio
    async def test_live_reading(self):
        """Test top story titles are scored with the tech lexicon."""
        titles = {
            1: "Announcing a breakthrough open source database",
            2: "Amazing new release, faster than ever",
        }

        def handler(request: httpx.Request) -> httpx.Response:
            path = request.url.path
            if path.endswith("/topstories.json"):
                return httpx.Response(200, json=[1, 2, 3])
            story_id = int(path.rsplit("/", 1)[1].split(".")[0])
            if story_id == 3:
                return httpx.Response(500)
            return httpx.Response(200, json={"id": story_id, "title": titles[story_id]})

        async with mock_client(handler) as client:
            source = HackerNewsSource(client=client, base_url=HN_BASE)
            sentiment = await source.analyze()

        assert sentiment.status == LIVE
        assert sentiment.source == "hackernews"
        assert sentiment.item_count == 2
        assert sentiment.buoyancy > 0.5

    @pytest.mark.asyncio
    async def test_respects_limit(self):
        """Test only the first ``limit`` stories are requested."""
        requested = []

        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path.endswith("/topstories.json"):
                return httpx.Response(200, json=list(range(100)))
            requested.append(request.url.path)
            return httpx.Response(200, json={"title": "hello"})

        async with mock_client(handler) as client:
            sentiment = await HackerNewsSource(client=client, base_url=HN_BASE, limit=5).analyze()

        assert len(requested) == 5
        assert sentiment.item_count == 5

    @pytest.mark.asyncio
    async def test_fallback_on_failure(self):
        """Test the fallback reading when the story list fails."""
        async with mock_client(failing_handler) as client:
            sentiment = await HackerNewsSource(client=client, base_url=HN_BASE).analyze()

        assert sentiment.status == FALLBACK
        assert (sentiment.tension, sentiment.buoyancy, sentiment.activity) == (0.4, 0.6, 0.5)
        assert sentiment.item_count == 0

    @pytest.mark.asyncio
    async def test_fallback_on_timeout(self):
        """Test a slow upstream is cut off by the source timeout."""

        class SlowSource(HackerNewsSource):
            async def fetch_titles(self):
                await asyncio.sleep(5)
                return ["never"]

        sentiment = await SlowSource(timeout=0.05).analyze()

        assert sentiment.status == FALLBACK


class TestGoogleNewsSource:
    """Tests for the Google News RSS source."""

    def test_clean_title(self):
        """Test the publisher suffix is removed."""
        assert clean_title(" 颱風逼近 多地停電 - 中央社 ") == "颱風逼近 多地停電"
        assert clean_title("經濟部宣布補助計畫") == "經濟部宣布補助計畫"

    def test_parse_feed_titles(self):
        """Test item titles are extracted and the feed title skipped."""
        titles = parse_feed_titles(RSS_FEED)

        assert titles == [
            "救援行動成功 全員平安獲救",
            "颱風逼近 多地停電",
            "經濟部宣布補助計畫",
        ]

    @pytest.mark.asyncio
    async def test_live_reading(self):
        """Test headlines are scored with the society lexicon."""
        async with mock_client(lambda request: httpx.Response(200, text=RSS_FEED)) as client:
            sentiment = await GoogleNewsSource(client=client).analyze()

        assert sentiment.status == LIVE
        assert sentiment.item_count == 3
        assert sentiment.details["region"] == "TW"
        assert sentiment.to_dict()["region"] == "TW"

    @pytest.mark.asyncio
    async def test_fallback_on_failure(self):
        """Test the fallback reading when the feed is down."""
        async with mock_client(failing_handler) as client:
            sentiment = await GoogleNewsSource(client=client).analyze()

        assert sentiment.status == FALLBACK
        assert (sentiment.tension, sentiment.buoyancy, sentiment.activity) == (0.4, 0.6, 0.4)


class TestPttSource:
    """Tests for the PTT board source."""

    def test_parse_board_titles(self):
        """Test announcements and deleted posts are skipped."""
        assert parse_board_titles(PTT_PAGE) == ["[問卦] 今天地震好大", "[新聞] 國手奪金 破紀錄"]

    @pytest.mark.asyncio
    async def test_sends_over18_cookie(self):
        """Test the over-18 cookie is sent with the request."""
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["cookie"] = request.headers.get("cookie")
            return httpx.Response(200, text=PTT_PAGE)

        async with mock_client(handler) as client:
            sentiment = await PttSource(client=client).analyze()

        assert seen["cookie"] == "over18=1"
        assert sentiment.status == LIVE
        assert sentiment.item_count == 2
        assert sentiment.details["board"] == "Gossiping"


class TestRedditSource:
    """Tests for the Reddit source."""

    @pytest.mark.asyncio
    async def test_partial_subreddit_failure(self):
        """Test one failing subreddit does not drop the others."""

        def handler(request: httpx.Request) -> httpx.Response:
            if "/r/news/" in request.url.path:
                return httpx.Response(429)
            return httpx.Response(200, json={
                "data": {"children": [
                    {"data": {"title": "Rescued hikers celebrate"}},
                    {"data": {"title": ""}},
                ]}
            })

        async with mock_client(handler) as client:
            sentiment = await RedditSource(client=client).analyze()

        assert sentiment.status == LIVE
        assert sentiment.item_count == 2  # worldnews + upliftingnews
        assert sentiment.details["subreddits"] == ["worldnews", "news", "upliftingnews"]

    @pytest.mark.asyncio
    async def test_all_failing_falls_back(self):
        """Test every subreddit failing gives the fallback reading."""
        async with mock_client(failing_handler) as client:
            sentiment = await RedditSource(client=client).analyze()

        assert sentiment.status == FALLBACK
        assert sentiment.source == "reddit"
