"""Unit tests for the page fetcher."""

import httpx
import pytest

from courtside.scrape.fetcher import FetchError, PageFetcher


async def test_returns_body_and_sends_user_agent():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["ua"] = request.headers.get("user-agent")
        return httpx.Response(200, text="<html>ok</html>")

    async with PageFetcher(user_agent="Mozilla/5.0 test", transport=httpx.MockTransport(handler)) as fetcher:
        body = await fetcher.fetch("https://atp.test/en/rankings/singles")

    assert body == "<html>ok</html>"
    assert seen["ua"] == "Mozilla/5.0 test"


async def test_non_success_status_raises_fetch_error():
    transport = httpx.MockTransport(lambda request: httpx.Response(500, text="boom"))

    async with PageFetcher(transport=transport) as fetcher:
        with pytest.raises(FetchError) as excinfo:
            await fetcher.fetch("https://atp.test/en/scores")

    assert excinfo.value.status_code == 500
    assert "HTTP 500" in str(excinfo.value)


async def test_transport_error_raises_fetch_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    async with PageFetcher(transport=httpx.MockTransport(handler)) as fetcher:
        with pytest.raises(FetchError) as excinfo:
            await fetcher.fetch("https://atp.test/en/scores")

    assert excinfo.value.status_code is None
    assert "connection refused" in excinfo.value.reason


async def test_fetch_outside_context_manager():
    with pytest.raises(RuntimeError):
        await PageFetcher().fetch("https://atp.test/")
