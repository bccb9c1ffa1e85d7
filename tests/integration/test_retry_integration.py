"""
End-to-end retry behaviour: builder -> transport -> normalizer -> retry loop -> stats.
"""

import httpx
import pytest
import respx

from api_client import AsyncAPIClient, ApiError

BASE_URL = "https://api.example.com"


def fast_client(**kwargs):
    return AsyncAPIClient(BASE_URL, retry_delay=0, retry_jitter=0, **kwargs)


@pytest.mark.asyncio
@respx.mock
async def test_always_200_resolves_once():
    route = respx.get(f"{BASE_URL}/ok").mock(return_value=httpx.Response(200, json={"ok": True}))
    async with fast_client() as client:
        before = client.get_stats()
        result = await client.get("/ok")
        after = client.get_stats()

    assert result.data == {"ok": True}
    assert route.call_count == 1
    assert after.successful_requests - before.successful_requests == 1
    assert after.retried_requests == 0


@pytest.mark.asyncio
@pytest.mark.parametrize("k", [0, 1, 2, 3])
async def test_503_k_times_then_success(k):
    max_retries = 3
    with respx.mock:
        route = respx.get(f"{BASE_URL}/flaky").mock(
            side_effect=[httpx.Response(503)] * k + [httpx.Response(200, json={"attempt": k + 1})]
        )
        async with fast_client(max_retries=max_retries) as client:
            result = await client.get("/flaky")
            stats = client.get_stats()

    assert result.data == {"attempt": k + 1}
    assert route.call_count == k + 1
    assert stats.retried_requests == k
    assert stats.total_requests == k + 1
    assert stats.failed_requests == k
    assert stats.successful_requests == 1


@pytest.mark.asyncio
@pytest.mark.parametrize("max_retries", [0, 1, 3])
async def test_503_every_attempt(max_retries):
    with respx.mock:
        route = respx.get(f"{BASE_URL}/down").mock(return_value=httpx.Response(503))
        async with fast_client(max_retries=max_retries) as client:
            with pytest.raises(ApiError) as exc_info:
                await client.get("/down")
            stats = client.get_stats()

    assert exc_info.value.status_code == 503
    assert route.call_count == max_retries + 1
    assert stats.total_requests == max_retries + 1
    assert stats.failed_requests == max_retries + 1


@pytest.mark.asyncio
@pytest.mark.parametrize("max_retries", [0, 3, 10])
async def test_404_fails_immediately(max_retries):
    with respx.mock:
        route = respx.get(f"{BASE_URL}/missing").mock(
            return_value=httpx.Response(404, json={"message": "Not found"})
        )
        async with fast_client(max_retries=max_retries) as client:
            with pytest.raises(ApiError) as exc_info:
                await client.get("/missing")
            stats = client.get_stats()

    assert route.call_count == 1
    assert exc_info.value.status_code == 404
    assert str(exc_info.value) == "HTTP 404: Not Found - Not found"
    assert stats.retried_requests == 0


@pytest.mark.asyncio
@respx.mock
async def test_json_echo_round_trip():
    def echo(request):
        return httpx.Response(200, content=request.content, headers={"Content-Type": "application/json"})

    respx.post(f"{BASE_URL}/echo").mock(side_effect=echo)
    async with fast_client() as client:
        result = await client.post("/echo", {"x": 1})

    assert result.data == {"x": 1}


@pytest.mark.asyncio
@respx.mock
async def test_query_params_on_the_wire():
    route = respx.get(url__startswith=f"{BASE_URL}/search").mock(return_value=httpx.Response(200))
    async with fast_client() as client:
        await client.get("/search", query_params={"a": 1, "b": None, "c": "x y"})

    assert route.calls.last.request.url.query == b"a=1&c=x%20y"
