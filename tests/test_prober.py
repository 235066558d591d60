"""Tests for the DNS and redirect prober."""

import asyncio

import httpx
import pytest

from tool_scout.core.config import Settings
from tool_scout.crawler.prober import RedirectProber

from conftest import resolvable, unresolvable


def _prober(handler, resolver=resolvable, **overrides):
    settings = Settings(DNS_TIMEOUT=0.2, **overrides)
    return RedirectProber(settings, transport=httpx.MockTransport(handler), resolver=resolver)


@pytest.mark.asyncio
async def test_redirects_are_followed_and_chained():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.method == "HEAD"
        if request.url.path == "/":
            return httpx.Response(301, headers={"Location": "/home"})
        return httpx.Response(200)

    result = await _prober(handler).probe("example.com")

    assert result.chain == "301>200"
    assert result.final_code == 200
    assert result.final_url == "https://example.com/home"
    assert result.original_url == "https://example.com"
    assert result.error is None


@pytest.mark.asyncio
async def test_head_not_allowed_falls_back_to_get():
    methods = []

    def handler(request: httpx.Request) -> httpx.Response:
        methods.append(request.method)
        if request.method == "HEAD":
            return httpx.Response(405)
        return httpx.Response(200)

    result = await _prober(handler).probe("https://example.com")

    assert methods == ["HEAD", "GET"]
    assert result.chain == "200"
    assert result.final_code == 200


@pytest.mark.asyncio
async def test_http_errors_are_reported():
    result = await _prober(lambda request: httpx.Response(404)).probe("https://example.com/gone")

    assert result.chain == "404"
    assert result.final_code == 404
    assert result.error == "Erreur HTTP"


@pytest.mark.asyncio
async def test_server_error_is_not_retried_with_get():
    methods = []

    def handler(request: httpx.Request) -> httpx.Response:
        methods.append(request.method)
        return httpx.Response(503)

    result = await _prober(handler).probe("https://example.com")

    assert methods == ["HEAD"]
    assert result.chain == "503"


@pytest.mark.asyncio
async def test_dns_failure():
    def handler(request):
        raise AssertionError("no request expected")

    result = await _prober(handler, resolver=unresolvable).probe("https://does-not-exist.invalid")

    assert result.chain == "DNS"
    assert result.final_code == 0
    assert result.final_url == "https://does-not-exist.invalid"
    assert result.error == "Domaine non résolvable"


@pytest.mark.asyncio
async def test_slow_dns_counts_as_unresolvable():
    async def slow(host):
        await asyncio.sleep(5)

    prober = _prober(lambda request: httpx.Response(200), resolver=slow)

    assert not await prober.is_resolvable("https://example.com")


@pytest.mark.asyncio
async def test_timeout():
    def handler(request: httpx.Request):
        raise httpx.ConnectTimeout("timed out", request=request)

    result = await _prober(handler).probe("https://example.com")

    assert result.chain == "Timeout"
    assert result.final_code == 0


@pytest.mark.asyncio
async def test_connection_error():
    def handler(request: httpx.Request):
        raise httpx.ConnectError("connection refused", request=request)

    result = await _prober(handler).probe("https://example.com")

    assert result.chain == "Erreur"
    assert result.final_code == 0
    assert "connection refused" in result.error


@pytest.mark.asyncio
async def test_redirect_loop_stops_at_max_hops():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(302, headers={"Location": f"/step{len(request.url.path)}"})

    result = await _prober(handler, PROBE_MAX_HOPS=3).probe("https://example.com")

    assert result.chain == "302>302>302>302"
    assert result.final_code == 302
