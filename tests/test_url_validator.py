"""Tests for the URL validator state machine."""

import pytest

from tool_scout.core.exceptions import InvalidURLError, PageRenderError
from tool_scout.crawler.prober import RedirectProber
from tool_scout.models.validation import ValidationState
from tool_scout.services.url_validator import UrlValidator, is_connection_error

from conftest import FakeRenderer, page, resolvable, unresolvable

URL = "https://example.com"


def _validator(settings, store, renderer, resolver=resolvable):
    return UrlValidator(lambda: renderer, RedirectProber(settings, resolver=resolver), store, settings)


@pytest.mark.asyncio
@pytest.mark.parametrize("status,state,valid,final_status", [
    (200, ValidationState.VALID, True, 200),
    (206, ValidationState.VALID, True, 200),
    (301, ValidationState.INVALID_REDIRECT_INCOMPLETE, False, 301),
    (404, ValidationState.INVALID_CLIENT_ERROR, False, 404),
    (500, ValidationState.INVALID_SERVER_ERROR, False, 500),
])
async def test_status_classification(settings, store, status, state, valid, final_status):
    renderer = FakeRenderer({URL: page("Home")}, status_codes={URL: status})

    result = await _validator(settings, store, renderer).validate("example.com")

    assert result.state == state
    assert result.is_valid is valid
    assert result.status_code == final_status
    assert result.state.is_terminal
    assert renderer.calls[0]["timeout"] == settings.CRAWLER_VALIDATION_TIMEOUT


@pytest.mark.asyncio
async def test_dns_failure_skips_the_browser(settings, store):
    renderer = FakeRenderer({URL: page("Home")})

    result = await _validator(settings, store, renderer, resolver=unresolvable).validate(URL)

    assert result.state == ValidationState.INVALID_DNS
    assert result.status_code == -1
    assert result.is_valid is False
    assert renderer.calls == []


@pytest.mark.asyncio
async def test_connection_errors_from_the_browser(settings, store):
    renderer = FakeRenderer(errors={URL: PageRenderError(URL, "net::ERR_NAME_NOT_RESOLVED at https://example.com")})

    result = await _validator(settings, store, renderer).validate(URL)

    assert result.state == ValidationState.INVALID_DNS
    assert result.status_code == -1


@pytest.mark.asyncio
async def test_render_error_with_status(settings, store):
    renderer = FakeRenderer(errors={URL: PageRenderError(URL, "Bad gateway", 503)})

    result = await _validator(settings, store, renderer).validate(URL)

    assert result.state == ValidationState.INVALID_SERVER_ERROR
    assert result.status_code == 503


@pytest.mark.asyncio
async def test_unknown_render_error_is_undetermined(settings, store):
    tool = store.create_tool(name="A", slug="a", website_url=URL)
    renderer = FakeRenderer(errors={URL: PageRenderError(URL, "Target closed")})

    result = await _validator(settings, store, renderer).validate(URL, slug="a")

    assert result.state == ValidationState.UNDETERMINED
    assert result.status_code == 0
    assert store.get_tool(tool.id).http_code is None


@pytest.mark.asyncio
async def test_invalid_url_is_rejected(settings, store):
    with pytest.raises(InvalidURLError):
        await _validator(settings, store, FakeRenderer()).validate("http://")


@pytest.mark.asyncio
async def test_valid_redirect_updates_the_tool(settings, store):
    tool = store.create_tool(name="A", slug="a", website_url=URL, is_active=False)
    renderer = FakeRenderer({URL: page("Home")}, redirects={URL: "https://www.example.com/en"})

    result = await _validator(settings, store, renderer).validate(URL, tool_id=tool.id)

    assert result.is_redirected is True
    assert result.chain_of_redirects == [URL, "https://www.example.com/en"]
    assert result.is_active is True
    assert result.message.endswith("Outil activé.")

    saved = store.get_tool(tool.id)
    assert saved.website_url == "https://www.example.com/en"
    assert saved.http_code == 200
    assert saved.http_chain == "https://example.com -> https://www.example.com/en"
    assert saved.is_active is True


@pytest.mark.asyncio
@pytest.mark.parametrize("status", [404, 500])
async def test_http_errors_deactivate_the_tool(settings, store, status):
    tool = store.create_tool(name="A", slug="a", website_url=URL)
    renderer = FakeRenderer({URL: page("Home")}, status_codes={URL: status})

    result = await _validator(settings, store, renderer).validate(URL, slug="a")

    assert result.is_active is False
    assert result.message.endswith("Outil désactivé.")
    saved = store.get_tool(tool.id)
    assert saved.is_active is False
    assert saved.http_code == status
    assert saved.website_url == URL


@pytest.mark.asyncio
async def test_dns_failure_deactivates_the_tool(settings, store):
    tool = store.create_tool(name="A", slug="a", website_url=URL)

    await _validator(settings, store, FakeRenderer(), resolver=unresolvable).validate(URL, slug="a")

    saved = store.get_tool(tool.id)
    assert saved.is_active is False
    assert saved.http_code == -1


@pytest.mark.asyncio
async def test_redirect_status_leaves_the_active_flag_alone(settings, store):
    tool = store.create_tool(name="A", slug="a", website_url=URL)
    renderer = FakeRenderer({URL: page("Home")}, status_codes={URL: 301})

    result = await _validator(settings, store, renderer).validate(URL, tool_id=tool.id)

    assert result.is_active is None
    assert "Outil" not in result.message
    saved = store.get_tool(tool.id)
    assert saved.is_active is True
    assert saved.http_code == 301


def test_connection_markers():
    assert is_connection_error("getaddrinfo ENOTFOUND example.invalid")
    assert is_connection_error("net::ERR_CONNECTION_REFUSED")
    assert not is_connection_error("Timeout 30000ms exceeded")
