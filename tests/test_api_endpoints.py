"""Integration tests for API endpoints."""

import httpx
import pytest
from fastapi.testclient import TestClient

from tool_scout.api import dependencies
from tool_scout.api.main import app
from tool_scout.core.config import get_settings
from tool_scout.core.exceptions import BrowserLaunchError
from tool_scout.core.security import api_key_header
from tool_scout.crawler.prober import RedirectProber

from conftest import FakeLLM, FakeRenderer, resolvable

HEADERS = {"X-API-Key": "test-key"}


class BrokenRenderer:
    async def __aenter__(self):
        raise BrowserLaunchError("Executable doesn't exist")

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        return None


@pytest.fixture
def llm():
    return FakeLLM()


@pytest.fixture
def renderer(site_pages):
    return FakeRenderer(site_pages)


@pytest.fixture
def client(settings, store, renderer, llm):
    """Test client with the browser, Gemini, DNS and store replaced."""
    def probe_handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200)

    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[dependencies.get_tool_store] = lambda: store
    app.dependency_overrides[dependencies.get_renderer_factory] = lambda: (lambda: renderer)
    app.dependency_overrides[dependencies.get_llm_client] = lambda: llm
    app.dependency_overrides[dependencies.get_prober] = lambda: RedirectProber(
        settings, transport=httpx.MockTransport(probe_handler), resolver=resolvable
    )
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_health_endpoint(client):
    """Test health check endpoint."""
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_root_endpoint(client):
    """Test root endpoint."""
    response = client.get("/")

    assert response.status_code == 200
    assert response.json()["name"] == "Tool Scout"


def test_readiness_reports_tool_count(client, store):
    store.create_tool(name="A", slug="a")

    response = client.get("/api/health/ready")

    assert response.status_code == 200
    assert response.json()["tools"] == 1


def test_detailed_health_requires_api_key(client):
    assert client.get("/api/health/detailed", headers={"X-API-Key": "wrong"}).status_code == 401

    response = client.get("/api/health/detailed", headers=HEADERS)
    assert response.status_code == 200
    assert "memory_percent" in response.json()["system"]
    assert response.json()["configuration"]["gemini_configured"] is True


def test_invalid_api_key(client):
    """Test API key authentication."""
    response = client.post(
        "/api/admin/content-crawler",
        json={"url": "https://example.com"},
        headers={"X-API-Key": "invalid_key"},
    )

    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid API key"


def test_missing_api_key_is_a_bad_request(client):
    response = client.post("/api/admin/content-crawler", json={"url": "https://example.com"})

    assert response.status_code == 400
    assert response.json()["type"] == "validation_error"


def test_api_key_header_name_comes_from_settings(client):
    assert api_key_header.model.name == get_settings().API_KEY_NAME

    response = client.post("/api/admin/content-crawler", json={"url": "https://example.com"})

    assert response.json()["details"]["errors"][0]["loc"] == ["header", "X-API-Key"]


def test_request_id_is_echoed(client):
    response = client.get("/health", headers={"X-Request-ID": "abc123"})

    assert response.headers["X-Request-ID"] == "abc123"
    assert "X-Process-Time" in response.headers


def test_content_crawler_endpoint(client, llm):
    llm.answers.append('{"name": "Example AI"}')

    response = client.post("/api/admin/content-crawler", json={"url": "example.com"}, headers=HEADERS)

    assert response.status_code == 200
    body = response.json()
    assert body["finalUrl"] == "https://example.com"
    assert body["pagesDiscovered"] == 4
    assert body["pagesProcessed"] == 4
    assert body["contentLength"] > 0
    assert body["geminiAnalysis"]["fields"] == {"name": "Example AI"}


def test_crawler_returns_null_analysis_when_gemini_fails(client):
    response = client.post("/api/admin/detailed-description-crawler", json={"url": "example.com"}, headers=HEADERS)

    assert response.status_code == 200
    assert response.json()["geminiAnalysis"]["error"] == "Réponse invalide de l'API Gemini"


def test_pricing_crawler_endpoint(client, llm):
    llm.answers.append("<p>Le plan Pro coûte 20 €.</p>")

    response = client.post("/api/admin/pricing-crawler", json={"url": "example.com"}, headers=HEADERS)

    assert response.status_code == 200
    assert response.json()["pricingPagesFound"] == 1
    assert response.json()["geminiAnalysis"]["pricingType"] == "PAID"


@pytest.mark.parametrize("body", [{}, {"url": ""}, {"url": "   "}])
def test_missing_url_is_rejected(client, body):
    response = client.post("/api/admin/pricing-crawler", json=body, headers=HEADERS)

    assert response.status_code == 400
    assert response.json()["type"] == "validation_error"


def test_unparseable_url_is_rejected(client):
    response = client.post("/api/admin/affiliate-crawler", json={"url": "http://"}, headers=HEADERS)

    assert response.status_code == 400
    assert response.json()["type"] == "InvalidURLError"


def test_browser_launch_failure_is_500(client):
    app.dependency_overrides[dependencies.get_renderer_factory] = lambda: BrokenRenderer

    response = client.post("/api/admin/content-crawler", json={"url": "example.com"}, headers=HEADERS)

    assert response.status_code == 500
    assert response.json()["type"] == "BrowserLaunchError"


def test_url_validator_updates_tool(client, store):
    tool = store.create_tool(name="Example", slug="example", website_url="https://example.com", is_active=False)

    response = client.post(
        "/api/admin/url-validator",
        json={"url": "https://example.com", "slug": "example"},
        headers=HEADERS,
    )

    assert response.status_code == 200
    body = response.json()
    assert body["isValid"] is True
    assert body["statusCode"] == 200
    assert body["chainOfRedirects"] == ["https://example.com"]
    assert body["state"] == "valid"
    assert store.get_tool(tool.id).is_active is True


def test_status_crawl_endpoint(client, store):
    tool = store.create_tool(name="Example", slug="example", website_url="https://example.com")

    response = client.post("/api/admin/crawl", json={"toolIds": [tool.id]}, headers=HEADERS)

    assert response.status_code == 200
    result = response.json()["results"][0]
    assert result["httpCode"] == 200
    assert result["httpChain"] == "200"
    assert result["originalUrl"] == "https://example.com"


def test_status_crawl_requires_tool_ids(client):
    response = client.post("/api/admin/crawl", json={"toolIds": []}, headers=HEADERS)

    assert response.status_code == 400


def test_gemini_crawler_endpoint(client, llm):
    llm.answers.append('{"analysis": {"name": "Example AI", "summary": "Vidéos IA"}}')

    response = client.post(
        "/api/admin/gemini-crawler",
        json={"content": "Example AI makes videos", "title": "Example AI", "url": "https://example.com"},
        headers=HEADERS,
    )

    assert response.status_code == 200
    assert response.json()["analysis"]["summary"] == "Vidéos IA"


def test_gemini_crawler_without_answer_is_502(client):
    response = client.post(
        "/api/admin/gemini-crawler",
        json={"content": "Example AI makes videos"},
        headers=HEADERS,
    )

    assert response.status_code == 502
    assert response.json()["type"] == "AnalysisUnavailableError"


def test_social_crawler_endpoint(client, renderer):
    renderer.pages["https://example.com"] += '<a href="https://youtube.com/c/exampleai">YT</a>'

    response = client.post("/api/admin/crawler", json={"url": "example.com"}, headers=HEADERS)

    assert response.status_code == 200
    body = response.json()
    assert body["socialLinks"]["youtube"] == "https://youtube.com/c/exampleai"
    assert body["screenshotTaken"] is False


def test_screenshot_batch_endpoint(client, store, renderer):
    renderer.screenshot = b"png"
    tool = store.create_tool(name="Example", slug="example", website_url="https://example.com")

    response = client.post("/api/admin/screenshots/batch", json={"toolIds": [tool.id]}, headers=HEADERS)

    assert response.status_code == 200
    assert response.json()["results"][0]["imageUrl"] == "/images/tools/example.png"


def test_tool_crud(client):
    created = client.post(
        "/api/tools",
        json={"name": "Clipforge", "slug": "clipforge", "websiteUrl": "https://clipforge.ai", "tags": ["video"]},
        headers=HEADERS,
    )
    assert created.status_code == 201
    assert created.json()["websiteUrl"] == "https://clipforge.ai"

    fetched = client.get("/api/tools/clipforge")
    assert fetched.status_code == 200
    assert fetched.json()["tags"] == ["video"]

    patched = client.patch(
        "/api/tools/clipforge",
        json={"pricingType": "PAID", "features": ["avatars"]},
        headers=HEADERS,
    )
    assert patched.status_code == 200
    assert patched.json()["pricingType"] == "PAID"
    assert patched.json()["tags"] == ["video"]
    assert patched.json()["features"] == ["avatars"]

    replaced = client.put(
        "/api/tools/clipforge",
        json={"description": "Text to video", "categories": ["AI"]},
        headers=HEADERS,
    )
    assert replaced.status_code == 200
    assert replaced.json()["description"] == "Text to video"
    assert replaced.json()["categories"] == ["AI"]
    assert replaced.json()["tags"] == []
    assert replaced.json()["features"] == []

    deleted = client.delete("/api/tools/clipforge", headers=HEADERS)
    assert deleted.status_code == 200
    assert deleted.json()["success"] is True

    missing = client.get("/api/tools/clipforge")
    assert missing.status_code == 404
    assert missing.json()["type"] == "ToolNotFoundError"


def test_tool_slug_conflict(client):
    body = {"name": "A", "slug": "same"}
    assert client.post("/api/tools", json=body, headers=HEADERS).status_code == 201

    response = client.post("/api/tools", json=body, headers=HEADERS)

    assert response.status_code == 409


def test_tool_writes_require_api_key(client):
    response = client.post("/api/tools", json={"name": "A", "slug": "a"}, headers={"X-API-Key": "nope"})

    assert response.status_code == 401


@pytest.mark.parametrize("body", [{"name": None}, {"isActive": None}, {"slug": None}])
def test_patch_rejects_null_for_required_columns(client, body):
    client.post("/api/tools", json={"name": "A", "slug": "a"}, headers=HEADERS)

    response = client.patch("/api/tools/a", json=body, headers=HEADERS)

    assert response.status_code == 400
    assert response.json()["type"] == "validation_error"
    assert client.get("/api/tools/a").json()["name"] == "A"


def test_patch_clears_nullable_columns(client):
    client.post(
        "/api/tools",
        json={"name": "A", "slug": "a", "websiteUrl": "https://a.io"},
        headers=HEADERS,
    )

    response = client.patch("/api/tools/a", json={"websiteUrl": None}, headers=HEADERS)

    assert response.status_code == 200
    assert response.json()["websiteUrl"] is None


def test_patch_to_a_taken_slug_is_a_conflict(client):
    client.post("/api/tools", json={"name": "A", "slug": "a"}, headers=HEADERS)
    client.post("/api/tools", json={"name": "B", "slug": "b"}, headers=HEADERS)

    response = client.patch("/api/tools/b", json={"slug": "a"}, headers=HEADERS)

    assert response.status_code == 409
    assert response.json()["type"] == "ToolConflictError"
