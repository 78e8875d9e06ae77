"""
Tests for the hosting-provider publisher and the webhook notifier.

Remote APIs are replaced with httpx.MockTransport handlers.
"""
import json

import httpx
import pytest

from sitelaunch.schemas.deployments import SiteArtifact
from sitelaunch.services.connectors import SiteHandle
from sitelaunch.services.connectors.n8n import EVENT_SOURCE, N8nWebhookNotifier
from sitelaunch.services.connectors.netlify import NetlifyPublisher, build_index_html
from sitelaunch.services.errors import PublishFailure

BASE_URL = "https://api.netlify.test/api/v1"


def _publisher(handler, token="tok"):
    return NetlifyPublisher(
        api_token=token,
        base_url=BASE_URL,
        timeout_seconds=5,
        transport=httpx.MockTransport(handler),
    )


class TestNetlifyPublisher:

    def test_allocate_target_creates_site(self):
        """allocate_target POSTs /sites and maps the reply to a SiteHandle."""
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["path"] = request.url.path
            seen["auth"] = request.headers["Authorization"]
            seen["body"] = json.loads(request.content)
            return httpx.Response(201, json={
                "id": "abc123",
                "name": "site-acme-1",
                "ssl_url": "https://site-acme-1.netlify.app",
                "admin_url": "https://app.netlify.com/sites/site-acme-1",
            })

        site = _publisher(handler).allocate_target("site-acme-1")

        assert seen["path"] == "/api/v1/sites"
        assert seen["auth"] == "Bearer tok"
        assert seen["body"]["name"] == "site-acme-1"
        assert site == SiteHandle(
            site_id="abc123",
            name="site-acme-1",
            url="https://site-acme-1.netlify.app",
            admin_url="https://app.netlify.com/sites/site-acme-1",
        )

    def test_push_uploads_single_index_file(self):
        """push deploys a single /index.html built from the artifact."""
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["path"] = request.url.path
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={
                "id": "dep1",
                "deploy_ssl_url": "https://dep1--site.netlify.app",
                "state": "uploaded",
                "created_at": "2026-10-17T00:00:00Z",
            })

        target = SiteHandle(site_id="abc123", name="site")
        result = _publisher(handler).push(target, SiteArtifact(html="<h1>Hi</h1>", css="h1{color:red}"))

        assert seen["path"] == "/api/v1/sites/abc123/deploys"
        index = seen["body"]["files"]["/index.html"]
        assert "<h1>Hi</h1>" in index
        assert "h1{color:red}" in index
        assert result.deploy_id == "dep1"
        assert result.address == "https://dep1--site.netlify.app"
        assert result.state == "uploaded"

    def test_poll_status(self):
        """poll_status reads the deploy record."""
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.method == "GET"
            assert request.url.path == "/api/v1/sites/abc123/deploys/dep1"
            return httpx.Response(200, json={
                "id": "dep1",
                "state": "ready",
                "deploy_url": "http://dep1--site.netlify.app",
                "published_at": "2026-10-17T00:01:00Z",
            })

        status = _publisher(handler).poll_status(SiteHandle(site_id="abc123", name="site"), "dep1")
        assert status.state == "ready"
        assert status.address == "http://dep1--site.netlify.app"
        assert status.published_at == "2026-10-17T00:01:00Z"

    def test_http_error_is_publish_failure(self):
        """HTTP error replies raise PublishFailure with the status code."""
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(422, json={"errors": {"subdomain": ["must be unique"]}})

        with pytest.raises(PublishFailure, match="HTTP 422"):
            _publisher(handler).allocate_target("taken")

    def test_transport_error_is_publish_failure(self):
        """Transport errors raise PublishFailure."""
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(PublishFailure, match="connection refused"):
            _publisher(handler).push(SiteHandle(site_id="s", name="n"), SiteArtifact(html="<p/>"))

    def test_missing_token_fails_without_request(self):
        """No API token means PublishFailure before any request is sent."""
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(200, json={})

        with pytest.raises(PublishFailure, match="token not configured"):
            _publisher(handler, token="").allocate_target("site")
        assert calls == []


class TestBuildIndexHtml:

    def test_fragment_is_wrapped(self):
        """HTML fragments are wrapped in a full document with css and js."""
        doc = build_index_html(SiteArtifact(
            html="<main>Hello</main>",
            css="body{margin:0}",
            js="console.log(1)",
            metadata={"title": "Acme & Co", "description": "Shop"},
        ))
        assert doc.startswith("<!DOCTYPE html>")
        assert "<title>Acme &amp; Co</title>" in doc
        assert "body{margin:0}" in doc
        assert "<script>console.log(1)</script>" in doc
        assert "<main>Hello</main>" in doc

    def test_full_document_is_untouched(self):
        """Full HTML documents are published as-is."""
        html = "<!DOCTYPE html><html><body>x</body></html>"
        assert build_index_html(SiteArtifact(html=html)) == html

    def test_no_script_tag_without_js(self):
        """No script tag is added when there is no js."""
        assert "<script>" not in build_index_html(SiteArtifact(html="<p>x</p>"))


class TestN8nWebhookNotifier:

    def test_unconfigured_url_is_not_delivered(self):
        """Without a webhook URL nothing is sent and the result is undelivered."""
        result = N8nWebhookNotifier(webhook_url="").emit({"type": "brief_submitted"})
        assert result.delivered is False
        assert "not configured" in result.message

    def test_delivers_payload_with_source_and_timestamp(self):
        """Delivered events carry source and a UTC timestamp."""
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"ok": True})

        notifier = N8nWebhookNotifier(
            webhook_url="https://n8n.test/webhook/brief",
            transport=httpx.MockTransport(handler),
        )
        result = notifier.emit({"briefId": "b1", "type": "brief_submitted"})

        assert result.delivered is True
        assert result.status_code == 200
        assert seen["body"]["briefId"] == "b1"
        assert seen["body"]["source"] == EVENT_SOURCE
        assert seen["body"]["timestamp"].endswith("Z")

    def test_server_error_is_not_delivered(self):
        """Error status codes are reported as undelivered."""
        notifier = N8nWebhookNotifier(
            webhook_url="https://n8n.test/webhook/brief",
            transport=httpx.MockTransport(lambda request: httpx.Response(500, text="down")),
        )
        result = notifier.emit({"type": "brief_submitted"})
        assert result.delivered is False
        assert result.status_code == 500

    def test_transport_error_never_raises(self):
        """Transport errors are reported, never raised."""
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        notifier = N8nWebhookNotifier(
            webhook_url="https://n8n.test/webhook/brief",
            transport=httpx.MockTransport(handler),
        )
        result = notifier.emit({"type": "brief_submitted"})
        assert result.delivered is False
        assert "timed out" in result.message
