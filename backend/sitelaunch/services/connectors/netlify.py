# backend/sitelaunch/services/connectors/netlify.py
from __future__ import annotations

from html import escape
from typing import Any, Dict, Optional
import logging

import httpx

from .base import BasePublisher, DeployStatus, PushResult, SiteHandle
from ..errors import PublishFailure
from ...core.config import get_settings
from ...schemas.deployments import SiteArtifact

logger = logging.getLogger(__name__)


def build_index_html(artifact: SiteArtifact) -> str:
    """
    Wrap fragment markup into a standalone document with CSS and JS inlined.
    Markup that is already a full document is deployed as-is.
    """
    html = artifact.html
    if "<!DOCTYPE" in html or "<html" in html:
        return html

    title = escape(str(artifact.metadata.get("title") or "Website"))
    description = escape(str(artifact.metadata.get("description") or ""))
    script = f"<script>{artifact.js}</script>" if artifact.js else ""

    return f"""<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>{title}</title>
  <meta name="description" content="{description}">
  <style>
    {artifact.css}
  </style>
</head>
<body>
  {html}
  {script}
</body>
</html>"""


class NetlifyPublisher(BasePublisher):
    """
    Netlify REST API publisher.

    - allocate_target: POST /sites
    - push: POST /sites/{site_id}/deploys with a single /index.html file
    - poll_status: GET /sites/{site_id}/deploys/{deploy_id}

    Every call is single-attempt; any transport or HTTP error becomes a
    PublishFailure.
    """

    name = "netlify"

    def __init__(
        self,
        api_token: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout_seconds: Optional[float] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        settings = get_settings()
        self.api_token = api_token if api_token is not None else settings.NETLIFY_API_TOKEN
        self.base_url = (base_url or settings.NETLIFY_API_URL).rstrip("/")
        self.timeout_seconds = timeout_seconds or settings.NETLIFY_TIMEOUT_SECONDS
        self._transport = transport

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.api_token}",
            "Content-Type": "application/json",
            "Accept": "application/json",
        }

    def _request_json(
        self,
        method: str,
        path: str,
        *,
        context: str,
        json: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        if not self.api_token:
            raise PublishFailure("Netlify API token not configured")

        try:
            with httpx.Client(
                base_url=self.base_url,
                timeout=self.timeout_seconds,
                transport=self._transport,
            ) as client:
                resp = client.request(method, path, json=json, headers=self._headers())
        except httpx.HTTPError as e:
            raise PublishFailure(f"Failed to {context}: {e}") from e

        if resp.status_code >= 400:
            detail = resp.text[:300] if resp.text else resp.reason_phrase
            raise PublishFailure(
                f"Failed to {context}: HTTP {resp.status_code} {detail}"
            )

        try:
            data = resp.json()
        except ValueError as e:
            raise PublishFailure(f"Failed to {context}: non-JSON response") from e
        if not isinstance(data, dict):
            raise PublishFailure(f"Failed to {context}: unexpected response shape")
        return data

    def allocate_target(self, name: str) -> SiteHandle:
        data = self._request_json(
            "POST",
            "/sites",
            context="create Netlify site",
            json={"name": name, "custom_domain": None},
        )
        site = SiteHandle(
            site_id=str(data["id"]),
            name=data.get("name") or name,
            url=data.get("ssl_url") or data.get("url"),
            admin_url=data.get("admin_url"),
        )
        logger.info(
            "Netlify site created",
            extra={"site_name": site.name, "step": "allocate_target"},
        )
        return site

    def push(self, target: SiteHandle, artifact: SiteArtifact) -> PushResult:
        data = self._request_json(
            "POST",
            f"/sites/{target.site_id}/deploys",
            context="deploy to Netlify",
            json={"files": {"/index.html": build_index_html(artifact)}},
        )
        result = PushResult(
            address=data.get("deploy_ssl_url") or data.get("deploy_url") or target.url,
            deploy_id=str(data["id"]),
            state=data.get("state"),
            created_at=data.get("created_at"),
        )
        logger.info(
            "Website deployed to Netlify",
            extra={"site_name": target.name, "step": "push"},
        )
        return result

    def poll_status(self, target: SiteHandle, deploy_id: str) -> DeployStatus:
        data = self._request_json(
            "GET",
            f"/sites/{target.site_id}/deploys/{deploy_id}",
            context="get deployment status",
        )
        return DeployStatus(
            deploy_id=str(data.get("id") or deploy_id),
            state=data.get("state"),
            address=data.get("deploy_ssl_url") or data.get("deploy_url"),
            published_at=data.get("published_at"),
        )
