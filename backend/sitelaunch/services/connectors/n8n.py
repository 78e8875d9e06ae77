# backend/sitelaunch/services/connectors/n8n.py
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, Optional
import logging

import httpx

from .base import BaseNotifier, NotificationResult
from ...core.config import get_settings

logger = logging.getLogger(__name__)

EVENT_SOURCE = "sitelaunch-backend"


class N8nWebhookNotifier(BaseNotifier):
    """
    Fire-and-forget delivery to an n8n workflow webhook.

    emit() never raises: an unset URL, transport error or non-2xx response
    all come back as an undelivered NotificationResult.
    """

    name = "n8n"

    def __init__(
        self,
        webhook_url: Optional[str] = None,
        timeout_seconds: Optional[float] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        settings = get_settings()
        self.webhook_url = webhook_url if webhook_url is not None else settings.N8N_WEBHOOK_URL
        self.timeout_seconds = timeout_seconds or settings.N8N_TIMEOUT_SECONDS
        self._transport = transport

    def emit(self, payload: Dict[str, Any]) -> NotificationResult:
        if not self.webhook_url:
            logger.warning(
                "N8N webhook URL not configured, skipping webhook trigger",
                extra={"step": "notify"},
            )
            return NotificationResult(delivered=False, message="N8N webhook URL not configured")

        body = {
            **payload,
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "source": EVENT_SOURCE,
        }

        try:
            with httpx.Client(timeout=self.timeout_seconds, transport=self._transport) as client:
                resp = client.post(self.webhook_url, json=body)
        except httpx.HTTPError as e:
            logger.warning(
                "N8N webhook error (non-blocking): %s", e,
                extra={"step": "notify"},
            )
            return NotificationResult(delivered=False, message=str(e))
        except Exception as e:
            logger.exception("N8N webhook delivery crashed", extra={"step": "notify"})
            return NotificationResult(delivered=False, message=str(e))

        if resp.status_code >= 400:
            logger.warning(
                "N8N webhook rejected event with HTTP %s", resp.status_code,
                extra={"step": "notify"},
            )
            return NotificationResult(
                delivered=False,
                status_code=resp.status_code,
                message=resp.text[:300],
            )

        try:
            data = resp.json()
        except ValueError:
            data = resp.text

        logger.info("N8N webhook triggered successfully", extra={"step": "notify"})
        return NotificationResult(delivered=True, status_code=resp.status_code, data=data)
