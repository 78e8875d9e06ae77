from __future__ import annotations

from functools import lru_cache

from .base import (
    BaseNotifier,
    BasePublisher,
    DeployStatus,
    NotificationResult,
    PushResult,
    SiteHandle,
)
from .n8n import N8nWebhookNotifier
from .netlify import NetlifyPublisher

__all__ = [
    "BaseNotifier",
    "BasePublisher",
    "DeployStatus",
    "NotificationResult",
    "PushResult",
    "SiteHandle",
    "get_notifier",
    "get_publisher",
]


@lru_cache(maxsize=1)
def get_publisher() -> BasePublisher:
    return NetlifyPublisher()


@lru_cache(maxsize=1)
def get_notifier() -> BaseNotifier:
    return N8nWebhookNotifier()
