from __future__ import annotations

from typing import Any, Dict
import logging

from ..models.brief import Brief
from ..schemas.briefs import BriefIn
from .connectors import BaseNotifier, NotificationResult
from .store import RecordStore

logger = logging.getLogger(__name__)

BRIEF_SUBMITTED_EVENT = "brief_submitted"


def brief_to_payload(brief: Brief) -> Dict[str, Any]:
    """JSON-safe snapshot of a stored brief, as handed to the generator."""
    return {
        "id": str(brief.id),
        "name": brief.name,
        "email": brief.email,
        "industry": brief.industry,
        "page_type": brief.page_type,
        "description": brief.description,
        "colors": brief.colors or {},
        "products": brief.products or [],
    }


def submit_brief(store: RecordStore, payload: BriefIn) -> Brief:
    brief = store.insert_brief(payload.to_record())
    logger.info(
        "Brief saved to database",
        extra={"brief_id": str(brief.id), "step": "brief_created"},
    )
    return brief


def notify_brief_submitted(notifier: BaseNotifier, brief: Brief) -> NotificationResult:
    """Runs after the response is sent; the outcome is only logged."""
    result = notifier.emit(
        {
            "briefId": str(brief.id),
            "brief": brief_to_payload(brief),
            "type": BRIEF_SUBMITTED_EVENT,
        }
    )
    if not result.delivered:
        logger.warning(
            "Brief notification not delivered: %s", result.message,
            extra={"brief_id": str(brief.id), "step": "notify"},
        )
    return result
