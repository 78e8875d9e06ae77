# backend/sitelaunch/services/scheduler.py
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional
import logging

from ..core.celery_app import celery_app

logger = logging.getLogger(__name__)

DEPLOYMENT_TASK_NAME = "sitelaunch.services.orchestrator.run_deployment_job"
DEPLOYMENT_QUEUE = "deployments"


@dataclass(frozen=True)
class DeploymentTask:
    """
    Everything the background pipeline needs, in JSON-safe form.

    The brief travels with the task because inline briefs are never
    persisted.
    """

    job_id: str
    brief: Dict[str, Any]
    auto_generate: bool = True
    website_code: Optional[Dict[str, Any]] = None
    request_id: Optional[str] = None

    def to_kwargs(self) -> Dict[str, Any]:
        return asdict(self)


class JobScheduler(ABC):
    """Runs a DeploymentTask outside the request that created it."""

    @abstractmethod
    def submit(self, task: DeploymentTask) -> None:
        ...


class CeleryJobScheduler(JobScheduler):
    def submit(self, task: DeploymentTask) -> None:
        celery_app.send_task(
            DEPLOYMENT_TASK_NAME,
            kwargs=task.to_kwargs(),
            queue=DEPLOYMENT_QUEUE,
        )
        logger.info(
            "Deployment task enqueued",
            extra={"job_id": task.job_id, "request_id": task.request_id, "step": "enqueue"},
        )


def get_scheduler() -> JobScheduler:
    return CeleryJobScheduler()
