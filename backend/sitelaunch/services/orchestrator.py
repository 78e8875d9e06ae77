from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, Optional
from uuid import UUID, uuid4
import logging
import re

from ..core.celery_app import celery_app
from ..core.config import get_settings
from ..models.deployment_job import JobStatus
from ..schemas.deployments import DeployRequest, SiteArtifact
from .briefs import brief_to_payload
from .connectors import BasePublisher, PushResult, SiteHandle, get_publisher
from .errors import GenerationFailure, InvalidRequest, JobStateError, NotFound, PublishFailure
from .generator import ContentGenerator, get_content_generator
from .scheduler import DEPLOYMENT_TASK_NAME, DeploymentTask, JobScheduler
from .store import RecordStore, get_store

logger = logging.getLogger(__name__)

MAX_ERROR_LEN = 500
MAX_SLUG_LEN = 30
NO_CONTENT_ERROR = "No content available for deployment"

_SLUG_RE = re.compile(r"[^a-z0-9]")


def build_site_name(
    display_name: str | None,
    submitted_at: datetime,
    prefix: str = "site",
    max_len: int = 63,
) -> str:
    """
    Deterministic hosting-target name: ``{prefix}-{slug}-{epoch_millis}``.

    The slug keeps only [a-z0-9] (everything else becomes '-') and is cut to
    30 characters. When the whole name exceeds ``max_len`` the slug side is
    shortened so the timestamp suffix always survives.
    """
    slug = _SLUG_RE.sub("-", (display_name or "").lower())[:MAX_SLUG_LEN]
    if submitted_at.tzinfo is None:
        submitted_at = submitted_at.replace(tzinfo=timezone.utc)
    stamp = str(int(submitted_at.timestamp() * 1000))

    head = f"{prefix}-{slug}" if slug else prefix
    budget = max(max_len - len(stamp) - 1, 0)
    return f"{head[:budget]}-{stamp}"


def build_result(target: SiteHandle, push: PushResult, artifact: SiteArtifact) -> Dict[str, Any]:
    # Only metadata is kept; the generated code itself is not stored
    return {
        "deployment": {
            "siteId": target.site_id,
            "siteName": target.name,
            "address": push.address,
            "adminUrl": target.admin_url,
            "deployId": push.deploy_id,
            "state": push.state,
            "createdAt": push.created_at,
        },
        "generatedCode": {"metadata": artifact.metadata},
    }


# ---------------------------------------------------------------------------
# Synchronous entrypoint
# ---------------------------------------------------------------------------

def start_deployment(
    request: DeployRequest,
    *,
    store: RecordStore,
    scheduler: JobScheduler,
    request_id: Optional[str] = None,
) -> UUID:
    """
    Create a Job in PROCESSING and hand the pipeline to the scheduler.

    Returns as soon as the task is submitted; nothing about generation or
    publishing has happened yet.
    """
    if request.brief_id is None and request.brief is None:
        raise InvalidRequest("Either briefId or brief data is required")

    if request.brief_id is not None:
        brief_row = store.get_brief(request.brief_id)
        if brief_row is None:
            raise NotFound("Brief not found")
        brief_payload = brief_to_payload(brief_row)
    else:
        brief_payload = request.brief.to_record()

    job_id = uuid4()
    store.insert_job(job_id, request.brief_id, JobStatus.PROCESSING)

    logger.info(
        "Deployment job created",
        extra={
            "job_id": str(job_id),
            "brief_id": str(request.brief_id) if request.brief_id else None,
            "request_id": request_id,
            "step": "job_created",
        },
    )

    website_code = (
        request.website_code.model_dump() if request.website_code is not None else None
    )
    scheduler.submit(
        DeploymentTask(
            job_id=str(job_id),
            brief=brief_payload,
            auto_generate=request.auto_generate,
            website_code=website_code,
            request_id=request_id,
        )
    )
    return job_id


# ---------------------------------------------------------------------------
# Background continuation
# ---------------------------------------------------------------------------

class DeploymentPipeline:
    """
    generate -> validate -> allocate -> push -> record outcome, for one Job.

    Every failure ends in exactly one FAILED write; success ends in exactly
    one COMPLETED write. Nothing is retried and a partially allocated
    hosting target is left in place.
    """

    def __init__(
        self,
        store: RecordStore,
        generator: ContentGenerator,
        publisher: BasePublisher,
        site_name_prefix: str | None = None,
        site_name_max_len: int | None = None,
    ) -> None:
        settings = get_settings()
        self.store = store
        self.generator = generator
        self.publisher = publisher
        self.site_name_prefix = site_name_prefix or settings.SITE_NAME_PREFIX
        self.site_name_max_len = site_name_max_len or settings.SITE_NAME_MAX_LEN

    def run(self, task: DeploymentTask) -> Optional[JobStatus]:
        job_id = UUID(task.job_id)
        log_extra = {"job_id": task.job_id, "request_id": task.request_id}

        job = self.store.get_job(job_id)
        if job is None:
            logger.warning("Job not found; skipping pipeline", extra={**log_extra, "step": "start"})
            return None
        if job.status.is_terminal:
            # Redelivered task; the Job already has its single terminal write
            logger.info(
                "Job already %s; skipping pipeline", job.status.value,
                extra={**log_extra, "step": "start"},
            )
            return job.status

        logger.info("Starting deployment pipeline", extra={**log_extra, "step": "start"})

        try:
            artifact = self._resolve_artifact(task)
        except Exception as e:
            return self._fail(job_id, e, log_extra, step="generate")

        site_name = build_site_name(
            task.brief.get("name"),
            job.created_at,
            prefix=self.site_name_prefix,
            max_len=self.site_name_max_len,
        )

        try:
            logger.info(
                "Allocating hosting target",
                extra={**log_extra, "site_name": site_name, "step": "allocate"},
            )
            target = self.publisher.allocate_target(site_name)
            logger.info(
                "Pushing site content",
                extra={**log_extra, "site_name": target.name, "step": "push"},
            )
            push = self.publisher.push(target, artifact)
        except Exception as e:
            return self._fail(job_id, e, log_extra, step="publish")

        result = build_result(target, push, artifact)
        try:
            self.store.update_job(job_id, JobStatus.COMPLETED, result=result)
        except JobStateError:
            logger.warning("Job reached a terminal state elsewhere", extra={**log_extra, "step": "completed"})
            return None
        except Exception:
            logger.exception(
                "Failed to record completed deployment; job left in processing",
                extra={**log_extra, "step": "completed"},
            )
            raise

        logger.info(
            "Deployment completed",
            extra={**log_extra, "site_name": target.name, "step": "completed"},
        )
        return JobStatus.COMPLETED

    def _resolve_artifact(self, task: DeploymentTask) -> SiteArtifact:
        artifact: SiteArtifact | None = None
        if task.website_code is not None:
            artifact = SiteArtifact.model_validate(task.website_code)
        elif task.auto_generate:
            logger.info(
                "Generating website content",
                extra={"job_id": task.job_id, "request_id": task.request_id, "step": "generate"},
            )
            artifact = self.generator.generate(task.brief)

        if artifact is None or not artifact.has_content:
            raise GenerationFailure(NO_CONTENT_ERROR)
        return artifact

    def _fail(
        self,
        job_id: UUID,
        exc: Exception,
        log_extra: Dict[str, Any],
        step: str,
    ) -> Optional[JobStatus]:
        message = (str(exc) or exc.__class__.__name__)[:MAX_ERROR_LEN]
        if not isinstance(exc, (GenerationFailure, PublishFailure)):
            logger.exception("Unexpected pipeline error", extra={**log_extra, "step": step})
        else:
            logger.warning("Deployment %s failed: %s", step, message, extra={**log_extra, "step": step})

        try:
            self.store.update_job(job_id, JobStatus.FAILED, error=message)
        except JobStateError:
            logger.warning("Job reached a terminal state elsewhere", extra={**log_extra, "step": "failed"})
            return None
        except Exception:
            logger.exception(
                "Failed to record failed deployment; job left in processing",
                extra={**log_extra, "step": "failed"},
            )
            raise
        return JobStatus.FAILED


@celery_app.task(name=DEPLOYMENT_TASK_NAME, bind=True, queue="deployments")
def run_deployment_job(
    self,
    job_id: str,
    brief: Dict[str, Any],
    auto_generate: bool = True,
    website_code: Optional[Dict[str, Any]] = None,
    request_id: Optional[str] = None,
):
    pipeline = DeploymentPipeline(
        store=get_store(),
        generator=get_content_generator(),
        publisher=get_publisher(),
    )
    status = pipeline.run(
        DeploymentTask(
            job_id=job_id,
            brief=brief,
            auto_generate=auto_generate,
            website_code=website_code,
            request_id=request_id,
        )
    )
    return status.value if status else None
