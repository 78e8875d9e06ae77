from __future__ import annotations

from uuid import UUID

from ..models.deployment_job import JobStatus
from ..schemas.deployments import DeploymentStatusOut, JobList, JobSummary, JobView
from .connectors import BasePublisher, SiteHandle
from .errors import JobStateError, NotFound
from .store import RecordStore


def get_job_view(store: RecordStore, job_id: UUID) -> JobView:
    job = store.get_job(job_id)
    if job is None:
        raise NotFound("Job not found")
    return JobView.model_validate(job)


def list_job_views(
    store: RecordStore,
    status: JobStatus | None = None,
    brief_id: UUID | None = None,
    limit: int | None = None,
) -> JobList:
    jobs = store.list_jobs(status=status, brief_id=brief_id, limit=limit)
    return JobList(
        jobs=[JobSummary.model_validate(j) for j in jobs],
        count=len(jobs),
    )


def poll_deployment(store: RecordStore, publisher: BasePublisher, job_id: UUID) -> DeploymentStatusOut:
    """
    Ask the hosting provider for the live state of a completed Job's deploy.
    Read-only: the Job row is never touched.
    """
    view = get_job_view(store, job_id)
    deployment = (view.result or {}).get("deployment") if isinstance(view.result, dict) else None
    if view.status != JobStatus.COMPLETED or not deployment:
        raise JobStateError(f"Job is {view.status.value}; no deployment to poll")

    target = SiteHandle(
        site_id=deployment["siteId"],
        name=deployment.get("siteName") or "",
        url=deployment.get("address"),
        admin_url=deployment.get("adminUrl"),
    )
    status = publisher.poll_status(target, deployment["deployId"])
    return DeploymentStatusOut(
        job_id=job_id,
        site_id=target.site_id,
        deploy_id=status.deploy_id,
        state=status.state,
        address=status.address,
        published_at=status.published_at,
    )
