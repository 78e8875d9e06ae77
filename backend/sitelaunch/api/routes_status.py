from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query

from ..models.deployment_job import JobStatus
from ..schemas.deployments import DeploymentStatusOut, JobList, JobView
from ..services.connectors import BasePublisher, get_publisher
from ..services.errors import JobStateError, NotFound, PublishFailure
from ..services.status import get_job_view, list_job_views, poll_deployment
from ..services.store import MAX_LIST_LIMIT, RecordStore, get_store
from .deps import verify_api_key

router = APIRouter(tags=["status"], dependencies=[Depends(verify_api_key)])


@router.get("/status", response_model=JobList)
def list_jobs(
    status: JobStatus | None = None,
    brief_id: UUID | None = Query(default=None, alias="briefId"),
    limit: int | None = Query(default=None, ge=1, le=MAX_LIST_LIMIT),
    store: RecordStore = Depends(get_store),
):
    """Newest-first listing, filtered by exact status and/or brief."""
    return list_job_views(store, status=status, brief_id=brief_id, limit=limit)


@router.get("/status/{job_id}", response_model=JobView)
def get_job_status(
    job_id: UUID,
    store: RecordStore = Depends(get_store),
):
    try:
        return get_job_view(store, job_id)
    except NotFound as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.get("/status/{job_id}/deployment", response_model=DeploymentStatusOut)
def get_deployment_status(
    job_id: UUID,
    store: RecordStore = Depends(get_store),
    publisher: BasePublisher = Depends(get_publisher),
):
    try:
        return poll_deployment(store, publisher, job_id)
    except NotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except JobStateError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except PublishFailure as e:
        raise HTTPException(status_code=502, detail=str(e))
