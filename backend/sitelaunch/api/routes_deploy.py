from uuid import uuid4
from fastapi import APIRouter, Depends, HTTPException

from ..core.config import get_settings
from ..schemas.deployments import DeployAccepted, DeployRequest
from ..services.errors import InvalidRequest, NotFound
from ..services.orchestrator import start_deployment
from ..services.scheduler import JobScheduler, get_scheduler
from ..services.store import RecordStore, get_store
from .deps import verify_api_key

router = APIRouter(tags=["deploy"], dependencies=[Depends(verify_api_key)])
settings = get_settings()


@router.post("/deploy", response_model=DeployAccepted, status_code=202)
def create_deployment(
    payload: DeployRequest,
    store: RecordStore = Depends(get_store),
    scheduler: JobScheduler = Depends(get_scheduler),
):
    # Correlation ID so the job can be traced end-to-end in the logs
    request_id = str(uuid4())

    try:
        job_id = start_deployment(
            payload,
            store=store,
            scheduler=scheduler,
            request_id=request_id,
        )
    except InvalidRequest as e:
        raise HTTPException(status_code=400, detail=str(e))
    except NotFound as e:
        raise HTTPException(status_code=404, detail=str(e))

    return DeployAccepted(
        job_id=job_id,
        message=f"Deployment started. Check status at {settings.API_PREFIX}/status/{job_id}",
    )
