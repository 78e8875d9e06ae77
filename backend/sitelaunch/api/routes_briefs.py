from uuid import UUID
from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException

from ..schemas.briefs import BriefIn, BriefOut, BriefSubmitted
from ..services.briefs import notify_brief_submitted, submit_brief
from ..services.connectors import BaseNotifier, get_notifier
from ..services.store import RecordStore, get_store
from .deps import verify_api_key

router = APIRouter(tags=["briefs"], dependencies=[Depends(verify_api_key)])


@router.post("/brief", response_model=BriefSubmitted, status_code=201)
def create_brief(
    payload: BriefIn,
    background_tasks: BackgroundTasks,
    store: RecordStore = Depends(get_store),
    notifier: BaseNotifier = Depends(get_notifier),
):
    brief = submit_brief(store, payload)

    # Runs after the response; delivery outcome never reaches the client
    background_tasks.add_task(notify_brief_submitted, notifier, brief)

    return BriefSubmitted(brief_id=brief.id, brief=BriefOut.model_validate(brief))


@router.get("/brief/{brief_id}", response_model=BriefOut)
def get_brief(
    brief_id: UUID,
    store: RecordStore = Depends(get_store),
):
    brief = store.get_brief(brief_id)
    if not brief:
        raise HTTPException(status_code=404, detail="Brief not found")
    return BriefOut.model_validate(brief)
