from datetime import datetime, timezone
import time

from fastapi import APIRouter, Depends

from ..services.errors import StoreFailure
from ..services.store import RecordStore, get_store

router = APIRouter(tags=["health"])

_STARTED_AT = time.monotonic()


@router.get("/health")
def health(store: RecordStore = Depends(get_store)):
    try:
        database = "ok" if store.ping() else "unavailable"
    except StoreFailure:
        database = "unavailable"

    return {
        "status": "ok" if database == "ok" else "degraded",
        "database": database,
        "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
        "uptime": round(time.monotonic() - _STARTED_AT, 3),
    }
