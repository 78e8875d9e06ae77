from __future__ import annotations

from contextlib import contextmanager
from functools import lru_cache
from datetime import datetime, timezone
from typing import Any, Iterator
from uuid import UUID
import logging

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from ..core.db import SessionLocal
from ..models.brief import Brief
from ..models.deployment_job import DeploymentJob, JobStatus, TERMINAL_STATUSES
from .errors import JobStateError, StoreFailure

logger = logging.getLogger(__name__)

MAX_LIST_LIMIT = 100


class RecordStore:
    """
    Key-addressed CRUD over the two record kinds the orchestrator needs.

    Every method opens its own short-lived session and commits a single
    statement, so no transaction is ever held across a remote API call.
    Returned rows are detached; their attributes stay readable after the
    session closes.
    """

    def __init__(self, session_factory: sessionmaker) -> None:
        self._session_factory = session_factory

    @contextmanager
    def _session(self, op: str) -> Iterator[Session]:
        db: Session = self._session_factory(expire_on_commit=False)
        try:
            yield db
        except SQLAlchemyError as e:
            db.rollback()
            logger.exception("Record store operation failed", extra={"step": f"store:{op}"})
            raise StoreFailure(f"{op} failed: {e}") from e
        finally:
            db.close()

    # ------------------------------------------------------------------
    # Briefs
    # ------------------------------------------------------------------

    def insert_brief(self, data: dict[str, Any]) -> Brief:
        with self._session("insert_brief") as db:
            brief = Brief(
                name=data["name"],
                email=data["email"],
                industry=data["industry"],
                page_type=data["page_type"],
                description=data["description"],
                colors=data.get("colors") or {},
                products=data.get("products") or [],
                status="pending",
            )
            db.add(brief)
            db.commit()
            db.refresh(brief)
            return brief

    def get_brief(self, brief_id: UUID) -> Brief | None:
        with self._session("get_brief") as db:
            return db.get(Brief, brief_id)

    # ------------------------------------------------------------------
    # Jobs
    # ------------------------------------------------------------------

    def insert_job(
        self,
        job_id: UUID,
        brief_id: UUID | None,
        status: JobStatus = JobStatus.PROCESSING,
    ) -> DeploymentJob:
        with self._session("insert_job") as db:
            job = DeploymentJob(id=job_id, brief_id=brief_id, status=status)
            db.add(job)
            db.commit()
            db.refresh(job)
            return job

    def update_job(
        self,
        job_id: UUID,
        status: JobStatus,
        result: dict[str, Any] | None = None,
        error: str | None = None,
    ) -> DeploymentJob:
        """
        Write a status transition. Terminal Jobs are never rewritten; the
        guard lives in the UPDATE's WHERE clause so two writers cannot both
        win.
        """
        with self._session("update_job") as db:
            updated = (
                db.query(DeploymentJob)
                .filter(
                    DeploymentJob.id == job_id,
                    DeploymentJob.status.notin_(list(TERMINAL_STATUSES)),
                )
                .update(
                    {
                        DeploymentJob.status: status,
                        DeploymentJob.result: result,
                        DeploymentJob.error: error,
                        # Column holds naive UTC
                        DeploymentJob.updated_at: datetime.now(timezone.utc).replace(tzinfo=None),
                    },
                    synchronize_session=False,
                )
            )
            db.commit()

            job = db.get(DeploymentJob, job_id)
            if updated == 0:
                if job is None:
                    raise StoreFailure(f"update_job failed: job {job_id} does not exist")
                raise JobStateError(
                    f"Job {job_id} is already {job.status.value}; refusing to set {status.value}"
                )
            return job

    def get_job(self, job_id: UUID) -> DeploymentJob | None:
        with self._session("get_job") as db:
            return db.get(DeploymentJob, job_id)

    def list_jobs(
        self,
        status: JobStatus | None = None,
        brief_id: UUID | None = None,
        limit: int | None = None,
    ) -> list[DeploymentJob]:
        with self._session("list_jobs") as db:
            query = db.query(DeploymentJob)
            if status is not None:
                query = query.filter(DeploymentJob.status == status)
            if brief_id is not None:
                query = query.filter(DeploymentJob.brief_id == brief_id)
            query = query.order_by(DeploymentJob.created_at.desc())
            if limit is not None:
                query = query.limit(max(1, min(limit, MAX_LIST_LIMIT)))
            return query.all()

    def ping(self) -> bool:
        with self._session("ping") as db:
            db.execute(text("SELECT 1"))
            return True


@lru_cache(maxsize=1)
def get_store() -> RecordStore:
    return RecordStore(SessionLocal)
