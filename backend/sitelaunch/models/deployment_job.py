from sqlalchemy import Column, String, JSON, Enum, DateTime, ForeignKey, Uuid
from datetime import datetime
import uuid
import enum
from ..core.db import Base


class JobStatus(str, enum.Enum):
    # PENDING is never entered by the default flow; jobs start in PROCESSING
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_STATUSES


TERMINAL_STATUSES = frozenset({JobStatus.COMPLETED, JobStatus.FAILED})


class DeploymentJob(Base):
    __tablename__ = "jobs"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    brief_id = Column(Uuid(as_uuid=True), ForeignKey("briefs.id"), index=True, nullable=True)
    status = Column(Enum(JobStatus), nullable=False, default=JobStatus.PENDING)
    result = Column(JSON(none_as_null=True), nullable=True)  # {deployment: {...}, generatedCode: {metadata}}
    error = Column(String, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
