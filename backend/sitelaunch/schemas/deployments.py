# backend/sitelaunch/schemas/deployments.py
import json
from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from ..models.deployment_job import JobStatus
from .briefs import BriefIn, CamelModel


class SiteArtifact(BaseModel):
    """Generated (or client-supplied) website code."""

    html: str = ""
    css: str = ""
    js: str = ""
    metadata: dict[str, Any] = {}

    model_config = ConfigDict(extra="ignore")

    @field_validator("html", "css", "js", mode="before")
    @classmethod
    def _none_to_blank(cls, v):
        return "" if v is None else v

    @field_validator("metadata", mode="before")
    @classmethod
    def _none_to_dict(cls, v):
        return {} if v is None else v

    @property
    def has_content(self) -> bool:
        return bool(self.html and self.html.strip())


class DeployRequest(CamelModel):
    brief_id: UUID | None = None
    brief: BriefIn | None = None
    auto_generate: bool = True
    website_code: SiteArtifact | None = None


class DeployAccepted(CamelModel):
    job_id: UUID
    status: JobStatus = JobStatus.PROCESSING
    message: str


class _JobBase(CamelModel):
    job_id: UUID = Field(
        validation_alias=AliasChoices("id", "jobId", "job_id"),
        serialization_alias="jobId",
    )
    brief_id: UUID | None = None
    status: JobStatus
    created_at: datetime
    updated_at: datetime | None = None

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, from_attributes=True
    )


class JobView(_JobBase):
    result: Any = None
    error: str | None = None

    @field_validator("result", mode="before")
    @classmethod
    def _decode_result(cls, v):
        # Rows written as serialized JSON text decode to structured data
        if isinstance(v, (str, bytes)):
            try:
                return json.loads(v)
            except ValueError:
                return v
        return v


class JobSummary(_JobBase):
    pass


class JobList(CamelModel):
    jobs: list[JobSummary]
    count: int


class DeploymentStatusOut(CamelModel):
    job_id: UUID
    site_id: str
    deploy_id: str
    state: str | None = None
    address: str | None = None
    published_at: str | None = None
