# backend/sitelaunch/schemas/briefs.py
import re
from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel

from ..models.brief import PageType

MAX_NAME_LEN = 255
MAX_EMAIL_LEN = 255
MAX_INDUSTRY_LEN = 255
MIN_DESCRIPTION_LEN = 10
MAX_DESCRIPTION_LEN = 5000

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


class CamelModel(BaseModel):
    """Snake_case in Python, camelCase on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class BriefIn(CamelModel):
    name: str
    email: str
    industry: str
    page_type: PageType
    description: str
    colors: dict[str, str] = {}
    products: list[dict[str, Any]] = []

    @field_validator("name", "email", "industry", "page_type", "description", mode="before")
    @classmethod
    def _strip(cls, v):
        if isinstance(v, str):
            return v.strip()
        return v

    @field_validator("email", "page_type", mode="before")
    @classmethod
    def _lowercase(cls, v):
        if isinstance(v, str):
            return v.lower()
        return v

    @field_validator("colors", "products", mode="before")
    @classmethod
    def _none_to_empty(cls, v, info):
        if v is None:
            return {} if info.field_name == "colors" else []
        return v

    @field_validator("name", "industry")
    @classmethod
    def validate_short_text(cls, v: str, info) -> str:
        if not v:
            raise ValueError(f"{info.field_name} cannot be empty")
        if len(v) > MAX_NAME_LEN:
            raise ValueError(f"{info.field_name} must be less than {MAX_NAME_LEN} characters")
        return v

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        if not v:
            raise ValueError("email cannot be empty")
        if len(v) > MAX_EMAIL_LEN:
            raise ValueError(f"email must be less than {MAX_EMAIL_LEN} characters")
        if not EMAIL_RE.match(v):
            raise ValueError("Invalid email format")
        return v

    @field_validator("description")
    @classmethod
    def validate_description(cls, v: str) -> str:
        if len(v) < MIN_DESCRIPTION_LEN:
            raise ValueError(
                f"description must be at least {MIN_DESCRIPTION_LEN} characters"
            )
        if len(v) > MAX_DESCRIPTION_LEN:
            raise ValueError(
                f"description must be less than {MAX_DESCRIPTION_LEN} characters"
            )
        return v

    def to_record(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "email": self.email,
            "industry": self.industry,
            "page_type": self.page_type.value,
            "description": self.description,
            "colors": dict(self.colors),
            "products": list(self.products),
        }


class BriefOut(CamelModel):
    id: UUID
    name: str
    email: str
    industry: str
    page_type: str
    description: str
    colors: dict[str, str] | None = None
    products: list[dict[str, Any]] | None = None
    status: str
    created_at: datetime
    updated_at: datetime | None = None

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, from_attributes=True
    )


class BriefSubmitted(CamelModel):
    brief_id: UUID
    brief: BriefOut
    message: str = "Brief submitted successfully"
