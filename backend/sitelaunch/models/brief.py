from sqlalchemy import Column, String, Text, JSON, DateTime, Uuid
from datetime import datetime
import uuid
import enum
from ..core.db import Base


class PageType(str, enum.Enum):
    LANDING = "landing"
    PORTFOLIO = "portfolio"
    BLOG = "blog"
    ECOMMERCE = "ecommerce"
    CORPORATE = "corporate"
    PERSONAL = "personal"
    OTHER = "other"


class Brief(Base):
    __tablename__ = "briefs"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False)
    industry = Column(String(255), nullable=False)
    page_type = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    colors = Column(JSON, nullable=True)    # {"primary": "#112233", ...}
    products = Column(JSON, nullable=True)  # [{"name": ..., "price": ...}, ...]
    # Informational only; the deployment pipeline never writes it
    status = Column(String(50), nullable=False, default="pending")
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
