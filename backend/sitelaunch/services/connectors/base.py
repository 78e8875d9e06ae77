from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class SiteHandle:
    """An allocated hosting target."""

    site_id: str
    name: str
    url: str | None = None
    admin_url: str | None = None


@dataclass(frozen=True)
class PushResult:
    address: str | None
    deploy_id: str
    state: str | None = None
    created_at: str | None = None


@dataclass(frozen=True)
class DeployStatus:
    deploy_id: str
    state: str | None
    address: str | None = None
    published_at: str | None = None


@dataclass(frozen=True)
class NotificationResult:
    delivered: bool
    status_code: int | None = None
    message: str | None = None
    data: Any = field(default=None, compare=False)


class BasePublisher(ABC):
    name: str

    @abstractmethod
    def allocate_target(self, name: str) -> SiteHandle:
        ...

    @abstractmethod
    def push(self, target: SiteHandle, artifact) -> PushResult:
        ...

    @abstractmethod
    def poll_status(self, target: SiteHandle, deploy_id: str) -> DeployStatus:
        ...


class BaseNotifier(ABC):
    """Best-effort event delivery. Implementations must not raise."""

    name: str

    @abstractmethod
    def emit(self, payload: dict[str, Any]) -> NotificationResult:
        ...
