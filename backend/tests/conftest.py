import os

# Must be set before any sitelaunch import builds Settings / the engine
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("REDIS_URL", "redis://localhost:6379/15")
os.environ["ENV"] = "dev"
os.environ["API_AUTH_KEY"] = ""

import pytest
from fastapi.testclient import TestClient

from sitelaunch.core.db import Base, SessionLocal, engine
from sitelaunch.models import brief as _brief_model  # noqa: F401
from sitelaunch.models import deployment_job as _job_model  # noqa: F401
from sitelaunch.services.connectors import get_notifier, get_publisher
from sitelaunch.services.orchestrator import DeploymentPipeline
from sitelaunch.services.scheduler import get_scheduler
from sitelaunch.services.store import RecordStore, get_store

from tests.fixtures.doubles import (
    FakeGenerator,
    FakePublisher,
    QueueScheduler,
    RecordingNotifier,
)


@pytest.fixture(autouse=True)
def schema():
    Base.metadata.create_all(engine)
    yield
    Base.metadata.drop_all(engine)


@pytest.fixture()
def store() -> RecordStore:
    return RecordStore(SessionLocal)


@pytest.fixture()
def generator() -> FakeGenerator:
    return FakeGenerator()


@pytest.fixture()
def publisher() -> FakePublisher:
    return FakePublisher()


@pytest.fixture()
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture()
def scheduler() -> QueueScheduler:
    return QueueScheduler()


@pytest.fixture()
def pipeline(store, generator, publisher) -> DeploymentPipeline:
    return DeploymentPipeline(
        store=store,
        generator=generator,
        publisher=publisher,
        site_name_prefix="site",
        site_name_max_len=63,
    )


@pytest.fixture()
def client(store, scheduler, notifier, publisher):
    from sitelaunch.main import app

    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_scheduler] = lambda: scheduler
    app.dependency_overrides[get_notifier] = lambda: notifier
    app.dependency_overrides[get_publisher] = lambda: publisher
    try:
        with TestClient(app) as test_client:
            yield test_client
    finally:
        app.dependency_overrides.clear()
