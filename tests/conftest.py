from pathlib import Path

import pytest

from rest_framework.test import APIClient

from modules.catalog.repositories import InMemoryCatalog
from modules.core.context import SessionContext
from modules.core.repositories import InMemorySnapshotStore
from shared.infrastructure.bus import InMemoryEventBus

SAMPLE_CATALOG = (
    Path(__file__).resolve().parent.parent
    / "src"
    / "modules"
    / "catalog"
    / "fixtures"
    / "sample_catalog.json"
)


class RecordingHandler:
    """Collects every event it is handed."""

    def __init__(self) -> None:
        self.events = []

    def handle(self, event) -> None:
        self.events.append(event)


@pytest.fixture()
def catalog():
    return InMemoryCatalog.from_fixture(SAMPLE_CATALOG)


@pytest.fixture()
def store():
    return InMemorySnapshotStore()


@pytest.fixture()
def bus():
    return InMemoryEventBus()


@pytest.fixture()
def ctx():
    return SessionContext(session_id="session-1", correlation_id="test-correlation")


@pytest.fixture()
def api_client():
    """DRF APIClient for testing API endpoints."""
    return APIClient()


@pytest.fixture()
def session_client(api_client):
    """APIClient that identifies itself with a fixed session id."""
    api_client.defaults["HTTP_X_SESSION_ID"] = "api-session-1"
    return api_client


@pytest.fixture()
def api_client_with_correlation(session_client):
    """APIClient pre-configured with a known correlation ID header."""
    cid = "test-correlation-id-fixture"
    session_client.defaults["HTTP_X_REQUEST_ID"] = cid
    return session_client, cid


@pytest.fixture()
def recorder():
    return RecordingHandler()
