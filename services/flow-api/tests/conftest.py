import pytest
from fastapi.testclient import TestClient

from flow_api.domain.store import MemoryFlowStore
from flow_api.main import app


@pytest.fixture
def store() -> MemoryFlowStore:
    return MemoryFlowStore()


@pytest.fixture
def client(store: MemoryFlowStore) -> TestClient:
    app.state.store = store
    app.state.merge_counter = 0
    return TestClient(app)
