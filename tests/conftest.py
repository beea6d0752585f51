import pytest
from fastapi.testclient import TestClient

from helpers import PASSWORD, FakeStore
from main import app


@pytest.fixture
def fake_store():
    return FakeStore()


@pytest.fixture
def client(fake_store):
    app.state.store_factory = lambda: fake_store
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def logged_in_client(client):
    response = client.post(
        "/auth/login",
        data={"email": "ada@example.com", "password": PASSWORD},
        follow_redirects=False,
    )
    assert response.status_code == 303
    return client
