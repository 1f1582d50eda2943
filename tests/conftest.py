import pytest
from fastapi.testclient import TestClient

from app.core.config import Settings
from app.main import create_app


@pytest.fixture()
def settings(tmp_path):
    return Settings(
        _env_file=None,
        environment="test",
        database_url=f"sqlite:///{tmp_path / 'test.db'}",
        upload_dir=str(tmp_path / "uploads"),
        jwt_secret="test-secret",
        bcrypt_rounds=4,
        max_upload_size_mb=1,
    )


@pytest.fixture()
def application(settings):
    return create_app(settings)


@pytest.fixture()
def client(application):
    with TestClient(application) as test_client:
        yield test_client


@pytest.fixture()
def db(application, client):
    session = application.state.session_factory()
    yield session
    session.close()


@pytest.fixture()
def register(client):
    def _register(email="user@example.com", password="secret123", name=None):
        payload = {"email": email, "password": password}
        if name is not None:
            payload["name"] = name
        response = client.post("/api/auth/register", json=payload)
        assert response.status_code == 200, response.text
        body = response.json()
        return body["user"], {"Authorization": f"Bearer {body['token']}"}

    return _register
