# tests/test_health.py
from typing import Any

from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

from blackmessages.db.session import Database
from blackmessages.db.session import get_db as app_get_session


def test_root_responds(client: Any) -> None:
    """Verify that the root endpoint describes the service."""
    r = client.get("/")
    assert r.status_code == 200
    assert r.json()["name"]


def test_health(client: Any) -> None:
    r = client.get("/health")
    assert r.json() == {"status": "ok"}


def test_unknown_route_is_404(client: Any) -> None:
    r = client.post("/connect")
    assert r.status_code == 404


def test_storage_outage_at_startup_is_not_fatal(app: Any, monkeypatch: Any, caplog: Any) -> None:
    """The app still boots; storage-backed routes answer 500 until the database is back."""

    def _unreachable(self: Database) -> None:
        raise OperationalError("CREATE TABLE", {}, Exception("database unreachable"))

    monkeypatch.setattr(Database, "create_tables", _unreachable)
    # Route requests through the app's own database handle instead of the test session.
    app.dependency_overrides.pop(app_get_session, None)

    with TestClient(app, base_url="http://test") as client:
        assert client.get("/health").status_code == 200

        response = client.post("/api/v1/auth/register", json={"pinHash": "abc"})
        assert response.status_code == 500
        assert response.json() == {"detail": "Storage unavailable"}

    assert "Database unavailable at startup" in caplog.text
