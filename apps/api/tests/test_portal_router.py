from collections.abc import Generator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session, sessionmaker

from app.api.v1.routes import portal
from app.models import PortalCredential, User
from app.modules.auth.application.security import create_access_token
from app.modules.portal import SyncStatusRegistry
from app.shared.infrastructure.database import get_db


def _create_app(session_factory: sessionmaker, registry: SyncStatusRegistry) -> TestClient:
    def _get_db() -> Generator[Session, None, None]:
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app = FastAPI()
    app.include_router(portal.router)
    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[portal.get_sync_status_registry] = lambda: registry
    return TestClient(app)


@pytest.fixture
def registry() -> SyncStatusRegistry:
    return SyncStatusRegistry(ttl_seconds=300)


@pytest.fixture
def client(session_factory: sessionmaker, registry: SyncStatusRegistry) -> TestClient:
    return _create_app(session_factory, registry)


@pytest.fixture
def auth_headers(staff_user: User) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(staff_user.id)}"}


def test_routes_require_bearer_token(client: TestClient) -> None:
    with client:
        responses = [
            client.get("/portal/credentials"),
            client.put("/portal/credentials", json={"username": "u", "password": "p"}),
            client.get("/portal/credentials/login"),
            client.get("/portal/session"),
            client.get("/portal/sync-status"),
        ]
    assert [item.status_code for item in responses] == [401] * len(responses)
    assert responses[0].headers["WWW-Authenticate"] == "Bearer"


def test_invalid_token_is_rejected(client: TestClient) -> None:
    with client:
        response = client.get("/portal/credentials", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 401, response.text


def test_get_credentials_404_when_missing(client: TestClient, auth_headers: dict[str, str]) -> None:
    with client:
        response = client.get("/portal/credentials", headers=auth_headers)
    assert response.status_code == 404, response.text


def test_save_then_read_metadata_without_password(
    client: TestClient,
    auth_headers: dict[str, str],
    session_factory: sessionmaker,
) -> None:
    with client:
        saved = client.put(
            "/portal/credentials",
            headers=auth_headers,
            json={"username": "salon-owner", "password": "sB9/pass!", "service_type": "hair"},
        )
        fetched = client.get("/portal/credentials", headers=auth_headers)

    assert saved.status_code == 200, saved.text
    assert fetched.status_code == 200, fetched.text
    payload = fetched.json()
    assert payload["username"] == "salon-owner"
    assert payload["service_type"] == "hair"
    assert payload["last_updated"] is not None
    assert payload["last_used"] is None
    assert "password" not in payload
    assert "sB9/pass!" not in saved.text

    session: Session = session_factory()
    try:
        record = session.query(PortalCredential).one()
        assert record.encrypted_password != "sB9/pass!"
        assert ":" in record.encrypted_password
    finally:
        session.close()


@pytest.mark.parametrize(
    "body",
    [
        {"username": "", "password": "p"},
        {"username": "u", "password": ""},
        {"username": "   ", "password": "p"},
        {"username": "u", "password": "p", "service_type": "nails"},
        {"password": "p"},
    ],
)
def test_save_rejects_invalid_payload(client: TestClient, auth_headers: dict[str, str], body: dict) -> None:
    with client:
        response = client.put("/portal/credentials", headers=auth_headers, json=body)
    assert response.status_code == 422, response.text


def test_login_credentials_are_decrypted(client: TestClient, auth_headers: dict[str, str]) -> None:
    with client:
        client.put(
            "/portal/credentials",
            headers=auth_headers,
            json={"username": "salon-owner", "password": "sB9/pass!", "service_type": "spa"},
        )
        response = client.get("/portal/credentials/login", headers=auth_headers)
        metadata = client.get("/portal/credentials", headers=auth_headers)

    assert response.status_code == 200, response.text
    assert response.json() == {"username": "salon-owner", "password": "sB9/pass!", "service_type": "spa"}
    assert metadata.json()["last_used"] is not None


def test_login_credentials_404_when_missing(client: TestClient, auth_headers: dict[str, str]) -> None:
    with client:
        response = client.get("/portal/credentials/login", headers=auth_headers)
    assert response.status_code == 404, response.text


def test_login_credentials_409_when_unreadable(
    client: TestClient,
    auth_headers: dict[str, str],
    session_factory: sessionmaker,
) -> None:
    with client:
        client.put("/portal/credentials", headers=auth_headers, json={"username": "u", "password": "p"})

    session: Session = session_factory()
    try:
        record = session.query(PortalCredential).one()
        record.encrypted_password = "00112233:zz"
        session.commit()
    finally:
        session.close()

    with client:
        response = client.get("/portal/credentials/login", headers=auth_headers)
    assert response.status_code == 409, response.text
    assert "password" not in response.json()


def test_delete_credentials(client: TestClient, auth_headers: dict[str, str]) -> None:
    with client:
        client.put("/portal/credentials", headers=auth_headers, json={"username": "u", "password": "p"})
        deleted = client.delete("/portal/credentials", headers=auth_headers)
        missing = client.delete("/portal/credentials", headers=auth_headers)
        fetched = client.get("/portal/credentials", headers=auth_headers)

    assert deleted.status_code == 204
    assert missing.status_code == 404
    assert fetched.status_code == 404


def test_credentials_are_scoped_to_current_user(
    client: TestClient,
    auth_headers: dict[str, str],
    db: Session,
) -> None:
    other = User(email="other@salon.test", hashed_password="x", is_active=True)
    db.add(other)
    db.commit()
    other_headers = {"Authorization": f"Bearer {create_access_token(other.id)}"}

    with client:
        client.put("/portal/credentials", headers=auth_headers, json={"username": "mine", "password": "p"})
        response = client.get("/portal/credentials", headers=other_headers)

    assert response.status_code == 404, response.text


def test_session_round_trip(client: TestClient, auth_headers: dict[str, str]) -> None:
    cookies = [{"name": "JSESSIONID", "value": "abc123", "domain": "salonboard.com"}]
    with client:
        saved = client.put("/portal/session", headers=auth_headers, json={"cookies": cookies})
        fetched = client.get("/portal/session", headers=auth_headers)
        deleted = client.delete("/portal/session", headers=auth_headers)
        missing = client.get("/portal/session", headers=auth_headers)

    assert saved.status_code == 200, saved.text
    assert "expires_at" in saved.json()
    assert fetched.json() == {"cookies": cookies}
    assert deleted.status_code == 204
    assert missing.status_code == 404


def test_sync_status_lifecycle(client: TestClient, auth_headers: dict[str, str], staff_user: User) -> None:
    with client:
        initial = client.get("/portal/sync-status", headers=auth_headers)
        updated = client.put("/portal/sync-status", headers=auth_headers, json={"status": "syncing"})
        current = client.get("/portal/sync-status", headers=auth_headers)
        cleared = client.delete("/portal/sync-status", headers=auth_headers)
        after_clear = client.get("/portal/sync-status", headers=auth_headers)
        invalid = client.put("/portal/sync-status", headers=auth_headers, json={"status": "paused"})

    assert initial.json() == {"user_id": staff_user.id, "status": "idle"}
    assert updated.json() == {"user_id": staff_user.id, "status": "syncing"}
    assert current.json()["status"] == "syncing"
    assert cleared.status_code == 204
    assert after_clear.json()["status"] == "idle"
    assert invalid.status_code == 422
