"""
NoteKeeper Backend: HTTP API Tests
==================================

What:  End-to-end tests through FastAPI with an in-memory database.
Why:   Confirms the status mapping (400/401/404) and that ownership
       failures never show up as anything more specific.
"""

import pytest
from jose import jwt

from notekeeper.config import settings


async def _create_and_get_id(client, headers, title="Groceries", content="Milk, eggs") -> int:
    response = await client.post("/api/notes", json={"title": title, "content": content},
                                 headers=headers)
    assert response.status_code == 200
    listing = await client.get("/api/notes", headers=headers)
    return next(n["id"] for n in listing.json() if n["title"] == title)


class TestAuthentication:

    @pytest.mark.asyncio
    async def test_notes_require_token(self, test_client):
        response = await test_client.get("/api/notes")

        assert response.status_code == 401
        assert response.json()["error"] == "authentication_failed"
        assert response.headers["WWW-Authenticate"] == "Bearer"

    @pytest.mark.asyncio
    async def test_token_without_id_claim_gets_generic_401(self, test_client):
        token = jwt.encode({"UserName": "mallory"}, settings.jwt_secret_key,
                           algorithm=settings.jwt_algorithm)

        response = await test_client.get(
            "/api/notes", headers={"Authorization": f"Bearer {token}"}
        )

        assert response.status_code == 401
        assert response.json()["message"] == "Authentication failed"
        assert "details" not in response.json()

    @pytest.mark.asyncio
    async def test_register_then_login(self, test_client):
        register = await test_client.post("/api/users/register", json={
            "email": "frank@example.com",
            "username": "frank",
            "password": "frank-password",
            "confirm_password": "frank-password",
        })
        assert register.status_code == 200

        token = await test_client.post("/api/token", json={
            "username": "frank", "password": "frank-password",
        })
        assert token.status_code == 200

        headers = {"Authorization": f"Bearer {token.json()['token']}"}
        notes = await test_client.get("/api/notes", headers=headers)
        assert notes.status_code == 200
        assert notes.json() == []

    @pytest.mark.asyncio
    async def test_duplicate_registration_is_400(self, test_client):
        body = {
            "email": "gina@example.com",
            "username": "gina",
            "password": "gina-password",
            "confirm_password": "gina-password",
        }
        assert (await test_client.post("/api/users/register", json=body)).status_code == 200

        response = await test_client.post("/api/users/register", json=body)
        assert response.status_code == 400
        assert response.json()["error"] == "validation_error"

    @pytest.mark.asyncio
    async def test_bad_credentials_are_400(self, test_client):
        response = await test_client.post("/api/token", json={
            "username": "nobody", "password": "whatever",
        })
        assert response.status_code == 400


class TestNotesEndpoints:

    @pytest.mark.asyncio
    async def test_groceries_scenario(self, test_client, auth_headers, alice, bob):
        as_alice, as_bob = auth_headers(alice), auth_headers(bob)

        note_id = await _create_and_get_id(test_client, as_alice)

        listing = await test_client.get("/api/notes", headers=as_alice)
        assert [n["title"] for n in listing.json()] == ["Groceries"]
        assert "content" not in listing.json()[0]

        assert (await test_client.get(f"/api/notes/{note_id}", headers=as_bob)).status_code == 404

        update = await test_client.put("/api/notes", headers=as_alice, json={
            "id": note_id, "title": "Groceries v2", "content": "Milk",
        })
        assert update.status_code == 200
        detail = (await test_client.get(f"/api/notes/{note_id}", headers=as_alice)).json()
        assert detail["title"] == "Groceries v2"
        assert detail["modified_at"] is not None

        assert (await test_client.delete(f"/api/notes/{note_id}", headers=as_bob)).status_code == 400
        assert (await test_client.delete(f"/api/notes/{note_id}", headers=as_alice)).status_code == 200
        assert (await test_client.get(f"/api/notes/{note_id}", headers=as_alice)).status_code == 404

    @pytest.mark.asyncio
    async def test_foreign_and_missing_notes_look_identical(self, test_client, auth_headers,
                                                            alice, bob):
        note_id = await _create_and_get_id(test_client, auth_headers(alice))

        foreign = await test_client.get(f"/api/notes/{note_id}", headers=auth_headers(bob))
        missing = await test_client.get("/api/notes/99999", headers=auth_headers(bob))

        assert foreign.status_code == missing.status_code == 404
        assert foreign.json()["error"] == missing.json()["error"] == "not_found"

    @pytest.mark.asyncio
    async def test_update_foreign_note_is_400_and_unchanged(self, test_client, auth_headers,
                                                            alice, bob):
        note_id = await _create_and_get_id(test_client, auth_headers(alice))

        response = await test_client.put("/api/notes", headers=auth_headers(bob), json={
            "id": note_id, "title": "Hijacked", "content": "x",
        })
        assert response.status_code == 400

        detail = await test_client.get(f"/api/notes/{note_id}", headers=auth_headers(alice))
        assert detail.json()["title"] == "Groceries"

    @pytest.mark.asyncio
    async def test_client_cannot_supply_owner(self, test_client, auth_headers, alice, bob):
        response = await test_client.post("/api/notes", headers=auth_headers(alice), json={
            "title": "Sneaky", "content": "x", "owner_id": bob.user_id,
        })
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_title_too_short_is_rejected(self, test_client, auth_headers, alice):
        response = await test_client.post("/api/notes", headers=auth_headers(alice), json={
            "title": "x", "content": "body",
        })
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_request_id_is_echoed(self, test_client, auth_headers, alice):
        response = await test_client.get(
            "/api/notes", headers={**auth_headers(alice), "X-Request-ID": "trace-123"}
        )
        assert response.headers["X-Request-ID"] == "trace-123"


class TestHealth:

    @pytest.mark.asyncio
    async def test_health(self, test_client):
        response = await test_client.get("/health")

        assert response.status_code == 200
        assert response.json()["database"] == "connected"
