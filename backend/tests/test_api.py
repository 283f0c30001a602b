"""
Tenant Notes Backend — API Integration Tests
============================================

What:  End-to-end HTTP tests through the real app.
How:   HTTPX AsyncClient over ASGITransport, in-memory SQLite seeded with two
       FREE tenants (acme, globex), each with an ADMIN and a MEMBER.

What we test:
    ✅ Health and readiness probes
    ✅ Login: token claims, no password in the response, uniform 401 message
    ✅ Bearer auth: missing, wrong scheme, expired and forged tokens → 401
    ✅ Tenant isolation: other tenant's notes are 404 for get/put/delete
    ✅ FREE plan limit → 402, lifted by the admin upgrade
    ✅ Upgrade gates: member 403, other tenant 403, unknown slug 404, idempotent
    ✅ Listing order, partial PUT, delete frees a slot
    ✅ Database failures → generic 500 with request id
"""

import asyncio
import time
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, MagicMock, patch
from uuid import uuid4

import pytest
from jose import jwt
from sqlalchemy import Text
from sqlalchemy.exc import OperationalError

from tenant_notes.auth.tokens import Identity, TokenCodec
from tenant_notes.middleware.request_id import accept_request_id
from tenant_notes.models.note import Note
from tenant_notes.models.user import Role
from tenant_notes.repositories.notes import TenantNoteRepository

QUOTA_MESSAGE = "FREE plan limit reached. Upgrade to PRO."


async def _create(client, headers, title="Title", content="Content"):
    return await client.post("/notes", json={"title": title, "content": content}, headers=headers)


class TestHealth:

    @pytest.mark.asyncio
    async def test_liveness(self, test_client):
        response = await test_client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "ok"}
        assert response.headers["X-Request-ID"]

    @pytest.mark.asyncio
    async def test_readiness_ok(self, test_client):
        response = await test_client.get("/health/ready")
        assert response.status_code == 200
        assert response.json() == {"status": "ok", "database": "connected"}

    @pytest.mark.asyncio
    async def test_readiness_database_down(self, test_client):
        broken = MagicMock()
        broken.connect.side_effect = OperationalError("SELECT 1", {}, Exception("refused"))
        with patch("tenant_notes.database.engine", broken):
            response = await test_client.get("/health/ready")
        assert response.status_code == 503
        assert response.json()["database"] == "disconnected"


class TestLogin:

    @pytest.mark.asyncio
    async def test_login_success(self, test_client, seeded, codec):
        response = await test_client.post(
            "/login", json={"email": "admin@acme.test", "password": "password"}
        )
        assert response.status_code == 200
        body = response.json()

        assert body["user"] == {
            "id": seeded.acme_admin.id,
            "email": "admin@acme.test",
            "role": "ADMIN",
            "tenantId": seeded.acme.id,
        }
        assert "password" not in response.text

        identity = codec.verify(body["token"])
        assert identity == Identity(user_id=seeded.acme_admin.id, tenant_id=seeded.acme.id, role=Role.ADMIN)

    @pytest.mark.asyncio
    async def test_unknown_email_and_wrong_password_look_the_same(self, test_client, seeded):
        unknown = await test_client.post("/login", json={"email": "ghost@acme.test", "password": "password"})
        wrong = await test_client.post("/login", json={"email": "admin@acme.test", "password": "nope"})

        assert unknown.status_code == wrong.status_code == 401
        assert unknown.json()["message"] == wrong.json()["message"] == "Invalid credentials"

    @pytest.mark.asyncio
    async def test_missing_password(self, test_client, seeded):
        response = await test_client.post("/login", json={"email": "admin@acme.test"})
        assert response.status_code == 400
        assert response.json()["error"] == "validation_error"

    @pytest.mark.asyncio
    async def test_malformed_body(self, test_client):
        response = await test_client.post(
            "/login", content=b"{not json", headers={"Content-Type": "application/json"}
        )
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_password_check_does_not_block_other_requests(self, test_client, seeded):
        """A slow hash comparison runs off the event loop; a ticker keeps ticking meanwhile."""

        def slow_verify(plain, hashed):
            time.sleep(0.5)
            return True

        longest_gap = 0.0
        done = asyncio.Event()

        async def ticker():
            nonlocal longest_gap
            last = time.perf_counter()
            while not done.is_set():
                await asyncio.sleep(0.01)
                now = time.perf_counter()
                longest_gap = max(longest_gap, now - last)
                last = now

        with patch("tenant_notes.services.auth_service.verify_password", slow_verify):
            ticking = asyncio.create_task(ticker())
            response = await test_client.post(
                "/login", json={"email": "admin@acme.test", "password": "password"}
            )
            done.set()
            await ticking

        assert response.status_code == 200
        assert longest_gap < 0.25


class TestBearerAuth:

    @pytest.mark.asyncio
    async def test_no_header(self, test_client):
        response = await test_client.get("/notes")
        assert response.status_code == 401
        assert response.json()["message"] == "Missing token"
        assert response.headers["WWW-Authenticate"] == "Bearer"

    @pytest.mark.asyncio
    async def test_wrong_scheme(self, test_client):
        response = await test_client.get("/notes", headers={"Authorization": "Basic dXNlcjpwYXNz"})
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_expired_token(self, test_client, seeded, codec):
        user = seeded.acme_member
        expired = TokenCodec(secret=codec.secret, expires_in=timedelta(seconds=-60)).issue(
            Identity(user_id=user.id, tenant_id=user.tenant_id, role=user.role)
        )
        response = await test_client.get("/notes", headers={"Authorization": f"Bearer {expired}"})
        assert response.status_code == 401
        assert response.json()["message"] == "Invalid token"

    @pytest.mark.asyncio
    async def test_forged_token(self, test_client, seeded):
        user = seeded.acme_member
        forged = jwt.encode(
            {"userId": user.id, "tenantId": user.tenant_id, "role": "ADMIN"},
            "not-the-server-secret",
            algorithm="HS256",
        )
        response = await test_client.get("/notes", headers={"Authorization": f"Bearer {forged}"})
        assert response.status_code == 401


class TestTenantIsolation:

    @pytest.mark.asyncio
    async def test_other_tenant_note_is_not_found(self, test_client, seeded, auth_headers):
        globex = auth_headers(seeded.globex_member)
        acme = auth_headers(seeded.acme_member)

        created = await _create(test_client, globex, "Secret", "globex only")
        assert created.status_code == 201
        note_id = created.json()["id"]

        assert (await test_client.get(f"/notes/{note_id}", headers=acme)).status_code == 404
        assert (
            await test_client.put(f"/notes/{note_id}", json={"title": "pwned"}, headers=acme)
        ).status_code == 404
        assert (await test_client.delete(f"/notes/{note_id}", headers=acme)).status_code == 404
        assert (await test_client.get("/notes", headers=acme)).json() == []

        still_there = await test_client.get(f"/notes/{note_id}", headers=globex)
        assert still_there.status_code == 200
        assert still_there.json()["title"] == "Secret"

    @pytest.mark.asyncio
    async def test_note_belongs_to_token_tenant(self, test_client, seeded, auth_headers):
        response = await test_client.post(
            "/notes",
            json={"title": "t", "content": "c", "tenantId": seeded.globex.id},
            headers=auth_headers(seeded.acme_member),
        )
        assert response.status_code == 201
        assert response.json()["tenantId"] == seeded.acme.id
        assert response.json()["ownerId"] == seeded.acme_member.id

    @pytest.mark.asyncio
    async def test_token_for_deleted_tenant(self, test_client, seeded, codec):
        token = codec.issue(Identity(user_id=str(uuid4()), tenant_id=str(uuid4()), role=Role.MEMBER))
        response = await _create(test_client, {"Authorization": f"Bearer {token}"})
        assert response.status_code == 404


class TestPlanLimit:

    @pytest.mark.asyncio
    async def test_fourth_note_needs_upgrade(self, test_client, seeded, auth_headers):
        member = auth_headers(seeded.acme_member)
        for i in range(3):
            assert (await _create(test_client, member, f"n{i}")).status_code == 201

        refused = await _create(test_client, member, "n3")
        assert refused.status_code == 402
        assert refused.json()["error"] == "quota_exceeded"
        assert refused.json()["message"] == QUOTA_MESSAGE

        # Limit is per tenant
        assert (await _create(test_client, auth_headers(seeded.globex_member))).status_code == 201

        upgrade = await test_client.post("/tenants/acme/upgrade", headers=auth_headers(seeded.acme_admin))
        assert upgrade.status_code == 200
        assert upgrade.json()["tenant"]["plan"] == "PRO"

        assert (await _create(test_client, member, "n3")).status_code == 201
        assert len((await test_client.get("/notes", headers=member)).json()) == 4

    @pytest.mark.asyncio
    async def test_delete_frees_a_slot(self, test_client, seeded, auth_headers):
        member = auth_headers(seeded.acme_member)
        ids = [(await _create(test_client, member, f"n{i}")).json()["id"] for i in range(3)]
        assert (await _create(test_client, member)).status_code == 402

        deleted = await test_client.delete(f"/notes/{ids[0]}", headers=member)
        assert deleted.status_code == 204
        assert deleted.content == b""

        assert (await _create(test_client, member)).status_code == 201

    @pytest.mark.asyncio
    async def test_missing_title(self, test_client, seeded, auth_headers):
        response = await test_client.post(
            "/notes", json={"content": "no title"}, headers=auth_headers(seeded.acme_member)
        )
        assert response.status_code == 400
        assert response.json()["message"] == "Title and content are required"


class TestUpgrade:

    @pytest.mark.asyncio
    async def test_member_cannot_upgrade(self, test_client, seeded, auth_headers):
        response = await test_client.post("/tenants/acme/upgrade", headers=auth_headers(seeded.acme_member))
        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_admin_cannot_upgrade_other_tenant(self, test_client, seeded, auth_headers):
        response = await test_client.post("/tenants/globex/upgrade", headers=auth_headers(seeded.acme_admin))
        assert response.status_code == 403

        # globex is still FREE: its fourth note is refused
        globex = auth_headers(seeded.globex_member)
        for _ in range(3):
            await _create(test_client, globex)
        assert (await _create(test_client, globex)).status_code == 402

    @pytest.mark.asyncio
    async def test_unknown_slug(self, test_client, seeded, auth_headers):
        response = await test_client.post("/tenants/initech/upgrade", headers=auth_headers(seeded.acme_admin))
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_without_token(self, test_client, seeded):
        response = await test_client.post("/tenants/acme/upgrade")
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_upgrade_twice(self, test_client, seeded, auth_headers):
        admin = auth_headers(seeded.acme_admin)
        first = await test_client.post("/tenants/acme/upgrade", headers=admin)
        second = await test_client.post("/tenants/acme/upgrade", headers=admin)

        assert first.json()["message"] == "Upgraded to PRO"
        assert second.status_code == 200
        assert second.json()["message"] == "Already PRO"
        assert second.json()["tenant"]["plan"] == "PRO"


class TestNotesCrud:

    @pytest.mark.asyncio
    async def test_list_most_recent_first(self, test_client, seeded, session_factory, auth_headers):
        base = datetime(2025, 1, 1, tzinfo=timezone.utc)
        async with session_factory() as session:
            for i, title in enumerate(["oldest", "middle", "newest"]):
                stamp = base + timedelta(hours=i)
                session.add(Note(
                    title=title,
                    content="...",
                    tenant_id=seeded.acme.id,
                    owner_id=seeded.acme_admin.id,
                    created_at=stamp,
                    updated_at=stamp,
                ))
            await session.commit()

        response = await test_client.get("/notes", headers=auth_headers(seeded.acme_member))
        assert response.status_code == 200
        assert [n["title"] for n in response.json()] == ["newest", "middle", "oldest"]

    @pytest.mark.asyncio
    async def test_any_member_can_edit_partial_put(self, test_client, seeded, auth_headers):
        created = await _create(test_client, auth_headers(seeded.acme_admin), "Draft", "Body text")
        note_id = created.json()["id"]

        response = await test_client.put(
            f"/notes/{note_id}", json={"title": "Final"}, headers=auth_headers(seeded.acme_member)
        )
        assert response.status_code == 200
        assert response.json()["title"] == "Final"
        assert response.json()["content"] == "Body text"
        assert response.json()["ownerId"] == seeded.acme_admin.id

    @pytest.mark.asyncio
    async def test_get_unknown_note(self, test_client, seeded, auth_headers):
        response = await test_client.get(f"/notes/{uuid4()}", headers=auth_headers(seeded.acme_member))
        assert response.status_code == 404
        assert response.json()["message"] == "Not found"

    @pytest.mark.asyncio
    async def test_response_shape(self, test_client, seeded, auth_headers):
        created = await _create(test_client, auth_headers(seeded.acme_member))
        assert set(created.json()) == {"id", "title", "content", "tenantId", "ownerId", "createdAt", "updatedAt"}

    @pytest.mark.asyncio
    async def test_put_without_body_keeps_note(self, test_client, seeded, auth_headers):
        headers = auth_headers(seeded.acme_member)
        note_id = (await _create(test_client, headers, "Keep", "Me")).json()["id"]

        response = await test_client.put(f"/notes/{note_id}", headers=headers)
        assert response.status_code == 200
        assert response.json()["title"] == "Keep"
        assert response.json()["content"] == "Me"

    @pytest.mark.asyncio
    async def test_put_without_body_unknown_or_foreign_note(self, test_client, seeded, auth_headers):
        """Tenant lookup still decides the outcome when there is no body."""
        foreign_id = (await _create(test_client, auth_headers(seeded.globex_member))).json()["id"]
        acme = auth_headers(seeded.acme_member)

        assert (await test_client.put(f"/notes/{uuid4()}", headers=acme)).status_code == 404
        assert (await test_client.put(f"/notes/{foreign_id}", headers=acme)).status_code == 404

    @pytest.mark.asyncio
    async def test_long_title(self, test_client, seeded, auth_headers):
        headers = auth_headers(seeded.acme_member)
        long_title = "x" * 1000

        created = await _create(test_client, headers, long_title, "body")
        assert created.status_code == 201
        assert created.json()["title"] == long_title

        updated = await test_client.put(
            f"/notes/{created.json()['id']}", json={"title": long_title + "y"}, headers=headers
        )
        assert updated.status_code == 200
        assert updated.json()["title"] == long_title + "y"

    def test_title_column_is_unbounded(self):
        """PostgreSQL would reject over-long titles on a VARCHAR(n) column."""
        title_type = Note.__table__.c.title.type
        assert isinstance(title_type, Text)
        assert title_type.length is None


class TestRequestId:

    @pytest.mark.asyncio
    async def test_client_request_id_echoed(self, test_client):
        response = await test_client.get("/health", headers={"X-Request-ID": "client-abc_1.2"})
        assert response.headers["X-Request-ID"] == "client-abc_1.2"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("supplied", ["has spaces", "x" * 65, "evil\\nINFO forged", "<script>"])
    async def test_unsafe_request_id_replaced(self, test_client, supplied):
        response = await test_client.get("/health", headers={"X-Request-ID": supplied})
        rid = response.headers["X-Request-ID"]
        assert rid != supplied
        assert len(rid) == 8

    def test_accept_request_id(self):
        assert accept_request_id("trace123") == "trace123"
        assert accept_request_id("line\nbreak") != "line\nbreak"
        assert len(accept_request_id(None)) == 8


class TestServerErrors:

    @pytest.mark.asyncio
    async def test_database_failure_is_generic_500(self, test_client, seeded, auth_headers):
        failure = AsyncMock(side_effect=OperationalError("SELECT notes", {}, Exception("disk I/O error")))
        with patch.object(TenantNoteRepository, "list_recent", failure):
            response = await test_client.get(
                "/notes",
                headers={**auth_headers(seeded.acme_member), "X-Request-ID": "trace123"},
            )

        assert response.status_code == 500
        assert response.json() == {
            "error": "server_error",
            "message": "Internal server error",
            "request_id": "trace123",
        }
        assert "disk" not in response.text
