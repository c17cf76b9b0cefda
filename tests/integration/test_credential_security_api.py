"""Integration tests for PIN setup and the PIN-gated reveal."""

from datetime import date, timedelta

import pytest
from httpx import AsyncClient

from keybastion.infrastructure.persistence.models import SharingModel


def _verify_url(credential_id: str) -> str:
    return f"/api/credential-security/credentials/{credential_id}/verify-pin"


async def _share(db_session, credential, owner, recipient, expires: date) -> None:
    db_session.add(
        SharingModel(
            credential_id=credential.id,
            shared_by_id=owner.id,
            shared_with_id=recipient.id,
            expiration_date=expires,
            accepted=True,
        )
    )
    await db_session.commit()


class TestSetPin:
    """Tests for POST /set-pin."""

    @pytest.mark.asyncio
    async def test_set_pin(self, client: AsyncClient, create_principal, auth_headers):
        alice = await create_principal("alice")

        response = await client.post(
            "/api/credential-security/set-pin",
            json={"pin": "1234"},
            headers=auth_headers(alice),
        )

        assert response.status_code == 200
        assert response.json() == {"message": "Security PIN set successfully"}

    @pytest.mark.asyncio
    @pytest.mark.parametrize("pin", ["12", "1234567", "abcd", ""])
    async def test_invalid_pin_format(
        self, client: AsyncClient, create_principal, auth_headers, pin
    ):
        alice = await create_principal("alice")

        response = await client.post(
            "/api/credential-security/set-pin",
            json={"pin": pin},
            headers=auth_headers(alice),
        )

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_requires_authentication(self, client: AsyncClient):
        response = await client.post("/api/credential-security/set-pin", json={"pin": "1234"})
        assert response.status_code == 401


class TestVerifyPin:
    """Tests for POST /credentials/{id}/verify-pin."""

    @pytest.mark.asyncio
    async def test_owner_reveals_secret(
        self, client: AsyncClient, create_principal, create_credential, auth_headers
    ):
        alice = await create_principal("alice", pin="1234")
        credential = await create_credential(alice, secret="s3cr3t!")

        response = await client.post(
            _verify_url(credential.id), json={"pin": "1234"}, headers=auth_headers(alice)
        )

        assert response.status_code == 200
        assert response.json() == {"password": "s3cr3t!"}
        assert "no-store" in response.headers["Cache-Control"]

    @pytest.mark.asyncio
    async def test_wrong_pin(
        self, client: AsyncClient, create_principal, create_credential, auth_headers
    ):
        alice = await create_principal("alice", pin="1234")
        credential = await create_credential(alice)

        response = await client.post(
            _verify_url(credential.id), json={"pin": "0000"}, headers=auth_headers(alice)
        )

        assert response.status_code == 401
        assert response.json() == {"error": "Invalid PIN"}

    @pytest.mark.asyncio
    async def test_pin_not_set(
        self, client: AsyncClient, create_principal, create_credential, auth_headers
    ):
        alice = await create_principal("alice")
        credential = await create_credential(alice)

        response = await client.post(
            _verify_url(credential.id), json={"pin": "1234"}, headers=auth_headers(alice)
        )

        assert response.status_code == 403
        body = response.json()
        assert body["needsPin"] is True
        assert body["error"]
        assert body["message"]

    @pytest.mark.asyncio
    async def test_corrupted_ciphertext_returns_error_body(
        self, client: AsyncClient, db_session, create_principal, create_credential, auth_headers
    ):
        alice = await create_principal("alice", pin="1234")
        credential = await create_credential(alice)
        credential.encrypted_password = "not-base64!!"
        await db_session.commit()

        response = await client.post(
            _verify_url(credential.id), json={"pin": "1234"}, headers=auth_headers(alice)
        )

        assert response.status_code == 500
        assert response.json() == {"error": "Decryption failed"}
        assert "no-store" in response.headers["Cache-Control"]

    @pytest.mark.asyncio
    async def test_empty_pin(
        self, client: AsyncClient, create_principal, create_credential, auth_headers
    ):
        alice = await create_principal("alice", pin="1234")
        credential = await create_credential(alice)

        response = await client.post(
            _verify_url(credential.id), json={"pin": ""}, headers=auth_headers(alice)
        )

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_unknown_credential(
        self, client: AsyncClient, create_principal, auth_headers
    ):
        alice = await create_principal("alice", pin="1234")

        response = await client.post(
            _verify_url("does-not-exist"), json={"pin": "1234"}, headers=auth_headers(alice)
        )

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_expired_sharing_is_not_found(
        self, client: AsyncClient, db_session, create_principal, create_credential, auth_headers
    ):
        alice = await create_principal("alice", pin="1234")
        bob = await create_principal("bob", pin="5678")
        credential = await create_credential(alice)
        await _share(db_session, credential, alice, bob, date.today() - timedelta(days=1))

        response = await client.post(
            _verify_url(credential.id), json={"pin": "5678"}, headers=auth_headers(bob)
        )

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_active_sharing_reveals_secret(
        self, client: AsyncClient, db_session, create_principal, create_credential, auth_headers
    ):
        alice = await create_principal("alice", pin="1234")
        bob = await create_principal("bob", pin="5678")
        credential = await create_credential(alice, secret="family-netflix")
        await _share(db_session, credential, alice, bob, date.today() + timedelta(days=7))

        response = await client.post(
            _verify_url(credential.id), json={"pin": "5678"}, headers=auth_headers(bob)
        )

        assert response.status_code == 200
        assert response.json() == {"password": "family-netflix"}

    @pytest.mark.asyncio
    async def test_set_pin_then_reveal(
        self, client: AsyncClient, create_principal, create_credential, auth_headers
    ):
        alice = await create_principal("alice")
        credential = await create_credential(alice, secret="after-setup")
        headers = auth_headers(alice)

        await client.post(
            "/api/credential-security/set-pin", json={"pin": "246810"}, headers=headers
        )
        response = await client.post(
            _verify_url(credential.id), json={"pin": "246810"}, headers=headers
        )

        assert response.status_code == 200
        assert response.json() == {"password": "after-setup"}
