"""Tests for PinGate."""

from datetime import date, timedelta

import pytest

from keybastion.application.services.pin_gate import (
    CredentialNotFoundError,
    InvalidPinFormatError,
    PinGate,
    PinMismatchError,
    PinNotSetError,
)
from keybastion.infrastructure.auth import verify_pin
from keybastion.infrastructure.persistence.models import SharingModel
from keybastion.infrastructure.persistence.repositories import (
    CredentialRepository,
    PrincipalRepository,
    SharingRepository,
)

TODAY = date(2024, 6, 15)


@pytest.fixture
def pin_gate(db_session, secret_cipher) -> PinGate:
    return PinGate(
        principals=PrincipalRepository(db_session),
        credentials=CredentialRepository(db_session),
        sharings=SharingRepository(db_session),
        secret_cipher=secret_cipher,
        today=lambda: TODAY,
    )


async def _share(db_session, credential, owner, recipient, expires: date, accepted=True):
    sharing = await SharingRepository(db_session).create(
        SharingModel(
            credential_id=credential.id,
            shared_by_id=owner.id,
            shared_with_id=recipient.id,
            expiration_date=expires,
            accepted=accepted,
        )
    )
    await db_session.commit()
    return sharing


class TestAuthorizeReveal:
    """Tests for the PIN-gated reveal."""

    @pytest.mark.asyncio
    async def test_owner_with_correct_pin(self, pin_gate, create_principal, create_credential):
        alice = await create_principal("alice", pin="1234")
        credential = await create_credential(alice, secret="s3cr3t!")

        assert await pin_gate.authorize_reveal(alice.id, credential.id, "1234") == "s3cr3t!"

    @pytest.mark.asyncio
    async def test_wrong_pin(self, pin_gate, create_principal, create_credential):
        alice = await create_principal("alice", pin="1234")
        credential = await create_credential(alice)

        with pytest.raises(PinMismatchError):
            await pin_gate.authorize_reveal(alice.id, credential.id, "0000")

    @pytest.mark.asyncio
    async def test_pin_not_set(self, pin_gate, create_principal, create_credential):
        alice = await create_principal("alice")
        credential = await create_credential(alice)

        with pytest.raises(PinNotSetError):
            await pin_gate.authorize_reveal(alice.id, credential.id, "1234")

    @pytest.mark.asyncio
    async def test_pin_checked_before_credential_lookup(self, pin_gate, create_principal):
        alice = await create_principal("alice", pin="1234")

        with pytest.raises(PinMismatchError):
            await pin_gate.authorize_reveal(alice.id, "missing", "9999")
        with pytest.raises(CredentialNotFoundError):
            await pin_gate.authorize_reveal(alice.id, "missing", "1234")

    @pytest.mark.asyncio
    async def test_unknown_principal(self, pin_gate):
        with pytest.raises(CredentialNotFoundError):
            await pin_gate.authorize_reveal("ghost", "missing", "1234")

    @pytest.mark.asyncio
    async def test_not_owned_and_not_shared(self, pin_gate, create_principal, create_credential):
        alice = await create_principal("alice", pin="1234")
        bob = await create_principal("bob", pin="5678")
        credential = await create_credential(alice)

        with pytest.raises(CredentialNotFoundError):
            await pin_gate.authorize_reveal(bob.id, credential.id, "5678")

    @pytest.mark.asyncio
    async def test_active_sharing_grants_access(
        self, pin_gate, db_session, create_principal, create_credential
    ):
        alice = await create_principal("alice", pin="1234")
        bob = await create_principal("bob", pin="5678")
        credential = await create_credential(alice, secret="shared-secret")
        await _share(db_session, credential, alice, bob, TODAY + timedelta(days=1))

        assert await pin_gate.authorize_reveal(bob.id, credential.id, "5678") == "shared-secret"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "expires,accepted",
        [
            (TODAY, True),
            (TODAY - timedelta(days=1), True),
            (TODAY + timedelta(days=30), False),
        ],
    )
    async def test_inactive_sharing_denied(
        self, pin_gate, db_session, create_principal, create_credential, expires, accepted
    ):
        alice = await create_principal("alice", pin="1234")
        bob = await create_principal("bob", pin="5678")
        credential = await create_credential(alice)
        await _share(db_session, credential, alice, bob, expires, accepted=accepted)

        with pytest.raises(CredentialNotFoundError):
            await pin_gate.authorize_reveal(bob.id, credential.id, "5678")


class TestSetPin:
    """Tests for PIN setup."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("pin", ["1234", "12345", "123456"])
    async def test_valid_pin_is_hashed(self, pin_gate, db_session, create_principal, pin):
        alice = await create_principal("alice")

        await pin_gate.set_pin(alice.id, pin)

        stored = await PrincipalRepository(db_session).get_by_id(alice.id)
        assert stored.pin_hash != pin
        assert verify_pin(pin, stored.pin_hash)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("pin", ["", "123", "1234567", "12a4", "１２３４", " 1234"])
    async def test_invalid_pin_rejected(self, pin_gate, create_principal, pin):
        alice = await create_principal("alice")

        with pytest.raises(InvalidPinFormatError):
            await pin_gate.set_pin(alice.id, pin)

    @pytest.mark.asyncio
    async def test_new_pin_replaces_old(
        self, pin_gate, create_principal, create_credential
    ):
        alice = await create_principal("alice", pin="1234")
        credential = await create_credential(alice)

        await pin_gate.set_pin(alice.id, "4321")

        with pytest.raises(PinMismatchError):
            await pin_gate.authorize_reveal(alice.id, credential.id, "1234")
        assert await pin_gate.authorize_reveal(alice.id, credential.id, "4321")

    @pytest.mark.asyncio
    async def test_unknown_principal(self, pin_gate):
        with pytest.raises(CredentialNotFoundError):
            await pin_gate.set_pin("ghost", "1234")
