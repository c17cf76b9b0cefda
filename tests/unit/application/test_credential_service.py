"""Tests for CredentialService."""

import pytest

from keybastion.application.services.credential_service import CredentialService
from keybastion.domain.services.password_forge import GenerationOptions, PasswordForge
from keybastion.infrastructure.persistence.repositories import CredentialRepository


@pytest.fixture
def service(db_session, secret_cipher) -> CredentialService:
    return CredentialService(
        credentials=CredentialRepository(db_session),
        secret_cipher=secret_cipher,
        password_forge=PasswordForge(),
    )


@pytest.mark.asyncio
async def test_create_stores_ciphertext_only(service, create_principal, secret_cipher):
    alice = await create_principal("alice")

    credential = await service.create(
        owner_id=alice.id,
        account_name="Bank",
        password="Aa1!",
        service_url="https://bank.example.com",
    )

    assert credential.encrypted_password != "Aa1!"
    assert secret_cipher.decrypt(credential.encrypted_password) == "Aa1!"
    assert credential.password_strength == 76
    assert credential.password_length is None


@pytest.mark.asyncio
async def test_create_records_generation_metadata(service, create_principal):
    alice = await create_principal("alice")

    credential = await service.create(
        owner_id=alice.id,
        account_name="Shop",
        password="abcdefgh",
        service_url="https://shop.example.com",
        generation=GenerationOptions(length=8, include_uppercase=False),
        password_strength=42,
    )

    assert credential.password_length == 8
    assert credential.include_lowercase is True
    assert credential.include_uppercase is False
    assert credential.password_strength == 42


@pytest.mark.asyncio
async def test_list_for_owner_only_returns_own(service, create_principal):
    alice = await create_principal("alice")
    bob = await create_principal("bob")
    await service.create(alice.id, "A", "pw-a", "https://a.example.com")
    await service.create(bob.id, "B", "pw-b", "https://b.example.com")

    listed = await service.list_for_owner(alice.id)

    assert [c.account_name for c in listed] == ["A"]
