"""Pytest configuration for all tests."""

from typing import AsyncGenerator, Awaitable, Callable
import uuid

import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from keybastion.domain.entities.role import Role
from keybastion.infrastructure.auth import (
    SessionRegistry,
    SigningKeys,
    TokenAuthority,
    generate_signing_keys,
    hash_password,
    hash_pin,
)
from keybastion.infrastructure.persistence.database import Base, get_db_session
from keybastion.infrastructure.persistence.models import (
    CredentialModel,
    PrincipalModel,
    SharingModel,  # noqa: F401
)
from keybastion.infrastructure.security.secret_cipher import SecretCipher

TEST_PASSWORD = "Password123!"
TEST_ENCRYPTION_KEY = "test-encryption-key"


@pytest.fixture(scope="session")
def signing_keys() -> SigningKeys:
    """One RSA key pair for the whole session; generating keys is slow."""
    return generate_signing_keys()


@pytest.fixture
def token_authority(signing_keys: SigningKeys) -> TokenAuthority:
    return TokenAuthority(
        private_key=signing_keys.private_key,
        public_key=signing_keys.public_key,
    )


@pytest.fixture
def session_registry() -> SessionRegistry:
    return SessionRegistry()


@pytest.fixture
def secret_cipher() -> SecretCipher:
    return SecretCipher(TEST_ENCRYPTION_KEY)


@pytest_asyncio.fixture
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session.

    Uses an in-memory SQLite database for testing.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_maker = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with session_maker() as session:
        yield session
        await session.rollback()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
def app(
    token_authority: TokenAuthority,
    session_registry: SessionRegistry,
    secret_cipher: SecretCipher,
) -> FastAPI:
    """Application with the test security components swapped in."""
    from keybastion.infrastructure.api.app import create_app

    application = create_app()
    application.state.token_authority = token_authority
    application.state.session_registry = session_registry
    application.state.secret_cipher = secret_cipher
    return application


@pytest_asyncio.fixture
async def client(app: FastAPI, db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Create a test client with overridden database dependency."""
    app.dependency_overrides[get_db_session] = lambda: db_session

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac

    app.dependency_overrides = {}


@pytest.fixture
def create_principal(
    db_session: AsyncSession,
) -> Callable[..., Awaitable[PrincipalModel]]:
    """Factory that stores a principal, optionally with a PIN."""

    async def _create(
        username: str,
        password: str = TEST_PASSWORD,
        pin: str | None = None,
        role: Role = Role.USER,
    ) -> PrincipalModel:
        principal = PrincipalModel(
            id=str(uuid.uuid4()),
            username=username,
            email=f"{username}@example.com",
            password_hash=hash_password(password),
            pin_hash=hash_pin(pin) if pin else None,
            role=role,
        )
        db_session.add(principal)
        await db_session.commit()
        return principal

    return _create


@pytest.fixture
def create_credential(
    db_session: AsyncSession,
    secret_cipher: SecretCipher,
) -> Callable[..., Awaitable[CredentialModel]]:
    """Factory that stores an encrypted credential for an owner."""

    async def _create(
        owner: PrincipalModel,
        secret: str = "s3cr3t!",
        account_name: str = "Email",
    ) -> CredentialModel:
        credential = CredentialModel(
            owner_id=owner.id,
            account_name=account_name,
            encrypted_password=secret_cipher.encrypt(secret),
            service_url="https://mail.example.com",
        )
        db_session.add(credential)
        await db_session.commit()
        return credential

    return _create


@pytest.fixture
def auth_headers(token_authority: TokenAuthority) -> Callable[[PrincipalModel], dict[str, str]]:
    """Build an Authorization header with a fresh access token."""

    def _headers(principal: PrincipalModel) -> dict[str, str]:
        minted = token_authority.mint(
            principal_id=principal.id,
            username=principal.username,
            roles=[principal.role],
        )
        return {"Authorization": f"Bearer {minted.token}"}

    return _headers
