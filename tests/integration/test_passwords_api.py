"""Integration tests for password generation and evaluation."""

import pytest
from httpx import AsyncClient

from keybastion.domain.services.password_forge import NUMERIC_CHARS


@pytest.mark.asyncio
async def test_generate_with_defaults(client: AsyncClient):
    response = await client.post("/api/passwords/generate", json={})

    assert response.status_code == 200
    body = response.json()
    assert len(body["password"]) == 12
    assert body["strength"] == 100


@pytest.mark.asyncio
async def test_generate_digits_only(client: AsyncClient):
    response = await client.post(
        "/api/passwords/generate",
        json={
            "length": 8,
            "includeLowercase": False,
            "includeUppercase": False,
            "includeNumbers": True,
            "includeSpecial": False,
        },
    )

    assert response.status_code == 200
    password = response.json()["password"]
    assert len(password) == 8
    assert set(password) <= set(NUMERIC_CHARS)
    assert response.json()["strength"] == 32 + 15


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "payload",
    [
        {"length": 3},
        {"length": 3_000_000},
        {
            "includeLowercase": False,
            "includeUppercase": False,
            "includeNumbers": False,
            "includeSpecial": False,
        },
    ],
)
async def test_generate_invalid_parameters(client: AsyncClient, payload):
    response = await client.post("/api/passwords/generate", json=payload)

    assert response.status_code == 400
    assert response.json()["error"] == "Invalid parameters"


@pytest.mark.asyncio
async def test_evaluate(client: AsyncClient):
    response = await client.post("/api/passwords/evaluate", json={"password": "Aa1!"})

    assert response.status_code == 200
    assert response.json() == {"strength": 76}
    assert "no-cache" in response.headers["Cache-Control"]
    assert response.headers["Pragma"] == "no-cache"


@pytest.mark.asyncio
@pytest.mark.parametrize("payload", [{"password": ""}, {}])
async def test_evaluate_empty_password(client: AsyncClient, payload):
    response = await client.post("/api/passwords/evaluate", json=payload)
    assert response.status_code == 400
