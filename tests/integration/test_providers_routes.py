from __future__ import annotations

import pytest
from fastapi import status
from httpx import AsyncClient
from src.domain.roles import Role

from tests.utils import auth_headers

pytestmark = pytest.mark.asyncio


async def _create_provider(client: AsyncClient, name: str, **extra) -> dict:
    response = await client.post(
        "/providers", json={"name": name, **extra}, headers=auth_headers(Role.HR_SUPER)
    )
    assert response.status_code == status.HTTP_201_CREATED
    return response.json()


async def test_providers_listed_by_name(async_client: AsyncClient) -> None:
    for name in ("Udemy", "Coursera", "Stepik"):
        await _create_provider(async_client, name)

    response = await async_client.get("/providers", headers=auth_headers(Role.EMPLOYEE))

    assert response.status_code == status.HTTP_200_OK
    assert [item["name"] for item in response.json()] == ["Coursera", "Stepik", "Udemy"]


async def test_create_provider_requires_hr_super(async_client: AsyncClient) -> None:
    response = await async_client.post(
        "/providers", json={"name": "edX"}, headers=auth_headers(Role.SUPER_ADMIN)
    )

    assert response.status_code == status.HTTP_403_FORBIDDEN


async def test_duplicate_provider_name(async_client: AsyncClient) -> None:
    await _create_provider(async_client, "Coursera")

    response = await async_client.post(
        "/providers", json={"name": " coursera "}, headers=auth_headers(Role.HR_SUPER)
    )

    assert response.status_code == status.HTTP_409_CONFLICT


async def test_update_provider(async_client: AsyncClient) -> None:
    provider = await _create_provider(async_client, "Stepik", website="https://stepik.org")
    await _create_provider(async_client, "edX")
    headers = auth_headers(Role.HR_SUPER)

    response = await async_client.patch(
        f"/providers/{provider['id']}",
        json={"contact_email": "hello@stepik.org", "is_active": False},
        headers=headers,
    )
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["contact_email"] == "hello@stepik.org"
    assert response.json()["website"] == "https://stepik.org"

    active = await async_client.get("/providers", params={"active_only": True}, headers=headers)
    assert [item["name"] for item in active.json()] == ["edX"]

    clash = await async_client.patch(
        f"/providers/{provider['id']}", json={"name": "EDX"}, headers=headers
    )
    assert clash.status_code == status.HTTP_409_CONFLICT


async def test_delete_provider_keeps_courses(async_client: AsyncClient) -> None:
    provider = await _create_provider(async_client, "LinkedIn Learning")
    headers = auth_headers(Role.HR_SUPER)
    course = await async_client.post(
        "/courses",
        json={"training_name": "Leadership", "provider_id": provider["id"]},
        headers=headers,
    )
    assert course.json()["provider_id"] == provider["id"]

    response = await async_client.delete(f"/providers/{provider['id']}", headers=headers)

    assert response.status_code == status.HTTP_200_OK
    remaining = await async_client.get(f"/courses/{course.json()['id']}", headers=headers)
    assert remaining.status_code == status.HTTP_200_OK
    assert remaining.json()["provider_id"] is None

    missing = await async_client.get(f"/providers/{provider['id']}", headers=headers)
    assert missing.status_code == status.HTTP_404_NOT_FOUND
