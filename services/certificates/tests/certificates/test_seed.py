import logging
from datetime import date

import pytest
from fastapi.testclient import TestClient

from app.certificates.seed import SAMPLE_CERTIFICATES, seed_certificates
from app.certificates.storage import InMemoryCertificateStore
from app.config import Settings
from app.main import create_app


@pytest.mark.asyncio
async def test_seed_empty_store() -> None:
    store = InMemoryCertificateStore()

    inserted = await seed_certificates(store)

    assert inserted == 3
    numbers = [c.certificate_number for c in await store.list_all()]
    assert numbers == ["GZ2024001", "GZ2024002", "GZ2024003"]


@pytest.mark.asyncio
async def test_seed_is_idempotent() -> None:
    store = InMemoryCertificateStore()

    await seed_certificates(store)
    again = await seed_certificates(store)

    assert again == 0
    assert len(await store.list_all()) == 3


@pytest.mark.asyncio
async def test_seed_skips_non_empty_store() -> None:
    store = InMemoryCertificateStore()
    await store.create(
        {
            "certificate_number": "OWN-1",
            "recipient_name": "Existing",
            "course_name": "Course",
            "issue_date": date(2024, 1, 2),
            "completion_date": date(2024, 1, 1),
        }
    )

    assert await seed_certificates(store) == 0
    assert [c.certificate_number for c in await store.list_all()] == ["OWN-1"]


@pytest.mark.asyncio
async def test_seed_into_database(sql_store) -> None:
    assert await seed_certificates(sql_store) == len(SAMPLE_CERTIFICATES)

    cert = await sql_store.get_by_number("GZ2024002")
    assert cert.recipient_name == "Emily Davis"
    assert cert.grade == "B+"


# ---------------------------------------------------------------------------
# Startup
# ---------------------------------------------------------------------------


def test_startup_seeds_database(tmp_path) -> None:
    settings = Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'startup.db'}",
        create_tables_on_startup=True,
        seed_on_startup=True,
    )

    with TestClient(create_app(settings)) as c:
        listed = c.get("/api/certificates").json()
        verified = c.post("/api/certificates/verify", json={"certificateNumber": "GZ2024001"})

    assert sorted(cert["certificateNumber"] for cert in listed) == [
        "GZ2024001",
        "GZ2024002",
        "GZ2024003",
    ]
    assert verified.status_code == 200
    assert verified.json()["certificate"]["recipientName"] == "John Smith"

    # A second start against the same database adds nothing.
    with TestClient(create_app(settings)) as c:
        assert len(c.get("/api/certificates").json()) == 3


def test_seed_failure_does_not_block_startup(tmp_path, caplog) -> None:
    # No tables: the seed query fails.
    settings = Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'empty.db'}",
        create_tables_on_startup=False,
        seed_on_startup=True,
    )

    with caplog.at_level(logging.ERROR):
        with TestClient(create_app(settings)) as c:
            response = c.get("/health")

    assert response.status_code == 200
    assert any("Failed to seed certificates" in r.getMessage() for r in caplog.records)


def test_crud_against_database(sql_client: TestClient, make_payload) -> None:
    created = sql_client.post("/api/certificates", json=make_payload())
    assert created.status_code == 201
    cert_id = created.json()["id"]

    duplicate = sql_client.post("/api/certificates", json=make_payload())
    assert duplicate.status_code == 400

    patched = sql_client.patch(f"/api/certificates/{cert_id}", json={"status": "revoked"})
    assert patched.json()["status"] == "revoked"

    verified = sql_client.post("/api/certificates/verify", json={"certificateNumber": "GZ2024100"})
    assert verified.status_code == 400
    assert verified.json()["status"] == "inactive"

    assert sql_client.delete(f"/api/certificates/{cert_id}").status_code == 200
    assert sql_client.get("/api/certificates").json() == []


def test_long_grade_stored_in_database(sql_client: TestClient, make_payload) -> None:
    created = sql_client.post(
        "/api/certificates", json=make_payload(grade="First Class with Distinction")
    )

    assert created.status_code == 201
    fetched = sql_client.get(f"/api/certificates/{created.json()['id']}").json()
    assert fetched["grade"] == "First Class with Distinction"
