from datetime import date

import pytest
from fastapi.testclient import TestClient

from app.certificates.service import verify_certificate
from app.certificates.storage import InMemoryCertificateStore
from app.dependencies import get_certificate_store
from app.main import create_app
from app.models import CertificateStatus, VerificationStatus

VERIFY_URL = "/api/certificates/verify"


class CountingStore(InMemoryCertificateStore):
    def __init__(self) -> None:
        super().__init__()
        self.lookups = 0

    async def get_by_number(self, certificate_number):
        self.lookups += 1
        return await super().get_by_number(certificate_number)


class BrokenStore(InMemoryCertificateStore):
    async def get_by_number(self, certificate_number):
        raise RuntimeError("connection reset")


# ---------------------------------------------------------------------------
# HTTP
# ---------------------------------------------------------------------------


def test_verify_active_certificate(client: TestClient, make_payload) -> None:
    client.post("/api/certificates", json=make_payload())

    response = client.post(VERIFY_URL, json={"certificateNumber": "GZ2024100"})

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "valid"
    assert data["message"] == "Certificate verified successfully"
    assert data["certificate"]["certificateNumber"] == "GZ2024100"
    assert data["certificate"]["recipientName"] == "Ada Lovelace"
    assert data["certificate"]["issueDate"] == "2024-04-02"
    assert data["certificate"]["status"] == "active"


@pytest.mark.parametrize("status", ["revoked", "expired"])
def test_verify_inactive_certificate_returns_record(
    client: TestClient, make_payload, status: str
) -> None:
    client.post("/api/certificates", json=make_payload(status=status))

    response = client.post(VERIFY_URL, json={"certificateNumber": "GZ2024100"})

    assert response.status_code == 400
    data = response.json()
    assert data["status"] == "inactive"
    assert data["message"] == "Certificate is not active"
    assert data["certificate"]["status"] == status


def test_verify_unknown_number(client: TestClient) -> None:
    response = client.post(VERIFY_URL, json={"certificateNumber": "NOPE-1"})

    assert response.status_code == 404
    data = response.json()
    assert data["status"] == "not_found"
    assert "certificate" not in data


def test_verify_is_exact_match(client: TestClient, make_payload) -> None:
    client.post("/api/certificates", json=make_payload())

    response = client.post(VERIFY_URL, json={"certificateNumber": "gz2024100"})

    assert response.status_code == 404


def test_verify_strips_surrounding_whitespace(client: TestClient, make_payload) -> None:
    client.post("/api/certificates", json=make_payload())

    response = client.post(VERIFY_URL, json={"certificateNumber": "  GZ2024100 "})

    assert response.status_code == 200
    assert response.json()["status"] == "valid"


@pytest.mark.parametrize(
    "body",
    [
        {"certificateNumber": ""},
        {"certificateNumber": "   "},
        {"certificateNumber": None},
        {"certificateNumber": 42},
        {},
    ],
)
def test_verify_invalid_input(client: TestClient, body: dict) -> None:
    response = client.post(VERIFY_URL, json=body)

    assert response.status_code == 400
    data = response.json()
    assert data["status"] == "invalid_input"
    assert data["message"] == "Invalid certificate number"


def test_verify_without_body(client: TestClient) -> None:
    response = client.post(VERIFY_URL)

    assert response.status_code == 400
    assert response.json()["status"] == "invalid_input"


def test_verify_does_not_modify_records(client: TestClient, make_payload) -> None:
    client.post("/api/certificates", json=make_payload(status="revoked"))
    before = client.get("/api/certificates").json()

    client.post(VERIFY_URL, json={"certificateNumber": "GZ2024100"})
    client.post(VERIFY_URL, json={"certificateNumber": "missing"})

    assert client.get("/api/certificates").json() == before


def test_verify_storage_failure_returns_error(settings) -> None:
    app = create_app(settings)
    app.dependency_overrides[get_certificate_store] = lambda: BrokenStore()
    with TestClient(app) as c:
        response = c.post(VERIFY_URL, json={"certificateNumber": "GZ2024001"})

    assert response.status_code == 500
    data = response.json()
    assert data["status"] == "error"
    assert data["message"] == "Internal server error"


# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_blank_number_skips_lookup() -> None:
    store = CountingStore()

    result = await verify_certificate(store, "  ")

    assert result.status == VerificationStatus.INVALID_INPUT
    assert result.certificate is None
    assert store.lookups == 0


@pytest.mark.asyncio
async def test_service_classifies_by_status() -> None:
    store = InMemoryCertificateStore()
    await store.create(
        {
            "certificate_number": "R-1",
            "recipient_name": "R",
            "course_name": "C",
            "issue_date": date(2024, 1, 2),
            "completion_date": date(2024, 1, 1),
            "status": CertificateStatus.REVOKED,
        }
    )
    await store.create(
        {
            "certificate_number": "A-1",
            "recipient_name": "A",
            "course_name": "C",
            "issue_date": date(2024, 1, 2),
            "completion_date": date(2024, 1, 1),
        }
    )

    revoked = await verify_certificate(store, "R-1")
    active = await verify_certificate(store, "A-1")
    missing = await verify_certificate(store, "X-1")

    assert revoked.status == VerificationStatus.INACTIVE
    assert revoked.certificate.certificate_number == "R-1"
    assert active.status == VerificationStatus.VALID
    assert missing.status == VerificationStatus.NOT_FOUND
    assert missing.certificate is None
