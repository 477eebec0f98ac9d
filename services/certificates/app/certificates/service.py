"""Certificate service: verification, admin CRUD and bulk upload.

Pure business logic, no FastAPI imports. Every operation goes through a
``CertificateStore`` so the storage backend can be swapped in tests.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any
from uuid import UUID

from app.certificates.schemas import CertificateCreate
from app.certificates.storage import CertificateStore
from app.exceptions import CertificateNotFoundError, CertificateNumberTakenError
from app.models.certificate import Certificate
from app.models.enums import CertificateStatus, VerificationStatus

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VerificationResult:
    status: VerificationStatus
    certificate: Certificate | None = None


@dataclass(frozen=True)
class BulkUploadFailure:
    row: int
    error: str
    data: dict[str, Any]


@dataclass
class BulkUploadResult:
    success: int = 0
    failed: list[BulkUploadFailure] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Public verification
# ---------------------------------------------------------------------------


async def verify_certificate(
    store: CertificateStore,
    certificate_number: str,
) -> VerificationResult:
    """Classify a certificate number as valid / inactive / not_found.

    Blank input is ``invalid_input`` and never reaches the store. Revoked and
    expired certificates are returned alongside ``inactive`` so callers can
    still show their details.
    """
    number = certificate_number.strip() if isinstance(certificate_number, str) else ""
    if not number:
        return VerificationResult(VerificationStatus.INVALID_INPUT)

    cert = await store.get_by_number(number)
    if cert is None:
        return VerificationResult(VerificationStatus.NOT_FOUND)
    if cert.status != CertificateStatus.ACTIVE:
        return VerificationResult(VerificationStatus.INACTIVE, cert)
    return VerificationResult(VerificationStatus.VALID, cert)


# ---------------------------------------------------------------------------
# Admin CRUD
# ---------------------------------------------------------------------------


async def list_certificates(store: CertificateStore) -> list[Certificate]:
    return await store.list_all()


async def get_certificate(store: CertificateStore, certificate_id: UUID) -> Certificate:
    cert = await store.get(certificate_id)
    if cert is None:
        raise CertificateNotFoundError(str(certificate_id))
    return cert


async def create_certificate(
    store: CertificateStore,
    payload: CertificateCreate,
) -> Certificate:
    # Read-then-write: two concurrent creates with one number can both pass
    # this check. The unique constraint in the store is the only backstop.
    existing = await store.get_by_number(payload.certificate_number)
    if existing is not None:
        raise CertificateNumberTakenError(payload.certificate_number)

    cert = await store.create(payload.model_dump())
    logger.info("Created certificate %s (id=%s)", cert.certificate_number, cert.id)
    return cert


async def update_certificate(
    store: CertificateStore,
    certificate_id: UUID,
    fields: dict[str, Any],
) -> Certificate:
    """Apply a partial update. Only keys present in ``fields`` change."""
    fields = {k: v for k, v in fields.items() if k != "id"}

    number = fields.get("certificate_number")
    if number is not None:
        holder = await store.get_by_number(number)
        if holder is not None and holder.id != certificate_id:
            raise CertificateNumberTakenError(number)

    cert = await store.update(certificate_id, fields)
    if cert is None:
        raise CertificateNotFoundError(str(certificate_id))
    logger.info("Updated certificate %s fields=%s", certificate_id, sorted(fields))
    return cert


async def delete_certificate(store: CertificateStore, certificate_id: UUID) -> None:
    deleted = await store.delete(certificate_id)
    if not deleted:
        raise CertificateNotFoundError(str(certificate_id))
    logger.info("Deleted certificate %s", certificate_id)


# ---------------------------------------------------------------------------
# Bulk upload
# ---------------------------------------------------------------------------


async def bulk_create(
    store: CertificateStore,
    records: Sequence[CertificateCreate],
) -> BulkUploadResult:
    """Create parsed CSV records one at a time, in order.

    A failing record is collected and the loop moves on. ``row`` is the CSV
    line number of the record (data starts on line 2, after the header).
    """
    result = BulkUploadResult()
    for index, record in enumerate(records):
        try:
            await create_certificate(store, record)
        except CertificateNumberTakenError as exc:
            result.failed.append(_failure(index, str(exc), record))
        except Exception as exc:
            logger.warning(
                "Bulk create failed for row=%d number=%s",
                index + 2, record.certificate_number, exc_info=True,
            )
            result.failed.append(_failure(index, str(exc) or "Unknown error", record))
        else:
            result.success += 1

    logger.info(
        "Bulk upload finished: %d created, %d failed", result.success, len(result.failed)
    )
    return result


def _failure(index: int, error: str, record: CertificateCreate) -> BulkUploadFailure:
    return BulkUploadFailure(
        row=index + 2,
        error=error,
        data=record.model_dump(mode="json", by_alias=True),
    )
