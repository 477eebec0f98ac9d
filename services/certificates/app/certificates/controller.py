"""Certificate controller: maps service results to HTTP responses."""

from __future__ import annotations

import logging
from typing import Any
from uuid import UUID

from fastapi import HTTPException, status
from fastapi.responses import JSONResponse, Response
from pydantic import ValidationError

from app.certificates import service
from app.certificates.csv_import import (
    TEMPLATE_FILENAME,
    parse_certificates_csv,
    render_certificates_csv,
    render_template_csv,
)
from app.certificates.schemas import (
    BulkUploadFailure,
    BulkUploadRequest,
    BulkUploadResponse,
    CertificateCreate,
    CertificateResponse,
    CertificateUpdate,
    DeleteResponse,
    VerifyRequest,
    VerifyResponse,
)
from app.certificates.storage import CertificateStore
from app.exceptions import (
    CertificateNotFoundError,
    CertificateNumberTakenError,
    CsvParseError,
)
from app.models.certificate import Certificate
from app.models.enums import VerificationStatus

logger = logging.getLogger(__name__)

_VERIFY_HTTP_STATUS = {
    VerificationStatus.VALID: status.HTTP_200_OK,
    VerificationStatus.INACTIVE: status.HTTP_400_BAD_REQUEST,
    VerificationStatus.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    VerificationStatus.INVALID_INPUT: status.HTTP_400_BAD_REQUEST,
    VerificationStatus.ERROR: status.HTTP_500_INTERNAL_SERVER_ERROR,
}

_VERIFY_MESSAGES = {
    VerificationStatus.VALID: "Certificate verified successfully",
    VerificationStatus.INACTIVE: "Certificate is not active",
    VerificationStatus.NOT_FOUND: "Certificate not found",
    VerificationStatus.INVALID_INPUT: "Invalid certificate number",
    VerificationStatus.ERROR: "Internal server error",
}


def _handle_domain_error(exc: Exception) -> HTTPException:
    if isinstance(exc, CertificateNotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Certificate not found")
    if isinstance(exc, CertificateNumberTakenError):
        return HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Certificate number already exists",
        )
    if isinstance(exc, CsvParseError):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
    logger.error("Certificate operation failed", exc_info=exc)
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Internal server error"
    )


def _parse_id(raw: str) -> UUID:
    # Ids are opaque to clients; anything that is not one of ours is simply absent.
    try:
        return UUID(raw)
    except ValueError:
        raise CertificateNotFoundError(raw) from None


def _to_response(cert: Certificate) -> CertificateResponse:
    return CertificateResponse.model_validate(cert)


# ---------------------------------------------------------------------------
# Public verification
# ---------------------------------------------------------------------------


def _verify_response(
    outcome: VerificationStatus,
    cert: Certificate | None = None,
) -> JSONResponse:
    body = VerifyResponse(
        status=outcome,
        message=_VERIFY_MESSAGES[outcome],
        certificate=_to_response(cert) if cert is not None else None,
    )
    return JSONResponse(
        status_code=_VERIFY_HTTP_STATUS[outcome],
        content=body.model_dump(mode="json", by_alias=True, exclude_none=True),
    )


async def verify_certificate(store: CertificateStore, body: Any) -> JSONResponse:
    try:
        request = VerifyRequest.model_validate(body)
    except ValidationError:
        return _verify_response(VerificationStatus.INVALID_INPUT)

    try:
        result = await service.verify_certificate(store, request.certificate_number)
    except Exception:
        logger.exception("Certificate verification failed")
        return _verify_response(VerificationStatus.ERROR)
    return _verify_response(result.status, result.certificate)


# ---------------------------------------------------------------------------
# Admin CRUD
# ---------------------------------------------------------------------------


async def list_certificates(store: CertificateStore) -> list[CertificateResponse]:
    try:
        certs = await service.list_certificates(store)
    except Exception as exc:
        raise _handle_domain_error(exc) from exc
    return [_to_response(c) for c in certs]


async def get_certificate(store: CertificateStore, certificate_id: str) -> CertificateResponse:
    try:
        cert = await service.get_certificate(store, _parse_id(certificate_id))
        return _to_response(cert)
    except Exception as exc:
        raise _handle_domain_error(exc) from exc


async def create_certificate(
    store: CertificateStore,
    body: CertificateCreate,
) -> CertificateResponse:
    try:
        cert = await service.create_certificate(store, body)
        return _to_response(cert)
    except Exception as exc:
        raise _handle_domain_error(exc) from exc


async def update_certificate(
    store: CertificateStore,
    certificate_id: str,
    body: CertificateUpdate,
) -> CertificateResponse:
    try:
        cert = await service.update_certificate(
            store, _parse_id(certificate_id), body.model_dump(exclude_unset=True),
        )
        return _to_response(cert)
    except Exception as exc:
        raise _handle_domain_error(exc) from exc


async def delete_certificate(store: CertificateStore, certificate_id: str) -> DeleteResponse:
    try:
        await service.delete_certificate(store, _parse_id(certificate_id))
    except Exception as exc:
        raise _handle_domain_error(exc) from exc
    return DeleteResponse(message="Certificate deleted successfully")


# ---------------------------------------------------------------------------
# Bulk import / export
# ---------------------------------------------------------------------------


async def bulk_upload(store: CertificateStore, body: BulkUploadRequest) -> BulkUploadResponse:
    try:
        records = parse_certificates_csv(body.csv)
    except CsvParseError as exc:
        raise _handle_domain_error(exc) from exc

    result = await service.bulk_create(store, records)
    return BulkUploadResponse(
        success=result.success,
        failed=[
            BulkUploadFailure(row=f.row, error=f.error, data=f.data) for f in result.failed
        ],
    )


def csv_template() -> Response:
    return Response(
        content=render_template_csv(),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{TEMPLATE_FILENAME}"'},
    )


async def export_certificates(store: CertificateStore) -> Response:
    try:
        certs = await service.list_certificates(store)
    except Exception as exc:
        raise _handle_domain_error(exc) from exc
    return Response(
        content=render_certificates_csv(certs),
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="certificates.csv"'},
    )
