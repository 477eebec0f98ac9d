"""Certificate router: public verification, admin CRUD, CSV bulk import/export.

Routes:
  POST   /api/certificates/verify     Public lookup by certificate number
  GET    /api/certificates            List every certificate
  POST   /api/certificates            Create one certificate
  POST   /api/certificates/bulk       Create certificates from CSV text
  GET    /api/certificates/template   Download the CSV template
  GET    /api/certificates/export     Download all certificates as CSV
  GET    /api/certificates/{id}       Fetch one certificate
  PATCH  /api/certificates/{id}       Partial update
  DELETE /api/certificates/{id}       Hard delete
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, status
from fastapi.responses import JSONResponse, Response

from app.certificates import controller
from app.certificates.schemas import (
    BulkUploadRequest,
    BulkUploadResponse,
    CertificateCreate,
    CertificateResponse,
    CertificateUpdate,
    DeleteResponse,
    VerifyResponse,
)
from app.certificates.storage import CertificateStore
from app.dependencies import get_certificate_store

router = APIRouter(prefix="/certificates", tags=["Certificates"])


@router.post(
    "/verify",
    response_model=VerifyResponse,
    summary="Verify a certificate by number (public)",
    description="Returns `valid` (200), `inactive` (400, revoked or expired, record included), "
    "`not_found` (404) or `invalid_input` (400). Read-only.",
    responses={
        400: {"model": VerifyResponse, "description": "Inactive certificate or invalid input"},
        404: {"model": VerifyResponse, "description": "No certificate with that number"},
        500: {"model": VerifyResponse, "description": "Storage failure"},
    },
)
async def verify_certificate(
    body: Any = Body(default=None, examples=[{"certificateNumber": "GZ2024001"}]),
    store: CertificateStore = Depends(get_certificate_store),
) -> JSONResponse:
    return await controller.verify_certificate(store, body)


@router.get(
    "",
    response_model=list[CertificateResponse],
    summary="List all certificates",
    description="No pagination or filtering; natural storage order.",
)
async def list_certificates(
    store: CertificateStore = Depends(get_certificate_store),
) -> list[CertificateResponse]:
    return await controller.list_certificates(store)


@router.post(
    "",
    response_model=CertificateResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a certificate",
    description="Returns 400 if the certificate number already exists or the body is invalid.",
)
async def create_certificate(
    body: CertificateCreate,
    store: CertificateStore = Depends(get_certificate_store),
) -> CertificateResponse:
    return await controller.create_certificate(store, body)


@router.post(
    "/bulk",
    response_model=BulkUploadResponse,
    summary="Bulk-create certificates from CSV text",
    description="The whole file is parsed first; any parse error rejects it with 400. "
    "Rows are then created one by one and failures are reported per row "
    "without stopping the batch.",
)
async def bulk_upload(
    body: BulkUploadRequest,
    store: CertificateStore = Depends(get_certificate_store),
) -> BulkUploadResponse:
    return await controller.bulk_upload(store, body)


@router.get(
    "/template",
    response_class=Response,
    summary="Download the bulk-import CSV template",
)
async def csv_template() -> Response:
    return controller.csv_template()


@router.get(
    "/export",
    response_class=Response,
    summary="Export all certificates as CSV",
    description="Same columns and order as the import template.",
)
async def export_certificates(
    store: CertificateStore = Depends(get_certificate_store),
) -> Response:
    return await controller.export_certificates(store)


@router.get(
    "/{certificate_id}",
    response_model=CertificateResponse,
    summary="Get certificate by ID",
)
async def get_certificate(
    certificate_id: str,
    store: CertificateStore = Depends(get_certificate_store),
) -> CertificateResponse:
    return await controller.get_certificate(store, certificate_id)


@router.patch(
    "/{certificate_id}",
    response_model=CertificateResponse,
    summary="Update a certificate",
    description="Only the fields present in the body are changed; `id` cannot be changed.",
)
async def update_certificate(
    certificate_id: str,
    body: CertificateUpdate,
    store: CertificateStore = Depends(get_certificate_store),
) -> CertificateResponse:
    return await controller.update_certificate(store, certificate_id, body)


@router.delete(
    "/{certificate_id}",
    response_model=DeleteResponse,
    summary="Delete a certificate",
)
async def delete_certificate(
    certificate_id: str,
    store: CertificateStore = Depends(get_certificate_store),
) -> DeleteResponse:
    return await controller.delete_certificate(store, certificate_id)
