"""Certificate domain Pydantic V2 schemas.

Field names are snake_case in Python and camelCase on the wire
(``certificateNumber``, ``recipientName`` ...).
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Annotated, Any
from uuid import UUID

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from app.models.enums import CertificateStatus, VerificationStatus


def _coerce_date(value: Any) -> Any:
    """Accept ``YYYY-MM-DD`` as well as full ISO datetimes; keep the date part."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, str) and "T" in value:
        try:
            return datetime.fromisoformat(value.strip().replace("Z", "+00:00")).date()
        except ValueError:
            return value
    return value


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


CertificateDate = Annotated[date, BeforeValidator(_coerce_date)]


class _Base(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
    )


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class CertificateCreate(_Base):
    """Certificate fields accepted on create. A client-supplied ``id`` is dropped."""

    model_config = ConfigDict(extra="ignore")

    certificate_number: str = Field(min_length=1)
    recipient_name: str = Field(min_length=1)
    course_name: str = Field(min_length=1)
    issue_date: CertificateDate
    completion_date: CertificateDate
    grade: str | None = None
    instructor_name: str | None = None
    status: CertificateStatus = CertificateStatus.ACTIVE

    @field_validator("grade", "instructor_name", mode="before")
    @classmethod
    def _blank_optional_text(cls, value: Any) -> Any:
        return _blank_to_none(value)


_NON_NULLABLE = (
    "certificate_number",
    "recipient_name",
    "course_name",
    "issue_date",
    "completion_date",
    "status",
)


class CertificateUpdate(_Base):
    """Partial update: only fields present in the body are applied."""

    model_config = ConfigDict(extra="ignore")

    certificate_number: str | None = Field(default=None, min_length=1)
    recipient_name: str | None = Field(default=None, min_length=1)
    course_name: str | None = Field(default=None, min_length=1)
    issue_date: CertificateDate | None = None
    completion_date: CertificateDate | None = None
    grade: str | None = None
    instructor_name: str | None = None
    status: CertificateStatus | None = None

    @field_validator("grade", "instructor_name", mode="before")
    @classmethod
    def _blank_optional_text(cls, value: Any) -> Any:
        return _blank_to_none(value)

    @model_validator(mode="after")
    def _required_fields_not_null(self) -> CertificateUpdate:
        for name in _NON_NULLABLE:
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{to_camel(name)} cannot be null")
        return self


class VerifyRequest(_Base):
    certificate_number: str = Field(min_length=1, description="Certificate number to look up.")


class BulkUploadRequest(_Base):
    csv: str = Field(
        min_length=1,
        description="CSV text: header row followed by one certificate per line.",
    )


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class CertificateResponse(_Base):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    certificate_number: str
    recipient_name: str
    course_name: str
    issue_date: date
    completion_date: date
    grade: str | None = None
    instructor_name: str | None = None
    status: CertificateStatus


class VerifyResponse(_Base):
    status: VerificationStatus
    message: str
    certificate: CertificateResponse | None = None


class DeleteResponse(_Base):
    message: str


class BulkUploadFailure(_Base):
    row: int = Field(description="1-based CSV line number (header is row 1).")
    error: str
    data: dict[str, Any]


class BulkUploadResponse(_Base):
    success: int
    failed: list[BulkUploadFailure]
