"""Bulk-import CSV parser and the matching template/export writer.

Format (header names are case-insensitive, any column order)::

    certificateNumber,recipientName,courseName,completionDate,issueDate,grade,instructorName,status
    GZ2024004,Jane Doe,Web Development Fundamentals,2024-01-15,2024-01-20,A,Prof. Smith,active

Values are split on bare commas. There is no quoting or escaping, so a value
that itself contains a comma shifts every later column of its row.

Parsing is all-or-nothing: the first bad row aborts the whole file. Per-row
fault tolerance lives in the upload step (``service.bulk_create``).
"""

from __future__ import annotations

from collections.abc import Iterable

from pydantic import ValidationError

from app.certificates.schemas import CertificateCreate
from app.exceptions import CsvParseError
from app.models.certificate import Certificate
from app.models.enums import CertificateStatus

REQUIRED_COLUMNS = (
    "certificatenumber",
    "recipientname",
    "coursename",
    "completiondate",
    "issuedate",
)

TEMPLATE_COLUMNS = (
    "certificateNumber",
    "recipientName",
    "courseName",
    "completionDate",
    "issueDate",
    "grade",
    "instructorName",
    "status",
)

_TEMPLATE_ROWS = (
    ("GZ2024004", "Jane Doe", "Web Development Fundamentals", "2024-01-15", "2024-01-20", "A", "Prof. Smith", "active"),
    ("GZ2024005", "Bob Johnson", "Data Science Basics", "2024-02-10", "2024-02-15", "B+", "Dr. Wilson", "active"),
)

TEMPLATE_FILENAME = "certificate_template.csv"


def parse_certificates_csv(text: str) -> list[CertificateCreate]:
    """Parse pasted CSV text into validated create payloads.

    Raises:
        CsvParseError: on the first structural or validation problem. The
            message names the 1-based row (the header is row 1).
    """
    lines = text.strip().split("\n")
    if len(lines) < 2:
        raise CsvParseError("CSV must have at least a header row and one data row")

    header = [name.strip().lower() for name in lines[0].split(",")]
    missing = [column for column in REQUIRED_COLUMNS if column not in header]
    if missing:
        raise CsvParseError(f"Missing required columns: {', '.join(missing)}")

    records: list[CertificateCreate] = []
    for row_number, line in enumerate(lines[1:], start=2):
        values = [value.strip() for value in line.split(",")]
        if len(values) != len(header):
            raise CsvParseError(
                f"Row {row_number}: Expected {len(header)} columns, got {len(values)}"
            )
        row = dict(zip(header, values))
        try:
            records.append(_to_certificate(row))
        except ValidationError as exc:
            raise CsvParseError(f"Row {row_number}: {_describe(exc)}") from exc

    return records


def _to_certificate(row: dict[str, str]) -> CertificateCreate:
    return CertificateCreate.model_validate(
        {
            "certificateNumber": row["certificatenumber"],
            "recipientName": row["recipientname"],
            "courseName": row["coursename"],
            "completionDate": row["completiondate"],
            "issueDate": row["issuedate"],
            "grade": row.get("grade") or None,
            "instructorName": row.get("instructorname") or None,
            "status": (row.get("status") or CertificateStatus.ACTIVE.value).lower(),
        }
    )


def _describe(exc: ValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"])
        parts.append(f"{location}: {error['msg']}" if location else error["msg"])
    return "; ".join(parts)


# ---------------------------------------------------------------------------
# Writing
# ---------------------------------------------------------------------------


def _render(rows: Iterable[Iterable[str]]) -> str:
    lines = [",".join(TEMPLATE_COLUMNS)]
    lines.extend(",".join(row) for row in rows)
    return "\n".join(lines) + "\n"


def render_template_csv() -> str:
    return _render(_TEMPLATE_ROWS)


def render_certificates_csv(certificates: Iterable[Certificate]) -> str:
    """Export in the import column order so the file can be re-imported as-is."""
    return _render(
        (
            cert.certificate_number,
            cert.recipient_name,
            cert.course_name,
            cert.completion_date.isoformat(),
            cert.issue_date.isoformat(),
            cert.grade or "",
            cert.instructor_name or "",
            CertificateStatus(cert.status).value,
        )
        for cert in certificates
    )
