import enum

from sqlalchemy import Enum as SAEnum


class CertificateStatus(str, enum.Enum):
    ACTIVE = "active"
    REVOKED = "revoked"
    EXPIRED = "expired"


class VerificationStatus(str, enum.Enum):
    """Outcome of a public lookup by certificate number."""

    VALID = "valid"
    INACTIVE = "inactive"
    NOT_FOUND = "not_found"
    INVALID_INPUT = "invalid_input"
    ERROR = "error"


# Stored by value ("active", not "ACTIVE") so existing rows and CSV input agree.
certificate_status_enum = SAEnum(
    CertificateStatus,
    name="certificate_status",
    values_callable=lambda members: [m.value for m in members],
    validate_strings=True,
)
