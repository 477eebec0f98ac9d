# Import all models so Alembic can discover them via Base.metadata
from .certificate import Certificate
from .enums import CertificateStatus, VerificationStatus

__all__ = [
    "Certificate",
    "CertificateStatus",
    "VerificationStatus",
]
