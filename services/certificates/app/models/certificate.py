import uuid
from datetime import date

from sqlalchemy import Date, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from shared.database.postgres import Base

from .enums import CertificateStatus, certificate_status_enum


class Certificate(Base):
    __tablename__ = "certificates"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    # Uniqueness is also pre-checked by the service; this constraint is the backstop.
    certificate_number: Mapped[str] = mapped_column(
        Text, unique=True, nullable=False
    )
    recipient_name: Mapped[str] = mapped_column(Text, nullable=False)
    course_name: Mapped[str] = mapped_column(Text, nullable=False)
    issue_date: Mapped[date] = mapped_column(Date, nullable=False)
    completion_date: Mapped[date] = mapped_column(Date, nullable=False)
    grade: Mapped[str | None] = mapped_column(Text, nullable=True)
    instructor_name: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[CertificateStatus] = mapped_column(
        certificate_status_enum,
        nullable=False,
        default=CertificateStatus.ACTIVE,
        server_default=CertificateStatus.ACTIVE.value,
    )

    def __repr__(self) -> str:
        return f"<Certificate(number={self.certificate_number}, status={self.status})>"
