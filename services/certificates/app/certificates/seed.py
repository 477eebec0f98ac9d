"""Sample certificates inserted into an empty store on first startup."""

from __future__ import annotations

import logging
from datetime import date

from app.certificates.schemas import CertificateCreate
from app.certificates.storage import CertificateStore

logger = logging.getLogger(__name__)

SAMPLE_CERTIFICATES: tuple[CertificateCreate, ...] = (
    CertificateCreate(
        certificate_number="GZ2024001",
        recipient_name="John Smith",
        course_name="Advanced Digital Marketing",
        issue_date=date(2024, 1, 15),
        completion_date=date(2024, 1, 10),
        grade="A",
        instructor_name="Dr. Sarah Johnson",
    ),
    CertificateCreate(
        certificate_number="GZ2024002",
        recipient_name="Emily Davis",
        course_name="Data Analytics Fundamentals",
        issue_date=date(2024, 2, 20),
        completion_date=date(2024, 2, 18),
        grade="B+",
        instructor_name="Prof. Michael Chen",
    ),
    CertificateCreate(
        certificate_number="GZ2024003",
        recipient_name="Robert Wilson",
        course_name="Project Management Professional",
        issue_date=date(2024, 3, 10),
        completion_date=date(2024, 3, 8),
        grade="A-",
        instructor_name="Dr. Lisa Rodriguez",
    ),
)


async def seed_certificates(store: CertificateStore) -> int:
    """Insert the samples unless the store already has data. Returns rows inserted."""
    if await store.list_all():
        logger.info("Certificates already present, skipping seed")
        return 0

    for payload in SAMPLE_CERTIFICATES:
        await store.create(payload.model_dump())
    logger.info("Seeded %d sample certificates", len(SAMPLE_CERTIFICATES))
    return len(SAMPLE_CERTIFICATES)
