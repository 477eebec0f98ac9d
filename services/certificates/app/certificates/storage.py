"""Certificate record store: the persistence seam for the certificates domain.

``CertificateStore`` is the capability the service layer depends on.
``SqlAlchemyCertificateStore`` is the production implementation;
``InMemoryCertificateStore`` backs tests and throwaway local runs.

Absence is reported as ``None`` (or ``False`` for delete), never raised.
"""

from __future__ import annotations

import abc
import uuid
from collections.abc import Iterable
from typing import Any

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import CertificateNumberTakenError
from app.models.certificate import Certificate
from app.models.enums import CertificateStatus

CERTIFICATE_COLUMNS = (
    "id",
    "certificate_number",
    "recipient_name",
    "course_name",
    "issue_date",
    "completion_date",
    "grade",
    "instructor_name",
    "status",
)


class CertificateStore(abc.ABC):
    @abc.abstractmethod
    async def get(self, certificate_id: uuid.UUID) -> Certificate | None: ...

    @abc.abstractmethod
    async def get_by_number(self, certificate_number: str) -> Certificate | None: ...

    @abc.abstractmethod
    async def create(self, data: dict[str, Any]) -> Certificate:
        """Persist a new certificate and return it with its assigned ``id``."""

    @abc.abstractmethod
    async def list_all(self) -> list[Certificate]:
        """All certificates in natural storage order."""

    @abc.abstractmethod
    async def update(
        self, certificate_id: uuid.UUID, fields: dict[str, Any]
    ) -> Certificate | None:
        """Apply ``fields`` to the record; ``id`` is never changed."""

    @abc.abstractmethod
    async def delete(self, certificate_id: uuid.UUID) -> bool:
        """Hard delete. True iff a row was removed."""


# ---------------------------------------------------------------------------
# SQLAlchemy
# ---------------------------------------------------------------------------


class SqlAlchemyCertificateStore(CertificateStore):
    """Each write commits on its own; no transaction spans two certificates."""

    def __init__(self, db: AsyncSession) -> None:
        self._db = db

    async def get(self, certificate_id: uuid.UUID) -> Certificate | None:
        return await self._db.get(Certificate, certificate_id)

    async def get_by_number(self, certificate_number: str) -> Certificate | None:
        return await self._db.scalar(
            select(Certificate).where(Certificate.certificate_number == certificate_number)
        )

    async def create(self, data: dict[str, Any]) -> Certificate:
        fields = {k: v for k, v in data.items() if k != "id"}
        cert = Certificate(**fields)
        self._db.add(cert)
        await self._commit(fields.get("certificate_number", ""))
        await self._db.refresh(cert)
        return cert

    async def list_all(self) -> list[Certificate]:
        result = await self._db.execute(select(Certificate))
        return list(result.scalars().all())

    async def update(
        self, certificate_id: uuid.UUID, fields: dict[str, Any]
    ) -> Certificate | None:
        cert = await self.get(certificate_id)
        if cert is None:
            return None
        for key, value in fields.items():
            if key == "id":
                continue
            setattr(cert, key, value)
        await self._commit(fields.get("certificate_number", cert.certificate_number))
        await self._db.refresh(cert)
        return cert

    async def delete(self, certificate_id: uuid.UUID) -> bool:
        result = await self._db.execute(
            delete(Certificate).where(Certificate.id == certificate_id)
        )
        await self._commit()
        return (result.rowcount or 0) > 0

    async def _commit(self, certificate_number: str = "") -> None:
        try:
            await self._db.commit()
        except IntegrityError as exc:
            # Unique constraint on certificate_number: the pre-check lost a race.
            await self._db.rollback()
            raise CertificateNumberTakenError(certificate_number) from exc
        except SQLAlchemyError:
            await self._db.rollback()
            raise


# ---------------------------------------------------------------------------
# In-memory
# ---------------------------------------------------------------------------


def _copy(cert: Certificate) -> Certificate:
    return Certificate(**{column: getattr(cert, column) for column in CERTIFICATE_COLUMNS})


class InMemoryCertificateStore(CertificateStore):
    """Insertion-ordered dict store. Hands out copies, never the stored rows."""

    def __init__(self, certificates: Iterable[Certificate] = ()) -> None:
        self._rows: dict[uuid.UUID, Certificate] = {}
        for cert in certificates:
            self._rows[cert.id] = _copy(cert)

    async def get(self, certificate_id: uuid.UUID) -> Certificate | None:
        row = self._rows.get(certificate_id)
        return _copy(row) if row is not None else None

    async def get_by_number(self, certificate_number: str) -> Certificate | None:
        row = self._find_by_number(certificate_number)
        return _copy(row) if row is not None else None

    async def create(self, data: dict[str, Any]) -> Certificate:
        fields = {k: v for k, v in data.items() if k != "id"}
        number = fields.get("certificate_number", "")
        if self._find_by_number(number) is not None:
            raise CertificateNumberTakenError(number)
        fields.setdefault("status", CertificateStatus.ACTIVE)
        fields.setdefault("grade", None)
        fields.setdefault("instructor_name", None)
        row = Certificate(id=uuid.uuid4(), **fields)
        self._rows[row.id] = row
        return _copy(row)

    async def list_all(self) -> list[Certificate]:
        return [_copy(row) for row in self._rows.values()]

    async def update(
        self, certificate_id: uuid.UUID, fields: dict[str, Any]
    ) -> Certificate | None:
        row = self._rows.get(certificate_id)
        if row is None:
            return None
        number = fields.get("certificate_number")
        if number is not None:
            other = self._find_by_number(number)
            if other is not None and other.id != certificate_id:
                raise CertificateNumberTakenError(number)
        for key, value in fields.items():
            if key == "id":
                continue
            setattr(row, key, value)
        return _copy(row)

    async def delete(self, certificate_id: uuid.UUID) -> bool:
        return self._rows.pop(certificate_id, None) is not None

    def _find_by_number(self, certificate_number: str) -> Certificate | None:
        for row in self._rows.values():
            if row.certificate_number == certificate_number:
                return row
        return None
