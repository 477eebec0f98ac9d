from functools import lru_cache

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.certificates.storage import CertificateStore, SqlAlchemyCertificateStore
from app.config import Settings
from app.database import get_db


@lru_cache
def get_settings() -> Settings:
    return Settings()


async def get_certificate_store(
    db: AsyncSession = Depends(get_db),
) -> CertificateStore:
    return SqlAlchemyCertificateStore(db)
