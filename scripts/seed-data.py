#!/usr/bin/env python3
"""
Seed the certificates database with the sample certificates.
Run from repo root: python scripts/seed-data.py
Uses DATABASE_URL from env or .env. Does nothing if the table already has rows.
"""
import sys
from pathlib import Path

# Repo root on path for shared and service imports
repo_root = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(repo_root / "shared"))
sys.path.insert(0, str(repo_root / "services" / "certificates"))


def seed_certificates() -> None:
    import asyncio

    from app.certificates.seed import seed_certificates as _seed
    from app.certificates.storage import SqlAlchemyCertificateStore
    from app.config import Settings
    from shared.database.postgres import get_async_engine, get_async_session_factory

    settings = Settings()

    async def _run() -> int:
        engine = get_async_engine(settings.database_url)
        try:
            async with get_async_session_factory(engine)() as session:
                return await _seed(SqlAlchemyCertificateStore(session))
        finally:
            await engine.dispose()

    try:
        inserted = asyncio.run(_run())
    except Exception as e:
        print(f"Certificates seed error: {e}", file=sys.stderr)
        sys.exit(1)
    print(f"Certificates: seeded {inserted} sample certificates")


def main() -> None:
    seed_certificates()
    print("Seed done.")


if __name__ == "__main__":
    main()
