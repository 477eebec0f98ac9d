import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from app.certificates.router import router as certificates_router
from app.certificates.seed import seed_certificates
from app.certificates.storage import SqlAlchemyCertificateStore
from app.config import Settings
from app.database import create_tables, dispose_db, get_session_factory, init_db
from app.dependencies import get_settings
from shared.middleware.error_handler import (
    error_envelope_middleware,
    validation_exception_handler,
)
from shared.middleware.request_id import request_id_middleware

logger = logging.getLogger(__name__)


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(levelname)s:%(name)s: %(message)s",
    )


async def _seed() -> None:
    # A failed seed must not keep the service from starting.
    try:
        async with get_session_factory()() as session:
            await seed_certificates(SqlAlchemyCertificateStore(session))
    except Exception:
        logger.exception("Failed to seed certificates")


@asynccontextmanager
async def lifespan(app: FastAPI):
    # One-time startup, in order, once per process.
    settings: Settings = app.state.settings
    _configure_logging(settings.log_level)
    init_db(settings.database_url)
    if settings.create_tables_on_startup:
        await create_tables()
    if settings.seed_on_startup:
        await _seed()
    logger.info("Certificates service started (env=%s)", settings.env_name)

    yield

    await dispose_db()


SWAGGER_DESCRIPTION = """\
## Certificate Registry

Issues certificates and lets anyone check one by its number.

### Public

`POST /api/certificates/verify` with `{"certificateNumber": "..."}`:

| status          | HTTP | meaning                                        |
|-----------------|------|------------------------------------------------|
| `valid`         | 200  | Certificate exists and is active               |
| `inactive`      | 400  | Certificate exists but is revoked or expired   |
| `not_found`     | 404  | No certificate with that number                |
| `invalid_input` | 400  | Missing or blank certificate number            |
| `error`         | 500  | Storage failure                                |

### Admin

CRUD on `/api/certificates`, plus CSV bulk import (`/bulk`),
the import template (`/template`) and export (`/export`).

### Certificate status

```
active | revoked | expired    (default: active)
```
"""


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    app = FastAPI(
        title="Certificate Registry",
        version="1.0.0",
        description=SWAGGER_DESCRIPTION,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_exception_handler(RequestValidationError, validation_exception_handler)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        max_age=600,
    )
    app.middleware("http")(request_id_middleware)
    app.middleware("http")(error_envelope_middleware)

    app.include_router(certificates_router, prefix="/api")

    @app.get("/health", tags=["Health"])
    async def health() -> dict:
        return {"status": "ok", "service": "certificates"}

    return app


app = create_app()
