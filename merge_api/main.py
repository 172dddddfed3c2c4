import logging
import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from merge_api.core.config import settings
from merge_api.crud import settings_crud, user_crud
from merge_api.db import base  # noqa: F401  (registers every model on Base.metadata)
from merge_api.db.base_class import Base
from merge_api.api.v1.api import api_router
from merge_api.db.session import async_engine, SessionLocal

# --- Logging ---
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# --- FastAPI application ---
app = FastAPI(
    title="Merge API",
    openapi_url="/api/v1/openapi.json",
)


def _sanitize_origin(origin: str | None) -> str | None:
    if not origin:
        return None
    value = origin.strip()
    if not value:
        return None
    if not value.startswith("http"):
        value = f"https://{value}"
    return value.rstrip("/")


def _build_cors_origins() -> list[str]:
    origins = {_sanitize_origin(origin) for origin in settings.BACKEND_CORS_ORIGINS}
    origins.add(_sanitize_origin(settings.FRONTEND_BASE_URL))
    origins.add(_sanitize_origin(os.getenv("VERCEL_URL")))

    additional = os.getenv("ADDITIONAL_CORS_ORIGINS")
    if additional:
        for origin in additional.split(","):
            origins.add(_sanitize_origin(origin))

    allow_origins = sorted({origin for origin in origins if origin})
    logger.info("CORS origins: %s", allow_origins)
    return allow_origins


# --- Middlewares ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=_build_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["Authorization", "Content-Type", "X-Caller-Id"],
)

app.include_router(api_router, prefix="/api/v1")


def seed_defaults(db) -> None:
    """Create the settings row, the default language volumes and the admin."""

    settings_crud.initialize_settings(db)

    created = settings_crud.ensure_language_volumes(db, settings.DEFAULT_LANGUAGES)
    if created:
        logger.info("Created language volumes: %s", ", ".join(volume.language for volume in created))

    if settings.DEFAULT_ADMIN_EXTERNAL_ID:
        admin_user = user_crud.ensure_admin_user(
            db,
            external_id=settings.DEFAULT_ADMIN_EXTERNAL_ID,
            name=settings.DEFAULT_ADMIN_NAME,
        )
        logger.info("Default admin ready (user %s).", admin_user.id)
    else:
        logger.info("DEFAULT_ADMIN_EXTERNAL_ID not set, skipping admin seed.")


# --- Startup ---
@app.on_event("startup")
async def startup():
    logger.info("Creating database tables if needed...")
    async with async_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables are ready.")

    with SessionLocal() as session:
        seed_defaults(session)


# --- Root route ---
@app.get("/")
def read_root():
    return {"message": "Welcome to the Merge API!"}
