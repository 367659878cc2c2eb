from __future__ import annotations

import contextlib
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from dotenv import load_dotenv

logger = logging.getLogger(__name__)


@contextlib.asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    store = app.state.snapshots.store
    try:
        await store.close()
    except Exception as e:
        logger.warning("SHUTDOWN: failed to close %s store: %r", store.name, e)


def create_app(settings=None, store=None) -> FastAPI:
    """
    Build the API. `settings` and `store` default to environment-derived
    values; tests pass their own.
    """
    load_dotenv("local.env")

    from endpoints.data_endpoints import router as data_router
    from persistence import SnapshotManager, build_object_store
    from settings import get_settings

    settings = settings or get_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    store = store or build_object_store(settings)
    snapshots = SnapshotManager(
        store,
        data_key=settings.data_key,
        backup_prefix=settings.backup_prefix,
        max_backups=settings.max_backups,
    )

    app = FastAPI(lifespan=lifespan)
    app.state.settings = settings
    app.state.snapshots = snapshots

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )

    @app.get("/healthz")
    async def healthz():
        return JSONResponse({"ok": True, "backend": store.name})

    app.include_router(data_router)

    if not settings.admin_password:
        logger.warning("STARTUP: ADMIN_PASSWORD is not set; all admin actions will be rejected")
    logger.info("STARTUP: using %s store, keeping %d backup(s)", store.name, settings.max_backups)

    return app


app = create_app()
