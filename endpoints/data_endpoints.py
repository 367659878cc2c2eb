# data_endpoints.py
from __future__ import annotations

import hmac
import logging
from typing import Any

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from persistence import BackupNotFoundError, FunnelDocument, MissingParameterError, SnapshotManager
from settings import Settings

router = APIRouter(tags=["data"])
logger = logging.getLogger(__name__)

WRITE_ACTIONS = ("save", "import")


def _error(message: str, status_code: int, **extra: Any) -> JSONResponse:
    return JSONResponse({"error": message, **extra}, status_code=status_code)


def _unauthorized() -> JSONResponse:
    return _error("Unauthorized", 401)


def _server_error(where: str, exc: Exception) -> JSONResponse:
    logger.exception("%s error: %r", where, exc)
    return _error("Server error", 500, detail=str(exc))


def _manager(request: Request) -> SnapshotManager:
    return request.app.state.snapshots


def _settings(request: Request) -> Settings:
    return request.app.state.settings


def is_authorized(request: Request) -> bool:
    """
    Shared-secret check: `Authorization: Bearer <ADMIN_PASSWORD>`.
    Always False when no password is configured.
    """
    expected = _settings(request).admin_password
    if not expected:
        return False
    header = request.headers.get("authorization") or ""
    if not header.startswith("Bearer "):
        return False
    token = header[len("Bearer "):]
    return hmac.compare_digest(token.encode("utf-8"), expected.encode("utf-8"))


def _log_action(request: Request, method: str, action: str | None) -> None:
    if _settings(request).debug_log_requests:
        logger.info("DATA %s: action=%r", method, action)


@router.get("/api/data")
async def get_data(request: Request, action: str | None = None, key: str | None = None):
    _log_action(request, "GET", action)
    snapshots = _manager(request)

    # Public embed view
    if action == "embed":
        return JSONResponse(await snapshots.read_current())

    if not is_authorized(request):
        return _unauthorized()

    try:
        if action == "backups":
            backups = await snapshots.list_backups()
            return JSONResponse({"backups": [b.model_dump() for b in backups]})

        if action == "restore":
            return JSONResponse(await snapshots.restore(key))

        # Default: current document
        return JSONResponse(await snapshots.read_current())
    except MissingParameterError as e:
        return _error(str(e), 400)
    except BackupNotFoundError:
        return _error("Backup not found", 404)
    except Exception as e:
        return _server_error("GET", e)


@router.post("/api/data")
async def post_data(request: Request):
    if not is_authorized(request):
        return _unauthorized()

    try:
        body = await request.json()
    except ValueError:
        return _error("Invalid JSON body", 400)
    if not isinstance(body, dict):
        return _error("Invalid JSON body", 400)

    action = body.get("action")
    _log_action(request, "POST", action)
    if action not in WRITE_ACTIONS:
        return _error("Unknown action", 400)
    data = body.get("data")
    if not isinstance(data, dict):
        return _error("Missing data", 400)
    try:
        FunnelDocument.model_validate(data)
    except ValidationError:
        return _error("Invalid data: tiles and table must be lists", 400)

    snapshots = _manager(request)
    try:
        if action == "save":
            result = await snapshots.save(data)
        else:
            result = await snapshots.import_document(data)
        return JSONResponse(result.model_dump())
    except Exception as e:
        return _server_error("POST", e)
