"""HTTP API for the browser client and the scan scheduler.

Serve with ``uvicorn jobfeed.api:app``.
"""
from __future__ import annotations

import time
from functools import lru_cache
from typing import Any

from fastapi import APIRouter, Body, Depends, FastAPI, Header, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field
from starlette.exceptions import HTTPException as StarletteHTTPException

from jobfeed import __version__
from jobfeed.aggregator import run_scan
from jobfeed.auth import bearer_token, check_password, make_token, validate_token
from jobfeed.config import FeedSettings, get_env, load_feed_settings
from jobfeed.errors import FeedItemNotFound, StoreUnavailable, ValidationError
from jobfeed.feed_store import FeedStore
from jobfeed.log import get_logger
from jobfeed.models import iso_timestamp, utc_now
from jobfeed.promotion import promote
from jobfeed.sources import FeedSource, get_sources
from jobfeed.store import KeyValueStore, get_store
from jobfeed.tracker import TrackerStore

log = get_logger(__name__)

DB_UNAVAILABLE = "Database not connected yet."


class LoginRequest(BaseModel):
    password: str | None = None


class FeedAction(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    action: str | None = None
    feed_item_id: str | None = Field(default=None, alias="feedItemId")


# ── Dependencies ─────────────────────────────────────────────────────────


@lru_cache
def get_feed_settings() -> FeedSettings:
    return load_feed_settings()


def get_scan_sources() -> list[FeedSource]:
    return get_sources(get_env)


def get_feed_store(store: KeyValueStore = Depends(get_store)) -> FeedStore:
    return FeedStore(store)


def get_tracker(store: KeyValueStore = Depends(get_store)) -> TrackerStore:
    return TrackerStore(store)


def require_client_token(authorization: str | None = Header(default=None)) -> None:
    """Gate for client endpoints; open when AUTH_SECRET is unset."""
    secret = get_env("AUTH_SECRET")
    if secret and not validate_token(bearer_token(authorization), secret):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")


def require_cron_secret(authorization: str | None = Header(default=None)) -> None:
    secret = get_env("CRON_SECRET")
    if secret and (authorization or "") != f"Bearer {secret}":
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")


# ── Routes ───────────────────────────────────────────────────────────────

router = APIRouter(prefix="/api")


@router.post("/auth")
def login(payload: LoginRequest | None = None) -> dict[str, str]:
    secret, site_password = _auth_config()
    if payload and check_password(payload.password, site_password):
        return {"token": make_token(secret)}
    raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Wrong password")


@router.get("/auth")
def check_token(authorization: str | None = Header(default=None)) -> JSONResponse:
    secret, _ = _auth_config()
    if validate_token(bearer_token(authorization), secret):
        return JSONResponse({"valid": True})
    return JSONResponse({"valid": False}, status_code=status.HTTP_401_UNAUTHORIZED)


def _auth_config() -> tuple[str, str]:
    secret = get_env("AUTH_SECRET")
    site_password = get_env("SITE_PASSWORD")
    if not secret or not site_password:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Auth not configured")
    return secret, site_password


@router.api_route("/scan", methods=["GET", "POST"], dependencies=[Depends(require_cron_secret)])
def scan(
    sources: list[FeedSource] = Depends(get_scan_sources),
    feed_store: FeedStore = Depends(get_feed_store),
    settings: FeedSettings = Depends(get_feed_settings),
) -> dict[str, Any]:
    try:
        result = run_scan(sources, feed_store, settings)
    except Exception as exc:
        log.error("Scan error: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=f"Scan failed: {exc}"
        ) from exc
    return result.to_dict()


@router.get("/feed", dependencies=[Depends(require_client_token)])
def read_feed(feed_store: FeedStore = Depends(get_feed_store)) -> dict[str, Any]:
    items, meta = feed_store.read_visible_feed()
    return {"items": [item.to_dict() for item in items], "meta": meta}


@router.post("/feed", dependencies=[Depends(require_client_token)])
def feed_action(
    payload: FeedAction | None = None,
    feed_store: FeedStore = Depends(get_feed_store),
    tracker: TrackerStore = Depends(get_tracker),
) -> dict[str, Any]:
    if payload is None or not payload.action or not payload.feed_item_id:
        raise ValidationError("action and feedItemId are required")

    if payload.action == "dismiss":
        feed_store.dismiss(payload.feed_item_id)
        return {"success": True}

    if payload.action == "add-to-tracker":
        job = promote(feed_store, tracker, payload.feed_item_id)
        return {"success": True, "job": job.to_dict()}

    raise ValidationError(f"Unknown action: {payload.action}")


@router.get("/jobs")
def read_jobs(tracker: TrackerStore = Depends(get_tracker)) -> list:
    try:
        return tracker.get_jobs()
    except StoreUnavailable as exc:
        log.warning("Jobs read degraded to empty: %s", exc)
        return []


@router.post("/jobs")
def save_jobs(jobs: Any = Body(default=None), tracker: TrackerStore = Depends(get_tracker)) -> dict[str, bool]:
    tracker.save_jobs(jobs)
    return {"success": True}


@router.get("/recruiters", dependencies=[Depends(require_client_token)])
def read_recruiters(tracker: TrackerStore = Depends(get_tracker)) -> dict[str, Any]:
    try:
        recruiters = tracker.get_recruiters()
    except StoreUnavailable as exc:
        log.warning("Recruiters read degraded to empty: %s", exc)
        return {"recruiters": [], "lastModified": None}
    return {"recruiters": recruiters, "lastModified": iso_timestamp(utc_now())}


@router.post("/recruiters", dependencies=[Depends(require_client_token)])
def save_recruiters(body: Any = Body(default=None), tracker: TrackerStore = Depends(get_tracker)) -> dict[str, Any]:
    tracker.save_recruiters(body)
    return {"success": True, "lastModified": iso_timestamp(utc_now())}


# ── App ──────────────────────────────────────────────────────────────────

app = FastAPI(title="job-feed-tracker", version=__version__)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)


@app.middleware("http")
async def request_logging_middleware(request: Request, call_next):
    started_at = time.perf_counter()
    response = await call_next(request)
    elapsed_ms = (time.perf_counter() - started_at) * 1000.0
    log.info(
        "http request method=%s path=%s status=%s duration_ms=%.2f",
        request.method,
        request.url.path,
        response.status_code,
        elapsed_ms,
    )
    return response


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code)


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(_: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == status.HTTP_405_METHOD_NOT_ALLOWED:
        return _error(exc.status_code, "Method not allowed")
    return _error(exc.status_code, str(exc.detail))


@app.exception_handler(RequestValidationError)
async def request_validation_handler(_: Request, exc: RequestValidationError) -> JSONResponse:
    return _error(status.HTTP_400_BAD_REQUEST, "Malformed request body")


@app.exception_handler(ValidationError)
async def validation_error_handler(_: Request, exc: ValidationError) -> JSONResponse:
    return _error(status.HTTP_400_BAD_REQUEST, str(exc))


@app.exception_handler(FeedItemNotFound)
async def not_found_handler(_: Request, exc: FeedItemNotFound) -> JSONResponse:
    return _error(status.HTTP_404_NOT_FOUND, "Feed item not found")


@app.exception_handler(StoreUnavailable)
async def store_unavailable_handler(request: Request, exc: StoreUnavailable) -> JSONResponse:
    log.error("Store unavailable on %s %s: %s", request.method, request.url.path, exc)
    return _error(status.HTTP_503_SERVICE_UNAVAILABLE, DB_UNAVAILABLE)


@app.get("/healthz")
def healthz() -> dict[str, str]:
    return {"status": "ok"}


app.include_router(router)
