"""FastAPI application factory.

The api layer:
- Validates request bodies, resolves the actor and hands off to records/media
- Renders every outcome as a `{"success": ...}` envelope
- Forbidden: SQL, storage paths, authorization decisions

Run with ``uvicorn warden.api.app:create_app --factory``.
"""

from __future__ import annotations

import logging
from typing import Generator

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.orm import sessionmaker
from starlette.exceptions import HTTPException as StarletteHTTPException

from warden.core.config import Settings
from warden.core.errors import WardenError
from warden.db.repo import DbSession
from warden.db.session import build_engine, build_session_factory, init_db, session_scope, sqlite_url
from warden.media.signing import SignedUrlIssuer
from warden.media.uploads import MediaUploader
from warden.storage.base import StorageBackend
from warden.storage.local import LocalStorage

logger = logging.getLogger(__name__)


def get_db_session(request: Request) -> Generator[DbSession, None, None]:
    """Dependency to get database session.

    Yields:
        Session from the app's factory, closed after the request.
    """
    with session_scope(request.app.state.session_factory) as session:
        yield session


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_storage(request: Request) -> StorageBackend:
    return request.app.state.storage


def get_uploader(request: Request) -> MediaUploader:
    return request.app.state.uploader


def get_issuer(request: Request) -> SignedUrlIssuer:
    return request.app.state.issuer


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": message})


def _describe_validation_error(exc: RequestValidationError) -> str:
    """Summarize the first pydantic error as ``field: message``."""
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    loc = [str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path")]
    field = ".".join(loc)
    return f"{field}: {first.get('msg', 'invalid')}" if field else first.get("msg", "Invalid request")


def _register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(WardenError)
    async def warden_error_handler(request: Request, exc: WardenError) -> JSONResponse:
        return _error(exc.status_code, exc.detail)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        return _error(status.HTTP_400_BAD_REQUEST, _describe_validation_error(exc))

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return _error(exc.status_code, str(exc.detail))

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")


def create_app(
    settings: Settings | None = None,
    session_factory: sessionmaker | None = None,
    storage: StorageBackend | None = None,
) -> FastAPI:
    """Create FastAPI application.

    The session factory and storage backend are built once here and shared
    by every request.

    Args:
        settings: Service settings; read from the environment when omitted.
        session_factory: Session factory; a SQLite database at
            `settings.db_path` is created when omitted.
        storage: Storage backend; local storage at `settings.media_root`
            when omitted.

    Returns:
        Configured FastAPI application.
    """
    settings = settings or Settings.from_env()
    if session_factory is None:
        engine = build_engine(sqlite_url(settings.db_path))
        init_db(engine)
        session_factory = build_session_factory(engine)
    if storage is None:
        storage = LocalStorage(settings.media_root)

    app = FastAPI(
        title="Warden API",
        description="Ownership-enforcing mutation and media access layer",
        version="0.1.0",
    )
    app.state.settings = settings
    app.state.session_factory = session_factory
    app.state.storage = storage
    app.state.uploader = MediaUploader(storage, settings.public_base_url)
    app.state.issuer = SignedUrlIssuer(
        settings.signing_key,
        settings.public_base_url,
        storage,
        ttl_seconds=settings.signed_url_ttl_seconds,
    )

    # Add CORS middleware for UI access
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    _register_error_handlers(app)

    # Include routes
    from warden.api.routes import albums, archive, comments, journal, likes, media, posts

    app.include_router(posts.router, prefix="/api")
    app.include_router(comments.router, prefix="/api")
    app.include_router(likes.router, prefix="/api")
    app.include_router(journal.router, prefix="/api")
    app.include_router(archive.router, prefix="/api")
    app.include_router(albums.router, prefix="/api")
    app.include_router(media.router, prefix="/api")
    app.include_router(media.serving_router)

    # Health check endpoint
    @app.get("/health")
    def health_check():
        """Health check endpoint."""
        return {"status": "ok"}

    return app
