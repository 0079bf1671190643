import logging
import sys
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.adapters.sqlite.migrator import SQLiteMigrator
from src.api.deps import get_settings
from src.api.errors import cms_error_handler
from src.components.hooks import HookRegistry
from src.domain.errors import CmsError
from src.rules.loader import load_rules

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup/shutdown."""
    logging.basicConfig(
        level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )
    settings = get_settings()

    # Load rules and validate on startup (fail-fast)
    try:
        load_rules(settings.rules_path)
        logger.info("Rules loaded from %s", settings.rules_path)
    except Exception as e:
        logger.critical("Rules load failed: %s", e)
        sys.exit(1)

    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.uploads_dir.mkdir(parents=True, exist_ok=True)
    applied = SQLiteMigrator(settings.db_path, settings.migrations_dir).run_migrations()
    if applied:
        logger.info("Applied migrations: %s", ", ".join(applied))

    yield


def create_app() -> FastAPI:
    app = FastAPI(
        title="Block CMS API",
        version="0.1.0",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )
    # Plugins register actions and filters here
    app.state.hooks = HookRegistry()
    app.add_exception_handler(CmsError, cms_error_handler)

    from src.api.routes import auth, content, media, meta, public, users

    app.include_router(auth.router, prefix="/api/auth", tags=["Auth"])
    app.include_router(content.router, prefix="/api/content", tags=["Content"])
    app.include_router(meta.router, prefix="/api/content", tags=["Meta"])
    app.include_router(media.router, prefix="/api/media", tags=["Media"])
    app.include_router(users.router, prefix="/api/users", tags=["Users"])
    app.include_router(public.router, prefix="/api/public", tags=["Public"])

    # CORS (Allow Frontend)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["http://localhost:3000", "http://127.0.0.1:3000"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health")
    def health_check() -> dict[str, Any]:
        """Health check endpoint."""
        return {"status": "ok", "service": "api"}

    return app


app = create_app()
