import logging
import sys
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI

from src.adapters.sqlite.migrator import SQLiteMigrator
from src.api.deps import close_document_service, get_flag_table, get_rules, get_settings
from src.app_shell.config import ConfigurationError, validate_startup

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup/shutdown."""
    settings = get_settings()

    # Load rules, validate and migrate on startup (fail-fast)
    try:
        rules = get_rules()
        validate_startup(rules, settings.data_dir, settings.migrations_dir)
        get_flag_table(rules)
        applied = SQLiteMigrator(settings.db_path, str(settings.migrations_dir)).run_migrations()
        logger.info("Startup complete (%d migrations applied)", len(applied))
    except (ValueError, FileNotFoundError, ConfigurationError, RuntimeError) as e:
        logger.critical("Startup failed: %s", e)
        sys.exit(1)

    yield

    close_document_service()


app = FastAPI(
    title="Wave Front Door",
    version="0.1.0",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# --- Routers ---
from src.api.routes import client  # noqa: E402

app.include_router(client.router, prefix="", tags=["Client"])


@app.get("/health")
def health_check() -> dict[str, Any]:
    """Health check endpoint."""
    return {"status": "ok", "service": "wave-frontdoor"}
