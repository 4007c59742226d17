"""FastAPI application initialization."""

import asyncio
import os
from contextlib import asynccontextmanager
from pathlib import Path

import logfire
import sentry_sdk
from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles
from sentry_sdk.integrations.fastapi import FastApiIntegration

from src.api import authorize, health, webhook
from src.config import get_settings
from src.constants import GRACEFUL_SHUTDOWN_TIMEOUT_SECONDS
from src.logging_config import setup_logfire
from src.middleware.correlation_id import CorrelationIDMiddleware
from src.services.thread_settings_service import (
    build_startup_settings,
    configure_thread_settings,
)

APP_VERSION = "0.3.0"
ASSETS_DIR = Path(__file__).resolve().parent.parent / "public" / "assets"


# =============================================================================
# Graceful Shutdown Infrastructure
# =============================================================================

# Track pending background tasks for graceful shutdown
_pending_tasks: set[asyncio.Task] = set()


def track_background_task(task: asyncio.Task) -> None:
    """
    Track a background task for graceful shutdown.

    Example:
        task = asyncio.create_task(configure_thread_settings(...))
        track_background_task(task)
    """
    _pending_tasks.add(task)
    task.add_done_callback(_pending_tasks.discard)


async def _configure_thread_settings_at_boot() -> None:
    settings = get_settings()
    applied = await configure_thread_settings(
        settings.facebook_page_access_token,
        build_startup_settings(settings.greeting_text, settings.server_url),
    )
    logfire.info("Startup thread settings configured", applied=applied)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager with graceful shutdown support."""
    # Fails fast when a required setting is missing
    settings = get_settings()

    setup_logfire(app)

    if settings.sentry_dsn:
        sentry_sdk.init(
            dsn=settings.sentry_dsn,
            traces_sample_rate=settings.sentry_traces_sample_rate,
            send_default_pii=False,
            environment=settings.env,
            integrations=[FastApiIntegration()],
        )

    # Outbound thread settings calls must not hold up startup
    if settings.configure_thread_settings_on_startup:
        track_background_task(asyncio.create_task(_configure_thread_settings_at_boot()))

    logfire.info(
        "Application startup complete",
        environment=settings.env,
        server_url=settings.server_url,
    )

    yield

    # ==========================================================================
    # Graceful Shutdown
    # ==========================================================================
    logfire.info(
        "Application shutdown initiated",
        pending_tasks=len(_pending_tasks),
    )

    if _pending_tasks:
        done, pending = await asyncio.wait(
            _pending_tasks,
            timeout=GRACEFUL_SHUTDOWN_TIMEOUT_SECONDS,
            return_when=asyncio.ALL_COMPLETED,
        )

        if pending:
            logfire.warn(
                "Cancelling remaining tasks after timeout",
                completed_count=len(done),
                cancelled_count=len(pending),
            )
            for task in pending:
                task.cancel()
            await asyncio.gather(*pending, return_exceptions=True)
        else:
            logfire.info(
                "All background tasks completed successfully",
                completed_count=len(done),
            )

    logfire.info("Application shutdown complete")


app = FastAPI(
    title="Quas Messenger Bot",
    description="Facebook Messenger webhook bridge with a keyword-driven reply bot",
    version=APP_VERSION,
    lifespan=lifespan,
)

# Correlation ID middleware (must be first for request tracing)
app.add_middleware(CorrelationIDMiddleware)

app.include_router(health.router, tags=["health"])
app.include_router(webhook.router, prefix="/webhook", tags=["webhook"])
app.include_router(authorize.router, prefix="/authorize", tags=["account-linking"])

# Images, audio and files referenced by outbound attachment messages
app.mount("/assets", StaticFiles(directory=ASSETS_DIR, check_dir=False), name="assets")


@app.get("/")
def root():
    """Root endpoint."""
    return {
        "message": "Quas Messenger Bot API",
        "version": APP_VERSION,
    }


if __name__ == "__main__":
    import uvicorn

    port = int(os.getenv("PORT", 5000))
    uvicorn.run(
        "src.main:app", host="0.0.0.0", port=port, reload=os.getenv("ENV") == "local"
    )
