"""
FastAPI application entry point.
"""

import asyncio
from contextlib import asynccontextmanager, suppress
from typing import Any, AsyncIterator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from intake_bot import __version__
from intake_bot.api.deps import container
from intake_bot.api.v1 import conversations, health, messages
from intake_bot.core.config import settings
from intake_bot.core.constants import API_PREFIX
from intake_bot.core.exceptions import IntakeBotError
from intake_bot.core.logging import get_logger, setup_logging
from intake_bot.repositories.conversation_repo import BaseConversationRepository

# Initialize logging
setup_logging()
logger = get_logger(__name__)


async def cleanup_loop(
    repository: BaseConversationRepository,
    interval_seconds: float,
    max_idle_minutes: int,
) -> None:
    """Evict idle completed conversations until cancelled."""
    while True:
        await asyncio.sleep(interval_seconds)
        try:
            await repository.cleanup_expired(max_idle_minutes)
        except Exception as e:
            logger.warning("Conversation cleanup failed", error=str(e))


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """
    Application lifespan manager.
    Handles startup and shutdown events.
    """
    # Startup
    logger.info(
        "Starting intake bot",
        app_name=settings.app_name,
        env=settings.app_env,
        oracle_configured=settings.oracle.is_configured,
        ticket_mock_fallback=settings.ticket_mock_fallback,
    )

    container.initialize()
    logger.info("Service container initialized")

    cleanup_task = asyncio.create_task(
        cleanup_loop(
            container.conversation_repository,
            settings.conversation.cleanup_interval_seconds,
            settings.conversation.max_idle_minutes,
        )
    )

    yield

    # Shutdown
    logger.info("Shutting down intake bot")

    cleanup_task.cancel()
    with suppress(asyncio.CancelledError):
        await cleanup_task

    await container.close()


# Create FastAPI application
app = FastAPI(
    title="Intake Bot API",
    description="Conversational intake of automation and AI initiatives into tickets",
    version=__version__,
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
    openapi_url="/openapi.json" if settings.debug else None,
    lifespan=lifespan,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.security.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Exception handlers
@app.exception_handler(IntakeBotError)
async def intake_bot_error_handler(
    request: Request,
    exc: IntakeBotError,
) -> JSONResponse:
    """Handle custom application errors."""
    logger.error(
        "Application error",
        error_code=exc.code,
        error_message=exc.message,
        path=request.url.path,
    )
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict(),
    )


@app.exception_handler(Exception)
async def general_exception_handler(
    request: Request,
    exc: Exception,
) -> JSONResponse:
    """Handle unexpected errors."""
    logger.exception(
        "Unexpected error",
        error=str(exc),
        path=request.url.path,
    )
    return JSONResponse(
        status_code=500,
        content={
            "error": {
                "code": "INTERNAL_ERROR",
                "message": "An unexpected error occurred",
            }
        },
    )


# Include routers
app.include_router(health.router, prefix=API_PREFIX, tags=["Health"])
app.include_router(messages.router, prefix=API_PREFIX, tags=["Messages"])
app.include_router(conversations.router, prefix=API_PREFIX, tags=["Conversations"])


# Root endpoint
@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint."""
    return {
        "name": settings.app_name,
        "bot": settings.bot_name,
        "version": __version__,
        "docs": "/docs" if settings.debug else "Disabled in production",
    }


# API info endpoint
@app.get("/api")
async def api_info() -> dict[str, Any]:
    """API information endpoint."""
    return {
        "name": "Intake Bot API",
        "version": __version__,
        "prefix": API_PREFIX,
        "endpoints": {
            "health": f"{API_PREFIX}/health",
            "messages": f"{API_PREFIX}/messages",
            "conversations": f"{API_PREFIX}/conversations",
        },
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "intake_bot.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.is_development,
    )
