"""
Health check endpoints.
"""

from datetime import datetime
from typing import Any

from fastapi import APIRouter, Depends

from intake_bot.api.deps import get_completion_client, get_ticket_sink
from intake_bot.core.config import settings
from intake_bot.core.logging import get_logger
from intake_bot.oracle.client import CompletionClient
from intake_bot.services.ticket_service import TicketSink

logger = get_logger(__name__)

router = APIRouter()


@router.get("/health")
async def health_check() -> dict[str, Any]:
    """
    Basic health check endpoint.
    Returns application status.
    """
    return {
        "status": "healthy",
        "app": settings.app_name,
        "environment": settings.app_env,
        "timestamp": datetime.utcnow().isoformat(),
    }


@router.get("/health/ready")
async def readiness_check(
    completion_client: CompletionClient = Depends(get_completion_client),
    ticket_sink: TicketSink = Depends(get_ticket_sink),
) -> dict[str, Any]:
    """
    Readiness check endpoint.

    The bot still answers without an oracle or ticket API (local fallbacks),
    so a missing one is reported as degraded rather than not ready.
    """
    checks = {
        "app": True,
        "oracle": completion_client.is_configured,
        "ticket_sink": ticket_sink.is_configured,
    }

    return {
        "status": "ready" if all(checks.values()) else "degraded",
        "checks": checks,
        "timestamp": datetime.utcnow().isoformat(),
    }


@router.get("/health/live")
async def liveness_check() -> dict[str, str]:
    """
    Liveness check endpoint.
    Simple check that the application is running.
    """
    return {"status": "alive"}
