"""Health check endpoint; used for liveness probes and uptime monitors."""

from fastapi import APIRouter, Request

from app.core.config import get_settings
from app.schemas.health import HealthResponse, ServiceStatus
from app.shared.utils.datetime import utc_now

router = APIRouter()


@router.get("", response_model=HealthResponse)
async def health_check(request: Request) -> HealthResponse:
    """Report status plus Firebase and SMTP connectivity."""
    settings = get_settings()
    container = getattr(request.app.state, "container", None)
    email_ok = container is not None and await container.mailer.verify_connection()
    return HealthResponse(
        environment=settings.environment,
        timestamp=utc_now(),
        services=ServiceStatus(
            firebase="connected" if container is not None else "disconnected",
            email="connected" if email_ok else "disconnected",
        ),
    )
