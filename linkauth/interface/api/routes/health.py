"""Health check routes."""

from datetime import datetime, timezone

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter
from pydantic import BaseModel

from linkauth.config import Settings
from linkauth.domain.service import ProviderRegistry


router = APIRouter(tags=["health"], route_class=DishkaRoute)


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    timestamp: datetime
    version: str
    git_sha: str
    providers: list[str]


@router.get("/health", response_model=HealthResponse)
async def health_check(
    settings: FromDishka[Settings],
    provider_registry: FromDishka[ProviderRegistry],
) -> HealthResponse:
    """Basic health check endpoint.

    Returns:
        Health status indicating the service is running
    """
    return HealthResponse(
        status="healthy",
        timestamp=datetime.now(timezone.utc),
        version="0.1.0",
        git_sha=settings.git_sha,
        providers=provider_registry.list_provider_ids(),
    )
