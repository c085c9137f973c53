"""Domain services for linkauth."""

from .access_guard import AccessGuard
from .base import Service
from .identity_service import IdentityService
from .jwt_service import JWTService
from .provider_registry import ProviderRegistry, ProviderStrategy

__all__ = [
    "Service",
    "AccessGuard",
    "IdentityService",
    "JWTService",
    "ProviderRegistry",
    "ProviderStrategy",
]
