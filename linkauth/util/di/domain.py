"""Domain layer DI providers."""

from dishka import Scope, provide

from linkauth.config import AuthSettings
from linkauth.domain.repository import UserRepository
from linkauth.domain.service import AccessGuard, IdentityService, JWTService
from linkauth.util.di.base import ProviderBase


class ProdDomainProvider(ProviderBase):
    """Production domain services provider - concrete, no mocks needed.

    Domain services are REQUEST-scoped to align with repository/session lifecycle.
    Each HTTP request gets fresh service instances with their own transaction.
    """

    scope = Scope.REQUEST

    @provide
    def get_jwt_service(self, auth_settings: AuthSettings) -> JWTService:
        """Provide JWT token domain service."""
        return JWTService(auth_settings=auth_settings)

    @provide
    def get_identity_service(self, user_repository: UserRepository) -> IdentityService:
        """Provide identity linking domain service."""
        return IdentityService(user_repository=user_repository)

    @provide
    def get_access_guard(
        self, jwt_service: JWTService, identity_service: IdentityService
    ) -> AccessGuard:
        """Provide bearer token access guard."""
        return AccessGuard(jwt_service=jwt_service, identity_service=identity_service)
