"""Application layer DI providers."""

from dishka import Scope, provide

from linkauth.application.usecase.auth import (
    CompleteLoginUseCase,
    DispatchLoginUseCase,
)
from linkauth.application.usecase.user import (
    DeleteUserUseCase,
    UpdateUserProfileUseCase,
)
from linkauth.config import AuthSettings
from linkauth.domain.service import IdentityService, JWTService, ProviderRegistry
from linkauth.util.di.base import ProviderBase


class ProdApplicationProvider(ProviderBase):
    """Production application use cases provider - concrete, no mocks needed."""

    # Auth use cases
    @provide(scope=Scope.REQUEST)
    def get_dispatch_login_use_case(
        self, provider_registry: ProviderRegistry, auth_settings: AuthSettings
    ) -> DispatchLoginUseCase:
        """Provide dispatch login use case."""
        return DispatchLoginUseCase(
            provider_registry=provider_registry, auth_settings=auth_settings
        )

    @provide(scope=Scope.REQUEST)
    def get_complete_login_use_case(
        self,
        provider_registry: ProviderRegistry,
        identity_service: IdentityService,
        jwt_service: JWTService,
    ) -> CompleteLoginUseCase:
        """Provide complete login use case."""
        return CompleteLoginUseCase(
            provider_registry=provider_registry,
            identity_service=identity_service,
            jwt_service=jwt_service,
        )

    # User use cases
    @provide(scope=Scope.REQUEST)
    def get_update_user_profile_use_case(
        self, identity_service: IdentityService
    ) -> UpdateUserProfileUseCase:
        """Provide update user profile use case."""
        return UpdateUserProfileUseCase(identity_service=identity_service)

    @provide(scope=Scope.REQUEST)
    def get_delete_user_use_case(
        self, identity_service: IdentityService
    ) -> DeleteUserUseCase:
        """Provide delete user use case."""
        return DeleteUserUseCase(identity_service=identity_service)
