"""Authentication routes."""

import logging
from datetime import datetime

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Request, Response, status
from fastapi.responses import JSONResponse, RedirectResponse
from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from linkauth.application.usecase.auth import (
    CompleteLoginRequest,
    CompleteLoginUseCase,
    DispatchLoginRequest,
    DispatchLoginUseCase,
)
from linkauth.application.usecase.user import (
    DeleteUserRequest,
    DeleteUserUseCase,
    UpdateUserProfileRequest,
    UpdateUserProfileUseCase,
)
from linkauth.domain.model import User
from linkauth.domain.service import ProviderRegistry
from linkauth.interface.api.security import CurrentUser
from linkauth.interface.error import error_response

logger = logging.getLogger(__name__)

# Mounted under /{settings.auth.path} by create_app
router = APIRouter(tags=["authentication"], route_class=DishkaRoute)


class UserResponse(BaseModel):
    """Public view of a user.

    Linked accounts and their provider tokens are never exposed.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    email_address: str = Field(alias="emailAddress")
    is_active: bool = Field(alias="isActive")
    created_at: datetime = Field(alias="createdAt")
    updated_at: datetime = Field(alias="updatedAt")

    @classmethod
    def from_user(cls, user: User) -> "UserResponse":
        return cls(
            id=str(user.id),
            name=user.name,
            email_address=user.email_address,
            is_active=user.is_active,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )


class ProvidersResponse(BaseModel):
    """Registered provider IDs."""

    providers: list[str]


class UpdateUserAPIRequest(BaseModel):
    """Profile self-update body."""

    name: str = Field(max_length=255)
    email_address: EmailStr = Field(alias="emailAddress")

    @field_validator("email_address")
    @classmethod
    def limit_email_length(cls, value: str) -> str:
        if len(value) > 255:
            raise ValueError("must be at most 255 characters")
        return value


@router.get("/providers", response_model=ProvidersResponse)
async def list_providers(
    provider_registry: FromDishka[ProviderRegistry],
) -> ProvidersResponse:
    """List the configured providers.

    Example:
        GET /auth/providers

        Response:
        {"providers": ["github"]}
    """
    return ProvidersResponse(providers=provider_registry.list_provider_ids())


@router.get("/login/{provider_id}")
async def login(
    provider_id: str,
    request: Request,
    dispatch_login_use_case: FromDishka[DispatchLoginUseCase],
    callback: str | None = None,
) -> RedirectResponse:
    """Dispatch to the provider's login page.

    Args:
        provider_id: Registered provider ID
        request: Incoming request (for the session)
        dispatch_login_use_case: Dispatch login use case from DI
        callback: Optional URL to send the browser to after login, with
            the token appended as a query parameter

    Returns:
        HTTP 302 redirect to the provider

    Example:
        GET /auth/login/github?callback=https://app.example.com/login

        Redirects to: https://github.com/login/oauth/authorize?...
    """
    logger.info(f"Attempting login: provider={provider_id}")

    result = await dispatch_login_use_case.execute(
        DispatchLoginRequest(
            provider_id=provider_id,
            callback_url=callback,
            session=request.session,
        )
    )

    return RedirectResponse(
        url=result.authorization_url, status_code=status.HTTP_302_FOUND
    )


@router.get("/login/{provider_id}/callback")
async def login_callback(
    provider_id: str,
    request: Request,
    complete_login_use_case: FromDishka[CompleteLoginUseCase],
) -> Response:
    """Ingest the login data from the provider.

    Every failure is answered here with the JSON error body, never with
    a redirect.

    Args:
        provider_id: Registered provider ID
        request: Incoming request (query parameters and session)
        complete_login_use_case: Complete login use case from DI

    Returns:
        HTTP 302 to the stored callback URL with ?token=..., or 200 with
        {"user": {...}, "token": "..."} when no callback URL was given

    Example:
        GET /auth/login/github/callback?code=abc123&state=xyz789

        Redirects to: https://app.example.com/login?token=eyJ...
    """
    logger.info(f"Attempting login callback: provider={provider_id}")

    try:
        result = await complete_login_use_case.execute(
            CompleteLoginRequest(
                provider_id=provider_id,
                params=dict(request.query_params),
                session=request.session,
            )
        )
    except Exception as e:
        logger.error(f"Error in login callback: provider={provider_id}, error={e!r}")
        return error_response(e)

    if result.redirect_url:
        logger.info("Redirecting to callback URL")
        return RedirectResponse(
            url=result.redirect_url, status_code=status.HTTP_302_FOUND
        )

    logger.info("Displaying login object")
    return JSONResponse(
        content={
            "user": UserResponse.from_user(result.user).model_dump(
                mode="json", by_alias=True
            ),
            "token": result.token,
        }
    )


@router.get("/user", response_model=UserResponse)
async def get_user(current_user: CurrentUser) -> UserResponse:
    """Get the logged-in user.

    Example:
        GET /auth/user
        Authorization: Bearer eyJ...
    """
    return UserResponse.from_user(current_user)


@router.put("/user", response_model=UserResponse)
async def update_user(
    body: UpdateUserAPIRequest,
    current_user: CurrentUser,
    update_user_profile_use_case: FromDishka[UpdateUserProfileUseCase],
) -> UserResponse:
    """Update the logged-in user's name and email address.

    Example:
        PUT /auth/user
        Authorization: Bearer eyJ...
        {"name": "Alice", "emailAddress": "alice@example.com"}
    """
    result = await update_user_profile_use_case.execute(
        UpdateUserProfileRequest(
            user_id=current_user.id,
            name=body.name,
            email_address=body.email_address,
        )
    )
    return UserResponse.from_user(result.user)


@router.delete("/user", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(
    current_user: CurrentUser,
    delete_user_use_case: FromDishka[DeleteUserUseCase],
) -> Response:
    """Delete the logged-in user and their linked accounts.

    The last remaining user cannot be deleted (403).
    """
    await delete_user_use_case.execute(DeleteUserRequest(user_id=current_user.id))
    logger.info(f"User deleted: {current_user.id}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
