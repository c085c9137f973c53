"""Bearer token authentication for protected routes."""

from typing import Annotated

from fastapi import Depends, Header, Query, Request

from linkauth.domain.model import User
from linkauth.domain.service import AccessGuard


async def get_current_user(
    request: Request,
    authorization: Annotated[str | None, Header()] = None,
    token: Annotated[str | None, Query()] = None,
) -> User:
    """Resolve the authenticated user for a request.

    The token is read from the Authorization header first, then from the
    token query parameter. The user is also attached to request.state.

    Raises:
        UnauthorizedError: If no active user could be established
    """
    guard = await request.state.dishka_container.get(AccessGuard)
    user = await guard.authenticate(authorization, token)
    request.state.user = user
    return user


CurrentUser = Annotated[User, Depends(get_current_user)]
