"""Bearer token encoding with PyJWT.

Tokens are HS256 by default and carry the user ID twice: as the standard
``sub`` claim and as the ``userId`` claim that clients read.
"""

from datetime import datetime, timedelta, timezone

import jwt
from pydantic import BaseModel

from linkauth.config import AuthSettings

REQUIRED_CLAIMS = ["sub", "iss", "iat", "nbf", "exp"]


class TokenPayload(BaseModel):
    """Decoded claims of a linkauth token."""

    sub: str
    userId: str | None = None
    iss: str
    iat: datetime
    nbf: datetime
    exp: datetime


class JWTError(Exception):
    """Token could not be verified."""

    pass


def create_token(
    user_id: str, settings: AuthSettings, now: datetime | None = None
) -> str:
    """Encode a token for a user.

    There is no activation delay: nbf is the issue time.

    Args:
        user_id: User ID, stored in sub and userId
        settings: Authentication settings (secret, algorithm, issuer, expiry)
        now: Issue time, the current time when omitted

    Returns:
        Encoded JWT
    """
    issued_at = now or datetime.now(timezone.utc)
    claims = {
        "sub": user_id,
        "userId": user_id,
        "iss": settings.jwt_issuer,
        "iat": issued_at,
        "nbf": issued_at,
        "exp": issued_at + timedelta(days=settings.jwt_expiry_days),
    }
    return jwt.encode(claims, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def verify_token(token: str, settings: AuthSettings) -> TokenPayload:
    """Check a token's signature and time window and decode its claims.

    Args:
        token: Encoded JWT
        settings: Authentication settings

    Returns:
        Decoded claims

    Raises:
        JWTError: If the signature, issuer, or time window is wrong, or the
            token is malformed
    """
    try:
        claims = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            issuer=settings.jwt_issuer,
            options={"require": REQUIRED_CLAIMS},
        )
    except jwt.ExpiredSignatureError as e:
        raise JWTError("Token has expired") from e
    except jwt.ImmatureSignatureError as e:
        raise JWTError("Token is not yet valid") from e
    except jwt.InvalidIssuerError as e:
        raise JWTError("Invalid token issuer") from e
    except jwt.InvalidSignatureError as e:
        raise JWTError("Invalid token signature") from e
    except jwt.InvalidTokenError as e:
        raise JWTError("Invalid token") from e

    return TokenPayload(**claims)
