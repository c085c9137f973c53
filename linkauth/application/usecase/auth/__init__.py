"""Authentication use cases."""

from .complete_login import (
    CompleteLoginRequest,
    CompleteLoginResponse,
    CompleteLoginUseCase,
)
from .dispatch_login import (
    SESSION_CALLBACK_URL_KEY,
    SESSION_STATE_KEY,
    DispatchLoginRequest,
    DispatchLoginResponse,
    DispatchLoginUseCase,
)

__all__ = [
    "CompleteLoginRequest",
    "CompleteLoginResponse",
    "CompleteLoginUseCase",
    "DispatchLoginRequest",
    "DispatchLoginResponse",
    "DispatchLoginUseCase",
    "SESSION_CALLBACK_URL_KEY",
    "SESSION_STATE_KEY",
]
