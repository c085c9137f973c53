"""Domain layer errors."""


class DomainError(Exception):
    """Base domain error."""

    pass


class ValidationError(DomainError):
    """Domain validation error."""

    pass


class NotFoundError(DomainError):
    """Raised when a requested resource is not found."""

    def __init__(self, resource: str, identifier: str):
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource} not found: {identifier}")


class UnauthorizedError(DomainError):
    """Raised when no authenticated principal could be established."""

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message)


class CannotDeleteLastUserError(DomainError):
    """Raised when deleting a user would leave no users at all."""

    def __init__(self) -> None:
        super().__init__("Last User Error")


class ProviderHandshakeError(DomainError):
    """Raised when a provider strategy fails during a login.

    The message is shown to the client; the reason is only logged.
    """

    def __init__(self, provider_id: str, reason: str = ""):
        self.provider_id = provider_id
        self.reason = reason
        super().__init__(f"Login with {provider_id} failed")
