"""Errors raised by adapters to external systems."""


class AdapterError(Exception):
    """Base error of the adapter layer."""

    pass


class ProviderError(AdapterError):
    """An identity provider call failed or returned something unusable.

    Login use cases turn it into a ProviderHandshakeError.
    """

    pass
