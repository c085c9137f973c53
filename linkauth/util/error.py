"""Errors raised outside the domain, mostly while the application boots."""


class UtilError(Exception):
    """Base error of the utility layer."""

    pass


class ConfigurationError(UtilError):
    """The settings cannot produce a working service.

    Raised while the DI container builds APP-scoped objects, so a bad
    provider list or missing credentials stop the process at startup.
    """

    pass
