"""Domain service base."""


class Service:
    """Marker base for domain services.

    Services are stateless apart from their collaborators and are built per
    request by the DI container.
    """

    pass
