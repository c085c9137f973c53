"""Provider base class and component selection."""

from typing import ClassVar, Literal

from dishka import Provider

# Infrastructure that tests can replace with in-process fakes
Component = Literal["github", "persistence"]


class ProviderBase(Provider):
    """Base for every linkauth DI provider.

    A provider class without subclasses is concrete and used as is. A
    provider class with subclasses is a mockable component: its subclasses
    are the production and mock implementations, told apart by __is_mock__.

    Attributes:
        __mock_component__: Component name of a mockable provider
        __is_mock__: Whether this class is the mock implementation
        __depends_on__: Components that must also be real when this one is
    """

    __mock_component__: ClassVar[Component | None] = None
    __is_mock__: ClassVar[bool] = False
    __depends_on__: ClassVar[frozenset[str]] = frozenset()

    @classmethod
    def is_mockable(cls) -> bool:
        """Whether implementations of this provider can be swapped."""
        return bool(cls.__subclasses__())

    @classmethod
    def select(cls, use_mock: bool = False) -> type["ProviderBase"]:
        """Pick the class to instantiate for this provider.

        Args:
            use_mock: Whether the mock implementation is wanted

        Returns:
            The provider itself if it is concrete, otherwise the matching
            implementation subclass

        Raises:
            ValueError: If the wanted implementation is not defined
        """
        if not cls.is_mockable():
            return cls

        for impl in cls.__subclasses__():
            if impl.__is_mock__ == use_mock:
                return impl

        kind = "mock" if use_mock else "production"
        raise ValueError(
            f"No {kind} implementation for {cls.__mock_component__ or cls.__name__}"
        )
