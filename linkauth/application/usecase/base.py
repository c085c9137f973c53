"""Use case base."""

from abc import ABC, abstractmethod
from typing import Generic, TypeVar

RequestT = TypeVar("RequestT")
ResponseT = TypeVar("ResponseT")


class BaseUseCase(ABC, Generic[RequestT, ResponseT]):
    """One operation of the service, driven by a request model.

    Use cases sit between the HTTP routes and the domain services; they
    hold the steps of an operation but no business rules of their own.
    """

    @abstractmethod
    async def execute(self, request: RequestT) -> ResponseT:
        pass
