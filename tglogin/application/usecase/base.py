"""Base use case."""

from abc import ABC, abstractmethod
from typing import Generic, TypeVar

RequestT = TypeVar("RequestT")
ResponseT = TypeVar("ResponseT")


class BaseUseCase(ABC, Generic[RequestT, ResponseT]):
    """Application entry point that sequences domain services for one request."""

    @abstractmethod
    async def execute(self, request: RequestT) -> ResponseT:
        pass
