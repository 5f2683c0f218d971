"""Base classes for dependency injection providers."""

from typing import ClassVar, Literal

from dishka import Provider

Component = Literal["persistence"]


class ProviderBase(Provider):
    """Base of every provider listed in ``PROVIDERS``.

    A mockable component is a base class that sets ``__mock_component__``
    and has one production and one mock subclass, told apart by
    ``__is_mock__``. Providers without a component are used as-is.
    """

    __mock_component__: ClassVar[Component | None] = None
    __is_mock__: ClassVar[bool] = False

    @classmethod
    def is_mockable(cls) -> bool:
        """Whether this provider is a component base with swappable implementations."""
        return cls.__mock_component__ is not None and bool(cls.__subclasses__())
