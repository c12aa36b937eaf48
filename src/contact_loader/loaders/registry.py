"""Name -> contact loader lookup."""

from typing import Type

from contact_loader.loaders.actionnetwork import ActionNetworkLoader
from contact_loader.loaders.base import BaseContactLoader


class LoaderRegistry:
    """Contact loaders keyed by their `name` attribute."""

    _loaders: dict[str, Type[BaseContactLoader]] = {}

    @classmethod
    def register(cls, loader_cls: Type[BaseContactLoader]) -> Type[BaseContactLoader]:
        """Add a loader class; usable as a class decorator."""
        if not loader_cls.name:
            raise ValueError(f"{loader_cls.__name__} has no name")
        cls._loaders[loader_cls.name.lower()] = loader_cls
        return loader_cls

    @classmethod
    def get(cls, name: str, **kwargs) -> BaseContactLoader:
        """Instantiate the loader registered under name (case-insensitive); kwargs go to __init__."""
        loader_cls = cls._loaders.get(name.lower())
        if loader_cls is None:
            raise ValueError(f"Unknown loader: {name}. Available: {cls.available_loaders()}")
        return loader_cls(**kwargs)

    @classmethod
    def available_loaders(cls) -> list[str]:
        return sorted(cls._loaders)


LoaderRegistry.register(ActionNetworkLoader)
