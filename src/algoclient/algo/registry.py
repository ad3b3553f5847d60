from __future__ import annotations

from typing import Callable, ClassVar, Dict, List, Optional, Type

from algoclient.algo.entrypoint import EntryPoint


class HandlerRegistryError(RuntimeError):
    pass


class HandlerRegistry:
    """Named EntryPoint classes, populated by ``@register_handler`` at import time."""

    _registry: ClassVar[Dict[str, Type[EntryPoint]]] = {}

    @classmethod
    def register(
        cls,
        *,
        name: str,
        handler_class: Type[EntryPoint],
        overwrite: bool = False,
    ) -> None:
        if not (isinstance(handler_class, type) and issubclass(handler_class, EntryPoint)):
            raise HandlerRegistryError(f"Handler {name!r} must be an EntryPoint subclass, got {handler_class!r}")
        if not overwrite and name in cls._registry:
            existing = cls._registry[name]
            raise HandlerRegistryError(f"Handler already registered for name={name!r}: {existing}")
        cls._registry[name] = handler_class

    @classmethod
    def get(cls, name: str) -> Type[EntryPoint]:
        try:
            return cls._registry[name]
        except KeyError as exc:
            raise HandlerRegistryError(f"No handler registered for name={name!r}") from exc

    @classmethod
    def try_get(cls, name: str) -> Optional[Type[EntryPoint]]:
        return cls._registry.get(name)

    @classmethod
    def names(cls) -> List[str]:
        return sorted(cls._registry)

    @classmethod
    def clear(cls) -> None:
        cls._registry.clear()


def register_handler(
    *,
    name: str,
    overwrite: bool = False,
) -> Callable[[Type[EntryPoint]], Type[EntryPoint]]:
    def decorator(handler_class: Type[EntryPoint]) -> Type[EntryPoint]:
        HandlerRegistry.register(name=name, handler_class=handler_class, overwrite=overwrite)
        return handler_class

    return decorator
