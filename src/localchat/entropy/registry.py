"""Randomness source registry with entry-point auto-discovery.

Built-in sources are registered at module import time via the
``@register_entropy_source`` decorator. Third-party sources from other
packages are discovered lazily on the first :meth:`EntropySourceRegistry.get`
call via the ``localchat.entropy_sources`` entry-point group.
"""

from __future__ import annotations

import importlib.metadata
import logging
from typing import TYPE_CHECKING, ClassVar

from localchat.exceptions import ConfigValidationError

if TYPE_CHECKING:
    from collections.abc import Callable

    from localchat.config import LocalChatConfig
    from localchat.entropy.base import EntropySource

logger = logging.getLogger("localchat")

_ENTRY_POINT_GROUP = "localchat.entropy_sources"


class EntropySourceRegistry:
    """Registry for randomness source classes.

    Discovery chain:

    1. Built-in sources registered via ``@register_entropy_source`` decorator
    2. Third-party sources discovered via ``localchat.entropy_sources``
       entry points (loaded lazily on first ``get()`` call)
    """

    _registry: ClassVar[dict[str, type[EntropySource]]] = {}
    _entry_points_loaded: ClassVar[bool] = False

    @classmethod
    def register(cls, name: str) -> Callable[[type[EntropySource]], type[EntropySource]]:
        """Decorator to register a source class under a string key.

        Args:
            name: Unique identifier for the source (e.g., ``'system'``).

        Returns:
            The original class, unmodified.
        """

        def decorator(source_cls: type[EntropySource]) -> type[EntropySource]:
            cls._registry[name] = source_cls
            return source_cls

        return decorator

    @classmethod
    def get(cls, name: str) -> type[EntropySource]:
        """Look up a source class by name.

        Loads entry points on the first call if not already loaded.

        Args:
            name: Registered identifier for the source.

        Returns:
            The source class (not an instance).

        Raises:
            KeyError: If *name* is not found after loading entry points.
        """
        if name in cls._registry:
            return cls._registry[name]

        if not cls._entry_points_loaded:
            cls._load_entry_points()
            if name in cls._registry:
                return cls._registry[name]

        available = ", ".join(sorted(cls._registry.keys())) or "(none)"
        raise KeyError(f"Unknown entropy source: {name!r}. Available: {available}")

    @classmethod
    def build(cls, config: LocalChatConfig) -> EntropySource:
        """Instantiate the source named by ``config.entropy_source_type``.

        Classes exposing a ``from_config`` classmethod are built from the
        config; all others are built with no arguments.

        Args:
            config: Configuration naming the source.

        Returns:
            A ready-to-use EntropySource.

        Raises:
            ConfigValidationError: If the name is not registered.
        """
        try:
            source_cls = cls.get(config.entropy_source_type)
        except KeyError as exc:
            raise ConfigValidationError(str(exc)) from exc

        from_config = getattr(source_cls, "from_config", None)
        if callable(from_config):
            return from_config(config)
        return source_cls()

    @classmethod
    def list_available(cls) -> list[str]:
        """Return all registered source names.

        Triggers entry-point loading if not yet done.
        """
        if not cls._entry_points_loaded:
            cls._load_entry_points()
        return sorted(cls._registry.keys())

    @classmethod
    def _load_entry_points(cls) -> None:
        """Discover and register sources from the entry-point group.

        Errors during individual entry-point loading are logged as warnings
        but do not prevent other sources from loading.
        """
        cls._entry_points_loaded = True
        try:
            eps = importlib.metadata.entry_points(group=_ENTRY_POINT_GROUP)
        except Exception:  # Intentional: must not crash on broken metadata
            logger.warning("Failed to load entry points for %s", _ENTRY_POINT_GROUP, exc_info=True)
            return

        for ep in eps:
            if ep.name in cls._registry:
                # Built-in decorator registration takes precedence.
                continue
            try:
                cls._registry[ep.name] = ep.load()
                logger.debug("Loaded entropy source %r from entry point", ep.name)
            except Exception:  # Intentional: one bad plugin must not block others
                logger.warning(
                    "Failed to load entropy source entry point %r: %s",
                    ep.name,
                    ep.value,
                    exc_info=True,
                )


register_entropy_source = EntropySourceRegistry.register


def build_entropy_source(config: LocalChatConfig) -> EntropySource:
    """Module-level shortcut for :meth:`EntropySourceRegistry.build`."""
    return EntropySourceRegistry.build(config)
