"""System randomness source using ``os.urandom()``.

This is the default source. It is cryptographically secure and always
available, but not reproducible.
"""

from __future__ import annotations

import os

from localchat.entropy.base import EntropySource
from localchat.entropy.registry import register_entropy_source


@register_entropy_source("system")
class SystemEntropySource(EntropySource):
    """``os.urandom()`` wrapper: always available and cryptographically secure."""

    @property
    def name(self) -> str:
        """Return ``'system'``."""
        return "system"

    @property
    def is_available(self) -> bool:
        """Always returns ``True``; ``os.urandom()`` never fails."""
        return True

    def get_random_bytes(self, n: int) -> bytes:
        """Return *n* bytes from the OS CSPRNG.

        Args:
            n: Number of random bytes to generate.

        Returns:
            Exactly *n* bytes of randomness from ``os.urandom()``.
        """
        return os.urandom(n)

    def close(self) -> None:
        """No-op, nothing to release."""
