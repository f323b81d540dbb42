"""Abstract base class for all randomness sources.

Every source feeding the sampler, whether OS randomness, a seeded generator
or a fixed replay list, implements this interface. The ABC provides a default
``random()`` that builds a uniform float from ``get_random_bytes()`` and a
concrete ``health_check()`` method. Subclasses must implement the four
abstract members: ``name``, ``is_available``, ``get_random_bytes()``, and
``close()``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

# 53 bits fill the float64 mantissa exactly, so the result stays below 1.0.
_MANTISSA_BITS = 53
_FLOAT_SCALE = 1.0 / (1 << _MANTISSA_BITS)


class EntropySource(ABC):
    """Abstract base for all randomness sources.

    The sampler consumes exactly one ``random()`` draw per sampled token.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable source identifier (e.g., ``'system'``, ``'seeded'``)."""

    @property
    @abstractmethod
    def is_available(self) -> bool:
        """Whether the source can currently provide randomness."""

    @abstractmethod
    def get_random_bytes(self, n: int) -> bytes:
        """Return exactly *n* random bytes.

        Args:
            n: Number of random bytes to generate.

        Returns:
            Exactly *n* bytes of randomness.

        Raises:
            EntropyUnavailableError: If the source cannot provide bytes.
        """

    def random(self) -> float:
        """Return one uniform float in [0, 1).

        The default implementation reads 8 bytes, keeps the top 53 bits and
        scales them into [0, 1). Subclasses may override for native float
        generation.

        Returns:
            A float ``u`` with ``0.0 <= u < 1.0``.
        """
        raw = int.from_bytes(self.get_random_bytes(8), "big")
        return (raw >> (64 - _MANTISSA_BITS)) * _FLOAT_SCALE

    @abstractmethod
    def close(self) -> None:
        """Release resources held by the source."""

    def health_check(self) -> dict[str, Any]:
        """Return a status dictionary for this source.

        Returns:
            Dictionary with at least ``'source'`` and ``'healthy'`` keys.
        """
        return {"source": self.name, "healthy": self.is_available}
