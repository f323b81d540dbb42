"""Seeded pseudo-random source for reproducible generation.

Wraps ``numpy.random.default_rng`` so the same seed yields the same sequence
of draws, and therefore the same sampled tokens for identical logits.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

from localchat.entropy.base import EntropySource
from localchat.entropy.registry import register_entropy_source

if TYPE_CHECKING:
    from localchat.config import LocalChatConfig


@register_entropy_source("seeded")
class SeededEntropySource(EntropySource):
    """PCG64-backed source with optional seed.

    Args:
        seed: RNG seed. ``None`` draws a fresh seed from the OS.
    """

    def __init__(self, seed: int | None = None) -> None:
        self._seed = seed
        self._rng = np.random.default_rng(seed)

    @classmethod
    def from_config(cls, config: LocalChatConfig) -> SeededEntropySource:
        """Build a source seeded with ``config.entropy_seed``."""
        return cls(seed=config.entropy_seed)

    @property
    def name(self) -> str:
        """Return ``'seeded'``."""
        return "seeded"

    @property
    def is_available(self) -> bool:
        """Always returns ``True``."""
        return True

    @property
    def seed(self) -> int | None:
        """The seed this source was created with."""
        return self._seed

    def get_random_bytes(self, n: int) -> bytes:
        """Return *n* pseudo-random bytes from the seeded generator."""
        return self._rng.bytes(n)

    def random(self) -> float:
        """Return one float in [0, 1) straight from the generator."""
        return float(self._rng.random())

    def close(self) -> None:
        """No-op, nothing to release."""
