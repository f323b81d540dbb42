"""Fixed-sequence source that replays caller-supplied draws.

Useful for deterministic tests and for replaying a recorded generation:
each ``random()`` call returns the next value of the sequence, cycling
back to the start when it is exhausted.
"""

from __future__ import annotations

from collections.abc import Iterable

from localchat.entropy.base import EntropySource
from localchat.exceptions import EntropyUnavailableError


class FixedSequenceSource(EntropySource):
    """Replays a fixed list of uniform draws.

    Not registered by name since it needs its values at construction time.

    Args:
        values: Draws to replay, each in [0, 1).
        cycle: Restart from the first value once exhausted. When ``False``
            an exhausted source raises ``EntropyUnavailableError``.

    Raises:
        ValueError: If *values* is empty or contains a value outside [0, 1).
    """

    def __init__(self, values: Iterable[float], cycle: bool = True) -> None:
        self._values = [float(v) for v in values]
        if not self._values:
            raise ValueError("FixedSequenceSource needs at least one value")
        for v in self._values:
            if not 0.0 <= v < 1.0:
                raise ValueError(f"Draw {v!r} is outside [0, 1)")
        self._cycle = cycle
        self._position = 0

    @property
    def name(self) -> str:
        """Return ``'fixed'``."""
        return "fixed"

    @property
    def is_available(self) -> bool:
        """``True`` while draws remain (always, when cycling)."""
        return self._cycle or self._position < len(self._values)

    @property
    def draws_consumed(self) -> int:
        """Number of ``random()`` calls served so far."""
        return self._position

    def random(self) -> float:
        """Return the next value of the sequence.

        Raises:
            EntropyUnavailableError: If the sequence is exhausted and not cycling.
        """
        if not self.is_available:
            raise EntropyUnavailableError(
                f"Fixed sequence exhausted after {len(self._values)} draws"
            )
        value = self._values[self._position % len(self._values)]
        self._position += 1
        return value

    def get_random_bytes(self, n: int) -> bytes:
        """Encode successive draws as bytes (one byte per draw)."""
        return bytes(int(self.random() * 256) for _ in range(n))

    def reset(self) -> None:
        """Rewind to the first value."""
        self._position = 0

    def close(self) -> None:
        """No-op, nothing to release."""
