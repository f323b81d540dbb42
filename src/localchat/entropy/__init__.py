"""Randomness source subsystem for localchat.

Re-exports the ABC, registry, and all built-in source implementations
for convenient access::

    from localchat.entropy import EntropySource, EntropySourceRegistry
    from localchat.entropy import SystemEntropySource, SeededEntropySource
"""

from localchat.entropy.base import EntropySource
from localchat.entropy.fixed import FixedSequenceSource
from localchat.entropy.registry import (
    EntropySourceRegistry,
    build_entropy_source,
    register_entropy_source,
)
from localchat.entropy.seeded import SeededEntropySource
from localchat.entropy.system import SystemEntropySource

__all__ = [
    "EntropySource",
    "EntropySourceRegistry",
    "FixedSequenceSource",
    "SeededEntropySource",
    "SystemEntropySource",
    "build_entropy_source",
    "register_entropy_source",
]
