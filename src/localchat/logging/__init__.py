"""Diagnostic logging subsystem for localchat.

Provides immutable per-step records and a configurable logger that supports
none/summary/full verbosity and in-memory diagnostic mode.
"""

from localchat.logging.logger import GenerationLogger
from localchat.logging.types import StepRecord

__all__ = [
    "GenerationLogger",
    "StepRecord",
]
