"""Generation loop subsystem for localchat.

Runs the encode -> predict -> sample -> decode loop over injected tokenizer
and model capabilities and reports progress through status events.
"""

from localchat.generation.generator import TextGenerator, as_logit_vector
from localchat.generation.types import (
    ErrorKind,
    GenerationResult,
    LanguageModel,
    StatusEvent,
    StatusKind,
    StopReason,
    Tokenizer,
)

__all__ = [
    "ErrorKind",
    "GenerationResult",
    "LanguageModel",
    "StatusEvent",
    "StatusKind",
    "StopReason",
    "TextGenerator",
    "Tokenizer",
    "as_logit_vector",
]
