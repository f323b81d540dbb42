"""localchat: minimal top-k text generation over pluggable model capabilities.

Tokenizes a prompt, repeatedly asks a causal language model for next-token
logits, samples with top-k from an injectable randomness source, and decodes
until an end-of-sequence marker appears or the token budget runs out.
"""

from __future__ import annotations

try:
    from importlib.metadata import PackageNotFoundError, version

    __version__ = version("localchat")
except PackageNotFoundError:
    __version__ = "0.0.0"

from localchat.config import LocalChatConfig, config_hash, load_config
from localchat.exceptions import (
    ConfigValidationError,
    EntropyUnavailableError,
    InferenceFailedError,
    LocalChatError,
    ResourceUnavailableError,
    TokenSelectionError,
)
from localchat.generation import (
    ErrorKind,
    GenerationResult,
    LanguageModel,
    StatusEvent,
    StatusKind,
    StopReason,
    TextGenerator,
    Tokenizer,
)
from localchat.sampling import TopKSampler, sample_top_k

__all__ = [
    "ConfigValidationError",
    "EntropyUnavailableError",
    "ErrorKind",
    "GenerationResult",
    "InferenceFailedError",
    "LanguageModel",
    "LocalChatConfig",
    "LocalChatError",
    "ResourceUnavailableError",
    "StatusEvent",
    "StatusKind",
    "StopReason",
    "TextGenerator",
    "TokenSelectionError",
    "Tokenizer",
    "TopKSampler",
    "__version__",
    "config_hash",
    "load_config",
    "sample_top_k",
]
