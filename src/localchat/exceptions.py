"""Exception hierarchy for localchat.

All exceptions derive from LocalChatError, enabling broad catch patterns
at the generation boundary while allowing fine-grained handling internally.
"""


class LocalChatError(Exception):
    """Base exception for all localchat errors."""


class ConfigValidationError(LocalChatError):
    """Configuration field validation failed.

    Raised when configuration values are out of range or of the wrong type,
    e.g. a non-positive ``top_k`` or an empty end-of-sequence marker.
    """


class EntropyUnavailableError(LocalChatError):
    """A randomness source cannot provide a draw."""


class TokenSelectionError(LocalChatError):
    """Token selection failed.

    Raised when the sampler is called with a non-positive top-k breadth.
    """


class ResourceUnavailableError(LocalChatError):
    """The tokenizer or model capability is missing or not ready."""


class InferenceFailedError(LocalChatError):
    """A prediction call produced logits that cannot be interpreted.

    Raised for non 1-D output, non-numeric values, or NaN scores.
    """
