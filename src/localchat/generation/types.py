"""Data types and capability protocols for the generation loop."""

from __future__ import annotations

import enum
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol, Union, runtime_checkable

import numpy as np

LogitVector = Union[Sequence[float], np.ndarray]


@runtime_checkable
class Tokenizer(Protocol):
    """Text <-> token-ID conversion supplied by the caller."""

    def encode(self, text: str, add_special_tokens: bool = True) -> Sequence[int]: ...

    def decode(self, tokens: Sequence[int], skip_special_tokens: bool = True) -> str: ...


@runtime_checkable
class LanguageModel(Protocol):
    """One forward pass: token IDs -> next-token logits over the vocabulary."""

    def predict(self, token_ids: Sequence[int]) -> LogitVector: ...


class ErrorKind(str, enum.Enum):
    """Failure categories reported by :class:`GenerationResult`."""

    RESOURCE_UNAVAILABLE = "resource_unavailable"
    INFERENCE_FAILED = "inference_failed"


class StopReason(str, enum.Enum):
    """Why a successful generation stopped."""

    END_MARKER = "end_marker"
    TOKEN_BUDGET = "token_budget"


class StatusKind(str, enum.Enum):
    """Phases of the status notification channel."""

    GENERATING = "generating"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self is not StatusKind.GENERATING


@dataclass(frozen=True, slots=True)
class StatusEvent:
    """A status notification for the caller.

    Attributes:
        kind: Phase of the generation.
        message: Display text: a progress note, the final text, or an
            error message.
    """

    kind: StatusKind
    message: str


@dataclass(frozen=True, slots=True)
class GenerationResult:
    """Outcome of one generate() call.

    Exactly one of ``text`` / ``error_kind`` is set.

    Attributes:
        text: Final decoded text on success, truncated at the end marker.
        error_kind: Failure category, ``None`` on success.
        error_message: Human-readable failure description.
        stop_reason: Why a successful generation stopped.
        tokens_generated: Number of tokens appended before stopping. Zero
            on failure since partial output is discarded.
    """

    text: str | None = None
    error_kind: ErrorKind | None = None
    error_message: str | None = None
    stop_reason: StopReason | None = None
    tokens_generated: int = 0

    @property
    def ok(self) -> bool:
        return self.error_kind is None

    @classmethod
    def success(cls, text: str, stop_reason: StopReason, tokens_generated: int) -> GenerationResult:
        return cls(text=text, stop_reason=stop_reason, tokens_generated=tokens_generated)

    @classmethod
    def failure(cls, kind: ErrorKind, message: str) -> GenerationResult:
        return cls(error_kind=kind, error_message=message)

    @property
    def display_text(self) -> str:
        """The string a caller shows: the text, or the error message."""
        if self.ok:
            return self.text or ""
        return self.error_message or ""
