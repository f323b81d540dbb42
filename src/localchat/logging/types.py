"""Data types for the diagnostic logging subsystem."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class StepRecord:
    """Immutable record of one generation step.

    Attributes:
        timestamp_ns: Monotonic time at the start of the step (nanoseconds).
        predict_ms: Time spent in the model's predict call (milliseconds).
        sample_ms: Time spent in the sampler (milliseconds).
        step: Zero-based step index within the generate() call.
        sequence_length: Token sequence length after appending.
        vocab_size: Length of the logit vector.
        token_id: Vocabulary index of the sampled token.
        token_rank: Rank of the sampled token among the top-k candidates.
        token_prob: Probability of the sampled token within the top-k set.
        num_candidates: Effective k after clamping.
        u_value: Uniform draw used, or -1.0 when none was consumed.
        entropy_source: Name of the randomness source.
        degenerate: True if the underflow fallback picked the token.
        residual_fallback: True if rounding forced the last candidate.
        config_hash: 16-char SHA-256 prefix of the active config.
    """

    # Timing
    timestamp_ns: int
    predict_ms: float
    sample_ms: float

    # Sequence
    step: int
    sequence_length: int
    vocab_size: int

    # Selection
    token_id: int
    token_rank: int
    token_prob: float
    num_candidates: int
    u_value: float
    entropy_source: str
    degenerate: bool
    residual_fallback: bool

    # Config snapshot
    config_hash: str
