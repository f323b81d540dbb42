"""Data types for the sampling subsystem."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class TopKCandidate:
    """One member of the sampler's working set.

    Attributes:
        token_id: Index into the original vocabulary.
        score: Raw logit for that index.
    """

    token_id: int
    score: float


@dataclass(frozen=True, slots=True)
class SampleResult:
    """Result of top-k sampling.

    Attributes:
        token_id: Vocabulary index of the selected token.
        token_rank: Rank among the selected candidates (0 = highest score).
        token_prob: Probability of the selected token within the top-k set.
        num_candidates: Effective k after clamping to the vocabulary size.
        u: The uniform draw used, or ``None`` when no draw was consumed.
        diagnostics: Additional info (fallback flags, clamped k).
    """

    token_id: int
    token_rank: int
    token_prob: float
    num_candidates: int
    u: float | None
    diagnostics: dict[str, Any]
