"""Top-k categorical sampler.

Implements the per-token selection pipeline: top-k selection -> exponentiate
-> normalize -> cumulative walk with one uniform draw from the injected
randomness source.

Candidates are walked in descending score order, so a draw near 0.0 picks
the highest-scoring token and a draw near 1.0 picks the k-th.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Union

import numpy as np

from localchat.entropy.base import EntropySource
from localchat.entropy.system import SystemEntropySource
from localchat.exceptions import TokenSelectionError
from localchat.sampling.types import SampleResult, TopKCandidate

LogitsLike = Union[Sequence[float], np.ndarray]

# Returned when the logit vector is empty and carries no information.
EMPTY_LOGITS_FALLBACK = 0


class TopKSampler:
    """Top-k sampler with an injectable randomness source.

    The sampler holds no state besides its source; each call to
    :meth:`select` consumes at most one draw.

    Args:
        source: Provider of uniform draws. Defaults to the OS source.
    """

    def __init__(self, source: EntropySource | None = None) -> None:
        self._source = source if source is not None else SystemEntropySource()

    @property
    def source(self) -> EntropySource:
        """The randomness source feeding this sampler."""
        return self._source

    def sample(self, logits: LogitsLike, k: int) -> int:
        """Return the vocabulary index chosen by top-k sampling.

        Args:
            logits: One score per vocabulary entry.
            k: Number of highest-scoring candidates to sample from.

        Returns:
            An index into *logits*, or 0 if *logits* is empty.
        """
        return self.select(logits, k).token_id

    def select(self, logits: LogitsLike, k: int) -> SampleResult:
        """Sample one token and report how it was chosen.

        Pipeline:
            1. Pair every score with its index and keep the k largest
            2. Exponentiate the kept scores
            3. Normalize to probabilities
            4. Draw u in [0, 1) and return the first candidate whose
               cumulative probability exceeds u

        Args:
            logits: One score per vocabulary entry.
            k: Number of highest-scoring candidates. Clamped to the
                vocabulary size.

        Returns:
            SampleResult with the selected token and diagnostics.

        Raises:
            TokenSelectionError: If *k* < 1 and *logits* is non-empty.
        """
        scores = np.asarray(logits, dtype=np.float64).reshape(-1)
        if scores.size == 0:
            return SampleResult(
                token_id=EMPTY_LOGITS_FALLBACK,
                token_rank=0,
                token_prob=0.0,
                num_candidates=0,
                u=None,
                diagnostics={"empty_logits": True},
            )
        if k < 1:
            raise TokenSelectionError(f"top-k breadth must be >= 1, got {k}")

        indices, top_scores = self._top_k(scores, k)
        num_candidates = len(indices)

        weights = self._exponentiate(top_scores)
        total = float(np.sum(weights))
        if not total > 0.0:
            # Every weight underflowed; fall back to the best candidate.
            return SampleResult(
                token_id=int(indices[0]),
                token_rank=0,
                token_prob=1.0,
                num_candidates=num_candidates,
                u=None,
                diagnostics={"degenerate": True, "effective_top_k": num_candidates},
            )

        probs = weights / total
        u = self._source.random()
        rank, residual = self._walk_cdf(probs, u)

        return SampleResult(
            token_id=int(indices[rank]),
            token_rank=rank,
            token_prob=float(probs[rank]),
            num_candidates=num_candidates,
            u=u,
            diagnostics={
                "degenerate": False,
                "residual_fallback": residual,
                "effective_top_k": num_candidates,
            },
        )

    def candidates(self, logits: LogitsLike, k: int) -> list[TopKCandidate]:
        """Return the top-k working set in selection order.

        Args:
            logits: One score per vocabulary entry.
            k: Number of candidates to keep (clamped to the vocabulary size).

        Returns:
            Candidates ordered by descending score.
        """
        scores = np.asarray(logits, dtype=np.float64).reshape(-1)
        if scores.size == 0:
            return []
        if k < 1:
            raise TokenSelectionError(f"top-k breadth must be >= 1, got {k}")
        indices, top_scores = self._top_k(scores, k)
        return [
            TopKCandidate(token_id=int(i), score=float(s))
            for i, s in zip(indices, top_scores)
        ]

    @staticmethod
    def _top_k(scores: np.ndarray, k: int) -> tuple[np.ndarray, np.ndarray]:
        """Select the k largest scores, keeping their original indices.

        Equal scores are ordered by ascending index. Which of several tied
        scores survive at the k-th boundary is unspecified.

        Args:
            scores: 1-D float array of logits.
            k: Requested breadth (>= 1).

        Returns:
            Tuple of (original indices, scores), both in descending score order.
        """
        vocab_size = scores.shape[0]
        k = min(k, vocab_size)
        if k < vocab_size:
            # O(n) selection of the k largest, then sort only those.
            indices = np.argpartition(-scores, k - 1)[:k]
        else:
            indices = np.arange(vocab_size)
        order = np.lexsort((indices, -scores[indices]))
        indices = indices[order]
        return indices, scores[indices]

    @staticmethod
    def _exponentiate(top_scores: np.ndarray) -> np.ndarray:
        """Exponentiate the selected scores without overflowing.

        Raw exponentials are tried first so that hugely negative scores
        underflow to zero and trigger the degenerate fallback. If any weight
        overflows, the scores are shifted by the top score instead.

        Args:
            top_scores: Selected scores in descending order.

        Returns:
            Unnormalized, non-negative weights.
        """
        with np.errstate(over="ignore", under="ignore", invalid="ignore"):
            weights = np.exp(top_scores)
            if not np.all(np.isfinite(weights)):
                weights = np.exp(top_scores - top_scores[0])
        return weights

    @staticmethod
    def _walk_cdf(probs: np.ndarray, u: float) -> tuple[int, bool]:
        """Find the first candidate whose cumulative mass exceeds *u*.

        Args:
            probs: Candidate probabilities in selection order.
            u: Uniform draw in [0, 1).

        Returns:
            Tuple of (rank, residual). ``residual`` is ``True`` when rounding
            left the total mass at or below *u* and the last candidate was
            returned instead.
        """
        cdf = np.cumsum(probs)
        rank = int(np.searchsorted(cdf, u, side="right"))
        if rank >= len(probs):
            return len(probs) - 1, True
        return rank, False


def sample_top_k(logits: LogitsLike, k: int, source: EntropySource | None = None) -> int:
    """Sample one vocabulary index with a throwaway :class:`TopKSampler`.

    Args:
        logits: One score per vocabulary entry.
        k: Top-k breadth (>= 1).
        source: Randomness source; the OS source when ``None``.

    Returns:
        The selected vocabulary index, or 0 for empty logits.
    """
    return TopKSampler(source).sample(logits, k)
