"""Diagnostic logger for per-step generation events.

Uses the standard ``logging`` module with the ``"localchat"`` logger.
No ``print()`` statements. Supports three verbosity levels and an
in-memory diagnostic mode for post-hoc analysis.
"""

from __future__ import annotations

import json
import logging
import threading
from dataclasses import asdict
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from localchat.config import LocalChatConfig
    from localchat.logging.types import StepRecord

logger = logging.getLogger("localchat")


class GenerationLogger:
    """Per-step diagnostic logger.

    Log levels:
        ``"none"``: No logging output. Records are still stored if
        ``diagnostic_mode=True``.

        ``"summary"``: One line per step with key metrics (step, token_id,
        rank, probability, u, timings).

        ``"full"``: Full JSON dump of all record fields.

    Diagnostic mode stores all records in memory for post-hoc analysis via
    ``get_diagnostic_data()`` and ``get_summary_stats()``. Storage is
    guarded by a lock since generate() calls may run on worker threads.
    """

    def __init__(self, config: LocalChatConfig) -> None:
        self._log_level = config.log_level
        self._diagnostic_mode = config.diagnostic_mode
        self._records: list[StepRecord] = []
        self._lock = threading.Lock()

    def log_step(self, record: StepRecord) -> None:
        """Log a single generation step.

        Args:
            record: Immutable record of the step.
        """
        if self._diagnostic_mode:
            with self._lock:
                self._records.append(record)

        if self._log_level == "none":
            return

        if self._log_level == "summary":
            logger.info(
                "step=%d token=%d rank=%d prob=%.4f u=%.6f k=%d len=%d "
                "source=%s%s predict=%.2fms sample=%.2fms",
                record.step,
                record.token_id,
                record.token_rank,
                record.token_prob,
                record.u_value,
                record.num_candidates,
                record.sequence_length,
                record.entropy_source,
                " [DEGENERATE]" if record.degenerate else "",
                record.predict_ms,
                record.sample_ms,
            )
        elif self._log_level == "full":
            logger.info("step_record: %s", json.dumps(asdict(record), default=str))

    def get_diagnostic_data(self) -> list[StepRecord]:
        """Return all stored records (requires ``diagnostic_mode=True``)."""
        with self._lock:
            return list(self._records)

    def clear(self) -> None:
        """Drop all stored records."""
        with self._lock:
            self._records.clear()

    def get_summary_stats(self) -> dict[str, Any]:
        """Compute summary statistics over all stored records.

        Returns:
            Dictionary with aggregate stats, or empty dict if no records.
        """
        records = self.get_diagnostic_data()
        if not records:
            return {}

        n = len(records)
        drawn = [r.u_value for r in records if r.u_value >= 0.0]
        predict_times = [r.predict_ms for r in records]
        degenerate_count = sum(1 for r in records if r.degenerate)
        residual_count = sum(1 for r in records if r.residual_fallback)

        return {
            "total_steps": n,
            "mean_u": sum(drawn) / len(drawn) if drawn else None,
            "mean_rank": sum(r.token_rank for r in records) / n,
            "mean_prob": sum(r.token_prob for r in records) / n,
            "mean_predict_ms": sum(predict_times) / n,
            "max_predict_ms": max(predict_times),
            "mean_sample_ms": sum(r.sample_ms for r in records) / n,
            "degenerate_count": degenerate_count,
            "residual_fallback_count": residual_count,
        }
