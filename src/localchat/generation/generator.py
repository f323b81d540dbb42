"""Autoregressive generation loop.

Orchestrates one generate() call:
    encode prompt -> (predict -> sample -> append -> decode -> stop check)* -> text.

The tokenizer and model are injected capabilities; nothing is loaded here.
Every failure inside the loop is converted into a failure GenerationResult,
and callers observe progress through a two-phase status channel: one
GENERATING event, then exactly one COMPLETED or FAILED event.
"""

from __future__ import annotations

import logging
import threading
import time
from concurrent.futures import Future, ThreadPoolExecutor
from typing import TYPE_CHECKING, Any

import numpy as np

from localchat.config import LocalChatConfig, config_hash
from localchat.entropy.registry import build_entropy_source
from localchat.exceptions import InferenceFailedError, ResourceUnavailableError
from localchat.generation.types import (
    ErrorKind,
    GenerationResult,
    StatusEvent,
    StatusKind,
    StopReason,
)
from localchat.logging.logger import GenerationLogger
from localchat.logging.types import StepRecord
from localchat.sampling.sampler import TopKSampler

if TYPE_CHECKING:
    from collections.abc import Callable

    from localchat.generation.types import LanguageModel, Tokenizer
    from localchat.sampling.types import SampleResult

    StatusListener = Callable[[StatusEvent], None]

logger = logging.getLogger("localchat")

GENERATING_MESSAGE = "Generating..."
RESOURCE_UNAVAILABLE_MESSAGE = "Model or Tokenizer not loaded."
INFERENCE_FAILED_PREFIX = "Inference failed: "


def as_logit_vector(raw: Any) -> np.ndarray:
    """Coerce a model's prediction into a 1-D float64 logit vector.

    Leading batch dimensions of size one are dropped, so ``(1, vocab)``
    outputs are accepted.

    Args:
        raw: Whatever the model returned (sequence, array, tensor-like).

    Returns:
        1-D float64 array, possibly empty.

    Raises:
        InferenceFailedError: If the output is not numeric, not 1-D after
            squeezing, or contains NaN.
    """
    try:
        logits = np.asarray(raw, dtype=np.float64)
    except (TypeError, ValueError) as exc:
        raise InferenceFailedError(f"Could not interpret logits: {exc}") from exc

    while logits.ndim > 1 and logits.shape[0] == 1:
        logits = logits[0]
    if logits.ndim != 1:
        raise InferenceFailedError(
            f"Expected a 1-D logit vector, got shape {tuple(logits.shape)}"
        )
    if np.isnan(logits).any():
        raise InferenceFailedError("Logit vector contains NaN")
    return logits


class TextGenerator:
    """Top-k text generator over injected tokenizer and model capabilities.

    The generator keeps no state between calls: each generate() owns its
    own token sequence. The sampler's randomness source is shared, so
    concurrent submissions are serialized through a single worker unless
    ``max_workers`` says otherwise.

    Args:
        tokenizer: Tokenizer capability, or ``None`` if not loaded.
        model: Model inference capability, or ``None`` if not loaded.
        config: Generation parameters. Loaded from the environment if ``None``.
        sampler: Top-k sampler. Built from ``config.entropy_source_type`` if
            ``None``.
        on_status: Optional listener subscribed at construction.
        max_workers: Thread pool size used by :meth:`submit`.
    """

    def __init__(
        self,
        tokenizer: Tokenizer | None,
        model: LanguageModel | None,
        config: LocalChatConfig | None = None,
        sampler: TopKSampler | None = None,
        on_status: StatusListener | None = None,
        max_workers: int = 1,
    ) -> None:
        self._tokenizer = tokenizer
        self._model = model
        self._config = config if config is not None else LocalChatConfig()
        self._sampler = (
            sampler if sampler is not None else TopKSampler(build_entropy_source(self._config))
        )
        self._logger = GenerationLogger(self._config)
        self._config_hash = config_hash(self._config)

        self._listeners: list[StatusListener] = []
        if on_status is not None:
            self._listeners.append(on_status)

        self._max_workers = max_workers
        self._executor: ThreadPoolExecutor | None = None
        self._executor_lock = threading.Lock()
        self._closed = False

        logger.info(
            "TextGenerator initialized: max_output_tokens=%d, top_k=%d, "
            "end_marker=%r, entropy_source=%s, ready=%s",
            self._config.max_output_tokens,
            self._config.top_k,
            self._config.end_of_sequence_marker,
            self._sampler.source.name,
            self.is_ready,
        )

    @property
    def config(self) -> LocalChatConfig:
        return self._config

    @property
    def sampler(self) -> TopKSampler:
        return self._sampler

    @property
    def generation_logger(self) -> GenerationLogger:
        """The diagnostic logger receiving one record per step."""
        return self._logger

    @property
    def is_ready(self) -> bool:
        """Whether both the tokenizer and the model are available."""
        return self._tokenizer is not None and self._model is not None

    def add_listener(self, listener: StatusListener) -> None:
        """Subscribe *listener* to status events of later calls."""
        self._listeners.append(listener)

    def remove_listener(self, listener: StatusListener) -> None:
        """Unsubscribe *listener*. Unknown listeners are ignored."""
        if listener in self._listeners:
            self._listeners.remove(listener)

    def generate(self, prompt: str) -> GenerationResult:
        """Generate a continuation of *prompt*.

        Emits one GENERATING event, runs the loop, then emits exactly one
        terminal event carrying the final text or the error message.

        Args:
            prompt: User text to continue.

        Returns:
            A success result with the decoded text, or a failure result.
            Never raises for collaborator errors.
        """
        self._notify(StatusEvent(StatusKind.GENERATING, GENERATING_MESSAGE))
        result = self._run(prompt)
        if result.ok:
            self._notify(StatusEvent(StatusKind.COMPLETED, result.display_text))
        else:
            self._notify(StatusEvent(StatusKind.FAILED, result.display_text))
        return result

    def submit(self, prompt: str) -> Future[GenerationResult]:
        """Run :meth:`generate` on a background worker.

        Args:
            prompt: User text to continue.

        Returns:
            A future resolving to the GenerationResult.

        Raises:
            RuntimeError: If the generator has been closed.
        """
        with self._executor_lock:
            if self._closed:
                raise RuntimeError("TextGenerator is closed")
            if self._executor is None:
                self._executor = ThreadPoolExecutor(
                    max_workers=self._max_workers,
                    thread_name_prefix="localchat",
                )
            executor = self._executor
        return executor.submit(self.generate, prompt)

    def close(self) -> None:
        """Wait for submitted work, then release the executor and randomness source."""
        with self._executor_lock:
            if self._closed:
                return
            self._closed = True
            executor, self._executor = self._executor, None
        if executor is not None:
            executor.shutdown(wait=True)
        self._sampler.source.close()

    def __enter__(self) -> TextGenerator:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    # ------------------------------------------------------------------

    def _run(self, prompt: str) -> GenerationResult:
        try:
            tokenizer, model = self._require_resources()
        except ResourceUnavailableError as exc:
            logger.warning("Generation skipped: %s", exc)
            return GenerationResult.failure(ErrorKind.RESOURCE_UNAVAILABLE, str(exc))

        try:
            text, reason, generated = self._loop(tokenizer, model, prompt)
        except Exception as exc:  # Intentional: collaborator errors become results
            logger.warning("Generation failed: %s", exc, exc_info=True)
            return GenerationResult.failure(
                ErrorKind.INFERENCE_FAILED, f"{INFERENCE_FAILED_PREFIX}{exc}"
            )

        logger.info(
            "Generation finished: reason=%s tokens=%d chars=%d",
            reason.value,
            generated,
            len(text),
        )
        return GenerationResult.success(text, reason, generated)

    def _require_resources(self) -> tuple[Tokenizer, LanguageModel]:
        if self._tokenizer is None or self._model is None:
            raise ResourceUnavailableError(RESOURCE_UNAVAILABLE_MESSAGE)
        return self._tokenizer, self._model

    def _loop(
        self,
        tokenizer: Tokenizer,
        model: LanguageModel,
        prompt: str,
    ) -> tuple[str, StopReason, int]:
        """Run the predict/sample/decode loop.

        Returns:
            Tuple of (final text, stop reason, tokens appended).
        """
        config = self._config
        marker = config.end_of_sequence_marker
        tokens = [
            int(t) for t in tokenizer.encode(prompt, add_special_tokens=config.add_special_tokens)
        ]
        text = ""

        for step in range(config.max_output_tokens):
            t_start_ns = time.perf_counter_ns()
            logits = as_logit_vector(model.predict(list(tokens)))
            t_predict_ns = time.perf_counter_ns()
            selection = self._sampler.select(logits, config.top_k)
            t_sample_ns = time.perf_counter_ns()

            tokens.append(selection.token_id)

            # Re-decode the whole sequence: markers may span several tokens.
            text = tokenizer.decode(list(tokens), skip_special_tokens=config.skip_special_tokens)
            if not isinstance(text, str):
                raise InferenceFailedError(
                    f"Tokenizer decode returned {type(text).__name__}, expected str"
                )

            self._log_step(
                step, tokens, logits, selection, t_start_ns, t_predict_ns, t_sample_ns
            )

            cut = text.find(marker)
            if cut != -1:
                return text[:cut], StopReason.END_MARKER, step + 1

        return text, StopReason.TOKEN_BUDGET, config.max_output_tokens

    def _log_step(
        self,
        step: int,
        tokens: list[int],
        logits: np.ndarray,
        selection: SampleResult,
        t_start_ns: int,
        t_predict_ns: int,
        t_sample_ns: int,
    ) -> None:
        record = StepRecord(
            timestamp_ns=t_start_ns,
            predict_ms=(t_predict_ns - t_start_ns) / 1_000_000.0,
            sample_ms=(t_sample_ns - t_predict_ns) / 1_000_000.0,
            step=step,
            sequence_length=len(tokens),
            vocab_size=len(logits),
            token_id=selection.token_id,
            token_rank=selection.token_rank,
            token_prob=selection.token_prob,
            num_candidates=selection.num_candidates,
            u_value=selection.u if selection.u is not None else -1.0,
            entropy_source=self._sampler.source.name,
            degenerate=bool(selection.diagnostics.get("degenerate", False)),
            residual_fallback=bool(selection.diagnostics.get("residual_fallback", False)),
            config_hash=self._config_hash,
        )
        self._logger.log_step(record)

    def _notify(self, event: StatusEvent) -> None:
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:  # Intentional: a broken listener must not break generation
                logger.warning(
                    "Status listener %r failed on %s event",
                    listener,
                    event.kind.value,
                    exc_info=True,
                )
