"""Shared pytest fixtures for localchat tests.

Provides configuration objects, deterministic randomness sources, and stub
tokenizer / model capabilities so the generation loop runs without any real
model weights.
"""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np
import pytest

from localchat.config import LocalChatConfig
from localchat.entropy.fixed import FixedSequenceSource
from localchat.entropy.seeded import SeededEntropySource
from localchat.sampling.sampler import TopKSampler

VOCAB_SIZE = 128
BOS_ID = 2


class CharTokenizer:
    """ASCII character tokenizer: token ID == code point.

    ``BOS_ID`` is the only special token; it is prepended on encode when
    ``add_special_tokens`` is set and rendered as ``"<s>"`` unless skipped.
    """

    def __init__(self) -> None:
        self.encode_calls = 0
        self.decode_calls: list[list[int]] = []

    def encode(self, text: str, add_special_tokens: bool = True) -> list[int]:
        self.encode_calls += 1
        ids = [ord(c) for c in text]
        return [BOS_ID, *ids] if add_special_tokens else ids

    def decode(self, tokens: Sequence[int], skip_special_tokens: bool = True) -> str:
        self.decode_calls.append(list(tokens))
        pieces = []
        for t in tokens:
            if t == BOS_ID:
                if not skip_special_tokens:
                    pieces.append("<s>")
                continue
            pieces.append(chr(t))
        return "".join(pieces)


class ScriptedModel:
    """Model double that makes one token overwhelmingly likely per call.

    The scripted token gets a logit of 50 and every other token 0, so with
    any top-k <= vocab size the scripted token carries all but ~1e-20 of the
    mass and is selected for every draw in [0, 1).

    Args:
        script: Text whose characters are emitted in order, cycling.
        fail_on_call: 1-based call number that raises instead of predicting.
    """

    def __init__(self, script: str, fail_on_call: int | None = None) -> None:
        self._script = [ord(c) for c in script]
        self._fail_on_call = fail_on_call
        self.calls: list[list[int]] = []

    @property
    def call_count(self) -> int:
        return len(self.calls)

    def predict(self, token_ids: Sequence[int]) -> np.ndarray:
        self.calls.append(list(token_ids))
        if self._fail_on_call is not None and len(self.calls) == self._fail_on_call:
            raise RuntimeError("device lost")
        target = self._script[(len(self.calls) - 1) % len(self._script)]
        logits = np.zeros(VOCAB_SIZE, dtype=np.float32)
        logits[target] = 50.0
        return logits


@pytest.fixture
def default_config() -> LocalChatConfig:
    """Return a config with default values."""
    return LocalChatConfig()


@pytest.fixture
def silent_config() -> LocalChatConfig:
    """Return a config with no logging for noise-free tests."""
    return LocalChatConfig(log_level="none")


@pytest.fixture
def diagnostic_config() -> LocalChatConfig:
    """Return a config with diagnostic mode and full logging enabled."""
    return LocalChatConfig(log_level="full", diagnostic_mode=True)


@pytest.fixture
def fixed_sampler() -> TopKSampler:
    """Return a sampler that always draws 0.5."""
    return TopKSampler(FixedSequenceSource([0.5]))


@pytest.fixture
def seeded_sampler() -> TopKSampler:
    """Return a sampler with a seeded source for reproducibility."""
    return TopKSampler(SeededEntropySource(seed=42))


@pytest.fixture
def tokenizer() -> CharTokenizer:
    return CharTokenizer()


@pytest.fixture
def sample_logits_uniform() -> np.ndarray:
    """Return equal logits over a vocabulary of 100."""
    return np.zeros(100, dtype=np.float64)


@pytest.fixture
def sample_logits_large_vocab() -> np.ndarray:
    """Return random logits for a realistic vocabulary size (50272, OPT-125m).

    Uses a fixed RNG seed for reproducibility.
    """
    rng = np.random.default_rng(seed=12345)
    return rng.standard_normal(50272).astype(np.float64)
