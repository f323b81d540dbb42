"""Tests for localchat.config.

Covers:
- Default values
- Field validation (positive ints, non-empty marker, log level literal)
- Environment variable loading (monkeypatch os.environ)
- load_config error conversion
- config_hash stability
- Frozen immutability
"""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from localchat.config import LocalChatConfig, config_hash, load_config
from localchat.exceptions import ConfigValidationError


class TestDefaults:
    """Verify default values."""

    def test_generation_defaults(self) -> None:
        cfg = LocalChatConfig(_env_file=None)  # type: ignore[call-arg]
        assert cfg.max_output_tokens == 30
        assert cfg.end_of_sequence_marker == "</s>"
        assert cfg.top_k == 10
        assert cfg.add_special_tokens is True
        assert cfg.skip_special_tokens is True

    def test_randomness_defaults(self) -> None:
        cfg = LocalChatConfig(_env_file=None)  # type: ignore[call-arg]
        assert cfg.entropy_source_type == "system"
        assert cfg.entropy_seed is None

    def test_logging_defaults(self) -> None:
        cfg = LocalChatConfig(_env_file=None)  # type: ignore[call-arg]
        assert cfg.log_level == "summary"
        assert cfg.diagnostic_mode is False

    def test_frozen(self) -> None:
        cfg = LocalChatConfig()
        with pytest.raises(ValidationError):
            cfg.top_k = 5  # type: ignore[misc]


class TestLoadConfig:
    """Tests for load_config() validation."""

    def test_overrides_applied(self) -> None:
        cfg = load_config(max_output_tokens=5, top_k=3, end_of_sequence_marker="<|end|>")
        assert cfg.max_output_tokens == 5
        assert cfg.top_k == 3
        assert cfg.end_of_sequence_marker == "<|end|>"

    @pytest.mark.parametrize(
        "overrides",
        [
            {"max_output_tokens": 0},
            {"max_output_tokens": -3},
            {"top_k": 0},
            {"end_of_sequence_marker": ""},
            {"log_level": "verbose"},
            {"top_k": "many"},
        ],
    )
    def test_invalid_values_raise(self, overrides: dict[str, object]) -> None:
        with pytest.raises(ConfigValidationError):
            load_config(**overrides)

    def test_string_coercion(self) -> None:
        cfg = load_config(top_k="25", diagnostic_mode="true")
        assert cfg.top_k == 25
        assert cfg.diagnostic_mode is True


class TestEnvironment:
    """Tests for LOCALCHAT_* environment variables."""

    def test_int_env_var(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LOCALCHAT_TOP_K", "40")
        assert LocalChatConfig().top_k == 40

    def test_string_env_var(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LOCALCHAT_END_OF_SEQUENCE_MARKER", "<eos>")
        assert LocalChatConfig().end_of_sequence_marker == "<eos>"

    def test_seed_env_var(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LOCALCHAT_ENTROPY_SOURCE_TYPE", "seeded")
        monkeypatch.setenv("LOCALCHAT_ENTROPY_SEED", "7")
        cfg = LocalChatConfig()
        assert cfg.entropy_source_type == "seeded"
        assert cfg.entropy_seed == 7

    def test_kwargs_beat_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LOCALCHAT_MAX_OUTPUT_TOKENS", "99")
        assert load_config(max_output_tokens=4).max_output_tokens == 4

    def test_invalid_env_raises(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LOCALCHAT_TOP_K", "0")
        with pytest.raises(ConfigValidationError):
            load_config()


class TestConfigHash:
    """Tests for the short config hash used in step records."""

    def test_length_and_stability(self) -> None:
        a = config_hash(LocalChatConfig(top_k=10))
        b = config_hash(LocalChatConfig(top_k=10))
        assert a == b
        assert len(a) == 16

    def test_differs_on_change(self) -> None:
        assert config_hash(LocalChatConfig(top_k=10)) != config_hash(LocalChatConfig(top_k=11))
