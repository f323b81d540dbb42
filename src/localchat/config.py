"""Configuration system for localchat.

Uses pydantic-settings for declarative, layered configuration:
init kwargs -> environment variables (LOCALCHAT_*) -> .env file -> field defaults.

The generation parameters are fixed per deployment. Build a config once with
load_config() and hand it to the TextGenerator.
"""

from __future__ import annotations

import hashlib
from typing import Any, Literal

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from localchat.exceptions import ConfigValidationError


class LocalChatConfig(BaseSettings):
    """Configuration for localchat.

    Resolution order: init kwargs -> env vars (LOCALCHAT_*) -> .env file -> defaults.

    Fields are divided into three groups:
    - **Generation**: token budget, end marker, top-k breadth and the
      special-token flags passed to the tokenizer.
    - **Randomness**: which entropy source feeds the sampler.
    - **Logging**: per-step diagnostic verbosity.
    """

    model_config = SettingsConfigDict(
        env_prefix="LOCALCHAT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    # --- Generation ---

    max_output_tokens: int = Field(
        default=30,
        gt=0,
        description="Maximum number of tokens appended per generate() call",
    )
    end_of_sequence_marker: str = Field(
        default="</s>",
        min_length=1,
        description="Decoded text is truncated at the first occurrence of this marker",
    )
    top_k: int = Field(
        default=10,
        gt=0,
        description="Number of highest-scoring candidates kept by the sampler",
    )
    add_special_tokens: bool = Field(
        default=True,
        description="Ask the tokenizer to add model-required special tokens on encode",
    )
    skip_special_tokens: bool = Field(
        default=True,
        description="Ask the tokenizer to drop special tokens on decode",
    )

    # --- Randomness ---

    entropy_source_type: str = Field(
        default="system",
        description="Registered entropy source name: 'system', 'seeded', ...",
    )
    entropy_seed: int | None = Field(
        default=None,
        description="Seed for the 'seeded' entropy source (None = fresh OS seed)",
    )

    # --- Logging ---

    log_level: Literal["none", "summary", "full"] = Field(
        default="summary",
        description="Per-step logging verbosity: 'none', 'summary', 'full'",
    )
    diagnostic_mode: bool = Field(
        default=False,
        description="Store all step records in memory for analysis",
    )


def load_config(**overrides: Any) -> LocalChatConfig:
    """Build a config from environment and explicit overrides.

    Args:
        **overrides: Field values taking precedence over the environment.

    Returns:
        A validated, immutable LocalChatConfig.

    Raises:
        ConfigValidationError: If any value fails validation.
    """
    try:
        return LocalChatConfig(**overrides)
    except ValidationError as exc:
        raise ConfigValidationError(str(exc)) from exc


def config_hash(config: LocalChatConfig) -> str:
    """Compute a short hash of the config for logging.

    Args:
        config: The configuration to hash.

    Returns:
        First 16 hex characters of the SHA-256 digest of the config dump.
    """
    raw = config.model_dump_json().encode("utf-8")
    return hashlib.sha256(raw).hexdigest()[:16]
