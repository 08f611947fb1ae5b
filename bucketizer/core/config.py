"""
Configuration Management for the Stream Bucketizer

Provides validated configuration with sensible defaults.
Supports environment variable overrides and camelCase option mappings
as produced by pipeline descriptions.

Design:
- Immutable after construction
- Fail-fast on invalid configuration (at build time, never per record)
- Type-safe with dataclasses
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping, Optional

from bucketizer.core import constants as C
from bucketizer.core.errors import ConfigurationError
from bucketizer.core.types import Result, Ok, Err


# Option names accepted in mappings -> dataclass field names
_OPTION_ALIASES: dict[str, str] = {
    "pageSize": "page_size",
    "page_size": "page_size",
    "propertyPath": "property_path",
    "property_path": "property_path",
    "fallbackBucketPrefix": "fallback_bucket_prefix",
    "fallback_bucket_prefix": "fallback_bucket_prefix",
}


@dataclass(frozen=True)
class BucketizerConfig:
    """
    Options shared by every bucketizer strategy.

    page_size: maximum members per bucket before it splits or rolls over
    property_path: path expression selecting the partitioning value
        (required by key-based strategies only)
    fallback_bucket_prefix: id prefix for records without a usable key
    """

    page_size: int = C.DEFAULT_PAGE_SIZE
    property_path: Optional[str] = None
    fallback_bucket_prefix: str = C.DEFAULT_FALLBACK_BUCKET_PREFIX

    @classmethod
    def from_mapping(cls, options: Mapping[str, Any]) -> BucketizerConfig:
        """
        Build from a camelCase or snake_case option mapping.

        Unrecognized keys are ignored; None values fall back to defaults.
        """
        kwargs: dict[str, Any] = {}
        for key, value in options.items():
            name = _OPTION_ALIASES.get(key)
            if name is not None and value is not None:
                kwargs[name] = value
        return cls(**kwargs)

    @classmethod
    def from_env(cls) -> Result[BucketizerConfig, str]:
        """
        Load configuration from environment variables.

        Variables: BUCKETIZER_PAGE_SIZE, BUCKETIZER_PROPERTY_PATH,
        BUCKETIZER_FALLBACK_PREFIX
        """
        try:
            return Ok(cls(
                page_size=int(os.getenv("BUCKETIZER_PAGE_SIZE", str(C.DEFAULT_PAGE_SIZE))),
                property_path=os.getenv("BUCKETIZER_PROPERTY_PATH") or None,
                fallback_bucket_prefix=os.getenv(
                    "BUCKETIZER_FALLBACK_PREFIX", C.DEFAULT_FALLBACK_BUCKET_PREFIX,
                ),
            ))
        except (ValueError, TypeError) as e:
            return Err(f"Configuration error: {e}")

    def validate(self) -> Result[None, ConfigurationError]:
        """Validate option invariants common to all strategies."""
        if isinstance(self.page_size, bool) or not isinstance(self.page_size, int):
            return Err(ConfigurationError.invalid_option(
                "pageSize", self.page_size, "must be an integer",
            ))
        if self.page_size < 1:
            return Err(ConfigurationError.invalid_option(
                "pageSize", self.page_size, "must be positive",
            ))
        if not isinstance(self.fallback_bucket_prefix, str) or not self.fallback_bucket_prefix:
            return Err(ConfigurationError.invalid_option(
                "fallbackBucketPrefix", self.fallback_bucket_prefix, "must be a non-empty string",
            ))
        if self.property_path is not None and not isinstance(self.property_path, str):
            return Err(ConfigurationError.invalid_option(
                "propertyPath", self.property_path, "must be a string",
            ))
        return Ok(None)

    def to_dict(self) -> dict[str, Any]:
        """Snapshot form (camelCase, matching from_mapping)."""
        return {
            "pageSize": self.page_size,
            "propertyPath": self.property_path,
            "fallbackBucketPrefix": self.fallback_bucket_prefix,
        }


@dataclass(frozen=True)
class ObservabilityConfig:
    """Logging configuration."""

    log_level: str = "INFO"
    log_json: bool = True


@dataclass(frozen=True)
class AppConfig:
    """Root configuration for a hosted bucketizer stream."""

    strategy: str = "substring"
    bucketizer: BucketizerConfig = field(default_factory=BucketizerConfig)
    observability: ObservabilityConfig = field(default_factory=ObservabilityConfig)
    checkpoint_path: Optional[Path] = None
    checkpoint_every: int = C.DEFAULT_CHECKPOINT_EVERY

    @classmethod
    def from_env(cls) -> Result[AppConfig, str]:
        """
        Load configuration from environment variables.

        Variables are prefixed with BUCKETIZER_.
        Example: BUCKETIZER_STRATEGY=basic, BUCKETIZER_CHECKPOINT_PATH=./state.lz4
        """
        bucketizer_result = BucketizerConfig.from_env()
        if bucketizer_result.is_err():
            return bucketizer_result

        try:
            checkpoint = os.getenv("BUCKETIZER_CHECKPOINT_PATH")
            return Ok(cls(
                strategy=os.getenv("BUCKETIZER_STRATEGY", "substring"),
                bucketizer=bucketizer_result.unwrap(),
                observability=ObservabilityConfig(
                    log_level=os.getenv("BUCKETIZER_LOG_LEVEL", "INFO").upper(),
                    log_json=os.getenv("BUCKETIZER_LOG_JSON", "true").lower() in ("1", "true", "yes"),
                ),
                checkpoint_path=Path(checkpoint) if checkpoint else None,
                checkpoint_every=int(os.getenv(
                    "BUCKETIZER_CHECKPOINT_EVERY", str(C.DEFAULT_CHECKPOINT_EVERY),
                )),
            ))
        except (ValueError, TypeError) as e:
            return Err(f"Configuration error: {e}")

    def validate(self) -> Result[None, str]:
        """Validate configuration invariants."""
        if self.checkpoint_every < 1:
            return Err("checkpoint_every must be >= 1")
        validation = self.bucketizer.validate()
        if validation.is_err():
            return Err(str(validation.error))
        return Ok(None)
