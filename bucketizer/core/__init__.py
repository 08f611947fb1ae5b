"""
Core module: Type definitions, error hierarchy, and configuration.

This module provides the foundational abstractions for the bucketizer:
- Result/Either monad for fallible helpers
- RDF term, quad and relation descriptor value types
- Error hierarchy with stable error codes
- Configuration management with validation
"""

from bucketizer.core.types import (
    Result,
    Ok,
    Err,
    NamedNode,
    BlankNode,
    Literal,
    Term,
    Quad,
    Record,
    RelationType,
    RelationParameters,
)
from bucketizer.core.errors import (
    ErrorCode,
    BucketizerError,
    ConfigurationError,
    MalformedState,
    CheckpointError,
)
from bucketizer.core.config import BucketizerConfig, ObservabilityConfig, AppConfig
from bucketizer.core.protocols import ValueExtractor, RecordFactory

__all__ = [
    "Result",
    "Ok",
    "Err",
    "NamedNode",
    "BlankNode",
    "Literal",
    "Term",
    "Quad",
    "Record",
    "RelationType",
    "RelationParameters",
    "ErrorCode",
    "BucketizerError",
    "ConfigurationError",
    "MalformedState",
    "CheckpointError",
    "BucketizerConfig",
    "ObservabilityConfig",
    "AppConfig",
    "ValueExtractor",
    "RecordFactory",
]
