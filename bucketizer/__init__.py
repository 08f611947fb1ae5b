"""
Linked-Data Stream Bucketizer

Assigns each record of an append-only linked-data stream to a bucket
under a capacity bound, and emits the hypermedia relations linking
buckets so consumers can page through the stream:
- Round-robin strategy: fixed-size sequential pages
- Substring strategy: prefix-trie over a normalized string property,
  with round-robin fallback for records without that property
- Snapshot export/import and durable checkpoints for restarts

License: MIT
"""

__version__ = "1.0.0"

# =============================================================================
# PUBLIC API EXPORTS
# =============================================================================
from bucketizer.core.types import (
    Result,
    Ok,
    Err,
    NamedNode,
    BlankNode,
    Literal,
    Quad,
    RelationType,
    RelationParameters,
)
from bucketizer.core.errors import (
    BucketizerError,
    ConfigurationError,
    MalformedState,
    CheckpointError,
)
from bucketizer.core.config import BucketizerConfig

from bucketizer.engine import BucketizerCore, RelationRegistry
from bucketizer.strategies import (
    BasicBucketizer,
    SubstringBucketizer,
    build_bucketizer,
    normalize_key,
)
from bucketizer.rdf import PropertyPath, QuadRecordFactory
from bucketizer.storage import StateCheckpoint
from bucketizer.pipeline import BucketizerStream

__all__ = [
    # Version
    "__version__",
    # Result monad
    "Result",
    "Ok",
    "Err",
    # Statements
    "NamedNode",
    "BlankNode",
    "Literal",
    "Quad",
    "RelationType",
    "RelationParameters",
    # Errors
    "BucketizerError",
    "ConfigurationError",
    "MalformedState",
    "CheckpointError",
    # Config
    "BucketizerConfig",
    # Engine
    "BucketizerCore",
    "RelationRegistry",
    "BasicBucketizer",
    "SubstringBucketizer",
    "build_bucketizer",
    "normalize_key",
    # Collaborators
    "PropertyPath",
    "QuadRecordFactory",
    # Hosting
    "StateCheckpoint",
    "BucketizerStream",
]
