"""
System-Wide Constants for the Stream Bucketizer

All vocabulary IRIs and configuration defaults centralized here.

Vocabularies:
- LDES: bucket membership predicate
- TREE: hypermedia relation vocabulary
- RDF / XSD: list encoding and literal datatypes
"""

from typing import Final

# =============================================================================
# BUCKETING DEFAULTS
# =============================================================================
DEFAULT_PAGE_SIZE: Final[int] = 50
DEFAULT_FALLBACK_BUCKET_PREFIX: Final[str] = "bucketless"
ROOT_BUCKET_ID: Final[str] = "root"

# =============================================================================
# CHECKPOINTING
# =============================================================================
DEFAULT_CHECKPOINT_EVERY: Final[int] = 1000
CHECKPOINT_FORMAT_VERSION: Final[int] = 1

# =============================================================================
# VOCABULARY NAMESPACES
# =============================================================================
LDES_NS: Final[str] = "https://w3id.org/ldes#"
TREE_NS: Final[str] = "https://w3id.org/tree#"
RDF_NS: Final[str] = "http://www.w3.org/1999/02/22-rdf-syntax-ns#"
XSD_NS: Final[str] = "http://www.w3.org/2001/XMLSchema#"

# =============================================================================
# VOCABULARY TERMS
# =============================================================================
LDES_BUCKET: Final[str] = LDES_NS + "bucket"

TREE_RELATION: Final[str] = TREE_NS + "relation"
TREE_NODE: Final[str] = TREE_NS + "node"
TREE_VALUE: Final[str] = TREE_NS + "value"
TREE_PATH: Final[str] = TREE_NS + "path"
TREE_RELATION_CLASS: Final[str] = TREE_NS + "Relation"
TREE_SUBSTRING_RELATION_CLASS: Final[str] = TREE_NS + "SubstringRelation"

RDF_TYPE: Final[str] = RDF_NS + "type"
RDF_FIRST: Final[str] = RDF_NS + "first"
RDF_REST: Final[str] = RDF_NS + "rest"
RDF_NIL: Final[str] = RDF_NS + "nil"

XSD_STRING: Final[str] = XSD_NS + "string"
