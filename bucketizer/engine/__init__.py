"""
Engine module: relation registry and the abstract bucketizer contract.
"""

from bucketizer.engine.registry import RelationRegistry
from bucketizer.engine.base import BucketizerCore, BucketizerStats

__all__ = [
    "RelationRegistry",
    "BucketizerCore",
    "BucketizerStats",
]
