"""
Strategies module: bucket assignment strategies.

Provides:
- Key normalization for string partition keys
- BasicBucketizer: round-robin fixed-size pages
- SubstringBucketizer: prefix-trie partitioning with round-robin fallback
- Factory: build a strategy by name
"""

from bucketizer.strategies.normalizer import normalize_key, WORD_SEPARATOR
from bucketizer.strategies.basic import BasicBucketizer, RoundRobinPager
from bucketizer.strategies.substring import SubstringBucketizer
from bucketizer.strategies.factory import (
    STRATEGIES,
    available_strategies,
    build_bucketizer,
)

__all__ = [
    "normalize_key",
    "WORD_SEPARATOR",
    "BasicBucketizer",
    "RoundRobinPager",
    "SubstringBucketizer",
    "STRATEGIES",
    "available_strategies",
    "build_bucketizer",
]
