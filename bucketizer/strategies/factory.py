"""
Strategy Factory: build a bucketizer by strategy name.

    bucketizer = build_bucketizer("substring", {"propertyPath": "<http://schema.org/name>"})
"""

from __future__ import annotations

from typing import Any, Mapping, Optional, Union

from bucketizer.core.config import BucketizerConfig
from bucketizer.core.errors import ConfigurationError
from bucketizer.engine.base import BucketizerCore
from bucketizer.strategies.basic import BasicBucketizer
from bucketizer.strategies.substring import SubstringBucketizer

STRATEGIES: dict[str, type[BucketizerCore]] = {
    BasicBucketizer.strategy_name: BasicBucketizer,
    SubstringBucketizer.strategy_name: SubstringBucketizer,
}


def available_strategies() -> list[str]:
    return sorted(STRATEGIES)


def build_bucketizer(
    strategy: str,
    config: Union[BucketizerConfig, Mapping[str, Any]],
    state: Optional[Mapping[str, Any]] = None,
    **collaborators: Any,
) -> BucketizerCore:
    """
    Build the named strategy, restoring state when given.

    Raises:
        ConfigurationError: Unknown strategy or invalid options
        MalformedState: state does not match the strategy
    """
    strategy_cls = STRATEGIES.get(strategy)
    if strategy_cls is None:
        raise ConfigurationError.unknown_strategy(strategy, available_strategies())
    return strategy_cls.build(config, state, **collaborators)
