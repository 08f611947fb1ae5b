"""
Bucketizer Engine: Shared Contract for Assignment Strategies

Owns the pieces every strategy needs:
- Relation Registry (hypermedia controls per bucket)
- Per-bucket member counters
- Record factory and value extractor collaborators
- Snapshot export/import

Strategies implement assign() and extend the snapshot with their own
fields. All helpers are synchronous and perform no I/O; the engine is not
safe for concurrent mutation, so hosts must serialize calls (see
bucketizer.pipeline.stream).

Snapshot shape:
    {
        "hypermediaControls": [[bucketId, [relation, ...]], ...],
        "bucketCounterMap":   [[bucketId, count], ...],
        "bucketizerOptions":  {...},
        ...strategy fields...
    }
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, ClassVar, Mapping, Optional, Sequence, TypeVar, Union

from bucketizer.core.config import BucketizerConfig
from bucketizer.core.errors import MalformedState
from bucketizer.core.protocols import RecordFactory, ValueExtractor
from bucketizer.core.types import (
    Literal,
    Quad,
    Record,
    RelationParameters,
    RelationType,
)
from bucketizer.engine.registry import RelationRegistry
from bucketizer.rdf.records import QuadRecordFactory

logger = logging.getLogger(__name__)

B = TypeVar("B", bound="BucketizerCore")


@dataclass
class BucketizerStats:
    """Engine statistics (not part of the snapshot)."""
    records_assigned: int = 0
    relations_registered: int = 0
    fallback_assignments: int = 0
    overflow_assignments: int = 0


class BucketizerCore(ABC):
    """
    Abstract bucketizer engine.

    Usage:
        bucketizer = SubstringBucketizer.build(
            {"propertyPath": "<http://schema.org/name>", "pageSize": 50},
            state=previous_snapshot,
        )

        for record_id, record in stream:
            bucketizer.assign(record, record_id)

        checkpoint.save(bucketizer.export_state())
    """

    strategy_name: ClassVar[str] = "core"

    def __init__(
        self,
        config: BucketizerConfig,
        *,
        record_factory: Optional[RecordFactory] = None,
        extractor: Optional[ValueExtractor] = None,
    ) -> None:
        validation = config.validate()
        if validation.is_err():
            raise validation.error

        self._config = config
        self._factory: RecordFactory = record_factory or QuadRecordFactory()
        self._extractor = extractor
        self._registry = RelationRegistry()
        self._bucket_counters: dict[str, int] = {}
        self._stats = BucketizerStats()

    @classmethod
    def build(
        cls: type[B],
        config: Union[BucketizerConfig, Mapping[str, Any]],
        state: Optional[Mapping[str, Any]] = None,
        **collaborators: Any,
    ) -> B:
        """
        Construct a bucketizer, restoring state when given.

        Raises:
            ConfigurationError: Invalid or missing options
            MalformedState: state does not match this strategy
        """
        if not isinstance(config, BucketizerConfig):
            config = BucketizerConfig.from_mapping(config)

        bucketizer = cls(config, **collaborators)
        if state is not None:
            bucketizer.import_state(state)
        return bucketizer

    # =========================================================================
    # ASSIGNMENT
    # =========================================================================
    @abstractmethod
    def assign(self, record: Record, record_id: str) -> Record:
        """
        Append bucket statements to record and return it.

        The record is extended in place; existing statements are kept.
        """

    # =========================================================================
    # STRATEGY HELPERS
    # =========================================================================
    def create_relation_parameters(
        self,
        target_bucket_id: str,
        kind: RelationType = RelationType.RELATION,
        value: Optional[Sequence[Literal]] = None,
    ) -> RelationParameters:
        return RelationParameters(
            target_bucket_id=target_bucket_id,
            kind=kind,
            value=tuple(value) if value is not None else None,
        )

    def set_hypermedia_controls(self, bucket_id: str, parameters: RelationParameters) -> None:
        """Register an outgoing relation on bucket_id."""
        self._registry.add(bucket_id, parameters)
        self._stats.relations_registered += 1
        logger.debug(
            f"Relation {parameters.kind.name} {bucket_id!r} -> {parameters.target_bucket_id!r}"
        )

    def expand_relation(self, bucket_id: str, parameters: RelationParameters) -> list[Quad]:
        """Statements describing a relation; substring edges carry the path."""
        path = self._extractor if parameters.kind is RelationType.SUBSTRING else None
        return self._factory.relation_statements(bucket_id, parameters, path)

    def link(self, record: Record, bucket_id: str, parameters: RelationParameters) -> None:
        """Register a relation and announce it on the record being processed."""
        self.set_hypermedia_controls(bucket_id, parameters)
        record.extend(self.expand_relation(bucket_id, parameters))

    def annotate(self, record: Record, record_id: str, *bucket_ids: str) -> Record:
        """Append the bucket assignment statement(s) and return the record."""
        record.extend(self._factory.bucket_statements(record_id, bucket_ids))
        self._stats.records_assigned += 1
        return record

    # =========================================================================
    # ACCESSORS
    # =========================================================================
    def get_hypermedia_controls(self, bucket_id: str) -> list[RelationParameters]:
        return self._registry.get(bucket_id)

    @property
    def hypermedia_controls_map(self) -> dict[str, list[RelationParameters]]:
        return self._registry.as_map()

    @property
    def bucket_counter_map(self) -> dict[str, int]:
        return dict(self._bucket_counters)

    @property
    def config(self) -> BucketizerConfig:
        return self._config

    @property
    def bucketizer_options(self) -> dict[str, Any]:
        """Effective options in their camelCase form."""
        return self._config.to_dict()

    @property
    def page_size(self) -> int:
        return self._config.page_size

    @property
    def stats(self) -> BucketizerStats:
        return self._stats

    # =========================================================================
    # SNAPSHOT
    # =========================================================================
    def export_state(self) -> dict[str, Any]:
        """Serializable snapshot of all assignment-relevant state."""
        return {
            "hypermediaControls": self._registry.to_list(),
            "bucketCounterMap": [
                [bucket_id, count] for bucket_id, count in self._bucket_counters.items()
            ],
            "bucketizerOptions": self.bucketizer_options,
        }

    def import_state(self, state: Mapping[str, Any]) -> None:
        """
        Replace registry and counters with the snapshot's.

        Nothing is modified when the snapshot is rejected.

        Raises:
            MalformedState: Missing or malformed fields
        """
        if not isinstance(state, Mapping):
            raise MalformedState.invalid_field("<snapshot>", "expected a mapping")

        controls = self._require(state, "hypermediaControls")
        # "bucketCounter" is the key older exports used
        counters = state.get("bucketCounterMap", state.get("bucketCounter"))
        if counters is None:
            raise MalformedState.missing_field("bucketCounterMap", self.strategy_name)

        try:
            registry = RelationRegistry.from_list(controls)
        except (KeyError, ValueError, TypeError) as e:
            raise MalformedState.invalid_field("hypermediaControls", str(e), cause=e) from e

        try:
            bucket_counters: dict[str, int] = {}
            for bucket_id, count in counters:
                if not isinstance(bucket_id, str):
                    raise TypeError(f"bucket id must be a string, got {type(bucket_id).__name__}")
                bucket_counters[bucket_id] = self._as_count(count)
        except (ValueError, TypeError) as e:
            raise MalformedState.invalid_field("bucketCounterMap", str(e), cause=e) from e

        self._registry = registry
        self._bucket_counters = bucket_counters

    def _require(self, state: Mapping[str, Any], field_name: str) -> Any:
        if not isinstance(state, Mapping):
            raise MalformedState.invalid_field("<snapshot>", "expected a mapping")
        if field_name not in state:
            raise MalformedState.missing_field(field_name, self.strategy_name)
        return state[field_name]

    def _required_count(self, state: Mapping[str, Any], field_name: str) -> int:
        value = self._require(state, field_name)
        try:
            return self._as_count(value)
        except (ValueError, TypeError) as e:
            raise MalformedState.invalid_field(field_name, str(e), cause=e) from e

    def _optional_count(self, state: Mapping[str, Any], field_name: str) -> int:
        """Strategy counter; absent means the strategy never advanced it."""
        if not isinstance(state, Mapping):
            raise MalformedState.invalid_field("<snapshot>", "expected a mapping")
        value = state.get(field_name, 0)
        try:
            return self._as_count(value)
        except (ValueError, TypeError) as e:
            raise MalformedState.invalid_field(field_name, str(e), cause=e) from e

    @staticmethod
    def _as_count(value: Any) -> int:
        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeError(f"expected an integer, got {type(value).__name__}")
        if value < 0:
            raise ValueError(f"expected a non-negative integer, got {value}")
        return value

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"page_size={self.page_size}, "
            f"buckets={len(self._bucket_counters)}, "
            f"relations={self._registry.relation_count})"
        )
