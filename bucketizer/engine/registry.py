"""
Relation Registry: Hypermedia Controls per Bucket

Maps bucket id -> ordered list of outgoing relation descriptors.
Buckets are referenced by id only; the engine owns every bucket and
every edge, so there are no back-pointers to keep consistent.
"""

from __future__ import annotations

from typing import Any, Iterator, Sequence

from bucketizer.core.types import RelationParameters


class RelationRegistry:
    """
    Ordered relation lists keyed by source bucket id.

    Usage:
        registry = RelationRegistry()
        registry.add("0", RelationParameters("1", RelationType.RELATION))

        for params in registry.get("0"):
            follow(params.target_bucket_id)
    """

    __slots__ = ("_controls",)

    def __init__(self) -> None:
        self._controls: dict[str, list[RelationParameters]] = {}

    def add(self, bucket_id: str, parameters: RelationParameters) -> None:
        """Append a relation to bucket_id, keeping registration order."""
        self._controls.setdefault(bucket_id, []).append(parameters)

    def get(self, bucket_id: str) -> list[RelationParameters]:
        """Relations of bucket_id (copy); empty for unknown buckets."""
        return list(self._controls.get(bucket_id, ()))

    def items(self) -> Iterator[tuple[str, list[RelationParameters]]]:
        for bucket_id, relations in self._controls.items():
            yield bucket_id, list(relations)

    def replace(
        self,
        entries: Sequence[tuple[str, Sequence[RelationParameters]]],
    ) -> None:
        """Overwrite all relations with entries (never merges)."""
        self._controls = {bucket_id: list(relations) for bucket_id, relations in entries}

    def as_map(self) -> dict[str, list[RelationParameters]]:
        return {bucket_id: list(relations) for bucket_id, relations in self._controls.items()}

    def to_list(self) -> list[list[Any]]:
        """Snapshot form: [[bucketId, [relation dicts]], ...]."""
        return [
            [bucket_id, [params.to_dict() for params in relations]]
            for bucket_id, relations in self._controls.items()
        ]

    @classmethod
    def from_list(cls, entries: Sequence[Sequence[Any]]) -> RelationRegistry:
        """
        Rebuild from snapshot form.

        Raises:
            ValueError, KeyError, TypeError: Malformed entries
        """
        registry = cls()
        parsed: list[tuple[str, list[RelationParameters]]] = []
        for entry in entries:
            bucket_id, relations = entry
            if not isinstance(bucket_id, str):
                raise TypeError(f"bucket id must be a string, got {type(bucket_id).__name__}")
            parsed.append((bucket_id, [RelationParameters.from_dict(r) for r in relations]))
        registry.replace(parsed)
        return registry

    @property
    def relation_count(self) -> int:
        """Total number of registered edges."""
        return sum(len(relations) for relations in self._controls.values())

    def __contains__(self, bucket_id: object) -> bool:
        return bucket_id in self._controls

    def __len__(self) -> int:
        return len(self._controls)
