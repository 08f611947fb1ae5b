"""
Prefix-Trie Strategy: Incremental Substring Bucketing

Partitions records by the normalized value of a configured property.
Every record starts at the "root" bucket and walks its key one character
at a time, descending only while the current bucket is full:

    pageSize = 1, keys: "john", "john", "jane"

    root  <- john                 (root had room)
    root full, consume "j" -> create "j", edge root -(j)-> "j"
    "j"   <- john
    root full, consume "j" -> "j" full, consume "a" -> create "ja"
    "ja"  <- jane

Bucket ids are the accumulated prefix; the substring edge only carries the
newly consumed segment. A segment is one character, except that a "+"
word separator is consumed together with the character after it, so
"j d" splits "j" into "j+d" rather than "j+". Likewise a segment never
ends where the prefix would spell a reserved id ("root" or a fallback
page such as "bucketless-0"): "roo" splits into "rootx", never "root".
A key exhausted inside a full bucket stays there (the leaf overflows;
identical keys cannot be told apart any further).

Records whose property path reaches no value are paged round-robin into
"<fallbackBucketPrefix>-<n>" buckets with dedicated counters, leaving the
trie untouched.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Mapping, Optional

from bucketizer.core import constants as C
from bucketizer.core.config import BucketizerConfig
from bucketizer.core.errors import ConfigurationError
from bucketizer.core.protocols import ValueExtractor
from bucketizer.core.types import Literal, Record, RelationType
from bucketizer.engine.base import BucketizerCore
from bucketizer.rdf.path import PropertyPath
from bucketizer.strategies.basic import RoundRobinPager
from bucketizer.strategies.normalizer import WORD_SEPARATOR, normalize_key

logger = logging.getLogger(__name__)


class SubstringBucketizer(BucketizerCore):
    """
    Prefix-trie bucketizer over a string property.

    Usage:
        bucketizer = SubstringBucketizer.build({
            "propertyPath": "(<http://www.w3.org/2000/01/rdf-schema#label>)",
            "pageSize": 50,
        })
        bucketizer.assign(record, record_id)

        bucketizer.get_hypermedia_controls("root")
    """

    strategy_name = "substring"

    def __init__(
        self,
        config: BucketizerConfig,
        *,
        extractor: Optional[ValueExtractor] = None,
        **collaborators: Any,
    ) -> None:
        if extractor is None:
            extractor = self._parse_path(config.property_path)
        super().__init__(config, extractor=extractor, **collaborators)

        self._bucket_counters[C.ROOT_BUCKET_ID] = 0
        self._fallback = RoundRobinPager(
            page_size=self.page_size,
            prefix=self._config.fallback_bucket_prefix,
        )
        self._fallback_ids = re.compile(re.escape(self._config.fallback_bucket_prefix) + r"-[0-9]+")

    @classmethod
    def _parse_path(cls, expression: Optional[str]) -> PropertyPath:
        if expression is None:
            raise ConfigurationError.missing_option("propertyPath", cls.strategy_name)
        if not isinstance(expression, str):
            raise ConfigurationError.invalid_option("propertyPath", expression, "must be a string")
        parsed = PropertyPath.parse(expression)
        if parsed.is_err():
            raise ConfigurationError.invalid_property_path(expression, parsed.error)
        return parsed.unwrap()

    # =========================================================================
    # ASSIGNMENT
    # =========================================================================
    def assign(self, record: Record, record_id: str) -> Record:
        value = self._extractor.extract(record, record_id)
        if value is None:
            return self._assign_fallback(record, record_id)

        key = normalize_key(value)
        bucket_id = C.ROOT_BUCKET_ID
        prefix = ""
        position = 0

        while True:
            count = self._bucket_counters[bucket_id]
            if count < self.page_size:
                break

            step = self._next_segment(key, prefix, position)
            if step is None:
                self._stats.overflow_assignments += 1
                break
            segment, position = step
            prefix += segment

            if prefix not in self._bucket_counters:
                self._bucket_counters[prefix] = 0
                parameters = self.create_relation_parameters(
                    prefix,
                    RelationType.SUBSTRING,
                    [Literal.string(segment)],
                )
                logger.debug(f"Bucket {bucket_id!r} full, splitting into {prefix!r}")
                self.link(record, bucket_id, parameters)

            bucket_id = prefix

        self._bucket_counters[bucket_id] = count + 1
        return self.annotate(record, record_id, bucket_id)

    def _next_segment(self, key: str, prefix: str, position: int) -> Optional[tuple[str, int]]:
        """
        Edge label below prefix and the position after it; None once the key
        is used up.

        A segment is one character. It grows past a trailing "+" and past any
        end that would name a reserved bucket (root or a fallback page), so
        child ids never collide with those.
        """
        end = position + 1
        while end < len(key) and (
            key[end - 1] == WORD_SEPARATOR or self._is_reserved(prefix + key[position:end])
        ):
            end += 1
        if end > len(key) or self._is_reserved(prefix + key[position:end]):
            return None
        return key[position:end], end

    def _is_reserved(self, bucket_id: str) -> bool:
        return (
            bucket_id == C.ROOT_BUCKET_ID
            or self._fallback_ids.fullmatch(bucket_id) is not None
        )

    def _assign_fallback(self, record: Record, record_id: str) -> Record:
        bucket_id, rollover = self._fallback.advance()
        if rollover is not None:
            source, parameters = rollover
            self.link(record, source, parameters)
        self._stats.fallback_assignments += 1
        return self.annotate(record, record_id, bucket_id)

    # =========================================================================
    # ACCESSORS
    # =========================================================================
    @property
    def property_path(self) -> str:
        return self._extractor.expression

    @property
    def bucketless_page_number(self) -> int:
        return self._fallback.page_number

    @property
    def bucketless_page_member_counter(self) -> int:
        return self._fallback.member_counter

    # =========================================================================
    # SNAPSHOT
    # =========================================================================
    def export_state(self) -> dict[str, Any]:
        state = super().export_state()
        state["propertyPath"] = self._extractor.expression
        state["bucketlessPageNumber"] = self._fallback.page_number
        state["bucketlessPageMemberCounter"] = self._fallback.member_counter
        return state

    def import_state(self, state: Mapping[str, Any]) -> None:
        page_number = self._optional_count(state, "bucketlessPageNumber")
        member_counter = self._optional_count(state, "bucketlessPageMemberCounter")
        super().import_state(state)

        # The walk always starts at root, even for snapshots that never used it
        self._bucket_counters.setdefault(C.ROOT_BUCKET_ID, 0)
        self._fallback.page_number = page_number
        self._fallback.member_counter = member_counter
