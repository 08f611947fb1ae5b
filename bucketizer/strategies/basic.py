"""
Round-Robin Strategy: Fixed-Size Sequential Pages

Fills page 0 up to page_size members, then opens page 1 and links
0 -> 1 with an unconditional relation, and so on.

The capacity check runs BEFORE the current record is counted: the record
that finds the page full becomes the first member of the next page.
Downstream readers rely on these exact boundaries.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from bucketizer.core.config import BucketizerConfig
from bucketizer.core.types import Record, RelationParameters, RelationType
from bucketizer.engine.base import BucketizerCore

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class RoundRobinPager:
    """
    Page cursor shared by the basic strategy and the trie fallback path.

    Bucket ids are the page number, optionally prefixed ("bucketless-3").
    """
    page_size: int
    prefix: Optional[str] = None
    page_number: int = 0
    member_counter: int = 0

    def bucket_id(self, page_number: int) -> str:
        if self.prefix is None:
            return str(page_number)
        return f"{self.prefix}-{page_number}"

    @property
    def current_bucket_id(self) -> str:
        return self.bucket_id(self.page_number)

    def advance(self) -> tuple[str, Optional[tuple[str, RelationParameters]]]:
        """
        Count one member and return its bucket id.

        Also returns (source bucket, relation) when this member rolled the
        pager over to a new page.
        """
        rollover = None
        if self.member_counter >= self.page_size:
            current_page = self.page_number
            self.page_number += 1
            self.member_counter = 0
            rollover = (
                self.bucket_id(current_page),
                RelationParameters(self.current_bucket_id, RelationType.RELATION),
            )

        self.member_counter += 1
        return self.current_bucket_id, rollover


class BasicBucketizer(BucketizerCore):
    """
    Round-robin pagination.

    Usage:
        bucketizer = BasicBucketizer.build({"pageSize": 100})
        bucketizer.assign(record, "http://example.org/member/1")
    """

    strategy_name = "basic"

    def __init__(self, config: BucketizerConfig, **collaborators: Any) -> None:
        super().__init__(config, **collaborators)
        self._pager = RoundRobinPager(page_size=self.page_size)

    def assign(self, record: Record, record_id: str) -> Record:
        bucket_id, rollover = self._pager.advance()
        if rollover is not None:
            source, parameters = rollover
            logger.debug(f"Page {source} full, continuing in page {bucket_id}")
            self.link(record, source, parameters)
        return self.annotate(record, record_id, bucket_id)

    @property
    def page_number(self) -> int:
        return self._pager.page_number

    @property
    def member_counter(self) -> int:
        return self._pager.member_counter

    def export_state(self) -> dict[str, Any]:
        state = super().export_state()
        state["pageNumber"] = self._pager.page_number
        state["memberCounter"] = self._pager.member_counter
        return state

    def import_state(self, state: Mapping[str, Any]) -> None:
        page_number = self._required_count(state, "pageNumber")
        member_counter = self._required_count(state, "memberCounter")
        super().import_state(state)
        self._pager.page_number = page_number
        self._pager.member_counter = member_counter
