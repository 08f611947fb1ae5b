"""
Bucketizer Stream: Serialized Host for a Bucketizer Engine

Feeds records one at a time through an engine and forwards the annotated
records downstream:
1. Exclusive scope around every engine call (assign, export, import)
2. Periodic checkpoints every N records
3. Resume from the last checkpoint on restart

The engine itself is not safe for concurrent mutation; producers on
several threads may share one stream, which serializes them here.
Errors are never swallowed: a failed checkpoint write raises from the
call that triggered it.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Any, Iterable, Iterator, Mapping, Optional, Union

from bucketizer.core import constants as C
from bucketizer.core.config import BucketizerConfig
from bucketizer.core.errors import CheckpointError, MalformedState
from bucketizer.core.types import Record, Result, Ok
from bucketizer.engine.base import BucketizerCore
from bucketizer.observability.logging import StructuredLogger
from bucketizer.storage.checkpoint import CheckpointInfo, StateCheckpoint
from bucketizer.strategies.factory import build_bucketizer

logger = StructuredLogger(__name__)


@dataclass
class StreamStats:
    """Stream statistics."""
    records_processed: int = 0
    checkpoints_written: int = 0
    cold_starts: int = 0
    last_checkpoint: Optional[CheckpointInfo] = None


class BucketizerStream:
    """
    Single-writer stream around a bucketizer.

    Usage:
        stream = BucketizerStream.resume(
            "substring",
            {"propertyPath": "<http://schema.org/name>"},
            StateCheckpoint("./state/people.ckpt"),
        )

        for annotated in stream.process_all(records):
            sink.write(annotated)

        stream.close()
    """

    __slots__ = (
        "_bucketizer", "_checkpoint", "_checkpoint_every",
        "_lock", "_stats", "_since_checkpoint", "_log",
    )

    def __init__(
        self,
        bucketizer: BucketizerCore,
        checkpoint: Optional[StateCheckpoint] = None,
        checkpoint_every: int = C.DEFAULT_CHECKPOINT_EVERY,
        name: str = "stream",
    ) -> None:
        if checkpoint_every < 1:
            raise ValueError("checkpoint_every must be >= 1")

        self._bucketizer = bucketizer
        self._checkpoint = checkpoint
        self._checkpoint_every = checkpoint_every
        self._lock = threading.Lock()
        self._stats = StreamStats()
        self._since_checkpoint = 0
        self._log = logger.bind(stream=name, strategy=bucketizer.strategy_name)

    @classmethod
    def resume(
        cls,
        strategy: str,
        config: Union[BucketizerConfig, Mapping[str, Any]],
        checkpoint: StateCheckpoint,
        *,
        checkpoint_every: int = C.DEFAULT_CHECKPOINT_EVERY,
        cold_start_on_malformed: bool = False,
        name: str = "stream",
        **collaborators: Any,
    ) -> BucketizerStream:
        """
        Build a stream from the last checkpoint (cold start if none).

        Raises:
            CheckpointError: Checkpoint unreadable
            MalformedState: Stored state rejected and cold starts disabled
            ConfigurationError: Invalid options
        """
        loaded = checkpoint.load()
        if loaded.is_err():
            raise loaded.error
        state = loaded.unwrap()

        cold_start = False
        try:
            bucketizer = build_bucketizer(strategy, config, state, **collaborators)
        except MalformedState as e:
            if not cold_start_on_malformed:
                raise
            logger.warning(
                "Discarding malformed checkpoint, starting cold",
                stream=name,
                path=str(checkpoint.path),
                error=e.to_dict(),
            )
            bucketizer = build_bucketizer(strategy, config, **collaborators)
            cold_start = True

        stream = cls(bucketizer, checkpoint, checkpoint_every, name)
        if cold_start:
            stream._stats.cold_starts += 1
        stream._log.info(
            "Stream resumed" if state is not None and not cold_start else "Stream started",
            path=str(checkpoint.path),
        )
        return stream

    # =========================================================================
    # PROCESSING
    # =========================================================================
    def process(self, record: Record, record_id: str) -> Record:
        """Assign one record; may write a checkpoint afterwards."""
        with self._lock:
            annotated = self._bucketizer.assign(record, record_id)
            self._stats.records_processed += 1
            self._since_checkpoint += 1

            if self._checkpoint is not None and self._since_checkpoint >= self._checkpoint_every:
                saved = self._save()
                if saved.is_err():
                    raise saved.error
        return annotated

    def process_all(self, records: Iterable[tuple[str, Record]]) -> Iterator[Record]:
        """Process (record_id, record) pairs in order, yielding annotated records."""
        for record_id, record in records:
            yield self.process(record, record_id)

    # =========================================================================
    # STATE
    # =========================================================================
    def export_state(self) -> dict[str, Any]:
        with self._lock:
            return self._bucketizer.export_state()

    def restore(self, state: Mapping[str, Any]) -> None:
        """Replace engine state (raises MalformedState, leaving state untouched)."""
        with self._lock:
            self._bucketizer.import_state(state)
            self._since_checkpoint = 0

    def checkpoint(self) -> Result[Optional[CheckpointInfo], CheckpointError]:
        """Write a checkpoint now. Ok(None) when no store is configured."""
        with self._lock:
            if self._checkpoint is None:
                return Ok(None)
            return self._save()

    def close(self) -> None:
        """Flush a final checkpoint for records since the last one."""
        with self._lock:
            if self._checkpoint is None or self._since_checkpoint == 0:
                return
            saved = self._save()
            if saved.is_err():
                raise saved.error
            self._log.info("Stream closed", records=self._stats.records_processed)

    def _save(self) -> Result[CheckpointInfo, CheckpointError]:
        saved = self._checkpoint.save(self._bucketizer.export_state())
        if saved.is_ok():
            self._since_checkpoint = 0
            self._stats.checkpoints_written += 1
            self._stats.last_checkpoint = saved.unwrap()
            self._log.debug(
                "Checkpoint written",
                records=self._stats.records_processed,
                size_bytes=saved.unwrap().size_bytes,
            )
        return saved

    @property
    def bucketizer(self) -> BucketizerCore:
        return self._bucketizer

    @property
    def stats(self) -> StreamStats:
        return self._stats
