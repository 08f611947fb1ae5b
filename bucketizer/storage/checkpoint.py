"""
State Checkpoint: Durable Engine Snapshots

Persists export_state() snapshots so a restarted process resumes with
identical assignment decisions.

Format:
    lz4 frame ( JSON {"version": 1, "savedAt": ISO-8601, "state": {...}} )

Uncompressed checkpoints (compress=False) are plain JSON; load() detects
the lz4 frame magic and handles both. Writes go to a sibling temp file
that is atomically renamed over the previous checkpoint.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Mapping, Optional, Union

import lz4.frame

from bucketizer.core import constants as C
from bucketizer.core.errors import CheckpointError
from bucketizer.core.types import Result, Ok, Err

logger = logging.getLogger(__name__)

_LZ4_FRAME_MAGIC = b"\x04\x22\x4d\x18"


@dataclass(frozen=True, slots=True)
class CheckpointInfo:
    """Outcome of a successful save."""
    path: Path
    size_bytes: int
    compressed: bool
    saved_at: datetime


class StateCheckpoint:
    """
    File-backed snapshot store.

    Usage:
        checkpoint = StateCheckpoint("./state/people.ckpt")

        checkpoint.save(bucketizer.export_state())

        loaded = checkpoint.load()
        if loaded.is_ok() and loaded.unwrap() is not None:
            bucketizer.import_state(loaded.unwrap())
    """

    __slots__ = ("_path", "_compress")

    def __init__(self, path: Union[str, Path], compress: bool = True) -> None:
        self._path = Path(path)
        self._compress = compress

    def save(self, state: Mapping[str, Any]) -> Result[CheckpointInfo, CheckpointError]:
        """Write state, replacing any previous checkpoint."""
        saved_at = datetime.now(timezone.utc)
        envelope = {
            "version": C.CHECKPOINT_FORMAT_VERSION,
            "savedAt": saved_at.isoformat(),
            "state": dict(state),
        }

        try:
            payload = json.dumps(envelope, separators=(",", ":")).encode("utf-8")
        except (TypeError, ValueError) as e:
            return Err(CheckpointError.corrupted(str(self._path), f"state is not serializable: {e}", e))

        if self._compress:
            payload = lz4.frame.compress(payload)

        tmp_path = self._path.with_name(self._path.name + ".tmp")
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_bytes(payload)
            os.replace(tmp_path, self._path)
        except OSError as e:
            if tmp_path.exists():
                tmp_path.unlink()
            return Err(CheckpointError.io_failed(str(self._path), "write", e))

        logger.debug(f"Checkpoint written to {self._path} ({len(payload)} bytes)")
        return Ok(CheckpointInfo(
            path=self._path,
            size_bytes=len(payload),
            compressed=self._compress,
            saved_at=saved_at,
        ))

    def load(self) -> Result[Optional[dict[str, Any]], CheckpointError]:
        """
        Read the stored state.

        Returns:
            Ok[dict]: Stored snapshot
            Ok[None]: No checkpoint written yet
            Err[CheckpointError]: Unreadable or corrupted checkpoint
        """
        if not self._path.exists():
            return Ok(None)

        try:
            payload = self._path.read_bytes()
        except OSError as e:
            return Err(CheckpointError.io_failed(str(self._path), "read", e))

        if payload.startswith(_LZ4_FRAME_MAGIC):
            try:
                payload = lz4.frame.decompress(payload)
            except (RuntimeError, ValueError) as e:
                return Err(CheckpointError.corrupted(str(self._path), "invalid lz4 frame", e))

        try:
            envelope = json.loads(payload.decode("utf-8"))
        except ValueError as e:
            return Err(CheckpointError.corrupted(str(self._path), "invalid JSON", e))

        if not isinstance(envelope, dict) or not isinstance(envelope.get("state"), dict):
            return Err(CheckpointError.corrupted(str(self._path), "missing state envelope"))
        if envelope.get("version") != C.CHECKPOINT_FORMAT_VERSION:
            return Err(CheckpointError.corrupted(
                str(self._path), f"unsupported format version {envelope.get('version')!r}",
            ))

        return Ok(envelope["state"])

    def clear(self) -> Result[bool, CheckpointError]:
        """Delete the checkpoint. Ok(False) when there was none."""
        try:
            self._path.unlink()
        except FileNotFoundError:
            return Ok(False)
        except OSError as e:
            return Err(CheckpointError.io_failed(str(self._path), "delete", e))
        return Ok(True)

    @property
    def path(self) -> Path:
        return self._path

    @property
    def exists(self) -> bool:
        return self._path.exists()
