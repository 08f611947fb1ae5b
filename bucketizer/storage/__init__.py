"""
Storage module: durable snapshot checkpoints.
"""

from bucketizer.storage.checkpoint import StateCheckpoint, CheckpointInfo

__all__ = [
    "StateCheckpoint",
    "CheckpointInfo",
]
