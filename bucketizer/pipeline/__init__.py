"""
Pipeline module: serialized stream hosting with checkpoints.
"""

from bucketizer.pipeline.stream import BucketizerStream, StreamStats

__all__ = [
    "BucketizerStream",
    "StreamStats",
]
