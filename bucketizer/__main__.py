#!/usr/bin/env python3
"""
Linked-Data Stream Bucketizer

Demo entry point: bucketizes a small sample stream and prints the
resulting buckets and relations.

Usage:
    python -m bucketizer

    # Or with custom config
    BUCKETIZER_STRATEGY=basic BUCKETIZER_PAGE_SIZE=2 python -m bucketizer
    BUCKETIZER_CHECKPOINT_PATH=./state.ckpt python -m bucketizer
"""

from __future__ import annotations

import sys

from bucketizer.core.config import AppConfig, BucketizerConfig
from bucketizer.core.errors import BucketizerError
from bucketizer.core.types import Literal, NamedNode, Quad, Record
from bucketizer.observability.logging import LogLevel, setup_logging
from bucketizer.pipeline.stream import BucketizerStream
from bucketizer.storage.checkpoint import StateCheckpoint
from bucketizer.strategies.factory import build_bucketizer

LABEL = "http://www.w3.org/2000/01/rdf-schema#label"
SAMPLE_LABELS = [
    "John Doe", "Jane Doe", "Jean Dupont", "Ñandú", "Nadia", None, "J D", "Joan",
]


def sample_records() -> list[tuple[str, Record]]:
    records = []
    for index, label in enumerate(SAMPLE_LABELS):
        record_id = f"http://example.org/member/{index}"
        record: Record = []
        if label is not None:
            record.append(Quad(NamedNode(record_id), NamedNode(LABEL), Literal.string(label)))
        records.append((record_id, record))
    return records


def demo(config: AppConfig) -> None:
    bucketizer_config = config.bucketizer
    if bucketizer_config.property_path is None:
        bucketizer_config = BucketizerConfig(
            page_size=bucketizer_config.page_size,
            property_path=f"(<{LABEL}>)",
            fallback_bucket_prefix=bucketizer_config.fallback_bucket_prefix,
        )

    if config.checkpoint_path is not None:
        stream = BucketizerStream.resume(
            config.strategy,
            bucketizer_config,
            StateCheckpoint(config.checkpoint_path),
            checkpoint_every=config.checkpoint_every,
            cold_start_on_malformed=True,
            name="demo",
        )
    else:
        stream = BucketizerStream(build_bucketizer(config.strategy, bucketizer_config), name="demo")

    print(f"\nStrategy: {config.strategy} (pageSize={bucketizer_config.page_size})\n")
    for annotated in stream.process_all(sample_records()):
        for quad in annotated:
            print(f"  {quad}")
        print()

    print("Relations:")
    for bucket_id, relations in stream.bucketizer.hypermedia_controls_map.items():
        for params in relations:
            value = ",".join(literal.value for literal in params.value or ())
            print(f"  {bucket_id} -[{params.kind.name} {value}]-> {params.target_bucket_id}")

    print("\nBucket counters:")
    for bucket_id, count in stream.bucketizer.bucket_counter_map.items():
        print(f"  {bucket_id}: {count}")

    stream.close()


def main() -> None:
    """Main entry point."""
    config_result = AppConfig.from_env()
    if config_result.is_err():
        print(f"Configuration error: {config_result.error}")
        sys.exit(1)
    config = config_result.unwrap()

    validation = config.validate()
    if validation.is_err():
        print(f"Validation error: {validation.error}")
        sys.exit(1)

    setup_logging(
        LogLevel.from_name(config.observability.log_level),
        json_output=config.observability.log_json,
    )

    try:
        demo(config)
    except BucketizerError as e:
        print(f"Error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
