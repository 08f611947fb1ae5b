"""
Unit Tests: Bucketizer Stream Host

Tests:
    - Checkpoint cadence and final flush
    - Resume equivalence across restarts
    - Malformed checkpoints (abort or cold start)
    - Serialization of concurrent producers
"""

import threading

import pytest

from bucketizer.core import constants as C
from bucketizer.core.errors import CheckpointError, MalformedState
from bucketizer.core.types import Literal, NamedNode, Quad
from bucketizer.pipeline.stream import BucketizerStream
from bucketizer.storage.checkpoint import StateCheckpoint
from bucketizer.strategies.factory import build_bucketizer

LABEL = "http://www.w3.org/2000/01/rdf-schema#label"
OPTIONS = {"propertyPath": f"<{LABEL}>", "pageSize": 2}
NAMES = ["Ann", "Anna", "Bob", "Anne", "Annie", "Ben", None, "Bea", "Annabel", None, "Bo"]


def records(names, start=0):
    out = []
    for index, name in enumerate(names, start=start):
        record_id = f"http://example.org/person/{index}"
        record = []
        if name is not None:
            record.append(Quad(NamedNode(record_id), NamedNode(LABEL), Literal.string(name)))
        out.append((record_id, record))
    return out


def buckets_of(record):
    return [q.object.value for q in record if q.predicate.value == C.LDES_BUCKET]


class TestProcessing:
    """Tests for record processing and checkpoints."""

    def test_without_checkpoint_store(self):
        stream = BucketizerStream(build_bucketizer("substring", OPTIONS))

        annotated = list(stream.process_all(records(NAMES)))

        assert len(annotated) == len(NAMES)
        assert all(len(buckets_of(record)) == 1 for record in annotated)
        assert stream.stats.records_processed == len(NAMES)
        assert stream.checkpoint().unwrap() is None
        stream.close()

    def test_checkpoint_cadence(self, tmp_path):
        checkpoint = StateCheckpoint(tmp_path / "state.ckpt")
        stream = BucketizerStream(build_bucketizer("basic", {"pageSize": 2}), checkpoint, checkpoint_every=3)

        list(stream.process_all(records(NAMES[:7])))

        assert stream.stats.checkpoints_written == 2
        saved = checkpoint.load().unwrap()
        assert saved["pageNumber"] == 2
        assert saved["memberCounter"] == 2

    def test_close_flushes_pending_records(self, tmp_path):
        checkpoint = StateCheckpoint(tmp_path / "state.ckpt")
        stream = BucketizerStream(build_bucketizer("basic", {}), checkpoint, checkpoint_every=100)
        list(stream.process_all(records(NAMES[:4])))

        assert not checkpoint.exists
        stream.close()

        assert checkpoint.load().unwrap() == stream.export_state()
        assert stream.stats.checkpoints_written == 1

    def test_close_without_pending_records_writes_nothing(self, tmp_path):
        checkpoint = StateCheckpoint(tmp_path / "state.ckpt")
        stream = BucketizerStream(build_bucketizer("basic", {}), checkpoint)

        stream.close()

        assert not checkpoint.exists

    def test_invalid_cadence(self):
        with pytest.raises(ValueError):
            BucketizerStream(build_bucketizer("basic", {}), checkpoint_every=0)

    def test_failed_write_raises(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")
        checkpoint = StateCheckpoint(blocker / "state.ckpt")
        stream = BucketizerStream(build_bucketizer("basic", {}), checkpoint, checkpoint_every=1)

        with pytest.raises(CheckpointError):
            stream.process([], "http://example.org/person/0")

    def test_restore_rejects_malformed_state(self):
        stream = BucketizerStream(build_bucketizer("basic", {"pageSize": 1}))
        list(stream.process_all(records(NAMES[:3])))
        before = stream.export_state()

        with pytest.raises(MalformedState):
            stream.restore({"hypermediaControls": []})

        assert stream.export_state() == before


class TestResume:
    """Tests for BucketizerStream.resume."""

    def test_cold_start(self, tmp_path):
        stream = BucketizerStream.resume("substring", OPTIONS, StateCheckpoint(tmp_path / "state.ckpt"))

        assert stream.bucketizer.bucket_counter_map == {"root": 0}
        assert stream.stats.cold_starts == 0

    def test_resume_matches_uninterrupted_run(self, tmp_path):
        checkpoint = StateCheckpoint(tmp_path / "state.ckpt")
        split = 5

        first = BucketizerStream.resume("substring", OPTIONS, checkpoint, checkpoint_every=2)
        interrupted = [buckets_of(r) for r in first.process_all(records(NAMES[:split]))]
        first.close()

        second = BucketizerStream.resume("substring", OPTIONS, checkpoint)
        interrupted += [buckets_of(r) for r in second.process_all(records(NAMES[split:], start=split))]

        reference = BucketizerStream(build_bucketizer("substring", OPTIONS))
        uninterrupted = [buckets_of(r) for r in reference.process_all(records(NAMES))]

        assert interrupted == uninterrupted
        assert second.export_state()["hypermediaControls"] == reference.export_state()["hypermediaControls"]

    def test_malformed_checkpoint_raises(self, tmp_path):
        checkpoint = StateCheckpoint(tmp_path / "state.ckpt")
        checkpoint.save({"bucketCounterMap": []}).unwrap()

        with pytest.raises(MalformedState):
            BucketizerStream.resume("substring", OPTIONS, checkpoint)

    def test_malformed_checkpoint_cold_start(self, tmp_path):
        checkpoint = StateCheckpoint(tmp_path / "state.ckpt")
        checkpoint.save({"bucketCounterMap": []}).unwrap()

        stream = BucketizerStream.resume("substring", OPTIONS, checkpoint, cold_start_on_malformed=True)

        assert stream.stats.cold_starts == 1
        assert stream.bucketizer.hypermedia_controls_map == {}

    def test_corrupted_checkpoint_raises(self, tmp_path):
        path = tmp_path / "state.ckpt"
        path.write_bytes(b"garbage")

        with pytest.raises(CheckpointError):
            BucketizerStream.resume("substring", OPTIONS, StateCheckpoint(path), cold_start_on_malformed=True)


class TestConcurrency:
    """Tests for serialized access from several producer threads."""

    def test_parallel_producers(self):
        page_size = 5
        stream = BucketizerStream(build_bucketizer("basic", {"pageSize": page_size}))
        per_thread = 50
        thread_count = 4
        assigned: list[str] = []
        assigned_lock = threading.Lock()

        def produce(offset):
            for index in range(per_thread):
                record = stream.process([], f"http://example.org/t{offset}/{index}")
                with assigned_lock:
                    assigned.extend(buckets_of(record))

        threads = [threading.Thread(target=produce, args=(n,)) for n in range(thread_count)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        total = per_thread * thread_count
        assert len(assigned) == total
        counts = {bucket_id: assigned.count(bucket_id) for bucket_id in set(assigned)}
        assert counts == {str(page): page_size for page in range(total // page_size)}
        assert len(stream.bucketizer.hypermedia_controls_map) == total // page_size - 1
