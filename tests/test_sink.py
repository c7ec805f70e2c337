"""Tests for chunked record insertion."""

import logging
import math

import pytest

from csvseed.seeding.sink import BatchSink


def records(n):
    return [{"id": str(i)} for i in range(n)]


class TestBatchSink:
    @pytest.mark.parametrize("n,k", [(0, 3), (1, 1), (5, 2), (6, 3), (10, 50), (7, 7)])
    def test_chunk_count_and_sizes(self, make_sink, n, k):
        sink = make_sink()
        batch = BatchSink(sink, "users", k)
        for record in records(n):
            batch.add(record)
        batch.close()

        assert len(sink.calls) == math.ceil(n / k)
        if n:
            assert len(sink.calls[-1]) == (n % k or k)
        assert all(len(call) <= k for call in sink.calls)
        assert sink.rows == records(n)
        assert batch.inserted == n

    def test_flushes_exactly_at_chunk_size(self, make_sink):
        sink = make_sink()
        batch = BatchSink(sink, "users", 2)
        batch.add({"id": "1"})
        assert sink.calls == []
        batch.add({"id": "2"})
        assert len(sink.calls) == 1
        assert batch.pending == 0

    def test_close_on_empty_batch_inserts_nothing(self, make_sink):
        sink = make_sink()
        assert BatchSink(sink, "users", 5).close() is True
        assert sink.calls == []

    def test_failed_chunk_is_dropped_and_logged(self, make_sink, caplog):
        sink = make_sink(fail_on={2})
        batch = BatchSink(sink, "users", 2, source_name="users.csv")
        with caplog.at_level(logging.ERROR):
            for record in records(6):
                batch.add(record)
            batch.close()

        assert len(sink.calls) == 3
        assert sink.rows == records(2) + records(6)[4:]
        assert batch.failed_chunks == 1
        assert batch.dropped == 2
        assert batch.inserted == 4
        errors = [r for r in caplog.records if r.levelno == logging.ERROR]
        assert len(errors) == 1
        assert "insert #2 rejected" in errors[0].getMessage()
        assert "users.csv" in errors[0].getMessage()

    def test_failed_flush_returns_false_and_clears_batch(self, make_sink):
        sink = make_sink(fail_on={1})
        batch = BatchSink(sink, "users", 10)
        batch.add({"id": "1"})
        assert batch.flush() is False
        assert batch.pending == 0
        assert batch.close() is True
        assert len(sink.calls) == 1

    def test_failed_rows_never_reinserted(self, make_sink):
        sink = make_sink(fail_on={1})
        batch = BatchSink(sink, "users", 1)
        batch.add({"id": "a"})
        batch.add({"id": "b"})
        batch.close()
        assert sink.calls == [[{"id": "a"}], [{"id": "b"}]]
        assert sink.rows == [{"id": "b"}]

    @pytest.mark.parametrize("chunk_size", [0, -1])
    def test_rejects_non_positive_chunk_size(self, make_sink, chunk_size):
        with pytest.raises(ValueError, match="chunk_size"):
            BatchSink(make_sink(), "users", chunk_size)
