"""
Tests for the streaming layer.

Covers channel semantics, failure propagation to the consumer and the
buffered-prefix behaviour when the producer fails before the consumer waits.
"""

import threading
from itertools import islice

import numpy as np
import pytest

from mock_tables.exceptions import ChannelClosedError, GenerationError
from mock_tables.generator import Channel, TableGenerator, generate
from mock_tables.models import Emission


class ErrGen(TableGenerator):
    """Raises on its ``num``th emission."""

    table_key = "gen"

    def __init__(self, num):
        self.num = num

    def visit(self, rng, deps):
        return {"i": 1}

    def num_rows(self, rng, state=None):
        return self.num

    def emit(self, rng, deps, state=None):
        if state["i"] >= self.num:
            raise RuntimeError("emission failed")
        i = state["i"]
        state["i"] += 1
        return i


class CountingGenerator(TableGenerator):
    table_key = "count"

    def __init__(self, num):
        self.num = num
        self.emitted = 0

    def num_rows(self, rng, state=None):
        return self.num

    def emit(self, rng, deps, state=None):
        self.emitted += 1
        return self.emitted


class TestChannel:
    """Tests for the bounded channel."""

    def test_fifo(self):
        ch = Channel(3)
        for i in range(3):
            ch.put(i)
        assert [ch.take() for _ in range(3)] == [0, 1, 2]

    def test_close_normally(self):
        ch = Channel(2)
        ch.put("a")
        ch.close()

        assert not ch.is_open
        assert ch.take() == "a"
        with pytest.raises(ChannelClosedError):
            ch.take()

    def test_close_with_exception(self):
        ch = Channel(2)
        ch.put("a")
        cause = ValueError("bad row")
        ch.close(cause)

        assert ch.take() == "a"
        with pytest.raises(GenerationError) as exc_info:
            ch.take()
        assert exc_info.value.cause is cause
        assert exc_info.value.__cause__ is cause

    def test_put_on_closed_channel(self):
        ch = Channel(1)
        ch.close()
        with pytest.raises(ChannelClosedError):
            ch.put("a")

    def test_close_is_idempotent(self):
        ch = Channel(1)
        first = RuntimeError("first")
        ch.close(first)
        ch.close(RuntimeError("second"))
        assert ch.exception is first

    def test_negative_capacity(self):
        with pytest.raises(ValueError):
            Channel(-1)

    def test_take_ready_does_not_wait(self):
        ch = Channel(5)
        assert ch.take_ready() == []
        ch.put(1)
        ch.put(2)
        assert ch.take_ready() == [1, 2]
        assert len(ch) == 0

    def test_unbuffered_put_waits_for_taker(self):
        ch = Channel(0)
        returned = threading.Event()

        def producer():
            ch.put("x")
            returned.set()

        thread = threading.Thread(target=producer, daemon=True)
        thread.start()

        assert not returned.wait(timeout=0.2)
        assert ch.take() == "x"
        assert returned.wait(timeout=5)
        thread.join(timeout=5)

    def test_unbuffered_put_interrupted_by_close(self):
        ch = Channel(0)
        errors = []

        def producer():
            try:
                ch.put("x")
            except ChannelClosedError as e:
                errors.append(e)

        thread = threading.Thread(target=producer, daemon=True)
        thread.start()
        thread.join(timeout=0.2)
        ch.close()
        thread.join(timeout=5)

        assert len(errors) == 1


class TestGenerate:
    """Tests for generate() and RowStream."""

    def test_emissions(self):
        stream = generate(CountingGenerator(3), np.random.default_rng(1))
        items = stream.collect()

        assert items == [Emission("count", 1), Emission("count", 2), Emission("count", 3)]
        assert items[0].table == "count"
        assert items[0].row == 1
        assert stream.exception is None

    @pytest.mark.parametrize("buffer", [0, 1, 2, 10])
    def test_all_rows_delivered(self, buffer):
        stream = generate(CountingGenerator(25), 1, buffer=buffer)
        assert [e.row for e in stream] == list(range(1, 26))
        assert stream.join(timeout=5)

    def test_negative_buffer(self):
        with pytest.raises(ValueError):
            generate(CountingGenerator(1), buffer=-1)

    def test_backpressure(self):
        gen = CountingGenerator(10)
        stream = generate(gen, 1, buffer=0)

        assert next(stream).row == 1
        # The producer cannot finish without the consumer
        assert not stream.join(timeout=0.2)
        assert gen.emitted <= 2

        assert [e.row for e in stream] == list(range(2, 11))

    def test_close_cancels_blocked_producer(self):
        stream = generate(CountingGenerator(1000), 1, buffer=1)
        assert next(stream).row == 1

        stream.close()
        assert stream.join(timeout=5)
        assert stream.exception is None
        assert list(stream) == []

    def test_context_manager_closes(self):
        with generate(CountingGenerator(1000), 1, buffer=1) as stream:
            first = list(islice(stream, 3))
        assert [e.row for e in first] == [1, 2, 3]
        assert stream.join(timeout=5)


class TestErrorPropagation:
    """Tests for producer failures as seen by the consumer."""

    def test_default_buffer_drain_raises(self):
        with pytest.raises(GenerationError) as exc_info:
            generate(ErrGen(3)).collect()
        assert isinstance(exc_info.value.__cause__, RuntimeError)

    @pytest.mark.parametrize("buffer", [0, 1])
    def test_small_buffer_drain_raises(self, buffer):
        stream = generate(ErrGen(3), buffer=buffer)
        with pytest.raises(GenerationError):
            list(stream)

    @pytest.mark.parametrize("buffer", [0, 1, 2])
    def test_prefix_before_failure(self, buffer):
        stream = generate(ErrGen(3), buffer=buffer)
        received = []
        with pytest.raises(GenerationError) as exc_info:
            for item in stream:
                received.append(item)

        assert received == [("gen", 1), ("gen", 2)]
        assert isinstance(exc_info.value.cause, RuntimeError)

    def test_buffered_rows_hide_failure(self):
        # No error here because the buffer holds every row put on the channel
        # before the failure and the consumer never waits past them
        stream = generate(ErrGen(3), buffer=2)
        assert stream.join(timeout=5)

        assert stream.take_ready() == [("gen", 1), ("gen", 2)]
        assert isinstance(stream.exception, RuntimeError)

    def test_buffered_rows_by_slicing(self):
        stream = generate(ErrGen(3), buffer=2)
        assert stream.join(timeout=5)

        assert list(islice(stream, 2)) == [("gen", 1), ("gen", 2)]
        # Waiting past the buffered rows surfaces the failure
        with pytest.raises(GenerationError):
            next(stream)

    def test_failure_stops_later_siblings(self):
        later = CountingGenerator(5)
        stream = generate([ErrGen(2), later], buffer=10)
        with pytest.raises(GenerationError):
            stream.collect()
        assert later.emitted == 0

    def test_base_exception_closes_stream(self):
        class Interrupted(BaseException):
            pass

        class InterruptedGenerator(TableGenerator):
            table_key = "interrupted"

            def num_rows(self, rng, state=None):
                return 2

            def emit(self, rng, deps, state=None):
                raise Interrupted("stop")

        stream = generate(InterruptedGenerator(), 1, buffer=0)
        outcome = {}

        def drain():
            try:
                stream.collect()
            except GenerationError as e:
                outcome["error"] = e

        consumer = threading.Thread(target=drain, daemon=True)
        consumer.start()
        consumer.join(timeout=5)

        assert not consumer.is_alive()
        assert isinstance(outcome["error"].cause, Interrupted)
        assert isinstance(stream.exception, Interrupted)
