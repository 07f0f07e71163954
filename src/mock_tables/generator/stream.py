"""
Streaming generation: a producer thread feeding a bounded channel.

``generate`` runs the traversal on a background thread and returns a
``RowStream`` the caller iterates over. The producer blocks when the channel is
full; the consumer blocks when it is empty and still open.

Failure semantics:
- Any exception raised on the producer thread, including BaseException
  subclasses such as KeyboardInterrupt, stops the producer and closes the
  channel with the original exception attached.
- Items already buffered are still handed out. Once the buffer is exhausted,
  the consumer gets a GenerationError chained to the original exception.
- A consumer that only reads what is already buffered (``take_ready`` or
  slicing up to the buffered count) sees no error at all. With a buffer large
  enough to hold every row produced before the failure, the failure is only
  visible through ``RowStream.exception`` or by draining to the end.

A consumer that stops early without calling ``close`` leaves the producer
blocked on a full channel for the lifetime of the process (it is a daemon
thread). ``close`` or the context-manager form cancels the producer instead.
"""

from __future__ import annotations

import logging
import threading
from collections import deque
from typing import Any, Deque, Iterator, List, Optional

import numpy as np

from mock_tables.exceptions import ChannelClosedError, GenerationError
from mock_tables.generator.engine import traverse
from mock_tables.models import DEFAULT_BUFFER_SIZE, Emission
from mock_tables.utils.randomness import RngLike, resolve_rng

logger = logging.getLogger(__name__)


class Channel:
    """
    Bounded FIFO channel for one producer and one consumer.

    A capacity of 0 is an unbuffered hand-off: ``put`` returns only once the
    consumer has taken the item.
    """

    def __init__(self, capacity: int = DEFAULT_BUFFER_SIZE):
        if capacity < 0:
            raise ValueError(f"Channel capacity must be >= 0, got {capacity}")
        self.capacity = capacity
        self._items: Deque[Any] = deque()
        self._cond = threading.Condition()
        self._closed = False
        self._exception: Optional[BaseException] = None
        self._put_count = 0
        self._taken_count = 0

    @property
    def is_open(self) -> bool:
        with self._cond:
            return not self._closed

    @property
    def exception(self) -> Optional[BaseException]:
        """Exception the channel was closed with, if any."""
        with self._cond:
            return self._exception

    def __len__(self) -> int:
        with self._cond:
            return len(self._items)

    def put(self, item: Any) -> None:
        """Append ``item``, blocking while the channel is full."""
        with self._cond:
            while not self._closed and len(self._items) >= max(self.capacity, 1):
                self._cond.wait()
            if self._closed:
                raise ChannelClosedError("Cannot put on a closed channel")

            self._items.append(item)
            self._put_count += 1
            ticket = self._put_count
            self._cond.notify_all()

            if self.capacity == 0:
                while not self._closed and self._taken_count < ticket:
                    self._cond.wait()
                if self._taken_count < ticket:
                    raise ChannelClosedError("Channel closed before the item was taken")

    def take(self) -> Any:
        """
        Remove and return the oldest item, blocking while the channel is empty.

        Raises:
            ChannelClosedError: The channel was closed normally and is empty
            GenerationError: The channel was closed with an exception and is empty
        """
        with self._cond:
            while not self._items and not self._closed:
                self._cond.wait()
            if self._items:
                return self._pop()
            exc = self._exception

        if exc is not None:
            raise GenerationError(exc) from exc
        raise ChannelClosedError("Channel is closed and empty")

    def take_ready(self) -> List[Any]:
        """Remove and return every buffered item without waiting or raising."""
        with self._cond:
            items = []
            while self._items:
                items.append(self._pop())
            return items

    def close(self, exception: Optional[BaseException] = None) -> None:
        """Close the channel, optionally recording the failure that caused it."""
        with self._cond:
            if self._closed:
                return
            self._closed = True
            self._exception = exception
            self._cond.notify_all()

    def _pop(self) -> Any:
        item = self._items.popleft()
        self._taken_count += 1
        self._cond.notify_all()
        return item


class RowStream(Iterator[Emission]):
    """
    Stream of ``Emission(table, row)`` items produced on a background thread.

    Iterating to the end (or calling ``collect``) raises GenerationError if
    the producer failed. Use it as a context manager to cancel the producer
    when stopping early.
    """

    def __init__(self, dag: Any, rng: np.random.Generator, buffer: int = DEFAULT_BUFFER_SIZE):
        self._channel = Channel(buffer)
        self._cancelled = False
        self._thread = threading.Thread(
            target=self._produce,
            args=(dag, rng),
            name="mock-tables-producer",
            daemon=True,
        )
        self._thread.start()

    @property
    def buffer(self) -> int:
        return self._channel.capacity

    @property
    def exception(self) -> Optional[BaseException]:
        """Original producer failure, or None."""
        return self._channel.exception

    @property
    def done(self) -> bool:
        """True once the producer thread has finished."""
        return not self._thread.is_alive()

    def _produce(self, dag: Any, rng: np.random.Generator) -> None:
        logger.debug(f"Producer started (buffer={self._channel.capacity})")
        try:
            traverse(self._emit, rng, dag)
        except BaseException as e:
            if self._cancelled and isinstance(e, ChannelClosedError):
                logger.info("Generation cancelled by consumer")
                return
            logger.error(f"Generation failed: {e!r}")
            self._channel.close(e)
        else:
            logger.debug("Producer finished")
            self._channel.close()

    def _emit(self, table: str, row: Any) -> None:
        self._channel.put(Emission(table, row))

    def __iter__(self) -> RowStream:
        return self

    def __next__(self) -> Emission:
        try:
            return self._channel.take()
        except ChannelClosedError:
            raise StopIteration from None

    def collect(self) -> List[Emission]:
        """Drain the stream to completion."""
        return list(self)

    def take_ready(self) -> List[Emission]:
        """Return the items buffered right now, without waiting or raising."""
        return self._channel.take_ready()

    def join(self, timeout: Optional[float] = None) -> bool:
        """Wait for the producer to finish. Returns True if it has."""
        self._thread.join(timeout)
        return self.done

    def close(self) -> None:
        """Cancel the producer and discard anything still buffered."""
        self._cancelled = True
        self._channel.close()
        self._channel.take_ready()

    def __enter__(self) -> RowStream:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


def generate(dag: Any, rng: RngLike = None, buffer: int = DEFAULT_BUFFER_SIZE) -> RowStream:
    """
    Traverse ``dag`` on a producer thread and stream the rows.

    Args:
        dag: Graph node (generator, pair, sequence)
        rng: Generator, integer seed, or None for the process-wide default
        buffer: Channel capacity; 0 hands each row over synchronously

    Returns:
        RowStream of ``Emission(table, row)`` items in emission order
    """
    if buffer < 0:
        raise ValueError(f"buffer must be >= 0, got {buffer}")
    return RowStream(dag, resolve_rng(rng), buffer)
