"""Byte-counting taps for duplex streams.

`track_stream` swaps a stream's inbound and outbound paths for pass-through
versions that add each chunk's size to a shared `TransferStats`. Chunks are
forwarded unmodified, in order and without buffering; completion and errors of
the wrapped stream reach the caller untouched.

Two stream shapes are understood:

* source/sink duplexes: ``stream.source`` is an (async) iterable of chunks and
  ``stream.sink(source)`` consumes one;
* read/write objects: ``stream.read(...)`` returns a chunk and
  ``stream.write(data)`` sends one, either synchronously or as awaitables.
"""
from __future__ import annotations

import functools
import inspect
import logging
import threading
from collections.abc import AsyncIterable, AsyncIterator, Callable, Iterable, Iterator
from typing import Any

logger = logging.getLogger(__name__)

OnChunk = Callable[[Any], None]


def chunk_size(chunk: Any) -> int:
    """Byte length of ``chunk``; chunks that are not buffers never raise.

    Text counts as its UTF-8 encoding, a list or tuple of chunks as the sum of
    its parts, anything else as 0.
    """
    if chunk is None:
        return 0
    if isinstance(chunk, str):
        return len(chunk.encode('utf-8'))
    if isinstance(chunk, (list, tuple)):
        return sum(chunk_size(part) for part in chunk)
    try:
        return memoryview(chunk).nbytes
    except TypeError:
        return 0


class TransferStats:
    """Per-direction byte totals, drained atomically by the scrape calculator."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._stats: dict[str, int] = {}

    def increment(self, key: str, value: int) -> None:
        with self._lock:
            self._stats[key] = self._stats.get(key, 0) + value

    def drain(self) -> dict[str, int]:
        """Return everything counted so far and start again from empty."""
        with self._lock:
            stats, self._stats = self._stats, {}
        return stats

    def __len__(self) -> int:
        with self._lock:
            return len(self._stats)


class TransferTotals:
    """Running byte totals fed by one `TransferStats`.

    Calling the instance drains the pending counts into the totals and returns
    a copy, so the counter it feeds never goes backwards.
    """

    def __init__(self) -> None:
        self.stats = TransferStats()
        self._lock = threading.Lock()
        self._totals: dict[str, int] = {}

    def __call__(self) -> dict[str, int]:
        drained = self.stats.drain()
        with self._lock:
            for key, value in drained.items():
                self._totals[key] = self._totals.get(key, 0) + value
            return dict(self._totals)


async def _tap_async(source: AsyncIterable[Any], on_chunk: OnChunk) -> AsyncIterator[Any]:
    async for chunk in source:
        on_chunk(chunk)
        yield chunk


def _tap_sync(source: Iterable[Any], on_chunk: OnChunk) -> Iterator[Any]:
    for chunk in source:
        on_chunk(chunk)
        yield chunk


def tap(source: Any, on_chunk: OnChunk) -> Any:
    """Pass-through iterator calling ``on_chunk`` for every chunk."""
    if hasattr(source, '__aiter__'):
        return _tap_async(source, on_chunk)
    return _tap_sync(source, on_chunk)


async def _count_awaited(result: Any, on_chunk: OnChunk) -> Any:
    chunk = await result
    on_chunk(chunk)
    return chunk


def _tracked_read(read: Callable[..., Any], on_chunk: OnChunk) -> Callable[..., Any]:
    @functools.wraps(read)
    def tracked_read(*args: Any, **kwargs: Any) -> Any:
        result = read(*args, **kwargs)
        if inspect.isawaitable(result):
            return _count_awaited(result, on_chunk)
        on_chunk(result)
        return result
    return tracked_read


def _tracked_write(write: Callable[..., Any], on_chunk: OnChunk) -> Callable[..., Any]:
    @functools.wraps(write)
    def tracked_write(data: Any, *args: Any, **kwargs: Any) -> Any:
        on_chunk(data)
        return write(data, *args, **kwargs)
    return tracked_write


def _tracked_sink(sink: Callable[[Any], Any], on_chunk: OnChunk) -> Callable[[Any], Any]:
    @functools.wraps(sink)
    def tracked_sink(source: Any) -> Any:
        return sink(tap(source, on_chunk))
    return tracked_sink


def track_stream(stream: Any, name: str, stats: TransferStats) -> bool:
    """Instrument ``stream`` in place under ``name``; False if its shape is unknown."""
    def sent(chunk: Any) -> None:
        stats.increment(f"{name} sent", chunk_size(chunk))

    def received(chunk: Any) -> None:
        stats.increment(f"{name} received", chunk_size(chunk))

    if hasattr(stream, 'sink') and hasattr(stream, 'source'):
        stream.sink = _tracked_sink(stream.sink, sent)
        stream.source = tap(stream.source, received)
        return True
    if callable(getattr(stream, 'read', None)) and callable(getattr(stream, 'write', None)):
        stream.read = _tracked_read(stream.read, received)
        stream.write = _tracked_write(stream.write, sent)
        return True
    logger.debug("Stream %r has neither source/sink nor read/write; not tracked", stream)
    return False


def negotiated_protocol(stream: Any) -> str | None:
    """Protocol agreed for ``stream``, or None while negotiation is incomplete."""
    stat = getattr(stream, 'stat', None)
    protocol = getattr(stat, 'protocol', None) if stat is not None else None
    if protocol is None:
        protocol = getattr(stream, 'protocol', None)
    return protocol or None


__all__ = ["TransferStats", "TransferTotals", "track_stream", "negotiated_protocol", "tap", "chunk_size"]
