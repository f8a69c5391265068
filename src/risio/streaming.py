"""Asynchronous adapters over the parser and the builder.

Each adapter runs the synchronous core in a producer task that hands its
output to the consumer through a bounded ``asyncio.Queue``. When the consumer
is slower, the producer suspends on the full queue instead of buffering the
whole document. Output order is the order in which the core completes items.

Architecture::

    source (sync or async iterable)
      |
      └─ producer task (RisLineParser.feed / RisLineBuilder.feed)
          |
          ├─ bounded queue (buffer_size items, provides backpressure)
          |
          └─ consumer (``async for`` in your code)

Errors raised by the source or the core are re-raised in the consumer.
Stopping consumption early cancels the producer.
"""

import asyncio
import contextlib
from collections.abc import AsyncIterable, AsyncIterator, Iterable, Sequence
from typing import Any, TypeVar

from risio.build.ris_writer import RisLineBuilder
from risio.errors import RisBuildError
from risio.models import RisRecord
from risio.parse import ParseDiagnostic, RisLineParser

__all__ = ["DEFAULT_BUFFER_SIZE", "aiter_records", "aiter_lines"]

DEFAULT_BUFFER_SIZE = 256

T = TypeVar("T")

_END = object()


class _Failure:
    """Exception raised by the producer, forwarded to the consumer."""

    def __init__(self, error: BaseException) -> None:
        self.error = error


async def _aiterate(source: Iterable[T] | AsyncIterable[T]) -> AsyncIterator[T]:
    if isinstance(source, AsyncIterable):
        async for item in source:
            yield item
    else:
        for item in source:
            yield item


async def _next_item(queue: "asyncio.Queue[Any]") -> Any:
    item = await queue.get()
    if isinstance(item, _Failure):
        raise item.error
    return item


async def _stop(producer: "asyncio.Task[None]") -> None:
    if not producer.done():
        producer.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await producer


def _check_buffer_size(buffer_size: int) -> None:
    if buffer_size <= 0:
        raise ValueError(f"buffer_size must be positive, got {buffer_size}")


async def aiter_records(
    lines: Iterable[str] | AsyncIterable[str],
    *,
    strict: bool = False,
    buffer_size: int = DEFAULT_BUFFER_SIZE,
    diagnostics: list[ParseDiagnostic] | None = None,
) -> AsyncIterator[RisRecord]:
    """Parse RIS lines into records asynchronously.

    Parameters
    ----------
    lines : Iterable[str] | AsyncIterable[str]
        Lines without terminators.
    strict : bool, optional
        Raise on the first problem, by default False.
    buffer_size : int, optional
        Maximum number of parsed records waiting for the consumer.
    diagnostics : list[ParseDiagnostic] | None, optional
        Collects skipped-line diagnostics in lenient mode.

    Yields
    ------
    RisRecord
        Records in encounter order.

    Examples
    --------
        >>> async for record in aiter_records(lines, buffer_size=64):
        ...     await store(record)
    """
    _check_buffer_size(buffer_size)
    queue: asyncio.Queue[Any] = asyncio.Queue(maxsize=buffer_size)
    parser = RisLineParser(strict=strict, diagnostics=diagnostics)

    async def produce() -> None:
        try:
            async for line in _aiterate(lines):
                record = parser.feed(line)
                if record is not None:
                    await queue.put(record)
            parser.finish()
        except Exception as e:
            await queue.put(_Failure(e))
        else:
            await queue.put(_END)

    producer = asyncio.create_task(produce())
    try:
        while True:
            record = await _next_item(queue)
            if record is _END:
                break
            yield record
    finally:
        await _stop(producer)


async def aiter_lines(
    records: Iterable[RisRecord] | AsyncIterable[RisRecord],
    sort: Sequence[str] | None = None,
    *,
    buffer_size: int = DEFAULT_BUFFER_SIZE,
    errors: list[RisBuildError] | None = None,
) -> AsyncIterator[str]:
    """Build RIS lines from records asynchronously.

    Parameters
    ----------
    records : Iterable[RisRecord] | AsyncIterable[RisRecord]
        Records to serialize.
    sort : Sequence[str] | None, optional
        Preferred tag order.
    buffer_size : int, optional
        Maximum number of built lines waiting for the consumer.
    errors : list[RisBuildError] | None, optional
        If given, malformed records are skipped and their errors appended
        here. If None, the first malformed record raises.

    Yields
    ------
    str
        Lines without terminators; a blank line separates records.
    """
    _check_buffer_size(buffer_size)
    queue: asyncio.Queue[Any] = asyncio.Queue(maxsize=buffer_size)
    builder = RisLineBuilder(sort, errors=errors)

    async def produce() -> None:
        try:
            async for record in _aiterate(records):
                for line in builder.feed(record):
                    await queue.put(line)
        except Exception as e:
            await queue.put(_Failure(e))
        else:
            await queue.put(_END)

    producer = asyncio.create_task(produce())
    try:
        while True:
            line = await _next_item(queue)
            if line is _END:
                break
            yield line
    finally:
        await _stop(producer)
