"""Async iterator combinators."""

import asyncio
from typing import Any, AsyncIterator, Awaitable, Callable, Optional, TypeVar

T = TypeVar("T")
R = TypeVar("R")

_EXHAUSTED = object()


async def map_latest(
    source: AsyncIterator[T],
    transform: Callable[[T], Awaitable[Optional[R]]],
    is_current: Optional[Callable[[T], bool]] = None,
) -> AsyncIterator[R]:
    """Map each item of ``source`` through ``transform``, latest item wins.

    A new source item supersedes the transform started for the previous
    item: it is cancelled, and a result it produced in the same round is
    dropped. ``is_current`` is checked when a transform finishes; a result
    whose item is no longer current is dropped even if the source has not
    delivered the newer item yet. Results that are None are skipped. The
    iterator ends when ``source`` ends and the last transform has completed.
    """
    iterator = source.__aiter__()
    next_item: Optional[asyncio.Future] = asyncio.ensure_future(_next(iterator))
    pending: Optional[asyncio.Future] = None
    pending_item: Any = None

    try:
        while next_item is not None or pending is not None:
            waiting = {f for f in (next_item, pending) if f is not None}
            done, _ = await asyncio.wait(waiting, return_when=asyncio.FIRST_COMPLETED)

            if next_item is not None and next_item in done:
                item = next_item.result()
                if item is _EXHAUSTED:
                    next_item = None
                else:
                    if pending is not None:
                        _discard(pending)
                    pending = asyncio.ensure_future(transform(item))
                    pending_item = item
                    next_item = asyncio.ensure_future(_next(iterator))
                    continue

            if pending is not None and pending in done:
                finished, pending = pending, None
                result = finished.result()
                if result is None:
                    continue
                if is_current is not None and not is_current(pending_item):
                    continue
                yield result
    finally:
        outstanding = [f for f in (next_item, pending) if f is not None and not f.done()]
        for future in outstanding:
            future.cancel()
        if outstanding:
            await asyncio.gather(*outstanding, return_exceptions=True)
        aclose = getattr(iterator, "aclose", None)
        if aclose is not None:
            await aclose()


def _discard(future: asyncio.Future) -> None:
    if not future.done():
        future.cancel()
    elif not future.cancelled():
        # superseded; its outcome is never delivered
        future.exception()


async def _next(iterator: AsyncIterator[T]) -> Any:
    try:
        return await iterator.__anext__()
    except StopAsyncIteration:
        return _EXHAUSTED
