"""Concurrent fetch, sequential consumption.

``in_document_order`` starts every load up front so fetches overlap, then
hands results back strictly in the order of the input items. Consumers can
paint each result as it arrives without ever painting out of order.
"""

import asyncio
from typing import NamedTuple, Any, Optional


class OrderedResult(NamedTuple):
    item: Any
    value: Any
    error: Optional[BaseException]

    @property
    def ok(self) -> bool:
        return self.error is None


async def in_document_order(items, load, catch=(Exception,)):
    """Async-iterate ``OrderedResult`` for each item in input order.

    Args:
        items: Sequence of items, already in the order results are wanted
        load: Callable returning an awaitable for an item, or None when
            the item needs no loading (value is then None)
        catch: Exception types captured into ``OrderedResult.error``
            instead of propagating

    Pending loads are cancelled if the consumer stops early.
    """
    items = list(items)
    pending = []
    for item in items:
        awaitable = load(item)
        pending.append(asyncio.ensure_future(awaitable) if awaitable is not None else None)

    try:
        for item, task in zip(items, pending):
            if task is None:
                yield OrderedResult(item, None, None)
                continue
            try:
                value = await task
            except catch as e:
                yield OrderedResult(item, None, e)
            else:
                yield OrderedResult(item, value, None)
    finally:
        for task in pending:
            if task is not None and not task.done():
                task.cancel()
