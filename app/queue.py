"""
Ordered queue of pending upstream requests
"""

from __future__ import annotations

import asyncio
import time
from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Deque, List, Optional

from app.errors import InternalQueueError


class ItemState(str, Enum):
    QUEUED = "queued"
    IN_FLIGHT = "in_flight"
    REQUEUED = "requeued"
    RESOLVED = "resolved"


@dataclass
class QueueItem:
    """One pending upstream request and the future its callers await"""

    key: str
    future: asyncio.Future
    attempts: int = 0
    state: ItemState = ItemState.QUEUED
    enqueued_at: float = field(default_factory=time.monotonic)

    @classmethod
    def create(cls, key: str, loop: Optional[asyncio.AbstractEventLoop] = None) -> "QueueItem":
        loop = loop or asyncio.get_running_loop()
        return cls(key=key, future=loop.create_future())

    @property
    def done(self) -> bool:
        return self.future.done()

    def resolve(self, payload: Any) -> None:
        self._check_unassigned()
        self.state = ItemState.RESOLVED
        self.future.set_result(payload)

    def fail(self, exc: BaseException) -> None:
        self._check_unassigned()
        self.state = ItemState.RESOLVED
        self.future.set_exception(exc)

    def _check_unassigned(self) -> None:
        if self.future.done():
            raise InternalQueueError(
                f"Result for {self.key} was already delivered",
                endpoint=self.key,
            )


class RequestQueue:
    """FIFO of queue items; throttled items go back in at the head"""

    def __init__(self):
        self._items: Deque[QueueItem] = deque()

    def push(self, item: QueueItem) -> None:
        item.state = ItemState.QUEUED
        self._items.append(item)

    def requeue(self, item: QueueItem) -> None:
        item.state = ItemState.REQUEUED
        self._items.appendleft(item)

    def pop(self) -> QueueItem:
        if not self._items:
            raise InternalQueueError("pop from an empty request queue")
        item = self._items.popleft()
        item.state = ItemState.IN_FLIGHT
        return item

    def keys(self) -> List[str]:
        return [item.key for item in self._items]

    def __len__(self) -> int:
        return len(self._items)

    def __bool__(self) -> bool:
        return bool(self._items)
