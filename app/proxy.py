"""
Cached, rate-limited, single-flight proxy in front of the Jikan API

Callers await ``JikanProxy.fetch``. Fresh cache hits return at once; misses
are queued and drained by a single worker task that spaces upstream calls
with a ``RateGovernor`` and retries throttled requests from the head of the
queue.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Any, Dict, Optional

from starlette.concurrency import run_in_threadpool

from app.cache import CacheStore
from app.errors import InternalQueueError, ProxyError, UpstreamThrottled
from app.queue import QueueItem, RequestQueue
from app.ratelimit import RateGovernor
from app.upstream import UpstreamClient

logger = logging.getLogger(__name__)


class JikanProxy:
    def __init__(
        self,
        client: UpstreamClient,
        cache: Optional[CacheStore] = None,
        governor: Optional[RateGovernor] = None,
        queue: Optional[RequestQueue] = None,
    ):
        self.client = client
        self.cache = cache if cache is not None else CacheStore()
        self.governor = governor if governor is not None else RateGovernor()
        self.queue = queue if queue is not None else RequestQueue()

        # Queued or in-flight item per key, shared by concurrent callers
        self._pending: Dict[str, QueueItem] = {}
        self._processing = False
        self._worker: Optional[asyncio.Task] = None

        self.counters = {
            "upstream_calls": 0,
            "cache_hits": 0,
            "throttled": 0,
            "failures": 0,
        }

    @property
    def processing(self) -> bool:
        return self._processing

    async def fetch(self, endpoint_key: str) -> Any:
        """Return the upstream payload for ``endpoint_key``.

        Raises a ``ProxyError`` subclass carrying the upstream status
        (500 when none is available) if the request fails terminally.
        """
        cached = self.cache.get(endpoint_key)
        if cached is not None:
            self.counters["cache_hits"] += 1
            logger.debug(f"Returning cached data for: {endpoint_key}")
            return cached.payload

        item = self._pending.get(endpoint_key)
        if item is None:
            item = QueueItem.create(endpoint_key)
            self._pending[endpoint_key] = item
            self.queue.push(item)
            logger.debug(f"Queued {endpoint_key} (queue length {len(self.queue)})")
            self._start_worker()

        # shield: a cancelled caller must not cancel the result other callers share
        return await asyncio.shield(item.future)

    def _start_worker(self) -> None:
        if self._processing:
            return
        self._processing = True
        self._worker = asyncio.get_running_loop().create_task(self._process_queue())

    async def _process_queue(self) -> None:
        try:
            while self.queue:
                item = self.queue.pop()
                try:
                    await self._handle(item)
                except UpstreamThrottled:
                    item.attempts += 1
                    self.counters["throttled"] += 1
                    logger.warning(
                        f"Upstream throttled {item.key} (attempt {item.attempts}), "
                        f"retrying in {self.governor.min_interval}s"
                    )
                    self.queue.requeue(item)
                    await asyncio.sleep(self.governor.min_interval)
                except ProxyError as e:
                    self.counters["failures"] += 1
                    logger.error(
                        f"Error fetching anime: endpoint={item.key} "
                        f"status={e.status} message={e.message}"
                    )
                    self._finish(item, error=e)
                except Exception as e:
                    self.counters["failures"] += 1
                    logger.exception(f"Unexpected error while processing {item.key}")
                    self._finish(item, error=InternalQueueError(str(e), endpoint=item.key))
        finally:
            self._processing = False

    async def _handle(self, item: QueueItem) -> None:
        cached = self.cache.get(item.key)
        if cached is not None:
            self._finish(item, payload=cached.payload)
            return

        await self.governor.wait_if_needed()
        self.counters["upstream_calls"] += 1
        payload = await run_in_threadpool(self.client.get, item.key)
        self.governor.mark()
        self.cache.put(item.key, payload)

        data = payload.get("data") if isinstance(payload, dict) else None
        logger.info(
            f"Response received: endpoint={item.key} "
            f"items={len(data) if isinstance(data, list) else 0} "
            f"waited={time.monotonic() - item.enqueued_at:.2f}s"
        )
        self._finish(item, payload=payload)

    def _finish(self, item: QueueItem, payload: Any = None, error: Optional[BaseException] = None) -> None:
        if self._pending.get(item.key) is item:
            del self._pending[item.key]
        if error is not None:
            item.fail(error)
        else:
            item.resolve(payload)

    def stats(self) -> Dict[str, Any]:
        return {
            "queue_length": len(self.queue),
            "queued_keys": self.queue.keys(),
            "cache_entries": len(self.cache),
            "cache_ttl_seconds": self.cache.ttl,
            "worker_running": self._processing,
            **self.counters,
        }
