"""Bounded worker pool for WHOIS lookups."""

from __future__ import annotations

import asyncio
import inspect
import logging
from typing import Any, Awaitable, Callable, Generic, Iterable, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")

ProgressCallback = Callable[[int], None]


class BoundedScheduler(Generic[T, R]):
    """Launches one task per item with at most `max_concurrency` in flight.

    - A permit is taken before a task starts and given back when it ends, so
      `in_flight` can never exceed the cap.
    - `launch_delay` spaces successive launches (batch mode).
    - `on_progress` is called with `progress_offset` plus the completion
      count whenever that total is a multiple of `progress_every`.
    - Completion order is whatever the workers produce.
    """

    def __init__(
        self,
        max_concurrency: int,
        *,
        launch_delay: float = 0.0,
        progress_every: int | None = None,
        on_progress: ProgressCallback | None = None,
        progress_offset: int = 0,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        if max_concurrency < 1:
            raise ValueError("max_concurrency must be >= 1")
        self.max_concurrency = max_concurrency
        self.launch_delay = max(0.0, launch_delay)
        self.progress_every = progress_every
        self.on_progress = on_progress
        self.progress_offset = max(0, progress_offset)
        self._sleep = sleep

        self.in_flight = 0
        self.peak_in_flight = 0
        self.launched = 0
        self.completed = 0
        self.failed = 0

    async def run(
        self,
        items: Iterable[T],
        worker: Callable[[T], Awaitable[R]],
        on_result: Callable[[R], Any] | None = None,
    ) -> int:
        """Process every item; returns how many tasks were launched."""

        sem = asyncio.Semaphore(self.max_concurrency)
        running: set[asyncio.Task[None]] = set()

        for item in items:
            await sem.acquire()
            task = asyncio.create_task(self._run_one(item, worker, on_result, sem))
            running.add(task)
            task.add_done_callback(running.discard)
            self.launched += 1
            if self.launch_delay:
                await self._sleep(self.launch_delay)

        if running:
            await asyncio.gather(*running)
        return self.launched

    async def _run_one(
        self,
        item: T,
        worker: Callable[[T], Awaitable[R]],
        on_result: Callable[[R], Any] | None,
        sem: asyncio.Semaphore,
    ) -> None:
        self.in_flight += 1
        self.peak_in_flight = max(self.peak_in_flight, self.in_flight)
        try:
            result = await worker(item)
            if on_result is not None:
                handled = on_result(result)
                if inspect.isawaitable(handled):
                    await handled
        except Exception:
            self.failed += 1
            logger.exception("worker failed for %r", item)
        finally:
            self.in_flight -= 1
            self.completed += 1
            sem.release()
            self._report_progress()

    def _report_progress(self) -> None:
        if not self.on_progress or not self.progress_every:
            return
        done = self.progress_offset + self.completed
        if done % self.progress_every == 0:
            self.on_progress(done)
