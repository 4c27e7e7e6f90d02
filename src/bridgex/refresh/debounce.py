"""Trailing-edge debounce on the asyncio event loop."""

import asyncio
import inspect
import logging
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)


class Debouncer:
    """Delay calls until no new call arrived for ``wait`` seconds.

    A call made while another is pending replaces it, so only the last
    arguments are delivered. Awaitable results are scheduled as tasks.

    Calls may come from outside the event loop: they are handed to the bound
    loop thread-safely, or held until ``flush()`` when no loop is known yet.

    Example:
        push = Debouncer(fetcher.update_quote_request_params, wait=0.3)
        push(params)  # superseded
        push(params)  # delivered after 300 ms
    """

    def __init__(
        self,
        func: Callable[..., Any],
        wait: float,
        loop: Optional[asyncio.AbstractEventLoop] = None,
    ):
        self.func = func
        self.wait = wait
        self._loop = loop
        self._handle: Optional[asyncio.TimerHandle] = None
        self._held = False
        self._pending_args: tuple = ()
        self._pending_kwargs: dict = {}
        self._tasks: set[asyncio.Task] = set()

    @property
    def loop(self) -> Optional[asyncio.AbstractEventLoop]:
        return self._loop

    def bind(self, loop: Optional[asyncio.AbstractEventLoop]) -> None:
        """Set the loop timers run on."""
        self._loop = loop

    @property
    def pending(self) -> bool:
        return self._handle is not None or self._held

    def __call__(self, *args, **kwargs) -> None:
        try:
            running = asyncio.get_running_loop()
        except RuntimeError:
            running = None
        loop = self._loop or running

        if loop is None:
            # Nothing to time against yet; keep the latest call for flush()
            self._cancel_timer()
            self._pending_args, self._pending_kwargs = args, kwargs
            self._held = True
            return

        if loop is running:
            self._schedule(args, kwargs)
        else:
            loop.call_soon_threadsafe(self._schedule, args, kwargs)

    def cancel(self) -> None:
        """Drop the pending call, if any."""
        self._cancel_timer()
        self._held = False
        self._pending_args, self._pending_kwargs = (), {}

    async def flush(self) -> None:
        """Deliver the pending call now and wait for it to finish."""
        if self.pending:
            self._cancel_timer()
            self._fire()
        await self.join()

    async def join(self) -> None:
        """Wait for delivered awaitable calls to complete."""
        if self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    def _cancel_timer(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
            logger.debug("Superseded pending debounced call")

    def _schedule(self, args: tuple, kwargs: dict) -> None:
        self._cancel_timer()
        self._held = False
        self._pending_args, self._pending_kwargs = args, kwargs
        self._handle = asyncio.get_running_loop().call_later(self.wait, self._fire)

    def _fire(self) -> None:
        self._handle = None
        self._held = False
        args, kwargs = self._pending_args, self._pending_kwargs
        self._pending_args, self._pending_kwargs = (), {}

        try:
            result = self.func(*args, **kwargs)
        except Exception as e:
            logger.error(f"Debounced call failed: {type(e).__name__}: {e}")
            return

        if inspect.isawaitable(result):
            task = asyncio.ensure_future(result)
            self._tasks.add(task)
            task.add_done_callback(self._on_task_done)

    def _on_task_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.error(f"Debounced call failed: {type(error).__name__}: {error}")
