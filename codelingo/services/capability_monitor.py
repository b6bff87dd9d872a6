# codelingo/services/capability_monitor.py
"""
Detects when the AI chat capability becomes available.

The monitor never calls the capability. It only checks that a callable
exists at the expected attribute path (root.ai.chat) and, once found,
keeps the handle so the controller can use it.

Readiness flips exactly once:
- ready starts False
- the first positive check stores the handle, sets ready and stops polling
- ready never goes back to False
"""

import asyncio
import logging
from collections.abc import Mapping
from typing import Any, Callable, Optional, Sequence

from codelingo.models.types import ChatCallable

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL = 0.3     # seconds
DEFAULT_BACKOFF_FACTOR = 1.5
DEFAULT_MAX_INTERVAL = 3.0      # seconds
CHAT_ENTRY_POINT_PATH: tuple[str, ...] = ("ai", "chat")


def find_chat_entry_point(
    root: Any,
    path: Sequence[str] = CHAT_ENTRY_POINT_PATH,
) -> Optional[ChatCallable]:
    """Walk `path` from `root` and return the leaf if it is callable.

    Each step accepts a mapping key or an attribute. Missing steps return None.
    """
    node = root
    for name in path:
        if node is None:
            return None
        if isinstance(node, Mapping):
            node = node.get(name)
        else:
            node = getattr(node, name, None)
    return node if callable(node) else None


class CapabilityMonitor:
    """
    Polls for the AI chat capability with backoff.

    Usage:
        monitor = CapabilityMonitor(lambda: runtime)
        monitor.start()
        chat = await monitor.wait_ready()
    """

    def __init__(
        self,
        locate: Callable[[], Any],
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        backoff_factor: float = DEFAULT_BACKOFF_FACTOR,
        max_interval: float = DEFAULT_MAX_INTERVAL,
        on_ready: Optional[Callable[[ChatCallable], None]] = None,
        path: Sequence[str] = CHAT_ENTRY_POINT_PATH,
    ):
        if poll_interval <= 0:
            raise ValueError(f"poll_interval must be positive, got {poll_interval}")
        if backoff_factor < 1.0:
            raise ValueError(f"backoff_factor must be >= 1.0, got {backoff_factor}")

        self._locate = locate
        self._path = tuple(path)
        self.poll_interval = poll_interval
        self.backoff_factor = backoff_factor
        self.max_interval = max(max_interval, poll_interval)
        self.on_ready = on_ready

        self._ready = False
        self._handle: Optional[ChatCallable] = None
        self._ready_event: Optional[asyncio.Event] = None
        self._task: Optional[asyncio.Task] = None
        self._attempts = 0

    @property
    def ready(self) -> bool:
        return self._ready

    @property
    def handle(self) -> Optional[ChatCallable]:
        """Resolved chat entry point, None until ready"""
        return self._handle

    @property
    def attempts(self) -> int:
        return self._attempts

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def _event(self) -> asyncio.Event:
        # Created lazily so the monitor can be built outside a running loop
        if self._ready_event is None:
            self._ready_event = asyncio.Event()
            if self._ready:
                self._ready_event.set()
        return self._ready_event

    def next_interval(self, interval: float) -> float:
        return min(interval * self.backoff_factor, self.max_interval)

    def poll_once(self) -> bool:
        """Run a single presence check. Returns the readiness flag."""
        if self._ready:
            return True

        self._attempts += 1
        try:
            root = self._locate()
        except Exception as e:
            # A locator that is not initialized yet counts as "not present"
            logger.debug("Capability locator raised: %s", e)
            return False

        handle = find_chat_entry_point(root, self._path)
        if handle is None:
            return False

        self._mark_ready(handle)
        return True

    def _mark_ready(self, handle: ChatCallable) -> None:
        self._handle = handle
        self._ready = True
        if self._ready_event is not None:
            self._ready_event.set()
        logger.info("AI chat capability detected after %d check(s)", self._attempts)
        if self.on_ready is not None:
            try:
                self.on_ready(handle)
            except Exception as e:
                logger.exception("on_ready callback failed: %s", e)

    async def _poll_loop(self) -> None:
        interval = self.poll_interval
        while not self.poll_once():
            await asyncio.sleep(interval)
            interval = self.next_interval(interval)

    def start(self, poll_interval: Optional[float] = None) -> None:
        """Begin polling on the running event loop. No-op if running or ready.

        Args:
            poll_interval: Overrides the initial interval (seconds)
        """
        if self._ready or self.is_running:
            return
        if poll_interval is not None:
            if poll_interval <= 0:
                raise ValueError(f"poll_interval must be positive, got {poll_interval}")
            self.poll_interval = poll_interval
            self.max_interval = max(self.max_interval, poll_interval)
        self._event()
        self._task = asyncio.get_running_loop().create_task(
            self._poll_loop(), name="codelingo-capability-monitor"
        )

    def stop(self) -> None:
        """Cancel a pending poll. Safe to call at any time."""
        task = self._task
        self._task = None
        if task is not None and not task.done():
            task.cancel()
            logger.info("Capability monitor stopped before the AI became ready")

    async def wait_ready(self) -> ChatCallable:
        """Wait until the capability is detected and return its handle.

        Starts polling if it is not running yet.
        """
        if self._ready and self._handle is not None:
            return self._handle
        event = self._event()
        self.start()
        await event.wait()
        if self._handle is None:
            raise RuntimeError("Capability monitor signalled readiness without a handle")
        return self._handle
