"""Provider/listener notification.

A provider computes the query map once and pushes it to every
registered listener. A listener's build must not finish resolving the
virtual module before the first push, which ``ResolutionGate`` enforces.
"""

import asyncio
import logging
import threading

from persistql.core.interfaces.listener import IQueryMapListener

logger = logging.getLogger(__name__)


class ResolutionTimeoutError(TimeoutError):
    """Raised when a listener waits longer than its configured timeout."""

    pass


class QueryMapNotifier:
    """Fans out a provider's maps to its listeners.

    Listeners register before any build runs and are notified
    synchronously, in registration order.
    """

    def __init__(self) -> None:
        self._listeners: list[IQueryMapListener] = []

    @property
    def listeners(self) -> tuple[IQueryMapListener, ...]:
        """Get the registered listeners in registration order."""
        return tuple(self._listeners)

    def add_listener(self, listener: IQueryMapListener) -> None:
        """Register a listener.

        Args:
            listener: The instance to notify on each new map.
        """
        self._listeners.append(listener)

    def notify(self, serialized: str) -> int:
        """Push a new map to every listener.

        Each listener's ``receive`` completes before the next one starts.

        Args:
            serialized: The serialized map.

        Returns:
            Number of listeners notified.
        """
        for listener in self._listeners:
            listener.receive(serialized)

        if self._listeners:
            logger.debug("Notified %d listener(s)", len(self._listeners))
        return len(self._listeners)


class ResolutionGate:
    """One-shot gate that holds resolutions until a map arrives.

    Before ``release`` every ``wait`` suspends; afterwards ``wait``
    returns immediately. ``release`` may be called from any thread or
    event loop, each waiter is resumed on its own loop.
    """

    def __init__(self, timeout: float | None = None) -> None:
        """Initialize the gate.

        Args:
            timeout: Seconds a waiter may wait before failing. None waits
                forever.
        """
        self._timeout = timeout
        self._released = False
        self._waiters: list[asyncio.Future[None]] = []
        # Guards _released and _waiters; release may run on another thread
        self._lock = threading.Lock()

    @property
    def is_released(self) -> bool:
        """Check if the gate has been opened."""
        return self._released

    @property
    def pending(self) -> int:
        """Number of resolutions currently held."""
        return len(self._waiters)

    async def wait(self) -> None:
        """Wait until the gate is released.

        Raises:
            ResolutionTimeoutError: If a timeout is set and expires first.
        """
        loop = asyncio.get_running_loop()
        with self._lock:
            if self._released:
                return
            waiter: asyncio.Future[None] = loop.create_future()
            self._waiters.append(waiter)
        logger.debug("Resolution deferred until the provider publishes a map")

        try:
            if self._timeout is None:
                await waiter
            else:
                await asyncio.wait_for(waiter, self._timeout)
        except asyncio.TimeoutError as e:
            raise ResolutionTimeoutError(
                f"No query map received from provider within {self._timeout}s; "
                "check that the provider's build runs and reaches its seal phase"
            ) from e
        finally:
            with self._lock:
                if waiter in self._waiters:
                    self._waiters.remove(waiter)

    def release(self) -> int:
        """Open the gate and resume every held resolution.

        Returns:
            Number of resolutions resumed.
        """
        with self._lock:
            self._released = True
            waiters, self._waiters = self._waiters, []
        for waiter in waiters:
            waiter.get_loop().call_soon_threadsafe(_resolve_waiter, waiter)

        if waiters:
            logger.debug("Released %d deferred resolution(s)", len(waiters))
        return len(waiters)


def _resolve_waiter(waiter: asyncio.Future[None]) -> None:
    if not waiter.done():
        waiter.set_result(None)
