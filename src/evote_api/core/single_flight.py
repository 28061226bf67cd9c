"""Single-flight guard for administrator-triggered batch operations.

Audit operations are not safe to run concurrently with themselves (a second
run may double-count or double-delete), so a second caller is rejected
immediately instead of queueing behind the first.
"""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from loguru import logger

from evote_api.core.errors import ConflictError


class SingleFlight:
    """Reject overlapping invocations of the same named operation."""

    def __init__(self) -> None:
        self._in_flight: set[str] = set()
        self._lock = asyncio.Lock()

    @asynccontextmanager
    async def hold(self, name: str) -> AsyncIterator[None]:
        """Hold the guard for ``name`` for the duration of the block.

        Args:
            name: Operation name. All audit operations share one name so
                they serialize against each other.

        Raises:
            ConflictError: If the operation is already running.
        """
        async with self._lock:
            if name in self._in_flight:
                logger.warning("Rejected overlapping '{}' invocation", name)
                msg = f"Operation '{name}' is already running"
                raise ConflictError(msg)
            self._in_flight.add(name)
        try:
            yield
        finally:
            async with self._lock:
                self._in_flight.discard(name)

    def is_running(self, name: str) -> bool:
        """Whether ``name`` is currently held."""
        return name in self._in_flight
