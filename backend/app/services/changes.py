"""Change notifications from the Record Store and coalesced snapshot reloads.

Notifications carry no payload: subscribers only learn that a collection
changed, and the only correct reaction is a full snapshot reload.
"""

from __future__ import annotations

import asyncio
import logging
from collections import defaultdict
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING

from backend.app.core.errors import LoadError

if TYPE_CHECKING:
    from backend.app.services.record_store import RecordStore
    from backend.app.services.snapshot import Snapshot

logger = logging.getLogger(__name__)

COLLECTIONS = ("stock_items", "sales", "expenses")

ChangeCallback = Callable[[str], None]


class ChangeFeed:
    """In-process publish/subscribe channel keyed by collection name."""

    def __init__(self) -> None:
        self._subscribers: dict[str, list[ChangeCallback]] = defaultdict(list)

    def subscribe(self, collection: str, callback: ChangeCallback) -> Callable[[], None]:
        """Register *callback* for *collection*; returns the matching unsubscribe."""
        self._subscribers[collection].append(callback)

        def unsubscribe() -> None:
            try:
                self._subscribers[collection].remove(callback)
            except ValueError:
                pass

        return unsubscribe

    def publish(self, collection: str) -> None:
        for callback in list(self._subscribers.get(collection, ())):
            try:
                callback(collection)
            except Exception:
                logger.exception("Change subscriber failed for %s", collection)

    def subscriber_count(self, collection: str) -> int:
        return len(self._subscribers.get(collection, ()))


class ReloadCoalescer:
    """Collapse bursts of reload requests.

    At most one reload runs at a time. Requests arriving while one is running
    are merged into a single follow-up reload that starts once the current one
    finishes.
    """

    def __init__(self, reload: Callable[[], Awaitable[object]]) -> None:
        self._reload = reload
        self._current: asyncio.Task[None] | None = None
        self._queued: asyncio.Task[None] | None = None
        self.runs = 0

    async def request(self) -> None:
        """Wait until a reload that started after this call has completed."""
        if self._queued is not None:
            await asyncio.shield(self._queued)
            return
        if self._current is None or self._current.done():
            self._current = asyncio.ensure_future(self._run())
            await asyncio.shield(self._current)
            return
        self._queued = asyncio.ensure_future(self._after(self._current))
        await asyncio.shield(self._queued)

    async def _after(self, previous: asyncio.Task[None]) -> None:
        try:
            await asyncio.shield(previous)
        except Exception:
            # The caller that started it already saw the failure.
            pass
        self._current = asyncio.current_task()  # type: ignore[assignment]
        self._queued = None
        await self._run()

    async def _run(self) -> None:
        self.runs += 1
        await self._reload()


class LiveSnapshot:
    """Latest snapshot kept fresh by change notifications.

    Notifications raised on the event loop schedule a coalesced reload right
    away. Notifications from worker threads only mark the cached snapshot
    stale; the next :meth:`current` call reloads it.
    """

    def __init__(self, store: RecordStore) -> None:
        self._store = store
        self._snapshot: Snapshot | None = None
        self._stale = True
        self._coalescer = ReloadCoalescer(self._reload)
        self._unsubscribers = [
            store.feed.subscribe(name, self._on_change) for name in COLLECTIONS
        ]
        self._tasks: set[asyncio.Task[None]] = set()

    async def _reload(self) -> None:
        from backend.app.services.snapshot import load_snapshot

        # Cleared before fetching so a change landing mid-fetch marks it stale again.
        self._stale = False
        try:
            self._snapshot = await load_snapshot(self._store)
        except Exception:
            self._stale = True
            raise

    def _on_change(self, collection: str) -> None:
        self._stale = True
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            return
        task = loop.create_task(self._refresh_logged())
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _refresh_logged(self) -> None:
        try:
            await self.refresh()
        except Exception as exc:
            # Keep serving the last good snapshot; the next change retries.
            logger.warning("Background snapshot reload failed: %s", exc)

    async def refresh(self) -> Snapshot:
        await self._coalescer.request()
        if self._snapshot is None:
            raise LoadError("Snapshot reload finished without data")
        return self._snapshot

    async def current(self) -> Snapshot:
        if self._snapshot is None or self._stale:
            return await self.refresh()
        return self._snapshot

    @property
    def reload_count(self) -> int:
        return self._coalescer.runs

    def close(self) -> None:
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers.clear()
