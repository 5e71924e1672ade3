from __future__ import annotations

import logging
import threading
from typing import Callable, Generic, Iterable, Optional, TypeVar

from jewelry.gateway import ChangeEvent, RecordGateway

logger = logging.getLogger(__name__)

T = TypeVar("T")


class LiveSnapshot(Generic[T]):
    """
    A derived view kept in step with the gateway's change feed.

    `load` must re-fetch full snapshots and recompute from scratch; it is called
    again on every change to any of `collections`. Each refresh takes a
    generation number and its result is kept only if no newer refresh has
    started meanwhile (last write wins).

    The gateway only holds the view weakly, so a view that is dropped without
    `close()` (a browser session going away) stops receiving refreshes.
    """

    def __init__(self, gateway: RecordGateway, collections: Iterable[str], load: Callable[[], T]):
        self._load = load
        self._lock = threading.Lock()
        self._generation = 0
        self._value: Optional[T] = None
        self._loaded = False
        self.error: Optional[Exception] = None
        self._unsubscribe = [gateway.subscribe(c, self._on_change) for c in collections]

    def _on_change(self, event: ChangeEvent) -> None:
        logger.debug("Refreshing after %s on %s", event.kind, event.collection)
        self.refresh()

    def refresh(self) -> Optional[T]:
        with self._lock:
            self._generation += 1
            token = self._generation

        try:
            result = self._load()
        except Exception as e:
            # Keep the last good value on screen; the page reports `error`.
            logger.warning("Snapshot refresh failed: %s", e)
            with self._lock:
                if token == self._generation:
                    self.error = e
            return self._value

        with self._lock:
            if token != self._generation:
                logger.debug("Discarding stale snapshot (generation %d < %d)", token, self._generation)
                return self._value
            self._value = result
            self._loaded = True
            self.error = None
            return result

    @property
    def value(self) -> Optional[T]:
        if not self._loaded:
            return self.refresh()
        return self._value

    @property
    def generation(self) -> int:
        return self._generation

    def close(self) -> None:
        for unsubscribe in self._unsubscribe:
            unsubscribe()
        self._unsubscribe = []
