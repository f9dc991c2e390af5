"""Batch-update scope: suppress redraws while many objects are changed at once."""
from __future__ import annotations

import logging
import threading
import uuid
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class UpdateScope:
    """Runs ``end_update`` exactly once when the scope is closed.

    Use it as a context manager or call ``close()`` directly; extra closes
    are ignored. Closing from a thread other than the one that opened the
    scope hands ``end_update`` to ``dispatch`` so it runs on the owning
    thread instead.
    """

    def __init__(
        self,
        end_update: Callable[[], None],
        caller: Optional[str] = None,
        dispatch: Optional[Callable[[Callable[[], None]], None]] = None,
    ) -> None:
        self.id = uuid.uuid4()
        self._end_update: Optional[Callable[[], None]] = end_update
        self._dispatch = dispatch
        self._owner_thread = threading.get_ident()
        self._lock = threading.Lock()
        logger.debug("[UpdateScope(%s)] Start from %s", self.id, caller or "(unknown)")

    @property
    def closed(self) -> bool:
        return self._end_update is None

    def close(self) -> None:
        with self._lock:
            end_update = self._end_update
            self._end_update = None

        if end_update is None:
            logger.debug("[UpdateScope(%s)] Already ended", self.id)
            return

        if self._dispatch is not None and threading.get_ident() != self._owner_thread:
            logger.debug("[UpdateScope(%s)] Dispatching to owning thread", self.id)
            self._dispatch(end_update)
        else:
            logger.debug("[UpdateScope(%s)] Invoking direct", self.id)
            end_update()

    def __enter__(self) -> "UpdateScope":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
