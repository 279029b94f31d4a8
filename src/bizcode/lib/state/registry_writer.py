"""Single-consumer queue feeding fire-and-forget registry updates."""

from __future__ import annotations

import queue
import threading

import structlog

from bizcode.lib.errors import RegistryError
from bizcode.lib.state.registry_store import RegistryEntry, RegistryStore

logger = structlog.get_logger(__name__)

DEFAULT_QUEUE_SIZE = 1024


class RegistryWriter:
    """Bounded queue drained by one daemon thread.

    Submitting never blocks: when the queue is full the entry is dropped.
    """

    def __init__(self, store: RegistryStore, maxsize: int = DEFAULT_QUEUE_SIZE) -> None:
        self._store = store
        self._queue: queue.Queue[RegistryEntry | None] = queue.Queue(maxsize=maxsize)
        self._thread: threading.Thread | None = None
        # Guards `_closed`, worker start-up and every enqueue, so no entry can
        # land behind the shutdown sentinel.
        self._lock = threading.Lock()
        self._closed = False

    def _start_locked(self) -> None:
        if self._thread is not None:
            return
        self._thread = threading.Thread(
            target=self._drain,
            name="bizcode-registry-writer",
            daemon=True,
        )
        self._thread.start()

    def _drain(self) -> None:
        while True:
            entry = self._queue.get()
            try:
                if entry is None:
                    return
                try:
                    self._store.record(entry)
                except RegistryError as exc:
                    logger.debug(
                        "registry update dropped",
                        business_code=entry.business_code,
                        error=str(exc),
                    )
                except Exception:
                    logger.debug(
                        "registry update failed unexpectedly",
                        business_code=entry.business_code,
                        exc_info=True,
                    )
            finally:
                self._queue.task_done()

    def submit(self, entry: RegistryEntry) -> bool:
        """Queue `entry` for recording; False when it was dropped."""

        with self._lock:
            if self._closed:
                return False
            self._start_locked()
            try:
                self._queue.put_nowait(entry)
            except queue.Full:
                logger.debug("registry queue full", business_code=entry.business_code)
                return False
        return True

    def flush(self) -> None:
        """Block until every queued entry has been processed."""

        if self._thread is None:
            return
        self._queue.join()

    def close(self) -> None:
        with self._lock:
            if self._closed:
                return
            self._closed = True
            thread = self._thread
            if thread is None:
                return
            self._queue.put(None)
        thread.join()
