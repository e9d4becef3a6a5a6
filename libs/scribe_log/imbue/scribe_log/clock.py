"""A clock that amortizes system-time reads across many log calls.

Reads return a cached timestamp that a background thread refreshes every
refresh interval. The worker keeps refreshing through gaps between reads
and only exits after `idle_ticks_before_exit` consecutive intervals with no
read at all; the next read then starts it again. An idle LogEnv therefore
holds no thread, while an emitter logging less often than once per interval
still reuses one worker. Reads never take a lock unless the worker has to
be (re)started.
"""

import threading
from collections.abc import Callable
from datetime import datetime
from datetime import timezone
from typing import Final

from loguru import logger

from imbue.scribe_log.primitives import PositiveFloat
from imbue.scribe_log.primitives import PositiveInt

DEFAULT_IDLE_TICKS_BEFORE_EXIT: Final[PositiveInt] = PositiveInt(50)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class CachedClock:
    """Self-refreshing timestamp source, safe to read from any thread.

    Successive reads never go backwards, even if the underlying time source does.
    """

    def __init__(
        self,
        refresh_interval_seconds: PositiveFloat,
        time_source: Callable[[], datetime] = utc_now,
        idle_ticks_before_exit: PositiveInt = DEFAULT_IDLE_TICKS_BEFORE_EXIT,
    ) -> None:
        self._refresh_interval_seconds = float(refresh_interval_seconds)
        self._idle_ticks_before_exit = int(idle_ticks_before_exit)
        self._time_source = time_source
        self._lock = threading.Lock()
        self._stop_event = threading.Event()
        # None whenever no worker is keeping the value fresh.
        self._current: datetime | None = None
        self._latest: datetime | None = None
        self._is_read_since_refresh = False
        self._worker: threading.Thread | None = None
        self._worker_start_count = 0

    @property
    def refresh_interval_seconds(self) -> float:
        return self._refresh_interval_seconds

    @property
    def idle_ticks_before_exit(self) -> int:
        return self._idle_ticks_before_exit

    @property
    def is_refreshing(self) -> bool:
        """Whether a background worker is currently keeping the value fresh."""
        worker = self._worker
        return worker is not None and worker.is_alive()

    @property
    def worker_start_count(self) -> int:
        """How many refresh workers this clock has started so far."""
        return self._worker_start_count

    def now(self) -> datetime:
        current = self._current
        if current is not None:
            self._is_read_since_refresh = True
            return current
        return self._refresh_and_start_worker()

    def stop(self) -> None:
        """Stop the background worker. Later reads still work but hit the time source every time."""
        self._stop_event.set()
        with self._lock:
            worker = self._worker
            self._worker = None
            self._current = None
        if worker is not None and worker is not threading.current_thread():
            worker.join()

    def _store(self, value: datetime) -> datetime:
        # Caller holds the lock.
        latest = self._latest
        if latest is not None and value < latest:
            value = latest
        self._latest = value
        return value

    def _refresh_and_start_worker(self) -> datetime:
        with self._lock:
            if self._current is not None:
                self._is_read_since_refresh = True
                return self._current
            value = self._store(self._time_source())
            if self._stop_event.is_set():
                return value
            self._current = value
            self._is_read_since_refresh = False
            self._worker = threading.Thread(
                target=self._run,
                name="scribe-log-clock",
                daemon=True,
            )
            self._worker.start()
            self._worker_start_count += 1
        logger.trace("Started clock refresh worker (interval {} sec)", self._refresh_interval_seconds)
        return value

    def _run(self) -> None:
        idle_ticks = 0
        while not self._stop_event.wait(self._refresh_interval_seconds):
            with self._lock:
                if self._worker is not threading.current_thread():
                    return
                if self._is_read_since_refresh:
                    idle_ticks = 0
                else:
                    idle_ticks += 1
                    if idle_ticks >= self._idle_ticks_before_exit:
                        self._current = None
                        self._worker = None
                        break
                self._is_read_since_refresh = False
                self._current = self._store(self._time_source())
        logger.trace("Clock refresh worker exiting")
