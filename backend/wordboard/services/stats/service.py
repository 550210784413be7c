import copy
import logging
import threading
import time
from datetime import datetime, timezone
from typing import Callable, Optional

from . import periods

PERIODS = ('daily', 'weekly', 'monthly')


class UsageStats:
    """Created/completed game counters per day, week, month and all time.

    Counters live in memory and are written through ``repository`` when
    dirty, either by the periodic flush task or on shutdown. Persistence
    failures are logged and never reach callers.
    """

    def __init__(self, repository, logger: Optional[logging.Logger] = None,
                 flush_interval: float = 30,
                 clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc)):
        self.repository = repository
        self.logger = logger or logging.getLogger(__name__)
        self.flush_interval = flush_interval
        self.clock = clock
        self.active_games = 0
        self._stats = None
        self._dirty = False
        self._lock = threading.RLock()
        self._started_at = time.monotonic()
        self._stopped = threading.Event()
        self._flushing = False

    @property
    def dirty(self) -> bool:
        return self._dirty

    def load(self) -> None:
        with self._lock:
            try:
                loaded = self.repository.load()
            except Exception:
                self.logger.exception("[stats-error] could not load usage stats, starting fresh")
                self._stats = periods.initial_stats(self.clock())
                return
            if loaded is None:
                self._stats = periods.initial_stats(self.clock())
                self._dirty = True
                self.flush()
            else:
                self._stats = loaded
                self._roll_periods()

    def _ensure_loaded(self):
        if self._stats is None:
            self.load()

    def _roll_periods(self):
        now = self.clock()
        flags = periods.periods_to_reset(self._stats, now)
        if any(flags.values()):
            self._stats = periods.reset_periods(self._stats, flags, now)
            self._dirty = True

    def _bump(self, counter: str) -> None:
        self._ensure_loaded()
        self._roll_periods()
        for period in PERIODS:
            self._stats[period][counter] += 1
        self._dirty = True

    def add_game(self, key: str) -> None:
        with self._lock:
            self.active_games += 1
            self._bump('gamesCreated')
            self._stats['allTime']['totalGames'] += 1

    def remove_game(self, key: str) -> None:
        with self._lock:
            self.active_games = max(0, self.active_games - 1)

    def complete_game(self, key: str) -> None:
        with self._lock:
            self._bump('gamesCompleted')

    def get_stats(self) -> dict:
        with self._lock:
            self._ensure_loaded()
            self._roll_periods()
            return {
                'activeGames': self.active_games,
                'uptime': int(time.monotonic() - self._started_at),
                **copy.deepcopy(self._stats),
            }

    def reset(self) -> None:
        with self._lock:
            self._stats = periods.initial_stats(self.clock())
            self._dirty = True

    def flush(self) -> bool:
        """Save when dirty. Returns True if a write happened."""
        with self._lock:
            if not self._dirty or self._stats is None:
                return False
            snapshot = copy.deepcopy(self._stats)
            try:
                self.repository.save(snapshot)
            except Exception:
                self.logger.exception("[stats-error] could not save usage stats")
                return False
            self._dirty = False
            self.logger.info(
                f"[stats-save] total={snapshot['allTime']['totalGames']} today_created={snapshot['daily']['gamesCreated']}"
            )
            return True

    def start(self, start_task: Callable) -> None:
        self._ensure_loaded()
        if self._flushing:
            return
        self._flushing = True
        self._stopped.clear()
        start_task(self._run)

    def stop(self) -> None:
        self._stopped.set()
        self._flushing = False

    def shutdown(self) -> None:
        self.stop()
        self.flush()

    def _run(self):
        while not self._stopped.wait(self.flush_interval):
            self.flush()
