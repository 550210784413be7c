import logging
from typing import Callable, Optional


class StatsNotifier:
    """Fire-and-forget front for the usage counters.

    Each call is handed to ``start_task`` (a background task starter) and its
    outcome is only ever logged. With no starter, as in tests, calls run
    inline but are still isolated from the caller.
    """

    def __init__(self, stats, logger: Optional[logging.Logger] = None,
                 start_task: Optional[Callable] = None):
        self.stats = stats
        self.logger = logger or logging.getLogger(__name__)
        self._start_task = start_task

    def add_game(self, key: str) -> None:
        self._fire('add_game', key)

    def remove_game(self, key: str) -> None:
        self._fire('remove_game', key)

    def complete_game(self, key: str) -> None:
        self._fire('complete_game', key)

    def _fire(self, method, key):
        if self._start_task is None:
            self._call(method, key)
            return
        try:
            self._start_task(self._call, method, key)
        except Exception:
            self.logger.exception(f"[stats-error] could not schedule {method} for game={key}")

    def _call(self, method, key):
        try:
            getattr(self.stats, method)(key)
        except Exception:
            self.logger.exception(f"[stats-error] {method} failed for game={key}")
