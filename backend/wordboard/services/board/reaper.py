import logging
import threading
import time
from typing import Callable, List, Optional

from .registry import SessionRegistry


class IdleReaper:
    """Periodically drops sessions whose last activity is older than the timeout.

    Occupancy is not consulted: a session with connected players but no
    joins or reveals for ``idle_timeout`` seconds is removed all the same.
    ``start`` runs the loop through the supplied task starter (usually
    ``socketio.start_background_task``); ``stop`` is the cancel handle.
    """

    def __init__(self, registry: SessionRegistry, idle_timeout: float = 3600,
                 interval: float = 3600, on_removed: Optional[Callable[[str], None]] = None,
                 logger: Optional[logging.Logger] = None,
                 clock: Callable[[], float] = time.time):
        self.registry = registry
        self.idle_timeout = idle_timeout
        self.interval = interval
        self.on_removed = on_removed
        self.logger = logger or logging.getLogger(__name__)
        self.clock = clock
        self._stopped = threading.Event()
        self._sweep_lock = threading.Lock()
        self._running = False

    def sweep(self, now: Optional[float] = None) -> List[str]:
        if not self._sweep_lock.acquire(blocking=False):
            self.logger.info("[reap-skip] previous sweep still running")
            return []
        try:
            now = self.clock() if now is None else now
            cutoff = now - self.idle_timeout
            removed = []
            for key, session in self.registry.items():
                if session.last_activity >= cutoff:
                    continue
                # Re-checked under the session lock in case a join landed meanwhile
                with session.lock:
                    if not self.registry.remove_if_idle(key, session, cutoff):
                        continue
                removed.append(key)
                self.logger.info(
                    f"[reap] game={key} idle={int(now - session.last_activity)}s players={len(session.players)}"
                )
                if self.on_removed is not None:
                    self.on_removed(key)
            self.logger.info(f"[reap-done] removed={len(removed)} remaining={len(self.registry)}")
            return removed
        finally:
            self._sweep_lock.release()

    def start(self, start_task: Callable) -> None:
        if self._running:
            return
        self._running = True
        self._stopped.clear()
        start_task(self._run)

    def stop(self) -> None:
        self._stopped.set()
        self._running = False

    def _run(self):
        while not self._stopped.wait(self.interval):
            try:
                self.sweep()
            except Exception:
                self.logger.exception("[reap-error] sweep failed")
