import threading
import time
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from .cards import Card
from .merge import Snapshot, seed_from_snapshot
from .session import Session


class SessionRegistry:
    """In-memory store of live sessions keyed by game key.

    The registry lock only guards the key map. Mutating a session happens
    under that session's own lock so unrelated games never contend.
    """

    def __init__(self, clock: Callable[[], float] = time.time):
        self._sessions: Dict[str, Session] = {}
        self._lock = threading.Lock()
        self._clock = clock

    def get(self, key: str) -> Optional[Session]:
        with self._lock:
            return self._sessions.get(key)

    def create_if_absent(self, key: str, board: Sequence[Card],
                         saved_state: Optional[Snapshot] = None) -> Tuple[Session, bool]:
        """Return ``(session, created)``.

        An existing session is returned untouched; it is never replaced.
        A new session starts fully hidden with blue to play, then absorbs
        ``saved_state`` before anyone sees it.
        """
        with self._lock:
            existing = self._sessions.get(key)
            if existing is not None:
                return existing, False
            session = Session(key, board, now=self._clock())
            if saved_state is not None:
                seed_from_snapshot(session, saved_state)
            self._sessions[key] = session
            return session, True

    def remove(self, key: str) -> Optional[Session]:
        with self._lock:
            return self._sessions.pop(key, None)

    def remove_if_idle(self, key: str, session: Session, cutoff: float) -> bool:
        """Drop ``session`` if it is still the one under ``key`` and still idle.

        Callers hold ``session.lock`` so a join cannot touch it mid-check.
        """
        with self._lock:
            if self._sessions.get(key) is not session or session.last_activity >= cutoff:
                return False
            del self._sessions[key]
            return True

    def items(self) -> List[Tuple[str, Session]]:
        with self._lock:
            return list(self._sessions.items())

    def __contains__(self, key):
        with self._lock:
            return key in self._sessions

    def __len__(self):
        with self._lock:
            return len(self._sessions)
