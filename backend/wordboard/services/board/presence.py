import threading
from typing import Dict, Optional

from .session import Session


class PresenceTracker:
    """Which connection is attached to which session.

    A connection sits in at most one session. Attaching elsewhere detaches it
    first. Emptying a session never destroys it; only the reaper does that.
    """

    def __init__(self):
        self._attached: Dict[str, Session] = {}
        self._lock = threading.Lock()

    def session_of(self, connection_id: str) -> Optional[Session]:
        with self._lock:
            return self._attached.get(connection_id)

    def session_key(self, connection_id: str) -> Optional[str]:
        session = self.session_of(connection_id)
        return session.key if session is not None else None

    def attach(self, session: Session, connection_id: str) -> Optional[Session]:
        """Attach and return the session the connection was previously in, if any."""
        with self._lock:
            previous = self._detach_locked(connection_id)
            self._attached[connection_id] = session
            session.players.add(connection_id)
            return previous

    def move(self, old: Session, new: Session) -> int:
        """Re-point every connection attached to ``old`` at ``new``."""
        with self._lock:
            moved = 0
            for connection_id, session in self._attached.items():
                if session is old:
                    self._attached[connection_id] = new
                    new.players.add(connection_id)
                    moved += 1
            old.players.clear()
            return moved

    def detach(self, connection_id: str, now: Optional[float] = None) -> Optional[Session]:
        with self._lock:
            return self._detach_locked(connection_id, now)

    def _detach_locked(self, connection_id, now=None):
        session = self._attached.pop(connection_id, None)
        if session is None:
            return None
        session.players.discard(connection_id)
        if not session.players:
            # Idle clock restarts when the last player leaves
            session.touch(now)
        return session

    def __len__(self):
        with self._lock:
            return len(self._attached)
