import threading
import time
from typing import Optional, Sequence, Set

from .cards import BLUE, BOARD_SIZE, Card
from .deriver import apply_derived

BLUE_TURN = 'blue_turn'
RED_TURN = 'red_turn'
OVER = 'over'


class Session:
    """One live game keyed by the creator-supplied game key.

    ``board`` never changes after creation and ``revealed`` only ever gains
    ``True`` entries. The derived fields (remaining counts, game over, winner)
    are rewritten by ``apply_derived`` after every change to ``revealed``.
    Callers hold ``lock`` around read, mutate and broadcast.
    """

    def __init__(self, key: str, board: Sequence[Card], now: Optional[float] = None):
        self.key = key
        self.board = tuple(board)
        self.revealed = [False] * BOARD_SIZE
        self.current_team = BLUE
        self.remaining_counts = {}
        self.game_over = False
        self.winner = None
        self.last_activity = time.time() if now is None else now
        self.players: Set[str] = set()
        self.lock = threading.RLock()
        apply_derived(self)

    @property
    def phase(self) -> str:
        if self.game_over:
            return OVER
        return BLUE_TURN if self.current_team == BLUE else RED_TURN

    def touch(self, now: Optional[float] = None) -> None:
        self.last_activity = time.time() if now is None else now

    def to_dict(self):
        return {
            'gameKey': self.key,
            'board': [card.to_dict() for card in self.board],
            'revealed': list(self.revealed),
            'currentTeam': self.current_team,
            'remainingCounts': dict(self.remaining_counts),
            'gameOver': self.game_over,
            'winner': self.winner,
            'playerCount': len(self.players),
        }

    def __repr__(self):
        return f'<Session {self.key} {self.phase} players={len(self.players)}>'
