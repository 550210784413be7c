from typing import NamedTuple, Optional

from .cards import other_team
from .deriver import apply_derived


class RevealResult(NamedTuple):
    applied: bool
    completed: bool = False
    reason: Optional[str] = None


def next_team(current_team: str, color: str) -> str:
    """Turn stays only when a team uncovers one of its own cards."""
    if color == current_team:
        return current_team
    return other_team(current_team)


def reveal_card(session, index, now: Optional[float] = None) -> RevealResult:
    """Apply one reveal to ``session``.

    Invalid reveals (finished game, bad or out of range index, card already
    face up) leave the session untouched and report why. ``completed`` is
    true only on the reveal that ends the game.
    """
    if session.game_over:
        return RevealResult(False, reason='game over')
    if isinstance(index, bool) or not isinstance(index, int):
        return RevealResult(False, reason=f'bad index {index!r}')
    if not 0 <= index < len(session.board):
        return RevealResult(False, reason=f'index {index} out of range')
    if session.revealed[index]:
        return RevealResult(False, reason=f'card {index} already revealed')

    session.revealed[index] = True
    session.touch(now)
    # Switch is applied even on the game-ending reveal
    session.current_team = next_team(session.current_team, session.board[index].color)
    derived = apply_derived(session)
    return RevealResult(True, completed=derived.game_over)
