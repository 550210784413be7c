from typing import Dict, NamedTuple, Optional, Sequence

from .cards import ASSASSIN, BLUE, RED, Card


class DerivedState(NamedTuple):
    remaining_counts: Dict[str, int]
    game_over: bool
    winner: Optional[str]


def derive_state(board: Sequence[Card], revealed: Sequence[bool]) -> DerivedState:
    """Compute remaining counts, game over and winner from raw reveal data.

    Winner precedence is fixed: a revealed assassin beats everything, then an
    exhausted blue team, then an exhausted red team.
    """
    remaining = {BLUE: 0, RED: 0}
    assassin_revealed = False
    for card, is_revealed in zip(board, revealed):
        if is_revealed:
            if card.color == ASSASSIN:
                assassin_revealed = True
        elif card.color in remaining:
            remaining[card.color] += 1

    if assassin_revealed:
        winner = ASSASSIN
    elif remaining[BLUE] == 0:
        winner = BLUE
    elif remaining[RED] == 0:
        winner = RED
    else:
        winner = None
    return DerivedState(remaining, winner is not None, winner)


def apply_derived(session) -> DerivedState:
    """Recompute and store the derived fields on a session."""
    derived = derive_state(session.board, session.revealed)
    session.remaining_counts = derived.remaining_counts
    session.game_over = derived.game_over
    session.winner = derived.winner
    return derived
