from typing import List, NamedTuple, Optional, Sequence, Tuple

from .cards import BOARD_SIZE, TEAMS
from .deriver import apply_derived


class Snapshot(NamedTuple):
    """Reveal state a (re)joining client carries from its last view."""
    revealed: Tuple[bool, ...]
    current_team: Optional[str] = None


def parse_snapshot(raw) -> Optional[Snapshot]:
    """Read a client snapshot, or None when it is missing or malformed."""
    if not isinstance(raw, dict):
        return None
    revealed = raw.get('revealed')
    if not isinstance(revealed, (list, tuple)) or len(revealed) != BOARD_SIZE:
        return None
    team = raw.get('currentTeam')
    return Snapshot(tuple(bool(flag) for flag in revealed), team if team in TEAMS else None)


def merge_revealed(base: Sequence[bool], incoming: Sequence[bool]) -> List[bool]:
    return [bool(a) or bool(b) for a, b in zip(base, incoming)]


def merge_snapshot(session, snapshot: Snapshot) -> bool:
    """OR the snapshot's reveals into the session; returns True if any card flipped.

    Only reveals are taken from the snapshot. Turn ownership stays with the
    live session.
    """
    merged = merge_revealed(session.revealed, snapshot.revealed)
    changed = merged != session.revealed
    session.revealed = merged
    apply_derived(session)
    return changed


def seed_from_snapshot(session, snapshot: Snapshot) -> None:
    """Initialise a brand-new session from a saved snapshot.

    With no live state to defer to, the snapshot's team is accepted here.
    """
    if snapshot.current_team is not None:
        session.current_team = snapshot.current_team
    merge_snapshot(session, snapshot)
