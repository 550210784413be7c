from typing import NamedTuple, Optional, Sequence, Tuple

BOARD_SIZE = 25

BLUE = 'blue'
RED = 'red'
NEUTRAL = 'neutral'
ASSASSIN = 'assassin'

TEAMS = (BLUE, RED)
COLORS = (BLUE, RED, NEUTRAL, ASSASSIN)
# Older clients send the assassin card as "black"
COLOR_ALIASES = {'black': ASSASSIN}


class InvalidBoard(ValueError):
    """Raised when an inbound board cannot describe a full game."""


class Card(NamedTuple):
    word: str
    color: str

    def to_dict(self):
        return {'word': self.word, 'color': self.color}


def other_team(team: str) -> str:
    return RED if team == BLUE else BLUE


def normalize_color(raw) -> str:
    if not isinstance(raw, str):
        raise InvalidBoard(f'card color must be a string, got {raw!r}')
    color = raw.strip().lower()
    color = COLOR_ALIASES.get(color, color)
    if color not in COLORS:
        raise InvalidBoard(f'unknown card color {raw!r}')
    return color


def parse_board(board: Optional[Sequence] = None,
                words: Optional[Sequence] = None,
                colors: Optional[Sequence] = None) -> Tuple[Card, ...]:
    """Build an immutable board from either wire shape.

    ``board`` is a list of ``{word, color}`` objects. The legacy shape is two
    parallel lists, ``words`` and ``colors``. Exactly BOARD_SIZE cards are
    required.
    """
    if board is not None:
        if not isinstance(board, (list, tuple)):
            raise InvalidBoard('board must be a list of cards')
        entries = []
        for entry in board:
            if not isinstance(entry, dict):
                raise InvalidBoard('each card must be an object with word and color')
            entries.append((entry.get('word'), entry.get('color')))
    elif words is not None and colors is not None:
        if not isinstance(words, (list, tuple)) or not isinstance(colors, (list, tuple)):
            raise InvalidBoard('words and colors must be lists')
        if len(words) != len(colors):
            raise InvalidBoard('words and colors differ in length')
        entries = list(zip(words, colors))
    else:
        raise InvalidBoard('no board supplied')

    if len(entries) != BOARD_SIZE:
        raise InvalidBoard(f'board must have {BOARD_SIZE} cards, got {len(entries)}')

    cards = []
    for word, color in entries:
        if not isinstance(word, str):
            raise InvalidBoard(f'card word must be a string, got {word!r}')
        cards.append(Card(word, normalize_color(color)))
    return tuple(cards)
