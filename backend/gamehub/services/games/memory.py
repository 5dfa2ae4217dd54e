from gamehub.games import GameId
from .base import BaseGame

SYMBOLS = ['controller', 'dice', 'target', 'circus', 'palette', 'masks', 'rocket', 'star']
MATCH_POINTS = 10


class Card:
    __slots__ = ('symbol', 'is_flipped', 'is_matched')

    def __init__(self, symbol):
        self.symbol = symbol
        self.is_flipped = False
        self.is_matched = False

    def to_dict(self):
        return {'symbol': self.symbol, 'is_flipped': self.is_flipped, 'is_matched': self.is_matched}


class MemoryGame(BaseGame):
    """Pair-matching over a shuffled deck of ``len(symbols) * 2`` cards.

    Two face-up cards that do not match stay visible until :meth:`settle`
    turns them back, mirroring the short reveal delay of the UI.
    """

    game_id = GameId.MEMORY

    def __init__(self, symbols=None, rng=None):
        self.symbols = list(symbols or SYMBOLS)
        super().__init__(rng=rng)

    def _setup(self):
        deck = self.symbols + self.symbols
        self.rng.shuffle(deck)
        self.cards = [Card(s) for s in deck]
        self.selected = []
        self.moves = 0

    def flip(self, index: int):
        """Turn a card face up.

        Returns ``None`` for an ignored flip, ``'pending'`` after the first
        card of a pair, ``'match'`` or ``'mismatch'`` after the second.
        """
        if not self.is_running:
            return None
        if len(self.selected) == 2 or not 0 <= index < len(self.cards):
            return None
        card = self.cards[index]
        if card.is_flipped or card.is_matched:
            return None

        card.is_flipped = True
        self.selected.append(index)
        if len(self.selected) == 1:
            return 'pending'

        self.moves += 1
        first, second = (self.cards[i] for i in self.selected)
        if first.symbol != second.symbol:
            return 'mismatch'

        first.is_matched = second.is_matched = True
        self.selected = []
        self.score += MATCH_POINTS
        if all(c.is_matched for c in self.cards):
            self._finish()
        return 'match'

    def settle(self):
        """Turn an unmatched pair face down again."""
        if len(self.selected) != 2:
            return
        for i in self.selected:
            self.cards[i].is_flipped = False
        self.selected = []
