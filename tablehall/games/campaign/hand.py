"""
Player Hand - One player's cards and current selection.

Cards are kept in ascending rank order. The selection is a set of
indices into the hand and is cleared after every resolved action.
"""

from __future__ import annotations
from bisect import insort_right
from dataclasses import dataclass, field

from .cards import Card, CardKind


MAX_HAND_SIZES = {1: 8, 2: 7, 3: 6}
MIN_HAND_SIZE = 5


def max_hand_size(num_players: int) -> int:
    """Hand cap for a table of num_players (8/7/6/5)."""
    return MAX_HAND_SIZES.get(num_players, MIN_HAND_SIZE)


@dataclass
class PlayerHand:
    """
    A seat at the table.

    Owned by the roster; the engine only reads and mutates it through
    these methods.
    """
    player_id: str
    cards: list[Card] = field(default_factory=list)
    selected: set[int] = field(default_factory=set)
    max_size: int = MAX_HAND_SIZES[1]

    @property
    def size(self) -> int:
        return len(self.cards)

    @property
    def is_full(self) -> bool:
        return len(self.cards) >= self.max_size

    @property
    def vacancy(self) -> int:
        return max(0, self.max_size - len(self.cards))

    @property
    def health(self) -> int:
        """Total value the player could discard to absorb damage."""
        return sum(card.attack_value for card in self.cards)

    @property
    def has_special(self) -> bool:
        return any(card.kind == CardKind.SPECIAL for card in self.cards)

    def insert(self, card: Card) -> None:
        """Insert keeping rank order; equal ranks go after existing ones."""
        insort_right(self.cards, card, key=lambda c: c.rank)

    def valid_indices(self, indices) -> bool:
        """Indices must be in range and distinct."""
        indices = list(indices)
        if len(set(indices)) != len(indices):
            return False
        return all(0 <= i < len(self.cards) for i in indices)

    def cards_at(self, indices) -> list[Card]:
        return [self.cards[i] for i in sorted(indices)]

    def select(self, indices) -> None:
        self.selected = set(indices)

    def clear_selection(self) -> None:
        self.selected = set()

    def remove(self, indices) -> list[Card]:
        """Remove and return the cards at indices, in hand order."""
        chosen = set(indices)
        removed = [card for i, card in enumerate(self.cards) if i in chosen]
        self.cards = [card for i, card in enumerate(self.cards) if i not in chosen]
        return removed

    def remove_card(self, card: Card) -> bool:
        """Remove a specific card object. Returns False if not held."""
        for i, held in enumerate(self.cards):
            if held is card:
                del self.cards[i]
                return True
        return False

    def take_all(self) -> list[Card]:
        cards, self.cards = self.cards, []
        self.selected = set()
        return cards
