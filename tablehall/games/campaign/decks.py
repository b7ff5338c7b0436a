"""
Campaign Decks - The hostile (boss) deck and the shared draw deck.

Both decks keep their top card at the end of the list, so drawing is
list.pop(). The shared deck also owns the discard pile.

Shuffling is injectable: anything that permutes a list in place works,
which lets tests pass a seeded or scripted shuffle.
"""

from __future__ import annotations
import logging
import random
from typing import Callable, Sequence

from .cards import Card
from .hand import PlayerHand

logger = logging.getLogger(__name__)

Shuffler = Callable[[list], None]


def fisher_yates(cards: list, rng: random.Random | None = None) -> None:
    """Durstenfeld's in-place Fisher-Yates shuffle."""
    rng = rng or random
    for i in range(len(cards) - 1, 0, -1):
        j = rng.randrange(i + 1)
        cards[i], cards[j] = cards[j], cards[i]


def seeded_shuffler(seed: int) -> Shuffler:
    """A Fisher-Yates shuffler driven by its own seeded generator."""
    rng = random.Random(seed)

    def shuffle(cards: list) -> None:
        fisher_yates(cards, rng)

    return shuffle


class HostileDeck:
    """
    The stack of bosses to defeat, one active at a time.

    `active` is always the boss being fought. Once its health reaches
    zero the engine must call advance() before any further combat.
    """

    def __init__(self, cards: list[Card]):
        if not cards:
            raise ValueError("Hostile deck needs at least one boss")
        self.stack = list(cards)
        self.active = self.stack.pop()

    def advance(self) -> Card | None:
        """
        Bring out the next boss.

        Returns None while the active boss is still alive, or when the
        stack is exhausted (the castle is cleared).
        """
        if not self.stack or self.active.health > 0:
            return None
        self.active = self.stack.pop()
        return self.active

    @property
    def remaining_count(self) -> int:
        return len(self.stack) + (1 if self.active.health > 0 else 0)

    @property
    def is_cleared(self) -> bool:
        return not self.stack and self.active.health <= 0


class SharedDeck:
    """The tavern: shared draw pile plus discard pile."""

    def __init__(self, cards: list[Card] | None = None, shuffler: Shuffler | None = None):
        self.cards: list[Card] = list(cards or [])
        self.discard: list[Card] = []
        self.shuffler = shuffler or fisher_yates

    @property
    def size(self) -> int:
        return len(self.cards)

    @property
    def is_empty(self) -> bool:
        return not self.cards

    def shuffle(self) -> None:
        self.shuffler(self.cards)

    def add_to_top(self, card: Card) -> None:
        self.cards.append(card)

    def add_to_bottom(self, card: Card) -> None:
        self.cards.insert(0, card)

    def add_to_discard(self, cards: Sequence[Card]) -> None:
        self.discard.extend(cards)

    def deal(self, count: int, start_index: int, hands: Sequence[PlayerHand]) -> int:
        """
        Deal up to `count` cards round-robin from hands[start_index].

        Full hands are skipped. The amount dealt is capped by the deck
        size and the total free space in all hands, so dealing less than
        asked is normal near the end of a game. Returns the amount dealt.
        """
        if not hands:
            return 0
        vacancy = sum(hand.vacancy for hand in hands)
        total = max(0, min(count, vacancy, len(self.cards)))
        index = start_index % len(hands)
        for _ in range(total):
            while hands[index].is_full:
                index = (index + 1) % len(hands)
            hands[index].insert(self.cards.pop())
            index = (index + 1) % len(hands)
        if total < count:
            logger.debug("Dealt %d of %d requested cards", total, count)
        return total

    def heal_from_discard(self, amount: int) -> int:
        """
        Heart power: shuffle the discard pile and move up to `amount`
        cards from it to the bottom of the deck. Returns the amount moved.
        """
        self.shuffler(self.discard)
        healed = min(amount, len(self.discard))
        for _ in range(healed):
            self.add_to_bottom(self.discard.pop())
        return healed
