"""
Campaign Cards - Card identity and derived combat stats.

Card structure:
- Rank (0-13): 0 = Special, 1 = Companion, 2-10 = Number, 11-13 = Boss
- Suit (hearts, diamonds, spades, clubs), or None for Special cards
- Attack value and health, derived from rank

Only boss cards mutate after construction (health, attack value and the
immunity-negated flag). Everything else is fixed once built.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Callable


class Suit(Enum):
    """Card suits. Each suit carries one suit power."""
    HEARTS = "hearts"
    DIAMONDS = "diamonds"
    SPADES = "spades"
    CLUBS = "clubs"


# Suit powers resolve in this order
SUIT_ORDER = (Suit.HEARTS, Suit.DIAMONDS, Suit.SPADES, Suit.CLUBS)


class CardKind(Enum):
    """Card kinds, derived from rank."""
    SPECIAL = "special"
    COMPANION = "companion"
    NUMBER = "number"
    BOSS = "boss"


BOSS_ATTACK = {11: 10, 12: 15, 13: 20}
BOSS_TITLES = {11: "Jack", 12: "Queen", 13: "King"}

SPECIAL_RANK = 0
COMPANION_RANK = 1
BOSS_RANKS = (13, 12, 11)


def kind_for_rank(rank: int) -> CardKind:
    """Return the kind of card for a rank."""
    if rank == SPECIAL_RANK:
        return CardKind.SPECIAL
    if rank == COMPANION_RANK:
        return CardKind.COMPANION
    if 2 <= rank <= 10:
        return CardKind.NUMBER
    return CardKind.BOSS


@dataclass(eq=False)
class Card:
    """
    A physical card in one game.

    Cards compare by identity: two Special cards are different cards
    even though they look the same.
    """
    rank: int
    suit: Suit | None
    kind: CardKind
    attack_value: int
    health: int
    immunity_negated: bool = False
    converted: bool = False

    @property
    def is_special(self) -> bool:
        return self.kind == CardKind.SPECIAL

    @property
    def is_boss(self) -> bool:
        return self.kind == CardKind.BOSS

    @property
    def base_attack(self) -> int:
        """Attack value before any spade reduction."""
        if self.is_boss:
            return BOSS_ATTACK[self.rank]
        return self.rank

    @property
    def max_health(self) -> int:
        if self.is_boss and not self.converted:
            return self.base_attack * 2
        return self.base_attack

    @property
    def name(self) -> str:
        if self.kind == CardKind.SPECIAL:
            return "Special"
        suit = self.suit.value.capitalize()
        if self.kind == CardKind.COMPANION:
            return f"Companion of {suit}"
        if self.kind == CardKind.BOSS:
            return f"{BOSS_TITLES[self.rank]} of {suit}"
        return f"{self.rank} of {suit}"

    def __repr__(self) -> str:
        return f"Card({self.name}, atk={self.attack_value}, hp={self.health})"

    def is_immune(self, suit: Suit) -> bool:
        """A boss is immune to its own suit until a Special negates it."""
        return not self.immunity_negated and self.suit == suit

    def apply_damage(self, amount: int) -> int:
        """
        Deal damage to this card.

        Health never drops below zero. Returns the overkill (damage left
        over after health reached zero), which tells an exact kill apart
        from an outright one.
        """
        overkill = max(0, amount - self.health)
        self.health = max(0, self.health - amount)
        return overkill

    def reduce_attack(self, amount: int) -> None:
        """Spade power: lower the attack value, floored at zero."""
        if self.is_immune(Suit.SPADES):
            return
        self.attack_value = max(0, self.attack_value - amount)

    def negate_suit_immunity(self) -> None:
        self.immunity_negated = True

    def convert_to_ally(self) -> None:
        """Turn a beaten boss into a playable card worth its base attack."""
        self.converted = True
        self.immunity_negated = False
        self.attack_value = self.base_attack
        self.health = self.base_attack


def make_card(rank: int, suit: Suit | None, converted: bool = False) -> Card:
    """
    Build a card from its identity.

    Boss cards take attack from BOSS_ATTACK and twice that as health
    (or the attack itself when built already converted).
    """
    kind = kind_for_rank(rank)
    if kind == CardKind.SPECIAL:
        return Card(rank=SPECIAL_RANK, suit=None, kind=kind, attack_value=0, health=0)
    if kind == CardKind.BOSS:
        attack = BOSS_ATTACK[rank]
        return Card(
            rank=rank,
            suit=suit,
            kind=kind,
            attack_value=attack,
            health=attack if converted else attack * 2,
            converted=converted,
        )
    return Card(rank=rank, suit=suit, kind=kind, attack_value=rank, health=rank)


def special_cards_for(num_players: int) -> int:
    """Number of Special cards shuffled into the shared deck."""
    if num_players <= 2:
        return 0
    return 1 if num_players == 3 else 2


def build_shared_cards(num_players: int) -> list[Card]:
    """Unshuffled shared deck: ranks 1-10 of every suit plus Specials."""
    cards = [make_card(rank, suit) for rank in range(1, 11) for suit in SUIT_ORDER]
    cards.extend(make_card(SPECIAL_RANK, None) for _ in range(special_cards_for(num_players)))
    return cards


def build_boss_cards(shuffler: Callable[[list], None]) -> list[Card]:
    """
    Boss stack, Kings at the bottom and Jacks on top.

    Each tier of four is shuffled on its own, so the fight order is
    always all Jacks, then all Queens, then all Kings.
    """
    stack: list[Card] = []
    for rank in BOSS_RANKS:
        tier = [make_card(rank, suit) for suit in SUIT_ORDER]
        shuffler(tier)
        stack.extend(tier)
    return stack
