"""
Campaign - Cooperative boss battle for 1 to 4 players.

Players share a draw deck and take turns attacking twelve bosses
(Jacks, then Queens, then Kings). A surviving boss hits back and the
attacker must discard enough cards to absorb the blow.
"""

from .cards import Card, CardKind, Suit, make_card
from .decks import HostileDeck, SharedDeck, fisher_yates, seeded_shuffler
from .hand import PlayerHand, max_hand_size
from .engine import CampaignEngine, TurnPhase, is_legal_combination

__all__ = [
    "Card",
    "CardKind",
    "Suit",
    "make_card",
    "HostileDeck",
    "SharedDeck",
    "fisher_yates",
    "seeded_shuffler",
    "PlayerHand",
    "max_hand_size",
    "CampaignEngine",
    "TurnPhase",
    "is_legal_combination",
]
