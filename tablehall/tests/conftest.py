"""
Pytest fixtures for tablehall tests.

Decks are scripted: the top of every deck is the end of its list, and
the identity shuffle leaves every order alone.
"""

import pytest

from ..games.campaign.cards import Suit, make_card
from ..games.campaign.engine import CampaignEngine


def no_shuffle(cards):
    """Shuffler that leaves the order untouched."""


@pytest.fixture
def identity_shuffle():
    return no_shuffle


@pytest.fixture
def table():
    """
    Build a started engine with hand-picked cards.

    Usage:
        engine = table({"alice": [make_card(5, Suit.HEARTS)]}, deck=[...])
    """
    def build(hands, bosses=None, deck=None, discard=None):
        if bosses is None:
            bosses = [make_card(12, Suit.DIAMONDS), make_card(11, Suit.CLUBS)]
        engine = CampaignEngine.for_players(
            list(hands),
            shuffler=no_shuffle,
            boss_cards=bosses,
            shared_cards=list(deck or []),
        )
        for player_id, cards in hands.items():
            hand = engine.hand_for(player_id)
            for card in cards:
                hand.insert(card)
        engine.shared.discard.extend(discard or [])
        engine.started = True
        engine.initial_total = engine.total_cards()
        return engine

    return build
