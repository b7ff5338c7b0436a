"""
Tests for the hostile deck, the shared deck and shuffling.
"""

import random

import pytest

from ..games.campaign.cards import Suit, make_card
from ..games.campaign.decks import HostileDeck, SharedDeck, fisher_yates, seeded_shuffler
from ..games.campaign.hand import PlayerHand


def numbers(*ranks, suit=Suit.CLUBS):
    return [make_card(rank, suit) for rank in ranks]


class TestShuffle:
    """Tests for Fisher-Yates."""

    def test_shuffle_is_a_permutation(self):
        cards = list(range(30))
        fisher_yates(cards, random.Random(3))
        assert sorted(cards) == list(range(30))

    def test_seeded_shuffler_repeats(self):
        """Same seed, same order."""
        first, second = list(range(20)), list(range(20))
        seeded_shuffler(11)(first)
        seeded_shuffler(11)(second)
        assert first == second

    def test_short_lists(self):
        empty, single = [], [1]
        fisher_yates(empty)
        fisher_yates(single)
        assert empty == [] and single == [1]


class TestHostileDeck:
    """Tests for the boss stack."""

    def test_empty_deck_rejected(self):
        with pytest.raises(ValueError):
            HostileDeck([])

    def test_top_of_stack_is_active(self):
        queen, jack = make_card(12, Suit.HEARTS), make_card(11, Suit.SPADES)
        deck = HostileDeck([queen, jack])
        assert deck.active is jack
        assert deck.remaining_count == 2

    def test_no_advance_while_boss_alive(self):
        queen, jack = make_card(12, Suit.HEARTS), make_card(11, Suit.SPADES)
        deck = HostileDeck([queen, jack])
        assert deck.advance() is None
        assert deck.active is jack

    def test_advance_after_defeat(self):
        queen, jack = make_card(12, Suit.HEARTS), make_card(11, Suit.SPADES)
        deck = HostileDeck([queen, jack])
        jack.apply_damage(20)
        assert deck.advance() is queen
        assert deck.remaining_count == 1
        assert not deck.is_cleared

    def test_cleared_after_last_boss(self):
        jack = make_card(11, Suit.SPADES)
        deck = HostileDeck([jack])
        jack.apply_damage(30)
        assert deck.advance() is None
        assert deck.is_cleared
        assert deck.remaining_count == 0


class TestSharedDeck:
    """Tests for dealing and healing."""

    def test_deal_round_robin_from_start(self):
        """Cards go one at a time, starting at the given seat."""
        deck = SharedDeck(numbers(2, 3, 4, 5))
        hands = [PlayerHand("a"), PlayerHand("b")]
        dealt = deck.deal(3, 1, hands)
        assert dealt == 3
        # Top is 5: b gets 5, a gets 4, b gets 3
        assert [c.rank for c in hands[1].cards] == [3, 5]
        assert [c.rank for c in hands[0].cards] == [4]
        assert deck.size == 1

    def test_deal_skips_full_hands(self):
        deck = SharedDeck(numbers(2, 3, 4, 5, 6))
        full = PlayerHand("a", max_size=1)
        full.insert(make_card(9, Suit.HEARTS))
        open_hand = PlayerHand("b", max_size=5)
        dealt = deck.deal(3, 0, [full, open_hand])
        assert dealt == 3
        assert full.size == 1
        assert open_hand.size == 3

    def test_deal_capped_by_vacancy(self):
        """Never deals more than the hands can take."""
        deck = SharedDeck(numbers(2, 3, 4, 5, 6))
        hands = [PlayerHand("a", max_size=1), PlayerHand("b", max_size=1)]
        assert deck.deal(5, 0, hands) == 2
        assert deck.size == 3

    def test_deal_capped_by_deck(self):
        deck = SharedDeck(numbers(2))
        hands = [PlayerHand("a")]
        assert deck.deal(4, 0, hands) == 1
        assert deck.is_empty

    def test_heal_moves_discard_to_bottom(self):
        """Hearts put discarded cards under the deck."""
        top = make_card(10, Suit.SPADES)
        deck = SharedDeck([top], shuffler=lambda cards: None)
        deck.add_to_discard(numbers(2, 3, 4))
        healed = deck.heal_from_discard(2)
        assert healed == 2
        assert len(deck.discard) == 1
        assert deck.cards[-1] is top
        assert [c.rank for c in deck.cards[:2]] == [3, 4]

    def test_heal_limited_by_discard(self):
        deck = SharedDeck([], shuffler=lambda cards: None)
        deck.add_to_discard(numbers(2))
        assert deck.heal_from_discard(9) == 1
        assert deck.discard == []

    def test_top_and_bottom(self):
        deck = SharedDeck(numbers(5))
        top, bottom = make_card(9, Suit.HEARTS), make_card(2, Suit.HEARTS)
        deck.add_to_top(top)
        deck.add_to_bottom(bottom)
        assert deck.cards[-1] is top
        assert deck.cards[0] is bottom
