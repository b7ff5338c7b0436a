"""
Tests for campaign cards.

Tests:
- Derived stats and names
- Damage, spade reduction and conversion
- Catalogue builders
"""

import pytest

from ..games.campaign.cards import (
    Card,
    CardKind,
    Suit,
    build_boss_cards,
    build_shared_cards,
    kind_for_rank,
    make_card,
    special_cards_for,
)
from .conftest import no_shuffle


class TestMakeCard:
    """Tests for card construction."""

    @pytest.mark.parametrize("rank,kind", [
        (0, CardKind.SPECIAL),
        (1, CardKind.COMPANION),
        (2, CardKind.NUMBER),
        (10, CardKind.NUMBER),
        (11, CardKind.BOSS),
        (13, CardKind.BOSS),
    ])
    def test_kind_from_rank(self, rank, kind):
        """Rank decides the card kind."""
        assert kind_for_rank(rank) == kind

    def test_number_card_stats(self):
        """Number cards attack and absorb for their rank."""
        card = make_card(7, Suit.SPADES)
        assert card.attack_value == 7
        assert card.health == 7
        assert card.name == "7 of Spades"

    def test_special_card(self):
        """Special cards have no suit and no value."""
        card = make_card(0, None)
        assert card.is_special
        assert card.suit is None
        assert card.attack_value == 0
        assert card.name == "Special"

    def test_companion_name(self):
        assert make_card(1, Suit.CLUBS).name == "Companion of Clubs"

    @pytest.mark.parametrize("rank,attack", [(11, 10), (12, 15), (13, 20)])
    def test_boss_stats(self, rank, attack):
        """Bosses have double their attack as health."""
        boss = make_card(rank, Suit.HEARTS)
        assert boss.attack_value == attack
        assert boss.health == attack * 2
        assert boss.max_health == attack * 2

    def test_converted_boss_stats(self):
        """A converted boss is worth its attack value."""
        boss = make_card(12, Suit.DIAMONDS, converted=True)
        assert boss.health == 15
        assert boss.name == "Queen of Diamonds"

    def test_cards_compare_by_identity(self):
        """Two equal-looking cards are still different cards."""
        assert make_card(0, None) != make_card(0, None)


class TestBossCombat:
    """Tests for damage, spades and conversion."""

    def test_damage_reports_overkill(self):
        """Overkill is the damage beyond remaining health."""
        boss = make_card(11, Suit.CLUBS)
        assert boss.apply_damage(25) == 5
        assert boss.health == 0

    def test_exact_damage_has_no_overkill(self):
        boss = make_card(11, Suit.CLUBS)
        assert boss.apply_damage(20) == 0
        assert boss.health == 0

    def test_health_never_negative(self):
        """Health clamps at zero."""
        boss = make_card(11, Suit.CLUBS)
        boss.apply_damage(100)
        boss.apply_damage(5)
        assert boss.health == 0

    def test_spade_reduction_floors_at_zero(self):
        """Attack never drops below zero."""
        boss = make_card(11, Suit.HEARTS)
        boss.reduce_attack(7)
        assert boss.attack_value == 3
        boss.reduce_attack(7)
        assert boss.attack_value == 0

    def test_spade_boss_ignores_reduction(self):
        """A spade boss is immune to spade reduction."""
        boss = make_card(12, Suit.SPADES)
        boss.reduce_attack(5)
        assert boss.attack_value == 15

    def test_negated_spade_boss_takes_reduction(self):
        boss = make_card(12, Suit.SPADES)
        boss.negate_suit_immunity()
        boss.reduce_attack(5)
        assert boss.attack_value == 10

    def test_immunity_only_to_own_suit(self):
        boss = make_card(13, Suit.DIAMONDS)
        assert boss.is_immune(Suit.DIAMONDS)
        assert not boss.is_immune(Suit.HEARTS)

    def test_convert_to_ally(self):
        """Conversion restores base stats and clears the negation."""
        boss = make_card(13, Suit.CLUBS)
        boss.reduce_attack(8)
        boss.negate_suit_immunity()
        boss.apply_damage(40)
        boss.convert_to_ally()
        assert boss.converted
        assert boss.attack_value == 20
        assert boss.health == 20
        assert not boss.immunity_negated


class TestCatalogue:
    """Tests for deck building."""

    @pytest.mark.parametrize("players,specials", [(1, 0), (2, 0), (3, 1), (4, 2)])
    def test_specials_per_player_count(self, players, specials):
        assert special_cards_for(players) == specials
        cards = build_shared_cards(players)
        assert len(cards) == 40 + specials
        assert sum(1 for c in cards if c.is_special) == specials

    def test_shared_deck_has_every_number(self):
        """Ranks 1-10 of every suit, once each."""
        cards = [c for c in build_shared_cards(1)]
        identities = {(c.rank, c.suit) for c in cards}
        assert len(identities) == 40

    def test_boss_order(self):
        """Jacks are fought first, Kings last."""
        stack = build_boss_cards(no_shuffle)
        assert len(stack) == 12
        fight_order = [card.rank for card in reversed(stack)]
        assert fight_order == [11] * 4 + [12] * 4 + [13] * 4

    def test_boss_tiers_shuffled_separately(self):
        """Each tier is shuffled on its own."""
        calls = []

        def recording_shuffle(cards):
            calls.append([card.rank for card in cards])

        build_boss_cards(recording_shuffle)
        assert calls == [[13] * 4, [12] * 4, [11] * 4]

    def test_card_is_dataclass(self):
        card = Card(rank=4, suit=Suit.HEARTS, kind=CardKind.NUMBER, attack_value=4, health=4)
        assert "4 of Hearts" in repr(card)
