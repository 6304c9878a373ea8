"""Tests for seeded dealing."""

import pytest

from holdex.game.cards import card_id
from holdex.game.deck import (
    Deck, SeededRandom, create_full_deck, deal_cards, deal_round, hash_seed,
    remove_cards, shuffle_deck,
)


class TestSeededRandom:
    def test_same_seed_same_stream(self):
        a = SeededRandom("round-7")
        b = SeededRandom("round-7")
        assert [a.next() for _ in range(50)] == [b.next() for _ in range(50)]

    def test_different_seeds_differ(self):
        a = SeededRandom("round-7")
        b = SeededRandom("round-8")
        assert [a.next() for _ in range(10)] != [b.next() for _ in range(10)]

    def test_unit_interval(self):
        rng = SeededRandom(12345)
        for _ in range(5000):
            x = rng.next()
            assert 0.0 <= x <= 1.0

    def test_next_int_inclusive(self):
        rng = SeededRandom("ints")
        seen = {rng.next_int(3, 6) for _ in range(2000)}
        assert seen == {3, 4, 5, 6}

    def test_zero_seed_is_usable(self):
        assert hash_seed(0) == 1
        assert hash_seed("") == 1
        rng = SeededRandom(0)
        assert rng.state != 0
        assert len({rng.next() for _ in range(10)}) == 10

    def test_state_is_32_bit(self):
        assert 0 < hash_seed("a very long seed string " * 20) <= 0xFFFFFFFF
        assert 0 < hash_seed(-1) <= 0xFFFFFFFF

    def test_next_int_never_overshoots(self):
        class AllOnes(SeededRandom):
            def next(self):
                return 1.0

        rng = AllOnes("ones")
        assert rng.next_int(0, 51) == 51
        assert rng.next_int(3, 3) == 3

    def test_hash_uses_utf16_code_units(self):
        assert hash_seed("ab") == 97 * 31 + 98
        # U+1F600 hashes as the surrogate pair D83D DE00
        assert hash_seed("\U0001F600") == 0xD83D * 31 + 0xDE00

    def test_clone(self):
        rng = SeededRandom("clone")
        rng.next()
        copy = rng.clone()
        assert [rng.next() for _ in range(5)] == [copy.next() for _ in range(5)]


class TestDeck:
    def test_full_deck(self):
        deck = create_full_deck()
        assert len(deck) == 52
        assert len(set(deck)) == 52

    def test_full_deck_order(self):
        deck = [str(c) for c in create_full_deck()]
        assert deck[:3] == ["2s", "3s", "4s"]
        assert deck[12] == "As"
        assert deck[13] == "2h"
        assert deck[26] == "2d"
        assert deck[-1] == "Ac"

    def test_shuffle_is_permutation(self):
        cards = create_full_deck()
        shuffled = shuffle_deck(cards, SeededRandom("perm"))
        assert sorted(shuffled, key=card_id) == sorted(cards, key=card_id)
        assert shuffled != cards
        # Input untouched
        assert cards == create_full_deck()

    def test_deal(self):
        deck = Deck("deal")
        cards = deck.deal(5)
        assert len(cards) == 5
        assert len(deck) == 47
        assert deck.remaining == 47

    def test_deal_too_many(self):
        deck = Deck("deal")
        with pytest.raises(ValueError):
            deck.deal(53)

    def test_deal_cards(self):
        cards = create_full_deck()
        dealt, rest = deal_cards(cards, 3)
        assert dealt == cards[:3]
        assert rest == cards[3:]

    def test_remove_cards(self):
        cards = create_full_deck()
        remaining = remove_cards(cards, cards[:10])
        assert len(remaining) == 42
        assert not set(remaining) & set(cards[:10])

    def test_clone_is_independent(self):
        deck = Deck("clone")
        copy = deck.clone()
        assert deck.deal(3) == copy.deal(3)
        deck.deal(1)
        assert len(copy) == len(deck) + 1


class TestDealRound:
    def test_deterministic(self):
        assert deal_round("replay-1") == deal_round("replay-1")

    def test_numeric_and_string_seed_match(self):
        assert deal_round(42) == deal_round("42")
        assert deal_round(42).seed == "42"

    def test_different_seeds(self):
        assert deal_round("a").all_cards() != deal_round("b").all_cards()

    def test_shape(self):
        dealt = deal_round("shape")
        assert len(dealt.hands) == 4
        assert all(len(hand) == 2 for hand in dealt.hands)
        assert len(dealt.board) == 5

    @pytest.mark.parametrize("seed", ["x", "y", 0, 1, 987654321, "1700000000000"])
    def test_no_duplicates(self, seed):
        cards = deal_round(seed).all_cards()
        assert len(cards) == 13
        assert len(set(cards)) == 13

    def test_known_seed(self):
        # Replay seeds must keep dealing the same round everywhere
        dealt = deal_round("demo")
        assert [str(h) for h in dealt.hands] == ["8cJc", "Kd2h", "8s8d", "8hTs"]
        assert " ".join(str(c) for c in dealt.board) == "5h 3h 4s 9h 7c"

    def test_dealing_order(self):
        # Seats take consecutive pairs from the shuffled deck, then the board
        deck = Deck("order")
        top = deck.deal(13)
        dealt = deal_round("order")
        assert dealt.all_cards() == top
