"""Tests for hand evaluation."""

import pytest
from treys import Evaluator

from holdex.game.cards import parse_cards
from holdex.game.deck import Deck
from holdex.game.evaluator import (
    CATEGORY_WEIGHT, EvaluatedHand, HandCategory, InsufficientCardsError,
    calculate_score, compare_hands, determine_winners, evaluate_hand, find_straight,
)


def evaluate(hole, board):
    return evaluate_hand(parse_cards(hole), parse_cards(board))


class TestCategories:
    def test_royal_flush(self):
        result = evaluate("As Ks", "Qs Js Ts 2h 3d")
        assert result.category == HandCategory.ROYAL_FLUSH
        assert result.name == "Royal Flush"

    def test_straight_flush(self):
        result = evaluate("9s 8s", "7s 6s 5s 2h 3d")
        assert result.category == HandCategory.STRAIGHT_FLUSH
        assert result.kickers == (9,)

    def test_steel_wheel(self):
        result = evaluate("As 2s", "3s 4s 5s Kh Qd")
        assert result.category == HandCategory.STRAIGHT_FLUSH
        assert result.kickers == (5,)

    def test_straight_flush_below_top_five_suited(self):
        # Six spades: the top five (K 8 7 6 5) are no straight, 8-7-6-5-4 is
        result = evaluate("Ks 4s", "8s 7s 6s 5s 2h")
        assert result.category == HandCategory.STRAIGHT_FLUSH
        assert result.kickers == (8,)

    def test_four_of_a_kind(self):
        result = evaluate("As Ah", "Ad Ac Ks 2h 3d")
        assert result.category == HandCategory.FOUR_OF_A_KIND
        assert result.kickers == (14, 13)

    def test_four_of_a_kind_kicker_from_pair(self):
        result = evaluate("9s 9h", "9d 9c Qs Qh 3d")
        assert result.kickers == (9, 12)

    def test_full_house(self):
        result = evaluate("As Ah", "Ad Ks Kh 2h 3d")
        assert result.category == HandCategory.FULL_HOUSE
        assert result.kickers == (14, 13)

    def test_full_house_from_two_trips(self):
        result = evaluate("7s 7h", "7d 4s 4h 4c Kd")
        assert result.category == HandCategory.FULL_HOUSE
        assert result.kickers == (7, 4)

    def test_full_house_picks_best_pair(self):
        result = evaluate("5s 5h", "5d Js Jh 2c 2d")
        assert result.kickers == (5, 11)

    def test_flush(self):
        result = evaluate("As 9s", "7s 4s 2s Kh Qd")
        assert result.category == HandCategory.FLUSH
        assert result.kickers == (14, 9, 7, 4, 2)

    def test_flush_keeps_top_five(self):
        result = evaluate("As 9s", "7s 4s 2s Ks Qd")
        assert result.kickers == (14, 13, 9, 7, 4)

    def test_straight(self):
        result = evaluate("9h 8d", "7s 6c 5h 2h Kd")
        assert result.category == HandCategory.STRAIGHT
        assert result.kickers == (9,)

    def test_wheel(self):
        result = evaluate("Ah 2d", "3s 4c 5h Kh Qd")
        assert result.category == HandCategory.STRAIGHT
        assert result.kickers == (5,)

    def test_six_high_beats_wheel(self):
        wheel = evaluate("Ah 2d", "3s 4c 5h Kh Qd")
        six_high = evaluate("6d 2c", "3s 4c 5h Kh Qd")
        assert compare_hands(six_high, wheel) > 0

    def test_straight_with_paired_board(self):
        result = evaluate("Th 9d", "8s 8c 7h 6h 2d")
        assert result.category == HandCategory.STRAIGHT
        assert result.kickers == (10,)

    def test_three_of_a_kind(self):
        result = evaluate("As Ah", "Ad Ks Qh 2h 3d")
        assert result.category == HandCategory.THREE_OF_A_KIND
        assert result.kickers == (14, 13, 12)

    def test_two_pair(self):
        result = evaluate("As Ah", "Ks Kh Qd 2h 3d")
        assert result.category == HandCategory.TWO_PAIR
        assert result.kickers == (14, 13, 12)

    def test_two_pair_third_pair_as_kicker(self):
        # Third pair of queens outranks the 3 single
        result = evaluate("As Ah", "Ks Kh Qd Qh 3d")
        assert result.category == HandCategory.TWO_PAIR
        assert result.kickers == (14, 13, 12)

    def test_two_pair_single_beats_third_pair(self):
        result = evaluate("As Ah", "Ks Kh 3d 3h Qd")
        assert result.kickers == (14, 13, 12)

    def test_one_pair(self):
        result = evaluate("As Ah", "Ks Qh Jd 2h 3d")
        assert result.category == HandCategory.PAIR
        assert result.kickers == (14, 13, 12, 11)

    def test_high_card(self):
        result = evaluate("As Kh", "Qs 9h 7d 2h 3d")
        assert result.category == HandCategory.HIGH_CARD
        assert result.kickers == (14, 13, 12, 9, 7)

    def test_five_card_hand(self):
        result = evaluate_hand(parse_cards("As Kh"), parse_cards("Qs Jh Td"))
        assert result.category == HandCategory.STRAIGHT

    def test_requires_five_cards(self):
        with pytest.raises(InsufficientCardsError):
            evaluate("As Kh", "Qs Jh")
        with pytest.raises(ValueError):
            evaluate_hand(parse_cards("As Kh"), [])


class TestScore:
    def test_category_dominates_kickers(self):
        best_pair = calculate_score(HandCategory.PAIR, [14, 13, 12, 11])
        worst_two_pair = calculate_score(HandCategory.TWO_PAIR, [3, 2, 4])
        assert worst_two_pair > best_pair

    def test_max_kickers_below_weight(self):
        assert calculate_score(HandCategory.HIGH_CARD, [14] * 5) < 2 * CATEGORY_WEIGHT

    def test_kicker_decides(self):
        a = evaluate("As Qh", "Ks 9h 7d 2h 3d")
        b = evaluate("As Jh", "Ks 9h 7d 2h 3d")
        assert compare_hands(a, b) == 1
        assert compare_hands(b, a) == -1

    def test_tie_on_board(self):
        a = evaluate("2c 3d", "As Ks Qs Js Ts")
        b = evaluate("4h 5h", "As Ks Qs Js Ts")
        assert compare_hands(a, b) == 0
        assert a.score == b.score


class TestFindStraight:
    def test_none(self):
        assert find_straight([2, 3, 4, 5, 7, 9, 13]) is None

    def test_best_of_long_run(self):
        assert find_straight([4, 5, 6, 7, 8, 9, 10]) == 10

    def test_wheel(self):
        assert find_straight([14, 2, 3, 4, 5]) == 5

    def test_duplicates_collapse(self):
        assert find_straight([9, 9, 8, 7, 7, 6, 5]) == 9


class TestDetermineWinners:
    def test_sole_winner(self):
        board = "Ad Kd 9s 4h 2s"
        hands = [evaluate(h, board) for h in ("As Ah", "Ks Kh", "7c 2d", "8d 3c")]
        assert determine_winners(hands) == [0]

    def test_full_dead_heat(self):
        board = "As Ks Qs Js Ts"
        hands = [evaluate(h, board) for h in ("2c 3c", "4d 5d", "6h 7h", "8c 9d")]
        assert determine_winners(hands) == [0, 1, 2, 3]

    def test_partial_dead_heat(self):
        board = "Ah Kd Qc Js 2h"
        hands = [evaluate(h, board) for h in ("Tc 3d", "Td 4s", "5h 6h", "7c 8d")]
        assert determine_winners(hands) == [0, 1]

    def test_empty(self):
        assert determine_winners([]) == []


class TestOrdering:
    @pytest.fixture(scope="class")
    def random_hands(self):
        hands = []
        for i in range(400):
            cards = Deck(f"order-{i}").deal(7)
            hands.append((cards[:2], cards[2:]))
        return hands

    def test_antisymmetric_and_transitive(self, random_hands):
        evaluated = [evaluate_hand(h, b) for h, b in random_hands[:60]]
        for a in evaluated:
            for b in evaluated:
                assert compare_hands(a, b) == -compare_hands(b, a)
                assert (compare_hands(a, b) == 0) == (a.score == b.score)
        ordered = sorted(evaluated, key=lambda e: e.score)
        for lo, hi in zip(ordered, ordered[1:]):
            assert compare_hands(hi, lo) >= 0

    def test_matches_treys(self, random_hands):
        """Every pairwise verdict agrees with the treys evaluator."""
        treys = Evaluator()
        ranks = []
        ours: list[EvaluatedHand] = []
        for hole, board in random_hands:
            ranks.append(treys.evaluate([c.to_treys() for c in hole], [c.to_treys() for c in board]))
            ours.append(evaluate_hand(hole, board))

        for i in range(len(ours) - 1):
            # treys ranks run the other way: lower is stronger
            expected = (ranks[i] < ranks[i + 1]) - (ranks[i] > ranks[i + 1])
            assert compare_hands(ours[i], ours[i + 1]) == expected

    def test_category_names_match_treys(self, random_hands):
        treys = Evaluator()
        for hole, board in random_hands:
            rank = treys.evaluate([c.to_treys() for c in hole], [c.to_treys() for c in board])
            expected = treys.class_to_string(treys.get_rank_class(rank))
            result = evaluate_hand(hole, board)
            if result.category == HandCategory.ROYAL_FLUSH:
                assert expected in ("Royal Flush", "Straight Flush")
            else:
                assert result.name == expected
