import pytest

from pokertable.cards import Card, RANKS, SUITS, build_card_supply, cards_to_labels, parse_label
from pokertable.deck import Deck, RandomShuffler, ShuffledDeckSupplier
from pokertable.errors import OutOfCardsError

from .helpers import IdentityShuffler, small_deck


def test_card_supply_holds_every_card_once():
    supply = build_card_supply()
    assert len(supply) == 52
    assert len(set(supply)) == 52
    assert supply[0] == Card("2", "h")
    assert supply[-1] == Card("A", "s")
    assert {card.rank for card in supply} == set(RANKS)
    assert {card.suit for card in supply} == set(SUITS)


def test_cards_compare_by_value():
    assert Card("A", "h") == Card("A", "h")
    assert len({Card("A", "h"), Card("A", "h")}) == 1


def test_card_validation_rejects_invalid_values():
    with pytest.raises(ValueError, match="Invalid rank"):
        Card("1", "h")
    with pytest.raises(ValueError, match="Invalid suit"):
        Card("A", "x")


def test_labels_and_parsing():
    assert cards_to_labels([Card("T", "d"), Card("A", "s")]) == ["Td", "As"]
    assert parse_label("Qc") == Card("Q", "c")
    with pytest.raises(ValueError, match="Invalid card label"):
        parse_label("10h")


def test_draws_are_sequential_and_without_replacement():
    deck = small_deck([Card("A", "h"), Card("K", "d"), Card("7", "s")])
    assert deck.draw() == Card("A", "h")
    assert deck.draw() == Card("K", "d")
    assert len(deck) == 1
    assert deck.draw() == Card("7", "s")
    with pytest.raises(OutOfCardsError):
        deck.draw()


def test_draw_community_cards_takes_three_in_order():
    deck = Deck(build_card_supply(), IdentityShuffler())
    assert deck.draw_community_cards() == [Card("2", "h"), Card("2", "d"), Card("2", "c")]
    assert len(deck) == 49


def test_draw_community_cards_from_short_deck_keeps_the_deck():
    deck = small_deck([Card("A", "h"), Card("K", "d")])
    with pytest.raises(OutOfCardsError):
        deck.draw_community_cards(3)
    assert len(deck) == 2


def test_shuffle_restores_the_full_supply():
    deck = Deck(build_card_supply(), RandomShuffler(seed=5))
    for _ in range(10):
        deck.draw()
    assert len(deck) == 42
    assert deck.shuffle() is None
    assert len(deck) == 52
    assert sorted(deck.cards, key=lambda c: c.label) == sorted(build_card_supply(), key=lambda c: c.label)


def test_shuffle_hands_the_whole_supply_to_the_shuffler():
    shuffler = IdentityShuffler()
    deck = small_deck([Card("A", "h"), Card("K", "d")])
    deck.shuffler = shuffler
    deck.draw()
    deck.shuffle()
    assert shuffler.calls == [[Card("A", "h"), Card("K", "d")]]
    assert deck.cards == [Card("A", "h"), Card("K", "d")]


def test_random_shuffler_returns_a_permutation():
    supply = build_card_supply()
    shuffled = RandomShuffler(seed=1).shuffle(supply)
    assert shuffled != list(supply)
    assert set(shuffled) == set(supply)
    assert len(shuffled) == len(supply)


def test_random_shuffler_is_reproducible_with_a_seed():
    supply = build_card_supply()
    assert RandomShuffler(seed=9).shuffle(supply) == RandomShuffler(seed=9).shuffle(supply)


def test_random_shuffler_reaches_every_position():
    cards = [Card("A", "h"), Card("K", "h"), Card("Q", "h")]
    shuffler = RandomShuffler(seed=3)
    orders = {tuple(shuffler.shuffle(cards)) for _ in range(300)}
    assert len(orders) == 6


def test_supplier_shuffles_each_new_deck_once():
    shuffler = IdentityShuffler()
    supplier = ShuffledDeckSupplier(lambda: [Card("7", "h")], shuffler)
    deck = supplier()
    assert shuffler.calls == [[Card("7", "h")]]
    assert deck.cards == [Card("7", "h")]
    assert supplier() is not deck


def test_seeded_supplier_deck_holds_every_card_once():
    supplier = ShuffledDeckSupplier(shuffler=RandomShuffler(seed=2024))
    deck = supplier()
    assert len(deck) == 52
    assert set(deck.cards) == set(build_card_supply())
    assert tuple(deck.cards) != build_card_supply()
