from __future__ import annotations

import random
from typing import Callable, List, Optional, Protocol, Sequence

from .cards import Card, build_card_supply
from .errors import OutOfCardsError

# A Deck serves one hand: it is shuffled once and drawn from sequentially.


class Shuffler(Protocol):
    def shuffle(self, cards: Sequence[Card]) -> List[Card]:
        ...


class RandomShuffler:
    """Uniform permutation; pass a seed for reproducible hands."""

    def __init__(self, seed: Optional[int] = None) -> None:
        self._rng = random.Random(seed)

    def shuffle(self, cards: Sequence[Card]) -> List[Card]:
        shuffled = list(cards)
        self._rng.shuffle(shuffled)
        return shuffled


class Deck:
    def __init__(self, card_supply: Sequence[Card], shuffler: Optional[Shuffler] = None) -> None:
        self.card_supply = tuple(card_supply)
        self.cards: List[Card] = list(self.card_supply)
        self.shuffler = shuffler or RandomShuffler()

    def __len__(self) -> int:
        return len(self.cards)

    def draw(self) -> Card:
        if not self.cards:
            raise OutOfCardsError("No cards left to draw.")
        return self.cards.pop(0)

    def draw_community_cards(self, count: int = 3) -> List[Card]:
        if len(self.cards) < count:
            raise OutOfCardsError(f"Cannot draw {count} cards, only {len(self.cards)} left.")
        return [self.draw() for _ in range(count)]

    def shuffle(self) -> None:
        # Always rebuilds from the full supply, dropping whatever was drawn.
        self.cards = list(self.shuffler.shuffle(self.card_supply))


class ShuffledDeckSupplier:
    """Builds a freshly shuffled Deck on every call."""

    def __init__(
        self,
        card_supplier: Callable[[], Sequence[Card]] = build_card_supply,
        shuffler: Optional[Shuffler] = None,
    ) -> None:
        self.card_supplier = card_supplier
        self.shuffler = shuffler or RandomShuffler()

    def __call__(self) -> Deck:
        deck = Deck(self.card_supplier(), self.shuffler)
        deck.shuffle()
        return deck
