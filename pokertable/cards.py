from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Tuple

RANKS = "23456789TJQKA"
SUITS = "hdcs"


@dataclass(frozen=True)
class Card:
    rank: str
    suit: str

    def __post_init__(self) -> None:
        if self.rank not in RANKS:
            raise ValueError(f"Invalid rank: {self.rank}")
        if self.suit not in SUITS:
            raise ValueError(f"Invalid suit: {self.suit}")

    @property
    def label(self) -> str:
        return f"{self.rank}{self.suit}"


def build_card_supply() -> Tuple[Card, ...]:
    """Every playable card, ordered by rank then suit."""
    return tuple(Card(rank, suit) for rank in RANKS for suit in SUITS)


def cards_to_labels(cards: Iterable[Card]) -> List[str]:
    return [card.label for card in cards]


def parse_label(label: str) -> Card:
    if len(label) != 2:
        raise ValueError(f"Invalid card label: {label}")
    return Card(label[0], label[1])
