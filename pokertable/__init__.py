"""Single-table poker engine: card supply, deck, players, and the betting state machine."""

from .cards import Card, RANKS, SUITS, build_card_supply, cards_to_labels, parse_label
from .deck import Deck, RandomShuffler, ShuffledDeckSupplier, Shuffler
from .errors import IllegalActionError, IllegalAmountError, OutOfCardsError, TableError
from .models import ActionType, GameState, Player, TableConfig
from .names import PlayerNamesRepository
from .table import TableEngine

__all__ = [
    "Card",
    "RANKS",
    "SUITS",
    "build_card_supply",
    "cards_to_labels",
    "parse_label",
    "Deck",
    "RandomShuffler",
    "ShuffledDeckSupplier",
    "Shuffler",
    "IllegalActionError",
    "IllegalAmountError",
    "OutOfCardsError",
    "TableError",
    "ActionType",
    "GameState",
    "Player",
    "TableConfig",
    "PlayerNamesRepository",
    "TableEngine",
]
