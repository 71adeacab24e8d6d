from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List

from .cards import Card


class GameState(str, Enum):
    OPEN = "OPEN"
    PRE_FLOP = "PRE_FLOP"
    FLOP = "FLOP"
    TURN = "TURN"
    RIVER = "RIVER"
    ENDED = "ENDED"


class ActionType(str, Enum):
    CHECK = "check"
    RAISE = "raise"
    FOLD = "fold"
    CALL = "call"


@dataclass
class TableConfig:
    starting_cash: int = 100
    min_players: int = 2
    max_players: int = 9
    table_id: str = "T-1"


# Players compare by identity: two seats never share a record.
@dataclass(eq=False)
class Player:
    id: str
    name: str
    cash: int
    hand_cards: List[Card] = field(default_factory=list)
    active: bool = False
    checked: bool = False
    raised: bool = False
    bet: int = 0

    def place_bet(self, amount: int) -> None:
        self.cash -= amount
        self.bet += amount

    def add_cash(self, amount: int) -> None:
        self.cash += amount
