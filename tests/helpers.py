from __future__ import annotations

from typing import Iterable, List, Sequence, Tuple

from pokertable.cards import Card
from pokertable.deck import Deck, ShuffledDeckSupplier
from pokertable.models import TableConfig
from pokertable.table import TableEngine

THREE_PLAYERS = [("al-capone", "Al"), ("alice", "Alice"), ("bob", "Bob")]


class IdentityShuffler:
    """Keeps the supply order so draws are predictable."""

    def __init__(self) -> None:
        self.calls: List[List[Card]] = []

    def shuffle(self, cards: Sequence[Card]) -> List[Card]:
        self.calls.append(list(cards))
        return list(cards)


def create_engine(
    players: Iterable[Tuple[str, str]] = THREE_PLAYERS,
    *,
    starting_cash: int = 100,
) -> TableEngine:
    """Instantiate an engine with a populated table and a predictable deck."""
    engine = TableEngine(
        ShuffledDeckSupplier(shuffler=IdentityShuffler()),
        TableConfig(starting_cash=starting_cash),
    )
    for player_id, name in players:
        engine.add_player(player_id, name)
    return engine


def start_engine(players: Iterable[Tuple[str, str]] = THREE_PLAYERS, **kwargs) -> TableEngine:
    engine = create_engine(players, **kwargs)
    engine.start()
    return engine


def perform_actions(engine: TableEngine, actions: Iterable[Tuple[str, int]]) -> None:
    """Apply a scripted sequence of (action, amount) pairs."""
    for action, amount in actions:
        engine.perform_action(action, amount)


def check_round(engine: TableEngine) -> None:
    for _ in engine.players:
        engine.perform_action("check", 0)


def first_iteration(engine: TableEngine) -> None:
    perform_actions(engine, [("raise", 10), ("raise", 20), ("raise", 30)])


def second_iteration_reaching_consensus(engine: TableEngine) -> None:
    perform_actions(engine, [("call", 20), ("call", 10), ("check", 0)])


def small_deck(cards: Sequence[Card]) -> Deck:
    return Deck(cards, IdentityShuffler())
