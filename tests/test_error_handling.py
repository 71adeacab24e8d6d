import pytest

from pokertable.cards import Card
from pokertable.errors import IllegalActionError, IllegalAmountError, OutOfCardsError, TableError
from pokertable.models import ActionType, GameState, TableConfig
from pokertable.table import TableEngine

from .helpers import create_engine, first_iteration, small_deck, start_engine


def test_engine_errors_are_value_errors():
    assert issubclass(IllegalActionError, TableError)
    assert issubclass(IllegalAmountError, TableError)
    assert issubclass(OutOfCardsError, TableError)
    assert issubclass(TableError, ValueError)


def test_action_before_start_is_rejected():
    engine = create_engine()
    with pytest.raises(IllegalActionError, match="No hand in progress"):
        engine.perform_action("check", 0)


def test_action_type_members_are_accepted():
    engine = start_engine()
    engine.perform_action(ActionType.CHECK)
    assert engine.players[0].checked is True


@pytest.mark.parametrize(
    "action, amount",
    [
        ("raise", 101),
        ("raise", 20),
        ("raise", 60),
        ("check", 0),
        ("call", 0),
        ("dance", 0),
        ("", 0),
    ],
)
def test_rejected_actions_leave_the_table_unchanged(action, amount):
    engine = start_engine()
    engine.perform_action("raise", 40)
    # alice owes 40; shrink stacks so the call and the raise of 60 cannot be covered.
    if action == "call":
        engine.players[1].cash = 10
    else:
        engine.players[0].cash = 50
    before = engine.table_payload("alice")

    with pytest.raises(TableError):
        engine.perform_action(action, amount)

    assert engine.table_payload("alice") == before


def test_call_above_own_cash_is_rejected():
    engine = start_engine()
    engine.perform_action("raise", 40)
    engine.players[1].cash = 30
    with pytest.raises(IllegalAmountError, match="Call amount of 40"):
        engine.perform_action("call", 0)
    assert engine.players[1].cash == 30
    assert engine.pot == 40


def test_call_amount_tracks_the_current_player():
    engine = start_engine()
    first_iteration(engine)
    assert engine.call_amount() == 20
    engine.perform_action("call", 0)
    assert engine.call_amount() == 10


def test_start_fails_when_the_deck_cannot_cover_the_hand():
    tiny = [Card("A", "h"), Card("K", "h"), Card("Q", "h"), Card("J", "h")]
    engine = TableEngine(lambda: small_deck(tiny), TableConfig())
    engine.add_player("al-capone", "Al")
    engine.add_player("alice", "Alice")

    with pytest.raises(OutOfCardsError):
        engine.start()

    assert engine.state == GameState.OPEN
    assert all(player.hand_cards == [] for player in engine.players)
    assert engine.current_player is None
