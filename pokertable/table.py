from __future__ import annotations

import logging
from typing import Callable, Dict, List, Optional, Union

from .cards import Card, cards_to_labels
from .deck import Deck, ShuffledDeckSupplier
from .errors import IllegalActionError, IllegalAmountError, OutOfCardsError
from .models import ActionType, GameState, Player, TableConfig

LOGGER = logging.getLogger("poker_table")

# TableEngine keeps one hand of one table in memory. No networking lives here,
# only turn order, chip accounting, and board stages.

HOLE_CARDS = 2
BOARD_CARDS = 5


class TableEngine:
    """Turn-based state machine and betting ledger for a single hand."""

    def __init__(
        self,
        deck_supplier: Optional[Callable[[], Deck]] = None,
        config: Optional[TableConfig] = None,
    ) -> None:
        self.config = config or TableConfig()
        self.deck_supplier = deck_supplier or ShuffledDeckSupplier()
        self.deck: Optional[Deck] = None
        self.state = GameState.OPEN
        self.players: List[Player] = []
        self.current_player: Optional[Player] = None
        self.pot = 0
        self.community_cards: List[Card] = []
        self.bets: Dict[str, int] = {}
        self.winner: Optional[Player] = None
        self.winner_hand: List[Card] = []
        self.round_is_complete = False

    # Seating ---------------------------------------------------------

    def add_player(self, player_id: str, name: str) -> Player:
        player = Player(id=player_id, name=name, cash=self.config.starting_cash)
        self.players.append(player)
        self.bets[player_id] = 0
        return player

    def find_player(self, player_id: Optional[str]) -> Optional[Player]:
        for player in self.players:
            if player.id == player_id:
                return player
        return None

    def get_player_cards(self, player_id: Optional[str]) -> List[Card]:
        player = self.find_player(player_id)
        if player is None:
            return []
        return list(player.hand_cards)

    # Hand lifecycle --------------------------------------------------

    def start(self) -> None:
        if self.state != GameState.OPEN:
            return
        if len(self.players) < self.config.min_players:
            LOGGER.debug("Not starting: %d of %d players seated", len(self.players), self.config.min_players)
            return

        deck = self.deck_supplier()
        needed = len(self.players) * HOLE_CARDS + BOARD_CARDS
        if len(deck) < needed:
            raise OutOfCardsError(f"Deck holds {len(deck)} cards, a hand needs {needed}")

        self.deck = deck
        self.state = GameState.PRE_FLOP
        for player in self.players:
            player.hand_cards = [deck.draw(), deck.draw()]
            player.active = True
        self._determine_next_player()
        LOGGER.info("Hand started with %d players", len(self.players))

    def is_hand_over(self) -> bool:
        return self.state == GameState.ENDED

    # Ledger queries --------------------------------------------------

    def round_max_bet(self) -> int:
        return max((player.bet for player in self.players), default=0)

    def round_min_bet(self) -> int:
        return min((player.bet for player in self.players), default=0)

    def call_amount(self) -> int:
        if self.current_player is None:
            return 0
        return self.round_max_bet() - self.bets.get(self.current_player.id, 0)

    # Action handling -------------------------------------------------

    def perform_action(self, action: Union[str, ActionType, None], amount: int = 0) -> None:
        action_type = self._parse_action(action)
        player = self._acting_player()

        if action_type == ActionType.CHECK:
            self._check(player)
        elif action_type == ActionType.RAISE:
            self._raise(player, amount)
        elif action_type == ActionType.CALL:
            self._call(player)
        else:
            self._fold(player)

        self._complete_round_if_consensus(action_type)

    def _parse_action(self, action: Union[str, ActionType, None]) -> ActionType:
        if isinstance(action, ActionType):
            return action
        if action is None or not str(action).strip():
            raise IllegalActionError("Action cannot be empty")
        try:
            return ActionType(action)
        except ValueError:
            raise IllegalActionError(f"Unsupported action: {action}") from None

    def _acting_player(self) -> Player:
        if self.state == GameState.ENDED:
            raise IllegalActionError("The hand has already ended")
        if self.current_player is None:
            raise IllegalActionError("No hand in progress")
        return self.current_player

    def _check(self, player: Player) -> None:
        if self.bets[player.id] < self.round_max_bet():
            raise IllegalActionError(
                f"Can not perform check action. You have an outstanding bet amount of {self.call_amount()}"
            )
        player.checked = True
        self._determine_next_player()

    def _raise(self, player: Player, amount: int) -> None:
        call_amount = self.call_amount()
        if amount > player.cash:
            raise IllegalAmountError("Raise amount cannot be more than player's cash")
        if amount <= call_amount:
            raise IllegalAmountError(f"Raise amount must be greater than {call_amount}")
        if any(other.cash < amount for other in self.players):
            raise IllegalAmountError("Raise amount cannot be more than other player's remaining cash")

        self._place_bet(player, amount)
        # The ledger records the raise itself, not the running total.
        self.bets[player.id] = amount
        player.raised = True
        self._determine_next_player()

    def _call(self, player: Player) -> None:
        if not any(other.raised for other in self.players):
            raise IllegalActionError("Can not perform call action. None of the previous players raised")
        call_amount = self.call_amount()
        if call_amount > player.cash:
            raise IllegalAmountError(f"Call amount of {call_amount} is more than player's cash")

        self._place_bet(player, call_amount)
        self.bets[player.id] = self.bets.get(player.id, 0) + call_amount
        self._determine_next_player()

    def _fold(self, player: Player) -> None:
        player.active = False
        remaining = sum(1 for other in self.players if other.active)
        if remaining > 1:
            self._determine_next_player()
        else:
            self._end_hand_after_folds()

    def _place_bet(self, player: Player, amount: int) -> None:
        player.place_bet(amount)
        self.pot += amount

    # Rounds and board stages -----------------------------------------

    def _complete_round_if_consensus(self, action_type: ActionType) -> None:
        if action_type == ActionType.CHECK:
            self.round_is_complete = all(player.checked for player in self.players)
            if self.round_is_complete:
                self._move_to_next_round()
                for player in self.players:
                    player.checked = False
        else:
            # Folded players keep their bets and still count here.
            self.round_is_complete = self.round_max_bet() == self.round_min_bet()
            if self.round_is_complete:
                self._move_to_next_round()

    def _move_to_next_round(self) -> None:
        assert self.deck is not None
        if self.state == GameState.PRE_FLOP:
            self.community_cards.extend(self.deck.draw_community_cards(3))
            self.state = GameState.FLOP
        elif self.state == GameState.FLOP:
            self.community_cards.append(self.deck.draw())
            self.state = GameState.TURN
            self._determine_next_player()
        elif self.state == GameState.TURN:
            self.community_cards.append(self.deck.draw())
            self._determine_next_player()
            self.state = GameState.RIVER
        elif self.state == GameState.RIVER:
            self._end_hand_at_showdown()
            return
        else:
            return
        LOGGER.debug("Moved to %s, board %s", self.state.value, cards_to_labels(self.community_cards))

    def _end_hand_at_showdown(self) -> None:
        # No hand ranking: the seat the turn pointer lands on takes the pot.
        self._determine_next_player()
        self.state = GameState.ENDED
        winner = self._declare_winner()
        self.winner_hand.extend(winner.hand_cards)

    def _end_hand_after_folds(self) -> None:
        self.state = GameState.ENDED
        self._determine_next_player()
        winner = self._declare_winner()
        winner.hand_cards = []

    def _declare_winner(self) -> Player:
        assert self.current_player is not None
        winner = self.current_player
        self.winner = winner
        LOGGER.info("Hand won by %s (%s), pot %d", winner.id, winner.name, self.pot)
        winner.add_cash(self.pot)
        self.pot = 0
        return winner

    # Turn order ------------------------------------------------------

    def _determine_next_player(self) -> None:
        if self.current_player is None:
            self.current_player = self.players[0] if self.players else None
            return

        index = self.players.index(self.current_player)
        for _ in range(len(self.players)):
            index = (index + 1) % len(self.players)
            candidate = self.players[index]
            if candidate.active:
                self.current_player = candidate
                return
        raise RuntimeError("No active player left at the table")

    # Public/Snapshot helpers -----------------------------------------

    def table_payload(self, viewer_id: Optional[str] = None) -> Dict[str, object]:
        """Table view for one player: only the viewer's own hole cards are included."""
        current = self.current_player
        payload: Dict[str, object] = {
            "table_id": self.config.table_id,
            "state": self.state.value,
            "players": [
                {
                    "id": player.id,
                    "name": player.name,
                    "cash": player.cash,
                    "active": player.active,
                    "checked": player.checked,
                    "raised": player.raised,
                    "bet": player.bet,
                }
                for player in self.players
            ],
            "current_player": _player_ref(current),
            "player_cards": cards_to_labels(self.get_player_cards(viewer_id)),
            "community_cards": cards_to_labels(self.community_cards),
            "bets": dict(self.bets),
            "pot": self.pot,
            "winner": _player_ref(self.winner),
            "winner_hand": cards_to_labels(self.winner_hand),
            "round_is_complete": self.round_is_complete,
        }
        if current is not None and current.id == viewer_id and not self.is_hand_over():
            payload["call_amount"] = self.call_amount()
        return payload


def _player_ref(player: Optional[Player]) -> Optional[Dict[str, str]]:
    if player is None:
        return None
    return {"id": player.id, "name": player.name}
