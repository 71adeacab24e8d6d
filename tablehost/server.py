from __future__ import annotations

import asyncio
import json
import logging
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Dict, List, Optional, Tuple

import websockets

from pokertable.deck import Deck, ShuffledDeckSupplier
from pokertable.errors import IllegalActionError, IllegalAmountError, TableError
from pokertable.models import GameState, TableConfig
from pokertable.names import PlayerNamesRepository
from pokertable.table import TableEngine

LOGGER = logging.getLogger("table_host")

# TableHost glues table engines to WebSocket clients.
# Every network concern lives here; the TableEngine stays pure.


class HostError(Exception):
    def __init__(self, code: str, msg: str) -> None:
        super().__init__(msg)
        self.code = code
        self.msg = msg


@dataclass
class ClientSession:
    player_id: str
    table_id: str
    websocket: Any


@dataclass
class TableSession:
    table_id: str
    engine: TableEngine
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)
    clients: List[ClientSession] = field(default_factory=list)

    def should_remove(self) -> bool:
        if self.clients:
            return False
        return not self.engine.players or self.engine.is_hand_over()


class TableHost:
    """Serves any number of independent tables; one lock per table guards its engine."""

    def __init__(
        self,
        config: TableConfig,
        names: Optional[PlayerNamesRepository] = None,
        deck_supplier: Optional[Callable[[], Deck]] = None,
    ) -> None:
        self.config = config
        self.names = names or PlayerNamesRepository()
        self.deck_supplier = deck_supplier or ShuffledDeckSupplier()
        self.tables: Dict[str, TableSession] = {}
        self.lock = asyncio.Lock()

    async def start(self, host: str = "0.0.0.0", port: int = 8080) -> None:
        async with websockets.serve(self._handle_connection, host, port):
            LOGGER.info("Table host listening on %s:%s", host, port)
            await asyncio.Future()

    async def table_for(self, table_id: str) -> TableSession:
        async with self.lock:
            table = self.tables.get(table_id)
            if table is None:
                engine = TableEngine(self.deck_supplier, replace(self.config, table_id=table_id))
                table = TableSession(table_id=table_id, engine=engine)
                self.tables[table_id] = table
                LOGGER.info("Opened table %s", table_id)
            return table

    # Connection handling ---------------------------------------------

    async def _handle_connection(self, websocket: Any) -> None:
        # First message must be "hello" so we know which player is talking.
        hello = await self._read_message(websocket)
        if hello is None or hello.get("type") != "hello":
            await self._send_error(websocket, "BAD_HELLO", "Expected hello")
            await websocket.close()
            return
        try:
            session = await self.register(websocket, hello)
        except HostError as exc:
            await self._send_error(websocket, exc.code, exc.msg)
            await websocket.close()
            return

        try:
            async for raw in websocket:
                message = self._decode(raw)
                if message is None:
                    await self._send_error(websocket, "BAD_JSON", "Messages must be JSON objects")
                    continue
                await self.handle_message(session, message)
        except websockets.ConnectionClosed:
            pass
        finally:
            await self.unregister(session)

    async def register(self, websocket: Any, hello: Dict[str, Any]) -> ClientSession:
        player_raw = hello.get("player_id")
        player_id = player_raw.strip() if isinstance(player_raw, str) else ""
        if not player_id:
            raise HostError("BAD_HELLO", "player_id required")
        table_raw = hello.get("table_id")
        table_id = table_raw.strip() if isinstance(table_raw, str) and table_raw.strip() else self.config.table_id

        table = await self.table_for(table_id)
        session = ClientSession(player_id=player_id, table_id=table_id, websocket=websocket)
        async with table.lock:
            table.clients.append(session)
            view = table.engine.table_payload(player_id)
        LOGGER.info("%s (%s) connected to table %s", player_id, self.names.name_for_id(player_id), table_id)

        await self._send_json(websocket, "welcome", {
            "table_id": table_id,
            "player_id": player_id,
            "name": self.names.name_for_id(player_id),
            "config": {
                "starting_cash": table.engine.config.starting_cash,
                "min_players": table.engine.config.min_players,
                "max_players": table.engine.config.max_players,
            },
        })
        await self._send_json(websocket, "table", view)
        return session

    async def unregister(self, session: ClientSession) -> None:
        async with self.lock:
            table = self.tables.get(session.table_id)
            if table is None:
                return
            async with table.lock:
                if session in table.clients:
                    table.clients.remove(session)
                if table.should_remove():
                    self.tables.pop(session.table_id, None)
                    LOGGER.info("Closed table %s", session.table_id)
        LOGGER.info("%s disconnected from table %s", session.player_id, session.table_id)

    # Requests --------------------------------------------------------

    async def handle_message(self, session: ClientSession, message: Dict[str, Any]) -> None:
        msg_type = message.get("type")
        handlers = {
            "join": self._join,
            "start": self._start,
            "action": self._action,
        }
        table = await self.table_for(session.table_id)

        if msg_type == "table":
            async with table.lock:
                view = table.engine.table_payload(session.player_id)
            await self._send_json(session.websocket, "table", view)
            return

        handler = handlers.get(msg_type) if isinstance(msg_type, str) else None
        if handler is None:
            await self._send_error(session.websocket, "UNKNOWN_TYPE", "Unsupported message type")
            return

        try:
            async with table.lock:
                handler(table.engine, session, message)
                views = self._views_locked(table)
        except HostError as exc:
            LOGGER.info("Rejected %s from %s: %s", msg_type, session.player_id, exc.msg)
            await self._send_error(session.websocket, exc.code, exc.msg)
            return

        await self._broadcast(views)

    def _join(self, engine: TableEngine, session: ClientSession, message: Dict[str, Any]) -> None:
        if engine.find_player(session.player_id) is not None:
            raise HostError("ALREADY_SEATED", "Player already seated at this table")
        if engine.state != GameState.OPEN:
            raise HostError("TABLE_CLOSED", "The hand has already started")
        if len(engine.players) >= engine.config.max_players:
            raise HostError("TABLE_FULL", "No seats available")
        name = self.names.name_for_id(session.player_id)
        engine.add_player(session.player_id, name)
        LOGGER.info("Seat %d taken by %s (%s)", len(engine.players) - 1, session.player_id, name)

    def _start(self, engine: TableEngine, session: ClientSession, message: Dict[str, Any]) -> None:
        if engine.find_player(session.player_id) is None:
            raise HostError("NOT_SEATED", "Join the table before starting")
        if engine.state != GameState.OPEN:
            raise HostError("ALREADY_STARTED", "The hand has already started")
        try:
            engine.start()
        except TableError as exc:
            raise HostError("TABLE_ERROR", str(exc)) from exc
        if engine.state == GameState.OPEN:
            raise HostError(
                "NOT_ENOUGH_PLAYERS",
                f"At least {engine.config.min_players} players are required to start",
            )

    def _action(self, engine: TableEngine, session: ClientSession, message: Dict[str, Any]) -> None:
        current = engine.current_player
        if current is not None and not engine.is_hand_over() and current.id != session.player_id:
            raise HostError("OUT_OF_TURN", f"It is {current.id}'s turn")

        action = message.get("action")
        if action is not None and not isinstance(action, str):
            raise HostError("BAD_SCHEMA", "action must be a string")
        amount = message.get("amount")
        if amount is None:
            amount = 0
        if isinstance(amount, bool) or not isinstance(amount, int):
            raise HostError("BAD_SCHEMA", "amount must be an integer")

        try:
            engine.perform_action(action, amount)
        except IllegalActionError as exc:
            raise HostError("ILLEGAL_ACTION", str(exc)) from exc
        except IllegalAmountError as exc:
            raise HostError("ILLEGAL_AMOUNT", str(exc)) from exc
        except TableError as exc:
            raise HostError("TABLE_ERROR", str(exc)) from exc

    # Outbound --------------------------------------------------------

    def _views_locked(self, table: TableSession) -> List[Tuple[Any, Dict[str, object]]]:
        # Each client only ever receives its own hole cards.
        return [(client.websocket, table.engine.table_payload(client.player_id)) for client in table.clients]

    async def _broadcast(self, views: List[Tuple[Any, Dict[str, object]]]) -> None:
        for websocket, view in views:
            try:
                await self._send_json(websocket, "table", view)
            except websockets.ConnectionClosed:
                continue

    async def _read_message(self, websocket: Any) -> Optional[Dict[str, Any]]:
        try:
            raw = await websocket.recv()
        except websockets.ConnectionClosed:
            return None
        return self._decode(raw)

    @staticmethod
    def _decode(raw: Any) -> Optional[Dict[str, Any]]:
        try:
            message = json.loads(raw)
        except (TypeError, ValueError):
            return None
        return message if isinstance(message, dict) else None

    async def _send_json(self, websocket: Any, msg_type: str, payload: Dict[str, Any]) -> None:
        await websocket.send(json.dumps({"type": msg_type, **payload}))

    async def _send_error(self, websocket: Any, code: str, msg: str) -> None:
        await websocket.send(json.dumps({"type": "error", "code": code, "msg": msg}))
