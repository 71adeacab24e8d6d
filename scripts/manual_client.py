#!/usr/bin/env python3
from __future__ import annotations

import argparse
import asyncio
import contextlib
import json
import logging
import sys
from typing import Any, Awaitable, Callable, Dict, Optional

import websockets

logging.basicConfig(level=logging.INFO)

# ManualClient lets a person sit at a table from the terminal.

HELP = "Commands: join | start | check | call | fold | raise <amount> | table | help | quit"


def parse_command(line: str) -> Optional[Dict[str, Any]]:
    """Turn a typed command into a host message, or None when it is not understood."""
    parts = line.strip().lower().split()
    if not parts:
        return None
    command = parts[0]
    if command in ("join", "start", "table"):
        return {"type": command}
    if command in ("check", "call", "fold"):
        return {"type": "action", "action": command}
    if command == "raise":
        if len(parts) != 2 or not parts[1].isdigit():
            return None
        return {"type": "action", "action": "raise", "amount": int(parts[1])}
    return None


class ManualClient:
    def __init__(
        self,
        player_id: str,
        url: str,
        table_id: Optional[str] = None,
        read_line: Optional[Callable[[str], Awaitable[str]]] = None,
    ) -> None:
        self.player_id = player_id
        self.url = url
        self.table_id = table_id
        self.read_line = read_line or (lambda prompt: asyncio.to_thread(input, prompt))

    async def run(self) -> None:
        async with websockets.connect(self.url) as ws:
            hello: Dict[str, Any] = {"type": "hello", "player_id": self.player_id}
            if self.table_id:
                hello["table_id"] = self.table_id
            await ws.send(json.dumps(hello))
            await self.session(ws)

    async def session(self, ws: Any) -> None:
        """Read host messages and prompt for commands until either side stops."""
        reader = asyncio.create_task(self._read_loop(ws))
        prompt = asyncio.create_task(self._prompt_loop(ws))
        try:
            done, _ = await asyncio.wait({reader, prompt}, return_when=asyncio.FIRST_COMPLETED)
            if reader in done and not prompt.done():
                # A blocked input() thread only returns on the next line.
                print("Connection closed by host. Press Enter to exit.")
        finally:
            for task in (reader, prompt):
                task.cancel()
            for task in (reader, prompt):
                with contextlib.suppress(asyncio.CancelledError):
                    await task

    async def _read_loop(self, ws: Any) -> None:
        try:
            async for raw in ws:
                self._print_message(json.loads(raw))
        except websockets.ConnectionClosed:
            return

    async def _prompt_loop(self, ws: Any) -> None:
        print(HELP)
        while True:
            line = await self.read_line("> ")
            if line.strip().lower() in ("quit", "exit"):
                return
            if line.strip().lower() in ("help", "h"):
                print(HELP)
                continue
            message = parse_command(line)
            if message is None:
                print("Unknown command. " + HELP)
                continue
            try:
                await ws.send(json.dumps(message))
            except websockets.ConnectionClosed:
                print("Connection closed by host.")
                return

    def _print_message(self, msg: Dict[str, Any]) -> None:
        msg_type = msg.get("type")
        if msg_type == "error":
            print(f"! {msg.get('code')}: {msg.get('msg')}")
        elif msg_type == "welcome":
            print(f"Welcome {msg.get('name')} to table {msg.get('table_id')}")
        elif msg_type == "table":
            self._print_table(msg)

    def _print_table(self, msg: Dict[str, Any]) -> None:
        current = msg.get("current_player") or {}
        print(
            f"State {msg['state']} | Board {' '.join(msg.get('community_cards', [])) or '-'} | Pot={msg['pot']}"
        )
        print(f"You: hand={' '.join(msg.get('player_cards', [])) or '-'}")
        for player in msg.get("players", []):
            marker = "→" if player["id"] == current.get("id") else " "
            tags = []
            if player["id"] == self.player_id:
                tags.append("ME")
            if not player["active"] and msg["state"] != "OPEN":
                tags.append("FOLD")
            label = f" [{','.join(tags)}]" if tags else ""
            print(f"  {marker}{player['name']:<18} cash={player['cash']:>5} bet={player['bet']:>5}{label}")
        if "call_amount" in msg:
            print(f"Your turn, call amount {msg['call_amount']}")
        winner = msg.get("winner")
        if winner:
            hand = " ".join(msg.get("winner_hand", [])) or "-"
            print(f"Winner: {winner['name']} with {hand}")


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Poker table manual client")
    parser.add_argument("--url", default="ws://127.0.0.1:8080")
    parser.add_argument("--player-id", required=True)
    parser.add_argument("--table-id", default=None)
    return parser.parse_args(argv)


def main(argv: list[str]) -> None:
    args = parse_args(argv)
    client = ManualClient(player_id=args.player_id, url=args.url, table_id=args.table_id)
    try:
        asyncio.run(client.run())
    except KeyboardInterrupt:
        print("\nSession closed")


if __name__ == "__main__":
    main(sys.argv[1:])
