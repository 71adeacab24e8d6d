import argparse
import asyncio
import logging

from pokertable.deck import RandomShuffler, ShuffledDeckSupplier
from pokertable.models import TableConfig
from pokertable.names import PlayerNamesRepository

from .server import TableHost


def main() -> None:
    parser = argparse.ArgumentParser(description="Poker table host server")
    parser.add_argument("--host", default="0.0.0.0")
    parser.add_argument("--port", type=int, default=8080)
    parser.add_argument("--table-id", default="T-1", help="Table used when a client does not name one")
    parser.add_argument("--starting-cash", type=int, default=100)
    parser.add_argument("--max-players", type=int, default=9)
    parser.add_argument("--seed", type=int, default=None, help="Seed the shuffler for reproducible hands")
    parser.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    args = parser.parse_args()

    logging.basicConfig(level=getattr(logging, args.log_level))

    config = TableConfig(
        starting_cash=args.starting_cash,
        max_players=args.max_players,
        table_id=args.table_id,
    )
    deck_supplier = ShuffledDeckSupplier(shuffler=RandomShuffler(args.seed))

    server = TableHost(config, names=PlayerNamesRepository(), deck_supplier=deck_supplier)
    asyncio.run(server.start(host=args.host, port=args.port))


if __name__ == "__main__":
    main()
