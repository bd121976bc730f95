from __future__ import annotations

import argparse
import logging
import time

from vrfraffle.chain.api import ChainClient
from vrfraffle.config import RaffleConfig
from vrfraffle.db.engine import index_sessionmaker, make_engine
from vrfraffle.draw import RaffleStateMachine
from vrfraffle.indexer import NotificationIndexer
from vrfraffle.workflows import perform_upkeep

logger = logging.getLogger("run_upkeep")


def main() -> None:
    """Poll the raffle and trigger draws whenever one is due."""
    parser = argparse.ArgumentParser(description=main.__doc__)
    parser.add_argument("--poll-seconds", type=float, default=30.0)
    parser.add_argument("--once", action="store_true", help="run a single tick")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )

    config = RaffleConfig.from_env()
    client = ChainClient()
    machine = RaffleStateMachine(config, oracle=client, payout=client)
    machine.channel.subscribe(NotificationIndexer(index_sessionmaker(make_engine())))

    while True:
        request_id = perform_upkeep(machine)
        if request_id is not None:
            logger.info(f"Draw requested: {request_id}")
        if args.once:
            break
        time.sleep(args.poll_seconds)


if __name__ == "__main__":
    main()
