import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from config.config import Config
from config.logging_config import setup_logging
from contracts.endpoint import Endpoint
from core.errors import LobbyFetchError
from core.lobby_client import LobbyClient, filter_rooms
from core.ping_prober import PingProber
from core.probe_limiter import ProbeLimiter
from core.probe_manager import ProbeManager
from core.ranking import RankingPresenter

logger = logging.getLogger(__name__)

EXIT_PROMPT = " - press enter to exit - "


def build_argparser():
    ap = argparse.ArgumentParser(description="Rank yuzu lobby rooms by ping latency")
    ap.add_argument("--url", default=None, help="Lobby endpoint (default: $YUZU_LOBBY_URL)")
    ap.add_argument("--game", default=None, help="Preferred game to keep (default: $YUZU_GAME_NAME)")
    ap.add_argument("--best-last", action="store_true",
                    help="Print worst first so the fastest room is printed last")
    ap.add_argument("--no-pause", dest="pause", action="store_false",
                    help="Exit without waiting for Enter")
    ap.add_argument("--log-level", default=None, help="Override $LOG_LEVEL")
    return ap


async def collect(url: str, game_name: str) -> List[Endpoint]:
    rooms = await LobbyClient(url).fetch_rooms()
    endpoints = [Endpoint.from_room(room) for room in filter_rooms(rooms, game_name)]
    manager = ProbeManager(PingProber(), ProbeLimiter(Config.MAX_CONCURRENT_PROBES))
    return await manager.run_batch(endpoints)


def main(argv: Optional[List[str]] = None) -> int:
    args = build_argparser().parse_args(argv)
    setup_logging(args.log_level)

    url = args.url or Config.LOBBY_URL
    game_name = args.game or Config.GAME_NAME
    logger.info(f"Ranking rooms for {game_name!r} from {url}")

    try:
        endpoints = asyncio.run(collect(url, game_name))
    except LobbyFetchError as e:
        print(e, file=sys.stderr)
        return 1

    for line in RankingPresenter().render(endpoints, best_last=args.best_last):
        print(line)

    if args.pause:
        print(EXIT_PROMPT)
        try:
            input()
        except EOFError:
            pass
    return 0


def run():
    sys.exit(main())


if __name__ == "__main__":
    run()
