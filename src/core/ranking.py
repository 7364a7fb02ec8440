from datetime import timedelta
from typing import Iterable, List, Optional

from config.config import Config
from contracts.endpoint import Endpoint

MISSING_LATENCY = timedelta(seconds=Config.MISSING_LATENCY_SENTINEL_SECONDS)


def sort_key(latency: Optional[timedelta]) -> timedelta:
    return MISSING_LATENCY if latency is None else latency


def format_latency(latency: timedelta) -> str:
    micros = latency // timedelta(microseconds=1)
    if micros >= 1_000_000:
        return f"{micros / 1_000_000:g}s"
    if micros >= 1_000:
        return f"{micros / 1_000:g}ms"
    return f"{micros}µs"


class RankingPresenter:
    """
    Orders endpoints by latency and renders the reachable ones.

    Rooms without a latency sort after every measured room and are left out
    of the rendered lines.
    """

    def rank(self, endpoints: Iterable[Endpoint]) -> List[Endpoint]:
        return sorted(endpoints, key=lambda e: sort_key(e.latency))

    def render(self, endpoints: Iterable[Endpoint], best_last: bool = False) -> List[str]:
        """
        Format one line per reachable endpoint.

        Args:
            endpoints: Endpoints after probing.
            best_last (bool): List worst first so the fastest room ends up
                next to the exit prompt.

        Returns:
            List[str]: ``"<name> (<n> playing)  <latency>"`` lines.
        """
        ranked = self.rank(endpoints)
        if best_last:
            ranked.reverse()
        return [
            f"{e.name} ({e.player_count} playing)  {format_latency(e.latency)}"
            for e in ranked
            if e.latency is not None
        ]
