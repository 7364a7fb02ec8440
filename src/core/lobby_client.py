import logging
from typing import Iterable, List, Optional

import httpx
from pydantic import ValidationError

from abstractions.directory import Directory
from config.config import Config
from contracts.lobby import LobbyResponse, Room
from core.errors import LobbyFetchError
from core.profiler import Profiler

logger = logging.getLogger(__name__)


class LobbyClient(Directory):
    """
    Fetches the room list from the lobby web API.
    """

    def __init__(self, url: Optional[str] = None, timeout: Optional[float] = None):
        """
        Args:
            url (Optional[str]): Lobby endpoint. Defaults to Config.LOBBY_URL.
            timeout (Optional[float]): Request timeout in seconds.
        """
        self.url = url or Config.LOBBY_URL
        self.timeout = timeout if timeout is not None else Config.LOBBY_TIMEOUT_SECONDS

    @Profiler.profile
    async def fetch_rooms(self) -> List[Room]:
        try:
            async with httpx.AsyncClient() as client:
                resp = await client.get(self.url, timeout=self.timeout)
                resp.raise_for_status()
                data = resp.json()
        except httpx.HTTPStatusError as e:
            raise LobbyFetchError(self.url, f"status={e.response.status_code}") from e
        except httpx.HTTPError as e:
            raise LobbyFetchError(self.url, f"{type(e).__name__}: {e}") from e
        except ValueError as e:
            raise LobbyFetchError(self.url, f"invalid JSON: {e}") from e

        try:
            lobby = LobbyResponse.model_validate(data)
        except ValidationError as e:
            raise LobbyFetchError(self.url, f"unexpected document: {e}") from e

        logger.info(f"Fetched {len(lobby.rooms)} rooms from {self.url}")
        return lobby.rooms


def filter_rooms(rooms: Iterable[Room], game_name: str) -> List[Room]:
    """Keep rooms whose preferred game is exactly ``game_name`` (case-sensitive)."""
    selected = [room for room in rooms if room.game_name == game_name]
    logger.info(f"{len(selected)} rooms are playing {game_name!r}")
    return selected
