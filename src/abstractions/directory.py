from abc import ABC, abstractmethod
from typing import List

from contracts.lobby import Room


class Directory(ABC):
    """
    Abstract base class for sources of lobby rooms.
    """

    @abstractmethod
    async def fetch_rooms(self) -> List[Room]:
        """
        Return every room currently listed by the directory.

        Returns:
            List[Room]: Decoded room records.

        Raises:
            LobbyFetchError: If the directory cannot be reached or decoded.
        """
