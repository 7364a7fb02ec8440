from datetime import timedelta
from typing import Optional

from pydantic import BaseModel, Field

from contracts.lobby import Room


class Endpoint(BaseModel):
    """
    A probe target built from a lobby room. Identity fields are frozen;
    only ``latency`` may be assigned, once per run by the probe manager.
    """

    address: str = Field(frozen=True)
    name: str = Field(frozen=True)
    port: Optional[int] = Field(default=None, frozen=True)
    player_count: int = Field(default=0, frozen=True)
    game_name: str = Field(default="", frozen=True)
    latency: Optional[timedelta] = None

    @classmethod
    def from_room(cls, room: Room) -> "Endpoint":
        return cls(
            address=room.address,
            name=room.name,
            port=room.port,
            player_count=len(room.players),
            game_name=room.game_name,
        )

    def __eq__(self, other):
        """
        Check equality with another Endpoint based on address and port.
        """
        if not isinstance(other, Endpoint):
            return False
        return self.address == other.address and self.port == other.port

    def __hash__(self):
        return hash((self.address, self.port))

    def __repr__(self):
        return (
            f"Endpoint(address={self.address}, port={self.port}, name={self.name}, "
            f"player_count={self.player_count}, latency={self.latency})"
        )
