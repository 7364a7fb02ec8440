from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class Player(BaseModel):
    """
    A participant listed under a lobby room.
    """

    model_config = ConfigDict(populate_by_name=True)

    nickname: str
    game_name: str = Field(alias="gameName")


class Room(BaseModel):
    """
    Data model representing one room record from the lobby directory.
    """

    model_config = ConfigDict(populate_by_name=True)

    port: int
    name: str
    description: Optional[str] = None
    game_name: str = Field(alias="preferredGameName")
    address: str
    players: List[Player] = Field(default_factory=list)


class LobbyResponse(BaseModel):
    """
    Top-level document returned by the lobby endpoint.
    """

    rooms: List[Room]
