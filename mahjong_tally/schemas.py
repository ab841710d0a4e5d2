from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, conint

PlayerName = str


class Wind(str, Enum):
    East = "East"
    South = "South"
    West = "West"
    North = "North"


WIND_ORDER: tuple[Wind, ...] = (Wind.East, Wind.South, Wind.West, Wind.North)


class _Record(BaseModel):
    # Persisted records use camelCase keys; Python code uses snake_case.
    model_config = ConfigDict(populate_by_name=True, frozen=True)


class WinEvent(_Record):
    type: Literal["win"] = "win"
    id: str
    winner: PlayerName
    points: conint(ge=0) = 0
    feeder: PlayerName | None = None


class PenaltyEvent(_Record):
    type: Literal["penalty"] = "penalty"
    id: str
    penalized_player: PlayerName = Field(alias="penalizedPlayer")
    points: conint(ge=1)


class SeatChangeEvent(_Record):
    type: Literal["seatChange"] = "seatChange"
    id: str
    seat_index: conint(ge=0, le=3) = Field(alias="seatIndex")
    player_out: PlayerName = Field(alias="playerOut")
    player_in: PlayerName = Field(alias="playerIn")


GameEvent = Annotated[Union[WinEvent, PenaltyEvent, SeatChangeEvent], Field(discriminator="type")]


class Game(_Record):
    id: str
    name: str
    initial_player_names: tuple[PlayerName, PlayerName, PlayerName, PlayerName] = Field(alias="initialPlayerNames")
    base_points: conint(ge=1) = Field(alias="basePoints")
    rotate_winds: bool = Field(default=True, alias="rotateWinds")
    events: list[GameEvent] = Field(default_factory=list)
    created_at: datetime = Field(alias="createdAt")


class GameCreateRequest(BaseModel):
    name: str
    player_names: list[PlayerName] = Field(min_length=4, max_length=4)
    base_points: conint(ge=1) = 8
    rotate_winds: bool = True

    model_config = ConfigDict(extra="forbid")


class WinCreateRequest(BaseModel):
    winner: PlayerName
    points: conint(ge=0) = 0
    feeder: PlayerName | None = None

    model_config = ConfigDict(extra="forbid")


class PenaltyCreateRequest(BaseModel):
    penalized_player: PlayerName
    points: conint(ge=1)

    model_config = ConfigDict(extra="forbid")


class SeatChangeCreateRequest(BaseModel):
    player_out: PlayerName
    player_in: PlayerName

    model_config = ConfigDict(extra="forbid")


class WindsResponse(BaseModel):
    round_index: int
    dealer: PlayerName
    winds: dict[PlayerName, Wind]
    active_players: list[PlayerName]


class StandingsResponse(BaseModel):
    game_id: str
    round_index: int
    active_players: list[PlayerName]
    dealer: PlayerName
    winds: dict[PlayerName, Wind]
    scores: dict[PlayerName, int]
    all_players: list[PlayerName]


class EventHistoryItem(BaseModel):
    index: int
    event: GameEvent
    delta: dict[PlayerName, int]
    totals: dict[PlayerName, int]


class GameHistoryResponse(BaseModel):
    game_id: str
    items: list[EventHistoryItem] = Field(default_factory=list)


class GameSummary(BaseModel):
    id: str
    name: str
    created_at: datetime
    event_count: int
    scores: dict[PlayerName, int]


class GameDefaultsResponse(BaseModel):
    player_names: list[PlayerName]
    base_points: int
    rotate_winds: bool
