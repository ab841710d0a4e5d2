from __future__ import annotations

from datetime import datetime, timezone
from uuid import uuid4

from mahjong_tally.schemas import (
    Game,
    GameCreateRequest,
    GameEvent,
    PenaltyCreateRequest,
    PenaltyEvent,
    SeatChangeCreateRequest,
    SeatChangeEvent,
    WinCreateRequest,
    WinEvent,
)
from mahjong_tally.seating import current_players


class EventNotFoundError(LookupError):
    pass


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return str(uuid4())


def new_game(req: GameCreateRequest) -> Game:
    return Game(
        id=_new_id(),
        name=req.name.strip(),
        initial_player_names=tuple(name.strip() for name in req.player_names),
        base_points=req.base_points,
        rotate_winds=req.rotate_winds,
        events=[],
        created_at=_utcnow(),
    )


def build_win(req: WinCreateRequest) -> WinEvent:
    return WinEvent(id=_new_id(), winner=req.winner, points=req.points, feeder=req.feeder)


def build_penalty(req: PenaltyCreateRequest) -> PenaltyEvent:
    return PenaltyEvent(id=_new_id(), penalized_player=req.penalized_player, points=req.points)


def build_seat_change(game: Game, req: SeatChangeCreateRequest) -> SeatChangeEvent:
    seat_index = current_players(game).index(req.player_out)
    return SeatChangeEvent(
        id=_new_id(),
        seat_index=seat_index,
        player_out=req.player_out,
        player_in=req.player_in.strip(),
    )


def append_event(game: Game, event: GameEvent) -> Game:
    return game.model_copy(update={"events": [*game.events, event]})


def remove_event_at(game: Game, index: int) -> Game:
    if not 0 <= index < len(game.events):
        raise EventNotFoundError(index)
    return game.model_copy(update={"events": [*game.events[:index], *game.events[index + 1 :]]})


def remove_event(game: Game, event_id: str) -> Game:
    """Remove the first event carrying ``event_id``."""
    for index, event in enumerate(game.events):
        if event.id == event_id:
            return remove_event_at(game, index)
    raise EventNotFoundError(event_id)
