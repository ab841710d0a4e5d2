from fastapi import HTTPException

from mahjong_tally.schemas import (
    Game,
    GameCreateRequest,
    PenaltyCreateRequest,
    SeatChangeCreateRequest,
    WinCreateRequest,
)
from mahjong_tally.seating import current_players


def _folded(names) -> set[str]:
    return {name.strip().lower() for name in names}


def validate_player_name(name: str, label: str = "Player name") -> None:
    if not name.strip():
        raise HTTPException(status_code=422, detail=f"{label} is required")


def _require_active(game: Game, name: str, role: str) -> None:
    if name not in current_players(game):
        raise HTTPException(status_code=422, detail=f"{role} is not an active player: {name}")


def validate_game_request(req: GameCreateRequest) -> None:
    if not req.name.strip():
        raise HTTPException(status_code=422, detail="Game name is required")
    for idx, name in enumerate(req.player_names, start=1):
        validate_player_name(name, f"Player {idx} name")
    if len(_folded(req.player_names)) != len(req.player_names):
        raise HTTPException(status_code=422, detail="Player names must be unique")


def validate_win_request(game: Game, req: WinCreateRequest) -> None:
    _require_active(game, req.winner, "Winner")
    if req.feeder is None:
        return
    if req.feeder == req.winner:
        raise HTTPException(status_code=422, detail="Feeder cannot be the winner")
    _require_active(game, req.feeder, "Feeder")


def validate_penalty_request(game: Game, req: PenaltyCreateRequest) -> None:
    _require_active(game, req.penalized_player, "Penalized player")


def validate_seat_change_request(game: Game, req: SeatChangeCreateRequest) -> None:
    _require_active(game, req.player_out, "Player to leave")
    validate_player_name(req.player_in, "New player name")
    if req.player_in.strip().lower() in _folded(current_players(game)):
        raise HTTPException(status_code=422, detail="This player is already an active player in the game")
