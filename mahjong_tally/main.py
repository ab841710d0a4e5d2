from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Response

from mahjong_tally.config import settings
from mahjong_tally.games import (
    EventNotFoundError,
    append_event,
    build_penalty,
    build_seat_change,
    build_win,
    new_game,
    remove_event,
)
from mahjong_tally.repository import build_repository
from mahjong_tally.schemas import (
    EventHistoryItem,
    Game,
    GameCreateRequest,
    GameDefaultsResponse,
    GameHistoryResponse,
    GameSummary,
    PenaltyCreateRequest,
    SeatChangeCreateRequest,
    StandingsResponse,
    WinCreateRequest,
    WindsResponse,
)
from mahjong_tally.scoring import cumulative_scores, score_history
from mahjong_tally.seating import all_players_ever
from mahjong_tally.validators import (
    validate_game_request,
    validate_penalty_request,
    validate_seat_change_request,
    validate_win_request,
)
from mahjong_tally.winds import winds_for_round

logger = logging.getLogger(__name__)


def configure_logging() -> None:
    logging.basicConfig(level=settings.log_level.upper(), format="%(asctime)s %(levelname)s %(name)s: %(message)s")


@asynccontextmanager
async def lifespan(_: FastAPI):
    configure_logging()
    yield


app = FastAPI(title="Mahjong Tally API", version="0.1.0", lifespan=lifespan)
repo = build_repository(settings)


def _get_game(game_id: str) -> Game:
    try:
        game = repo.load(game_id)
    except ValueError as exc:
        raise HTTPException(status_code=503, detail=str(exc)) from exc
    if not game:
        raise HTTPException(status_code=404, detail="game not found")
    return game


def _list_games() -> list[Game]:
    try:
        return repo.list()
    except ValueError as exc:
        raise HTTPException(status_code=503, detail=str(exc)) from exc


def _save_game(game: Game) -> Game:
    try:
        repo.save(game)
    except ValueError as exc:
        raise HTTPException(status_code=503, detail=str(exc)) from exc
    return game


@app.get("/")
def root() -> dict[str, str]:
    return {
        "message": "Mahjong Tally API",
        "docs": "/docs",
        "health": "/health",
        "games": "/api/v1/games",
    }


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/api/v1/games", response_model=list[GameSummary])
def list_games() -> list[GameSummary]:
    return [
        GameSummary(
            id=game.id,
            name=game.name,
            created_at=game.created_at,
            event_count=len(game.events),
            scores=cumulative_scores(game),
        )
        for game in _list_games()
    ]


@app.get("/api/v1/games/defaults", response_model=GameDefaultsResponse)
def game_defaults() -> GameDefaultsResponse:
    games = _list_games()
    if not games:
        return GameDefaultsResponse(
            player_names=["", "", "", ""],
            base_points=settings.default_base_points,
            rotate_winds=settings.default_rotate_winds,
        )
    last = games[0]
    return GameDefaultsResponse(
        player_names=list(last.initial_player_names),
        base_points=settings.default_base_points,
        rotate_winds=last.rotate_winds,
    )


@app.post("/api/v1/games", response_model=Game, status_code=201)
def create_game(req: GameCreateRequest) -> Game:
    validate_game_request(req)
    game = _save_game(new_game(req))
    logger.info("created game %s (%s)", game.id, game.name)
    return game


@app.get("/api/v1/games/{game_id}", response_model=Game)
def get_game(game_id: str) -> Game:
    return _get_game(game_id)


@app.delete("/api/v1/games/{game_id}", status_code=204)
def delete_game(game_id: str) -> Response:
    try:
        deleted = repo.delete(game_id)
    except ValueError as exc:
        raise HTTPException(status_code=503, detail=str(exc)) from exc
    if not deleted:
        raise HTTPException(status_code=404, detail="game not found")
    logger.info("deleted game %s", game_id)
    return Response(status_code=204)


@app.post("/api/v1/games/{game_id}/wins", response_model=Game, status_code=201)
def add_win(game_id: str, req: WinCreateRequest) -> Game:
    game = _get_game(game_id)
    validate_win_request(game, req)
    return _save_game(append_event(game, build_win(req)))


@app.post("/api/v1/games/{game_id}/penalties", response_model=Game, status_code=201)
def add_penalty(game_id: str, req: PenaltyCreateRequest) -> Game:
    game = _get_game(game_id)
    validate_penalty_request(game, req)
    return _save_game(append_event(game, build_penalty(req)))


@app.post("/api/v1/games/{game_id}/seat-changes", response_model=Game, status_code=201)
def add_seat_change(game_id: str, req: SeatChangeCreateRequest) -> Game:
    game = _get_game(game_id)
    validate_seat_change_request(game, req)
    return _save_game(append_event(game, build_seat_change(game, req)))


@app.delete("/api/v1/games/{game_id}/events/{event_id}", response_model=Game)
def delete_event(game_id: str, event_id: str) -> Game:
    game = _get_game(game_id)
    try:
        updated = remove_event(game, event_id)
    except EventNotFoundError as exc:
        raise HTTPException(status_code=404, detail="event not found") from exc
    logger.info("removed event %s from game %s", event_id, game_id)
    return _save_game(updated)


@app.get("/api/v1/games/{game_id}/standings", response_model=StandingsResponse)
def standings(game_id: str) -> StandingsResponse:
    game = _get_game(game_id)
    round_index = len(game.events)
    assignment = winds_for_round(game, round_index)
    return StandingsResponse(
        game_id=game.id,
        round_index=round_index,
        active_players=assignment.active_players,
        dealer=assignment.dealer,
        winds=assignment.winds,
        scores=cumulative_scores(game),
        all_players=all_players_ever(game),
    )


@app.get("/api/v1/games/{game_id}/rounds/{round_index}/winds", response_model=WindsResponse)
def round_winds(game_id: str, round_index: int) -> WindsResponse:
    game = _get_game(game_id)
    round_index = min(max(round_index, 0), len(game.events))
    assignment = winds_for_round(game, round_index)
    return WindsResponse(
        round_index=round_index,
        dealer=assignment.dealer,
        winds=assignment.winds,
        active_players=assignment.active_players,
    )


@app.get("/api/v1/games/{game_id}/history", response_model=GameHistoryResponse)
def history(game_id: str) -> GameHistoryResponse:
    game = _get_game(game_id)
    items = [
        EventHistoryItem(index=item.index, event=item.event, delta=item.delta, totals=item.totals)
        for item in score_history(game)
    ]
    return GameHistoryResponse(game_id=game.id, items=items)
