from __future__ import annotations

import logging
from dataclasses import dataclass, field

from mahjong_tally.schemas import Game, GameEvent, PenaltyEvent, PlayerName, SeatChangeEvent, WinEvent
from mahjong_tally.seating import active_players, all_players_ever

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScoredEvent:
    index: int
    event: GameEvent
    delta: dict[PlayerName, int]
    totals: dict[PlayerName, int] = field(default_factory=dict)


def _penalty_delta(event: PenaltyEvent, active: list[PlayerName]) -> dict[PlayerName, int]:
    if event.penalized_player not in active:
        return {}
    scores = {name: 0 for name in active}
    for name in active:
        if name == event.penalized_player:
            scores[name] -= event.points * (len(active) - 1)
        else:
            scores[name] += event.points
    return scores


def _win_delta(event: WinEvent, active: list[PlayerName], base_points: int) -> dict[PlayerName, int]:
    if event.winner not in active:
        return {}
    if event.feeder is not None and event.feeder not in active:
        return {}

    scores = {name: 0 for name in active}
    hand_value = base_points + event.points
    for loser in active:
        if loser == event.winner:
            continue
        # On a fed win only the feeder pays the hand value; onlookers pay the base stake.
        payment = hand_value if event.feeder is None or loser == event.feeder else base_points
        scores[loser] -= payment
        scores[event.winner] += payment
    return scores


def round_delta(event: GameEvent, active: list[PlayerName], base_points: int) -> dict[PlayerName, int]:
    """Score change produced by a single event for the given active seating.

    Seat changes map every active player to zero. A win or penalty naming a
    player who is not seated is inapplicable and yields an empty mapping.
    Every non-empty result sums to zero.
    """
    if isinstance(event, WinEvent):
        delta = _win_delta(event, active, base_points)
    elif isinstance(event, PenaltyEvent):
        delta = _penalty_delta(event, active)
    elif isinstance(event, SeatChangeEvent):
        return {name: 0 for name in active}
    else:
        raise TypeError(f"Unsupported event type: {type(event).__name__}")

    if not delta:
        logger.debug("event %s is not applicable to seating %s", event.id, active)
    return delta


def score_history(game: Game) -> list[ScoredEvent]:
    totals = {name: 0 for name in all_players_ever(game)}
    history: list[ScoredEvent] = []
    for index, event in enumerate(game.events):
        delta = round_delta(event, active_players(game, index), game.base_points)
        for name, change in delta.items():
            totals[name] = totals.get(name, 0) + change
        history.append(ScoredEvent(index=index, event=event, delta=delta, totals=dict(totals)))
    return history


def cumulative_scores(game: Game) -> dict[PlayerName, int]:
    """Total score of every player who has ever held a seat.

    Players who have left the table keep the total they had when they left.
    """
    totals = {name: 0 for name in all_players_ever(game)}
    for index, event in enumerate(game.events):
        if not isinstance(event, (WinEvent, PenaltyEvent)):
            continue
        for name, change in round_delta(event, active_players(game, index), game.base_points).items():
            totals[name] = totals.get(name, 0) + change
    return totals
