from __future__ import annotations

from mahjong_tally.schemas import Game, PlayerName, SeatChangeEvent


def active_players(game: Game, round_index: int) -> list[PlayerName]:
    """Return who sits in seats 0..3 just before the event at ``round_index``.

    Seat changes are applied as written: the occupant of ``seat_index`` is
    replaced by ``player_in`` whether or not ``player_out`` matches. Indexes
    past the end of the log are clamped, and ``round_index <= 0`` yields the
    initial seating.
    """
    seats = list(game.initial_player_names)
    for event in game.events[: max(round_index, 0)]:
        if isinstance(event, SeatChangeEvent):
            seats[event.seat_index] = event.player_in
    return seats


def all_players_ever(game: Game) -> list[PlayerName]:
    """Initial players first, then seat-change entrants in log order."""
    roster = dict.fromkeys(game.initial_player_names)
    for event in game.events:
        if isinstance(event, SeatChangeEvent):
            roster.setdefault(event.player_in)
    return list(roster)


def current_players(game: Game) -> list[PlayerName]:
    return active_players(game, len(game.events))
