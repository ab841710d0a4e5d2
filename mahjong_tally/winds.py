from __future__ import annotations

from dataclasses import dataclass

from mahjong_tally.schemas import WIND_ORDER, Game, PlayerName, WinEvent, Wind
from mahjong_tally.seating import active_players


@dataclass(frozen=True)
class WindAssignment:
    winds: dict[PlayerName, Wind]
    active_players: list[PlayerName]
    dealer_offset: int

    @property
    def dealer(self) -> PlayerName:
        return self.active_players[self.dealer_offset % len(self.active_players)]


def _dealer_offset(game: Game, round_index: int) -> int:
    offset = 0
    for index, event in enumerate(game.events[: max(round_index, 0)]):
        if not isinstance(event, WinEvent):
            continue
        if not game.rotate_winds:
            offset += 1
            continue
        seated = active_players(game, index)
        if event.winner != seated[offset % len(seated)]:
            offset += 1
    return offset


def winds_for_round(game: Game, round_index: int) -> WindAssignment:
    """Wind of every active player just before the event at ``round_index``.

    The dealer offset is replayed from the start of the log. With
    ``rotate_winds`` the dealer keeps East after winning and passes it on
    any other win; without it East moves one seat after every win.
    Penalties and seat changes never move the dealer.
    """
    offset = _dealer_offset(game, round_index)
    seated = active_players(game, round_index)
    winds = {}
    for step, wind in enumerate(WIND_ORDER[: len(seated)]):
        winds[seated[(offset + step) % len(seated)]] = wind
    return WindAssignment(winds=winds, active_players=seated, dealer_offset=offset)


def dealer_for_round(game: Game, round_index: int) -> PlayerName:
    return winds_for_round(game, round_index).dealer
