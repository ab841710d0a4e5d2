from datetime import datetime, timezone

from mahjong_tally.games import remove_event
from mahjong_tally.schemas import Game, PenaltyEvent, SeatChangeEvent, WinEvent, Wind
from mahjong_tally.winds import dealer_for_round, winds_for_round

E, S, W, N = Wind.East, Wind.South, Wind.West, Wind.North


def make_game(*events, rotate_winds: bool = True) -> Game:
    return Game(
        id="g1",
        name="Friday table",
        initial_player_names=("A", "B", "C", "D"),
        base_points=8,
        rotate_winds=rotate_winds,
        events=list(events),
        created_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
    )


def test_initial_winds_follow_seat_order():
    result = winds_for_round(make_game(), 0)
    assert result.winds == {"A": E, "B": S, "C": W, "D": N}
    assert result.active_players == ["A", "B", "C", "D"]
    assert result.dealer == "A"


def test_dealer_keeps_east_after_own_win_with_retention():
    game = make_game(WinEvent(id="w1", winner="A", points=1))
    assert winds_for_round(game, 1).winds == winds_for_round(game, 0).winds
    assert dealer_for_round(game, 1) == "A"


def test_non_dealer_win_passes_east_with_retention():
    game = make_game(WinEvent(id="w1", winner="B", points=1))
    assert winds_for_round(game, 1).winds == {"B": E, "C": S, "D": W, "A": N}


def test_every_win_rotates_without_retention():
    game = make_game(
        WinEvent(id="w1", winner="A", points=1),
        WinEvent(id="w2", winner="A", points=1),
        rotate_winds=False,
    )
    assert dealer_for_round(game, 1) == "B"
    assert winds_for_round(game, 2).winds == {"C": E, "D": S, "A": W, "B": N}


def test_dealer_wraps_around_the_table():
    game = make_game(*(WinEvent(id=f"w{i}", winner="A", points=0) for i in range(5)), rotate_winds=False)
    assert dealer_for_round(game, 4) == "A"
    assert dealer_for_round(game, 5) == "B"


def test_penalties_and_seat_changes_do_not_rotate():
    game = make_game(
        PenaltyEvent(id="p1", penalized_player="A", points=1),
        SeatChangeEvent(id="s1", seat_index=2, player_out="C", player_in="E"),
        rotate_winds=False,
    )
    result = winds_for_round(game, 2)
    assert result.dealer_offset == 0
    assert result.winds == {"A": E, "B": S, "E": W, "D": N}


def test_substitute_inherits_seat_wind():
    game = make_game(
        WinEvent(id="w1", winner="C", points=0),
        SeatChangeEvent(id="s1", seat_index=1, player_out="B", player_in="E"),
    )
    assert winds_for_round(game, 2).winds == {"E": E, "C": S, "D": W, "A": N}


def test_dealer_substituted_out_and_new_dealer_retains():
    game = make_game(
        SeatChangeEvent(id="s1", seat_index=0, player_out="A", player_in="E"),
        WinEvent(id="w1", winner="E", points=0),
    )
    assert dealer_for_round(game, 2) == "E"


def test_round_index_past_end_is_clamped():
    game = make_game(WinEvent(id="w1", winner="B", points=0))
    assert winds_for_round(game, 99) == winds_for_round(game, 1)


def test_deleting_a_win_corrects_later_winds():
    game = make_game(
        WinEvent(id="w1", winner="B", points=0),
        WinEvent(id="w2", winner="B", points=0),
    )
    assert dealer_for_round(game, 2) == "B"
    trimmed = remove_event(game, "w1")
    assert winds_for_round(trimmed, 1) == winds_for_round(make_game(WinEvent(id="w2", winner="B", points=0)), 1)
    assert dealer_for_round(trimmed, 1) == "B"
