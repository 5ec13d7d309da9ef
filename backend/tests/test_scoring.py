import pytest

from memorygame.models import GameSettings
from memorygame.services.games.scoring import completion_bonus, format_elapsed, score_match


def test_match_points_default():
    assert score_match(GameSettings()) == 10
    assert score_match(GameSettings(match_points=25)) == 25


@pytest.mark.parametrize('elapsed,moves,time_bonus,move_bonus', [
    (0, 8, 120, 40),
    (30, 16, 60, 0),
    (59, 15, 2, 5),
    (60, 16, 0, 0),
    (200, 40, 0, 0),
])
def test_completion_bonus(elapsed, moves, time_bonus, move_bonus):
    bonus = completion_bonus(GameSettings(), elapsed, moves)
    assert bonus == {
        'time_bonus': time_bonus,
        'move_bonus': move_bonus,
        'total': time_bonus + move_bonus,
    }


def test_completion_bonus_uses_settings():
    settings = GameSettings(time_bonus_cap=10, time_bonus_rate=1, move_bonus_cap=4, move_bonus_rate=3)
    assert completion_bonus(settings, 4, 2)['total'] == 6 + 6


@pytest.mark.parametrize('seconds,expected', [
    (0, '00:00'),
    (9, '00:09'),
    (65, '01:05'),
    (599, '09:59'),
    (3599, '59:59'),
    # no hour field: minutes wrap
    (3605, '00:05'),
    (-3, '00:00'),
])
def test_format_elapsed(seconds, expected):
    assert format_elapsed(seconds) == expected
