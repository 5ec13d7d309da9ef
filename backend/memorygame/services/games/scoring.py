from typing import Dict

from memorygame.models import GameSettings


def score_match(settings: GameSettings) -> int:
    return settings.match_points


def completion_bonus(settings: GameSettings, elapsed: int, moves: int) -> Dict[str, int]:
    """One-time bonuses applied when the last pair is found.

    time bonus: rate points per second under the time cap
    move bonus: rate points per move under the move cap
    """
    time_bonus = max(0, settings.time_bonus_cap - elapsed) * settings.time_bonus_rate
    move_bonus = max(0, settings.move_bonus_cap - moves) * settings.move_bonus_rate
    return {
        'time_bonus': time_bonus,
        'move_bonus': move_bonus,
        'total': time_bonus + move_bonus,
    }


def format_elapsed(seconds: int) -> str:
    """MM:SS, zero padded. There is no hour field, so minutes wrap at 60."""
    seconds = max(0, int(seconds))
    minutes = (seconds // 60) % 60
    return f"{minutes:02d}:{seconds % 60:02d}"
