from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional


class Phase(str, Enum):
    NOT_STARTED = 'not_started'
    IN_PROGRESS = 'in_progress'
    COMPLETED = 'completed'


class TileState(str, Enum):
    HIDDEN = 'hidden'
    REVEALED = 'revealed'
    MATCHED = 'matched'


class StatusCategory(str, Enum):
    INFO = 'info'
    SUCCESS = 'success'
    NEUTRAL = 'neutral'


@dataclass
class Tile:
    position: int
    symbol: str
    state: TileState = TileState.HIDDEN
    # True only while a non-matching pair is on display
    mismatched: bool = False

    @property
    def face_up(self) -> bool:
        return self.state != TileState.HIDDEN

    def to_dict(self):
        return {
            'position': self.position,
            'state': self.state.value,
            'mismatched': self.mismatched,
            'symbol': self.symbol if self.face_up else None,
        }


@dataclass(frozen=True)
class StatusMessage:
    event: str
    category: StatusCategory
    text: str
    data: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self):
        return {
            'event': self.event,
            'category': self.category.value,
            'text': self.text,
            'data': dict(self.data),
        }


@dataclass(frozen=True)
class GameSettings:
    """Tunable constants of a game; defaults match the classic 4x4 board."""

    total_pairs: int = 8
    match_points: int = 10
    reveal_delay: float = 0.5
    mismatch_delay: float = 0.6
    tick_interval: float = 1.0
    time_bonus_cap: int = 60
    time_bonus_rate: int = 2
    move_bonus_cap: int = 16
    move_bonus_rate: int = 5
    symbols: Optional[tuple] = None

    @classmethod
    def from_config(cls, cfg: Mapping[str, Any]) -> 'GameSettings':
        """Build settings from a Flask config (delays there are in ms)."""
        defaults = cls()
        symbols = cfg.get('SYMBOLS')
        return cls(
            total_pairs=int(cfg.get('TOTAL_PAIRS', defaults.total_pairs)),
            match_points=int(cfg.get('MATCH_POINTS', defaults.match_points)),
            reveal_delay=int(cfg.get('REVEAL_DELAY_MS', 500)) / 1000.0,
            mismatch_delay=int(cfg.get('MISMATCH_DELAY_MS', 600)) / 1000.0,
            tick_interval=float(cfg.get('TIMER_TICK_SEC', defaults.tick_interval)),
            time_bonus_cap=int(cfg.get('TIME_BONUS_CAP_SEC', defaults.time_bonus_cap)),
            time_bonus_rate=int(cfg.get('TIME_BONUS_RATE', defaults.time_bonus_rate)),
            move_bonus_cap=int(cfg.get('MOVE_BONUS_CAP', defaults.move_bonus_cap)),
            move_bonus_rate=int(cfg.get('MOVE_BONUS_RATE', defaults.move_bonus_rate)),
            symbols=tuple(symbols) if symbols else None,
        )

    def durations(self):
        return {
            'reveal_ms': int(round(self.reveal_delay * 1000)),
            'mismatch_ms': int(round(self.mismatch_delay * 1000)),
            'tick_sec': self.tick_interval,
        }
