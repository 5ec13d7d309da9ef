import logging
import math
import random
import threading
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from memorygame.models import (
    GameSettings, Phase, StatusCategory, StatusMessage, Tile, TileState,
)
from .board import DEFAULT_SYMBOLS, build_board
from .scoring import completion_bonus, format_elapsed, score_match

logger = logging.getLogger(__name__)

Listener = Callable[[str, Dict[str, Any]], None]


class GameEngine:
    """Single-player memory game state machine.

    Owns the board, the selection buffer, the counters and the timer. All
    delays go through `scheduler`; each deferred callback captures the
    current generation and does nothing if a reset happened since.
    Invalid intents are rejected silently (select_tile returns False).
    """

    def __init__(self, scheduler, settings: Optional[GameSettings] = None,
                 rng: Optional[random.Random] = None):
        self.settings = settings or GameSettings()
        if self.settings.tick_interval <= 0:
            raise ValueError('tick_interval must be positive')
        if self.settings.reveal_delay < 0 or self.settings.mismatch_delay < 0:
            raise ValueError('reveal and mismatch delays cannot be negative')
        self._symbols: Sequence[str] = self.settings.symbols or DEFAULT_SYMBOLS
        self._scheduler = scheduler
        self._rng = rng or random.Random()
        self._lock = threading.RLock()
        self._listeners: List[Listener] = []
        self.generation = 0
        self.status: Optional[StatusMessage] = None
        self._reset_state()

    # ---- queries ----

    @property
    def scheduler(self):
        return self._scheduler

    @property
    def phase(self) -> Phase:
        return self._phase

    @property
    def tiles(self) -> Tuple[Tile, ...]:
        return tuple(self._tiles)

    @property
    def selection(self) -> Tuple[int, ...]:
        return tuple(self._selection)

    @property
    def total_pairs(self) -> int:
        return self.settings.total_pairs

    @property
    def matched_pairs(self) -> int:
        return self._matched_pairs

    @property
    def moves(self) -> int:
        return self._moves

    @property
    def score(self) -> int:
        return self._score

    @property
    def elapsed(self) -> int:
        if self._started_at is None:
            return 0
        end = self._finished_at if self._finished_at is not None else self._scheduler.now()
        return max(0, int(math.floor(end - self._started_at)))

    def to_dict(self) -> Dict[str, Any]:
        with self._lock:
            elapsed = self.elapsed
            return {
                'phase': self._phase.value,
                'tiles': [t.to_dict() for t in self._tiles],
                'matched_pairs': self._matched_pairs,
                'total_pairs': self.total_pairs,
                'moves': self._moves,
                'score': self._score,
                'elapsed': elapsed,
                'elapsed_display': format_elapsed(elapsed),
                'pending': len(self._selection),
                'status': self.status.to_dict() if self.status else None,
                'generation': self.generation,
            }

    snapshot = to_dict

    # ---- observers ----

    def subscribe(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def unsubscribe(self, listener: Listener) -> None:
        try:
            self._listeners.remove(listener)
        except ValueError:
            pass

    def _notify(self, event: str, payload: Dict[str, Any]) -> None:
        for listener in list(self._listeners):
            try:
                listener(event, payload)
            except Exception:
                logger.exception(f"[listener-error] event={event}")

    def _set_status(self, event: str, category: StatusCategory, text: str, **data) -> None:
        self.status = StatusMessage(event=event, category=category, text=text, data=data)
        self._notify('status', self.status.to_dict())

    def _push_state(self) -> None:
        self._notify('state_update', self.to_dict())

    # ---- commands ----

    def reset(self) -> None:
        with self._lock:
            self._reset_state()
            logger.info(f"[game-reset] generation={self.generation}")
            self._set_status('game_reset', StatusCategory.NEUTRAL,
                             'Click "New Game" to start playing!')
            self._push_state()

    def start_new_game(self) -> None:
        with self._lock:
            self._reset_state()
            self._phase = Phase.IN_PROGRESS
            self._started_at = self._scheduler.now()
            self._schedule_tick(self.generation)
            logger.info(f"[game-start] generation={self.generation} pairs={self.total_pairs}")
            self._set_status('game_started', StatusCategory.NEUTRAL,
                             'Game started! Find matching pairs.')
            self._push_state()

    def select_tile(self, position) -> bool:
        with self._lock:
            if self._phase != Phase.IN_PROGRESS:
                return False
            if not isinstance(position, int) or isinstance(position, bool):
                return False
            if not 0 <= position < len(self._tiles):
                return False
            if len(self._selection) >= 2:
                return False
            tile = self._tiles[position]
            if tile.state != TileState.HIDDEN:
                return False

            tile.state = TileState.REVEALED
            self._selection.append(position)
            if len(self._selection) == 2:
                # a move is an attempt; it counts now, not when it resolves
                self._moves += 1
                gen = self.generation
                self._scheduler.call_later(self.settings.reveal_delay, lambda: self._evaluate(gen))
            logger.debug(f"[select] generation={self.generation} pos={position} pending={len(self._selection)}")
            self._push_state()
            return True

    def tick(self) -> int:
        with self._lock:
            return self.elapsed

    # ---- deferred work ----

    def _reset_state(self) -> None:
        self.generation += 1
        self._phase = Phase.NOT_STARTED
        self._matched_pairs = 0
        self._moves = 0
        self._score = 0
        self._selection: List[int] = []
        self._started_at: Optional[float] = None
        self._finished_at: Optional[float] = None
        self._tiles: List[Tile] = build_board(self.total_pairs, self._symbols, self._rng)

    def _evaluate(self, gen: int) -> None:
        with self._lock:
            if gen != self.generation or self._phase != Phase.IN_PROGRESS or len(self._selection) != 2:
                logger.info(f"[timer-abort] evaluate generation={gen} current={self.generation}")
                return
            first, second = (self._tiles[p] for p in self._selection)
            self._selection = []

            if first.symbol == second.symbol:
                first.state = second.state = TileState.MATCHED
                self._matched_pairs += 1
                self._score += score_match(self.settings)
                logger.info(
                    f"[evaluate] match positions=({first.position},{second.position}) "
                    f"pairs={self._matched_pairs}/{self.total_pairs}"
                )
                if self._matched_pairs == self.total_pairs:
                    self._complete_game()
                else:
                    remaining = self.total_pairs - self._matched_pairs
                    self._set_status('pair_matched', StatusCategory.SUCCESS,
                                     f'Great! {remaining} pairs remaining.', remaining=remaining)
            else:
                first.mismatched = second.mismatched = True
                logger.info(f"[evaluate] mismatch positions=({first.position},{second.position})")
                self._set_status('no_match', StatusCategory.INFO, 'No match. Try again!')
                positions = (first.position, second.position)
                self._scheduler.call_later(self.settings.mismatch_delay,
                                           lambda: self._hide_mismatched(gen, positions))
            self._push_state()

    def _hide_mismatched(self, gen: int, positions: Tuple[int, int]) -> None:
        with self._lock:
            if gen != self.generation:
                logger.info(f"[timer-abort] mismatch-reset generation={gen} current={self.generation}")
                return
            for p in positions:
                tile = self._tiles[p]
                tile.state = TileState.HIDDEN
                tile.mismatched = False
            logger.debug(f"[mismatch-reset] positions={positions}")
            self._push_state()

    def _complete_game(self) -> None:
        self._phase = Phase.COMPLETED
        self._finished_at = self._scheduler.now()
        elapsed = self.elapsed
        bonus = completion_bonus(self.settings, elapsed, self._moves)
        self._score += bonus['total']
        display = format_elapsed(elapsed)
        logger.info(
            f"[game-complete] generation={self.generation} elapsed={elapsed}s moves={self._moves} "
            f"time_bonus={bonus['time_bonus']} move_bonus={bonus['move_bonus']} score={self._score}"
        )
        self._set_status(
            'game_completed', StatusCategory.SUCCESS,
            f'🎉 Congratulations! Game completed in {display} with {self._moves} moves! '
            f'Final score: {self._score}',
            elapsed=elapsed, elapsed_display=display, moves=self._moves, score=self._score,
            time_bonus=bonus['time_bonus'], move_bonus=bonus['move_bonus'],
        )

    def _schedule_tick(self, gen: int) -> None:
        self._scheduler.call_later(self.settings.tick_interval, lambda: self._on_tick(gen))

    def _on_tick(self, gen: int) -> None:
        with self._lock:
            # the timer stops by not rescheduling
            if gen != self.generation or self._phase != Phase.IN_PROGRESS:
                return
            elapsed = self.tick()
            self._notify('tick', {'elapsed': elapsed, 'elapsed_display': format_elapsed(elapsed)})
            self._schedule_tick(gen)
