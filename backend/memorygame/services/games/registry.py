import random
import string
import threading
from typing import Callable, Dict, Optional

from .engine import GameEngine


def generate_game_code(taken, length=4):
    """Generate a unique, short game code."""
    while True:
        code = ''.join(random.choices(string.ascii_uppercase + string.digits, k=length))
        if code not in taken:
            return code


class GameRegistry:
    """In-memory game sessions keyed by game code. Nothing outlives the process."""

    def __init__(self, engine_factory: Callable[[], GameEngine]):
        self._engine_factory = engine_factory
        self._games: Dict[str, GameEngine] = {}
        self._lock = threading.Lock()

    def create(self):
        with self._lock:
            code = generate_game_code(self._games)
            engine = self._engine_factory()
            self._games[code] = engine
        return code, engine

    def get(self, game_code: Optional[str]) -> Optional[GameEngine]:
        if not isinstance(game_code, str) or not game_code:
            return None
        return self._games.get(game_code.upper())

    def discard(self, game_code: str) -> Optional[GameEngine]:
        if not isinstance(game_code, str):
            return None
        with self._lock:
            return self._games.pop(game_code.upper(), None)

    def __contains__(self, game_code) -> bool:
        return self.get(game_code) is not None

    def __len__(self) -> int:
        return len(self._games)
