"""Game domain services: board, scoring, timers and the engine.

This package contains pure domain logic that should be imported by
HTTP routes and socket handlers, keeping transport concerns separated
from core game mechanics.
"""

from .engine import GameEngine
from .registry import GameRegistry
from .scheduler import BackgroundScheduler, ManualScheduler
