import os

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    # Board and scoring
    TOTAL_PAIRS = int(os.environ.get('TOTAL_PAIRS', '8'))
    MATCH_POINTS = int(os.environ.get('MATCH_POINTS', '10'))
    # Completion bonus: rate points per second/move under the cap
    TIME_BONUS_CAP_SEC = int(os.environ.get('TIME_BONUS_CAP_SEC', '60'))
    TIME_BONUS_RATE = int(os.environ.get('TIME_BONUS_RATE', '2'))
    MOVE_BONUS_CAP = int(os.environ.get('MOVE_BONUS_CAP', '16'))
    MOVE_BONUS_RATE = int(os.environ.get('MOVE_BONUS_RATE', '5'))
    # Reveal and mismatch display delays (ms)
    REVEAL_DELAY_MS = int(os.environ.get('REVEAL_DELAY_MS', '500'))
    MISMATCH_DELAY_MS = int(os.environ.get('MISMATCH_DELAY_MS', '600'))
    # Timer tick interval (sec)
    TIMER_TICK_SEC = float(os.environ.get('TIMER_TICK_SEC', '1'))
    # Optional: debounce start/reset actions (ms). 0 disables.
    CONTROLLER_DEBOUNCE_MS = int(os.environ.get('CONTROLLER_DEBOUNCE_MS', '0'))
    # Grace period before a game whose owner disconnected is discarded (sec)
    OWNER_GRACE_SEC = float(os.environ.get('OWNER_GRACE_SEC', '2'))
