from typing import Dict

from memorygame.models import Phase
from .engine import GameEngine


def play_perfect_memory(engine: GameEngine, think_time: float = 1.0, max_moves: int = 1000) -> Dict:
    """Play the current game to completion, remembering every face seen.

    Only symbols the engine shows face up are used, so the run is what a
    player with perfect memory would do. Needs a ManualScheduler, since the
    clock is advanced between moves. Returns the final snapshot.
    """
    settings = engine.settings
    scheduler = engine.scheduler
    if engine.phase != Phase.IN_PROGRESS:
        engine.start_new_game()
    seen: Dict[int, str] = {}

    def reveal(position):
        engine.select_tile(position)
        symbol = engine.to_dict()['tiles'][position]['symbol']
        seen[position] = symbol
        return symbol

    while engine.phase == Phase.IN_PROGRESS and engine.moves < max_moves:
        hidden = [t['position'] for t in engine.to_dict()['tiles'] if t['state'] == 'hidden']
        known = {}
        pair = None
        for pos in hidden:
            if pos in seen:
                other = known.setdefault(seen[pos], pos)
                if other != pos:
                    pair = (other, pos)
                    break

        if pair:
            reveal(pair[0])
            reveal(pair[1])
        else:
            unseen = [p for p in hidden if p not in seen] or hidden
            first = unseen[0]
            symbol = reveal(first)
            partner = next((p for p in hidden if p != first and seen.get(p) == symbol), None)
            if partner is None:
                partner = next(p for p in unseen + hidden if p != first)
            reveal(partner)

        scheduler.advance(settings.reveal_delay + settings.mismatch_delay + think_time)

    return engine.to_dict()
