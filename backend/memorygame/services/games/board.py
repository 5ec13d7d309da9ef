import random
from collections import Counter
from typing import List, Optional, Sequence

from memorygame.models import Tile, TileState

# The first eight are the classic set; the rest let larger boards work out of the box.
DEFAULT_SYMBOLS = (
    '🎯', '🎨', '🎪', '🎭', '🎸', '🎹', '🎺', '🎻',
    '🎲', '🎳', '🎬', '🎤', '🎧', '🎮', '🎱', '🎷',
)


def shuffle_in_place(items: list, rng: Optional[random.Random] = None) -> list:
    """Fisher-Yates: walk from the last index down, swapping with a uniform j in [0, i]."""
    rng = rng or random
    for i in range(len(items) - 1, 0, -1):
        j = rng.randrange(i + 1)
        items[i], items[j] = items[j], items[i]
    return items


def deal_symbols(total_pairs: int, symbols: Sequence[str] = DEFAULT_SYMBOLS,
                 rng: Optional[random.Random] = None) -> List[str]:
    """Pick `total_pairs` distinct symbols, double them up and shuffle."""
    if total_pairs < 1:
        raise ValueError('total_pairs must be positive')
    alphabet = list(dict.fromkeys(symbols))
    if len(alphabet) < total_pairs:
        raise ValueError(
            f'need at least {total_pairs} distinct symbols, got {len(alphabet)}'
        )
    rng = rng or random
    chosen = rng.sample(alphabet, total_pairs)
    return shuffle_in_place(chosen + chosen, rng)


def build_board(total_pairs: int, symbols: Sequence[str] = DEFAULT_SYMBOLS,
                rng: Optional[random.Random] = None) -> List[Tile]:
    tokens = deal_symbols(total_pairs, symbols, rng)
    board = [Tile(position=i, symbol=s) for i, s in enumerate(tokens)]
    check_board(board, total_pairs)
    return board


def check_board(board: Sequence[Tile], total_pairs: int) -> None:
    assert len(board) == 2 * total_pairs
    counts = Counter(t.symbol for t in board)
    assert len(counts) == total_pairs
    assert all(n == 2 for n in counts.values())
    for i, tile in enumerate(board):
        assert tile.position == i
        if tile.mismatched:
            assert tile.state == TileState.REVEALED
