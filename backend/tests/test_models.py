from config import Config
from memorygame.models import GameSettings, StatusCategory, StatusMessage, Tile, TileState


def test_settings_from_flask_config():
    settings = GameSettings.from_config({
        'TOTAL_PAIRS': '6',
        'REVEAL_DELAY_MS': 250,
        'MISMATCH_DELAY_MS': '0',
        'SYMBOLS': ['a', 'b', 'c', 'd', 'e', 'f'],
    })
    assert settings.total_pairs == 6
    assert settings.reveal_delay == 0.25
    assert settings.mismatch_delay == 0.0
    assert settings.match_points == 10
    assert settings.symbols == ('a', 'b', 'c', 'd', 'e', 'f')


def test_default_config_matches_default_settings():
    assert GameSettings.from_config(vars(Config)) == GameSettings()


def test_tile_hides_symbol_until_face_up():
    tile = Tile(position=3, symbol='🎯')
    assert tile.to_dict() == {'position': 3, 'state': 'hidden', 'mismatched': False, 'symbol': None}
    tile.state = TileState.MATCHED
    assert tile.to_dict()['symbol'] == '🎯'


def test_status_message_to_dict():
    msg = StatusMessage('pair_matched', StatusCategory.SUCCESS, 'Great! 3 pairs remaining.', {'remaining': 3})
    assert msg.to_dict() == {
        'event': 'pair_matched',
        'category': 'success',
        'text': 'Great! 3 pairs remaining.',
        'data': {'remaining': 3},
    }
