from flask import Blueprint, current_app, jsonify

games = Blueprint('games', __name__)


@games.route('/<string:game_key>', methods=['GET'])
def get_game_state(game_key):
    """Read-only view of a live session, the same payload GAME_STATE carries."""
    registry = current_app.extensions['board_gateway'].registry
    session = registry.get(game_key)
    if session is None:
        return jsonify({'error': 'Game not found'}), 404
    with session.lock:
        return jsonify(session.to_dict())
