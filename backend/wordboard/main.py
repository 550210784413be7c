from flask import Blueprint, current_app, jsonify

main = Blueprint('main', __name__)


@main.route('/')
def index():
    return jsonify({'message': 'Welcome to the wordboard game server!'})


@main.route('/stats')
def stats():
    return jsonify(current_app.extensions['usage_stats'].get_stats())
