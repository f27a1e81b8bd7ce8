from flask import Blueprint, jsonify, request

from casino.models import Game
from casino.services import limits

games = Blueprint('games', __name__)


@games.route('/games', methods=['GET'])
def list_games():
    query = Game.query.filter_by(enabled=True)
    category = request.args.get('category')
    if category:
        query = query.filter(Game.category.ilike(category))
    rows = query.order_by(Game.category, Game.name).all()
    return jsonify({'success': True, 'data': [g.to_dict() for g in rows]})


@games.route('/betting-limits', methods=['GET'])
def get_betting_limits():
    game_type = request.args.get('game_type')
    if game_type:
        return jsonify({'success': True, 'data': limits.serialize_limits(limits.get_limits(game_type))})
    return jsonify({'success': True, 'data': limits.all_limits()})
