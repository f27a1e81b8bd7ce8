from flask import Blueprint, jsonify, request
from flask_login import login_required

from casino.auth import current_player
from casino.errors import Forbidden
from casino.schemas import WalletUpdateRequest
from casino.services import wallet as wallet_svc

wallet = Blueprint('wallet', __name__)


@wallet.route('', methods=['GET'])
@login_required
def get_wallet():
    return jsonify({'success': True, 'data': wallet_svc.wallet_snapshot(current_player())})


@wallet.route('/update', methods=['POST'])
@login_required
def update_wallet():
    data = WalletUpdateRequest.model_validate(request.get_json(silent=True) or {})
    if data.type.value not in wallet_svc.PLAYER_TYPES:
        raise Forbidden(f"Transaction type '{data.type.value}' cannot be submitted by players")
    player = current_player()
    gc_amount = data.amount if data.currency.value == 'GC' else 0
    sc_amount = data.amount if data.currency.value == 'SC' else 0
    wallet_svc.apply_transaction(
        player,
        data.type.value,
        gc_amount=gc_amount,
        sc_amount=sc_amount,
        description=data.description,
        game_type=data.game_type.value if data.game_type else None,
    )
    return jsonify({'success': True, 'data': wallet_svc.wallet_snapshot(player)})


@wallet.route('/transactions', methods=['GET'])
@login_required
def get_transactions():
    limit = request.args.get('limit', default=50, type=int)
    rows = wallet_svc.transaction_history(current_player(), limit)
    return jsonify({'success': True, 'data': [row.to_dict() for row in rows]})


@wallet.route('/stats', methods=['GET'])
@login_required
def get_wallet_stats():
    return jsonify({'success': True, 'data': wallet_svc.wallet_stats(current_player())})
