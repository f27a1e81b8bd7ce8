from flask import Blueprint, jsonify, request
from flask_login import login_required

from casino.auth import current_player
from casino.schemas import PurchaseRequest
from casino.services.store import store_service
from casino.services.wallet import wallet_snapshot

store = Blueprint('store', __name__)


@store.route('/packs', methods=['GET'])
def get_packs():
    packs = store_service.list_active_packages()
    return jsonify({'success': True, 'data': [p.to_dict() for p in packs]})


@store.route('/payment-methods', methods=['GET'])
def get_payment_methods():
    methods = store_service.list_active_payment_methods()
    # Players only need to pick a method; provider config stays server-side
    data = [{'id': m.id, 'name': m.name, 'provider': m.provider} for m in methods]
    return jsonify({'success': True, 'data': data})


@store.route('/purchase', methods=['POST'])
@login_required
def purchase():
    data = PurchaseRequest.model_validate(request.get_json(silent=True) or {})
    player = current_player()
    record = store_service.purchase_package(player, data.pack_id, data.payment_method_id)
    return jsonify({
        'success': True,
        'data': {
            'message': f'Successfully purchased {record.pack_title}!',
            'purchase_id': record.id,
            'purchase': record.to_dict(),
            'wallet': wallet_snapshot(player),
        },
    }), 201


@store.route('/history', methods=['GET'])
@login_required
def get_purchase_history():
    limit = request.args.get('limit', default=20, type=int)
    rows = store_service.purchase_history(current_player(), limit)
    return jsonify({'success': True, 'data': [row.to_dict() for row in rows]})
