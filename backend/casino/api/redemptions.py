from flask import Blueprint, jsonify, request
from flask_login import login_required

from casino.auth import current_player
from casino.schemas import RedemptionCreateRequest
from casino.services import redemptions as redemption_svc

redemptions = Blueprint('redemptions', __name__)


@redemptions.route('', methods=['POST'])
@login_required
def create_redemption():
    data = RedemptionCreateRequest.model_validate(request.get_json(silent=True) or {})
    redemption = redemption_svc.request_redemption(
        current_player(), data.amount_sc, data.method, data.destination
    )
    return jsonify({'success': True, 'data': redemption.to_dict()}), 201


@redemptions.route('', methods=['GET'])
@login_required
def list_my_redemptions():
    rows = redemption_svc.player_redemptions(current_player())
    return jsonify({'success': True, 'data': [r.to_dict() for r in rows]})


@redemptions.route('/<int:redemption_id>/cancel', methods=['POST'])
@login_required
def cancel_redemption(redemption_id):
    redemption = redemption_svc.cancel(current_player(), redemption_id)
    return jsonify({'success': True, 'data': redemption.to_dict()})
