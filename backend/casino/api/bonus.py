from flask import Blueprint, jsonify
from flask_login import login_required

from casino.auth import current_player
from casino.services import bonus as bonus_svc
from casino.services.wallet import wallet_snapshot

bonus = Blueprint('bonus', __name__)


@bonus.route('/daily', methods=['GET'])
@login_required
def get_daily_bonus():
    record = bonus_svc.current_bonus(current_player())
    payload = record.to_dict()
    payload['canClaim'] = bonus_svc.can_claim(record)
    return jsonify(payload)


@bonus.route('/daily/claim', methods=['POST'])
@login_required
def claim_daily_bonus():
    player = current_player()
    record = bonus_svc.claim(player)
    return jsonify({
        'success': True,
        'bonus': record.to_dict(),
        'wallet': wallet_snapshot(player),
        'message': f'You claimed {float(record.amount_sc)} SC and {float(record.amount_gc)} GC!',
    })


@bonus.route('/daily/streak', methods=['GET'])
@login_required
def get_bonus_streak():
    return jsonify(bonus_svc.streak(current_player()))
