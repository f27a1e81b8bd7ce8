from flask import Blueprint, jsonify, request
from flask_login import login_required

from casino.auth import current_player
from casino.schemas import ScratchPurchaseRequest, ScratchRevealRequest
from casino.services import scratch_tickets as ticket_svc
from casino.services.wallet import wallet_snapshot

scratch_tickets = Blueprint('scratch_tickets', __name__)


@scratch_tickets.route('/designs', methods=['GET'])
def get_designs():
    return jsonify({'success': True, 'data': [d.to_dict() for d in ticket_svc.list_designs()]})


@scratch_tickets.route('/purchase', methods=['POST'])
@login_required
def purchase_ticket():
    data = ScratchPurchaseRequest.model_validate(request.get_json(silent=True) or {})
    player = current_player()
    ticket = ticket_svc.purchase(player, data.design_id)
    return jsonify({'success': True, 'ticket': ticket.to_dict(), 'wallet': wallet_snapshot(player)}), 201


@scratch_tickets.route('', methods=['GET'])
@login_required
def get_my_tickets():
    limit = request.args.get('limit', default=50, type=int)
    tickets = ticket_svc.player_tickets(current_player(), limit)
    return jsonify({'success': True, 'data': [t.to_dict() for t in tickets]})


@scratch_tickets.route('/<int:ticket_id>', methods=['GET'])
@login_required
def get_ticket(ticket_id):
    ticket = ticket_svc.get_ticket(current_player(), ticket_id)
    return jsonify({'success': True, 'data': ticket.to_dict()})


@scratch_tickets.route('/<int:ticket_id>/reveal', methods=['POST'])
@login_required
def reveal_slot(ticket_id):
    data = ScratchRevealRequest.model_validate(request.get_json(silent=True) or {})
    result = ticket_svc.reveal(current_player(), ticket_id, data.slot_index)
    return jsonify({'success': True, **result})


@scratch_tickets.route('/<int:ticket_id>/claim', methods=['POST'])
@login_required
def claim_prize(ticket_id):
    player = current_player()
    ticket = ticket_svc.claim(player, ticket_id)
    return jsonify({
        'success': True,
        'prizeAmount': float(ticket.prize_sc),
        'ticket': ticket.to_dict(reveal_all=True),
        'wallet': wallet_snapshot(player),
    })
