from flask import Blueprint, current_app, jsonify, request
from sqlalchemy import func, or_

from casino import db
from casino.auth import admin_required, current_player
from casino.errors import ApiError, NotFound
from casino.models import (
    Game,
    KycDocument,
    Player,
    RedemptionRequest,
    SecurityAlert,
    WalletTransaction,
)
from casino.schemas import (
    BalanceAdjustmentRequest,
    BettingLimitsRequest,
    GameRtpRequest,
    KycApproveRequest,
    PackCreateRequest,
    PackUpdateRequest,
    PaymentMethodCreateRequest,
    PaymentMethodUpdateRequest,
    PlayerStatusRequest,
    RedemptionApproveRequest,
    RedemptionRejectRequest,
    ScratchDesignRequest,
)
from casino.services import kyc as kyc_svc
from casino.services import limits
from casino.services import notifications
from casino.services import redemptions as redemption_svc
from casino.services import scratch_tickets as ticket_svc
from casino.services.store import store_service
from casino.services.wallet import apply_transaction, transaction_history, wallet_snapshot

admin = Blueprint('admin', __name__)


def _body():
    return request.get_json(silent=True) or {}


def _get_player(player_id: int) -> Player:
    player = db.session.get(Player, player_id)
    if player is None:
        raise NotFound('Player not found')
    return player


def _get_game(game_id: int) -> Game:
    game = db.session.get(Game, game_id)
    if game is None:
        raise NotFound('Game not found')
    return game


# ===== DASHBOARD =====

@admin.route('/dashboard/stats', methods=['GET'])
@admin_required
def dashboard_stats():
    players = Player.query.filter_by(role='player')
    total, avg_gc, avg_sc, sum_gc, sum_sc = (
        db.session.query(
            func.count(Player.id),
            func.coalesce(func.avg(Player.gc_balance), 0),
            func.coalesce(func.avg(Player.sc_balance), 0),
            func.coalesce(func.sum(Player.gc_balance), 0),
            func.coalesce(func.sum(Player.sc_balance), 0),
        )
        .filter(Player.role == 'player')
        .one()
    )
    return jsonify({
        'success': True,
        'data': {
            'totalPlayers': int(total),
            'activePlayers': players.filter_by(status='Active').count(),
            'verifiedPlayers': players.filter_by(kyc_verified=True).count(),
            'averageGcBalance': round(float(avg_gc), 2),
            'averageScBalance': round(float(avg_sc), 2),
            'totalGcBalance': float(sum_gc),
            'totalScBalance': float(sum_sc),
            'pendingRedemptions': RedemptionRequest.query.filter_by(status='pending').count(),
            'pendingKycDocuments': KycDocument.query.filter_by(status='pending').count(),
            'openAlerts': SecurityAlert.query.filter_by(status='open').count(),
        },
    })


# ===== PLAYERS =====

@admin.route('/players', methods=['GET'])
@admin_required
def list_players():
    query = Player.query.filter_by(role='player')
    q = (request.args.get('q') or '').strip()
    if q:
        pattern = f'%{q}%'
        query = query.filter(or_(
            Player.username.ilike(pattern),
            Player.email.ilike(pattern),
            Player.name.ilike(pattern),
        ))
    status = request.args.get('status')
    if status:
        query = query.filter_by(status=status)
    page = max(request.args.get('page', default=1, type=int), 1)
    per_page = max(1, min(request.args.get('per_page', default=25, type=int), 100))
    result = query.order_by(Player.join_date.desc(), Player.id.desc()).paginate(
        page=page, per_page=per_page, error_out=False
    )
    return jsonify({
        'success': True,
        'data': [p.to_dict() for p in result.items],
        'pagination': {'page': page, 'per_page': per_page, 'total': result.total, 'pages': result.pages},
    })


@admin.route('/players/<int:player_id>', methods=['GET'])
@admin_required
def get_player(player_id):
    player = _get_player(player_id)
    payload = player.to_dict()
    payload['recentTransactions'] = [t.to_dict() for t in transaction_history(player, 20)]
    return jsonify({'success': True, 'data': payload})


@admin.route('/players/<int:player_id>/balance', methods=['POST'])
@admin_required
def adjust_balance(player_id):
    data = BalanceAdjustmentRequest.model_validate(_body())
    player = _get_player(player_id)
    entry = apply_transaction(
        player, 'adjustment',
        gc_amount=data.gc_amount,
        sc_amount=data.sc_amount,
        description=f'Admin adjustment: {data.reason}',
    )
    current_app.logger.info(
        f"[admin] admin={current_player().id} adjusted player={player.id} gc={data.gc_amount} sc={data.sc_amount}"
    )
    return jsonify({'success': True, 'transaction': entry.to_dict(), 'wallet': wallet_snapshot(player)})


@admin.route('/players/<int:player_id>/status', methods=['POST'])
@admin_required
def set_player_status(player_id):
    data = PlayerStatusRequest.model_validate(_body())
    player = _get_player(player_id)
    if player.id == current_player().id:
        raise ApiError('You cannot change your own status')
    player.status = data.status.value
    db.session.add(player)
    db.session.commit()
    if player.status != 'Active':
        notifications.create_security_alert(
            'ACCOUNT_STATUS', 'medium',
            f'Player {player.username} set to {player.status}',
            data.reason or 'Status changed by admin',
            player_id=player.id,
        )
    current_app.logger.info(f"[admin] player={player.id} status={player.status}")
    return jsonify({'success': True, 'data': player.to_dict()})


# ===== LEDGER & ALERTS =====

@admin.route('/transactions', methods=['GET'])
@admin_required
def list_transactions():
    limit = max(1, min(request.args.get('limit', default=100, type=int), 500))
    rows = (
        WalletTransaction.query
        .order_by(WalletTransaction.created_at.desc(), WalletTransaction.id.desc())
        .limit(limit)
        .all()
    )
    return jsonify({'success': True, 'data': [t.to_dict() for t in rows]})


@admin.route('/alerts', methods=['GET'])
@admin_required
def list_alerts():
    limit = max(1, min(request.args.get('limit', default=50, type=int), 500))
    rows = (
        SecurityAlert.query
        .order_by(SecurityAlert.created_at.desc(), SecurityAlert.id.desc())
        .limit(limit)
        .all()
    )
    return jsonify({'success': True, 'data': [a.to_dict() for a in rows]})


@admin.route('/alerts/<int:alert_id>/resolve', methods=['POST'])
@admin_required
def resolve_alert(alert_id):
    alert = db.session.get(SecurityAlert, alert_id)
    if alert is None:
        raise NotFound('Alert not found')
    return jsonify({'success': True, 'data': notifications.resolve_security_alert(alert).to_dict()})


# ===== KYC =====

@admin.route('/kyc/<int:player_id>', methods=['GET'])
@admin_required
def get_kyc_documents(player_id):
    player = _get_player(player_id)
    return jsonify({'success': True, 'data': [d.to_dict() for d in kyc_svc.list_documents(player)]})


@admin.route('/kyc/approve', methods=['POST'])
@admin_required
def approve_kyc():
    data = KycApproveRequest.model_validate(_body())
    player = kyc_svc.approve(_get_player(data.player_id), data.level.value)
    return jsonify({'success': True, 'data': player.to_dict()})


# ===== REDEMPTIONS =====

@admin.route('/redemptions', methods=['GET'])
@admin_required
def list_redemptions():
    rows = redemption_svc.list_redemptions(request.args.get('status'))
    return jsonify({'success': True, 'data': [r.to_dict(include_player=True) for r in rows]})


@admin.route('/redemptions/<int:redemption_id>/approve', methods=['POST'])
@admin_required
def approve_redemption(redemption_id):
    data = RedemptionApproveRequest.model_validate(_body())
    redemption = redemption_svc.approve(current_player(), redemption_id, data.notes)
    return jsonify({'success': True, 'data': redemption.to_dict(include_player=True)})


@admin.route('/redemptions/<int:redemption_id>/reject', methods=['POST'])
@admin_required
def reject_redemption(redemption_id):
    data = RedemptionRejectRequest.model_validate(_body())
    redemption = redemption_svc.reject(current_player(), redemption_id, data.reason)
    return jsonify({'success': True, 'data': redemption.to_dict(include_player=True)})


# ===== GAMES & LIMITS =====

@admin.route('/games', methods=['GET'])
@admin_required
def list_all_games():
    rows = Game.query.order_by(Game.category, Game.name).all()
    return jsonify({'success': True, 'data': [g.to_dict() for g in rows]})


@admin.route('/games/<int:game_id>/rtp', methods=['POST'])
@admin_required
def set_game_rtp(game_id):
    data = GameRtpRequest.model_validate(_body())
    game = _get_game(game_id)
    game.rtp = data.rtp
    db.session.add(game)
    db.session.commit()
    current_app.logger.info(f"[admin] game={game.id} rtp={game.rtp}")
    return jsonify({'success': True, 'data': game.to_dict()})


@admin.route('/games/<int:game_id>/toggle', methods=['POST'])
@admin_required
def toggle_game(game_id):
    game = _get_game(game_id)
    game.enabled = not game.enabled
    db.session.add(game)
    db.session.commit()
    return jsonify({'success': True, 'data': game.to_dict()})


@admin.route('/betting-limits', methods=['PUT'])
@admin_required
def update_betting_limits():
    data = BettingLimitsRequest.model_validate(_body())
    row = limits.update_limits(data.game_type.value, data.min_bet_sc, data.max_bet_sc, data.max_win_sc)
    return jsonify({'success': True, 'data': row.to_dict()})


# ===== STORE =====

@admin.route('/store/packs', methods=['GET'])
@admin_required
def admin_list_packs():
    return jsonify({'success': True, 'data': [p.to_dict() for p in store_service.list_packages()]})


@admin.route('/store/packs', methods=['POST'])
@admin_required
def admin_create_pack():
    data = PackCreateRequest.model_validate(_body())
    pack = store_service.create_package(data.model_dump())
    return jsonify({'success': True, 'data': pack.to_dict()}), 201


@admin.route('/store/packs/<int:pack_id>', methods=['PUT'])
@admin_required
def admin_update_pack(pack_id):
    data = PackUpdateRequest.model_validate(_body())
    pack = store_service.update_package(pack_id, data.model_dump(exclude_unset=True))
    if pack is None:
        raise NotFound('Pack not found')
    return jsonify({'success': True, 'data': pack.to_dict()})


@admin.route('/store/packs/<int:pack_id>', methods=['DELETE'])
@admin_required
def admin_delete_pack(pack_id):
    if not store_service.delete_package(pack_id):
        raise NotFound('Pack not found')
    return jsonify({'success': True})


@admin.route('/store/payment-methods', methods=['GET'])
@admin_required
def admin_list_payment_methods():
    methods = store_service.list_payment_methods()
    return jsonify({'success': True, 'data': [m.to_dict() for m in methods]})


@admin.route('/store/payment-methods', methods=['POST'])
@admin_required
def admin_create_payment_method():
    data = PaymentMethodCreateRequest.model_validate(_body())
    method = store_service.create_payment_method(data.model_dump())
    return jsonify({'success': True, 'data': method.to_dict()}), 201


@admin.route('/store/payment-methods/<int:method_id>', methods=['PUT'])
@admin_required
def admin_update_payment_method(method_id):
    data = PaymentMethodUpdateRequest.model_validate(_body())
    method = store_service.update_payment_method(method_id, data.model_dump(exclude_unset=True))
    if method is None:
        raise NotFound('Payment method not found')
    return jsonify({'success': True, 'data': method.to_dict()})


@admin.route('/store/payment-methods/<int:method_id>', methods=['DELETE'])
@admin_required
def admin_delete_payment_method(method_id):
    if not store_service.delete_payment_method(method_id):
        raise NotFound('Payment method not found')
    return jsonify({'success': True})


# ===== SCRATCH TICKETS =====

@admin.route('/scratch-tickets/designs', methods=['GET'])
@admin_required
def admin_list_designs():
    designs = ticket_svc.list_designs(include_disabled=True)
    return jsonify({'success': True, 'data': [d.to_dict() for d in designs]})


@admin.route('/scratch-tickets/designs', methods=['POST'])
@admin_required
def admin_create_design():
    data = ScratchDesignRequest.model_validate(_body())
    design = ticket_svc.create_design(data.model_dump())
    return jsonify({'success': True, 'data': design.to_dict()}), 201


@admin.route('/scratch-tickets/designs/<int:design_id>/toggle', methods=['POST'])
@admin_required
def admin_toggle_design(design_id):
    return jsonify({'success': True, 'data': ticket_svc.toggle_design(design_id).to_dict()})
