"""Sweeps Coins redemptions.

Only SC is redeemable. A request holds nothing on submission; the balance is
debited when an admin approves it, after re-checking that the player can
still cover it.
"""

from decimal import Decimal
from typing import List, Optional

from flask import current_app
from sqlalchemy import func

from casino import db
from casino.errors import Conflict, Forbidden, InsufficientFunds, LimitExceeded, NotFound
from casino.models import Player, RedemptionRequest, utcnow
from . import notifications
from .wallet import apply_transaction, to_amount

STATUSES = ('pending', 'approved', 'rejected', 'cancelled')


def pending_total(player: Player, exclude_id: int = None) -> Decimal:
    query = db.session.query(func.coalesce(func.sum(RedemptionRequest.amount_sc), 0)).filter(
        RedemptionRequest.player_id == player.id,
        RedemptionRequest.status == 'pending',
    )
    if exclude_id is not None:
        query = query.filter(RedemptionRequest.id != exclude_id)
    return to_amount(query.scalar())


def request_redemption(player: Player, amount_sc, method: str, destination: str = None) -> RedemptionRequest:
    if not player.kyc_verified:
        raise Forbidden('KYC verification is required before redeeming Sweeps Coins')
    amount = to_amount(amount_sc)
    minimum = to_amount(current_app.config.get('MIN_REDEMPTION_SC', 100))
    if amount < minimum:
        raise LimitExceeded(f'Minimum redemption is {minimum} SC')
    if pending_total(player) + amount > to_amount(player.sc_balance):
        raise InsufficientFunds('Insufficient sweeps coins')

    redemption = RedemptionRequest(
        player_id=player.id,
        amount_sc=amount,
        method=method,
        destination=destination,
        status='pending',
    )
    db.session.add(redemption)
    db.session.commit()
    current_app.logger.info(f"[redemption] player={player.id} requested id={redemption.id} sc={amount}")
    return redemption


def get_redemption(redemption_id: int) -> RedemptionRequest:
    redemption = db.session.get(RedemptionRequest, redemption_id)
    if redemption is None:
        raise NotFound('Redemption request not found')
    return redemption


def player_redemptions(player: Player) -> List[RedemptionRequest]:
    return (
        RedemptionRequest.query.filter_by(player_id=player.id)
        .order_by(RedemptionRequest.submitted_at.desc(), RedemptionRequest.id.desc())
        .all()
    )


def list_redemptions(status: Optional[str] = None) -> List[RedemptionRequest]:
    query = RedemptionRequest.query
    if status:
        query = query.filter_by(status=status)
    return query.order_by(RedemptionRequest.submitted_at.desc(), RedemptionRequest.id.desc()).all()


def _require_pending(redemption: RedemptionRequest) -> None:
    if redemption.status != 'pending':
        raise Conflict(f'Redemption request is already {redemption.status}')


def _decide(redemption: RedemptionRequest, status: str, **values) -> None:
    """Move a pending request to ``status`` inside the open transaction; the caller commits."""
    moved = (
        RedemptionRequest.query
        .filter_by(id=redemption.id, status='pending')
        .update(dict(values, status=status, decided_at=utcnow()), synchronize_session=False)
    )
    if moved != 1:
        db.session.rollback()
        current = db.session.get(RedemptionRequest, redemption.id)
        raise Conflict(f'Redemption request is already {current.status}')


def cancel(player: Player, redemption_id: int) -> RedemptionRequest:
    redemption = get_redemption(redemption_id)
    if redemption.player_id != player.id:
        raise NotFound('Redemption request not found')
    _require_pending(redemption)
    _decide(redemption, 'cancelled')
    db.session.commit()
    return redemption


def approve(admin: Player, redemption_id: int, notes: str = None) -> RedemptionRequest:
    redemption = get_redemption(redemption_id)
    _require_pending(redemption)
    player = redemption.player

    _decide(redemption, 'approved', notes=notes, decided_by=admin.id)
    # Commits the decision together with the debit; raises if the balance no longer covers it
    apply_transaction(
        player, 'redemption',
        sc_amount=-to_amount(redemption.amount_sc),
        description=f"Redemption #{redemption.id} via {redemption.method}",
    )
    current_app.logger.info(f"[redemption] id={redemption.id} approved by admin={admin.id}")
    notifications.notify_redemption_decision(player, redemption, approved=True)
    return redemption


def reject(admin: Player, redemption_id: int, reason: str) -> RedemptionRequest:
    redemption = get_redemption(redemption_id)
    _require_pending(redemption)
    _decide(redemption, 'rejected', rejected_reason=reason, decided_by=admin.id)
    db.session.commit()
    current_app.logger.info(f"[redemption] id={redemption.id} rejected by admin={admin.id}")
    notifications.notify_redemption_decision(redemption.player, redemption, approved=False)
    return redemption
