"""Wallet balances and the transaction ledger.

Every change to a player's Gold Coins or Sweeps Coins goes through
``apply_transaction``:

- the player row is locked for the duration of the change
- neither balance may go below zero
- SC bets and wins are held to the game type's betting limits
- one ``WalletTransaction`` row records the amounts and balances-after
- connected clients get a ``wallet:update`` event in the player's room

Callers that persist related rows (a purchase, a redemption decision) add
them to the session first so they commit together with the ledger entry.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

from flask import current_app
from sqlalchemy import case, func

from casino import db, socketio
from casino.errors import ApiError, InsufficientFunds
from casino.models import Player, Purchase, WalletTransaction, utcnow
from casino.schemas import TransactionType
from . import limits

TWO_PLACES = Decimal('0.01')
TRANSACTION_TYPES = {t.value for t in TransactionType}
DEBIT_TYPES = {'bet', 'withdrawal', 'redemption', 'scratch_purchase'}
CREDIT_TYPES = {'win', 'bonus', 'referral', 'achievement', 'daily_bonus', 'scratch_prize', 'deposit', 'purchase'}
# Game results; every other type is written by the server itself
PLAYER_TYPES = {'bet', 'win'}


def to_amount(value) -> Decimal:
    return Decimal(str(value or 0)).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def player_room(player_id: int) -> str:
    return f"player:{player_id}"


def wallet_snapshot(player: Player) -> dict:
    return {
        'goldCoins': float(player.gc_balance or 0),
        'sweepsCoins': float(player.sc_balance or 0),
        'lastUpdated': utcnow().isoformat() + 'Z',
    }


def notify_wallet_update(player: Player) -> None:
    socketio.emit('wallet:update', wallet_snapshot(player), to=player_room(player.id), namespace='/ws')


def lock_player(player: Player) -> Player:
    """Re-read the player row under ``SELECT ... FOR UPDATE`` until the transaction ends."""
    return (
        db.session.query(Player)
        .filter_by(id=player.id)
        .with_for_update()
        .populate_existing()
        .one()
    )


def apply_transaction(
    player: Player,
    transaction_type: str,
    gc_amount=0,
    sc_amount=0,
    description: Optional[str] = None,
    game_type: Optional[str] = None,
) -> WalletTransaction:
    """Apply signed GC/SC deltas to a player's wallet and record them."""
    if transaction_type not in TRANSACTION_TYPES:
        raise ApiError(f'Unknown transaction type: {transaction_type}')
    gc = to_amount(gc_amount)
    sc = to_amount(sc_amount)
    if not gc and not sc:
        raise ApiError('Amount cannot be zero')
    if transaction_type in DEBIT_TYPES and (gc > 0 or sc > 0):
        raise ApiError(f'Amount for {transaction_type} must be negative')
    if transaction_type in CREDIT_TYPES and (gc < 0 or sc < 0):
        raise ApiError(f'Amount for {transaction_type} must be positive')

    locked = lock_player(player)

    if transaction_type == 'bet' and sc:
        limits.check_bet(game_type, abs(sc))
    if transaction_type == 'win' and sc > 0:
        limits.check_win(game_type, sc)

    new_gc = to_amount(locked.gc_balance) + gc
    new_sc = to_amount(locked.sc_balance) + sc
    if new_gc < 0:
        raise InsufficientFunds('Insufficient gold coins')
    if new_sc < 0:
        raise InsufficientFunds('Insufficient sweeps coins')

    locked.gc_balance = new_gc
    locked.sc_balance = new_sc
    if not description:
        parts = []
        if gc:
            parts.append(f"GC {'+' if gc > 0 else ''}{gc}")
        if sc:
            parts.append(f"SC {'+' if sc > 0 else ''}{sc}")
        description = f"{transaction_type} - {' '.join(parts)}"
    entry = WalletTransaction(
        player_id=locked.id,
        transaction_type=transaction_type,
        gc_amount=gc,
        sc_amount=sc,
        gc_balance_after=new_gc,
        sc_balance_after=new_sc,
        description=description[:255],
        game_type=game_type,
    )
    db.session.add(locked)
    db.session.add(entry)
    db.session.commit()

    current_app.logger.info(
        f"[wallet] player={locked.id} type={transaction_type} gc={gc} sc={sc} gc_after={new_gc} sc_after={new_sc}"
    )
    notify_wallet_update(locked)
    return entry


def transaction_history(player: Player, limit: int = 50):
    limit = max(1, min(int(limit or 50), 500))
    return (
        WalletTransaction.query.filter_by(player_id=player.id)
        .order_by(WalletTransaction.created_at.desc(), WalletTransaction.id.desc())
        .limit(limit)
        .all()
    )


def wallet_stats(player: Player) -> dict:
    is_bet = WalletTransaction.transaction_type == 'bet'
    is_win = WalletTransaction.transaction_type == 'win'
    row = (
        db.session.query(
            func.coalesce(func.sum(case((is_bet, -WalletTransaction.sc_amount), else_=0)), 0),
            func.coalesce(func.sum(case((is_bet, -WalletTransaction.gc_amount), else_=0)), 0),
            func.coalesce(func.sum(case((is_win, WalletTransaction.sc_amount), else_=0)), 0),
            func.coalesce(func.sum(case((is_win, WalletTransaction.gc_amount), else_=0)), 0),
            func.coalesce(func.sum(case((is_bet, 1), else_=0)), 0),
        )
        .filter(WalletTransaction.player_id == player.id)
        .one()
    )
    total_spent = (
        db.session.query(func.coalesce(func.sum(Purchase.amount_usd), 0))
        .filter(Purchase.player_id == player.id, Purchase.status == 'completed')
        .scalar()
    )
    wagered_sc, wagered_gc, won_sc, won_gc, games_played = row
    return {
        'totalWageredSc': float(wagered_sc),
        'totalWageredGc': float(wagered_gc),
        'totalWonSc': float(won_sc),
        'totalWonGc': float(won_gc),
        'totalSpent': float(total_spent),
        'gamesPlayed': int(games_played),
    }
