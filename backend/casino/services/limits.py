from decimal import Decimal
from typing import Dict, Optional

from flask import current_app

from casino import db
from casino.errors import ApiError, LimitExceeded
from casino.models import BettingLimit

GAME_TYPES = ('slots', 'casino', 'scratch', 'pull_tabs', 'sportsbook')
DEFAULT_GAME_TYPE = 'slots'
DEFAULT_LIMITS = {
    'min_bet_sc': Decimal('0.01'),
    'max_bet_sc': Decimal('5.00'),
    'max_win_sc': Decimal('20.00'),
}


def get_limits(game_type: Optional[str]) -> Dict[str, Decimal]:
    """Limits for a game type, falling back to platform defaults."""
    game_type = game_type or DEFAULT_GAME_TYPE
    row = BettingLimit.query.filter_by(game_type=game_type).first()
    if not row:
        return dict(DEFAULT_LIMITS, game_type=game_type)
    return {
        'game_type': game_type,
        'min_bet_sc': Decimal(row.min_bet_sc),
        'max_bet_sc': Decimal(row.max_bet_sc),
        'max_win_sc': Decimal(row.max_win_sc),
    }


def serialize_limits(limits: dict) -> dict:
    return {k: (float(v) if isinstance(v, Decimal) else v) for k, v in limits.items()}


def all_limits() -> Dict[str, dict]:
    return {gt: serialize_limits(get_limits(gt)) for gt in GAME_TYPES}


def update_limits(game_type: str, min_bet_sc: Decimal, max_bet_sc: Decimal, max_win_sc: Decimal) -> BettingLimit:
    if game_type not in GAME_TYPES:
        raise ApiError(f'Unknown game type: {game_type}')
    if min_bet_sc >= max_bet_sc:
        raise ApiError('Minimum bet must be less than maximum bet')
    if max_win_sc < max_bet_sc:
        raise ApiError('Maximum win must be at least equal to maximum bet')

    row = BettingLimit.query.filter_by(game_type=game_type).first()
    if not row:
        row = BettingLimit(game_type=game_type)
    row.min_bet_sc = min_bet_sc
    row.max_bet_sc = max_bet_sc
    row.max_win_sc = max_win_sc
    db.session.add(row)
    db.session.commit()
    current_app.logger.info(
        f"[limits] game_type={game_type} min={min_bet_sc} max={max_bet_sc} max_win={max_win_sc}"
    )
    return row


def check_bet(game_type: Optional[str], stake_sc: Decimal) -> None:
    limits = get_limits(game_type)
    if stake_sc < limits['min_bet_sc']:
        raise LimitExceeded(f"Minimum bet is {limits['min_bet_sc']} SC")
    if stake_sc > limits['max_bet_sc']:
        raise LimitExceeded(f"Maximum bet is {limits['max_bet_sc']} SC")


def check_win(game_type: Optional[str], win_sc: Decimal) -> None:
    limits = get_limits(game_type)
    if win_sc > limits['max_win_sc']:
        raise LimitExceeded(f"Maximum win is {limits['max_win_sc']} SC")
