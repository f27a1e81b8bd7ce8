"""Daily login bonus: a seven-day reward cycle.

One ``DailyLoginBonus`` row exists per offered day. A row is ``available``
until claimed; once the cooldown has passed after a claim, the next day's row
is created lazily on the player's next visit. Missing the streak grace
window restarts the cycle at day 1.
"""

from datetime import timedelta
from decimal import Decimal

from flask import current_app
from sqlalchemy import exists
from sqlalchemy.orm import aliased

from casino import db
from casino.errors import ApiError, Conflict
from casino.models import DailyLoginBonus, Player, utcnow as _utcnow
from .wallet import apply_transaction, lock_player

DAILY_BONUS_AMOUNTS = [
    {'day': 1, 'sc': Decimal('0.5'), 'gc': Decimal('100')},
    {'day': 2, 'sc': Decimal('1'), 'gc': Decimal('200')},
    {'day': 3, 'sc': Decimal('1.5'), 'gc': Decimal('300')},
    {'day': 4, 'sc': Decimal('2'), 'gc': Decimal('400')},
    {'day': 5, 'sc': Decimal('2.5'), 'gc': Decimal('500')},
    {'day': 6, 'sc': Decimal('3'), 'gc': Decimal('750')},
    {'day': 7, 'sc': Decimal('5'), 'gc': Decimal('1000')},
]


def utcnow():
    return _utcnow()


def amounts_for_day(day: int) -> dict:
    return DAILY_BONUS_AMOUNTS[day - 1]


def next_day(day: int) -> int:
    return (day % len(DAILY_BONUS_AMOUNTS)) + 1


def _latest(player: Player):
    return (
        DailyLoginBonus.query.filter_by(player_id=player.id)
        .order_by(DailyLoginBonus.id.desc())
        .first()
    )


def _offer(player: Player, day: int, available_at) -> DailyLoginBonus:
    amounts = amounts_for_day(day)
    record = DailyLoginBonus(
        player_id=player.id,
        bonus_day=day,
        amount_sc=amounts['sc'],
        amount_gc=amounts['gc'],
        status='available',
        next_available_at=available_at,
    )
    db.session.add(record)
    db.session.commit()
    return record


def current_bonus(player: Player) -> DailyLoginBonus:
    """The bonus row the player should see now, creating it when due."""
    now = utcnow()
    latest = _latest(player)
    if latest is None:
        return _offer(player, 1, now)
    if latest.status == 'claimed' and now >= latest.next_available_at:
        grace = timedelta(hours=current_app.config.get('DAILY_BONUS_STREAK_GRACE_HOURS', 48))
        day = next_day(latest.bonus_day) if now - latest.claimed_at <= grace else 1
        return _offer(player, day, now)
    return latest


def can_claim(record: DailyLoginBonus) -> bool:
    return record.status == 'available' and utcnow() >= record.next_available_at


def claim(player: Player) -> DailyLoginBonus:
    record = current_bonus(player)
    if not can_claim(record):
        raise ApiError('Bonus not yet available to claim')

    now = utcnow()
    cooldown = timedelta(hours=current_app.config.get('DAILY_BONUS_COOLDOWN_HOURS', 24))
    lock_player(player)
    # A second offer row created by a concurrent visit must not pay out inside the cooldown
    other = aliased(DailyLoginBonus)
    cooling_down = exists().where(
        other.player_id == player.id,
        other.status == 'claimed',
        other.next_available_at > now,
    )
    claimed = (
        DailyLoginBonus.query
        .filter(DailyLoginBonus.id == record.id, DailyLoginBonus.status == 'available', ~cooling_down)
        .update({'status': 'claimed', 'claimed_at': now, 'next_available_at': now + cooldown},
                synchronize_session=False)
    )
    if claimed != 1:
        db.session.rollback()
        raise Conflict('Daily bonus already claimed')
    apply_transaction(
        player, 'daily_bonus',
        gc_amount=record.amount_gc,
        sc_amount=record.amount_sc,
        description=f"Daily Login Bonus - Day {record.bonus_day}",
    )
    current_app.logger.info(f"[daily-bonus] player={player.id} day={record.bonus_day} claimed")
    return record


def streak(player: Player) -> dict:
    latest = _latest(player)
    if latest is None:
        first = amounts_for_day(1)
        return {'streak': 0, 'nextDay': 1, 'nextBonus': {'sc': float(first['sc']), 'gc': float(first['gc'])}}
    upcoming = next_day(latest.bonus_day)
    amounts = amounts_for_day(upcoming)
    return {
        'streak': latest.bonus_day if latest.status == 'claimed' else latest.bonus_day - 1,
        'currentDay': latest.bonus_day,
        'currentBonus': {'sc': float(latest.amount_sc), 'gc': float(latest.amount_gc)},
        'nextDay': upcoming,
        'nextBonus': {'sc': float(amounts['sc']), 'gc': float(amounts['gc'])},
        'lastClaimedAt': latest.claimed_at.isoformat() if latest.claimed_at else None,
        'nextAvailableAt': latest.next_available_at.isoformat(),
    }
