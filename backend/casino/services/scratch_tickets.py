"""Scratch tickets.

Slot outcomes are decided server-side when the ticket is bought; the client
only ever learns a slot's value by revealing it. A winning ticket holds
exactly one prize slot and every other slot is ``LOSS``.
"""

import random
import string
import time
from typing import List

from flask import current_app

from casino import db
from casino.errors import ApiError, Conflict, NotFound
from casino.models import Player, ScratchTicket, ScratchTicketDesign, utcnow
from . import notifications
from .wallet import apply_transaction

LOSS = 'LOSS'
_BASE36 = string.digits + string.ascii_uppercase

# OS entropy; outcomes must not be predictable from earlier tickets
_rng = random.SystemRandom()


def _base36(number: int) -> str:
    digits = ''
    while True:
        number, rem = divmod(number, 36)
        digits = _BASE36[rem] + digits
        if not number:
            return digits


def generate_ticket_number() -> str:
    suffix = ''.join(_rng.choice(_BASE36) for _ in range(8))
    return f"CK-{_base36(int(time.time() * 1000))}-{suffix}"


def generate_slots(design: ScratchTicketDesign) -> List[dict]:
    slots = [{'index': i, 'value': LOSS, 'revealed': False} for i in range(design.slot_count)]
    if _rng.random() < (design.win_probability / 100.0):
        winner = _rng.randrange(design.slot_count)
        slots[winner]['value'] = _rng.randint(design.prize_min_sc, design.prize_max_sc)
    return slots


def winning_slot(slots: List[dict]):
    for slot in slots:
        if isinstance(slot['value'], int) and slot['value'] > 0:
            return slot
    return None


def list_designs(include_disabled=False) -> List[ScratchTicketDesign]:
    query = ScratchTicketDesign.query
    if not include_disabled:
        query = query.filter_by(enabled=True)
    return query.order_by(ScratchTicketDesign.id).all()


def create_design(data: dict) -> ScratchTicketDesign:
    if data.get('win_probability') is None:
        data['win_probability'] = current_app.config.get('SCRATCH_TICKET_WIN_PROBABILITY', 16.67)
    design = ScratchTicketDesign(**data)
    db.session.add(design)
    db.session.commit()
    return design


def toggle_design(design_id: int) -> ScratchTicketDesign:
    design = db.session.get(ScratchTicketDesign, design_id)
    if design is None:
        raise NotFound('Ticket design not found')
    design.enabled = not design.enabled
    db.session.add(design)
    db.session.commit()
    return design


def purchase(player: Player, design_id: int) -> ScratchTicket:
    design = db.session.get(ScratchTicketDesign, design_id)
    if design is None or not design.enabled:
        raise NotFound('Ticket design not found or disabled')

    ticket = ScratchTicket(
        ticket_number=generate_ticket_number(),
        design_id=design.id,
        player_id=player.id,
        status='active',
        claim_status='unclaimed',
    )
    ticket.slots = generate_slots(design)
    db.session.add(ticket)
    apply_transaction(
        player, 'scratch_purchase',
        sc_amount=-design.cost_sc,
        description=f"Purchased Scratch Ticket - {design.name}",
        game_type='scratch',
    )
    current_app.logger.info(f"[scratch] player={player.id} bought ticket={ticket.ticket_number} design={design.id}")
    notifications.notify_purchase(player, float(design.cost_sc), 'SC', f"Scratch Ticket - {design.name}")
    return ticket


def get_ticket(player: Player, ticket_id: int) -> ScratchTicket:
    ticket = ScratchTicket.query.filter_by(id=ticket_id, player_id=player.id).first()
    if ticket is None:
        raise NotFound('Ticket not found')
    return ticket


def player_tickets(player: Player, limit: int = 50) -> List[ScratchTicket]:
    limit = max(1, min(int(limit or 50), 200))
    return (
        ScratchTicket.query.filter_by(player_id=player.id)
        .order_by(ScratchTicket.created_at.desc(), ScratchTicket.id.desc())
        .limit(limit)
        .all()
    )


def reveal(player: Player, ticket_id: int, slot_index: int) -> dict:
    ticket = get_ticket(player, ticket_id)
    if ticket.status != 'active':
        raise ApiError('Ticket is no longer active')
    if ticket.claim_status == 'claimed':
        raise ApiError('Ticket already claimed')

    slots = ticket.slots
    if slot_index < 0 or slot_index >= len(slots):
        raise ApiError('Invalid slot index')
    if slots[slot_index]['revealed']:
        raise ApiError('Slot already revealed')

    slots[slot_index]['revealed'] = True
    ticket.slots = slots
    db.session.add(ticket)
    db.session.commit()

    value = slots[slot_index]['value']
    return {
        'slot': slots[slot_index],
        'prize': value if isinstance(value, int) else None,
    }


def claim(player: Player, ticket_id: int) -> ScratchTicket:
    ticket = get_ticket(player, ticket_id)
    if ticket.claim_status == 'claimed':
        raise Conflict('Prize already claimed')
    slot = winning_slot(ticket.slots)
    if slot is None:
        raise ApiError('No prize on this ticket')

    prize = slot['value']
    # Only one request can move the row off 'unclaimed'; a concurrent claim updates nothing
    claimed = (
        ScratchTicket.query
        .filter_by(id=ticket.id, claim_status='unclaimed')
        .update({'claim_status': 'claimed', 'prize_sc': prize, 'claimed_at': utcnow()},
                synchronize_session=False)
    )
    if claimed != 1:
        db.session.rollback()
        raise Conflict('Prize already claimed')
    apply_transaction(
        player, 'scratch_prize',
        sc_amount=prize,
        description=f"Scratch Ticket Prize - {prize} SC",
        game_type='scratch',
    )
    current_app.logger.info(f"[scratch] player={player.id} claimed ticket={ticket.ticket_number} prize={prize}")
    notifications.notify_win(player, prize, ticket.design.name if ticket.design else 'Scratch Tickets')
    return ticket
