import re
from decimal import Decimal

import pytest
from sqlalchemy.orm.attributes import set_committed_value

from casino import db
from casino.errors import Conflict
from casino.models import Player, ScratchTicket, ScratchTicketDesign, SecurityAlert, WalletTransaction
from casino.services import scratch_tickets as ticket_svc


def _design(win_probability, enabled=True, prize=5):
    design = ScratchTicketDesign(
        name='Lucky Sevens' if win_probability else 'Dud Deluxe',
        cost_sc=Decimal('1'),
        slot_count=6,
        win_probability=win_probability,
        prize_min_sc=prize,
        prize_max_sc=prize,
        enabled=enabled,
    )
    db.session.add(design)
    db.session.commit()
    return design.id


@pytest.fixture()
def funded(register_player, fund):
    player, headers = register_player('alice')
    fund(player['id'], sc=10)
    return player, headers


def _buy(client, headers, design_id):
    res = client.post('/api/scratch-tickets/purchase', json={'design_id': design_id}, headers=headers)
    assert res.status_code == 201, res.get_json()
    return res.get_json()


def test_generate_slots_winner_has_single_prize(flask_app):
    design = ScratchTicketDesign(slot_count=6, win_probability=100, prize_min_sc=1, prize_max_sc=10)
    slots = ticket_svc.generate_slots(design)
    prizes = [s for s in slots if s['value'] != ticket_svc.LOSS]
    assert len(slots) == 6
    assert len(prizes) == 1
    assert 1 <= prizes[0]['value'] <= 10
    assert not any(s['revealed'] for s in slots)


def test_generate_slots_losing_ticket(flask_app):
    design = ScratchTicketDesign(slot_count=4, win_probability=0, prize_min_sc=1, prize_max_sc=10)
    slots = ticket_svc.generate_slots(design)
    assert all(s['value'] == ticket_svc.LOSS for s in slots)
    assert ticket_svc.winning_slot(slots) is None


def test_ticket_number_format(flask_app):
    number = ticket_svc.generate_ticket_number()
    assert re.fullmatch(r'CK-[0-9A-Z]+-[0-9A-Z]{8}', number)
    assert number != ticket_svc.generate_ticket_number()


def test_designs_lists_enabled_only(client):
    _design(100)
    _design(0, enabled=False)
    designs = client.get('/api/scratch-tickets/designs').get_json()['data']
    assert [d['name'] for d in designs] == ['Lucky Sevens']


def test_purchase_hides_slot_values_and_debits(client, funded):
    design_id = _design(100)
    _, headers = funded
    body = _buy(client, headers, design_id)
    assert body['wallet']['sweepsCoins'] == 9
    ticket = body['ticket']
    assert ticket['status'] == 'active'
    assert ticket['claim_status'] == 'unclaimed'
    assert all(s['value'] is None for s in ticket['slots'])

    txns = client.get('/api/wallet/transactions', headers=headers).get_json()['data']
    assert txns[0]['type'] == 'scratch_purchase'
    assert txns[0]['game_type'] == 'scratch'
    assert SecurityAlert.query.filter_by(alert_type='PURCHASE').count() == 1


def test_purchase_without_funds(client, register_player):
    design_id = _design(100)
    _, headers = register_player('bob')
    res = client.post('/api/scratch-tickets/purchase', json={'design_id': design_id}, headers=headers)
    assert res.status_code == 400
    assert res.get_json()['error'] == 'Insufficient sweeps coins'


def test_purchase_disabled_design(client, funded):
    design_id = _design(100, enabled=False)
    _, headers = funded
    res = client.post('/api/scratch-tickets/purchase', json={'design_id': design_id}, headers=headers)
    assert res.status_code == 404
    assert res.get_json()['error'] == 'Ticket design not found or disabled'


def test_reveal_and_claim_winning_ticket(client, funded):
    design_id = _design(100, prize=5)
    _, headers = funded
    ticket_id = _buy(client, headers, design_id)['ticket']['id']

    prizes = []
    for index in range(6):
        res = client.post(f'/api/scratch-tickets/{ticket_id}/reveal', json={'slot_index': index}, headers=headers)
        assert res.status_code == 200
        prizes.append(res.get_json()['prize'])
    assert [p for p in prizes if p is not None] == [5]

    res = client.post(f'/api/scratch-tickets/{ticket_id}/reveal', json={'slot_index': 0}, headers=headers)
    assert res.status_code == 400
    assert res.get_json()['error'] == 'Slot already revealed'

    res = client.post(f'/api/scratch-tickets/{ticket_id}/claim', headers=headers)
    assert res.status_code == 200
    body = res.get_json()
    assert body['prizeAmount'] == 5
    assert body['wallet']['sweepsCoins'] == 14
    assert body['ticket']['claim_status'] == 'claimed'

    res = client.post(f'/api/scratch-tickets/{ticket_id}/claim', headers=headers)
    assert res.status_code == 409
    assert res.get_json()['error'] == 'Prize already claimed'

    res = client.post(f'/api/scratch-tickets/{ticket_id}/reveal', json={'slot_index': 1}, headers=headers)
    assert res.status_code == 400


def test_claim_losing_ticket(client, funded):
    design_id = _design(0)
    _, headers = funded
    ticket_id = _buy(client, headers, design_id)['ticket']['id']
    res = client.post(f'/api/scratch-tickets/{ticket_id}/claim', headers=headers)
    assert res.status_code == 400
    assert res.get_json()['error'] == 'No prize on this ticket'


def test_reveal_invalid_slot(client, funded):
    design_id = _design(0)
    _, headers = funded
    ticket_id = _buy(client, headers, design_id)['ticket']['id']
    res = client.post(f'/api/scratch-tickets/{ticket_id}/reveal', json={'slot_index': 6}, headers=headers)
    assert res.status_code == 400
    assert res.get_json()['error'] == 'Invalid slot index'


def test_tickets_are_private(client, funded, register_player):
    design_id = _design(0)
    _, headers = funded
    ticket_id = _buy(client, headers, design_id)['ticket']['id']

    _, other_headers = register_player('bob')
    assert client.get(f'/api/scratch-tickets/{ticket_id}', headers=other_headers).status_code == 404
    assert client.get('/api/scratch-tickets', headers=other_headers).get_json()['data'] == []

    mine = client.get('/api/scratch-tickets', headers=headers).get_json()['data']
    assert [t['id'] for t in mine] == [ticket_id]


def test_admin_design_management(client, admin_headers):
    res = client.post('/api/admin/scratch-tickets/designs', json={
        'name': 'Diamond Rush', 'cost_sc': 5, 'prize_min_sc': 5, 'prize_max_sc': 50,
    }, headers=admin_headers)
    assert res.status_code == 201
    design = res.get_json()['data']
    assert design['win_probability'] == 16.67
    assert design['enabled'] is True

    res = client.post(f"/api/admin/scratch-tickets/designs/{design['id']}/toggle", headers=admin_headers)
    assert res.get_json()['data']['enabled'] is False
    assert client.get('/api/scratch-tickets/designs').get_json()['data'] == []
    all_designs = client.get('/api/admin/scratch-tickets/designs', headers=admin_headers).get_json()['data']
    assert len(all_designs) == 1

    res = client.post('/api/admin/scratch-tickets/designs', json={
        'name': 'Bad Range', 'cost_sc': 1, 'prize_min_sc': 10, 'prize_max_sc': 2,
    }, headers=admin_headers)
    assert res.status_code == 400
    assert res.get_json()['error'] == 'Validation Error'


def test_claim_seen_as_unclaimed_by_second_request_pays_once(client, funded, monkeypatch):
    design_id = _design(100, prize=5)
    player, headers = funded
    ticket_id = _buy(client, headers, design_id)['ticket']['id']
    # What a second request read before the first claim committed
    stale = db.session.get(ScratchTicket, ticket_id)

    assert client.post(f'/api/scratch-tickets/{ticket_id}/claim', headers=headers).status_code == 200

    db.session.refresh(stale)
    set_committed_value(stale, 'claim_status', 'unclaimed')
    monkeypatch.setattr(ticket_svc, 'get_ticket', lambda owner, tid: stale)
    with pytest.raises(Conflict, match='Prize already claimed'):
        ticket_svc.claim(db.session.get(Player, player['id']), ticket_id)

    assert client.get('/api/wallet', headers=headers).get_json()['data']['sweepsCoins'] == 14
    assert WalletTransaction.query.filter_by(transaction_type='scratch_prize').count() == 1
