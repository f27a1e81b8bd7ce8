from datetime import datetime, timedelta

import pytest

from casino import db
from casino.models import DailyLoginBonus, WalletTransaction
from casino.services import bonus as bonus_svc


class Clock:
    def __init__(self, start):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture()
def clock(monkeypatch):
    c = Clock(datetime(2026, 1, 1, 12, 0, 0))
    monkeypatch.setattr(bonus_svc, 'utcnow', c)
    return c


def test_first_visit_offers_day_one(client, register_player, clock):
    _, headers = register_player('alice')
    res = client.get('/api/bonus/daily', headers=headers)
    assert res.status_code == 200
    data = res.get_json()
    assert data['bonus_day'] == 1
    assert data['amount_sc'] == 0.5
    assert data['amount_gc'] == 100
    assert data['canClaim'] is True


def test_claim_credits_wallet_and_blocks_second_claim(client, register_player, clock):
    _, headers = register_player('alice')
    res = client.post('/api/bonus/daily/claim', headers=headers)
    assert res.status_code == 200
    body = res.get_json()
    assert body['wallet']['goldCoins'] == 100
    assert body['wallet']['sweepsCoins'] == 0.5
    assert body['bonus']['status'] == 'claimed'

    txns = client.get('/api/wallet/transactions', headers=headers).get_json()['data']
    assert txns[0]['type'] == 'daily_bonus'
    assert txns[0]['description'] == 'Daily Login Bonus - Day 1'

    clock.advance(hours=23)
    res = client.post('/api/bonus/daily/claim', headers=headers)
    assert res.status_code == 400
    assert res.get_json()['error'] == 'Bonus not yet available to claim'
    assert client.get('/api/bonus/daily', headers=headers).get_json()['canClaim'] is False


def test_streak_advances_within_grace_window(client, register_player, clock):
    _, headers = register_player('alice')
    client.post('/api/bonus/daily/claim', headers=headers)
    clock.advance(hours=25)

    data = client.get('/api/bonus/daily', headers=headers).get_json()
    assert data['bonus_day'] == 2
    assert data['canClaim'] is True

    res = client.post('/api/bonus/daily/claim', headers=headers)
    assert res.get_json()['bonus']['amount_sc'] == 1.0

    streak = client.get('/api/bonus/daily/streak', headers=headers).get_json()
    assert streak['streak'] == 2
    assert streak['nextDay'] == 3
    assert streak['nextBonus'] == {'sc': 1.5, 'gc': 300.0}


def test_streak_resets_after_grace_window(client, register_player, clock):
    _, headers = register_player('alice')
    client.post('/api/bonus/daily/claim', headers=headers)
    clock.advance(hours=60)

    data = client.get('/api/bonus/daily', headers=headers).get_json()
    assert data['bonus_day'] == 1


def test_cycle_wraps_after_day_seven(client, register_player, clock):
    _, headers = register_player('alice')
    for day in range(1, 8):
        res = client.post('/api/bonus/daily/claim', headers=headers)
        assert res.get_json()['bonus']['bonus_day'] == day
        clock.advance(hours=24)
    data = client.get('/api/bonus/daily', headers=headers).get_json()
    assert data['bonus_day'] == 1
    assert data['amount_sc'] == 0.5


def test_streak_before_any_claim(client, register_player, clock):
    _, headers = register_player('alice')
    streak = client.get('/api/bonus/daily/streak', headers=headers).get_json()
    assert streak['streak'] == 0
    assert streak['nextDay'] == 1


def test_next_day_wraps():
    assert bonus_svc.next_day(1) == 2
    assert bonus_svc.next_day(7) == 1


def test_duplicate_offer_from_concurrent_visit_is_not_paid(client, register_player, clock):
    player, headers = register_player('alice')
    assert client.post('/api/bonus/daily/claim', headers=headers).status_code == 200

    # A second visit that raced the claim left its own day-one offer behind
    amounts = bonus_svc.amounts_for_day(1)
    db.session.add(DailyLoginBonus(
        player_id=player['id'], bonus_day=1, amount_sc=amounts['sc'], amount_gc=amounts['gc'],
        status='available', next_available_at=clock.now,
    ))
    db.session.commit()

    res = client.post('/api/bonus/daily/claim', headers=headers)
    assert res.status_code == 409
    assert res.get_json()['error'] == 'Daily bonus already claimed'
    wallet = client.get('/api/wallet', headers=headers).get_json()['data']
    assert wallet['goldCoins'] == 100
    assert wallet['sweepsCoins'] == 0.5
    assert WalletTransaction.query.filter_by(transaction_type='daily_bonus').count() == 1
