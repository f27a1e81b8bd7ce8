from decimal import Decimal

import pytest

from casino import db
from casino.errors import ApiError, InsufficientFunds, LimitExceeded
from casino.models import Player, WalletTransaction
from casino.services import wallet as wallet_svc


def test_get_wallet_starts_empty(client, register_player):
    _, headers = register_player('alice')
    res = client.get('/api/wallet', headers=headers)
    assert res.status_code == 200
    data = res.get_json()['data']
    assert data['goldCoins'] == 0
    assert data['sweepsCoins'] == 0
    assert data['lastUpdated'].endswith('Z')


def test_update_wallet_credit_and_ledger(client, register_player):
    player, headers = register_player('alice')
    res = client.post('/api/wallet/update', json={'currency': 'gc', 'amount': 250, 'type': 'win'},
                      headers=headers)
    assert res.status_code == 200
    assert res.get_json()['data']['goldCoins'] == 250

    rows = client.get('/api/wallet/transactions', headers=headers).get_json()['data']
    assert len(rows) == 1
    assert rows[0]['type'] == 'win'
    assert rows[0]['gc_amount'] == 250
    assert rows[0]['gc_balance_after'] == 250
    assert rows[0]['sc_balance_after'] == 0


@pytest.mark.parametrize('kind', ['deposit', 'bonus', 'purchase', 'scratch_prize', 'adjustment', 'transfer'])
def test_players_cannot_submit_server_side_types(client, register_player, kind):
    _, headers = register_player('alice')
    res = client.post('/api/wallet/update', json={'currency': 'SC', 'amount': 10000, 'type': kind},
                      headers=headers)
    assert res.status_code == 403
    assert res.get_json()['error'] == f"Transaction type '{kind}' cannot be submitted by players"
    assert client.get('/api/wallet', headers=headers).get_json()['data']['sweepsCoins'] == 0


def test_refused_credit_cannot_be_redeemed(client, register_player):
    _, headers = register_player('alice')
    client.post('/api/wallet/update', json={'currency': 'SC', 'amount': 10000, 'type': 'deposit'},
                headers=headers)
    assert client.post('/api/kyc/complete', headers=headers).status_code == 200
    res = client.post('/api/redemptions', json={'amount_sc': 10000, 'method': 'bank'}, headers=headers)
    assert res.status_code == 400
    assert res.get_json()['error'] == 'Insufficient sweeps coins'


def test_bet_and_win_update_stats(client, register_player, fund):
    player, headers = register_player('alice')
    fund(player['id'], gc=1000, sc=10)

    res = client.post('/api/wallet/update', json={
        'currency': 'SC', 'amount': -2, 'type': 'bet', 'game_type': 'slots',
    }, headers=headers)
    assert res.status_code == 200
    res = client.post('/api/wallet/update', json={
        'currency': 'SC', 'amount': 3.5, 'type': 'win', 'game_type': 'slots',
    }, headers=headers)
    assert res.status_code == 200
    assert res.get_json()['data']['sweepsCoins'] == 11.5

    stats = client.get('/api/wallet/stats', headers=headers).get_json()['data']
    assert stats['totalWageredSc'] == 2
    assert stats['totalWonSc'] == 3.5
    assert stats['gamesPlayed'] == 1
    assert stats['totalSpent'] == 0


def test_insufficient_funds_leaves_balance_untouched(client, register_player, fund):
    player, headers = register_player('alice')
    fund(player['id'], sc=1)
    res = client.post('/api/wallet/update', json={'currency': 'SC', 'amount': -2, 'type': 'bet'},
                      headers=headers)
    assert res.status_code == 400
    assert res.get_json()['error'] == 'Insufficient sweeps coins'
    assert client.get('/api/wallet', headers=headers).get_json()['data']['sweepsCoins'] == 1
    assert WalletTransaction.query.filter_by(player_id=player['id']).count() == 1


def test_zero_amount_rejected(client, register_player):
    _, headers = register_player('alice')
    res = client.post('/api/wallet/update', json={'currency': 'GC', 'amount': 0}, headers=headers)
    assert res.status_code == 400
    assert res.get_json()['error'] == 'Validation Error'


def test_bet_over_limit_rejected(client, register_player, fund):
    player, headers = register_player('alice')
    fund(player['id'], sc=50)
    res = client.post('/api/wallet/update', json={
        'currency': 'SC', 'amount': -6, 'type': 'bet', 'game_type': 'slots',
    }, headers=headers)
    assert res.status_code == 400
    assert res.get_json()['error'] == 'Maximum bet is 5.00 SC'


def test_wallet_requires_auth(flask_app):
    assert flask_app.test_client().get('/api/wallet').status_code == 401


def test_apply_transaction_sign_rules(flask_app, register_player):
    player_dict, _ = register_player('alice')
    player = db.session.get(Player, player_dict['id'])
    with pytest.raises(ApiError, match='must be negative'):
        wallet_svc.apply_transaction(player, 'bet', sc_amount=1)
    with pytest.raises(ApiError, match='must be positive'):
        wallet_svc.apply_transaction(player, 'win', sc_amount=-1)
    with pytest.raises(ApiError, match='Unknown transaction type'):
        wallet_svc.apply_transaction(player, 'jackpot', sc_amount=1)


def test_apply_transaction_quantizes_and_records_balances(flask_app, register_player):
    player_dict, _ = register_player('alice')
    player = db.session.get(Player, player_dict['id'])
    entry = wallet_svc.apply_transaction(player, 'deposit', gc_amount='10.005', sc_amount=Decimal('1.234'))
    assert entry.gc_balance_after == Decimal('10.01')
    assert entry.sc_balance_after == Decimal('1.23')
    assert Decimal(player.gc_balance) == Decimal('10.01')

    with pytest.raises(InsufficientFunds):
        wallet_svc.apply_transaction(player, 'withdrawal', gc_amount=-20)


def test_win_over_limit_raises(flask_app, register_player):
    player_dict, _ = register_player('alice')
    player = db.session.get(Player, player_dict['id'])
    with pytest.raises(LimitExceeded, match='Maximum win is 20.00 SC'):
        wallet_svc.apply_transaction(player, 'win', sc_amount=25, game_type='slots')


def test_transaction_history_limit(client, register_player, fund):
    player, headers = register_player('alice')
    for _ in range(3):
        fund(player['id'], gc=10)
    rows = client.get('/api/wallet/transactions?limit=2', headers=headers).get_json()['data']
    assert len(rows) == 2
    assert rows[0]['id'] > rows[1]['id']
