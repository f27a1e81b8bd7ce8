import re
from datetime import timedelta

import pytest

from casino import db, sms
from casino.models import KycDocument, KycOnboardingProgress, utcnow


class FakeMessage:
    def __init__(self, sid):
        self.sid = sid


class FakeMessages:
    def __init__(self):
        self.sent = []

    def create(self, body, from_, to):
        self.sent.append({'body': body, 'from_': from_, 'to': to})
        return FakeMessage(f'SM{len(self.sent):04d}')


class FakeTwilio:
    def __init__(self):
        self.messages = FakeMessages()


@pytest.fixture()
def twilio(monkeypatch, flask_app):
    fake = FakeTwilio()
    monkeypatch.setattr(sms, 'client', fake)
    monkeypatch.setattr(sms, 'from_number', '+15550000000')
    return fake


def _last_code(fake):
    return re.search(r'(\d{6})', fake.messages.sent[-1]['body']).group(1)


def test_steps_are_public(client):
    steps = client.get('/api/kyc/steps').get_json()['data']
    assert [s['step'] for s in steps] == [1, 2, 3, 4, 5]


def test_progress_created_on_first_read(client, register_player):
    _, headers = register_player('alice')
    data = client.get('/api/kyc/progress', headers=headers).get_json()
    assert data['current_step'] == 1
    assert data['identity_verified'] is False
    assert data['completed'] is False


def test_identity_step_records_document_and_profile(client, register_player):
    player, headers = register_player('alice')
    res = client.post('/api/kyc/step', json={
        'step': 1,
        'data': {
            'id_photo': 'https://files.example.com/id.png',
            'full_name': 'Alice Liddell',
            'date_of_birth': '1990-04-01',
        },
    }, headers=headers)
    assert res.status_code == 200
    progress = res.get_json()['data']
    assert progress['identity_verified'] is True
    assert progress['current_step'] == 1

    docs = KycDocument.query.filter_by(player_id=player['id']).all()
    assert [d.document_type for d in docs] == ['Government ID']
    profile = client.get('/api/user/profile', headers=headers).get_json()['data']
    assert profile['name'] == 'Alice Liddell'


def test_placeholder_upload_sets_flag_without_document(client, register_player):
    player, headers = register_player('alice')
    res = client.post('/api/kyc/step', json={
        'step': 2, 'data': {'address_document': 'Document Uploaded'},
    }, headers=headers)
    progress = res.get_json()['data']
    assert progress['address_verified'] is True
    assert progress['current_step'] == 2
    assert KycDocument.query.filter_by(player_id=player['id']).count() == 0


def test_flags_never_turn_off_and_phone_flag_is_ignored(client, register_player):
    _, headers = register_player('alice')
    client.post('/api/kyc/step', json={'step': 4, 'email_verified': True}, headers=headers)
    res = client.post('/api/kyc/step', json={'step': 3, 'phone_verified': True}, headers=headers)
    progress = res.get_json()['data']
    assert progress['email_verified'] is True
    assert progress['phone_verified'] is False
    assert progress['current_step'] == 4


def test_step_out_of_range(client, register_player):
    _, headers = register_player('alice')
    res = client.post('/api/kyc/step', json={'step': 6}, headers=headers)
    assert res.status_code == 400
    assert res.get_json()['errors'][0]['path'] == 'step'


def test_complete_sets_full_kyc(client, register_player):
    _, headers = register_player('alice')
    res = client.post('/api/kyc/complete', headers=headers)
    assert res.status_code == 200
    progress = res.get_json()['progress']
    assert progress['completed'] is True
    assert all(progress[f] for f in ('identity_verified', 'address_verified', 'payment_verified',
                                     'email_verified', 'phone_verified'))
    profile = client.get('/api/user/profile', headers=headers).get_json()['data']
    assert profile['kyc_level'] == 'Full'
    assert profile['kyc_verified'] is True


def test_skip_records_prompt_time(client, register_player):
    _, headers = register_player('alice')
    res = client.post('/api/kyc/skip', headers=headers)
    assert res.status_code == 200
    assert res.get_json()['progress']['last_prompted_at'] is not None


def test_phone_code_requires_phone_on_file(client, register_player, twilio):
    _, headers = register_player('alice')
    res = client.post('/api/kyc/phone/send-code', headers=headers)
    assert res.status_code == 400
    assert res.get_json()['error'] == 'Add a phone number to your profile first'


def test_phone_code_without_sms_configured(client, register_player):
    _, headers = register_player('alice', phone='+15551234567')
    res = client.post('/api/kyc/phone/send-code', headers=headers)
    assert res.status_code == 502
    assert res.get_json()['error'] == 'SMS not configured'


def test_phone_verification_flow(client, register_player, twilio):
    _, headers = register_player('alice', phone='+15551234567')
    res = client.post('/api/kyc/phone/verify', json={'code': '123456'}, headers=headers)
    assert res.status_code == 400
    assert res.get_json()['error'] == 'No verification code has been sent'

    res = client.post('/api/kyc/phone/send-code', headers=headers)
    assert res.status_code == 200
    sent = twilio.messages.sent[-1]
    assert sent['to'] == '+15551234567'
    assert sent['from_'] == '+15550000000'
    code = _last_code(twilio)

    wrong = '000000' if code != '000000' else '111111'
    res = client.post('/api/kyc/phone/verify', json={'code': wrong}, headers=headers)
    assert res.status_code == 400
    assert res.get_json()['error'] == 'Invalid verification code'

    res = client.post('/api/kyc/phone/verify', json={'code': code}, headers=headers)
    assert res.status_code == 200
    assert res.get_json()['data']['phone_verified'] is True


def test_expired_phone_code(client, register_player, twilio):
    player, headers = register_player('alice', phone='+15551234567')
    client.post('/api/kyc/phone/send-code', headers=headers)
    code = _last_code(twilio)

    progress = KycOnboardingProgress.query.filter_by(player_id=player['id']).one()
    progress.phone_code_expires_at = utcnow() - timedelta(minutes=1)
    db.session.commit()

    res = client.post('/api/kyc/phone/verify', json={'code': code}, headers=headers)
    assert res.status_code == 400
    assert res.get_json()['error'] == 'Verification code has expired'


def test_admin_reviews_and_approves_documents(client, register_player, admin_headers):
    player, headers = register_player('alice')
    client.post('/api/kyc/step', json={
        'step': 1, 'data': {'id_photo': 'https://files.example.com/id.png'},
    }, headers=headers)

    docs = client.get(f"/api/admin/kyc/{player['id']}", headers=admin_headers).get_json()['data']
    assert len(docs) == 1
    assert docs[0]['status'] == 'pending'

    res = client.post('/api/admin/kyc/approve', json={'player_id': player['id'], 'level': 'Intermediate'},
                      headers=admin_headers)
    assert res.status_code == 200
    assert res.get_json()['data']['kyc_level'] == 'Intermediate'
    assert res.get_json()['data']['kyc_verified'] is True

    docs = client.get(f"/api/admin/kyc/{player['id']}", headers=admin_headers).get_json()['data']
    assert docs[0]['status'] == 'approved'
    assert docs[0]['reviewed_at'] is not None


def test_admin_kyc_unknown_player(client, admin_headers):
    assert client.get('/api/admin/kyc/9999', headers=admin_headers).status_code == 404
