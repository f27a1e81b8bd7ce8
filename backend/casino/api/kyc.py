from flask import Blueprint, jsonify, request
from flask_login import login_required

from casino.auth import current_player
from casino.schemas import KycStepRequest, PhoneCodeRequest
from casino.services import kyc as kyc_svc

kyc = Blueprint('kyc', __name__)


@kyc.route('/steps', methods=['GET'])
def get_steps():
    return jsonify({'success': True, 'data': kyc_svc.ONBOARDING_STEPS})


@kyc.route('/progress', methods=['GET'])
@login_required
def get_progress():
    return jsonify(kyc_svc.get_progress(current_player()).to_dict())


@kyc.route('/step', methods=['POST'])
@login_required
def update_step():
    data = KycStepRequest.model_validate(request.get_json(silent=True) or {})
    progress = kyc_svc.update_step(
        current_player(),
        data.step,
        data.data,
        identity_verified=data.identity_verified,
        address_verified=data.address_verified,
        payment_verified=data.payment_verified,
        email_verified=data.email_verified,
    )
    return jsonify({'success': True, 'data': progress.to_dict()})


@kyc.route('/complete', methods=['POST'])
@login_required
def complete_onboarding():
    progress = kyc_svc.complete(current_player())
    return jsonify({
        'success': True,
        'progress': progress.to_dict(),
        'message': 'KYC onboarding completed successfully!',
    })


@kyc.route('/skip', methods=['POST'])
@login_required
def skip_onboarding():
    progress = kyc_svc.skip(current_player())
    return jsonify({
        'success': True,
        'progress': progress.to_dict(),
        'message': 'KYC skipped for now. You can complete it later from your profile.',
    })


@kyc.route('/phone/send-code', methods=['POST'])
@login_required
def send_phone_code():
    result = kyc_svc.send_phone_code(current_player())
    if not result.get('success'):
        return jsonify({'success': False, 'error': result.get('error', 'Failed to send code')}), 502
    return jsonify({'success': True})


@kyc.route('/phone/verify', methods=['POST'])
@login_required
def verify_phone_code():
    data = PhoneCodeRequest.model_validate(request.get_json(silent=True) or {})
    progress = kyc_svc.verify_phone_code(current_player(), data.code)
    return jsonify({'success': True, 'data': progress.to_dict()})
