import secrets
from datetime import timedelta
from typing import List

from flask import current_app

from casino import bcrypt, db, sms
from casino.errors import ApiError
from casino.models import KycDocument, KycOnboardingProgress, Player, utcnow

PHONE_CODE_TTL = timedelta(minutes=10)
VERIFICATION_FLAGS = (
    'identity_verified',
    'address_verified',
    'payment_verified',
    'email_verified',
    'phone_verified',
)
# Placeholder sent by clients that re-submit a step without a new upload
UPLOADED_PLACEHOLDER = 'Document Uploaded'

ONBOARDING_STEPS = [
    {
        'step': 1,
        'title': 'Identity Verification',
        'description': 'Verify your identity with a government-issued ID',
        'fields': ['idType', 'idNumber', 'expiryDate'],
    },
    {
        'step': 2,
        'title': 'Address Verification',
        'description': 'Confirm your residential address',
        'fields': ['address', 'city', 'state', 'zipCode'],
    },
    {
        'step': 3,
        'title': 'Payment Method',
        'description': 'Link a payment method in your own name',
        'fields': ['paymentType', 'lastFour'],
    },
    {
        'step': 4,
        'title': 'Email Verification',
        'description': 'Confirm the email address on your account',
        'fields': ['email'],
    },
    {
        'step': 5,
        'title': 'Phone Verification',
        'description': 'Confirm your mobile number with a one-time code',
        'fields': ['phone', 'code'],
    },
]


def get_progress(player: Player) -> KycOnboardingProgress:
    progress = KycOnboardingProgress.query.filter_by(player_id=player.id).first()
    if progress is None:
        progress = KycOnboardingProgress(player_id=player.id, current_step=1)
        db.session.add(progress)
        db.session.commit()
    return progress


def _add_document(player: Player, document_type: str, url) -> None:
    if url and url != UPLOADED_PLACEHOLDER:
        db.session.add(KycDocument(player_id=player.id, document_type=document_type,
                                   document_url=url, status='pending'))


def update_step(player: Player, step: int, data=None, **flags) -> KycOnboardingProgress:
    """Record a submitted onboarding step; verification flags only ever turn on."""
    progress = get_progress(player)
    current_app.logger.info(f"[kyc] player={player.id} step={step}")

    if data is not None:
        _add_document(player, 'Government ID', data.id_photo)
        _add_document(player, 'Proof of Address', data.address_document)
        if data.full_name:
            player.name = data.full_name
        if data.date_of_birth:
            player.date_of_birth = data.date_of_birth
        db.session.add(player)

    implied = {
        'identity_verified': step == 1 and bool(data and data.id_photo),
        'address_verified': step == 2 and bool(data and data.address_document),
    }
    for flag in VERIFICATION_FLAGS:
        # Phone verification is earned through the one-time code only
        if flag == 'phone_verified':
            continue
        if flags.get(flag) or implied.get(flag):
            setattr(progress, flag, True)
    progress.current_step = max(progress.current_step or 1, step)
    db.session.add(progress)
    db.session.commit()
    return progress


def complete(player: Player) -> KycOnboardingProgress:
    progress = get_progress(player)
    for flag in VERIFICATION_FLAGS:
        setattr(progress, flag, True)
    progress.current_step = len(ONBOARDING_STEPS)
    progress.completed = True
    progress.completed_at = utcnow()
    set_kyc_level(player, 'Full')
    db.session.add(progress)
    db.session.commit()
    current_app.logger.info(f"[kyc] player={player.id} onboarding completed")
    return progress


def skip(player: Player) -> KycOnboardingProgress:
    progress = get_progress(player)
    progress.last_prompted_at = utcnow()
    db.session.add(progress)
    db.session.commit()
    return progress


def set_kyc_level(player: Player, level: str) -> Player:
    player.kyc_level = level
    player.kyc_verified = True
    player.kyc_verified_at = utcnow()
    db.session.add(player)
    return player


def send_phone_code(player: Player) -> dict:
    if not player.phone:
        raise ApiError('Add a phone number to your profile first')
    progress = get_progress(player)
    code = f"{secrets.randbelow(10 ** 6):06d}"
    progress.phone_code_hash = bcrypt.generate_password_hash(code).decode('utf-8')
    progress.phone_code_expires_at = utcnow() + PHONE_CODE_TTL
    db.session.add(progress)
    db.session.commit()
    return sms.send_otp(player.phone, code)


def verify_phone_code(player: Player, code: str) -> KycOnboardingProgress:
    progress = get_progress(player)
    if not progress.phone_code_hash or not progress.phone_code_expires_at:
        raise ApiError('No verification code has been sent')
    if utcnow() > progress.phone_code_expires_at:
        raise ApiError('Verification code has expired')
    if not bcrypt.check_password_hash(progress.phone_code_hash, code):
        raise ApiError('Invalid verification code')
    progress.phone_verified = True
    progress.phone_code_hash = None
    progress.phone_code_expires_at = None
    db.session.add(progress)
    db.session.commit()
    return progress


def list_documents(player: Player) -> List[KycDocument]:
    return (
        KycDocument.query.filter_by(player_id=player.id)
        .order_by(KycDocument.created_at.desc(), KycDocument.id.desc())
        .all()
    )


def approve(player: Player, level: str) -> Player:
    """Back-office approval: sets the KYC level and approves pending documents."""
    now = utcnow()
    set_kyc_level(player, level)
    for doc in KycDocument.query.filter_by(player_id=player.id, status='pending').all():
        doc.status = 'approved'
        doc.reviewed_at = now
        db.session.add(doc)
    db.session.commit()
    current_app.logger.info(f"[kyc] player={player.id} approved level={level}")
    return player
