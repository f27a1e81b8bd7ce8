from casino import db, bcrypt
from flask_login import UserMixin
from datetime import datetime, timezone
import json


def utcnow() -> datetime:
    """Naive UTC timestamp; all DateTime columns store naive UTC."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def _num(value) -> float:
    return float(value) if value is not None else 0.0


def _iso(value):
    return value.isoformat() if value else None


MONEY = db.Numeric(14, 2)


class Player(UserMixin, db.Model):
    __tablename__ = 'player'
    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(64), unique=True, nullable=False, index=True)
    name = db.Column(db.String(64), nullable=False)
    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(256), nullable=False)
    phone = db.Column(db.String(32), nullable=True)
    date_of_birth = db.Column(db.Date, nullable=True)
    role = db.Column(db.String(16), nullable=False, default='player')  # player, admin
    status = db.Column(db.String(16), nullable=False, default='Active')  # Active, Suspended, Banned
    gc_balance = db.Column(MONEY, nullable=False, default=0)
    sc_balance = db.Column(MONEY, nullable=False, default=0)
    kyc_level = db.Column(db.String(16), nullable=False, default='None')  # None, Basic, Intermediate, Full
    kyc_verified = db.Column(db.Boolean, nullable=False, default=False)
    kyc_verified_at = db.Column(db.DateTime, nullable=True)
    join_date = db.Column(db.DateTime, nullable=False, default=utcnow)
    last_login = db.Column(db.DateTime, nullable=True)
    updated_at = db.Column(db.DateTime, nullable=True, onupdate=utcnow)

    transactions = db.relationship('WalletTransaction', back_populates='player', lazy='dynamic')

    def set_password(self, password):
        self.password_hash = bcrypt.generate_password_hash(password).decode('utf-8')

    def check_password(self, password):
        return bcrypt.check_password_hash(self.password_hash, password)

    @property
    def is_admin(self) -> bool:
        return self.role == 'admin'

    @property
    def is_active(self) -> bool:
        return self.status == 'Active'

    def to_dict(self):
        return {
            'id': self.id,
            'username': self.username,
            'name': self.name,
            'email': self.email,
            'phone': self.phone,
            'role': self.role,
            'gc_balance': _num(self.gc_balance),
            'sc_balance': _num(self.sc_balance),
            'status': self.status,
            'kyc_level': self.kyc_level,
            'kyc_verified': self.kyc_verified,
            'join_date': _iso(self.join_date),
            'last_login': _iso(self.last_login),
        }


class WalletTransaction(db.Model):
    """Append-only ledger row; one per balance change."""
    __tablename__ = 'wallet_transaction'
    id = db.Column(db.Integer, primary_key=True)
    player_id = db.Column(db.Integer, db.ForeignKey('player.id'), nullable=False, index=True)
    transaction_type = db.Column(db.String(32), nullable=False)
    gc_amount = db.Column(MONEY, nullable=False, default=0)
    sc_amount = db.Column(MONEY, nullable=False, default=0)
    gc_balance_after = db.Column(MONEY, nullable=False)
    sc_balance_after = db.Column(MONEY, nullable=False)
    description = db.Column(db.String(255), nullable=True)
    game_type = db.Column(db.String(32), nullable=True)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow, index=True)

    player = db.relationship('Player', back_populates='transactions')

    def to_dict(self):
        return {
            'id': self.id,
            'player_id': self.player_id,
            'type': self.transaction_type,
            'gc_amount': _num(self.gc_amount),
            'sc_amount': _num(self.sc_amount),
            'gc_balance_after': _num(self.gc_balance_after),
            'sc_balance_after': _num(self.sc_balance_after),
            'description': self.description,
            'game_type': self.game_type,
            'created_at': _iso(self.created_at),
        }


class StorePack(db.Model):
    __tablename__ = 'store_pack'
    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(128), nullable=False)
    description = db.Column(db.String(255), nullable=True)
    price_usd = db.Column(db.Numeric(10, 2), nullable=False)
    gold_coins = db.Column(MONEY, nullable=False, default=0)
    sweeps_coins = db.Column(MONEY, nullable=False, default=0)
    bonus_sc = db.Column(MONEY, nullable=False, default=0)
    bonus_percentage = db.Column(db.Integer, nullable=False, default=0)
    is_popular = db.Column(db.Boolean, nullable=False, default=False)
    is_best_value = db.Column(db.Boolean, nullable=False, default=False)
    display_order = db.Column(db.Integer, nullable=False, default=0)
    enabled = db.Column(db.Boolean, nullable=False, default=True)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'title': self.title,
            'description': self.description,
            'price_usd': _num(self.price_usd),
            'gold_coins': _num(self.gold_coins),
            'sweeps_coins': _num(self.sweeps_coins),
            'bonus_sc': _num(self.bonus_sc),
            'bonus_percentage': self.bonus_percentage,
            'is_popular': self.is_popular,
            'is_best_value': self.is_best_value,
            'display_order': self.display_order,
            'enabled': self.enabled,
        }


SECRET_CONFIG_MARKERS = ('key', 'secret', 'token', 'password')


class PaymentMethod(db.Model):
    __tablename__ = 'payment_method'
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(128), nullable=False)
    provider = db.Column(db.String(64), nullable=False)
    is_active = db.Column(db.Boolean, nullable=False, default=True)
    config_json = db.Column(db.Text, nullable=True)

    @property
    def config(self) -> dict:
        return json.loads(self.config_json) if self.config_json else {}

    @config.setter
    def config(self, value):
        self.config_json = json.dumps(value or {})

    def to_dict(self, masked=True):
        config = self.config
        if masked:
            config = {
                k: ('***' if any(m in k.lower() for m in SECRET_CONFIG_MARKERS) else v)
                for k, v in config.items()
            }
        return {
            'id': self.id,
            'name': self.name,
            'provider': self.provider,
            'is_active': self.is_active,
            'config': config,
        }


class Purchase(db.Model):
    __tablename__ = 'purchase'
    id = db.Column(db.Integer, primary_key=True)
    player_id = db.Column(db.Integer, db.ForeignKey('player.id'), nullable=False, index=True)
    pack_id = db.Column(db.Integer, db.ForeignKey('store_pack.id', ondelete='SET NULL'), nullable=True)
    pack_title = db.Column(db.String(128), nullable=False)
    payment_method_id = db.Column(db.Integer, db.ForeignKey('payment_method.id', ondelete='SET NULL'), nullable=True)
    amount_usd = db.Column(db.Numeric(10, 2), nullable=False)
    gold_coins = db.Column(MONEY, nullable=False, default=0)
    sweeps_coins = db.Column(MONEY, nullable=False, default=0)
    payment_id = db.Column(db.String(64), nullable=False, unique=True)
    status = db.Column(db.String(16), nullable=False, default='completed')
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'pack_id': self.pack_id,
            'pack_title': self.pack_title,
            'amount_usd': _num(self.amount_usd),
            'gold_coins': _num(self.gold_coins),
            'sweeps_coins': _num(self.sweeps_coins),
            'payment_id': self.payment_id,
            'status': self.status,
            'created_at': _iso(self.created_at),
        }


class DailyLoginBonus(db.Model):
    __tablename__ = 'daily_login_bonus'
    id = db.Column(db.Integer, primary_key=True)
    player_id = db.Column(db.Integer, db.ForeignKey('player.id'), nullable=False, index=True)
    bonus_day = db.Column(db.Integer, nullable=False)  # 1..7
    amount_sc = db.Column(MONEY, nullable=False)
    amount_gc = db.Column(MONEY, nullable=False)
    status = db.Column(db.String(16), nullable=False, default='available')  # available, claimed
    claimed_at = db.Column(db.DateTime, nullable=True)
    next_available_at = db.Column(db.DateTime, nullable=False)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'bonus_day': self.bonus_day,
            'amount_sc': _num(self.amount_sc),
            'amount_gc': _num(self.amount_gc),
            'status': self.status,
            'claimed_at': _iso(self.claimed_at),
            'next_available_at': _iso(self.next_available_at),
        }


class KycOnboardingProgress(db.Model):
    __tablename__ = 'kyc_onboarding_progress'
    id = db.Column(db.Integer, primary_key=True)
    player_id = db.Column(db.Integer, db.ForeignKey('player.id'), nullable=False, unique=True)
    current_step = db.Column(db.Integer, nullable=False, default=1)
    identity_verified = db.Column(db.Boolean, nullable=False, default=False)
    address_verified = db.Column(db.Boolean, nullable=False, default=False)
    payment_verified = db.Column(db.Boolean, nullable=False, default=False)
    email_verified = db.Column(db.Boolean, nullable=False, default=False)
    phone_verified = db.Column(db.Boolean, nullable=False, default=False)
    phone_code_hash = db.Column(db.String(128), nullable=True)
    phone_code_expires_at = db.Column(db.DateTime, nullable=True)
    completed = db.Column(db.Boolean, nullable=False, default=False)
    completed_at = db.Column(db.DateTime, nullable=True)
    last_prompted_at = db.Column(db.DateTime, nullable=True)
    updated_at = db.Column(db.DateTime, nullable=True, default=utcnow, onupdate=utcnow)

    def to_dict(self):
        return {
            'player_id': self.player_id,
            'current_step': self.current_step,
            'identity_verified': self.identity_verified,
            'address_verified': self.address_verified,
            'payment_verified': self.payment_verified,
            'email_verified': self.email_verified,
            'phone_verified': self.phone_verified,
            'completed': self.completed,
            'completed_at': _iso(self.completed_at),
            'last_prompted_at': _iso(self.last_prompted_at),
        }


class KycDocument(db.Model):
    __tablename__ = 'kyc_document'
    id = db.Column(db.Integer, primary_key=True)
    player_id = db.Column(db.Integer, db.ForeignKey('player.id'), nullable=False, index=True)
    document_type = db.Column(db.String(64), nullable=False)
    document_url = db.Column(db.String(512), nullable=False)
    status = db.Column(db.String(16), nullable=False, default='pending')  # pending, approved, rejected
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    reviewed_at = db.Column(db.DateTime, nullable=True)

    def to_dict(self):
        return {
            'id': self.id,
            'player_id': self.player_id,
            'document_type': self.document_type,
            'document_url': self.document_url,
            'status': self.status,
            'created_at': _iso(self.created_at),
            'reviewed_at': _iso(self.reviewed_at),
        }


class RedemptionRequest(db.Model):
    __tablename__ = 'redemption_request'
    id = db.Column(db.Integer, primary_key=True)
    player_id = db.Column(db.Integer, db.ForeignKey('player.id'), nullable=False, index=True)
    amount_sc = db.Column(MONEY, nullable=False)
    method = db.Column(db.String(32), nullable=False)
    destination = db.Column(db.String(255), nullable=True)
    status = db.Column(db.String(16), nullable=False, default='pending')  # pending, approved, rejected, cancelled
    notes = db.Column(db.Text, nullable=True)
    rejected_reason = db.Column(db.Text, nullable=True)
    decided_by = db.Column(db.Integer, db.ForeignKey('player.id'), nullable=True)
    decided_at = db.Column(db.DateTime, nullable=True)
    submitted_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    player = db.relationship('Player', foreign_keys=[player_id])

    def to_dict(self, include_player=False):
        data = {
            'id': self.id,
            'player_id': self.player_id,
            'amount_sc': _num(self.amount_sc),
            'method': self.method,
            'destination': self.destination,
            'status': self.status,
            'notes': self.notes,
            'rejected_reason': self.rejected_reason,
            'decided_by': self.decided_by,
            'decided_at': _iso(self.decided_at),
            'submitted_at': _iso(self.submitted_at),
        }
        if include_player and self.player:
            data['username'] = self.player.username
            data['email'] = self.player.email
        return data


class ScratchTicketDesign(db.Model):
    __tablename__ = 'scratch_ticket_design'
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(128), nullable=False)
    cost_sc = db.Column(MONEY, nullable=False)
    slot_count = db.Column(db.Integer, nullable=False, default=6)
    win_probability = db.Column(db.Float, nullable=False)  # percent
    prize_min_sc = db.Column(db.Integer, nullable=False, default=1)
    prize_max_sc = db.Column(db.Integer, nullable=False, default=10)
    background_color = db.Column(db.String(16), nullable=False, default='#FFD700')
    image_url = db.Column(db.String(512), nullable=True)
    enabled = db.Column(db.Boolean, nullable=False, default=True)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'cost_sc': _num(self.cost_sc),
            'slot_count': self.slot_count,
            'win_probability': self.win_probability,
            'prize_min_sc': self.prize_min_sc,
            'prize_max_sc': self.prize_max_sc,
            'background_color': self.background_color,
            'image_url': self.image_url,
            'enabled': self.enabled,
        }


class ScratchTicket(db.Model):
    __tablename__ = 'scratch_ticket'
    id = db.Column(db.Integer, primary_key=True)
    ticket_number = db.Column(db.String(64), unique=True, nullable=False, index=True)
    design_id = db.Column(db.Integer, db.ForeignKey('scratch_ticket_design.id'), nullable=False)
    player_id = db.Column(db.Integer, db.ForeignKey('player.id'), nullable=False, index=True)
    slots_json = db.Column(db.Text, nullable=False)  # JSON list of {index, value, revealed}
    status = db.Column(db.String(16), nullable=False, default='active')  # active, expired
    claim_status = db.Column(db.String(16), nullable=False, default='unclaimed')  # unclaimed, claimed
    prize_sc = db.Column(MONEY, nullable=True)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    claimed_at = db.Column(db.DateTime, nullable=True)

    design = db.relationship('ScratchTicketDesign')

    @property
    def slots(self) -> list:
        return json.loads(self.slots_json) if self.slots_json else []

    @slots.setter
    def slots(self, value):
        self.slots_json = json.dumps(value)

    def to_dict(self, reveal_all=False):
        slots = [
            s if (reveal_all or s['revealed']) else {'index': s['index'], 'value': None, 'revealed': False}
            for s in self.slots
        ]
        return {
            'id': self.id,
            'ticket_number': self.ticket_number,
            'design_id': self.design_id,
            'design_name': self.design.name if self.design else None,
            'player_id': self.player_id,
            'slots': slots,
            'status': self.status,
            'claim_status': self.claim_status,
            'prize_sc': _num(self.prize_sc) if self.prize_sc is not None else None,
            'created_at': _iso(self.created_at),
            'claimed_at': _iso(self.claimed_at),
        }


class Game(db.Model):
    __tablename__ = 'game'
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(128), nullable=False)
    category = db.Column(db.String(32), nullable=False, index=True)  # Slots, Poker, Bingo, Sportsbook, Scratch
    provider = db.Column(db.String(64), nullable=False, default='Internal')
    rtp = db.Column(db.Float, nullable=False, default=96.0)
    volatility = db.Column(db.String(16), nullable=True)
    enabled = db.Column(db.Boolean, nullable=False, default=True)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'category': self.category,
            'provider': self.provider,
            'rtp': self.rtp,
            'volatility': self.volatility,
            'enabled': self.enabled,
        }


class BettingLimit(db.Model):
    __tablename__ = 'betting_limit'
    id = db.Column(db.Integer, primary_key=True)
    game_type = db.Column(db.String(32), unique=True, nullable=False)
    min_bet_sc = db.Column(MONEY, nullable=False)
    max_bet_sc = db.Column(MONEY, nullable=False)
    max_win_sc = db.Column(MONEY, nullable=False)
    updated_at = db.Column(db.DateTime, nullable=True, default=utcnow, onupdate=utcnow)

    def to_dict(self):
        return {
            'game_type': self.game_type,
            'min_bet_sc': _num(self.min_bet_sc),
            'max_bet_sc': _num(self.max_bet_sc),
            'max_win_sc': _num(self.max_win_sc),
        }


class SecurityAlert(db.Model):
    __tablename__ = 'security_alert'
    id = db.Column(db.Integer, primary_key=True)
    alert_type = db.Column(db.String(32), nullable=False)
    severity = db.Column(db.String(16), nullable=False, default='low')  # low, medium, high, critical
    title = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, nullable=True)
    player_id = db.Column(db.Integer, db.ForeignKey('player.id'), nullable=True)
    status = db.Column(db.String(16), nullable=False, default='open')  # open, resolved
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow, index=True)
    resolved_at = db.Column(db.DateTime, nullable=True)

    def to_dict(self):
        return {
            'id': self.id,
            'alert_type': self.alert_type,
            'severity': self.severity,
            'title': self.title,
            'description': self.description,
            'player_id': self.player_id,
            'status': self.status,
            'created_at': _iso(self.created_at),
            'resolved_at': _iso(self.resolved_at),
        }
