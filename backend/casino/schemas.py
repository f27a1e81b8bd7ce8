"""Request payload contracts.

Every JSON body accepted by the API is parsed through one of these models;
a failed parse surfaces as a 400 ``Validation Error`` listing each field.
"""

from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator, model_validator


class Currency(str, Enum):
    GC = 'GC'
    SC = 'SC'


class TransactionType(str, Enum):
    DEPOSIT = 'deposit'
    WITHDRAWAL = 'withdrawal'
    BET = 'bet'
    WIN = 'win'
    BONUS = 'bonus'
    REFERRAL = 'referral'
    ACHIEVEMENT = 'achievement'
    PURCHASE = 'purchase'
    REDEMPTION = 'redemption'
    TRANSFER = 'transfer'
    ADJUSTMENT = 'adjustment'
    DAILY_BONUS = 'daily_bonus'
    SCRATCH_PURCHASE = 'scratch_purchase'
    SCRATCH_PRIZE = 'scratch_prize'


class GameType(str, Enum):
    SLOTS = 'slots'
    CASINO = 'casino'
    SCRATCH = 'scratch'
    PULL_TABS = 'pull_tabs'
    SPORTSBOOK = 'sportsbook'


class PlayerStatus(str, Enum):
    ACTIVE = 'Active'
    SUSPENDED = 'Suspended'
    BANNED = 'Banned'


class KycLevel(str, Enum):
    BASIC = 'Basic'
    INTERMEDIATE = 'Intermediate'
    FULL = 'Full'


class Schema(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)


# ---- Auth ----

class RegisterRequest(Schema):
    username: str = Field(min_length=3, max_length=20, pattern=r'^[a-zA-Z0-9_]+$')
    name: str = Field(min_length=2, max_length=50)
    email: EmailStr
    password: str = Field(min_length=6, max_length=100)
    phone: Optional[str] = Field(default=None, max_length=32)


class LoginRequest(Schema):
    username: str
    password: str


class AdminLoginRequest(Schema):
    email: EmailStr
    password: str


class UpdateProfileRequest(Schema):
    name: Optional[str] = Field(default=None, min_length=2, max_length=50)
    email: Optional[EmailStr] = None
    password: Optional[str] = Field(default=None, min_length=6, max_length=100)
    phone: Optional[str] = Field(default=None, max_length=32)

    @model_validator(mode='after')
    def at_least_one_field(self):
        if not (self.name or self.email or self.password or self.phone):
            raise ValueError('At least one field must be provided for update')
        return self


# ---- Wallet ----

class WalletUpdateRequest(Schema):
    currency: Currency
    amount: Decimal
    type: TransactionType = TransactionType.TRANSFER
    description: Optional[str] = Field(default=None, max_length=255)
    game_type: Optional[GameType] = None
    metadata: Optional[Dict[str, Any]] = None

    @field_validator('currency', mode='before')
    @classmethod
    def upper_currency(cls, value):
        return value.upper() if isinstance(value, str) else value

    @field_validator('amount')
    @classmethod
    def non_zero(cls, value: Decimal):
        if value == 0:
            raise ValueError('Amount cannot be zero')
        return value


class BettingLimitsRequest(Schema):
    game_type: GameType
    min_bet_sc: Decimal = Field(gt=0)
    max_bet_sc: Decimal = Field(gt=0)
    max_win_sc: Decimal = Field(gt=0)


# ---- Store ----

class PackCreateRequest(Schema):
    title: str = Field(min_length=1, max_length=128)
    description: Optional[str] = Field(default=None, max_length=255)
    price_usd: Decimal = Field(gt=0)
    gold_coins: Decimal = Field(ge=0)
    sweeps_coins: Decimal = Field(default=Decimal('0'), ge=0)
    bonus_sc: Decimal = Field(default=Decimal('0'), ge=0)
    bonus_percentage: int = Field(default=0, ge=0, le=1000)
    is_popular: bool = False
    is_best_value: bool = False
    display_order: int = 0
    enabled: bool = True


class PackUpdateRequest(Schema):
    title: Optional[str] = Field(default=None, min_length=1, max_length=128)
    description: Optional[str] = Field(default=None, max_length=255)
    price_usd: Optional[Decimal] = Field(default=None, gt=0)
    gold_coins: Optional[Decimal] = Field(default=None, ge=0)
    sweeps_coins: Optional[Decimal] = Field(default=None, ge=0)
    bonus_sc: Optional[Decimal] = Field(default=None, ge=0)
    bonus_percentage: Optional[int] = Field(default=None, ge=0, le=1000)
    is_popular: Optional[bool] = None
    is_best_value: Optional[bool] = None
    display_order: Optional[int] = None
    enabled: Optional[bool] = None


class PaymentMethodCreateRequest(Schema):
    name: str = Field(min_length=1, max_length=128)
    provider: str = Field(min_length=1, max_length=64)
    is_active: bool = True
    config: Dict[str, Any] = Field(default_factory=dict)


class PaymentMethodUpdateRequest(Schema):
    name: Optional[str] = Field(default=None, min_length=1, max_length=128)
    provider: Optional[str] = Field(default=None, min_length=1, max_length=64)
    is_active: Optional[bool] = None
    config: Optional[Dict[str, Any]] = None


class PurchaseRequest(Schema):
    pack_id: int
    payment_method_id: Optional[int] = None
    payment_token: Optional[str] = None


# ---- KYC ----

class KycStepData(Schema):
    model_config = ConfigDict(str_strip_whitespace=True, extra='allow')

    id_photo: Optional[str] = None
    address_document: Optional[str] = None
    full_name: Optional[str] = Field(default=None, min_length=2, max_length=64)
    date_of_birth: Optional[date] = None


class KycStepRequest(Schema):
    step: int = Field(ge=1, le=5)
    data: Optional[KycStepData] = None
    identity_verified: bool = False
    address_verified: bool = False
    payment_verified: bool = False
    email_verified: bool = False
    phone_verified: bool = False


class PhoneCodeRequest(Schema):
    code: str = Field(min_length=6, max_length=6, pattern=r'^\d{6}$')


class KycApproveRequest(Schema):
    player_id: int
    level: KycLevel = KycLevel.FULL


# ---- Redemptions ----

class RedemptionCreateRequest(Schema):
    amount_sc: Decimal = Field(gt=0)
    method: str = Field(min_length=1, max_length=32)
    destination: Optional[str] = Field(default=None, max_length=255)


class RedemptionApproveRequest(Schema):
    notes: Optional[str] = None


class RedemptionRejectRequest(Schema):
    reason: str = Field(min_length=1)


# ---- Scratch tickets ----

class ScratchDesignRequest(Schema):
    name: str = Field(min_length=1, max_length=128)
    cost_sc: Decimal = Field(gt=0)
    slot_count: int = Field(default=6, ge=1, le=25)
    win_probability: Optional[float] = Field(default=None, ge=0, le=100)
    prize_min_sc: int = Field(default=1, ge=1)
    prize_max_sc: int = Field(default=10, ge=1)
    background_color: str = Field(default='#FFD700', max_length=16)
    image_url: Optional[str] = Field(default=None, max_length=512)
    enabled: bool = True

    @model_validator(mode='after')
    def prize_range(self):
        if self.prize_min_sc > self.prize_max_sc:
            raise ValueError('prize_min_sc must not exceed prize_max_sc')
        return self


class ScratchPurchaseRequest(Schema):
    design_id: int


class ScratchRevealRequest(Schema):
    slot_index: int


# ---- Admin ----

class BalanceAdjustmentRequest(Schema):
    gc_amount: Decimal = Decimal('0')
    sc_amount: Decimal = Decimal('0')
    reason: str = Field(min_length=1, max_length=200)

    @model_validator(mode='after')
    def non_zero(self):
        if not self.gc_amount and not self.sc_amount:
            raise ValueError('Amount cannot be zero')
        return self


class PlayerStatusRequest(Schema):
    status: PlayerStatus
    reason: Optional[str] = None


class GameRtpRequest(Schema):
    rtp: float = Field(ge=0, le=100)
