"""Sample data for local development, loaded by ``flask db-reset``."""

from decimal import Decimal

from casino import db
from casino.models import BettingLimit, Game, PaymentMethod, Player, ScratchTicketDesign, StorePack
from casino.services.limits import DEFAULT_LIMITS, GAME_TYPES

SAMPLE_PASSWORD = 'password123'

PLAYERS = [
    # username, name, email, gc, sc, status, kyc_level, kyc_verified
    ('johndoe', 'John Doe', 'john@example.com', 5250, 125, 'Active', 'Full', True),
    ('janesmith', 'Jane Smith', 'jane@example.com', 12000, 340, 'Active', 'Full', True),
    ('mikej', 'Mike Johnson', 'mike@example.com', 2100, 89, 'Active', 'Intermediate', True),
    ('sarahw', 'Sarah Wilson', 'sarah@example.com', 8500, 215, 'Active', 'Full', True),
    ('tombrown', 'Tom Brown', 'tom@example.com', 3200, 95, 'Suspended', 'Basic', False),
]

GAMES = [
    ('Mega Spin Slots', 'Slots', 96.5, 'Medium', True),
    ('Diamond Poker Pro', 'Poker', 98.2, 'Low', True),
    ('Bingo Bonanza', 'Bingo', 94.8, 'High', True),
    ('Fruit Frenzy', 'Slots', 95.0, 'Medium', False),
    ('Lucky Scratch', 'Scratch', 92.0, 'Low', True),
]

PACKS = [
    dict(title='Starter Pack', description='Get started with Gold Coins', price_usd=Decimal('4.99'),
         gold_coins=500, sweeps_coins=Decimal('2.5'), display_order=1),
    dict(title='Popular Pack', description='Our most popular bundle', price_usd=Decimal('9.99'),
         gold_coins=1200, sweeps_coins=Decimal('6'), bonus_sc=Decimal('1'), bonus_percentage=20,
         is_popular=True, display_order=2),
    dict(title='Gold Pack', description='Best value for regular players', price_usd=Decimal('24.99'),
         gold_coins=3500, sweeps_coins=Decimal('17.5'), bonus_sc=Decimal('5'), bonus_percentage=40,
         is_best_value=True, display_order=3),
]

PAYMENT_METHODS = [
    ('Stripe', 'stripe', {'publishable_key': '', 'secret_key': ''}),
    ('PayPal', 'paypal', {'client_id': '', 'client_secret': ''}),
    ('Google Pay', 'google_pay', {'merchant_id': ''}),
]

DESIGNS = [
    dict(name='Lucky Sevens', cost_sc=Decimal('1'), prize_min_sc=1, prize_max_sc=10, background_color='#FFD700'),
    dict(name='Diamond Rush', cost_sc=Decimal('5'), prize_min_sc=5, prize_max_sc=50, background_color='#4FC3F7'),
]


def seed_database(config) -> None:
    admin = Player(
        username='admin',
        name='Admin User',
        email=config.get('ADMIN_EMAIL', 'admin@sweepscasino.com'),
        role='admin',
        kyc_level='Full',
        kyc_verified=True,
    )
    admin.set_password(config.get('ADMIN_PASSWORD', 'change-me-admin'))
    db.session.add(admin)

    for username, name, email, gc, sc, status, kyc_level, verified in PLAYERS:
        player = Player(
            username=username, name=name, email=email,
            gc_balance=gc, sc_balance=sc, status=status,
            kyc_level=kyc_level, kyc_verified=verified,
        )
        player.set_password(SAMPLE_PASSWORD)
        db.session.add(player)

    for name, category, rtp, volatility, enabled in GAMES:
        db.session.add(Game(name=name, category=category, provider='Internal', rtp=rtp,
                            volatility=volatility, enabled=enabled))

    for pack in PACKS:
        db.session.add(StorePack(**pack))

    for name, provider, settings in PAYMENT_METHODS:
        method = PaymentMethod(name=name, provider=provider, is_active=True)
        method.config = settings
        db.session.add(method)

    win_probability = config.get('SCRATCH_TICKET_WIN_PROBABILITY', 16.67)
    for design in DESIGNS:
        db.session.add(ScratchTicketDesign(win_probability=win_probability, **design))

    for game_type in GAME_TYPES:
        db.session.add(BettingLimit(game_type=game_type, **DEFAULT_LIMITS))

    db.session.commit()
