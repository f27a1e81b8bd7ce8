"""initial casino schema

Revision ID: 1a2b3c4d5e6f
Revises:
Create Date: 2026-10-19 00:00:00
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '1a2b3c4d5e6f'
down_revision = None
branch_labels = None
depends_on = None

MONEY = sa.Numeric(14, 2)


def upgrade():
    op.create_table(
        'player',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('username', sa.String(64), nullable=False),
        sa.Column('name', sa.String(64), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('password_hash', sa.String(256), nullable=False),
        sa.Column('phone', sa.String(32), nullable=True),
        sa.Column('date_of_birth', sa.Date(), nullable=True),
        sa.Column('role', sa.String(16), nullable=False, server_default='player'),
        sa.Column('status', sa.String(16), nullable=False, server_default='Active'),
        sa.Column('gc_balance', MONEY, nullable=False, server_default='0'),
        sa.Column('sc_balance', MONEY, nullable=False, server_default='0'),
        sa.Column('kyc_level', sa.String(16), nullable=False, server_default='None'),
        sa.Column('kyc_verified', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('kyc_verified_at', sa.DateTime(), nullable=True),
        sa.Column('join_date', sa.DateTime(), nullable=False),
        sa.Column('last_login', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_player_username', 'player', ['username'], unique=True)
    op.create_index('ix_player_email', 'player', ['email'], unique=True)

    op.create_table(
        'wallet_transaction',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('player_id', sa.Integer(), sa.ForeignKey('player.id'), nullable=False),
        sa.Column('transaction_type', sa.String(32), nullable=False),
        sa.Column('gc_amount', MONEY, nullable=False, server_default='0'),
        sa.Column('sc_amount', MONEY, nullable=False, server_default='0'),
        sa.Column('gc_balance_after', MONEY, nullable=False),
        sa.Column('sc_balance_after', MONEY, nullable=False),
        sa.Column('description', sa.String(255), nullable=True),
        sa.Column('game_type', sa.String(32), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_wallet_transaction_player_id', 'wallet_transaction', ['player_id'])
    op.create_index('ix_wallet_transaction_created_at', 'wallet_transaction', ['created_at'])

    op.create_table(
        'store_pack',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('title', sa.String(128), nullable=False),
        sa.Column('description', sa.String(255), nullable=True),
        sa.Column('price_usd', sa.Numeric(10, 2), nullable=False),
        sa.Column('gold_coins', MONEY, nullable=False, server_default='0'),
        sa.Column('sweeps_coins', MONEY, nullable=False, server_default='0'),
        sa.Column('bonus_sc', MONEY, nullable=False, server_default='0'),
        sa.Column('bonus_percentage', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('is_popular', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('is_best_value', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('display_order', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('enabled', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )

    op.create_table(
        'payment_method',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(128), nullable=False),
        sa.Column('provider', sa.String(64), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('config_json', sa.Text(), nullable=True),
    )

    op.create_table(
        'purchase',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('player_id', sa.Integer(), sa.ForeignKey('player.id'), nullable=False),
        sa.Column('pack_id', sa.Integer(), sa.ForeignKey('store_pack.id', ondelete='SET NULL'), nullable=True),
        sa.Column('pack_title', sa.String(128), nullable=False),
        sa.Column('payment_method_id', sa.Integer(),
                  sa.ForeignKey('payment_method.id', ondelete='SET NULL'), nullable=True),
        sa.Column('amount_usd', sa.Numeric(10, 2), nullable=False),
        sa.Column('gold_coins', MONEY, nullable=False, server_default='0'),
        sa.Column('sweeps_coins', MONEY, nullable=False, server_default='0'),
        sa.Column('payment_id', sa.String(64), nullable=False, unique=True),
        sa.Column('status', sa.String(16), nullable=False, server_default='completed'),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_purchase_player_id', 'purchase', ['player_id'])

    op.create_table(
        'daily_login_bonus',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('player_id', sa.Integer(), sa.ForeignKey('player.id'), nullable=False),
        sa.Column('bonus_day', sa.Integer(), nullable=False),
        sa.Column('amount_sc', MONEY, nullable=False),
        sa.Column('amount_gc', MONEY, nullable=False),
        sa.Column('status', sa.String(16), nullable=False, server_default='available'),
        sa.Column('claimed_at', sa.DateTime(), nullable=True),
        sa.Column('next_available_at', sa.DateTime(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_daily_login_bonus_player_id', 'daily_login_bonus', ['player_id'])

    op.create_table(
        'kyc_onboarding_progress',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('player_id', sa.Integer(), sa.ForeignKey('player.id'), nullable=False, unique=True),
        sa.Column('current_step', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('identity_verified', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('address_verified', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('payment_verified', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('email_verified', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('phone_verified', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('phone_code_hash', sa.String(128), nullable=True),
        sa.Column('phone_code_expires_at', sa.DateTime(), nullable=True),
        sa.Column('completed', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('completed_at', sa.DateTime(), nullable=True),
        sa.Column('last_prompted_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
    )

    op.create_table(
        'kyc_document',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('player_id', sa.Integer(), sa.ForeignKey('player.id'), nullable=False),
        sa.Column('document_type', sa.String(64), nullable=False),
        sa.Column('document_url', sa.String(512), nullable=False),
        sa.Column('status', sa.String(16), nullable=False, server_default='pending'),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('reviewed_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_kyc_document_player_id', 'kyc_document', ['player_id'])

    op.create_table(
        'redemption_request',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('player_id', sa.Integer(), sa.ForeignKey('player.id'), nullable=False),
        sa.Column('amount_sc', MONEY, nullable=False),
        sa.Column('method', sa.String(32), nullable=False),
        sa.Column('destination', sa.String(255), nullable=True),
        sa.Column('status', sa.String(16), nullable=False, server_default='pending'),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('rejected_reason', sa.Text(), nullable=True),
        sa.Column('decided_by', sa.Integer(), sa.ForeignKey('player.id'), nullable=True),
        sa.Column('decided_at', sa.DateTime(), nullable=True),
        sa.Column('submitted_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_redemption_request_player_id', 'redemption_request', ['player_id'])

    op.create_table(
        'scratch_ticket_design',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(128), nullable=False),
        sa.Column('cost_sc', MONEY, nullable=False),
        sa.Column('slot_count', sa.Integer(), nullable=False, server_default='6'),
        sa.Column('win_probability', sa.Float(), nullable=False),
        sa.Column('prize_min_sc', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('prize_max_sc', sa.Integer(), nullable=False, server_default='10'),
        sa.Column('background_color', sa.String(16), nullable=False, server_default='#FFD700'),
        sa.Column('image_url', sa.String(512), nullable=True),
        sa.Column('enabled', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )

    op.create_table(
        'scratch_ticket',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('ticket_number', sa.String(64), nullable=False),
        sa.Column('design_id', sa.Integer(), sa.ForeignKey('scratch_ticket_design.id'), nullable=False),
        sa.Column('player_id', sa.Integer(), sa.ForeignKey('player.id'), nullable=False),
        sa.Column('slots_json', sa.Text(), nullable=False),
        sa.Column('status', sa.String(16), nullable=False, server_default='active'),
        sa.Column('claim_status', sa.String(16), nullable=False, server_default='unclaimed'),
        sa.Column('prize_sc', MONEY, nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('claimed_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_scratch_ticket_ticket_number', 'scratch_ticket', ['ticket_number'], unique=True)
    op.create_index('ix_scratch_ticket_player_id', 'scratch_ticket', ['player_id'])

    op.create_table(
        'game',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(128), nullable=False),
        sa.Column('category', sa.String(32), nullable=False),
        sa.Column('provider', sa.String(64), nullable=False, server_default='Internal'),
        sa.Column('rtp', sa.Float(), nullable=False, server_default='96.0'),
        sa.Column('volatility', sa.String(16), nullable=True),
        sa.Column('enabled', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_game_category', 'game', ['category'])

    op.create_table(
        'betting_limit',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('game_type', sa.String(32), nullable=False, unique=True),
        sa.Column('min_bet_sc', MONEY, nullable=False),
        sa.Column('max_bet_sc', MONEY, nullable=False),
        sa.Column('max_win_sc', MONEY, nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
    )

    op.create_table(
        'security_alert',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('alert_type', sa.String(32), nullable=False),
        sa.Column('severity', sa.String(16), nullable=False, server_default='low'),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('player_id', sa.Integer(), sa.ForeignKey('player.id'), nullable=True),
        sa.Column('status', sa.String(16), nullable=False, server_default='open'),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('resolved_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_security_alert_created_at', 'security_alert', ['created_at'])


def downgrade():
    op.drop_table('security_alert')
    op.drop_table('betting_limit')
    op.drop_table('game')
    op.drop_table('scratch_ticket')
    op.drop_table('scratch_ticket_design')
    op.drop_table('redemption_request')
    op.drop_table('kyc_document')
    op.drop_table('kyc_onboarding_progress')
    op.drop_table('daily_login_bonus')
    op.drop_table('purchase')
    op.drop_table('payment_method')
    op.drop_table('store_pack')
    op.drop_table('wallet_transaction')
    op.drop_table('player')
