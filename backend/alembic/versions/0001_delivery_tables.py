"""delivery tables

Revision ID: 0001
Revises:
Create Date: 2026-10-19

"""
from alembic import op
import sqlalchemy as sa


revision = '0001'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'company',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.Text(), nullable=False),
        sa.Column('is_active', sa.Integer(), nullable=False, server_default=sa.text('1')),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now()),
    )

    op.create_table(
        'delivery_settings',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('company_id', sa.Integer(), sa.ForeignKey('company.id', ondelete='CASCADE'), nullable=False, unique=True),
        sa.Column('min_slots_ahead', sa.Integer(), nullable=False, server_default=sa.text('2')),
        sa.Column('max_capacity_morning', sa.Integer(), nullable=False, server_default=sa.text('10')),
        sa.Column('max_capacity_afternoon', sa.Integer(), nullable=False, server_default=sa.text('10')),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now()),
        sa.CheckConstraint('min_slots_ahead >= 0', name='ck_delivery_settings_min_slots'),
        sa.CheckConstraint('max_capacity_morning >= 0', name='ck_delivery_settings_cap_morning'),
        sa.CheckConstraint('max_capacity_afternoon >= 0', name='ck_delivery_settings_cap_afternoon'),
    )

    op.create_table(
        'delivery_weekdays',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('settings_id', sa.Integer(), sa.ForeignKey('delivery_settings.id', ondelete='CASCADE'), nullable=False),
        sa.Column('weekday', sa.Integer(), nullable=False),
        sa.Column('enabled', sa.Boolean(), nullable=False, server_default=sa.text('0')),
        sa.Column('morning_start', sa.Time()),
        sa.Column('morning_end', sa.Time()),
        sa.Column('afternoon_start', sa.Time()),
        sa.Column('afternoon_end', sa.Time()),
        sa.UniqueConstraint('settings_id', 'weekday', name='uq_delivery_weekdays_settings_weekday'),
        sa.CheckConstraint('weekday BETWEEN 0 AND 6', name='ck_delivery_weekdays_weekday'),
    )

    op.create_table(
        'delivery_schedules',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('company_id', sa.Integer(), sa.ForeignKey('company.id', ondelete='CASCADE'), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('morning_enabled', sa.Boolean(), nullable=False, server_default=sa.text('1')),
        sa.Column('afternoon_enabled', sa.Boolean(), nullable=False, server_default=sa.text('1')),
        sa.Column('custom_max_capacity_morning', sa.Integer()),
        sa.Column('custom_max_capacity_afternoon', sa.Integer()),
        sa.Column('custom_morning_start', sa.Time()),
        sa.Column('custom_morning_end', sa.Time()),
        sa.Column('custom_afternoon_start', sa.Time()),
        sa.Column('custom_afternoon_end', sa.Time()),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now()),
        sa.UniqueConstraint('company_id', 'date', name='uq_delivery_schedules_company_date'),
    )

    op.create_table(
        'delivery_slots',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('company_id', sa.Integer(), sa.ForeignKey('company.id', ondelete='CASCADE'), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('slot_type', sa.Text(), nullable=False),
        sa.Column('current_count', sa.Integer(), nullable=False, server_default=sa.text('0')),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now()),
        sa.UniqueConstraint('company_id', 'date', 'slot_type', name='uq_delivery_slots_company_date_type'),
        sa.CheckConstraint('current_count >= 0', name='ck_delivery_slots_count'),
    )


def downgrade():
    op.drop_table('delivery_slots')
    op.drop_table('delivery_schedules')
    op.drop_table('delivery_weekdays')
    op.drop_table('delivery_settings')
    op.drop_table('company')
