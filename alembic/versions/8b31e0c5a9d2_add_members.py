"""add_members

Revision ID: 8b31e0c5a9d2
Revises: 4f2a9c1d7e30
Create Date: 2026-10-18 16:40:07.512904

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '8b31e0c5a9d2'
down_revision: Union[str, None] = '4f2a9c1d7e30'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        'belt_levels',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('style', sa.String(length=100), nullable=False),
        sa.Column('sort_order', sa.Integer(), nullable=False),
        sa.Column('color', sa.String(length=20), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('style', 'name', name='uq_belt_levels_style_name'),
    )
    op.create_index('ix_belt_levels_id', 'belt_levels', ['id'])
    op.create_index('ix_belt_levels_style', 'belt_levels', ['style'])

    op.create_table(
        'members',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('first_name', sa.String(length=100), nullable=False),
        sa.Column('last_name', sa.String(length=100), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('phone', sa.String(length=50), nullable=False),
        sa.Column('date_of_birth', sa.Date(), nullable=True),
        sa.Column('emergency_contact_name', sa.String(), nullable=False),
        sa.Column('emergency_contact_relationship', sa.String(), nullable=False),
        sa.Column('emergency_contact_phone', sa.String(), nullable=False),
        sa.Column(
            'membership_type',
            sa.Enum('Recurring', 'Prepaid', name='membershiptype'),
            nullable=False,
        ),
        sa.Column(
            'membership_status',
            sa.Enum('No Membership', 'Active', 'Paused', 'Overdue', name='memberstatus'),
            nullable=False,
        ),
        sa.Column('monthly_amount', sa.Numeric(10, 2), nullable=True),
        sa.Column('total_amount', sa.Numeric(10, 2), nullable=True),
        sa.Column('total_credits', sa.Integer(), nullable=True),
        sa.Column('remaining_credits', sa.Integer(), nullable=True),
        sa.Column(
            'payment_method',
            sa.Enum('ACH', 'Credit Card', 'Cash', 'Check', name='paymentmethod'),
            nullable=True,
        ),
        sa.Column('auto_renew', sa.Boolean(), nullable=False),
        sa.Column('membership_started_at', sa.DateTime(), nullable=True),
        sa.Column('paused_at', sa.DateTime(), nullable=True),
        sa.Column('pause_reason', sa.String(), nullable=True),
        sa.Column('overdue_at', sa.DateTime(), nullable=True),
        sa.Column('waiver_signed', sa.Boolean(), nullable=False),
        sa.Column('waiver_date', sa.DateTime(), nullable=True),
        sa.Column('medical_notes', sa.String(), nullable=True),
        sa.Column('join_date', sa.DateTime(), nullable=False),
        sa.Column('last_visit', sa.DateTime(), nullable=True),
        sa.Column('total_visits', sa.Integer(), nullable=False),
        sa.Column('current_belt_level_id', sa.Uuid(), nullable=True),
        sa.Column('current_belt_name', sa.String(), nullable=True),
        sa.Column('current_belt_style', sa.String(), nullable=True),
        sa.Column('current_belt_awarded_at', sa.DateTime(), nullable=True),
        sa.Column('notes', sa.String(), nullable=True),
        sa.Column('tags', sa.JSON(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('deactivated_at', sa.DateTime(), nullable=True),
        sa.Column('deactivated_by', sa.Uuid(), nullable=True),
        sa.Column('created_by', sa.Uuid(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(
            ['current_belt_level_id'], ['belt_levels.id'], ondelete='SET NULL'
        ),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_members_id', 'members', ['id'])
    op.create_index('ix_members_email', 'members', ['email'], unique=True)
    op.create_index('ix_members_active_status', 'members', ['is_active', 'membership_status'])

    op.create_table(
        'member_activities',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('member_id', sa.Uuid(), nullable=False),
        sa.Column(
            'type',
            sa.Enum('check_in', 'membership_change', 'belt_award', name='memberactivitytype'),
            nullable=False,
        ),
        sa.Column('description', sa.String(), nullable=False),
        sa.Column('performed_by', sa.Uuid(), nullable=True),
        sa.Column('performed_by_name', sa.String(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['member_id'], ['members.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_member_activities_id', 'member_activities', ['id'])
    op.create_index('ix_member_activities_member_id', 'member_activities', ['member_id'])
    op.create_index('ix_member_activities_created_at', 'member_activities', ['created_at'])

    op.create_table(
        'member_check_ins',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('member_id', sa.Uuid(), nullable=False),
        sa.Column('member_name', sa.String(), nullable=False),
        sa.Column('class_id', sa.Uuid(), nullable=True),
        sa.Column('class_title', sa.String(), nullable=True),
        sa.Column('credits_used', sa.Integer(), nullable=False),
        sa.Column('check_in_time', sa.DateTime(), nullable=False),
        sa.Column('notes', sa.String(), nullable=True),
        sa.Column('created_by', sa.Uuid(), nullable=True),
        sa.Column('created_by_name', sa.String(), nullable=False),
        sa.ForeignKeyConstraint(['member_id'], ['members.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['class_id'], ['class_sessions.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_member_check_ins_id', 'member_check_ins', ['id'])
    op.create_index('ix_member_check_ins_member_id', 'member_check_ins', ['member_id'])

    op.create_table(
        'member_belt_awards',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('member_id', sa.Uuid(), nullable=False),
        sa.Column('belt_level_id', sa.Uuid(), nullable=True),
        sa.Column('belt_level_name', sa.String(), nullable=False),
        sa.Column('style', sa.String(), nullable=False),
        sa.Column('awarded_at', sa.DateTime(), nullable=False),
        sa.Column('awarded_by', sa.Uuid(), nullable=True),
        sa.Column('awarded_by_name', sa.String(), nullable=False),
        sa.Column('notes', sa.String(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['member_id'], ['members.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['belt_level_id'], ['belt_levels.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_member_belt_awards_id', 'member_belt_awards', ['id'])
    op.create_index('ix_member_belt_awards_member_id', 'member_belt_awards', ['member_id'])

    op.add_column(
        'membership_subscriptions', sa.Column('member_id', sa.Uuid(), nullable=True)
    )
    op.create_foreign_key(
        'fk_membership_subscriptions_member_id',
        'membership_subscriptions',
        'members',
        ['member_id'],
        ['id'],
        ondelete='SET NULL',
    )
    op.create_index(
        'ix_membership_subscriptions_member_id', 'membership_subscriptions', ['member_id']
    )


def downgrade() -> None:
    op.drop_index('ix_membership_subscriptions_member_id', 'membership_subscriptions')
    op.drop_constraint(
        'fk_membership_subscriptions_member_id', 'membership_subscriptions', type_='foreignkey'
    )
    op.drop_column('membership_subscriptions', 'member_id')

    op.drop_table('member_belt_awards')
    op.drop_table('member_check_ins')
    op.drop_table('member_activities')
    op.drop_table('members')
    op.drop_table('belt_levels')

    for enum_name in ('memberactivitytype', 'paymentmethod', 'memberstatus', 'membershiptype'):
        sa.Enum(name=enum_name).drop(op.get_bind(), checkfirst=True)
