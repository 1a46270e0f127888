"""create_gym_admin_tables

Revision ID: 4f2a9c1d7e30
Revises:
Create Date: 2026-10-18 10:12:41.208113

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = '4f2a9c1d7e30'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        'staff',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('full_name', sa.String(length=255), nullable=False),
        sa.Column('phone', sa.String(length=50), nullable=True),
        sa.Column('role', sa.Enum('admin', 'trainer', 'staff', name='staffrole'), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_staff_id', 'staff', ['id'])
    op.create_index('ix_staff_email', 'staff', ['email'], unique=True)
    op.create_index('ix_staff_is_active', 'staff', ['is_active'])

    op.create_table(
        'membership_packages',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('description', sa.String(), nullable=False),
        sa.Column('duration', sa.Integer(), nullable=False),
        sa.Column(
            'duration_type',
            sa.Enum('months', 'weeks', 'days', name='durationtype'),
            nullable=False,
        ),
        sa.Column('price', sa.Numeric(10, 2), nullable=False),
        sa.Column('sport_categories', sa.JSON(), nullable=False),
        sa.Column('is_full_access', sa.Boolean(), nullable=False),
        sa.Column('is_unlimited', sa.Boolean(), nullable=False),
        sa.Column('class_limit_per_week', sa.Integer(), nullable=True),
        sa.Column('class_limit_per_month', sa.Integer(), nullable=True),
        sa.Column('allow_freeze', sa.Boolean(), nullable=False),
        sa.Column('max_freeze_months', sa.Integer(), nullable=True),
        sa.Column('min_freeze_weeks', sa.Integer(), nullable=True),
        sa.Column('guest_passes_included', sa.Integer(), nullable=False),
        sa.Column('auto_renewal', sa.Boolean(), nullable=False),
        sa.Column('renewal_discount_percent', sa.Numeric(5, 2), nullable=True),
        sa.Column('early_termination_fee', sa.Numeric(10, 2), nullable=True),
        sa.Column('minimum_commitment_months', sa.Integer(), nullable=True),
        sa.Column(
            'status',
            sa.Enum('Active', 'Inactive', 'Archived', name='packagestatus'),
            nullable=False,
        ),
        sa.Column('is_popular', sa.Boolean(), nullable=False),
        sa.Column('display_order', sa.Integer(), nullable=False),
        sa.Column('created_by', sa.Uuid(), nullable=True),
        sa.Column('created_by_name', sa.String(), nullable=False),
        sa.Column('last_modified_by', sa.Uuid(), nullable=True),
        sa.Column('last_modified_by_name', sa.String(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )
    for column in ('id', 'name', 'is_full_access', 'is_unlimited', 'status', 'is_popular',
                   'display_order'):
        op.create_index(f'ix_membership_packages_{column}', 'membership_packages', [column])

    op.create_table(
        'membership_subscriptions',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('package_id', sa.Uuid(), nullable=False),
        sa.Column('member_name', sa.String(), nullable=False),
        sa.Column('member_email', sa.String(), nullable=False),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.Column('end_date', sa.Date(), nullable=True),
        sa.Column('status', sa.String(), nullable=False),
        sa.Column('amount_paid', sa.Numeric(10, 2), nullable=False),
        sa.Column('payment_method', sa.String(), nullable=True),
        sa.Column('payment_date', sa.DateTime(), nullable=False),
        sa.Column('classes_attended', sa.Integer(), nullable=False),
        sa.Column('guest_passes_used', sa.Integer(), nullable=False),
        sa.Column('paused_at', sa.DateTime(), nullable=True),
        sa.Column('pause_reason', sa.String(), nullable=True),
        sa.Column('cancelled_at', sa.DateTime(), nullable=True),
        sa.Column('cancellation_reason', sa.String(), nullable=True),
        sa.Column('notes', sa.String(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['package_id'], ['membership_packages.id'], ondelete='RESTRICT'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_membership_subscriptions_id', 'membership_subscriptions', ['id'])
    op.create_index(
        'ix_membership_subscriptions_package_id', 'membership_subscriptions', ['package_id']
    )
    op.create_index(
        'ix_membership_subscriptions_member_email', 'membership_subscriptions', ['member_email']
    )
    op.create_index(
        'ix_membership_subscriptions_package_status',
        'membership_subscriptions',
        ['package_id', 'status'],
    )

    class_type = sa.Enum('class', 'workshop', name='classtype')

    op.create_table(
        'class_packages',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('description', sa.String(), nullable=False),
        sa.Column('type', class_type, nullable=False),
        sa.Column('start_time', sa.Time(), nullable=False),
        sa.Column('end_time', sa.Time(), nullable=False),
        sa.Column('location', sa.String(), nullable=False),
        sa.Column('capacity', sa.Integer(), nullable=False),
        sa.Column('instructor_id', sa.Uuid(), nullable=True),
        sa.Column('instructor_name', sa.String(), nullable=False),
        sa.Column('package_price', sa.Numeric(10, 2), nullable=False),
        sa.Column('total_sessions', sa.Integer(), nullable=False),
        sa.Column('days_of_week', sa.JSON(), nullable=False),
        sa.Column('duration_value', sa.Integer(), nullable=False),
        sa.Column('duration_unit', sa.String(), nullable=False),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.Column('end_date', sa.Date(), nullable=False),
        sa.Column('image_url', sa.String(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['instructor_id'], ['staff.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_class_packages_id', 'class_packages', ['id'])
    op.create_index('ix_class_packages_instructor_id', 'class_packages', ['instructor_id'])
    op.create_index('ix_class_packages_is_active', 'class_packages', ['is_active'])

    op.create_table(
        'class_sessions',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('description', sa.String(), nullable=False),
        sa.Column(
            'type',
            postgresql.ENUM('class', 'workshop', name='classtype', create_type=False),
            nullable=False,
        ),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('start_time', sa.Time(), nullable=False),
        sa.Column('end_time', sa.Time(), nullable=False),
        sa.Column('location', sa.String(), nullable=False),
        sa.Column('capacity', sa.Integer(), nullable=False),
        sa.Column('current_enrollment', sa.Integer(), nullable=False),
        sa.Column('instructor_id', sa.Uuid(), nullable=True),
        sa.Column('instructor_name', sa.String(), nullable=False),
        sa.Column('price', sa.Numeric(10, 2), nullable=False),
        sa.Column('image_url', sa.String(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('is_package', sa.Boolean(), nullable=False),
        sa.Column('package_id', sa.Uuid(), nullable=True),
        sa.Column('package_price', sa.Numeric(10, 2), nullable=True),
        sa.Column('total_sessions', sa.Integer(), nullable=True),
        sa.Column('session_number', sa.Integer(), nullable=True),
        sa.Column('package_title', sa.String(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['instructor_id'], ['staff.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['package_id'], ['class_packages.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_class_sessions_id', 'class_sessions', ['id'])
    op.create_index('ix_class_sessions_type', 'class_sessions', ['type'])
    op.create_index('ix_class_sessions_date', 'class_sessions', ['date'])
    op.create_index('ix_class_sessions_is_package', 'class_sessions', ['is_package'])
    op.create_index('ix_class_sessions_package_date', 'class_sessions', ['package_id', 'date'])
    op.create_index(
        'ix_class_sessions_instructor_date', 'class_sessions', ['instructor_id', 'date']
    )

    op.create_table(
        'discounts',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('code', sa.String(), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('description', sa.String(), nullable=True),
        sa.Column(
            'type', sa.Enum('percentage', 'fixed_amount', name='discounttype'), nullable=False
        ),
        sa.Column('value', sa.Numeric(10, 2), nullable=False),
        sa.Column('max_uses', sa.Integer(), nullable=True),
        sa.Column('max_uses_per_user', sa.Integer(), nullable=True),
        sa.Column('current_uses', sa.Integer(), nullable=False),
        sa.Column('start_date', sa.DateTime(), nullable=False),
        sa.Column('end_date', sa.DateTime(), nullable=True),
        sa.Column(
            'applies_to',
            sa.Enum(
                'all', 'classes', 'workshops', 'packages', 'specific_items',
                name='discountappliesto',
            ),
            nullable=False,
        ),
        sa.Column('specific_item_ids', sa.JSON(), nullable=False),
        sa.Column('minimum_amount', sa.Numeric(10, 2), nullable=True),
        sa.Column(
            'status',
            sa.Enum('Active', 'Expired', 'Disabled', 'Used Up', name='discountstatus'),
            nullable=False,
        ),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('created_by', sa.Uuid(), nullable=True),
        sa.Column('created_by_name', sa.String(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_discounts_id', 'discounts', ['id'])
    op.create_index('ix_discounts_code', 'discounts', ['code'], unique=True)
    op.create_index('ix_discounts_status', 'discounts', ['status'])
    op.create_index('ix_discounts_is_active', 'discounts', ['is_active'])

    op.create_table(
        'discount_usages',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('discount_id', sa.Uuid(), nullable=False),
        sa.Column('discount_code', sa.String(), nullable=False),
        sa.Column('member_email', sa.String(), nullable=True),
        sa.Column('member_name', sa.String(), nullable=True),
        sa.Column(
            'item_type',
            sa.Enum('class', 'workshop', 'package', name='discountitemtype'),
            nullable=False,
        ),
        sa.Column('item_id', sa.String(), nullable=False),
        sa.Column('item_name', sa.String(), nullable=False),
        sa.Column('original_amount', sa.Numeric(10, 2), nullable=False),
        sa.Column('discount_amount', sa.Numeric(10, 2), nullable=False),
        sa.Column('final_amount', sa.Numeric(10, 2), nullable=False),
        sa.Column('used_by', sa.Uuid(), nullable=True),
        sa.Column('used_by_name', sa.String(), nullable=False),
        sa.Column('notes', sa.String(), nullable=True),
        sa.Column('used_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['discount_id'], ['discounts.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['used_by'], ['staff.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_discount_usages_id', 'discount_usages', ['id'])
    op.create_index('ix_discount_usages_discount_id', 'discount_usages', ['discount_id'])
    op.create_index('ix_discount_usages_member_email', 'discount_usages', ['member_email'])
    op.create_index('ix_discount_usages_used_at', 'discount_usages', ['used_at'])


def downgrade() -> None:
    op.drop_table('discount_usages')
    op.drop_table('discounts')
    op.drop_table('class_sessions')
    op.drop_table('class_packages')
    op.drop_table('membership_subscriptions')
    op.drop_table('membership_packages')
    op.drop_table('staff')

    for enum_name in (
        'discountitemtype', 'discountstatus', 'discountappliesto', 'discounttype',
        'classtype', 'packagestatus', 'durationtype', 'staffrole',
    ):
        sa.Enum(name=enum_name).drop(op.get_bind(), checkfirst=True)
