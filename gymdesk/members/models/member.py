import enum
import uuid
from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import JSON, Enum, ForeignKey, Index, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from gymdesk.db.session import Base


def _enum_values(obj: type[enum.Enum]) -> list[str]:
    return [e.value for e in obj]


class MemberStatus(str, enum.Enum):
    NO_MEMBERSHIP = "No Membership"
    ACTIVE = "Active"
    PAUSED = "Paused"
    OVERDUE = "Overdue"


class MembershipType(str, enum.Enum):
    RECURRING = "Recurring"
    PREPAID = "Prepaid"


class PaymentMethod(str, enum.Enum):
    ACH = "ACH"
    CREDIT_CARD = "Credit Card"
    CASH = "Cash"
    CHECK = "Check"


class MemberActivityType(str, enum.Enum):
    CHECK_IN = "check_in"
    MEMBERSHIP_CHANGE = "membership_change"
    BELT_AWARD = "belt_award"


class Member(Base):
    """
    A gym member with contact details, membership terms and attendance.

    Attributes:
        email: Unique, stored lower-case
        membership_status: Current standing; see ``MemberStatus``
        remaining_credits: Credits left on a credit-based membership
        total_visits: Number of check-ins
        current_belt_*: Snapshot of the latest belt award
        is_active: False once the member is deactivated; rows are never deleted
    """

    __tablename__ = "members"
    __table_args__ = (Index("ix_members_active_status", "is_active", "membership_status"),)

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4, index=True)
    first_name: Mapped[str] = mapped_column(String(100))
    last_name: Mapped[str] = mapped_column(String(100))
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    phone: Mapped[str] = mapped_column(String(50))
    date_of_birth: Mapped[date | None] = mapped_column(default=None)

    # Emergency contact
    emergency_contact_name: Mapped[str] = mapped_column(default="")
    emergency_contact_relationship: Mapped[str] = mapped_column(default="")
    emergency_contact_phone: Mapped[str] = mapped_column(default="")

    # Membership
    membership_type: Mapped[MembershipType] = mapped_column(
        Enum(MembershipType, values_callable=_enum_values), default=MembershipType.RECURRING
    )
    membership_status: Mapped[MemberStatus] = mapped_column(
        Enum(MemberStatus, values_callable=_enum_values), default=MemberStatus.NO_MEMBERSHIP
    )
    monthly_amount: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), default=None)
    total_amount: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), default=None)
    total_credits: Mapped[int | None] = mapped_column(default=None)
    remaining_credits: Mapped[int | None] = mapped_column(default=None)
    payment_method: Mapped[PaymentMethod | None] = mapped_column(
        Enum(PaymentMethod, values_callable=_enum_values), default=None
    )
    auto_renew: Mapped[bool] = mapped_column(default=False)
    membership_started_at: Mapped[datetime | None] = mapped_column(default=None)
    paused_at: Mapped[datetime | None] = mapped_column(default=None)
    pause_reason: Mapped[str | None] = mapped_column(default=None)
    overdue_at: Mapped[datetime | None] = mapped_column(default=None)

    # Health and waiver
    waiver_signed: Mapped[bool] = mapped_column(default=False)
    waiver_date: Mapped[datetime | None] = mapped_column(default=None)
    medical_notes: Mapped[str | None] = mapped_column(default=None)

    # Attendance
    join_date: Mapped[datetime] = mapped_column(default=datetime.utcnow)
    last_visit: Mapped[datetime | None] = mapped_column(default=None)
    total_visits: Mapped[int] = mapped_column(default=0)

    # Latest belt award
    current_belt_level_id: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("belt_levels.id", ondelete="SET NULL"), default=None
    )
    current_belt_name: Mapped[str | None] = mapped_column(default=None)
    current_belt_style: Mapped[str | None] = mapped_column(default=None)
    current_belt_awarded_at: Mapped[datetime | None] = mapped_column(default=None)

    notes: Mapped[str | None] = mapped_column(default=None)
    tags: Mapped[list[str]] = mapped_column(JSON, default=list)

    is_active: Mapped[bool] = mapped_column(default=True)
    deactivated_at: Mapped[datetime | None] = mapped_column(default=None)
    deactivated_by: Mapped[uuid.UUID | None] = mapped_column(default=None)
    created_by: Mapped[uuid.UUID | None] = mapped_column(default=None)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    subscriptions = relationship("MembershipSubscription", back_populates="member")

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def __repr__(self) -> str:
        return f"<Member(id={self.id}, email={self.email}, status={self.membership_status})>"


class MemberActivity(Base):
    """Audit trail entry for a member, newest first when listed."""

    __tablename__ = "member_activities"

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4, index=True)
    member_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("members.id", ondelete="CASCADE"), index=True
    )
    type: Mapped[MemberActivityType] = mapped_column(
        Enum(MemberActivityType, values_callable=_enum_values)
    )
    description: Mapped[str] = mapped_column()
    performed_by: Mapped[uuid.UUID | None] = mapped_column(default=None)
    performed_by_name: Mapped[str] = mapped_column(default="")
    created_at: Mapped[datetime] = mapped_column(default=datetime.utcnow, index=True)


class MemberCheckIn(Base):
    __tablename__ = "member_check_ins"

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4, index=True)
    member_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("members.id", ondelete="CASCADE"), index=True
    )
    member_name: Mapped[str] = mapped_column()
    class_id: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("class_sessions.id", ondelete="SET NULL"), default=None
    )
    class_title: Mapped[str | None] = mapped_column(default=None)
    credits_used: Mapped[int] = mapped_column(default=0)
    check_in_time: Mapped[datetime] = mapped_column(default=datetime.utcnow)
    notes: Mapped[str | None] = mapped_column(default=None)
    created_by: Mapped[uuid.UUID | None] = mapped_column(default=None)
    created_by_name: Mapped[str] = mapped_column(default="")
