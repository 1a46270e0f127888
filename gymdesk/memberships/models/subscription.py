import enum
import uuid
from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import ForeignKey, Index, Numeric
from sqlalchemy.orm import Mapped, mapped_column, relationship

from gymdesk.db.session import Base


class SubscriptionStatus(str, enum.Enum):
    """Closed set of subscription states counted by usage statistics."""

    ACTIVE = "Active"
    PAUSED = "Paused"
    CANCELLED = "Cancelled"


class MembershipSubscription(Base):
    """A member's purchase of a membership package.

    ``status`` is stored as plain text; rows written by other tools may hold
    values outside ``SubscriptionStatus`` and are rejected when aggregated.
    """

    __tablename__ = "membership_subscriptions"
    __table_args__ = (
        Index("ix_membership_subscriptions_package_status", "package_id", "status"),
    )

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4, index=True)
    package_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("membership_packages.id", ondelete="RESTRICT"), index=True
    )
    member_id: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("members.id", ondelete="SET NULL"), default=None, index=True
    )

    member_name: Mapped[str] = mapped_column()
    member_email: Mapped[str] = mapped_column(index=True)

    start_date: Mapped[date] = mapped_column()
    end_date: Mapped[date | None] = mapped_column(default=None)
    status: Mapped[str] = mapped_column(default=SubscriptionStatus.ACTIVE.value)

    # Payment
    amount_paid: Mapped[Decimal] = mapped_column(Numeric(10, 2), default=Decimal("0"))
    payment_method: Mapped[str | None] = mapped_column(default=None)
    payment_date: Mapped[datetime] = mapped_column(default=datetime.utcnow)

    # Usage tracking
    classes_attended: Mapped[int] = mapped_column(default=0)
    guest_passes_used: Mapped[int] = mapped_column(default=0)

    # Pause / cancellation
    paused_at: Mapped[datetime | None] = mapped_column(default=None)
    pause_reason: Mapped[str | None] = mapped_column(default=None)
    cancelled_at: Mapped[datetime | None] = mapped_column(default=None)
    cancellation_reason: Mapped[str | None] = mapped_column(default=None)

    notes: Mapped[str | None] = mapped_column(default=None)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    package = relationship("MembershipPackage", back_populates="subscriptions")
    member = relationship("Member", back_populates="subscriptions")

    def __repr__(self) -> str:
        return (
            f"<MembershipSubscription(id={self.id}, "
            f"package_id={self.package_id}, status={self.status})>"
        )
