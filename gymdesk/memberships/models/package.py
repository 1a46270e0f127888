import enum
import uuid
from datetime import datetime
from decimal import Decimal

from sqlalchemy import JSON, Enum, Numeric
from sqlalchemy.orm import Mapped, mapped_column, relationship

from gymdesk.db.session import Base


class DurationType(str, enum.Enum):
    MONTHS = "months"
    WEEKS = "weeks"
    DAYS = "days"


class PackageStatus(str, enum.Enum):
    ACTIVE = "Active"
    INACTIVE = "Inactive"
    ARCHIVED = "Archived"


class MembershipPackage(Base):
    __tablename__ = "membership_packages"

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4, index=True)
    name: Mapped[str] = mapped_column(index=True)
    description: Mapped[str] = mapped_column(default="")
    duration: Mapped[int] = mapped_column()
    duration_type: Mapped[DurationType] = mapped_column(
        Enum(DurationType, values_callable=lambda obj: [e.value for e in obj]),
        default=DurationType.MONTHS,
    )
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2))

    # Access control
    sport_categories: Mapped[list[str]] = mapped_column(JSON, default=list)
    is_full_access: Mapped[bool] = mapped_column(default=False, index=True)

    # Usage limits
    is_unlimited: Mapped[bool] = mapped_column(default=True, index=True)
    class_limit_per_week: Mapped[int | None] = mapped_column(default=None)
    class_limit_per_month: Mapped[int | None] = mapped_column(default=None)

    # Policies
    allow_freeze: Mapped[bool] = mapped_column(default=True)
    max_freeze_months: Mapped[int | None] = mapped_column(default=None)
    min_freeze_weeks: Mapped[int | None] = mapped_column(default=None)
    guest_passes_included: Mapped[int] = mapped_column(default=0)

    # Renewal and commitment
    auto_renewal: Mapped[bool] = mapped_column(default=False)
    renewal_discount_percent: Mapped[Decimal | None] = mapped_column(
        Numeric(5, 2), default=None
    )
    early_termination_fee: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), default=None)
    minimum_commitment_months: Mapped[int | None] = mapped_column(default=None)

    # Status and display
    status: Mapped[PackageStatus] = mapped_column(
        Enum(PackageStatus, values_callable=lambda obj: [e.value for e in obj]),
        default=PackageStatus.ACTIVE,
        index=True,
    )
    is_popular: Mapped[bool] = mapped_column(default=False, index=True)
    display_order: Mapped[int] = mapped_column(default=1, index=True)

    # Attribution
    created_by: Mapped[uuid.UUID | None] = mapped_column(default=None)
    created_by_name: Mapped[str] = mapped_column(default="")
    last_modified_by: Mapped[uuid.UUID | None] = mapped_column(default=None)
    last_modified_by_name: Mapped[str | None] = mapped_column(default=None)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    subscriptions = relationship("MembershipSubscription", back_populates="package")

    def __repr__(self) -> str:
        return f"<MembershipPackage(id={self.id}, name={self.name}, status={self.status})>"
