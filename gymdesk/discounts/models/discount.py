import enum
import uuid
from datetime import datetime
from decimal import Decimal

from sqlalchemy import JSON, Enum, Numeric
from sqlalchemy.orm import Mapped, mapped_column, relationship

from gymdesk.db.session import Base


class DiscountType(str, enum.Enum):
    PERCENTAGE = "percentage"
    FIXED_AMOUNT = "fixed_amount"


class DiscountAppliesTo(str, enum.Enum):
    ALL = "all"
    CLASSES = "classes"
    WORKSHOPS = "workshops"
    PACKAGES = "packages"
    SPECIFIC_ITEMS = "specific_items"


class DiscountStatus(str, enum.Enum):
    ACTIVE = "Active"
    EXPIRED = "Expired"
    DISABLED = "Disabled"
    USED_UP = "Used Up"


def _enum_values(obj: type[enum.Enum]) -> list[str]:
    return [e.value for e in obj]


class Discount(Base):
    __tablename__ = "discounts"

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4, index=True)
    code: Mapped[str] = mapped_column(unique=True, index=True)
    name: Mapped[str] = mapped_column()
    description: Mapped[str | None] = mapped_column(default=None)

    type: Mapped[DiscountType] = mapped_column(Enum(DiscountType, values_callable=_enum_values))
    # Percentage (1-100) or amount in the default currency
    value: Mapped[Decimal] = mapped_column(Numeric(10, 2))

    # Usage limits (None = unlimited)
    max_uses: Mapped[int | None] = mapped_column(default=None)
    max_uses_per_user: Mapped[int | None] = mapped_column(default=None)
    current_uses: Mapped[int] = mapped_column(default=0)

    start_date: Mapped[datetime] = mapped_column()
    end_date: Mapped[datetime | None] = mapped_column(default=None)

    applies_to: Mapped[DiscountAppliesTo] = mapped_column(
        Enum(DiscountAppliesTo, values_callable=_enum_values),
        default=DiscountAppliesTo.ALL,
    )
    specific_item_ids: Mapped[list[str]] = mapped_column(JSON, default=list)
    minimum_amount: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), default=None)

    status: Mapped[DiscountStatus] = mapped_column(
        Enum(DiscountStatus, values_callable=_enum_values),
        default=DiscountStatus.ACTIVE,
        index=True,
    )
    is_active: Mapped[bool] = mapped_column(default=True, index=True)

    created_by: Mapped[uuid.UUID | None] = mapped_column(default=None)
    created_by_name: Mapped[str] = mapped_column(default="")
    created_at: Mapped[datetime] = mapped_column(default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(default=datetime.utcnow, onupdate=datetime.utcnow)

    usages = relationship("DiscountUsage", back_populates="discount")

    def __repr__(self) -> str:
        return f"<Discount(id={self.id}, code={self.code}, status={self.status})>"
