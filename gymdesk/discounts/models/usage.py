import enum
import uuid
from datetime import datetime
from decimal import Decimal

from sqlalchemy import Enum, ForeignKey, Numeric
from sqlalchemy.orm import Mapped, mapped_column, relationship

from gymdesk.db.session import Base


class DiscountItemType(str, enum.Enum):
    CLASS = "class"
    WORKSHOP = "workshop"
    PACKAGE = "package"


class DiscountUsage(Base):
    """One redemption of a discount code on a sale."""

    __tablename__ = "discount_usages"

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4, index=True)
    discount_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("discounts.id", ondelete="CASCADE"), index=True
    )
    discount_code: Mapped[str] = mapped_column()

    member_email: Mapped[str | None] = mapped_column(default=None, index=True)
    member_name: Mapped[str | None] = mapped_column(default=None)

    item_type: Mapped[DiscountItemType] = mapped_column(
        Enum(DiscountItemType, values_callable=lambda obj: [e.value for e in obj])
    )
    item_id: Mapped[str] = mapped_column()
    item_name: Mapped[str] = mapped_column(default="")

    original_amount: Mapped[Decimal] = mapped_column(Numeric(10, 2))
    discount_amount: Mapped[Decimal] = mapped_column(Numeric(10, 2))
    final_amount: Mapped[Decimal] = mapped_column(Numeric(10, 2))

    used_by: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("staff.id", ondelete="SET NULL"), default=None
    )
    used_by_name: Mapped[str] = mapped_column(default="")
    notes: Mapped[str | None] = mapped_column(default=None)
    used_at: Mapped[datetime] = mapped_column(default=datetime.utcnow, index=True)

    discount = relationship("Discount", back_populates="usages")

    def __repr__(self) -> str:
        return f"<DiscountUsage(id={self.id}, code={self.discount_code})>"
