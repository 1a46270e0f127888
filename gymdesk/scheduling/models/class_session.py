import enum
import uuid
import datetime as dt
from decimal import Decimal

from sqlalchemy import JSON, Enum, ForeignKey, Index, Numeric
from sqlalchemy.orm import Mapped, mapped_column, relationship

from gymdesk.db.session import Base


class ClassType(str, enum.Enum):
    CLASS = "class"
    WORKSHOP = "workshop"


class ClassPackage(Base):
    """A run of sessions sold together for one package price"""

    __tablename__ = "class_packages"

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4, index=True)
    title: Mapped[str] = mapped_column()
    description: Mapped[str] = mapped_column(default="")
    type: Mapped[ClassType] = mapped_column(
        Enum(ClassType, values_callable=lambda obj: [e.value for e in obj]),
        default=ClassType.CLASS,
    )

    start_time: Mapped[dt.time] = mapped_column()
    end_time: Mapped[dt.time] = mapped_column()
    location: Mapped[str] = mapped_column()
    capacity: Mapped[int] = mapped_column()

    instructor_id: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("staff.id", ondelete="SET NULL"), index=True, default=None
    )
    instructor_name: Mapped[str] = mapped_column(default="")

    package_price: Mapped[Decimal] = mapped_column(Numeric(10, 2))
    total_sessions: Mapped[int] = mapped_column(default=0)

    # Recurrence that generated the sessions; weekdays use 0 = Sunday
    days_of_week: Mapped[list[int]] = mapped_column(JSON, default=list)
    duration_value: Mapped[int] = mapped_column()
    duration_unit: Mapped[str] = mapped_column()
    start_date: Mapped[dt.date] = mapped_column()
    end_date: Mapped[dt.date] = mapped_column()

    image_url: Mapped[str | None] = mapped_column(default=None)
    is_active: Mapped[bool] = mapped_column(default=True, index=True)

    # Timestamps
    created_at: Mapped[dt.datetime] = mapped_column(default=dt.datetime.utcnow)
    updated_at: Mapped[dt.datetime] = mapped_column(
        default=dt.datetime.utcnow, onupdate=dt.datetime.utcnow
    )

    # Relationships
    sessions = relationship(
        "ClassSession",
        back_populates="package",
        cascade="all, delete-orphan",
        order_by="ClassSession.date",
    )

    def __repr__(self) -> str:
        return f"<ClassPackage(id={self.id}, title={self.title}, sessions={self.total_sessions})>"


class ClassSession(Base):
    """A single scheduled class or workshop, standalone or part of a package"""

    __tablename__ = "class_sessions"
    __table_args__ = (
        Index("ix_class_sessions_package_date", "package_id", "date"),
        Index("ix_class_sessions_instructor_date", "instructor_id", "date"),
    )

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4, index=True)
    title: Mapped[str] = mapped_column()
    description: Mapped[str] = mapped_column(default="")
    type: Mapped[ClassType] = mapped_column(
        Enum(ClassType, values_callable=lambda obj: [e.value for e in obj]),
        default=ClassType.CLASS,
        index=True,
    )

    date: Mapped[dt.date] = mapped_column(index=True)
    start_time: Mapped[dt.time] = mapped_column()
    end_time: Mapped[dt.time] = mapped_column()
    location: Mapped[str] = mapped_column()
    capacity: Mapped[int] = mapped_column()
    current_enrollment: Mapped[int] = mapped_column(default=0)

    instructor_id: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("staff.id", ondelete="SET NULL"), default=None
    )
    instructor_name: Mapped[str] = mapped_column(default="")

    # Package sessions are free; the package carries the price
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), default=Decimal("0"))
    image_url: Mapped[str | None] = mapped_column(default=None)
    is_active: Mapped[bool] = mapped_column(default=True)

    # Package link
    is_package: Mapped[bool] = mapped_column(default=False, index=True)
    package_id: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("class_packages.id", ondelete="CASCADE"), default=None
    )
    package_price: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), default=None)
    total_sessions: Mapped[int | None] = mapped_column(default=None)
    session_number: Mapped[int | None] = mapped_column(default=None)
    package_title: Mapped[str | None] = mapped_column(default=None)

    # Timestamps
    created_at: Mapped[dt.datetime] = mapped_column(default=dt.datetime.utcnow)
    updated_at: Mapped[dt.datetime] = mapped_column(
        default=dt.datetime.utcnow, onupdate=dt.datetime.utcnow
    )

    # Relationships
    package = relationship("ClassPackage", back_populates="sessions")

    def __repr__(self) -> str:
        return f"<ClassSession(id={self.id}, title={self.title}, date={self.date})>"
