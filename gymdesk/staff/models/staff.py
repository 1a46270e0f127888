import enum
import uuid
from datetime import datetime

from sqlalchemy import Enum, String
from sqlalchemy.orm import Mapped, mapped_column

from gymdesk.db.session import Base


class StaffRole(str, enum.Enum):
    ADMIN = "admin"
    TRAINER = "trainer"
    STAFF = "staff"


class Staff(Base):
    """
    Gym staff account used for role-gated access to the console.

    Attributes:
        id: Unique UUID primary key (the ``sub`` claim of access tokens)
        email: Unique email address
        full_name: Display name, also used as instructor name
        role: One of admin, trainer, staff
        is_active: Inactive staff cannot call the API and are not instructors
    """

    __tablename__ = "staff"

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4, index=True)
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    full_name: Mapped[str] = mapped_column(String(255))
    phone: Mapped[str | None] = mapped_column(String(50), default=None)

    role: Mapped[StaffRole] = mapped_column(
        Enum(StaffRole, values_callable=lambda obj: [e.value for e in obj]),
        default=StaffRole.STAFF,
        index=True,
    )
    is_active: Mapped[bool] = mapped_column(default=True, index=True)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self) -> str:
        return f"<Staff(id={self.id}, email={self.email}, role={self.role})>"
