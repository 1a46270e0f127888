import uuid
from datetime import datetime

from sqlalchemy import ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from gymdesk.db.session import Base


class BeltLevel(Base):
    """A rank in a martial arts style, e.g. Blue Belt in BJJ.

    Levels of one style sort by ``sort_order``.
    """

    __tablename__ = "belt_levels"
    __table_args__ = (UniqueConstraint("style", "name", name="uq_belt_levels_style_name"),)

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4, index=True)
    name: Mapped[str] = mapped_column(String(100))
    style: Mapped[str] = mapped_column(String(100), index=True)
    sort_order: Mapped[int] = mapped_column(default=0)
    color: Mapped[str | None] = mapped_column(String(20), default=None)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self) -> str:
        return f"<BeltLevel(id={self.id}, style={self.style}, name={self.name})>"


class MemberBeltAward(Base):
    """A belt awarded to a member; the belt's name and style are copied at award time."""

    __tablename__ = "member_belt_awards"

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4, index=True)
    member_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("members.id", ondelete="CASCADE"), index=True
    )
    belt_level_id: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("belt_levels.id", ondelete="SET NULL"), default=None
    )
    belt_level_name: Mapped[str] = mapped_column()
    style: Mapped[str] = mapped_column()
    awarded_at: Mapped[datetime] = mapped_column(default=datetime.utcnow)
    awarded_by: Mapped[uuid.UUID | None] = mapped_column(default=None)
    awarded_by_name: Mapped[str] = mapped_column(default="")
    notes: Mapped[str | None] = mapped_column(default=None)
    created_at: Mapped[datetime] = mapped_column(default=datetime.utcnow)
