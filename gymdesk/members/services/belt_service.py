import logging
import uuid

from sqlalchemy.orm import Session

from gymdesk.core.exceptions import ConflictError
from gymdesk.core.repository import BaseRepository
from gymdesk.members.models.belt import BeltLevel, MemberBeltAward
from gymdesk.members.models.member import MemberActivity, MemberActivityType
from gymdesk.members.schemas.belt import BeltAwardCreate, BeltLevelCreate
from gymdesk.members.services.member_service import MemberService
from gymdesk.staff.models.staff import Staff

logger = logging.getLogger(__name__)


class BeltService:
    def __init__(self, db: Session):
        self.db = db
        self.repository = BaseRepository(db, BeltLevel, resource="belt_level")
        self.members = MemberService(db)

    def list_belt_levels(self) -> list[BeltLevel]:
        return (
            self.db.query(BeltLevel)
            .order_by(BeltLevel.style, BeltLevel.sort_order, BeltLevel.name)
            .all()
        )

    def create_belt_level(self, data: BeltLevelCreate) -> BeltLevel:
        name = data.name.strip()
        style = data.style.strip()
        existing = (
            self.db.query(BeltLevel)
            .filter(BeltLevel.style == style, BeltLevel.name == name)
            .first()
        )
        if existing is not None:
            raise ConflictError(f"{name} already exists in {style}", resource="belt_level")

        return self.repository.create(
            name=name,
            style=style,
            sort_order=data.sort_order,
            color=data.color.strip() if data.color else None,
        )

    def award_belt(
        self, member_id: uuid.UUID, data: BeltAwardCreate, staff: Staff
    ) -> MemberBeltAward:
        """Record a belt award and make it the member's current belt."""
        member = self.members.get_member(member_id)
        belt = self.repository.get_or_raise(data.belt_level_id, "Belt level not found")

        award = MemberBeltAward(
            member_id=member.id,
            belt_level_id=belt.id,
            belt_level_name=belt.name,
            style=belt.style,
            awarded_by=staff.id,
            awarded_by_name=staff.full_name,
            notes=data.notes,
        )
        self.db.add(award)
        self.db.flush()

        member.current_belt_level_id = belt.id
        member.current_belt_name = belt.name
        member.current_belt_style = belt.style
        member.current_belt_awarded_at = award.awarded_at
        self.db.add(
            MemberActivity(
                member_id=member.id,
                type=MemberActivityType.BELT_AWARD,
                description=f"Awarded {belt.name} in {belt.style}",
                performed_by=staff.id,
                performed_by_name=staff.full_name,
            )
        )
        self.db.commit()
        self.db.refresh(award)

        logger.info("Member %s awarded %s %s", member.id, belt.style, belt.name)
        return award

    def list_awards(self, member_id: uuid.UUID) -> list[MemberBeltAward]:
        self.members.get_member(member_id)
        return (
            self.db.query(MemberBeltAward)
            .filter(MemberBeltAward.member_id == member_id)
            .order_by(MemberBeltAward.awarded_at.desc())
            .all()
        )
