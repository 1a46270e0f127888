import logging
import uuid
from typing import Any

from sqlalchemy import or_
from sqlalchemy.orm import Session

from gymdesk.core.constants import DEFAULT_MEMBER_ACTIVITY_LIMIT
from gymdesk.core.datetime_utils import utcnow
from gymdesk.core.exceptions import ConflictError, ValidationError
from gymdesk.core.repository import BaseRepository
from gymdesk.members.models.member import (
    Member,
    MemberActivity,
    MemberActivityType,
    MemberCheckIn,
    MemberStatus,
)
from gymdesk.members.schemas.member import CheckInRequest, MemberCreate, MemberUpdate
from gymdesk.members.services.stats import MemberStats, month_start, summarize
from gymdesk.memberships.models.subscription import MembershipSubscription, SubscriptionStatus
from gymdesk.scheduling.services.class_service import ClassService
from gymdesk.staff.models.staff import Staff

logger = logging.getLogger(__name__)

# Timestamp column stamped when a member enters the status
STATUS_TIMESTAMPS: dict[MemberStatus, str] = {
    MemberStatus.ACTIVE: "membership_started_at",
    MemberStatus.PAUSED: "paused_at",
    MemberStatus.OVERDUE: "overdue_at",
}

# Fields that cannot be cleared by an update
NON_NULLABLE_FIELDS = frozenset(
    {
        "first_name",
        "last_name",
        "email",
        "phone",
        "emergency_contact",
        "membership_type",
        "auto_renew",
        "waiver_signed",
        "tags",
    }
)


class MemberRepository(BaseRepository[Member]):
    def __init__(self, db: Session):
        super().__init__(db, Member, resource="member")

    def find_by_email(self, email: str) -> Member | None:
        return self.db.query(Member).filter(Member.email == email.lower()).first()


def _flatten_contact(values: dict[str, Any]) -> dict[str, Any]:
    contact = values.pop("emergency_contact", None)
    if contact is not None:
        values["emergency_contact_name"] = contact["name"]
        values["emergency_contact_relationship"] = contact["relationship"]
        values["emergency_contact_phone"] = contact["phone"]
    return values


class MemberService:
    """Member records, membership standing and check-ins.

    Members are never deleted; ``deactivate_member`` hides them from lists
    and stats. Every change is recorded as a ``MemberActivity``.
    """

    def __init__(self, db: Session):
        self.db = db
        self.repository = MemberRepository(db)

    def _log_activity(
        self,
        member: Member,
        activity_type: MemberActivityType,
        description: str,
        staff: Staff | None,
    ) -> None:
        self.db.add(
            MemberActivity(
                member_id=member.id,
                type=activity_type,
                description=description,
                performed_by=staff.id if staff else None,
                performed_by_name=staff.full_name if staff else "",
            )
        )

    def _ensure_email_free(self, email: str, member_id: uuid.UUID | None = None) -> None:
        existing = self.repository.find_by_email(email)
        if existing is not None and existing.id != member_id:
            raise ConflictError(f"Member {email} already exists", resource="member")

    def create_member(self, data: MemberCreate, staff: Staff) -> Member:
        email = data.email.lower()
        self._ensure_email_free(email)

        values = _flatten_contact(data.model_dump())
        values["email"] = email
        now = utcnow()
        member = Member(
            **values,
            membership_status=MemberStatus.NO_MEMBERSHIP,
            remaining_credits=data.total_credits,
            waiver_date=now if data.waiver_signed else None,
            join_date=now,
            created_by=staff.id,
        )
        self.db.add(member)
        self.db.flush()
        self._log_activity(
            member,
            MemberActivityType.MEMBERSHIP_CHANGE,
            f"Member created: {member.full_name}",
            staff,
        )
        self.db.commit()
        self.db.refresh(member)

        logger.info("Created member %s by staff %s", member.id, staff.id)
        return member

    def list_members(
        self,
        status: MemberStatus | None = None,
        query: str | None = None,
        include_inactive: bool = False,
    ) -> list[Member]:
        """Members newest first; deactivated members only when asked for."""
        criteria = []
        if not include_inactive:
            criteria.append(Member.is_active == True)  # noqa: E712
        if status is not None:
            criteria.append(Member.membership_status == status)
        if query:
            pattern = f"%{query.strip()}%"
            criteria.append(
                or_(
                    Member.first_name.ilike(pattern),
                    Member.last_name.ilike(pattern),
                    Member.email.ilike(pattern),
                )
            )
        return self.repository.find_all(*criteria, order_by=Member.created_at.desc())

    def get_member(self, member_id: uuid.UUID) -> Member:
        return self.repository.get_or_raise(member_id, "Member not found")

    def update_member(self, member_id: uuid.UUID, data: MemberUpdate, staff: Staff) -> Member:
        """Apply the given fields.

        Changing ``total_credits`` moves ``remaining_credits`` by the same
        amount, never below zero.
        """
        member = self.get_member(member_id)
        changes = {
            key: value
            for key, value in data.model_dump(exclude_unset=True).items()
            if value is not None or key not in NON_NULLABLE_FIELDS
        }
        changes = _flatten_contact(changes)

        if "email" in changes:
            changes["email"] = changes["email"].lower()
            self._ensure_email_free(changes["email"], member.id)

        if changes.get("total_credits") is not None:
            delta = changes["total_credits"] - (member.total_credits or 0)
            changes["remaining_credits"] = max((member.remaining_credits or 0) + delta, 0)

        if changes.get("waiver_signed") and member.waiver_date is None:
            changes["waiver_date"] = utcnow()

        for key, value in changes.items():
            setattr(member, key, value)
        self._log_activity(
            member, MemberActivityType.MEMBERSHIP_CHANGE, "Member information updated", staff
        )
        return self.repository.save(member)

    def deactivate_member(self, member_id: uuid.UUID, staff: Staff) -> Member:
        member = self.get_member(member_id)
        if not member.is_active:
            return member

        member.is_active = False
        member.deactivated_at = utcnow()
        member.deactivated_by = staff.id
        self._log_activity(
            member, MemberActivityType.MEMBERSHIP_CHANGE, "Member deactivated", staff
        )
        member = self.repository.save(member)
        logger.info("Deactivated member %s by staff %s", member.id, staff.id)
        return member

    def update_membership_status(
        self,
        member_id: uuid.UUID,
        status: MemberStatus,
        staff: Staff,
        reason: str | None = None,
    ) -> Member:
        """Move a member to ``status`` and stamp when it happened.

        Pausing records ``reason``; leaving Paused clears the pause fields.

        Raises:
            ValidationError: The member is deactivated.
        """
        member = self.get_member(member_id)
        if not member.is_active:
            raise ValidationError("Member is deactivated", field="member_id")

        member.membership_status = status
        stamp = STATUS_TIMESTAMPS.get(status)
        if stamp is not None:
            setattr(member, stamp, utcnow())
        if status is MemberStatus.PAUSED:
            member.pause_reason = reason
        else:
            member.paused_at = None
            member.pause_reason = None

        description = f"Membership status changed to {status.value}"
        if reason:
            description = f"{description}: {reason}"
        self._log_activity(member, MemberActivityType.MEMBERSHIP_CHANGE, description, staff)

        member = self.repository.save(member)
        logger.info("Member %s is now %s", member.id, status.value)
        return member

    def check_in_member(
        self, member_id: uuid.UUID, data: CheckInRequest, staff: Staff
    ) -> MemberCheckIn:
        """Record a visit, optionally for a class, spending credits if given.

        A class check-in also counts towards ``classes_attended`` of the
        member's latest active subscription.

        Raises:
            ValidationError: The member is deactivated, has neither an active
                membership nor credits, or has fewer credits than requested.
            NotFoundError: ``class_id`` names no class.
        """
        member = self.get_member(member_id)
        if not member.is_active:
            raise ValidationError("Member is deactivated", field="member_id")

        credits = member.remaining_credits or 0
        if member.membership_status != MemberStatus.ACTIVE and credits <= 0:
            raise ValidationError(
                "Member does not have an active membership or credits",
                field="membership_status",
            )
        if data.credits_used > credits:
            raise ValidationError(
                f"Member has {credits} credits, {data.credits_used} requested",
                field="credits_used",
            )

        class_title = None
        if data.class_id is not None:
            class_title = ClassService(self.db).get_class(data.class_id).title
            self._count_class_attendance(member)

        now = utcnow()
        check_in = MemberCheckIn(
            member_id=member.id,
            member_name=member.full_name,
            class_id=data.class_id,
            class_title=class_title,
            credits_used=data.credits_used,
            check_in_time=now,
            notes=data.notes,
            created_by=staff.id,
            created_by_name=staff.full_name,
        )
        self.db.add(check_in)

        member.last_visit = now
        member.total_visits = (member.total_visits or 0) + 1
        if data.credits_used:
            member.remaining_credits = credits - data.credits_used

        description = "Checked in"
        if class_title:
            description = f"{description} for {class_title}"
        if data.credits_used:
            description = f"{description} ({data.credits_used} credits used)"
        self._log_activity(member, MemberActivityType.CHECK_IN, description, staff)

        self.db.commit()
        self.db.refresh(check_in)
        return check_in

    def _count_class_attendance(self, member: Member) -> None:
        subscription = (
            self.db.query(MembershipSubscription)
            .filter(
                MembershipSubscription.member_id == member.id,
                MembershipSubscription.status == SubscriptionStatus.ACTIVE.value,
            )
            .order_by(MembershipSubscription.start_date.desc())
            .first()
        )
        if subscription is not None:
            subscription.classes_attended += 1

    def list_check_ins(self, member_id: uuid.UUID) -> list[MemberCheckIn]:
        self.get_member(member_id)
        return (
            self.db.query(MemberCheckIn)
            .filter(MemberCheckIn.member_id == member_id)
            .order_by(MemberCheckIn.check_in_time.desc())
            .all()
        )

    def list_activities(
        self, member_id: uuid.UUID, limit: int = DEFAULT_MEMBER_ACTIVITY_LIMIT
    ) -> list[MemberActivity]:
        self.get_member(member_id)
        return (
            self.db.query(MemberActivity)
            .filter(MemberActivity.member_id == member_id)
            .order_by(MemberActivity.created_at.desc())
            .limit(limit)
            .all()
        )

    def list_subscriptions(self, member_id: uuid.UUID) -> list[MembershipSubscription]:
        self.get_member(member_id)
        return (
            self.db.query(MembershipSubscription)
            .filter(MembershipSubscription.member_id == member_id)
            .order_by(MembershipSubscription.start_date.desc())
            .all()
        )

    def get_member_stats(self) -> MemberStats:
        """Stats over active (not deactivated) members."""
        members = self.repository.find_all(Member.is_active == True)  # noqa: E712
        return summarize(members, since=month_start(utcnow()))
