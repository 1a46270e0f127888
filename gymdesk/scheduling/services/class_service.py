import datetime as dt
import logging
import uuid
from decimal import Decimal

from sqlalchemy import func
from sqlalchemy.orm import Session, selectinload

from gymdesk.core import redis as cache
from gymdesk.core.config import settings
from gymdesk.core.constants import INSTRUCTORS_CACHE_KEY, RECURRING_CLASS_TITLE_DATE_FORMAT
from gymdesk.core.exceptions import InvalidPatternError, NotFoundError, ValidationError
from gymdesk.scheduling.models.class_session import ClassPackage, ClassSession
from gymdesk.scheduling.recurrence import (
    RecurrencePattern,
    ScheduleType,
    expand,
    per_session_price,
)
from gymdesk.scheduling.schemas.class_session import (
    ClassCreate,
    ClassPackageCreate,
    ClassPackageResponse,
    ClassPackageUpdate,
    ClassResponse,
    ClassUpdate,
    PackageSessionCreate,
    SchedulePreviewResponse,
)
from gymdesk.staff.models.staff import Staff
from gymdesk.staff.schemas.staff import InstructorResponse
from gymdesk.staff.services.staff_service import StaffRepository

logger = logging.getLogger(__name__)


def preview_schedule(
    pattern: RecurrencePattern, total_price: Decimal | None = None
) -> SchedulePreviewResponse:
    """Dates a pattern would generate, with the per-session share of a price."""
    dates = list(expand(pattern))
    return SchedulePreviewResponse(
        dates=dates,
        session_count=len(dates),
        end_date=pattern.end_date,
        per_session_price=(
            per_session_price(total_price, len(dates)) if total_price is not None else None
        ),
    )


class ClassService:
    def __init__(self, db: Session):
        self.db = db
        self.staff = StaffRepository(db)

    # ─────────────────────────────────────────────────────────────
    # Single and recurring classes
    # ─────────────────────────────────────────────────────────────

    def _instructor_name(self, instructor_id: uuid.UUID) -> str:
        instructor = self.staff.get_by_id(instructor_id)
        if instructor is None or not instructor.is_active:
            raise ValidationError("Instructor not found or inactive", field="instructor_id")
        return instructor.full_name

    def create_classes(self, data: ClassCreate) -> list[ClassSession]:
        """Create one class, or one standalone class per date of a recurring schedule."""
        pattern = data.to_pattern()
        dates = list(expand(pattern))
        if not dates:
            raise InvalidPatternError("Schedule produces no sessions", field="weekdays")

        instructor_name = self._instructor_name(data.instructor_id)
        fields = data.model_dump(
            exclude={
                "date",
                "title",
                "schedule_type",
                "weekdays",
                "duration_value",
                "duration_unit",
            }
        )

        classes = []
        for session_date in dates:
            title = data.title
            if pattern.schedule_type is ScheduleType.RECURRING:
                label = session_date.strftime(RECURRING_CLASS_TITLE_DATE_FORMAT)
                title = f"{data.title} - {label}"
            classes.append(
                ClassSession(
                    **fields,
                    title=title,
                    date=session_date,
                    instructor_name=instructor_name,
                    is_package=False,
                )
            )

        self.db.add_all(classes)
        self.db.commit()
        for session in classes:
            self.db.refresh(session)

        logger.info("Created %d class(es) titled %r", len(classes), data.title)
        return classes

    def list_classes(
        self,
        date_from: dt.date | None = None,
        date_to: dt.date | None = None,
        include_package_sessions: bool = True,
    ) -> list[ClassSession]:
        query = self.db.query(ClassSession)
        if date_from:
            query = query.filter(ClassSession.date >= date_from)
        if date_to:
            query = query.filter(ClassSession.date <= date_to)
        if not include_package_sessions:
            query = query.filter(ClassSession.is_package == False)  # noqa: E712
        return query.order_by(ClassSession.date, ClassSession.start_time).all()

    def get_class(self, class_id: uuid.UUID) -> ClassSession:
        session = self.db.get(ClassSession, class_id)
        if session is None:
            raise NotFoundError("Class not found", resource="class")
        return session

    def update_class(self, class_id: uuid.UUID, data: ClassUpdate) -> ClassSession:
        session = self.get_class(class_id)
        updates = data.model_dump(exclude_unset=True)

        if "instructor_id" in updates:
            updates["instructor_name"] = self._instructor_name(updates["instructor_id"])

        start = updates.get("start_time", session.start_time)
        end = updates.get("end_time", session.end_time)
        if end <= start:
            raise ValidationError("end_time must be after start_time", field="end_time")

        for key, value in updates.items():
            setattr(session, key, value)
        self.db.commit()
        self.db.refresh(session)
        return session

    def delete_class(self, class_id: uuid.UUID) -> None:
        session = self.get_class(class_id)
        if session.package_id is not None:
            self.remove_session_from_package(class_id)
            return
        self.db.delete(session)
        self.db.commit()

    def get_my_schedule(self, staff: Staff, date_from: dt.date | None = None) -> list[ClassSession]:
        """Upcoming sessions taught by ``staff``."""
        start = date_from or dt.date.today()
        return (
            self.db.query(ClassSession)
            .filter(
                ClassSession.instructor_id == staff.id,
                ClassSession.date >= start,
                ClassSession.is_active == True,  # noqa: E712
            )
            .order_by(ClassSession.date, ClassSession.start_time)
            .all()
        )

    # ─────────────────────────────────────────────────────────────
    # Class packages
    # ─────────────────────────────────────────────────────────────

    def create_package(self, data: ClassPackageCreate) -> ClassPackage:
        """Store a package and one session per generated date in a single transaction."""
        pattern = data.recurrence.to_pattern()
        if pattern.schedule_type is not ScheduleType.RECURRING:
            raise InvalidPatternError("Packages need a recurring schedule", field="schedule_type")

        dates = list(expand(pattern))
        if not dates:
            raise InvalidPatternError("Schedule produces no sessions", field="weekdays")

        instructor_name = self._instructor_name(data.instructor_id)
        total = len(dates)

        package = ClassPackage(
            title=data.title,
            description=data.description,
            type=data.type,
            start_time=data.start_time,
            end_time=data.end_time,
            location=data.location,
            capacity=data.capacity,
            instructor_id=data.instructor_id,
            instructor_name=instructor_name,
            package_price=data.package_price,
            total_sessions=total,
            days_of_week=sorted(pattern.weekdays),
            duration_value=pattern.duration_value,
            duration_unit=pattern.duration_unit.value,
            start_date=pattern.start_date,
            end_date=pattern.end_date,
            image_url=data.image_url,
            is_active=data.is_active,
        )
        self.db.add(package)
        self.db.flush()

        for number, session_date in enumerate(dates, start=1):
            self.db.add(
                ClassSession(
                    title=f"{data.title} - Session {number}",
                    description=data.description,
                    type=data.type,
                    date=session_date,
                    start_time=data.start_time,
                    end_time=data.end_time,
                    location=data.location,
                    capacity=data.capacity,
                    instructor_id=data.instructor_id,
                    instructor_name=instructor_name,
                    price=Decimal("0"),
                    image_url=data.image_url,
                    is_active=data.is_active,
                    is_package=True,
                    package_id=package.id,
                    package_price=data.package_price,
                    total_sessions=total,
                    session_number=number,
                    package_title=data.title,
                )
            )

        self.db.commit()
        self.db.refresh(package)

        logger.info("Created class package %s with %d sessions", package.id, total)
        return package

    def list_packages(self) -> list[ClassPackage]:
        return (
            self.db.query(ClassPackage)
            .options(selectinload(ClassPackage.sessions))
            .order_by(ClassPackage.start_date.desc(), ClassPackage.created_at.desc())
            .all()
        )

    def get_package(self, package_id: uuid.UUID) -> ClassPackage:
        package = self.db.get(ClassPackage, package_id)
        if package is None:
            raise NotFoundError("Class package not found", resource="class_package")
        return package

    def get_package_sessions(self, package_id: uuid.UUID) -> list[ClassSession]:
        self.get_package(package_id)
        return (
            self.db.query(ClassSession)
            .filter(ClassSession.package_id == package_id)
            .order_by(ClassSession.date, ClassSession.start_time)
            .all()
        )

    def update_package(self, package_id: uuid.UUID, data: ClassPackageUpdate) -> ClassPackage:
        """Update package details and propagate shared fields to its sessions."""
        package = self.get_package(package_id)
        updates = data.model_dump(exclude_unset=True)
        for key, value in updates.items():
            setattr(package, key, value)

        shared = {k: v for k, v in updates.items() if k != "title"}
        if "title" in updates:
            shared["package_title"] = updates["title"]
        for session in package.sessions:
            for key, value in shared.items():
                setattr(session, key, value)

        self.db.commit()
        self.db.refresh(package)
        return package

    def add_session_to_package(
        self, package_id: uuid.UUID, data: PackageSessionCreate
    ) -> ClassSession:
        package = self.get_package(package_id)
        start_time = data.start_time or package.start_time
        end_time = data.end_time or package.end_time
        if end_time <= start_time:
            raise ValidationError("end_time must be after start_time", field="end_time")

        existing, last_number = (
            self.db.query(func.count(ClassSession.id), func.max(ClassSession.session_number))
            .filter(ClassSession.package_id == package.id)
            .one()
        )
        # Numbers are never reused, so removing a session leaves a gap
        number = (last_number or 0) + 1
        total = existing + 1
        session = ClassSession(
            title=f"{package.title} - Session {number}",
            description=package.description,
            type=package.type,
            date=data.date,
            start_time=start_time,
            end_time=end_time,
            location=data.location or package.location,
            capacity=package.capacity,
            instructor_id=package.instructor_id,
            instructor_name=package.instructor_name,
            price=Decimal("0"),
            image_url=package.image_url,
            is_active=package.is_active,
            is_package=True,
            package_id=package.id,
            package_price=package.package_price,
            total_sessions=total,
            session_number=number,
            package_title=package.title,
        )
        self.db.add(session)
        self.db.flush()
        self.db.expire(package, ["sessions"])
        self._set_total_sessions(package, total)
        self.db.commit()
        self.db.refresh(session)
        return session

    def remove_session_from_package(self, session_id: uuid.UUID) -> None:
        session = self.get_class(session_id)
        if session.package_id is None:
            raise ValidationError("Class is not part of a package", field="session_id")

        package = self.get_package(session.package_id)
        self.db.delete(session)
        self.db.flush()
        self.db.expire(package, ["sessions"])
        self._set_total_sessions(package, max(package.total_sessions - 1, 0))
        self.db.commit()

    def _set_total_sessions(self, package: ClassPackage, total: int) -> None:
        package.total_sessions = total
        for sibling in package.sessions:
            sibling.total_sessions = total

    def delete_package(self, package_id: uuid.UUID) -> int:
        """Delete a package together with all of its sessions. Returns sessions removed."""
        package = self.get_package(package_id)
        removed = len(package.sessions)
        self.db.delete(package)
        self.db.commit()
        logger.info("Deleted class package %s and %d sessions", package_id, removed)
        return removed

    # ─────────────────────────────────────────────────────────────
    # Instructors
    # ─────────────────────────────────────────────────────────────

    async def list_instructors(self) -> list[InstructorResponse]:
        cached = await cache.get_cached_json(INSTRUCTORS_CACHE_KEY)
        if cached is not None:
            return [InstructorResponse(**item) for item in cached]

        instructors = [
            InstructorResponse(id=s.id, name=s.full_name) for s in self.staff.list_instructors()
        ]
        await cache.set_cached_json(
            INSTRUCTORS_CACHE_KEY,
            [i.model_dump(mode="json") for i in instructors],
            settings.INSTRUCTORS_CACHE_TTL_SECONDS,
        )
        return instructors


def to_class_response(session: ClassSession) -> ClassResponse:
    return ClassResponse.model_validate(session)


def to_package_response(
    package: ClassPackage, include_sessions: bool = True
) -> ClassPackageResponse:
    response = ClassPackageResponse.model_validate(package, from_attributes=True)
    response.per_session_price = per_session_price(package.package_price, package.total_sessions)
    if not include_sessions:
        response.sessions = []
    return response
