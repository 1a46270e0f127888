import logging
import uuid

from sqlalchemy.orm import Session

from gymdesk.core.exceptions import ConflictError
from gymdesk.core.repository import BaseRepository
from gymdesk.staff.models.staff import Staff, StaffRole
from gymdesk.staff.schemas.staff import StaffCreate, StaffUpdate

logger = logging.getLogger(__name__)


class StaffRepository(BaseRepository[Staff]):
    def __init__(self, db: Session):
        super().__init__(db, Staff, resource="staff")

    def find_by_email(self, email: str) -> Staff | None:
        return self.db.query(Staff).filter(Staff.email == email.lower()).first()

    def list_instructors(self) -> list[Staff]:
        return (
            self.db.query(Staff)
            .filter(
                Staff.is_active == True,  # noqa: E712
                Staff.role.in_([StaffRole.TRAINER, StaffRole.ADMIN]),
            )
            .order_by(Staff.full_name)
            .all()
        )


class StaffService:
    def __init__(self, db: Session):
        self.db = db
        self.repository = StaffRepository(db)

    def list_staff(self, role: StaffRole | None = None) -> list[Staff]:
        criteria = [Staff.role == role] if role is not None else []
        return self.repository.find_all(*criteria, order_by=Staff.full_name)

    def get_staff(self, staff_id: uuid.UUID) -> Staff:
        return self.repository.get_or_raise(staff_id, "Staff member not found")

    def create_staff(self, data: StaffCreate) -> Staff:
        email = data.email.lower()
        if self.repository.find_by_email(email):
            raise ConflictError(f"Staff member {email} already exists", resource="staff")

        staff = self.repository.create(
            email=email,
            full_name=data.full_name.strip(),
            phone=data.phone,
            role=data.role,
        )
        logger.info("Created staff member %s with role %s", staff.id, staff.role.value)
        return staff

    def update_staff(self, staff_id: uuid.UUID, data: StaffUpdate) -> Staff:
        staff = self.get_staff(staff_id)
        return self.repository.update(staff, **data.model_dump(exclude_unset=True))
