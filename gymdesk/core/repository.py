"""Shared persistence helpers for the domain services.

Each service owns a repository for its aggregate and adds its own queries on
top of ``self.db``. Writes commit immediately; callers that need several
changes in one transaction work on ``self.db`` directly and commit once.
"""

from typing import Any, Generic, TypeVar, cast
from uuid import UUID

from sqlalchemy.orm import Session

from gymdesk.core.exceptions import NotFoundError

ModelType = TypeVar("ModelType")


class BaseRepository(Generic[ModelType]):
    """Lookup and write operations for a single mapped model.

    ``resource`` is reported in ``details.resource`` of the 404 raised by
    ``get_or_raise``.

    Example:
        ```python
        class StaffRepository(BaseRepository[Staff]):
            def __init__(self, db: Session):
                super().__init__(db, Staff, resource="staff")

            def find_by_email(self, email: str) -> Staff | None:
                return self.db.query(Staff).filter(Staff.email == email).first()
        ```
    """

    def __init__(self, db: Session, model: type[ModelType], resource: str | None = None):
        self.db = db
        self.model = model
        self.resource = resource or getattr(model, "__tablename__", None)

    def get_by_id(self, entity_id: UUID) -> ModelType | None:
        return cast(ModelType | None, self.db.get(self.model, entity_id))

    def get_or_raise(self, entity_id: UUID, message: str = "Resource not found") -> ModelType:
        """Load an entity or raise ``NotFoundError`` naming this repository's resource."""
        instance = self.get_by_id(entity_id)
        if instance is None:
            raise NotFoundError(message, resource=self.resource)
        return instance

    def find_all(self, *criteria: Any, order_by: Any = None) -> list[ModelType]:
        query = self.db.query(self.model).filter(*criteria)
        if order_by is not None:
            query = query.order_by(order_by)
        return cast(list[ModelType], query.all())

    def save(self, instance: ModelType) -> ModelType:
        """Persist a new or modified entity and reload its server-side defaults."""
        self.db.add(instance)
        self.db.commit()
        self.db.refresh(instance)
        return instance

    def create(self, **values: Any) -> ModelType:
        return self.save(self.model(**values))

    def update(self, instance: ModelType, **changes: Any) -> ModelType:
        """Apply ``changes`` to ``instance``; keys that are not model attributes are skipped."""
        for key, value in changes.items():
            if hasattr(instance, key):
                setattr(instance, key, value)
        return self.save(instance)

    def delete(self, instance: ModelType) -> None:
        self.db.delete(instance)
        self.db.commit()
