import logging
import uuid
from collections.abc import Mapping, Sequence
from decimal import Decimal
from typing import Any

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from gymdesk.core import redis as cache
from gymdesk.core.config import settings
from gymdesk.core.constants import (
    DEFAULT_POPULAR_PACKAGES_LIMIT,
    PACKAGE_NAME_MIN_LENGTH,
    USAGE_STATS_CACHE_PREFIX,
)
from gymdesk.core.exceptions import HasActiveDependentsError, NotFoundError, ValidationError
from gymdesk.core.repository import BaseRepository
from gymdesk.memberships.models.package import MembershipPackage, PackageStatus
from gymdesk.memberships.models.subscription import MembershipSubscription, SubscriptionStatus
from gymdesk.memberships.schemas.package import (
    DisplayOrderUpdate,
    MembershipPackageCreate,
    MembershipPackageUpdate,
    PackageSearchParams,
    SortDirection,
    UsageStatsResponse,
)
from gymdesk.memberships.services.usage import SubscriptionRecord, UsageStats, aggregate
from gymdesk.memberships.sport_categories import FULL_ACCESS_CATEGORY
from gymdesk.staff.models.staff import Staff

logger = logging.getLogger(__name__)

# Subscriptions in these states block deleting their package
BLOCKING_STATUSES = (SubscriptionStatus.ACTIVE.value, SubscriptionStatus.PAUSED.value)


def usage_stats_cache_key(package_id: uuid.UUID) -> str:
    return f"{USAGE_STATS_CACHE_PREFIX}:{package_id}"


def basic_info_errors(values: Mapping[str, Any]) -> list[str]:
    errors: list[str] = []

    name = str(values.get("name") or "").strip()
    if not name:
        errors.append("Package name is required")
    elif len(name) < PACKAGE_NAME_MIN_LENGTH:
        errors.append(
            f"Package name must be at least {PACKAGE_NAME_MIN_LENGTH} characters long"
        )

    if values["duration"] <= 0:
        errors.append("Duration must be greater than 0")

    if Decimal(values["price"]) < 0:
        errors.append("Price cannot be negative")

    return errors


def access_errors(values: Mapping[str, Any]) -> list[str]:
    errors: list[str] = []

    if not values["is_full_access"] and not values["sport_categories"]:
        errors.append("Must select at least one sport category or enable full access")

    if not values["is_unlimited"] and not (
        values["class_limit_per_week"] or values["class_limit_per_month"]
    ):
        errors.append("Must specify either weekly or monthly class limit for limited packages")

    return errors


def policy_errors(values: Mapping[str, Any]) -> list[str]:
    errors: list[str] = []

    discount = values["renewal_discount_percent"]
    if discount is not None and not 0 <= discount <= 100:
        errors.append("Renewal discount must be between 0 and 100 percent")

    if values["max_freeze_months"] is not None and values["max_freeze_months"] < 1:
        errors.append("Maximum freeze months must be at least 1")

    if values["min_freeze_weeks"] is not None and values["min_freeze_weeks"] < 1:
        errors.append("Minimum freeze weeks must be at least 1")

    return errors


def validate_package_data(data: MembershipPackageCreate) -> list[str]:
    """Check business rules for a package.

    The rules are grouped the way the creation wizard collects the fields;
    each group is usable on its own against a plain mapping of values.

    Returns:
        Human-readable error messages; empty when the package is valid.
    """
    values = data.model_dump()
    return basic_info_errors(values) + access_errors(values) + policy_errors(values)


def _raise_if_invalid(data: MembershipPackageCreate) -> None:
    errors = validate_package_data(data)
    if errors:
        raise ValidationError("Invalid membership package", errors=errors)


def _has_any_category(package: MembershipPackage, categories: Sequence[str]) -> bool:
    return bool(set(package.sport_categories or []) & set(categories))


class MembershipPackageRepository(BaseRepository[MembershipPackage]):
    def __init__(self, db: Session):
        super().__init__(db, MembershipPackage, resource="membership_package")

    def count_subscriptions(self, package_id: uuid.UUID, statuses: Sequence[str]) -> int:
        result: int = (
            self.db.query(func.count(MembershipSubscription.id))
            .filter(
                MembershipSubscription.package_id == package_id,
                MembershipSubscription.status.in_(statuses),
            )
            .scalar()
        ) or 0
        return result

    def list_subscriptions(
        self, package_id: uuid.UUID | None = None
    ) -> list[MembershipSubscription]:
        query = self.db.query(MembershipSubscription)
        if package_id is not None:
            query = query.filter(MembershipSubscription.package_id == package_id)
        return query.all()


class MembershipPackageService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = MembershipPackageRepository(db)

    def create_package(self, data: MembershipPackageCreate, staff: Staff) -> MembershipPackage:
        _raise_if_invalid(data)
        package = self.repo.create(
            **data.model_dump(),
            created_by=staff.id,
            created_by_name=staff.full_name,
        )
        logger.info("Membership package %s created by %s", package.id, staff.id)
        return package

    def update_package(
        self, package_id: uuid.UUID, updates: MembershipPackageUpdate, staff: Staff
    ) -> MembershipPackage:
        package = self.get_package(package_id)
        changes = updates.model_dump(exclude_unset=True)

        merged = MembershipPackageCreate.model_validate(package, from_attributes=True)
        _raise_if_invalid(merged.model_copy(update=changes))

        return self.repo.update(
            package,
            **changes,
            last_modified_by=staff.id,
            last_modified_by_name=staff.full_name,
        )

    def delete_package(self, package_id: uuid.UUID) -> None:
        """Delete a package that no Active or Paused subscription references.

        Cancelled subscriptions of the package are deleted with it.

        Raises:
            NotFoundError: Package does not exist.
            HasActiveDependentsError: Active or Paused subscriptions remain.
        """
        package = self.get_package(package_id)
        blocking = self.repo.count_subscriptions(package_id, BLOCKING_STATUSES)
        if blocking:
            raise HasActiveDependentsError(
                f"Package has {blocking} active or paused subscription(s)",
                resource="membership_package",
                dependents=blocking,
            )

        history = self.repo.list_subscriptions(package_id)
        for subscription in history:
            self.db.delete(subscription)
        self.db.delete(package)
        self.db.commit()
        logger.info(
            "Deleted membership package %s with %d cancelled subscription(s)",
            package_id,
            len(history),
        )

    def get_package(self, package_id: uuid.UUID) -> MembershipPackage:
        return self.repo.get_or_raise(package_id, "Membership package not found")

    def list_packages(self) -> list[MembershipPackage]:
        return (
            self.db.query(MembershipPackage)
            .order_by(MembershipPackage.display_order.asc(), MembershipPackage.created_at.desc())
            .all()
        )

    def list_active_packages(self) -> list[MembershipPackage]:
        return (
            self.db.query(MembershipPackage)
            .filter(MembershipPackage.status == PackageStatus.ACTIVE)
            .order_by(MembershipPackage.display_order.asc())
            .all()
        )

    def search_packages(self, params: PackageSearchParams) -> tuple[list[MembershipPackage], int]:
        """Filter, sort and paginate packages.

        Returns:
            The requested page and the total number of matches.
        """
        query = self.db.query(MembershipPackage)

        if params.query:
            pattern = f"%{params.query.strip()}%"
            query = query.filter(
                or_(
                    MembershipPackage.name.ilike(pattern),
                    MembershipPackage.description.ilike(pattern),
                )
            )
        if params.status:
            query = query.filter(MembershipPackage.status.in_(params.status))
        if params.min_price is not None:
            query = query.filter(MembershipPackage.price >= params.min_price)
        if params.max_price is not None:
            query = query.filter(MembershipPackage.price <= params.max_price)
        if params.is_popular is not None:
            query = query.filter(MembershipPackage.is_popular == params.is_popular)
        if params.is_full_access is not None:
            query = query.filter(MembershipPackage.is_full_access == params.is_full_access)
        if params.is_unlimited is not None:
            query = query.filter(MembershipPackage.is_unlimited == params.is_unlimited)

        column = getattr(MembershipPackage, params.sort.value)
        order = column.desc() if params.direction is SortDirection.DESC else column.asc()
        query = query.order_by(order, MembershipPackage.created_at.desc())

        offset = (params.page - 1) * params.limit

        if params.sport_categories:
            # JSON array containment is backend specific, so match in Python
            matches = [p for p in query.all() if _has_any_category(p, params.sport_categories)]
            return matches[offset : offset + params.limit], len(matches)

        total = query.count()
        return query.offset(offset).limit(params.limit).all(), total

    def get_packages_by_sport_category(self, category_id: str) -> list[MembershipPackage]:
        """Active packages granting ``category_id``; ``all`` means full-access packages."""
        active = self.list_active_packages()
        if category_id == FULL_ACCESS_CATEGORY:
            return [p for p in active if p.is_full_access]
        return [p for p in active if _has_any_category(p, [category_id])]

    def compute_usage_stats(self, package_id: uuid.UUID) -> UsageStats:
        self.get_package(package_id)
        records = [
            SubscriptionRecord.from_subscription(s)
            for s in self.repo.list_subscriptions(package_id)
        ]
        return aggregate(package_id, records)

    async def get_usage_stats(self, package_id: uuid.UUID) -> UsageStatsResponse:
        cache_key = usage_stats_cache_key(package_id)
        cached = await cache.get_cached_json(cache_key)
        if cached is not None:
            return UsageStatsResponse(**cached)

        stats = UsageStatsResponse.model_validate(self.compute_usage_stats(package_id))
        await cache.set_cached_json(
            cache_key, stats.model_dump(mode="json"), settings.USAGE_STATS_CACHE_TTL_SECONDS
        )
        return stats

    def get_popular_packages(
        self, limit: int = DEFAULT_POPULAR_PACKAGES_LIMIT
    ) -> list[MembershipPackage]:
        """Packages with the most subscriptions first."""
        subscription_count = func.count(MembershipSubscription.id)
        rows = (
            self.db.query(MembershipPackage, subscription_count)
            .outerjoin(
                MembershipSubscription,
                MembershipSubscription.package_id == MembershipPackage.id,
            )
            .group_by(MembershipPackage.id)
            .order_by(subscription_count.desc(), MembershipPackage.display_order.asc())
            .limit(limit)
            .all()
        )
        return [package for package, _ in rows]

    def update_display_orders(self, updates: list[DisplayOrderUpdate]) -> None:
        """Apply all display order changes or none of them."""
        try:
            for item in updates:
                package = self.get_package(item.package_id)
                package.display_order = item.display_order
        except NotFoundError:
            self.db.rollback()
            raise
        self.db.commit()

    def clone_package(
        self, package_id: uuid.UUID, new_name: str, staff: Staff
    ) -> MembershipPackage:
        """Copy a package under a new name; the copy starts Inactive and not popular."""
        original = self.get_package(package_id)
        data = MembershipPackageCreate.model_validate(original, from_attributes=True)
        clone = data.model_copy(
            update={
                "name": new_name,
                "status": PackageStatus.INACTIVE,
                "is_popular": False,
                "display_order": original.display_order + 1,
            }
        )
        return self.create_package(clone, staff)
