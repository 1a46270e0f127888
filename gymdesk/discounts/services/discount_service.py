import logging
import uuid
from collections import Counter
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from sqlalchemy import func
from sqlalchemy.orm import Session

from gymdesk.core.datetime_utils import to_naive_utc, utcnow
from gymdesk.core.exceptions import ConflictError, NotFoundError, ValidationError
from gymdesk.core.repository import BaseRepository
from gymdesk.discounts.models.discount import (
    Discount,
    DiscountAppliesTo,
    DiscountStatus,
    DiscountType,
)
from gymdesk.discounts.models.usage import DiscountItemType, DiscountUsage
from gymdesk.discounts.schemas.discount import (
    DiscountApplyRequest,
    DiscountCheckRequest,
    DiscountCreate,
    DiscountStatsResponse,
    DiscountUpdate,
    MostUsedDiscount,
)
from gymdesk.discounts.utils import (
    DiscountAmounts,
    calculate_discount_amount,
    effective_status,
    format_discount_code,
    is_valid_discount_code_format,
)
from gymdesk.staff.models.staff import Staff

logger = logging.getLogger(__name__)

ITEM_TYPE_TARGETS = {
    DiscountItemType.CLASS: DiscountAppliesTo.CLASSES,
    DiscountItemType.WORKSHOP: DiscountAppliesTo.WORKSHOPS,
    DiscountItemType.PACKAGE: DiscountAppliesTo.PACKAGES,
}


@dataclass(frozen=True)
class DiscountCheck:
    """Outcome of checking a code against a prospective sale."""

    original_amount: Decimal
    discount: Discount | None = None
    amounts: DiscountAmounts | None = None
    error: str | None = None

    @property
    def is_valid(self) -> bool:
        return self.error is None and self.amounts is not None


def validate_discount_data(data: DiscountCreate) -> list[str]:
    errors: list[str] = []

    if not is_valid_discount_code_format(data.code):
        errors.append(
            "Discount code must be at least 3 characters of letters, digits, '-' or '_'"
        )
    if not data.name.strip():
        errors.append("Discount name is required")
    if data.type is DiscountType.PERCENTAGE and not 1 <= data.value <= 100:
        errors.append("Percentage must be between 1 and 100")
    if data.type is DiscountType.FIXED_AMOUNT and data.value <= 0:
        errors.append("Fixed amount must be greater than 0")
    if data.max_uses is not None and data.max_uses < 1:
        errors.append("Maximum uses must be at least 1")
    if data.max_uses_per_user is not None and data.max_uses_per_user < 1:
        errors.append("Maximum uses per user must be at least 1")
    if data.end_date is not None and data.end_date <= data.start_date:
        errors.append("End date must be after start date")
    if data.applies_to is DiscountAppliesTo.SPECIFIC_ITEMS and not data.specific_item_ids:
        errors.append("Select at least one item for an item-specific discount")

    return errors


def _raise_if_invalid(data: DiscountCreate) -> None:
    errors = validate_discount_data(data)
    if errors:
        raise ValidationError("Invalid discount", errors=errors)


class DiscountRepository(BaseRepository[Discount]):
    def __init__(self, db: Session):
        super().__init__(db, Discount, resource="discount")

    def find_by_code(self, code: str) -> Discount | None:
        return (
            self.db.query(Discount)
            .filter(Discount.code == format_discount_code(code))
            .first()
        )

    def count_member_usages(self, discount_id: uuid.UUID, member_email: str) -> int:
        result: int = (
            self.db.query(func.count(DiscountUsage.id))
            .filter(
                DiscountUsage.discount_id == discount_id,
                func.lower(DiscountUsage.member_email) == member_email.lower(),
            )
            .scalar()
        ) or 0
        return result


class DiscountService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = DiscountRepository(db)

    def create_discount(self, data: DiscountCreate, staff: Staff) -> Discount:
        """
        Raises:
            ValidationError: Discount breaks a rule (all problems in details.errors).
            ConflictError: The code is already taken.
        """
        data = data.model_copy(
            update={
                "code": format_discount_code(data.code),
                "start_date": to_naive_utc(data.start_date),
                "end_date": to_naive_utc(data.end_date) if data.end_date else None,
            }
        )
        _raise_if_invalid(data)
        if self.repo.find_by_code(data.code) is not None:
            raise ConflictError(
                "Discount code already exists. Please choose a different code.",
                resource="discount",
            )

        discount = self.repo.create(
            **data.model_dump(),
            status=DiscountStatus.ACTIVE,
            current_uses=0,
            created_by=staff.id,
            created_by_name=staff.full_name,
        )
        logger.info("Discount %s created by %s", discount.code, staff.id)
        return discount

    def update_discount(self, discount_id: uuid.UUID, data: DiscountUpdate) -> Discount:
        discount = self.get_discount(discount_id)
        changes = data.model_dump(exclude_unset=True)

        if changes.get("code"):
            changes["code"] = format_discount_code(changes["code"])
            existing = self.repo.find_by_code(changes["code"])
            if existing is not None and existing.id != discount.id:
                raise ConflictError(
                    "Discount code already exists. Please choose a different code.",
                    resource="discount",
                )
        for key in ("start_date", "end_date"):
            if changes.get(key) is not None:
                changes[key] = to_naive_utc(changes[key])

        merged = DiscountCreate.model_validate(discount, from_attributes=True)
        _raise_if_invalid(merged.model_copy(update=changes))

        if changes.get("is_active") is True and discount.status is DiscountStatus.DISABLED:
            changes["status"] = DiscountStatus.ACTIVE
        elif changes.get("is_active") is False:
            changes["status"] = DiscountStatus.DISABLED

        return self.repo.update(discount, **changes)

    def delete_discount(self, discount_id: uuid.UUID) -> bool:
        """Delete a code, or disable it when it has already been redeemed.

        Returns:
            True when the row was deleted, False when it was only disabled.
        """
        discount = self.get_discount(discount_id)
        used = (
            self.db.query(DiscountUsage.id)
            .filter(DiscountUsage.discount_id == discount_id)
            .first()
            is not None
        )
        if used:
            self.repo.update(discount, is_active=False, status=DiscountStatus.DISABLED)
            logger.info("Discount %s disabled instead of deleted (has usages)", discount.code)
            return False

        self.repo.delete(discount)
        logger.info("Discount %s deleted", discount.code)
        return True

    def get_discount(self, discount_id: uuid.UUID) -> Discount:
        return self.repo.get_or_raise(discount_id, "Discount not found")

    def get_by_code(self, code: str) -> Discount:
        discount = self.repo.find_by_code(code)
        if discount is None:
            raise NotFoundError("Discount not found", resource="discount")
        return discount

    def list_discounts(self) -> list[Discount]:
        return self.repo.find_all(order_by=Discount.created_at.desc())

    def validate_code(
        self, request: DiscountCheckRequest, now: datetime | None = None
    ) -> DiscountCheck:
        """Check whether a code can be used for a sale, without recording anything.

        A failed check is a normal outcome and is reported in ``error``
        rather than raised.
        """
        now = to_naive_utc(now) if now else utcnow()
        amount = request.amount
        discount = self.repo.find_by_code(request.code)

        def rejected(message: str) -> DiscountCheck:
            return DiscountCheck(original_amount=amount, discount=discount, error=message)

        if discount is None:
            return rejected("Invalid discount code")
        if not discount.is_active or discount.status is DiscountStatus.DISABLED:
            return rejected("This discount code is no longer active")
        if now < discount.start_date:
            return rejected("This discount code is not yet active")
        if discount.end_date is not None and now > discount.end_date:
            return rejected("This discount code has expired")
        if discount.max_uses and discount.current_uses >= discount.max_uses:
            return rejected("This discount code has reached its usage limit")
        if discount.max_uses_per_user and request.member_email:
            used = self.repo.count_member_usages(discount.id, request.member_email)
            if used >= discount.max_uses_per_user:
                return rejected(
                    "You have reached the maximum number of uses for this discount code"
                )
        if discount.minimum_amount and amount < discount.minimum_amount:
            return rejected(
                f"Minimum purchase amount of {discount.minimum_amount} required for this discount"
            )

        applies_to = discount.applies_to
        if applies_to is DiscountAppliesTo.SPECIFIC_ITEMS:
            if request.item_id not in (discount.specific_item_ids or []):
                return rejected("This discount code does not apply to the selected item")
        elif applies_to is not DiscountAppliesTo.ALL:
            target = ITEM_TYPE_TARGETS[request.item_type]
            # Class codes also cover workshops
            covers_workshop = (
                applies_to is DiscountAppliesTo.CLASSES
                and request.item_type is DiscountItemType.WORKSHOP
            )
            if applies_to is not target and not covers_workshop:
                return rejected(f"This discount code only applies to {applies_to.value}")

        amounts = calculate_discount_amount(discount.type, discount.value, amount)
        return DiscountCheck(original_amount=amount, discount=discount, amounts=amounts)

    def apply_code(
        self, request: DiscountApplyRequest, staff: Staff, now: datetime | None = None
    ) -> DiscountUsage:
        """Validate a code and record its use on a sale.

        Raises:
            ValidationError: The code cannot be used for this sale.
        """
        check = self.validate_code(request, now=now)
        if not check.is_valid or check.discount is None or check.amounts is None:
            raise ValidationError(check.error or "Invalid discount code", field="code")

        discount = check.discount
        usage = DiscountUsage(
            discount_id=discount.id,
            discount_code=discount.code,
            member_email=request.member_email,
            member_name=request.member_name,
            item_type=request.item_type,
            item_id=request.item_id,
            item_name=request.item_name,
            original_amount=request.amount,
            discount_amount=check.amounts.discount_amount,
            final_amount=check.amounts.final_amount,
            used_by=staff.id,
            used_by_name=staff.full_name,
            notes=request.notes,
            used_at=to_naive_utc(now) if now else utcnow(),
        )
        self.db.add(usage)

        discount.current_uses += 1
        if discount.max_uses and discount.current_uses >= discount.max_uses:
            discount.status = DiscountStatus.USED_UP

        self.db.commit()
        self.db.refresh(usage)
        logger.info(
            "Discount %s applied to %s %s by %s",
            discount.code,
            request.item_type.value,
            request.item_id,
            staff.id,
        )
        return usage

    def list_usages(self, discount_id: uuid.UUID, limit: int | None = None) -> list[DiscountUsage]:
        self.get_discount(discount_id)
        query = (
            self.db.query(DiscountUsage)
            .filter(DiscountUsage.discount_id == discount_id)
            .order_by(DiscountUsage.used_at.desc())
        )
        if limit:
            query = query.limit(limit)
        return query.all()

    def get_stats(self, now: datetime | None = None) -> DiscountStatsResponse:
        now = to_naive_utc(now) if now else utcnow()
        discounts = self.list_discounts()
        statuses = Counter(effective_status(d, now) for d in discounts)
        usages = self.db.query(DiscountUsage).all()

        most_used = None
        usage_counts = Counter(u.discount_id for u in usages)
        if usage_counts:
            top_id, uses = usage_counts.most_common(1)[0]
            top = next(d for d in discounts if d.id == top_id)
            most_used = MostUsedDiscount(code=top.code, name=top.name, uses=uses)

        return DiscountStatsResponse(
            total_discounts=len(discounts),
            active_discounts=statuses[DiscountStatus.ACTIVE],
            expired_discounts=statuses[DiscountStatus.EXPIRED],
            disabled_discounts=statuses[DiscountStatus.DISABLED],
            used_up_discounts=statuses[DiscountStatus.USED_UP],
            total_usages=len(usages),
            total_discount_amount=sum(
                (Decimal(u.discount_amount) for u in usages), Decimal("0")
            ),
            most_used_discount=most_used,
        )
