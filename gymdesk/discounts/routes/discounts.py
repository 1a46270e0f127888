"""
Discount code API endpoints.
"""

import uuid

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.orm import Session

from gymdesk.core.config import settings
from gymdesk.core.datetime_utils import utcnow
from gymdesk.core.rate_limit import limiter
from gymdesk.core.schemas import error_responses
from gymdesk.db.session import get_db
from gymdesk.discounts.models.discount import Discount
from gymdesk.discounts.schemas.discount import (
    DiscountApplyRequest,
    DiscountCheckRequest,
    DiscountCreate,
    DiscountResponse,
    DiscountStatsResponse,
    DiscountUpdate,
    DiscountUsageResponse,
    DiscountValidationResponse,
)
from gymdesk.discounts.services.discount_service import DiscountCheck, DiscountService
from gymdesk.discounts.utils import (
    calculate_savings_percentage,
    effective_status,
    format_discount_display,
)
from gymdesk.staff.dependencies import require_capability
from gymdesk.staff.models.staff import Staff
from gymdesk.staff.permissions import Capability

router = APIRouter(prefix="/discounts", tags=["discounts"])

create_discounts = require_capability(Capability.CREATE_DISCOUNTS)
apply_discounts = require_capability(Capability.APPLY_DISCOUNTS)


def to_discount_response(discount: Discount) -> DiscountResponse:
    response = DiscountResponse.model_validate(discount)
    response.status = effective_status(discount, utcnow())
    response.display = format_discount_display(discount.type, discount.value)
    return response


def to_validation_response(check: DiscountCheck) -> DiscountValidationResponse:
    discount = check.discount
    if not check.is_valid or check.amounts is None or discount is None:
        return DiscountValidationResponse(
            is_valid=False,
            error=check.error,
            original_amount=check.original_amount,
            final_amount=check.original_amount,
        )
    return DiscountValidationResponse(
        is_valid=True,
        discount_id=discount.id,
        code=discount.code,
        display=format_discount_display(discount.type, discount.value),
        original_amount=check.original_amount,
        discount_amount=check.amounts.discount_amount,
        final_amount=check.amounts.final_amount,
        savings_percentage=calculate_savings_percentage(
            check.original_amount, check.amounts.final_amount
        ),
    )


@router.get("", response_model=list[DiscountResponse])
def list_discounts(
    db: Session = Depends(get_db),
    staff: Staff = Depends(apply_discounts),
) -> list[DiscountResponse]:
    """
    List discount codes, newest first, with their current status.
    """
    return [to_discount_response(d) for d in DiscountService(db).list_discounts()]


@router.get("/stats", response_model=DiscountStatsResponse)
def get_discount_stats(
    db: Session = Depends(get_db),
    staff: Staff = Depends(create_discounts),
) -> DiscountStatsResponse:
    return DiscountService(db).get_stats()


@router.get("/code/{code}", response_model=DiscountResponse)
def get_discount_by_code(
    code: str,
    db: Session = Depends(get_db),
    staff: Staff = Depends(apply_discounts),
) -> DiscountResponse:
    return to_discount_response(DiscountService(db).get_by_code(code))


@router.post("/preview", response_model=DiscountValidationResponse)
@limiter.limit(settings.DISCOUNT_PREVIEW_RATE_LIMIT)
async def preview_discount(
    request: Request,
    data: DiscountCheckRequest,
    db: Session = Depends(get_db),
    staff: Staff = Depends(apply_discounts),
) -> DiscountValidationResponse:
    """
    Check a code against a sale without recording a use.

    An unusable code is reported with ``is_valid: false`` and the reason in
    ``error``; the final amount then equals the original amount.
    """
    return to_validation_response(DiscountService(db).validate_code(data))


@router.post(
    "/apply",
    response_model=DiscountUsageResponse,
    status_code=status.HTTP_201_CREATED,
    responses=error_responses(400),
)
def apply_discount(
    data: DiscountApplyRequest,
    db: Session = Depends(get_db),
    staff: Staff = Depends(apply_discounts),
) -> DiscountUsageResponse:
    """
    Redeem a code on a sale and record who processed it.

    Raises:
        400: Code cannot be used for this sale
    """
    usage = DiscountService(db).apply_code(data, staff)
    return DiscountUsageResponse.model_validate(usage)


@router.post(
    "",
    response_model=DiscountResponse,
    status_code=status.HTTP_201_CREATED,
    responses=error_responses(400, 409),
)
def create_discount(
    data: DiscountCreate,
    db: Session = Depends(get_db),
    staff: Staff = Depends(create_discounts),
) -> DiscountResponse:
    """
    Create a discount code. Codes are stored upper-case.

    Raises:
        400: Invalid discount (all problems listed in details.errors)
        409: Code already exists
    """
    return to_discount_response(DiscountService(db).create_discount(data, staff))


@router.get("/{discount_id}", response_model=DiscountResponse)
def get_discount(
    discount_id: uuid.UUID,
    db: Session = Depends(get_db),
    staff: Staff = Depends(apply_discounts),
) -> DiscountResponse:
    return to_discount_response(DiscountService(db).get_discount(discount_id))


@router.patch("/{discount_id}", response_model=DiscountResponse)
def update_discount(
    discount_id: uuid.UUID,
    data: DiscountUpdate,
    db: Session = Depends(get_db),
    staff: Staff = Depends(create_discounts),
) -> DiscountResponse:
    return to_discount_response(DiscountService(db).update_discount(discount_id, data))


@router.delete("/{discount_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_discount(
    discount_id: uuid.UUID,
    db: Session = Depends(get_db),
    staff: Staff = Depends(create_discounts),
) -> None:
    """
    Delete a code. Codes that were already redeemed are disabled instead so
    their usage history stays intact.
    """
    DiscountService(db).delete_discount(discount_id)


@router.get("/{discount_id}/usages", response_model=list[DiscountUsageResponse])
def list_discount_usages(
    discount_id: uuid.UUID,
    limit: int | None = Query(None, ge=1, le=500),
    db: Session = Depends(get_db),
    staff: Staff = Depends(create_discounts),
) -> list[DiscountUsageResponse]:
    usages = DiscountService(db).list_usages(discount_id, limit)
    return [DiscountUsageResponse.model_validate(u) for u in usages]
