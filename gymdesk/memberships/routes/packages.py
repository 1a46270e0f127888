"""
Membership package API endpoints.
"""

import uuid

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from gymdesk.core import redis as cache
from gymdesk.core.constants import DEFAULT_POPULAR_PACKAGES_LIMIT
from gymdesk.core.schemas import PaginatedResponse, error_responses, paginated_response
from gymdesk.db.session import get_db
from gymdesk.memberships.schemas.package import (
    ClonePackageRequest,
    DisplayOrderUpdate,
    MembershipPackageCreate,
    MembershipPackageResponse,
    MembershipPackageUpdate,
    PackageSearchParams,
    SportCategoryResponse,
    UsageStatsResponse,
)
from gymdesk.memberships.schemas.subscription import SubscriptionCreate, SubscriptionResponse
from gymdesk.memberships.schemas.wizard import WizardStateRequest, WizardStateResponse
from gymdesk.memberships.services.package_service import (
    MembershipPackageService,
    usage_stats_cache_key,
)
from gymdesk.memberships.services.subscription_service import SubscriptionService
from gymdesk.memberships.sport_categories import SPORT_CATEGORIES
from gymdesk.memberships.wizard import advance, resume_wizard, to_package_create
from gymdesk.staff.dependencies import require_capability
from gymdesk.staff.models.staff import Staff
from gymdesk.staff.permissions import Capability

router = APIRouter(prefix="/membership-packages", tags=["membership-packages"])

view_packages = require_capability(Capability.VIEW_PACKAGES)
manage_packages = require_capability(Capability.MANAGE_PACKAGES)


@router.get("", response_model=list[MembershipPackageResponse])
def list_packages(
    db: Session = Depends(get_db),
    staff: Staff = Depends(view_packages),
) -> list[MembershipPackageResponse]:
    """
    List all packages by display order, newest first within the same order.
    """
    packages = MembershipPackageService(db).list_packages()
    return [MembershipPackageResponse.model_validate(p) for p in packages]


@router.get("/active", response_model=list[MembershipPackageResponse])
def list_active_packages(
    db: Session = Depends(get_db),
    staff: Staff = Depends(view_packages),
) -> list[MembershipPackageResponse]:
    packages = MembershipPackageService(db).list_active_packages()
    return [MembershipPackageResponse.model_validate(p) for p in packages]


@router.post("/search", response_model=PaginatedResponse[MembershipPackageResponse])
def search_packages(
    params: PackageSearchParams,
    db: Session = Depends(get_db),
    staff: Staff = Depends(view_packages),
) -> PaginatedResponse[MembershipPackageResponse]:
    """
    Search packages by text, filter, sort and paginate.

    Text matches name or description (case-insensitive). Sport categories
    match packages listing any of the given categories.
    """
    packages, total = MembershipPackageService(db).search_packages(params)
    return paginated_response(
        [MembershipPackageResponse.model_validate(p) for p in packages],
        total=total,
        page=params.page,
        limit=params.limit,
    )


@router.get("/sport-categories", response_model=list[SportCategoryResponse])
def list_sport_categories(
    staff: Staff = Depends(view_packages),
) -> list[SportCategoryResponse]:
    return [SportCategoryResponse.model_validate(c) for c in SPORT_CATEGORIES]


@router.get(
    "/sport-categories/{category_id}/packages",
    response_model=list[MembershipPackageResponse],
)
def get_packages_by_sport_category(
    category_id: str,
    db: Session = Depends(get_db),
    staff: Staff = Depends(view_packages),
) -> list[MembershipPackageResponse]:
    """
    Active packages for a sport category. ``all`` returns full-access packages.
    """
    packages = MembershipPackageService(db).get_packages_by_sport_category(category_id)
    return [MembershipPackageResponse.model_validate(p) for p in packages]


@router.get("/popular", response_model=list[MembershipPackageResponse])
def get_popular_packages(
    limit: int = Query(DEFAULT_POPULAR_PACKAGES_LIMIT, ge=1, le=50),
    db: Session = Depends(get_db),
    staff: Staff = Depends(view_packages),
) -> list[MembershipPackageResponse]:
    packages = MembershipPackageService(db).get_popular_packages(limit)
    return [MembershipPackageResponse.model_validate(p) for p in packages]


@router.put("/display-order", status_code=status.HTTP_204_NO_CONTENT)
def update_display_orders(
    updates: list[DisplayOrderUpdate],
    db: Session = Depends(get_db),
    staff: Staff = Depends(manage_packages),
) -> None:
    """
    Reorder packages in one transaction.

    Raises:
        404: Any of the packages does not exist (nothing is changed)
    """
    MembershipPackageService(db).update_display_orders(updates)


@router.post(
    "",
    response_model=MembershipPackageResponse,
    status_code=status.HTTP_201_CREATED,
    responses=error_responses(400),
)
def create_package(
    data: MembershipPackageCreate,
    db: Session = Depends(get_db),
    staff: Staff = Depends(manage_packages),
) -> MembershipPackageResponse:
    """
    Create a membership package attributed to the calling staff member.

    Raises:
        400: Package breaks a business rule (all problems listed in details.errors)
    """
    package = MembershipPackageService(db).create_package(data, staff)
    return MembershipPackageResponse.model_validate(package)


@router.post(
    "/wizard/advance",
    response_model=WizardStateResponse,
)
def advance_package_wizard(
    data: WizardStateRequest,
    staff: Staff = Depends(manage_packages),
) -> WizardStateResponse:
    """
    Validate the current wizard step and move to the next one.

    When the step is incomplete the response stays on it and lists the
    problems in ``errors``. Advancing from Review only re-validates.
    """
    state = resume_wizard(data.step, **data.collected_values())
    return WizardStateResponse.from_state(advance(state))


@router.post(
    "/wizard/complete",
    response_model=MembershipPackageResponse,
    status_code=status.HTTP_201_CREATED,
    responses=error_responses(400),
)
def complete_package_wizard(
    data: WizardStateRequest,
    db: Session = Depends(get_db),
    staff: Staff = Depends(manage_packages),
) -> MembershipPackageResponse:
    """
    Create the package collected by a wizard on its Review step.

    Raises:
        400: Wizard is not on Review, or the package breaks a business rule
    """
    state = resume_wizard(data.step, **data.collected_values())
    package = MembershipPackageService(db).create_package(to_package_create(state), staff)
    return MembershipPackageResponse.model_validate(package)


@router.get("/{package_id}", response_model=MembershipPackageResponse)
def get_package(
    package_id: uuid.UUID,
    db: Session = Depends(get_db),
    staff: Staff = Depends(view_packages),
) -> MembershipPackageResponse:
    return MembershipPackageResponse.model_validate(
        MembershipPackageService(db).get_package(package_id)
    )


@router.patch("/{package_id}", response_model=MembershipPackageResponse)
def update_package(
    package_id: uuid.UUID,
    data: MembershipPackageUpdate,
    db: Session = Depends(get_db),
    staff: Staff = Depends(manage_packages),
) -> MembershipPackageResponse:
    package = MembershipPackageService(db).update_package(package_id, data, staff)
    return MembershipPackageResponse.model_validate(package)


@router.delete(
    "/{package_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses=error_responses(404, 409),
)
async def delete_package(
    package_id: uuid.UUID,
    db: Session = Depends(get_db),
    staff: Staff = Depends(manage_packages),
) -> None:
    """
    Delete a package.

    Raises:
        404: Package not found
        409: Active or paused subscriptions still reference the package
    """
    MembershipPackageService(db).delete_package(package_id)
    await cache.invalidate(usage_stats_cache_key(package_id))


@router.post(
    "/{package_id}/clone",
    response_model=MembershipPackageResponse,
    status_code=status.HTTP_201_CREATED,
)
def clone_package(
    package_id: uuid.UUID,
    data: ClonePackageRequest,
    db: Session = Depends(get_db),
    staff: Staff = Depends(manage_packages),
) -> MembershipPackageResponse:
    """
    Copy a package under a new name. The copy starts inactive.
    """
    package = MembershipPackageService(db).clone_package(package_id, data.name, staff)
    return MembershipPackageResponse.model_validate(package)


@router.get(
    "/{package_id}/usage-stats",
    response_model=UsageStatsResponse,
    responses=error_responses(404, 500),
)
async def get_usage_stats(
    package_id: uuid.UUID,
    db: Session = Depends(get_db),
    staff: Staff = Depends(view_packages),
) -> UsageStatsResponse:
    """
    Subscription counts and revenue for a package.

    ``average_rating`` and ``conversion_rate`` are null: no review or inquiry
    data is recorded.

    Raises:
        404: Package not found
        500: A subscription carries an unknown status
    """
    return await MembershipPackageService(db).get_usage_stats(package_id)


@router.get("/{package_id}/subscriptions", response_model=list[SubscriptionResponse])
def list_subscriptions(
    package_id: uuid.UUID,
    db: Session = Depends(get_db),
    staff: Staff = Depends(view_packages),
) -> list[SubscriptionResponse]:
    subscriptions = SubscriptionService(db).list_subscriptions(package_id)
    return [SubscriptionResponse.model_validate(s) for s in subscriptions]


@router.post(
    "/{package_id}/subscriptions",
    response_model=SubscriptionResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_subscription(
    package_id: uuid.UUID,
    data: SubscriptionCreate,
    db: Session = Depends(get_db),
    staff: Staff = Depends(manage_packages),
) -> SubscriptionResponse:
    subscription = await SubscriptionService(db).create_subscription(package_id, data)
    return SubscriptionResponse.model_validate(subscription)
