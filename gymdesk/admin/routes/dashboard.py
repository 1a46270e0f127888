"""Statistics routes for the admin dashboard."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from gymdesk.admin.schemas.dashboard import DashboardSummaryResponse
from gymdesk.admin.services.dashboard_service import DashboardService
from gymdesk.db.session import get_db
from gymdesk.staff.dependencies import require_capability
from gymdesk.staff.models.staff import Staff
from gymdesk.staff.permissions import Capability

router = APIRouter(prefix="/statistics", tags=["admin-statistics"])


@router.get("/dashboard", response_model=DashboardSummaryResponse)
def get_dashboard_summary(
    db: Session = Depends(get_db),
    staff: Staff = Depends(require_capability(Capability.VIEW_DASHBOARD)),
) -> DashboardSummaryResponse:
    """
    Get dashboard summary.

    Returns aggregated metrics for:
    - Membership packages and subscriptions (counts per status, revenue, churn)
    - Schedule (classes this week, upcoming sessions, class packages)
    - Discount codes (active codes, redemptions, total discount given)
    """
    return DashboardService.get_summary(db)
