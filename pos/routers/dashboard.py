# =========================================================
# DASHBOARD ROUTER
#
# Summary metrics over the full sales history:
# revenue, cost, profit, best sellers, revenue by date
# =========================================================

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from pos.database import get_db
from pos.schemas.dashboard import DashboardSummaryResponse
from pos.services.dashboard_service import build_dashboard

router = APIRouter(prefix="/api/dashboard", tags=["Dashboard"])


@router.get("", response_model=DashboardSummaryResponse)
def dashboard_summary(db: Session = Depends(get_db)):
    return build_dashboard(db)
