from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from merge_api.api.v1.dependencies import get_current_admin, get_db
from merge_api.models.user.user_model import User
from merge_api.schemas import admin_schema
from merge_api.services.admin_service import AdminService

router = APIRouter()


@router.get("/dashboard", response_model=admin_schema.DashboardStatsOut)
def get_dashboard_stats(
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    return AdminService(db, current_admin).dashboard_stats()


@router.get("/analytics", response_model=admin_schema.AnalyticsOut)
def get_analytics(
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    return AdminService(db, current_admin).analytics()


@router.get("/snippet-stats", response_model=admin_schema.SnippetStatsOut)
def get_snippet_stats(
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    return AdminService(db, current_admin).snippet_stats()
