# -*- coding: utf-8 -*-
"""Health stats — API endpoints."""

from __future__ import annotations

from datetime import datetime

from fastapi import APIRouter, Depends, Query

from ..deps import request_now
from .insights import health_dashboard, health_insights
from .models import HealthDashboard, HealthInsightsResponse, HealthStats
from .scoring import compute_health_stats

router = APIRouter(prefix="/api/health", tags=["Health stats"])


@router.get("/stats/{pet_id}", response_model=HealthStats, summary="Health statistics and score for a pet")
def health_stats_api(
    pet_id: str,
    days: int | None = Query(default=None, ge=0, le=365, description="Upcoming reminder horizon in days"),
    now: datetime = Depends(request_now),
):
    return compute_health_stats(pet_id, now, horizon_days=days)


@router.get("/insights/{pet_id}", response_model=HealthInsightsResponse, summary="Actionable health alerts")
def health_insights_api(pet_id: str, now: datetime = Depends(request_now)):
    items = health_insights(pet_id, now)
    return HealthInsightsResponse(pet_id=pet_id, count=len(items), insights=items)


@router.get("/dashboard/{pet_id}", response_model=HealthDashboard, summary="Health dashboard for a pet")
def health_dashboard_api(pet_id: str, now: datetime = Depends(request_now)):
    return health_dashboard(pet_id, now)
