"""Analysis API routes."""

from fastapi import APIRouter

from ..schemas.analysis import PerformanceAnalysisRequest, QualityAnalysisRequest
from ..schemas.common import APIResponse
from ..services.analysis_service import analysis_service

router = APIRouter(prefix="/trading-systems", tags=["analysis"])


@router.post("/{ts_id}/performance-analysis", response_model=APIResponse[dict])
def run_performance_analysis(ts_id: int, request: PerformanceAnalysisRequest):
    """Compute equities, aggregates, distributions and rolling stats."""
    return APIResponse(data=analysis_service.run_performance(ts_id, request))


@router.post("/{ts_id}/quality-analysis", response_model=APIResponse[dict])
def run_quality_analysis(ts_id: int, request: QualityAnalysisRequest):
    """Compute the SQN grids by market regime."""
    return APIResponse(data=analysis_service.run_quality(ts_id, request))
