"""Admin dashboard statistics route."""

from fastapi import APIRouter, Depends, Request

from desaconnect.api.auth.admin_guard import require_admin
from desaconnect.api.dependencies.portal import get_statistics_service
from desaconnect.api.models.problem import ProblemDetailResponse, problem_exception
from desaconnect.api.models.stats import StatsResponse
from desaconnect.application.services.statistics_service import StatisticsService
from desaconnect.domain.exceptions import DesaConnectError
from desaconnect.domain.models.identity import AdminIdentity

router = APIRouter(prefix="/v1/admin", tags=["admin-stats"])


@router.get(
    "/stats",
    response_model=StatsResponse,
    responses={
        503: {"model": ProblemDetailResponse, "description": "Store unavailable"},
    },
    summary="Submission statistics",
)
async def get_stats(
    request: Request,
    admin: AdminIdentity = Depends(require_admin),
    service: StatisticsService = Depends(get_statistics_service),
) -> StatsResponse:
    """Totals, status and category breakdowns, monthly trends and
    processing times, computed over every submission on each call.
    """
    try:
        stats = await service.compute_stats()
    except DesaConnectError as e:
        raise problem_exception(e, request) from None
    return StatsResponse.from_domain(stats)
