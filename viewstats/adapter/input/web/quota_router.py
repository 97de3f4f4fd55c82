from fastapi import APIRouter, Depends

from viewstats.adapter.input.web.dependencies import get_quota_usecase
from viewstats.application.usecase.quota_usecase import API_COSTS, QuotaUseCase

quota_router = APIRouter(tags=["quota"])


@quota_router.get("")
async def get_quota_status(usecase: QuotaUseCase = Depends(get_quota_usecase)):
    """
    Today's YouTube Data API quota usage (quota days follow Pacific time).
    """
    return {**usecase.get_status(), "costs": dict(API_COSTS)}
