from typing import Annotated

from fastapi import APIRouter, Query

from src.movieclub.api.dependencies import RatingServiceDep
from src.movieclub.schemas.rating import RatingRead

router = APIRouter(prefix="/ratings", tags=["ratings"])


@router.get("/latest", response_model=list[RatingRead])
async def latest_ratings(
    service: RatingServiceDep,
    limit: Annotated[int, Query(ge=1, le=50)] = 5,
) -> list[RatingRead]:
    """Most recent ratings across all movies."""
    return await service.latest(limit)
