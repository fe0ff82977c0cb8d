"""HTTP route definitions for the service."""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from app.schemas import SamplerStatus
from services.sampler import Sampler, build_default_sampler

router = APIRouter()


def get_sampler() -> Sampler:
    return build_default_sampler()


@router.get(
    "/sampler",
    response_model=SamplerStatus,
    summary="Report the sampler lifecycle state and the latest publish outcome.",
)
async def sampler_status(
    sampler: Sampler = Depends(get_sampler),
) -> SamplerStatus:
    return sampler.status()


@router.get(
    "/health",
    summary="Health check endpoint.",
    status_code=status.HTTP_200_OK,
)
async def healthcheck() -> dict[str, str]:
    return {"status": "ok"}
