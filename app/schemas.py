"""Pydantic schemas for the observation wire format and status API."""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class PublishErrorKind(str, Enum):
    """Failure classes a publish attempt can report."""

    configuration = "configuration"
    transport = "transport"


class ObservationPayload(BaseModel):
    """SensorThings Observation body: a phenomenon time and a numeric result."""

    model_config = ConfigDict(populate_by_name=True)

    phenomenon_time: str = Field(..., alias="phenomenonTime")
    result: float


class PublishResult(BaseModel):
    """Outcome of one attempt to create an Observation."""

    resource_uri: str
    phenomenon_time: str
    result: float
    status_code: Optional[int] = Field(
        default=None, description="HTTP status returned by the endpoint, if any."
    )
    error_kind: Optional[PublishErrorKind] = None
    detail: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error_kind is None


class SamplerStatus(BaseModel):
    """Snapshot of the sampler lifecycle exposed via the API."""

    running: bool
    period_seconds: float = Field(..., gt=0)
    resource_uri: str
    tick_count: int = Field(..., ge=0)
    last_result: Optional[PublishResult] = None
