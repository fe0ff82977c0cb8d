"""Delivery of Observations to a SensorThings Datastream."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Optional

import httpx

from app.schemas import ObservationPayload, PublishErrorKind, PublishResult
from models.records import Reading

logger = logging.getLogger(__name__)

_SUPPORTED_SCHEMES = {"http", "https"}


def format_phenomenon_time(instant: datetime) -> str:
    """Format ``instant`` as an ISO-8601 UTC instant such as ``2024-01-01T12:00:00Z``."""
    if instant.tzinfo is None:
        instant = instant.replace(tzinfo=timezone.utc)
    instant = instant.astimezone(timezone.utc)

    if instant.microsecond == 0:
        timespec = "seconds"
    elif instant.microsecond % 1000 == 0:
        timespec = "milliseconds"
    else:
        timespec = "microseconds"
    return instant.replace(tzinfo=None).isoformat(timespec=timespec) + "Z"


def encode_observation(phenomenon_time: str, result: float) -> str:
    payload = ObservationPayload(phenomenon_time=phenomenon_time, result=result)
    return payload.model_dump_json(by_alias=True)


def _validate_resource_uri(resource_uri: str) -> Optional[str]:
    """Return a reason string when ``resource_uri`` is unusable, else None."""
    # Reading ``host`` IDNA-decodes it, which can raise UnicodeError.
    try:
        url = httpx.URL(resource_uri)
        scheme = url.scheme
        host = url.host
    except (httpx.InvalidURL, UnicodeError) as exc:
        return str(exc) or exc.__class__.__name__
    if scheme not in _SUPPORTED_SCHEMES:
        return f"unsupported scheme {scheme!r}" if scheme else "missing scheme"
    if not host:
        return "missing host"
    return None


class ObservationPublisher:
    """Creates Observations in a Datastream's Observations collection via HTTP POST.

    Configuration and transport failures are reported through the returned
    :class:`PublishResult` and logged; they are never raised to the caller.
    """

    def __init__(self, resource_uri: str, client: Optional[httpx.Client] = None) -> None:
        self.resource_uri = resource_uri
        self._client = client or httpx.Client(follow_redirects=False)

    def close(self) -> None:
        self._client.close()

    def publish(self, reading: Reading, resource_uri: Optional[str] = None) -> PublishResult:
        return self.create_observation(
            format_phenomenon_time(reading.timestamp), reading.value, resource_uri
        )

    def create_observation(
        self,
        phenomenon_time: str,
        result: float,
        resource_uri: Optional[str] = None,
    ) -> PublishResult:
        target = resource_uri or self.resource_uri
        body = encode_observation(phenomenon_time, result)
        context = {
            "resource_uri": target,
            "phenomenon_time": phenomenon_time,
            "result": result,
        }

        reason = _validate_resource_uri(target)
        if reason is not None:
            return self._malformed(target, phenomenon_time, result, reason, context)

        # Streamed so the response body is never read.
        try:
            with self._client.stream(
                "POST",
                target,
                content=body,
                headers={"Content-Type": "application/json"},
                follow_redirects=False,
            ) as response:
                status_code = response.status_code
        except (httpx.InvalidURL, UnicodeError) as exc:
            reason = str(exc) or exc.__class__.__name__
            return self._malformed(target, phenomenon_time, result, reason, context)
        except httpx.TransportError as exc:
            logger.warning(
                "Cannot create Observation, as a connection could not be opened: %s",
                exc.__class__.__name__,
                extra={**context, "error_kind": PublishErrorKind.transport.value},
            )
            return PublishResult(
                resource_uri=target,
                phenomenon_time=phenomenon_time,
                result=result,
                error_kind=PublishErrorKind.transport,
                detail=str(exc) or exc.__class__.__name__,
            )

        logger.info(
            "Observation response code: %d",
            status_code,
            extra={**context, "status_code": status_code},
        )
        return PublishResult(
            resource_uri=target,
            phenomenon_time=phenomenon_time,
            result=result,
            status_code=status_code,
        )

    @staticmethod
    def _malformed(
        target: str,
        phenomenon_time: str,
        result: float,
        reason: str,
        context: dict,
    ) -> PublishResult:
        logger.warning(
            "Cannot create Observation, as URL is malformed: %s",
            reason,
            extra={**context, "error_kind": PublishErrorKind.configuration.value},
        )
        return PublishResult(
            resource_uri=target,
            phenomenon_time=phenomenon_time,
            result=result,
            error_kind=PublishErrorKind.configuration,
            detail=reason,
        )
