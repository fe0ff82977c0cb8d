"""Periodic sampling and publishing of simulated observations."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime
from functools import lru_cache
from threading import Lock
from typing import Callable, Optional
from zoneinfo import ZoneInfo

from app.schemas import PublishResult, SamplerStatus
from models.records import Reading
from services.measurement import measure
from services.publisher import ObservationPublisher
from services.timer import PeriodicTimer
from settings import get_settings

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]
Reporter = Callable[[PublishResult], None]


def local_clock(zone: Optional[str] = None) -> Clock:
    """Build a clock returning the current zone-aware time."""
    tz = ZoneInfo(zone) if zone else None

    def now() -> datetime:
        if tz is None:
            return datetime.now().astimezone()
        return datetime.now(tz)

    return now


class Sampler:
    """Owns the periodic timer that measures and publishes one Observation per tick."""

    def __init__(
        self,
        publisher: ObservationPublisher,
        period: float,
        measure_fn: Callable[[datetime], float] = measure,
        clock: Optional[Clock] = None,
        reporter: Optional[Reporter] = None,
    ) -> None:
        self.publisher = publisher
        self.period = period
        self._measure = measure_fn
        self._clock = clock or local_clock()
        self._reporter = reporter
        self.executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="Sampler")
        self._timer: Optional[PeriodicTimer] = None
        self._handle_lock = Lock()
        self._tick_count = 0
        self._last_result: Optional[PublishResult] = None
        self._stats_lock = Lock()

    @property
    def running(self) -> bool:
        with self._handle_lock:
            return self._timer is not None

    @property
    def tick_count(self) -> int:
        """Ticks begun across every timer this sampler has armed."""
        with self._stats_lock:
            return self._tick_count

    def start(self, period: Optional[float] = None) -> None:
        """Arm a fixed-rate timer, replacing any active one."""
        interval = self.period if period is None else period
        timer = PeriodicTimer(self._tick, interval)
        with self._handle_lock:
            if self._timer is not None:
                self._timer.cancel()
            self.period = timer.period
            timer.schedule(self.executor)
            self._timer = timer
        logger.info("Sampler started.", extra={"period_seconds": timer.period})

    def stop(self) -> None:
        with self._handle_lock:
            timer, self._timer = self._timer, None
            if timer is None:
                return
            timer.cancel()
        logger.info("Sampler stopped.")

    def shutdown(self) -> None:
        """Stop ticking and release the worker and HTTP client."""
        self.stop()
        self.executor.shutdown(wait=False, cancel_futures=True)
        self.publisher.close()

    def status(self) -> SamplerStatus:
        with self._stats_lock:
            tick_count = self._tick_count
            last_result = self._last_result
        return SamplerStatus(
            running=self.running,
            period_seconds=self.period,
            resource_uri=self.publisher.resource_uri,
            tick_count=tick_count,
            last_result=last_result,
        )

    def run_once(self) -> PublishResult:
        """Measure now and publish the reading; one tick's worth of work."""
        logger.info("Preparing a publish event.")
        now = self._clock()
        reading = Reading(timestamp=now, value=self._measure(now))
        result = self.publisher.publish(reading)
        with self._stats_lock:
            self._last_result = result
        if self._reporter is not None:
            self._reporter(result)
        return result

    def _tick(self) -> None:
        with self._stats_lock:
            self._tick_count += 1
            tick = self._tick_count
        try:
            self.run_once()
        except Exception:
            logger.exception("Sampler tick failed.", extra={"tick": tick})


@lru_cache
def build_default_sampler(period: Optional[float] = None) -> Sampler:
    """Factory that wires the sampler from environment settings."""
    settings = get_settings()
    publisher = ObservationPublisher(resource_uri=settings.observations_uri)
    return Sampler(
        publisher=publisher,
        period=period or settings.period_seconds,
        clock=local_clock(settings.timezone),
    )
