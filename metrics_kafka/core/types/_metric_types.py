"""메트릭 종류 및 시간 단위 타입 정의 모듈."""

from __future__ import annotations

from enum import StrEnum
from typing import Final


class MetricKind(StrEnum):
    """메트릭 종류 (네이티브 필드 구성을 결정)"""

    GAUGE = "gauge"
    COUNTER = "counter"
    HISTOGRAM = "histogram"
    METER = "meter"
    TIMER = "timer"


# 스냅샷 순회 순서 (메시지 출력 순서 계약)
KIND_ORDER: Final[tuple[MetricKind, ...]] = (
    MetricKind.GAUGE,
    MetricKind.COUNTER,
    MetricKind.HISTOGRAM,
    MetricKind.METER,
    MetricKind.TIMER,
)

_NANOS_PER_UNIT: Final[dict[str, int]] = {
    "nanoseconds": 1,
    "microseconds": 1_000,
    "milliseconds": 1_000_000,
    "seconds": 1_000_000_000,
    "minutes": 60 * 1_000_000_000,
    "hours": 60 * 60 * 1_000_000_000,
    "days": 24 * 60 * 60 * 1_000_000_000,
}


class TimeUnit(StrEnum):
    """rate/duration 변환에 쓰이는 시간 단위.

    - rate: 초당 이벤트 수 -> 단위당 이벤트 수 (`rate_factor` 곱)
    - duration: 나노초 샘플 -> 단위 값 (`nanos`로 나눔)
    """

    NANOSECONDS = "nanoseconds"
    MICROSECONDS = "microseconds"
    MILLISECONDS = "milliseconds"
    SECONDS = "seconds"
    MINUTES = "minutes"
    HOURS = "hours"
    DAYS = "days"

    @property
    def nanos(self) -> int:
        return _NANOS_PER_UNIT[self.value]

    @property
    def rate_factor(self) -> float:
        """초당 값 -> 단위당 값 변환 계수 (SECONDS=1.0, MINUTES=60.0)"""
        return self.nanos / _NANOS_PER_UNIT["seconds"]

    @property
    def singular(self) -> str:
        return self.value[:-1]
