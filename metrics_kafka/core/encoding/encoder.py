"""메트릭 값 객체 -> 네이티브 필드 매핑 인코더

레지스트리 객체는 속성 이름으로만 읽습니다 (덕 타이핑):
- gauge: `value` 속성 또는 원시 값 자체, 매핑이면 복합 게이지
- counter: `count`
- histogram: `count`, `snapshot`(min/max/mean/stddev/median/p75/p95/p98/p99/p999)
- meter: `count`, `m1_rate`, `m5_rate`, `m15_rate`, `mean_rate` (초당)
- timer: meter 속성 + 나노초 `snapshot`

타이머 문서는 meter 필드 + histogram 샘플 필드 외에 `duration_unit`(샘플 값의 단위,
예: "milliseconds")을 하나 더 싣는다. 필드 집합을 정확히 검사하는 소비자는 이 필드를 감안해야 한다.

순수 함수만 두며 I/O가 없습니다.
"""

from __future__ import annotations

from collections.abc import Mapping
from decimal import Decimal
from typing import Any, Callable

from metrics_kafka.core.types import MetricKind, TimeUnit

EncodedMetric = dict[str, Any]
KindEncoder = Callable[[Any, TimeUnit, TimeUnit], EncodedMetric]

# (출력 필드명, 스냅샷 속성명) - 출력 순서 고정
_SAMPLE_FIELDS: tuple[tuple[str, str], ...] = (
    ("min", "min"),
    ("max", "max"),
    ("mean", "mean"),
    ("stddev", "stddev"),
    ("p50", "median"),
    ("p75", "p75"),
    ("p95", "p95"),
    ("p98", "p98"),
    ("p99", "p99"),
    ("p999", "p999"),
)

_RATE_FIELDS: tuple[tuple[str, str], ...] = (
    ("rate_1m", "m1_rate"),
    ("rate_5m", "m5_rate"),
    ("rate_15m", "m15_rate"),
    ("rate_mean", "mean_rate"),
)


def _number(value: Any, name: str) -> int | float:
    if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
        raise TypeError(f"'{name}' must be numeric, got {type(value).__name__}")
    if isinstance(value, Decimal):
        return float(value)
    return value


def _count(value: Any) -> int:
    number = _number(value, "count")
    if isinstance(number, float):
        if not number.is_integer():
            raise ValueError(f"'count' must be integral, got {number!r}")
        return int(number)
    return number


def _sample_fields(snapshot: Any, scale: Callable[[int | float], int | float]) -> EncodedMetric:
    return {
        field: scale(_number(getattr(snapshot, attr), field))
        for field, attr in _SAMPLE_FIELDS
    }


def _rate_fields(metric: Any, rate_unit: TimeUnit) -> EncodedMetric:
    factor = rate_unit.rate_factor
    return {
        field: float(_number(getattr(metric, attr), field)) * factor
        for field, attr in _RATE_FIELDS
    }


def encode_gauge(metric: Any, rate_unit: TimeUnit, duration_unit: TimeUnit) -> EncodedMetric:
    reading = getattr(metric, "value", metric)
    if isinstance(reading, Mapping):
        # 복합 게이지: 읽은 매핑이 곧 필드 집합 (빈 매핑이면 필드 0개)
        for key in reading:
            if not isinstance(key, str):
                raise TypeError(f"gauge field names must be str, got {type(key).__name__}")
        return dict(reading)
    return {"value": reading}


def encode_counter(metric: Any, rate_unit: TimeUnit, duration_unit: TimeUnit) -> EncodedMetric:
    return {"count": _count(metric.count)}


def encode_histogram(metric: Any, rate_unit: TimeUnit, duration_unit: TimeUnit) -> EncodedMetric:
    fields: EncodedMetric = {"count": _count(metric.count)}
    fields.update(_sample_fields(metric.snapshot, lambda v: v))
    return fields


def encode_meter(metric: Any, rate_unit: TimeUnit, duration_unit: TimeUnit) -> EncodedMetric:
    fields: EncodedMetric = {"count": _count(metric.count)}
    fields.update(_rate_fields(metric, rate_unit))
    fields["unit"] = f"events/{rate_unit.singular}"
    return fields


def encode_timer(metric: Any, rate_unit: TimeUnit, duration_unit: TimeUnit) -> EncodedMetric:
    """meter 필드 + duration 샘플 필드 + `duration_unit` (샘플 단위 이름)"""
    nanos = duration_unit.nanos
    fields: EncodedMetric = {"count": _count(metric.count)}
    fields.update(_sample_fields(metric.snapshot, lambda v: float(v) / nanos))
    fields.update(_rate_fields(metric, rate_unit))
    fields["unit"] = f"calls/{rate_unit.singular}"
    fields["duration_unit"] = duration_unit.value
    return fields


KIND_ENCODERS: dict[MetricKind, KindEncoder] = {
    MetricKind.GAUGE: encode_gauge,
    MetricKind.COUNTER: encode_counter,
    MetricKind.HISTOGRAM: encode_histogram,
    MetricKind.METER: encode_meter,
    MetricKind.TIMER: encode_timer,
}


def encode_metric(
    kind: MetricKind,
    metric: Any,
    rate_unit: TimeUnit = TimeUnit.SECONDS,
    duration_unit: TimeUnit = TimeUnit.MILLISECONDS,
) -> EncodedMetric:
    """메트릭 종류별 네이티브 필드 매핑 생성 (타임스탬프 미포함).

    Raises:
        AttributeError/TypeError/ValueError: 값 객체가 형식에 맞지 않을 때
    """
    return KIND_ENCODERS[MetricKind(kind)](metric, rate_unit, duration_unit)
