from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Callable

from metrics_kafka.core.types import KIND_ORDER, MetricKind

MetricFilter = Callable[[str, MetricKind], bool]


@dataclass(slots=True, frozen=True, kw_only=True)
class GaugeValue:
    """게이지 측정값. 레지스트리가 원시 값을 그대로 넘겨도 된다."""

    value: Any


@dataclass(slots=True, frozen=True, kw_only=True)
class CounterValue:
    count: int


@dataclass(slots=True, frozen=True, kw_only=True)
class SampleSnapshot:
    """히스토그램/타이머 샘플 통계 (타이머는 나노초 단위)."""

    min: float
    max: float
    mean: float
    stddev: float
    median: float
    p75: float
    p95: float
    p98: float
    p99: float
    p999: float


@dataclass(slots=True, frozen=True, kw_only=True)
class HistogramValue:
    count: int
    snapshot: SampleSnapshot


@dataclass(slots=True, frozen=True, kw_only=True)
class MeterValue:
    """미터 측정값 (rate는 초당 이벤트 수)."""

    count: int
    m1_rate: float
    m5_rate: float
    m15_rate: float
    mean_rate: float


@dataclass(slots=True, frozen=True, kw_only=True)
class TimerValue:
    """타이머 측정값: 미터 rate + 나노초 duration 샘플."""

    count: int
    m1_rate: float
    m5_rate: float
    m15_rate: float
    mean_rate: float
    snapshot: SampleSnapshot


def _sorted_view(entries: Mapping[str, Any] | None) -> Mapping[str, Any]:
    # 입력 매핑의 삽입 순서와 무관하게 이름 오름차순으로 고정
    items = sorted((entries or {}).items(), key=lambda item: item[0])
    return MappingProxyType(dict(items))


@dataclass(slots=True, frozen=True, kw_only=True)
class MetricSnapshot:
    """레지스트리의 한 시점 불변 스냅샷 (종류별 이름 정렬 매핑).

    사이클마다 외부 레지스트리가 새로 만들고, 코어는 읽기만 한다.
    """

    gauges: Mapping[str, Any] = field(default_factory=dict)
    counters: Mapping[str, Any] = field(default_factory=dict)
    histograms: Mapping[str, Any] = field(default_factory=dict)
    meters: Mapping[str, Any] = field(default_factory=dict)
    timers: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        # frozen dataclass이므로 object.__setattr__로 정렬된 읽기 전용 뷰를 고정
        for kind in KIND_ORDER:
            attr = _ATTR_BY_KIND[kind]
            object.__setattr__(self, attr, _sorted_view(getattr(self, attr)))

    def of_kind(self, kind: MetricKind) -> Mapping[str, Any]:
        return getattr(self, _ATTR_BY_KIND[kind])

    def entries(self) -> Iterator[tuple[MetricKind, str, Any]]:
        """(kind, name, value)를 gauge -> timer, 이름 오름차순으로 순회"""
        for kind in KIND_ORDER:
            for name, value in self.of_kind(kind).items():
                yield kind, name, value

    def filtered(self, predicate: MetricFilter) -> MetricSnapshot:
        """predicate(name, kind)가 참인 항목만 남긴 새 스냅샷 반환"""
        kept = {
            _ATTR_BY_KIND[kind]: {
                name: value
                for name, value in self.of_kind(kind).items()
                if predicate(name, kind)
            }
            for kind in KIND_ORDER
        }
        return MetricSnapshot(**kept)

    def __len__(self) -> int:
        return sum(len(self.of_kind(kind)) for kind in KIND_ORDER)


_ATTR_BY_KIND: dict[MetricKind, str] = {
    MetricKind.GAUGE: "gauges",
    MetricKind.COUNTER: "counters",
    MetricKind.HISTOGRAM: "histograms",
    MetricKind.METER: "meters",
    MetricKind.TIMER: "timers",
}
