from __future__ import annotations

from metrics_kafka.core.dto.internal.snapshot import MetricFilter
from metrics_kafka.core.types import MetricKind


def accept_all(name: str, kind: MetricKind) -> bool:
    return True


def prefix_filter(*prefixes: str) -> MetricFilter:
    """이름이 주어진 접두사 중 하나로 시작하는 메트릭만 통과시키는 필터.

    접두사가 없으면 모든 메트릭을 통과시킨다.
    """
    cleaned = tuple(p for p in (prefix.strip() for prefix in prefixes) if p)
    if not cleaned:
        return accept_all

    def _matches(name: str, kind: MetricKind) -> bool:
        return name.startswith(cleaned)

    return _matches


def kind_filter(*kinds: MetricKind) -> MetricFilter:
    """지정한 종류의 메트릭만 통과시키는 필터."""
    allowed = frozenset(kinds)

    def _matches(name: str, kind: MetricKind) -> bool:
        return kind in allowed

    return _matches
