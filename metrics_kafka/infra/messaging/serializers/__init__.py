from __future__ import annotations

from typing import Callable

from metrics_kafka.infra.messaging.serializers.json_serializer import (
    JsonBytesSerializer,
    JsonStringSerializer,
    MetricsSerializer,
    build_metric_documents,
)

# 설정 이름 -> 전략 팩토리
SERIALIZER_FACTORIES: dict[str, Callable[[], MetricsSerializer]] = {
    "json-string": JsonStringSerializer,
    "json-bytes": JsonBytesSerializer,
}


def resolve_serializer(name: str) -> MetricsSerializer:
    """설정 이름으로 직렬화 전략 생성 (대소문자/밑줄 무시)"""
    normalized = name.strip().lower().replace("_", "-")
    try:
        factory = SERIALIZER_FACTORIES[normalized]
    except KeyError:
        known = ", ".join(sorted(SERIALIZER_FACTORIES))
        raise ValueError(f"Unknown metrics serializer '{name}' (known: {known})") from None
    return factory()


__all__ = [
    "JsonBytesSerializer",
    "JsonStringSerializer",
    "MetricsSerializer",
    "SERIALIZER_FACTORIES",
    "build_metric_documents",
    "resolve_serializer",
]
