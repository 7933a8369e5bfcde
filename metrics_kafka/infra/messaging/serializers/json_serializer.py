"""
JSON 메트릭 직렬화 전략

메트릭 1개당 메시지 1개를 만든다 (key = 메트릭 이름, value = JSON 문서):

    {"count": 7, "rate_1m": 2.0, ..., "unit": "events/second",
     "timestamp": "2015-10-22T11:50:34.762+00:00"}

문자열/바이트 전략은 마지막 인코딩 단계만 다르고, 필드 구성과 타임스탬프
삽입은 `build_metric_documents`를 공유한다.
"""

from __future__ import annotations

from datetime import datetime
from typing import Protocol

from metrics_kafka.common.exceptions import SerializationError
from metrics_kafka.common.serde import encode_document
from metrics_kafka.core.dto.internal.snapshot import MetricSnapshot
from metrics_kafka.core.dto.io.message import MetricMessageDTO
from metrics_kafka.core.encoding import encode_metric, format_timestamp, stamp_fields
from metrics_kafka.core.types import ENCODING_EXCEPTIONS, TimeUnit


class MetricsSerializer(Protocol):
    """스냅샷 -> 메시지 목록 변환 전략.

    전략은 메트릭당 1개든, 전체를 1개로 묶든 원하는 만큼 메시지를 반환할 수 있다.
    `topic`은 리포터의 기본 토픽이다.
    """

    def serialize(
        self,
        snapshot: MetricSnapshot,
        topic: str,
        timestamp: datetime,
        rate_unit: TimeUnit,
        duration_unit: TimeUnit,
    ) -> list[MetricMessageDTO]: ...


def build_metric_documents(
    snapshot: MetricSnapshot,
    timestamp: datetime,
    rate_unit: TimeUnit,
    duration_unit: TimeUnit,
) -> list[tuple[str, bytes]]:
    """(메트릭 이름, UTF-8 JSON 문서) 목록을 출력 순서대로 생성.

    - 타임스탬프 문자열은 호출당 한 번만 포맷해 모든 문서가 공유
    - 하나라도 실패하면 SerializationError, 부분 결과는 버린다
    """
    stamp = format_timestamp(timestamp)
    documents: list[tuple[str, bytes]] = []
    for kind, name, metric in snapshot.entries():
        try:
            fields = encode_metric(kind, metric, rate_unit, duration_unit)
            documents.append((name, encode_document(stamp_fields(fields, stamp))))
        except ENCODING_EXCEPTIONS as exc:
            raise SerializationError(name, kind, reason=str(exc)) from exc
    return documents


class JsonStringSerializer:
    """UTF-8 문자열 key/value 메시지 (confluent-kafka str 입력용)"""

    def serialize(
        self,
        snapshot: MetricSnapshot,
        topic: str,
        timestamp: datetime,
        rate_unit: TimeUnit,
        duration_unit: TimeUnit,
    ) -> list[MetricMessageDTO]:
        return [
            MetricMessageDTO(topic=topic, key=name, value=document.decode("utf-8"))
            for name, document in build_metric_documents(
                snapshot, timestamp, rate_unit, duration_unit
            )
        ]

    def __repr__(self) -> str:
        return "JsonStringSerializer()"


class JsonBytesSerializer:
    """`JsonStringSerializer`와 같은 내용을 UTF-8 bytes key/value로 반환"""

    def serialize(
        self,
        snapshot: MetricSnapshot,
        topic: str,
        timestamp: datetime,
        rate_unit: TimeUnit,
        duration_unit: TimeUnit,
    ) -> list[MetricMessageDTO]:
        return [
            MetricMessageDTO(topic=topic, key=name.encode("utf-8"), value=document)
            for name, document in build_metric_documents(
                snapshot, timestamp, rate_unit, duration_unit
            )
        ]

    def __repr__(self) -> str:
        return "JsonBytesSerializer()"
