"""Kafka 메트릭 리포터.

공개 API:
- KafkaReporter / ReporterConfig / build_reporter: 스냅샷 -> Kafka 발행
- ReportingScheduler: 주기 실행
- MetricSnapshot 및 값 객체: 레지스트리 스냅샷 표현
- JsonStringSerializer / JsonBytesSerializer: 기본 직렬화 전략
"""

from metrics_kafka.application.reporter import (
    DEFAULT_TOPIC,
    KafkaReporter,
    ReporterConfig,
    build_reporter,
)
from metrics_kafka.application.scheduler import ReportingScheduler
from metrics_kafka.common.exceptions import (
    DeliveryFailed,
    DispatchRejected,
    ReporterError,
    SerializationError,
)
from metrics_kafka.core.dto.internal.snapshot import (
    CounterValue,
    GaugeValue,
    HistogramValue,
    MeterValue,
    MetricSnapshot,
    SampleSnapshot,
    TimerValue,
)
from metrics_kafka.core.dto.io.message import MetricMessageDTO
from metrics_kafka.core.types import MetricKind, TimeUnit
from metrics_kafka.infra.messaging.serializers import (
    JsonBytesSerializer,
    JsonStringSerializer,
    MetricsSerializer,
)

__all__ = [
    "CounterValue",
    "DEFAULT_TOPIC",
    "DeliveryFailed",
    "DispatchRejected",
    "GaugeValue",
    "HistogramValue",
    "JsonBytesSerializer",
    "JsonStringSerializer",
    "KafkaReporter",
    "MeterValue",
    "MetricKind",
    "MetricMessageDTO",
    "MetricSnapshot",
    "MetricsSerializer",
    "ReporterConfig",
    "ReporterError",
    "ReportingScheduler",
    "SampleSnapshot",
    "SerializationError",
    "TimeUnit",
    "TimerValue",
    "build_reporter",
]
