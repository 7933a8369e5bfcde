from metrics_kafka.core.types._exception_types import ENCODING_EXCEPTIONS, ErrorCode
from metrics_kafka.core.types._metric_types import KIND_ORDER, MetricKind, TimeUnit

__all__ = [
    "ENCODING_EXCEPTIONS",
    "ErrorCode",
    "KIND_ORDER",
    "MetricKind",
    "TimeUnit",
]
