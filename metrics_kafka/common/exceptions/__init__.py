from metrics_kafka.common.exceptions.errors import (
    DeliveryFailed,
    DispatchRejected,
    ReporterError,
    SerializationError,
    is_retriable,
)

__all__ = [
    "DeliveryFailed",
    "DispatchRejected",
    "ReporterError",
    "SerializationError",
    "is_retriable",
]
