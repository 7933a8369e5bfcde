from metrics_kafka.core.encoding.encoder import EncodedMetric, encode_metric
from metrics_kafka.core.encoding.timestamp import (
    TIMESTAMP_FIELD,
    Clock,
    format_timestamp,
    stamp_fields,
    utc_now,
)

__all__ = [
    "Clock",
    "EncodedMetric",
    "TIMESTAMP_FIELD",
    "encode_metric",
    "format_timestamp",
    "stamp_fields",
    "utc_now",
]
