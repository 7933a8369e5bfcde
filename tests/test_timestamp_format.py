from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from metrics_kafka.core.encoding import format_timestamp, stamp_fields
from tests.factory_builders import REPORT_STAMP, REPORT_TIME


def test_format_timestamp_utc_millis_with_offset() -> None:
    assert format_timestamp(REPORT_TIME) == REPORT_STAMP


def test_format_timestamp_converts_other_zones_to_utc() -> None:
    seoul = timezone(timedelta(hours=9))
    moment = datetime(2015, 10, 22, 20, 50, 34, 762999, tzinfo=seoul)

    # 마이크로초는 밀리초로 절삭
    assert format_timestamp(moment) == REPORT_STAMP


def test_format_timestamp_treats_naive_as_utc() -> None:
    naive = datetime(2015, 10, 22, 11, 50, 34, 762000)

    assert format_timestamp(naive) == REPORT_STAMP


def test_stamp_fields_appends_timestamp_last_without_mutating() -> None:
    fields = {"count": 1}

    stamped = stamp_fields(fields, REPORT_STAMP)

    assert list(stamped) == ["count", "timestamp"]
    assert fields == {"count": 1}


def test_stamp_fields_on_empty_mapping() -> None:
    assert stamp_fields({}, REPORT_STAMP) == {"timestamp": REPORT_STAMP}


def test_stamp_fields_rejects_existing_timestamp() -> None:
    with pytest.raises(ValueError):
        stamp_fields({"timestamp": "x"}, REPORT_STAMP)
