"""리포팅 사이클 타임스탬프 유틸리티."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Callable

Clock = Callable[[], datetime]

TIMESTAMP_FIELD = "timestamp"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def format_timestamp(moment: datetime) -> str:
    """ISO-8601, UTC, 밀리초 정밀도, 명시적 오프셋 문자열.

    Examples:
        >>> format_timestamp(datetime(2015, 10, 22, 11, 50, 34, 762000, tzinfo=timezone.utc))
        '2015-10-22T11:50:34.762+00:00'

    Note:
        naive datetime은 UTC로 간주하고, 다른 타임존은 UTC로 변환한다.
    """
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    else:
        moment = moment.astimezone(timezone.utc)
    return moment.isoformat(timespec="milliseconds")


def stamp_fields(fields: dict[str, Any], timestamp: str) -> dict[str, Any]:
    """네이티브 필드 뒤에 timestamp 필드를 최상위 필드로 추가한 새 매핑 반환.

    중첩 객체가 아니라 같은 문서의 마지막 필드로 붙는다. 필드가 없으면
    `{"timestamp": ...}` 단일 필드 문서가 된다.
    """
    if TIMESTAMP_FIELD in fields:
        raise ValueError(f"native fields already contain '{TIMESTAMP_FIELD}'")
    stamped = dict(fields)
    stamped[TIMESTAMP_FIELD] = timestamp
    return stamped
