"""예외 분류용 타입 정의 모듈.

광범위한 Exception 포착 대신 리포팅 경로별로 의도한 예외만 다루기 위해 사용합니다.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Final

import orjson


class ErrorCode(StrEnum):
    """리포팅 사이클 에러 코드 분류"""

    SERIALIZATION_FAILED = "serialization_failed"
    DISPATCH_REJECTED = "dispatch_rejected"
    DELIVERY_FAILED = "delivery_failed"
    UNKNOWN_ERROR = "unknown_error"


# 메트릭 값 객체 -> 필드/JSON 변환 중 발생 가능한 예외
# - AttributeError: 레지스트리 객체에 필요한 속성이 없음
# - TypeError/ValueError: 숫자 변환 실패
# - orjson.JSONEncodeError: 인코딩 불가 값 (TypeError 하위 클래스)
ENCODING_EXCEPTIONS: Final[tuple[type[Exception], ...]] = (
    AttributeError,
    KeyError,
    TypeError,
    ValueError,
    OverflowError,
    orjson.JSONEncodeError,
)
