from collections import deque
from decimal import Decimal
from typing import Any, Callable

import orjson

JSONDefault = Callable[[Any], Any]


def default_json_encoder(obj: Any) -> Any:
    """orjson이 모르는 타입 변환 헬퍼.

    - Decimal -> float
    - deque/set/frozenset -> list
    - 그 외: TypeError로 인코딩 실패를 알린다
    """
    if isinstance(obj, Decimal):
        return float(obj)
    if isinstance(obj, (deque, set, frozenset)):
        return list(obj)
    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")


def encode_document(fields: dict[str, Any], default: JSONDefault | None = None) -> bytes:
    """필드 매핑을 UTF-8 JSON 객체 bytes로 한 번에 직렬화.

    - 삽입 순서 유지, 공백 없는 compact 출력
    - 인코딩 불가 값은 orjson.JSONEncodeError(TypeError)로 전파
    """
    return orjson.dumps(fields, default=default or default_json_encoder)


def key_to_bytes(key: str | bytes | None) -> bytes | None:
    # 문자열 키 우선, bytes는 그대로 통과
    if key is None or isinstance(key, bytes):
        return key
    return str(key).encode("utf-8")
