"""관심 토픽 입력 정제"""

import re
from typing import Iterable, List, Optional, Sequence, Tuple, Union

MAX_INTERESTS = 12

DEFAULT_PULSE_INTERESTS: Tuple[str, ...] = ("Technology", "AI", "Economic", "Political", "Business")


def clean_interest(value: str) -> str:
    """앞뒤 공백 제거 + 연속 공백 압축."""
    return re.sub(r"\s+", " ", str(value or "").strip())


def normalize_interests(
    value: Union[str, Iterable[str], None],
    defaults: Optional[Sequence[str]] = None,
) -> List[str]:
    """
    관심 토픽 목록 정제.

    - 리스트 또는 쉼표 구분 문자열 허용
    - 공백 정리, 빈 값 제거, 순서 유지 중복 제거, 최대 12개
    - 결과가 비면 기본 토픽 목록

    Args:
        value: 원시 입력.
        defaults: 비었을 때 사용할 목록 (None이면 DEFAULT_PULSE_INTERESTS).
    """
    if value is None:
        raw: List[str] = []
    elif isinstance(value, str):
        raw = value.split(",")
    else:
        raw = [part for item in value for part in str(item or "").split(",")]

    interests: List[str] = []
    for item in raw:
        cleaned = clean_interest(item)
        if cleaned and cleaned not in interests:
            interests.append(cleaned)

    if not interests:
        return list(defaults if defaults is not None else DEFAULT_PULSE_INTERESTS)
    return interests[:MAX_INTERESTS]
