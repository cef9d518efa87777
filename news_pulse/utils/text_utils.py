"""텍스트 정제, 날짜 변환, ID 생성 유틸리티"""

import hashlib
import html
import re
from datetime import datetime, timezone
from typing import List, Optional

from dateutil import parser as dateutil_parser

from news_pulse.utils.logger import get_logger

logger = get_logger(__name__)

# 영문자로 시작하는 3자 이상 토큰 (하이픈 허용: "GLM-5")
TERM_PATTERN = re.compile(r"[A-Za-z][A-Za-z0-9-]{2,}")


def decode_entities(value: str) -> str:
    """CDATA 래퍼 제거 + HTML 엔티티 디코딩."""
    if not value:
        return ""
    text = value.strip()
    text = re.sub(r"^<!\[CDATA\[", "", text)
    text = re.sub(r"\]\]>$", "", text)
    return html.unescape(text).strip()


def strip_html(value: str) -> str:
    """태그 제거, 공백 압축, 엔티티 디코딩."""
    if not value:
        return ""
    text = decode_entities(value)
    text = re.sub(r"<[^>]*>", " ", text)
    text = re.sub(r"\s+", " ", text).strip()
    # 이중 인코딩된 엔티티 (&amp;amp; 등)
    return decode_entities(text)


def excerpt(value: str, max_chars: int = 280) -> str:
    """HTML 제거 후 max_chars 이내로 자르기 (말줄임표 포함)."""
    normalized = strip_html(value)
    if len(normalized) <= max_chars:
        return normalized
    return normalized[: max_chars - 3].rstrip() + "..."


def extract_terms(text: str) -> List[str]:
    """제목에서 후보 용어 추출 (원문 대소문자 유지, 등장 순서)."""
    return TERM_PATTERN.findall(text or "")


def extract_keywords(title: str, limit: int = 8) -> List[str]:
    """소문자 키워드, 중복 제거, 최대 limit개."""
    keywords: List[str] = []
    for term in extract_terms(title):
        lowered = term.lower()
        if lowered not in keywords:
            keywords.append(lowered)
        if len(keywords) >= limit:
            break
    return keywords


def format_iso(value: datetime) -> str:
    """UTC ISO-8601 문자열 (밀리초, Z 접미사)."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_datetime(value: Optional[str]) -> Optional[datetime]:
    """다양한 날짜 형식 파싱. 실패 시 None, tz 없는 값은 UTC로 간주."""
    if not value or not str(value).strip():
        return None
    try:
        parsed = dateutil_parser.parse(str(value).strip())
    except (ValueError, TypeError, OverflowError):
        logger.debug("날짜 파싱 실패: %s", value)
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def to_iso_time(value: Optional[str], now: Optional[datetime] = None) -> str:
    """발행일 문자열 → ISO-8601. 파싱 불가 시 now."""
    parsed = parse_datetime(value)
    if parsed is None:
        parsed = now or datetime.now(timezone.utc)
    return format_iso(parsed)


def slugify(value: str) -> str:
    """소문자 + 공백을 하이픈으로."""
    return re.sub(r"\s+", "-", value.strip().lower())


def stable_id(topic: str, link: str, ordinal: int) -> str:
    """(토픽, 링크, 순번) → 결정적 기사 ID."""
    digest = hashlib.sha1(f"{topic}|{link}|{ordinal}".encode("utf-8")).hexdigest()
    return f"{slugify(topic)}-{digest[:12]}"
