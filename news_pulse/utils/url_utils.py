"""URL 정규화 및 도메인 처리"""

import re
from typing import Iterable, List, Optional, Union
from urllib.parse import urlparse

MAX_POLICY_DOMAINS = 80
UNKNOWN_DOMAIN = "unknown-source"


def canonicalize_url(url: str) -> str:
    """
    URL 정규화: scheme + host + path.

    - scheme/host 소문자
    - 쿼리 파라미터/프래그먼트 제거
    - 루트가 아닌 경로의 끝 슬래시 제거
    파싱할 수 없는 값은 공백만 제거해 그대로 반환.
    """
    raw = (url or "").strip()
    parsed = urlparse(raw)
    if not parsed.scheme or not parsed.netloc:
        return raw
    path = parsed.path or "/"
    if len(path) > 1:
        path = path.rstrip("/") or "/"
    return f"{parsed.scheme.lower()}://{parsed.netloc.lower()}{path}"


def domain_from_url(url: str) -> str:
    """URL에서 호스트 추출 (www. 및 끝 점 제거). 실패 시 unknown-source."""
    parsed = urlparse((url or "").strip())
    host = (parsed.hostname or "").lower().rstrip(".")
    if not host:
        return UNKNOWN_DOMAIN
    return re.sub(r"^www\.", "", host)


def origin_of(url: str) -> Optional[str]:
    """발행처 홈페이지 (scheme://host)."""
    parsed = urlparse((url or "").strip())
    if not parsed.scheme or not parsed.netloc:
        return None
    return f"{parsed.scheme}://{parsed.netloc}"


def normalize_domain(value: str) -> str:
    """정책용 도메인 정규화: 소문자, scheme/www./경로/포트/끝 점 제거."""
    text = (value or "").strip().lower()
    text = re.sub(r"^[a-z][a-z0-9+.-]*://", "", text)
    text = re.sub(r"^www\.", "", text)
    text = re.split(r"[/?#]", text, maxsplit=1)[0]
    text = re.sub(r":\d+$", "", text)
    return text.rstrip(".")


def normalize_domains(values: Union[str, Iterable[str], None], limit: int = MAX_POLICY_DOMAINS) -> List[str]:
    """도메인 목록 정규화 + 순서 유지 중복 제거 + 최대 limit개."""
    if values is None:
        return []
    if isinstance(values, str):
        values = values.split(",")

    domains: List[str] = []
    for value in values:
        domain = normalize_domain(str(value))
        if domain and domain not in domains:
            domains.append(domain)
    return domains[:limit]


def domain_matches(domain: str, rule: str) -> bool:
    """정확히 일치하거나 rule의 서브도메인이면 True."""
    if not domain or not rule:
        return False
    return domain == rule or domain.endswith("." + rule)
