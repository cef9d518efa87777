"""요청자별 출처 허용/차단 정책"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Optional, Tuple, Union

from news_pulse.utils.url_utils import normalize_domains


@dataclass(frozen=True)
class SourcePolicy:
    """
    도메인 허용/차단 목록.

    목록은 항상 정규화된 상태로 보관한다 (create() 사용).
    """

    allow_domains: Tuple[str, ...] = field(default_factory=tuple)
    deny_domains: Tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def create(
        cls,
        allow_domains: Union[str, Iterable[str], None] = None,
        deny_domains: Union[str, Iterable[str], None] = None,
    ) -> "SourcePolicy":
        """원시 입력을 정규화해 정책 생성 (목록당 최대 80개)."""
        return cls(
            allow_domains=tuple(normalize_domains(allow_domains)),
            deny_domains=tuple(normalize_domains(deny_domains)),
        )

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "SourcePolicy":
        data = data or {}
        return cls.create(data.get("allowDomains"), data.get("denyDomains"))

    @property
    def is_empty(self) -> bool:
        return not self.allow_domains and not self.deny_domains

    def to_dict(self) -> Dict[str, Any]:
        return {
            "allowDomains": list(self.allow_domains),
            "denyDomains": list(self.deny_domains),
        }
