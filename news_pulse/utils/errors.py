"""파이프라인 예외 계층"""

from typing import Optional


class PulseError(Exception):
    """news_pulse 예외 베이스."""


class ProviderError(PulseError):
    """외부 제공자(피드 검색/시맨틱 검색/본문 보강) 호출 실패."""

    def __init__(self, provider: str, message: str) -> None:
        super().__init__(message)
        self.provider = provider


class TransportError(ProviderError):
    """비 2xx 응답, 타임아웃, 연결 실패."""

    def __init__(
        self,
        provider: str,
        message: str,
        status_code: Optional[int] = None,
        timed_out: bool = False,
    ) -> None:
        super().__init__(provider, message)
        self.status_code = status_code
        self.timed_out = timed_out


class ParseError(ProviderError):
    """제공자 응답(JSON/마크업) 형식 오류."""


class StoreError(PulseError):
    """저장소 접근 불가 또는 쓰기 거부."""
