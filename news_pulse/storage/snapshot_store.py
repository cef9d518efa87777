"""스냅샷/정책/피드백 저장소 인터페이스"""

from abc import ABC, abstractmethod
from typing import List, Optional

from news_pulse.models.feedback import FeedbackSignal, FeedbackVote
from news_pulse.models.snapshot import PulseSnapshot
from news_pulse.models.source_policy import SourcePolicy

MIN_HISTORY_DAYS = 1
MAX_HISTORY_DAYS = 30
DEFAULT_HISTORY_DAYS = 7


def clamp_history_days(days: Optional[int]) -> int:
    """조회 일수 1~30 (잘못된 값이면 7)."""
    try:
        value = int(days) if days is not None else DEFAULT_HISTORY_DAYS
    except (TypeError, ValueError):
        value = DEFAULT_HISTORY_DAYS
    return max(MIN_HISTORY_DAYS, min(MAX_HISTORY_DAYS, value))


class SnapshotStore(ABC):
    """
    파이프라인 바깥의 영속 저장소.

    모든 메서드는 접근 불가/쓰기 거부 시 StoreError를 던진다.
    호출자(PulseRunner)가 이를 노트로 바꾼다.
    """

    @abstractmethod
    def upsert(self, snapshot: PulseSnapshot, owner_key: str) -> None:
        """(owner_key, date_key) 단위로 저장 (같은 날짜는 덮어씀)."""
        ...

    @abstractmethod
    def load_history(self, owner_key: str, days: int = DEFAULT_HISTORY_DAYS) -> List[PulseSnapshot]:
        """최근 스냅샷 최대 days개 (generated_at 내림차순)."""
        ...

    @abstractmethod
    def load_source_policy(self, owner_key: str) -> Optional[SourcePolicy]:
        ...

    @abstractmethod
    def save_source_policy(self, owner_key: str, policy: SourcePolicy) -> SourcePolicy:
        ...

    @abstractmethod
    def record_feedback(self, vote: FeedbackVote) -> None:
        """(owner_key, article_id)당 1건 (나중 투표가 이전 투표를 대체)."""
        ...

    @abstractmethod
    def load_feedback_signal(self, owner_key: str, days: int = 45) -> FeedbackSignal:
        """최근 days일 투표로 편향 테이블 생성."""
        ...
