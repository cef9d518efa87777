"""파이프라인 호출자 - 정책/피드백 로드, 생성, 저장"""

from dataclasses import dataclass, field, replace
from typing import Iterable, List, Optional, Sequence, Tuple, Union

from news_pulse.models.feedback import FeedbackSignal, FeedbackVote
from news_pulse.models.pulse_config import PulseConfig
from news_pulse.models.snapshot import PulseSnapshot
from news_pulse.models.source_policy import SourcePolicy
from news_pulse.pipeline.pulse_engine import PulseEngine, PulseRequest
from news_pulse.storage.snapshot_store import SnapshotStore
from news_pulse.utils.errors import StoreError
from news_pulse.utils.logger import get_logger
from news_pulse.utils.url_utils import normalize_domains

logger = get_logger(__name__)

DomainInput = Union[str, Iterable[str], None]


@dataclass
class RunOutcome:
    """PulseRunner.run() 결과."""
    snapshot: PulseSnapshot
    notes: List[str]
    latency_ms: int
    source_policy: SourcePolicy
    feedback_signals: int
    persisted: bool = False


@dataclass
class _Resolved:
    policy: SourcePolicy
    feedback: FeedbackSignal
    notes: List[str] = field(default_factory=list)


class PulseRunner:
    """
    저장소와 엔진을 묶는 실행기.

    저장소 오류(StoreError)는 모두 노트로 바뀌며, 이미 만든 스냅샷은 버리지 않는다.
    - 정책 로드 실패 → 설정 기본 정책
    - 피드백 로드 실패 → 빈 신호
    - 저장 실패 → "Persist skipped: <사유>"

    사용법:
        runner = PulseRunner(PulseEngine(config), JsonFileStore("./data"))
        outcome = runner.run("default", ["AI", "Business"])
    """

    def __init__(self, engine: PulseEngine, store: Optional[SnapshotStore] = None) -> None:
        self._engine = engine
        self._store = store

    @property
    def config(self) -> PulseConfig:
        return self._engine.config

    def run(
        self,
        owner_key: str = "default",
        interests: Union[str, Sequence[str], None] = None,
        semantic_search_api_key: Optional[str] = None,
        enrichment_api_key: Optional[str] = None,
        allow_domains: DomainInput = None,
        deny_domains: DomainInput = None,
        persist: bool = True,
    ) -> RunOutcome:
        """
        스냅샷 1회 생성 (+ 저장).

        Args:
            owner_key: 요청자 키.
            interests: 관심 토픽 (None이면 설정 기본값).
            allow_domains / deny_domains: 목록별 요청 오버라이드 (None이면 저장/기본 정책).
            persist: False면 저장 생략.
        """
        resolved = self._resolve(owner_key, allow_domains, deny_domains)

        result = self._engine.generate_sync(PulseRequest(
            interests=interests,
            semantic_search_api_key=semantic_search_api_key,
            enrichment_api_key=enrichment_api_key,
            source_policy=resolved.policy,
            feedback_signal=resolved.feedback,
        ))

        snapshot = result.snapshot
        if resolved.notes:
            # 저장 이력에도 정책/피드백 누락 사유가 남도록 스냅샷 노트에 포함
            snapshot = replace(snapshot, notes=[*snapshot.notes, *resolved.notes])

        notes = list(snapshot.notes)
        persisted = False
        if persist:
            persisted, reason = self._persist(snapshot, owner_key)
            if not persisted:
                notes.append(f"Persist skipped: {reason}")

        return RunOutcome(
            snapshot=snapshot,
            notes=notes,
            latency_ms=result.latency_ms,
            source_policy=resolved.policy,
            feedback_signals=resolved.feedback.total_signals,
            persisted=persisted,
        )

    def history(self, owner_key: str = "default", days: int = 7) -> List[PulseSnapshot]:
        """저장된 스냅샷 이력 (저장소 없음/오류 시 빈 목록)."""
        if self._store is None:
            return []
        try:
            return self._store.load_history(owner_key, days)
        except StoreError as e:
            logger.warning("이력 로드 실패: %s - %s", owner_key, e)
            return []

    def resolve_source_policy(
        self, owner_key: str, allow_domains: DomainInput = None, deny_domains: DomainInput = None
    ) -> SourcePolicy:
        """요청 오버라이드 > 저장된 정책 > 설정 기본 정책 (목록별)."""
        return self._resolve_policy(owner_key, allow_domains, deny_domains, [])

    def save_source_policy(
        self, owner_key: str, allow_domains: DomainInput, deny_domains: DomainInput
    ) -> SourcePolicy:
        """정책 저장. 저장소 오류는 호출자에게 전달."""
        if self._store is None:
            raise StoreError("No snapshot store configured")
        return self._store.save_source_policy(
            owner_key, SourcePolicy.create(allow_domains, deny_domains)
        )

    def record_feedback(self, vote: FeedbackVote) -> None:
        """관련성 투표 기록. 저장소 오류는 호출자에게 전달."""
        if self._store is None:
            raise StoreError("No snapshot store configured")
        self._store.record_feedback(vote)

    # ═══════════════════════════════════════════════════
    # 내부
    # ═══════════════════════════════════════════════════

    def _resolve(self, owner_key: str, allow_domains: DomainInput, deny_domains: DomainInput) -> _Resolved:
        notes: List[str] = []
        policy = self._resolve_policy(owner_key, allow_domains, deny_domains, notes)

        feedback = FeedbackSignal.empty()
        if self._store is not None:
            try:
                feedback = self._store.load_feedback_signal(owner_key, self.config.feedback_days)
            except StoreError as e:
                logger.warning("피드백 로드 실패: %s - %s", owner_key, e)
                notes.append(f"Feedback unavailable: {e}")

        return _Resolved(policy=policy, feedback=feedback, notes=notes)

    def _resolve_policy(
        self, owner_key: str, allow_domains: DomainInput, deny_domains: DomainInput, notes: List[str]
    ) -> SourcePolicy:
        base = self.config.default_source_policy
        if self._store is not None:
            try:
                stored = self._store.load_source_policy(owner_key)
            except StoreError as e:
                logger.warning("정책 로드 실패: %s - %s", owner_key, e)
                notes.append(f"Source policy unavailable: {e}")
                stored = None
            if stored is not None:
                base = stored

        return SourcePolicy(
            allow_domains=(
                tuple(normalize_domains(allow_domains)) if allow_domains is not None else base.allow_domains
            ),
            deny_domains=(
                tuple(normalize_domains(deny_domains)) if deny_domains is not None else base.deny_domains
            ),
        )

    def _persist(self, snapshot: PulseSnapshot, owner_key: str) -> Tuple[bool, Optional[str]]:
        if self._store is None:
            return False, "no snapshot store configured"
        try:
            self._store.upsert(snapshot, owner_key)
        except StoreError as e:
            logger.error("스냅샷 저장 실패: %s - %s", snapshot.id, e)
            return False, str(e)
        return True, None
