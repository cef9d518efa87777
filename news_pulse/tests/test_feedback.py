"""피드백 투표 / 편향 테이블 테스트"""

from types import MappingProxyType

import pytest

from news_pulse.models.feedback import FeedbackSignal, FeedbackVote, build_feedback_signal


def _make_vote(article_id="ai-1", relevant=True, **kwargs) -> FeedbackVote:
    defaults = {
        "domain": "reuters.com",
        "category": "AI",
        "keywords": ["glm-5", "model"],
        "created_at": "2026-02-04T07:00:00.000Z",
    }
    defaults.update(kwargs)
    return FeedbackVote(article_id=article_id, relevant=relevant, **defaults)


class TestFeedbackSignal:

    def test_empty(self):
        signal = FeedbackSignal.empty()
        assert not signal.has_signal
        assert signal.for_domain("reuters.com") == 0.0
        assert signal.for_keyword("glm-5") is None

    def test_immutable_tables(self):
        signal = FeedbackSignal(domain_bias={"Reuters.com": 0.5}, total_signals=1)
        assert isinstance(signal.domain_bias, MappingProxyType)
        with pytest.raises(TypeError):
            signal.domain_bias["x"] = 1.0

    def test_keys_lowercased_and_clamped(self):
        signal = FeedbackSignal(category_bias={" AI ": 3.0}, keyword_bias={"GLM-5": -7}, total_signals=2)
        assert signal.for_category("ai") == 1.0
        assert signal.for_keyword("glm-5") == -1.0

    def test_domain_lookup_normalized(self):
        signal = FeedbackSignal(domain_bias={"reuters.com": 0.25}, total_signals=1)
        assert signal.for_domain("https://www.Reuters.com/world") == 0.25


class TestBuildFeedbackSignal:

    def test_no_votes(self):
        signal = build_feedback_signal([])
        assert signal.total_signals == 0
        assert not signal.has_signal

    def test_bias_formula(self):
        votes = [
            _make_vote("a", True),
            _make_vote("b", True),
            _make_vote("c", False),
        ]
        signal = build_feedback_signal(votes)
        # (2 - 1) / (3 + 2)
        assert signal.for_domain("reuters.com") == pytest.approx(0.2)
        assert signal.for_category("AI") == pytest.approx(0.2)
        assert signal.for_keyword("glm-5") == pytest.approx(0.2)
        assert signal.total_signals == 3

    def test_single_vote_shrunk(self):
        signal = build_feedback_signal([_make_vote(relevant=False)])
        assert signal.for_domain("reuters.com") == pytest.approx(-1 / 3, abs=1e-3)

    def test_separate_keys(self):
        votes = [
            _make_vote("a", True, domain="www.bangkokpost.com", category="Business", keywords=["baht"]),
            _make_vote("b", False, domain="spam.com", category="AI", keywords=["BAHT", "baht"]),
        ]
        signal = build_feedback_signal(votes)
        assert signal.for_domain("bangkokpost.com") == pytest.approx(1 / 3, abs=1e-3)
        assert signal.for_domain("spam.com") == pytest.approx(-1 / 3, abs=1e-3)
        assert signal.for_keyword("baht") == 0.0

    def test_blank_fields_ignored(self):
        signal = build_feedback_signal([_make_vote(domain="", category=" ", keywords=["", " "])])
        assert signal.domain_bias == {}
        assert signal.category_bias == {}
        assert signal.keyword_bias == {}
        assert signal.total_signals == 1


class TestFeedbackVote:

    def test_round_trip(self):
        vote = _make_vote(source="Reuters", article_url="https://reuters.com/a", confidence_score=88.7)
        assert FeedbackVote.from_dict(vote.to_dict()) == vote

    def test_created_datetime(self):
        assert _make_vote().created_datetime().isoformat() == "2026-02-04T07:00:00+00:00"
        assert _make_vote(created_at=None).created_datetime() is None
