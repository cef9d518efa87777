"""신뢰 등급 분류 테스트"""

import pytest

from news_pulse.models.article import TrustTier
from news_pulse.registry.trust_classifier import classify_source


class TestClassifySource:

    @pytest.mark.parametrize("source", [
        "Reuters", "Associated Press", "AP News", "BBC News", "Financial Times",
        "Bloomberg.com", "Nikkei Asia", "The Economist",
    ])
    def test_tier_a(self, source):
        assert classify_source(source) == TrustTier.A

    @pytest.mark.parametrize("source", [
        "Thai PBS World", "Bangkok Post", "The Nation Thailand", "nationthailand",
        "Prachatai English", "Thairath", "Matichon", "THE STANDARD",
    ])
    def test_tier_b(self, source):
        assert classify_source(source) == TrustTier.B

    @pytest.mark.parametrize("source", ["Tech Blog", "Pantip Forum", "Opinion Daily"])
    def test_tier_c(self, source):
        assert classify_source(source) == TrustTier.C

    def test_unknown(self):
        assert classify_source("Some Local Site") == TrustTier.UNKNOWN
        assert classify_source("") == TrustTier.UNKNOWN

    def test_first_match_wins(self):
        """A 패턴이 C 패턴보다 먼저 검사됨."""
        assert classify_source("Reuters Blog") == TrustTier.A
