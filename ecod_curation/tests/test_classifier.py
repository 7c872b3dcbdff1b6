#!/usr/bin/env python3
"""
Tests for hit quality classification
"""

import pytest

from ecod_curation.analysis import AnalysisOptions, HitQualityClassifier
from ecod_curation.models import Hit, QualityTier
from ecod_curation.utils.range_utils import Span


class TestCoverageTiers:
    """Test tiers assigned from alignment length and coverage"""

    def test_short_alignment_is_fragment(self, classifier, make_hit):
        verdict = classifier.classify(make_hit("chain_blast", 1, 20), 200)

        assert verdict.alignment_length == 20
        assert verdict.quality_tier is QualityTier.FRAGMENT
        assert verdict.is_fragment
        assert not verdict.is_usable_for_boundaries
        assert verdict.issues[0].startswith("Alignment too short")

    def test_excellent_chain_hit(self, classifier, make_hit):
        verdict = classifier.classify(make_hit("chain_blast", 1, 150, evalue=1e-20), 200)

        assert verdict.query_coverage == pytest.approx(0.75)
        assert verdict.quality_tier is QualityTier.EXCELLENT
        assert verdict.is_usable_for_boundaries
        assert verdict.issues == []

    def test_low_coverage_is_fragment(self, classifier, make_hit):
        verdict = classifier.classify(make_hit("domain_blast", 1, 40), 1000)

        assert verdict.quality_tier is QualityTier.FRAGMENT
        assert verdict.issues[0].startswith("Query coverage below 10%")

    def test_poor_coverage(self, classifier, make_hit):
        verdict = classifier.classify(make_hit("domain_blast", 1, 40), 200)

        assert verdict.quality_tier is QualityTier.POOR
        assert not verdict.is_fragment
        assert not verdict.is_usable_for_boundaries

    def test_moderate_coverage_is_good(self, classifier, make_hit):
        verdict = classifier.classify(make_hit("domain_blast", 1, 100), 200)

        assert verdict.quality_tier is QualityTier.GOOD
        assert verdict.is_usable_for_boundaries
        assert any(issue.startswith("Moderate query coverage") for issue in verdict.issues)

    def test_unknown_boundaries_is_fragment(self, classifier, make_hit):
        verdict = classifier.classify(make_hit("chain_blast", None, None), 200)

        assert verdict.quality_tier is QualityTier.FRAGMENT
        assert "Query boundaries unknown" in verdict.issues

    def test_configurable_min_alignment_length(self, make_hit):
        classifier = HitQualityClassifier(AnalysisOptions(min_alignment_length=10))
        verdict = classifier.classify(make_hit("chain_blast", 1, 20), 100)
        assert verdict.quality_tier is not QualityTier.FRAGMENT

    def test_configurable_coverage_threshold(self, make_hit):
        classifier = HitQualityClassifier(AnalysisOptions(coverage_threshold=0.8))
        verdict = classifier.classify(make_hit("chain_blast", 1, 150), 200)
        assert verdict.quality_tier is QualityTier.GOOD


class TestBlastSignificance:
    """Test E-value downgrades for BLAST hits"""

    def test_high_evalue_downgrades_excellent(self, classifier, make_hit):
        verdict = classifier.classify(make_hit("chain_blast", 1, 150, evalue=5e-2), 200)

        assert verdict.quality_tier is QualityTier.GOOD
        assert any(issue.startswith("High E-value") for issue in verdict.issues)

    def test_weak_evalue_is_flag_only(self, classifier, make_hit):
        verdict = classifier.classify(make_hit("domain_blast", 1, 150, evalue=1e-5), 200)

        assert verdict.quality_tier is QualityTier.EXCELLENT
        assert any(issue.startswith("Weak E-value") for issue in verdict.issues)

    def test_high_evalue_does_not_upgrade_poor(self, classifier, make_hit):
        verdict = classifier.classify(make_hit("domain_blast", 1, 40, evalue=1.0), 200)
        assert verdict.quality_tier is QualityTier.POOR

    def test_missing_evalue_is_worst_case(self, classifier, make_hit):
        verdict = classifier.classify(make_hit("chain_blast", 1, 150, evalue=None), 200)

        assert verdict.quality_tier is QualityTier.GOOD
        assert "Missing E-value" in verdict.issues


class TestHHSearchSignificance:
    """Test probability and E-value handling for HHsearch hits"""

    def test_high_probability_keeps_tier(self, classifier, make_hit):
        verdict = classifier.classify(make_hit("hhsearch", 1, 150, probability=95.0, evalue=1e-10), 200)

        assert verdict.quality_tier is QualityTier.EXCELLENT
        assert verdict.issues == []

    def test_low_probability_downgrades_to_poor(self, classifier, make_hit):
        verdict = classifier.classify(make_hit("hhsearch", 1, 150, probability=40.0), 200)

        assert verdict.quality_tier is QualityTier.POOR
        assert not verdict.is_usable_for_boundaries
        assert any(issue.startswith("Low probability") for issue in verdict.issues)

    def test_low_probability_good_to_poor(self, classifier, make_hit):
        verdict = classifier.classify(make_hit("hhsearch", 1, 100, probability=40.0), 200)
        assert verdict.quality_tier is QualityTier.POOR

    def test_moderate_probability_caps_at_good(self, classifier, make_hit):
        verdict = classifier.classify(make_hit("hhsearch", 1, 150, probability=60.0), 200)

        assert verdict.quality_tier is QualityTier.GOOD
        assert any(issue.startswith("Moderate probability") for issue in verdict.issues)

    def test_high_evalue_is_flag_only(self, classifier, make_hit):
        verdict = classifier.classify(make_hit("hhsearch", 1, 150, probability=95.0, evalue=0.5), 200)

        assert verdict.quality_tier is QualityTier.EXCELLENT
        assert any(issue.startswith("High E-value") for issue in verdict.issues)

    def test_missing_probability_is_worst_case(self, classifier, make_hit):
        verdict = classifier.classify(make_hit("hhsearch", 1, 150, probability=None, evalue=None), 200)

        assert verdict.quality_tier is QualityTier.POOR
        assert "Missing HHsearch probability" in verdict.issues
        assert "Missing E-value" in verdict.issues

    def test_fragment_stays_fragment(self, classifier, make_hit):
        verdict = classifier.classify(make_hit("hhsearch", 1, 20, probability=40.0), 200)
        assert verdict.quality_tier is QualityTier.FRAGMENT


class TestTierMonotonicity:
    """Increasing coverage never lowers the tier for fixed significance"""

    @pytest.mark.parametrize("kind,significance", [
        ("chain_blast", {"evalue": 1e-20}),
        ("domain_blast", {"evalue": 1e-2}),
        ("hhsearch", {"probability": 95.0}),
        ("hhsearch", {"probability": 60.0}),
        ("hhsearch", {"probability": 30.0}),
    ])
    def test_monotonic_in_coverage(self, classifier, make_hit, kind, significance):
        ranks = [classifier.classify(make_hit(kind, 1, end, **significance), 300).quality_tier.rank
                 for end in range(1, 301)]
        assert all(a <= b for a, b in zip(ranks, ranks[1:]))


class TestClassifierMisc:
    """Recommendations, ordering and dispatch"""

    def test_classify_all_keeps_order(self, classifier, make_hit):
        hits = [make_hit("chain_blast", 1, 20), make_hit("domain_blast", 1, 150),
                make_hit("hhsearch", 1, 100)]
        verdicts = classifier.classify_all(hits, 200)

        assert [v.hit_index for v in verdicts] == [0, 1, 2]
        assert [v.hit for v in verdicts] == hits

    def test_recommendations(self, classifier, make_hit):
        fragment = classifier.classify(make_hit("chain_blast", 1, 20), 200)
        assert "Consider filtering out - likely a fragment" in fragment.recommendations

        domain_hit = classifier.classify(make_hit("domain_blast", 1, 150), 200)
        assert ("High-quality domain evidence - good for boundary definition"
                in domain_hit.recommendations)

        chain_hit = classifier.classify(make_hit("chain_blast", 1, 190), 200)
        assert ("Extensive chain match - may indicate single-domain protein"
                in chain_hit.recommendations)

    def test_unsupported_hit_type(self, classifier):
        with pytest.raises(TypeError):
            classifier.classify(Hit(query_span=Span(1, 100)), 200)

    def test_verdict_to_dict(self, classifier, make_hit):
        data = classifier.classify(make_hit("chain_blast", 1, 150), 200, hit_index=4).to_dict()

        assert data["hit_index"] == 4
        assert data["quality_tier"] == "excellent"
        assert data["is_usable_for_boundaries"] is True
        assert data["hit"]["type"] == "chain_blast"
