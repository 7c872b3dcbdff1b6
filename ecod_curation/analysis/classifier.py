# ecod_curation/analysis/classifier.py
"""
Hit quality classification.

Each hit gets a quality tier from its alignment length and query coverage,
then the tier may be lowered (never raised) by the significance of the hit:
probability/E-value for HHsearch, E-value for BLAST. Missing significance
values are treated as the worst case: probability 0, E-value +infinity.
"""

import logging
import math
from typing import List, Optional, Sequence

from ecod_curation.analysis.coverage import calculate_coverage
from ecod_curation.analysis.options import AnalysisOptions
from ecod_curation.models.analysis import CoverageMetrics, CoverageVerdict, QualityTier
from ecod_curation.models.evidence import (
    AnyHit, ChainBlastHit, DomainBlastHit, HHSearchHit
)


def _downgrade(tier: QualityTier, ceiling: QualityTier) -> QualityTier:
    """Lower tier to ceiling if it is currently above it"""
    return ceiling if ceiling < tier else tier


class HitQualityClassifier:
    """Assigns quality tiers to alignment hits"""

    def __init__(self, options: Optional[AnalysisOptions] = None):
        self.options = options or AnalysisOptions()
        self.logger = logging.getLogger("ecod_curation.analysis.classifier")

    def classify(self, hit: AnyHit, sequence_length: int, hit_index: int = 0) -> CoverageVerdict:
        """Classify one hit

        Args:
            hit: Evidence hit
            sequence_length: Target sequence length
            hit_index: Position of the hit in the input list

        Returns:
            CoverageVerdict for the hit
        """
        metrics = calculate_coverage(hit.query_span, sequence_length)
        issues: List[str] = []

        tier = self._coverage_tier(hit, metrics, issues)
        tier = self._apply_significance(hit, tier, issues)

        verdict = CoverageVerdict(
            hit=hit,
            hit_index=hit_index,
            quality_tier=tier,
            alignment_length=metrics.alignment_length,
            query_coverage=metrics.query_coverage,
            is_fragment=tier is QualityTier.FRAGMENT,
            issues=issues,
            recommendations=self._recommendations(hit, tier, metrics),
        )

        self.logger.debug(f"{hit.type} hit {hit.reference_id or hit_index} "
                          f"({hit.query_range or 'no range'}): {tier.value}")
        return verdict

    def classify_all(self, hits: Sequence[AnyHit], sequence_length: int) -> List[CoverageVerdict]:
        """Classify hits, returning verdicts in input order"""
        return [self.classify(hit, sequence_length, index) for index, hit in enumerate(hits)]

    def _coverage_tier(self, hit: AnyHit, metrics: CoverageMetrics, issues: List[str]) -> QualityTier:
        opts = self.options
        coverage = metrics.query_coverage

        if not hit.has_boundaries:
            issues.append("Query boundaries unknown")
            return QualityTier.FRAGMENT

        if metrics.alignment_length < opts.min_alignment_length:
            issues.append(f"Alignment too short ({metrics.alignment_length} residues, "
                          f"minimum {opts.min_alignment_length})")
            return QualityTier.FRAGMENT

        if coverage < opts.fragment_coverage:
            issues.append(f"Query coverage below {opts.fragment_coverage:.0%} ({coverage:.1%})")
            return QualityTier.FRAGMENT

        if coverage < opts.poor_coverage:
            issues.append(f"Low query coverage ({coverage:.1%})")
            return QualityTier.POOR

        if coverage < opts.coverage_threshold:
            issues.append(f"Moderate query coverage ({coverage:.1%})")
            return QualityTier.GOOD

        return QualityTier.EXCELLENT

    def _apply_significance(self, hit: AnyHit, tier: QualityTier, issues: List[str]) -> QualityTier:
        if isinstance(hit, HHSearchHit):
            return self._hhsearch_significance(hit, tier, issues)
        elif isinstance(hit, (ChainBlastHit, DomainBlastHit)):
            return self._blast_significance(hit, tier, issues)
        raise TypeError(f"Unsupported hit type: {type(hit).__name__}")

    def _hhsearch_significance(self, hit: HHSearchHit, tier: QualityTier,
                               issues: List[str]) -> QualityTier:
        opts = self.options

        probability = hit.probability
        if probability is None:
            issues.append("Missing HHsearch probability")
            probability = 0.0

        if probability < opts.hhsearch_low_probability:
            if hit.probability is not None:
                issues.append(f"Low probability ({probability:.1f}%)")
            if tier in (QualityTier.EXCELLENT, QualityTier.GOOD):
                tier = QualityTier.POOR
        elif probability < opts.hhsearch_good_probability:
            issues.append(f"Moderate probability ({probability:.1f}%)")
            tier = _downgrade(tier, QualityTier.GOOD)

        if hit.evalue is None:
            issues.append("Missing E-value")
        elif hit.evalue > opts.hhsearch_evalue_cutoff:
            issues.append(f"High E-value ({hit.evalue:.2e})")

        return tier

    def _blast_significance(self, hit: AnyHit, tier: QualityTier,
                            issues: List[str]) -> QualityTier:
        opts = self.options

        evalue = hit.evalue
        if evalue is None:
            issues.append("Missing E-value")
            evalue = math.inf

        if evalue > opts.blast_evalue_cutoff:
            if hit.evalue is not None:
                issues.append(f"High E-value ({evalue:.2e})")
            tier = _downgrade(tier, QualityTier.GOOD)
        elif evalue > opts.blast_strong_evalue:
            issues.append(f"Weak E-value ({evalue:.2e})")

        return tier

    def _recommendations(self, hit: AnyHit, tier: QualityTier,
                         metrics: CoverageMetrics) -> List[str]:
        recommendations = []

        if tier is QualityTier.FRAGMENT:
            recommendations.append("Consider filtering out - likely a fragment")
        elif tier is QualityTier.POOR:
            recommendations.append("Investigate if this should be part of a larger domain")

        if isinstance(hit, DomainBlastHit) and tier is QualityTier.EXCELLENT:
            recommendations.append("High-quality domain evidence - good for boundary definition")
        elif isinstance(hit, ChainBlastHit) and metrics.query_coverage > 0.8:
            recommendations.append("Extensive chain match - may indicate single-domain protein")
        elif isinstance(hit, HHSearchHit) and tier is QualityTier.EXCELLENT:
            recommendations.append("High-confidence HHsearch hit - reliable classification")

        return recommendations
