# ecod_curation/analysis/attributor.py
"""
Domain evidence attribution.

For each predicted domain, every hit with known boundaries is compared with
the domain span and given a contribution tier from its overlap ratio
(fraction of the domain covered by the hit). Hits that do not overlap but sit
within a few residues of the domain are reported as conflicting, since they
suggest a disputed boundary.
"""

import logging
import math
from typing import List, Optional, Sequence, Dict

from ecod_curation.analysis.options import AnalysisOptions
from ecod_curation.models.analysis import (
    ConfidenceBreakdown, ContributionRecord, ContributionTier,
    CoverageVerdict, DomainAttribution
)
from ecod_curation.models.domain import PredictedDomain
from ecod_curation.models.evidence import AnyHit, HHSearchHit

# Smallest E-value used for -log10 scoring
MIN_EVALUE = 1e-300


def significance_score(hit: AnyHit) -> float:
    """Display score for hit significance: -log10(E), else probability/100"""
    if hit.evalue is not None:
        return -math.log10(max(hit.evalue, MIN_EVALUE))
    if isinstance(hit, HHSearchHit) and hit.probability is not None:
        return hit.probability / 100.0
    return 0.5


class DomainEvidenceAttributor:
    """Traces which hits contributed to each predicted domain"""

    def __init__(self, options: Optional[AnalysisOptions] = None):
        self.options = options or AnalysisOptions()
        self.logger = logging.getLogger("ecod_curation.analysis.attributor")

    def attribute(self, domain: PredictedDomain, hits: Sequence[AnyHit],
                  verdicts: Optional[Sequence[CoverageVerdict]] = None) -> DomainAttribution:
        """Attribute hits to one domain

        Args:
            domain: Predicted domain
            hits: All hits for the target, in input order
            verdicts: Optional quality verdicts (indexed like hits), used to
                      report usable hits the domain did not incorporate

        Returns:
            DomainAttribution with contributions in input order
        """
        attribution = DomainAttribution(
            domain=domain,
            confidence_breakdown=ConfidenceBreakdown(
                classification_confidence=domain.confidence or 0.0
            )
        )

        if not domain.has_valid_span:
            if domain.span is None:
                attribution.issues.append("Domain boundaries unknown - evidence not attributed")
            else:
                attribution.issues.append(f"Invalid domain boundaries ({domain.span.start}-"
                                          f"{domain.span.end}) - evidence not attributed")
            attribution.rationale = self._rationale(domain, 0, 0)
            self.logger.warning(f"Domain {domain.ordinal} has no valid span: {domain.range!r}")
            return attribution

        excluded = 0
        for index, hit in enumerate(hits):
            if not hit.has_boundaries:
                excluded += 1
                continue
            attribution.contributions.append(self._contribution(domain, hit, index))

        primary = attribution.count(ContributionTier.PRIMARY)
        supporting = attribution.count(ContributionTier.SUPPORTING)

        attribution.rationale = self._rationale(domain, primary, supporting)
        attribution.issues = self._issues(domain, attribution.contributions, excluded, verdicts)
        attribution.confidence_breakdown = self._breakdown(domain, attribution.contributions)

        self.logger.debug(f"Domain {domain.ordinal} ({domain.range}): {primary} primary, "
                          f"{supporting} supporting, {len(attribution.issues)} issue(s)")
        return attribution

    def attribute_all(self, domains: Sequence[PredictedDomain], hits: Sequence[AnyHit],
                      verdicts: Optional[Sequence[CoverageVerdict]] = None) -> List[DomainAttribution]:
        """Attribute hits to every domain, in domain order"""
        return [self.attribute(domain, hits, verdicts) for domain in domains]

    def _contribution(self, domain: PredictedDomain, hit: AnyHit, index: int) -> ContributionRecord:
        opts = self.options
        domain_span = domain.span
        hit_span = hit.query_span

        overlap = hit_span.overlap_length(domain_span)
        overlap_ratio = overlap / domain_span.length
        notes = []
        score = 0.0

        start_distance = abs(hit_span.start - domain_span.start)
        end_distance = abs(hit_span.end - domain_span.end)

        if overlap > 0:
            if overlap_ratio > opts.primary_overlap:
                tier, score = ContributionTier.PRIMARY, 0.8
                notes.append("Primary evidence - high overlap with domain")
            elif overlap_ratio > opts.supporting_overlap:
                tier, score = ContributionTier.SUPPORTING, 0.5
                notes.append("Supporting evidence - moderate overlap")
            elif overlap_ratio > opts.boundary_overlap:
                tier, score = ContributionTier.BOUNDARY_ADJUSTMENT, 0.2
                notes.append("May have influenced boundary placement")
            else:
                tier = ContributionTier.UNUSED
                notes.append("Minimal overlap - not used for this domain")

            if start_distance <= opts.boundary_window:
                notes.append(f"Likely influenced start boundary (±{start_distance} residues)")
            if end_distance <= opts.boundary_window:
                notes.append(f"Likely influenced end boundary (±{end_distance} residues)")
        else:
            gap = hit_span.gap_to(domain_span)
            if gap <= opts.near_window:
                tier = ContributionTier.CONFLICTING
                notes.append(f"Close to domain but not overlapping ({gap} residues away) "
                             f"- potential boundary conflict")
            else:
                tier = ContributionTier.UNUSED
                notes.append("No overlap - not used for this domain")

        if domain.source is not None and hit.source_kind is domain.source:
            score += opts.source_match_bonus
            notes.append(f"Classification source match ({hit.type})")

        return ContributionRecord(
            hit=hit,
            hit_index=index,
            contribution_tier=tier,
            overlap_ratio=overlap_ratio,
            confidence_contribution=min(1.0, score),
            start_influence=self._influence(start_distance),
            end_influence=self._influence(end_distance),
            notes=notes,
        )

    def _influence(self, distance: int) -> float:
        window = self.options.near_window
        if window <= 0:
            return 1.0 if distance == 0 else 0.0
        return max(0.0, 1.0 - distance / window)

    def _rationale(self, domain: PredictedDomain, primary: int, supporting: int) -> List[str]:
        rationale = []
        if primary > 0:
            rationale.append(f"Domain boundaries primarily based on {primary} "
                             f"high-overlap evidence hit(s)")
        if supporting > 0:
            rationale.append(f"Supported by {supporting} additional evidence hit(s)")

        source = domain.source.value if domain.source else "unknown"
        rationale.append(f"Classification ({domain.classification_label}) derived from {source} evidence")

        if domain.confidence is not None:
            rationale.append(f"Final confidence: {domain.confidence * 100:.0f}%")
        else:
            rationale.append("Final confidence: not reported")
        return rationale

    def _issues(self, domain: PredictedDomain, contributions: List[ContributionRecord],
                excluded: int, verdicts: Optional[Sequence[CoverageVerdict]]) -> List[str]:
        issues = []

        if excluded:
            issues.append(f"{excluded} evidence hit(s) with unknown boundaries excluded from attribution")

        conflicting = sum(1 for c in contributions if c.contribution_tier is ContributionTier.CONFLICTING)
        if conflicting:
            issues.append(f"{conflicting} evidence hit(s) near domain but not used "
                          f"- potential boundary issues")

        if verdicts is not None:
            usable: Dict[int, bool] = {v.hit_index: v.is_usable_for_boundaries for v in verdicts}
            unused_usable = sum(1 for c in contributions
                                if not c.is_used and usable.get(c.hit_index, False))
            if unused_usable:
                issues.append(f"{unused_usable} high-quality evidence hit(s) not incorporated")

        if not any(c.contribution_tier is ContributionTier.PRIMARY for c in contributions):
            issues.append("No primary evidence - domain based on weak/supporting evidence only")

        if domain.length < self.options.min_domain_length:
            issues.append("Very short domain - may be a fragment")

        return issues

    def _breakdown(self, domain: PredictedDomain,
                   contributions: List[ContributionRecord]) -> ConfidenceBreakdown:
        evidence_count = 0
        total_significance = 0.0

        for record in contributions:
            if record.contribution_tier is ContributionTier.PRIMARY:
                evidence_count += 1
                total_significance += significance_score(record.hit)
            elif record.contribution_tier is ContributionTier.SUPPORTING:
                evidence_count += 1
                total_significance += significance_score(record.hit) * 0.5

        return ConfidenceBreakdown(
            evidence_count=evidence_count,
            avg_significance=total_significance / evidence_count if evidence_count else 0.0,
            boundary_confidence=min(1.0, evidence_count / 2),
            classification_confidence=domain.confidence or 0.0,
        )
