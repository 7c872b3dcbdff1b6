# ecod_curation/models/analysis.py
"""
Result models for evidence coverage and traceability analysis.

All of these are derived per analysis pass and are never persisted by the
analyzer; the curation workflow decides what, if anything, to store.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Any, List, Optional, FrozenSet

import pandas as pd

from ecod_curation.models.evidence import AnyHit
from ecod_curation.models.domain import PredictedDomain


class QualityTier(Enum):
    """Hit quality tiers, ordered worst to best"""
    FRAGMENT = "fragment"
    POOR = "poor"
    GOOD = "good"
    EXCELLENT = "excellent"

    @property
    def rank(self) -> int:
        return _TIER_RANK[self]

    def __lt__(self, other: 'QualityTier') -> bool:
        if not isinstance(other, QualityTier):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other: 'QualityTier') -> bool:
        if not isinstance(other, QualityTier):
            return NotImplemented
        return self.rank <= other.rank


_TIER_RANK = {
    QualityTier.FRAGMENT: 0,
    QualityTier.POOR: 1,
    QualityTier.GOOD: 2,
    QualityTier.EXCELLENT: 3,
}


class ContributionTier(Enum):
    """How a hit relates to one predicted domain"""
    PRIMARY = "primary"
    SUPPORTING = "supporting"
    BOUNDARY_ADJUSTMENT = "boundary_adjustment"
    CONFLICTING = "conflicting"
    UNUSED = "unused"


@dataclass(frozen=True)
class CoverageMetrics:
    """Alignment length and query coverage of one hit"""
    query_coverage: float = 0.0
    alignment_length: int = 0


@dataclass
class CoverageVerdict:
    """Quality classification of a single hit"""
    hit: AnyHit
    hit_index: int
    quality_tier: QualityTier
    alignment_length: int = 0
    query_coverage: float = 0.0
    is_fragment: bool = False
    issues: List[str] = field(default_factory=list)
    recommendations: List[str] = field(default_factory=list)

    @property
    def is_usable_for_boundaries(self) -> bool:
        return not self.is_fragment and self.quality_tier not in (QualityTier.FRAGMENT, QualityTier.POOR)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'hit_index': self.hit_index,
            'hit': self.hit.to_dict(),
            'quality_tier': self.quality_tier.value,
            'alignment_length': self.alignment_length,
            'query_coverage': self.query_coverage,
            'is_fragment': self.is_fragment,
            'is_usable_for_boundaries': self.is_usable_for_boundaries,
            'issues': list(self.issues),
            'recommendations': list(self.recommendations),
        }


@dataclass
class ContributionRecord:
    """Contribution of one hit to one predicted domain"""
    hit: AnyHit
    hit_index: int
    contribution_tier: ContributionTier
    overlap_ratio: float = 0.0
    confidence_contribution: float = 0.0  # display ranking only, not a probability
    start_influence: float = 0.0
    end_influence: float = 0.0
    notes: List[str] = field(default_factory=list)

    @property
    def is_used(self) -> bool:
        return self.contribution_tier is not ContributionTier.UNUSED

    def to_dict(self) -> Dict[str, Any]:
        return {
            'hit_index': self.hit_index,
            'reference_id': self.hit.reference_id,
            'type': self.hit.type,
            'query_range': self.hit.query_range,
            'contribution_tier': self.contribution_tier.value,
            'overlap_ratio': self.overlap_ratio,
            'confidence_contribution': self.confidence_contribution,
            'boundary_influence': {
                'start_influence': self.start_influence,
                'end_influence': self.end_influence,
            },
            'notes': list(self.notes),
        }


@dataclass
class ConfidenceBreakdown:
    """Summary of how strongly evidence supports a domain"""
    evidence_count: int = 0
    avg_significance: float = 0.0
    boundary_confidence: float = 0.0
    classification_confidence: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            'evidence_count': self.evidence_count,
            'avg_significance': self.avg_significance,
            'boundary_confidence': self.boundary_confidence,
            'classification_confidence': self.classification_confidence,
        }


@dataclass
class DomainAttribution:
    """Evidence attribution for one predicted domain"""
    domain: PredictedDomain
    contributions: List[ContributionRecord] = field(default_factory=list)
    rationale: List[str] = field(default_factory=list)
    issues: List[str] = field(default_factory=list)
    confidence_breakdown: ConfidenceBreakdown = field(default_factory=ConfidenceBreakdown)

    @property
    def evidence_used(self) -> List[ContributionRecord]:
        """Non-unused contributions, best first; ties keep input order"""
        used = [c for c in self.contributions if c.is_used]
        return sorted(used, key=lambda c: (-c.confidence_contribution, c.hit_index))

    def count(self, tier: ContributionTier) -> int:
        return sum(1 for c in self.contributions if c.contribution_tier is tier)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'domain': self.domain.to_dict(),
            'tier_counts': {tier.value: self.count(tier) for tier in ContributionTier},
            'evidence_used': [c.to_dict() for c in self.evidence_used],
            'rationale': list(self.rationale),
            'issues': list(self.issues),
            'confidence_breakdown': self.confidence_breakdown.to_dict(),
        }


@dataclass
class EvidenceUsageMetrics:
    """Global evidence usage counts for one target"""
    total_hits: int = 0
    usable_hits: int = 0
    used_hits: int = 0  # usable hits incorporated into at least one domain
    unused_usable_hits: int = 0
    fragments: int = 0
    poor_quality: int = 0
    contributing_hits: int = 0  # any hit incorporated, usable or not

    @property
    def incorporation_rate(self) -> float:
        return self.used_hits / self.usable_hits if self.usable_hits else 0.0

    @property
    def validation_pass_rate(self) -> float:
        return self.usable_hits / self.total_hits if self.total_hits else 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            'total_hits': self.total_hits,
            'usable_hits': self.usable_hits,
            'used_hits': self.used_hits,
            'unused_usable_hits': self.unused_usable_hits,
            'fragments': self.fragments,
            'poor_quality': self.poor_quality,
            'contributing_hits': self.contributing_hits,
            'incorporation_rate': self.incorporation_rate,
            'validation_pass_rate': self.validation_pass_rate,
        }


@dataclass
class ReconciliationResult:
    """Cross-reference of hit usability against pipeline usage"""
    metrics: EvidenceUsageMetrics
    used_hit_indices: FrozenSet[int] = frozenset()
    missed_evidence: List[CoverageVerdict] = field(default_factory=list)
    missed_evidence_range: str = ""  # residues covered by missed evidence but by no domain
    # evidence_used per domain, in attribution order
    domain_evidence: List[List[ContributionRecord]] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'metrics': self.metrics.to_dict(),
            'used_hit_indices': sorted(self.used_hit_indices),
            'missed_evidence': [v.to_dict() for v in self.missed_evidence],
            'missed_evidence_range': self.missed_evidence_range,
            'domain_evidence': [
                [c.to_dict() for c in records] for records in self.domain_evidence
            ],
        }


@dataclass
class TraceabilityReport:
    """Complete output of one analysis pass"""
    sequence_length: int
    verdicts: List[CoverageVerdict]
    attributions: List[DomainAttribution]
    reconciliation: ReconciliationResult
    options: Optional[Dict[str, Any]] = None
    protein_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """JSON-ready representation"""
        return {
            'protein_id': self.protein_id,
            'sequence_length': self.sequence_length,
            'options': self.options,
            'verdicts': [v.to_dict() for v in self.verdicts],
            'domains': [a.to_dict() for a in self.attributions],
            'reconciliation': self.reconciliation.to_dict(),
        }

    def verdicts_frame(self) -> pd.DataFrame:
        """One row per hit with its quality verdict and usage"""
        used = self.reconciliation.used_hit_indices
        rows = []
        for verdict in self.verdicts:
            hit = verdict.hit
            rows.append({
                'hit_index': verdict.hit_index,
                'type': hit.type,
                'reference_id': hit.reference_id,
                'query_range': hit.query_range,
                'evalue': getattr(hit, 'evalue', None),
                'probability': getattr(hit, 'probability', None),
                'alignment_length': verdict.alignment_length,
                'query_coverage': verdict.query_coverage,
                'quality_tier': verdict.quality_tier.value,
                'usable': verdict.is_usable_for_boundaries,
                'used_by_pipeline': verdict.hit_index in used,
                'issues': "; ".join(verdict.issues),
            })
        return pd.DataFrame(rows, columns=_VERDICT_COLUMNS)

    def contributions_frame(self) -> pd.DataFrame:
        """One row per (domain, hit) contribution, unused ones included"""
        rows = []
        for attribution in self.attributions:
            for record in attribution.contributions:
                rows.append({
                    'domain_number': attribution.domain.ordinal,
                    'domain_range': attribution.domain.range,
                    'hit_index': record.hit_index,
                    'type': record.hit.type,
                    'reference_id': record.hit.reference_id,
                    'contribution_tier': record.contribution_tier.value,
                    'overlap_ratio': record.overlap_ratio,
                    'confidence_contribution': record.confidence_contribution,
                    'notes': "; ".join(record.notes),
                })
        return pd.DataFrame(rows, columns=_CONTRIBUTION_COLUMNS)


_VERDICT_COLUMNS = [
    'hit_index', 'type', 'reference_id', 'query_range', 'evalue', 'probability',
    'alignment_length', 'query_coverage', 'quality_tier', 'usable',
    'used_by_pipeline', 'issues',
]

_CONTRIBUTION_COLUMNS = [
    'domain_number', 'domain_range', 'hit_index', 'type', 'reference_id',
    'contribution_tier', 'overlap_ratio', 'confidence_contribution', 'notes',
]
