#!/usr/bin/env python3
"""
ECOD Curation Models

Evidence hits, predicted domains and the derived analysis results.
"""

from .evidence import (
    EvidenceSource, Hit, ChainBlastHit, DomainBlastHit, HHSearchHit, AnyHit,
    hit_from_dict, hits_from_records, parse_significance
)
from .domain import PredictedDomain
from .analysis import (
    QualityTier, ContributionTier, CoverageMetrics, CoverageVerdict,
    ContributionRecord, ConfidenceBreakdown, DomainAttribution,
    EvidenceUsageMetrics, ReconciliationResult, TraceabilityReport
)

__all__ = [
    # Evidence
    'EvidenceSource', 'Hit', 'ChainBlastHit', 'DomainBlastHit', 'HHSearchHit', 'AnyHit',
    'hit_from_dict', 'hits_from_records', 'parse_significance',

    # Domains
    'PredictedDomain',

    # Analysis results
    'QualityTier', 'ContributionTier', 'CoverageMetrics', 'CoverageVerdict',
    'ContributionRecord', 'ConfidenceBreakdown', 'DomainAttribution',
    'EvidenceUsageMetrics', 'ReconciliationResult', 'TraceabilityReport',
]
