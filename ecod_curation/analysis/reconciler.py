# ecod_curation/analysis/reconciler.py
"""
Evidence usage reconciliation.

Compares what the classifier considers usable for boundary definition with
what the predicted domains actually incorporated. A hit is used by the
pipeline when it has a non-unused contribution to at least one domain.
"""

import logging
from typing import List, Sequence, Set

from ecod_curation.models.analysis import (
    CoverageVerdict, DomainAttribution, EvidenceUsageMetrics,
    QualityTier, ReconciliationResult
)
from ecod_curation.models.evidence import AnyHit
from ecod_curation.utils.range_utils import spans_to_range, subtract_spans


class UsageReconciler:
    """Cross-references hit usability against domain contributions"""

    def __init__(self):
        self.logger = logging.getLogger("ecod_curation.analysis.reconciler")

    def reconcile(self, hits: Sequence[AnyHit], verdicts: Sequence[CoverageVerdict],
                  attributions: Sequence[DomainAttribution]) -> ReconciliationResult:
        """Compute usage metrics for one target

        Args:
            hits: All hits, in input order
            verdicts: One verdict per hit
            attributions: One attribution per predicted domain

        Returns:
            ReconciliationResult
        """
        if len(verdicts) != len(hits):
            self.logger.warning(f"Verdict count ({len(verdicts)}) does not match "
                                f"hit count ({len(hits)})")

        used_indices: Set[int] = set()
        for attribution in attributions:
            used_indices.update(c.hit_index for c in attribution.contributions if c.is_used)

        usable = [v for v in verdicts if v.is_usable_for_boundaries]
        missed = [v for v in usable if v.hit_index not in used_indices]

        metrics = EvidenceUsageMetrics(
            total_hits=len(verdicts),
            usable_hits=len(usable),
            used_hits=len(usable) - len(missed),
            unused_usable_hits=len(missed),
            fragments=sum(1 for v in verdicts if v.quality_tier is QualityTier.FRAGMENT),
            poor_quality=sum(1 for v in verdicts if v.quality_tier is QualityTier.POOR),
            contributing_hits=sum(1 for v in verdicts if v.hit_index in used_indices),
        )

        result = ReconciliationResult(
            metrics=metrics,
            used_hit_indices=frozenset(used_indices),
            missed_evidence=missed,
            missed_evidence_range=self._missed_range(missed, attributions),
            domain_evidence=[a.evidence_used for a in attributions],
        )

        self.logger.debug(f"Reconciled {metrics.total_hits} hits: {metrics.usable_hits} usable, "
                          f"{metrics.used_hits} used, {metrics.unused_usable_hits} missed")
        return result

    def _missed_range(self, missed: List[CoverageVerdict],
                      attributions: Sequence[DomainAttribution]) -> str:
        """Residues covered by missed evidence but by no valid domain"""
        missed_spans = [v.hit.query_span for v in missed if v.hit.query_span is not None]
        domain_spans = [a.domain.span for a in attributions if a.domain.has_valid_span]
        return spans_to_range(subtract_spans(missed_spans, domain_spans))
