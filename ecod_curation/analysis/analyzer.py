# ecod_curation/analysis/analyzer.py
"""
Evidence Coverage & Traceability Analyzer

Runs one complete, stateless analysis pass for a target chain:

    1. classify every hit (quality tier, usability)
    2. attribute hits to every predicted domain
    3. reconcile usable evidence against what the domains incorporated

Each call works on its own snapshot of hits and domains, so one analyzer can
be reused for any number of targets and threshold settings.
"""

import logging
from typing import Optional, Sequence

from ecod_curation.analysis.attributor import DomainEvidenceAttributor
from ecod_curation.analysis.classifier import HitQualityClassifier
from ecod_curation.analysis.options import AnalysisOptions
from ecod_curation.analysis.reconciler import UsageReconciler
from ecod_curation.models.analysis import TraceabilityReport
from ecod_curation.models.domain import PredictedDomain
from ecod_curation.models.evidence import AnyHit


class EvidenceTraceabilityAnalyzer:
    """Evidence coverage and traceability analysis for one target at a time"""

    def __init__(self, options: Optional[AnalysisOptions] = None):
        self.options = options or AnalysisOptions()
        self.options.validate()
        self.logger = logging.getLogger("ecod_curation.analysis.analyzer")

        self.classifier = HitQualityClassifier(self.options)
        self.attributor = DomainEvidenceAttributor(self.options)
        self.reconciler = UsageReconciler()

    def analyze(self, hits: Sequence[AnyHit], domains: Sequence[PredictedDomain],
                sequence_length: int, protein_id: Optional[str] = None) -> TraceabilityReport:
        """Analyze evidence for one target

        Args:
            hits: Evidence hits, in input order
            domains: Predicted domains for the target
            sequence_length: Target sequence length
            protein_id: Optional identifier carried into the report

        Returns:
            TraceabilityReport
        """
        hits = list(hits)
        domains = list(domains)

        verdicts = self.classifier.classify_all(hits, sequence_length)
        attributions = self.attributor.attribute_all(domains, hits, verdicts)
        reconciliation = self.reconciler.reconcile(hits, verdicts, attributions)

        metrics = reconciliation.metrics
        self.logger.info(f"{protein_id or 'target'}: {metrics.total_hits} hits "
                         f"({metrics.usable_hits} usable, {metrics.used_hits} used, "
                         f"{metrics.unused_usable_hits} missed) across {len(domains)} domain(s)")

        return TraceabilityReport(
            sequence_length=sequence_length,
            verdicts=verdicts,
            attributions=attributions,
            reconciliation=reconciliation,
            options=self.options.to_dict(),
            protein_id=protein_id,
        )
