#!/usr/bin/env python3
"""
Evidence coverage and traceability analysis
"""
from .options import AnalysisOptions
from .coverage import calculate_coverage
from .classifier import HitQualityClassifier
from .attributor import DomainEvidenceAttributor, significance_score
from .reconciler import UsageReconciler
from .analyzer import EvidenceTraceabilityAnalyzer

__all__ = [
    'AnalysisOptions', 'calculate_coverage', 'HitQualityClassifier',
    'DomainEvidenceAttributor', 'significance_score', 'UsageReconciler',
    'EvidenceTraceabilityAnalyzer',
]
