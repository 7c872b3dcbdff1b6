#!/usr/bin/env python3
"""
ECOD Curation Tools

Evidence coverage and traceability analysis for domain partition results.
"""

__version__ = '0.1.0'
__author__ = 'ECOD Team'
__license__ = 'MIT'

from .exceptions import ECODCurationError
from .error_handlers import handle_exceptions
from .analysis import AnalysisOptions, EvidenceTraceabilityAnalyzer

__all__ = ['ECODCurationError', 'handle_exceptions', 'AnalysisOptions', 'EvidenceTraceabilityAnalyzer']
