# ecod_curation/analysis/coverage.py
"""Query coverage and alignment length of evidence hits"""

import logging
from typing import Optional

from ecod_curation.models.analysis import CoverageMetrics
from ecod_curation.utils.range_utils import Span

logger = logging.getLogger("ecod_curation.analysis.coverage")


def calculate_coverage(query_span: Optional[Span], sequence_length: int) -> CoverageMetrics:
    """Calculate alignment length and query coverage for a hit

    The span is expected to lie within [1, sequence_length]; this is not
    re-validated, so coverage can exceed 1.0 for inconsistent input.

    Args:
        query_span: Hit span on the target sequence, None if unknown
        sequence_length: Target sequence length

    Returns:
        CoverageMetrics (zero for unknown boundaries)
    """
    if query_span is None:
        return CoverageMetrics(query_coverage=0.0, alignment_length=0)

    alignment_length = query_span.end - query_span.start + 1

    if not sequence_length or sequence_length <= 0:
        logger.warning(f"Invalid sequence length {sequence_length!r}, reporting zero coverage")
        return CoverageMetrics(query_coverage=0.0, alignment_length=alignment_length)

    query_coverage = alignment_length / sequence_length
    if query_coverage > 1.0:
        logger.debug(f"Span {query_span} exceeds sequence length {sequence_length}")

    return CoverageMetrics(query_coverage=query_coverage, alignment_length=alignment_length)
