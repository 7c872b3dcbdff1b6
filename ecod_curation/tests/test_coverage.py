#!/usr/bin/env python3
"""
Tests for query coverage calculation
"""

import pytest

from ecod_curation.analysis.coverage import calculate_coverage
from ecod_curation.utils.range_utils import Span


class TestCalculateCoverage:
    """Test alignment length and coverage"""

    def test_basic_coverage(self):
        metrics = calculate_coverage(Span(1, 150), 200)
        assert metrics.alignment_length == 150
        assert metrics.query_coverage == pytest.approx(0.75)

    def test_unknown_boundaries(self):
        metrics = calculate_coverage(None, 200)
        assert metrics.alignment_length == 0
        assert metrics.query_coverage == 0.0

    @pytest.mark.parametrize("sequence_length", [0, -5, None])
    def test_invalid_sequence_length(self, sequence_length):
        metrics = calculate_coverage(Span(1, 50), sequence_length)
        assert metrics.alignment_length == 50
        assert metrics.query_coverage == 0.0

    def test_span_beyond_sequence_not_clamped(self):
        metrics = calculate_coverage(Span(1, 300), 200)
        assert metrics.query_coverage == pytest.approx(1.5)

    def test_coverage_strictly_increases_with_alignment_length(self):
        coverages = [calculate_coverage(Span(1, end), 250).query_coverage for end in range(1, 251)]
        assert all(a < b for a, b in zip(coverages, coverages[1:]))
