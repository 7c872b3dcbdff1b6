#!/usr/bin/env python3
"""
Threshold configuration for evidence coverage and traceability analysis.

Every heuristic cutoff lives here and is passed to the classifier and the
attributor at call time, so runs with different thresholds never share state.
"""

import logging
from dataclasses import dataclass, fields, asdict
from typing import Dict, Any, Optional

from ecod_curation.exceptions import ConfigurationError

logger = logging.getLogger("ecod_curation.analysis.options")


@dataclass(frozen=True)
class AnalysisOptions:
    """Thresholds used by the hit classifier and domain attributor"""

    # ========== HIT QUALITY ==========
    min_alignment_length: int = 30
    coverage_threshold: float = 0.70  # at or above: excellent
    fragment_coverage: float = 0.10   # below: fragment
    poor_coverage: float = 0.30       # below: poor

    # ========== SIGNIFICANCE ==========
    blast_evalue_cutoff: float = 1e-3
    blast_strong_evalue: float = 1e-10
    hhsearch_low_probability: float = 50.0
    hhsearch_good_probability: float = 80.0
    hhsearch_evalue_cutoff: float = 1e-3

    # ========== DOMAIN ATTRIBUTION ==========
    primary_overlap: float = 0.7
    supporting_overlap: float = 0.3
    boundary_overlap: float = 0.1
    # Residue windows; empirical, may need re-tuning
    boundary_window: int = 5
    near_window: int = 10
    min_domain_length: int = 30
    source_match_bonus: float = 0.1

    def validate(self) -> None:
        """Check threshold consistency

        Raises:
            ConfigurationError: If any threshold is out of range
        """
        errors = []

        if self.min_alignment_length < 1:
            errors.append("min_alignment_length must be at least 1")

        if not 0.0 <= self.fragment_coverage <= self.poor_coverage <= self.coverage_threshold <= 1.0:
            errors.append("coverage thresholds must satisfy "
                          "0 <= fragment_coverage <= poor_coverage <= coverage_threshold <= 1")

        if not 0.0 <= self.boundary_overlap <= self.supporting_overlap <= self.primary_overlap <= 1.0:
            errors.append("overlap thresholds must satisfy "
                          "0 <= boundary_overlap <= supporting_overlap <= primary_overlap <= 1")

        if self.blast_strong_evalue > self.blast_evalue_cutoff:
            errors.append("blast_strong_evalue must be <= blast_evalue_cutoff")

        if not 0.0 <= self.hhsearch_low_probability <= self.hhsearch_good_probability <= 100.0:
            errors.append("hhsearch probabilities must satisfy 0 <= low <= good <= 100")

        if self.boundary_window < 0 or self.near_window < 0:
            errors.append("residue windows must be non-negative")

        if self.min_domain_length < 1:
            errors.append("min_domain_length must be at least 1")

        if not 0.0 <= self.source_match_bonus <= 1.0:
            errors.append("source_match_bonus must be between 0.0 and 1.0")

        if errors:
            raise ConfigurationError(f"Invalid analysis options: {'; '.join(errors)}",
                                     {"errors": errors})

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization"""
        return asdict(self)

    def with_overrides(self, **overrides: Any) -> 'AnalysisOptions':
        """Copy with selected thresholds replaced; None values are ignored"""
        values = self.to_dict()
        values.update({k: v for k, v in overrides.items() if v is not None})
        return AnalysisOptions.from_config(values)

    @classmethod
    def from_config(cls, config: Optional[Dict[str, Any]]) -> 'AnalysisOptions':
        """Create options from the 'analysis' configuration section

        Unknown keys are ignored with a debug message.

        Raises:
            ConfigurationError: If the resulting options are inconsistent
        """
        config = config or {}
        known = {f.name: f.type for f in fields(cls)}
        values = {}

        for key, value in config.items():
            if key not in known:
                logger.debug(f"Ignoring unknown analysis option: {key}")
                continue
            try:
                values[key] = int(value) if known[key] in (int, 'int') else float(value)
            except (TypeError, ValueError) as e:
                raise ConfigurationError(f"Invalid value for analysis option {key}: {value!r}",
                                         {"option": key}) from e

        options = cls(**values)
        options.validate()
        return options
