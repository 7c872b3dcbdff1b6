#!/usr/bin/env python3
"""
Default configuration values for ECOD curation tooling
"""

DEFAULT_CONFIG = {
    'database': {
        'database': 'ecod_protein',
        'host': 'dione',
        'port': 45000,
        'user': 'ecod',
    },
    'analysis': {
        # Hit quality classification
        'min_alignment_length': 30,
        'coverage_threshold': 0.70,
        'fragment_coverage': 0.10,
        'poor_coverage': 0.30,
        'blast_evalue_cutoff': 1e-3,
        'blast_strong_evalue': 1e-10,
        'hhsearch_low_probability': 50.0,
        'hhsearch_good_probability': 80.0,
        'hhsearch_evalue_cutoff': 1e-3,
        # Domain evidence attribution
        'primary_overlap': 0.7,
        'supporting_overlap': 0.3,
        'boundary_overlap': 0.1,
        'boundary_window': 5,
        'near_window': 10,
        'min_domain_length': 30,
        'source_match_bonus': 0.1,
    },
    'logging': {
        'level': 'INFO',
        'format': '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    },
}
