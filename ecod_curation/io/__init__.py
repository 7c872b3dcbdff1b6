"""Readers for evidence documents and domain predictions"""

from .summary_parser import DomainSummaryParser, EvidenceDocument
from .json_io import read_json, load_domains, load_hits, write_json

__all__ = [
    'DomainSummaryParser', 'EvidenceDocument',
    'read_json', 'load_domains', 'load_hits', 'write_json',
]
