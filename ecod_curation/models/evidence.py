# ecod_curation/models/evidence.py
"""
Alignment evidence models

A hit is one of three variants, matching the three evidence sources of the
domain partition pipeline. Each variant carries only the significance fields
that apply to it:

    ChainBlastHit   - chain-level BLAST against reference chains (E-value)
    DomainBlastHit  - domain-level BLAST against reference domains (E-value)
    HHSearchHit     - profile-profile HHsearch (probability 0-100 + E-value)

Hits are immutable once built. hit_from_dict() builds the right variant from
a raw evidence record and never raises on malformed input.
"""

import logging
import math
from dataclasses import dataclass, fields
from enum import Enum
from typing import Dict, Any, Optional, ClassVar, Union, Iterable, List

from ecod_curation.utils.range_utils import Span, parse_range

logger = logging.getLogger("ecod_curation.models.evidence")


class EvidenceSource(Enum):
    """Evidence source kinds produced by the partition pipeline"""
    CHAIN_BLAST = "chain_blast"
    DOMAIN_BLAST = "domain_blast"
    HHSEARCH = "hhsearch"

    @classmethod
    def from_value(cls, value: Any) -> Optional['EvidenceSource']:
        """Resolve a source tag, accepting the generic search-kind aliases

        Returns:
            EvidenceSource, or None for unknown or empty tags
        """
        if isinstance(value, cls):
            return value
        if not value:
            return None
        return _SOURCE_ALIASES.get(str(value).strip().lower())


_SOURCE_ALIASES = {
    "chain_blast": EvidenceSource.CHAIN_BLAST,
    "chain_search": EvidenceSource.CHAIN_BLAST,
    "domain_blast": EvidenceSource.DOMAIN_BLAST,
    "domain_search": EvidenceSource.DOMAIN_BLAST,
    "hhsearch": EvidenceSource.HHSEARCH,
    "profile_search": EvidenceSource.HHSEARCH,
}


def parse_significance(value: Any) -> Optional[float]:
    """Parse an E-value or probability field

    BLAST summaries store per-HSP E-values as a comma separated list; the first
    one is used. Missing, malformed and non-finite values all become None.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.split(",")[0].strip()
        if not value:
            return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def _first(record: Dict[str, Any], *keys: str) -> Any:
    for key in keys:
        value = record.get(key)
        if value not in (None, ""):
            return value
    return None


def _optional_int(value: Any) -> Optional[int]:
    try:
        return int(value) if value not in (None, "") else None
    except (TypeError, ValueError):
        return None


@dataclass(frozen=True)
class Hit:
    """Common fields of every evidence hit"""
    source_kind: ClassVar[EvidenceSource]

    reference_id: str = ""
    query_span: Optional[Span] = None  # None = boundaries unknown
    reference_span: Optional[Span] = None
    query_range: str = ""  # original text, kept for display
    hit_range: str = ""

    @property
    def type(self) -> str:
        return self.source_kind.value

    @property
    def has_boundaries(self) -> bool:
        return self.query_span is not None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation"""
        data = {
            "type": self.type,
            "reference_id": self.reference_id,
            "query_range": self.query_range,
            "hit_range": self.hit_range,
            "query_start": self.query_span.start if self.query_span else None,
            "query_end": self.query_span.end if self.query_span else None,
        }
        for f in fields(self):
            if f.name not in _COMMON_FIELDS:
                data[f.name] = getattr(self, f.name)
        return data


_COMMON_FIELDS = {"reference_id", "query_span", "reference_span", "query_range", "hit_range"}


@dataclass(frozen=True)
class ChainBlastHit(Hit):
    """Chain-level BLAST hit"""
    source_kind: ClassVar[EvidenceSource] = EvidenceSource.CHAIN_BLAST

    evalue: Optional[float] = None
    pdb_id: str = ""
    chain_id: str = ""
    hsp_count: Optional[int] = None


@dataclass(frozen=True)
class DomainBlastHit(Hit):
    """Domain-level BLAST hit"""
    source_kind: ClassVar[EvidenceSource] = EvidenceSource.DOMAIN_BLAST

    evalue: Optional[float] = None
    domain_id: str = ""
    pdb_id: str = ""
    chain_id: str = ""
    hsp_count: Optional[int] = None


@dataclass(frozen=True)
class HHSearchHit(Hit):
    """HHsearch profile-profile hit"""
    source_kind: ClassVar[EvidenceSource] = EvidenceSource.HHSEARCH

    probability: Optional[float] = None  # 0-100 scale
    evalue: Optional[float] = None
    score: Optional[float] = None
    hit_id: str = ""
    domain_id: str = ""


AnyHit = Union[ChainBlastHit, DomainBlastHit, HHSearchHit]


def hit_from_dict(record: Dict[str, Any]) -> Optional[AnyHit]:
    """Create the hit variant matching a raw evidence record

    Args:
        record: Evidence record with at least a type and a query range

    Returns:
        Hit instance, or None when the evidence type is unknown
    """
    source = EvidenceSource.from_value(_first(record, "type", "source_kind"))
    if source is None:
        logger.warning(f"Skipping evidence record with unknown type: {record.get('type')!r}")
        return None

    query = parse_range(_first(record, "query_range", "query_reg", "range"),
                        record.get("query_start"), record.get("query_end"))
    reference = parse_range(_first(record, "hit_range", "hit_reg", "template_range"),
                            record.get("hit_start"), record.get("hit_end"))

    common = {
        "query_span": query.span,
        "reference_span": reference.span,
        "query_range": query.display_range,
        "hit_range": reference.display_range,
    }
    evalue = parse_significance(_first(record, "evalue", "evalues", "e_value"))
    pdb_id = str(record.get("pdb_id") or "")
    chain_id = str(record.get("chain_id") or "")

    if source is EvidenceSource.CHAIN_BLAST:
        reference_id = record.get("reference_id") or (f"{pdb_id}_{chain_id}" if pdb_id else "")
        return ChainBlastHit(
            reference_id=str(reference_id),
            evalue=evalue,
            pdb_id=pdb_id,
            chain_id=chain_id,
            hsp_count=_optional_int(record.get("hsp_count")),
            **common
        )

    if source is EvidenceSource.DOMAIN_BLAST:
        domain_id = str(record.get("domain_id") or "")
        return DomainBlastHit(
            reference_id=str(record.get("reference_id") or domain_id),
            evalue=evalue,
            domain_id=domain_id,
            pdb_id=pdb_id,
            chain_id=chain_id,
            hsp_count=_optional_int(record.get("hsp_count")),
            **common
        )

    hit_id = str(record.get("hit_id") or "")
    domain_id = str(_first(record, "ecod_domain_id", "domain_id") or "")
    return HHSearchHit(
        reference_id=str(record.get("reference_id") or hit_id or domain_id),
        probability=parse_significance(record.get("probability")),
        evalue=evalue,
        score=parse_significance(record.get("score")),
        hit_id=hit_id,
        domain_id=domain_id,
        **common
    )


def hits_from_records(records: Iterable[Dict[str, Any]]) -> List[AnyHit]:
    """Build hits from raw records, skipping records of unknown type"""
    hits = []
    for record in records:
        hit = hit_from_dict(record)
        if hit is not None:
            hits.append(hit)
    return hits
