# ecod_curation/models/domain.py
"""
Predicted domain model

Domains are owned by the partition pipeline's prediction store; the curation
tools only read them. A domain built from raw numeric fields keeps its span
even when the span is inverted or zero-length so that the attributor can flag
it instead of silently dropping the domain.
"""

from dataclasses import dataclass
from typing import Dict, Any, Optional

from ecod_curation.models.evidence import EvidenceSource
from ecod_curation.utils.range_utils import Span, parse_range


def _optional_float(value: Any) -> Optional[float]:
    if value is None or value == "" or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _optional_int(value: Any) -> Optional[int]:
    if value is None or value == "" or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _optional_str(value: Any) -> Optional[str]:
    return str(value) if value not in (None, "") else None


@dataclass(frozen=True)
class PredictedDomain:
    """Domain boundary predicted by the partition pipeline"""
    ordinal: int
    span: Optional[Span] = None
    range: str = ""
    domain_id: str = ""

    # ECOD classification hierarchy
    t_group: Optional[str] = None
    h_group: Optional[str] = None
    x_group: Optional[str] = None
    a_group: Optional[str] = None
    t_group_name: Optional[str] = None
    h_group_name: Optional[str] = None
    x_group_name: Optional[str] = None

    confidence: Optional[float] = None  # 0-1
    source: Optional[EvidenceSource] = None
    source_id: str = ""

    @property
    def length(self) -> int:
        """Domain length in residues (0 when boundaries are unknown)"""
        return max(0, self.span.length) if self.span else 0

    @property
    def has_valid_span(self) -> bool:
        return self.span is not None and self.span.is_valid

    @property
    def is_classified(self) -> bool:
        return bool(self.t_group)

    @property
    def classification_label(self) -> str:
        return self.t_group if self.t_group else "unclassified"

    @classmethod
    def from_dict(cls, data: Dict[str, Any], ordinal: Optional[int] = None) -> 'PredictedDomain':
        """Create a domain from a database row or JSON record

        Args:
            data: Record with domain_number, range/start_pos/end_pos and
                  optional classification fields
            ordinal: Position to use when the record has no domain_number

        Returns:
            PredictedDomain instance
        """
        start = _optional_int(data.get("start_pos"))
        if start is None:
            start = _optional_int(data.get("start"))
        end = _optional_int(data.get("end_pos"))
        if end is None:
            end = _optional_int(data.get("end"))
        parsed = parse_range(data.get("range"), start, end)

        span = parsed.span
        if span is None and start is not None and end is not None:
            # Keep invalid numeric spans so they can be reported
            span = Span(start, end)

        number = _optional_int(data.get("domain_number"))
        if number is None:
            number = ordinal if ordinal is not None else 1

        return cls(
            ordinal=number,
            span=span,
            range=parsed.display_range or (str(span) if span else ""),
            domain_id=str(data.get("domain_id") or ""),
            t_group=_optional_str(data.get("t_group")),
            h_group=_optional_str(data.get("h_group")),
            x_group=_optional_str(data.get("x_group")),
            a_group=_optional_str(data.get("a_group")),
            t_group_name=_optional_str(data.get("t_group_name")),
            h_group_name=_optional_str(data.get("h_group_name")),
            x_group_name=_optional_str(data.get("x_group_name")),
            confidence=_optional_float(data.get("confidence")),
            source=EvidenceSource.from_value(data.get("source")),
            source_id=str(data.get("source_id") or ""),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation"""
        return {
            "domain_number": self.ordinal,
            "domain_id": self.domain_id,
            "range": self.range,
            "start": self.span.start if self.span else None,
            "end": self.span.end if self.span else None,
            "t_group": self.t_group,
            "h_group": self.h_group,
            "x_group": self.x_group,
            "a_group": self.a_group,
            "t_group_name": self.t_group_name,
            "h_group_name": self.h_group_name,
            "x_group_name": self.x_group_name,
            "confidence": self.confidence,
            "source": self.source.value if self.source else None,
            "source_id": self.source_id,
        }
