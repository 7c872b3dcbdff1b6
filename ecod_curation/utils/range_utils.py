# ecod_curation/utils/range_utils.py
"""
Range utilities for evidence and domain boundaries

Residue ranges arrive in several textual encodings ("11-76", "A:11-76",
"11-76,90-120", "A:11-76,A:90-120", "15") or as already split numeric
start/end fields. parse_range() normalizes all of them into a ParsedRange and
never raises; unparseable input yields an empty range that keeps the original
text for display.
"""

import re
import logging
from dataclasses import dataclass, field
from typing import List, Tuple, Optional, Union, Any, Iterable

logger = logging.getLogger("ecod_curation.utils.range_utils")

# Optional chain prefix, then start-end or a single position
_SEGMENT_PATTERN = re.compile(r'^(?:[A-Za-z0-9]{1,4}:)?(\d+)(?:-(\d+))?$')


@dataclass(frozen=True)
class Span:
    """Inclusive residue span on a sequence"""
    start: int
    end: int

    @property
    def length(self) -> int:
        return self.end - self.start + 1

    @property
    def is_valid(self) -> bool:
        return self.start >= 1 and self.end >= self.start

    def overlap_length(self, other: 'Span') -> int:
        """Number of residues shared with another span"""
        return max(0, min(self.end, other.end) - max(self.start, other.start) + 1)

    def gap_to(self, other: 'Span') -> int:
        """Residues separating two non-overlapping spans (0 if they overlap)"""
        if other.start > self.end:
            return other.start - self.end
        if self.start > other.end:
            return self.start - other.end
        return 0

    def __str__(self) -> str:
        return f"{self.start}-{self.end}"


@dataclass(frozen=True)
class ParsedRange:
    """Canonical form of a residue range"""
    segments: Tuple[Tuple[int, int], ...] = field(default_factory=tuple)
    display_range: str = ""

    @property
    def is_empty(self) -> bool:
        return not self.segments

    @property
    def start(self) -> Optional[int]:
        return min(s for s, _ in self.segments) if self.segments else None

    @property
    def end(self) -> Optional[int]:
        return max(e for _, e in self.segments) if self.segments else None

    @property
    def span(self) -> Optional[Span]:
        """Overall (min start, max end) span, None when boundaries are unknown"""
        if not self.segments:
            return None
        return Span(self.start, self.end)

    def to_range_string(self) -> str:
        return ",".join(f"{start}-{end}" for start, end in self.segments)


def _coerce_int(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _parse_segments(range_str: str) -> List[Tuple[int, int]]:
    segments = []
    for raw_segment in range_str.split(','):
        segment = raw_segment.strip()
        if not segment:
            continue

        match = _SEGMENT_PATTERN.match(segment)
        if not match:
            logger.debug(f"Skipping unparseable range segment '{segment}' in '{range_str}'")
            continue

        start = int(match.group(1))
        end = int(match.group(2)) if match.group(2) is not None else start
        if start < 1 or start > end:
            logger.debug(f"Discarding inverted segment '{segment}' in '{range_str}'")
            continue

        segments.append((start, end))
    return segments


def parse_range(value: Union[str, Tuple[int, int], None],
                start: Any = None, end: Any = None) -> ParsedRange:
    """Parse a residue range into canonical (start, end) segments

    Args:
        value: Range text, a (start, end) pair, or None
        start: Numeric start used when the text yields no segments
        end: Numeric end used when the text yields no segments

    Returns:
        ParsedRange; empty when boundaries cannot be determined
    """
    if isinstance(value, (tuple, list)) and len(value) == 2:
        start, end = value
        value = None

    display = value.strip() if isinstance(value, str) else ""
    segments = _parse_segments(display) if display else []

    if not segments:
        fallback_start, fallback_end = _coerce_int(start), _coerce_int(end)
        if fallback_start is not None and fallback_end is not None:
            if 1 <= fallback_start <= fallback_end:
                segments = [(fallback_start, fallback_end)]
            else:
                logger.debug(f"Ignoring invalid numeric range {start}-{end}")

    if display and not segments:
        logger.warning(f"Unparseable range '{display}', boundaries unknown")

    if not display and segments:
        display = ",".join(f"{s}-{e}" for s, e in segments)

    return ParsedRange(segments=tuple(segments), display_range=display)


def merge_spans(spans: Iterable[Span]) -> List[Span]:
    """Sort spans and merge those that overlap or touch"""
    merged: List[Span] = []
    for span in sorted(spans, key=lambda s: (s.start, s.end)):
        if merged and span.start <= merged[-1].end + 1:
            last = merged[-1]
            merged[-1] = Span(last.start, max(last.end, span.end))
        else:
            merged.append(span)
    return merged


def subtract_spans(spans: Iterable[Span], removed: Iterable[Span]) -> List[Span]:
    """Residues of spans not covered by any removed span, as merged spans"""
    remaining = []
    holes = merge_spans(removed)

    for span in merge_spans(spans):
        start = span.start
        for hole in holes:
            if hole.end < start:
                continue
            if hole.start > span.end:
                break
            if hole.start > start:
                remaining.append(Span(start, hole.start - 1))
            start = hole.end + 1
        if start <= span.end:
            remaining.append(Span(start, span.end))

    return remaining


def spans_to_range(spans: Iterable[Span]) -> str:
    """Format spans as a range string, merging adjacent segments"""
    return ",".join(str(span) for span in merge_spans(spans))
