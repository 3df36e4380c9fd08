"""Tandem-repeat (microsatellite) allele notation.

dbSNP-style microsatellite alleles are written as a concatenation of literal
bases and repeat segments ``(unit)count``, e.g. ``(T)4(ACT)3AG(C)5``. Allele
lists may also abbreviate every token after the first to a bare count, so
``(T)4/5/7`` means ``(T)4``, ``(T)5`` and ``(T)7``.

Everything here works on token text only and knows nothing about strands.
"""

from __future__ import annotations

import logging
import re
from typing import Iterable, List, Optional, Sequence, Tuple

from .sequence import reverse_complement

logger = logging.getLogger(__name__)

EMPTY_ALLELE = "-"

_SEGMENT = re.compile(r"\((?P<unit>[A-Za-z]+)\)(?P<count>\d+)|(?P<literal>[A-Za-z]+)")
_UNIT = re.compile(r"\(([^()]*)\)")

# (unit, count) for repeat segments, (literal, None) for plain bases
Segment = Tuple[str, Optional[int]]


class MalformedRepeatNotation(ValueError):
    """Raised when a microsatellite token cannot be parsed."""

    def __init__(self, message: str, *, token: str) -> None:
        super().__init__(message)
        self.token = token


def expand_shorthand(tokens: Iterable[str]) -> List[str]:
    """Rewrite bare-count tokens as ``(unit)count`` using the last unit seen.

    Tokens that already carry a parenthesized unit are returned unchanged and
    update the carried unit (the last group in the token wins).
    """
    carried: Optional[str] = None
    out: List[str] = []
    for token in tokens:
        if token.isdigit():
            if carried is None:
                raise MalformedRepeatNotation(
                    f"Repeat count '{token}' has no preceding repeat unit", token=token
                )
            out.append(f"({carried}){token}")
            continue
        units = _UNIT.findall(token)
        if units:
            carried = units[-1]
        out.append(token)
    return out


def parse_segments(token: str) -> List[Segment]:
    """Split a token into literal spans and ``(unit)count`` segments, in order."""
    segments: List[Segment] = []
    pos = 0
    while pos < len(token):
        m = _SEGMENT.match(token, pos)
        if m is None:
            raise MalformedRepeatNotation(
                f"Cannot parse repeat notation '{token}' at offset {pos}", token=token
            )
        if m.group("literal") is not None:
            segments.append((m.group("literal"), None))
        else:
            segments.append((m.group("unit"), int(m.group("count"))))
        pos = m.end()
    return segments


def unroll(token: str) -> str:
    """Expand one token into literal bases.

    >>> unroll("(T)4(ACT)3AG(C)5")
    'TTTTACTACTACTAGCCCCC'
    """
    if token == EMPTY_ALLELE:
        return ""
    parts = []
    for seq, count in parse_segments(token):
        parts.append(seq if count is None else seq * count)
    return "".join(parts)


def unroll_alleles(tokens: Sequence[str]) -> List[str]:
    """Shorthand expansion over the whole list, then literal expansion per token."""
    expanded = expand_shorthand(tokens)
    alleles = [unroll(t) for t in expanded]
    logger.debug("Unrolled microsatellite alleles %s -> %s", list(tokens), alleles)
    return alleles


def format_segments(segments: Iterable[Segment]) -> str:
    return "".join(seq if count is None else f"({seq}){count}" for seq, count in segments)


def reverse_complement_notation(token: str) -> str:
    """Reverse-complement a token without unrolling it.

    Segment order is reversed and each unit/literal is reverse-complemented, so
    ``(A)2(TC)8`` becomes ``(GA)8(T)2``.
    """
    if token == EMPTY_ALLELE:
        return ""
    flipped = [(reverse_complement(seq), count) for seq, count in reversed(parse_segments(token))]
    return format_segments(flipped)
