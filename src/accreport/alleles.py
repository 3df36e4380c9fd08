from __future__ import annotations

import logging
from typing import List

from .microsatellite import (
    EMPTY_ALLELE,
    expand_shorthand,
    format_segments,
    parse_segments,
    reverse_complement_notation,
    unroll_alleles,
)
from .models import NormalizedAlleleSet, Orientation, RawAlleleRecord, VariantClass
from .sequence import reverse_complement

logger = logging.getLogger(__name__)

ALLELE_SEPARATOR = "/"


def reference_in_forward_strand(record: RawAlleleRecord) -> str:
    ref = record.reference_sequence
    if ref == EMPTY_ALLELE:
        return ""
    if record.reference_orientation is Orientation.REVERSE:
        return reverse_complement(ref)
    return ref


def alleles_in_forward_strand(record: RawAlleleRecord, *, unroll: bool = True) -> List[str]:
    """Forward-strand alleles in token order.

    With ``unroll=False`` microsatellite alleles keep their repeat notation
    (shorthand is still expanded, so every token carries its unit).
    """
    tokens = record.allele_list_raw.split(ALLELE_SEPARATOR)
    reverse = record.allele_orientation is Orientation.REVERSE

    if record.variant_class is VariantClass.MICROSATELLITE:
        if unroll:
            alleles = unroll_alleles(tokens)
        else:
            expanded = expand_shorthand(tokens)
            if reverse:
                return [reverse_complement_notation(t) for t in expanded]
            return ["" if t == EMPTY_ALLELE else format_segments(parse_segments(t)) for t in expanded]
    else:
        alleles = ["" if t == EMPTY_ALLELE else t for t in tokens]

    if reverse:
        return [reverse_complement(a) for a in alleles]
    return alleles


def normalize(record: RawAlleleRecord, *, unroll: bool = True) -> NormalizedAlleleSet:
    """Express a raw allele record on the forward strand.

    Raises
    ------
    MalformedRepeatNotation
        If a microsatellite token cannot be parsed.
    """
    return NormalizedAlleleSet(
        reference=reference_in_forward_strand(record),
        alleles=tuple(alleles_in_forward_strand(record, unroll=unroll)),
    )
