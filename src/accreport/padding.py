from __future__ import annotations

import dataclasses
import logging

from .models import SubmittedVariant
from .reference import ReferenceSequenceProvider

logger = logging.getLogger(__name__)


class UnknownContig(ValueError):
    """The contig of a variant is not present in the reference sequence."""

    def __init__(self, contig: str) -> None:
        super().__init__(f"Contig '{contig}' does not appear in the reference FASTA")
        self.contig = contig


class EmptyContextBase(RuntimeError):
    """The reference returned no base for a position on a known contig."""


def needs_context_base(variant: SubmittedVariant) -> bool:
    return not variant.reference_allele or not variant.alternate_allele


def pad_with_context_base(
    variant: SubmittedVariant,
    reference: ReferenceSequenceProvider,
) -> SubmittedVariant:
    """Return a copy of ``variant`` with one reference base added to both alleles.

    VCF 4.2 requires non-empty REF/ALT that include the base before the event,
    or the base after it when the event is at position 1 of the contig.

    Raises
    ------
    UnknownContig
        If the reference has no such contig.
    EmptyContextBase
        If the reference returned nothing for the context position.
    """
    if not reference.contig_exists(variant.contig):
        raise UnknownContig(variant.contig)

    if variant.start == 1:
        new_start = variant.start + 1
        base = reference.get_bases(variant.contig, new_start, new_start)
        new_ref = variant.reference_allele + base
        new_alt = variant.alternate_allele + base
    else:
        new_start = variant.start - 1
        base = reference.get_bases(variant.contig, new_start, new_start)
        new_ref = base + variant.reference_allele
        new_alt = base + variant.alternate_allele

    if not base:
        raise EmptyContextBase(
            f"Reference returned no base at {variant.contig}:{new_start} "
            "although the contig exists"
        )

    logger.debug(
        "Added context base %s at %s:%d (original start %d)",
        base,
        variant.contig,
        new_start,
        variant.start,
    )
    return dataclasses.replace(
        variant,
        start=new_start,
        reference_allele=new_ref,
        alternate_allele=new_alt,
    )
