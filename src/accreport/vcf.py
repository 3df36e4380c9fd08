from __future__ import annotations

from typing import List

from .models import ReportRecord, SubmittedVariant
from .padding import needs_context_base, pad_with_context_base
from .reference import ReferenceSequenceProvider

DEFAULT_ACCESSION_PREFIX = "ss"

FILEFORMAT_LINE = "##fileformat=VCFv4.2"
COLUMN_HEADER_LINE = "\t".join(["#CHROM", "POS", "ID", "REF", "ALT", "QUAL", "FILTER", "INFO"])


def header_lines() -> List[str]:
    return [FILEFORMAT_LINE, COLUMN_HEADER_LINE]


def build_record(
    accession_prefix: str,
    accession: int,
    variant: SubmittedVariant,
    reference: ReferenceSequenceProvider,
) -> ReportRecord:
    """Build the report record for one accessioned variant.

    Variants with an empty allele get a context base first, so REF and ALT are
    never empty. A single ALT per record is assumed.
    """
    if needs_context_base(variant):
        variant = pad_with_context_base(variant, reference)
    return ReportRecord(
        contig=variant.contig,
        position=variant.start,
        identifier=f"{accession_prefix}{accession}",
        ref=variant.reference_allele,
        alt=variant.alternate_allele,
    )
