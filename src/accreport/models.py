from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Tuple

VCF_MISSING_VALUE = "."


class Orientation(Enum):
    FORWARD = "forward"
    REVERSE = "reverse"


class VariantClass(Enum):
    SNV = "snv"
    MNV = "mnv"
    INDEL = "indel"
    MICROSATELLITE = "microsatellite"
    OTHER = "other"


@dataclass(frozen=True)
class RawAlleleRecord:
    """Alleles as stored in a submission, before strand normalization.

    Attributes
    ----------
    reference_sequence:
        Reference allele expressed on ``reference_orientation``. ``"-"`` means empty.
    allele_list_raw:
        ``/``-separated allele tokens expressed on ``allele_orientation``. For
        microsatellites the tokens may use repeat notation, e.g. ``(T)4/5/7``.
    reference_orientation, allele_orientation:
        Strand each sequence is written on.
    variant_class:
        Only MICROSATELLITE changes how tokens are parsed.
    """

    reference_sequence: str
    allele_list_raw: str
    reference_orientation: Orientation
    allele_orientation: Orientation
    variant_class: VariantClass


@dataclass(frozen=True)
class NormalizedAlleleSet:
    """Forward-strand reference and alleles, in input token order (duplicates kept)."""

    reference: str
    alleles: Tuple[str, ...]


@dataclass(frozen=True)
class SubmittedVariant:
    """A submitted variant with forward-strand alleles.

    ``start`` is 1-based on the contig. Either allele may be empty for
    insertions/deletions stored without an anchor base.
    """

    assembly: str
    taxonomy: int
    project: str
    contig: str
    start: int
    reference_allele: str
    alternate_allele: str
    supported_by_evidence: bool = True


@dataclass(frozen=True)
class AccessionedVariant:
    accession: int
    variant: SubmittedVariant


@dataclass(frozen=True)
class ReportRecord:
    """One data line of the accession report."""

    contig: str
    position: int
    identifier: str
    ref: str
    alt: str
    qual: str = VCF_MISSING_VALUE
    filter: str = VCF_MISSING_VALUE
    info: str = VCF_MISSING_VALUE

    def to_line(self) -> str:
        return "\t".join(
            [
                self.contig,
                str(self.position),
                self.identifier,
                self.ref,
                self.alt,
                self.qual,
                self.filter,
                self.info,
            ]
        )
