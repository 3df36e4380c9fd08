"""Readers for the tab-separated inputs used by the CLI.

Both formats have a header line; column order is free but names are fixed.
Lines starting with ``#`` and blank lines are skipped. ``.gz`` is supported.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, Iterator, List, Tuple

from .microsatellite import EMPTY_ALLELE
from .models import AccessionedVariant, Orientation, RawAlleleRecord, SubmittedVariant, VariantClass
from .utils import open_textmaybe_gzip

logger = logging.getLogger(__name__)

VARIANT_COLUMNS = [
    "accession",
    "assembly",
    "taxonomy",
    "project",
    "contig",
    "start",
    "ref",
    "alt",
    "supported",
]

RAW_ALLELE_COLUMNS = [
    "id",
    "reference",
    "alleles",
    "reference_orientation",
    "allele_orientation",
    "variant_class",
]

_ORIENTATIONS = {
    "forward": Orientation.FORWARD,
    "fwd": Orientation.FORWARD,
    "+": Orientation.FORWARD,
    "1": Orientation.FORWARD,
    "reverse": Orientation.REVERSE,
    "rev": Orientation.REVERSE,
    "-": Orientation.REVERSE,
    "-1": Orientation.REVERSE,
}

_TRUE = {"1", "true", "yes", "y", "t"}
_FALSE = {"0", "false", "no", "n", "f"}


def parse_orientation(value: str) -> Orientation:
    key = value.strip().lower()
    if key not in _ORIENTATIONS:
        raise ValueError(f"Unknown orientation '{value}' (expected forward/reverse)")
    return _ORIENTATIONS[key]


def parse_variant_class(value: str) -> VariantClass:
    try:
        return VariantClass[value.strip().upper()]
    except KeyError:
        choices = ", ".join(c.name for c in VariantClass)
        raise ValueError(f"Unknown variant class '{value}' (expected one of {choices})") from None


def parse_bool(value: str) -> bool:
    key = value.strip().lower()
    if key in _TRUE:
        return True
    if key in _FALSE:
        return False
    raise ValueError(f"Cannot interpret '{value}' as a boolean")


def _allele(value: str) -> str:
    return "" if value in ("", EMPTY_ALLELE) else value


def _iter_rows(path: str | Path, required: List[str]) -> Iterator[Tuple[int, Dict[str, str]]]:
    with open_textmaybe_gzip(path, "rt") as fh:
        header: List[str] = []
        for lineno, line in enumerate(fh, start=1):
            line = line.rstrip("\n").rstrip("\r")
            if not line.strip():
                continue
            if not header:
                candidate = [c.strip().lstrip("#").strip().lower() for c in line.split("\t")]
                missing = [c for c in required if c not in candidate]
                if missing:
                    # leading comments may precede the header
                    if line.startswith("#"):
                        continue
                    raise ValueError(f"{path}: missing columns {missing} in header")
                header = candidate
                continue
            if line.startswith("#"):
                continue
            fields = line.split("\t")
            if len(fields) != len(header):
                raise ValueError(
                    f"{path}:{lineno}: expected {len(header)} fields, found {len(fields)}"
                )
            yield lineno, dict(zip(header, fields))


def read_accessioned_variants(path: str | Path) -> Iterator[AccessionedVariant]:
    """Stream accessioned variants from a TSV (see ``VARIANT_COLUMNS``)."""
    for lineno, row in _iter_rows(path, VARIANT_COLUMNS):
        try:
            variant = SubmittedVariant(
                assembly=row["assembly"],
                taxonomy=int(row["taxonomy"]),
                project=row["project"],
                contig=row["contig"],
                start=int(row["start"]),
                reference_allele=_allele(row["ref"]),
                alternate_allele=_allele(row["alt"]),
                supported_by_evidence=parse_bool(row["supported"]),
            )
            accession = int(row["accession"])
        except ValueError as e:
            raise ValueError(f"{path}:{lineno}: {e}") from e
        if variant.start < 1:
            raise ValueError(f"{path}:{lineno}: start must be >= 1, got {variant.start}")
        yield AccessionedVariant(accession=accession, variant=variant)


def read_raw_allele_records(path: str | Path) -> Iterator[Tuple[str, RawAlleleRecord]]:
    """Stream ``(id, RawAlleleRecord)`` pairs from a TSV (see ``RAW_ALLELE_COLUMNS``)."""
    for lineno, row in _iter_rows(path, RAW_ALLELE_COLUMNS):
        try:
            record = RawAlleleRecord(
                reference_sequence=row["reference"],
                allele_list_raw=row["alleles"],
                reference_orientation=parse_orientation(row["reference_orientation"]),
                allele_orientation=parse_orientation(row["allele_orientation"]),
                variant_class=parse_variant_class(row["variant_class"]),
            )
        except ValueError as e:
            raise ValueError(f"{path}:{lineno}: {e}") from e
        yield row["id"], record
