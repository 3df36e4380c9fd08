from __future__ import annotations

from pathlib import Path
from typing import Dict, List

import pysam

from .inputs import RAW_ALLELE_COLUMNS, VARIANT_COLUMNS
from .utils import ensure_outdir, write_json


def _write_fasta(path: Path, contig: str, seq: str) -> None:
    lines = [f">{contig}"]
    for i in range(0, len(seq), 60):
        lines.append(seq[i : i + 60])
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")


def _write_tsv(path: Path, columns: List[str], rows: List[List[object]]) -> None:
    lines = ["\t".join(columns)]
    for row in rows:
        lines.append("\t".join(str(v) for v in row))
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")


def make_toy_data(*, outdir: str | Path) -> Dict[str, str]:
    """Create a tiny reference and matching inputs suitable for quick demos/tests.

    The outputs include:
    - toy_ref.fa (+ .fai)
    - accessioned.tsv: variants with accessions, including an insertion at
      position 1 and a deletion needing a preceding context base
    - raw_alleles.tsv: dbSNP-style allele records on both strands

    Returns
    -------
    dict
        Paths to the generated files.
    """
    outdir_p = ensure_outdir(outdir)

    contig = "chr1"
    ref_seq = ("ACGT" * 50)[:200]
    ref_fa = outdir_p / "toy_ref.fa"
    _write_fasta(ref_fa, contig, ref_seq)
    pysam.faidx(str(ref_fa))

    # start is 1-based; ref_seq[start - 1] is the base at start
    variants: List[List[object]] = [
        [5000000001, "GCA_000001405.15", 9606, "PRJEB0001", contig, 10, ref_seq[9], "T", 1],
        [5000000002, "GCA_000001405.15", 9606, "PRJEB0001", contig, 1, "-", "GG", 1],
        [5000000003, "GCA_000001405.15", 9606, "PRJEB0001", contig, 50, ref_seq[49:51], "-", 0],
        [5000000004, "GCA_000001405.15", 9606, "PRJEB0001", contig, 120, "", "TTA", 1],
    ]
    variants_tsv = outdir_p / "accessioned.tsv"
    _write_tsv(variants_tsv, VARIANT_COLUMNS, variants)

    raw = [
        ["rs1", "TA", "TG/TA/GG", "forward", "forward", "MNV"],
        ["rs2", "AG", "-/CT", "reverse", "forward", "INDEL"],
        ["rs3", "AG", "-/AG", "reverse", "reverse", "INDEL"],
        ["rs4", "T", "(T)4/5/7", "forward", "forward", "MICROSATELLITE"],
        ["rs5", "AT", "(A)2(TC)8/(TA)3", "forward", "reverse", "MICROSATELLITE"],
    ]
    raw_tsv = outdir_p / "raw_alleles.tsv"
    _write_tsv(raw_tsv, RAW_ALLELE_COLUMNS, raw)

    summary = {
        "ref_fa": str(ref_fa),
        "variants_tsv": str(variants_tsv),
        "raw_alleles_tsv": str(raw_tsv),
        "outdir": str(outdir_p),
    }

    write_json(outdir_p / "toy_summary.json", summary)
    return summary
