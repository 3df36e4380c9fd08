from pathlib import Path

import pysam
import pytest

from accreport.reference import FastaReference

# 1-based: T1 A2 C3 G4 G5 A6 T7 C8 C9 A10
CHR1 = "TACGGATCCA"


@pytest.fixture
def fasta_path(tmp_path: Path) -> Path:
    path = tmp_path / "ref.fa"
    path.write_text(f">chr1\n{CHR1}\n>chr2\nGGGGCCCC\n", encoding="utf-8")
    pysam.faidx(str(path))
    return path


@pytest.fixture
def reference(fasta_path: Path):
    with FastaReference(fasta_path) as ref:
        yield ref
