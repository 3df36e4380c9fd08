from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Protocol

import pysam

logger = logging.getLogger(__name__)


class ReferenceSequenceProvider(Protocol):
    """Read-only access to reference bases (1-based, inclusive coordinates)."""

    def contig_exists(self, contig: str) -> bool:
        ...

    def get_bases(self, contig: str, start: int, end: int) -> str:
        """Bases in [start, end]; an empty string means no data."""
        ...


def check_fasta_index(fasta_path: str | Path) -> None:
    """Ensure a FASTA has a .fai index; raise ValueError with fix instructions."""
    fasta = Path(fasta_path)
    fai = fasta.with_suffix(fasta.suffix + ".fai")
    if fai.exists():
        return
    raise ValueError("FASTA is not indexed. Run: samtools faidx " + str(fasta))


class FastaReference:
    """ReferenceSequenceProvider backed by an indexed FASTA via pysam.

    Safe for concurrent reads only if each thread uses its own instance;
    pysam file handles are not shared-state safe.
    """

    def __init__(self, fasta_path: str | Path, *, build_index: bool = False) -> None:
        self.path = Path(fasta_path)
        if build_index and not self.path.with_suffix(self.path.suffix + ".fai").exists():
            logger.info("Indexing FASTA %s", self.path)
            pysam.faidx(str(self.path))
        check_fasta_index(self.path)
        self._fasta: Optional[pysam.FastaFile] = pysam.FastaFile(str(self.path))
        self._lengths = dict(zip(self._fasta.references, self._fasta.lengths))
        self._contigs = frozenset(self._lengths)

    @property
    def contigs(self) -> frozenset[str]:
        return self._contigs

    def contig_exists(self, contig: str) -> bool:
        return contig in self._contigs

    def get_bases(self, contig: str, start: int, end: int) -> str:
        if self._fasta is None:
            raise ValueError(f"FASTA {self.path} is closed")
        if contig not in self._contigs or start < 1 or end < start:
            return ""
        if start > self._lengths[contig]:
            return ""
        # pysam uses 0-based half-open coordinates
        return self._fasta.fetch(contig, start - 1, end)

    def close(self) -> None:
        if self._fasta is not None:
            self._fasta.close()
            self._fasta = None

    def __enter__(self) -> "FastaReference":
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()
