"""accreport: forward-strand allele normalization and accession report VCFs.

Public API is intentionally small; most users should use the CLI:

    accreport write-report --variants accessioned.tsv --ref ref.fa --out report.vcf

"""

from __future__ import annotations

__all__ = ["__version__"]

__version__ = "0.1.0"
