from __future__ import annotations

_COMPLEMENT = str.maketrans("ACGT", "TGCA")


def reverse_complement(sequence: str) -> str:
    """Reverse a DNA string and complement each base.

    Characters outside ACGT (N, IUPAC codes, lower case) are passed through unchanged.
    """
    return sequence.translate(_COMPLEMENT)[::-1]
