import pytest

from accreport.alleles import normalize
from accreport.microsatellite import MalformedRepeatNotation
from accreport.models import Orientation, RawAlleleRecord, VariantClass
from accreport.sequence import reverse_complement

F = Orientation.FORWARD
R = Orientation.REVERSE


def _norm(ref: str, alleles: str, ref_or: Orientation, allele_or: Orientation, cls: VariantClass, **kw):
    out = normalize(RawAlleleRecord(ref, alleles, ref_or, allele_or, cls), **kw)
    return out.reference, list(out.alleles)


def test_reverse_complement_basic():
    assert reverse_complement("ATCG") == "CGAT"
    assert reverse_complement("AG") == "CT"
    assert reverse_complement("") == ""


def test_reverse_complement_passes_unknown_bases_through():
    assert reverse_complement("ANC") == "GNT"


@pytest.mark.parametrize("seq", ["", "A", "ACGT", "TTTGACN", "GATTACA"])
def test_reverse_complement_is_an_involution(seq):
    assert reverse_complement(reverse_complement(seq)) == seq


def test_forward_alleles_and_reference_are_identity():
    assert _norm("TA", "TG/TA/GG", F, F, VariantClass.MNV) == ("TA", ["TG", "TA", "GG"])
    assert _norm("T", "T/G", F, F, VariantClass.SNV) == ("T", ["T", "G"])
    assert _norm("TGA", "T/TGA", F, F, VariantClass.INDEL) == ("TGA", ["T", "TGA"])


def test_dash_is_empty_regardless_of_orientation():
    assert _norm("-", "-/T", F, F, VariantClass.INDEL) == ("", ["", "T"])
    assert _norm("-", "-/TC", R, F, VariantClass.INDEL) == ("", ["", "TC"])
    assert _norm("-", "-/TC", F, R, VariantClass.INDEL) == ("", ["", "GA"])
    assert _norm("-", "-/TC", R, R, VariantClass.INDEL) == ("", ["", "GA"])


def test_reverse_reference_forward_alleles():
    assert _norm("AG", "-/CT", R, F, VariantClass.INDEL) == ("CT", ["", "CT"])
    assert _norm("TC", "TG/TC/GG", R, F, VariantClass.MNV) == ("GA", ["TG", "TC", "GG"])


def test_forward_reference_reverse_alleles():
    assert _norm("TC", "TG/TC/GG", F, R, VariantClass.MNV) == ("TC", ["CA", "GA", "CC"])
    assert _norm("AG", "-/CT", F, R, VariantClass.INDEL) == ("AG", ["", "AG"])


def test_reverse_alleles_and_reference():
    assert _norm("AG", "-/AG", R, R, VariantClass.INDEL) == ("CT", ["", "CT"])
    assert _norm("T", "T/G", R, R, VariantClass.SNV) == ("A", ["A", "C"])


def test_duplicates_and_order_preserved():
    assert _norm("A", "G/A/G/-", F, F, VariantClass.OTHER) == ("A", ["G", "A", "G", ""])


def test_microsatellite_shorthand_unrolled():
    assert _norm("T", "(T)4/5/7", F, F, VariantClass.MICROSATELLITE) == (
        "T",
        ["TTTT", "TTTTT", "TTTTTTT"],
    )


def test_microsatellite_reverse_alleles_unrolled_then_flipped():
    ref, alleles = _norm("AT", "(A)2(TC)8/(TA)3", F, R, VariantClass.MICROSATELLITE)
    assert ref == "AT"
    assert alleles == ["GA" * 8 + "TT", "TATATA"]


def test_microsatellite_keep_notation():
    assert _norm("T", "(T)4/5/7", F, F, VariantClass.MICROSATELLITE, unroll=False) == (
        "T",
        ["(T)4", "(T)5", "(T)7"],
    )
    assert _norm("AT", "(A)2(TC)8/(TA)3", F, R, VariantClass.MICROSATELLITE, unroll=False) == (
        "AT",
        ["(GA)8(T)2", "(TA)3"],
    )
    assert _norm(
        "T", "(T)4(ACT)3AG(C)5/(T)4AG", F, F, VariantClass.MICROSATELLITE, unroll=False
    ) == ("T", ["(T)4(ACT)3AG(C)5", "(T)4AG"])


def test_repeat_notation_not_parsed_for_other_classes():
    assert _norm("T", "(T)4", F, F, VariantClass.OTHER) == ("T", ["(T)4"])


def test_malformed_microsatellite_propagates():
    with pytest.raises(MalformedRepeatNotation):
        normalize(RawAlleleRecord("T", "4/5", F, F, VariantClass.MICROSATELLITE))


@pytest.mark.parametrize("allele_or", [F, R])
def test_malformed_microsatellite_rejected_when_keeping_notation(allele_or):
    record = RawAlleleRecord("T", "(T)x/5", F, allele_or, VariantClass.MICROSATELLITE)
    with pytest.raises(MalformedRepeatNotation):
        normalize(record, unroll=False)
