import json
from pathlib import Path

import pytest

from accreport.checkpoint import JsonCheckpoint, MemoryCheckpoint
from accreport.models import AccessionedVariant, ReportRecord, SubmittedVariant
from accreport.padding import UnknownContig
from accreport.vcf import COLUMN_HEADER_LINE, FILEFORMAT_LINE, build_record
from accreport.writer import (
    HEADER_WRITTEN_KEY,
    AccessionReportWriter,
    OpenOutcome,
    WriterNotOpen,
    WriterState,
    WriterStateError,
)

HEADER = [FILEFORMAT_LINE, COLUMN_HEADER_LINE]


def make_variant(start: int, ref: str, alt: str, contig: str = "chr1") -> SubmittedVariant:
    return SubmittedVariant(
        assembly="GCA_000001405.15",
        taxonomy=9606,
        project="PRJEB0001",
        contig=contig,
        start=start,
        reference_allele=ref,
        alternate_allele=alt,
    )


def _lines(path: Path) -> list[str]:
    return path.read_text(encoding="utf-8").splitlines()


def test_header_constants():
    assert FILEFORMAT_LINE == "##fileformat=VCFv4.2"
    assert COLUMN_HEADER_LINE == "#CHROM\tPOS\tID\tREF\tALT\tQUAL\tFILTER\tINFO"


def test_build_record_plain_snv(reference):
    record = build_record("ss", 123, make_variant(3, "C", "T"), reference)
    assert record == ReportRecord(contig="chr1", position=3, identifier="ss123", ref="C", alt="T")
    assert record.to_line() == "chr1\t3\tss123\tC\tT\t.\t.\t."


def test_build_record_pads_empty_allele(reference):
    record = build_record("rs", 7, make_variant(5, "", "CC"), reference)
    assert record.to_line() == "chr1\t4\trs7\tG\tGCC\t.\t.\t."


def test_fresh_open_writes_header_then_data(tmp_path: Path, reference):
    out = tmp_path / "report.vcf"
    checkpoint = MemoryCheckpoint()
    writer = AccessionReportWriter(out, reference)

    assert writer.open(checkpoint) is OpenOutcome.HEADER_WRITTEN
    assert checkpoint.get(HEADER_WRITTEN_KEY) == "true"
    assert writer.write([AccessionedVariant(1, make_variant(3, "C", "T"))]) == 1
    writer.close()

    assert _lines(out) == HEADER + ["chr1\t3\tss1\tC\tT\t.\t.\t."]
    assert writer.state is WriterState.CLOSED


def test_reopen_with_flag_set_writes_no_second_header(tmp_path: Path, reference):
    out = tmp_path / "report.vcf"
    checkpoint = MemoryCheckpoint()

    first = AccessionReportWriter(out, reference)
    first.open(checkpoint)
    first.write([AccessionedVariant(1, make_variant(3, "C", "T"))])
    first.close()

    second = AccessionReportWriter(out, reference)
    assert second.open(checkpoint) is OpenOutcome.HEADER_ALREADY_WRITTEN
    second.write([AccessionedVariant(2, make_variant(1, "", "G"))])
    second.close()

    lines = _lines(out)
    assert lines == HEADER + [
        "chr1\t3\tss1\tC\tT\t.\t.\t.",
        "chr1\t2\tss2\tA\tGA\t.\t.\t.",
    ]
    assert sum(1 for line in lines if line.startswith("#")) == 2


def test_existing_output_without_flag_appends_with_warning(tmp_path: Path, reference, caplog):
    out = tmp_path / "report.vcf"
    out.write_text("previous content\n", encoding="utf-8")
    checkpoint = MemoryCheckpoint()

    writer = AccessionReportWriter(out, reference)
    with caplog.at_level("WARNING", logger="accreport.writer"):
        outcome = writer.open(checkpoint)
    writer.close()

    assert outcome is OpenOutcome.RESTART_WARNING
    assert "should not exist" in caplog.text
    assert _lines(out) == ["previous content"] + HEADER
    assert checkpoint.get(HEADER_WRITTEN_KEY) == "true"


def test_write_before_open_fails_and_leaves_no_output(tmp_path: Path, reference):
    out = tmp_path / "report.vcf"
    writer = AccessionReportWriter(out, reference)
    with pytest.raises(WriterNotOpen):
        writer.write([AccessionedVariant(1, make_variant(3, "C", "T"))])
    assert not out.exists()


def test_write_after_close_and_double_close_fail(tmp_path: Path, reference):
    writer = AccessionReportWriter(tmp_path / "report.vcf", reference)
    writer.open(MemoryCheckpoint())
    writer.close()
    with pytest.raises(WriterNotOpen):
        writer.write([])
    with pytest.raises(WriterNotOpen):
        writer.close()


def test_open_twice_fails(tmp_path: Path, reference):
    writer = AccessionReportWriter(tmp_path / "report.vcf", reference)
    writer.open(MemoryCheckpoint())
    with pytest.raises(WriterStateError):
        writer.open(MemoryCheckpoint())
    writer.close()


def test_failing_batch_writes_nothing(tmp_path: Path, reference):
    out = tmp_path / "report.vcf"
    writer = AccessionReportWriter(out, reference)
    writer.open(MemoryCheckpoint())
    batch = [
        AccessionedVariant(1, make_variant(3, "C", "T")),
        AccessionedVariant(2, make_variant(3, "", "T", contig="chrUn")),
    ]
    with pytest.raises(UnknownContig):
        writer.write(batch)
    writer.close()
    assert _lines(out) == HEADER


def test_custom_accession_prefix(tmp_path: Path, reference):
    out = tmp_path / "report.vcf"
    writer = AccessionReportWriter(out, reference)
    assert writer.accession_prefix == "ss"
    writer.accession_prefix = "rs"
    writer.open(MemoryCheckpoint())
    writer.write([AccessionedVariant(42, make_variant(3, "C", "T"))])
    with pytest.raises(WriterStateError):
        writer.accession_prefix = "ss"
    writer.close()
    assert _lines(out)[-1].split("\t")[2] == "rs42"


def test_json_checkpoint_survives_restart(tmp_path: Path, reference):
    out = tmp_path / "report.vcf"
    ckpt_path = tmp_path / "ckpt.json"

    writer = AccessionReportWriter(out, reference)
    writer.open(JsonCheckpoint(ckpt_path))
    writer.close()
    assert json.loads(ckpt_path.read_text(encoding="utf-8")) == {HEADER_WRITTEN_KEY: "true"}

    writer = AccessionReportWriter(out, reference)
    assert writer.open(JsonCheckpoint(ckpt_path)) is OpenOutcome.HEADER_ALREADY_WRITTEN
    writer.close()
    assert _lines(out) == HEADER


class _FailingCheckpoint(MemoryCheckpoint):
    def put(self, key: str, value: str) -> None:
        raise OSError("disk full")


def test_checkpoint_failure_during_open_closes_output(tmp_path: Path, reference):
    writer = AccessionReportWriter(tmp_path / "report.vcf", reference)
    with pytest.raises(OSError, match="disk full"):
        writer.open(_FailingCheckpoint())
    assert writer.state is WriterState.CLOSED
    with pytest.raises(WriterNotOpen):
        writer.write([AccessionedVariant(1, make_variant(3, "C", "T"))])
    with pytest.raises(WriterNotOpen):
        writer.close()


def test_json_checkpoint_put_replaces_file(tmp_path: Path):
    ckpt_path = tmp_path / "state" / "ckpt.json"
    ckpt_path.parent.mkdir()
    ckpt_path.write_text('{"old": "1"}', encoding="utf-8")

    store = JsonCheckpoint(ckpt_path)
    store.put(HEADER_WRITTEN_KEY, "true")

    assert json.loads(ckpt_path.read_text(encoding="utf-8")) == {"old": "1", HEADER_WRITTEN_KEY: "true"}
    assert sorted(p.name for p in ckpt_path.parent.iterdir()) == ["ckpt.json"]
