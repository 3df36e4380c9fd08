from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Optional

from . import __version__
from .alleles import normalize
from .checkpoint import JsonCheckpoint
from .inputs import read_accessioned_variants, read_raw_allele_records
from .microsatellite import EMPTY_ALLELE
from .pipeline import write_accession_report
from .reference import FastaReference, check_fasta_index
from .summary import render_summary
from .toy_data import make_toy_data
from .utils import open_textmaybe_gzip, write_json
from .vcf import DEFAULT_ACCESSION_PREFIX
from .writer import HEADER_WRITTEN_KEY, HEADER_WRITTEN_VALUE


def _setup_logging(verbosity: int, *, logfile: Optional[Path] = None) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG

    log_fmt = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
    logging.basicConfig(level=level, format=log_fmt, stream=sys.stderr)

    if logfile is not None:
        logfile.parent.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(logfile)
        fh.setLevel(level)
        fh.setFormatter(logging.Formatter(log_fmt))
        logging.getLogger().addHandler(fh)


def _path_exists(p: str) -> str:
    if not Path(p).exists():
        raise argparse.ArgumentTypeError(f"Path does not exist: {p}")
    return p


def _positive_int(v: str) -> int:
    n = int(v)
    if n < 1:
        raise argparse.ArgumentTypeError(f"Expected a positive integer, got {v}")
    return n


def _log_path(outdir: Path, name: str) -> Path:
    return outdir / "logs" / name


def _handle_error(err: Exception, *, log_path: Optional[Path] = None) -> int:
    msg = f"{err.__class__.__name__}: {err}"
    sys.stderr.write(msg + "\n")
    if log_path is not None:
        sys.stderr.write(f"See log: {log_path}\n")
    return 2


def _default_checkpoint(out: Path) -> Path:
    return out.with_name(out.name + ".checkpoint.json")


def _summary_path(out: Path) -> Path:
    return out.with_name(out.name + ".summary.json")


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="accreport",
        description=(
            "accreport: normalize strand-aware dbSNP-style alleles to the forward strand and "
            "write accessioned variants to a restart-safe VCF report."
        ),
    )
    p.add_argument("--version", action="version", version=f"accreport {__version__}")

    sub = p.add_subparsers(dest="cmd", required=True)

    # -----------------
    # quickstart
    # -----------------
    sub.add_parser(
        "quickstart",
        help="Print ready-to-run recipes for common scenarios.",
    )

    # -----------------
    # make-toy-data
    # -----------------
    t = sub.add_parser(
        "make-toy-data",
        help="Generate a tiny reference and input TSVs for demos/tests.",
    )
    t.add_argument("--outdir", required=True, help="Output directory for toy data.")
    t.add_argument("--dry-run", action="store_true", help="Validate paths without writing files.")

    # -----------------
    # normalize
    # -----------------
    n = sub.add_parser(
        "normalize",
        help="Express raw strand-tagged allele records on the forward strand.",
    )
    n.add_argument("--input", required=True, type=_path_exists, help="Raw alleles TSV (.tsv/.tsv.gz).")
    n.add_argument("--out", required=True, help="Output TSV (id, reference, alleles).")
    n.add_argument(
        "--keep-notation",
        action="store_true",
        help="Keep microsatellite alleles in repeat notation instead of unrolling them.",
    )
    n.add_argument("-v", "--verbose", action="count", default=0, help="Increase verbosity (-v/-vv).")

    # -----------------
    # write-report
    # -----------------
    w = sub.add_parser(
        "write-report",
        help="Write accessioned variants to a VCF report, padding empty alleles from the FASTA.",
    )
    w.add_argument("--variants", required=True, type=_path_exists, help="Accessioned variants TSV.")
    w.add_argument("--ref", required=True, type=_path_exists, help="Reference FASTA (indexed).")
    w.add_argument("--out", required=True, help="Report VCF path (appended to, never truncated).")
    w.add_argument(
        "--checkpoint",
        default=None,
        help="Restart checkpoint JSON (default: <out>.checkpoint.json).",
    )
    w.add_argument(
        "--accession-prefix",
        default=DEFAULT_ACCESSION_PREFIX,
        help="Prefix joined to each accession in the ID column (default: ss).",
    )
    w.add_argument(
        "--batch-size",
        type=_positive_int,
        default=1000,
        help="Variants per write batch; each batch is flushed before the next.",
    )
    w.add_argument("--build-index", action="store_true", help="Create the .fai index if missing.")
    w.add_argument("--html", default=None, help="Optional HTML run summary path.")
    w.add_argument("--no-progress", action="store_true", help="Disable the progress bar.")
    w.add_argument("--dry-run", action="store_true", help="Validate inputs and print planned outputs.")
    w.add_argument("-v", "--verbose", action="count", default=0, help="Increase verbosity (-v/-vv).")

    return p


# -----------------
# Command handlers
# -----------------

def cmd_quickstart() -> int:
    lines = [
        "accreport quickstart (copy/paste):",
        "",
        "1) Accessioned variants -> VCF report:",
        "   accreport write-report \\",
        "     --variants accessioned.tsv \\",
        "     --ref ref.fa \\",
        "     --out report.vcf",
        "   Outputs: report.vcf, report.vcf.checkpoint.json, report.vcf.summary.json",
        "   Re-running with the same checkpoint appends without a second header.",
        "",
        "2) Raw dbSNP-style alleles -> forward strand:",
        "   accreport normalize \\",
        "     --input raw_alleles.tsv \\",
        "     --out normalized.tsv",
        "",
        "3) Try it on toy data:",
        "   accreport make-toy-data --outdir toy/",
        "",
        "Tip: use --dry-run to validate inputs before writing anything.",
    ]
    print("\n".join(lines))
    return 0


def cmd_make_toy_data(args: argparse.Namespace) -> int:
    outdir = Path(args.outdir).expanduser().resolve()
    if args.dry_run:
        print(f"Would write toy data into: {outdir}")
        return 0

    summary = make_toy_data(outdir=outdir)
    print(json.dumps(summary, indent=2))
    return 0


def cmd_normalize(args: argparse.Namespace) -> int:
    out = Path(args.out).expanduser().resolve()
    log_path = _log_path(out.parent, "normalize.log")
    _setup_logging(args.verbose, logfile=log_path)

    logger = logging.getLogger("accreport")
    logger.info("accreport %s", __version__)

    try:
        out.parent.mkdir(parents=True, exist_ok=True)
        n_records = 0
        with open_textmaybe_gzip(out, "wt") as fh:
            fh.write("id\treference\talleles\n")
            for record_id, record in read_raw_allele_records(args.input):
                normalized = normalize(record, unroll=not args.keep_notation)
                ref = normalized.reference or EMPTY_ALLELE
                alleles = "/".join(a or EMPTY_ALLELE for a in normalized.alleles)
                fh.write(f"{record_id}\t{ref}\t{alleles}\n")
                n_records += 1
        logger.info("Normalized %d records into %s", n_records, out)
        print(str(out))
        return 0
    except Exception as e:
        return _handle_error(e, log_path=log_path)


def cmd_write_report(args: argparse.Namespace) -> int:
    out = Path(args.out).expanduser().resolve()
    log_path = _log_path(out.parent, "write-report.log")
    _setup_logging(args.verbose, logfile=None if args.dry_run else log_path)

    logger = logging.getLogger("accreport")
    logger.info("accreport %s", __version__)

    checkpoint_path = Path(args.checkpoint) if args.checkpoint else _default_checkpoint(out)

    try:
        if not args.build_index:
            check_fasta_index(args.ref)

        checkpoint = JsonCheckpoint(checkpoint_path)

        if args.dry_run:
            header_done = checkpoint.get(HEADER_WRITTEN_KEY) == HEADER_WRITTEN_VALUE
            print("Dry-run: inputs look OK.")
            print(f"Report exists: {'yes' if out.exists() else 'no'}")
            print(f"Header already written (checkpoint): {'yes' if header_done else 'no'}")
            if out.exists() and not header_done:
                print("Warning: report exists but the checkpoint has no header flag; a second header would be appended.")
            print("Planned outputs:")
            print(f"  report -> {out}")
            print(f"  checkpoint -> {checkpoint_path}")
            print(f"  summary.json -> {_summary_path(out)}")
            if args.html:
                print(f"  html -> {args.html}")
            return 0

        out.parent.mkdir(parents=True, exist_ok=True)

        with FastaReference(args.ref, build_index=bool(args.build_index)) as reference:
            run = write_accession_report(
                variants=read_accessioned_variants(args.variants),
                reference=reference,
                output=out,
                checkpoint=checkpoint,
                accession_prefix=str(args.accession_prefix),
                batch_size=int(args.batch_size),
                progress=not bool(args.no_progress),
            )

        run.update(
            {
                "variants_path": str(args.variants),
                "reference_path": str(args.ref),
                "checkpoint_path": str(checkpoint_path),
            }
        )
        write_json(_summary_path(out), run)

        if args.html:
            render_summary(out_path=args.html, version=__version__, run=run)

        print(str(out))
        return 0
    except Exception as e:
        return _handle_error(e, log_path=None if args.dry_run else log_path)


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.cmd == "quickstart":
        return cmd_quickstart()
    if args.cmd == "make-toy-data":
        return cmd_make_toy_data(args)
    if args.cmd == "normalize":
        return cmd_normalize(args)
    if args.cmd == "write-report":
        return cmd_write_report(args)

    parser.error(f"Unknown command: {args.cmd}")
    return 2


if __name__ == "__main__":
    raise SystemExit(main())
