from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path
from typing import Iterable, List, Optional, TextIO

from .checkpoint import CheckpointStore
from .models import AccessionedVariant
from .reference import ReferenceSequenceProvider
from .vcf import DEFAULT_ACCESSION_PREFIX, build_record, header_lines

logger = logging.getLogger(__name__)

HEADER_WRITTEN_KEY = "AccessionReportWriter_isHeaderWritten"
HEADER_WRITTEN_VALUE = "true"


class WriterStateError(RuntimeError):
    """An operation was called in the wrong writer state."""


class WriterNotOpen(WriterStateError):
    """write() or close() was called before open() or after close()."""


class WriterState(Enum):
    UNOPENED = "unopened"
    OPEN = "open"
    CLOSED = "closed"


class OpenOutcome(Enum):
    HEADER_WRITTEN = "header_written"
    HEADER_ALREADY_WRITTEN = "header_already_written"
    # flag unset but the output exists: header appended after existing content
    RESTART_WARNING = "restart_warning"


class AccessionReportWriter:
    """Append-only VCF sink for accessioned variants.

    The header is written at most once per output across restarts, tracked with
    a flag in the checkpoint store passed to :meth:`open`. The output is always
    opened for appending so lines written before a crash survive a restart.

    Not thread-safe: exactly one writer may own an output at a time.
    """

    def __init__(
        self,
        output: str | Path,
        reference: ReferenceSequenceProvider,
        *,
        accession_prefix: str = DEFAULT_ACCESSION_PREFIX,
    ) -> None:
        self.output = Path(output)
        self.reference = reference
        self._accession_prefix = accession_prefix
        self._fh: Optional[TextIO] = None
        self.state = WriterState.UNOPENED
        self.lines_written = 0

    @property
    def accession_prefix(self) -> str:
        return self._accession_prefix

    @accession_prefix.setter
    def accession_prefix(self, value: str) -> None:
        if self.lines_written:
            raise WriterStateError("accession_prefix cannot change after records were written")
        self._accession_prefix = value

    def open(self, checkpoint: CheckpointStore) -> OpenOutcome:
        if self.state is not WriterState.UNOPENED:
            raise WriterStateError(f"Cannot open writer in state '{self.state.value}'")

        header_already_written = checkpoint.get(HEADER_WRITTEN_KEY) == HEADER_WRITTEN_VALUE
        outcome = OpenOutcome.HEADER_ALREADY_WRITTEN
        if not header_already_written:
            outcome = OpenOutcome.HEADER_WRITTEN
            if self.output.exists():
                logger.warning(
                    "According to the checkpoint, the accession report %s should not exist, but it "
                    "does. Appending to it; the report may end up with 2 non-contiguous header "
                    "sections. This can happen if the checkpoint was not restored properly.",
                    self.output,
                )
                outcome = OpenOutcome.RESTART_WARNING

        self._fh = open(self.output, "a", encoding="utf-8")
        self.state = WriterState.OPEN

        if not header_already_written:
            try:
                self._fh.write("\n".join(header_lines()) + "\n")
                self._fh.flush()
                checkpoint.put(HEADER_WRITTEN_KEY, HEADER_WRITTEN_VALUE)
            except Exception:
                self._fh.close()
                self._fh = None
                self.state = WriterState.CLOSED
                raise
            logger.info("Wrote report header to %s", self.output)
        else:
            logger.info("Header already written to %s; resuming", self.output)
        return outcome

    def _require_open(self) -> TextIO:
        if self.state is not WriterState.OPEN or self._fh is None:
            raise WriterNotOpen(
                f"The file {self.output} was not opened properly. "
                "Hint: check that open() was called before write() and not after close()"
            )
        return self._fh

    def write(self, accessioned_variants: Iterable[AccessionedVariant]) -> int:
        """Append one line per variant and flush.

        Every line of the batch is built before anything is written, so a bad
        record (e.g. unknown contig) leaves the output untouched.
        """
        fh = self._require_open()
        lines: List[str] = [
            build_record(self._accession_prefix, item.accession, item.variant, self.reference).to_line()
            for item in accessioned_variants
        ]
        for line in lines:
            fh.write(line + "\n")
        fh.flush()
        self.lines_written += len(lines)
        return len(lines)

    def close(self) -> None:
        fh = self._require_open()
        fh.flush()
        fh.close()
        self._fh = None
        self.state = WriterState.CLOSED
        logger.info("Closed %s after %d records", self.output, self.lines_written)
