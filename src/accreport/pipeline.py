from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Dict, Iterable, Optional

from tqdm import tqdm

from .checkpoint import CheckpointStore
from .models import AccessionedVariant
from .padding import needs_context_base
from .reference import ReferenceSequenceProvider
from .utils import chunked
from .vcf import DEFAULT_ACCESSION_PREFIX
from .writer import AccessionReportWriter

logger = logging.getLogger(__name__)


def write_accession_report(
    *,
    variants: Iterable[AccessionedVariant],
    reference: ReferenceSequenceProvider,
    output: str | Path,
    checkpoint: CheckpointStore,
    accession_prefix: str = DEFAULT_ACCESSION_PREFIX,
    batch_size: int = 1000,
    progress: bool = True,
    total: Optional[int] = None,
) -> Dict[str, object]:
    """Open the writer, stream variants through it in batches, close it.

    Each batch is flushed on its own; a failing record aborts the run after
    the batches already flushed. Returns a summary dict.
    """
    if batch_size < 1:
        raise ValueError("batch_size must be >= 1")

    t0 = time.time()
    writer = AccessionReportWriter(output, reference, accession_prefix=accession_prefix)
    outcome = writer.open(checkpoint)

    counts = {
        "records_total": 0,
        "records_written": 0,
        "records_padded": 0,
        "batches": 0,
    }

    it: Iterable[AccessionedVariant] = variants
    if progress:
        it = tqdm(it, unit="variant", desc="Writing report", total=total)

    try:
        for batch in chunked(it, batch_size):
            counts["records_total"] += len(batch)
            counts["records_written"] += writer.write(batch)
            counts["records_padded"] += sum(1 for item in batch if needs_context_base(item.variant))
            counts["batches"] += 1
    finally:
        writer.close()

    dt = time.time() - t0
    logger.info(
        "Wrote %d records (%d padded) to %s in %.1fs",
        counts["records_written"],
        counts["records_padded"],
        output,
        dt,
    )

    return {
        "output_path": str(output),
        "accession_prefix": accession_prefix,
        "open_outcome": outcome.value,
        "batch_size": int(batch_size),
        "counts": counts,
        "runtime_seconds": float(dt),
    }
