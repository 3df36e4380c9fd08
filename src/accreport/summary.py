from __future__ import annotations

import datetime as _dt
import logging
from pathlib import Path
from typing import Any, Dict

from jinja2 import Template

logger = logging.getLogger(__name__)


_SUMMARY_TEMPLATE = Template(
    """<!doctype html>
<html lang="en">
<head>
  <meta charset="utf-8">
  <title>Accession report summary</title>
  <style>
    body { font-family: Arial, Helvetica, sans-serif; margin: 24px; }
    code, pre { background: #f6f8fa; padding: 2px 4px; border-radius: 4px; }
    h1, h2, h3 { margin-top: 1.2em; }
    table { border-collapse: collapse; margin-top: 0.6em; }
    th, td { border: 1px solid #ddd; padding: 8px; }
    th { background: #f2f2f2; text-align: left; }
    .grid { display: grid; grid-template-columns: 1fr 1fr; gap: 16px; }
    .card { border: 1px solid #ddd; border-radius: 8px; padding: 12px; }
    .small { color: #666; font-size: 0.9em; }
    .warn { color: #a15c00; font-weight: bold; }
  </style>
</head>
<body>

<h1>Accession report summary</h1>
<p class="small">Generated: {{ generated_at }}</p>

<div class="grid">
  <div class="card">
    <h3>Inputs</h3>
    <table>
      <tr><th>Variants</th><td><code>{{ variants_path }}</code></td></tr>
      <tr><th>Reference FASTA</th><td><code>{{ reference_path }}</code></td></tr>
      <tr><th>Checkpoint</th><td><code>{{ checkpoint_path }}</code></td></tr>
    </table>
  </div>
  <div class="card">
    <h3>Output</h3>
    <table>
      <tr><th>Report VCF</th><td><code>{{ output_path }}</code></td></tr>
      <tr><th>Accession prefix</th><td><code>{{ accession_prefix }}</code></td></tr>
      <tr><th>Header</th><td>{{ open_outcome }}</td></tr>
    </table>
  </div>
</div>

{% if open_outcome == "restart_warning" %}
<p class="warn">The report already existed but the checkpoint said no header had been written.
Records were appended; the file may contain two header sections.</p>
{% endif %}

<h2>Records</h2>
<table>
  <tr><th>Variants read</th><td>{{ counts.records_total }}</td></tr>
  <tr><th>Lines written</th><td>{{ counts.records_written }}</td></tr>
  <tr><th>Padded with a context base</th><td>{{ counts.records_padded }}</td></tr>
  <tr><th>Batches</th><td>{{ counts.batches }}</td></tr>
</table>

<hr>
<p class="small">accreport {{ version }}</p>
</body>
</html>"""
)


def render_summary(
    *,
    out_path: str | Path,
    version: str,
    run: Dict[str, Any],
) -> Path:
    out_path = Path(out_path)
    out_path.parent.mkdir(parents=True, exist_ok=True)

    html = _SUMMARY_TEMPLATE.render(
        generated_at=_dt.datetime.now().isoformat(timespec="seconds"),
        version=version,
        variants_path=run.get("variants_path"),
        reference_path=run.get("reference_path"),
        checkpoint_path=run.get("checkpoint_path"),
        output_path=run.get("output_path"),
        accession_prefix=run.get("accession_prefix"),
        open_outcome=run.get("open_outcome"),
        counts=run.get("counts", {}),
    )

    out_path.write_text(html, encoding="utf-8")
    logger.info("Wrote HTML summary to %s", out_path)
    return out_path
