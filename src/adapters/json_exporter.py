"""JSON export of a build report.

Why JSON:
- CI jobs can archive which step failed and how long each one took.
- Stable key order keeps reports diffable between runs.
"""

from __future__ import annotations

import json
from pathlib import Path

from core.domain.models import BuildReport


def export_report_json(*, report: BuildReport, output_path: Path) -> Path:
    """Export `BuildReport` as UTF-8 JSON with a stable layout."""

    output_path.parent.mkdir(parents=True, exist_ok=True)
    payload = report.model_dump(mode="json")
    payload["ok"] = report.ok
    payload["exit_code"] = report.exit_code
    output_path.write_text(
        json.dumps(payload, ensure_ascii=False, indent=2, sort_keys=True) + "\n",
        encoding="utf-8",
    )
    return output_path
