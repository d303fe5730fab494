"""
Export helpers for decisions.

The writers create parent directories and return the written ``Path``.

``resolve_output_path()`` applies the configured output directory to bare
file names. ``write_decision_json()`` writes the serving-layer wire shape
(``Decision.to_json_dict()``). ``flatten_windows_for_export()`` turns the
scored horizon into one flat row per window, loadable directly in a
spreadsheet for auditing scores against their component breakdown.
"""

from __future__ import annotations

import csv
import json
from pathlib import Path

from aurora_engine.models.decision import Decision


def resolve_output_path(output_path: str | Path, output_dir: str | Path) -> Path:
    """Place a bare file name under ``output_dir``; other paths are kept as given.

    ``"decision.json"`` becomes ``<output_dir>/decision.json`` while
    ``"out/decision.json"`` and absolute paths are used unchanged.
    """
    path = Path(output_path)
    if path.is_absolute() or path.parent != Path("."):
        return path
    return Path(output_dir) / path


def write_decision_json(decision: Decision, path: Path) -> Path:
    """Write ``decision`` as pretty-printed camelCase JSON.

    Args:
        decision: Decision to serialize.
        path:     Destination file path (parent dirs created if missing).

    Returns:
        ``path`` as written.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        json.dumps(decision.to_json_dict(), indent=2, ensure_ascii=False),
        encoding="utf-8",
    )
    return path


def flatten_windows_for_export(decision: Decision) -> list[dict]:
    """One flat row per scored window, including the score components.

    Args:
        decision: Decision whose windows are exported.

    Returns:
        List of flat row dicts, in horizon order.
    """
    rows: list[dict] = []
    for w in decision.windows:
        comps = w.component_breakdown
        rows.append(
            {
                "timestamp":        w.timestamp.isoformat(),
                "ads":              w.ads,
                "classification":   str(w.classification),
                "is_dark_enough":   w.is_dark_enough,
                "twilight_phase":   str(w.twilight_phase),
                "kp_score":         round(comps.kp_score, 2),
                "bz_score":         comps.bz_score,
                "wind_score":       comps.wind_score,
                "density_score":    comps.density_score,
                "cloud_penalty":    round(comps.cloud_penalty, 2),
                "raw_score":        round(comps.raw_score, 2),
                "forecast_probability_percent": w.forecast_probability_percent,
            }
        )
    return rows


def export_windows_csv(decision: Decision, path: Path) -> Path:
    """Write :func:`flatten_windows_for_export` rows to a UTF-8 CSV file.

    Returns:
        ``path`` as written.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    rows = flatten_windows_for_export(decision)
    with path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=list(rows[0].keys()))
        writer.writeheader()
        writer.writerows(rows)
    return path
