"""Persist error series and comparison tables to disk."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Optional

import numpy as np
import pandas as pd

from ..models.results import ConvergenceResult

LOGGER = logging.getLogger(__name__)


def _json_default(obj: object) -> object:
    """JSON serializer that handles numpy/path objects."""
    if isinstance(obj, np.integer):
        return int(obj)
    if isinstance(obj, np.floating):
        return float(obj)
    if isinstance(obj, datetime):
        return obj.isoformat()
    if isinstance(obj, Path):
        return str(obj)
    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")


def _slug(text: str) -> str:
    keep = [ch if ch.isalnum() or ch in "-_." else "_" for ch in text]
    return "".join(keep).strip("_") or "series"


class ReportGenerator:
    """Write error tables as CSV with a JSON metadata sidecar."""

    def __init__(
        self,
        output_dir: str | Path = "output",
        *,
        timestamped: bool = False,
        run_label: Optional[str] = None,
    ) -> None:
        base_dir = Path(output_dir)
        if timestamped:
            run_label = run_label or datetime.now(timezone.utc).strftime("run_%Y%m%d_%H%M%S")
            self.output_dir = base_dir / run_label
        else:
            self.output_dir = base_dir
        self.output_dir.mkdir(parents=True, exist_ok=True)
        self.base_dir = base_dir
        self.run_label = self.output_dir.name

    # ------------------------------------------------------------------ helpers
    def _write_json(self, payload: Dict[str, object], filename: str) -> Path:
        path = self.output_dir / filename
        with path.open("w", encoding="utf-8") as fh:
            json.dump(payload, fh, indent=2, default=_json_default)
        return path

    def _write_csv(self, frame: pd.DataFrame, filename: str) -> Path:
        path = self.output_dir / filename
        frame.to_csv(path, index=False, float_format="%.6f")
        return path

    # ------------------------------------------------------------------ exports
    def export_series(self, result: ConvergenceResult, filename: Optional[str] = None) -> Path:
        """Export one error series; returns the CSV path."""
        stem = filename or _slug(f"errors_{result.integrand}_{Path(result.source or 'samples').stem}")
        if stem.endswith(".csv"):
            stem = stem[: -len(".csv")]
        csv_path = self._write_csv(result.to_frame(), f"{stem}.csv")
        final = result.final_point()
        metadata: Dict[str, object] = {
            "integrand": result.integrand,
            "reference": result.reference,
            "source": result.source,
            "sample_count": result.sample_count,
            "sequence_count": result.sequence_count,
            "reported_points": len(result.points),
            "final_mean_error": final.mean_error if final else None,
            "final_max_error": final.max_error if final else None,
            "generated_at": datetime.now(timezone.utc),
            **result.metadata,
        }
        self._write_json(metadata, f"{stem}.json")
        LOGGER.info("Exported %d error points to %s", len(result.points), csv_path)
        return csv_path

    def export_comparison(self, results: Dict[str, ConvergenceResult], filename: str = "comparison") -> Path:
        """Export mean errors of several series side by side, keyed by label."""
        frame = comparison_frame(results)
        csv_path = self._write_csv(frame, f"{_slug(filename)}.csv")
        self._write_json(
            {
                "labels": list(results),
                "sources": {label: res.source for label, res in results.items()},
                "integrands": sorted({res.integrand for res in results.values()}),
                "generated_at": datetime.now(timezone.utc),
            },
            f"{_slug(filename)}.json",
        )
        return csv_path


def comparison_frame(results: Dict[str, ConvergenceResult]) -> pd.DataFrame:
    """Join mean-error columns of several series on ``sample_count``."""
    columns = []
    for label, result in results.items():
        frame = result.to_frame().set_index("sample_count")["mean_error"].rename(label)
        columns.append(frame)
    if not columns:
        return pd.DataFrame(columns=["sample_count"])
    return pd.concat(columns, axis=1).sort_index().reset_index()


__all__ = ["ReportGenerator", "comparison_frame"]
