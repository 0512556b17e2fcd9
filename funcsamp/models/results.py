"""Result data models for error series and reporting."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import pandas as pd
from pydantic import BaseModel, ConfigDict, Field

SERIES_COLUMNS = ["sample_count", "mean_error", "max_error"]


class ErrorPoint(BaseModel):
    """Cross-sequence error aggregate at a single sample count."""

    model_config = ConfigDict(frozen=True)

    sample_count: int = Field(..., ge=1, description="Number of samples used per sequence")
    mean_error: float = Field(..., ge=0, description="Mean absolute error over sequences")
    max_error: float = Field(..., ge=0, description="Largest absolute error over sequences")

    def as_tuple(self) -> tuple:
        return (self.sample_count, self.mean_error, self.max_error)


class ConvergenceResult(BaseModel):
    """A complete error series for one integrand and one sample source."""

    integrand: str = Field(..., description="Integrand name")
    reference: float = Field(..., description="Reference integral value")
    source: Optional[str] = Field(None, description="Sample source label or path")
    sample_count: int = Field(..., ge=1)
    sequence_count: int = Field(..., ge=1)
    points: List[ErrorPoint] = Field(default_factory=list)
    metadata: Dict[str, Any] = Field(default_factory=dict)

    def to_frame(self) -> pd.DataFrame:
        """Return the series as a dataframe with one row per reported sample count."""
        if not self.points:
            return pd.DataFrame(columns=SERIES_COLUMNS)
        return pd.DataFrame([p.as_tuple() for p in self.points], columns=SERIES_COLUMNS)

    def final_point(self) -> Optional[ErrorPoint]:
        return self.points[-1] if self.points else None


__all__ = ["ConvergenceResult", "ErrorPoint", "SERIES_COLUMNS"]
