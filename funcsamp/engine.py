"""High-level orchestration for convergence studies."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterator, Mapping, Optional, Union

import yaml

from .config import DEFAULT_HEADER_LINES, DEFAULT_SAMPLE_COUNT, DEFAULT_SEQUENCE_COUNT, REPORT_STRIDE
from .core import estimator
from .core.integrands import DEFAULT_CATALOG, Integrand, IntegrandCatalog
from .core.sample_loader import SampleLoader, SampleSource
from .core.validator import MalformedInput, SourceUnavailable, validate_counts
from .models.results import ConvergenceResult, ErrorPoint
from .models.samples import SampleTable

LOGGER = logging.getLogger(__name__)


@dataclass
class EstimationConfig:
    """Parameters of a single convergence run."""

    integrand: str
    sample_count: int = DEFAULT_SAMPLE_COUNT
    sequence_count: int = DEFAULT_SEQUENCE_COUNT
    header_lines: int = DEFAULT_HEADER_LINES
    stride: int = REPORT_STRIDE
    strict: bool = False

    def __post_init__(self) -> None:
        validate_counts(self.sample_count, self.sequence_count)

    def to_metadata(self) -> Dict[str, object]:
        """Serialise into a plain dictionary for persistence."""
        return {
            "integrand": self.integrand,
            "sample_count": int(self.sample_count),
            "sequence_count": int(self.sequence_count),
            "header_lines": int(self.header_lines),
            "stride": int(self.stride),
            "strict": bool(self.strict),
        }

    @classmethod
    def from_metadata(cls, metadata: Mapping[str, object]) -> "EstimationConfig":
        """Rehydrate a configuration from :meth:`to_metadata` output."""
        if "integrand" not in metadata:
            raise ValueError("Configuration requires an 'integrand' entry")
        return cls(
            integrand=str(metadata["integrand"]),
            sample_count=int(metadata.get("sample_count", DEFAULT_SAMPLE_COUNT)),
            sequence_count=int(metadata.get("sequence_count", DEFAULT_SEQUENCE_COUNT)),
            header_lines=int(metadata.get("header_lines", DEFAULT_HEADER_LINES)),
            stride=int(metadata.get("stride", REPORT_STRIDE)),
            strict=bool(metadata.get("strict", False)),
        )


@dataclass
class ComparisonPlan:
    """A single integrand evaluated against several labelled sample sources."""

    config: EstimationConfig
    sources: Dict[str, Path]

    @classmethod
    def from_yaml(cls, path: Union[str, Path]) -> "ComparisonPlan":
        """
        Load a comparison plan, e.g.::

            integrand: quarterdisk
            sample_count: 1024
            sequence_count: 100
            sources:
              random: random_1024samples_100sequences.data
              halton: halton_base23_owen_1024samples_100sequences.data

        Relative source paths are resolved against the plan's directory.
        """
        path = Path(path)
        try:
            with path.open("r", encoding="utf-8") as fh:
                data = yaml.safe_load(fh) or {}
        except OSError as exc:
            raise SourceUnavailable(f"cannot open file '{path}': {exc.strerror or exc}") from exc
        except yaml.YAMLError as exc:
            raise MalformedInput(f"Invalid comparison plan {path}: {exc}") from exc
        if not isinstance(data, dict):
            raise MalformedInput(f"Comparison plan {path} must be a mapping")
        sources = data.get("sources")
        if not isinstance(sources, dict) or not sources:
            raise MalformedInput(f"Comparison plan {path} must list at least one source")
        config = EstimationConfig.from_metadata({k: v for k, v in data.items() if k != "sources"})
        resolved = {}
        for label, source in sources.items():
            source_path = Path(str(source))
            if not source_path.is_absolute():
                source_path = path.parent / source_path
            resolved[str(label)] = source_path
        return cls(config=config, sources=resolved)


class ConvergenceStudy:
    """Primary entry point wiring the catalog, the loader and the estimator."""

    def __init__(self, config: EstimationConfig, catalog: Optional[IntegrandCatalog] = None) -> None:
        self.config = config
        self.catalog = catalog if catalog is not None else DEFAULT_CATALOG
        self.integrand: Integrand = self.catalog.lookup(config.integrand)
        self.table: Optional[SampleTable] = None

    def load(self, source: SampleSource) -> SampleTable:
        """Load the configured number of sequences and samples from ``source``."""
        loader = SampleLoader(self.config.header_lines, strict=self.config.strict)
        self.table = loader.load(source, self.config.sequence_count, self.config.sample_count)
        return self.table

    def iter_errors(self, table: Optional[SampleTable] = None) -> Iterator[ErrorPoint]:
        """Return the lazy error series for ``table`` (or the last loaded table)."""
        table = table if table is not None else self.table
        if table is None:
            raise RuntimeError("No sample table loaded; call load() first.")
        LOGGER.info(
            "Estimating %s over %d sequences x %d samples",
            self.integrand.name,
            self.config.sequence_count,
            self.config.sample_count,
        )
        return estimator.run(
            self.integrand,
            table,
            self.config.sample_count,
            self.config.sequence_count,
            stride=self.config.stride,
        )

    def run(self, source: SampleSource, label: Optional[str] = None) -> ConvergenceResult:
        """Load ``source`` and collect the full error series."""
        table = self.load(source)
        points = list(self.iter_errors(table))
        return self.to_result(points, label or table.source)

    def to_result(self, points, source: Optional[str] = None) -> ConvergenceResult:
        return ConvergenceResult(
            integrand=self.integrand.name,
            reference=self.integrand.reference,
            source=source,
            sample_count=self.config.sample_count,
            sequence_count=self.config.sequence_count,
            points=list(points),
            metadata={"config": self.config.to_metadata()},
        )


def run_comparison(plan: ComparisonPlan, catalog: Optional[IntegrandCatalog] = None) -> Dict[str, ConvergenceResult]:
    """Run every source of ``plan`` and return results keyed by label."""
    study = ConvergenceStudy(plan.config, catalog=catalog)
    results: Dict[str, ConvergenceResult] = {}
    for label, source in plan.sources.items():
        LOGGER.info("Comparing source %s (%s)", label, source)
        result = study.run(source, label=str(source))
        results[label] = result
    return results


__all__ = ["ComparisonPlan", "ConvergenceStudy", "EstimationConfig", "run_comparison"]
