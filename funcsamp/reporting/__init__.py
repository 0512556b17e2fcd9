"""Reporting utilities for error series."""

from .report_generator import ReportGenerator
from .reporter import ErrorReporter, SeriesRecorder

__all__ = ["ErrorReporter", "ReportGenerator", "SeriesRecorder"]
