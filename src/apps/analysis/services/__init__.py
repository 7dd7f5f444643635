"""
Snapshot analysis and export services.

Loads stored datasets, runs the reconciliation analysis on them and writes
the results to Excel.
"""

from .excel_export import AnalysisWorkbookBuilder
from .pipeline import (
    AnalysisResult,
    SnapshotDatasets,
    get_snapshot,
    load_snapshot_datasets,
    run_snapshot_analysis,
)

__all__ = [
    "AnalysisResult",
    "AnalysisWorkbookBuilder",
    "SnapshotDatasets",
    "get_snapshot",
    "load_snapshot_datasets",
    "run_snapshot_analysis",
]
