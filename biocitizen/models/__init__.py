"""Domain models for the BioCitizen analysis engine.

Value objects passed between the table readers, the normalizer, the index
calculator and the prompt bridge. All of them are frozen dataclasses.
"""

from .column_selection import ColumnSelection
from .diversity_indices import DiversityIndices
from .normalization import NormalizationReport, SpeciesCountMap
from .processing_result import AnalysisRunResult, FileStat
from .provenance import Provenance
from .table_data import Record, TableData

__all__ = [
    # Input models
    "Record",
    "TableData",
    "ColumnSelection",
    # Derived models
    "SpeciesCountMap",
    "NormalizationReport",
    "DiversityIndices",
    "Provenance",
    # Run results
    "FileStat",
    "AnalysisRunResult",
]
