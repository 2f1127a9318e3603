"""Source adapters for operation files (file I/O only)."""

from commission_ingestion.adapters.csv_adapter import OPERATION_COLUMNS, CsvOperationAdapter

__all__ = [
    "OPERATION_COLUMNS",
    "CsvOperationAdapter",
]
