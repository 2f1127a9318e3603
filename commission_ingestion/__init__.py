"""
commission_ingestion -- reading operation files into typed records.

Adapters do file I/O only and yield one dict per row. ``domain.records``
turns each dict into an ``OperationRecord`` or raises ``InvalidRecordError``.
Nothing here computes commissions.
"""

from commission_ingestion.adapters.csv_adapter import OPERATION_COLUMNS, CsvOperationAdapter
from commission_ingestion.domain.records import OperationRecord, parse_record

__all__ = [
    "OPERATION_COLUMNS",
    "CsvOperationAdapter",
    "OperationRecord",
    "parse_record",
]
