"""Typed records produced by ingestion."""

from commission_ingestion.domain.records import OperationRecord, parse_record

__all__ = ["OperationRecord", "parse_record"]
