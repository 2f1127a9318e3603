"""Enumerations shared across the commission domain."""

from enum import Enum, unique


@unique
class PersonType(str, Enum):
    """Kind of party performing an operation."""

    NATURAL = "natural"
    LEGAL = "legal"


@unique
class OperationType(str, Enum):
    """Kind of operation. Values are the identifiers used in input files."""

    DEPOSIT = "cash_in"
    WITHDRAWAL = "cash_out"


@unique
class CrossRounding(str, Enum):
    """How many times a conversion between two non-main currencies rounds."""

    PER_LEG = "per_leg"  # X -> main (round) -> Y (round)
    ONCE = "once"  # composed rate, single rounding
