"""
Typed Exception Hierarchy for the Commission Kernel.

===============================================================================
WHY TYPED EXCEPTIONS
===============================================================================

Commission rules reject input that configuration does not know about. The
caller (the batch driver) must be able to tell those rejections apart
without parsing message strings:

  1. Every error has a TYPED exception class (catch by type, not message)
  2. Every exception has a CODE attribute (machine-readable)
  3. Exceptions carry structured DATA (the rejected value, the allowed set)

Example:
    try:
        calculator.calculate(record)
    except UnsupportedCurrencyError as e:
        log.warning("skipping row", extra={"currency": e.currency})
        outcome = {"code": e.code, "currency": e.currency}

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

All exceptions inherit from CommissionKernelError:

    CommissionKernelError (base)
    |
    +-- CurrencyError
    |   +-- UnsupportedCurrencyError
    |   +-- CurrencyMismatchError
    |
    +-- PersonError
    |   +-- UnsupportedPersonTypeError
    |
    +-- OperationError
    |   +-- UnsupportedOperationTypeError
    |   +-- UnexpectedOperationTypeError
    |
    +-- AmountError
    |   +-- AmountOutOfRangeError
    |
    +-- RecordError
        +-- InvalidRecordError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category        | Code                        | When Raised
----------------|-----------------------------|-----------------------------------------
Currency        | UNSUPPORTED_CURRENCY        | Code not in configured supported set
                | CURRENCY_MISMATCH           | Money arithmetic across currencies
----------------|-----------------------------|-----------------------------------------
Person          | UNSUPPORTED_PERSON_TYPE     | Person type not in configured set
----------------|-----------------------------|-----------------------------------------
Operation       | UNSUPPORTED_OPERATION_TYPE  | Operation type not in configured set
                | UNEXPECTED_OPERATION_TYPE   | Known type passed to the wrong variant
----------------|-----------------------------|-----------------------------------------
Amount          | AMOUNT_OUT_OF_RANGE         | Amount too large for the working precision
----------------|-----------------------------|-----------------------------------------
Record          | INVALID_RECORD              | Input row cannot be parsed

None of these are retryable. Each one aborts the record being processed;
the driver decides whether the run continues.

"Unsupported" means configuration does not know the value. "Unexpected"
means the value is known but was handed to a code path built for a
different one (a programming error, not a data error).
===============================================================================
"""

from __future__ import annotations

from collections.abc import Iterable


class CommissionKernelError(Exception):
    """
    Base exception for all commission kernel errors.

    All subclasses must have a `code` class attribute for machine-readable
    error identification.
    """

    code: str = "COMMISSION_KERNEL_ERROR"


# Currency-related exceptions


class CurrencyError(CommissionKernelError):
    """Base exception for currency-related errors."""

    code: str = "CURRENCY_ERROR"


class UnsupportedCurrencyError(CurrencyError):
    """Currency code is not in the configured supported set."""

    code: str = "UNSUPPORTED_CURRENCY"

    def __init__(self, currency: str, supported: Iterable[str] = ()):
        self.currency = currency
        self.supported = tuple(supported)
        super().__init__(f"Unsupported currency was provided: {currency}")


class CurrencyMismatchError(CurrencyError):
    """Arithmetic or comparison attempted on different currencies."""

    code: str = "CURRENCY_MISMATCH"

    def __init__(self, left: str, right: str, operation: str):
        self.left = left
        self.right = right
        self.operation = operation
        super().__init__(
            f"Cannot {operation} Money with different currencies: {left} and {right}"
        )


# Person-related exceptions


class PersonError(CommissionKernelError):
    """Base exception for person-related errors."""

    code: str = "PERSON_ERROR"


class UnsupportedPersonTypeError(PersonError):
    """Person type is not in the configured allowed set."""

    code: str = "UNSUPPORTED_PERSON_TYPE"

    def __init__(self, person_type: str, allowed: Iterable[str] = ()):
        self.person_type = person_type
        self.allowed = tuple(allowed)
        super().__init__(f"Unsupported person type was provided: {person_type}")


# Operation-related exceptions


class OperationError(CommissionKernelError):
    """Base exception for operation-related errors."""

    code: str = "OPERATION_ERROR"


class UnsupportedOperationTypeError(OperationError):
    """Operation type is not in the configured allowed set."""

    code: str = "UNSUPPORTED_OPERATION_TYPE"

    def __init__(self, operation_type: str, allowed: Iterable[str] = ()):
        self.operation_type = operation_type
        self.allowed = tuple(allowed)
        super().__init__(f"Unsupported operation type was provided: {operation_type}")


class UnexpectedOperationTypeError(OperationError):
    """A known operation type was passed to the constructor of another variant."""

    code: str = "UNEXPECTED_OPERATION_TYPE"

    def __init__(self, passed: str, expected: str):
        self.passed = passed
        self.expected = expected
        super().__init__(
            f"Unexpected operation type was provided, passed - {passed}, "
            f"allowed - {expected}"
        )


# Amount-related exceptions


class AmountError(CommissionKernelError):
    """Base exception for amount-related errors."""

    code: str = "AMOUNT_ERROR"


class AmountOutOfRangeError(AmountError):
    """Amount cannot be represented at the requested scale."""

    code: str = "AMOUNT_OUT_OF_RANGE"

    def __init__(self, amount: object, scale: int):
        self.amount = amount
        self.scale = scale
        super().__init__(
            f"Amount {amount} is out of range for {scale} decimal places"
        )


# Input record exceptions


class RecordError(CommissionKernelError):
    """Base exception for input record errors."""

    code: str = "RECORD_ERROR"


class InvalidRecordError(RecordError):
    """Input row cannot be parsed into an operation record."""

    code: str = "INVALID_RECORD"

    def __init__(self, row_number: int, field: str, value: object, reason: str):
        self.row_number = row_number
        self.field = field
        self.value = value
        self.reason = reason
        super().__init__(
            f"Invalid record at row {row_number}: field '{field}' "
            f"value {value!r} {reason}"
        )
