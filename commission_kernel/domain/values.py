"""
Values -- Immutable, self-validating domain value objects.

Responsibility:
    Provides the value types used by every commission computation:
    Currency, Money and ExchangeRate. Monetary math never touches float.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.
    Imported by every other domain module. No outward dependencies except
    commission_kernel.exceptions.

Invariants enforced:
    - All monetary amounts are Decimal (never float).
    - Money arithmetic never mixes currencies silently.
    - Every operation that can lose precision takes an explicit scale and
      rounding mode; the default mode is ROUND_UP (away from zero).

Failure modes:
    - ValueError on construction with invalid amounts, codes, or rates.
    - CurrencyMismatchError when arithmetic or comparison mixes currencies.

Non-goals:
    - Does NOT know which currencies are supported (CurrencyConverter does).
    - Does NOT perform hub routing between currencies.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_UP, Decimal, InvalidOperation, localcontext

from commission_kernel.exceptions import AmountOutOfRangeError, CurrencyMismatchError

DEFAULT_ROUNDING = ROUND_UP

# Digits kept by intermediate results before the final rescale. Wide enough
# that rescaling a directed-rounded intermediate gives the exact result.
WORKING_PRECISION = 60


def to_decimal(value: Decimal | str | int) -> Decimal:
    """Convert a decimal-safe value to Decimal. Floats are rejected."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        raise TypeError(f"float is not accepted for monetary values: {value!r}")
    try:
        return Decimal(str(value).strip())
    except (InvalidOperation, ValueError) as e:
        raise ValueError(f"Invalid decimal value: {value!r}") from e


def rescale(value: Decimal, scale: int, rounding: str = DEFAULT_ROUNDING) -> Decimal:
    """
    Quantize ``value`` to exactly ``scale`` fractional digits.

    Raises AmountOutOfRangeError when the result needs more than
    ``WORKING_PRECISION`` digits.
    """
    if scale < 0:
        raise ValueError(f"scale must be non-negative, got {scale}")
    with localcontext() as ctx:
        ctx.prec = WORKING_PRECISION
        try:
            return value.quantize(Decimal(1).scaleb(-scale), rounding=rounding)
        except InvalidOperation:
            raise AmountOutOfRangeError(value, scale) from None


def _checked(value: Decimal, scale: int | None, rounding: str) -> Decimal:
    return value if scale is None else rescale(value, scale, rounding)


@dataclass(frozen=True, slots=True)
class Currency:
    """
    Currency code value object.

    Contract:
        Wraps an upper-case three-letter code. Normalized on construction.
        Whether the code is supported is a configuration question answered
        by ``CurrencyConverter.validate``.
    """

    code: str

    def __post_init__(self) -> None:
        normalized = self.code.upper().strip() if isinstance(self.code, str) else ""
        if len(normalized) != 3 or not normalized.isalpha():
            raise ValueError(f"Currency code must be 3 letters: {self.code!r}")
        object.__setattr__(self, "code", normalized)

    def __str__(self) -> str:
        return self.code

    def __repr__(self) -> str:
        return f"Currency({self.code!r})"


@dataclass(frozen=True, slots=True)
class Money:
    """
    Monetary amount value object.

    Contract:
        Pairs a Decimal amount with its Currency. Arithmetic keeps the exact
        Decimal result unless a ``scale`` is given, in which case the result
        is rescaled with the given rounding mode.

    Guarantees:
        - Immutable and hashable.
        - amount is always a Decimal, never float.
        - Arithmetic and comparisons enforce the same-currency constraint.
    """

    amount: Decimal
    currency: Currency

    def __post_init__(self) -> None:
        object.__setattr__(self, "amount", to_decimal(self.amount))
        if isinstance(self.currency, str):
            object.__setattr__(self, "currency", Currency(self.currency))
        elif not isinstance(self.currency, Currency):
            raise TypeError(f"currency must be Currency or str, got {type(self.currency)}")

    @classmethod
    def of(cls, amount: Decimal | str | int, currency: str | Currency) -> Money:
        """Factory method for creating Money."""
        return cls(amount=to_decimal(amount), currency=currency)

    @classmethod
    def zero(cls, currency: str | Currency) -> Money:
        """Create a zero amount in the given currency."""
        return cls(amount=Decimal("0"), currency=currency)

    @property
    def is_zero(self) -> bool:
        return self.amount == 0

    @property
    def is_positive(self) -> bool:
        return self.amount > 0

    @property
    def is_negative(self) -> bool:
        return self.amount < 0

    def _require_same_currency(self, other: Money, operation: str) -> None:
        if self.currency != other.currency:
            raise CurrencyMismatchError(
                self.currency.code, other.currency.code, operation
            )

    def plus(
        self,
        other: Money,
        scale: int | None = None,
        rounding: str = DEFAULT_ROUNDING,
    ) -> Money:
        """Add ``other`` (same currency), optionally rescaling the sum."""
        self._require_same_currency(other, "add")
        with localcontext() as ctx:
            ctx.prec = WORKING_PRECISION
            total = self.amount + other.amount
        return Money(_checked(total, scale, rounding), self.currency)

    def minus(
        self,
        other: Money,
        scale: int | None = None,
        rounding: str = DEFAULT_ROUNDING,
    ) -> Money:
        """Subtract ``other`` (same currency), optionally rescaling the result."""
        self._require_same_currency(other, "subtract")
        with localcontext() as ctx:
            ctx.prec = WORKING_PRECISION
            diff = self.amount - other.amount
        return Money(_checked(diff, scale, rounding), self.currency)

    def multiplied_by(
        self,
        factor: Decimal | str | int,
        scale: int | None = None,
        rounding: str = DEFAULT_ROUNDING,
    ) -> Money:
        """Multiply by a plain rate. Without ``scale`` the result scale grows."""
        with localcontext() as ctx:
            ctx.prec = WORKING_PRECISION
            ctx.rounding = rounding
            product = self.amount * to_decimal(factor)
        return Money(_checked(product, scale, rounding), self.currency)

    def divided_by(
        self,
        divisor: Decimal | str | int,
        scale: int,
        rounding: str = DEFAULT_ROUNDING,
    ) -> Money:
        """Divide by a plain rate; the quotient is always rescaled to ``scale``."""
        divisor = to_decimal(divisor)
        if divisor == 0:
            raise ZeroDivisionError("Cannot divide Money by zero")
        with localcontext() as ctx:
            ctx.prec = WORKING_PRECISION
            ctx.rounding = rounding
            quotient = self.amount / divisor
        return Money(rescale(quotient, scale, rounding), self.currency)

    def to_scale(self, scale: int, rounding: str = DEFAULT_ROUNDING) -> Money:
        """Rescale to ``scale`` fractional digits with ``rounding``."""
        return Money(rescale(self.amount, scale, rounding), self.currency)

    def __add__(self, other: Money) -> Money:
        if not isinstance(other, Money):
            return NotImplemented
        return self.plus(other)

    def __sub__(self, other: Money) -> Money:
        if not isinstance(other, Money):
            return NotImplemented
        return self.minus(other)

    def __neg__(self) -> Money:
        return Money(amount=-self.amount, currency=self.currency)

    def __lt__(self, other: Money) -> bool:
        if not isinstance(other, Money):
            return NotImplemented
        self._require_same_currency(other, "compare")
        return self.amount < other.amount

    def __le__(self, other: Money) -> bool:
        if not isinstance(other, Money):
            return NotImplemented
        self._require_same_currency(other, "compare")
        return self.amount <= other.amount

    def __gt__(self, other: Money) -> bool:
        if not isinstance(other, Money):
            return NotImplemented
        self._require_same_currency(other, "compare")
        return self.amount > other.amount

    def __ge__(self, other: Money) -> bool:
        if not isinstance(other, Money):
            return NotImplemented
        self._require_same_currency(other, "compare")
        return self.amount >= other.amount

    def __str__(self) -> str:
        return f"{self.amount} {self.currency.code}"

    def __repr__(self) -> str:
        return f"Money({self.amount!r}, {self.currency!r})"


@dataclass(frozen=True, slots=True)
class ExchangeRate:
    """
    Exchange rate between a base and a quote currency.

    Contract:
        1 unit of ``base`` = ``rate`` units of ``quote``. Converting to the
        quote multiplies; converting back to the base divides. Both
        directions rescale to the requested scale.
    """

    base: Currency
    quote: Currency
    rate: Decimal

    def __post_init__(self) -> None:
        if isinstance(self.base, str):
            object.__setattr__(self, "base", Currency(self.base))
        if isinstance(self.quote, str):
            object.__setattr__(self, "quote", Currency(self.quote))
        object.__setattr__(self, "rate", to_decimal(self.rate))
        if self.rate <= 0:
            raise ValueError(f"Exchange rate must be positive: {self.rate}")
        if self.base == self.quote:
            raise ValueError(f"Exchange rate needs two currencies, got {self.base} twice")

    @classmethod
    def of(
        cls,
        base: str | Currency,
        quote: str | Currency,
        rate: Decimal | str | int,
    ) -> ExchangeRate:
        """Factory method for creating ExchangeRate."""
        return cls(base=base, quote=quote, rate=to_decimal(rate))

    def to_quote(self, amount: Decimal, scale: int, rounding: str = DEFAULT_ROUNDING) -> Decimal:
        """Convert an amount in ``base`` into ``quote``."""
        return Money(amount, self.base).multiplied_by(self.rate, scale, rounding).amount

    def to_base(self, amount: Decimal, scale: int, rounding: str = DEFAULT_ROUNDING) -> Decimal:
        """Convert an amount in ``quote`` back into ``base``."""
        return Money(amount, self.quote).divided_by(self.rate, scale, rounding).amount

    @property
    def pair(self) -> tuple[str, str]:
        return (self.base.code, self.quote.code)

    def __str__(self) -> str:
        return f"{self.base}/{self.quote} = {self.rate}"
