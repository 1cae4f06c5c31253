"""
Exact base-10 numbers and the digit & rounding pipeline used by number formatters.

A DecimalValue is a sign, a digit string and a power-of-ten exponent. The pipeline applies, in order:
percent scaling, rounding to the maximum fraction digits, fraction padding, integer padding.
"""

# Standard library -----------------------------------------------------------------------------------------------------
from dataclasses import dataclass, field
from enum import Enum, unique
from typing import Self

# Local ----------------------------------------------------------------------------------------------------------------
from .collections import LabelMap
from .errors import FormatOptionError
from .numeric import std_decimal
from .tools import fmt_type, fmt_value


# Classes --------------------------------------------------------------------------------------------------------------

@unique
class RoundingMode(Enum):
    """
    How digits beyond the maximum fraction digits are dropped.

    Directional modes look at the whole dropped remainder, half modes only break ties at exactly half.
    """
    CEIL = 1
    FLOOR = 2
    EXPAND = 3
    TRUNC = 4
    HALF_CEIL = 5
    HALF_FLOOR = 6
    HALF_EXPAND = 7
    HALF_TRUNC = 8
    HALF_EVEN = 9


ROUNDING_MODE_LABELS: LabelMap[RoundingMode] = LabelMap("rounding_mode", {
    RoundingMode.CEIL: "ceil",
    RoundingMode.FLOOR: "floor",
    RoundingMode.EXPAND: "expand",
    RoundingMode.TRUNC: "trunc",
    RoundingMode.HALF_CEIL: "half_ceil",
    RoundingMode.HALF_FLOOR: "half_floor",
    RoundingMode.HALF_EXPAND: "half_expand",
    RoundingMode.HALF_TRUNC: "half_trunc",
    RoundingMode.HALF_EVEN: "half_even",
})


class DigitConf:
    """
    Default configuration constants for digit options.

    Attributes:
        MAX_DIGITS: Upper bound for every digit count option (minimum integer digits,
            minimum and maximum fraction digits).
        DEFAULT_ROUNDING_MODE: Rounding mode used when none is requested.
    """
    MAX_DIGITS: int = 100
    DEFAULT_ROUNDING_MODE: RoundingMode = RoundingMode.HALF_EXPAND


@dataclass(frozen=True)
class DecimalValue:
    """
    Exact decimal number: (-1)^negative × int(digits) × 10^exponent.

    Zeros are never trimmed or added implicitly, so DecimalValue(False, "150", -2) renders as "1.50"
    and DecimalValue(False, "00042", 0) as "00042". Negative zero keeps its sign.

    Examples:
        >>> DecimalValue.from_number(-1.5)
        DecimalValue(negative=True, digits='15', exponent=-1)
        >>> str(DecimalValue.from_number(0.05))
        '0.05'
    """
    negative: bool
    digits: str
    exponent: int = 0

    def __post_init__(self):
        if not isinstance(self.negative, bool):
            raise TypeError(f"negative must be bool, but got {fmt_type(self.negative)}")
        if not isinstance(self.digits, str):
            raise TypeError(f"digits must be str, but got {fmt_type(self.digits)}")
        if not self.digits or not (self.digits.isascii() and self.digits.isdigit()):
            raise ValueError(f"digits must be a non-empty string of ASCII digits, but got {fmt_value(self.digits)}")
        if isinstance(self.exponent, bool) or not isinstance(self.exponent, int):
            raise TypeError(f"exponent must be int, but got {fmt_type(self.exponent)}")

    @classmethod
    def from_number(cls, value) -> Self:
        """
        Build from any supported number, keeping at least one integer digit.

        Positive exponents are expanded into trailing zeros, so the result always has exponent <= 0.
        """
        if isinstance(value, cls):
            return value
        sign, digit_tuple, exponent = std_decimal(value).as_tuple()
        digits = "".join(str(d) for d in digit_tuple)
        if exponent > 0:
            digits += "0" * exponent
            exponent = 0
        return cls(negative=bool(sign), digits=digits, exponent=exponent)._with_integer_digit()

    @property
    def fraction_count(self) -> int:
        return max(0, -self.exponent)

    @property
    def integer_count(self) -> int:
        return len(self.digits) + self.exponent

    @property
    def integer_digits(self) -> str:
        """Digits left of the decimal point, "0" when there are none."""
        if self.exponent >= 0:
            return self.digits + "0" * self.exponent
        if self.integer_count <= 0:
            return "0"
        return self.digits[:self.integer_count]

    @property
    def fraction_digits(self) -> str:
        """Digits right of the decimal point, possibly empty."""
        if self.exponent >= 0:
            return ""
        return self.digits[-self.fraction_count:].zfill(self.fraction_count)

    def is_zero(self) -> bool:
        return self.digits.strip("0") == ""

    def __str__(self) -> str:
        sign = "-" if self.negative else ""
        fraction = self.fraction_digits
        if fraction:
            return f"{sign}{self.integer_digits}.{fraction}"
        return f"{sign}{self.integer_digits}"

    # Private Methods ----------------------------------------------------------------------------------------------

    def _expanded(self) -> Self:
        """Same value with exponent <= 0."""
        if self.exponent <= 0:
            return self
        return DecimalValue(self.negative, self.digits + "0" * self.exponent, 0)

    def _with_integer_digit(self) -> Self:
        """Same value with at least one digit left of the decimal point."""
        value = self._expanded()
        missing = 1 - value.integer_count
        if missing <= 0:
            return value
        return DecimalValue(value.negative, "0" * missing + value.digits, value.exponent)


@dataclass(frozen=True)
class DigitOptions:
    """
    Validated digit and rounding options.

    Counts are None (not requested) or int in 0..DigitConf.MAX_DIGITS. The rounding mode
    accepts a RoundingMode or its label and is stored as RoundingMode.

    Raises:
        TypeError: a count is not int (bool included) or percent is not bool.
        FormatOptionError: a count is out of range, maximum_fraction_digits < minimum_fraction_digits,
            or the rounding mode is unknown.
    """
    minimum_integer_digits: int | None = None
    minimum_fraction_digits: int | None = None
    maximum_fraction_digits: int | None = None
    rounding_mode: RoundingMode | str = field(default=DigitConf.DEFAULT_ROUNDING_MODE)
    percent: bool = False

    def __post_init__(self):
        for name in ("minimum_integer_digits", "minimum_fraction_digits", "maximum_fraction_digits"):
            _validate_count(name, getattr(self, name))

        min_f, max_f = self.minimum_fraction_digits, self.maximum_fraction_digits
        if min_f is not None and max_f is not None and max_f < min_f:
            raise FormatOptionError(
                f"maximum_fraction_digits must be >= minimum_fraction_digits ({min_f}), but got {max_f}",
                option="maximum_fraction_digits", accepted=f"{min_f}..{DigitConf.MAX_DIGITS}")

        object.__setattr__(self, "rounding_mode", ROUNDING_MODE_LABELS.parse(self.rounding_mode))

        if not isinstance(self.percent, bool):
            raise TypeError(f"percent must be bool, but got {fmt_type(self.percent)}")


# Methods --------------------------------------------------------------------------------------------------------------

def apply_digit_options(value: DecimalValue, options: DigitOptions) -> DecimalValue:
    """
    Run the digit pipeline: percent scaling, rounding, fraction padding, integer padding.

    Examples:
        >>> str(apply_digit_options(DecimalValue.from_number(3.14159), DigitOptions(maximum_fraction_digits=2)))
        '3.14'
        >>> str(apply_digit_options(DecimalValue.from_number(0.125),
        ...                         DigitOptions(maximum_fraction_digits=2, rounding_mode="half_even")))
        '0.12'
        >>> str(apply_digit_options(DecimalValue.from_number(5), DigitOptions(minimum_integer_digits=3)))
        '005'
    """
    if not isinstance(value, DecimalValue):
        raise TypeError(f"value must be DecimalValue, but got {fmt_type(value)}")
    if not isinstance(options, DigitOptions):
        raise TypeError(f"options must be DigitOptions, but got {fmt_type(options)}")

    value = value._with_integer_digit()
    if options.percent:
        value = _scale_percent(value)
    if options.maximum_fraction_digits is not None:
        value = _round_fraction(value, options.maximum_fraction_digits, options.rounding_mode)
    if options.minimum_fraction_digits is not None:
        value = _pad_fraction(value, options.minimum_fraction_digits)
    if options.minimum_integer_digits is not None:
        value = _pad_integer(value, options.minimum_integer_digits)
    return value


# Private Methods ------------------------------------------------------------------------------------------------------

def _validate_count(name: str, count) -> None:
    if count is None:
        return
    if isinstance(count, bool) or not isinstance(count, int):
        raise TypeError(f"{name} must be int | None, but got {fmt_type(count)}")
    if not 0 <= count <= DigitConf.MAX_DIGITS:
        raise FormatOptionError.out_of_range(name, count, 0, DigitConf.MAX_DIGITS)


def _scale_percent(value: DecimalValue) -> DecimalValue:
    """Multiply by 100, then drop the leading zeros this exposes while keeping one integer digit."""
    scaled = DecimalValue(value.negative, value.digits, value.exponent + 2)._expanded()
    digits = scaled.digits
    strip = 0
    while scaled.integer_count - strip > 1 and digits[strip] == "0":
        strip += 1
    return DecimalValue(scaled.negative, digits[strip:], scaled.exponent)


def _round_fraction(value: DecimalValue, max_fraction: int, mode: RoundingMode) -> DecimalValue:
    if value.fraction_count <= max_fraction:
        return value

    keep = value.integer_count + max_fraction
    kept, dropped = value.digits[:keep], value.digits[keep:]

    first = int(dropped[0])
    rest_nonzero = dropped[1:].strip("0") != ""
    if _should_increment(mode, value.negative, kept, first, rest_nonzero):
        kept = str(int(kept) + 1).zfill(len(kept))

    return DecimalValue(value.negative, kept, -max_fraction)


def _should_increment(mode: RoundingMode, negative: bool, kept: str, first: int, rest_nonzero: bool) -> bool:
    """Whether the magnitude of the kept digits goes up by one unit in the last place."""
    if first == 0 and not rest_nonzero:
        return False

    if mode is RoundingMode.CEIL:
        return not negative
    if mode is RoundingMode.FLOOR:
        return negative
    if mode is RoundingMode.EXPAND:
        return True
    if mode is RoundingMode.TRUNC:
        return False

    if first > 5 or (first == 5 and rest_nonzero):
        return True
    if first < 5:
        return False

    # Exactly half
    if mode is RoundingMode.HALF_CEIL:
        return not negative
    if mode is RoundingMode.HALF_FLOOR:
        return negative
    if mode is RoundingMode.HALF_EXPAND:
        return True
    if mode is RoundingMode.HALF_TRUNC:
        return False
    return int(kept[-1]) % 2 == 1


def _pad_fraction(value: DecimalValue, min_fraction: int) -> DecimalValue:
    missing = min_fraction - value.fraction_count
    if missing <= 0:
        return value
    return DecimalValue(value.negative, value.digits + "0" * missing, -min_fraction)


def _pad_integer(value: DecimalValue, min_integer: int) -> DecimalValue:
    missing = min_integer - value.integer_count
    if missing <= 0:
        return value
    return DecimalValue(value.negative, "0" * missing + value.digits, value.exponent)
