"""
Standardize numeric inputs from Python stdlib and third-party libraries into decimal.Decimal.

Number formatters accept whatever numeric type the caller has at hand (int, float, Decimal,
Fraction, NumPy scalars, ...) and need an exact base-10 digit string to round and pad.
"""

# Standard library -----------------------------------------------------------------------------------------------------
import operator
from decimal import Decimal
from fractions import Fraction

# Local ----------------------------------------------------------------------------------------------------------------
from .tools import fmt_type, fmt_value


# Methods --------------------------------------------------------------------------------------------------------------

def std_decimal(value) -> Decimal:
    """
    Convert a numeric value to a finite decimal.Decimal.

    Floats are converted through their shortest round-trip repr, so 0.1 becomes Decimal('0.1')
    rather than the exact binary expansion 0.1000000000000000055511151231257827..., and the
    trailing zeros of the repr are not significant (1.0 becomes Decimal('1')).

    Detection Priority
    ------------------
    1. Decimal → returned as is
    2. int → exact
    3. float → via repr()
    4. __index__() → int (NumPy integers)
    5. .item() → Python scalar (NumPy, PyTorch and JAX array scalars)
    6. Fraction → exact when the denominator allows it, else rounded to the current decimal context
    7. __int__() → int (when __float__ not available)
    8. __float__() → float → via repr()

    Raises
    ------
    TypeError
        For bool, str and any other unsupported type.
    ValueError
        For NaN and infinite values, which have no digit string to format.

    Examples
    --------
    >>> std_decimal(42)
    Decimal('42')
    >>> std_decimal(0.1)
    Decimal('0.1')
    >>> std_decimal(Decimal('1.50'))
    Decimal('1.50')
    >>> std_decimal(True)
    Traceback (most recent call last):
        ...
    TypeError: boolean values not supported, got <bool: True>
    """
    result = _to_decimal(value)
    if not result.is_finite():
        raise ValueError(f"non-finite numbers cannot be formatted, got {fmt_value(value)}")
    return result


# Private Methods ------------------------------------------------------------------------------------------------------

def _to_decimal(value) -> Decimal:
    if isinstance(value, bool):
        raise TypeError(f"boolean values not supported, got {fmt_value(value)}")

    if isinstance(value, Decimal):
        return value

    if isinstance(value, int):
        return Decimal(value)

    if isinstance(value, float):
        return Decimal(repr(value)).normalize()

    if isinstance(value, (str, bytes)):
        raise TypeError(f"numeric value expected, but got {fmt_type(value)}")

    # Priority 4: exact integers such as NumPy int64
    if hasattr(value, "__index__"):
        try:
            return Decimal(operator.index(value))
        except (TypeError, ValueError) as e:
            raise TypeError(f"cannot convert {fmt_type(value)} to int via __index__: {e}") from e

    # Priority 5: array scalars
    if hasattr(value, "item") and callable(value.item):
        try:
            result = value.item()
        except (TypeError, ValueError) as e:
            raise TypeError(f"cannot convert {fmt_type(value)} via .item(): {e}") from e
        if isinstance(result, bool):
            raise TypeError(f"boolean values not supported (from .item()), got {fmt_value(result)}")
        if isinstance(result, (int, float)):
            return _to_decimal(result)

    if isinstance(value, Fraction):
        return Decimal(value.numerator) / Decimal(value.denominator)

    # Priority 7: types with only __int__
    if hasattr(value, "__int__") and not hasattr(value, "__float__"):
        try:
            return Decimal(int(value))
        except (TypeError, ValueError, OverflowError) as e:
            raise TypeError(f"cannot convert {fmt_type(value)} to int via __int__: {e}") from e

    # Priority 8: duck typing via __float__
    if hasattr(value, "__float__"):
        try:
            return Decimal(repr(float(value))).normalize()
        except (TypeError, ValueError) as e:
            raise TypeError(f"cannot convert {fmt_type(value)} to float: {e}") from e

    raise TypeError(
        f"unsupported numeric type: {fmt_type(value)}. "
        f"Expected int, float, Decimal, Fraction, or types implementing __index__, .item(), __int__ or __float__"
    )
