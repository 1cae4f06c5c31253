#
# formatkit - Digit & Rounding Pipeline Tests
#

# Standard library -----------------------------------------------------------------------------------------------------
from decimal import Decimal

# Third-party ----------------------------------------------------------------------------------------------------------
import pytest

# Local ----------------------------------------------------------------------------------------------------------------
from formatkit.decimal import DecimalValue, DigitConf, DigitOptions, RoundingMode, apply_digit_options
from formatkit.errors import FormatOptionError


def run(value, **options) -> str:
    return str(apply_digit_options(DecimalValue.from_number(value), DigitOptions(**options)))


# Tests ----------------------------------------------------------------------------------------------------------------

class TestDecimalValue:

    @pytest.mark.parametrize(
        "value, negative, digits, exponent",
        [
            pytest.param(42, False, "42", 0, id="int"),
            pytest.param(-1.5, True, "15", -1, id="negative-float"),
            pytest.param(0.5, False, "05", -1, id="leading-integer-zero"),
            pytest.param(0.05, False, "005", -2, id="two-leading-zeros"),
            pytest.param(Decimal("1.50"), False, "150", -2, id="decimal-trailing-zero"),
            pytest.param(Decimal("1E+3"), False, "1000", 0, id="positive-exponent-expanded"),
            pytest.param(0, False, "0", 0, id="zero"),
        ],
    )
    def test_from_number(self, value, negative, digits, exponent):
        assert DecimalValue.from_number(value) == DecimalValue(negative, digits, exponent)

    def test_from_number_passthrough(self):
        value = DecimalValue(False, "00042", 0)
        assert DecimalValue.from_number(value) is value

    @pytest.mark.parametrize(
        "value, expected",
        [
            pytest.param(DecimalValue(False, "150", -2), "1.50", id="fraction"),
            pytest.param(DecimalValue(True, "15", -1), "-1.5", id="negative"),
            pytest.param(DecimalValue(False, "00042", 0), "00042", id="padded-integer"),
            pytest.param(DecimalValue(False, "5", -3), "0.005", id="no-integer-digit"),
            pytest.param(DecimalValue(False, "12", 2), "1200", id="positive-exponent"),
            pytest.param(DecimalValue(True, "0", 0), "-0", id="negative-zero"),
        ],
    )
    def test_str(self, value, expected):
        assert str(value) == expected

    def test_integer_and_fraction_digits(self):
        value = DecimalValue(False, "12345", -2)
        assert value.integer_digits == "123"
        assert value.fraction_digits == "45"
        assert value.integer_count == 3
        assert value.fraction_count == 2

    @pytest.mark.parametrize(
        "kwargs, error",
        [
            pytest.param(dict(negative=False, digits="", exponent=0), ValueError, id="empty-digits"),
            pytest.param(dict(negative=False, digits="1a", exponent=0), ValueError, id="non-digit"),
            pytest.param(dict(negative=False, digits="١٢", exponent=0), ValueError, id="non-ascii-digit"),
            pytest.param(dict(negative=0, digits="1", exponent=0), TypeError, id="negative-not-bool"),
            pytest.param(dict(negative=False, digits=12, exponent=0), TypeError, id="digits-not-str"),
            pytest.param(dict(negative=False, digits="1", exponent=1.0), TypeError, id="exponent-float"),
        ],
    )
    def test_validation(self, kwargs, error):
        with pytest.raises(error):
            DecimalValue(**kwargs)

    def test_rejects_str_and_bool(self):
        with pytest.raises(TypeError):
            DecimalValue.from_number("1.5")
        with pytest.raises(TypeError):
            DecimalValue.from_number(True)


class TestDigitOptions:

    def test_defaults(self):
        options = DigitOptions()
        assert options.rounding_mode is DigitConf.DEFAULT_ROUNDING_MODE is RoundingMode.HALF_EXPAND
        assert options.maximum_fraction_digits is None
        assert options.percent is False

    def test_rounding_mode_label(self):
        assert DigitOptions(rounding_mode="half_even").rounding_mode is RoundingMode.HALF_EVEN

    def test_unknown_rounding_mode(self):
        with pytest.raises(FormatOptionError, match="rounding_mode must be one of 'ceil', 'floor'") as exc_info:
            DigitOptions(rounding_mode="bankers")
        assert "half_even" in exc_info.value.accepted

    @pytest.mark.parametrize(
        "name",
        ["minimum_integer_digits", "minimum_fraction_digits", "maximum_fraction_digits"],
    )
    @pytest.mark.parametrize(
        "count",
        [pytest.param(-1, id="negative"), pytest.param(DigitConf.MAX_DIGITS + 1, id="above-max")],
    )
    def test_count_out_of_range(self, name, count):
        with pytest.raises(FormatOptionError, match=f"{name} must be in range 0..100") as exc_info:
            DigitOptions(**{name: count})
        assert exc_info.value.option == name

    @pytest.mark.parametrize(
        "count",
        [pytest.param(True, id="bool"), pytest.param(2.0, id="float"), pytest.param("2", id="str")],
    )
    def test_count_wrong_type(self, count):
        with pytest.raises(TypeError, match="maximum_fraction_digits must be int"):
            DigitOptions(maximum_fraction_digits=count)

    def test_bounds_accepted(self):
        DigitOptions(minimum_integer_digits=0, maximum_fraction_digits=DigitConf.MAX_DIGITS)

    def test_max_below_min(self):
        with pytest.raises(FormatOptionError, match="maximum_fraction_digits must be >= minimum_fraction_digits"):
            DigitOptions(minimum_fraction_digits=3, maximum_fraction_digits=2)

    def test_percent_must_be_bool(self):
        with pytest.raises(TypeError, match="percent must be bool"):
            DigitOptions(percent=1)


class TestRounding:

    @pytest.mark.parametrize(
        "value, max_fraction, expected",
        [
            pytest.param(3.14159, 2, "3.14", id="pi"),
            pytest.param(1.5678, 2, "1.57", id="round-up"),
            pytest.param(1.235, 2, "1.24", id="half-up"),
            pytest.param(9.995, 2, "10.00", id="carry-into-integer"),
            pytest.param(0.5, 0, "1", id="to-integer"),
            pytest.param(1.5, 3, "1.5", id="no-op-short-fraction"),
            pytest.param(42, 2, "42", id="integer-untouched"),
        ],
    )
    def test_default_half_expand(self, value, max_fraction, expected):
        assert run(value, maximum_fraction_digits=max_fraction) == expected

    @pytest.mark.parametrize(
        "mode, positive, negative",
        [
            pytest.param("ceil", "1.3", "-1.2", id="ceil"),
            pytest.param("floor", "1.2", "-1.3", id="floor"),
            pytest.param("expand", "1.3", "-1.3", id="expand"),
            pytest.param("trunc", "1.2", "-1.2", id="trunc"),
            pytest.param("half_ceil", "1.2", "-1.2", id="half_ceil"),
            pytest.param("half_floor", "1.2", "-1.2", id="half_floor"),
            pytest.param("half_expand", "1.2", "-1.2", id="half_expand"),
            pytest.param("half_trunc", "1.2", "-1.2", id="half_trunc"),
            pytest.param("half_even", "1.2", "-1.2", id="half_even"),
        ],
    )
    def test_below_half(self, mode, positive, negative):
        """1.21 / -1.21: only directional modes move away from the truncated value."""
        assert run(1.21, maximum_fraction_digits=1, rounding_mode=mode) == positive
        assert run(-1.21, maximum_fraction_digits=1, rounding_mode=mode) == negative

    @pytest.mark.parametrize(
        "mode, positive, negative",
        [
            pytest.param("ceil", "1.3", "-1.2", id="ceil"),
            pytest.param("floor", "1.2", "-1.3", id="floor"),
            pytest.param("expand", "1.3", "-1.3", id="expand"),
            pytest.param("trunc", "1.2", "-1.2", id="trunc"),
            pytest.param("half_ceil", "1.3", "-1.2", id="half_ceil"),
            pytest.param("half_floor", "1.2", "-1.3", id="half_floor"),
            pytest.param("half_expand", "1.3", "-1.3", id="half_expand"),
            pytest.param("half_trunc", "1.2", "-1.2", id="half_trunc"),
            pytest.param("half_even", "1.2", "-1.2", id="half_even"),
        ],
    )
    def test_exactly_half(self, mode, positive, negative):
        assert run(1.25, maximum_fraction_digits=1, rounding_mode=mode) == positive
        assert run(-1.25, maximum_fraction_digits=1, rounding_mode=mode) == negative

    @pytest.mark.parametrize(
        "mode",
        ["half_ceil", "half_floor", "half_expand", "half_trunc", "half_even"],
    )
    def test_above_half(self, mode):
        """A nonzero digit after the 5 makes every half mode round up in magnitude."""
        assert run(1.251, maximum_fraction_digits=1, rounding_mode=mode) == "1.3"
        assert run(-1.251, maximum_fraction_digits=1, rounding_mode=mode) == "-1.3"

    @pytest.mark.parametrize(
        "value, expected",
        [
            pytest.param(0.125, "0.12", id="even-stays"),
            pytest.param(0.135, "0.14", id="odd-rounds-up"),
            pytest.param(2.5, "2", id="integer-even"),
            pytest.param(3.5, "4", id="integer-odd"),
        ],
    )
    def test_half_even(self, value, expected):
        max_fraction = 0 if expected.isdigit() else 2
        assert run(value, maximum_fraction_digits=max_fraction, rounding_mode="half_even") == expected

    def test_negative_zero_keeps_sign(self):
        assert run(-0.001, maximum_fraction_digits=2) == "-0.00"

    def test_rounding_mode_member(self):
        assert run(1.21, maximum_fraction_digits=1, rounding_mode=RoundingMode.CEIL) == "1.3"


class TestPadding:

    @pytest.mark.parametrize(
        "value, options, expected",
        [
            pytest.param(5, dict(minimum_fraction_digits=2), "5.00", id="fraction"),
            pytest.param(1.5, dict(minimum_fraction_digits=3), "1.500", id="fraction-partial"),
            pytest.param(1.2345, dict(minimum_fraction_digits=2), "1.2345", id="fraction-longer-kept"),
            pytest.param(5, dict(minimum_integer_digits=3), "005", id="integer"),
            pytest.param(42, dict(minimum_integer_digits=5), "00042", id="integer-five"),
            pytest.param(1234, dict(minimum_integer_digits=2), "1234", id="integer-longer-kept"),
            pytest.param(0.5, dict(minimum_integer_digits=0), "0.5", id="integer-zero-count"),
        ],
    )
    def test_pad(self, value, options, expected):
        assert run(value, **options) == expected

    def test_round_then_pad(self):
        assert run(1.999, maximum_fraction_digits=1, minimum_fraction_digits=1, minimum_integer_digits=2) == "02.0"


class TestPercent:

    @pytest.mark.parametrize(
        "value, expected",
        [
            pytest.param(0.5, "50", id="half"),
            pytest.param(0.25, "25", id="quarter"),
            pytest.param(1, "100", id="one"),
            pytest.param(0.001, "0.1", id="small"),
            pytest.param(0.12345, "12.345", id="fraction-kept"),
            pytest.param(-0.5, "-50", id="negative"),
        ],
    )
    def test_scale(self, value, expected):
        assert run(value, percent=True) == expected

    def test_scale_before_rounding(self):
        assert run(0.12345, percent=True, maximum_fraction_digits=0) == "12"
        assert run(0.125, percent=True, maximum_fraction_digits=0, rounding_mode="half_even") == "12"


class TestApplyDigitOptionsTypes:

    def test_value_must_be_decimal_value(self):
        with pytest.raises(TypeError, match="value must be DecimalValue"):
            apply_digit_options(1.5, DigitOptions())

    def test_options_must_be_digit_options(self):
        with pytest.raises(TypeError, match="options must be DigitOptions"):
            apply_digit_options(DecimalValue.from_number(1.5), {"maximum_fraction_digits": 1})
