"""
Locale-aware number formatting: decimal, percent and currency styles.

    >>> NumberFormat("en").format(1234567)
    '1,234,567'
    >>> NumberFormat("de", maximum_fraction_digits=2).format(1234.567)
    '1.234,57'
    >>> NumberFormat("en", style="percent").format(0.25)
    '25%'

Patterns and symbols come from Babel's CLDR data; digits are produced by the digit & rounding
pipeline in formatkit.decimal and composed into parts here.
"""

# Standard library -----------------------------------------------------------------------------------------------------
import logging
import re
from enum import Enum, unique
from typing import Any

# Third-party ----------------------------------------------------------------------------------------------------------
from babel import Locale, numbers as babel_numbers

# Local ----------------------------------------------------------------------------------------------------------------
from .collections import LabelMap
from .decimal import DecimalValue, DigitOptions, DigitConf, ROUNDING_MODE_LABELS, RoundingMode, apply_digit_options
from .errors import FormatOptionError
from .parts import NUMBER_PARTS, FormattedPart, Part, PartsCollector, Sink, StringSink
from .provider import DataProvider, locale_tag
from .tools import fmt_type, fmt_value

logger = logging.getLogger(__name__)


# Classes --------------------------------------------------------------------------------------------------------------

@unique
class NumberStyle(Enum):
    DECIMAL = 1
    PERCENT = 2
    CURRENCY = 3


NUMBER_STYLE_LABELS: LabelMap[NumberStyle] = LabelMap("style", {
    NumberStyle.DECIMAL: "decimal",
    NumberStyle.PERCENT: "percent",
    NumberStyle.CURRENCY: "currency",
})

_CURRENCY_CODE = re.compile(r"^[A-Za-z]{3}$")


class NumberFormat:
    """
    Number formatter bound to one locale.

    Options are validated before any locale data is loaded; the formatter is immutable afterwards
    and may be shared between threads.

    Args:
        locale: BCP 47 tag, Babel identifier or babel.Locale.
        provider: Locale data source, a fresh DataProvider.embedded() when omitted.
        style: "decimal", "percent" or "currency".
        currency: ISO 4217 code, required for (and only allowed with) the currency style.
        use_grouping: Insert locale group separators into the integer digits.
        minimum_integer_digits: Pad the integer digits with leading zeros.
        minimum_fraction_digits: Pad the fraction digits with trailing zeros.
        maximum_fraction_digits: Round to at most this many fraction digits.
        rounding_mode: Label or RoundingMode used when rounding, "half_expand" when omitted.

    Without digit options, decimal and percent numbers keep every significant digit of the input;
    currencies default to the currency's minor unit digits (2 for USD, 0 for JPY).

    Raises:
        FormatOptionError: invalid option value or combination.
        FormatDataError: the locale is unknown or unavailable from the provider.
        TypeError: an option has the wrong Python type.
    """

    def __init__(
            self,
            locale: str | Locale,
            *,
            provider: DataProvider | None = None,
            style: NumberStyle | str = NumberStyle.DECIMAL,
            currency: str | None = None,
            use_grouping: bool = True,
            minimum_integer_digits: int | None = None,
            minimum_fraction_digits: int | None = None,
            maximum_fraction_digits: int | None = None,
            rounding_mode: RoundingMode | str | None = None,
    ) -> None:
        self._style = NUMBER_STYLE_LABELS.parse(style)
        self._currency = _validate_currency(self._style, currency)

        if not isinstance(use_grouping, bool):
            raise TypeError(f"use_grouping must be bool, but got {fmt_type(use_grouping)}")
        self._use_grouping = use_grouping

        # Validates counts and rounding mode as requested
        self._requested = DigitOptions(
            minimum_integer_digits=minimum_integer_digits,
            minimum_fraction_digits=minimum_fraction_digits,
            maximum_fraction_digits=maximum_fraction_digits,
            rounding_mode=DigitConf.DEFAULT_ROUNDING_MODE if rounding_mode is None else rounding_mode,
            percent=self._style is NumberStyle.PERCENT,
        )
        self._rounding_mode_set = rounding_mode is not None
        self._digits = _effective_digits(self._requested, self._currency)

        if provider is None:
            provider = DataProvider.embedded()
        if not isinstance(provider, DataProvider):
            raise TypeError(f"provider must be DataProvider | None, but got {fmt_type(provider)}")
        self._locale = provider.locale(locale)
        self._bind(self._locale)

        logger.debug("created NumberFormat(%s, style=%s)", self._locale, NUMBER_STYLE_LABELS.label(self._style))

    # Methods ----------------------------------------------------------------------------------------------------------

    def format(self, value) -> str:
        """
        Format a number as a string.

        Accepts int, float, Decimal, Fraction, DecimalValue and numeric third-party scalars.

        Raises:
            TypeError: value is bool, str or not numeric.
            ValueError: value is NaN or infinite.
        """
        sink = StringSink(NUMBER_PARTS)
        self._render(value, sink)
        return sink.finish()

    def format_to_parts(self, value) -> list[FormattedPart]:
        """
        Format a number as a list of parts whose values concatenate to format(value).

        Examples:
            >>> [(p.type.value, p.value) for p in NumberFormat("en").format_to_parts(-1234.5)]
            [('minus_sign', '-'), ('integer', '1'), ('group', ','), ('integer', '234'), ('decimal', '.'), ('fraction', '5')]
        """
        sink = PartsCollector(NUMBER_PARTS)
        self._render(value, sink)
        return sink.finish()

    def resolved_options(self) -> dict[str, Any]:
        """Options in effect; digit options and rounding_mode appear only when requested."""
        resolved: dict[str, Any] = {
            "locale": locale_tag(self._locale),
            "style": NUMBER_STYLE_LABELS.label(self._style),
        }
        if self._currency is not None:
            resolved["currency"] = self._currency
        resolved["use_grouping"] = self._use_grouping
        for name in ("minimum_integer_digits", "minimum_fraction_digits", "maximum_fraction_digits"):
            count = getattr(self._requested, name)
            if count is not None:
                resolved[name] = count
        if self._rounding_mode_set:
            resolved["rounding_mode"] = ROUNDING_MODE_LABELS.label(self._requested.rounding_mode)
        return resolved

    def __repr__(self) -> str:
        return f"NumberFormat({locale_tag(self._locale)!r}, style={NUMBER_STYLE_LABELS.label(self._style)!r})"

    # Private Methods --------------------------------------------------------------------------------------------------

    def _bind(self, locale: Locale) -> None:
        if self._style is NumberStyle.PERCENT:
            pattern = locale.percent_formats[None]
        elif self._style is NumberStyle.CURRENCY:
            pattern = locale.currency_formats["standard"]
        else:
            pattern = locale.decimal_formats[None]

        self._decimal_symbol = babel_numbers.get_decimal_symbol(locale)
        self._group_symbol = babel_numbers.get_group_symbol(locale)
        self._primary_group, self._secondary_group = pattern.grouping

        symbols = {
            "-": babel_numbers.get_minus_sign_symbol(locale),
            "+": babel_numbers.get_plus_sign_symbol(locale),
            "%": locale.number_symbols["latn"]["percentSign"],
        }
        currency_symbols = self._currency_symbols(locale)
        self._prefix = tuple(_affix_tokens(affix, symbols, currency_symbols) for affix in pattern.prefix)
        self._suffix = tuple(_affix_tokens(affix, symbols, currency_symbols) for affix in pattern.suffix)

    def _currency_symbols(self, locale: Locale) -> dict[int, str]:
        """Currency text by the length of the pattern's currency sign run."""
        if self._currency is None:
            return {}
        symbol = babel_numbers.get_currency_symbol(self._currency, locale=locale)
        return {
            1: symbol,
            2: self._currency,
            3: babel_numbers.get_currency_name(self._currency, locale=locale),
        }

    def _render(self, value, sink: Sink) -> None:
        number = apply_digit_options(DecimalValue.from_number(value), self._digits)
        sign = 1 if number.negative else 0

        _write_tokens(self._prefix[sign], sink)

        groups = self._integer_groups(number.integer_digits)
        for i, group in enumerate(groups):
            if i:
                with sink.part(Part.GROUP):
                    sink.write(self._group_symbol)
            with sink.part(Part.INTEGER):
                sink.write(group)

        fraction = number.fraction_digits
        if fraction:
            with sink.part(Part.DECIMAL):
                sink.write(self._decimal_symbol)
            with sink.part(Part.FRACTION):
                sink.write(fraction)

        _write_tokens(self._suffix[sign], sink)

    def _integer_groups(self, digits: str) -> list[str]:
        """Split integer digits at the pattern's primary and secondary grouping sizes."""
        if not self._use_grouping or len(digits) <= self._primary_group:
            return [digits]
        groups = [digits[-self._primary_group:]]
        rest = digits[:-self._primary_group]
        while len(rest) > self._secondary_group:
            groups.append(rest[-self._secondary_group:])
            rest = rest[:-self._secondary_group]
        groups.append(rest)
        return groups[::-1]


# Private Methods ------------------------------------------------------------------------------------------------------

def _validate_currency(style: NumberStyle, currency) -> str | None:
    if style is not NumberStyle.CURRENCY:
        if currency is not None:
            raise FormatOptionError(f"currency is only allowed with style 'currency', but got {fmt_value(currency)}",
                                    option="currency", accepted="None")
        return None
    if currency is None:
        raise FormatOptionError("currency is required when style is 'currency'",
                                option="currency", accepted="ISO 4217 currency code")
    if not isinstance(currency, str):
        raise TypeError(f"currency must be str, but got {fmt_type(currency)}")
    if not _CURRENCY_CODE.match(currency):
        raise FormatOptionError(f"currency must be a 3-letter ISO 4217 code, but got {fmt_value(currency)}",
                                option="currency", accepted="ISO 4217 currency code")
    return currency.upper()


def _effective_digits(requested: DigitOptions, currency: str | None) -> DigitOptions:
    """Fill in the currency's minor unit digits where fraction digits were not requested."""
    if currency is None:
        return requested

    precision = babel_numbers.get_currency_precision(currency)
    min_f, max_f = requested.minimum_fraction_digits, requested.maximum_fraction_digits
    if min_f is None:
        min_f = precision if max_f is None else min(precision, max_f)
    if max_f is None:
        max_f = max(precision, min_f)
    return DigitOptions(
        minimum_integer_digits=requested.minimum_integer_digits,
        minimum_fraction_digits=min_f,
        maximum_fraction_digits=max_f,
        rounding_mode=requested.rounding_mode,
        percent=requested.percent,
    )


def _affix_tokens(affix: str, symbols: dict[str, str], currency_symbols: dict[int, str]) -> tuple[tuple[Part, str], ...]:
    """
    Split a pattern prefix or suffix into (part, text) tokens.

    Quoted text is literal ('' is a single quote), sign and percent characters become
    locale symbols, and a run of currency signs becomes the currency symbol, code or name.
    """
    tokens: list[tuple[Part, str]] = []

    def literal(text: str) -> None:
        if tokens and tokens[-1][0] is Part.LITERAL:
            tokens[-1] = (Part.LITERAL, tokens[-1][1] + text)
        else:
            tokens.append((Part.LITERAL, text))

    i = 0
    while i < len(affix):
        ch = affix[i]
        if ch == "'":
            end = affix.find("'", i + 1)
            if end == -1:
                end = len(affix)
            literal(affix[i + 1:end] or "'")
            i = end + 1
        elif ch == "¤":
            run = len(affix) - len(affix[i:].lstrip("¤")) - i
            if currency_symbols:
                tokens.append((Part.CURRENCY, currency_symbols.get(run, currency_symbols[1])))
            i += run
        elif ch in symbols:
            part = {"-": Part.MINUS_SIGN, "+": Part.PLUS_SIGN, "%": Part.PERCENT_SIGN}[ch]
            tokens.append((part, symbols[ch]))
            i += 1
        else:
            literal(ch)
            i += 1
    return tuple(tokens)


def _write_tokens(tokens: tuple[tuple[Part, str], ...], sink: Sink) -> None:
    for part, text in tokens:
        if part is Part.LITERAL:
            sink.write(text)
        else:
            with sink.part(part):
                sink.write(text)
