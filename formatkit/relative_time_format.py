"""
Locale-aware relative time formatting.

    >>> RelativeTimeFormat("en").format(-3, "day")
    '3 days ago'
    >>> RelativeTimeFormat("de").format(2, "hour")
    'in 2 Stunden'

Patterns are CLDR's relative time patterns ("in {0} days", "{0} days ago"), chosen by direction and
plural category. The magnitude is rendered by NumberFormat, so large values are grouped and fractions
use the locale's decimal symbol.
"""

# Standard library -----------------------------------------------------------------------------------------------------
import logging
from decimal import Decimal
from enum import Enum, unique
from types import MappingProxyType
from typing import Any, Mapping

# Third-party ----------------------------------------------------------------------------------------------------------
from babel import Locale

# Local ----------------------------------------------------------------------------------------------------------------
from .collections import LabelMap
from .decimal import DecimalValue
from .errors import FormatDataError
from .number_format import NumberFormat
from .parts import RELATIVE_TIME_PARTS, FormattedPart, PartsCollector, Sink, StringSink
from .provider import DataProvider, locale_table, locale_tag
from .tools import fmt_type

logger = logging.getLogger(__name__)


# Classes --------------------------------------------------------------------------------------------------------------

@unique
class RelativeTimeStyle(Enum):
    LONG = 1
    SHORT = 2
    NARROW = 3


@unique
class RelativeTimeNumeric(Enum):
    ALWAYS = 1
    AUTO = 2


@unique
class RelativeTimeUnit(Enum):
    SECOND = 1
    MINUTE = 2
    HOUR = 3
    DAY = 4
    WEEK = 5
    MONTH = 6
    QUARTER = 7
    YEAR = 8


RELATIVE_TIME_STYLE_LABELS: LabelMap[RelativeTimeStyle] = LabelMap("style", {
    RelativeTimeStyle.LONG: "long",
    RelativeTimeStyle.SHORT: "short",
    RelativeTimeStyle.NARROW: "narrow",
})

RELATIVE_TIME_NUMERIC_LABELS: LabelMap[RelativeTimeNumeric] = LabelMap("numeric", {
    RelativeTimeNumeric.ALWAYS: "always",
    RelativeTimeNumeric.AUTO: "auto",
})

RELATIVE_TIME_UNIT_LABELS: LabelMap[RelativeTimeUnit] = LabelMap("unit", {
    RelativeTimeUnit.SECOND: "second",
    RelativeTimeUnit.MINUTE: "minute",
    RelativeTimeUnit.HOUR: "hour",
    RelativeTimeUnit.DAY: "day",
    RelativeTimeUnit.WEEK: "week",
    RelativeTimeUnit.MONTH: "month",
    RelativeTimeUnit.QUARTER: "quarter",
    RelativeTimeUnit.YEAR: "year",
})

# Suffixes of the date_fields keys tried for a style; narrower styles fall back to wider ones
_FIELD_SUFFIXES: Mapping[RelativeTimeStyle, tuple[str, ...]] = MappingProxyType({
    RelativeTimeStyle.LONG: ("",),
    RelativeTimeStyle.SHORT: ("-short", ""),
    RelativeTimeStyle.NARROW: ("-narrow", "-short", ""),
})


class RelativeTimeFormat:
    """
    Relative time formatter bound to one locale.

    Args:
        locale: BCP 47 tag, Babel identifier or babel.Locale.
        provider: Locale data source, a fresh DataProvider.embedded() when omitted.
        style: "long", "short" or "narrow".
        numeric: "always" renders every value with a number ("in 1 day"). "auto" is accepted as an
            option but needs named forms such as "yesterday", which Babel's locale data does not carry.

    Zero and positive values are future ("in 0 days"), negative values past ("3 days ago").

    Raises:
        FormatOptionError: unknown style or numeric.
        FormatDataError: the locale is unavailable, or numeric is "auto".
    """

    def __init__(
            self,
            locale: str | Locale,
            *,
            provider: DataProvider | None = None,
            style: RelativeTimeStyle | str = RelativeTimeStyle.LONG,
            numeric: RelativeTimeNumeric | str = RelativeTimeNumeric.ALWAYS,
    ) -> None:
        self._style = RELATIVE_TIME_STYLE_LABELS.parse(style)
        self._numeric = RELATIVE_TIME_NUMERIC_LABELS.parse(numeric)

        if provider is None:
            provider = DataProvider.embedded()
        if not isinstance(provider, DataProvider):
            raise TypeError(f"provider must be DataProvider | None, but got {fmt_type(provider)}")
        self._locale = provider.locale(locale)

        if self._numeric is RelativeTimeNumeric.AUTO:
            raise FormatDataError("numeric 'auto' needs named relative forms such as 'yesterday', "
                                  "which are not available in the locale data")

        self._fields = locale_table(self._locale, "date_fields")
        self._number = NumberFormat(self._locale, provider=provider)

        logger.debug("created RelativeTimeFormat(%s, style=%s)",
                     self._locale, RELATIVE_TIME_STYLE_LABELS.label(self._style))

    # Methods ----------------------------------------------------------------------------------------------------------

    def format(self, value, unit: RelativeTimeUnit | str) -> str:
        """
        Format a signed amount of a unit relative to now.

        Raises:
            FormatOptionError: unit is not second, minute, hour, day, week, month, quarter or year.
            TypeError: value is bool, str or not numeric.
            ValueError: value is NaN or infinite.
        """
        sink = StringSink(RELATIVE_TIME_PARTS)
        self._render(value, unit, sink)
        return sink.finish()

    def format_to_parts(self, value, unit: RelativeTimeUnit | str) -> list[FormattedPart]:
        """
        Format as a list of parts; the number keeps its integer, group and fraction spans.

        Examples:
            >>> [(p.type.value, p.value) for p in RelativeTimeFormat("en").format_to_parts(2, "hour")]
            [('literal', 'in '), ('integer', '2'), ('literal', ' hours')]
        """
        sink = PartsCollector(RELATIVE_TIME_PARTS)
        self._render(value, unit, sink)
        return sink.finish()

    def resolved_options(self) -> dict[str, Any]:
        return {
            "locale": locale_tag(self._locale),
            "style": RELATIVE_TIME_STYLE_LABELS.label(self._style),
            "numeric": RELATIVE_TIME_NUMERIC_LABELS.label(self._numeric),
        }

    def __repr__(self) -> str:
        return (f"RelativeTimeFormat({locale_tag(self._locale)!r}, "
                f"style={RELATIVE_TIME_STYLE_LABELS.label(self._style)!r})")

    # Private Methods --------------------------------------------------------------------------------------------------

    def _render(self, value, unit: RelativeTimeUnit | str, sink: Sink) -> None:
        unit = RELATIVE_TIME_UNIT_LABELS.parse(unit)
        number = DecimalValue.from_number(value)
        magnitude = DecimalValue(False, number.digits, number.exponent)

        direction = "past" if number.negative else "future"
        pattern = self._pattern(unit, direction, Decimal(str(magnitude)))
        before, placeholder, after = pattern.partition("{0}")
        if not placeholder:
            sink.write(pattern)
            return

        if before:
            sink.write(before)
        for part in self._number.format_to_parts(magnitude):
            with sink.part(part.type):
                sink.write(part.value)
        if after:
            sink.write(after)

    def _pattern(self, unit: RelativeTimeUnit, direction: str, count: Decimal) -> str:
        name = RELATIVE_TIME_UNIT_LABELS.label(unit)
        for suffix in _FIELD_SUFFIXES[self._style]:
            patterns = self._fields.get(name + suffix)
            if patterns and direction in patterns:
                break
        else:
            raise FormatDataError(f"locale {self._locale} has no relative time patterns for {name!r}")

        by_count = patterns[direction]
        return by_count.get(self._locale.plural_form(count)) or by_count["other"]
