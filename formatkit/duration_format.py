"""
Locale-aware duration formatting.

    >>> DurationFormat("en").format({"hours": 1, "minutes": 30})
    '1 hour, 30 minutes'
    >>> DurationFormat("en", style="digital").format(timedelta(hours=1, minutes=30, seconds=45))
    '1:30:45'

Each non-zero unit is rendered with the locale's CLDR duration unit pattern ("{0} hours") and the
units are joined with the locale's unit list patterns. The digital style renders hours, minutes and
seconds as a clock, with any larger units in front of it.
"""

# Standard library -----------------------------------------------------------------------------------------------------
import logging
from datetime import timedelta
from enum import Enum, unique
from types import MappingProxyType
from typing import Any, Mapping

# Third-party ----------------------------------------------------------------------------------------------------------
from babel import Locale, dates as babel_dates, numbers as babel_numbers

# Local ----------------------------------------------------------------------------------------------------------------
from .collections import LabelMap
from .errors import FormatDataError
from .list_format import ListFormat, ListStyle, ListType
from .number_format import NumberFormat
from .parts import DURATION_PARTS, FormattedPart, Part, PartsCollector, Sink, StringSink
from .provider import DataProvider, locale_table, locale_tag
from .tools import fmt_choices, fmt_type, fmt_value

logger = logging.getLogger(__name__)

Token = tuple[Part, str]


# Classes --------------------------------------------------------------------------------------------------------------

class DurationConf:
    """
    Duration units, largest first.

    Attributes:
        UNITS: Accepted keys of a duration mapping, in output order.
        CLOCK_UNITS: Units the digital style shows as a clock.
    """
    UNITS: tuple[str, ...] = (
        "years", "months", "weeks", "days", "hours", "minutes", "seconds",
        "milliseconds", "microseconds", "nanoseconds",
    )
    CLOCK_UNITS: tuple[str, ...] = ("hours", "minutes", "seconds", "milliseconds", "microseconds", "nanoseconds")


@unique
class DurationStyle(Enum):
    LONG = 1
    SHORT = 2
    NARROW = 3
    DIGITAL = 4


DURATION_STYLE_LABELS: LabelMap[DurationStyle] = LabelMap("style", {
    DurationStyle.LONG: "long",
    DurationStyle.SHORT: "short",
    DurationStyle.NARROW: "narrow",
    DurationStyle.DIGITAL: "digital",
})

# Unit pattern length and unit list width per style; digital shows its larger units short
_UNIT_LENGTH: Mapping[DurationStyle, str] = MappingProxyType({
    DurationStyle.LONG: "long",
    DurationStyle.SHORT: "short",
    DurationStyle.NARROW: "narrow",
    DurationStyle.DIGITAL: "short",
})

_LIST_STYLE: Mapping[DurationStyle, ListStyle] = MappingProxyType({
    DurationStyle.LONG: ListStyle.LONG,
    DurationStyle.SHORT: ListStyle.SHORT,
    DurationStyle.NARROW: ListStyle.NARROW,
    DurationStyle.DIGITAL: ListStyle.SHORT,
})


class DurationFormat:
    """
    Duration formatter bound to one locale.

    Args:
        locale: BCP 47 tag, Babel identifier or babel.Locale.
        provider: Locale data source, a fresh DataProvider.embedded() when omitted.
        style: "long", "short", "narrow" or "digital".

    Durations are mappings from unit names (years, months, weeks, days, hours, minutes, seconds,
    milliseconds, microseconds, nanoseconds) to non-negative ints, or datetime.timedelta values.

    Raises:
        FormatOptionError: unknown style.
        FormatDataError: the locale is unavailable.
    """

    def __init__(
            self,
            locale: str | Locale,
            *,
            provider: DataProvider | None = None,
            style: DurationStyle | str = DurationStyle.LONG,
    ) -> None:
        self._style = DURATION_STYLE_LABELS.parse(style)

        if provider is None:
            provider = DataProvider.embedded()
        if not isinstance(provider, DataProvider):
            raise TypeError(f"provider must be DataProvider | None, but got {fmt_type(provider)}")
        self._locale = provider.locale(locale)

        self._unit_patterns = locale_table(self._locale, "unit_patterns")
        self._number = NumberFormat(self._locale, provider=provider)
        self._list = ListFormat(self._locale, provider=provider, type=ListType.UNIT, style=_LIST_STYLE[self._style])
        self._separator = _time_separator(self._locale)
        self._decimal_symbol = babel_numbers.get_decimal_symbol(self._locale)

        logger.debug("created DurationFormat(%s, style=%s)", self._locale, DURATION_STYLE_LABELS.label(self._style))

    # Methods ----------------------------------------------------------------------------------------------------------

    def format(self, duration: Mapping[str, int] | timedelta) -> str:
        """
        Format a duration as a string.

        Raises:
            TypeError: duration is not a mapping or timedelta, or an amount is not int.
            ValueError: unknown unit, negative amount, or no non-zero amount.
        """
        sink = StringSink(DURATION_PARTS)
        self._render(duration, sink)
        return sink.finish()

    def format_to_parts(self, duration: Mapping[str, int] | timedelta) -> list[FormattedPart]:
        """
        Format a duration as a list of number, unit and literal parts.

        Examples:
            >>> [(p.type.value, p.value) for p in DurationFormat("en").format_to_parts({"days": 2})]
            [('integer', '2'), ('literal', ' '), ('unit', 'days')]
        """
        sink = PartsCollector(DURATION_PARTS)
        self._render(duration, sink)
        return sink.finish()

    def resolved_options(self) -> dict[str, Any]:
        return {
            "locale": locale_tag(self._locale),
            "style": DURATION_STYLE_LABELS.label(self._style),
        }

    def __repr__(self) -> str:
        return f"DurationFormat({locale_tag(self._locale)!r}, style={DURATION_STYLE_LABELS.label(self._style)!r})"

    # Private Methods --------------------------------------------------------------------------------------------------

    def _render(self, duration: Mapping[str, int] | timedelta, sink: Sink) -> None:
        amounts = _validate_duration(duration)
        length = _UNIT_LENGTH[self._style]

        if self._style is DurationStyle.DIGITAL:
            elements = [self._unit_element(unit, amounts[unit], length)
                        for unit in DurationConf.UNITS if unit not in DurationConf.CLOCK_UNITS and amounts[unit]]
            elements.append(self._clock_element(amounts))
        else:
            elements = [self._unit_element(unit, amount, length) for unit, amount in amounts.items() if amount]

        for part, text in self._list.layout(elements):
            if part is Part.LITERAL:
                if text:
                    sink.write(text)
            else:
                with sink.part(part):
                    sink.write(text)

    def _unit_element(self, unit: str, amount: int, length: str) -> list[Token]:
        patterns = self._patterns(unit, length)
        pattern = patterns.get(self._locale.plural_form(amount)) or patterns["other"]
        before, _, after = pattern.partition("{0}")
        return [*_unit_text(before), *self._number_tokens(amount), *_unit_text(after)]

    def _clock_element(self, amounts: dict[str, int]) -> list[Token]:
        """h:mm:ss with the locale's time separator, plus a fraction for sub-second amounts."""
        nanos = amounts["milliseconds"] * 10 ** 6 + amounts["microseconds"] * 10 ** 3 + amounts["nanoseconds"]
        carry, nanos = divmod(nanos, 10 ** 9)
        carry, seconds = divmod(amounts["seconds"] + carry, 60)
        carry, minutes = divmod(amounts["minutes"] + carry, 60)
        hours = amounts["hours"] + carry

        tokens = [
            *self._number_tokens(hours),
            (Part.LITERAL, self._separator),
            (Part.INTEGER, f"{minutes:02d}"),
            (Part.LITERAL, self._separator),
            (Part.INTEGER, f"{seconds:02d}"),
        ]
        if nanos:
            tokens += [(Part.DECIMAL, self._decimal_symbol), (Part.FRACTION, f"{nanos:09d}".rstrip("0"))]
        return tokens

    def _number_tokens(self, amount: int) -> list[Token]:
        return [(p.type, p.value) for p in self._number.format_to_parts(amount)]

    def _patterns(self, unit: str, length: str) -> Mapping[str, str]:
        key = "duration-" + unit[:-1]
        table = self._unit_patterns.get(key)
        # Long and narrow unit lengths alias the short ones in CLDR root
        for candidate in (length, "short"):
            if table and table.get(candidate):
                return table[candidate]
        raise FormatDataError(f"locale {self._locale} has no {length!r} patterns for {key!r}")


# Private Methods ------------------------------------------------------------------------------------------------------

def _validate_duration(duration) -> dict[str, int]:
    if isinstance(duration, timedelta):
        if duration < timedelta(0):
            raise ValueError(f"duration must be non-negative, but got {fmt_value(duration)}")
        hours, rest = divmod(duration.seconds, 3600)
        minutes, seconds = divmod(rest, 60)
        milliseconds, microseconds = divmod(duration.microseconds, 1000)
        amounts = dict.fromkeys(DurationConf.UNITS, 0)
        amounts.update(days=duration.days, hours=hours, minutes=minutes, seconds=seconds,
                       milliseconds=milliseconds, microseconds=microseconds)
    elif isinstance(duration, Mapping):
        for unit in duration:
            if unit not in DurationConf.UNITS:
                raise ValueError(f"unknown duration unit {fmt_value(unit)}, "
                                 f"expected one of {fmt_choices(DurationConf.UNITS)}")
        amounts = {}
        for unit in DurationConf.UNITS:
            amount = duration.get(unit, 0)
            if isinstance(amount, bool) or not isinstance(amount, int):
                raise TypeError(f"{unit} must be int, but got {fmt_type(amount)}")
            if amount < 0:
                raise ValueError(f"{unit} must be non-negative, but got {fmt_value(amount)}")
            amounts[unit] = amount
    else:
        raise TypeError(f"duration must be Mapping | timedelta, but got {fmt_type(duration)}")

    if not any(amounts.values()):
        raise ValueError("duration must have at least one non-zero component")
    return amounts


def _unit_text(text: str) -> list[Token]:
    """Pattern text around the number: surrounding whitespace is literal, the rest names the unit."""
    core = text.strip()
    if not core:
        return [(Part.LITERAL, text)] if text else []
    start = text.index(core)
    lead, trail = text[:start], text[start + len(core):]
    tokens = [(Part.LITERAL, lead)] if lead else []
    tokens.append((Part.UNIT, core))
    if trail:
        tokens.append((Part.LITERAL, trail))
    return tokens


def _time_separator(locale: Locale) -> str:
    """Text between hour and minute in the locale's medium time pattern, ':' when there is none."""
    tokens = babel_dates.tokenize_pattern(locale.time_formats["medium"].pattern)
    for (kind, token), (next_kind, next_token) in zip(tokens, tokens[1:]):
        if kind == "field" and token[0] in "hHKk" and next_kind == "chars":
            return next_token
    return ":"
