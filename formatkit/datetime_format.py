"""
Locale-aware date and time formatting.

    >>> from datetime import datetime
    >>> dt = datetime(2025, 12, 28, 9, 30)
    >>> DateTimeFormat("en", date_style="long").format(dt)
    'December 28, 2025'
    >>> DateTimeFormat("ja", year="numeric", month="long", day="numeric").format(dt)
    '2025年12月28日'

Options are resolved by formatkit.options into a FormatDescriptor, which is bound here to Babel's CLDR
patterns once, at construction. Style options use the locale's date/time patterns directly; component
options are matched against the locale's skeleton patterns and field widths are then adjusted to what
was requested.
"""

# Standard library -----------------------------------------------------------------------------------------------------
import logging
import re
from datetime import date, datetime, time, timezone, tzinfo
from types import MappingProxyType
from typing import Any, Mapping

# Third-party ----------------------------------------------------------------------------------------------------------
from babel import Locale, dates as babel_dates

# Local ----------------------------------------------------------------------------------------------------------------
from .errors import FormatDataError, FormatOptionError
from .options import (
    CALENDAR_LABELS, COMPONENT_LABELS, DATE_STYLE_LABELS, FIELD_SET_LABELS, HOUR_CYCLE_LABELS, LENGTH_LABELS,
    TIME_STYLE_LABELS, Calendar, ComponentSelection, ComponentStyle, FormatDescriptor, HourCycle, Length,
    resolve_datetime_options,
)
from .parts import DATETIME_PARTS, FormattedPart, Part, PartsCollector, Sink, StringSink
from .provider import DataProvider, locale_tag
from .tools import fmt_type, fmt_value

logger = logging.getLogger(__name__)

# Pattern tokens as produced by babel.dates.tokenize_pattern: ("chars", text) or ("field", (char, width))
Token = tuple[str, Any]

_FIELD_PARTS: Mapping[str, Part] = MappingProxyType({
    "G": Part.ERA,
    "y": Part.YEAR, "Y": Part.YEAR, "u": Part.YEAR, "U": Part.YEAR, "r": Part.YEAR,
    "M": Part.MONTH, "L": Part.MONTH,
    "d": Part.DAY,
    "E": Part.WEEKDAY, "e": Part.WEEKDAY, "c": Part.WEEKDAY,
    "a": Part.DAY_PERIOD, "b": Part.DAY_PERIOD, "B": Part.DAY_PERIOD,
    "h": Part.HOUR, "H": Part.HOUR, "K": Part.HOUR, "k": Part.HOUR,
    "m": Part.MINUTE,
    "s": Part.SECOND,
    "S": Part.FRACTIONAL_SECOND,
    "z": Part.TIME_ZONE_NAME, "Z": Part.TIME_ZONE_NAME, "O": Part.TIME_ZONE_NAME, "v": Part.TIME_ZONE_NAME,
    "V": Part.TIME_ZONE_NAME, "X": Part.TIME_ZONE_NAME, "x": Part.TIME_ZONE_NAME,
})

_ALWAYS_NUMERIC = frozenset("yYuUrdhHKkmsS")
_DAY_PERIODS = frozenset("abB")
_HOURS = frozenset("hHKk")

_MONTH_WIDTH: Mapping[ComponentStyle, int] = MappingProxyType({
    ComponentStyle.NUMERIC: 1,
    ComponentStyle.TWO_DIGIT: 2,
    ComponentStyle.SHORT: 3,
    ComponentStyle.LONG: 4,
    ComponentStyle.NARROW: 5,
})

_WEEKDAY_WIDTH: Mapping[ComponentStyle, int] = MappingProxyType({
    ComponentStyle.SHORT: 3,
    ComponentStyle.LONG: 4,
    ComponentStyle.NARROW: 5,
})

# Pattern field -> skeleton field it answers to
_FIELD_CLASS: Mapping[str, str] = MappingProxyType({
    "y": "y", "M": "M", "L": "M", "d": "d", "E": "E", "e": "E", "c": "E",
    "h": "h", "H": "h", "K": "h", "k": "h", "m": "m", "s": "s",
})

_HOUR_CYCLE_CHAR: Mapping[HourCycle, str] = MappingProxyType({
    HourCycle.H11: "K",
    HourCycle.H12: "h",
    HourCycle.H23: "H",
})

_GLUE_PLACEHOLDER = re.compile(r"(\{[01]\})")


# Classes --------------------------------------------------------------------------------------------------------------

class DateTimeFormat:
    """
    Date/time formatter bound to one locale.

    Args:
        locale: BCP 47 tag, Babel identifier or babel.Locale.
        provider: Locale data source, a fresh DataProvider.embedded() when omitted.
        **options: date_style / time_style, or any of year, month, day, weekday, hour, minute, second,
            plus hour_cycle, calendar and time_zone. See resolve_datetime_options().

    Naive datetimes are taken as UTC and shown in time_zone (UTC when not set). Dates are shown as
    midnight wall-clock time in that zone. Only the Gregorian calendar can be rendered from Babel's data.

    Raises:
        FormatOptionError: invalid option value or combination, or an unknown time zone.
        FormatDataError: the locale is unavailable, the calendar cannot be rendered, or no pattern
            in the locale data fits the requested fields.
        TypeError: an option has the wrong Python type.
    """

    def __init__(self, locale: str | Locale, *, provider: DataProvider | None = None, **options: Any) -> None:
        self._descriptor = resolve_datetime_options(options)

        if provider is None:
            provider = DataProvider.embedded()
        if not isinstance(provider, DataProvider):
            raise TypeError(f"provider must be DataProvider | None, but got {fmt_type(provider)}")
        self._locale = provider.locale(locale)

        self._tz = _bind_time_zone(self._descriptor.time_zone)
        _check_calendar(self._descriptor.calendar)
        self._tokens = _bind_pattern(self._locale, self._descriptor)

        logger.debug("created DateTimeFormat(%s, %s) with pattern %r",
                     self._locale, self._descriptor.composite, self.pattern)

    # Methods ----------------------------------------------------------------------------------------------------------

    @property
    def descriptor(self) -> FormatDescriptor:
        return self._descriptor

    @property
    def pattern(self) -> str:
        """The bound CLDR pattern, e.g. 'MMMM d, y'."""
        return babel_dates.untokenize_pattern(self._tokens)

    def format(self, value: date | datetime) -> str:
        """
        Format a date or datetime as a string.

        Raises:
            TypeError: value is not a date or datetime.
        """
        sink = StringSink(DATETIME_PARTS)
        self._render(value, sink)
        return sink.finish()

    def format_to_parts(self, value: date | datetime) -> list[FormattedPart]:
        """
        Format a date or datetime as a list of parts whose values concatenate to format(value).

        Numeric fields come out as single spans of their field type:

            >>> [(p.type.value, p.value) for p in DateTimeFormat("en", day="numeric").format_to_parts(date(2025, 1, 12))]
            [('day', '12')]
        """
        sink = PartsCollector(DATETIME_PARTS)
        self._render(value, sink)
        return sink.finish()

    def resolved_options(self) -> dict[str, Any]:
        """Options in effect; hour_cycle appears only when requested."""
        d = self._descriptor
        resolved: dict[str, Any] = {
            "locale": locale_tag(self._locale),
            "calendar": CALENDAR_LABELS.label(d.calendar or Calendar.GREGORY),
        }
        if isinstance(d.selection, ComponentSelection):
            for name, style in d.selection.items():
                resolved[name] = COMPONENT_LABELS[name].label(style)
        else:
            if d.selection.date_style is not None:
                resolved["date_style"] = DATE_STYLE_LABELS.label(d.selection.date_style)
            if d.selection.time_style is not None:
                resolved["time_style"] = TIME_STYLE_LABELS.label(d.selection.time_style)
        resolved["time_zone"] = d.time_zone or "UTC"
        if d.hour_cycle is not None:
            resolved["hour_cycle"] = HOUR_CYCLE_LABELS.label(d.hour_cycle)
        return resolved

    def __repr__(self) -> str:
        return f"DateTimeFormat({locale_tag(self._locale)!r}, pattern={self.pattern!r})"

    # Private Methods --------------------------------------------------------------------------------------------------

    def _render(self, value: date | datetime, sink: Sink) -> None:
        fields = babel_dates.DateTimeFormat(self._zoned(value), self._locale)
        for kind, token in self._tokens:
            if kind == "chars":
                sink.write(token)
                continue

            char, width = token
            text = fields[char * width]
            part = _FIELD_PARTS.get(char)
            if part is None:
                sink.write(text)
            elif _is_numeric(char, width):
                with sink.part(part):
                    with sink.part(Part.INTEGER):
                        sink.write(text)
            else:
                with sink.part(part):
                    sink.write(text)

    def _zoned(self, value: date | datetime) -> datetime:
        if isinstance(value, datetime):
            if value.tzinfo is None or value.utcoffset() is None:
                value = value.replace(tzinfo=timezone.utc)
            return value.astimezone(self._tz)
        if isinstance(value, date):
            return _localize(datetime.combine(value, time()), self._tz)
        raise TypeError(f"value must be date | datetime, but got {fmt_type(value)}")


# Private Methods ------------------------------------------------------------------------------------------------------

def _is_numeric(char: str, width: int) -> bool:
    return char in _ALWAYS_NUMERIC or (char in "MLec" and width <= 2)


def _localize(naive: datetime, tz: tzinfo) -> datetime:
    # pytz zones, returned by Babel when pytz is installed, must not be passed as tzinfo=
    localize = getattr(tz, "localize", None)
    if localize is not None:
        return localize(naive)
    return naive.replace(tzinfo=tz)


def _bind_time_zone(name: str | None) -> tzinfo:
    try:
        return babel_dates.get_timezone(name or "UTC")
    except (LookupError, ValueError) as exc:
        raise FormatOptionError(f"invalid IANA time zone {fmt_value(name)}",
                                option="time_zone", accepted="IANA time zone name") from exc


def _check_calendar(calendar: Calendar | None) -> None:
    if calendar is None or calendar is Calendar.GREGORY:
        return
    raise FormatDataError(f"calendar {CALENDAR_LABELS.label(calendar)!r} is not available in the locale data, "
                          f"only 'gregory' can be rendered")


def _bind_pattern(locale: Locale, descriptor: FormatDescriptor) -> tuple[Token, ...]:
    """Pick and adjust the pattern tokens for a descriptor."""
    if descriptor.is_style:
        date_tokens = time_tokens = None
        if descriptor.field_set is not None:
            date_tokens = _tokenize(locale.date_formats[LENGTH_LABELS.label(descriptor.length)])
        if descriptor.has_time:
            time_tokens = _tokenize(locale.time_formats[LENGTH_LABELS.label(descriptor.time_length)])
    else:
        date_tokens, time_tokens = _component_tokens(locale, descriptor)

    if time_tokens is not None and descriptor.hour_cycle is not None:
        time_tokens = _apply_hour_cycle(time_tokens, descriptor.hour_cycle)

    if date_tokens is None:
        return tuple(time_tokens)
    if time_tokens is None:
        return tuple(date_tokens)

    glue = locale.datetime_formats[LENGTH_LABELS.label(descriptor.length)]
    return tuple(_combine(glue, date_tokens, time_tokens))


def _tokenize(pattern) -> list[Token]:
    # Babel returns DateTimePattern objects from locale data, plain strings elsewhere
    return babel_dates.tokenize_pattern(getattr(pattern, "pattern", pattern))


def _component_tokens(locale: Locale, descriptor: FormatDescriptor) -> tuple[list[Token] | None, list[Token] | None]:
    selection = descriptor.selection
    date_tokens = time_tokens = None

    if descriptor.field_set is not None:
        names = FIELD_SET_LABELS.label(descriptor.field_set).split("-")
        skeleton = "".join(_date_skeleton(name, getattr(selection, name), descriptor.length) for name in names)
        date_tokens = _adjust_widths(_match(locale, skeleton), skeleton)

    if descriptor.has_time:
        hour_char = _HOUR_CYCLE_CHAR[descriptor.hour_cycle] if descriptor.hour_cycle else _locale_hour_char(locale)
        hour_char = "H" if hour_char in "Hk" else "h"
        skeleton = "".join([
            _numeric_skeleton(hour_char, selection.hour),
            _numeric_skeleton("m", selection.minute),
            _numeric_skeleton("s", selection.second),
        ])
        time_tokens = _adjust_widths(_match(locale, skeleton), skeleton)

    return date_tokens, time_tokens


def _numeric_skeleton(char: str, style: ComponentStyle | None) -> str:
    if style is None:
        return ""
    return char * 2 if style is ComponentStyle.TWO_DIGIT else char


def _date_skeleton(name: str, style: ComponentStyle | None, length: Length) -> str:
    """Skeleton fragment for a date field of the field set; unrequested fields follow the length."""
    if name == "year":
        return _numeric_skeleton("y", style or ComponentStyle.NUMERIC)
    if name == "day":
        return _numeric_skeleton("d", style or ComponentStyle.NUMERIC)
    if name == "month":
        if style is None:
            style = ComponentStyle.LONG if length is Length.LONG else ComponentStyle.NUMERIC
        return "M" * _MONTH_WIDTH[style]
    if style is None:
        style = ComponentStyle.LONG if length is Length.LONG else ComponentStyle.SHORT
    return "E" if style is ComponentStyle.SHORT else "E" * _WEEKDAY_WIDTH[style]


def _match(locale: Locale, skeleton: str) -> list[Token]:
    skeletons = locale.datetime_skeletons
    match = (babel_dates.match_skeleton(skeleton, skeletons)
             or babel_dates.match_skeleton(skeleton, skeletons, allow_different_fields=True))
    if match is None:
        raise FormatDataError(f"no pattern for fields {skeleton!r} in locale {locale}")
    return _tokenize(skeletons[match])


def _adjust_widths(tokens: list[Token], skeleton: str) -> list[Token]:
    """
    Move the widths of a matched pattern towards the widths the skeleton asked for.

    A field only changes within its form: a numeric month ('M', 'MM') stays numeric when text was
    requested, as in ja 'y年M月d日', and a text month stays text.
    """
    requested: dict[str, int] = {}
    for kind, token in _tokenize(skeleton):
        if kind == "field" and token[0] in _FIELD_CLASS:
            requested[_FIELD_CLASS[token[0]]] = token[1]

    adjusted = []
    for kind, token in tokens:
        if kind == "field" and _FIELD_CLASS.get(token[0]) in requested:
            char, width = token
            field = _FIELD_CLASS[char]
            wanted = requested[field]
            if field == "E":
                if char == "E" or width >= 3:
                    width = max(wanted, 3)
            elif field == "M" and width >= 3:
                if wanted >= 3:
                    width = wanted
            elif wanted == 2 and width < 3:
                width = 2
            token = (char, width)
        adjusted.append((kind, token))
    return adjusted


def _locale_hour_char(locale: Locale) -> str:
    """Hour field the locale uses in its short time pattern."""
    for kind, token in _tokenize(locale.time_formats["short"]):
        if kind == "field" and token[0] in _HOURS:
            return token[0]
    return "h"


def _apply_hour_cycle(tokens: list[Token], cycle: HourCycle) -> list[Token]:
    """Rewrite hour fields for an hour cycle, removing or adding the day period as needed."""
    target = _HOUR_CYCLE_CHAR[cycle]
    result = []
    for kind, token in tokens:
        if kind == "field" and token[0] in _HOURS:
            if cycle is HourCycle.H23:
                width = 2
            else:
                width = 1 if token[0] in "Hk" else token[1]
            token = (target, width)
        result.append((kind, token))

    has_period = any(kind == "field" and token[0] in _DAY_PERIODS for kind, token in result)
    if cycle is HourCycle.H23:
        return _drop_day_periods(result) if has_period else result
    if not has_period:
        result += [("chars", " "), ("field", ("a", 1))]
    return result


def _drop_day_periods(tokens: list[Token]) -> list[Token]:
    """Remove day period fields together with the whitespace separating them from the time."""
    result: list[Token] = []
    strip_next = False
    for kind, token in tokens:
        if kind == "field" and token[0] in _DAY_PERIODS:
            if result and result[-1][0] == "chars" and result[-1][1] != result[-1][1].rstrip():
                text = result.pop()[1].rstrip()
                if text:
                    result.append(("chars", text))
            else:
                strip_next = True
            continue
        if kind == "chars" and strip_next:
            token = token.lstrip()
            strip_next = False
            if not token:
                continue
        strip_next = False
        result.append((kind, token))
    return result


def _combine(glue: str, date_tokens: list[Token], time_tokens: list[Token]) -> list[Token]:
    """Join date and time tokens with a locale glue pattern such as "{1}, {0}"."""
    result: list[Token] = []
    for piece in _GLUE_PLACEHOLDER.split(glue):
        if piece == "{1}":
            result.extend(date_tokens)
        elif piece == "{0}":
            result.extend(time_tokens)
        elif piece:
            text = re.sub(r"'([^']*)'", lambda m: m.group(1) or "'", piece)
            result.append(("chars", text))
    return result
