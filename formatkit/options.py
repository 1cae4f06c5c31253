"""
Date/time option resolution.

Turns a sparse set of user-facing style flags into one canonical FormatDescriptor:

    >>> d = resolve_datetime_options(year="numeric", month="long", day="numeric")
    >>> d.composite, d.length
    ('year-month-day', <Length.LONG: 1>)

Two mutually exclusive option groups exist. Style options (date_style, time_style) pick coarse
locale-defined lengths; component options (year, month, day, weekday, hour, minute, second) pick
fields individually. Auxiliary options (hour_cycle, calendar, time_zone) combine with either group.
"""

# Standard library -----------------------------------------------------------------------------------------------------
from collections.abc import Mapping
from dataclasses import dataclass, fields
from enum import Enum, unique
from types import MappingProxyType
from typing import Any

# Local ----------------------------------------------------------------------------------------------------------------
from .collections import LabelMap
from .errors import FormatOptionError
from .tools import fmt_choices, fmt_type, fmt_value


# Enums ----------------------------------------------------------------------------------------------------------------

@unique
class DateTimeStyle(Enum):
    FULL = 1
    LONG = 2
    MEDIUM = 3
    SHORT = 4


@unique
class Length(Enum):
    """Locale-defined pattern length a renderer picks patterns with."""
    LONG = 1
    MEDIUM = 2
    SHORT = 3


@unique
class ComponentStyle(Enum):
    NUMERIC = 1
    TWO_DIGIT = 2
    LONG = 3
    SHORT = 4
    NARROW = 5


@unique
class HourCycle(Enum):
    H11 = 1
    H12 = 2
    H23 = 3


@unique
class Calendar(Enum):
    GREGORY = 1
    JAPANESE = 2
    BUDDHIST = 3
    CHINESE = 4
    HEBREW = 5
    ISLAMIC = 6
    PERSIAN = 7
    INDIAN = 8
    ETHIOPIAN = 9
    COPTIC = 10
    ROC = 11
    DANGI = 12


@unique
class FieldSet(Enum):
    """Named date field sets a locale provides patterns for."""
    YEAR = 1
    MONTH = 2
    DAY = 3
    WEEKDAY = 4
    YEAR_MONTH = 5
    MONTH_DAY = 6
    YEAR_MONTH_DAY = 7
    DAY_WEEKDAY = 8
    MONTH_DAY_WEEKDAY = 9
    YEAR_MONTH_DAY_WEEKDAY = 10


# Label tables ---------------------------------------------------------------------------------------------------------

_STYLE_TABLE = {
    DateTimeStyle.FULL: "full",
    DateTimeStyle.LONG: "long",
    DateTimeStyle.MEDIUM: "medium",
    DateTimeStyle.SHORT: "short",
}
DATE_STYLE_LABELS: LabelMap[DateTimeStyle] = LabelMap("date_style", _STYLE_TABLE)
TIME_STYLE_LABELS: LabelMap[DateTimeStyle] = LabelMap("time_style", _STYLE_TABLE)

LENGTH_LABELS: LabelMap[Length] = LabelMap("length", {
    Length.LONG: "long",
    Length.MEDIUM: "medium",
    Length.SHORT: "short",
})

_NUMERIC_TABLE = {
    ComponentStyle.NUMERIC: "numeric",
    ComponentStyle.TWO_DIGIT: "two_digit",
}
COMPONENT_LABELS: Mapping[str, LabelMap[ComponentStyle]] = MappingProxyType({
    "year": LabelMap("year", _NUMERIC_TABLE),
    "month": LabelMap("month", {
        ComponentStyle.NUMERIC: "numeric",
        ComponentStyle.TWO_DIGIT: "two_digit",
        ComponentStyle.LONG: "long",
        ComponentStyle.SHORT: "short",
        ComponentStyle.NARROW: "narrow",
    }),
    "day": LabelMap("day", _NUMERIC_TABLE),
    "weekday": LabelMap("weekday", {
        ComponentStyle.LONG: "long",
        ComponentStyle.SHORT: "short",
        ComponentStyle.NARROW: "narrow",
    }),
    "hour": LabelMap("hour", _NUMERIC_TABLE),
    "minute": LabelMap("minute", _NUMERIC_TABLE),
    "second": LabelMap("second", _NUMERIC_TABLE),
})

HOUR_CYCLE_LABELS: LabelMap[HourCycle] = LabelMap("hour_cycle", {
    HourCycle.H11: "h11",
    HourCycle.H12: "h12",
    HourCycle.H23: "h23",
})

CALENDAR_LABELS: LabelMap[Calendar] = LabelMap("calendar", {
    Calendar.GREGORY: "gregory",
    Calendar.JAPANESE: "japanese",
    Calendar.BUDDHIST: "buddhist",
    Calendar.CHINESE: "chinese",
    Calendar.HEBREW: "hebrew",
    Calendar.ISLAMIC: "islamic",
    Calendar.PERSIAN: "persian",
    Calendar.INDIAN: "indian",
    Calendar.ETHIOPIAN: "ethiopian",
    Calendar.COPTIC: "coptic",
    Calendar.ROC: "roc",
    Calendar.DANGI: "dangi",
})

FIELD_SET_LABELS: LabelMap[FieldSet] = LabelMap("field_set", {
    FieldSet.YEAR: "year",
    FieldSet.MONTH: "month",
    FieldSet.DAY: "day",
    FieldSet.WEEKDAY: "weekday",
    FieldSet.YEAR_MONTH: "year-month",
    FieldSet.MONTH_DAY: "month-day",
    FieldSet.YEAR_MONTH_DAY: "year-month-day",
    FieldSet.DAY_WEEKDAY: "day-weekday",
    FieldSet.MONTH_DAY_WEEKDAY: "month-day-weekday",
    FieldSet.YEAR_MONTH_DAY_WEEKDAY: "year-month-day-weekday",
})

# Presence of (year, month, day, weekday) -> date field set.
# Combinations without a named set map to the nearest named superset.
FIELD_SET_TABLE: Mapping[tuple[bool, bool, bool, bool], FieldSet | None] = MappingProxyType({
    (False, False, False, False): None,
    (True, False, False, False): FieldSet.YEAR,
    (False, True, False, False): FieldSet.MONTH,
    (False, False, True, False): FieldSet.DAY,
    (False, False, False, True): FieldSet.WEEKDAY,
    (True, True, False, False): FieldSet.YEAR_MONTH,
    (False, True, True, False): FieldSet.MONTH_DAY,
    (True, True, True, False): FieldSet.YEAR_MONTH_DAY,
    (False, False, True, True): FieldSet.DAY_WEEKDAY,
    (False, True, True, True): FieldSet.MONTH_DAY_WEEKDAY,
    (True, True, True, True): FieldSet.YEAR_MONTH_DAY_WEEKDAY,
    # Fallback rows
    (True, False, True, False): FieldSet.YEAR_MONTH_DAY,
    (False, True, False, True): FieldSet.MONTH_DAY_WEEKDAY,
    (True, False, False, True): FieldSet.YEAR_MONTH_DAY_WEEKDAY,
    (True, True, False, True): FieldSet.YEAR_MONTH_DAY_WEEKDAY,
    (True, False, True, True): FieldSet.YEAR_MONTH_DAY_WEEKDAY,
})

_STYLE_LENGTH: Mapping[DateTimeStyle, Length] = MappingProxyType({
    DateTimeStyle.FULL: Length.LONG,
    DateTimeStyle.LONG: Length.LONG,
    DateTimeStyle.MEDIUM: Length.MEDIUM,
    DateTimeStyle.SHORT: Length.SHORT,
})

_TEXTUAL = frozenset({ComponentStyle.LONG, ComponentStyle.SHORT, ComponentStyle.NARROW})


# Classes --------------------------------------------------------------------------------------------------------------

class DateTimeConf:
    """
    Default configuration constants for date/time option resolution.

    Attributes:
        STYLE_KEYS: Option keys of the style group.
        COMPONENT_KEYS: Option keys of the component group, in rendering order.
        AUXILIARY_KEYS: Option keys accepted alongside either group.
        DEFAULT_COMPONENTS: Components used when neither group is given.
    """
    STYLE_KEYS: tuple[str, ...] = ("date_style", "time_style")
    COMPONENT_KEYS: tuple[str, ...] = ("year", "month", "day", "weekday", "hour", "minute", "second")
    AUXILIARY_KEYS: tuple[str, ...] = ("hour_cycle", "calendar", "time_zone")
    DEFAULT_COMPONENTS: Mapping[str, str] = MappingProxyType({"year": "numeric", "month": "numeric", "day": "numeric"})


@dataclass(frozen=True)
class StyleSelection:
    date_style: DateTimeStyle | None = None
    time_style: DateTimeStyle | None = None


@dataclass(frozen=True)
class ComponentSelection:
    year: ComponentStyle | None = None
    month: ComponentStyle | None = None
    day: ComponentStyle | None = None
    weekday: ComponentStyle | None = None
    hour: ComponentStyle | None = None
    minute: ComponentStyle | None = None
    second: ComponentStyle | None = None

    def items(self) -> list[tuple[str, ComponentStyle]]:
        """Requested (component, style) pairs in rendering order."""
        return [(f.name, getattr(self, f.name)) for f in fields(self) if getattr(self, f.name) is not None]

    @property
    def has_time(self) -> bool:
        return any(v is not None for v in (self.hour, self.minute, self.second))


@dataclass(frozen=True)
class FormatDescriptor:
    """
    Canonical, immutable date/time formatting configuration.

    Attributes:
        selection: Either the requested styles or the requested components, never both.
        field_set: Named date field set, None when no date part is rendered.
        has_time: True when a time part is rendered.
        length: Date-part length, or time-part length when there is no date part.
            In component mode LONG for textual month or weekday, else SHORT.
        time_length: Time-part length in style mode, None in component mode.
        hour_cycle: Requested hour cycle, None for the locale default.
        calendar: Requested calendar, None for the locale default.
        time_zone: IANA time zone name, None for UTC.
    """
    selection: StyleSelection | ComponentSelection
    field_set: FieldSet | None
    has_time: bool
    length: Length
    time_length: Length | None = None
    hour_cycle: HourCycle | None = None
    calendar: Calendar | None = None
    time_zone: str | None = None

    def __post_init__(self):
        if not isinstance(self.selection, (StyleSelection, ComponentSelection)):
            raise TypeError(f"selection must be StyleSelection | ComponentSelection, "
                            f"but got {fmt_type(self.selection)}")
        if self.field_set is None and not self.has_time:
            raise ValueError("descriptor must render a date part, a time part or both")

    @property
    def is_style(self) -> bool:
        return isinstance(self.selection, StyleSelection)

    @property
    def composite(self) -> str:
        """Combined field set name, e.g. 'year-month-day-time' or 'time'."""
        parts = []
        if self.field_set is not None:
            parts.append(FIELD_SET_LABELS.label(self.field_set))
        if self.has_time:
            parts.append("time")
        return "-".join(parts)


# Methods --------------------------------------------------------------------------------------------------------------

def resolve_datetime_options(options: Mapping[str, Any] | None = None, /, **kwargs: Any) -> FormatDescriptor:
    """
    Resolve date/time options into a FormatDescriptor.

    Options may be given as a mapping, as keyword arguments or both (keywords win). A group counts as
    used when any of its keys is present, even with value None. Values are labels ("long", "two_digit",
    "h23", ...) or the matching enum members.

    Raises:
        FormatOptionError: unknown option key, style and component options mixed, a used group with no
            value, or a value outside the accepted labels.
        TypeError: options is not a mapping, or time_zone is not str.

    Examples:
        >>> resolve_datetime_options().composite
        'year-month-day'
        >>> resolve_datetime_options(date_style="full", time_style="short").composite
        'year-month-day-time'
        >>> resolve_datetime_options(year="numeric", day="numeric").composite
        'year-month-day'
    """
    if options is not None and not isinstance(options, Mapping):
        raise TypeError(f"options must be Mapping | None, but got {fmt_type(options)}")
    merged = {**(options or {}), **kwargs}

    accepted = DateTimeConf.STYLE_KEYS + DateTimeConf.COMPONENT_KEYS + DateTimeConf.AUXILIARY_KEYS
    for key in merged:
        if key not in accepted:
            raise FormatOptionError(f"unknown date/time option {fmt_value(key)}, expected one of {fmt_choices(accepted)}",
                                    option=str(key), accepted=fmt_choices(accepted))

    style_used = any(k in merged for k in DateTimeConf.STYLE_KEYS)
    component_used = any(k in merged for k in DateTimeConf.COMPONENT_KEYS)

    if style_used and component_used:
        raise FormatOptionError("style and component options are mutually exclusive: "
                                f"{fmt_choices(DateTimeConf.STYLE_KEYS)} cannot be combined with "
                                f"{fmt_choices(DateTimeConf.COMPONENT_KEYS)}")

    if style_used:
        core = _resolve_styles(merged)
    elif component_used:
        core = _resolve_components(merged)
    else:
        core = _resolve_components(DateTimeConf.DEFAULT_COMPONENTS)

    return FormatDescriptor(
        **core,
        hour_cycle=_parse_optional(HOUR_CYCLE_LABELS, merged.get("hour_cycle")),
        calendar=_parse_optional(CALENDAR_LABELS, merged.get("calendar")),
        time_zone=_validate_time_zone(merged.get("time_zone")),
    )


# Private Methods ------------------------------------------------------------------------------------------------------

def _parse_optional(labels: LabelMap, value):
    return None if value is None else labels.parse(value)


def _resolve_styles(options: Mapping[str, Any]) -> dict[str, Any]:
    date_style = _parse_optional(DATE_STYLE_LABELS, options.get("date_style"))
    time_style = _parse_optional(TIME_STYLE_LABELS, options.get("time_style"))
    if date_style is None and time_style is None:
        raise FormatOptionError("at least one of date_style or time_style must be specified",
                                accepted=fmt_choices(DATE_STYLE_LABELS.labels()))

    date_length = _STYLE_LENGTH[date_style] if date_style is not None else None
    time_length = _STYLE_LENGTH[time_style] if time_style is not None else None
    return {
        "selection": StyleSelection(date_style=date_style, time_style=time_style),
        "field_set": FieldSet.YEAR_MONTH_DAY if date_style is not None else None,
        "has_time": time_style is not None,
        "length": date_length if date_length is not None else time_length,
        "time_length": time_length,
    }


def _resolve_components(options: Mapping[str, Any]) -> dict[str, Any]:
    requested = {
        key: COMPONENT_LABELS[key].parse(options[key])
        for key in DateTimeConf.COMPONENT_KEYS
        if options.get(key) is not None
    }
    if not requested:
        raise FormatOptionError("at least one component must be specified",
                                accepted=fmt_choices(DateTimeConf.COMPONENT_KEYS))

    selection = ComponentSelection(**requested)
    presence = tuple(key in requested for key in ("year", "month", "day", "weekday"))
    textual = selection.month in _TEXTUAL or selection.weekday is not None
    return {
        "selection": selection,
        "field_set": FIELD_SET_TABLE[presence],
        "has_time": selection.has_time,
        "length": Length.LONG if textual else Length.SHORT,
        "time_length": None,
    }


def _validate_time_zone(value) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise TypeError(f"time_zone must be str | None, but got {fmt_type(value)}")
    if not value:
        raise FormatOptionError("time_zone must be a non-empty IANA time zone name",
                                option="time_zone", accepted="IANA time zone name")
    return value
