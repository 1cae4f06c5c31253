"""
Locale-aware list formatting.

    >>> ListFormat("en").format(["Apple", "Banana", "Cherry"])
    'Apple, Banana, and Cherry'
    >>> ListFormat("en", type="disjunction").format(["A", "B"])
    'A or B'
"""

# Standard library -----------------------------------------------------------------------------------------------------
import logging
import re
from collections import deque
from enum import Enum, unique
from types import MappingProxyType
from typing import Any, Iterable, Mapping

# Third-party ----------------------------------------------------------------------------------------------------------
from babel import Locale

# Local ----------------------------------------------------------------------------------------------------------------
from .collections import LabelMap
from .errors import FormatDataError
from .parts import LIST_PARTS, FormattedPart, Part, PartsCollector, Sink, StringSink
from .provider import DataProvider, locale_tag
from .tools import fmt_type, fmt_value

logger = logging.getLogger(__name__)


# Classes --------------------------------------------------------------------------------------------------------------

@unique
class ListType(Enum):
    CONJUNCTION = 1
    DISJUNCTION = 2
    UNIT = 3


@unique
class ListStyle(Enum):
    LONG = 1
    SHORT = 2
    NARROW = 3


LIST_TYPE_LABELS: LabelMap[ListType] = LabelMap("type", {
    ListType.CONJUNCTION: "conjunction",
    ListType.DISJUNCTION: "disjunction",
    ListType.UNIT: "unit",
})

LIST_STYLE_LABELS: LabelMap[ListStyle] = LabelMap("style", {
    ListStyle.LONG: "long",
    ListStyle.SHORT: "short",
    ListStyle.NARROW: "narrow",
})

# (type, style) -> key of babel.Locale.list_patterns
_PATTERN_KEYS: Mapping[tuple[ListType, ListStyle], str] = MappingProxyType({
    (ListType.CONJUNCTION, ListStyle.LONG): "standard",
    (ListType.CONJUNCTION, ListStyle.SHORT): "standard-short",
    (ListType.CONJUNCTION, ListStyle.NARROW): "standard-narrow",
    (ListType.DISJUNCTION, ListStyle.LONG): "or",
    (ListType.DISJUNCTION, ListStyle.SHORT): "or-short",
    (ListType.DISJUNCTION, ListStyle.NARROW): "or-narrow",
    (ListType.UNIT, ListStyle.LONG): "unit",
    (ListType.UNIT, ListStyle.SHORT): "unit-short",
    (ListType.UNIT, ListStyle.NARROW): "unit-narrow",
})

# Patterns tried when a locale has no data of its own for a key, in order
_PATTERN_FALLBACKS: Mapping[str, tuple[str, ...]] = MappingProxyType({
    "standard-short": ("standard",),
    "standard-narrow": ("standard-short", "standard"),
    "or-short": ("or",),
    "or-narrow": ("or-short", "or"),
    "unit": ("unit-short", "standard"),
    "unit-short": ("standard",),
    "unit-narrow": ("unit-short", "unit", "standard"),
})

_PLACEHOLDER = re.compile(r"(\{[01]\})")


class _Glue:
    """A two-placeholder list pattern such as "{0}, and {1}", split around its placeholders."""

    def __init__(self, pattern: str) -> None:
        pieces = _PLACEHOLDER.split(pattern)
        if len(pieces) != 5 or {pieces[1], pieces[3]} != {"{0}", "{1}"}:
            raise FormatDataError(f"list pattern must contain {{0}} and {{1}} once each, but got {pattern!r}")
        self.before, self.between, self.after = ((Part.LITERAL, text) for text in (pieces[0], pieces[2], pieces[4]))
        self.head_first = pieces[1] == "{0}"

    def join(self, head: deque, tail: list) -> deque:
        """Combine the output so far (head, placeholder 0) with the next element (tail, placeholder 1)."""
        if self.head_first:
            head.appendleft(self.before)
            head.append(self.between)
            head.extend(tail)
        else:
            head.appendleft(self.between)
            head.extendleft(reversed(tail))
            head.appendleft(self.before)
        head.append(self.after)
        return head


class ListFormat:
    """
    List formatter bound to one locale.

    Args:
        locale: BCP 47 tag, Babel identifier or babel.Locale.
        provider: Locale data source, a fresh DataProvider.embedded() when omitted.
        type: "conjunction" (and), "disjunction" (or) or "unit" (measurement lists).
        style: "long", "short" or "narrow".

    Raises:
        FormatOptionError: unknown type or style.
        FormatDataError: the locale is unavailable or has no patterns for the type and style.
    """

    def __init__(
            self,
            locale: str | Locale,
            *,
            provider: DataProvider | None = None,
            type: ListType | str = ListType.CONJUNCTION,
            style: ListStyle | str = ListStyle.LONG,
    ) -> None:
        self._type = LIST_TYPE_LABELS.parse(type)
        self._style = LIST_STYLE_LABELS.parse(style)

        if provider is None:
            provider = DataProvider.embedded()
        if not isinstance(provider, DataProvider):
            raise TypeError(f"provider must be DataProvider | None, but got {fmt_type(provider)}")
        self._locale = provider.locale(locale)

        key = _PATTERN_KEYS[self._type, self._style]
        for candidate in (key, *_PATTERN_FALLBACKS.get(key, ())):
            if candidate in self._locale.list_patterns:
                patterns = self._locale.list_patterns[candidate]
                break
        else:
            raise FormatDataError(f"locale {self._locale} has no {key!r} list patterns")
        self._glue = {position: _Glue(patterns[position]) for position in ("start", "middle", "end", "2")}

        logger.debug("created ListFormat(%s, %s) from %r patterns", self._locale, key, candidate)

    # Methods ----------------------------------------------------------------------------------------------------------

    def format(self, items: Iterable[str]) -> str:
        """
        Format strings as a list.

        Raises:
            TypeError: items is a str or not iterable, or an item is not str.
        """
        sink = StringSink(LIST_PARTS)
        self._render(items, sink)
        return sink.finish()

    def format_to_parts(self, items: Iterable[str]) -> list[FormattedPart]:
        """
        Format strings as a list of element and literal parts.

        Examples:
            >>> [(p.type.value, p.value) for p in ListFormat("en").format_to_parts(["A", "B"])]
            [('element', 'A'), ('literal', ' and '), ('element', 'B')]
        """
        sink = PartsCollector(LIST_PARTS)
        self._render(items, sink)
        return sink.finish()

    def resolved_options(self) -> dict[str, Any]:
        return {
            "locale": locale_tag(self._locale),
            "type": LIST_TYPE_LABELS.label(self._type),
            "style": LIST_STYLE_LABELS.label(self._style),
        }

    def __repr__(self) -> str:
        return (f"ListFormat({locale_tag(self._locale)!r}, type={LIST_TYPE_LABELS.label(self._type)!r}, "
                f"style={LIST_STYLE_LABELS.label(self._style)!r})")

    def layout(self, elements: list[list[tuple[Part, str]]]) -> deque:
        """
        Elements and glue text in output order, as (Part, text) pairs.

        Each element is itself a run of (Part, text) pairs, so formatters that list composite
        values, such as durations, can lay them out with this locale's glue.
        """
        if not elements:
            return deque()
        if len(elements) == 1:
            return deque(elements[0])
        if len(elements) == 2:
            return self._glue["2"].join(deque(elements[0]), elements[1])

        head = self._glue["start"].join(deque(elements[0]), elements[1])
        for element in elements[2:-1]:
            head = self._glue["middle"].join(head, element)
        return self._glue["end"].join(head, elements[-1])

    # Private Methods --------------------------------------------------------------------------------------------------

    def _render(self, items: Iterable[str], sink: Sink) -> None:
        for piece in self.layout([[(Part.ELEMENT, item)] for item in _validate_items(items)]):
            kind, text = piece
            if kind is Part.ELEMENT:
                with sink.part(Part.ELEMENT):
                    sink.write(text)
            elif text:
                sink.write(text)


# Private Methods ------------------------------------------------------------------------------------------------------

def _validate_items(items) -> list[str]:
    if isinstance(items, str):
        raise TypeError(f"items must be an iterable of str, not a single str {fmt_value(items)}")
    try:
        materialized = list(items)
    except TypeError:
        raise TypeError(f"items must be an iterable of str, but got {fmt_type(items)}") from None
    for item in materialized:
        if not isinstance(item, str):
            raise TypeError(f"list items must be str, but got {fmt_type(item)}")
    return materialized
