"""
Output composition: flatten nested semantic regions into (text, part) spans.

Renderers write text and open/close regions on a sink. PartsCollector turns that stream into a flat
list of FormattedPart spans where the outermost region wins:

    >>> sink = PartsCollector()
    >>> with sink.part(Part.DAY):
    ...     with sink.part(Part.INTEGER):
    ...         sink.write("12")
    >>> sink.write("/")
    >>> sink.finish()
    [FormattedPart(type=<Part.DAY: 'day'>, value='12'), FormattedPart(type=<Part.LITERAL: 'literal'>, value='/')]

StringSink accepts the same calls and just concatenates text, so one render routine serves both
format() and format_to_parts().
"""

# Standard library -----------------------------------------------------------------------------------------------------
from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum, unique
from typing import ContextManager, Iterator, Protocol

# Local ----------------------------------------------------------------------------------------------------------------
from .tools import fmt_type, fmt_value


# Classes --------------------------------------------------------------------------------------------------------------

@unique
class Part(str, Enum):
    """Semantic category of a formatted span."""
    LITERAL = "literal"

    # Numbers
    INTEGER = "integer"
    GROUP = "group"
    DECIMAL = "decimal"
    FRACTION = "fraction"
    MINUS_SIGN = "minus_sign"
    PLUS_SIGN = "plus_sign"
    PERCENT_SIGN = "percent_sign"
    CURRENCY = "currency"

    # Dates and times
    ERA = "era"
    YEAR = "year"
    MONTH = "month"
    DAY = "day"
    WEEKDAY = "weekday"
    DAY_PERIOD = "day_period"
    HOUR = "hour"
    MINUTE = "minute"
    SECOND = "second"
    FRACTIONAL_SECOND = "fractional_second"
    TIME_ZONE_NAME = "time_zone_name"

    # Lists
    ELEMENT = "element"

    # Durations and relative times
    UNIT = "unit"


NUMBER_PARTS: frozenset[Part] = frozenset({
    Part.LITERAL, Part.INTEGER, Part.GROUP, Part.DECIMAL, Part.FRACTION,
    Part.MINUS_SIGN, Part.PLUS_SIGN, Part.PERCENT_SIGN, Part.CURRENCY,
})

# Numeric date fields nest an INTEGER region, folded into the field by the collector.
DATETIME_PARTS: frozenset[Part] = frozenset({
    Part.LITERAL, Part.INTEGER, Part.ERA, Part.YEAR, Part.MONTH, Part.DAY, Part.WEEKDAY, Part.DAY_PERIOD,
    Part.HOUR, Part.MINUTE, Part.SECOND, Part.FRACTIONAL_SECOND, Part.TIME_ZONE_NAME,
})

LIST_PARTS: frozenset[Part] = frozenset({Part.LITERAL, Part.ELEMENT})

RELATIVE_TIME_PARTS: frozenset[Part] = frozenset({
    Part.LITERAL, Part.INTEGER, Part.GROUP, Part.DECIMAL, Part.FRACTION,
})

DURATION_PARTS: frozenset[Part] = frozenset({
    Part.LITERAL, Part.INTEGER, Part.GROUP, Part.DECIMAL, Part.FRACTION, Part.UNIT,
})


@dataclass(frozen=True)
class FormattedPart:
    """One span of formatted output."""
    type: Part
    value: str


class Sink(Protocol):
    """Write target of a render routine."""

    def write(self, text: str) -> None: ...

    def enter(self, part: Part) -> None: ...

    def exit(self, part: Part) -> None: ...

    def part(self, part: Part) -> ContextManager[None]: ...


class _RegionSink:
    """Shared region bookkeeping for sinks."""

    def __init__(self, vocabulary: frozenset[Part] | None = None) -> None:
        self._vocabulary = vocabulary
        self._stack: list[Part] = []

    @property
    def depth(self) -> int:
        return len(self._stack)

    def enter(self, part: Part) -> None:
        if not isinstance(part, Part):
            raise TypeError(f"part must be Part, but got {fmt_type(part)}")
        if self._vocabulary is not None and part not in self._vocabulary:
            raise ValueError(f"part {fmt_value(part.value)} is not accepted by this sink")
        self._stack.append(part)

    def exit(self, part: Part) -> None:
        if not self._stack:
            raise ValueError(f"exit({fmt_value(part)}) without a matching enter")
        if self._stack[-1] is not part:
            raise ValueError(f"exit({fmt_value(part)}) does not match the open region {fmt_value(self._stack[-1])}")
        self._stack.pop()

    @contextmanager
    def part(self, part: Part) -> Iterator[None]:
        """
        Write inside a region.

        The region is closed only when the block completes normally. After an exception the
        sink is left with the region open and must be discarded.
        """
        self.enter(part)
        yield
        self.exit(part)


class PartsCollector(_RegionSink):
    """
    Sink that produces FormattedPart spans, outermost region winning.

    - enter at top level flushes pending text as LITERAL, then opens the region;
    - write appends to a flat buffer, whatever the nesting depth;
    - exit closing the outermost region flushes the buffer tagged with that region;
    - finish flushes what is left as LITERAL and returns the spans.

    Adjacent LITERAL spans are not merged.
    """

    def __init__(self, vocabulary: frozenset[Part] | None = None) -> None:
        super().__init__(vocabulary)
        self._buffer: list[str] = []
        self._parts: list[FormattedPart] = []

    def write(self, text: str) -> None:
        if not isinstance(text, str):
            raise TypeError(f"text must be str, but got {fmt_type(text)}")
        self._buffer.append(text)

    def enter(self, part: Part) -> None:
        top_level = self.depth == 0
        super().enter(part)
        if top_level:
            self._flush(Part.LITERAL)

    def exit(self, part: Part) -> None:
        super().exit(part)
        if self.depth == 0:
            self._flush(part)

    def finish(self) -> list[FormattedPart]:
        self._flush(Part.LITERAL)
        return self._parts

    def _flush(self, part: Part) -> None:
        text = "".join(self._buffer)
        self._buffer.clear()
        if text:
            self._parts.append(FormattedPart(part, text))


class StringSink(_RegionSink):
    """Sink that produces the plain string; regions are checked but leave no trace."""

    def __init__(self, vocabulary: frozenset[Part] | None = None) -> None:
        super().__init__(vocabulary)
        self._chunks: list[str] = []

    def write(self, text: str) -> None:
        if not isinstance(text, str):
            raise TypeError(f"text must be str, but got {fmt_type(text)}")
        self._chunks.append(text)

    def finish(self) -> str:
        return "".join(self._chunks)
