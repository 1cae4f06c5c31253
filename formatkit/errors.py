"""
Exceptions raised by formatkit formatters.

Two classes of failure exist:

- Validation errors (FormatOptionError): caller misuse, detected while options are resolved,
  always before any locale data is touched.
- Data errors (FormatDataError): the locale data engine could not supply what a formatter needs
  (unknown locale, locale missing from a preloaded provider, unsupported calendar). Raised when a
  formatter is bound to its data, with the engine's exception chained as __cause__.

FormatOptionError subclasses ValueError, so callers that already catch ValueError for bad
arguments keep working.
"""

# Standard library -----------------------------------------------------------------------------------------------------
from typing import Iterable

# Local ----------------------------------------------------------------------------------------------------------------
from .tools import fmt_choices, fmt_value


# Classes --------------------------------------------------------------------------------------------------------------

class FormatError(Exception):
    """Base class for all formatkit errors."""


class FormatOptionError(FormatError, ValueError):
    """
    Invalid formatter option.

    Attributes:
        option: Name of the offending option, or None when the error concerns a combination of options.
        accepted: Human-readable description of the accepted values or range.

    Examples:
        >>> raise FormatOptionError.invalid_choice("date_style", "huge", ["full", "long", "medium", "short"])
        Traceback (most recent call last):
            ...
        FormatOptionError: date_style must be one of 'full', 'long', 'medium', 'short', but got <str: 'huge'>
    """

    def __init__(self, message: str, *, option: str | None = None, accepted: str | None = None) -> None:
        super().__init__(message)
        self.option = option
        self.accepted = accepted

    @classmethod
    def invalid_choice(cls, option: str, value: object, choices: Iterable[str]) -> "FormatOptionError":
        accepted = fmt_choices(choices)
        return cls(f"{option} must be one of {accepted}, but got {fmt_value(value)}",
                   option=option, accepted=accepted)

    @classmethod
    def out_of_range(cls, option: str, value: object, low: int, high: int) -> "FormatOptionError":
        accepted = f"{low}..{high}"
        return cls(f"{option} must be in range {accepted}, but got {fmt_value(value)}",
                   option=option, accepted=accepted)


class FormatDataError(FormatError):
    """Locale data engine failure while binding a formatter to its data."""
