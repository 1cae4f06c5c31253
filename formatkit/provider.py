"""
Locale data access for formatters.

A DataProvider hands out Babel Locale objects, either straight from Babel's bundled CLDR data
(DataProvider.embedded()) or from a set of locales loaded up front (DataProvider.from_locales()).
Formatters only call DataProvider.locale(), so both kinds are interchangeable.
"""

# Standard library -----------------------------------------------------------------------------------------------------
import logging
from typing import Iterable, Mapping, Self

# Third-party ----------------------------------------------------------------------------------------------------------
from babel import Locale, UnknownLocaleError

# Local ----------------------------------------------------------------------------------------------------------------
from .errors import FormatDataError
from .tools import fmt_type, fmt_value

logger = logging.getLogger(__name__)


# Classes --------------------------------------------------------------------------------------------------------------

class _EmbeddedData:
    """Babel's bundled CLDR data, parsed on demand."""

    kind = "embedded"

    def locale(self, tag: str) -> Locale:
        return _parse_locale(tag)

    def available(self) -> tuple[str, ...] | None:
        return None


class _LoadedData:
    """A fixed set of locales parsed once and owned by the provider."""

    kind = "loaded"

    def __init__(self, locales: dict[str, Locale]) -> None:
        self._locales = locales

    def locale(self, tag: str) -> Locale:
        try:
            return self._locales[_locale_key(tag)]
        except KeyError:
            raise FormatDataError(
                f"locale {fmt_value(tag)} is not loaded in this provider, available: {', '.join(self.available())}"
            ) from None

    def available(self) -> tuple[str, ...]:
        return tuple(sorted({str(loc) for loc in self._locales.values()}))


class DataProvider:
    """
    Source of locale data for formatters.

    Use the factories instead of the constructor:

        >>> DataProvider.embedded().locale("en-US")
        Locale('en', territory='US')
        >>> provider = DataProvider.from_locales(["en", "de"])
        >>> provider.available()
        ('de', 'en')
        >>> provider.locale("fr")
        Traceback (most recent call last):
            ...
        FormatDataError: locale <str: 'fr'> is not loaded in this provider, available: de, en

    Providers are read-only once built and may be shared between threads and formatters.
    """

    def __init__(self, data: _EmbeddedData | _LoadedData) -> None:
        if not isinstance(data, (_EmbeddedData, _LoadedData)):
            raise TypeError(f"use DataProvider.embedded() or DataProvider.from_locales(), got {fmt_type(data)}")
        self._data = data

    @classmethod
    def embedded(cls) -> Self:
        """Provider backed by Babel's bundled CLDR data; any locale Babel knows can be requested."""
        return cls(_EmbeddedData())

    @classmethod
    def from_locales(cls, tags: Iterable[str | Locale]) -> Self:
        """
        Provider owning exactly the given locales, parsed now.

        Raises:
            FormatDataError: a tag is malformed or unknown to Babel.
            TypeError: tags is a single string or contains something other than str | Locale.
        """
        if isinstance(tags, (str, Locale)):
            raise TypeError(f"tags must be an iterable of locale tags, but got {fmt_type(tags)}")

        locales: dict[str, Locale] = {}
        for tag in tags:
            loc = tag if isinstance(tag, Locale) else _parse_locale(tag)
            if isinstance(tag, str):
                locales[_locale_key(tag)] = loc
            locales[_locale_key(str(loc))] = loc

        logger.debug("loaded %d locale(s) into provider: %s", len(locales), sorted(locales))
        return cls(_LoadedData(locales))

    @property
    def kind(self) -> str:
        """'embedded' or 'loaded'."""
        return self._data.kind

    def available(self) -> tuple[str, ...] | None:
        """Identifiers of the loaded locales, None for the embedded data."""
        return self._data.available()

    def locale(self, tag: str | Locale) -> Locale:
        """
        Locale data for a BCP 47 tag (en-US) or a Babel identifier (en_US).

        Raises:
            FormatDataError: the tag is malformed, unknown to Babel, or not loaded in this provider.
            TypeError: tag is not str | Locale.
        """
        if isinstance(tag, Locale):
            if self._data.kind == "embedded":
                return tag
            tag = str(tag)
        if not isinstance(tag, str):
            raise TypeError(f"locale must be str | babel.Locale, but got {fmt_type(tag)}")
        return self._data.locale(tag)

    def __repr__(self) -> str:
        available = self.available()
        if available is None:
            return "DataProvider.embedded()"
        return f"DataProvider.from_locales({list(available)!r})"


# Methods --------------------------------------------------------------------------------------------------------------

def locale_tag(locale: Locale) -> str:
    """
    BCP 47 form of a Babel locale identifier.

    Examples:
        >>> locale_tag(Locale.parse("zh_Hant_TW"))
        'zh-Hant-TW'
    """
    return str(locale).replace("_", "-")


def locale_table(locale: Locale, key: str) -> Mapping:
    """
    A CLDR table Babel loads for a locale but does not expose as a Locale property.

    Used for "unit_patterns" and "date_fields", which babel.units and babel.dates read the same way.

    Raises:
        FormatDataError: the locale data has no such table.
    """
    try:
        return locale._data[key]
    except KeyError:
        raise FormatDataError(f"locale {locale} has no {key!r} data") from None


# Private Methods ------------------------------------------------------------------------------------------------------

def _locale_key(tag: str) -> str:
    return tag.replace("-", "_").casefold()


def _parse_locale(tag) -> Locale:
    if not isinstance(tag, str):
        raise TypeError(f"locale must be str | babel.Locale, but got {fmt_type(tag)}")
    try:
        loc = Locale.parse(tag.replace("-", "_"))
    except UnknownLocaleError as exc:
        raise FormatDataError(f"unknown locale {fmt_value(tag)}") from exc
    except ValueError as exc:
        raise FormatDataError(f"malformed locale tag {fmt_value(tag)}: {exc}") from exc
    logger.debug("parsed locale %r as %s", tag, loc)
    return loc
