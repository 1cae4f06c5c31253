#
# formatkit - Date/Time Format Tests
#

# Standard library -----------------------------------------------------------------------------------------------------
import re
from datetime import date, datetime, timedelta, timezone

# Third-party ----------------------------------------------------------------------------------------------------------
import pytest

# Local ----------------------------------------------------------------------------------------------------------------
from formatkit.datetime_format import DateTimeFormat
from formatkit.errors import FormatDataError, FormatOptionError
from formatkit.options import FieldSet, Length
from formatkit.parts import FormattedPart, Part


# Tests ----------------------------------------------------------------------------------------------------------------

class TestDateStyles:

    @pytest.mark.parametrize(
        "locale, style, expected",
        [
            pytest.param("en", "long", "December 28, 2025", id="en-long"),
            pytest.param("en", "full", "December 28, 2025", id="en-full-as-long"),
            pytest.param("en", "medium", "Dec 28, 2025", id="en-medium"),
            pytest.param("en", "short", "12/28/25", id="en-short"),
            pytest.param("de", "long", "28. Dezember 2025", id="de-long"),
            pytest.param("de", "short", "28.12.25", id="de-short"),
            pytest.param("ja", "long", "2025年12月28日", id="ja-long"),
            pytest.param("ja", "short", "2025/12/28", id="ja-short"),
        ],
    )
    def test_format(self, provider, sunday, locale, style, expected):
        assert DateTimeFormat(locale, provider=provider, date_style=style).format(sunday) == expected

    def test_date_input(self, provider):
        assert DateTimeFormat("en", provider=provider, date_style="short").format(date(2024, 2, 29)) == "2/29/24"


class TestTimeStyles:

    def test_short_time(self, provider, sunday):
        text = DateTimeFormat("en", provider=provider, time_style="short").format(sunday)
        assert re.fullmatch(r"9:30\sAM", text)

    def test_de_short_time(self, provider, sunday):
        assert DateTimeFormat("de", provider=provider, time_style="short").format(sunday) == "09:30"

    def test_medium_time_has_seconds(self, provider):
        text = DateTimeFormat("en", provider=provider, time_style="medium").format(datetime(2025, 1, 1, 13, 5, 9))
        assert re.fullmatch(r"1:05:09\sPM", text)

    def test_h23_style(self, provider):
        fmt = DateTimeFormat("en", provider=provider, time_style="short", hour_cycle="h23")
        assert fmt.format(datetime(2025, 1, 1, 0, 30)) == "00:30"

    def test_date_and_time(self, provider, sunday):
        text = DateTimeFormat("en", provider=provider, date_style="short", time_style="short").format(sunday)
        assert text.startswith("12/28/25")
        assert re.search(r"9:30\sAM$", text)


class TestComponents:

    @pytest.mark.parametrize(
        "locale, options, expected",
        [
            pytest.param("en", dict(year="numeric", month="long", day="numeric"), "December 28, 2025", id="en-long"),
            pytest.param("en", dict(year="numeric", month="short", day="numeric"), "Dec 28, 2025", id="en-short"),
            pytest.param("en", dict(year="numeric", month="numeric", day="numeric"), "12/28/2025", id="en-numeric"),
            pytest.param("en", {}, "12/28/2025", id="en-default"),
            pytest.param("de", dict(year="numeric", month="long", day="numeric"), "28. Dezember 2025", id="de-long"),
            pytest.param("ja", dict(year="numeric", month="long", day="numeric"), "2025年12月28日", id="ja-long"),
            pytest.param("en", dict(weekday="long"), "Sunday", id="en-weekday"),
            pytest.param("en", dict(year="numeric"), "2025", id="en-year"),
            pytest.param("en", dict(month="long"), "December", id="en-month"),
        ],
    )
    def test_format(self, provider, sunday, locale, options, expected):
        assert DateTimeFormat(locale, provider=provider, **options).format(sunday) == expected

    def test_two_digit_day(self, provider):
        assert DateTimeFormat("en", provider=provider, day="two_digit").format(date(2025, 1, 5)) == "05"

    def test_hour_minute(self, provider, sunday):
        text = DateTimeFormat("en", provider=provider, hour="numeric", minute="numeric").format(sunday)
        assert re.fullmatch(r"9:30\sAM", text)

    def test_date_with_time(self, provider, sunday):
        fmt = DateTimeFormat("en", provider=provider, year="numeric", month="short", day="numeric",
                             hour="numeric", minute="numeric")
        text = fmt.format(sunday)
        assert text.startswith("Dec 28, 2025")
        assert re.search(r"9:30\sAM$", text)


class TestHourCycle:

    @pytest.fixture
    def half_past_midnight(self) -> datetime:
        return datetime(2025, 1, 1, 0, 30, tzinfo=timezone.utc)

    def test_h23(self, provider, half_past_midnight):
        fmt = DateTimeFormat("en", provider=provider, hour="numeric", minute="numeric", hour_cycle="h23")
        assert fmt.format(half_past_midnight) == "00:30"

    def test_h11(self, provider, half_past_midnight):
        fmt = DateTimeFormat("en", provider=provider, hour="numeric", minute="numeric", hour_cycle="h11")
        assert re.fullmatch(r"0:30\sAM", fmt.format(half_past_midnight))

    def test_h12(self, provider, half_past_midnight):
        fmt = DateTimeFormat("en", provider=provider, hour="numeric", minute="numeric", hour_cycle="h12")
        assert re.fullmatch(r"12:30\sAM", fmt.format(half_past_midnight))

    def test_h12_in_24_hour_locale_adds_day_period(self, provider):
        fmt = DateTimeFormat("de", provider=provider, time_style="short", hour_cycle="h12")
        parts = fmt.format_to_parts(datetime(2025, 1, 1, 15, 5))
        assert parts[0] == FormattedPart(Part.HOUR, "3")
        assert parts[-1].type is Part.DAY_PERIOD

    def test_h23_removes_day_period(self, provider, half_past_midnight):
        fmt = DateTimeFormat("en", provider=provider, time_style="short", hour_cycle="h23")
        types = [p.type for p in fmt.format_to_parts(half_past_midnight)]
        assert Part.DAY_PERIOD not in types
        assert "a" not in fmt.pattern


class TestTimeZones:

    def test_naive_is_utc(self, provider):
        fmt = DateTimeFormat("en", provider=provider, hour="numeric", minute="numeric", hour_cycle="h23")
        assert fmt.format(datetime(2025, 1, 1, 8, 15)) == "08:15"

    def test_converted_to_zone(self, provider):
        fmt = DateTimeFormat("en", provider=provider, hour="numeric", minute="numeric", time_zone="Asia/Tokyo")
        assert re.fullmatch(r"9:00\sAM", fmt.format(datetime(2025, 1, 1, 0, 0, tzinfo=timezone.utc)))

    def test_aware_input_converted(self, provider):
        eastern = timezone(timedelta(hours=-5))
        fmt = DateTimeFormat("en", provider=provider, hour="numeric", minute="numeric", hour_cycle="h23")
        assert fmt.format(datetime(2025, 1, 1, 20, 0, tzinfo=eastern)) == "01:00"

    def test_zone_changes_date(self, provider):
        fmt = DateTimeFormat("en", provider=provider, time_zone="Asia/Tokyo")
        assert fmt.format(datetime(2025, 1, 1, 23, 0)) == "1/2/2025"

    def test_date_is_midnight_in_zone(self, provider):
        fmt = DateTimeFormat("en", provider=provider, hour="numeric", minute="numeric", hour_cycle="h23",
                             time_zone="America/New_York")
        assert fmt.format(date(2025, 7, 4)) == "00:00"

    def test_invalid_zone(self, provider):
        with pytest.raises(FormatOptionError, match="invalid IANA time zone <str: 'Mars/Olympus'>") as exc_info:
            DateTimeFormat("en", provider=provider, time_zone="Mars/Olympus")
        assert exc_info.value.option == "time_zone"


class TestParts:

    def test_numeric_field_is_single_span(self, provider):
        parts = DateTimeFormat("en", provider=provider, day="numeric").format_to_parts(date(2025, 1, 12))
        assert parts == [FormattedPart(Part.DAY, "12")]

    def test_numeric_date(self, provider, sunday):
        parts = DateTimeFormat("en", provider=provider).format_to_parts(sunday)
        assert parts == [
            FormattedPart(Part.MONTH, "12"),
            FormattedPart(Part.LITERAL, "/"),
            FormattedPart(Part.DAY, "28"),
            FormattedPart(Part.LITERAL, "/"),
            FormattedPart(Part.YEAR, "2025"),
        ]

    def test_long_date(self, provider, sunday):
        parts = DateTimeFormat("en", provider=provider, date_style="long").format_to_parts(sunday)
        assert [p.type for p in parts] == [Part.MONTH, Part.LITERAL, Part.DAY, Part.LITERAL, Part.YEAR]
        assert parts[0].value == "December"

    def test_time_parts(self, provider, sunday):
        parts = DateTimeFormat("en", provider=provider, hour="numeric", minute="numeric").format_to_parts(sunday)
        assert [p.type for p in parts] == [Part.HOUR, Part.LITERAL, Part.MINUTE, Part.LITERAL, Part.DAY_PERIOD]
        assert parts[2].value == "30"

    @pytest.mark.parametrize(
        "locale, options",
        [
            pytest.param("en", dict(date_style="full", time_style="long"), id="en-styles"),
            pytest.param("de", dict(date_style="medium", time_style="medium"), id="de-styles"),
            pytest.param("ja", dict(date_style="long", time_style="short"), id="ja-styles"),
            pytest.param("en", dict(weekday="long", month="long", day="numeric", year="numeric"), id="en-weekday"),
            pytest.param("de", dict(year="numeric", weekday="short"), id="de-fallback-row"),
            pytest.param("en", dict(hour="two_digit", minute="two_digit", second="two_digit"), id="en-time"),
        ],
    )
    def test_concatenation_equals_format(self, provider, concat, sunday, locale, options):
        fmt = DateTimeFormat(locale, provider=provider, **options)
        assert concat(fmt.format_to_parts(sunday)) == fmt.format(sunday)


class TestFallbackRows:

    def test_year_day_shows_month(self, provider, sunday):
        fmt = DateTimeFormat("en", provider=provider, year="numeric", day="numeric")
        assert fmt.descriptor.field_set is FieldSet.YEAR_MONTH_DAY
        assert fmt.format(sunday) == "12/28/2025"

    def test_year_weekday_shows_full_date(self, provider, sunday):
        fmt = DateTimeFormat("en", provider=provider, year="numeric", weekday="long")
        assert fmt.descriptor.field_set is FieldSet.YEAR_MONTH_DAY_WEEKDAY
        assert fmt.descriptor.length is Length.LONG
        text = fmt.format(sunday)
        assert "Sunday" in text
        assert "December" in text
        assert "2025" in text


class TestWidthAdjustment:

    @pytest.mark.parametrize(
        "options, expected",
        [
            pytest.param(dict(year="numeric", month="long", day="numeric"), "2025年12月28日", id="year-month-day"),
            pytest.param(dict(month="short", day="numeric"), "12月28日", id="month-day"),
            pytest.param(dict(year="numeric", month="long"), "2025年12月", id="year-month"),
        ],
    )
    def test_numeric_month_pattern_keeps_its_form(self, provider, sunday, options, expected):
        assert DateTimeFormat("ja", provider=provider, **options).format(sunday) == expected

    def test_text_month_widened(self, provider, sunday):
        fmt = DateTimeFormat("en", provider=provider, month="long", day="numeric")
        assert fmt.format(sunday) == "December 28"

    def test_unrequested_month_follows_length(self, provider, sunday):
        fmt = DateTimeFormat("en", provider=provider, year="numeric", weekday="long")
        assert "MMMM" in fmt.pattern
        assert fmt.format(sunday) == "Sunday, December 28, 2025"


class TestErrors:

    def test_string_input(self, provider):
        with pytest.raises(TypeError, match=r"value must be date \| datetime"):
            DateTimeFormat("en", provider=provider).format("2025-12-28")

    def test_non_gregorian_calendar(self, provider):
        with pytest.raises(FormatDataError, match="calendar 'japanese' is not available"):
            DateTimeFormat("ja", provider=provider, calendar="japanese")

    def test_gregorian_calendar(self, provider, sunday):
        assert DateTimeFormat("en", provider=provider, calendar="gregory").format(sunday) == "12/28/2025"

    def test_option_errors_before_data(self):
        with pytest.raises(FormatOptionError, match="mutually exclusive"):
            DateTimeFormat("xx", date_style="short", year="numeric")

    def test_unknown_option(self, provider):
        with pytest.raises(FormatOptionError, match="unknown date/time option"):
            DateTimeFormat("en", provider=provider, timeZone="UTC")

    def test_unknown_locale(self):
        with pytest.raises(FormatDataError, match="unknown locale"):
            DateTimeFormat("xx")


class TestResolvedOptions:

    def test_styles(self, provider):
        fmt = DateTimeFormat("en", provider=provider, date_style="full", time_style="short")
        assert fmt.resolved_options() == {
            "locale": "en",
            "calendar": "gregory",
            "date_style": "full",
            "time_style": "short",
            "time_zone": "UTC",
        }

    def test_components_and_hour_cycle(self, provider):
        fmt = DateTimeFormat("de", provider=provider, month="long", day="numeric", hour_cycle="h23",
                             time_zone="Europe/Berlin")
        assert fmt.resolved_options() == {
            "locale": "de",
            "calendar": "gregory",
            "month": "long",
            "day": "numeric",
            "time_zone": "Europe/Berlin",
            "hour_cycle": "h23",
        }

    def test_default(self, provider):
        resolved = DateTimeFormat("ja", provider=provider).resolved_options()
        assert resolved["year"] == resolved["month"] == resolved["day"] == "numeric"
        assert "hour_cycle" not in resolved

    def test_pattern_and_repr(self, provider):
        fmt = DateTimeFormat("en", provider=provider, date_style="short")
        assert fmt.pattern == "M/d/yy"
        assert repr(fmt) == "DateTimeFormat('en', pattern='M/d/yy')"
