#
# Pytest Fixtures
#

# Standard library -----------------------------------------------------------------------------------------------------
from datetime import datetime, timezone

# Third-party ----------------------------------------------------------------------------------------------------------
import pytest

# Local ----------------------------------------------------------------------------------------------------------------
from formatkit.provider import DataProvider

LOCALES = ("en", "en-IN", "de", "ja")


# Fixtures -------------------------------------------------------------------------------------------------------------

@pytest.fixture(scope="session")
def provider() -> DataProvider:
    """Provider preloaded with the locales the formatter tests use."""
    return DataProvider.from_locales(LOCALES)


@pytest.fixture
def sunday() -> datetime:
    """2025-12-28 09:30 UTC, a Sunday."""
    return datetime(2025, 12, 28, 9, 30, tzinfo=timezone.utc)


@pytest.fixture
def concat():
    """Join the values of formatted parts."""

    def _concat(parts) -> str:
        return "".join(p.value for p in parts)

    return _concat
