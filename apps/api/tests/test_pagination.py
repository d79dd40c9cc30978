import pytest
from datetime import datetime, timezone, timedelta

from archive_api.core.pagination import EPOCH, iso_utc, page_window, parse_timestamp


class TestIsoUtc:
    def test_given_utc_datetime_when_converting_then_returns_iso_string_with_z_suffix(self):
        """
        Given: A datetime with UTC timezone
        When: Converting to ISO UTC string
        Then: Returns ISO format with 'Z' suffix
        """
        # Given
        dt = datetime(2023, 12, 25, 10, 30, 45, tzinfo=timezone.utc)

        # When
        result = iso_utc(dt)

        # Then
        assert result == "2023-12-25T10:30:45Z"

    def test_given_naive_datetime_when_converting_then_assumes_utc_and_returns_iso_string(self):
        """
        Given: A naive datetime (no timezone info), as SQLite hands them back
        When: Converting to ISO UTC string
        Then: Assumes UTC timezone and returns ISO format with 'Z' suffix
        """
        # Given
        dt = datetime(2023, 12, 25, 10, 30, 45)

        # When
        result = iso_utc(dt)

        # Then
        assert result == "2023-12-25T10:30:45Z"

    def test_given_non_utc_timezone_when_converting_then_converts_to_utc_and_returns_iso_string(self):
        # Given
        dt = datetime(2023, 12, 25, 15, 30, 45, tzinfo=timezone(timedelta(hours=5)))

        # When
        result = iso_utc(dt)

        # Then (15:30 at +05:00 is 10:30 UTC)
        assert result == "2023-12-25T10:30:45Z"

    def test_given_epoch_when_converting_then_returns_unix_origin(self):
        assert iso_utc(EPOCH) == "1970-01-01T00:00:00Z"


class TestParseTimestamp:
    def test_given_datetime_when_parsing_then_returns_it_unchanged(self):
        dt = datetime(2024, 5, 1, tzinfo=timezone.utc)
        assert parse_timestamp(dt) is dt

    def test_given_iso_string_with_z_suffix_when_parsing_then_returns_aware_datetime(self):
        # When
        result = parse_timestamp("2024-05-01T08:15:00Z")

        # Then
        assert result == datetime(2024, 5, 1, 8, 15, tzinfo=timezone.utc)

    @pytest.mark.parametrize("value", [None, "", "not-a-date", 12345])
    def test_given_unusable_value_when_parsing_then_returns_none(self, value):
        assert parse_timestamp(value) is None


class TestPageWindow:
    def test_given_first_page_when_computing_window_then_offset_is_zero(self):
        assert page_window(1, 24) == (0, 24)

    def test_given_later_page_when_computing_window_then_offset_skips_previous_pages(self):
        assert page_window(3, 10) == (20, 10)

    def test_given_zero_page_size_when_computing_window_then_limit_is_zero(self):
        assert page_window(1, 0) == (0, 0)

    @pytest.mark.parametrize("page, page_size", [(0, 10), (-1, 10), (1, -5)])
    def test_given_invalid_window_when_computing_then_raises_value_error(self, page, page_size):
        with pytest.raises(ValueError):
            page_window(page, page_size)
