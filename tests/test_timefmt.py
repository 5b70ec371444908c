from datetime import datetime, timedelta, timezone

import pytest

from statuspage.timefmt import as_utc, format_date_range, format_time_ago

NOW = datetime(2026, 10, 18, 12, 0, tzinfo=timezone.utc)


class TestFormatTimeAgo:
    @pytest.mark.parametrize(
        "delta,expected",
        [
            (timedelta(seconds=20), "just now"),
            (timedelta(minutes=1), "1 minute ago"),
            (timedelta(minutes=45), "45 minutes ago"),
            (timedelta(hours=5, minutes=10), "5 hours ago"),
            (timedelta(days=1, hours=3), "1 day ago"),
            (timedelta(days=40), "1 month ago"),
            (timedelta(days=800), "2 years ago"),
        ],
    )
    def test_buckets(self, delta, expected):
        assert format_time_ago(NOW - delta, NOW) == expected

    def test_future_is_just_now(self):
        assert format_time_ago(NOW + timedelta(hours=1), NOW) == "just now"

    def test_iso_string_input(self):
        assert format_time_ago("2026-10-18T10:00:00Z", NOW) == "2 hours ago"

    def test_naive_treated_as_utc(self):
        assert format_time_ago(datetime(2026, 10, 18, 11, 0), NOW) == "1 hour ago"


class TestFormatDateRange:
    def test_same_day(self):
        assert format_date_range("2026-10-25T02:00:00Z", "2026-10-25T04:30:00Z") == "Oct 25, 2026 02:00 - 04:30 UTC"

    def test_spanning_days(self):
        assert (
            format_date_range("2026-10-25T22:00:00Z", "2026-10-26T01:00:00Z")
            == "Oct 25, 2026 22:00 - Oct 26, 2026 01:00 UTC"
        )

    def test_offsets_normalised_to_utc(self):
        assert as_utc("2026-10-25T04:00:00+02:00") == datetime(2026, 10, 25, 2, 0, tzinfo=timezone.utc)
