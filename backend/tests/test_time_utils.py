from datetime import date, datetime, timezone

import pytest

from showroom.time_utils import coerce_bound, coerce_range, parse_iso_datetime, to_utc_z, within


class TestParsing:

    def test_offset_converted_to_naive_utc(self):
        assert parse_iso_datetime("2026-03-01T06:00:00+06:00") == datetime(2026, 3, 1, 0, 0)
        assert parse_iso_datetime("2026-03-01T00:00:00Z") == datetime(2026, 3, 1, 0, 0)

    def test_blank_is_none(self):
        assert parse_iso_datetime("  ") is None
        assert coerce_bound(None) is None

    def test_date_bound_is_midnight(self):
        assert coerce_bound(date(2026, 3, 1)) == datetime(2026, 3, 1)

    @pytest.mark.parametrize("value", ["yesterday", 20260301])
    def test_bad_bound(self, value):
        with pytest.raises(ValueError):
            coerce_bound(value)


class TestRanges:

    def test_reversed_range_rejected(self):
        with pytest.raises(ValueError):
            coerce_range("2026-02-01", "2026-01-01")

    def test_within_is_inclusive(self):
        start, end = coerce_range("2026-01-01T00:00:00Z", "2026-01-31T00:00:00Z")

        assert within(start, start, end)
        assert within(end, start, end)
        assert not within(datetime(2026, 2, 1), start, end)
        assert within(datetime(1999, 1, 1), None, None)


class TestFormatting:

    def test_to_utc_z(self):
        assert to_utc_z(datetime(2026, 3, 1, 9, 30, 15, 999)) == "2026-03-01T09:30:15Z"
        aware = datetime(2026, 3, 1, 15, 30, tzinfo=timezone.utc)
        assert to_utc_z(aware) == "2026-03-01T15:30:00Z"
        assert to_utc_z(None) is None
