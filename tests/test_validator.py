"""
Tests for timestamp and duration parsing and the JSON validator.
"""

from datetime import datetime, timedelta, timezone

import pytest

from availability_api.app.core.exceptions import (
    BadDurationError,
    BadTimestampError,
    InvalidTimeSlotError,
    NonPositiveDurationError,
    PastOrMissingStartError,
)
from availability_api.app.schemas.time_slot import TimeSlotJSON
from availability_api.app.services.validator import JSONValidator, parse_duration, parse_rfc3339


NOW = datetime(2030, 6, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture()
def validator() -> JSONValidator:
    return JSONValidator(clock=lambda: NOW)


class TestParseRfc3339:
    def test_utc_designator(self):
        assert parse_rfc3339("2030-06-01T13:00:00Z") == datetime(2030, 6, 1, 13, tzinfo=timezone.utc)

    def test_numeric_offset_is_same_instant(self):
        assert parse_rfc3339("2030-06-01T15:00:00+02:00") == datetime(2030, 6, 1, 13, tzinfo=timezone.utc)

    def test_fraction_truncated_to_microseconds(self):
        parsed = parse_rfc3339("2030-06-01T13:00:00.123456789Z")
        assert parsed.microsecond == 123456

    @pytest.mark.parametrize(
        "value",
        ["", "2030-06-01", "2030-06-01T13:00:00", "2030-06-01 13:00:00Z", "2030-13-01T13:00:00Z", "tomorrow",
         "2099-01-01T09:00:00Z\n", "\u0662\u0660\u0669\u0669-01-01T09:00:00Z"],
    )
    def test_rejects_malformed(self, value):
        with pytest.raises(ValueError):
            parse_rfc3339(value)


class TestParseDuration:
    @pytest.mark.parametrize(
        "value, expected",
        [
            ("1h30m", timedelta(hours=1, minutes=30)),
            ("1h30m0s", timedelta(hours=1, minutes=30)),
            ("90m", timedelta(minutes=90)),
            ("1.5h", timedelta(hours=1, minutes=30)),
            ("300ms", timedelta(milliseconds=300)),
            ("2us", timedelta(microseconds=2)),
            ("-45s", timedelta(seconds=-45)),
            ("+10m", timedelta(minutes=10)),
            ("0", timedelta(0)),
            ("0s", timedelta(0)),
        ],
    )
    def test_valid(self, value, expected):
        assert parse_duration(value) == expected

    @pytest.mark.parametrize(
        "value",
        ["", "1", "h", "1d", "1h 30m", "1h-30m", ".", "-", "\u0661h", "1h\n",
         "100000000h", "2562047h47m16.854775808s"],
    )
    def test_invalid(self, value):
        with pytest.raises(ValueError):
            parse_duration(value)

    def test_largest_go_duration_accepted(self):
        assert parse_duration("2562047h47m16.854775807s") == timedelta(microseconds=(2**63 - 1) // 1000)
        assert parse_duration("-2562047h47m16.854775808s") == -timedelta(microseconds=2**63 // 1000)

    def test_sub_microsecond_truncates_to_zero(self):
        assert parse_duration("500ns") == timedelta(0)


class TestJSONValidator:
    def test_valid_slot(self, validator):
        slot = validator.to_time_slot(TimeSlotJSON(start="2030-06-01T13:00:00Z", duration="1h"))
        assert slot.start == datetime(2030, 6, 1, 13, tzinfo=timezone.utc)
        assert slot.duration == timedelta(hours=1)
        assert slot.end == datetime(2030, 6, 1, 14, tzinfo=timezone.utc)

    def test_bad_timestamp(self, validator):
        with pytest.raises(BadTimestampError):
            validator.to_time_slot(TimeSlotJSON(start="not-a-time", duration="1h"))

    def test_missing_start_is_bad_timestamp(self, validator):
        with pytest.raises(BadTimestampError):
            validator.to_time_slot(TimeSlotJSON(duration="1h"))

    @pytest.mark.parametrize("duration", ["1h", "0s", "garbage"])
    def test_past_start_rejected_regardless_of_duration(self, validator, duration):
        one_second_ago = (NOW - timedelta(seconds=1)).isoformat()
        with pytest.raises(PastOrMissingStartError):
            validator.to_time_slot(TimeSlotJSON(start=one_second_ago, duration=duration))

    def test_start_equal_to_now_rejected(self, validator):
        with pytest.raises(PastOrMissingStartError):
            validator.to_time_slot(TimeSlotJSON(start=NOW.isoformat(), duration="1h"))

    def test_bad_duration(self, validator):
        with pytest.raises(BadDurationError):
            validator.to_time_slot(TimeSlotJSON(start="2030-06-01T13:00:00Z", duration="an hour"))

    @pytest.mark.parametrize("duration", ["100000000h", "2562048h"])
    def test_out_of_range_duration(self, validator, duration):
        with pytest.raises(BadDurationError):
            validator.to_time_slot(TimeSlotJSON(start="2030-06-01T13:00:00Z", duration=duration))

    def test_end_past_representable_range(self, validator):
        with pytest.raises(BadDurationError):
            validator.to_time_slot(TimeSlotJSON(start="9999-12-31T12:00:00Z", duration="24h"))

    def test_end_at_last_representable_day(self, validator):
        slot = validator.to_time_slot(TimeSlotJSON(start="9999-12-31T12:00:00Z", duration="11h"))
        assert slot.end == datetime(9999, 12, 31, 23, tzinfo=timezone.utc)

    @pytest.mark.parametrize("duration", ["0s", "0", "-1h", "500ns"])
    def test_non_positive_duration(self, validator, duration):
        with pytest.raises(NonPositiveDurationError):
            validator.to_time_slot(TimeSlotJSON(start="2030-06-01T13:00:00Z", duration=duration))

    def test_errors_share_input_base_and_message(self, validator):
        with pytest.raises(InvalidTimeSlotError) as excinfo:
            validator.to_time_slot(TimeSlotJSON(start="2030-06-01T13:00:00Z", duration=""))
        assert excinfo.value.detail == "input Duration string could not be interpreted"

    def test_default_clock_rejects_past(self):
        with pytest.raises(PastOrMissingStartError):
            JSONValidator().to_time_slot(TimeSlotJSON(start="2000-01-01T00:00:00Z", duration="1h"))
