"""Tests for JSON serialization of forwarded messages."""

import json
from datetime import UTC, date, datetime, timedelta, timezone
from decimal import Decimal
from uuid import UUID

import pytest

from crmforward.contracts import EntityReference, Money, OptionSetValue
from crmforward.core.serialization import (
    format_braced_guid,
    format_compact_guid,
    format_round_trip,
    serialize_payload,
)

RECORD_ID = UUID("3fa85f64-5717-4562-b3fc-2c963f66afa6")


class TestGuidFormats:
    def test_compact_guid_is_32_upper_hex(self) -> None:
        assert format_compact_guid(RECORD_ID) == "3FA85F6457174562B3FC2C963F66AFA6"

    def test_braced_guid_is_lower_case(self) -> None:
        value = UUID("3FA85F64-5717-4562-B3FC-2C963F66AFA6")
        assert format_braced_guid(value) == "{3fa85f64-5717-4562-b3fc-2c963f66afa6}"


class TestRoundTripFormat:
    def test_utc_uses_z_suffix_and_seven_fraction_digits(self) -> None:
        value = datetime(2024, 3, 1, 8, 15, 30, 123456, tzinfo=UTC)
        assert format_round_trip(value) == "2024-03-01T08:15:30.1234560Z"

    def test_positive_offset(self) -> None:
        value = datetime(2024, 3, 1, 8, 15, 30, tzinfo=timezone(timedelta(hours=2)))
        assert format_round_trip(value) == "2024-03-01T08:15:30.0000000+02:00"

    def test_negative_half_hour_offset(self) -> None:
        value = datetime(2024, 3, 1, 8, 15, 30, tzinfo=timezone(-timedelta(hours=3, minutes=30)))
        assert format_round_trip(value) == "2024-03-01T08:15:30.0000000-03:30"

    def test_naive_has_no_suffix(self) -> None:
        assert format_round_trip(datetime(2024, 3, 1, 8, 15, 30)) == "2024-03-01T08:15:30.0000000"


class TestSerializePayload:
    def test_output_is_indented(self) -> None:
        text = serialize_payload({"Id": RECORD_ID, "Attributes": {"name": "Jane"}})

        assert text.startswith("{\n  ")
        assert json.loads(text) == {"Id": "3fa85f64-5717-4562-b3fc-2c963f66afa6", "Attributes": {"name": "Jane"}}

    def test_compact_when_indent_is_none(self) -> None:
        assert "\n" not in serialize_payload({"a": 1, "b": [1, 2]}, indent=None)

    def test_preserves_key_order(self) -> None:
        text = serialize_payload({"UserId": 1, "MessageName": 2, "LogicalName": 3}, indent=None)
        assert text == '{"UserId": 1, "MessageName": 2, "LogicalName": 3}'

    def test_crm_value_types(self) -> None:
        owner_id = UUID("7c9e6679-7425-40de-944b-e07fc1f90ae7")
        payload = {
            "ownerid": EntityReference("systemuser", owner_id, "Jane Doe"),
            "statuscode": OptionSetValue(1),
            "revenue": Money(Decimal("1250.50")),
            "birthdate": date(1990, 5, 17),
            "modifiedon": datetime(2024, 3, 1, tzinfo=UTC),
            "parentcustomerid": None,
        }

        data = json.loads(serialize_payload(payload))

        assert data["ownerid"] == {"Id": str(owner_id), "LogicalName": "systemuser", "Name": "Jane Doe"}
        assert data["statuscode"] == {"Value": 1}
        assert data["revenue"] == {"Value": "1250.50"}
        assert data["birthdate"] == "1990-05-17"
        assert data["modifiedon"] == "2024-03-01T00:00:00.0000000Z"
        assert data["parentcustomerid"] is None

    def test_decimal_keeps_every_digit(self) -> None:
        payload = {"Attributes": {"plain": Decimal("922337203685477.5807"), "revenue": Money(Decimal("922337203685477.5807"))}}

        data = json.loads(serialize_payload(payload))

        assert Decimal(data["Attributes"]["plain"]) == Decimal("922337203685477.5807")
        assert data["Attributes"]["revenue"] == {"Value": "922337203685477.5807"}

    def test_non_ascii_kept_verbatim(self) -> None:
        assert "Zoë" in serialize_payload({"name": "Zoë"})

    @pytest.mark.parametrize("value", [float("nan"), float("inf"), Decimal("NaN")])
    def test_non_finite_numbers_rejected(self, value: object) -> None:
        with pytest.raises(ValueError, match="non-finite"):
            serialize_payload({"value": value})

    def test_unknown_type_rejected(self) -> None:
        with pytest.raises(TypeError, match="object"):
            serialize_payload({"value": object()})
