"""Unit tests for lenient connection date parsing."""

from datetime import date, datetime

import pytest

from warmpath.schemas.relationships import ContactRecord
from warmpath.utils.dates import parse_connection_date


class TestParseConnectionDate:

    @pytest.mark.parametrize(
        "value",
        [
            "2026-02-10",
            "10 Feb 2026",
            "10 February 2026",
            "02/10/2026",
            "2026-02-10T08:30:00Z",
            " 2026-02-10 ",
            date(2026, 2, 10),
            datetime(2026, 2, 10, 23, 59),
        ],
    )
    def test_supported_formats(self, value):
        assert parse_connection_date(value) == date(2026, 2, 10)

    @pytest.mark.parametrize("value", [None, "", "yesterday", "2026-13-40", 20260210, ["2026-02-10"]])
    def test_unparseable_values_return_none(self, value):
        assert parse_connection_date(value) is None


class TestContactRecordDates:

    def test_bad_date_degrades_to_unknown(self):
        contact = ContactRecord.model_validate(
            {"id": "00000000-0000-0000-0000-000000000001", "connected_on": "sometime in 2019"}
        )

        assert contact.connected_on is None

    def test_owner_read_from_team_member_column(self):
        contact = ContactRecord.model_validate(
            {
                "id": "00000000-0000-0000-0000-000000000001",
                "full_name": "Jane Doe",
                "team_member_name": "Todd",
                "connected_on": "10 Feb 2026",
            }
        )

        assert contact.owner == "Todd"
        assert contact.connected_on == date(2026, 2, 10)
        assert not contact.has_current_position
