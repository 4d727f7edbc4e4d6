"""Record parsing and small helpers."""

import pytest

from data import records as R


class TestHelpers:
    def test_semester_groups(self):
        assert [R.semester_group(s) for s in range(1, 9)] == [
            "S1/S2", "S1/S2", "S3/S4", "S3/S4", "S5/S6", "S5/S6", "S7/S8", "S7/S8",
        ]

    def test_require_lists_blank_fields(self):
        with pytest.raises(R.ValidationError) as exc:
            R.require(name="  ", code=None, email="a@b.c")
        assert "name" in str(exc.value)
        assert "code" in str(exc.value)
        assert "email" not in str(exc.value)

    def test_site_settings_keys(self):
        assert R.SiteSettings.keys() == ("enable_downloads", "enable_requests")


class TestEvent:
    def test_from_row_tolerates_missing_columns(self):
        event = R.Event.from_row({"id": "e1", "name": "Shot Put"})
        assert event.type == "individual"
        assert event.rounds == []
        assert event.participants == []
        assert event.current_round_index == 0

    def test_rounds_and_results_parse(self):
        event = R.Event.from_row({
            "id": "e1",
            "rounds": [{"id": "r1", "name": "Final", "participants": [{"participant_id": "p1", "rank": "2"}]}],
        })
        result = event.rounds[0].participants[0]
        assert result.participant_id == "p1"
        assert result.rank == 2

    def test_points_fall_back_to_individual_defaults(self):
        event = R.Event(id="e1", name="x", points_1st=None, points_2nd=0, points_3rd=2)
        assert event.points_for_rank(1) == 5
        # zero is treated as unset
        assert event.points_for_rank(2) == 3
        assert event.points_for_rank(3) == 2
        assert event.points_for_rank(4) == 0


class TestSystemSettings:
    def test_from_row_blanks_null_text_and_pins_id(self):
        s = R.SystemSettings.from_row({"id": "other", "college_name": None, "hod_name": "HOD", "extra": 1})
        assert s.id == R.SETTINGS_ROW_ID
        assert s.college_name == ""
        assert s.hod_name == "HOD"
        assert s.watermark_url is None

    def test_staff_profile_admin_flag(self):
        assert R.StaffProfile(uid="u", email="e", name="n", role="admin").is_admin
        assert not R.StaffProfile(uid="u", email="e", name="n").is_admin
