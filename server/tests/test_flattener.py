"""
Tests for turning registrations into export rows, the summary sheet and stats
"""
import pytest
from datetime import datetime, timedelta, timezone

from helpers.RegistrationFlattener import (
    build_export_table,
    build_summary,
    compute_stats,
    export_filename,
    flatten,
    rank_institutions,
    split_timestamp,
)
from models.models import Event, RegistrationRecord, TeamMember

CORE_COLUMNS = [
    "S.No", "Registration Date", "Registration Time", "Full Name", "Email ID",
    "Contact Number", "College/University", "Department & Year", "Technical Skills",
    "Previous Experience", "Team Name", "Team Size", "Role in Team", "Agreed to Rules",
]

REGISTERED_AT = datetime(2025, 3, 14, 15, 9, 26, tzinfo=timezone.utc)


def make_record(**overrides):
    data = {
        "event_id": "evt-1",
        "full_name": "Asha Rao",
        "email_id": "asha@example.com",
        "contact_number": "9999999999",
        "college_university": "MIT",
        "department_year": "CSE - 3rd Year",
        "agree_to_rules": True,
        "registered_at": REGISTERED_AT,
    }
    data.update(overrides)
    return RegistrationRecord(**data)


def test_core_columns_in_fixed_order():
    row = flatten(make_record(), 0)
    assert list(row.keys()) == CORE_COLUMNS
    assert row["S.No"] == 1
    assert row["Registration Date"] == "3/14/2025"
    assert row["Registration Time"] == "3:09:26 PM"
    assert row["Technical Skills"] == "N/A"
    assert row["Previous Experience"] == "N/A"
    assert row["Team Name"] == "Individual"
    assert row["Team Size"] == 1
    assert row["Role in Team"] == "Leader"
    assert row["Agreed to Rules"] == "Yes"


def test_sequence_number_follows_row_index():
    assert flatten(make_record(), 41)["S.No"] == 42


def test_timestamp_split_uses_export_timezone():
    assert split_timestamp(REGISTERED_AT, "Asia/Kolkata") == ("3/14/2025", "8:39:26 PM")
    assert split_timestamp(datetime(2025, 1, 2, 0, 5, 0)) == ("1/2/2025", "12:05:00 AM")


def test_flatten_is_deterministic():
    record = make_record(event_specific_data={"gender": "Female", "laptop_available": True})
    assert flatten(record, 3) == flatten(record, 3)


def test_false_flag_still_emits_column():
    row = flatten(make_record(event_specific_data={"laptop_available": False}), 0)
    assert row["Laptop Available"] == "No"


def test_undefined_flag_is_omitted():
    members = [TeamMember(name=f"Player {i}") for i in range(4)]
    record = make_record(team_name="Nova", team_size=5, team_members=members,
                         event_specific_data={"selected_game": "Valorant"})
    row = flatten(record, 0)
    assert "Laptop Available" not in row
    assert row["Team Name"] == "Nova"


def test_empty_string_counts_as_present():
    row = flatten(make_record(event_specific_data={"city": ""}), 0)
    assert row["City"] == ""


def test_optional_columns_follow_table_order_and_ignore_unknown_keys():
    specific = {
        "event_category": "Technical",
        "needs_special_setup": True,
        "project_title": "Smart Irrigation",
        "gender": "Male",
        "event_title": "Protonova",
        "favourite_colour": "blue",
    }
    row = flatten(make_record(event_specific_data=specific), 0)
    extra = list(row.keys())[len(CORE_COLUMNS):]
    assert extra == ["Gender", "Project Title", "Needs Special Setup", "Event Category"]
    assert row["Needs Special Setup"] == "Yes"


def test_member_blocks_have_eight_columns_each():
    members = [
        TeamMember(name="Ravi", email_id="ravi@example.com", contact_number="1", college="MIT",
                   city="Pune", program_branch="ECE", current_year="2", gender="Male"),
        TeamMember(),
    ]
    record = make_record(team_name="Nova", team_size=3, team_members=members)
    row = flatten(record, 0)
    member_columns = [key for key in row if key.startswith("Team Member ")]
    assert len(member_columns) == 8 * len(members)
    assert member_columns[:8] == [
        "Team Member 1 Name", "Team Member 1 Email", "Team Member 1 Contact", "Team Member 1 College",
        "Team Member 1 City", "Team Member 1 Program", "Team Member 1 Year", "Team Member 1 Gender",
    ]
    assert row["Team Member 1 Program"] == "ECE"
    assert row["Team Member 2 Name"] == ""


def test_members_come_after_optional_fields():
    record = make_record(team_name="Nova", team_size=2, team_members=[TeamMember(name="Ravi")],
                         event_specific_data={"event_category": "Gaming"})
    keys = list(flatten(record, 0).keys())
    assert keys.index("Event Category") < keys.index("Team Member 1 Name")


def test_record_requires_matching_member_count():
    with pytest.raises(ValueError):
        make_record(team_size=3, team_members=[TeamMember()])


def test_export_table_header_is_union_in_first_seen_order():
    first = make_record(event_specific_data={"laptop_available": True})
    second = make_record(full_name="Ben", event_specific_data={"gender": "Male", "laptop_available": False},
                         team_name="Duo", team_size=2, team_members=[TeamMember(name="Cy")])
    headers, rows = build_export_table([first, second])

    assert headers[:len(CORE_COLUMNS)] == CORE_COLUMNS
    assert headers[len(CORE_COLUMNS):] == ["Laptop Available", "Gender"] + [
        f"Team Member 1 {label}" for label in
        ["Name", "Email", "Contact", "College", "City", "Program", "Year", "Gender"]
    ]
    assert all(len(row) == len(headers) for row in rows)
    assert rows[0][headers.index("Gender")] is None
    assert rows[0][headers.index("Team Member 1 Name")] is None
    assert rows[1][headers.index("Team Member 1 Name")] == "Cy"
    assert rows[1][0] == 2


def test_rank_institutions_counts_and_orders():
    records = [make_record(college_university=name) for name in ["MIT", "MIT", "CMU"]]
    assert rank_institutions(records) == [("MIT", 2), ("CMU", 1)]


def test_rank_institutions_ties_keep_first_seen_order():
    names = ["IIT", "MIT", "CMU", "MIT", "CMU", "IIT", "mit"]
    records = [make_record(college_university=name) for name in names]
    assert rank_institutions(records) == [("IIT", 2), ("MIT", 2), ("CMU", 2), ("mit", 1)]
    assert rank_institutions(records, limit=1) == [("IIT", 2)]


def test_summary_rows():
    event = Event(event_id="evt-1", title="Stellar Hackathon", category="Technical", status="open")
    records = [make_record(college_university=name) for name in ["MIT", "CMU", "MIT"]]
    summary = build_summary(event, "ignored", records, 3, REGISTERED_AT)

    assert summary[:8] == [
        ("Event Title", "Stellar Hackathon"),
        ("Event Category", "Technical"),
        ("Event Status", "open"),
        ("Total Registrations", 3),
        ("Export Date", "3/14/2025"),
        ("Export Time", "3:09:26 PM"),
        ("", ""),
        ("College Distribution", ""),
    ]
    assert summary[8:] == [("MIT", 2), ("CMU", 1)]


def test_summary_falls_back_when_event_missing():
    summary = build_summary(None, "Fallback Title", [], 0, REGISTERED_AT)
    assert summary[0] == ("Event Title", "Fallback Title")
    assert summary[1] == ("Event Category", "N/A")
    assert summary[2] == ("Event Status", "N/A")


def test_export_filename_sanitizes_title():
    exported_at = datetime(2025, 3, 14, 23, 0, 0)
    assert export_filename("Stellar – Hackathon 2025!", exported_at) == \
        "Stellar___Hackathon_2025__Registrations_2025-03-14.xlsx"


def test_compute_stats():
    now = datetime(2025, 3, 20, tzinfo=timezone.utc)
    records = [
        make_record(registered_at=now - timedelta(days=1)),
        make_record(registered_at=now - timedelta(days=30), college_university="CMU"),
        make_record(registered_at=now - timedelta(days=2), team_name="Duo", team_size=2,
                    team_members=[TeamMember(name="Cy")]),
    ]
    stats = compute_stats(records, now, recent_days=7, limit=10)
    assert stats["recentCount"] == 2
    assert stats["teamCount"] == 1
    assert stats["individualCount"] == 2
    assert stats["topInstitutions"] == [{"name": "MIT", "count": 2}, {"name": "CMU", "count": 1}]
