"""
Flattening of stored registrations into spreadsheet rows.

Each registration becomes an ordered dict of column label -> display value.
Rows from different event types carry different optional columns, so the
export table header is the union of all row keys in order of first
appearance.
"""
import re
from collections import OrderedDict
from datetime import datetime, timedelta, timezone, tzinfo
from typing import Iterable, List, Optional, Tuple
from zoneinfo import ZoneInfo

from models.models import Event, RegistrationRecord

# (event_specific_data key, column label, is a yes/no flag)
OPTIONAL_COLUMNS = [
    ("gender", "Gender", False),
    ("city", "City", False),
    ("program_branch", "Program/Branch", False),
    ("current_year", "Current Year", False),
    ("project_title", "Project Title", False),
    ("project_abstract", "Project Abstract", False),
    ("project_domain", "Project Domain", False),
    ("project_type", "Project Type", False),
    ("project_idea", "Project Idea", False),
    ("startup_name", "Startup Name", False),
    ("startup_idea", "Startup Idea", False),
    ("robot_name", "Robot Name", False),
    ("bot_dimensions", "Bot Dimensions", False),
    ("selected_game", "Selected Game", False),
    ("game_usernames", "Game Usernames", False),
    ("laptop_available", "Laptop Available", True),
    ("needs_special_setup", "Needs Special Setup", True),
    ("additional_space_requirements", "Additional Space Requirements", False),
    ("event_category", "Event Category", False),
]

MEMBER_COLUMNS = [
    ("name", "Name"),
    ("email_id", "Email"),
    ("contact_number", "Contact"),
    ("college", "College"),
    ("city", "City"),
    ("program_branch", "Program"),
    ("current_year", "Year"),
    ("gender", "Gender"),
]

SUMMARY_SHEET_HEADERS = ("Metric", "Value")


def yes_no(value) -> str:
    return "Yes" if value else "No"


def resolve_timezone(tz) -> tzinfo:
    if tz is None:
        return timezone.utc
    if isinstance(tz, str):
        return ZoneInfo(tz)
    return tz


def split_timestamp(moment: datetime, tz=None) -> Tuple[str, str]:
    """Split a timestamp into the date and time strings shown in the export."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    local = moment.astimezone(resolve_timezone(tz))
    date_part = f"{local.month}/{local.day}/{local.year}"
    hour = local.hour % 12 or 12
    time_part = f"{hour}:{local.minute:02d}:{local.second:02d} {'AM' if local.hour < 12 else 'PM'}"
    return date_part, time_part


def flatten(record: RegistrationRecord, row_index: int, tz=None) -> "OrderedDict[str, object]":
    reg_date, reg_time = split_timestamp(record.registered_at, tz)

    row = OrderedDict()
    row["S.No"] = row_index + 1
    row["Registration Date"] = reg_date
    row["Registration Time"] = reg_time
    row["Full Name"] = record.full_name
    row["Email ID"] = record.email_id
    row["Contact Number"] = record.contact_number
    row["College/University"] = record.college_university
    row["Department & Year"] = record.department_year
    row["Technical Skills"] = record.technical_skills or "N/A"
    row["Previous Experience"] = record.previous_experience or "N/A"
    row["Team Name"] = record.team_name or "Individual"
    row["Team Size"] = record.team_size
    row["Role in Team"] = record.role_in_team
    row["Agreed to Rules"] = yes_no(record.agree_to_rules)

    specific = record.event_specific_data
    if specific is not None:
        for key, label, is_flag in OPTIONAL_COLUMNS:
            # False and "" are real answers; only a missing key or None is absent
            value = specific.get(key)
            if value is None:
                continue
            row[label] = yes_no(value) if is_flag else value

    for idx, member in enumerate(record.team_members):
        for attr, label in MEMBER_COLUMNS:
            row[f"Team Member {idx + 1} {label}"] = getattr(member, attr)

    return row


def build_export_table(records: Iterable[RegistrationRecord], tz=None) -> Tuple[List[str], List[List[object]]]:
    """Flatten every record and align the rows under the union of their columns."""
    flat_rows = [flatten(record, idx, tz) for idx, record in enumerate(records)]

    headers: List[str] = []
    seen = set()
    for row in flat_rows:
        for column in row:
            if column not in seen:
                seen.add(column)
                headers.append(column)

    rows = [[row.get(column) for column in headers] for row in flat_rows]
    return headers, rows


def rank_institutions(records: Iterable[RegistrationRecord], limit: Optional[int] = None) -> List[Tuple[str, int]]:
    """Registrations per institution, highest first. Ties keep first-seen order."""
    counts = OrderedDict()
    for record in records:
        name = record.college_university
        counts[name] = counts.get(name, 0) + 1

    # sorted() is stable, so equal counts stay in insertion order
    ranked = sorted(counts.items(), key=lambda item: item[1], reverse=True)
    if limit is not None:
        ranked = ranked[:limit]
    return ranked


def build_summary(event: Optional[Event], event_title: str, records: List[RegistrationRecord],
                  total_count: int, exported_at: datetime, tz=None) -> List[Tuple[str, object]]:
    export_date, export_time = split_timestamp(exported_at, tz)

    summary = [
        ("Event Title", (event.title if event else None) or event_title),
        ("Event Category", (event.category if event else None) or "N/A"),
        ("Event Status", (event.status if event else None) or "N/A"),
        ("Total Registrations", total_count),
        ("Export Date", export_date),
        ("Export Time", export_time),
        ("", ""),
        ("College Distribution", ""),
    ]
    summary.extend(rank_institutions(records))
    return summary


def export_filename(event_title: str, exported_at: datetime) -> str:
    sanitized = re.sub(r"[^A-Za-z0-9]", "_", event_title or "Event")
    return f"{sanitized}_Registrations_{exported_at.date().isoformat()}.xlsx"


def compute_stats(records: List[RegistrationRecord], now: datetime, recent_days: int = 7,
                  limit: Optional[int] = 10) -> dict:
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    cutoff = now - timedelta(days=recent_days)

    recent = 0
    team = 0
    for record in records:
        registered_at = record.registered_at
        if registered_at.tzinfo is None:
            registered_at = registered_at.replace(tzinfo=timezone.utc)
        if registered_at >= cutoff:
            recent += 1
        if record.team_size > 1:
            team += 1

    return {
        "recentCount": recent,
        "teamCount": team,
        "individualCount": len(records) - team,
        "topInstitutions": [
            {"name": name, "count": count} for name, count in rank_institutions(records, limit)
        ],
    }
