"""
Event-specific form inputs.

Like the team rules, the extra inputs an event asks for are chosen by
keywords in the event title, first match wins.
"""
from datetime import datetime
from typing import Dict, List, Optional

from models.models import Event, FieldSpec, RegistrationRecord, RegistrationSubmission
from .TeamRuleResolver import match_keywords
from .RegistrationErrors import ValidationError

PROJECT_DOMAINS = [
    "Electronics & Telecommunication (ENTC)",
    "Electrical Engineering",
    "Mechanical Engineering",
    "Civil Engineering",
    "Agriculture",
    "Healthcare",
    "Interdisciplinary / Open Innovation",
    "Computer Science & IT",
    "Other",
]

PROJECT_TYPES = ["Hardware", "Software", "Both"]

LAPTOP_FIELD = FieldSpec(key="laptop_available", label="Laptop Available", kind="bool")

FIELD_SCHEMAS = [
    (("stellar", "hackathon"), [
        FieldSpec(key="technical_skills", label="Technical Skills", kind="textarea", required=True),
        FieldSpec(key="previous_experience", label="Previous Experience", kind="textarea"),
        FieldSpec(key="project_idea", label="Project Idea or Area of Interest", kind="textarea"),
    ]),
    (("protonova", "project"), [
        FieldSpec(key="project_title", label="Project Title", required=True),
        FieldSpec(key="project_abstract", label="Project Abstract", kind="textarea", required=True),
        FieldSpec(key="project_domain", label="Project Domain/Category", kind="choice", required=True, options=PROJECT_DOMAINS),
        FieldSpec(key="project_type", label="Project Type", kind="choice", required=True, options=PROJECT_TYPES),
        FieldSpec(key="needs_special_setup", label="Needs Special Setup", kind="bool"),
        FieldSpec(key="additional_space_requirements", label="Additional Space Requirements", kind="textarea"),
    ]),
    (("sparkx", "startup"), [
        FieldSpec(key="startup_name", label="Startup Name", required=True),
        FieldSpec(key="startup_idea", label="Startup Idea", kind="textarea", required=True),
    ]),
    (("cosmobolt", "robo"), [
        FieldSpec(key="robot_name", label="Robot Name", required=True),
        FieldSpec(key="bot_dimensions", label="Bot Dimensions", required=True),
    ]),
    (("battleclipse", "esports"), [
        FieldSpec(key="selected_game", label="Selected Game", required=True),
        FieldSpec(key="game_usernames", label="Game Usernames", kind="textarea", required=True),
    ]),
    (("infinity", "workshop"), [LAPTOP_FIELD]),
    (("codeburst", "programming"), [LAPTOP_FIELD]),
]

CORE_FIELDS = {
    "full_name": "Full Name",
    "gender": "Gender",
    "contact_number": "Contact Number",
    "email_id": "Email ID",
    "college_name": "College Name",
    "city": "City",
    "program_branch": "Program/Branch",
    "current_year": "Current Year",
}

MEMBER_FIELDS = {
    "name": "Name",
    "gender": "Gender",
    "contact_number": "Contact Number",
    "email_id": "Email ID",
    "college": "College",
    "city": "City",
    "program_branch": "Program/Branch",
    "current_year": "Current Year",
}

# Event fields that are stored on the registration itself rather than in event_specific_data
RECORD_LEVEL_FIELDS = ("technical_skills", "previous_experience")


def resolve_field_schema(event_display_name: str) -> List[FieldSpec]:
    return list(match_keywords(event_display_name, FIELD_SCHEMAS) or [])


def _blank(value) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def validate_required_fields(schema: List[FieldSpec], submission: RegistrationSubmission) -> None:
    """Raise ValidationError listing every required input left empty."""
    missing = []

    for key, label in CORE_FIELDS.items():
        if _blank(getattr(submission, key)):
            missing.append(label)

    for spec in schema:
        value = submission.event_fields.get(spec.key)
        if spec.required and spec.kind != "bool" and _blank(value):
            missing.append(spec.label)
        elif spec.kind == "bool" and value is not None and not isinstance(value, bool):
            raise ValidationError(f"{spec.label} must be true or false", [spec.key])
        elif spec.kind == "choice" and not _blank(value) and value not in spec.options:
            raise ValidationError(f"{spec.label} must be one of: {', '.join(spec.options)}", [spec.key])

    if submission.is_team:
        if _blank(submission.team_name):
            missing.append("Team Name")
        for idx, member in enumerate(submission.team_members):
            for key, label in MEMBER_FIELDS.items():
                if _blank(getattr(member, key)):
                    missing.append(f"Team Member {idx + 1} {label}")

    if missing:
        raise ValidationError(f"Please fill in: {', '.join(missing)}", missing)

    if submission.is_team and len(submission.team_members) != submission.team_size - 1:
        raise ValidationError("Please complete details for all team members", ["team_members"])


def build_registration(event: Event, submission: RegistrationSubmission, schema: List[FieldSpec],
                       registered_at: Optional[datetime] = None) -> RegistrationRecord:
    """
    Turn a validated form submission into the record that gets stored.

    Only inputs the event actually asks for are kept, and empty text inputs
    are dropped so the export does not grow columns nobody filled in.
    """
    specific: Dict[str, object] = {
        "gender": submission.gender,
        "city": submission.city,
        "program_branch": submission.program_branch,
        "current_year": submission.current_year,
    }
    record_level = {}

    for spec in schema:
        value = submission.event_fields.get(spec.key)
        if spec.kind == "bool":
            value = value is True
        elif _blank(value):
            continue
        if spec.key in RECORD_LEVEL_FIELDS:
            record_level[spec.key] = value
        else:
            specific[spec.key] = value

    if event.category:
        specific["event_category"] = event.category

    team_size = submission.team_size if submission.is_team else 1

    return RegistrationRecord(
        event_id=event.event_id,
        full_name=submission.full_name.strip(),
        email_id=submission.email_id.strip().lower(),
        contact_number=submission.contact_number.strip(),
        college_university=submission.college_name.strip(),
        department_year=f"{submission.program_branch} - {submission.current_year}",
        technical_skills=record_level.get("technical_skills"),
        previous_experience=record_level.get("previous_experience"),
        team_name=submission.team_name.strip() if submission.is_team else None,
        team_size=team_size,
        role_in_team="Leader",
        agree_to_rules=submission.agree_to_rules,
        registered_at=registered_at or datetime.utcnow(),
        event_specific_data=specific,
        team_members=list(submission.team_members) if submission.is_team else [],
    )
