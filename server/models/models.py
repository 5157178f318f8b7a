from typing import Any, Dict, List, Optional, Tuple, Union
from pydantic import BaseModel, Field, model_validator
from datetime import datetime

# Bounds the form offers when an event does not constrain team size
DEFAULT_MIN_TEAM_SIZE = 1
DEFAULT_MAX_TEAM_SIZE = 5


class Event(BaseModel):
    event_id: str
    title: str
    category: Optional[str] = None
    status: Optional[str] = None
    payment_link: Optional[str] = None
    created_at: Optional[datetime] = None
    created_by: Optional[str] = None


class TeamMember(BaseModel):
    name: str = ""
    gender: str = ""
    contact_number: str = ""
    email_id: str = ""
    college: str = ""
    city: str = ""
    program_branch: str = ""
    current_year: str = ""


class EventTeamPolicy(BaseModel):
    require_team: bool = False
    allow_toggle: bool = True
    min_size: Optional[int] = None
    max_size: Optional[int] = None

    @model_validator(mode="after")
    def check_bounds(self):
        if self.min_size is not None and self.max_size is not None and self.min_size > self.max_size:
            raise ValueError(f"min_size {self.min_size} is greater than max_size {self.max_size}")
        return self

    @property
    def forces_solo(self) -> bool:
        return self.max_size == 1

    @property
    def fixed_size(self) -> bool:
        return self.min_size is not None and self.min_size == self.max_size

    def bounds(self) -> Tuple[int, int]:
        low = self.min_size if self.min_size is not None else DEFAULT_MIN_TEAM_SIZE
        high = self.max_size if self.max_size is not None else DEFAULT_MAX_TEAM_SIZE
        return low, high

    def size_choices(self) -> List[int]:
        low, high = self.bounds()
        return [n for n in range(DEFAULT_MIN_TEAM_SIZE, DEFAULT_MAX_TEAM_SIZE + 1) if low <= n <= high]


class FieldSpec(BaseModel):
    key: str
    label: str
    kind: str = "text"
    required: bool = False
    options: List[str] = Field(default_factory=list)


class RegistrationDraft(BaseModel):
    is_team: bool = False
    team_size: int = 1
    team_members: List[TeamMember] = Field(default_factory=list)


class RegistrationSubmission(BaseModel):
    full_name: str = ""
    gender: str = ""
    contact_number: str = ""
    email_id: str = ""
    college_name: str = ""
    city: str = ""
    program_branch: str = ""
    current_year: str = ""

    is_team: bool = False
    team_name: str = ""
    team_size: int = 1
    team_members: List[TeamMember] = Field(default_factory=list)

    # Values for the event-specific inputs, keyed by FieldSpec.key
    event_fields: Dict[str, Union[bool, str]] = Field(default_factory=dict)

    agree_to_rules: bool = False

    def draft(self) -> RegistrationDraft:
        return RegistrationDraft(
            is_team=self.is_team,
            team_size=self.team_size,
            team_members=list(self.team_members),
        )


class RegistrationRecord(BaseModel):
    registration_id: Optional[str] = None
    event_id: Optional[str] = None
    full_name: str
    email_id: str
    contact_number: str = ""
    college_university: str = ""
    department_year: str = ""
    technical_skills: Optional[str] = None
    previous_experience: Optional[str] = None
    team_name: Optional[str] = None
    team_size: int = 1
    role_in_team: str = "Leader"
    agree_to_rules: bool = False
    registered_at: datetime
    event_specific_data: Optional[Dict[str, Any]] = None
    team_members: List[TeamMember] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_member_count(self):
        if len(self.team_members) != max(self.team_size - 1, 0):
            raise ValueError(
                f"team of {self.team_size} must list {self.team_size - 1} members, got {len(self.team_members)}"
            )
        return self
