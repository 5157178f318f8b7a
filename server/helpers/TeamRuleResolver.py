"""
Team participation rules per event.

Events are matched by keywords in their display name. The first matching
group wins, so groups whose keywords could overlap must be ordered with the
more specific rule first. Adding an event type means adding a row to
TEAM_RULES, not writing a new branch.
"""
import logging

from models.models import EventTeamPolicy, RegistrationDraft, TeamMember
from .RegistrationErrors import PolicyViolation

logger = logging.getLogger(__name__)

# (keywords, policy fields)
TEAM_RULES = [
    (("battleclipse", "esports"), {"require_team": True, "allow_toggle": False, "min_size": 5, "max_size": 5}),
    (("sparkx", "startup"), {"require_team": True, "allow_toggle": False, "min_size": 2, "max_size": 5}),
    (("infinity", "workshop"), {"require_team": False, "allow_toggle": False, "min_size": 1, "max_size": 1}),
]

OPEN_POLICY = {"require_team": False, "allow_toggle": True, "min_size": None, "max_size": None}


def match_keywords(event_display_name: str, table):
    """Return the value of the first table row whose keywords occur in the name, or None."""
    name = (event_display_name or "").lower()
    for keywords, value in table:
        if any(keyword in name for keyword in keywords):
            return value
    return None


def resolve_policy(event_display_name: str) -> EventTeamPolicy:
    rule = match_keywords(event_display_name, TEAM_RULES)
    return EventTeamPolicy(**(rule or OPEN_POLICY))


def effective_team_size(policy: EventTeamPolicy, draft: RegistrationDraft) -> int:
    if policy.forces_solo:
        return 1
    if policy.fixed_size:
        return policy.min_size
    low, high = policy.bounds()
    return max(low, min(high, draft.team_size))


def reconcile_draft(policy: EventTeamPolicy, draft: RegistrationDraft) -> RegistrationDraft:
    """
    Bring a form draft in line with the policy. The draft is modified in place
    and returned; applying this twice gives the same draft as applying it once.
    """
    if policy.require_team:
        draft.is_team = True
    if policy.forces_solo:
        draft.is_team = False

    size = effective_team_size(policy, draft)
    draft.team_size = size

    required_members = size - 1
    current_members = len(draft.team_members)
    if required_members < current_members:
        del draft.team_members[required_members:]
    elif required_members > current_members:
        draft.team_members.extend(TeamMember() for _ in range(required_members - current_members))

    return draft


def validate_submission(policy: EventTeamPolicy, draft: RegistrationDraft, agree_to_rules: bool) -> None:
    """Raise PolicyViolation if the draft cannot be submitted under this policy."""
    if not agree_to_rules:
        raise PolicyViolation("rules not accepted")

    if policy.forces_solo:
        if draft.is_team or draft.team_size != 1:
            raise PolicyViolation("solo only")
    elif policy.require_team:
        if not draft.is_team:
            raise PolicyViolation("team mandatory")
        low, high = policy.bounds()
        if draft.team_size < low or draft.team_size > high:
            raise PolicyViolation(
                "size out of range",
                f"Team size must be between {low} and {high}",
            )
        if len(draft.team_members) != draft.team_size - 1:
            raise PolicyViolation("member count mismatch")
