class RegistrationError(Exception):
    """Base class for failures that are reported back to the participant or organiser."""
    status_code = 500
    default_message = "Something went wrong. Please try again."

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(RegistrationError):
    """Missing or invalid input. The submission is blocked until the user fixes it."""
    status_code = 422
    default_message = "Please check the registration details and try again."

    def __init__(self, message: str = None, fields=None):
        super().__init__(message)
        self.fields = list(fields or [])


class PolicyViolation(ValidationError):
    """The draft breaks the team-participation rules of the event."""

    MESSAGES = {
        "solo only": "This event accepts individual participation only",
        "team mandatory": "Team participation is compulsory for this event",
        "size out of range": "Team size is outside the allowed range for this event",
        "member count mismatch": "Please complete details for all team members",
        "rules not accepted": "Please agree to the rules and regulations",
    }

    def __init__(self, reason: str, message: str = None):
        self.reason = reason
        super().__init__(message or self.MESSAGES.get(reason, reason))


class EmptyExportError(RegistrationError):
    status_code = 404
    default_message = "No registrations to export for this event"


class SubmissionError(RegistrationError):
    """The store rejected the registration or could not be reached."""
    status_code = 502
    default_message = "Registration failed. Please try again."

    def __init__(self, message: str = None, status_code: int = None):
        super().__init__(message)
        if status_code is not None:
            self.status_code = status_code


class ExportGenerationError(RegistrationError):
    status_code = 500
    default_message = "Failed to export data. Please try again."
