from enum import Enum


class RSVPErrorKind(str, Enum):
    NOT_FOUND = "not_found"
    INVALID_STATE = "invalid_state"
    VALIDATION = "validation"
    PERSISTENCE = "persistence"


class RSVPError(Exception):
    """Base class for failures the RSVP flow reports back to the guest."""

    kind: RSVPErrorKind
    public_message: str = "An error occurred while processing your RSVP."

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.public_message)


class GuestNotFoundError(RSVPError):
    """Raised when a guest does not exist or belongs to another event."""

    kind = RSVPErrorKind.NOT_FOUND
    # shared with EventNotFoundError so callers cannot tell which lookup failed
    public_message = "Guest or event not found"

    def __init__(self, guest_id: int, event_id: int) -> None:
        self.guest_id = guest_id
        self.event_id = event_id
        super().__init__(f"Guest {guest_id} not found in event {event_id}")


class EventNotFoundError(RSVPError):
    kind = RSVPErrorKind.NOT_FOUND
    public_message = GuestNotFoundError.public_message

    def __init__(self, event_id: int) -> None:
        self.event_id = event_id
        super().__init__(f"Event {event_id} not found")


class InvalidStateError(RSVPError):
    """Raised when stage 2 is submitted by a guest who has not confirmed attendance."""

    kind = RSVPErrorKind.INVALID_STATE
    public_message = (
        "Travel and accommodation details can only be submitted after confirming attendance."
    )


class RSVPValidationError(RSVPError):
    """Raised when a request references data outside the guest's event."""

    kind = RSVPErrorKind.VALIDATION
    public_message = "Invalid RSVP data"

    def __init__(self, errors: list[dict]) -> None:
        self.errors = errors
        super().__init__(f"{self.public_message}: {errors}")
