"""
Error codes and infrastructure exceptions.

Expected failures travel as ``Error(code, message)`` inside a Result;
only infrastructure outages are raised.
"""

# Credential / token failures
EXPIRED = "EXPIRED"
INVALID = "INVALID"
BAD_SIGNATURE = "BAD_SIGNATURE"
MALFORMED = "MALFORMED"

# Delivery / storage failures
DISPATCH_FAILED = "DISPATCH_FAILED"
REPOSITORY_UNAVAILABLE = "REPOSITORY_UNAVAILABLE"

# Uniform message for OTP / reset token rejections
INVALID_CREDENTIAL_MESSAGE = "Invalid or expired code"


class RepositoryUnavailable(Exception):
    """Raised by adapters when the backing store cannot be reached"""


class InvalidTransition(Exception):
    """Raised when an event is not allowed in the reminder's current state"""

    def __init__(self, state, event):
        self.state = state
        self.event = event
        super().__init__(
            f"Event {type(event).__name__} not allowed in state {state.value}"
        )
