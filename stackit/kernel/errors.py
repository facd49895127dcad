"""
Error taxonomy for the vote & acceptance engine.

Every error carries a stable ``code`` that the request layer maps to an
HTTP status. None of these is fatal to the process; each one leaves the
persisted state consistent.
"""


class EngineError(Exception):
    """Base class for all engine errors."""

    code: str = "engine_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(EngineError):
    """A referenced question, answer or notification does not exist."""

    code = "not_found"


class UnauthorizedError(EngineError):
    """Someone other than the question author tried to accept an answer."""

    code = "unauthorized"


class InvalidReferenceError(EngineError):
    """The answer does not belong to the question being acted on."""

    code = "invalid_reference"


class InvalidArgumentError(EngineError):
    """Malformed command input, e.g. a vote direction other than up/down."""

    code = "invalid_argument"


class ConflictError(EngineError):
    """The optimistic retry budget ran out under contention."""

    code = "conflict"


class VersionConflictError(EngineError):
    """
    A versioned commit found a different version than it expected.

    Raised by EntityStore commits and retried by the facade; callers outside
    the engine only ever see ConflictError.
    """

    code = "version_conflict"

    def __init__(self, kind: str, entity_id, expected_version: int):
        super().__init__(
            f"{kind} {entity_id} changed since version {expected_version}"
        )
        self.kind = kind
        self.entity_id = entity_id
        self.expected_version = expected_version


class NotificationDeliveryFailure(EngineError):
    """
    A notification record could not be written.

    Never raised past the facade: it is logged and reported as a warning on
    an otherwise successful result.
    """

    code = "notification_delivery_failure"
