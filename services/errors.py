"""Typed failures raised by the reservation services.

Routes turn these into JSON with the mapped HTTP status so that admin
tools can tell a refused action (Conflict, InvalidState) apart from a
generic failure.
"""


class ReservationError(Exception):
    status_code = 500
    kind = "error"

    def __init__(self, message: str, details=None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict:
        out = {"error": self.message, "kind": self.kind}
        if self.details:
            out["details"] = self.details
        return out


class ValidationError(ReservationError):
    status_code = 400
    kind = "validation_error"


class NotFound(ReservationError):
    status_code = 404
    kind = "not_found"


class Conflict(ReservationError):
    status_code = 409
    kind = "conflict"


class InvalidState(ReservationError):
    status_code = 409
    kind = "invalid_state"


class UpstreamFailure(ReservationError):
    # Reported alongside a committed mutation, never raised to the transport
    status_code = 200
    kind = "upstream_failure"
