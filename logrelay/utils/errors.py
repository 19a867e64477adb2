from __future__ import annotations

REQUIRED_FIELDS = ("service", "instance", "level", "message")


class RelayError(Exception):
    """Base for failures that map onto a nack code."""

    code = "RELAY_ERROR"

    def __init__(self, message: str, code: str | None = None):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code


class AuthFailure(RelayError):
    code = "UNAUTHORIZED"


class MalformedInput(RelayError):
    code = "INVALID_FIELD"


class MissingField(MalformedInput):
    code = "MissingField"

    def __init__(self, fields: tuple[str, ...] = REQUIRED_FIELDS):
        self.fields = list(fields)
        super().__init__(f"Missing fields in payload: {', '.join(self.fields)}")


class PersistenceFailure(RelayError):
    code = "DB_ERROR"


def unauthorized(message: str = "Missing or invalid Authorization header") -> AuthFailure:
    return AuthFailure(message, "UNAUTHORIZED")


def invalid_token(message: str = "Token authentication failed") -> AuthFailure:
    return AuthFailure(message, "INVALID_TOKEN")


def invalid_json(message: str = "Malformed JSON body") -> MalformedInput:
    return MalformedInput(message, "INVALID_JSON")


def invalid_field(message: str = "Missing required field: payload.message") -> MalformedInput:
    return MalformedInput(message, "INVALID_FIELD")
