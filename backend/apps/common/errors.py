# apps/common/errors.py

"""
Domain errors raised by the service layer.

Every error carries a stable ``code`` (used in API bodies and to pick the
HTTP status) and a human-readable ``message``. Services raise them; the
operation boundary in ``apps.workflow.actions`` turns them into failed
results.
"""


class CRMError(Exception):
    code = "error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self):
        return self.message


class ValidationError(CRMError):
    """A required field is missing or a value is malformed."""
    code = "validation_error"

    def __init__(self, message: str, fields: dict[str, list[str]] | None = None):
        super().__init__(message)
        self.fields = fields or {}

    @classmethod
    def from_django(cls, exc) -> "ValidationError":
        """Build from a ``django.core.exceptions.ValidationError``."""
        if hasattr(exc, "message_dict"):
            fields = {key: [str(m) for m in msgs] for key, msgs in exc.message_dict.items()}
        else:
            fields = {"__all__": [str(m) for m in exc.messages]}
        summary = "; ".join(
            f"{key}: {' '.join(msgs)}" if key != "__all__" else " ".join(msgs)
            for key, msgs in fields.items()
        )
        return cls(f"Invalid data. {summary}", fields=fields)


class DuplicateEmail(CRMError):
    code = "duplicate_email"

    def __init__(self, email: str):
        super().__init__("A contact with this email already exists.")
        self.email = email


class NotFound(CRMError):
    code = "not_found"

    def __init__(self, entity: str, identifier):
        super().__init__(f"{entity} {identifier} not found.")
        self.entity = entity
        self.identifier = identifier


class InvalidReference(CRMError):
    """A foreign key points at a row that does not exist."""
    code = "invalid_reference"

    def __init__(self, field: str, identifier):
        super().__init__(f"{field} {identifier} does not reference an existing record.")
        self.field = field
        self.identifier = identifier


class TransitionError(CRMError):
    """A workflow move failed; ``step`` says which part of the move."""
    code = "transition_error"

    VALIDATE = "validate"
    REMOVE = "remove"
    ADD = "add"

    def __init__(self, message: str, stage: str | None = None, step: str = VALIDATE):
        super().__init__(message)
        self.stage = stage
        self.step = step
