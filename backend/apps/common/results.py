# apps/common/results.py

from dataclasses import dataclass
from typing import Any

from .errors import CRMError


@dataclass
class OperationResult:
    """Outcome of a public operation: never an exception, always one of these."""
    success: bool
    message: str
    data: Any = None
    error: str | None = None
    step: str | None = None
    fields: dict[str, list[str]] | None = None

    @classmethod
    def ok(cls, message: str, data: Any = None) -> "OperationResult":
        return cls(success=True, message=message, data=data)

    @classmethod
    def fail(cls, exc: CRMError) -> "OperationResult":
        return cls(
            success=False,
            message=exc.message,
            error=exc.code,
            step=getattr(exc, "step", None),
            fields=getattr(exc, "fields", None) or None,
        )

    def to_dict(self) -> dict:
        body = {"success": self.success, "message": self.message}
        if self.error:
            body["error"] = self.error
        if self.step:
            body["step"] = self.step
        if self.fields:
            body["fields"] = self.fields
        return body
