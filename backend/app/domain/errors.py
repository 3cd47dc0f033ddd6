from dataclasses import dataclass
from typing import List


@dataclass
class DomainError(Exception):
    detail: str
    title: str = "Domain Error"
    type: str = "https://example.com/problems/domain-error"
    errors: List[dict] | None = None


class ValidationError(DomainError):
    """Raised when a pricing call receives an argument it cannot price."""

    def __init__(self, field: str, message: str) -> None:
        super().__init__(
            detail=f"Invalid value for {field}: {message}",
            title="Validation Error",
            type="https://example.com/problems/validation-error",
            errors=[{"field": field, "message": message}],
        )
        self.field = field
        self.message = message

    def __str__(self) -> str:
        return self.detail


class ConfigurationError(Exception):
    """Raised when a pricing settings record is missing or holds unusable values.

    This points at stored data, not at the request, so it surfaces as a 500.
    """

    def __init__(self, field: str, message: str) -> None:
        super().__init__(f"Invalid pricing settings field {field}: {message}")
        self.field = field
        self.message = message
