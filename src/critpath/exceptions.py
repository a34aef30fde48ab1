"""Custom exceptions for critpath."""

from __future__ import annotations

from collections.abc import Sequence


class CritpathError(Exception):
    """Base exception for all critpath errors."""

    pass


class ValidationError(CritpathError):
    """Raised when scheduling inputs are invalid."""

    pass


class StructuralError(ValidationError):
    """Raised when tasks or dependencies are structurally invalid.

    Covers dangling task references, self-referential dependencies, duplicate
    task ids and negative durations. All problems found are kept in ``errors``.
    """

    def __init__(self, errors: Sequence[str]):
        self.errors = list(errors)
        if len(self.errors) == 1:
            message = self.errors[0]
        else:
            message = f"{len(self.errors)} structural errors:\n" + "\n".join(
                f"  - {error}" for error in self.errors
            )
        super().__init__(message)


class CircularDependencyError(ValidationError):
    """Raised when a circular dependency is detected."""

    def __init__(self, message: str, cycle: Sequence[str] | None = None):
        self.cycle = list(cycle) if cycle else []
        super().__init__(message)


class ScheduleSizeError(ValidationError):
    """Raised when a task set exceeds the configured size limit."""

    pass


class ParseError(CritpathError):
    """Raised when YAML parsing fails."""

    pass
