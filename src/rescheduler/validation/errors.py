"""Validation models."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

ERROR = "error"
INFO = "info"


@dataclass(slots=True)
class ValidationError:
    """One request-level problem (missing path, unreadable file)."""

    code: str
    message: str
    path: str

    def as_dict(self) -> dict[str, str]:
        return {"code": self.code, "message": self.message, "path": self.path}


@dataclass(slots=True)
class ValidationIssue:
    """Finding on a course, disruption or engine-config document."""

    severity: str
    code: str
    message: str
    field_path: str
    suggested_fix: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    def as_error(self) -> ValidationError:
        return ValidationError(code=self.code, message=self.message, path=self.field_path)

    def as_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"code": self.code, "message": self.message, "field_path": self.field_path}
        if self.suggested_fix:
            payload["suggested_fix"] = self.suggested_fix
        payload.update(self.extra)
        return payload


@dataclass(slots=True)
class ValidationReport:
    """Every finding of a validation pass, in the order checks ran.

    Checks never stop at the first error; callers inspect ``errors`` once all
    of them have run.
    """

    issues: list[ValidationIssue] = field(default_factory=list)

    @property
    def errors(self) -> list[ValidationIssue]:
        return [issue for issue in self.issues if issue.severity == ERROR]

    @property
    def infos(self) -> list[ValidationIssue]:
        return [issue for issue in self.issues if issue.severity == INFO]

    def add_error(
        self,
        *,
        code: str,
        message: str,
        field_path: str,
        suggested_fix: str | None = None,
        extra: dict[str, Any] | None = None,
    ) -> None:
        self.issues.append(ValidationIssue(ERROR, code, message, field_path, suggested_fix, extra or {}))

    def add_info(self, *, code: str, message: str, field_path: str, extra: dict[str, Any] | None = None) -> None:
        self.issues.append(ValidationIssue(INFO, code, message, field_path, None, extra or {}))

    def extend(self, other: ValidationReport) -> None:
        self.issues.extend(other.issues)

    def error_codes(self) -> set[str]:
        return {issue.code for issue in self.errors}

    def as_errors(self) -> list[ValidationError]:
        return [issue.as_error() for issue in self.errors]

    def as_dict(self) -> dict[str, list[dict[str, Any]]]:
        return {
            "errors": [issue.as_dict() for issue in self.errors],
            "infos": [issue.as_dict() for issue in self.infos],
        }


class InvalidInputError(Exception):
    """Raised when course documents fail validation before any scoring."""

    def __init__(self, report: ValidationReport) -> None:
        codes = ", ".join(sorted(report.error_codes()))
        super().__init__(f"{len(report.errors)} validation error(s): {codes}")
        self.report = report
