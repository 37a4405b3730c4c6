"""Field presence rules for request payloads.

Rules return a ValidationIssue (or None) instead of raising, so callers
can chain them and raise once for the first failure:

    issue = first_issue(required(body.token, "token"), required(body.amount, "amount"))
    if issue is not None:
        raise create_validation_error(issue)
"""

from dataclasses import dataclass

from ..exceptions import ValidationError


@dataclass(frozen=True)
class ValidationIssue:
    field: str
    rule: str


def trim_string(value):
    """Strip surrounding whitespace from strings; other values pass through."""
    if isinstance(value, str):
        return value.strip()
    return value


def required(value, field: str) -> ValidationIssue | None:
    """None, blank strings and empty collections are missing. Numbers (even 0) are present."""
    if value is None:
        return ValidationIssue(field, "required")
    if isinstance(value, str) and not value.strip():
        return ValidationIssue(field, "required")
    if isinstance(value, (list, tuple, dict, set)) and not value:
        return ValidationIssue(field, "required")
    return None


def first_issue(*issues: ValidationIssue | None) -> ValidationIssue | None:
    return next((i for i in issues if i is not None), None)


def create_validation_error(issue: ValidationIssue) -> ValidationError:
    return ValidationError(issue.field, issue.rule)
