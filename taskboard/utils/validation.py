"""Small declarative validation pipeline.

A rule is any callable taking the input mapping and returning an iterable of
:class:`Violation`. :func:`run_rules` evaluates every rule, so a request with
three bad fields reports all three.
"""
from __future__ import annotations

import re
from dataclasses import asdict, dataclass
from datetime import date
from typing import Any, Callable, Iterable, List, Mapping, Optional, Sequence

from taskboard.errors import ValidationError

TIME_RE = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")
DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[A-Za-z]{2,}$")
PHONE_RE = re.compile(r"^\+?\d{7,15}$")
UUID_RE = re.compile(r"^[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}$")

TRUE_LITERALS = ("true", "1")
FALSE_LITERALS = ("false", "0")


@dataclass(frozen=True)
class Violation:
    param: str
    message: str
    location: str = "body"

    def to_dict(self):
        return asdict(self)


# A check returns an error message, or None when the value passes.
Check = Callable[[Any], Optional[str]]
Rule = Callable[[Mapping[str, Any]], Iterable[Violation]]


def is_missing(value: Any) -> bool:
    return value is None or (isinstance(value, str) and value.strip() == "")


def field(
    name: str,
    *checks: Check,
    required: bool = False,
    location: str = "body",
    label: Optional[str] = None,
) -> Rule:
    """Build a rule for one field; the first failing check is reported."""
    label = label or name

    def rule(data: Mapping[str, Any]) -> List[Violation]:
        value = data.get(name)
        if is_missing(value):
            if required:
                return [Violation(name, f"{label} is required", location)]
            return []
        for check in checks:
            message = check(value)
            if message:
                return [Violation(name, f"{label} {message}", location)]
        return []

    return rule


def run_rules(data: Mapping[str, Any], rules: Sequence[Rule]) -> List[Violation]:
    violations: List[Violation] = []
    for rule in rules:
        violations.extend(rule(data))
    return violations


def raise_for(violations: Sequence[Violation], message: str = "Invalid input data") -> None:
    if violations:
        raise ValidationError(message, details=[v.to_dict() for v in violations])


# -- checks -----------------------------------------------------------------


def is_string(value: Any) -> Optional[str]:
    return None if isinstance(value, str) else "must be a string"


def length(min_len: int = 0, max_len: Optional[int] = None) -> Check:
    def check(value: Any) -> Optional[str]:
        if not isinstance(value, str):
            return "must be a string"
        size = len(value.strip())
        if size < min_len or (max_len is not None and size > max_len):
            if max_len is None:
                return f"must be at least {min_len} characters"
            return f"must be between {min_len} and {max_len} characters"
        return None

    return check


def max_length(max_len: int) -> Check:
    def check(value: Any) -> Optional[str]:
        if not isinstance(value, str):
            return "must be a string"
        if len(value.strip()) > max_len:
            return f"must be at most {max_len} characters"
        return None

    return check


def one_of(*choices: str) -> Check:
    def check(value: Any) -> Optional[str]:
        if value not in choices:
            return "must be one of: " + ", ".join(choices)
        return None

    return check


def matches(pattern: "re.Pattern[str]", message: str) -> Check:
    def check(value: Any) -> Optional[str]:
        if not isinstance(value, str) or not pattern.search(value):
            return message
        return None

    return check


def parse_date(value: Any) -> Optional[date]:
    if not isinstance(value, str) or not DATE_RE.match(value):
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        return None


def is_date(value: Any) -> Optional[str]:
    return None if parse_date(value) else "must be a valid date (YYYY-MM-DD)"


def not_before(today: date) -> Check:
    def check(value: Any) -> Optional[str]:
        parsed = parse_date(value)
        if parsed is not None and parsed < today:
            return "cannot be in the past"
        return None

    return check


def is_time(value: Any) -> Optional[str]:
    if isinstance(value, str) and TIME_RE.match(value):
        return None
    return "must be in HH:MM format"


def parse_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in TRUE_LITERALS:
            return True
        if lowered in FALSE_LITERALS:
            return False
    return None


def is_boolean(value: Any) -> Optional[str]:
    return None if parse_bool(value) is not None else "must be a boolean"


def is_uuid(value: Any) -> Optional[str]:
    if isinstance(value, str) and UUID_RE.match(value):
        return None
    return "must be a valid UUID"


def is_email(value: Any) -> Optional[str]:
    if isinstance(value, str) and EMAIL_RE.match(value.strip()):
        return None
    return "must be a valid email address"


def strip_strings(data: Mapping[str, Any]) -> dict:
    return {key: value.strip() if isinstance(value, str) else value for key, value in data.items()}
