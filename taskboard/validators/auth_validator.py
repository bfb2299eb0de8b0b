from __future__ import annotations

import re
from typing import Any, Dict, List, Mapping

from taskboard.errors import ValidationError
from taskboard.models.user_model import PLANS
from taskboard.utils.validation import (
    PHONE_RE,
    Violation,
    field,
    is_email,
    is_missing,
    length,
    matches,
    max_length,
    one_of,
    raise_for,
    run_rules,
    strip_strings,
)

SPECIAL_CHARS = "@$!%*?&"


def password_strength(value: Any) -> str | None:
    if not isinstance(value, str):
        return "must be a string"
    if len(value) < 8:
        return "must be at least 8 characters"
    if not re.search(r"[A-Z]", value):
        return "must contain at least one uppercase letter"
    if not re.search(r"[a-z]", value):
        return "must contain at least one lowercase letter"
    if not re.search(r"\d", value):
        return "must contain at least one number"
    if not any(ch in SPECIAL_CHARS for ch in value):
        return f"must contain at least one special character ({SPECIAL_CHARS})"
    return None


def _confirmation(password_field: str):
    def rule(data: Mapping[str, Any]) -> List[Violation]:
        confirm = data.get("passwordConfirm")
        if is_missing(confirm):
            return [Violation("passwordConfirm", "Please confirm your password")]
        if confirm != data.get(password_field):
            return [Violation("passwordConfirm", "Passwords do not match")]
        return []

    return rule


is_phone = matches(PHONE_RE, "must be a valid phone number")

SIGNUP_RULES = [
    field("name", length(2, 50), required=True, label="Name"),
    field("email", is_email, required=True, label="Email"),
    field("password", password_strength, required=True, label="Password"),
    _confirmation("password"),
    field("phone", is_phone, label="Phone"),
    field("organization", max_length(100), label="Organization"),
    field("plan", one_of(*PLANS), required=True, label="Plan"),
]

LOGIN_RULES = [
    field("email", is_email, required=True, label="Email"),
    field("password", required=True, label="Password"),
]

FORGOT_PASSWORD_RULES = [
    field("email", is_email, required=True, label="Email"),
]

RESET_PASSWORD_RULES = [
    field("token", required=True, label="Token"),
    field("newPassword", password_strength, required=True, label="New password"),
    _confirmation("newPassword"),
]


def _name_not_blank(data: Mapping[str, Any]) -> List[Violation]:
    if "name" in data and is_missing(data["name"]):
        return [Violation("name", "Name cannot be empty")]
    return []


UPDATE_PROFILE_RULES = [
    field("name", length(2, 50), label="Name"),
    field("phone", is_phone, label="Phone"),
    field("organization", max_length(100), label="Organization"),
    _name_not_blank,
]


def _validate(payload: Any, rules) -> Dict[str, Any]:
    if not isinstance(payload, Mapping):
        raise ValidationError("Request body must be a JSON object")
    raise_for(run_rules(payload, rules))
    cleaned = strip_strings(payload)
    if "email" in cleaned:
        cleaned["email"] = cleaned["email"].lower()
    # Passwords are compared and hashed exactly as sent
    for key in ("password", "newPassword", "passwordConfirm"):
        if key in payload:
            cleaned[key] = payload[key]
    return cleaned


def validate_signup(payload: Any) -> Dict[str, Any]:
    return _validate(payload, SIGNUP_RULES)


def validate_login(payload: Any) -> Dict[str, Any]:
    return _validate(payload, LOGIN_RULES)


def validate_forgot_password(payload: Any) -> Dict[str, Any]:
    return _validate(payload, FORGOT_PASSWORD_RULES)


def validate_reset_password(payload: Any) -> Dict[str, Any]:
    return _validate(payload, RESET_PASSWORD_RULES)


def validate_update_profile(payload: Any) -> Dict[str, Any]:
    cleaned = _validate(payload, UPDATE_PROFILE_RULES)
    updates = {key: value for key, value in cleaned.items() if key in ("name", "phone", "organization")}
    for key in ("phone", "organization"):
        if key in updates and is_missing(updates[key]):
            updates[key] = None
    return updates
