from datetime import timedelta

from flask import Blueprint, current_app, jsonify, request
from flask_jwt_extended import (
    create_access_token,
    decode_token,
    get_jwt,
    get_jwt_identity,
    jwt_required,
    set_access_cookies,
    unset_jwt_cookies,
)
from flask_jwt_extended.exceptions import JWTExtendedException
from jwt.exceptions import ExpiredSignatureError, InvalidTokenError
from werkzeug.security import check_password_hash, generate_password_hash

from taskboard.errors import AuthenticationError, ConflictError, NotFoundError, TaskboardError, ValidationError
from taskboard.repositories.user_repository import UserRepository
from taskboard.services.email_service import get_email_service
from taskboard.utils.db import get_db
from taskboard.utils.email_templates import forgot_password_template, welcome_template
from taskboard.validators.auth_validator import (
    validate_forgot_password,
    validate_login,
    validate_reset_password,
    validate_signup,
    validate_update_profile,
)


auth_bp = Blueprint("auth", __name__)

RESET_PURPOSE = "password_reset"


def _users() -> UserRepository:
    return UserRepository(get_db())


def _issue_token(user) -> str:
    return create_access_token(identity=str(user.id), additional_claims={"email": user.email})


def _current_user():
    if get_jwt().get("purpose") == RESET_PURPOSE:
        raise AuthenticationError("Invalid token")
    user = _users().find_by_id(int(get_jwt_identity()))
    if user is None:
        raise AuthenticationError("User not found")
    return user


@auth_bp.post("/signup")
def signup():
    payload = validate_signup(request.get_json(silent=True))
    users = _users()
    if users.find_by_email(payload["email"]):
        raise ConflictError("Email already in use")

    user = users.create(
        name=payload["name"],
        email=payload["email"],
        password_hash=generate_password_hash(payload["password"]),
        plan=payload["plan"],
        phone=payload.get("phone") or None,
        organization=payload.get("organization") or None,
    )
    current_app.logger.info("Registered user %s", user.id)

    mailer = get_email_service()
    if mailer.configured:
        mailer.send_email(user.email, "Welcome to Taskboard", welcome_template(user.name))

    token = _issue_token(user)
    resp = jsonify(
        success=True,
        data={"user": user.summary(), "token": token},
        message="User registered successfully",
    )
    set_access_cookies(resp, token)
    return resp, 201


@auth_bp.post("/login")
def login():
    payload = validate_login(request.get_json(silent=True))
    user = _users().find_by_email(payload["email"])
    if user is None or not check_password_hash(user.password, payload["password"]):
        raise AuthenticationError("Invalid credentials")

    token = _issue_token(user)
    resp = jsonify(success=True, data={"user": user.summary(), "token": token}, message="Login successful")
    set_access_cookies(resp, token)
    return resp, 200


@auth_bp.post("/logout")
def logout():
    resp = jsonify(success=True, message="Logout successful")
    unset_jwt_cookies(resp)
    return resp, 200


@auth_bp.post("/forgot-password")
def forgot_password():
    payload = validate_forgot_password(request.get_json(silent=True))
    user = _users().find_by_email(payload["email"])
    if user is None:
        raise NotFoundError("User not found")

    minutes = current_app.config["PASSWORD_RESET_EXPIRES_MINUTES"]
    reset_token = create_access_token(
        identity=str(user.id),
        additional_claims={"purpose": RESET_PURPOSE},
        expires_delta=timedelta(minutes=minutes),
    )
    reset_link = f"{current_app.config['FRONTEND_URL'].rstrip('/')}/reset-password?token={reset_token}"

    sent = get_email_service().send_email(
        user.email,
        "Password Reset Request",
        forgot_password_template(user.name, reset_link, minutes),
    )
    if not sent:
        raise TaskboardError("Failed to send reset email")
    return jsonify(success=True, message="Password reset link sent to email"), 200


@auth_bp.post("/reset-password")
def reset_password():
    payload = validate_reset_password(request.get_json(silent=True))
    try:
        claims = decode_token(payload["token"])
    except ExpiredSignatureError:
        raise AuthenticationError("Password reset token has expired")
    except (InvalidTokenError, JWTExtendedException):
        raise ValidationError("Invalid password reset token")
    if claims.get("purpose") != RESET_PURPOSE:
        raise ValidationError("Invalid password reset token")

    _users().update_password(int(claims["sub"]), generate_password_hash(payload["newPassword"]))
    return jsonify(success=True, message="Password reset successful"), 200


@auth_bp.get("/profile")
@jwt_required()
def get_profile():
    return jsonify(success=True, data=_current_user().profile()), 200


@auth_bp.put("/profile")
@jwt_required()
def update_profile():
    updates = validate_update_profile(request.get_json(silent=True))
    user = _current_user()
    updated = _users().update_profile(user.id, updates)
    return jsonify(success=True, data={"user": updated.profile()}, message="Profile updated successfully"), 200
