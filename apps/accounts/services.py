from __future__ import annotations

import logging
import uuid

from django.contrib.auth import get_user_model
from django.contrib.auth.password_validation import validate_password
from django.core.exceptions import ValidationError
from django.core.validators import validate_email
from django.db import IntegrityError, transaction

from apps.common.errors import Conflict, InvalidInput, NotAuthenticated, NotFound, translate_db_errors
from apps.common.phone import to_e164
from apps.common.validators import is_blank, missing_fields, reject_fields
from .models import Role

User = get_user_model()
logger = logging.getLogger(__name__)

PROFILE_FIELDS = ("name", "phone", "town")


def _normalize_email(email: str) -> str:
    return (email or "").strip().lower()


def _clean_phone(raw) -> str:
    return "" if is_blank(raw) else to_e164(str(raw))


@translate_db_errors
def register(*, email: str, password: str, name: str, phone: str | None = None, town: str | None = None, role: str = Role.CUSTOMER):
    """Create a user and return it. The password is stored hashed."""
    errors = missing_fields({"email": email, "password": password, "name": name}, ["email", "password", "name"])
    email = _normalize_email(email)
    if email:
        try:
            validate_email(email)
        except ValidationError:
            errors.append("Invalid email address")
    if role not in Role.values:
        errors.append("Invalid role")
    if errors:
        raise InvalidInput(errors=errors)

    user = User(
        username=email,
        email=email,
        name=name.strip(),
        phone=_clean_phone(phone),
        town=(town or "").strip(),
        role=role,
    )
    try:
        validate_password(password, user=user)
    except ValidationError as exc:
        raise InvalidInput(errors=list(exc.messages))
    user.set_password(password)

    if User.objects.filter(email__iexact=email).exists():
        raise Conflict("Email already registered")
    try:
        with transaction.atomic():
            user.save()
    except IntegrityError:
        raise Conflict("Email already registered")
    logger.info("Registered user_id=%s role=%s", user.id, user.role)
    return user


@translate_db_errors
def login(*, email: str, password: str):
    user = User.objects.filter(email__iexact=_normalize_email(email)).first()
    if user is None or not user.is_active or not user.check_password(password or ""):
        logger.warning("Login failed for email=%s", _normalize_email(email))
        raise NotAuthenticated("Invalid credentials")
    return user


@translate_db_errors
def verify(user_id) -> "User":
    try:
        pk = uuid.UUID(str(user_id))
    except ValueError:
        raise NotFound("User not found")
    user = User.objects.filter(pk=pk, is_active=True).first()
    if user is None:
        raise NotFound("User not found")
    return user


@translate_db_errors
def update_profile(actor, **fields):
    """Self-only profile edit. Email and role are not editable here."""
    reject_fields(fields, PROFILE_FIELDS)
    if "name" in fields and is_blank(fields["name"]):
        raise InvalidInput(errors=["Name is required"])
    if "phone" in fields:
        fields["phone"] = _clean_phone(fields["phone"])
    for key, value in fields.items():
        setattr(actor, key, "" if value is None else str(value).strip())
    actor.save(update_fields=[*fields, "updated_at"])
    return actor
