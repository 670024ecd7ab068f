import phonenumbers
from django.conf import settings
from typing import Final

from .errors import InvalidInput


def to_e164(raw: str, default_region: str | None = None) -> str:
    region = default_region or getattr(settings, "PHONE_DEFAULT_REGION", "BR")
    try:
        n = phonenumbers.parse(raw, region)
    except phonenumbers.NumberParseException:
        raise InvalidInput(errors=["Invalid phone number"])
    if not phonenumbers.is_valid_number(n):
        raise InvalidInput(errors=["Invalid phone number"])
    return phonenumbers.format_number(n, phonenumbers.PhoneNumberFormat.E164)


_MASK_TEMPLATE: Final = "{}****{}"


def mask_phone(phone: str) -> str:
    digits = "".join(ch for ch in (phone or "") if ch.isdigit())
    if len(digits) < 6:
        return "********"
    return _MASK_TEMPLATE.format(digits[:2], digits[-2:])
