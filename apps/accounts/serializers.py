from __future__ import annotations

from typing import Any


def serialize_user(user) -> dict[str, Any]:
    return {
        "id": str(user.id),
        "email": user.email,
        "name": user.name,
        "phone": user.phone or None,
        "town": user.town or None,
        "role": user.role,
    }
