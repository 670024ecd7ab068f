from __future__ import annotations

import logging

from django.conf import settings
from django.contrib.auth import login as auth_login, logout as auth_logout
from django.http import HttpRequest, HttpResponse, JsonResponse
from django.middleware.csrf import get_token

from apps.common.http import api_view, json_body
from apps.common.rate_limit import client_ip, rate_limit
from . import services
from .serializers import serialize_user

logger = logging.getLogger(__name__)

BACKEND = "django.contrib.auth.backends.ModelBackend"


@api_view(["GET"], auth=False)
def csrf(request: HttpRequest) -> HttpResponse:
    return JsonResponse({"csrf_token": get_token(request)})


@api_view(["POST"], auth=False)
def register(request: HttpRequest) -> HttpResponse:
    data = json_body(request)
    user = services.register(
        email=data.get("email", ""),
        password=data.get("password", ""),
        name=data.get("name", ""),
        phone=data.get("phone"),
        town=data.get("town"),
        role=data.get("role") or "customer",
    )
    auth_login(request, user, backend=BACKEND)
    return JsonResponse({"user": serialize_user(user)}, status=201)


@api_view(["POST"], auth=False)
def login(request: HttpRequest) -> HttpResponse:
    rl = rate_limit(
        "login",
        client_ip(request),
        limit=int(getattr(settings, "LOGIN_RATE_LIMIT", 20)),
        window_seconds=int(getattr(settings, "LOGIN_RATE_WINDOW", 60)),
    )
    if not rl.allowed:
        resp = JsonResponse({"error": {"code": "rate_limited", "message": "Too many attempts", "retryable": True}}, status=429)
        resp["Retry-After"] = str(rl.retry_after)
        return resp
    data = json_body(request)
    user = services.login(email=data.get("email", ""), password=data.get("password", ""))
    auth_login(request, user, backend=BACKEND)
    logger.info("Login success user_id=%s", user.id)
    return JsonResponse({"user": serialize_user(user)})


@api_view(["POST"], auth=False)
def logout(request: HttpRequest) -> HttpResponse:
    auth_logout(request)
    return HttpResponse(status=204)


@api_view(["GET", "PATCH"])
def me(request: HttpRequest) -> HttpResponse:
    if request.method == "PATCH":
        user = services.update_profile(request.user, **json_body(request))
    else:
        user = services.verify(request.user.id)
    return JsonResponse({"user": serialize_user(user)})
