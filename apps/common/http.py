from __future__ import annotations

import functools
import json
import logging
from typing import Any, Callable, Iterable

from django.http import HttpRequest, HttpResponse, JsonResponse
from django.views.decorators.csrf import ensure_csrf_cookie

from .errors import InvalidInput, NotAuthenticated, ServiceError

logger = logging.getLogger(__name__)


def error_response(exc: ServiceError) -> JsonResponse:
    return JsonResponse({"error": exc.as_dict()}, status=exc.status)


def csrf_failure(request: HttpRequest, reason: str = "") -> JsonResponse:
    """CSRF_FAILURE_VIEW: reject in the same JSON shape as every other API error."""
    logger.warning("CSRF rejected %s %s: %s", request.method, request.path, reason)
    return JsonResponse(
        {"error": {"code": "csrf_failed", "message": "CSRF verification failed", "retryable": False}}, status=403
    )


def json_body(request: HttpRequest) -> dict[str, Any]:
    """Decode a JSON object body; form-encoded bodies are accepted as a fallback."""
    if request.content_type == "application/json":
        if not request.body:
            return {}
        try:
            data = json.loads(request.body)
        except json.JSONDecodeError:
            raise InvalidInput(errors=["Malformed JSON body"])
        if not isinstance(data, dict):
            raise InvalidInput(errors=["JSON body must be an object"])
        return data
    return request.POST.dict()


def api_view(methods: Iterable[str], *, auth: bool = True) -> Callable:
    """Wrap a JSON endpoint.

    Dispatches on HTTP method (405 otherwise), requires an authenticated user
    unless `auth` is False, and renders any ServiceError the view raises as a
    JSON error document with the error's status. Every response carries the
    csrftoken cookie that later unsafe requests must echo back.
    """
    allowed = {m.upper() for m in methods}

    def decorator(view: Callable[..., HttpResponse]) -> Callable[..., HttpResponse]:
        @ensure_csrf_cookie
        @functools.wraps(view)
        def wrapper(request: HttpRequest, *args, **kwargs) -> HttpResponse:
            if request.method not in allowed:
                resp = JsonResponse({"error": {"code": "method_not_allowed", "message": "Method not allowed", "retryable": False}}, status=405)
                resp["Allow"] = ", ".join(sorted(allowed))
                return resp
            try:
                if auth and not request.user.is_authenticated:
                    raise NotAuthenticated()
                return view(request, *args, **kwargs)
            except ServiceError as exc:
                if exc.status >= 500:
                    logger.error("%s %s failed: %s", request.method, request.path, exc.message)
                return error_response(exc)

        return wrapper

    return decorator
