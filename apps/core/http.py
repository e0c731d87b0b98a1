"""Helpers for the JSON request/response boundary."""

import json

from django.http import JsonResponse

from .results import Result, validation_error


def error_response(result: Result) -> JsonResponse:
    """Render a failed result as an ``{"error": ...}`` body with its status."""
    return JsonResponse({"error": result.message}, status=result.status)


def parse_json_body(request) -> tuple[dict, Result | None]:
    """
    Decode a JSON object from the request body.

    Returns ``(data, None)`` on success or ``({}, failure)`` when the body is
    not a JSON object.
    """
    try:
        data = json.loads(request.body or b"{}")
    except (json.JSONDecodeError, UnicodeDecodeError):
        return {}, validation_error("Invalid JSON")
    if not isinstance(data, dict):
        return {}, validation_error("Invalid JSON")
    return data, None
