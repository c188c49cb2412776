"""JSON request/response helpers shared by the API views."""

import json

from django.http import JsonResponse

from .exceptions import StoreError, ValidationError


def json_body(request) -> dict:
    """Decode a JSON object body; an empty body decodes to ``{}``."""
    if not request.body:
        return {}
    try:
        data = json.loads(request.body)
    except (json.JSONDecodeError, UnicodeDecodeError):
        raise ValidationError("Invalid JSON")
    if not isinstance(data, dict):
        raise ValidationError("Expected a JSON object")
    return data


def error_response(error: StoreError) -> JsonResponse:
    return JsonResponse({"error": error.message}, status=error.status_code)
