# backend/errors.py

from rest_framework.response import Response


def error_response(*, code: str, message: str, http_status: int, **context):
    """
    Canonical API error response.

    Extra keyword arguments are added next to code/message so callers can
    render the next valid action (e.g. allowed_transitions).
    """
    return Response(
        {"error": {"code": code, "message": message, **context}},
        status=http_status,
    )
