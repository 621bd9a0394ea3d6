import json
from typing import Any, Optional

from imagetext.core.config import DEFAULT_ERROR_REASON, ERROR_MESSAGE_MAX_CHARS
from imagetext.models.dto import RecognitionLine


def parse_error_body(body: str) -> str:
    """
    Pull a human-readable message out of an error response body.

    Looks at a top-level "message" first, then "error.message". The whole
    body is parsed; only the returned message is length-capped.

    Returns:
        The message, or "" for empty, non-JSON or unrecognised bodies.
    """
    if not body:
        return ""

    try:
        data = json.loads(body)
    except ValueError:
        return ""

    if not isinstance(data, dict):
        return ""

    message = data.get("message")
    if message:
        return str(message)[:ERROR_MESSAGE_MAX_CHARS]

    error = data.get("error")
    if isinstance(error, dict) and error.get("message"):
        return str(error["message"])[:ERROR_MESSAGE_MAX_CHARS]

    return ""


def classify_http_error(reason: Optional[str], http_status: int, body: str) -> str:
    """
    Build the display message for a failed request.

    Example:
        >>> classify_http_error("Unauthorized", 401, '{"error": {"message": "bad token"}}')
        'Unauthorized (401): bad token'
    """
    reason = reason or DEFAULT_ERROR_REASON
    return f"{reason} ({http_status}): {parse_error_body(body)}"


def parse_recognition_lines(obj: Any) -> Optional[list[RecognitionLine]]:
    """Extract recognitionResults[0].lines from a Read poll body.

    Only the first recognition result is read; further pages are ignored.

    Returns:
        The lines in service order, or None when the body has no such list.
    """
    if not isinstance(obj, dict):
        return None

    results = obj.get("recognitionResults")
    if not isinstance(results, list) or not results:
        return None

    first = results[0]
    lines = first.get("lines") if isinstance(first, dict) else None
    if not isinstance(lines, list):
        return None

    parsed = []
    for line in lines:
        if isinstance(line, dict):
            parsed.append(RecognitionLine(text=str(line.get("text") or "")))
    return parsed
