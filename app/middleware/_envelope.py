"""Error envelope for responses sent directly from raw ASGI middleware."""

import json
from typing import Any, Callable

from app.shared.utils.datetime import utc_now


async def send_error(
    send: Callable,
    status: int,
    message: str,
    code: str,
    details: dict[str, Any] | None = None,
) -> None:
    """Send a complete JSON error response in the API envelope."""
    error: dict[str, Any] = {
        "message": message,
        "code": code,
        "statusCode": status,
        "timestamp": utc_now().isoformat(),
    }
    if details:
        error["details"] = details
    body = json.dumps({"success": False, "error": error}).encode()
    await send({
        "type": "http.response.start",
        "status": status,
        "headers": [
            (b"content-type", b"application/json"),
            (b"content-length", str(len(body)).encode()),
        ],
    })
    await send({
        "type": "http.response.body",
        "body": body,
        "more_body": False,
    })
