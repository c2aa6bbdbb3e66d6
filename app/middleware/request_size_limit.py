"""Request body size limit middleware.

Rejects requests whose body exceeds the configured maximum (max_upload_size,
large enough for the biggest allowed upload plus form fields). Per-file
limits are enforced by the services. Handles both Content-Length and
Transfer-Encoding: chunked.
Uses raw ASGI (no BaseHTTPMiddleware) for production-safe streaming and background tasks.
"""

from typing import Any, Callable

from app.middleware._envelope import send_error


def _get_header(scope: dict, name: str) -> str | None:
    """Return first header value for name (case-insensitive)."""
    want = name.lower().encode()
    for k, v in scope.get("headers", []):
        if k.lower() == want:
            return v.decode("utf-8", errors="replace")
    return None


async def _send_413(send: Callable, max_bytes: int, actual: int | None = None) -> None:
    details: dict[str, Any] = {"max_bytes": max_bytes}
    if actual is not None:
        details["content_length"] = actual
    await send_error(
        send,
        413,
        f"Request body must be at most {max_bytes} bytes",
        "PAYLOAD_TOO_LARGE",
        details,
    )


def RequestSizeLimitMiddleware(app: Callable, max_bytes: int) -> Callable:
    """Reject requests whose body exceeds max_bytes (Content-Length or chunked). Raw ASGI."""

    async def asgi_app(scope: dict, receive: Callable, send: Callable) -> None:
        if scope["type"] != "http":
            await app(scope, receive, send)
            return

        content_length_str = _get_header(scope, "content-length")
        if content_length_str:
            try:
                length = int(content_length_str)
            except ValueError:
                length = 0
            if length > max_bytes:
                await _send_413(send, max_bytes, length)
                return
            await app(scope, receive, send)
            return

        transfer_encoding = (_get_header(scope, "transfer-encoding") or "").lower()
        if transfer_encoding != "chunked":
            await app(scope, receive, send)
            return

        chunks: list[bytes] = []
        total = 0
        while True:
            message = await receive()
            if message["type"] != "http.request":
                continue
            body = message.get("body", b"")
            total += len(body)
            if total > max_bytes:
                await _send_413(send, max_bytes, total)
                return
            chunks.append(body)
            if not message.get("more_body", False):
                break

        class ReplayReceive:
            """Replay collected body chunks to the app one message at a time."""

            def __init__(self) -> None:
                self._index = 0

            async def __call__(self) -> dict:
                if self._index < len(chunks):
                    i = self._index
                    self._index += 1
                    return {
                        "type": "http.request",
                        "body": chunks[i],
                        "more_body": self._index < len(chunks),
                    }
                return await receive()

        await app(scope, ReplayReceive(), send)

    return asgi_app
