"""Request body size limit middleware.

Rejects bodies over max_bytes with 413 in the API error envelope, whether
the size is declared by Content-Length or only discovered while reading a
chunked body. Raw ASGI (no BaseHTTPMiddleware).
"""

import json
from typing import Any, Callable

from wastems.middleware._asgi import get_header
from wastems.shared.utils import isoformat_z


async def _send_413(scope: dict, send: Callable, max_bytes: int, actual: int | None = None) -> None:
    details: dict[str, Any] = {"max_bytes": max_bytes}
    if actual is not None:
        details["content_length"] = actual
    body = json.dumps(
        {
            "success": False,
            "error": {
                "code": "INTERNAL_ERROR",
                "message": f"Request body must be at most {max_bytes} bytes",
                "details": details,
            },
            "timestamp": isoformat_z(),
            "path": scope.get("path", ""),
        }
    ).encode()
    await send({
        "type": "http.response.start",
        "status": 413,
        "headers": [
            (b"content-type", b"application/json"),
            (b"content-length", str(len(body)).encode()),
        ],
    })
    await send({"type": "http.response.body", "body": body, "more_body": False})


def RequestSizeLimitMiddleware(app: Callable, max_bytes: int) -> Callable:
    """Reject requests whose body exceeds max_bytes (Content-Length or chunked)."""

    async def asgi_app(scope: dict, receive: Callable, send: Callable) -> None:
        if scope["type"] != "http":
            await app(scope, receive, send)
            return

        content_length = get_header(scope, "content-length")
        if content_length is not None:
            try:
                length = int(content_length)
            except ValueError:
                length = 0
            if length > max_bytes:
                await _send_413(scope, send, max_bytes, length)
                return
            await app(scope, receive, send)
            return

        if (get_header(scope, "transfer-encoding") or "").lower() != "chunked":
            await app(scope, receive, send)
            return

        chunks: list[bytes] = []
        total = 0
        while True:
            message = await receive()
            if message["type"] != "http.request":
                # Client went away before the body was complete.
                return
            body = message.get("body", b"")
            total += len(body)
            if total > max_bytes:
                await _send_413(scope, send, max_bytes, total)
                return
            chunks.append(body)
            if not message.get("more_body", False):
                break

        buffered = b"".join(chunks)
        sent = False

        async def buffered_receive() -> dict:
            nonlocal sent
            if not sent:
                sent = True
                return {"type": "http.request", "body": buffered, "more_body": False}
            return await receive()

        await app(scope, buffered_receive, send)

    return asgi_app
