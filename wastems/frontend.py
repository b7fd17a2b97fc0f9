"""Single-page console served from the built static directory.

Only mounted in production, after the API routes. Any path outside /api/
returns the matching build file, or index.html so client-side routes
resolve. The mount has no route endpoint, so SlowAPIMiddleware leaves
static requests out of the API rate limit.
"""

from fastapi import FastAPI
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.responses import Response
from starlette.staticfiles import StaticFiles
from starlette.types import Scope


class ConsoleStaticFiles(StaticFiles):
    """StaticFiles with an index.html fallback; api/ paths stay 404."""

    async def get_response(self, path: str, scope: Scope) -> Response:
        if path == "api" or path.startswith("api/"):
            raise StarletteHTTPException(status_code=404)
        try:
            return await super().get_response(path, scope)
        except StarletteHTTPException as exc:
            if exc.status_code != 404:
                raise
        return await super().get_response("index.html", scope)


def register_frontend(app: FastAPI, static_dir: str) -> None:
    app.mount("/", ConsoleStaticFiles(directory=static_dir, check_dir=False), name="console")
