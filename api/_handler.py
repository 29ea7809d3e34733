"""Shared plumbing for the JSON endpoints under api/."""

from http.server import BaseHTTPRequestHandler
import asyncio
import base64
import binascii
import json
from typing import Any, Optional
from urllib.parse import parse_qs, urlsplit

from pydantic import ValidationError

from src.services.image_upload import ImageFile
from src.services.supabase_client import SupabaseGateway, create_gateway
from src.utils.errors import (
    AuthenticationRequiredError,
    InvalidRequestError,
    NotFoundError,
    RedirectError,
    StorageError,
    SupabaseError,
)
from src.utils.logging import correlation_context, get_structured_logger
from src.utils.logging_config import LoggingConfig

logger = get_structured_logger(__name__)


def error_response(error: Exception) -> tuple[int, dict]:
    """HTTP status and body for an exception raised while handling a request."""
    if isinstance(error, NotFoundError):
        return 404, {"error": str(error)}
    if isinstance(error, AuthenticationRequiredError):
        return 401, {"error": str(error), "redirect": error.redirect_to}
    if isinstance(error, RedirectError):
        return 403, {"error": str(error), "redirect": error.redirect_to}
    if isinstance(error, ValidationError):
        return 400, {"error": "invalid request", "details": error.errors(include_url=False, include_context=False)}
    if isinstance(error, InvalidRequestError):
        return 400, {"error": str(error)}
    if isinstance(error, (SupabaseError, StorageError)):
        return 502, {"error": str(error)}
    return 500, {"error": "internal server error"}


def decode_images(items: Optional[list]) -> list[ImageFile]:
    """Image uploads arrive as {filename, content_type, data} with base64 data."""
    images = []
    for item in items or []:
        if not isinstance(item, dict) or not item.get("data"):
            raise InvalidRequestError("Each image needs a filename and base64 data")
        try:
            content = base64.b64decode(item["data"], validate=True)
        except (binascii.Error, ValueError) as e:
            raise InvalidRequestError(f"Image data is not valid base64: {e}") from e
        images.append(ImageFile(
            filename=item.get("filename") or "upload.bin",
            content=content,
            content_type=item.get("content_type"),
        ))
    return images


def run_async(coro):
    """Run a coroutine to completion on a fresh event loop."""
    loop = asyncio.new_event_loop()
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


class JsonHandler(BaseHTTPRequestHandler):
    """
    Base for Vercel serverless handlers.

    Subclasses implement ``get``/``post``/``patch``/``delete`` as coroutines
    taking a gateway and returning ``(status, payload)``. Each request gets its
    own gateway and correlation id.
    """

    get = None
    post = None
    patch = None
    delete = None

    def do_GET(self):
        self._handle(self.get)

    def do_POST(self):
        self._handle(self.post)

    def do_PATCH(self):
        self._handle(self.patch)

    def do_DELETE(self):
        self._handle(self.delete)

    @property
    def query(self) -> dict[str, list[str]]:
        return parse_qs(urlsplit(self.path).query)

    def query_value(self, key: str) -> Optional[str]:
        values = self.query.get(key)
        return values[0] if values else None

    def require_query_value(self, key: str) -> str:
        value = self.query_value(key)
        if not value:
            raise InvalidRequestError(f"Missing query parameter: {key}")
        return value

    def json_body(self) -> dict:
        if getattr(self, "_body", None) is None:
            content_length = int(self.headers.get('Content-Length', 0) or 0)
            raw_body = self.rfile.read(content_length).decode('utf-8') if content_length > 0 else ""
            try:
                body = json.loads(raw_body) if raw_body else {}
            except json.JSONDecodeError as e:
                raise InvalidRequestError(f"Request body is not valid JSON: {e}") from e
            if not isinstance(body, dict):
                raise InvalidRequestError("Request body must be a JSON object")
            self._body = body
        return self._body

    def access_token(self) -> Optional[str]:
        """Bearer token from the Authorization header."""
        header = self.headers.get('Authorization') or ""
        scheme, _, token = header.partition(" ")
        if scheme.lower() != "bearer" or not token.strip():
            return None
        return token.strip()

    def send_json(self, status: int, payload: Any) -> None:
        self.send_response(status)
        self.send_header('Content-Type', 'application/json')
        self.end_headers()
        self.wfile.write(json.dumps(payload, default=str).encode('utf-8'))

    def _handle(self, action) -> None:
        LoggingConfig.setup_logging()

        if action is None:
            self.send_json(405, {"error": "method not allowed"})
            return

        header_name = LoggingConfig.LOG_CORRELATION_ID_HEADER
        with correlation_context(self.headers.get(header_name) or None):
            try:
                gateway = create_gateway()
                status, payload = run_async(self._run(action, gateway))
            except Exception as e:
                status, payload = error_response(e)
                if status >= 500:
                    logger.exception(
                        "Request failed",
                        method=self.command,
                        path=urlsplit(self.path).path,
                        status=status
                    )
                else:
                    logger.info(
                        "Request rejected",
                        method=self.command,
                        path=urlsplit(self.path).path,
                        status=status,
                        error=str(e)
                    )
            self.send_json(status, payload)

    @staticmethod
    async def _run(action, gateway: SupabaseGateway):
        async with gateway:
            return await action(gateway)
