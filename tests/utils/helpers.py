"""Test helper functions."""

import base64
import json
from io import BytesIO
from typing import Any, Dict, Optional, Tuple


class MockSocket:
    """Socket stand-in: serves one raw request and records the raw response."""

    def __init__(self, raw_request: bytes):
        self.raw_request = raw_request
        self.sent = bytearray()

    def makefile(self, *args, **kwargs):
        return BytesIO(self.raw_request)

    def sendall(self, data):
        self.sent.extend(data)

    def close(self):
        pass


def build_raw_request(
    method: str,
    path: str,
    body: Optional[Dict[str, Any]] = None,
    token: Optional[str] = None,
    headers: Optional[Dict[str, str]] = None
) -> bytes:
    """Serialize an HTTP/1.1 request as the handler reads it off the socket."""
    payload = json.dumps(body).encode('utf-8') if body is not None else b""
    lines = [f"{method} {path} HTTP/1.1", "Host: localhost", f"Content-Length: {len(payload)}"]
    if body is not None:
        lines.append("Content-Type: application/json")
    if token:
        lines.append(f"Authorization: Bearer {token}")
    for name, value in (headers or {}).items():
        lines.append(f"{name}: {value}")
    return ("\r\n".join(lines) + "\r\n\r\n").encode('utf-8') + payload


def call_handler(handler_class, method: str, path: str, **kwargs) -> Tuple[int, Any]:
    """Run one request through a Vercel handler class; returns (status, parsed JSON body)."""
    sock = MockSocket(build_raw_request(method, path, **kwargs))
    handler_class(sock, ("127.0.0.1", 8000), None)

    head, _, response_body = bytes(sock.sent).partition(b"\r\n\r\n")
    status = int(head.split(b" ", 2)[1])
    return status, json.loads(response_body) if response_body else None


def encode_image(filename: str, content: bytes, content_type: str = "image/jpeg") -> Dict[str, str]:
    """Image upload as the API expects it."""
    return {
        "filename": filename,
        "content_type": content_type,
        "data": base64.b64encode(content).decode('ascii'),
    }
