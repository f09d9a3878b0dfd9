"""Parsing of raw HTTP requests and building of HTTP responses."""

from __future__ import annotations

import re
from typing import Mapping, NamedTuple, Optional

from hearthweb.logger import get_logger
from hearthweb.status import (
    is_client_error,
    is_server_error,
    is_successful,
    status_message,
)

VALID_METHODS = frozenset(
    {"GET", "POST", "PUT", "DELETE", "HEAD", "OPTIONS", "PATCH", "TRACE", "CONNECT"}
)

_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")
_LENGTH_RE = re.compile(r"\s*\+?(\d+)")


class HttpParseError(ValueError):
    """Raised when a request is malformed."""


class RawRequest(NamedTuple):
    """The parts of a parsed request."""

    method: str
    path: str
    headers: dict[str, str]
    body: str


class _Cursor:
    """Line- and block-wise reader over a request string."""

    def __init__(self, text: str) -> None:
        self._text = text
        self._pos = 0

    def readline(self) -> Optional[str]:
        if self._pos >= len(self._text):
            return None
        end = self._text.find("\n", self._pos)
        if end < 0:
            line, self._pos = self._text[self._pos:], len(self._text)
        else:
            line, self._pos = self._text[self._pos:end], end + 1
        return line

    def read(self, count: int) -> str:
        chunk = self._text[self._pos:self._pos + count]
        self._pos += len(chunk)
        return chunk

    def rest(self) -> str:
        chunk = self._text[self._pos:]
        self._pos = len(self._text)
        return chunk

    @property
    def remaining(self) -> int:
        return len(self._text) - self._pos


def _parse_content_length(text: str) -> int:
    match = _LENGTH_RE.match(text)
    if match is None:
        raise HttpParseError(f"Invalid Content-Length: {text}")
    return int(match.group(1))


def _read_chunked(cursor: _Cursor) -> str:
    logger = get_logger()
    parts: list[str] = []
    while True:
        line = (cursor.readline() or "").removesuffix("\r")
        if not line:
            raise HttpParseError("Empty chunk size line")
        size_text = line.split(";", 1)[0].strip(" \t")
        if not size_text:
            raise HttpParseError("Empty chunk size line")
        logger.debug(f"Parsing chunk size: {size_text}")
        if not set(size_text) <= _HEX_DIGITS:
            raise HttpParseError(f"Invalid chunk size: {size_text}")
        size = int(size_text, 16)
        if size == 0:
            cursor.readline()
            return "".join(parts)
        data = cursor.read(size)
        if len(data) < size:
            raise HttpParseError(f"Truncated chunk: expected {size} bytes, got {len(data)}")
        parts.append(data)
        cursor.readline()


def parse_request(request: str) -> RawRequest:
    """Split a raw request into method, path, headers and body."""
    logger = get_logger()
    cursor = _Cursor(request)

    tokens = (cursor.readline() or "").split()
    method, path, version = (tokens + ["", "", ""])[:3]
    if method not in VALID_METHODS:
        raise HttpParseError(f"Invalid HTTP method: {method}")

    collected: dict[str, str] = {}
    while (line := cursor.readline()) is not None and line != "\r":
        key, colon, value = line.partition(":")
        if not colon:
            continue
        collected[key] = value.lstrip(" \t").removesuffix("\r")
    headers = dict(sorted(collected.items()))

    if version == "HTTP/1.1" and not any(key.lower() == "host" for key in headers):
        logger.warning("HTTP/1.1 request missing Host header")
        raise HttpParseError("HTTP/1.1 request requires Host header")

    if "Content-Length" in headers:
        length = _parse_content_length(headers["Content-Length"])
        available = cursor.remaining
        if length > available:
            raise HttpParseError(
                f"Content-Length {length} exceeds available data length {available}"
            )
        body = cursor.read(length)
    elif "chunked" in headers.get("Transfer-Encoding", ""):
        logger.info("Chunked encoding detected, parsing chunked body")
        body = _read_chunked(cursor)
    else:
        body = cursor.rest()

    return RawRequest(method, path, headers, body)


def split_query(path: str) -> tuple[str, dict[str, str]]:
    """Separate the query string from ``path`` and parse its key=value pairs."""
    base, question, query = path.partition("?")
    if not question:
        return path, {}
    params: dict[str, str] = {}
    for pair in query.split("&"):
        key, equals, value = pair.partition("=")
        if equals:
            params[key] = value
    return base, params


def _log_status(code: int, message: str, kind: str) -> None:
    logger = get_logger()
    if is_successful(code):
        logger.info(f"Sending {kind}successful response: {code} {message}")
    elif is_client_error(code):
        logger.warning(f"Sending {kind}client error response: {code} {message}")
    elif is_server_error(code):
        logger.error(f"Sending {kind}server error response: {code} {message}")


def build_response(
    status: int,
    content: str = "",
    headers: Optional[Mapping[str, str]] = None,
    content_type: str = "text/html",
) -> str:
    """Build a complete response with a Content-Length header."""
    if headers is None:
        headers = {"Connection": "close"}
    code = int(status)
    message = status_message(code)
    _log_status(code, message, "")

    length = len(content.encode("utf-8"))
    if "application/json" in content_type:
        length += 1

    lines = [
        f"HTTP/1.1 {code} {message}",
        f"Content-Type: {content_type}",
        f"Content-Length: {length}",
    ]
    lines.extend(f"{name}: {value}" for name, value in sorted(headers.items()))
    if "Connection" not in headers:
        lines.append("Connection: close")
    return "\r\n".join(lines) + "\r\n\r\n" + content


def build_chunked_response(
    status: int,
    content: str = "",
    headers: Optional[Mapping[str, str]] = None,
    content_type: str = "text/html",
) -> str:
    """Build a response whose body is sent as one chunk and a terminating chunk."""
    if headers is None:
        headers = {"Connection": "close"}
    code = int(status)
    message = status_message(code)
    _log_status(code, message, "chunked ")

    lines = [
        f"HTTP/1.1 {code} {message}",
        f"Content-Type: {content_type}",
        "Transfer-Encoding: chunked",
    ]
    lines.extend(f"{name}: {value}" for name, value in sorted(headers.items()))
    head = "\r\n".join(lines) + "\r\n\r\n"

    body = ""
    if content:
        body = f"{len(content.encode('utf-8')):x}\r\n{content}\r\n"
    return head + body + "0\r\n\r\n"