"""
Raw HTTP/1.1 framing: building the GET request and picking apart the response.
"""

import re
from typing import Dict, NamedTuple, Tuple
from urllib.parse import urlsplit

from go2web.errors import MalformedResponse, UnsupportedURL

USER_AGENT = "go2web/1.0"
ACCEPT = "text/html, application/json;q=0.9, */*;q=0.8"
DEFAULT_PORTS = {"http": 80, "https": 443}
REDIRECT_STATUSES = (301, 302, 303, 307, 308)

_STATUS_CODE = re.compile(rb"[0-9]{3}")
_CHUNK_SIZE = re.compile(rb"[0-9A-Fa-f]+")


class Request(NamedTuple):
    method: str
    url: str
    scheme: str
    host: str
    port: int
    target: str
    headers: Tuple[Tuple[str, str], ...]

    @property
    def encrypted(self) -> bool:
        return self.scheme == "https"

    def header(self, name, default=None):
        name = name.lower()
        for key, value in self.headers:
            if key.lower() == name:
                return value
        return default

    def to_bytes(self) -> bytes:
        lines = [f"{self.method} {self.target} HTTP/1.1"]
        for key, value in self.headers:
            lines.append(f"{key}: {value}")
        return ("\r\n".join(lines) + "\r\n\r\n").encode("latin-1")


class RawResponse(NamedTuple):
    protocol: str
    status: int
    reason: str
    headers: Dict[str, str]
    body: bytes

    @property
    def is_redirect(self) -> bool:
        return self.status in REDIRECT_STATUSES


def build_request(url, user_agent=USER_AGENT) -> Request:
    if "://" not in url:
        url = "http://" + url
    parsed = urlsplit(url)
    scheme = parsed.scheme.lower()
    if scheme not in DEFAULT_PORTS:
        raise UnsupportedURL(f"Unsupported scheme '{parsed.scheme}' in {url}")
    if not parsed.hostname:
        raise UnsupportedURL(f"No host in {url}")
    try:
        port = parsed.port or DEFAULT_PORTS[scheme]
    except ValueError:
        raise UnsupportedURL(f"Invalid port in {url}")

    host = parsed.hostname
    host_header = host if port == DEFAULT_PORTS[scheme] else f"{host}:{port}"
    target = parsed.path or "/"
    if parsed.query:
        target += "?" + parsed.query

    headers = (
        ("Host", host_header),
        ("User-Agent", user_agent),
        ("Accept", ACCEPT),
        ("Accept-Encoding", "identity"),
        ("Connection", "close"),
    )
    return Request("GET", url, scheme, host, port, target, headers)


def build_request_header(url, user_agent=USER_AGENT) -> bytes:
    return build_request(url, user_agent).to_bytes()


def parse_response(raw: bytes) -> RawResponse:
    header_end = raw.find(b"\r\n\r\n")
    if header_end == -1:
        raise MalformedResponse("Malformed response: no header/body separator")

    # header bytes are one character per byte
    header_text = raw[:header_end].decode("latin-1")
    body = raw[header_end + 4:]
    lines = header_text.replace("\r\n", "\n").split("\n")

    parts = lines[0].split(" ")
    if len(parts) < 2 or not _STATUS_CODE.fullmatch(parts[1].encode("latin-1")):
        raise MalformedResponse(f"Malformed status line: {lines[0]!r}")
    protocol, status, reason = parts[0], int(parts[1]), " ".join(parts[2:])

    headers = {}
    name = None
    for line in lines[1:]:
        if not line.strip():
            continue
        if line[0] in " \t" and name is not None:
            # obsolete line folding continues the previous header
            headers[name] = f"{headers[name]} {line.strip()}".strip()
            continue
        name, sep, value = line.partition(":")
        if not sep:
            raise MalformedResponse(f"Malformed header line: {line!r}")
        name = name.strip().lower()
        headers[name] = value.strip()

    return RawResponse(protocol, status, reason, headers, body)


def decode_chunked(body: bytes) -> bytes:
    """Reassemble a chunked body.

    Stops quietly, returning what was collected so far, when a size line has no
    CRLF terminator (a truncated stream).
    """
    chunks = []
    pos = 0
    while pos < len(body):
        size_end = body.find(b"\r\n", pos)
        if size_end == -1:
            break
        size_line = body[pos:size_end].split(b";", 1)[0].strip()
        if not _CHUNK_SIZE.fullmatch(size_line):
            raise MalformedResponse(f"Invalid chunk size: {size_line!r}")
        size = int(size_line, 16)
        if size == 0:
            break
        start = size_end + 2
        chunks.append(body[start:start + size])
        pos = start + size + 2
    return b"".join(chunks)


def decode_body(response: RawResponse) -> bytes:
    if response.headers.get("transfer-encoding") == "chunked":
        return decode_chunked(response.body)
    return response.body


def body_text(body: bytes) -> str:
    return body.decode("utf-8", errors="replace")
