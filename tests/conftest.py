import pytest

from go2web.cache import ResponseCache


class FakeConnection:
    def __init__(self, server, host, port, encrypted):
        self.server = server
        self.host = host
        self.port = port
        self.encrypted = encrypted
        self.sent = b""
        self.closed = False

    def write(self, data):
        self.sent += data

    def read_all(self):
        target = self.sent.split(b"\r\n", 1)[0].split(b" ")[1].decode()
        scheme = "https" if self.encrypted else "http"
        url = f"{scheme}://{self.host}{target}"
        self.server.requests.append(url)
        return self.server.routes[url]

    def close(self):
        self.closed = True

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()


class FakeServer:
    """Connector stand-in serving canned raw responses keyed by URL."""

    def __init__(self):
        self.routes = {}
        self.requests = []
        self.connections = []

    def add(self, url, raw):
        self.routes[url] = raw

    def __call__(self, host, port, encrypted, timeout=None):
        conn = FakeConnection(self, host, port, encrypted)
        self.connections.append(conn)
        return conn


def response(status=200, reason="OK", headers=None, body=b""):
    lines = [f"HTTP/1.1 {status} {reason}"]
    for name, value in (headers or {}).items():
        lines.append(f"{name}: {value}")
    return ("\r\n".join(lines) + "\r\n\r\n").encode("latin-1") + body


@pytest.fixture
def server():
    return FakeServer()


@pytest.fixture
def cache(tmp_path):
    return ResponseCache(cache_dir=str(tmp_path / "cache"), ttl=3600)
