import socket
import ssl

import structlog

from go2web.errors import TransportFailure

logger = structlog.get_logger(__name__)

BUFFER_SIZE = 4096


class Connection:
    """A connected (optionally TLS-wrapped) socket used for exactly one request."""

    def __init__(self, sock):
        self.sock = sock

    def write(self, data):
        try:
            self.sock.sendall(data)
        except OSError as e:
            raise TransportFailure(f"Send failed: {e}") from e

    def read_all(self):
        """Read until the server closes the connection."""
        response = b""
        try:
            while True:
                data = self.sock.recv(BUFFER_SIZE)
                if not data:
                    break
                response += data
        except OSError as e:
            raise TransportFailure(f"Receive failed: {e}") from e
        return response

    def close(self):
        self.sock.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()


def open_connection(host, port, encrypted, timeout=None):
    logger.debug("connecting", host=host, port=port, tls=encrypted)
    try:
        sock = socket.create_connection((host, port), timeout=timeout)
    except OSError as e:
        raise TransportFailure(f"Could not connect to {host}:{port}: {e}") from e

    if encrypted:
        context = ssl.create_default_context()
        try:
            sock = context.wrap_socket(sock, server_hostname=host)
        except OSError as e:
            sock.close()
            raise TransportFailure(f"TLS handshake with {host} failed: {e}") from e

    return Connection(sock)
