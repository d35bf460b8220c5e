from typing import NamedTuple, Optional, Tuple
from urllib.parse import urljoin

import structlog

from go2web import wire
from go2web.content import transform as render
from go2web.errors import RedirectWithoutLocation, TooManyRedirects
from go2web.transport import open_connection

logger = structlog.get_logger(__name__)

MAX_REDIRECTS = 5


class FetchResult(NamedTuple):
    url: str
    text: str
    from_cache: bool
    status: Optional[int] = None
    content_type: Optional[str] = None
    chain: Tuple[str, ...] = ()


class Fetcher:
    """Runs one logical GET: cache check, request, redirects, caching, rendering."""

    def __init__(self, cache=None, connector=open_connection, timeout=None,
                 max_redirects=MAX_REDIRECTS, user_agent=wire.USER_AGENT):
        self.cache = cache
        self.connector = connector
        self.timeout = timeout
        self.max_redirects = max_redirects
        self.user_agent = user_agent

    def request(self, url):
        """Send a single request and return the parsed RawResponse (no redirects)."""
        req = wire.build_request(url, self.user_agent)
        with self.connector(req.host, req.port, req.encrypted, timeout=self.timeout) as conn:
            conn.write(req.to_bytes())
            raw = conn.read_all()
        response = wire.parse_response(raw)
        logger.debug("response parsed", url=url, status=response.status, size=len(response.body))
        return response

    def fetch(self, url, transform=True):
        chain = []
        redirects = 0
        while True:
            chain.append(url)
            if self.cache is not None:
                cached = self.cache.lookup(url)
                if cached is not None:
                    # cached text is already decoded; no content type is stored
                    return FetchResult(url, wire.body_text(cached), True, chain=tuple(chain))

            response = self.request(url)
            if not response.is_redirect:
                break

            location = response.headers.get("location")
            if not location:
                raise RedirectWithoutLocation(f"Redirect ({response.status}) without Location from {url}")
            redirects += 1
            if redirects > self.max_redirects:
                raise TooManyRedirects(f"Too many redirects (more than {self.max_redirects}) starting at {chain[0]}")
            url = urljoin(url, location)
            logger.info("redirecting", status=response.status, to=url)

        body = wire.decode_body(response)
        if response.status == 200 and self.cache is not None:
            self.cache.store(url, body)

        text = wire.body_text(body)
        content_type = response.headers.get("content-type", "")
        if transform:
            text = render(text, content_type)
        return FetchResult(url, text, False, response.status, content_type, tuple(chain))
