import os
import re
import time
from urllib.parse import quote

import structlog

logger = structlog.get_logger(__name__)

CACHE_DIR = os.path.join(os.path.expanduser("~"), ".go2web_cache")
CACHE_TTL = 60 * 60  # 1 hour

_UNSAFE_CHARS = re.compile(r"[^\w.-]", re.ASCII)


def cache_key(url):
    """Turn a URL into a flat, filesystem-safe file name."""
    return quote(_UNSAFE_CHARS.sub("_", url), safe="")


class ResponseCache:
    """Stores decoded response bodies on disk, one file per URL.

    The file mtime is the write timestamp; entries older than ``ttl`` seconds
    are treated as absent and simply overwritten by the next store.
    """

    def __init__(self, cache_dir=CACHE_DIR, ttl=CACHE_TTL):
        self.cache_dir = cache_dir
        self.ttl = ttl

    def path_for(self, url):
        return os.path.join(self.cache_dir, cache_key(url))

    def lookup(self, url):
        path = self.path_for(url)
        try:
            age = time.time() - os.stat(path).st_mtime
            if age >= self.ttl:
                logger.debug("cache stale", url=url, age=round(age, 1))
                return None
            with open(path, "rb") as f:
                body = f.read()
        except OSError:
            return None
        logger.debug("cache hit", url=url, size=len(body))
        return body

    def store(self, url, body):
        """Write ``body`` for ``url``. Returns False instead of raising on I/O errors."""
        try:
            os.makedirs(self.cache_dir, exist_ok=True)
            with open(self.path_for(url), "wb") as f:
                f.write(body)
        except OSError as e:
            logger.warning("cache store failed", url=url, error=str(e))
            return False
        return True
