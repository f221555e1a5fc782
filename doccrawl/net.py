import codecs
import logging
from typing import Tuple

import urllib3
from urllib3 import exceptions as urllib3_exc
from urllib3.util.retry import Retry

from .errors import FetchError
from .types import FetchResult


logger = logging.getLogger(__name__)

TEXT_CONTENT_TYPES = ("text/html", "application/xhtml+xml", "text/plain")
MAX_REDIRECTS = 5


def _charset(content_type: str) -> str:
    for part in content_type.split(";")[1:]:
        key, _, value = part.strip().partition("=")
        if key.lower() == "charset" and value:
            charset = value.strip("\"' ")
            try:
                codecs.lookup(charset)
            except LookupError:
                break
            return charset
    return "utf-8"


class HttpClient:
    """GET-only transport.

    Redirects are followed and connection errors retried ``retries`` times;
    status codes are returned as-is, never retried.
    """

    def __init__(self, user_agent: str, request_timeout: float, retries: int = 0, max_connections: int = 4):
        self.user_agent = user_agent
        self.timeout = urllib3.Timeout(connect=5.0, read=request_timeout)
        self.http = urllib3.PoolManager(
            num_pools=4,
            maxsize=max_connections,
            headers={
                "User-Agent": user_agent,
                "Accept": "text/html,application/xhtml+xml,*/*;q=0.8",
                "Accept-Encoding": "gzip, deflate",
            },
            retries=Retry(
                total=None,
                connect=retries,
                read=0,
                status=0,
                other=0,
                redirect=MAX_REDIRECTS,
                allowed_methods=["GET"],
                raise_on_redirect=False,
                raise_on_status=False,
            ),
        )

    def _request_bytes(self, url: str) -> Tuple[int, str, bytes]:
        try:
            response = self.http.request("GET", url, timeout=self.timeout, preload_content=True)
        except urllib3_exc.HTTPError as exc:
            raise FetchError(url, f"{type(exc).__name__}: {exc}") from exc
        return response.status, response.headers.get("Content-Type", ""), response.data or b""

    def fetch(self, url: str) -> FetchResult:
        status, content_type, body = self._request_bytes(url)
        text = ""
        if not content_type or any(t in content_type for t in TEXT_CONTENT_TYPES):
            text = body.decode(_charset(content_type), errors="replace")
        else:
            logger.debug("Not decoding %s body of %s", content_type, url)
        return FetchResult(status=status, content_type=content_type, text=text, size_bytes=len(body))
