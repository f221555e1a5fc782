import logging
from typing import List, Optional, Sequence, Tuple
from urllib.parse import urldefrag, urljoin, urlparse, urlsplit, urlunsplit

from bs4 import BeautifulSoup

from .errors import LinkResolutionError, SeedResolutionError
from .types import Extraction


logger = logging.getLogger(__name__)

Origin = Tuple[str, str, int]

UNTITLED = "Untitled"
DEFAULT_PORTS = {"http": 80, "https": 443}
# Tried in order; the first region with non-empty cleaned text wins, then <body>.
CONTENT_SELECTORS: Sequence[str] = ("main", "article", ".content", ".documentation")
NOISE_SELECTOR = "script, style, nav, header, footer"
LINK_SELECTOR = "a[href], area[href]"


class UrlTools:
    @staticmethod
    def origin(url: str) -> Origin:
        try:
            parsed = urlparse(url)
            port = parsed.port
        except ValueError as exc:
            raise LinkResolutionError(f"malformed URL {url!r}: {exc}") from exc
        scheme = parsed.scheme.lower()
        if scheme not in DEFAULT_PORTS or not parsed.hostname:
            raise LinkResolutionError(f"not an absolute http(s) URL: {url!r}")
        return scheme, parsed.hostname.lower(), port or DEFAULT_PORTS[scheme]

    @staticmethod
    def canonical(url: str) -> str:
        """Fragment-free URL with lower-cased scheme and host, no default port, and ``/`` for an empty path."""
        url, _ = urldefrag(url)
        parts = urlsplit(url)
        scheme = parts.scheme.lower()
        host = (parts.hostname or "").lower()
        if ":" in host:
            host = f"[{host}]"
        port = parts.port
        netloc = host if port is None or port == DEFAULT_PORTS.get(scheme) else f"{host}:{port}"
        userinfo, at, _ = parts.netloc.rpartition("@")
        if at:
            netloc = f"{userinfo}@{netloc}"
        return urlunsplit((scheme, netloc, parts.path or "/", parts.query, ""))

    @staticmethod
    def resolve_seed(base_url: str, path: str, base_origin: Origin) -> str:
        try:
            absolute = urljoin(base_url, path.strip())
            origin = UrlTools.origin(absolute)
        except (ValueError, LinkResolutionError) as exc:
            raise SeedResolutionError(path, str(exc)) from exc
        if origin != base_origin:
            raise SeedResolutionError(path, f"{absolute} is outside {base_url}")
        return UrlTools.canonical(absolute)

    @staticmethod
    def normalize_link(source_url: str, href: str, base_origin: Origin) -> Optional[str]:
        """Canonical absolute form of ``href`` if it stays on the base origin.

        Returns ``None`` for targets that are not followed (fragments,
        ``javascript:``, other origins). Raises :class:`LinkResolutionError`
        when the href cannot be parsed at all.
        """
        href = (href or "").strip()
        if not href or href.startswith("#") or href.lower().startswith("javascript:"):
            return None
        try:
            absolute = urljoin(source_url, href)
        except ValueError as exc:
            raise LinkResolutionError(f"malformed href {href!r}: {exc}") from exc
        try:
            origin = UrlTools.origin(absolute)
        except LinkResolutionError:
            # mailto:, tel:, data: and friends have no http origin
            return None
        if origin != base_origin:
            return None
        return UrlTools.canonical(absolute)


class HtmlExtractor:
    def __init__(self, base_url: str):
        self.base_origin = UrlTools.origin(base_url)

    def extract(self, html: str, source_url: str) -> Extraction:
        soup = BeautifulSoup(html or "", "html.parser")
        title = self._title(soup)
        # Links come from the whole document, before any subtree is cleaned.
        links = self._links(soup, source_url)
        content = self._content(soup)
        return Extraction(title=title, content=content, links=links)

    @staticmethod
    def _title(soup: BeautifulSoup) -> str:
        title_el = soup.find("title")
        title = title_el.get_text(strip=True) if title_el else ""
        return title or UNTITLED

    def _links(self, soup: BeautifulSoup, source_url: str) -> List[str]:
        links: List[str] = []
        seen = set()
        for el in soup.select(LINK_SELECTOR):
            try:
                normalized = UrlTools.normalize_link(source_url, el.get("href"), self.base_origin)
            except LinkResolutionError as exc:
                logger.debug("Skipping link on %s: %s", source_url, exc)
                continue
            if normalized and normalized not in seen:
                seen.add(normalized)
                links.append(normalized)
        return links

    @staticmethod
    def _clean_text(region) -> str:
        for noise in region.select(NOISE_SELECTOR):
            # nested noise (a nav inside a header) goes with its parent
            if not noise.decomposed:
                noise.decompose()
        return region.get_text("\n", strip=True)

    def _content(self, soup: BeautifulSoup) -> str:
        for selector in CONTENT_SELECTORS:
            region = soup.select_one(selector)
            if region is None:
                continue
            text = self._clean_text(region)
            if text:
                return text
        return self._clean_text(soup.body or soup)
