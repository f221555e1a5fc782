import os
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional
from urllib.parse import urlparse

from .errors import ConfigurationError


DEFAULT_USER_AGENT = "doccrawl/1.0 (+https://example.com; contact: crawler@example.com)"
DEFAULT_DELAY_SECONDS = 0.2
DEFAULT_MAX_PAGES = 5
OUTPUT_SUBDIR = "docs_output"


def default_output_dir() -> Path:
    """Private data area for written results.

    ``DOCCRAWL_DATA_DIR`` wins, then ``$XDG_DATA_HOME/doccrawl``, then
    ``~/.local/share/doccrawl``.
    """
    override = os.environ.get("DOCCRAWL_DATA_DIR")
    if override:
        return Path(override).expanduser()
    data_home = os.environ.get("XDG_DATA_HOME") or str(Path.home() / ".local" / "share")
    return Path(data_home) / "doccrawl" / OUTPUT_SUBDIR


@dataclass(frozen=True)
class CrawlConfig:
    project_name: str
    base_url: str
    start_paths: List[str]
    max_pages: int = DEFAULT_MAX_PAGES
    delay_seconds: float = DEFAULT_DELAY_SECONDS
    request_timeout: float = 15.0
    retries: int = 0
    concurrency: int = 1
    user_agent: str = DEFAULT_USER_AGENT
    output_dir: Optional[str] = None

    def __post_init__(self) -> None:
        if not self.project_name or not self.project_name.strip():
            raise ConfigurationError("project name must not be empty")
        try:
            parsed = urlparse(self.base_url or "")
            parsed.port  # raises on a non-numeric port
        except ValueError as exc:
            raise ConfigurationError(f"invalid base URL {self.base_url!r}: {exc}") from exc
        if parsed.scheme not in ("http", "https") or not parsed.hostname:
            raise ConfigurationError(f"base URL must be an absolute http(s) URL, got {self.base_url!r}")
        paths = [p.strip() for p in (self.start_paths or []) if p and p.strip()]
        if not paths:
            raise ConfigurationError("at least one start path is required")
        object.__setattr__(self, "start_paths", paths)
        if isinstance(self.max_pages, bool) or not isinstance(self.max_pages, int) or self.max_pages <= 0:
            raise ConfigurationError(f"page budget must be a positive integer, got {self.max_pages!r}")
        if self.delay_seconds < 0:
            raise ConfigurationError("delay must not be negative")
        if self.request_timeout <= 0:
            raise ConfigurationError("request timeout must be positive")
        if self.retries < 0:
            raise ConfigurationError("retries must not be negative")
        if self.concurrency < 1:
            raise ConfigurationError("concurrency must be at least 1")

    def resolved_output_dir(self) -> Path:
        if self.output_dir:
            return Path(self.output_dir).expanduser()
        return default_output_dir()
