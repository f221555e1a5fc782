class DocCrawlError(Exception):
    """Base class for everything the crawler raises on purpose."""


class ConfigurationError(DocCrawlError, ValueError):
    """The run cannot start: bad base URL, no start paths or a non-positive budget."""


class SeedResolutionError(DocCrawlError):
    def __init__(self, path: str, reason: str):
        super().__init__(f"{path}: {reason}")
        self.path = path
        self.reason = reason


class FetchError(DocCrawlError):
    def __init__(self, url: str, reason: str):
        super().__init__(f"{url}: {reason}")
        self.url = url
        self.reason = reason


class LinkResolutionError(DocCrawlError):
    pass


class PersistenceError(DocCrawlError):
    pass
