import logging
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import List

from .config import CrawlConfig
from .errors import FetchError
from .frontier import Frontier
from .metrics import Metrics
from .net import HttpClient
from .parsing import HtmlExtractor, UrlTools
from .rate import Throttle
from .storage import ResultWriter
from .types import FetchResult, HttpClientProtocol, PageRecord, StatusSink, WriteResult


logger = logging.getLogger(__name__)


def _log_status(message: str) -> None:
    logger.info("%s", message)


@dataclass(frozen=True)
class FetchOutcome:
    url: str
    result: FetchResult | None = None
    error: str | None = None
    fetch_ms: float = 0.0


class Crawler:
    """Breadth-first, same-origin documentation crawler.

    One ``Crawler`` owns the frontier, the fetched-page counter and the
    result list. Fetches may run on a small thread pool, but every response
    is handled on the calling thread in dequeue order, so results keep
    discovery order and the page budget is never overshot.
    """

    def __init__(
        self,
        config: CrawlConfig,
        http_client: HttpClientProtocol | None = None,
        status: StatusSink | None = None,
        throttle: Throttle | None = None,
        writer: ResultWriter | None = None,
    ):
        self.config = config
        self.status = status or _log_status
        self.http = http_client or HttpClient(
            config.user_agent, config.request_timeout, config.retries, max(4, config.concurrency)
        )
        self.throttle = throttle or Throttle(config.delay_seconds)
        self.writer = writer or ResultWriter(config.resolved_output_dir(), status=self.status)
        self.extractor = HtmlExtractor(config.base_url)
        scheme, host, port = UrlTools.origin(config.base_url)
        self.origin_key = f"{scheme}://{host}:{port}"
        self.frontier = Frontier(config.base_url, config.max_pages)
        self.metrics = Metrics()
        self.results: List[PageRecord] = []
        self.output: WriteResult | None = None

    def _fetch(self, url: str) -> FetchOutcome:
        # courtesy delay keyed on the configured origin, not the page's own
        self.throttle.wait_turn(self.origin_key)
        t0 = time.perf_counter()
        try:
            result = self.http.fetch(url)
        except FetchError as exc:
            return FetchOutcome(url=url, error=exc.reason, fetch_ms=(time.perf_counter() - t0) * 1000.0)
        return FetchOutcome(url=url, result=result, fetch_ms=(time.perf_counter() - t0) * 1000.0)

    def _next_batch(self) -> List[str]:
        take = min(self.config.concurrency, self.frontier.remaining_budget)
        batch: List[str] = []
        while len(batch) < take:
            url = self.frontier.dequeue()
            if url is None:
                break
            batch.append(url)
        return batch

    def _handle(self, outcome: FetchOutcome) -> None:
        url = outcome.url
        if outcome.error is not None:
            self.metrics.record_fetch(False, 0, outcome.fetch_ms)
            logger.warning("Error fetching %s: %s", url, outcome.error)
            self.status(f"Error processing {url}: {outcome.error}")
            return
        result = outcome.result
        if not result.ok:
            self.metrics.record_fetch(False, result.size_bytes, outcome.fetch_ms)
            logger.warning("Error at %s: response %d", url, result.status)
            self.status(f"Error at {url}: response {result.status}")
            return

        self.frontier.record_fetch()
        self.metrics.record_fetch(True, result.size_bytes, outcome.fetch_ms)
        try:
            extracted = self.extractor.extract(result.text, url)
        except Exception as exc:
            logger.exception("Could not extract %s", url)
            self.status(f"Error processing {url}: {exc}")
            return
        self.results.append(PageRecord(url=url, title=extracted.title, content=extracted.content))

        admitted = sum(1 for link in extracted.links if self.frontier.admit(link))
        self.metrics.record_links(admitted)
        logger.debug("%s: %d links, %d admitted", url, len(extracted.links), admitted)

    def crawl(self) -> List[PageRecord]:
        """Run the crawl loop and return the records in fetch order."""
        cfg = self.config
        self.frontier = Frontier(cfg.base_url, cfg.max_pages)
        self.metrics = Metrics()
        self.results = []

        self.status(f"Starting scrape for {cfg.project_name}...")
        seeds = self.frontier.seed(cfg.start_paths, self.status)
        self.status(f"Initial queue: {len(seeds)} URLs")

        with ThreadPoolExecutor(max_workers=cfg.concurrency, thread_name_prefix="fetch") as pool:
            while not self.frontier.is_done():
                batch = self._next_batch()
                if not batch:
                    break
                fetched = self.frontier.fetched_pages
                for i, url in enumerate(batch, start=1):
                    self.status(f"Scraping ({fetched + i}/{cfg.max_pages}): {url}")
                for outcome in pool.map(self._fetch, batch):
                    self._handle(outcome)

        self.status(f"Scrape complete: {len(self.results)} pages fetched.")
        logger.info("Finished %s: %s", cfg.project_name, self.metrics.summary())
        return list(self.results)

    def run(self) -> List[PageRecord]:
        """Crawl, then write whatever was collected."""
        results = self.crawl()
        self.output = self.writer.write(results, self.config.project_name)
        return results


def run(
    config: CrawlConfig,
    status: StatusSink | None = None,
    http_client: HttpClientProtocol | None = None,
) -> List[PageRecord]:
    return Crawler(config, http_client=http_client, status=status).run()
