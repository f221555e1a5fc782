import json
import logging
import re
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Iterable, List

from .errors import PersistenceError
from .types import PageRecord, StatusSink, WriteResult


logger = logging.getLogger(__name__)

_UNSAFE = re.compile(r"[^a-z0-9]+", re.IGNORECASE)


def safe_name(project_name: str) -> str:
    return _UNSAFE.sub("-", project_name).lower()


def file_timestamp(moment: datetime) -> str:
    """ISO-8601 UTC stamp with ``:`` and ``.`` swapped for ``-``."""
    utc = moment.astimezone(timezone.utc)
    return utc.strftime("%Y-%m-%dT%H-%M-%S-") + f"{utc.microsecond // 1000:03d}Z"


def render_markdown(results: Iterable[PageRecord], project_name: str, generated_at: datetime) -> str:
    parts: List[str] = [
        f"# {project_name}\n\n",
        f"Documentation scraped on {generated_at.astimezone().strftime('%Y-%m-%d %H:%M:%S')}\n\n",
    ]
    for record in results:
        parts.append(f"## {record.title}\n\n")
        parts.append(f"**URL:** [{record.url}]({record.url})\n\n")
        parts.append(f"{record.content}\n\n---\n\n")
    return "".join(parts)


class ResultWriter:
    """Writes one crawl's records as ``*_docs.jsonl`` and ``*_docs.md``."""

    def __init__(
        self,
        output_dir: Path,
        status: StatusSink | None = None,
        now: Callable[[], datetime] | None = None,
    ):
        self.output_dir = Path(output_dir)
        self._status = status
        self._now = now or (lambda: datetime.now(timezone.utc))

    def _report(self, message: str) -> None:
        if self._status:
            self._status(message)

    def write(self, results: List[PageRecord], project_name: str) -> WriteResult | None:
        self._report("Saving results...")
        try:
            written = self._write(results, project_name)
        except PersistenceError as exc:
            logger.error("Could not save results: %s", exc)
            self._report(f"Error saving results: {exc}")
            return None
        self._report(f"Results saved to:\n- {written.jsonl_path}\n- {written.markdown_path}")
        logger.info("Wrote %d records to %s", len(results), self.output_dir)
        return written

    def _write(self, results: List[PageRecord], project_name: str) -> WriteResult:
        generated_at = self._now()
        base = f"{safe_name(project_name)}_{file_timestamp(generated_at)}"
        jsonl_path = self.output_dir / f"{base}_docs.jsonl"
        markdown_path = self.output_dir / f"{base}_docs.md"
        try:
            self.output_dir.mkdir(parents=True, exist_ok=True)
            with jsonl_path.open("w", encoding="utf-8") as fh:
                for record in results:
                    fh.write(json.dumps(record.to_dict(), ensure_ascii=False) + "\n")
            markdown_path.write_text(render_markdown(results, project_name, generated_at), encoding="utf-8")
        except OSError as exc:
            raise PersistenceError(f"{exc.__class__.__name__}: {exc}") from exc
        return WriteResult(jsonl_path=jsonl_path, markdown_path=markdown_path)
