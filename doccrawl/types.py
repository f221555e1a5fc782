from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, List, Protocol


StatusSink = Callable[[str], None]


@dataclass(frozen=True)
class FetchResult:
    status: int
    content_type: str
    text: str
    size_bytes: int

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300


class HttpClientProtocol(Protocol):
    def fetch(self, url: str) -> FetchResult: ...


@dataclass(frozen=True)
class Extraction:
    title: str
    content: str
    links: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class PageRecord:
    url: str
    title: str
    content: str

    def to_dict(self) -> Dict[str, str]:
        return {"url": self.url, "title": self.title, "content": self.content}


@dataclass(frozen=True)
class WriteResult:
    jsonl_path: Path
    markdown_path: Path
