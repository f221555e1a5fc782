import json
from datetime import datetime, timezone

from doccrawl.storage import ResultWriter, file_timestamp, safe_name
from doccrawl.types import PageRecord


FIXED = datetime(2024, 5, 1, 12, 30, 45, 123456, tzinfo=timezone.utc)

RECORDS = [
    PageRecord(url="https://example.com/docs/", title="Intro", content="Hello\nworld"),
    PageRecord(url="https://example.com/docs/a", title="Ünïcode \"quotes\"", content=""),
]


def test_safe_name_and_timestamp():
    assert safe_name("My Docs!") == "my-docs-"
    assert safe_name("API v2.0 / Guide") == "api-v2-0-guide"
    assert file_timestamp(FIXED) == "2024-05-01T12-30-45-123Z"


def test_writer_creates_both_files(tmp_path):
    messages = []
    out_dir = tmp_path / "data" / "docs_output"
    writer = ResultWriter(out_dir, status=messages.append, now=lambda: FIXED)
    written = writer.write(RECORDS, "My Docs!")
    assert written is not None
    assert written.jsonl_path == out_dir / "my-docs-_2024-05-01T12-30-45-123Z_docs.jsonl"
    assert written.markdown_path == out_dir / "my-docs-_2024-05-01T12-30-45-123Z_docs.md"

    lines = written.jsonl_path.read_text(encoding="utf-8").splitlines()
    assert [json.loads(line) for line in lines] == [r.to_dict() for r in RECORDS]

    md = written.markdown_path.read_text(encoding="utf-8")
    assert md.startswith("# My Docs!\n\nDocumentation scraped on ")
    assert "## Intro\n\n**URL:** [https://example.com/docs/](https://example.com/docs/)\n\nHello\nworld\n\n---\n\n" in md
    assert md.index("## Intro") < md.index("## Ünïcode")
    assert messages[0] == "Saving results..."
    assert str(written.jsonl_path) in messages[-1]


def test_writer_is_idempotent_about_the_directory(tmp_path):
    writer = ResultWriter(tmp_path, now=lambda: FIXED)
    assert writer.write([], "p") is not None
    assert writer.write(RECORDS, "p") is not None


def test_writer_reports_io_failure_instead_of_raising(tmp_path):
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("x")
    messages = []
    writer = ResultWriter(blocker / "docs_output", status=messages.append)
    assert writer.write(RECORDS, "proj") is None
    assert messages[-1].startswith("Error saving results:")
