import json

import pytest
import requests

from docscrap.errors import CompletenessError, FetchError
from docscrap.ingest import fetch
from docscrap.ingest.fetch import FetchResult
from docscrap.ingest.pipeline import ScrapePipeline
from docscrap.models.configs import ScrapeConfig
from docscrap.output.storage import SQLiteIndexConfig, SQLiteIndexStore


PAGE_HTML = """<html><body>
<nav><ul>
<li><a href="#intro">Intro</a><ul><li><a href="#usage">Usage</a></li></ul></li>
<li><a href="#faq">FAQ</a></li>
</ul></nav>
<main>
<h1 id="intro">Intro</h1><p>Welcome text.</p>
<h2 id="usage">Usage</h2><p>Run it.</p>
<h2 id="faq">FAQ</h2><p>Questions.</p>
</main>
<footer class="site-footer"><p>Copyright</p></footer>
</body></html>
"""


class StubFetcher:
    def __init__(self, pages) -> None:
        self.pages = pages
        self.calls = []

    def __call__(self, url, *, timeout, user_agent):
        self.calls.append((url, timeout, user_agent))
        if url not in self.pages:
            raise FetchError(url, "HTTP 404")
        return FetchResult(url=url, final_url=url, status_code=200, html=self.pages[url], source_info="stub")


def test_pipeline_writes_page_outputs_from_local_file(tmp_path):
    page = tmp_path / "page.html"
    page.write_text(PAGE_HTML, encoding="utf-8")
    out = tmp_path / "out"
    config = ScrapeConfig(
        urls=[str(page)],
        output_dir=out,
        content_selector="main",
        exclude_selector=".site-footer",
        nav_selector="nav",
    )

    summaries = ScrapePipeline(config).run()

    assert len(summaries) == 1
    summary = summaries[0]
    assert summary.processed
    assert summary.sections == 3
    assert summary.output_dir == out

    markdown = (out / "content.md").read_text(encoding="utf-8")
    assert markdown.startswith("# Intro\n\nWelcome text.\n")
    assert "## Usage\n\nRun it.\n" in markdown
    assert "Copyright" not in markdown

    payload = json.loads((out / "content.json").read_text(encoding="utf-8"))
    assert [section["heading_id"] for section in payload["sections"]] == ["intro", "usage", "faq"]
    assert payload["report"]["broken_anchors"] == []

    menu = json.loads((out / "menu.json").read_text(encoding="utf-8"))
    assert menu[0]["children"][0]["anchor"] == "usage"
    assert (out / "sections" / "intro" / "usage.md").read_text(encoding="utf-8") == "## Usage\n\nRun it.\n"
    assert (out / "sections" / "faq.md").exists()

    rows = [json.loads(line) for line in (out / "index.jsonl").read_text(encoding="utf-8").splitlines()]
    assert [row["heading_path"] for row in rows] == ["Intro", "Intro > Usage", "Intro > FAQ"]
    assert rows[1]["source_url"] == f"{page}#usage"


def test_strict_mode_stops_before_writing(tmp_path):
    html = '<a href="#missing">broken</a><h1 id="a">A</h1><p>x</p>'
    config = ScrapeConfig(urls=["https://example.com/a"], output_dir=tmp_path / "out", strict=True)
    pipeline = ScrapePipeline(config, fetcher=StubFetcher({"https://example.com/a": html}))

    with pytest.raises(CompletenessError) as excinfo:
        pipeline.run()

    assert excinfo.value.report.broken_anchors == ["missing"]
    assert not (tmp_path / "out" / "content.md").exists()


def test_multiple_urls_get_their_own_directories(tmp_path):
    fetcher = StubFetcher({"https://example.com/docs/a": PAGE_HTML})
    config = ScrapeConfig(
        urls=["https://example.com/docs/a", "https://example.com/docs/missing"],
        output_dir=tmp_path / "out",
        write_index=False,
        timeout_seconds=5,
        user_agent="tests",
    )

    summaries = ScrapePipeline(config, fetcher=fetcher).run()

    ok, failed = summaries
    assert ok.processed
    assert ok.output_dir == tmp_path / "out" / "pages" / "docs" / "a"
    assert (ok.output_dir / "content.md").exists()
    assert not (ok.output_dir / "index.jsonl").exists()
    assert not failed.processed
    assert failed.error == "Failed to fetch https://example.com/docs/missing: HTTP 404"
    assert not (tmp_path / "out" / "pages" / "docs" / "missing").exists()
    assert fetcher.calls[0] == ("https://example.com/docs/a", 5, "tests")


def test_single_url_fetch_error_propagates(tmp_path):
    config = ScrapeConfig(urls=["https://example.com/gone"], output_dir=tmp_path)

    with pytest.raises(FetchError):
        ScrapePipeline(config, fetcher=StubFetcher({})).run()


def test_limits_split_page_markdown_and_store_records(tmp_path):
    body = "".join(f"<h2>Part {index}</h2><p>{'text ' * 40}</p>" for index in range(4))
    url = "https://example.com/long"
    store = SQLiteIndexStore(SQLiteIndexConfig(db_path=tmp_path / "index.db"))
    config = ScrapeConfig(urls=[url], output_dir=tmp_path / "out", max_markdown_bytes=400, max_sections=3)

    summary = ScrapePipeline(config, fetcher=StubFetcher({url: body}), index_store=store).run()[0]

    out = tmp_path / "out"
    index_text = (out / "content.md").read_text(encoding="utf-8")
    assert index_text.startswith("## Part 0\n\nSplit into ")
    part_files = sorted((out / "content").glob("part-*.md"))
    assert len(part_files) > 1
    for part in part_files:
        assert len(part.read_bytes()) <= 400
    assert summary.sections == 3
    assert summary.result.records_stored == 3
    assert [row["heading"] for row in store.iter_records(url)] == ["Part 0", "Part 1", "Part 2"]
    store.close()


def test_run_requires_urls(tmp_path):
    with pytest.raises(ValueError):
        ScrapePipeline(ScrapeConfig(output_dir=tmp_path)).run()


def test_undecodable_local_page_does_not_stop_other_pages(tmp_path):
    bad = tmp_path / "bad.html"
    bad.write_bytes(b"<h1>Caf\xe9</h1><p>x</p>")
    good = tmp_path / "good.html"
    good.write_text("<h1>Fine</h1><p>ok</p>", encoding="utf-8")
    config = ScrapeConfig(urls=[str(bad), str(good)], output_dir=tmp_path / "out")

    summaries = ScrapePipeline(config).run()

    assert [summary.processed for summary in summaries] == [False, True]
    assert "not valid UTF-8" in summaries[0].error
    assert (summaries[1].output_dir / "content.md").exists()


def test_http_failure_is_recorded_per_page(tmp_path, monkeypatch):
    def fake_get(url, **kwargs):
        if url.endswith("/down"):
            raise requests.ConnectionError("connection refused")
        response = requests.Response()
        response.status_code = 200
        response._content = b"<h1>Up</h1><p>ok</p>"
        response.headers["Content-Type"] = "text/html; charset=bogus-charset"
        response.encoding = "bogus-charset"
        response.url = url
        return response

    monkeypatch.setattr(fetch.requests, "get", fake_get)
    config = ScrapeConfig(
        urls=["https://example.com/down", "https://example.com/up"],
        output_dir=tmp_path / "out",
    )

    down, up = ScrapePipeline(config).run()

    assert not down.processed
    assert "connection refused" in down.error
    assert up.processed
    assert up.sections == 1


def test_rewritten_page_replaces_stored_records(tmp_path):
    url = "https://example.com/page"
    store = SQLiteIndexStore(SQLiteIndexConfig(db_path=tmp_path / "index.db"))
    fetcher = StubFetcher({url: "<h1>A</h1><p>a</p><h2>B</h2><p>b</p>"})
    config = ScrapeConfig(urls=[url], output_dir=tmp_path / "out")
    pipeline = ScrapePipeline(config, fetcher=fetcher, index_store=store)

    pipeline.run()
    fetcher.pages[url] = "<h1>A</h1><p>a</p>"
    pipeline.run()

    assert [row["heading"] for row in store.iter_records(url)] == ["A"]
    assert store.search("b") == []
    store.close()
