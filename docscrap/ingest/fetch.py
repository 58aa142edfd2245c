from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from urllib.parse import urlparse

import requests

from docscrap.errors import FetchError

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class FetchResult:
    """Raw HTML for one page plus where it came from."""

    url: str
    final_url: str
    status_code: int
    html: str
    source_info: str


def fetch_page(url: str, *, timeout: float = 30.0, user_agent: str | None = None) -> FetchResult:
    """Fetch a page over HTTP(S), or read it from disk for ``file://`` URLs and plain paths."""

    parsed = urlparse(url)
    if parsed.scheme in ("", "file"):
        return _read_local(url, Path(parsed.path if parsed.scheme == "file" else url))

    headers = {"User-Agent": user_agent} if user_agent else {}
    try:
        response = requests.get(url, timeout=timeout, headers=headers)
        response.raise_for_status()
    except requests.HTTPError as exc:
        raise FetchError(url, f"HTTP {exc.response.status_code}") from exc
    except requests.RequestException as exc:
        raise FetchError(url, str(exc)) from exc

    if "charset" not in response.headers.get("Content-Type", "").lower():
        response.encoding = response.apparent_encoding
    html = response.text

    logger.info("Fetched %s (%d, %d chars)", url, response.status_code, len(html))
    return FetchResult(
        url=url,
        final_url=response.url,
        status_code=response.status_code,
        html=html,
        source_info="static",
    )


def _read_local(url: str, path: Path) -> FetchResult:
    if not path.is_file():
        raise FetchError(url, "file not found")
    try:
        html = path.read_bytes().decode("utf-8")
    except UnicodeDecodeError as exc:
        raise FetchError(url, f"not valid UTF-8 (byte {exc.start})") from exc
    return FetchResult(
        url=url,
        final_url=path.resolve().as_uri(),
        status_code=200,
        html=html,
        source_info="file",
    )


__all__ = ["FetchResult", "fetch_page"]
