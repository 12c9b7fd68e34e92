from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional
from urllib.parse import urljoin, urlparse
from urllib.request import url2pathname

from application.ports.http_client import HttpClientPort, HttpResponse

_NOT_FETCHABLE_PREFIXES = ("javascript:", "mailto:", "tel:", "#", "data:", "blob:")


class BinaryFetchError(Exception):
    pass


def to_absolute_url(href: Optional[str], base: str) -> Optional[str]:
    """
    Resolve an href against the page URL.
      "//cdn.example.com/a.pdf" -> "https://cdn.example.com/a.pdf" (scheme of base)
      "/files/a.pdf", "a.pdf"   -> joined with base
    Returns None for hrefs that do not point at a fetchable resource.
    """
    if href is None:
        return None
    href = href.strip()
    if not href or href.lower().startswith(_NOT_FETCHABLE_PREFIXES):
        return None

    if href.startswith("//"):
        scheme = urlparse(base).scheme or "https"
        return f"{scheme}:{href}"

    if urlparse(href).scheme in ("http", "https", "file"):
        return href

    return urljoin(base, href)


def write_bytes(target_path: str, content: bytes) -> str:
    path = Path(target_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(content)
    return str(path)


class BinaryFetcher:
    """
    Fetches a resource outside the browser while carrying the browser
    session: cookies of the shared context for the target URL, the current
    page as Referer, and the page's user agent.
    """

    def __init__(self, http_client: HttpClientPort):
        self._http = http_client

    def build_headers(self, page: Any, url: str) -> Dict[str, str]:
        headers: Dict[str, str] = {}

        cookies = page.context.cookies([url])
        if cookies:
            headers["Cookie"] = "; ".join(f"{c['name']}={c['value']}" for c in cookies)

        referer = page.url
        if referer and referer.startswith(("http://", "https://")):
            headers["Referer"] = referer

        try:
            user_agent = page.evaluate("() => navigator.userAgent")
        except Exception:
            user_agent = None
        if user_agent:
            headers["User-Agent"] = user_agent

        return headers

    def fetch(self, page: Any, url: str) -> HttpResponse:
        resp = self._http.get(url, headers=self.build_headers(page, url))
        if resp.status not in (200, 206):
            raise BinaryFetchError(f"HTTP {resp.status} for {url}")
        if not resp.content:
            raise BinaryFetchError(f"empty body for {url}")
        return resp

    def fetch_to_file(self, page: Any, url: str, target_path: str) -> str:
        parsed = urlparse(url)
        if parsed.scheme == "file":
            content = Path(url2pathname(parsed.path)).read_bytes()
            if not content:
                raise BinaryFetchError(f"empty file at {url}")
            return write_bytes(target_path, content)

        resp = self.fetch(page, url)
        return write_bytes(target_path, resp.content)
