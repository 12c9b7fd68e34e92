from __future__ import annotations

import requests
from typing import Dict, Optional

from application.ports.http_client import HttpClientPort, HttpResponse


class RequestsSessionHttpClient(HttpClientPort):
    def __init__(self, base_headers: Optional[Dict[str, str]] = None, timeout_sec: int = 60):
        self._session = requests.Session()
        self._base_headers = base_headers or {}
        self._timeout = timeout_sec

    def get(self, url: str, headers: Optional[Dict[str, str]] = None) -> HttpResponse:
        merged = dict(self._base_headers)
        if headers:
            merged.update(headers)

        resp = self._session.get(
            url,
            headers=merged,
            timeout=self._timeout,
            allow_redirects=True,
        )

        return HttpResponse(
            status=resp.status_code,
            url=str(resp.url),
            headers=dict(resp.headers),
            content=resp.content,
        )
