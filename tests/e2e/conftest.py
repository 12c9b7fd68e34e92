# tests/e2e/conftest.py
"""aiohttp server for the end-to-end runs, started in a background thread."""
from __future__ import annotations

import asyncio
import socket
import threading
from contextlib import closing
from pathlib import Path
from typing import Optional

import pytest
from aiohttp import web

FIXTURES = Path(__file__).resolve().parents[1] / "fixtures"


def find_free_port() -> int:
    with closing(socket.socket(socket.AF_INET, socket.SOCK_STREAM)) as s:
        s.bind(("127.0.0.1", 0))
        s.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        return s.getsockname()[1]


async def handle_generated_report(request: web.Request) -> web.Response:
    """A document produced on request; only reachable through a script."""
    body = (FIXTURES / "files" / "report.pdf").read_bytes()
    return web.Response(
        body=body,
        content_type="application/pdf",
        headers={"Content-Disposition": 'inline; filename="generated.pdf"'},
    )


def create_app() -> web.Application:
    app = web.Application()
    app.router.add_get("/generated/report.pdf", handle_generated_report)
    app.router.add_static("/", FIXTURES)
    return app


class AioHttpTestServer:
    """Runs an aiohttp app on its own event loop in a daemon thread."""

    def __init__(self, app: web.Application, port: int) -> None:
        self.app = app
        self.port = port
        self.host = "127.0.0.1"
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._runner: Optional[web.AppRunner] = None
        self._thread: Optional[threading.Thread] = None
        self._ready = threading.Event()

    @property
    def url(self) -> str:
        return f"http://{self.host}:{self.port}"

    def start(self) -> None:
        self._thread = threading.Thread(target=self._run_server, daemon=True)
        self._thread.start()
        if not self._ready.wait(timeout=5.0):
            raise RuntimeError("fixture server did not start")

    def _run_server(self) -> None:
        self._loop = asyncio.new_event_loop()
        asyncio.set_event_loop(self._loop)

        async def start() -> None:
            self._runner = web.AppRunner(self.app)
            await self._runner.setup()
            site = web.TCPSite(self._runner, self.host, self.port)
            await site.start()

        self._loop.run_until_complete(start())
        self._ready.set()
        self._loop.run_forever()

    def stop(self) -> None:
        if self._loop and self._runner:
            future = asyncio.run_coroutine_threadsafe(self._runner.cleanup(), self._loop)
            future.result(timeout=2.0)
        if self._loop:
            self._loop.call_soon_threadsafe(self._loop.stop)
        if self._thread:
            self._thread.join(timeout=2.0)


@pytest.fixture(scope="module")
def fixture_server():
    server = AioHttpTestServer(create_app(), find_free_port())
    server.start()
    yield server
    server.stop()


@pytest.fixture(scope="module")
def base_url(fixture_server: AioHttpTestServer) -> str:
    return fixture_server.url
