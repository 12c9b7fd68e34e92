# tests/fake_browser.py
"""
In-memory stand-in for the parts of the Playwright sync API the engine uses.

Pages are trees of FakeElement. Selector queries understand "#id", ".class",
a bare tag name, and any literal string registered on an element through
`selectors` (handy for CSS or "xpath=..." queries in tests).
"""
from __future__ import annotations

from pathlib import Path
from typing import Any, Callable, Dict, Iterator, List, Optional


class FakeTimeout(Exception):
    pass


class FakeElement:
    def __init__(
        self,
        tag: str = "div",
        text: str = "",
        id: Optional[str] = None,
        classes: Optional[List[str]] = None,
        attrs: Optional[Dict[str, str]] = None,
        children: Optional[List["FakeElement"]] = None,
        selectors: Optional[List[str]] = None,
        value: Optional[str] = None,
        disabled: bool = False,
        opens: Optional[str] = None,
        download: Optional[bytes] = None,
        opens_download: Optional[bytes] = None,
        on_click: Optional[Callable[["FakePage"], None]] = None,
    ):
        self.tag = tag
        self.text = text
        self.id = id
        self.classes = classes or []
        self.attrs = attrs or {}
        self.children = children or []
        self.selectors = selectors or []
        self.value = value
        self.disabled = disabled
        self.opens = opens
        self.download = download
        self.opens_download = opens_download
        self.on_click = on_click
        self.clicks: List[Dict[str, Any]] = []
        self.scrolled_into_view = 0

    def matches(self, query: str) -> bool:
        if query in self.selectors:
            return True
        if query.startswith("#"):
            return self.id == query[1:]
        if query.startswith("."):
            return query[1:] in self.classes
        return query == self.tag

    def descendants(self) -> Iterator["FakeElement"]:
        for child in self.children:
            yield child
            yield from child.descendants()

    def query_all(self, query: str) -> List["FakeElement"]:
        return [el for el in self.descendants() if el.matches(query)]

    def full_text(self) -> str:
        return self.text + "".join(child.full_text() for child in self.children)


class FakeLocator:
    def __init__(self, page: "FakePage", elements: List[FakeElement]):
        self._page = page
        self._elements = elements

    def count(self) -> int:
        return len(self._elements)

    @property
    def first(self) -> "FakeLocator":
        return FakeLocator(self._page, self._elements[:1])

    def nth(self, index: int) -> "FakeLocator":
        return FakeLocator(self._page, self._elements[index:index + 1])

    def locator(self, query: str) -> "FakeLocator":
        found: List[FakeElement] = []
        for el in self._elements:
            found.extend(el.query_all(query))
        return FakeLocator(self._page, found)

    def _one(self) -> FakeElement:
        if not self._elements:
            raise FakeTimeout("element not found")
        return self._elements[0]

    def wait_for(self, state: str = "visible", timeout: Optional[int] = None) -> None:
        self._one()

    def scroll_into_view_if_needed(self) -> None:
        self._one().scrolled_into_view += 1

    def fill(self, value: str) -> None:
        self._one().value = value

    def click(self, modifiers: Optional[List[str]] = None) -> None:
        el = self._one()
        el.clicks.append({"modifiers": modifiers})
        page = self._page
        if el.on_click is not None:
            el.on_click(page)
        if el.download is not None:
            page.deliver_download(FakeDownload(el.download))
        elif el.opens_download is not None:
            # headless chromium: the popup stays on about:blank and downloads instead
            popup = page.context.new_page()
            popup.deliver_download(FakeDownload(el.opens_download))
        elif el.opens is not None:
            child = page.context.new_page()
            child.goto(el.opens)
        elif "href" in el.attrs and modifiers is None:
            page.goto(el.attrs["href"])

    def is_disabled(self) -> bool:
        return self._one().disabled

    def text_content(self) -> str:
        return self._one().full_text()

    def inner_text(self) -> str:
        return self._one().full_text().strip()

    def inner_html(self) -> str:
        el = self._one()
        return "".join(f"<{c.tag}>{c.full_text()}</{c.tag}>" for c in el.children) or el.text

    def get_attribute(self, name: str) -> Optional[str]:
        return self._one().attrs.get(name)

    def input_value(self) -> str:
        return self._one().value or ""

    def evaluate(self, script: str, arg: Any = None) -> Any:
        if "tagName" in script:
            return self._one().tag.upper()
        raise NotImplementedError(script)


class FakeDownload:
    def __init__(self, content: bytes):
        self.content = content

    def save_as(self, path: str) -> None:
        Path(path).write_bytes(self.content)


class _Events:
    """Minimal on/remove_listener/emit, dispatching synchronously."""

    def __init__(self) -> None:
        self._listeners: Dict[str, List[Callable[[Any], None]]] = {}

    def on(self, event: str, handler: Callable[[Any], None]) -> None:
        self._listeners.setdefault(event, []).append(handler)

    def remove_listener(self, event: str, handler: Callable[[Any], None]) -> None:
        if handler in self._listeners.get(event, []):
            self._listeners[event].remove(handler)

    def emit(self, event: str, arg: Any) -> None:
        for handler in list(self._listeners.get(event, [])):
            handler(arg)


class EventInfo:
    def __init__(self) -> None:
        self._value: Any = None

    @property
    def value(self) -> Any:
        return self._value


class _Expect:
    """Context manager resolving to whatever `resolve` finds once the block exits."""

    def __init__(self, resolve: Callable[[], Any]):
        self._resolve = resolve
        self.info = EventInfo()

    def __enter__(self) -> EventInfo:
        return self.info

    def __exit__(self, exc_type, exc, tb) -> bool:
        if exc_type is not None:
            return False
        value = self._resolve()
        if value is None:
            raise FakeTimeout("expected event did not happen")
        self.info._value = value
        return False


class FakeResponse:
    def __init__(self, url: str, body: bytes, content_type: str):
        self.url = url
        self._body = body
        self.headers = {"content-type": content_type}

    def body(self) -> bytes:
        return self._body


class FakeRoute:
    def __init__(self, response: FakeResponse):
        self._response = response
        self.fulfilled = False

    def fetch(self) -> FakeResponse:
        return self._response

    def fulfill(self, response: Any = None) -> None:
        self.fulfilled = True

    def continue_(self) -> None:
        pass


class FakePage(_Events):
    def __init__(self, context: "FakeContext", url: str = "about:blank"):
        super().__init__()
        self.context = context
        self.url = url
        self.root = FakeElement("html")
        self.closed = False
        self.waits: List[int] = []
        self.load_states: List[str] = []
        self.gotos: List[str] = []
        self.reloads = 0
        self.scroll_offsets: List[int] = []
        self.pdfs: List[Dict[str, Any]] = []
        self.routes: List[Any] = []
        self.frames: List["FakePage"] = [self]
        self.pending_download: Optional[FakeDownload] = None
        self.inner_height = 800
        self.user_agent = "FakeBrowser/1.0"

    def locator(self, query: str) -> FakeLocator:
        return FakeLocator(self, self.root.query_all(query))

    def goto(self, url: str, wait_until: Optional[str] = None, timeout: Optional[int] = None) -> None:
        if url in self.context.failing_urls:
            raise FakeTimeout(f"navigation to {url} failed")
        self.gotos.append(url)
        self.url = url
        self.root = self.context.site.get(url, FakeElement("html"))

    def reload(self, wait_until: Optional[str] = None, timeout: Optional[int] = None) -> None:
        self.reloads += 1
        response = self.context.responses.get(self.url)
        if response is not None:
            for handler in list(self.routes):
                handler(FakeRoute(response))

    def route(self, pattern: str, handler: Any) -> None:
        self.routes.append(handler)

    def unroute(self, pattern: str, handler: Any = None) -> None:
        if handler in self.routes:
            self.routes.remove(handler)

    def wait_for_timeout(self, ms: int) -> None:
        self.waits.append(ms)

    def wait_for_load_state(self, state: str = "load", timeout: Optional[int] = None) -> None:
        self.load_states.append(state)

    def evaluate(self, script: str, arg: Any = None) -> Any:
        if "innerHeight" in script:
            return self.inner_height
        if "scrollBy" in script:
            self.scroll_offsets.append(arg)
            return None
        if "userAgent" in script:
            return self.user_agent
        raise NotImplementedError(script)

    def deliver_download(self, download: FakeDownload) -> None:
        self.pending_download = download
        self.emit("download", download)

    def expect_download(self, timeout: Optional[int] = None) -> _Expect:
        def _resolve() -> Optional[FakeDownload]:
            download, self.pending_download = self.pending_download, None
            return download
        return _Expect(_resolve)

    def pdf(self, path: str, format: Optional[str] = None, margin: Optional[Dict[str, str]] = None) -> bytes:
        content = b"%PDF-1.4 fake render"
        Path(path).write_bytes(content)
        self.pdfs.append({"path": path, "format": format, "margin": margin})
        return content

    def is_closed(self) -> bool:
        return self.closed

    def close(self) -> None:
        self.closed = True


class FakeContext(_Events):
    def __init__(self, site: Optional[Dict[str, FakeElement]] = None):
        super().__init__()
        self.site: Dict[str, FakeElement] = site or {}
        self.responses: Dict[str, FakeResponse] = {}
        self.failing_urls: set = set()
        self.pages: List[FakePage] = []
        self.cookie_jar: List[Dict[str, str]] = []
        self.closed = False

    def new_page(self) -> FakePage:
        page = FakePage(self)
        self.pages.append(page)
        self.emit("page", page)
        return page

    def expect_page(self, timeout: Optional[int] = None) -> _Expect:
        before = len(self.pages)

        def _resolve() -> Optional[FakePage]:
            if len(self.pages) > before:
                return self.pages[-1]
            return None
        return _Expect(_resolve)

    def cookies(self, urls: Any = None) -> List[Dict[str, str]]:
        return list(self.cookie_jar)

    def close(self) -> None:
        self.closed = True


def open_page(site: Dict[str, FakeElement], url: str) -> FakePage:
    """A page already showing url from site."""
    context = FakeContext(site)
    page = context.new_page()
    page.goto(url)
    page.gotos.clear()
    return page


class RecordingLogger:
    """LoggerPort double collecting (level, event, fields) tuples."""

    def __init__(self, records: Optional[list] = None, bound: Optional[dict] = None):
        self.records = records if records is not None else []
        self.bound = bound or {}

    def bind(self, **fields: Any) -> "RecordingLogger":
        merged = dict(self.bound)
        merged.update(fields)
        return RecordingLogger(self.records, merged)

    def _log(self, level: str, event: str, fields: Dict[str, Any]) -> None:
        payload = dict(self.bound)
        payload.update(fields)
        self.records.append((level, event, payload))

    def debug(self, event: str, **fields: Any) -> None:
        self._log("debug", event, fields)

    def info(self, event: str, **fields: Any) -> None:
        self._log("info", event, fields)

    def warning(self, event: str, **fields: Any) -> None:
        self._log("warning", event, fields)

    def error(self, event: str, **fields: Any) -> None:
        self._log("error", event, fields)

    def events(self, level: Optional[str] = None) -> List[str]:
        return [event for lvl, event, _ in self.records if level is None or lvl == level]


class FakeLauncher:
    """BrowserLauncherPort double handing out one FakeContext per run."""

    def __init__(self, site: Optional[Dict[str, FakeElement]] = None):
        self.site = site or {}
        self.contexts: List[FakeContext] = []
        self.options: List[Any] = []

    def open(self, options: Any) -> "_LaunchedContext":
        self.options.append(options)
        context = FakeContext(self.site)
        self.contexts.append(context)
        return _LaunchedContext(context)


class _LaunchedContext:
    def __init__(self, context: FakeContext):
        self._context = context

    def __enter__(self) -> FakeContext:
        return self._context

    def __exit__(self, exc_type, exc, tb) -> bool:
        self._context.close()
        return False
