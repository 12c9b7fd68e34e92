# tests/application/handlers/test_pdf_handlers.py
from application.handlers.print_pdf_handler import PrintPdfStepHandler
from application.handlers.save_pdf_handler import SAVE_PDF_LADDER, SavePdfStepHandler, looks_like_pdf, pdf_url_in
from application.services.binary_fetcher import BinaryFetcher
from application.services.execution_deps import ExecutionDeps
from domain.run import RunContext
from domain.steps.base import Step
from tests.fake_browser import FakeElement, FakeResponse, open_page
from tests.stub_http_client import StubHttpClient


def _saved_strategy(logger):
    return [f["strategy"] for _, ev, f in logger.records if ev == "capture.saved"][0]


def _save(path, key="pdf"):
    return Step(id="save", action="savePDF", value=str(path), key=key)


class TestPdfUrlDetection:
    def test_looks_like_pdf(self):
        assert looks_like_pdf("https://x.test/a/B.PDF")
        assert looks_like_pdf("https://x.test/download?id=1", "application/pdf; charset=binary")
        assert not looks_like_pdf("https://x.test/a.html", "text/html")

    def test_pdf_url_in_viewer_query(self):
        url = "https://x.test/viewer.html?file=%2Fdocs%2Fq1.pdf"
        assert pdf_url_in(url) == "https://x.test/docs/q1.pdf"
        assert pdf_url_in("https://x.test/page?id=3") is None


class TestSavePdfStepHandler:
    def test_ladder_order(self):
        assert SAVE_PDF_LADDER.names == [
            "direct_pdf_url",
            "embedded_viewer",
            "response_interception",
            "viewer_download_control",
            "print_render",
        ]

    def test_page_that_is_a_pdf_is_fetched(self, logger, tmp_path):
        client = StubHttpClient({"https://x.test/doc.pdf": (200, b"%PDF-direct")})
        deps = ExecutionDeps(logger=logger, fetcher=BinaryFetcher(client))
        page = open_page({}, "https://x.test/doc.pdf")
        ctx = RunContext(page=page)

        assert SavePdfStepHandler().handle(_save(tmp_path / "a.pdf"), ctx, deps).ok
        assert (tmp_path / "a.pdf").read_bytes() == b"%PDF-direct"
        assert ctx.collector["pdf"] == str(tmp_path / "a.pdf")
        assert _saved_strategy(logger) == "direct_pdf_url"

    def test_embedded_viewer_source(self, logger, tmp_path):
        client = StubHttpClient({"https://x.test/files/e.pdf": (200, b"%PDF-embed")})
        deps = ExecutionDeps(logger=logger, fetcher=BinaryFetcher(client))
        viewer = FakeElement("embed", attrs={"src": "/files/e.pdf"}, selectors=["embed[type='application/pdf']"])
        page = open_page({"https://x.test/view": FakeElement(children=[viewer])}, "https://x.test/view")

        SavePdfStepHandler().handle(_save(tmp_path / "e.pdf"), RunContext(page=page), deps)

        assert (tmp_path / "e.pdf").read_bytes() == b"%PDF-embed"
        assert _saved_strategy(logger) == "embedded_viewer"

    def test_pdf_seen_on_the_wire_during_reload(self, logger, tmp_path):
        deps = ExecutionDeps(logger=logger)
        url = "https://x.test/show?id=9"
        page = open_page({url: FakeElement()}, url)
        page.context.responses[url] = FakeResponse(url, b"%PDF-wire", "application/pdf")

        SavePdfStepHandler().handle(_save(tmp_path / "w.pdf"), RunContext(page=page), deps)

        assert (tmp_path / "w.pdf").read_bytes() == b"%PDF-wire"
        assert _saved_strategy(logger) == "response_interception"
        assert page.routes == []

    def test_viewer_download_control(self, logger, tmp_path):
        deps = ExecutionDeps(logger=logger)
        button = FakeElement("button", id="download", download=b"%PDF-button")
        page = open_page({"https://x.test/v": FakeElement(children=[button])}, "https://x.test/v")

        SavePdfStepHandler().handle(_save(tmp_path / "b.pdf"), RunContext(page=page), deps)

        assert (tmp_path / "b.pdf").read_bytes() == b"%PDF-button"
        assert _saved_strategy(logger) == "viewer_download_control"

    def test_plain_page_falls_back_to_print(self, logger, tmp_path):
        deps = ExecutionDeps(logger=logger)
        page = open_page({"https://x.test/article": FakeElement(children=[FakeElement("p", "hi")])}, "https://x.test/article")

        SavePdfStepHandler().handle(_save(tmp_path / "nested" / "p.pdf"), RunContext(page=page), deps)

        assert (tmp_path / "nested" / "p.pdf").exists()
        assert page.pdfs[0]["format"] == "A4"
        assert _saved_strategy(logger) == "print_render"


class TestPrintPdfStepHandler:
    def test_clicks_trigger_then_renders(self, deps, tmp_path):
        trigger = FakeElement("button", "Print view", id="print")
        page = open_page({"u": FakeElement(children=[trigger])}, "u")
        ctx = RunContext(page=page)
        step = Step(id="print", action="printToPDF", selector_kind="id", selector_value="print", value=str(tmp_path / "p.pdf"))

        assert PrintPdfStepHandler().handle(step, ctx, deps).ok

        assert len(trigger.clicks) == 1
        assert page.load_states == ["networkidle"]
        assert page.pdfs[0]["margin"] == {"top": "10mm", "right": "10mm", "bottom": "10mm", "left": "10mm"}
        assert ctx.collector["print"] == str(tmp_path / "p.pdf")

    def test_render_failure_stores_none(self, deps, tmp_path):
        page = open_page({"u": FakeElement()}, "u")

        def _broken_pdf(**kwargs):
            raise RuntimeError("printing is only supported headless")

        page.pdf = _broken_pdf
        ctx = RunContext(page=page)
        step = Step(id="print", action="printToPDF", value=str(tmp_path / "p.pdf"))

        assert not PrintPdfStepHandler().handle(step, ctx, deps).ok
        assert ctx.collector["print"] is None
