# tests/application/test_scraper.py
import pytest

from application.executor.tab_runner import TabRunner
from application.scraper import Scraper
from application.services.execution_deps import ExecutionDeps
from domain.exceptions import ConfigurationError
from domain.run import RunOptions
from domain.steps.base import Step
from domain.tab import TabTemplate
from tests.fake_browser import FakeElement, FakeLauncher, RecordingLogger

SITE = {
    "https://a.test/": FakeElement(children=[
        FakeElement("li", classes=["row"], children=[FakeElement("span", "one", classes=["v"])]),
        FakeElement("li", classes=["row"], children=[FakeElement("span", "two", classes=["v"])]),
    ]),
    "https://b.test/": FakeElement(children=[FakeElement("h1", "Bee", id="title")]),
}


def _tabs():
    rows = TabTemplate(
        tab="rows",
        init_steps=(Step(id="go", action="navigate", value="https://a.test/"),),
        per_page_steps=(
            Step(
                id="rows", action="foreach", selector_kind="class", selector_value="row",
                sub_steps=(Step(id="v", action="data", selector_kind="class", selector_value="v"),),
            ),
        ),
    )
    title = TabTemplate(
        tab="title",
        init_steps=(Step(id="go", action="navigate", value="https://b.test/"),),
        per_page_steps=(Step(id="title", action="data", selector_kind="id", selector_value="title"),),
    )
    return [rows, title]


@pytest.fixture
def launcher():
    return FakeLauncher(SITE)


@pytest.fixture
def scraper(launcher, executor):
    return Scraper(
        launcher=launcher,
        tab_runner=TabRunner(executor),
        deps_factory=lambda logger: ExecutionDeps(logger=logger),
        logger=RecordingLogger(),
    )


class TestScraper:
    def test_batch_returns_records_of_all_tabs_in_order(self, scraper, launcher):
        records = scraper.run(_tabs())

        assert records == [{"v": "one"}, {"v": "two"}, {"title": "Bee"}]
        context = launcher.contexts[0]
        assert len(context.pages) == 2
        assert all(page.closed for page in context.pages)
        assert context.closed

    def test_streaming_delivers_every_record_once(self, scraper):
        received = []
        assert scraper.run_with_callback(_tabs(), lambda record, index: received.append((index, record))) is None
        assert received == [(0, {"v": "one"}), (1, {"v": "two"}), (0, {"title": "Bee"})]

    def test_batch_with_on_result_also_streams(self, scraper):
        received = []
        records = scraper.run(_tabs(), RunOptions(on_result=lambda record, index: received.append(record)))
        assert received == records

    def test_run_id_from_options(self, launcher, executor):
        logger = RecordingLogger()
        scraper = Scraper(launcher, TabRunner(executor), lambda lg: ExecutionDeps(logger=lg), logger)
        scraper.run(_tabs()[1:], RunOptions(run_id="fixed"))
        starts = [f for _, ev, f in logger.records if ev == "run.start"]
        assert starts[0]["run_id"] == "fixed"

    def test_page_closed_when_tab_fails(self, scraper, launcher):
        broken = TabTemplate(tab="broken", init_steps=(Step(id="nav", action="navigate"),))
        with pytest.raises(ConfigurationError):
            scraper.run([broken])
        assert launcher.contexts[0].pages[0].closed
        assert launcher.contexts[0].closed
