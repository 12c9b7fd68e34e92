"""FastAPI application: REST endpoints for running tab templates."""
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional
from uuid import uuid4

from fastapi import Body, FastAPI, HTTPException
from pydantic import BaseModel, Field

import sys

# project root on the import path when started as a script
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from application.ports.logger import LoggerPort
from application.scraper import Scraper
from domain.exceptions import ConfigurationError, TemplateLoadError
from domain.run import RunOptions
from domain.tab import TabTemplate
from infrastructure.bootstrap import build_scraper
from infrastructure.logging.composite_logger import CompositeLogger
from infrastructure.logging.loguru_logger import LoguruLogger
from infrastructure.logging.run_log_logger import RunLogLogger
from infrastructure.run.in_memory_run_log_store import InMemoryRunLogStore
from infrastructure.template.base_loader import DictTemplateLoader
from infrastructure.template.file_finder import TemplateFileFinder
from infrastructure.template.loader_registry import TemplateLoaderRegistry


class BrowserOptionsRequest(BaseModel):
    """Browser launch and context options"""
    headless: bool = Field(default=True, description="Run Chromium headless")
    browser: Dict[str, Any] = Field(default_factory=dict, description="Extra launch kwargs")
    context: Dict[str, Any] = Field(default_factory=dict, description="new_context kwargs")


class RunTemplatesRequest(BaseModel):
    """Run inline templates"""
    tabs: List[Dict[str, Any]] = Field(description="Tab templates in wire format")
    options: BrowserOptionsRequest = Field(default_factory=BrowserOptionsRequest)


class RunStoredTemplateRequest(BaseModel):
    """Run a stored template"""
    options: BrowserOptionsRequest = Field(default_factory=BrowserOptionsRequest)


class ErrorDetailResponse(BaseModel):
    """Structured error detail"""
    code: str = Field(description="Error code")
    message: str = Field(description="Error message")
    step_id: Optional[str] = Field(default=None, description="Failing step id")


class RunResponse(BaseModel):
    """Run result"""
    run_id: str = Field(description="Run identifier")
    success: bool = Field(description="True when every tab completed")
    records: List[Dict[str, Any]] = Field(default_factory=list, description="Flattened records")
    error: Optional[str] = Field(default=None, description="Error message")
    error_detail: Optional[ErrorDetailResponse] = Field(default=None)
    links: Dict[str, str] = Field(default_factory=dict, description="Related resources")


class RunLogEntryResponse(BaseModel):
    """Run log entry"""
    timestamp: datetime = Field(description="Log timestamp")
    event: str = Field(description="Log event name")
    level: str = Field(description="Log level")
    fields: Dict[str, Any] = Field(description="Log payload")


app = FastAPI(
    title="StepWright Runner",
    description="Declarative browser automation and scraping",
    version="1.0.0",
)

TEMPLATES_DIR = Path(__file__).parent.parent / "templates"
RUN_LOG_STORE = InMemoryRunLogStore()

# replaced in tests to run against a browser double
SCRAPER_FACTORY: Callable[[LoggerPort], Scraper] = lambda logger: build_scraper(logger=logger)


@app.get("/")
def read_root():
    """Health check"""
    return {"status": "ok", "service": "stepwright"}


def _build_logger(run_id: str) -> CompositeLogger:
    return CompositeLogger(
        [
            LoguruLogger(),
            RunLogLogger(run_id=run_id, log_store=RUN_LOG_STORE),
        ]
    )


def _load_stored_template(template_id: str) -> List[TabTemplate]:
    finder = TemplateFileFinder(TEMPLATES_DIR)
    template_file = finder.find_by_id(template_id)

    if template_file is None:
        raise HTTPException(
            status_code=404,
            detail=f"Template file not found: {template_id}",
        )

    loader = TemplateLoaderRegistry().get_loader(template_file)
    return loader.load_from_file(template_file)


def _run_options(request: BrowserOptionsRequest, run_id: str) -> RunOptions:
    return RunOptions(
        headless=request.headless,
        browser=request.browser,
        context=request.context,
        run_id=run_id,
    )


def _build_run_links(run_id: str) -> Dict[str, str]:
    return {"logs": f"/runs/{run_id}/logs"}


def _execute(templates: List[TabTemplate], options: BrowserOptionsRequest) -> RunResponse:
    run_id = uuid4().hex
    logger = _build_logger(run_id)
    links = _build_run_links(run_id)

    try:
        records = SCRAPER_FACTORY(logger).run(templates, _run_options(options, run_id))
    except ConfigurationError as exc:
        logger.error("run.failed", error=str(exc), step_id=exc.step_id)
        return RunResponse(
            run_id=run_id,
            success=False,
            error=str(exc),
            error_detail=ErrorDetailResponse(code="configuration_error", message=str(exc), step_id=exc.step_id),
            links=links,
        )
    except Exception as exc:
        logger.error("run.failed", error=str(exc))
        return RunResponse(
            run_id=run_id,
            success=False,
            error=str(exc),
            error_detail=ErrorDetailResponse(
                code="run_failed",
                message=str(exc),
                step_id=getattr(exc, "step_id", None),
            ),
            links=links,
        )

    return RunResponse(run_id=run_id, success=True, records=records, links=links)


@app.post("/runs", response_model=RunResponse)
def run_inline(request: RunTemplatesRequest = Body(...)) -> RunResponse:
    """Run templates posted in the request body."""
    try:
        templates = DictTemplateLoader().load(request.tabs)
    except TemplateLoadError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return _execute(templates, request.options)


@app.post("/templates/{template_id}/runs", response_model=RunResponse)
def run_stored(
    template_id: str,
    request: Optional[RunStoredTemplateRequest] = Body(default=None),
) -> RunResponse:
    """
    Run a template stored under templates/.

    Args:
        template_id: file name without extension (e.g. "quotes")
    """
    try:
        templates = _load_stored_template(template_id)
    except TemplateLoadError as e:
        raise HTTPException(status_code=400, detail=str(e))
    options = request.options if request is not None else BrowserOptionsRequest()
    return _execute(templates, options)


@app.get("/runs/{run_id}/logs", response_model=List[RunLogEntryResponse])
def get_run_logs(run_id: str) -> List[RunLogEntryResponse]:
    if not RUN_LOG_STORE.has_run(run_id):
        raise HTTPException(status_code=404, detail=f"Run not found: {run_id}")
    entries = RUN_LOG_STORE.list(run_id)
    return [
        RunLogEntryResponse(
            timestamp=entry.timestamp,
            event=entry.event,
            level=entry.level,
            fields=entry.fields,
        )
        for entry in entries
    ]
