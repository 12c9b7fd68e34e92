# tests/conftest.py
import pytest

from application.executor.step_executor import StepExecutor
from application.services.execution_deps import ExecutionDeps
from infrastructure.bootstrap import build_executor
from tests.fake_browser import RecordingLogger


@pytest.fixture
def logger():
    return RecordingLogger()


@pytest.fixture
def executor() -> StepExecutor:
    return build_executor()


@pytest.fixture
def deps(logger, executor):
    """Deps wired to the default handlers, ready for handler.handle() calls."""
    return ExecutionDeps(logger=logger).with_runner(executor)
