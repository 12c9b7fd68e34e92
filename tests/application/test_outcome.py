# tests/application/test_outcome.py
from application.outcome import StepOutcome


class TestStepOutcome:
    def test_create_success_outcome(self):
        outcome = StepOutcome(ok=True)
        assert outcome.ok is True
        assert outcome.error_message is None

    def test_create_failure_outcome_with_error(self):
        outcome = StepOutcome(ok=False, error_message="element detached")
        assert outcome.ok is False
        assert outcome.error_message == "element detached"
