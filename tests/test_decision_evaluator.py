from __future__ import annotations

import pytest

from pep.access.errors import AccessDenied
from pep.access.evaluator import evaluate_decision, is_permit


@pytest.mark.parametrize("decision", ["Permit", "PERMIT", "permit"])
def test_permit_any_case_allows(decision: str) -> None:
    assert evaluate_decision(decision) is None
    assert is_permit(decision) is True


@pytest.mark.parametrize("decision", ["Deny", "Indeterminate", "NotApplicable", "", "Permitted"])
def test_everything_else_is_denied(decision: str) -> None:
    with pytest.raises(AccessDenied) as ei:
        evaluate_decision(decision)
    assert ei.value.decision == decision
    assert ei.value.status_code == 403
