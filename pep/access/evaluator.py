from __future__ import annotations

import logging

from pep.access.errors import AccessDenied

logger = logging.getLogger(__name__)

PERMIT = "PERMIT"


def is_permit(decision: str) -> bool:
    return (decision or "").upper() == PERMIT


def evaluate_decision(decision: str) -> None:
    """
    Enforce the decision service verdict.

    Only Permit (any case) allows the request. Deny, Indeterminate, NotApplicable and
    anything unrecognized are all reported as AccessDenied carrying the raw value.
    """
    if is_permit(decision):
        return
    logger.info("Access denied by decision service (decision=%s)", decision)
    raise AccessDenied(decision)
