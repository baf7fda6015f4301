from __future__ import annotations

import logging
from typing import Dict, Optional

from fastapi import HTTPException, Request

from pep.access.config import load_access_config
from pep.access.errors import ConfigurationError
from pep.access.models import AccessOutcome, AccessRequestParameters
from pep.access.pipeline import AccessValidator

logger = logging.getLogger(__name__)

_METHOD_ACTIONS: Dict[str, str] = {
    "POST": "create",
    "GET": "read",
    "PUT": "update",
    "PATCH": "update",
    "DELETE": "delete",
}


def action_for_method(method: str) -> Optional[str]:
    return _METHOD_ACTIONS.get((method or "").upper())


def error_detail(err: Exception) -> Dict[str, str]:
    return {
        "code": getattr(err, "code", "ACCESS_CHECK_ERROR"),
        "message": getattr(err, "message", str(err)),
    }


def get_access_validator(request: Request) -> AccessValidator:
    validator = getattr(request.app.state, "access_validator", None)
    if validator is None:
        # Startup did not complete; never let a request through unchecked.
        logger.error("Access validator missing on app state; rejecting request")
        err = ConfigurationError("access validation not initialized")
        raise HTTPException(status_code=err.status_code, detail=error_detail(err))
    return validator


def access_parameters_from_request(request: Request) -> AccessRequestParameters:
    """
    Build the access check for an incoming request.

    - identity token: ACCESS_TOKEN_HEADER (default x-auth-token)
    - organization: ACCESS_ORGANIZATION_HEADER (default fiware-service)
    - action: derived from the HTTP method
    """
    cfg = load_access_config()

    token = (request.headers.get(cfg.token_header) or "").strip()
    if not token:
        raise HTTPException(status_code=401, detail={"code": "MISSING_TOKEN", "message": "identity token missing"})

    organization = (request.headers.get(cfg.organization_header) or "").strip()
    if not organization:
        raise HTTPException(
            status_code=400, detail={"code": "MISSING_ORGANIZATION", "message": "organization header missing"}
        )

    action = action_for_method(request.method)
    if action is None:
        raise HTTPException(
            status_code=405, detail={"code": "UNSUPPORTED_ACTION", "message": f"method {request.method} not mapped"}
        )

    return AccessRequestParameters(identity_token=token, organization=organization, action=action)


def require_access(request: Request) -> AccessOutcome:
    """
    FastAPI dependency gating a route on the decision service verdict.

    Runs in the threadpool (sync def) since the outbound call blocks.
    """
    validator = get_access_validator(request)
    params = access_parameters_from_request(request)

    outcome = validator.validate(params)
    if not outcome.allowed:
        err = outcome.error
        raise HTTPException(status_code=getattr(err, "status_code", 403), detail=error_detail(err))
    return outcome
