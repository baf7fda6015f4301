"""
Policy enforcement API.

Loads the access request template once at startup (refusing to start without it) and
exposes the access check both as an explicit endpoint and as a route dependency.
"""

from __future__ import annotations

import logging
import os
from typing import Any, Dict

from fastapi import Depends, FastAPI, HTTPException, Request
from pydantic import BaseModel, Field

from pep.access.deps import error_detail, get_access_validator, require_access
from pep.access.models import AccessOutcome, AccessRequestParameters
from pep.access.pipeline import create_access_validator

logger = logging.getLogger(__name__)

app = FastAPI(title="Policy enforcement point")


class AccessCheckRequest(BaseModel):
    token: str = Field(min_length=1)
    organization: str = Field(min_length=1)
    action: str = Field(min_length=1)


@app.on_event("startup")
def _startup_load_access_validator() -> None:
    """
    Fatal on failure: without the template no validation can be served.
    """
    try:
        app.state.access_validator = create_access_validator()
    except Exception:
        logger.exception("Access validation templates could not be loaded; refusing to start")
        raise


@app.get("/healthz")
def healthz() -> Dict[str, Any]:
    return {"status": "ok"}


@app.post("/api/access/check")
def check_access(body: AccessCheckRequest, request: Request) -> Dict[str, Any]:
    validator = get_access_validator(request)
    params = AccessRequestParameters(identity_token=body.token, organization=body.organization, action=body.action)
    outcome = validator.validate(params)
    if not outcome.allowed:
        raise HTTPException(status_code=outcome.error.status_code, detail=error_detail(outcome.error))
    return {"allowed": True, "decision": outcome.decision}


@app.api_route("/api/access/verify", methods=["GET", "POST", "PUT", "PATCH", "DELETE"])
def verify_access(outcome: AccessOutcome = Depends(require_access)) -> Dict[str, Any]:
    return {"allowed": outcome.allowed, "decision": outcome.decision}


def run(host: str = "0.0.0.0", port: int = 1026) -> None:
    import uvicorn

    log_level = os.getenv("LOG_LEVEL", "info").upper()
    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    logger.setLevel(getattr(logging, log_level, logging.INFO))

    uvicorn_log_level = (
        log_level.lower() if log_level.lower() in ["critical", "error", "warning", "info", "debug", "trace"] else "info"
    )

    logger.info("Starting policy enforcement API on %s:%d (log_level=%s)", host, port, log_level)
    uvicorn.run(app, host=host, port=port, log_level=uvicorn_log_level)
