"""Decision service client: one POST per access check, no retries."""

from __future__ import annotations

import logging
from typing import Optional, Protocol, runtime_checkable

import requests

from pep.access.config import AccessConfig
from pep.access.errors import DecisionServiceConnectionError, DecisionServiceValidationError

logger = logging.getLogger(__name__)

XML_HEADERS = {
    "Content-Type": "application/xml",
    "Accept": "application/xml",
}


@runtime_checkable
class DecisionClient(Protocol):
    def send_access_request(self, config: AccessConfig, payload: str) -> bytes: ...


class DefaultDecisionClient:
    def __init__(self, session: Optional[requests.Session] = None) -> None:
        self._session = session

    def send_access_request(self, config: AccessConfig, payload: str) -> bytes:
        return send_access_request(config, payload, session=self._session)


def get_decision_client(session: Optional[requests.Session] = None) -> DecisionClient:
    """Seam for swapping the transport (tests, alternative HTTP stacks)."""
    return DefaultDecisionClient(session=session)


def send_access_request(
    config: AccessConfig,
    payload: str,
    *,
    session: Optional[requests.Session] = None,
) -> bytes:
    """
    POST the access payload to the decision service and return the raw response body.

    Raises:
        DecisionServiceConnectionError: the request never got a response.
        DecisionServiceValidationError: the response status was not 200.
    """
    url = config.endpoint_url
    logger.debug("Sending access request to %s (%d bytes)", url, len(payload))

    post = session.post if session is not None else requests.post
    try:
        response = post(
            url,
            data=payload.encode("utf-8"),
            headers=dict(XML_HEADERS),
            timeout=config.timeout_seconds,
        )
    except requests.exceptions.RequestException as e:
        logger.error("Error connecting to decision service at %s: %s", url, str(e))
        raise DecisionServiceConnectionError(f"cannot reach decision service: {e}", cause=e) from e

    if response.status_code != 200:
        logger.error("Wrong status received by decision service: %d", response.status_code)
        raise DecisionServiceValidationError(response.status_code)

    return response.content
