"""Typed failures of the access validation pipeline.

Every error carries an HTTP status hint so the API layer can map it without
inspecting the concrete type. Callers must treat any of these as "do not forward".
"""

from __future__ import annotations

from typing import Optional


class AccessCheckError(Exception):
    status_code: int = 500
    code: str = "ACCESS_CHECK_ERROR"

    def __init__(self, message: str, *, cause: Optional[BaseException] = None) -> None:
        super().__init__(message)
        self.message = message
        self.cause = cause


class ConfigurationError(AccessCheckError):
    """The pipeline was used before its template was loaded."""

    code = "CONFIGURATION_ERROR"


class TemplateLoadingError(ConfigurationError):
    """The request template could not be read at startup."""

    code = "TEMPLATE_LOADING_ERROR"


class DecisionServiceConnectionError(AccessCheckError):
    """Transport-level failure reaching the decision service."""

    status_code = 503
    code = "DECISION_SERVICE_CONNECTION_ERROR"


class DecisionServiceValidationError(AccessCheckError):
    """The decision service answered with a status other than 200."""

    status_code = 502
    code = "DECISION_SERVICE_VALIDATION_ERROR"

    def __init__(self, response_status: int) -> None:
        super().__init__(f"wrong status code received: {response_status}")
        self.response_status = response_status


class MalformedResponse(AccessCheckError):
    """The decision service body is not well-formed XML."""

    status_code = 502
    code = "MALFORMED_RESPONSE"


class DecisionNotFound(MalformedResponse):
    """Well-formed XML without any Decision text."""

    code = "DECISION_NOT_FOUND"

    def __init__(self) -> None:
        super().__init__("decision not found in validation response")


class AccessDenied(AccessCheckError):
    status_code = 403
    code = "ACCESS_DENIED"

    def __init__(self, decision: str) -> None:
        super().__init__(f"access denied (decision={decision!r})")
        self.decision = decision
