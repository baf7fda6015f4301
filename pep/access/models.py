from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from pep.access.errors import AccessCheckError


@dataclass(frozen=True)
class AccessRequestParameters:
    """One access check: who (token), where (organization), what (action)."""

    identity_token: str
    organization: str
    action: str

    def template_values(self) -> dict[str, str]:
        # Placeholder names used by the request template.
        return {
            "organization": self.organization,
            "subjectId": self.identity_token,
            "action": self.action,
        }


@dataclass(frozen=True)
class AccessTemplate:
    """Request template text, read once at startup and shared read-only."""

    text: str
    source: str

    @property
    def loaded(self) -> bool:
        return bool(self.text)


@dataclass(frozen=True)
class AccessOutcome:
    allowed: bool
    decision: Optional[str] = None
    error: Optional[AccessCheckError] = None

    @property
    def reason(self) -> Optional[str]:
        return self.error.code if self.error is not None else None
