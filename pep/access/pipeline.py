"""Access validation orchestrator.

Runs render -> dispatch -> extract -> evaluate strictly in order. Each stage takes the
previous stage's result; the first typed failure aborts the remaining stages.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional, Tuple

from pep.access.config import AccessConfig, load_access_config
from pep.access.dispatcher import DecisionClient, get_decision_client
from pep.access.errors import AccessCheckError
from pep.access.evaluator import evaluate_decision
from pep.access.extractor import DecisionExtractor
from pep.access.models import AccessOutcome, AccessRequestParameters, AccessTemplate
from pep.access.template import load_template, render_access_request
from pep.access.util import mask_token

logger = logging.getLogger(__name__)

Stage = Callable[[Any], Any]


class AccessValidator:
    """
    Stateless apart from its injected, immutable config and template.

    Safe to share between threads: every call builds its own payload and extractor.
    """

    def __init__(
        self,
        config: AccessConfig,
        template: AccessTemplate,
        client: Optional[DecisionClient] = None,
    ) -> None:
        self.config = config
        self.template = template
        self.client = client if client is not None else get_decision_client()

    def _render(self, params: AccessRequestParameters) -> str:
        return render_access_request(self.template, params)

    def _dispatch(self, payload: str) -> bytes:
        return self.client.send_access_request(self.config, payload)

    def _extract(self, body: bytes) -> str:
        return DecisionExtractor().extract(body)

    def _evaluate(self, decision: str) -> str:
        evaluate_decision(decision)
        return decision

    def stages(self) -> Tuple[Stage, ...]:
        return (self._render, self._dispatch, self._extract, self._evaluate)

    def check(self, params: AccessRequestParameters) -> str:
        """
        Run the full pipeline and return the permitting decision text.

        Raises the first AccessCheckError produced by any stage.
        """
        value: Any = params
        for stage in self.stages():
            value = stage(value)
        return value

    def validate(self, params: AccessRequestParameters) -> AccessOutcome:
        """Non-raising variant of check(): exactly one outcome per call."""
        try:
            decision = self.check(params)
        except AccessCheckError as e:
            logger.warning(
                "Access check failed for user [%s], organization [%s], action [%s]: %s (%s)",
                mask_token(params.identity_token),
                params.organization,
                params.action,
                e.code,
                e.message,
            )
            return AccessOutcome(allowed=False, decision=getattr(e, "decision", None), error=e)
        return AccessOutcome(allowed=True, decision=decision)


def create_access_validator(
    config: Optional[AccessConfig] = None,
    *,
    client: Optional[DecisionClient] = None,
) -> AccessValidator:
    """
    Startup helper: resolve config and read the template once.

    Raises TemplateLoadingError when the template cannot be read.
    """
    cfg = config if config is not None else load_access_config()
    template = load_template(cfg.template_path)
    logger.info("Access validation ready (endpoint=%s, template=%s)", cfg.endpoint_url, template.source)
    return AccessValidator(cfg, template, client=client)
