"""Request template loading and rendering."""

from __future__ import annotations

import logging
import re
from typing import Dict, Optional

from pep.access.errors import ConfigurationError, TemplateLoadingError
from pep.access.models import AccessRequestParameters, AccessTemplate
from pep.access.util import mask_token

logger = logging.getLogger(__name__)

# {{{name}}} and {{& name}} are raw; {{name}} is escaped.
_TAG_RE = re.compile(r"\{\{\{\s*([\w.-]+)\s*\}\}\}|\{\{\s*(&?)\s*([\w.-]+)\s*\}\}")

_ESCAPES = {
    "&": "&amp;",
    "<": "&lt;",
    ">": "&gt;",
    '"': "&quot;",
    "'": "&#39;",
    "/": "&#x2F;",
    "`": "&#x60;",
    "=": "&#x3D;",
}


def escape_markup(value: str) -> str:
    return "".join(_ESCAPES.get(ch, ch) for ch in value)


def load_template(path: str) -> AccessTemplate:
    """
    Read the access request template. Called once at startup.

    Raises TemplateLoadingError if the file is missing, unreadable or empty; the
    service must not serve validations without it.
    """
    logger.debug("Loading access validation template from %s", path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            text = f.read()
    except OSError as e:
        logger.critical("Validation request template not found: %s", path)
        raise TemplateLoadingError(f"cannot read template {path}: {e}", cause=e) from e

    if not text.strip():
        logger.critical("Validation request template is empty: %s", path)
        raise TemplateLoadingError(f"template {path} is empty")

    return AccessTemplate(text=text, source=path)


def render_template(text: str, values: Dict[str, str]) -> str:
    def _sub(m: re.Match) -> str:
        if m.group(1) is not None:
            return values.get(m.group(1), "")
        raw = m.group(2) == "&"
        value = values.get(m.group(3), "")
        return value if raw else escape_markup(value)

    return _TAG_RE.sub(_sub, text)


def render_access_request(template: Optional[AccessTemplate], params: AccessRequestParameters) -> str:
    """Build the XACML payload for one access check."""
    if template is None or not template.loaded:
        raise ConfigurationError("access request template is not loaded")

    logger.debug(
        "Creating access request for user [%s], with organization [%s] and action [%s]",
        mask_token(params.identity_token),
        params.organization,
        params.action,
    )
    return render_template(template.text, params.template_values())
