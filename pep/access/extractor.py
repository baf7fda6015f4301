"""
Streaming extraction of the Decision value from a decision service response.

The extractor is a flat state machine driven by SAX events. Every opened element
decides whether text is captured: capturing is on only while the most recently
opened element is named "Decision" (any case, prefix included). There is no element
stack, so markup nested inside <Decision> or text following </Decision> before the
next opening tag is captured too. Captured text accumulates across the whole
document and is never cleared. CDATA sections are never captured.
"""

from __future__ import annotations

import logging
import xml.sax
from enum import Enum
from typing import Optional, Union

from pep.access.errors import DecisionNotFound, MalformedResponse

logger = logging.getLogger(__name__)

DECISION_TAG = "DECISION"


class ExtractorState(str, Enum):
    IDLE = "idle"
    CAPTURING = "capturing"
    DONE = "done"
    FAILED = "failed"


class DecisionExtractor:
    """One-shot extractor. Concurrent checks must each use their own instance."""

    def __init__(self) -> None:
        self.state = ExtractorState.IDLE
        self._accumulator: Optional[str] = None
        self._used = False

    @property
    def capturing(self) -> bool:
        return self.state == ExtractorState.CAPTURING

    def on_open_tag(self, name: str) -> None:
        self.state = ExtractorState.CAPTURING if name.upper() == DECISION_TAG else ExtractorState.IDLE

    def on_text(self, chunk: str) -> None:
        if self.state != ExtractorState.CAPTURING:
            return
        self._accumulator = chunk if self._accumulator is None else self._accumulator + chunk

    def on_error(self, exc: Exception) -> MalformedResponse:
        self.state = ExtractorState.FAILED
        self._accumulator = None
        logger.error("Error parsing validation response: %s", str(exc))
        return MalformedResponse(f"cannot parse validation response: {exc}", cause=exc)

    def on_end(self) -> str:
        if not self._accumulator:
            self.state = ExtractorState.FAILED
            logger.error("Error reading validation response: decision not found")
            raise DecisionNotFound()
        self.state = ExtractorState.DONE
        return self._accumulator.strip()

    def extract(self, body: Union[str, bytes]) -> str:
        """Parse the whole body and return the trimmed decision text."""
        if self._used:
            raise RuntimeError("DecisionExtractor instances are single-use")
        self._used = True

        logger.debug("Parsing response body: %r", body[:2048])

        handler = _DecisionHandler(self)
        parser = xml.sax.make_parser()
        parser.setContentHandler(handler)
        parser.setProperty(xml.sax.handler.property_lexical_handler, handler)
        try:
            parser.feed(body)
            parser.close()
        except xml.sax.SAXParseException as e:
            raise self.on_error(e) from e

        return handler.decision


class _DecisionHandler(xml.sax.handler.ContentHandler):
    def __init__(self, extractor: DecisionExtractor) -> None:
        super().__init__()
        self._extractor = extractor
        self.decision: Optional[str] = None
        self._in_cdata = False

    def startElement(self, name, attrs):  # noqa: N802
        self._extractor.on_open_tag(name)

    def characters(self, content):
        # CDATA content is reported separately, never as element text.
        if self._in_cdata:
            return
        self._extractor.on_text(content)

    def endDocument(self):  # noqa: N802
        self.decision = self._extractor.on_end()

    # Lexical events

    def startCDATA(self):  # noqa: N802
        self._in_cdata = True

    def endCDATA(self):  # noqa: N802
        self._in_cdata = False

    def comment(self, content):
        pass

    def startDTD(self, name, public_id, system_id):  # noqa: N802
        pass

    def endDTD(self):  # noqa: N802
        pass


def extract_decision(body: Union[str, bytes]) -> str:
    return DecisionExtractor().extract(body)
