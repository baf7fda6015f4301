from __future__ import annotations

import pytest

from pep.access.errors import DecisionNotFound, MalformedResponse
from pep.access.extractor import DecisionExtractor, ExtractorState, extract_decision


def test_extracts_permit() -> None:
    assert extract_decision("<Response><Decision>Permit</Decision></Response>") == "Permit"


def test_extracts_from_bytes_with_xml_declaration() -> None:
    body = b'<?xml version="1.0" encoding="UTF-8"?>\n<Response>\n  <Result>\n    <Decision>Deny</Decision>\n  </Result>\n</Response>\n'
    assert extract_decision(body) == "Deny"


def test_tag_match_is_case_insensitive() -> None:
    assert extract_decision("<response><DECISION>Permit</DECISION></response>") == "Permit"


def test_value_is_trimmed() -> None:
    assert extract_decision("<Response><Decision> Permit \n</Decision></Response>") == "Permit"


def test_missing_decision_is_not_found() -> None:
    with pytest.raises(DecisionNotFound):
        extract_decision("<Response></Response>")


def test_empty_decision_is_not_found() -> None:
    with pytest.raises(DecisionNotFound):
        extract_decision("<Response><Decision></Decision><Status>ok</Status></Response>")


def test_decision_not_found_is_a_malformed_response() -> None:
    assert issubclass(DecisionNotFound, MalformedResponse)


def test_unbalanced_tags_are_malformed() -> None:
    ex = DecisionExtractor()
    with pytest.raises(MalformedResponse) as ei:
        ex.extract("<Response><Decision>Permit</Response>")
    assert not isinstance(ei.value, DecisionNotFound)
    assert ex.state == ExtractorState.FAILED


def test_empty_body_is_malformed() -> None:
    with pytest.raises(MalformedResponse):
        extract_decision(b"")


def test_last_open_tag_wins_for_nested_markup() -> None:
    # <Status> inside <Decision> turns capturing off; only "Per" is seen before it.
    body = "<Response><Decision>Per<Status>x</Status>mit</Decision></Response>"
    assert extract_decision(body) == "Per"


def test_text_after_decision_close_is_still_captured() -> None:
    body = "<Response><Decision>Permit</Decision> extra<Other/></Response>"
    assert extract_decision(body) == "Permit extra"


def test_accumulation_survives_reentering_decision() -> None:
    body = "<R><Decision>Per</Decision><Other>x</Other><Decision>mit</Decision></R>"
    assert extract_decision(body) == "Permit"


def test_state_machine_transitions() -> None:
    ex = DecisionExtractor()
    assert ex.state == ExtractorState.IDLE
    ex.on_open_tag("decision")
    assert ex.capturing is True
    ex.on_text("Deny")
    ex.on_open_tag("Obligations")
    assert ex.capturing is False
    ex.on_text("ignored")
    assert ex.on_end() == "Deny"
    assert ex.state == ExtractorState.DONE


def test_extractor_is_single_use() -> None:
    ex = DecisionExtractor()
    ex.extract("<Response><Decision>Permit</Decision></Response>")
    with pytest.raises(RuntimeError):
        ex.extract("<Response><Decision>Permit</Decision></Response>")


def test_cdata_decision_is_not_captured() -> None:
    with pytest.raises(DecisionNotFound):
        extract_decision("<Response><Decision><![CDATA[Permit]]></Decision></Response>")


def test_cdata_is_skipped_around_plain_text() -> None:
    body = "<Response><Decision>Per<![CDATA[ignored]]>mit</Decision></Response>"
    assert extract_decision(body) == "Permit"


def test_comments_and_doctype_are_not_captured() -> None:
    body = '<?xml version="1.0"?><!DOCTYPE Response><Response><Decision><!-- x -->Deny</Decision></Response>'
    assert extract_decision(body) == "Deny"
