from __future__ import annotations

import pytest

from sam_gateway.domain.exceptions import MalformedResponseError, UpstreamFaultError
from sam_gateway.infrastructure.soap.operations import FIND_AMP
from sam_gateway.infrastructure.soap.response_parser import SamResponseParser


def _envelope(body: str) -> str:
    return (
        '<soap:Envelope xmlns:soap="http://schemas.xmlsoap.org/soap/envelope/">'
        f"<soap:Body>{body}</soap:Body></soap:Envelope>"
    )


@pytest.fixture()
def parser() -> SamResponseParser:
    return SamResponseParser()


def test_parses_records_and_metadata(parser: SamResponseParser, load_soap_fixture) -> None:
    parsed = parser.parse(load_soap_fixture("find_amp.xml"), "FindAmp")

    assert parsed.search_date == "2026-10-19"
    assert parsed.sam_id == "SAM-0042"
    assert len(parsed.records) == 1

    record = parsed.records[0]
    assert record.tag == "Amp"
    assert record.attribute("Code") == "SAM000001-00"
    assert record["OfficialName"] == "Dafalgan 500 mg tabl."
    assert isinstance(record["Ampp"], list)
    assert [dmpp["@DeliveryEnvironment"] for dmpp in record["Ampp"][0]["Dmpp"]] == ["H", "P"]
    assert record["Name"]["Text"][0] == {"@lang": "fr", "#text": "Dafalgan comprimés"}


def test_accepts_operation_object(parser: SamResponseParser, load_soap_fixture) -> None:
    parsed = parser.parse(load_soap_fixture("find_amp.xml"), FIND_AMP)

    assert len(parsed.records) == 1


def test_single_always_list_element_is_a_list(parser: SamResponseParser) -> None:
    xml = _envelope(
        '<FindReimbursementResponse><ReimbursementContexts Code="0012345">'
        '<Copayment RegimeType="1"><FeeAmount>2.5</FeeAmount></Copayment>'
        "</ReimbursementContexts></FindReimbursementResponse>"
    )

    record = parser.parse(xml, "FindReimbursement").records[0]

    assert record["Copayment"] == [{"@RegimeType": "1", "FeeAmount": "2.5"}]


def test_repeated_elements_become_lists(parser: SamResponseParser) -> None:
    xml = _envelope(
        '<FindVmpGroupResponse><VmpGroup Code="1">'
        '<Name lang="en">One</Name><Name lang="nl">Een</Name>'
        "</VmpGroup></FindVmpGroupResponse>"
    )

    record = parser.parse(xml, "FindVmpGroup").records[0]

    assert record["Name"] == [{"@lang": "en", "#text": "One"}, {"@lang": "nl", "#text": "Een"}]


def test_nested_classifications_are_flattened(parser: SamResponseParser, load_soap_fixture) -> None:
    parsed = parser.parse(load_soap_fixture("find_commented_classification.xml"), "FindCommentedClassification")

    codes = [record.attribute("Code") for record in parsed.records]
    assert codes == ["A01", "A01A", "A01AA", "A01AA01", "A01B"]
    assert all("CommentedClassification" not in record for record in parsed.records)


def test_no_results_fault_is_empty(parser: SamResponseParser, load_soap_fixture) -> None:
    parsed = parser.parse(load_soap_fixture("business_fault_no_results.xml"), "FindAmp")

    assert parsed.records == ()
    assert parsed.search_date is None


def test_other_business_fault_raises(parser: SamResponseParser, load_soap_fixture) -> None:
    with pytest.raises(UpstreamFaultError) as excinfo:
        parser.parse(load_soap_fixture("business_fault_error.xml"), "FindAmp")

    assert excinfo.value.fault_code == "2001"
    assert excinfo.value.code == "SOAP_FAULT"
    assert "Invalid search criteria" in excinfo.value.message


def test_plain_fault_uses_faultstring(parser: SamResponseParser) -> None:
    xml = _envelope("<soap:Fault><faultcode>soap:Server</faultcode><faultstring>Boom</faultstring></soap:Fault>")

    with pytest.raises(UpstreamFaultError) as excinfo:
        parser.parse(xml, "FindAmp")

    assert excinfo.value.message == "Boom"
    assert excinfo.value.fault_code is None


@pytest.mark.parametrize("xml", ["", "not xml", "<root><unclosed></root>"])
def test_unreadable_input_is_a_parse_error(parser: SamResponseParser, xml: str) -> None:
    with pytest.raises(MalformedResponseError) as excinfo:
        parser.parse(xml, "FindAmp")

    assert excinfo.value.code == "PARSE_ERROR"


def test_missing_body_is_a_parse_error(parser: SamResponseParser) -> None:
    with pytest.raises(MalformedResponseError) as excinfo:
        parser.parse("<Envelope><Header/></Envelope>", "FindAmp")

    assert excinfo.value.code == "PARSE_ERROR"


def test_missing_response_element(parser: SamResponseParser) -> None:
    xml = _envelope("<FindVmpGroupResponse/>")

    with pytest.raises(MalformedResponseError) as excinfo:
        parser.parse(xml, "FindAmp")

    assert excinfo.value.code == "NO_RESPONSE"


def test_empty_response_element_has_no_records(parser: SamResponseParser) -> None:
    parsed = parser.parse(_envelope('<FindAmpResponse SearchDate="2026-10-19"/>'), "FindAmp")

    assert parsed.records == ()
    assert parsed.search_date == "2026-10-19"


def test_depth_limit_truncates_subtree(caplog) -> None:
    parser = SamResponseParser(max_depth=1)
    xml = _envelope(
        '<FindAmpResponse><Amp Code="X"><Ampp Code="Y"><Dmpp Code="Z"/></Ampp></Amp></FindAmpResponse>'
    )

    record = parser.parse(xml, "FindAmp").records[0]

    assert record["Ampp"] == [{"@Code": "Y"}]
    assert "Max parsing depth" in caplog.text
