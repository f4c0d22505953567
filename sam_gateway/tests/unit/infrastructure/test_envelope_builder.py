from __future__ import annotations

from xml.etree import ElementTree

import pytest

from sam_gateway.constants import DICS_NS, SOAP_ENVELOPE_NS
from sam_gateway.domain.exceptions import InvalidParameterError
from sam_gateway.infrastructure.soap.envelope_builder import (
    FindAmpParams,
    FindChapterIVParams,
    FindCommentedClassificationParams,
    FindCompanyParams,
    FindLegislationTextParams,
    FindReimbursementParams,
    FindStandardDosageParams,
    FindVmpGroupParams,
    FindVmpParams,
    SamEnvelopeBuilder,
    escape_xml,
)


@pytest.fixture()
def builder(fixed_issue_time) -> SamEnvelopeBuilder:
    return SamEnvelopeBuilder(clock=fixed_issue_time)


def _request(envelope: str, operation: str) -> ElementTree.Element:
    root = ElementTree.fromstring(envelope)
    body = root.find(f"{{{SOAP_ENVELOPE_NS}}}Body")
    assert body is not None
    request = body.find(f"{{{DICS_NS}}}{operation}Request")
    assert request is not None
    return request


def test_find_amp_by_name(builder: SamEnvelopeBuilder) -> None:
    envelope = builder.build("FindAmp", FindAmpParams(any_name_part="dafalgan"))

    request = _request(envelope, "FindAmp")
    assert request.get("IssueInstant") == "2026-10-19T08:30:15.123Z"
    assert request.get("SearchDate") is None
    assert "<FindByProduct><AnyNamePart>dafalgan</AnyNamePart></FindByProduct>" in envelope


def test_search_date_is_emitted_when_set(builder: SamEnvelopeBuilder) -> None:
    envelope = builder.build("FindAmp", FindAmpParams(cnk="0012345", search_date="2026-01-01"))

    request = _request(envelope, "FindAmp")
    assert request.get("SearchDate") == "2026-01-01"
    assert (
        "<FindByDmpp><DeliveryEnvironment>P</DeliveryEnvironment><Code>0012345</Code>"
        "<CodeType>CNK</CodeType></FindByDmpp>"
    ) in envelope


def test_unset_criteria_are_omitted(builder: SamEnvelopeBuilder) -> None:
    envelope = builder.build("FindAmp", FindAmpParams(amp_code="SAM000001-00", cnk="  "))

    assert "FindByDmpp" not in envelope
    assert "<Code>" not in envelope
    assert "<AmpCode>SAM000001-00</AmpCode>" in envelope


def test_free_text_is_escaped(builder: SamEnvelopeBuilder) -> None:
    envelope = builder.build("FindAmp", FindAmpParams(any_name_part='a<b>&"c\'</AnyNamePart>'))

    request = _request(envelope, "FindAmp")
    assert request.find("FindByProduct/AnyNamePart").text == 'a<b>&"c\'</AnyNamePart>'
    assert escape_xml("<&>") == "&lt;&amp;&gt;"


def test_company_filter_is_appended_last(builder: SamEnvelopeBuilder) -> None:
    envelope = builder.build("FindAmp", FindAmpParams(any_name_part="para", company_actor_nr="01995"))

    request = _request(envelope, "FindAmp")
    assert [child.tag for child in request] == ["FindByProduct", "FindByCompany"]


@pytest.mark.parametrize(
    "params",
    [
        FindAmpParams(ingredient="paracetamol", company_actor_nr="01995"),
        FindAmpParams(vmp_code="12345", company_actor_nr="01995"),
    ],
)
def test_company_filter_rejected_with_ingredient_or_vmp(builder: SamEnvelopeBuilder, params) -> None:
    with pytest.raises(InvalidParameterError) as excinfo:
        builder.build("FindAmp", params)

    assert excinfo.value.parameter == "company_actor_nr"
    assert excinfo.value.code == "INVALID_PARAMETER"


@pytest.mark.parametrize("language", ["es", "EN", "", None])
def test_unsupported_language_is_rejected(builder: SamEnvelopeBuilder, language) -> None:
    with pytest.raises(InvalidParameterError) as excinfo:
        builder.build("FindAmp", FindAmpParams(any_name_part="para", language=language))

    assert excinfo.value.parameter == "language"


def test_missing_criteria_is_rejected(builder: SamEnvelopeBuilder) -> None:
    with pytest.raises(InvalidParameterError) as excinfo:
        builder.build("FindCommentedClassification", FindCommentedClassificationParams())

    assert excinfo.value.parameter == "criteria"


def test_unknown_operation_is_rejected(builder: SamEnvelopeBuilder) -> None:
    with pytest.raises(InvalidParameterError):
        builder.build("FindEverything", FindAmpParams(any_name_part="x"))


def test_mismatched_params_type_is_rejected(builder: SamEnvelopeBuilder) -> None:
    with pytest.raises(InvalidParameterError) as excinfo:
        builder.build("FindCompany", FindAmpParams(any_name_part="x"))

    assert excinfo.value.parameter == "params"


def test_find_company_vat_number(builder: SamEnvelopeBuilder) -> None:
    envelope = builder.build("FindCompany", FindCompanyParams(vat_nr="BE 0403 053 608"))

    request = _request(envelope, "FindCompany")
    vat = request.find("VatNr")
    assert vat.get("CountryCode") == "BE"
    assert vat.text == "0403053608"


def test_find_company_short_vat_number_rejected(builder: SamEnvelopeBuilder) -> None:
    with pytest.raises(InvalidParameterError):
        builder.build("FindCompany", FindCompanyParams(vat_nr="BE"))


def test_find_company_by_actor_nr(builder: SamEnvelopeBuilder) -> None:
    envelope = builder.build("FindCompany", FindCompanyParams(company_actor_nr="01995"))

    request = _request(envelope, "FindCompany")
    assert request.find("CompanyActorNr").text == "01995"


def test_find_commented_classification_by_code(builder: SamEnvelopeBuilder) -> None:
    envelope = builder.build(
        "FindCommentedClassification",
        FindCommentedClassificationParams(code="A01AA01", any_name_part="ignored"),
    )

    request = _request(envelope, "FindCommentedClassification")
    criterion = request.find("FindByCommentedClassification")
    assert criterion.find("CommentedClassificationCode").text == "A01AA01"
    assert criterion.find("AnyNamePart") is None


def test_prescription_group_operations(builder: SamEnvelopeBuilder) -> None:
    dosage = builder.build("FindStandardDosage", FindStandardDosageParams(vmp_group_code="24901"))
    group = builder.build("FindVmpGroup", FindVmpGroupParams(any_name_part="ibuprofen"))

    assert "<GenericPrescriptionGroupCode>24901</GenericPrescriptionGroupCode>" in dosage
    assert "<FindByGenericPrescriptionGroup><AnyNamePart>ibuprofen</AnyNamePart>" in group


def test_find_reimbursement_by_package(builder: SamEnvelopeBuilder) -> None:
    envelope = builder.build("FindReimbursement", FindReimbursementParams(ampp_code="0012345-01"))

    assert "<FindByPackage><CtiExtendedCode>0012345-01</CtiExtendedCode></FindByPackage>" in envelope


def test_find_chapter_iv_requires_both_names(builder: SamEnvelopeBuilder) -> None:
    envelope = builder.build(
        "FindChapterIVParagraph",
        FindChapterIVParams(chapter_name="IV", paragraph_name="10680000"),
    )
    assert "<ChapterName>IV</ChapterName><ParagraphName>10680000</ParagraphName>" in envelope

    with pytest.raises(InvalidParameterError):
        builder.build("FindChapterIVParagraph", FindChapterIVParams(chapter_name="IV"))


@pytest.mark.parametrize("text", ["para\x01cetamol", "ibu\x0bprofen", "\x00", "dafal\x1fgan", "\x1fdafalgan"])
def test_control_characters_are_rejected(builder: SamEnvelopeBuilder, text: str) -> None:
    with pytest.raises(InvalidParameterError) as excinfo:
        builder.build("FindAmp", FindAmpParams(any_name_part=text))

    assert excinfo.value.parameter == "any_name_part"


def test_tabs_and_newlines_stay_well_formed(builder: SamEnvelopeBuilder) -> None:
    envelope = builder.build("FindAmp", FindAmpParams(any_name_part="para\tceta\nmol"))

    request = _request(envelope, "FindAmp")
    assert request.find("FindByProduct/AnyNamePart").text == "para\tceta\nmol"


@pytest.mark.parametrize(
    "operation, params, parameter",
    [
        ("FindAmp", FindAmpParams(cnk="12345"), "cnk"),
        ("FindAmp", FindAmpParams(cnk="00123456"), "cnk"),
        ("FindAmp", FindAmpParams(any_name_part="pa"), "any_name_part"),
        ("FindAmp", FindAmpParams(any_name_part="para", company_actor_nr="000ab"), "company_actor_nr"),
        ("FindAmp", FindAmpParams(vmp_code="12a"), "vmp_code"),
        ("FindReimbursement", FindReimbursementParams(cnk="abcdefg"), "cnk"),
        ("FindChapterIVParagraph", FindChapterIVParams(cnk="1"), "cnk"),
        ("FindCompany", FindCompanyParams(company_actor_nr="123456"), "company_actor_nr"),
        ("FindCompany", FindCompanyParams(any_name_part="uc"), "any_name_part"),
        ("FindCommentedClassification", FindCommentedClassificationParams(code="1A"), "code"),
        ("FindCommentedClassification", FindCommentedClassificationParams(code="A01-"), "code"),
        ("FindCommentedClassification", FindCommentedClassificationParams(any_name_part="a"), "any_name_part"),
        ("FindStandardDosage", FindStandardDosageParams(vmp_group_code="24901x"), "vmp_group_code"),
        ("FindVmpGroup", FindVmpGroupParams(vmp_group_code="abc"), "vmp_group_code"),
        ("FindVmp", FindVmpParams(vtm_code="x1"), "vtm_code"),
        ("FindLegislationText", FindLegislationTextParams(cnk="123"), "cnk"),
    ],
)
def test_malformed_identifiers_are_rejected(builder: SamEnvelopeBuilder, operation, params, parameter) -> None:
    with pytest.raises(InvalidParameterError) as excinfo:
        builder.build(operation, params)

    assert excinfo.value.parameter == parameter


def test_atc_name_search_accepts_two_characters(builder: SamEnvelopeBuilder) -> None:
    envelope = builder.build("FindCommentedClassification", FindCommentedClassificationParams(any_name_part="ab"))

    assert "<AnyNamePart>ab</AnyNamePart>" in envelope


def test_find_vmp_criteria_precedence(builder: SamEnvelopeBuilder) -> None:
    by_group = builder.build("FindVmp", FindVmpParams(vmp_group_code="24901", any_name_part="ibuprofen"))
    by_code = builder.build("FindVmp", FindVmpParams(vmp_code="12345", ingredient="ibuprofen"))
    by_moiety = builder.build("FindVmp", FindVmpParams(vtm_code="678"))

    assert [child.tag for child in _request(by_group, "FindVmp")] == ["FindByGenericPrescriptionGroup"]
    assert "<FindByProduct><VmpCode>12345</VmpCode></FindByProduct>" in by_code
    assert "SubstanceName" not in by_code
    assert "<FindByTherapeuticMoiety><TherapeuticMoietyCode>678</TherapeuticMoietyCode>" in by_moiety


def test_find_legislation_text_variants(builder: SamEnvelopeBuilder) -> None:
    all_bases = builder.build("FindLegislationText", FindLegislationTextParams(all_legal_bases=True, cnk="0012345"))
    by_cnk = builder.build("FindLegislationText", FindLegislationTextParams(cnk="0012345"))
    by_path = builder.build(
        "FindLegislationText",
        FindLegislationTextParams(legal_reference_path="RD20180201-IV-10680000"),
    )

    assert [child.tag for child in _request(all_bases, "FindLegislationText")] == ["FindLegalBases"]
    assert "<FindLegalBases/>" in all_bases
    assert "<Code>0012345</Code>" in by_cnk
    assert "<FindByLegalReferencePath>RD20180201-IV-10680000</FindByLegalReferencePath>" in by_path

    with pytest.raises(InvalidParameterError):
        builder.build("FindLegislationText", FindLegislationTextParams())
