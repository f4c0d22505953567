"""SOAP envelope builder for the SAM v2 DICS query operations.

Builds the request XML for one operation from a typed parameter struct.
Optional criteria are left out entirely when unset and every user supplied
value is XML-escaped. Identifiers are checked against their upstream format
and text that XML 1.0 cannot carry is rejected before anything is built.
"""
from __future__ import annotations

import logging
import re
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Pattern, Tuple, Union

from sam_gateway.constants import (
    DICS_NS,
    MIN_ATC_QUERY_LENGTH,
    MIN_NAME_QUERY_LENGTH,
    SOAP_ENVELOPE_NS,
)
from sam_gateway.domain.exceptions import InvalidParameterError
from sam_gateway.domain.value_objects.language import (
    DEFAULT_LANGUAGE,
    SUPPORTED_LANGUAGE_CODES,
    is_supported_language,
)
from sam_gateway.infrastructure.soap.operations import (
    FIND_AMP,
    FIND_CHAPTER_IV_PARAGRAPH,
    FIND_COMMENTED_CLASSIFICATION,
    FIND_COMPANY,
    FIND_LEGISLATION_TEXT,
    FIND_REIMBURSEMENT,
    FIND_STANDARD_DOSAGE,
    FIND_VMP,
    FIND_VMP_GROUP,
    get_operation,
)

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]

# Control characters outside tab, LF and CR are not allowed anywhere in XML 1.0.
_XML_ILLEGAL_CHARS = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f]")

CNK_PATTERN = re.compile(r"\d{7}", re.ASCII)
ACTOR_NR_PATTERN = re.compile(r"\d{1,5}", re.ASCII)
ATC_CODE_PATTERN = re.compile(r"[A-Z][0-9A-Z]*")
NUMERIC_CODE_PATTERN = re.compile(r"\d+", re.ASCII)


class _SearchParams:
    """Shared behaviour of the parameter structs."""

    def cache_fields(self) -> Dict[str, Any]:
        """Parameters that reach the envelope; ``language`` only affects text resolution."""
        values = asdict(self)  # type: ignore[call-overload]
        values.pop("language", None)
        return values


@dataclass(frozen=True)
class FindAmpParams(_SearchParams):
    any_name_part: Optional[str] = None
    cnk: Optional[str] = None
    amp_code: Optional[str] = None
    ingredient: Optional[str] = None
    vmp_code: Optional[str] = None
    company_actor_nr: Optional[str] = None
    language: str = DEFAULT_LANGUAGE.value
    search_date: Optional[str] = None


@dataclass(frozen=True)
class FindVmpParams(_SearchParams):
    vmp_group_code: Optional[str] = None
    any_name_part: Optional[str] = None
    vmp_code: Optional[str] = None
    vtm_code: Optional[str] = None
    ingredient: Optional[str] = None
    language: str = DEFAULT_LANGUAGE.value
    search_date: Optional[str] = None


@dataclass(frozen=True)
class FindVmpGroupParams(_SearchParams):
    vmp_group_code: Optional[str] = None
    any_name_part: Optional[str] = None
    language: str = DEFAULT_LANGUAGE.value
    search_date: Optional[str] = None


@dataclass(frozen=True)
class FindReimbursementParams(_SearchParams):
    cnk: Optional[str] = None
    ampp_code: Optional[str] = None
    language: str = DEFAULT_LANGUAGE.value
    search_date: Optional[str] = None


@dataclass(frozen=True)
class FindCompanyParams(_SearchParams):
    company_actor_nr: Optional[str] = None
    any_name_part: Optional[str] = None
    vat_nr: Optional[str] = None
    language: str = DEFAULT_LANGUAGE.value


@dataclass(frozen=True)
class FindCommentedClassificationParams(_SearchParams):
    code: Optional[str] = None
    any_name_part: Optional[str] = None
    language: str = DEFAULT_LANGUAGE.value


@dataclass(frozen=True)
class FindStandardDosageParams(_SearchParams):
    vmp_group_code: Optional[str] = None
    any_name_part: Optional[str] = None
    language: str = DEFAULT_LANGUAGE.value
    search_date: Optional[str] = None


@dataclass(frozen=True)
class FindChapterIVParams(_SearchParams):
    cnk: Optional[str] = None
    chapter_name: Optional[str] = None
    paragraph_name: Optional[str] = None
    legal_reference_path: Optional[str] = None
    language: str = DEFAULT_LANGUAGE.value
    search_date: Optional[str] = None


@dataclass(frozen=True)
class FindLegislationTextParams(_SearchParams):
    cnk: Optional[str] = None
    legal_reference_path: Optional[str] = None
    all_legal_bases: bool = False
    language: str = DEFAULT_LANGUAGE.value
    search_date: Optional[str] = None


SearchParams = Union[
    FindAmpParams,
    FindVmpParams,
    FindVmpGroupParams,
    FindReimbursementParams,
    FindCompanyParams,
    FindCommentedClassificationParams,
    FindStandardDosageParams,
    FindChapterIVParams,
    FindLegislationTextParams,
]

# A criterion is an element name with either text content or nested criteria.
Criterion = Tuple[str, Union[str, List["Criterion"]]]


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def escape_xml(value: Any) -> str:
    """Escape the five XML special characters."""
    if value is None:
        return ""
    text = str(value)
    return (
        text.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
        .replace("'", "&apos;")
    )


def _clean(value: Optional[str], parameter: str) -> Optional[str]:
    """Strip ``value``; blank becomes ``None``.

    Raises:
        InvalidParameterError: The value holds a control character XML cannot carry.
    """
    if value is None:
        return None
    text = str(value)
    if _XML_ILLEGAL_CHARS.search(text):
        raise InvalidParameterError(parameter, f"{parameter} contains control characters that are not allowed")
    return text.strip() or None


def _check_format(value: Optional[str], pattern: Pattern[str], parameter: str, expected: str) -> None:
    if value is not None and not pattern.fullmatch(value):
        raise InvalidParameterError(parameter, f"{parameter} must be {expected}")


def _check_min_length(value: Optional[str], minimum: int, parameter: str) -> None:
    if value is not None and len(value) < minimum:
        raise InvalidParameterError(parameter, f"{parameter} must be at least {minimum} characters")


def _check_cnk(cnk: Optional[str]) -> None:
    _check_format(cnk, CNK_PATTERN, "cnk", "a 7-digit code")


def _dmpp_criterion(cnk: str) -> Criterion:
    # Child order is fixed by the upstream schema.
    return (
        "FindByDmpp",
        [("DeliveryEnvironment", "P"), ("Code", cnk), ("CodeType", "CNK")],
    )


class SamEnvelopeBuilder:
    """Builds SOAP 1.1 envelopes for registry requests.

    Args:
        clock: Returns the current time; used for the ``IssueInstant``
            attribute. Defaults to the UTC wall clock.
    """

    def __init__(self, clock: Optional[Clock] = None) -> None:
        self._clock = clock or _utc_now
        self._builders: Dict[str, Tuple[type, Callable[[Any], str]]] = {
            FIND_AMP.name: (FindAmpParams, self.build_find_amp),
            FIND_VMP.name: (FindVmpParams, self.build_find_vmp),
            FIND_VMP_GROUP.name: (FindVmpGroupParams, self.build_find_vmp_group),
            FIND_REIMBURSEMENT.name: (FindReimbursementParams, self.build_find_reimbursement),
            FIND_COMPANY.name: (FindCompanyParams, self.build_find_company),
            FIND_COMMENTED_CLASSIFICATION.name: (
                FindCommentedClassificationParams,
                self.build_find_commented_classification,
            ),
            FIND_STANDARD_DOSAGE.name: (FindStandardDosageParams, self.build_find_standard_dosage),
            FIND_CHAPTER_IV_PARAGRAPH.name: (FindChapterIVParams, self.build_find_chapter_iv),
            FIND_LEGISLATION_TEXT.name: (FindLegislationTextParams, self.build_find_legislation_text),
        }

    def build(self, operation: str, params: SearchParams) -> str:
        """Build the envelope for ``operation``.

        Raises:
            InvalidParameterError: Unknown operation or unusable parameters.
        """
        get_operation(operation)
        params_type, builder = self._builders[operation]
        if not isinstance(params, params_type):
            raise InvalidParameterError(
                "params",
                f"{operation} expects {params_type.__name__}, got {type(params).__name__}",
            )
        return builder(params)

    # ------------------------------------------------------------------
    # Operation builders
    # ------------------------------------------------------------------
    def build_find_amp(self, params: FindAmpParams) -> str:
        self._check_language(params.language)
        criteria: List[Criterion] = []
        combinable = True

        name_part = _clean(params.any_name_part, "any_name_part")
        cnk = _clean(params.cnk, "cnk")
        amp_code = _clean(params.amp_code, "amp_code")
        ingredient = _clean(params.ingredient, "ingredient")
        vmp_code = _clean(params.vmp_code, "vmp_code")
        company = _clean(params.company_actor_nr, "company_actor_nr")

        _check_min_length(name_part, MIN_NAME_QUERY_LENGTH, "any_name_part")
        _check_cnk(cnk)
        _check_format(vmp_code, NUMERIC_CODE_PATTERN, "vmp_code", "numeric")
        _check_format(company, ACTOR_NR_PATTERN, "company_actor_nr", "1 to 5 digits")

        if name_part:
            criteria.append(("FindByProduct", [("AnyNamePart", name_part)]))
        elif cnk:
            criteria.append(_dmpp_criterion(cnk))
        elif amp_code:
            criteria.append(("FindByProduct", [("AmpCode", amp_code)]))
        elif ingredient:
            criteria.append(("FindByIngredient", [("SubstanceName", ingredient)]))
            combinable = False
        elif vmp_code:
            criteria.append(("FindByVirtualProduct", [("VmpCode", vmp_code)]))
            combinable = False

        if company:
            if not combinable:
                raise InvalidParameterError(
                    "company_actor_nr",
                    "A company filter cannot be combined with an ingredient or VMP code search",
                )
            # Must be the last criterion.
            criteria.append(("FindByCompany", [("CompanyActorNr", company)]))

        self._require_criteria(FIND_AMP.name, criteria)
        return self._envelope(FIND_AMP.name, criteria, params.search_date)

    def build_find_vmp(self, params: FindVmpParams) -> str:
        self._check_language(params.language)
        group_code = _clean(params.vmp_group_code, "vmp_group_code")
        name_part = _clean(params.any_name_part, "any_name_part")
        vmp_code = _clean(params.vmp_code, "vmp_code")
        vtm_code = _clean(params.vtm_code, "vtm_code")
        ingredient = _clean(params.ingredient, "ingredient")

        _check_format(group_code, NUMERIC_CODE_PATTERN, "vmp_group_code", "numeric")
        _check_min_length(name_part, MIN_NAME_QUERY_LENGTH, "any_name_part")
        _check_format(vmp_code, NUMERIC_CODE_PATTERN, "vmp_code", "numeric")
        _check_format(vtm_code, NUMERIC_CODE_PATTERN, "vtm_code", "numeric")

        criteria: List[Criterion] = []
        if group_code:
            criteria.append(("FindByGenericPrescriptionGroup", [("GenericPrescriptionGroupCode", group_code)]))
        elif name_part:
            criteria.append(("FindByProduct", [("AnyNamePart", name_part)]))
        elif vmp_code:
            criteria.append(("FindByProduct", [("VmpCode", vmp_code)]))
        elif vtm_code:
            criteria.append(("FindByTherapeuticMoiety", [("TherapeuticMoietyCode", vtm_code)]))
        elif ingredient:
            criteria.append(("FindByIngredient", [("SubstanceName", ingredient)]))
        self._require_criteria(FIND_VMP.name, criteria)
        return self._envelope(FIND_VMP.name, criteria, params.search_date)

    def build_find_vmp_group(self, params: FindVmpGroupParams) -> str:
        self._check_language(params.language)
        criteria = self._prescription_group_criteria(params.vmp_group_code, params.any_name_part)
        self._require_criteria(FIND_VMP_GROUP.name, criteria)
        return self._envelope(FIND_VMP_GROUP.name, criteria, params.search_date)

    def build_find_reimbursement(self, params: FindReimbursementParams) -> str:
        self._check_language(params.language)
        criteria: List[Criterion] = []
        cnk = _clean(params.cnk, "cnk")
        ampp_code = _clean(params.ampp_code, "ampp_code")
        _check_cnk(cnk)
        if cnk:
            criteria.append(_dmpp_criterion(cnk))
        elif ampp_code:
            criteria.append(("FindByPackage", [("CtiExtendedCode", ampp_code)]))
        self._require_criteria(FIND_REIMBURSEMENT.name, criteria)
        return self._envelope(FIND_REIMBURSEMENT.name, criteria, params.search_date)

    def build_find_company(self, params: FindCompanyParams) -> str:
        self._check_language(params.language)
        criteria: List[Criterion] = []
        actor_nr = _clean(params.company_actor_nr, "company_actor_nr")
        name_part = _clean(params.any_name_part, "any_name_part")
        vat_nr = _clean(params.vat_nr, "vat_nr")

        _check_format(actor_nr, ACTOR_NR_PATTERN, "company_actor_nr", "1 to 5 digits")
        _check_min_length(name_part, MIN_NAME_QUERY_LENGTH, "any_name_part")

        # Criteria sit directly under the request element.
        if actor_nr:
            criteria.append(("CompanyActorNr", actor_nr))
        elif name_part:
            criteria.append(("AnyNamePart", name_part))
        elif vat_nr:
            vat_nr = vat_nr.replace(" ", "")
            if len(vat_nr) < 3:
                raise InvalidParameterError("vat_nr", "VAT number must include a country code and a number")
            country_code, number = vat_nr[:2], vat_nr[2:]
            return self._envelope(
                FIND_COMPANY.name,
                [],
                None,
                raw_body=f'<VatNr CountryCode="{escape_xml(country_code)}">{escape_xml(number)}</VatNr>',
            )

        self._require_criteria(FIND_COMPANY.name, criteria)
        return self._envelope(FIND_COMPANY.name, criteria, None)

    def build_find_commented_classification(self, params: FindCommentedClassificationParams) -> str:
        self._check_language(params.language)
        criteria: List[Criterion] = []
        code = _clean(params.code, "code")
        name_part = _clean(params.any_name_part, "any_name_part")
        _check_format(code, ATC_CODE_PATTERN, "code", "an ATC code such as A01AA01")
        _check_min_length(name_part, MIN_ATC_QUERY_LENGTH, "any_name_part")
        if code:
            criteria.append(("FindByCommentedClassification", [("CommentedClassificationCode", code)]))
        elif name_part:
            criteria.append(("FindByCommentedClassification", [("AnyNamePart", name_part)]))
        self._require_criteria(FIND_COMMENTED_CLASSIFICATION.name, criteria)
        return self._envelope(FIND_COMMENTED_CLASSIFICATION.name, criteria, None)

    def build_find_standard_dosage(self, params: FindStandardDosageParams) -> str:
        self._check_language(params.language)
        criteria = self._prescription_group_criteria(params.vmp_group_code, params.any_name_part)
        self._require_criteria(FIND_STANDARD_DOSAGE.name, criteria)
        return self._envelope(FIND_STANDARD_DOSAGE.name, criteria, params.search_date)

    def build_find_chapter_iv(self, params: FindChapterIVParams) -> str:
        self._check_language(params.language)
        criteria: List[Criterion] = []
        cnk = _clean(params.cnk, "cnk")
        chapter = _clean(params.chapter_name, "chapter_name")
        paragraph = _clean(params.paragraph_name, "paragraph_name")
        path = _clean(params.legal_reference_path, "legal_reference_path")
        _check_cnk(cnk)
        if cnk:
            criteria.append(_dmpp_criterion(cnk))
        elif chapter and paragraph:
            criteria.append(
                ("FindByParagraphName", [("ChapterName", chapter), ("ParagraphName", paragraph)])
            )
        elif path:
            criteria.append(("FindByLegalReferencePath", path))
        self._require_criteria(FIND_CHAPTER_IV_PARAGRAPH.name, criteria)
        return self._envelope(FIND_CHAPTER_IV_PARAGRAPH.name, criteria, params.search_date)

    def build_find_legislation_text(self, params: FindLegislationTextParams) -> str:
        self._check_language(params.language)
        criteria: List[Criterion] = []
        cnk = _clean(params.cnk, "cnk")
        path = _clean(params.legal_reference_path, "legal_reference_path")
        _check_cnk(cnk)
        if params.all_legal_bases:
            criteria.append(("FindLegalBases", []))
        elif cnk:
            criteria.append(_dmpp_criterion(cnk))
        elif path:
            criteria.append(("FindByLegalReferencePath", path))
        self._require_criteria(FIND_LEGISLATION_TEXT.name, criteria)
        return self._envelope(FIND_LEGISLATION_TEXT.name, criteria, params.search_date)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    @staticmethod
    def _prescription_group_criteria(group_code: Optional[str], name_part: Optional[str]) -> List[Criterion]:
        group_code = _clean(group_code, "vmp_group_code")
        name_part = _clean(name_part, "any_name_part")
        _check_format(group_code, NUMERIC_CODE_PATTERN, "vmp_group_code", "numeric")
        if group_code:
            return [("FindByGenericPrescriptionGroup", [("GenericPrescriptionGroupCode", group_code)])]
        if name_part:
            return [("FindByGenericPrescriptionGroup", [("AnyNamePart", name_part)])]
        return []

    @staticmethod
    def _check_language(language: Any) -> None:
        if not is_supported_language(language):
            raise InvalidParameterError(
                "language",
                f"Unsupported language '{language}'; expected one of {sorted(SUPPORTED_LANGUAGE_CODES)}",
            )

    @staticmethod
    def _require_criteria(operation: str, criteria: List[Criterion]) -> None:
        if not criteria:
            raise InvalidParameterError("criteria", f"{operation} requires at least one search criterion")

    def _issue_instant(self) -> str:
        now = self._clock().astimezone(timezone.utc)
        return now.strftime("%Y-%m-%dT%H:%M:%S.") + f"{now.microsecond // 1000:03d}Z"

    def _envelope(
        self,
        operation: str,
        criteria: List[Criterion],
        search_date: Optional[str],
        raw_body: Optional[str] = None,
    ) -> str:
        body = raw_body if raw_body is not None else "".join(self._serialize(item) for item in criteria)
        attributes = f'IssueInstant="{self._issue_instant()}"'
        search_date = _clean(search_date, "search_date")
        if search_date:
            attributes += f' SearchDate="{escape_xml(search_date)}"'

        logger.debug("Built %s envelope", operation, extra={"operation": operation})
        return f"""<?xml version="1.0" encoding="UTF-8"?>
<soap:Envelope xmlns:soap="{SOAP_ENVELOPE_NS}" xmlns:ns="{DICS_NS}">
  <soap:Header/>
  <soap:Body>
    <ns:{operation}Request {attributes}>{body}</ns:{operation}Request>
  </soap:Body>
</soap:Envelope>"""

    def _serialize(self, criterion: Criterion) -> str:
        name, value = criterion
        if isinstance(value, list):
            if not value:
                return f"<{name}/>"
            children = "".join(self._serialize(child) for child in value)
            return f"<{name}>{children}</{name}>"
        return f"<{name}>{escape_xml(value)}</{name}>"
