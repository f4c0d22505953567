"""SOAP response parser for SAM v2 DICS responses.

Turns the XML returned by the registry into transient ``RawRecord`` values
that the mapping layer converts into domain entities. Elements and
attributes are matched by local name so namespace prefixes never matter.
"""
from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Tuple, Union
from xml.etree import ElementTree

from sam_gateway.constants import NO_RESULTS_FAULT_CODES
from sam_gateway.domain.exceptions import MalformedResponseError, UpstreamFaultError
from sam_gateway.infrastructure.soap.operations import SamOperation, get_operation

logger = logging.getLogger(__name__)

# Elements that are lists even when they occur once.
ALWAYS_LIST_ELEMENTS = frozenset(
    {
        "Amp",
        "Ampp",
        "Dmpp",
        "Vmp",
        "Vtm",
        "Company",
        "AmpComponent",
        "AmppComponent",
        "VmpComponent",
        "RealActualIngredient",
        "VirtualIngredient",
        "ReimbursementContexts",
        "Copayment",
        "Text",
        "Atc",
        "CommentedClassification",
        "Paragraph",
        "Verse",
        "Exclusion",
        "StandardDosage",
        "ParameterBounds",
        "RouteOfAdministration",
        "AdditionalFields",
        "LegalBasis",
        "LegalReference",
        "LegalText",
        "FormalInterpretation",
    }
)

RawValue = Union[str, Dict[str, Any], List[Any]]


@dataclass(frozen=True)
class RawRecord(Mapping):
    """One record element of a response: its local tag and its field mapping.

    Attributes are keyed ``@Name``, the text of elements that also carry
    attributes or children is keyed ``#text``.
    """

    tag: str
    fields: Dict[str, Any] = field(default_factory=dict)

    def __getitem__(self, key: str) -> Any:
        return self.fields[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self.fields)

    def __len__(self) -> int:
        return len(self.fields)

    def attribute(self, name: str) -> Optional[str]:
        return self.fields.get(f"@{name}")


@dataclass(frozen=True)
class ParsedResponse:
    records: Tuple[RawRecord, ...] = ()
    search_date: Optional[str] = None
    sam_id: Optional[str] = None


def local_name(tag: str) -> str:
    """Strip a ``{namespace}`` qualifier from a tag or attribute name."""
    return tag.split("}")[-1] if "}" in tag else tag


class SamResponseParser:
    """Parses registry SOAP responses.

    Attributes:
        max_depth: Maximum element depth below a record that is converted.
            Deeper subtrees are dropped with a warning.
    """

    def __init__(self, max_depth: int = 32) -> None:
        self.max_depth = max_depth

    def parse(self, xml_text: Union[str, bytes], operation: Union[str, SamOperation]) -> ParsedResponse:
        """Parse a SOAP response for ``operation``.

        A "no results" business fault yields an empty record sequence.

        Raises:
            MalformedResponseError: Not XML, no SOAP body (``PARSE_ERROR``)
                or no response element for the operation (``NO_RESPONSE``).
            UpstreamFaultError: Any other SOAP fault.
        """
        if isinstance(operation, str):
            operation = get_operation(operation)

        if not xml_text:
            raise MalformedResponseError("Empty SOAP response")

        try:
            root = ElementTree.fromstring(xml_text)
        except ElementTree.ParseError as exc:
            logger.error("Error parsing SOAP XML for %s: %s", operation.name, exc)
            raise MalformedResponseError(f"Invalid XML: {exc}", cause=exc) from exc

        body = self._find_body(root)
        if body is None:
            raise MalformedResponseError("Invalid SOAP response: no Body element")

        fault = self._find_child(body, "Fault")
        if fault is not None:
            return self._handle_fault(fault, operation)

        response = self._find_child(body, operation.response_element)
        if response is None:
            raise MalformedResponseError(
                f"No {operation.response_element} found",
                code="NO_RESPONSE",
            )

        records: List[RawRecord] = []
        for child in response:
            if local_name(child.tag) != operation.record_element:
                continue
            record = self._to_record(child)
            if operation.nested_records:
                records.extend(self._flatten(record, operation.record_element))
            else:
                records.append(record)

        attributes = {local_name(key): value for key, value in response.attrib.items()}
        return ParsedResponse(
            records=tuple(records),
            search_date=attributes.get("SearchDate"),
            sam_id=attributes.get("SamId"),
        )

    # ------------------------------------------------------------------
    # Envelope navigation
    # ------------------------------------------------------------------
    def _find_body(self, root: ElementTree.Element) -> Optional[ElementTree.Element]:
        if local_name(root.tag) != "Envelope":
            return None
        return self._find_child(root, "Body")

    @staticmethod
    def _find_child(elem: ElementTree.Element, name: str) -> Optional[ElementTree.Element]:
        for child in elem:
            if local_name(child.tag) == name:
                return child
        return None

    @staticmethod
    def _find_descendant_text(elem: ElementTree.Element, name: str) -> Optional[str]:
        for child in elem.iter():
            if local_name(child.tag) == name and child.text and child.text.strip():
                return child.text.strip()
        return None

    def _handle_fault(self, fault: ElementTree.Element, operation: SamOperation) -> ParsedResponse:
        fault_code = None
        message = None
        business_error = next(
            (elem for elem in fault.iter() if local_name(elem.tag) == "BusinessError"),
            None,
        )
        if business_error is not None:
            fault_code = self._find_descendant_text(business_error, "Code")
            message = self._find_descendant_text(business_error, "Message")
        if not message:
            message = self._find_descendant_text(fault, "faultstring") or "Unknown SOAP fault"

        if fault_code in NO_RESULTS_FAULT_CODES:
            logger.debug(
                "%s returned no results (business code %s)",
                operation.name,
                fault_code,
                extra={"operation": operation.name, "fault_code": fault_code},
            )
            return ParsedResponse()

        logger.warning(
            "SOAP fault from %s: %s",
            operation.name,
            message,
            extra={"operation": operation.name, "fault_code": fault_code},
        )
        raise UpstreamFaultError(message, fault_code=fault_code)

    # ------------------------------------------------------------------
    # Element conversion
    # ------------------------------------------------------------------
    def _to_record(self, elem: ElementTree.Element) -> RawRecord:
        value = self._element_value(elem, 0)
        if isinstance(value, dict):
            return RawRecord(tag=local_name(elem.tag), fields=value)
        return RawRecord(tag=local_name(elem.tag), fields={"#text": value} if value else {})

    def _element_value(self, elem: ElementTree.Element, current_depth: int) -> RawValue:
        attributes = {f"@{local_name(key)}": value for key, value in elem.attrib.items()}
        children = list(elem)
        text = (elem.text or "").strip()

        if not attributes and not children:
            return text

        result: Dict[str, Any] = dict(attributes)
        if children and current_depth >= self.max_depth:
            logger.warning(
                "Max parsing depth (%s) reached. Truncating at element: %s",
                self.max_depth,
                local_name(elem.tag),
            )
            children = []

        for child in children:
            tag = local_name(child.tag)
            value = self._element_value(child, current_depth + 1)
            if tag in ALWAYS_LIST_ELEMENTS:
                result.setdefault(tag, []).append(value)
            elif tag in result:
                if not isinstance(result[tag], list):
                    result[tag] = [result[tag]]
                result[tag].append(value)
            else:
                result[tag] = value

        if text:
            result["#text"] = text
        return result

    def _flatten(self, record: RawRecord, element: str) -> List[RawRecord]:
        """Depth-first flattening of nested records, parent before children."""
        fields = dict(record.fields)
        nested = fields.pop(element, None) or []
        flattened = [RawRecord(tag=record.tag, fields=fields)]
        for child in nested:
            if isinstance(child, dict):
                flattened.extend(self._flatten(RawRecord(tag=element, fields=child), element))
        return flattened
