"""Generic products (VMPs): the substance-and-strength view shared by equivalent brands."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

from sam_gateway.domain.entities.medication import Ingredient
from sam_gateway.domain.value_objects.multilingual_text import MultilingualText


@dataclass(frozen=True)
class GenericComponent:
    sequence_nr: int = 0
    name: Optional[str] = None
    ingredients: Tuple[Ingredient, ...] = field(default_factory=tuple)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "sequenceNr": self.sequence_nr,
            "name": self.name,
            "ingredients": [ingredient.to_dict() for ingredient in self.ingredients],
        }


@dataclass(frozen=True)
class VmpGroupReference:
    code: str
    name: str
    name_language: Optional[str] = None
    names: Optional[MultilingualText] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "name": self.name,
            "nameLanguage": self.name_language,
            "allNames": self.names,
        }


@dataclass(frozen=True)
class GenericProduct:
    vmp_code: str
    name: str
    name_language: Optional[str] = None
    name_is_fallback: bool = False
    names: Optional[MultilingualText] = None
    abbreviated_name: Optional[str] = None
    status: str = "AUTHORIZED"
    vtm_code: Optional[str] = None
    vmp_group: Optional[VmpGroupReference] = None
    components: Tuple[GenericComponent, ...] = field(default_factory=tuple)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "vmpCode": self.vmp_code,
            "name": self.name,
            "nameLanguage": self.name_language,
            "isFallback": self.name_is_fallback,
            "allNames": self.names,
            "abbreviatedName": self.abbreviated_name,
            "status": self.status,
            "vtmCode": self.vtm_code,
            "vmpGroup": self.vmp_group.to_dict() if self.vmp_group else None,
            "components": [component.to_dict() for component in self.components],
        }
