from enum import Enum
from typing import Iterable, Mapping

from pydantic import BaseModel, ConfigDict, Field, model_validator

from wikibase_forms.models.internal_representation.datatypes import (
    Datatype,
    RenderedKind,
)


class FormMode(str, Enum):
    CREATE = "create"
    EDIT = "edit"


class ValueOption(BaseModel):
    """An existing entity offered as a value for an item-typed field"""

    id: str
    label: str
    types: list[str] = Field(default_factory=list, description="Instance-of ids of the option")

    model_config = ConfigDict(frozen=True)


class QualifierDescriptor(BaseModel):
    id: str
    label: str
    datatype: Datatype
    values: list[ValueOption] | None = None

    model_config = ConfigDict(frozen=True)


class BasicField(BaseModel):
    id: str
    label: str
    rendered_kind: RenderedKind
    required: bool = False

    model_config = ConfigDict(frozen=True)


LABEL_FIELD = BasicField(id="label", label="Name", rendered_kind=RenderedKind.TEXT, required=True)
DESCRIPTION_FIELD = BasicField(
    id="description", label="Description", rendered_kind=RenderedKind.TEXTAREA
)


def applicable_qualifiers(
    qualifier_map: Mapping[str, Iterable[str]],
    qualifiers: list[QualifierDescriptor],
    options: list[ValueOption],
    value: str,
    value_types: list[str] | None = None,
) -> list[str]:
    """Qualifier ids applicable once ``value`` is picked as main value.

    The map is consulted for the literal value and for every type the value
    is an instance of. When no types are passed, the types known for the
    matching dropdown option are used. Result keeps the order of
    ``qualifiers``.
    """
    if not value:
        return []
    if value_types is None:
        option = next((o for o in options if o.id == value), None)
        value_types = list(option.types) if option else []

    applicable: set[str] = set(qualifier_map.get(value, ()))
    for value_type in value_types:
        applicable |= set(qualifier_map.get(value_type, ()))

    return [q.id for q in qualifiers if q.id in applicable]


class PropertyDescriptor(BaseModel):
    id: str
    label: str
    description: str = ""
    datatype: Datatype
    rendered_kind: RenderedKind
    required: bool = False
    values: list[ValueOption] | None = None
    qualifiers: list[QualifierDescriptor] | None = None
    qualifier_map: dict[str, frozenset[str]] = Field(
        default_factory=dict,
        description="Main value or main-value type -> applicable qualifier ids",
    )

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def validate_qualifier_map(self) -> "PropertyDescriptor":
        known = {qualifier.id for qualifier in self.qualifiers or []}
        for key, qualifier_ids in self.qualifier_map.items():
            dangling = set(qualifier_ids) - known
            if dangling:
                raise ValueError(
                    f"Qualifier map of {self.id} references unknown qualifiers "
                    f"{sorted(dangling)} under key {key}"
                )
        return self

    @property
    def has_qualifiers(self) -> bool:
        return bool(self.qualifiers)

    def qualifier(self, qualifier_id: str) -> QualifierDescriptor | None:
        for qualifier in self.qualifiers or []:
            if qualifier.id == qualifier_id:
                return qualifier
        return None

    def option(self, value_id: str) -> ValueOption | None:
        for option in self.values or []:
            if option.id == value_id:
                return option
        return None

    def qualifiers_for(self, value: str, value_types: list[str] | None = None) -> list[str]:
        return applicable_qualifiers(
            self.qualifier_map, self.qualifiers or [], self.values or [], value, value_types
        )


class Schema(BaseModel):
    basic: list[BasicField] = Field(default_factory=lambda: [LABEL_FIELD, DESCRIPTION_FIELD])
    properties: list[PropertyDescriptor] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def validate_unique_properties(self) -> "Schema":
        seen = set()
        for prop in self.properties:
            if prop.id in seen:
                raise ValueError(f"Duplicate property {prop.id} in schema")
            seen.add(prop.id)
        return self

    def get_property(self, property_id: str) -> PropertyDescriptor | None:
        for prop in self.properties:
            if prop.id == property_id:
                return prop
        return None

    @property
    def property_ids(self) -> list[str]:
        return [prop.id for prop in self.properties]
