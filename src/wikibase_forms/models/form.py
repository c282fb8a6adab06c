from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from wikibase_forms.models.internal_representation.datatypes import (
    Datatype,
    RenderedKind,
)
from wikibase_forms.models.schema import (
    FormMode,
    QualifierDescriptor,
    ValueOption,
    applicable_qualifiers,
)


class GroupState(str, Enum):
    EMPTY = "empty"
    QUALIFIERS_REVEALED = "qualifiers-revealed"


class ValueGroup(BaseModel):
    """One main value of a repeatable field plus its conditional qualifiers"""

    index: int
    main_value: Any = None
    state: GroupState = GroupState.EMPTY
    revealed_qualifiers: list[str] = Field(default_factory=list)
    qualifier_values: dict[str, Any] = Field(default_factory=dict)
    removable: bool = False
    statement_id: str | None = None

    model_config = ConfigDict(frozen=True)


class FormField(BaseModel):
    id: str
    label: str
    description: str = ""
    widget: RenderedKind
    datatype: Datatype | None = None
    required: bool = False
    initial: Any = None
    options: list[ValueOption] | None = None
    repeatable: bool = False
    groups: list[ValueGroup] = Field(default_factory=list)
    qualifiers: list[QualifierDescriptor] = Field(default_factory=list)
    qualifier_widgets: dict[str, RenderedKind] = Field(default_factory=dict)
    qualifier_map: dict[str, list[str]] = Field(default_factory=dict)

    model_config = ConfigDict(frozen=True)

    @property
    def is_property(self) -> bool:
        return self.datatype is not None

    def applicable_qualifiers(self, value: Any, value_types: list[str] | None = None) -> list[str]:
        if not isinstance(value, str):
            return []
        return applicable_qualifiers(
            self.qualifier_map, self.qualifiers, self.options or [], value, value_types
        )

    def get_group(self, index: int) -> ValueGroup | None:
        for group in self.groups:
            if group.index == index:
                return group
        return None


class FormSection(BaseModel):
    title: str
    fields: list[FormField] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)


class FormDescription(BaseModel):
    mode: FormMode
    title: str
    submit_label: str
    sections: list[FormSection] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)

    def get_field(self, field_id: str) -> FormField | None:
        for section in self.sections:
            for form_field in section.fields:
                if form_field.id == field_id:
                    return form_field
        return None

    @property
    def property_fields(self) -> list[FormField]:
        return [f for section in self.sections for f in section.fields if f.is_property]
