from pydantic import BaseModel, ConfigDict, Field

from wikibase_forms.models.internal_representation.datatypes import Datatype


class CoordinatesInput(BaseModel):
    latitude: str
    longitude: str

    model_config = ConfigDict(frozen=True)


class MonolingualInput(BaseModel):
    text: str
    language: str = "en"

    model_config = ConfigDict(frozen=True)


FieldValue = str | CoordinatesInput | MonolingualInput


class CollectedQualifier(BaseModel):
    value: FieldValue
    datatype: Datatype

    model_config = ConfigDict(frozen=True)


class CollectedStatement(BaseModel):
    value: FieldValue
    qualifiers: dict[str, CollectedQualifier] | None = None

    model_config = ConfigDict(frozen=True)


class FormData(BaseModel):
    """Submitted values, as entered, with empty fields left out"""

    label: str = ""
    description: str = ""
    properties: dict[str, list[CollectedStatement]] = Field(default_factory=dict)

    model_config = ConfigDict(frozen=True)
