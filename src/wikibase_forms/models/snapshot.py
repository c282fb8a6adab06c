from pydantic import BaseModel, ConfigDict, Field

from wikibase_forms.models.internal_representation.datatypes import Datatype


class ItemValue(BaseModel):
    id: str
    label: str | None = None

    model_config = ConfigDict(frozen=True)


class QualifierSnapshot(BaseModel):
    value: ItemValue | str
    datatype: Datatype

    model_config = ConfigDict(frozen=True)


class StatementSnapshot(BaseModel):
    value: ItemValue | str
    datatype: Datatype
    qualifiers: dict[str, QualifierSnapshot] | None = None
    statement_id: str | None = None

    model_config = ConfigDict(frozen=True)

    @property
    def value_id(self) -> str:
        """Item id for item values, the literal otherwise"""
        return self.value.id if isinstance(self.value, ItemValue) else self.value


class ExistingItemSnapshot(BaseModel):
    """Current state of an item being edited, as read from the query service"""

    label: str = ""
    description: str = ""
    properties: dict[str, list[StatementSnapshot]] = Field(default_factory=dict)

    model_config = ConfigDict(frozen=True)

    def statements(self, property_id: str) -> list[StatementSnapshot]:
        return self.properties.get(property_id, [])

    def statement_ids(self, property_id: str) -> list[str]:
        return [s.statement_id for s in self.statements(property_id) if s.statement_id]
