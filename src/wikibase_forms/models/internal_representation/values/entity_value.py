from typing import Any

from pydantic import ConfigDict, Field, field_validator
from typing_extensions import Literal

from .base import Value
from ..entity_ids import ITEM_ID_PATTERN


class EntityValue(Value):
    kind: Literal["entity"] = Field(default="entity", frozen=True)
    value: str
    datatype_uri: str = "http://wikiba.se/ontology#WikibaseItem"

    model_config = ConfigDict(frozen=True)

    @field_validator("value")
    @classmethod
    def validate_item_id(cls, v: str) -> str:
        v = v.strip()
        if not ITEM_ID_PATTERN.match(v):
            raise ValueError(f"Item value must be an item id like Q123, got: {v}")
        return v

    def to_datavalue(self) -> dict[str, Any]:
        return {
            "value": {
                "entity-type": "item",
                "numeric-id": int(self.value[1:]),
                "id": self.value,
            },
            "type": "wikibase-entityid",
        }
