import re
from typing import Any

from pydantic import ConfigDict, Field, field_validator
from typing_extensions import Literal

from .base import Value

AMOUNT_PATTERN = re.compile(r"^[+-]?(?:\d+(?:\.\d*)?|\.\d+)$")


class QuantityValue(Value):
    kind: Literal["quantity"] = Field(default="quantity", frozen=True)
    value: str
    datatype_uri: str = "http://wikiba.se/ontology#Quantity"
    unit: str = "1"

    model_config = ConfigDict(frozen=True)

    @field_validator("value")
    @classmethod
    def validate_amount(cls, v: str) -> str:
        """Signed decimal string with the digits exactly as entered"""
        v = v.strip()
        if not AMOUNT_PATTERN.match(v):
            raise ValueError(f"Quantity must be a valid number, got: {v}")
        if not (v.startswith("+") or v.startswith("-")):
            v = "+" + v
        return v

    @field_validator("unit")
    @classmethod
    def validate_unit(cls, v: str) -> str:
        if v.startswith("Q"):
            v = "http://www.wikidata.org/entity/" + v
        return v

    def to_datavalue(self) -> dict[str, Any]:
        return {
            "value": {"amount": self.value, "unit": self.unit},
            "type": "quantity",
        }
