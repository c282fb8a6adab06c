from typing import Any

from pydantic import ConfigDict, Field
from typing_extensions import Literal

from .base import Value


class StringValue(Value):
    """String, Url and ExternalId values share the ``string`` datavalue"""

    kind: Literal["string"] = Field(default="string", frozen=True)
    value: str
    datatype_uri: str = "http://wikiba.se/ontology#String"

    model_config = ConfigDict(frozen=True)

    def to_datavalue(self) -> dict[str, Any]:
        return {"value": self.value, "type": "string"}
