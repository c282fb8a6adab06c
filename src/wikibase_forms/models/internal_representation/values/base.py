from typing import Any, Literal

from pydantic import BaseModel, ConfigDict


class Value(BaseModel):
    kind: Literal[
        "entity",
        "string",
        "time",
        "quantity",
        "globe",
        "monolingual",
    ]
    value: Any
    datatype_uri: str

    model_config = ConfigDict(frozen=True)

    def to_datavalue(self) -> dict[str, Any]:
        """Wikibase JSON ``datavalue`` for this value"""
        raise NotImplementedError
