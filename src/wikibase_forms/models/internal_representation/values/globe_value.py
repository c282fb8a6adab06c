from typing import Any

from pydantic import ConfigDict, Field, field_validator
from typing_extensions import Literal

from .base import Value

DEFAULT_GLOBE_PRECISION = 0.0001
EARTH = "http://www.wikidata.org/entity/Q2"


class GlobeValue(Value):
    kind: Literal["globe"] = Field(default="globe", frozen=True)
    value: str = ""
    datatype_uri: str = "http://wikiba.se/ontology#GlobeCoordinate"
    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)
    precision: float = DEFAULT_GLOBE_PRECISION
    globe: str = EARTH

    model_config = ConfigDict(frozen=True)

    @field_validator("globe")
    @classmethod
    def validate_globe(cls, v: str) -> str:
        if v.startswith("Q"):
            v = "http://www.wikidata.org/entity/" + v
        return v

    def to_datavalue(self) -> dict[str, Any]:
        return {
            "value": {
                "latitude": self.latitude,
                "longitude": self.longitude,
                "precision": self.precision,
                "globe": self.globe,
            },
            "type": "globecoordinate",
        }
