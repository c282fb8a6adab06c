import json
import logging
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

from wikibase_forms.models.internal_representation.entity_ids import (
    validate_entity_id,
    validate_item_id,
)

logger = logging.getLogger(__name__)


class WikibaseConfig(BaseModel):
    url: str = Field(..., description="Wikibase base URL, e.g. https://example.wikibase.cloud")
    sparql_endpoint: str = Field(..., alias="sparqlEndpoint")

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    @field_validator("url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")


class PropertiesConfig(BaseModel):
    instance_of: str = Field(..., alias="instanceOf")

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    @field_validator("instance_of")
    @classmethod
    def validate_property_id(cls, v: str) -> str:
        return validate_entity_id(v)


class ExemplarConfig(BaseModel):
    id: str
    label: str | None = None

    model_config = ConfigDict(frozen=True, extra="allow")

    @field_validator("id")
    @classmethod
    def validate_id(cls, v: str) -> str:
        return validate_item_id(v)


class FormsConfig(BaseModel):
    """The configuration document: wikibase location, the type-classification
    property and one exemplar item per entity type key."""

    wikibase: WikibaseConfig
    properties: PropertiesConfig
    exemplars: dict[str, ExemplarConfig] = {}

    model_config = ConfigDict(frozen=True, extra="allow")

    @property
    def instance_of(self) -> str:
        return self.properties.instance_of

    @property
    def sparql_endpoint(self) -> str:
        return self.wikibase.sparql_endpoint


def load_forms_config(path: Path | str) -> FormsConfig:
    config_path = Path(path)
    logger.info(f"Loading forms configuration from {config_path}")
    data = json.loads(config_path.read_text(encoding="utf-8"))
    return FormsConfig.model_validate(data)
