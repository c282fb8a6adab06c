from .datatypes import Datatype, RenderedKind, datatype_from_uri, rendered_kind_for
from .entity_ids import (
    ENTITY_ID_PATTERN,
    entity_id_from_uri,
    is_entity_id,
    validate_entity_id,
    validate_item_id,
)

__all__ = [
    "Datatype",
    "datatype_from_uri",
    "RenderedKind",
    "rendered_kind_for",
    "ENTITY_ID_PATTERN",
    "entity_id_from_uri",
    "is_entity_id",
    "validate_entity_id",
    "validate_item_id",
]
