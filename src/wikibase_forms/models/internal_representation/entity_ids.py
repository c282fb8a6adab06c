import re

from wikibase_forms.models.errors import InvalidEntityIdError

ENTITY_ID_PATTERN = re.compile(r"^[QP]\d+$")
ITEM_ID_PATTERN = re.compile(r"^Q\d+$")


def is_entity_id(value: object) -> bool:
    return isinstance(value, str) and bool(ENTITY_ID_PATTERN.match(value))


def validate_entity_id(value: object) -> str:
    """Return the id unchanged or raise InvalidEntityIdError."""
    if not is_entity_id(value):
        raise InvalidEntityIdError(value)
    return value  # type: ignore[return-value]


def validate_item_id(value: object) -> str:
    if not isinstance(value, str) or not ITEM_ID_PATTERN.match(value):
        raise InvalidEntityIdError(value)
    return value


def entity_id_from_uri(uri: str) -> str:
    """Extract entity ID from URI: http://example.org/entity/Q42 -> Q42"""
    return uri.rstrip("/").rsplit("/", 1)[-1]


def numeric_id(entity_id: str) -> int:
    return int(validate_entity_id(entity_id)[1:])
