from enum import Enum


class Datatype(str, Enum):
    """Property datatypes a generated form knows how to edit.

    Values are the local names of the ``wikibase:propertyType`` URIs returned
    by the query service (``http://wikiba.se/ontology#WikibaseItem``).
    """

    WIKIBASE_ITEM = "WikibaseItem"
    STRING = "String"
    URL = "Url"
    EXTERNAL_ID = "ExternalId"
    QUANTITY = "Quantity"
    TIME = "Time"
    GLOBE_COORDINATE = "GlobeCoordinate"
    MONOLINGUALTEXT = "Monolingualtext"

    @classmethod
    def from_sparql(cls, datatype: str) -> "Datatype":
        """
        Map a SPARQL datatype name or URI to a known datatype.

        Accepts both the full ontology URI and the bare local name. The
        ``Wikibase`` prefix some endpoints emit (``WikibaseUrl``) is dropped
        and casing differences such as ``MonolingualText`` are tolerated.
        Unknown datatypes are edited as plain strings.

        Args:
            datatype: Datatype URI or local name from the SPARQL endpoint

        Returns:
            Matching Datatype, STRING when unknown
        """
        name = datatype.rsplit("#", 1)[-1]
        if name in _BY_LOWER_NAME.values():
            return cls(name)

        lowered = name.lower()
        if lowered in _BY_LOWER_NAME:
            return cls(_BY_LOWER_NAME[lowered])
        if lowered.startswith("wikibase") and lowered[len("wikibase"):] in _BY_LOWER_NAME:
            return cls(_BY_LOWER_NAME[lowered[len("wikibase"):]])
        return cls.STRING

    @property
    def is_entity(self) -> bool:
        return self is Datatype.WIKIBASE_ITEM


_BY_LOWER_NAME = {member.value.lower(): member.value for member in Datatype}


class RenderedKind(str, Enum):
    TEXT = "text"
    TEXTAREA = "textarea"
    URL = "url"
    NUMBER = "number"
    DATE = "date"
    COORDINATES = "coordinates"
    ITEM_INPUT = "item-input"
    MULTISELECT = "multiselect"
    MONOLINGUAL = "monolingual"


DATATYPE_RENDERED_KINDS = {
    Datatype.STRING: RenderedKind.TEXT,
    Datatype.URL: RenderedKind.URL,
    Datatype.EXTERNAL_ID: RenderedKind.TEXT,
    Datatype.QUANTITY: RenderedKind.NUMBER,
    Datatype.TIME: RenderedKind.DATE,
    Datatype.GLOBE_COORDINATE: RenderedKind.COORDINATES,
    Datatype.WIKIBASE_ITEM: RenderedKind.ITEM_INPUT,
    Datatype.MONOLINGUALTEXT: RenderedKind.MONOLINGUAL,
}


def rendered_kind_for(datatype: Datatype) -> RenderedKind:
    """Default widget for a datatype, before any value lookups."""
    return DATATYPE_RENDERED_KINDS.get(datatype, RenderedKind.TEXT)


def datatype_from_uri(uri: str) -> Datatype:
    """http://wikiba.se/ontology#Quantity -> Datatype.QUANTITY"""
    return Datatype.from_sparql(uri)
