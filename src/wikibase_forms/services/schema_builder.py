import logging

from wikibase_forms.models.config.forms_config import FormsConfig
from wikibase_forms.models.errors import QueryError
from wikibase_forms.models.internal_representation.datatypes import (
    RenderedKind,
    datatype_from_uri,
    rendered_kind_for,
)
from wikibase_forms.models.internal_representation.entity_ids import entity_id_from_uri
from wikibase_forms.models.schema import (
    FormMode,
    PropertyDescriptor,
    QualifierDescriptor,
    Schema,
    ValueOption,
)
from wikibase_forms.models.sparql import Row
from wikibase_forms.services.form_handlers import DEFAULT_HANDLER, FormHandler
from wikibase_forms.services.sparql.client import SparqlClient
from wikibase_forms.services.sparql.queries import (
    property_qualifiers_query,
    property_values_query,
    qualifier_values_query,
)

logger = logging.getLogger(__name__)


def value_options_from_rows(rows: list[Row]) -> list[ValueOption]:
    """Collapse ``?value ?valueLabel ?valueType`` rows into one option per entity.

    An entity with several types appears on several rows; its types are merged.
    Row order (label order from the query) is kept.
    """
    options: dict[str, dict] = {}
    for row in rows:
        if "value" not in row or not row["value"].is_entity_reference:
            continue
        value_id = entity_id_from_uri(row["value"].value)
        option = options.setdefault(
            value_id,
            {"id": value_id, "label": row["valueLabel"].value if "valueLabel" in row else value_id, "types": []},
        )
        if "valueType" in row:
            value_type = entity_id_from_uri(row["valueType"].value)
            if value_type not in option["types"]:
                option["types"].append(value_type)
    return [ValueOption(**option) for option in options.values()]


def qualifier_map_key(row: Row) -> str:
    """Key a qualifier rule by the main value's type when it has one.

    Entity main values are keyed by their "instance of" type, so the rule
    covers every entity of that type. Literals, and entities without a type,
    are keyed by the value itself.
    """
    main_value = row["mainValue"]
    if not main_value.is_entity_reference:
        return main_value.value
    if "mainValueType" in row:
        return entity_id_from_uri(row["mainValueType"].value)
    return entity_id_from_uri(main_value.value)


class SchemaBuilder:
    """Builds a form Schema from the statements of an exemplar item.

    Value and qualifier lookups run one after another, per property. A failed
    lookup only degrades the property it belongs to.
    """

    def __init__(
        self,
        client: SparqlClient,
        config: FormsConfig,
        handler: FormHandler = DEFAULT_HANDLER,
    ):
        self.client = client
        self.config = config
        self.handler = handler

    def build_schema(
        self,
        exemplar_properties: list[Row],
        type_value: str,
        exemplar_id: str,
        mode: FormMode = FormMode.CREATE,
    ) -> Schema:
        logger.debug(f"=== Building schema from {len(exemplar_properties)} properties ===")
        properties: list[PropertyDescriptor] = []
        seen: set[str] = set()

        for row in exemplar_properties:
            property_id = entity_id_from_uri(row["property"].value)

            if property_id == self.config.instance_of and mode == FormMode.CREATE:
                logger.debug(f"  Skipping {property_id} (type classification in create mode)")
                continue
            if property_id in seen:
                continue
            if not self.handler.shows_property(property_id, mode):
                logger.debug(f"  Skipping {property_id} (hidden by {self.handler.form_type} handler)")
                continue
            seen.add(property_id)

            properties.append(self.build_property(row, type_value, exemplar_id))

        logger.debug(f"Schema has {len(properties)} properties: {[p.id for p in properties]}")
        return Schema(properties=properties)

    def build_property(self, row: Row, type_value: str, exemplar_id: str) -> PropertyDescriptor:
        property_id = entity_id_from_uri(row["property"].value)
        datatype = datatype_from_uri(row["datatype"].value)
        label = row["propertyLabel"].value if "propertyLabel" in row else property_id
        description = row["propertyDescription"].value if "propertyDescription" in row else ""
        logger.debug(f"Processing property {property_id} ({label}) - datatype: {datatype.value}")

        rendered_kind = rendered_kind_for(datatype)
        values = None
        if datatype.is_entity:
            values = self._property_values(property_id, type_value, exemplar_id)
            if values:
                rendered_kind = RenderedKind.MULTISELECT
                logger.debug(f"  {property_id}: multiselect with {len(values)} values")
            else:
                values = None
                logger.debug(f"  {property_id}: no existing values, using item input")

        qualifiers, qualifier_map = self._qualifiers(property_id, exemplar_id)

        return PropertyDescriptor(
            id=property_id,
            label=self.handler.field_label(property_id, label),
            description=description,
            datatype=datatype,
            rendered_kind=rendered_kind,
            required=self.handler.requires_property(property_id),
            values=values,
            qualifiers=qualifiers,
            qualifier_map=qualifier_map,
        )

    def _property_values(
        self, property_id: str, type_value: str, exemplar_id: str
    ) -> list[ValueOption]:
        query = property_values_query(self.config, property_id, type_value, exemplar_id)
        try:
            rows = self.client.execute(query)
        except QueryError as e:
            logger.warning(f"Value lookup for {property_id} failed, continuing without dropdown: {e}")
            return []
        return value_options_from_rows(rows)

    def _qualifiers(
        self, property_id: str, exemplar_id: str
    ) -> tuple[list[QualifierDescriptor] | None, dict[str, frozenset[str]]]:
        query = property_qualifiers_query(self.config, exemplar_id, property_id)
        try:
            rows = self.client.execute(query)
        except QueryError as e:
            logger.warning(f"Qualifier lookup for {property_id} failed, continuing without qualifiers: {e}")
            return None, {}

        if not rows:
            return None, {}
        logger.debug(f"  {property_id}: {len(rows)} qualifier mappings")

        discovered: dict[str, dict] = {}
        qualifier_map: dict[str, set[str]] = {}
        for row in rows:
            qualifier_id = entity_id_from_uri(row["qualifier"].value)
            if qualifier_id not in discovered:
                discovered[qualifier_id] = {
                    "id": qualifier_id,
                    "label": row["qualifierLabel"].value if "qualifierLabel" in row else qualifier_id,
                    "datatype": datatype_from_uri(row["qualifierDatatype"].value),
                }
            qualifier_map.setdefault(qualifier_map_key(row), set()).add(qualifier_id)

        qualifiers = []
        for qualifier_id, info in discovered.items():
            if info["datatype"].is_entity:
                values = self._qualifier_values(qualifier_id)
                if values:
                    info["values"] = values
                    logger.debug(f"    Qualifier {qualifier_id}: {len(values)} possible values")
            qualifiers.append(QualifierDescriptor(**info))

        return qualifiers, {key: frozenset(ids) for key, ids in qualifier_map.items()}

    def _qualifier_values(self, qualifier_id: str) -> list[ValueOption]:
        try:
            rows = self.client.execute(qualifier_values_query(self.config, qualifier_id))
        except QueryError as e:
            logger.warning(f"Value lookup for qualifier {qualifier_id} failed: {e}")
            return []
        return value_options_from_rows(rows)
