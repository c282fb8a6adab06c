"""Create and edit form flows.

Create: exemplar by entity type key -> exemplar type -> exemplar properties ->
schema -> form. Edit: item type -> exemplar with the same type -> current item
data -> exemplar properties -> schema -> form pre-filled with the item.
Failure of the type or property discovery queries is fatal; everything below
a single property degrades that property only.
"""

import logging

from wikibase_forms.models.config.forms_config import FormsConfig
from wikibase_forms.models.errors import QueryError, SchemaGenerationError
from wikibase_forms.models.internal_representation.entity_ids import (
    entity_id_from_uri,
    validate_entity_id,
    validate_item_id,
)
from wikibase_forms.models.schema import FormMode, Schema
from wikibase_forms.models.session import FormSession, GeneratedForm
from wikibase_forms.models.sparql import Row
from wikibase_forms.services.form_handlers import FormHandler, get_form_handler
from wikibase_forms.services.form_renderer import render_session
from wikibase_forms.services.item_normalizer import normalize_item_data
from wikibase_forms.services.schema_builder import SchemaBuilder
from wikibase_forms.services.schema_cache import SchemaCache
from wikibase_forms.services.sparql.client import SparqlClient
from wikibase_forms.services.sparql.queries import (
    entity_label_query,
    exemplar_properties_query,
    instance_of_query,
    item_data_query,
    label_description_query,
)

logger = logging.getLogger(__name__)


class FormGenerator:
    def __init__(
        self,
        client: SparqlClient,
        config: FormsConfig,
        cache: SchemaCache | None = None,
    ):
        self.client = client
        self.config = config
        self.cache = cache or SchemaCache()

    def generate_create_form(self, entity_type: str) -> GeneratedForm:
        exemplar = self.config.exemplars.get(entity_type)
        if exemplar is None:
            raise SchemaGenerationError(f"No exemplar configured for entity type: {entity_type}")
        logger.info(f"Generating create form for {entity_type} from exemplar {exemplar.id}")

        type_rows = self._fatal_query(
            instance_of_query(self.config, exemplar.id),
            f"Failed to load type of exemplar {exemplar.id}",
        )
        if not type_rows or "instanceOf" not in type_rows[0]:
            raise SchemaGenerationError(
                f"Exemplar {exemplar.id} has no {self.config.instance_of} statement"
            )
        type_value = entity_id_from_uri(type_rows[0]["instanceOf"].value)
        type_label = self._row_label(type_rows[0], "instanceOfLabel") or exemplar.label or entity_type

        handler = get_form_handler(entity_type)
        schema = self._schema(exemplar.id, type_value, FormMode.CREATE, handler)
        schema = handler.apply_customize_schema(schema, None)

        session = FormSession(
            mode=FormMode.CREATE,
            entity_type=entity_type,
            exemplar_id=exemplar.id,
            type_value=type_value,
            type_label=type_label,
            form_schema=schema,
        )
        return GeneratedForm(session=session, form=render_session(session))

    def generate_edit_form(self, item_id: str) -> GeneratedForm:
        item_id = validate_item_id(item_id)
        logger.info(f"Generating edit form for {item_id}")

        type_rows = self._fatal_query(
            instance_of_query(self.config, item_id),
            f"Failed to load type of {item_id}",
        )
        if not type_rows or "instanceOf" not in type_rows[0]:
            raise SchemaGenerationError(
                f"Item {item_id} has no {self.config.instance_of} statement"
            )
        type_value = entity_id_from_uri(type_rows[0]["instanceOf"].value)
        type_label = self._row_label(type_rows[0], "instanceOfLabel") or type_value

        entity_type, exemplar_id = self.find_exemplar_by_instance_of(type_value)
        if exemplar_id is None:
            raise SchemaGenerationError(f"No exemplar configured for type: {type_label}")

        item_rows = self._fatal_query(
            item_data_query(self.config, item_id), f"Failed to load data of {item_id}"
        )
        label_rows = self._fatal_query(
            label_description_query(self.config, item_id),
            f"Failed to load label of {item_id}",
        )
        handler = get_form_handler(entity_type)
        snapshot = handler.apply_process_existing_data(normalize_item_data(item_rows, label_rows))
        logger.debug(f"Current data of {item_id} has properties {list(snapshot.properties)}")

        schema = self._schema(exemplar_id, type_value, FormMode.EDIT, handler)
        schema = handler.apply_customize_schema(schema, snapshot)

        session = FormSession(
            mode=FormMode.EDIT,
            entity_type=entity_type,
            exemplar_id=exemplar_id,
            item_id=item_id,
            type_value=type_value,
            type_label=type_label,
            form_schema=schema,
            existing_snapshot=snapshot,
        )
        return GeneratedForm(session=session, form=render_session(session))

    def find_exemplar_by_instance_of(self, type_value: str) -> tuple[str, str | None]:
        """Entity type key and exemplar id of the exemplar sharing ``type_value``.

        Exemplars whose type cannot be read are skipped.
        """
        for key, exemplar in self.config.exemplars.items():
            try:
                rows = self.client.execute(instance_of_query(self.config, exemplar.id))
            except QueryError as e:
                logger.warning(f"Could not read type of exemplar {exemplar.id} ({key}): {e}")
                continue
            if not rows or "instanceOf" not in rows[0]:
                continue
            exemplar_type = entity_id_from_uri(rows[0]["instanceOf"].value)
            logger.debug(f"  Exemplar {exemplar.id} ({key}) has type {exemplar_type}")
            if exemplar_type == type_value:
                logger.info(f"Found matching exemplar {exemplar.id} for type {type_value}")
                return key, exemplar.id
        return "", None

    def refresh_schema(self) -> None:
        self.cache.invalidate()

    def lookup_entity_label(self, entity_id: str) -> str:
        """Label of an entity typed in by hand, or the id when it has none"""
        entity_id = validate_entity_id(entity_id)
        try:
            rows = self.client.execute(entity_label_query(self.config, entity_id))
        except QueryError as e:
            logger.warning(f"Label lookup for {entity_id} failed: {e}")
            return entity_id
        return (self._row_label(rows[0], "label") if rows else "") or entity_id

    def _schema(
        self, exemplar_id: str, type_value: str, mode: FormMode, handler: FormHandler
    ) -> Schema:
        key = (mode, exemplar_id, handler.form_type)
        schema = self.cache.get(key)
        if schema is not None:
            return schema

        properties = self._fatal_query(
            exemplar_properties_query(self.config, exemplar_id),
            f"Failed to load properties of exemplar {exemplar_id}",
        )
        logger.info(f"Exemplar {exemplar_id} uses {len(properties)} properties")
        schema = SchemaBuilder(self.client, self.config, handler).build_schema(
            properties, type_value, exemplar_id, mode
        )
        self.cache.put(key, schema)
        return schema

    def _fatal_query(self, query: str, message: str) -> list[Row]:
        try:
            return self.client.execute(query)
        except QueryError as e:
            logger.error(f"{message}: {e}")
            raise SchemaGenerationError(f"{message}: {e}") from e

    @staticmethod
    def _row_label(row: Row, variable: str) -> str:
        return row[variable].value if variable in row else ""
