"""Per entity type customization hooks.

A handler is a plain record of optional functions selected by entity type key.
Missing hooks behave as identity (or "no opinion" for the predicates).
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, Optional

from wikibase_forms.models.entity_patch import EntityPatch
from wikibase_forms.models.form_data import CoordinatesInput, FormData
from wikibase_forms.models.schema import FormMode, Schema
from wikibase_forms.models.snapshot import ExistingItemSnapshot

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FormHandler:
    form_type: str = "default"
    customize_schema: Optional[
        Callable[[Schema, Optional[ExistingItemSnapshot]], Schema]
    ] = None
    process_existing_data: Optional[
        Callable[[ExistingItemSnapshot], ExistingItemSnapshot]
    ] = None
    should_show_property: Optional[Callable[[str, FormMode], bool]] = None
    is_property_required: Optional[Callable[[str], Optional[bool]]] = None
    validate_form: Optional[Callable[[FormData], list[str]]] = None
    transform_form_data: Optional[Callable[[FormData], FormData]] = None
    customize_entity_data: Optional[Callable[[EntityPatch, FormData], EntityPatch]] = None
    custom_field_labels: dict[str, str] = field(default_factory=dict)

    def apply_customize_schema(
        self, schema: Schema, snapshot: Optional[ExistingItemSnapshot] = None
    ) -> Schema:
        if self.customize_schema is None:
            return schema
        logger.debug(f"[{self.form_type}] Customizing schema")
        return self.customize_schema(schema, snapshot)

    def apply_process_existing_data(
        self, snapshot: ExistingItemSnapshot
    ) -> ExistingItemSnapshot:
        if self.process_existing_data is None:
            return snapshot
        return self.process_existing_data(snapshot)

    def shows_property(self, property_id: str, mode: FormMode) -> bool:
        if self.should_show_property is None:
            return True
        return self.should_show_property(property_id, mode)

    def requires_property(self, property_id: str, default: bool = False) -> bool:
        if self.is_property_required is None:
            return default
        required = self.is_property_required(property_id)
        return default if required is None else required

    def field_label(self, property_id: str, default: str) -> str:
        return self.custom_field_labels.get(property_id, default)

    def apply_validate_form(self, form_data: FormData) -> list[str]:
        if self.validate_form is None:
            return []
        return self.validate_form(form_data)

    def apply_transform_form_data(self, form_data: FormData) -> FormData:
        if self.transform_form_data is None:
            return form_data
        logger.debug(f"[{self.form_type}] Transforming form data")
        return self.transform_form_data(form_data)

    def apply_customize_entity_data(
        self, patch: EntityPatch, form_data: FormData
    ) -> EntityPatch:
        if self.customize_entity_data is None:
            return patch
        logger.debug(f"[{self.form_type}] Customizing entity data")
        return self.customize_entity_data(patch, form_data)


DEFAULT_HANDLER = FormHandler()

GIVEN_NAME = "P147"
FAMILY_NAME = "P148"
HUMAN_NAME_PROPERTIES = (GIVEN_NAME, FAMILY_NAME)


def _names_first(schema: Schema, snapshot: Optional[ExistingItemSnapshot]) -> Schema:
    name_fields = [p for p in schema.properties if p.id in HUMAN_NAME_PROPERTIES]
    other_fields = [p for p in schema.properties if p.id not in HUMAN_NAME_PROPERTIES]
    return schema.model_copy(update={"properties": name_fields + other_fields})


def _human_name_required(property_id: str) -> Optional[bool]:
    return True if property_id in HUMAN_NAME_PROPERTIES else None


def _validate_human(form_data: FormData) -> list[str]:
    if not any(form_data.properties.get(pid) for pid in HUMAN_NAME_PROPERTIES):
        return ["At least one name field (Given Name or Family Name) must be filled"]
    return []


def _validate_site(form_data: FormData) -> list[str]:
    errors = []
    for property_id, statements in form_data.properties.items():
        for statement in statements:
            if not isinstance(statement.value, CoordinatesInput):
                continue
            try:
                latitude = float(statement.value.latitude)
            except ValueError:
                continue
            if not -90 <= latitude <= 90:
                errors.append(f"{property_id}: Latitude must be between -90 and 90 degrees")
    return errors


HUMAN_HANDLER = FormHandler(
    form_type="Human",
    customize_schema=_names_first,
    is_property_required=_human_name_required,
    validate_form=_validate_human,
)

ARCHAEOLOGICAL_SITE_HANDLER = FormHandler(
    form_type="Archaeological_Site",
    validate_form=_validate_site,
)

FORM_HANDLERS: dict[str, FormHandler] = {
    "Human": HUMAN_HANDLER,
    "Archaeological_Site": ARCHAEOLOGICAL_SITE_HANDLER,
}


def get_form_handler(form_type: str) -> FormHandler:
    handler = FORM_HANDLERS.get(form_type)
    if handler is None:
        logger.debug(f"Using default handler for {form_type}")
        return DEFAULT_HANDLER
    return handler


def has_custom_handler(form_type: str) -> bool:
    return form_type in FORM_HANDLERS
