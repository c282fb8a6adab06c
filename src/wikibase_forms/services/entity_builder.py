"""FormData -> Wikibase entity JSON.

Every submission becomes a single EntityPatch. In edit mode each property the
form manages is replaced: the statements read when the form was opened are
removed by statement id and the submitted values are added as new claims.
Properties outside the schema are never touched.
"""

import logging
from typing import Any

from wikibase_forms.models.entity_patch import Claim, EntityPatch, LanguageValue, Snak
from wikibase_forms.models.errors import FormValidationError
from wikibase_forms.models.form_data import (
    CollectedStatement,
    CoordinatesInput,
    FieldValue,
    FormData,
    MonolingualInput,
)
from wikibase_forms.models.internal_representation.datatypes import Datatype
from wikibase_forms.models.internal_representation.entity_ids import ITEM_ID_PATTERN
from wikibase_forms.models.internal_representation.values import (
    EntityValue,
    GlobeValue,
    MonolingualValue,
    QuantityValue,
    StringValue,
    TimeValue,
)
from wikibase_forms.models.internal_representation.values.quantity_value import (
    AMOUNT_PATTERN,
)
from wikibase_forms.models.schema import PropertyDescriptor
from wikibase_forms.models.session import FormSession
from wikibase_forms.models.snapshot import StatementSnapshot
from wikibase_forms.services.form_handlers import DEFAULT_HANDLER, FormHandler
from wikibase_forms.services.form_renderer import form_value

logger = logging.getLogger(__name__)

LANGUAGE = "en"


def encode_value(datatype: Datatype, value: Any) -> dict[str, Any]:
    """Wikibase ``datavalue`` for one entered value.

    Raises ValueError with a user facing message when the value does not fit
    the datatype.
    """
    if datatype == Datatype.GLOBE_COORDINATE:
        if isinstance(value, dict):
            value = CoordinatesInput(**value)
        if isinstance(value, str) and value.count(",") == 1:
            latitude, longitude = value.split(",")
            value = CoordinatesInput(latitude=latitude.strip(), longitude=longitude.strip())
        if not isinstance(value, CoordinatesInput):
            raise ValueError("Coordinates need a latitude and a longitude")
        try:
            latitude = float(value.latitude)
            longitude = float(value.longitude)
        except ValueError:
            raise ValueError("Coordinates must be numbers")
        if not -90 <= latitude <= 90:
            raise ValueError("Latitude must be between -90 and 90 degrees")
        if not -180 <= longitude <= 180:
            raise ValueError("Longitude must be between -180 and 180 degrees")
        return GlobeValue(latitude=latitude, longitude=longitude).to_datavalue()

    if datatype == Datatype.MONOLINGUALTEXT:
        if isinstance(value, dict):
            value = MonolingualInput(**value)
        if isinstance(value, str):
            value = MonolingualInput(text=value)
        if "\n" in value.text or "\r" in value.text:
            raise ValueError("Text must be a single line")
        return MonolingualValue(text=value.text, language=value.language).to_datavalue()

    if not isinstance(value, str):
        raise ValueError(f"Expected a single value, got {type(value).__name__}")
    value = value.strip()

    if datatype == Datatype.WIKIBASE_ITEM:
        if not ITEM_ID_PATTERN.match(value):
            raise ValueError(f"'{value}' is not a valid item id (expected Q123)")
        return EntityValue(value=value).to_datavalue()
    if datatype == Datatype.QUANTITY:
        if not AMOUNT_PATTERN.match(value):
            raise ValueError(f"'{value}' is not a valid number")
        return QuantityValue(value=value).to_datavalue()
    if datatype == Datatype.TIME:
        return TimeValue.from_date(value).to_datavalue()
    return StringValue(value=value).to_datavalue()


class EntityBuilder:
    """Builds the patch for one submission and collects every violation.

    Errors are accumulated while building so a single FormValidationError
    reports all of them.
    """

    def __init__(self, session: FormSession, instance_of: str, handler: FormHandler = DEFAULT_HANDLER):
        self.session = session
        self.instance_of = instance_of
        self.handler = handler
        self.errors: list[str] = []

    def build(self, form_data: FormData) -> EntityPatch:
        self.errors = self._check_required(form_data)
        self.errors.extend(self.handler.apply_validate_form(form_data))
        form_data = self.handler.apply_transform_form_data(form_data)

        claims: dict[str, list[Claim]] = {}
        if self.session.is_create:
            claims[self.instance_of] = [self._claim(self.instance_of, Datatype.WIKIBASE_ITEM, self.session.type_value)]

        for prop in self.session.form_schema.properties:
            submitted = form_data.properties.get(prop.id, [])
            if prop.id == self.instance_of:
                if self.session.is_create:
                    continue
                if not submitted:
                    preserved = self._preserved_claims(prop)
                    if preserved:
                        claims[prop.id] = preserved
                    continue

            property_claims = self._removals(prop.id)
            for statement in submitted:
                claim = self._statement_claim(prop, statement)
                if claim is not None:
                    property_claims.append(claim)
            if property_claims:
                claims[prop.id] = property_claims

        unknown = set(form_data.properties) - set(self.session.form_schema.property_ids)
        if unknown:
            logger.warning(f"Ignoring values for properties outside the form: {sorted(unknown)}")

        if self.errors:
            logger.info(f"Form validation failed with {len(self.errors)} errors")
            raise FormValidationError(self.errors)

        patch = EntityPatch(
            labels={LANGUAGE: LanguageValue(language=LANGUAGE, value=form_data.label)},
            descriptions=(
                {LANGUAGE: LanguageValue(language=LANGUAGE, value=form_data.description)}
                if form_data.description
                else {}
            ),
            claims=claims,
        )
        return self.handler.apply_customize_entity_data(patch, form_data)

    def _check_required(self, form_data: FormData) -> list[str]:
        errors = []
        if not form_data.label.strip():
            errors.append("Name is required")
        for prop in self.session.form_schema.properties:
            if prop.required and not form_data.properties.get(prop.id):
                errors.append(f"{prop.label} is required")
        return errors

    def _claim(
        self,
        property_id: str,
        datatype: Datatype,
        value: FieldValue,
        qualifiers: dict[str, list[Snak]] | None = None,
        statement_id: str | None = None,
    ) -> Claim:
        return Claim(
            mainsnak=Snak(property=property_id, datavalue=encode_value(datatype, value)),
            qualifiers=qualifiers or None,
            id=statement_id,
        )

    def _statement_claim(self, prop: PropertyDescriptor, statement: CollectedStatement) -> Claim | None:
        qualifier_snaks: dict[str, list[Snak]] = {}
        for qualifier_id, qualifier in (statement.qualifiers or {}).items():
            try:
                datavalue = encode_value(qualifier.datatype, qualifier.value)
            except ValueError as e:
                self.errors.append(f"{prop.label} ({qualifier_id}): {e}")
                continue
            qualifier_snaks[qualifier_id] = [Snak(property=qualifier_id, datavalue=datavalue)]

        try:
            return self._claim(prop.id, prop.datatype, statement.value, qualifier_snaks)
        except ValueError as e:
            self.errors.append(f"{prop.label}: {e}")
            return None

    def _removals(self, property_id: str) -> list[Claim]:
        snapshot = self.session.existing_snapshot
        if self.session.is_create or snapshot is None:
            return []
        return [Claim.removal(statement_id) for statement_id in snapshot.statement_ids(property_id)]

    def _preserved_claims(self, prop: PropertyDescriptor) -> list[Claim]:
        snapshot = self.session.existing_snapshot
        if snapshot is None:
            return []
        claims = []
        for statement in snapshot.statements(prop.id):
            if not statement.statement_id:
                continue
            claims.append(self._snapshot_claim(prop.id, statement))
        return claims

    def _snapshot_claim(self, property_id: str, statement: StatementSnapshot) -> Claim:
        qualifiers = {
            qualifier_id: [
                Snak(
                    property=qualifier_id,
                    datavalue=encode_value(
                        qualifier.datatype, form_value(qualifier.value, qualifier.datatype)
                    ),
                )
            ]
            for qualifier_id, qualifier in (statement.qualifiers or {}).items()
        }
        return self._claim(
            property_id,
            statement.datatype,
            form_value(statement.value, statement.datatype),
            qualifiers,
            statement.statement_id,
        )


def build_entity(
    form_data: FormData,
    session: FormSession,
    instance_of: str,
    handler: FormHandler = DEFAULT_HANDLER,
) -> EntityPatch:
    patch = EntityBuilder(session, instance_of, handler).build(form_data)
    logger.debug(
        f"Built {session.mode.value} patch with claims for {list(patch.claims)}"
    )
    return patch
