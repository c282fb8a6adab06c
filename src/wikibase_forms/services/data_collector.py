"""Read submitted form values back into FormData.

The form state is a flat mapping, like an HTML form post:

- simple fields by property id (multiselect fields hold a list of ids)
- coordinates as ``P625-lat`` / ``P625-lon``
- monolingual text as ``P1476`` plus ``P1476-lang``
- repeatable value groups as ``P31-0-value``, ``P31-0-lat``, ``P31-0-lon``,
  ``P31-0-lang`` and ``P31-0-qualifier-P580``; qualifiers follow the same
  suffixes (``P31-0-qualifier-P625-lat``, ``P31-0-qualifier-P1476-lang``)
"""

import logging
import re
from typing import Any, Mapping

from wikibase_forms.models.form import FormDescription, FormField
from wikibase_forms.models.form_data import (
    CollectedQualifier,
    CollectedStatement,
    CoordinatesInput,
    FieldValue,
    FormData,
    MonolingualInput,
)
from wikibase_forms.models.internal_representation.datatypes import (
    Datatype,
    RenderedKind,
)

logger = logging.getLogger(__name__)


def _text(raw: Any) -> str:
    """A single-valued input; selects posted as lists keep their first pick"""
    if raw is None:
        return ""
    if isinstance(raw, (list, tuple)):
        raw = next((item for item in raw if str(item).strip()), "")
    return str(raw).strip()


def _values(raw: Any) -> list[str]:
    if raw is None:
        return []
    if isinstance(raw, (list, tuple)):
        return [str(item).strip() for item in raw if str(item).strip()]
    text = str(raw).strip()
    return [text] if text else []


def _field_value(state: Mapping[str, Any], prefix: str, datatype: Datatype | None, value_key: str) -> FieldValue | None:
    if datatype == Datatype.GLOBE_COORDINATE:
        latitude = _text(state.get(f"{prefix}-lat"))
        longitude = _text(state.get(f"{prefix}-lon"))
        if latitude and longitude:
            return CoordinatesInput(latitude=latitude, longitude=longitude)
        return None

    text = _text(state.get(value_key))
    if not text:
        return None
    if datatype == Datatype.MONOLINGUALTEXT:
        language = _text(state.get(f"{prefix}-lang")) or "en"
        return MonolingualInput(text=text, language=language)
    return text


def group_indices(state: Mapping[str, Any], property_id: str) -> list[int]:
    """Indices of the value groups present in the state, in ascending order"""
    pattern = re.compile(rf"^{re.escape(property_id)}-(\d+)-(?:value|lat|lon|lang|qualifier-.+)$")
    indices = set()
    for key in state:
        match = pattern.match(key)
        if match:
            indices.add(int(match.group(1)))
    return sorted(indices)


def _collect_repeatable(form_field: FormField, state: Mapping[str, Any]) -> list[CollectedStatement]:
    statements = []
    for index in group_indices(state, form_field.id):
        prefix = f"{form_field.id}-{index}"
        main_value = _field_value(state, prefix, form_field.datatype, f"{prefix}-value")
        if main_value is None:
            continue

        qualifiers = {}
        for qualifier in form_field.qualifiers:
            qualifier_prefix = f"{prefix}-qualifier-{qualifier.id}"
            qualifier_value = _field_value(state, qualifier_prefix, qualifier.datatype, qualifier_prefix)
            if qualifier_value is not None:
                qualifiers[qualifier.id] = CollectedQualifier(
                    value=qualifier_value, datatype=qualifier.datatype
                )

        statements.append(CollectedStatement(value=main_value, qualifiers=qualifiers or None))
    return statements


def _collect_simple(form_field: FormField, state: Mapping[str, Any]) -> list[CollectedStatement]:
    if form_field.widget == RenderedKind.MULTISELECT:
        return [CollectedStatement(value=v) for v in _values(state.get(form_field.id))]
    value = _field_value(state, form_field.id, form_field.datatype, form_field.id)
    return [CollectedStatement(value=value)] if value is not None else []


def collect_form_data(form: FormDescription, state: Mapping[str, Any]) -> FormData:
    properties: dict[str, list[CollectedStatement]] = {}
    for form_field in form.property_fields:
        if form_field.repeatable:
            statements = _collect_repeatable(form_field, state)
        else:
            statements = _collect_simple(form_field, state)
        if statements:
            properties[form_field.id] = statements

    logger.debug(
        f"Collected {sum(len(s) for s in properties.values())} values "
        f"for {len(properties)} properties"
    )
    return FormData(
        label=_text(state.get("label")),
        description=_text(state.get("description")),
        properties=properties,
    )
