"""Schema (+ existing item) -> declarative form description.

Rendering is a pure function of its inputs. Properties that carry qualifiers
render as repeatable fields made of value groups; each group reveals the
qualifier inputs that apply to its selected main value. Group transitions
(``select_main_value``, ``add_value_group``, ``remove_value_group``) return
new field descriptions and only ever touch the group they are called for.
"""

import logging
import re
from typing import Any

from wikibase_forms.models.form import (
    FormDescription,
    FormField,
    FormSection,
    GroupState,
    ValueGroup,
)
from wikibase_forms.models.internal_representation.datatypes import (
    Datatype,
    RenderedKind,
)
from wikibase_forms.models.schema import (
    FormMode,
    PropertyDescriptor,
    QualifierDescriptor,
    Schema,
)
from wikibase_forms.models.session import FormSession
from wikibase_forms.models.snapshot import (
    ExistingItemSnapshot,
    ItemValue,
    StatementSnapshot,
)

logger = logging.getLogger(__name__)

POINT_PATTERN = re.compile(r"^\s*Point\(\s*(\S+)\s+(\S+)\s*\)\s*$", re.IGNORECASE)


def qualifier_widget(qualifier: QualifierDescriptor) -> RenderedKind:
    if qualifier.datatype == Datatype.WIKIBASE_ITEM:
        return RenderedKind.MULTISELECT if qualifier.values else RenderedKind.ITEM_INPUT
    if qualifier.datatype == Datatype.QUANTITY:
        return RenderedKind.NUMBER
    if qualifier.datatype == Datatype.TIME:
        return RenderedKind.DATE
    if qualifier.datatype == Datatype.URL:
        return RenderedKind.URL
    if qualifier.datatype == Datatype.GLOBE_COORDINATE:
        return RenderedKind.COORDINATES
    if qualifier.datatype == Datatype.MONOLINGUALTEXT:
        return RenderedKind.MONOLINGUAL
    return RenderedKind.TEXT


def form_value(value: ItemValue | str, datatype: Datatype) -> Any:
    """Value of a stored statement in the shape its form input holds it"""
    if isinstance(value, ItemValue):
        return value.id
    if datatype == Datatype.TIME:
        return value.lstrip("+").split("T", 1)[0]
    if datatype == Datatype.GLOBE_COORDINATE:
        match = POINT_PATTERN.match(value)
        if match:
            # WKT order is longitude first
            return {"latitude": match.group(2), "longitude": match.group(1)}
        parts = [part.strip() for part in value.split(",")]
        if len(parts) == 2:
            return {"latitude": parts[0], "longitude": parts[1]}
        return {"latitude": "", "longitude": ""}
    if datatype == Datatype.MONOLINGUALTEXT:
        return {"text": value, "language": "en"}
    return value


def _initial_value(prop: PropertyDescriptor, statements: list[StatementSnapshot]) -> Any:
    if not statements:
        return [] if prop.rendered_kind == RenderedKind.MULTISELECT else None
    if prop.rendered_kind == RenderedKind.MULTISELECT:
        return [statement.value_id for statement in statements]
    return form_value(statements[0].value, prop.datatype)


def _value_group(
    prop: PropertyDescriptor, index: int, statement: StatementSnapshot | None
) -> ValueGroup:
    if statement is None:
        return ValueGroup(index=index, removable=index > 0)

    main_value = form_value(statement.value, prop.datatype)
    revealed = prop.qualifiers_for(main_value) if isinstance(main_value, str) else []
    qualifier_values = {}
    for qualifier_id, qualifier in (statement.qualifiers or {}).items():
        if prop.qualifier(qualifier_id) is None:
            continue
        qualifier_values[qualifier_id] = form_value(qualifier.value, qualifier.datatype)
        if qualifier_id not in revealed:
            revealed.append(qualifier_id)

    return ValueGroup(
        index=index,
        main_value=main_value,
        state=GroupState.QUALIFIERS_REVEALED if revealed else GroupState.EMPTY,
        revealed_qualifiers=revealed,
        qualifier_values=qualifier_values,
        removable=index > 0,
        statement_id=statement.statement_id,
    )


def render_property_field(
    prop: PropertyDescriptor, snapshot: ExistingItemSnapshot | None = None
) -> FormField:
    statements = snapshot.statements(prop.id) if snapshot else []
    field_data: dict[str, Any] = {
        "id": prop.id,
        "label": prop.label,
        "description": prop.description,
        "widget": prop.rendered_kind,
        "datatype": prop.datatype,
        "required": prop.required,
        "options": prop.values,
    }

    if not prop.has_qualifiers:
        return FormField(initial=_initial_value(prop, statements), **field_data)

    groups = [_value_group(prop, i, statement) for i, statement in enumerate(statements)]
    if not groups:
        groups = [_value_group(prop, 0, None)]

    return FormField(
        repeatable=True,
        groups=groups,
        qualifiers=prop.qualifiers or [],
        qualifier_widgets={q.id: qualifier_widget(q) for q in prop.qualifiers or []},
        qualifier_map={key: sorted(ids) for key, ids in prop.qualifier_map.items()},
        **field_data,
    )


def render_form(
    schema: Schema,
    snapshot: ExistingItemSnapshot | None = None,
    mode: FormMode = FormMode.CREATE,
    type_label: str = "Item",
) -> FormDescription:
    basic_fields = []
    for basic in schema.basic:
        initial = getattr(snapshot, basic.id, "") if snapshot else ""
        basic_fields.append(
            FormField(
                id=basic.id,
                label=basic.label,
                widget=basic.rendered_kind,
                required=basic.required,
                initial=initial,
            )
        )

    sections = [FormSection(title="Basic Information", fields=basic_fields)]
    if schema.properties:
        sections.append(
            FormSection(
                title="Properties",
                fields=[render_property_field(prop, snapshot) for prop in schema.properties],
            )
        )

    if mode == FormMode.CREATE:
        title, submit_label = f"Create New {type_label}", "Create Item"
    else:
        title, submit_label = f"Edit {type_label}", "Update Item"

    return FormDescription(mode=mode, title=title, submit_label=submit_label, sections=sections)


def render_session(session: FormSession) -> FormDescription:
    return render_form(
        session.form_schema,
        session.existing_snapshot,
        mode=session.mode,
        type_label=session.type_label or session.type_value,
    )


def _replace_group(form_field: FormField, group: ValueGroup) -> FormField:
    groups = [group if g.index == group.index else g for g in form_field.groups]
    return form_field.model_copy(update={"groups": groups})


def select_main_value(
    form_field: FormField,
    index: int,
    value: Any,
    value_types: list[str] | None = None,
) -> FormField:
    """Pick the main value of one group and reveal the qualifiers that apply.

    Empty -> QualifiersRevealed when the value has applicable qualifiers;
    back to Empty when the value is cleared or has none. Qualifier values
    entered for qualifiers that stay revealed are kept.
    """
    group = form_field.get_group(index)
    if group is None:
        raise KeyError(f"{form_field.id} has no value group {index}")

    revealed = form_field.applicable_qualifiers(value, value_types) if value else []
    updated = group.model_copy(
        update={
            "main_value": value or None,
            "state": GroupState.QUALIFIERS_REVEALED if revealed else GroupState.EMPTY,
            "revealed_qualifiers": revealed,
            "qualifier_values": {
                qid: v for qid, v in group.qualifier_values.items() if qid in revealed
            },
        }
    )
    logger.debug(f"{form_field.id}[{index}] = {value!r}: revealed {revealed}")
    return _replace_group(form_field, updated)


def add_value_group(form_field: FormField) -> FormField:
    if not form_field.repeatable:
        raise ValueError(f"{form_field.id} is not a repeatable field")
    next_index = max((g.index for g in form_field.groups), default=-1) + 1
    group = ValueGroup(index=next_index, removable=next_index > 0)
    return form_field.model_copy(update={"groups": [*form_field.groups, group]})


def remove_value_group(form_field: FormField, index: int) -> FormField:
    group = form_field.get_group(index)
    if group is None:
        raise KeyError(f"{form_field.id} has no value group {index}")
    if not group.removable:
        raise ValueError(f"Value group {index} of {form_field.id} cannot be removed")
    return form_field.model_copy(
        update={"groups": [g for g in form_field.groups if g.index != index]}
    )
