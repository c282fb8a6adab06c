import pytest

from tests.services.ships import SCHEMA, SNAPSHOT
from wikibase_forms.models.form import GroupState
from wikibase_forms.models.internal_representation.datatypes import Datatype, RenderedKind
from wikibase_forms.models.schema import FormMode
from wikibase_forms.models.session import FormSession
from wikibase_forms.models.snapshot import ItemValue
from wikibase_forms.services.form_renderer import (
    add_value_group,
    form_value,
    remove_value_group,
    render_form,
    render_session,
    select_main_value,
)


def test_create_form_layout():
    form = render_form(SCHEMA, type_label="Ship")

    assert form.title == "Create New Ship"
    assert form.submit_label == "Create Item"
    assert [s.title for s in form.sections] == ["Basic Information", "Properties"]
    assert [f.id for f in form.sections[0].fields] == ["label", "description"]
    assert form.get_field("label").required
    assert [f.id for f in form.property_fields] == ["P93", "P625", "P571", "P80"]


def test_repeatable_field_starts_with_one_fixed_group():
    ship_type = render_form(SCHEMA).get_field("P93")

    assert ship_type.repeatable
    assert len(ship_type.groups) == 1
    assert ship_type.groups[0].state == GroupState.EMPTY
    assert not ship_type.groups[0].removable
    assert ship_type.qualifier_widgets == {"P201": RenderedKind.DATE, "P202": RenderedKind.MULTISELECT}
    assert ship_type.qualifier_map == {"Q1": ["P201", "P202"]}


def test_edit_form_initial_values():
    form = render_form(SCHEMA, SNAPSHOT, mode=FormMode.EDIT, type_label="Ship")

    assert form.title == "Edit Ship"
    assert form.submit_label == "Update Item"
    assert form.get_field("label").initial == "HMS Victory"
    assert form.get_field("description").initial == "first-rate ship"
    assert form.get_field("P625").initial == {"latitude": "50.798", "longitude": "-1.109"}
    assert form.get_field("P571").initial == "1759-07-23"
    assert form.get_field("P80").initial == ["Q20", "Q21"]


def test_edit_form_one_group_per_statement():
    ship_type = render_form(SCHEMA, SNAPSHOT, mode=FormMode.EDIT).get_field("P93")

    first, second = ship_type.groups
    assert first.main_value == "Q7"
    assert first.state == GroupState.QUALIFIERS_REVEALED
    assert first.revealed_qualifiers == ["P201", "P202"]
    assert first.qualifier_values == {"P201": "1805-10-21"}
    assert first.statement_id == "Q827$a"
    assert not first.removable
    assert second.main_value == "Q9"
    assert second.state == GroupState.EMPTY
    assert second.removable


def test_select_main_value_reveals_type_qualifiers():
    ship_type = render_form(SCHEMA).get_field("P93")

    updated = select_main_value(ship_type, 0, "Q8")

    group = updated.get_group(0)
    assert group.state == GroupState.QUALIFIERS_REVEALED
    assert group.revealed_qualifiers == ["P201", "P202"]
    assert ship_type.get_group(0).state == GroupState.EMPTY


def test_select_value_without_qualifiers_goes_back_to_empty():
    ship_type = select_main_value(render_form(SCHEMA).get_field("P93"), 0, "Q7")
    ship_type = select_main_value(ship_type, 0, "Q9")
    assert ship_type.get_group(0).state == GroupState.EMPTY
    assert ship_type.get_group(0).revealed_qualifiers == []

    ship_type = select_main_value(ship_type, 0, "Q7")
    cleared = select_main_value(ship_type, 0, "")
    assert cleared.get_group(0).state == GroupState.EMPTY
    assert cleared.get_group(0).main_value is None


def test_custom_value_uses_passed_types():
    ship_type = render_form(SCHEMA).get_field("P93")
    updated = select_main_value(ship_type, 0, "Q404", value_types=["Q1"])
    assert updated.get_group(0).state == GroupState.QUALIFIERS_REVEALED


def test_group_operations_leave_siblings_untouched():
    ship_type = render_form(SCHEMA, SNAPSHOT, mode=FormMode.EDIT).get_field("P93")

    added = add_value_group(ship_type)
    assert [g.index for g in added.groups] == [0, 1, 2]
    assert added.groups[2].removable
    assert added.groups[0] == ship_type.groups[0]

    changed = select_main_value(added, 2, "Q8")
    assert changed.groups[:2] == added.groups[:2]

    removed = remove_value_group(changed, 1)
    assert [g.index for g in removed.groups] == [0, 2]
    assert removed.get_group(2) == changed.get_group(2)


def test_first_group_cannot_be_removed():
    ship_type = render_form(SCHEMA).get_field("P93")
    with pytest.raises(ValueError):
        remove_value_group(ship_type, 0)
    with pytest.raises(KeyError):
        remove_value_group(ship_type, 5)


def test_add_group_requires_repeatable_field():
    with pytest.raises(ValueError):
        add_value_group(render_form(SCHEMA).get_field("P625"))


def test_render_session_uses_type_label():
    session = FormSession(
        mode=FormMode.CREATE,
        entity_type="Ship",
        exemplar_id="Q507",
        type_value="Q6",
        type_label="ship",
        schema=SCHEMA,
    )
    assert render_session(session).title == "Create New ship"


def test_form_value_shapes():
    assert form_value(ItemValue(id="Q7"), Datatype.WIKIBASE_ITEM) == "Q7"
    assert form_value("+2020-01-02T00:00:00Z", Datatype.TIME) == "2020-01-02"
    assert form_value("-0500-01-01T00:00:00Z", Datatype.TIME) == "-0500-01-01"
    assert form_value("12.5", Datatype.QUANTITY) == "12.5"
    assert form_value("garbage", Datatype.GLOBE_COORDINATE) == {"latitude": "", "longitude": ""}
