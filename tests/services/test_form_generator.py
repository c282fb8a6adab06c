import pytest

from tests.fakes import datatype, http_500, literal, property_row, statement, uri, value_row
from wikibase_forms.models.errors import InvalidEntityIdError, SchemaGenerationError
from wikibase_forms.models.form import GroupState
from wikibase_forms.models.schema import FormMode
from wikibase_forms.services.form_generator import FormGenerator
from wikibase_forms.services.schema_cache import SchemaCache

EXEMPLAR_PROPERTIES = [
    property_row("P1", "instance of", "WikibaseItem"),
    property_row("P93", "ship type", "WikibaseItem"),
    property_row("P5", "name", "String"),
]


def type_rows(type_id: str, label: str):
    return [{"instanceOf": uri(type_id), "instanceOfLabel": literal(label)}]


def instance_of(item_id: str) -> tuple[str, str]:
    return "SELECT ?instanceOf", f"wd:{item_id} wdt:P1 ?instanceOf"


def ship_wiki(sparql):
    sparql.on(*instance_of("Q507"), rows=type_rows("Q6", "ship"))
    sparql.on(*instance_of("Q900"), rows=type_rows("Q6", "ship"))
    sparql.on("SELECT DISTINCT ?property", "wd:Q507 ?claimPredicate", rows=EXEMPLAR_PROPERTIES)
    sparql.on("wdt:P93 ?seed", rows=[value_row("Q7", "frigate", "Q1"), value_row("Q8", "brig", "Q1")])
    sparql.on(
        "ps:P93 ?mainValue",
        rows=[
            {
                "mainValue": uri("Q7"),
                "mainValueType": uri("Q1"),
                "qualifier": uri("P201"),
                "qualifierDatatype": datatype("Time"),
            }
        ],
    )
    sparql.on(
        "SELECT ?property ?propertyLabel ?statement",
        "wd:Q900 ?claimPredicate",
        rows=[
            {
                "property": uri("P1"),
                "statement": statement("Q900-t"),
                "value": uri("Q6"),
                "datatype": datatype("WikibaseItem"),
            },
            {
                "property": uri("P93"),
                "statement": statement("Q900-a"),
                "value": uri("Q8"),
                "datatype": datatype("WikibaseItem"),
                "qualifier": uri("P201"),
                "qualifierValue": literal("+1800-01-01T00:00:00Z"),
                "qualifierDatatype": datatype("Time"),
            },
        ],
    )
    sparql.on("SELECT ?label ?description", "wd:Q900 rdfs:label", rows=[{"label": literal("HMS Brig")}])
    return sparql


def test_generate_create_form(config, sparql):
    generated = FormGenerator(ship_wiki(sparql), config).generate_create_form("Ship")

    session = generated.session
    assert session.mode == FormMode.CREATE
    assert session.exemplar_id == "Q507"
    assert session.type_value == "Q6"
    assert session.form_schema.property_ids == ["P93", "P5"]
    assert generated.form.title == "Create New ship"
    assert generated.form.get_field("P93").repeatable


def test_generate_edit_form(config, sparql):
    generated = FormGenerator(ship_wiki(sparql), config).generate_edit_form("Q900")

    session = generated.session
    assert session.mode == FormMode.EDIT
    assert session.item_id == "Q900"
    assert session.entity_type == "Ship"
    assert session.form_schema.property_ids == ["P1", "P93", "P5"]
    assert session.existing_snapshot.statement_ids("P93") == ["Q900$a"]

    form = generated.form
    assert form.title == "Edit ship"
    assert form.get_field("label").initial == "HMS Brig"
    assert form.get_field("P1").initial == "Q6"
    group = form.get_field("P93").groups[0]
    assert group.main_value == "Q8"
    assert group.state == GroupState.QUALIFIERS_REVEALED
    assert group.qualifier_values == {"P201": "1800-01-01"}


def test_schema_is_cached_until_refresh(config, sparql):
    generator = FormGenerator(ship_wiki(sparql), config, SchemaCache(ttl=3600))

    generator.generate_create_form("Ship")
    generator.generate_create_form("Ship")
    assert sparql.count("SELECT DISTINCT ?property") == 1

    generator.refresh_schema()
    generator.generate_create_form("Ship")
    assert sparql.count("SELECT DISTINCT ?property") == 2


def test_unknown_entity_type(config, sparql):
    with pytest.raises(SchemaGenerationError):
        FormGenerator(sparql, config).generate_create_form("Spaceship")


def test_failed_type_query_is_fatal_and_retryable(config, sparql):
    sparql.on(*instance_of("Q507"), error=http_500())
    with pytest.raises(SchemaGenerationError) as exc_info:
        FormGenerator(sparql, config).generate_create_form("Ship")
    assert exc_info.value.retryable


def test_failed_properties_query_is_fatal(config, sparql):
    sparql.on(*instance_of("Q507"), rows=type_rows("Q6", "ship"))
    sparql.on("SELECT DISTINCT ?property", error=http_500())
    with pytest.raises(SchemaGenerationError):
        FormGenerator(sparql, config).generate_create_form("Ship")


def test_exemplar_without_type(config, sparql):
    with pytest.raises(SchemaGenerationError):
        FormGenerator(sparql, config).generate_create_form("Ship")


def test_exemplar_lookup_skips_failing_exemplars(config, sparql):
    sparql.on(*instance_of("Q507"), error=http_500())
    sparql.on(*instance_of("Q3"), rows=type_rows("Q5", "human"))

    assert FormGenerator(sparql, config).find_exemplar_by_instance_of("Q5") == ("Human", "Q3")
    assert FormGenerator(sparql, config).find_exemplar_by_instance_of("Q99") == ("", None)


def test_edit_form_for_unconfigured_type(config, sparql):
    sparql.on(*instance_of("Q901"), rows=type_rows("Q99", "lighthouse"))
    with pytest.raises(SchemaGenerationError, match="lighthouse"):
        FormGenerator(sparql, config).generate_edit_form("Q901")


def test_edit_form_rejects_malformed_item_id(config, sparql):
    with pytest.raises(InvalidEntityIdError):
        FormGenerator(sparql, config).generate_edit_form("Q9 }")
    assert sparql.queries == []


def test_lookup_entity_label(config, sparql):
    sparql.on("SELECT ?label\n", "wd:Q7 rdfs:label", rows=[{"label": literal("frigate")}])
    sparql.on("SELECT ?label\n", "wd:Q8 rdfs:label", error=http_500())
    generator = FormGenerator(sparql, config)

    assert generator.lookup_entity_label("Q7") == "frigate"
    assert generator.lookup_entity_label("Q8") == "Q8"
    assert generator.lookup_entity_label("Q404") == "Q404"
